"""
ui/
---
Presentation helpers.

    from ui import classify, highlight_map, Highlight
"""

from ui.highlight import Highlight, HIGHLIGHT_COLORS, classify, highlight_map

__all__ = [
    "Highlight",
    "HIGHLIGHT_COLORS",
    "classify",
    "highlight_map",
]
