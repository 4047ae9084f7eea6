"""
explain/
--------
Boundary to the remote explanation service.

    from explain import explain_algorithm, FALLBACK_MESSAGE
"""

from explain.client import (
    FALLBACK_MESSAGE,
    ExplanationClient,
    ExplanationError,
    build_prompt,
    explain_algorithm,
    extract_text,
    fetch_explanation,
)

__all__ = [
    "FALLBACK_MESSAGE",
    "ExplanationClient",
    "ExplanationError",
    "build_prompt",
    "explain_algorithm",
    "extract_text",
    "fetch_explanation",
]
