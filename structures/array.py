"""
array.py — Array Snapshot
==========================
Arrays are plain Python lists of numbers.  Sort producers mutate them in
place; observers only ever receive tuple copies, so a renderer can
never see a half-written list.

The length of an array never changes during a run.
"""

import random
from typing import List, Optional, Tuple


# values drawn for generated bars, inclusive
VALUE_RANGE: Tuple[int, int] = (5, 104)


def random_array(
    size: int,
    min_size: int = 2,
    max_size: int = 120,
    seed: Optional[int] = None,
) -> List[int]:
    """
    Build a fresh array of `size` random bar heights.

    Raises ValueError when `size` falls outside [min_size, max_size].
    """
    if not min_size <= size <= max_size:
        raise ValueError(f"Array size must be between {min_size} and {max_size}, got {size}")
    rng = random.Random(seed)
    low, high = VALUE_RANGE
    return [rng.randint(low, high) for _ in range(size)]
