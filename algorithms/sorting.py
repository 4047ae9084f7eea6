"""
sorting.py — Comparison Sorts
==============================
Generator-based sorts over a plain list, sorted in place.

Every producer follows the same contract:
  1. Each comparison yields a Compare step before anything changes.
  2. Each swap / write yields a Mutate step carrying the new array.
  3. The final Complete step marks every position sorted.

An empty array yields one Complete(NOTHING_TO_DO) and stops.

Merge and quick sort are recursive; the recursion is written as nested
generators (`yield from`) so the call stack survives every pause.
"""

from typing import Generator, List, Optional

from algorithms.stats import Stats
from algorithms.step import Step, StepBuilder, Outcome


SortSteps = Generator[Step, None, None]


def _empty(sb: StepBuilder, name: str) -> Step:
    return sb.complete((), Outcome.NOTHING_TO_DO, explanation=f"Nothing to sort: the array is empty ({name}).")


def _finished(sb: StepBuilder, values: List[float], name: str) -> Step:
    return sb.complete(
        tuple(values),
        explanation=f"{name} finished: all {len(values)} positions are in order.",
        sorted_positions=range(len(values)),
    )


# ---------------------------------------------------------------------------
# Bubble sort
# ---------------------------------------------------------------------------
def bubble_sort(values: List[float], stats: Optional[Stats] = None) -> SortSteps:
    sb = StepBuilder(stats)
    n = len(values)
    if n == 0:
        yield _empty(sb, "bubble sort")
        return

    for i in range(n - 1):
        settled = tuple(range(n - i, n))
        for j in range(n - i - 1):
            yield sb.compare(
                (j, j + 1), tuple(values),
                f"Compare neighbours {values[j]} and {values[j + 1]}.",
                sorted=settled,
            )
            if values[j] > values[j + 1]:
                values[j], values[j + 1] = values[j + 1], values[j]
                yield sb.mutate(
                    (j, j + 1), tuple(values),
                    f"{values[j + 1]} > {values[j]}: swap so the larger value bubbles right.",
                    sorted=settled,
                )

    yield _finished(sb, values, "Bubble sort")


# ---------------------------------------------------------------------------
# Selection sort
# ---------------------------------------------------------------------------
def selection_sort(values: List[float], stats: Optional[Stats] = None) -> SortSteps:
    sb = StepBuilder(stats)
    n = len(values)
    if n == 0:
        yield _empty(sb, "selection sort")
        return

    for i in range(n):
        min_idx = i
        for j in range(i + 1, n):
            yield sb.compare(
                (min_idx, j), tuple(values),
                f"Is {values[j]} smaller than the current minimum {values[min_idx]}?",
                sorted=tuple(range(i)), minimum=min_idx,
            )
            if values[j] < values[min_idx]:
                min_idx = j
        if min_idx != i:
            values[i], values[min_idx] = values[min_idx], values[i]
            yield sb.mutate(
                (i, min_idx), tuple(values),
                f"Move the minimum {values[i]} into position {i}.",
                sorted=tuple(range(i)),
            )

    yield _finished(sb, values, "Selection sort")


# ---------------------------------------------------------------------------
# Insertion sort
# ---------------------------------------------------------------------------
def insertion_sort(values: List[float], stats: Optional[Stats] = None) -> SortSteps:
    sb = StepBuilder(stats)
    n = len(values)
    if n == 0:
        yield _empty(sb, "insertion sort")
        return

    for i in range(1, n):
        j = i - 1
        while j >= 0:
            yield sb.compare(
                (j, j + 1), tuple(values),
                f"Compare {values[j]} with the key {values[j + 1]}.",
                key_index=j + 1,
            )
            if values[j] <= values[j + 1]:
                break
            values[j], values[j + 1] = values[j + 1], values[j]
            yield sb.mutate(
                (j, j + 1), tuple(values),
                f"{values[j + 1]} is larger: shift it right past the key.",
                key_index=j,
            )
            j -= 1

    yield _finished(sb, values, "Insertion sort")


# ---------------------------------------------------------------------------
# Merge sort (top-down)
# ---------------------------------------------------------------------------
def merge_sort(values: List[float], stats: Optional[Stats] = None) -> SortSteps:
    sb = StepBuilder(stats)
    if not values:
        yield _empty(sb, "merge sort")
        return

    yield from _merge_sort(values, 0, len(values) - 1, sb)
    yield _finished(sb, values, "Merge sort")


def _merge_sort(values: List[float], lo: int, hi: int, sb: StepBuilder) -> SortSteps:
    if lo >= hi:
        return
    mid = (lo + hi) // 2
    yield from _merge_sort(values, lo, mid, sb)
    yield from _merge_sort(values, mid + 1, hi, sb)
    yield from _merge(values, lo, mid, hi, sb)


def _merge(values: List[float], lo: int, mid: int, hi: int, sb: StepBuilder) -> SortSteps:
    left = values[lo:mid + 1]
    right = values[mid + 1:hi + 1]
    i = j = 0
    k = lo
    run = (lo, hi)

    while i < len(left) and j < len(right):
        yield sb.compare(
            (lo + i, mid + 1 + j), tuple(values),
            f"Merge [{lo}..{hi}]: compare {left[i]} (left half) with {right[j]} (right half).",
            run=run,
        )
        if left[i] <= right[j]:
            values[k] = left[i]
            i += 1
        else:
            values[k] = right[j]
            j += 1
        yield sb.mutate((k,), tuple(values), f"Write {values[k]} into position {k}.", run=run)
        k += 1

    for rest in (left[i:], right[j:]):
        for v in rest:
            values[k] = v
            yield sb.mutate((k,), tuple(values), f"Copy the leftover {v} into position {k}.", run=run)
            k += 1


# ---------------------------------------------------------------------------
# Quick sort (Lomuto partition, pivot = last element)
# ---------------------------------------------------------------------------
def quick_sort(values: List[float], stats: Optional[Stats] = None) -> SortSteps:
    sb = StepBuilder(stats)
    if not values:
        yield _empty(sb, "quick sort")
        return

    yield from _quick_sort(values, 0, len(values) - 1, sb)
    yield _finished(sb, values, "Quick sort")


def _quick_sort(values: List[float], lo: int, hi: int, sb: StepBuilder) -> SortSteps:
    if lo >= hi:
        return
    p = yield from _partition(values, lo, hi, sb)
    yield from _quick_sort(values, lo, p - 1, sb)
    yield from _quick_sort(values, p + 1, hi, sb)


def _partition(values: List[float], lo: int, hi: int, sb: StepBuilder) -> Generator[Step, None, int]:
    """Lomuto scheme.  Returns the pivot's final index."""
    pivot = values[hi]
    i = lo - 1
    for j in range(lo, hi):
        yield sb.compare(
            (j, hi), tuple(values),
            f"Compare {values[j]} with the pivot {pivot}.",
            pivot=hi, boundary=i,
        )
        if values[j] < pivot:
            i += 1
            # self-swaps are not emitted
            if i != j:
                values[i], values[j] = values[j], values[i]
                yield sb.mutate(
                    (i, j), tuple(values),
                    f"{values[i]} < {pivot}: swap it into the low partition.",
                    pivot=hi, boundary=i,
                )
    values[i + 1], values[hi] = values[hi], values[i + 1]
    yield sb.mutate(
        (i + 1, hi), tuple(values),
        f"Place the pivot {pivot} at its final position {i + 1}.",
        pivot=i + 1, boundary=i + 1,
    )
    return i + 1
