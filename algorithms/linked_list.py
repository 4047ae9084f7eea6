"""
linked_list.py — Linked List Walks
===================================
Generator-based search, in-place reversal and middle-finding over a
singly linked list.  Item ids are 0-based positions in the list as it
stands when the step is emitted, so they always match the frozen state
the step carries.
"""

from typing import Generator, List, Optional, Tuple

from structures import LinkedList, ListNode
from algorithms.stats import Stats
from algorithms.step import Step, StepBuilder, Outcome


ListSteps = Generator[Step, None, None]


def _chain(node: Optional[ListNode]) -> Tuple:
    out: List = []
    while node is not None:
        out.append(node.value)
        node = node.next
    return tuple(out)


# ---------------------------------------------------------------------------
# Linear search
# ---------------------------------------------------------------------------
def list_search(lst: LinkedList, value, stats: Optional[Stats] = None) -> ListSteps:
    sb = StepBuilder(stats)
    state = lst.freeze()
    if not state:
        yield sb.complete(state, Outcome.NOTHING_TO_DO, explanation="The list is empty.", value=value)
        return

    for index, node in enumerate(lst.nodes()):
        yield sb.visit(index, state, f"Position {index} holds {node.value}.")
        if node.value == value:
            yield sb.complete(
                state, Outcome.FOUND,
                explanation=f"Found {value} at position {index}.",
                path=(index,), value=index,
            )
            return

    yield sb.complete(state, Outcome.NOT_FOUND, explanation=f"Reached the tail: {value} is not in the list.", value=value)


# ---------------------------------------------------------------------------
# In-place reversal
# ---------------------------------------------------------------------------
def list_reverse(lst: LinkedList, stats: Optional[Stats] = None) -> ListSteps:
    """
    In-place reversal by moving the node after the original head to the
    front, one node per Mutate.  Between steps the list is always a single
    chain: the reversed prefix followed by the nodes still to move, so a
    run stopped half-way leaves a valid (partly reversed) list.
    """
    sb = StepBuilder(stats)
    if lst.head is None:
        yield sb.complete((), Outcome.NOTHING_TO_DO, explanation="The list is empty.")
        return

    first = lst.head
    yield sb.visit(0, lst.freeze(), f"{first.value} is the head now and will end up as the tail.")
    index = 1
    while first.next is not None:
        moved = first.next
        yield sb.visit(index, lst.freeze(), f"Next node to move is {moved.value}.", remaining=_chain(moved))
        first.next = moved.next
        moved.next = lst.head
        lst.head = moved
        yield sb.mutate(
            (0,), lst.freeze(),
            f"Unlink {moved.value} from position {index} and make it the new head.",
            remaining=_chain(first.next),
        )
        index += 1

    yield sb.complete(lst.freeze(), explanation="List reversed.", result=lst.freeze())


# ---------------------------------------------------------------------------
# Middle element (slow / fast pointers)
# ---------------------------------------------------------------------------
def list_middle(lst: LinkedList, stats: Optional[Stats] = None) -> ListSteps:
    sb = StepBuilder(stats)
    state = lst.freeze()
    if lst.head is None:
        yield sb.complete(state, Outcome.NOTHING_TO_DO, explanation="The list is empty.")
        return

    slow = fast = lst.head
    index = 0
    yield sb.visit(index, state, "Slow and fast pointers start at the head.")
    while fast is not None and fast.next is not None:
        slow = slow.next
        fast = fast.next.next
        index += 1
        yield sb.visit(index, state, f"Slow moves one step to {slow.value}; fast moves two.")

    yield sb.complete(
        state, Outcome.FOUND,
        explanation=f"Fast pointer hit the end: the middle node is {slow.value} at position {index}.",
        path=(index,), value=slow.value,
    )
