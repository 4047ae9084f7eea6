"""
linked_list.py — Singly Linked List Snapshot
=============================================
A head pointer plus `ListNode.next` links.  Item ids used by the
highlighting layer are 0-based positions from the head.
"""

import random
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional, Tuple


@dataclass
class ListNode:
    value: Any
    next:  Optional["ListNode"] = None


class LinkedList:

    def __init__(self, values: Iterable[Any] = ()):
        self.head: Optional[ListNode] = None
        for v in values:
            self.append(v)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def append(self, value: Any) -> None:
        node = ListNode(value)
        if self.head is None:
            self.head = node
            return
        tail = self.head
        while tail.next is not None:
            tail = tail.next
        tail.next = node

    def prepend(self, value: Any) -> None:
        self.head = ListNode(value, self.head)

    def delete(self, value: Any) -> int:
        """Remove every node holding `value`.  Returns how many were removed."""
        removed = 0
        while self.head is not None and self.head.value == value:
            self.head = self.head.next
            removed += 1
        node = self.head
        while node is not None and node.next is not None:
            if node.next.value == value:
                node.next = node.next.next
                removed += 1
            else:
                node = node.next
        return removed

    def clear(self) -> None:
        self.head = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def nodes(self) -> Iterator[ListNode]:
        node = self.head
        while node is not None:
            yield node
            node = node.next

    def values(self) -> List[Any]:
        return [n.value for n in self.nodes()]

    def freeze(self) -> Tuple[Any, ...]:
        return tuple(self.values())

    def to_dict(self) -> dict:
        return {"values": self.values()}

    def __len__(self) -> int:
        return sum(1 for _ in self.nodes())

    def __repr__(self) -> str:
        return "LinkedList(" + " -> ".join(map(str, self.values())) + ")"

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------
    @classmethod
    def generate_random(cls, seed: Optional[int] = None) -> "LinkedList":
        """4..9 values in 10..99."""
        rng = random.Random(seed)
        size = rng.randint(4, 9)
        return cls(rng.randint(10, 99) for _ in range(size))
