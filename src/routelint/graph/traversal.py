from __future__ import annotations

from collections import deque
from typing import Callable, Iterable, Iterator, TypeVar

T = TypeVar("T")


def breadth_first(start: Iterable[T], neighbours: Callable[[T], Iterable[T]]) -> Iterator[T]:
    """
    Yield every node reachable from ``start`` exactly once, in breadth-first order.

    Nodes are de-duped by object identity, not equality, so the graph may contain
    cycles and unhashable nodes.
    """
    queue: deque[T] = deque(start)
    seen: set[int] = set()

    while queue:
        node = queue.popleft()
        if id(node) in seen:
            continue
        seen.add(id(node))
        yield node
        queue.extend(neighbours(node))
