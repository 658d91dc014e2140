"""Immutable cons-style List values shared with the interpreter.

A ``List`` is either the ``EMPTY`` singleton or a ``Cons`` cell holding a head
value and a tail list.  Lists compare and hash by their items, so equal lists
are interchangeable as dict keys.  Code that needs a particular cell (the
trace renderer's call positions) keys it by ``id()`` instead.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator


class List:
    """Base class for the two list variants."""

    __slots__ = ()

    @staticmethod
    def of(*values: Any) -> "List":
        """Build a list holding *values* in order."""
        return List.from_iterable(values)

    @staticmethod
    def from_iterable(values: Iterable[Any]) -> "List":
        items = list(values)
        result: List = EMPTY
        for value in reversed(items):
            result = Cons(value, result)
        return result

    def is_empty(self) -> bool:
        raise NotImplementedError

    @property
    def head(self) -> Any:
        raise NotImplementedError

    @property
    def tail(self) -> "List":
        raise NotImplementedError

    def cells(self) -> Iterator["Cons"]:
        """Yield every cons cell, front to back."""
        cell = self
        while isinstance(cell, Cons):
            yield cell
            cell = cell.tail

    def __iter__(self) -> Iterator[Any]:
        for cell in self.cells():
            yield cell.head

    def __len__(self) -> int:
        return sum(1 for _ in self.cells())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, List):
            return NotImplemented
        left, right = self, other
        while isinstance(left, Cons) and isinstance(right, Cons):
            if left.head != right.head:
                return False
            left, right = left.tail, right.tail
        return isinstance(left, Empty) and isinstance(right, Empty)

    def __hash__(self) -> int:
        return hash((List, tuple(self)))

    def __str__(self) -> str:
        return "[" + " ".join(str(value) for value in self) + "]"

    def __repr__(self) -> str:
        return f"List.of({', '.join(repr(value) for value in self)})"


class Empty(List):
    """The terminal empty list.  Use the ``EMPTY`` singleton."""

    __slots__ = ()

    def is_empty(self) -> bool:
        return True

    @property
    def head(self) -> Any:
        raise ValueError("empty list has no head")

    @property
    def tail(self) -> List:
        raise ValueError("empty list has no tail")


class Cons(List):
    """A list cell: one value in front of the rest of the list."""

    __slots__ = ("_head", "_tail")

    def __init__(self, head: Any, tail: List) -> None:
        if not isinstance(tail, List):
            raise TypeError("tail must be a list")
        object.__setattr__(self, "_head", head)
        object.__setattr__(self, "_tail", tail)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("list values are immutable")

    def is_empty(self) -> bool:
        return False

    @property
    def head(self) -> Any:
        return self._head

    @property
    def tail(self) -> List:
        return self._tail


EMPTY = Empty()


__all__ = ["List", "Empty", "Cons", "EMPTY"]
