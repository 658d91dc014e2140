"""Trace view of the body that is currently executing.

The renderer keeps one view tree per body.  Each cell of the body (and of any
nested list inside it) gets a ``ViewNode``; the cache maps the cell back to its
node so the interpreter's call position can be highlighted in O(1).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .values import EMPTY, Cons, List as LogoList


logger = logging.getLogger(__name__)

StyleFragment = Tuple[str, str]


@dataclass(eq=False)
class ViewNode:
    """Rendered form of one cell: an atom's text or a bracketed list."""

    kind: str
    text: str = ""
    children: List["ViewNode"] = field(default_factory=list)
    active: bool = False

    def to_text(self, *, mark_active: bool = False) -> str:
        parts: List[str] = []
        stack: List[Union["ViewNode", str]] = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
                continue
            close = ""
            if mark_active and item.active:
                parts.append(">>")
                close = "<<"
            if item.kind != "list":
                parts.append(item.text + close)
                continue
            parts.append("[")
            stack.append("]" + close)
            stack.extend(_interleave(item.children, " "))
        return "".join(parts)

    def to_fragments(self) -> List[StyleFragment]:
        """Flatten into prompt_toolkit ``(style, text)`` fragments.

        A list's style classes are inherited by everything inside it.
        """
        fragments: List[StyleFragment] = []
        stack: List[Tuple[Union["ViewNode", str], str]] = [(self, "")]
        while stack:
            item, style = stack.pop()
            if isinstance(item, str):
                fragments.append((style, item))
                continue
            if item.kind == "list":
                style = f"{style} class:list".strip()
            if item.active:
                style = f"{style} class:active".strip()
            if item.kind != "list":
                fragments.append((style, item.text))
                continue
            fragments.append((style, "["))
            stack.append(("]", style))
            stack.extend((entry, style) for entry in _interleave(item.children, " "))
        return fragments


def _interleave(children: List[ViewNode], separator: str) -> List[Union[ViewNode, str]]:
    """Children with separators between them, reversed for a pop-from-end stack."""
    items: List[Union[ViewNode, str]] = []
    for idx, child in enumerate(children):
        if idx:
            items.append(separator)
        items.append(child)
    items.reverse()
    return items


class DebugView:
    """Host-side container holding the rendered tree."""

    def __init__(self, on_change: Optional[Callable[["DebugView"], None]] = None) -> None:
        self.root: Optional[ViewNode] = None
        self.version = 0
        self._on_change = on_change

    def replace(self, root: Optional[ViewNode]) -> None:
        self.root = root
        self.touch()

    def clear(self) -> None:
        self.replace(None)

    def touch(self) -> None:
        self.version += 1
        if self._on_change is not None:
            self._on_change(self)

    def to_text(self, *, mark_active: bool = False) -> str:
        return self.root.to_text(mark_active=mark_active) if self.root is not None else ""

    def to_fragments(self) -> List[StyleFragment]:
        return self.root.to_fragments() if self.root is not None else []


class TraceRenderer:
    """Maps call nodes of the current body to their view nodes."""

    def __init__(self, view: Optional[DebugView] = None) -> None:
        self.view = view if view is not None else DebugView()
        self._body: Optional[LogoList] = None
        self._anchor: Optional[Cons] = None
        # ids stay valid because self._anchor keeps every cached cell alive
        self._cache: Dict[int, ViewNode] = {}
        self._active: Optional[ViewNode] = None

    @property
    def body(self) -> Optional[LogoList]:
        return self._body

    @property
    def active(self) -> Optional[ViewNode]:
        return self._active

    def __len__(self) -> int:
        return len(self._cache)

    def lookup(self, node: Any) -> Optional[ViewNode]:
        return self._cache.get(id(node))

    def update_body(self, body: LogoList, node: Any) -> Optional[ViewNode]:
        """Show *body* and highlight *node*; returns the highlighted view node."""
        if body is not self._body:
            self._rebuild(body)
        target = self.lookup(node)
        if target is None:
            return None
        if target is not self._active:
            if self._active is not None:
                self._active.active = False
            target.active = True
            self._active = target
            self.view.touch()
        return target

    def release(self) -> None:
        """Drop every reference to interpreter-owned nodes; the view stays."""
        self._body = None
        self._anchor = None
        self._cache.clear()
        self._active = None

    def _rebuild(self, body: LogoList) -> None:
        self._cache.clear()
        self._active = None
        self._body = body
        self._anchor = Cons(body, EMPTY)
        root = self._render(self._anchor)
        logger.debug("trace view rebuilt with %d nodes", len(self._cache))
        self.view.replace(root)

    def _render(self, root: Cons) -> ViewNode:
        # explicit stack so nesting depth is not bounded by the recursion limit
        rendered: Optional[ViewNode] = None
        stack: List[Tuple[Cons, Optional[ViewNode]]] = [(root, None)]
        while stack:
            cell, parent = stack.pop()
            value = cell.head
            if isinstance(value, LogoList):
                view = ViewNode(kind="list")
                stack.extend((item, view) for item in reversed(list(value.cells())))
            else:
                view = ViewNode(kind="atom", text=str(value))
            self._cache[id(cell)] = view
            if parent is None:
                rendered = view
            else:
                parent.children.append(view)
        assert rendered is not None
        return rendered


__all__ = ["ViewNode", "DebugView", "TraceRenderer", "StyleFragment"]
