"""Headless turtle state used as the graphics collaborator."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Tuple


Point = Tuple[float, float]


@dataclass
class Segment:
    start: Point
    end: Point
    color: str


@dataclass
class TurtleState:
    """Position, heading and pen of a single turtle.

    Headings are in degrees, 0 pointing north and increasing clockwise.  Pen
    moves are recorded as ``segments`` so a viewer can draw them later.
    """

    x: float = 0.0
    y: float = 0.0
    pen_down: bool = True
    pen_color: str = "black"
    segments: List[Segment] = field(default_factory=list)
    _heading: float = field(default=0.0, init=False, repr=False)

    @property
    def heading(self) -> float:
        return self._heading

    @heading.setter
    def heading(self, value: float) -> None:
        self._heading = float(value) % 360.0

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    def clear_screen(self) -> None:
        self.segments.clear()
        self.x = 0.0
        self.y = 0.0
        self.heading = 0.0

    def set_pos(self, x: float, y: float) -> None:
        self._move_to(float(x), float(y))

    def forward(self, distance: float) -> None:
        rad = math.radians(self._heading)
        self._move_to(self.x + distance * math.sin(rad), self.y + distance * math.cos(rad))

    def back(self, distance: float) -> None:
        self.forward(-distance)

    def right(self, degrees: float) -> None:
        self.heading = self._heading + degrees

    def left(self, degrees: float) -> None:
        self.heading = self._heading - degrees

    def up(self) -> None:
        self.pen_down = False

    def down(self) -> None:
        self.pen_down = True

    def color(self, spec: str) -> None:
        self.pen_color = spec

    def _move_to(self, x: float, y: float) -> None:
        # snap float noise so right-angle walks land on whole coordinates
        x = round(x, 9) + 0.0
        y = round(y, 9) + 0.0
        if self.pen_down:
            self.segments.append(Segment(self.position, (x, y), self.pen_color))
        self.x = x
        self.y = y


__all__ = ["TurtleState", "Segment", "Point"]
