"""An integer point.

:author: Shay Hill
:created: 2024-12-30
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping, Sequence
from typing import Any, Self

_POINT_KEYVAL = re.compile(r"^x=(-?\d{1,10});\s*y=(-?\d{1,10})$")
_POINT_PAIR = re.compile(r"^(-?\d{1,10}),\s*(-?\d{1,10})$")


@dataclasses.dataclass
class Point:
    """A location in pixels. Origin is the top left corner."""

    x: int = 0
    y: int = 0

    def is_empty(self) -> bool:
        """Return True if the point is the origin."""
        return self.x == 0 and self.y == 0

    def as_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y}

    def copy(self) -> Self:
        return dataclasses.replace(self)

    def __str__(self) -> str:
        return f"x={self.x}; y={self.y}"

    @classmethod
    def from_string(cls, text: str) -> Self | None:
        """Parse "x=N; y=N" or "N,N".

        :return: a new Point or None if the text has neither form
        """
        text = text.strip()
        match = _POINT_KEYVAL.match(text) or _POINT_PAIR.match(text)
        if match is None:
            return None
        return cls(int(match[1]), int(match[2]))

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any]) -> Self | None:
        """Read a mapping with keys x and y (or X and Y).

        :return: a new Point or None if the keys are missing or not integers
        """
        for kx, ky in (("x", "y"), ("X", "Y")):
            if value.get(kx) is None or value.get(ky) is None:
                continue
            try:
                return cls(int(value[kx]), int(value[ky]))
            except (TypeError, ValueError, OverflowError):
                return None
        return None

    @classmethod
    def try_parse(cls, value: object) -> Point | None:
        """Interpret anything that describes a point.

        :param value: a Point, a Rectangle (its point), "x=N; y=N", "N,N", a mapping
            with x/y or X/Y keys, or a two-item sequence [x, y]
        :return: a Point or None. Malformed input never raises.
        """
        from drawing_kit.type_rect import Rectangle  # circular

        if isinstance(value, Point):
            return value.copy()
        if isinstance(value, Rectangle):
            return value.point.copy()
        if isinstance(value, str):
            return cls.from_string(value)
        if isinstance(value, Mapping):
            return cls.from_mapping(value)
        if isinstance(value, Sequence) and len(value) == 2:
            try:
                return cls(int(value[0]), int(value[1]))
            except (TypeError, ValueError, OverflowError):
                return None
        return None
