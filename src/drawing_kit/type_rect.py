"""A rectangle from a top-left Point and a Size.

The rectangle holds its point and size by reference. Pass copies if the caller
keeps mutating them.

:author: Shay Hill
:created: 2024-12-30
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any, Self

from PIL.Image import Image as ImageType

from drawing_kit.type_point import Point
from drawing_kit.type_size import Size

_N = r"\s*(-?\d{1,10})\s*"
_RECT_KEYVAL = re.compile(
    rf"^x={_N};\s*y={_N};\s*width={_N};\s*height={_N}$", re.IGNORECASE
)
_RECT_CSV = re.compile(rf"^{_N},{_N},{_N},{_N}$")


class Rectangle:
    """An axis-aligned rectangle in pixels."""

    def __init__(self, point: Point | None = None, size: Size | None = None) -> None:
        self.point = Point() if point is None else point
        self.size = Size() if size is None else size

    @classmethod
    def from_values(cls, x: int, y: int, width: int, height: int) -> Self:
        return cls(Point(x, y), Size(width, height))

    # ===============================================================================
    #   edges
    # ===============================================================================

    @property
    def x(self) -> int:
        return self.point.x

    @property
    def y(self) -> int:
        return self.point.y

    @property
    def left(self) -> int:
        return self.point.x

    @property
    def top(self) -> int:
        return self.point.y

    @property
    def width(self) -> int:
        return self.size.width

    @property
    def height(self) -> int:
        return self.size.height

    @property
    def right(self) -> int:
        """One past the last column."""
        return self.point.x + self.size.width

    @property
    def bottom(self) -> int:
        """One past the last row."""
        return self.point.y + self.size.height

    def as_box(self) -> tuple[int, int, int, int]:
        """Return (left, top, right, bottom) as Pillow expects it."""
        return self.left, self.top, self.right, self.bottom

    # ===============================================================================
    #   predicates
    # ===============================================================================

    def is_empty(self) -> bool:
        """Return True if the point is the origin and both sides are < 1.

        A zero-size rectangle away from the origin is *not* empty. It still marks a
        location.
        """
        return self.point.is_empty() and self.size.width < 1 and self.size.height < 1

    def contains(self, rect: Rectangle) -> bool:
        """Return True if rect is inside this rectangle. Shared edges count."""
        return (
            rect.left >= self.left
            and rect.top >= self.top
            and rect.right <= self.right
            and rect.bottom <= self.bottom
        )

    def contains_location(self, x: int | Point, y: int | None = None) -> bool:
        """Return True if the pixel at (x, y) is inside this rectangle.

        :param x: an x value or a Point
        :param y: the y value when x is an int
        :return: True if left <= x < right and top <= y < bottom
        """
        if isinstance(x, Point):
            x, y = x.x, x.y
        if y is None:
            y = 0
        return self.left <= x < self.right and self.top <= y < self.bottom

    def contains_size(self, width: int | Size, height: int | None = None) -> bool:
        """Return True if a rectangle of this size would fit in this rectangle."""
        if isinstance(width, Size):
            width, height = width.width, width.height
        if height is None:
            height = 0
        return width <= self.width and height <= self.height

    # ===============================================================================
    #   set operations
    # ===============================================================================

    def intersect(self, rect: Rectangle) -> Rectangle | None:
        """Return the overlap of two rectangles.

        :return: the overlap, a zero-size rectangle where the rectangles only touch,
            or None if they are apart
        """
        left = max(self.left, rect.left)
        top = max(self.top, rect.top)
        right = min(self.right, rect.right)
        bottom = min(self.bottom, rect.bottom)
        if right < left or bottom < top:
            return None
        return Rectangle.from_values(left, top, right - left, bottom - top)

    def union(self, rect: Rectangle) -> Rectangle:
        """Return the bounding box of both rectangles."""
        left = min(self.left, rect.left)
        top = min(self.top, rect.top)
        right = max(self.right, rect.right)
        bottom = max(self.bottom, rect.bottom)
        return Rectangle.from_values(left, top, right - left, bottom - top)

    # ===============================================================================
    #   copy and export
    # ===============================================================================

    def copy(self) -> Rectangle:
        """Return a rectangle with its own point and size."""
        return Rectangle(self.point.copy(), self.size.copy())

    def as_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    def __str__(self) -> str:
        return f"{self.point}; {self.size}"

    def __repr__(self) -> str:
        return f"Rectangle.from_values({self.x}, {self.y}, {self.width}, {self.height})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rectangle):
            return NotImplemented
        return self.point == other.point and self.size == other.size

    __hash__ = None  # type: ignore[assignment]

    # ===============================================================================
    #   parsing
    # ===============================================================================

    @classmethod
    def from_image(cls, image: ImageType) -> Self:
        """Return the rectangle covering a whole PIL image."""
        return cls.from_values(0, 0, image.width, image.height)

    @classmethod
    def from_string(cls, text: str) -> Self | None:
        """Parse "x=N; y=N; width=N; height=N" or "x,y,width,height".

        :return: a new Rectangle or None if the text has neither form
        """
        text = text.strip()
        match = _RECT_KEYVAL.match(text) or _RECT_CSV.match(text)
        if match is None:
            return None
        x, y, width, height = (int(v) for v in match.groups())
        return cls.from_values(x, y, width, height)

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any]) -> Self | None:
        """Read x, y, width, and height from a mapping. Keys are case-insensitive.

        :return: a new Rectangle or None if a key is missing or not an integer
        """
        lowered = {str(k).lower(): v for k, v in value.items()}
        try:
            x, y, width, height = (
                int(lowered[k]) for k in ("x", "y", "width", "height")
            )
        except (KeyError, TypeError, ValueError):
            return None
        return cls.from_values(x, y, width, height)

    @classmethod
    def try_parse(cls, value: object) -> Rectangle | None:
        """Interpret anything that describes a rectangle.

        :param value: a Rectangle, a string (see from_string), a mapping (see
            from_mapping), a four-item sequence [x, y, width, height], a Size (placed
            at the origin), or a PIL image
        :return: a Rectangle or None. Malformed input never raises.
        """
        if isinstance(value, Rectangle):
            return value.copy()
        if isinstance(value, Size):
            return cls(Point(), value.copy())
        if isinstance(value, ImageType):
            return cls.from_image(value)
        if isinstance(value, str):
            return cls.from_string(value)
        if isinstance(value, Mapping):
            return cls.from_mapping(value)
        if isinstance(value, Sequence) and len(value) == 4:
            try:
                x, y, width, height = (int(v) for v in value)
            except (TypeError, ValueError, OverflowError):
                return None
            return cls.from_values(x, y, width, height)
        return None
