"""A width and height with the proportion-preserving scaling algorithms.

Every reduce / expand method keeps the aspect ratio (except the plain
``reduce``, ``expand``, ``resize``, and ``reduce_by_percent`` offsets), mutates the
instance in place, and returns True if the size changed or False if the size already
satisfied the constraint. Copy first if you need the old value.

Results are floored, and the floating-point steps happen in a fixed order, so a
given input always produces the same integers:

    percent = 100 * new_side_length / old_side_length
    other_side = floor(percent * other_side / 100)

Orientation decides which side is "long" or "short". A quadratic size is neither
portrait nor landscape, but every side decision checks ``is_portrait`` first, so a
quadratic size is handled like a landscape size.

A Size created with ``fixed=True`` is read only. Every mutator raises a
FixedSizeError that names the operation.

:author: Shay Hill
:created: 2024-12-30
"""

from __future__ import annotations

import math
import os
import re
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, ClassVar, Self

from PIL import Image, UnidentifiedImageError
from PIL.Image import Image as ImageType

from drawing_kit.errors import (
    ArgumentError,
    FixedSizeError,
    ImageDecodeError,
    ImageNotFoundError,
)

_SIZE_KEYVAL = re.compile(
    r"^width=(\d{1,10});\s*height=(\d{1,10})(;\s*fixed=true)?$", re.IGNORECASE
)
_SIZE_PAIR = re.compile(r"^(\d{1,10}),\s*(\d{1,10})$")

# default and bounds for is_near_quadratic
_NEAR_QUADRATIC_DEFAULT = 0.15
_NEAR_QUADRATIC_MIN = 0.01
_NEAR_QUADRATIC_MAX = 0.3


def _check_length(name: str, value: int) -> None:
    """Raise an ArgumentError for side lengths < 1."""
    if value < 1:
        msg = "Side lengths must be at least 1."
        raise ArgumentError(name, value, msg)


def _probe_image_file(filename: str | os.PathLike[str]) -> tuple[int, int]:
    """Read the pixel dimensions of an image file without decoding the pixels.

    :param filename: path to an image file
    :return: (width, height)
    :raise ImageNotFoundError: if there is no such file
    :raise ImageDecodeError: if Pillow cannot identify the file
    """
    path = Path(filename)
    if not path.is_file():
        raise ImageNotFoundError(path, "Can not get size from image file.")
    try:
        with Image.open(path) as image:
            return image.size
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(path, "Can not get size from image file.") from e


class Size:
    """A width and height in pixels, both >= 0."""

    _empty_fixed: ClassVar[Size | None] = None

    def __init__(self, width: int = 0, height: int = 0, fixed: bool = False) -> None:
        self._width = max(width, 0)
        self._height = max(height, 0)
        self._fixed = fixed

    def _raise_if_fixed(self, operation: str) -> None:
        if self._fixed:
            raise FixedSizeError(operation)

    # ===============================================================================
    #   properties
    # ===============================================================================

    @property
    def width(self) -> int:
        return self._width

    @width.setter
    def width(self, value: int) -> None:
        self._raise_if_fixed("width")
        self._width = max(value, 0)

    @property
    def height(self) -> int:
        return self._height

    @height.setter
    def height(self, value: int) -> None:
        self._raise_if_fixed("height")
        self._height = max(value, 0)

    @property
    def fixed(self) -> bool:
        """True if the instance is read only."""
        return self._fixed

    def _get_long_side(self) -> int:
        return self._height if self.is_portrait() else self._width

    def _get_short_side(self) -> int:
        return self._width if self.is_portrait() else self._height

    # ===============================================================================
    #   predicates
    # ===============================================================================

    def is_empty(self) -> bool:
        """Return True if either side is zero."""
        return self._width <= 0 or self._height <= 0

    def contains(self, size: Size) -> bool:
        """Return True if size fits inside this size."""
        return size.width <= self._width and size.height <= self._height

    def is_quadratic(self) -> bool:
        return self._width == self._height

    def is_portrait(self) -> bool:
        return self._width < self._height

    def is_landscape(self) -> bool:
        return self._width > self._height

    def is_near_quadratic(self, max_difference: float = _NEAR_QUADRATIC_DEFAULT) -> bool:
        """Return True if the long side is at most (1 + max_difference) * short side.

        :param max_difference: allowed difference in [0.01, 0.3]. Values outside
            that range are replaced with 0.15.
        """
        if self.is_quadratic():
            return True
        if not _NEAR_QUADRATIC_MIN <= max_difference <= _NEAR_QUADRATIC_MAX:
            max_difference = _NEAR_QUADRATIC_DEFAULT
        short = self._get_short_side()
        if short == 0:
            return False
        return self._get_long_side() / short <= 1.0 + max_difference

    # ===============================================================================
    #   shared pinning steps
    # ===============================================================================

    def _pin_long_side(self, length: int) -> bool:
        """Set the long side to length and scale the short side to match.

        :return: False (no change) if the long side is 0. There is no proportion
            to keep.
        """
        if self._get_long_side() == 0:
            return False
        if self.is_portrait():
            percent = 100 * length / self._height
            self._width = math.floor(percent * self._width / 100)
            self._height = length
        else:
            percent = 100 * length / self._width
            self._height = math.floor(percent * self._height / 100)
            self._width = length
        return True

    def _pin_short_side(self, length: int) -> bool:
        """Set the short side to length and scale the long side to match.

        :return: False (no change) if the short side is 0
        """
        if self._get_short_side() == 0:
            return False
        if self.is_portrait():
            percent = 100 * length / self._width
            self._height = math.floor(percent * self._height / 100)
            self._width = length
        else:
            percent = 100 * length / self._height
            self._width = math.floor(percent * self._width / 100)
            self._height = length
        return True

    def _select_length(self, landscape: int, portrait: int) -> int:
        """Choose the length for the orientation. Quadratic uses landscape."""
        return portrait if self.is_portrait() else landscape

    # ===============================================================================
    #   reduce
    # ===============================================================================

    def reduce(self, value: int = 1) -> Self:
        """Subtract value from both sides (not proportional)."""
        self._raise_if_fixed("reduce")
        self._width = max(self._width - value, 0)
        self._height = max(self._height - value, 0)
        return self

    def reduce_by_percent(self, percent: int) -> Self:
        """Shrink each side by percent, independently of the other.

        :param percent: in [1, 99]. Each side becomes
            floor(side * ((100 - percent) / 100)).
        :raise ArgumentError: if percent is outside [1, 99]
        """
        self._raise_if_fixed("reduce_by_percent")
        if percent >= 100 or percent < 1:
            msg = "Size contraction only works with percent values in [1, 99]."
            raise ArgumentError("percent", percent, msg)
        self._width = math.floor(self._width * ((100 - percent) / 100))
        self._height = math.floor(self._height * ((100 - percent) / 100))
        return self

    def reduce_to_max_size(self, max_size: Size) -> bool:
        """Scale down proportionally to fit inside max_size.

        :param max_size: the bounding size. Both sides must be > 0.
        :return: False (no change) if both sides are already smaller than max_size.
            True otherwise, including the no-change case of an exact match.

        The result touches max_size on at least one side. With
        dw = width / max_width and dh = height / max_height, the side with the
        larger ratio is pinned to max_size and the other side is floored.
        """
        self._raise_if_fixed("reduce_to_max_size")
        if max_size.is_empty():
            msg = "Can not reduce to a size with an empty side."
            raise ArgumentError("max_size", str(max_size), msg)
        max_w, max_h = max_size.width, max_size.height
        if self._width < max_w and self._height < max_h:
            return False
        if self._width == max_w and self._height == max_h:
            return True
        dw = self._width / max_w
        dh = self._height / max_h
        if dw < dh:
            self._width = math.floor((self._width * max_h) / self._height)
            self._height = max_h
        elif dw > dh:
            self._height = math.floor((max_w * self._height) / self._width)
            self._width = max_w
        else:
            self._width, self._height = max_w, max_h
        return True

    def reduce_max_side_to(self, length: int) -> bool:
        """Reduce the long side to length, keeping proportions.

        :return: False (no change) if the long side is already <= length
        """
        self._raise_if_fixed("reduce_max_side_to")
        _check_length("length", length)
        if length >= self._get_long_side():
            return False
        return self._pin_long_side(length)

    def reduce_max_side_to2(self, landscape: int, portrait: int) -> bool:
        """Reduce the long side to a length chosen by orientation.

        :param landscape: the new width of a landscape or quadratic size
        :param portrait: the new height of a portrait size
        :return: False (no change) if the long side is already <= the length
        """
        self._raise_if_fixed("reduce_max_side_to2")
        _check_length("landscape", landscape)
        _check_length("portrait", portrait)
        length = self._select_length(landscape, portrait)
        if length >= self._get_long_side():
            return False
        return self._pin_long_side(length)

    def reduce_min_side_to(self, length: int) -> bool:
        """Reduce the short side to length, keeping proportions.

        :return: False (no change) if the short side is already <= length
        """
        self._raise_if_fixed("reduce_min_side_to")
        _check_length("length", length)
        if length >= self._get_short_side():
            return False
        return self._pin_short_side(length)

    def reduce_min_side_to2(self, landscape: int, portrait: int) -> bool:
        """Reduce the short side to a length chosen by orientation.

        :param landscape: the new height of a landscape or quadratic size
        :param portrait: the new width of a portrait size
        :return: False (no change) if the short side is already <= the length
        """
        self._raise_if_fixed("reduce_min_side_to2")
        _check_length("landscape", landscape)
        _check_length("portrait", portrait)
        length = self._select_length(landscape, portrait)
        if length >= self._get_short_side():
            return False
        return self._pin_short_side(length)

    # ===============================================================================
    #   expand
    # ===============================================================================

    def expand(self, value: int = 1) -> Self:
        """Add value to both sides (not proportional)."""
        self._raise_if_fixed("expand")
        self._width += value
        self._height += value
        return self

    def expand_max_side_to(self, length: int) -> bool:
        """Enlarge the long side to length, keeping proportions.

        :return: False (no change) unless length is larger than the long side
        """
        self._raise_if_fixed("expand_max_side_to")
        _check_length("length", length)
        if length <= self._get_long_side():
            return False
        return self._pin_long_side(length)

    def expand_max_side_to2(self, landscape: int, portrait: int) -> bool:
        """Enlarge the long side to a length chosen by orientation.

        :return: False (no change) unless the length is larger than the long side
        """
        self._raise_if_fixed("expand_max_side_to2")
        _check_length("landscape", landscape)
        _check_length("portrait", portrait)
        length = self._select_length(landscape, portrait)
        if length <= self._get_long_side():
            return False
        return self._pin_long_side(length)

    # ===============================================================================
    #   resize (reduce or expand)
    # ===============================================================================

    def resize(self, value: int = 1) -> Self:
        """Add value (which may be negative) to both sides."""
        self._raise_if_fixed("resize")
        self._width = max(self._width + value, 0)
        self._height = max(self._height + value, 0)
        return self

    def resize_max_side_to(self, length: int) -> bool:
        """Reduce or expand the long side to length.

        :return: False (no change) if the long side already equals length
        """
        self._raise_if_fixed("resize_max_side_to")
        long_side = self._get_long_side()
        if length == long_side:
            return False
        if length < long_side:
            return self.reduce_max_side_to(length)
        return self.expand_max_side_to(length)

    def resize_max_side_to2(self, landscape: int, portrait: int) -> bool:
        """Reduce or expand the long side to a length chosen by orientation.

        :return: False (no change) if the long side already equals the length
        """
        self._raise_if_fixed("resize_max_side_to2")
        length = self._select_length(landscape, portrait)
        long_side = self._get_long_side()
        if length == long_side:
            return False
        if length < long_side:
            return self.reduce_max_side_to2(landscape, portrait)
        return self.expand_max_side_to2(landscape, portrait)

    def rotate_square(self) -> Self:
        """Swap width and height."""
        self._raise_if_fixed("rotate_square")
        self._width, self._height = self._height, self._width
        return self

    # ===============================================================================
    #   copy and export
    # ===============================================================================

    def copy(self, *, fixed: bool = False) -> Size:
        """Return an independent copy. Copies of fixed sizes are not fixed."""
        return Size(self._width, self._height, fixed)

    def as_tuple(self) -> tuple[int, int]:
        return self._width, self._height

    def as_dict(self) -> dict[str, int]:
        return {"width": self._width, "height": self._height}

    def __str__(self) -> str:
        return f"width={self._width}; height={self._height}"

    def __repr__(self) -> str:
        fixed = ", fixed=True" if self._fixed else ""
        return f"Size({self._width}, {self._height}{fixed})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Size):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    __hash__ = None  # type: ignore[assignment]

    # ===============================================================================
    #   alternate constructors
    # ===============================================================================

    @classmethod
    def empty(cls, *, fixed: bool = False) -> Size:
        """Return a 0 x 0 size. The fixed empty size is shared."""
        if not fixed:
            return cls(0, 0)
        if cls._empty_fixed is None:
            cls._empty_fixed = cls(0, 0, fixed=True)
        return cls._empty_fixed

    @classmethod
    def from_image_file(
        cls, filename: str | os.PathLike[str], *, fixed: bool = False
    ) -> Self:
        """Read the size of an image file.

        :raise ImageNotFoundError: if there is no such file
        :raise ImageDecodeError: if Pillow cannot identify the file
        """
        width, height = _probe_image_file(filename)
        return cls(width, height, fixed)

    @classmethod
    def from_string(cls, text: str, *, fixed: bool = False) -> Self | None:
        """Parse "width=N; height=N[; fixed=true]", "N,N", or an image file path.

        :return: a new Size or None if the text is none of these
        """
        text = text.strip()
        if match := _SIZE_KEYVAL.match(text):
            return cls(int(match[1]), int(match[2]), bool(match[3]) or fixed)
        if match := _SIZE_PAIR.match(text):
            return cls(int(match[1]), int(match[2]), fixed)
        if not text or not Path(text).is_file():
            return None
        try:
            return cls.from_image_file(text, fixed=fixed)
        except ImageDecodeError:
            return None

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any], *, fixed: bool = False) -> Self | None:
        """Read width, height, and optional fixed from a mapping.

        Missing sides are 0. Keys "width" / "Width" and "height" / "Height".

        :return: a new Size or None if a value is not an integer
        """
        width = next((value[k] for k in ("width", "Width") if k in value), 0)
        height = next((value[k] for k in ("height", "Height") if k in value), 0)
        if "fixed" in value:
            flag = value["fixed"]
            fixed = flag.lower() == "true" if isinstance(flag, str) else bool(flag)
        try:
            return cls(int(width), int(height), fixed)
        except (TypeError, ValueError, OverflowError):
            return None

    @classmethod
    def try_parse(cls, value: object, *, fixed: bool = False) -> Size | None:
        """Interpret anything that describes a size.

        :param value: a Size, an int or float (used for both sides), a string (see
            from_string), a mapping (see from_mapping), a two-item sequence, or a
            PIL image
        :return: a new Size or None. Malformed input never raises.
        """
        if isinstance(value, Size):
            return value.copy(fixed=fixed or value.fixed)
        if isinstance(value, bool):
            return None
        if isinstance(value, float) and not math.isfinite(value):
            return None
        if isinstance(value, (int, float)):
            return cls(int(value), int(value), fixed)
        if isinstance(value, str):
            return cls.from_string(value, fixed=fixed)
        if isinstance(value, Mapping):
            return cls.from_mapping(value, fixed=fixed)
        if isinstance(value, ImageType):
            return cls(value.width, value.height, fixed)
        if isinstance(value, Sequence) and len(value) == 2:
            try:
                return cls(int(value[0]), int(value[1]), fixed)
            except (TypeError, ValueError, OverflowError):
                return None
        return None
