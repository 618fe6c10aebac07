"""Place crop rectangles and overlays inside an image size.

:author: Shay Hill
:created: 2024-11-20
"""

from __future__ import annotations

import math

from drawing_kit.errors import ArgumentError
from drawing_kit.gravity import ContentAlign, Gravity
from drawing_kit.type_point import Point
from drawing_kit.type_rect import Rectangle
from drawing_kit.type_size import Size


def _get_offset(outer: int, inner: int, position: int) -> int:
    """Offset of inner in outer for position 0 (start), 1 (center), or 2 (end)."""
    if position == 0:
        return 0
    if position == 1:
        return math.floor(outer / 2 - inner / 2)
    return outer - inner


def get_crop_rect(
    size: Size, width: int, height: int, gravity: Gravity | ContentAlign
) -> Rectangle:
    """Get the rectangle of a width x height crop anchored inside size.

    :param size: size of the image to crop
    :param width: crop width. Clamped to size.width.
    :param height: crop height. Clamped to size.height.
    :param gravity: the anchor of the crop. A ContentAlign is converted.
    :return: the crop rectangle. Its size equals ``size`` when there is nothing to
        crop.
    :raise ArgumentError: if width or height is < 1
    """
    if width < 1:
        msg = "Crop width must be at least 1."
        raise ArgumentError("width", width, msg)
    if height < 1:
        msg = "Crop height must be at least 1."
        raise ArgumentError("height", height, msg)
    if isinstance(gravity, ContentAlign):
        gravity = gravity.to_gravity()
    width = min(width, size.width)
    height = min(height, size.height)
    x = _get_offset(size.width, width, gravity.column)
    y = _get_offset(size.height, height, gravity.row)
    return Rectangle(Point(x, y), Size(width, height))


def get_quadratic_crop_rect(size: Size, gravity: Gravity | ContentAlign) -> Rectangle:
    """Get the largest square crop anchored inside size.

    :param size: size of the image to crop. Both sides must be > 0.
    :param gravity: the anchor of the crop
    :return: a square rectangle with sides equal to the short side of size
    """
    side = min(size.width, size.height)
    return get_crop_rect(size, side, side, gravity)


def get_placement_point(
    size: Size, inner: Size, padding: int, gravity: Gravity | ContentAlign
) -> Point:
    """Get the top-left point of an inner area placed inside size.

    :param size: the size of the outer area
    :param inner: the size of the placed area. May be larger than ``size``.
    :param padding: distance kept from the outer edges at the start and end
        positions. Centered positions ignore it.
    :param gravity: the anchor of the placement
    :return: the top-left point of the placed area. May be negative.
    """
    if isinstance(gravity, ContentAlign):
        gravity = gravity.to_gravity()
    x = _get_offset(size.width, inner.width, gravity.column)
    y = _get_offset(size.height, inner.height, gravity.row)
    if gravity.column != 1:
        x += padding if gravity.column == 0 else -padding
    if gravity.row != 1:
        y += padding if gravity.row == 0 else -padding
    return Point(x, y)
