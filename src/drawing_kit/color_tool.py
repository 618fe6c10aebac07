"""Convert between the color definitions accepted anywhere a color is expected.

A color definition can be

* a color name: "red", "DarkSlateGray"
* a hex string: "#rr" (gray), "#rgb", "#rrggbb", "#aarrggbb", with or without "#"
* text: "rgb(r, g, b)", "rgba(r, g, b, a)", "argb(a, r, g, b)", "r, g, b"
* a sequence: [r, g, b] or [a, r, g, b]
* a mapping with case-insensitive keys r/g/b or red/green/blue (optional a/alpha)

Alpha values in text and in sequences use the 0-127 scale, 0 being opaque.

:author: Shay Hill
:created: 2024-12-30
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from basic_colormath import hex_to_rgb as _hex6_to_rgb
from basic_colormath import rgb_to_hex as _rgb_to_hex6

from drawing_kit import colornames
from drawing_kit.errors import ArgumentError
from drawing_kit.globs import CHANNEL_MAX

if TYPE_CHECKING:
    from drawing_kit.type_hints import (
        RGB,
        ColorDefinition,
        ParsedColor,
        RgbArgument,
    )

_HEX_FORMAT = re.compile(
    r"^#?([a-f0-9]{2}|[a-f0-9]{3}|[a-f0-9]{6}|[a-f0-9]{8})$", re.IGNORECASE
)

_NUM = r"\s*(\d{1,3})\s*"
# ")" only after "rgb("
_RGB_TEXT = re.compile(
    rf"^(?P<open>rgb\s*\()?{_NUM},{_NUM},{_NUM}(?(open)\)|)$", re.IGNORECASE
)
_RGBA_TEXT = re.compile(rf"^rgba\s*\({_NUM},{_NUM},{_NUM},{_NUM}\)$", re.IGNORECASE)
_ARGB_TEXT = re.compile(rf"^argb\s*\({_NUM},{_NUM},{_NUM},{_NUM}\)$", re.IGNORECASE)

_KEY_SETS = (("r", "g", "b", "a"), ("red", "green", "blue", "alpha"))


def _clamp_channel(value: int) -> int:
    """Clamp a channel value to [0, 255]."""
    return max(0, min(CHANNEL_MAX, value))


def read_channel_mapping(value: Mapping[str, Any]) -> ParsedColor | None:
    """Read r, g, b and optional alpha from a mapping.

    :param value: a mapping with keys r/g/b[/a] or red/green/blue[/alpha]. Keys are
        case-insensitive.
    :return: (r, g, b, alpha) with alpha None if absent, or None if the keys are
        not there or the values are not integers. Values are not range checked.
    """
    lowered = {str(k).lower(): v for k, v in value.items()}
    for r, g, b, a in _KEY_SETS:
        if not all(k in lowered for k in (r, g, b)):
            continue
        try:
            alpha = None if lowered.get(a) is None else int(lowered[a])
            return int(lowered[r]), int(lowered[g]), int(lowered[b]), alpha
        except (TypeError, ValueError, OverflowError):
            return None
    return None


def parse_color_text(text: str) -> ParsedColor | None:
    """Parse the textual color forms.

    :param text: "rgb(r, g, b)", "r, g, b", "rgba(r, g, b, a)", or
        "argb(a, r, g, b)"
    :return: (r, g, b, alpha) with alpha None for the rgb forms, or None if the
        text does not match any form. Values are not range checked.
    """
    text = text.strip()
    if match := _RGB_TEXT.match(text):
        r, g, b = (int(x) for x in match.groups()[1:])
        return r, g, b, None
    if match := _RGBA_TEXT.match(text):
        r, g, b, a = (int(x) for x in match.groups())
        return r, g, b, a
    if match := _ARGB_TEXT.match(text):
        a, r, g, b = (int(x) for x in match.groups())
        return r, g, b, a
    return None


def is_hex_format(value: object) -> bool:
    """Return True if value is a 2, 3, 6, or 8-digit hex string.

    :param value: anything. Only strings can be hex.
    :return: True if value matches ``#?[0-9a-f]{2|3|6|8}`` in any case
    """
    if not isinstance(value, str):
        return False
    return bool(_HEX_FORMAT.match(value))


def hex_to_rgb(value: str) -> RGB | None:
    """Decode a hex string.

    :param value: hex string with or without "#".
        8 digits: the top byte (alpha) is dropped
        6 digits: rrggbb
        3 digits: each nibble doubled
        2 digits: one gray value used for all three channels
    :return: (r, g, b) or None if value is not one of these forms
    """
    digits = value.strip().removeprefix("#")
    if not is_hex_format(digits):
        return None
    if len(digits) == 8:
        digits = digits[2:]
    elif len(digits) == 3:
        digits = "".join(x * 2 for x in digits)
    elif len(digits) == 2:
        digits = digits * 3
    return _hex6_to_rgb("#" + digits)


def rgb_to_hex(
    r: RgbArgument, g: int | None = None, b: int | None = None
) -> str | None:
    """Encode red, green, and blue as "#rrggbb".

    :param r: the red value, or all three channels as a 3-item sequence, a mapping
        (r/g/b or red/green/blue), or a "r,g,b" / "rgb(r,g,b)" string
    :param g: the green value when r is an int
    :param b: the blue value when r is an int
    :return: lowercase "#rrggbb" or None if the arguments cannot be read. Each
        channel is clamped to [0, 255].
    """
    if isinstance(r, Mapping):
        parsed = read_channel_mapping(r)
        if parsed is None:
            return None
        r, g, b = parsed[:3]
    elif isinstance(r, str):
        match = _RGB_TEXT.match(r.strip())
        if match is None:
            return None
        r, g, b = (int(x) for x in match.groups()[1:])
    elif isinstance(r, Sequence):
        if len(r) != 3:
            return None
        try:
            r, g, b = (int(x) for x in r)
        except (TypeError, ValueError, OverflowError):
            return None
    if not all(isinstance(x, int) for x in (r, g, b)):
        return None
    rgb = (_clamp_channel(r), _clamp_channel(g), _clamp_channel(b))  # type: ignore[arg-type]
    return _rgb_to_hex6(rgb).lower()


def color_to_rgb(value: ColorDefinition) -> tuple[int, ...]:
    """Resolve any color definition to its channels.

    :param value: a color definition (see module docstring)
    :return: (r, g, b). A sequence of three or four items is returned as a tuple
        without range checks, so [a, r, g, b] input stays four items long.
    :raise ArgumentError: if value is not a color definition
    """
    if isinstance(value, Mapping):
        parsed = read_channel_mapping(value)
        if parsed is not None:
            return parsed[:3]
    elif isinstance(value, Sequence) and not isinstance(value, str):
        if 2 < len(value) < 5:
            return tuple(value)
        msg = "A (a)rgb(a) sequence with 3-4 items is required."
        raise ArgumentError("value", value, msg)
    elif isinstance(value, str):
        if is_hex_format(value.strip()):
            rgb = hex_to_rgb(value)
            if rgb is not None:
                return rgb
        named = colornames.get_rgb(value)
        if named is not None:
            return named
        hex_ = rgb_to_hex(value)
        if hex_ is not None:
            rgb = hex_to_rgb(hex_)
            if rgb is not None:
                return rgb
    msg = (
        "Expected a color name, a hex string (#rgb, #rrggbb, #aarrggbb), "
        + "'rgb(r,g,b)', 'r,g,b', a 3-4 item sequence, or an r/g/b mapping."
    )
    raise ArgumentError("value", value, msg)


def color_to_hex(value: ColorDefinition) -> str:
    """Resolve any color definition to "#rrggbb".

    :param value: a color definition. Sequences must have exactly three items.
    :return: lowercase "#rrggbb"
    :raise ArgumentError: if value is not a color definition
    """
    if isinstance(value, Sequence) and not isinstance(value, str):
        if len(value) != 3:
            msg = "An rgb sequence with 3 items is required."
            raise ArgumentError("value", value, msg)
        hex_ = rgb_to_hex(value)
        if hex_ is None:
            msg = "An rgb sequence of integers is required."
            raise ArgumentError("value", value, msg)
        return hex_
    r, g, b = color_to_rgb(value)[:3]
    hex_ = rgb_to_hex(r, g, b)
    if hex_ is None:
        msg = "Channels must be integers."
        raise ArgumentError("value", value, msg)
    return hex_


def get_named_color(value: ColorDefinition) -> str | None:
    """Find the name of a color with an exact match in the color name table.

    :param value: a color definition
    :return: the first declared name with the same hex value, or None
    """
    try:
        hex_ = color_to_hex(value)
    except ArgumentError:
        return None
    return colornames.get_name(hex_)


def is_named_color(value: ColorDefinition) -> bool:
    """Return True if the color has an exact match in the color name table."""
    return get_named_color(value) is not None


def get_color_names() -> list[str]:
    """Return all known color names in declaration order."""
    return colornames.get_colornames()


def get_nearest_color_name(value: ColorDefinition) -> str:
    """Get the name of the closest named color.

    :param value: a color definition
    :return: the exact name if there is one, else the closest by squared Euclidean
        distance in rgb
    :raise ArgumentError: if value is not a color definition
    """
    r, g, b = (_clamp_channel(int(x)) for x in color_to_rgb(value)[:3])
    return get_named_color([r, g, b]) or colornames.get_nearest_colorname((r, g, b))
