"""A color value with rgb channels and optional alpha / opacity.

Alpha and opacity describe the same thing on two scales:

    alpha    0 (opaque) .. 127 (transparent)    the legacy 7-bit scale
    opacity  100 (opaque) .. 0 (transparent)    percent

Either can be set. The one set last is authoritative and the other is derived from
it with floor division:

    alpha   = 127 * (100 - opacity) // 100
    opacity = (127 - alpha) * 100 // 127

These do not round trip exactly for every intermediate value. A color created
without an opacity tracks neither (both are None) and reads as alpha 0, opacity 100.

:author: Shay Hill
:created: 2024-12-30
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Self

from drawing_kit import color_tool
from drawing_kit.errors import ArgumentError
from drawing_kit.globs import ALPHA_MAX, CHANNEL_MAX, FALLBACK_RGB, OPACITY_MAX

if TYPE_CHECKING:
    from drawing_kit.type_hints import RGB, ColorDefinition, PilColor

_RGB_MASK = 0xFFFFFF


def opacity_to_alpha(opacity: int) -> int:
    """Convert opacity (100 is opaque) to alpha (0 is opaque)."""
    if opacity >= OPACITY_MAX:
        return 0
    if opacity <= 0:
        return ALPHA_MAX
    return ALPHA_MAX * (OPACITY_MAX - opacity) // OPACITY_MAX


def alpha_to_opacity(alpha: int) -> int:
    """Convert alpha (0 is opaque) to opacity (100 is opaque)."""
    if alpha <= 0:
        return OPACITY_MAX
    if alpha >= ALPHA_MAX:
        return 0
    return (ALPHA_MAX - alpha) * OPACITY_MAX // ALPHA_MAX


def _check_channel(name: str, value: int) -> int:
    """Raise an ArgumentError if value is not in [0, 255]."""
    if not 0 <= value <= CHANNEL_MAX:
        msg = f"Illegal r|g|b value outside the allowed range 0-{CHANNEL_MAX}."
        raise ArgumentError(name, value, msg)
    return value


def _check_alpha(value: int) -> int:
    """Raise an ArgumentError if value is not in [0, 127]."""
    if not 0 <= value <= ALPHA_MAX:
        msg = f"Illegal alpha value outside the allowed range 0-{ALPHA_MAX}."
        raise ArgumentError("alpha", value, msg)
    return value


def _check_opacity(value: int) -> int:
    """Raise an ArgumentError if value is not in [0, 100]."""
    if not 0 <= value <= OPACITY_MAX:
        msg = f"Illegal opacity value outside the allowed range 0-{OPACITY_MAX}."
        raise ArgumentError("opacity", value, msg)
    return value


def _read_channels(
    name: str, value: str | Sequence[int] | Mapping[str, Any], *, alpha_first: bool
) -> tuple[int, int, int, int | None]:
    """Read an rgb, rgba, or argb value in any of its accepted shapes.

    :param name: argument name for error messages
    :param value: a string ("rgb(r,g,b)", "r,g,b", "rgba(r,g,b,a)",
        "argb(a,r,g,b)"), a 3-item sequence [r, g, b], a 4-item sequence (alpha at
        index 0 if alpha_first else at index 3), or a mapping
    :param alpha_first: the position of alpha in a 4-item sequence
    :return: (r, g, b, alpha) with alpha None if the value carries none. Not yet
        range checked.
    :raise ArgumentError: if value has none of these shapes
    """
    parsed = None
    if isinstance(value, str):
        parsed = color_tool.parse_color_text(value)
    elif isinstance(value, Mapping):
        parsed = color_tool.read_channel_mapping(value)
    elif isinstance(value, Sequence) and len(value) in (3, 4):
        try:
            items = [int(x) for x in value]
        except (TypeError, ValueError, OverflowError):
            items = None
        if items is not None and len(items) == 3:
            parsed = (items[0], items[1], items[2], None)
        elif items is not None and alpha_first:
            parsed = (items[1], items[2], items[3], items[0])
        elif items is not None:
            parsed = (items[0], items[1], items[2], items[3])
    if parsed is None:
        msg = (
            "You can use 'rgb(r,g,b)', 'r,g,b', 'rgba(r,g,b,a)', 'argb(a,r,g,b)', "
            + "a 3 or 4 item sequence, or a mapping with caseless keys "
            + "'r'|'red', 'g'|'green', 'b'|'blue' and 'a'|'alpha'."
        )
        raise ArgumentError(name, value, msg)
    return parsed


class Color:
    """An rgb color with optional alpha and opacity."""

    def __init__(
        self, definition: ColorDefinition = "#ffffff", opacity: int | None = None
    ) -> None:
        """Create a color from any color definition.

        :param definition: a color definition (see drawing_kit.color_tool). If the
            definition cannot be read, the color is black.
        :param opacity: optional opacity in [0, 100]. Values outside are clamped.
            If None, the color does not track alpha or opacity.
        """
        try:
            rgb = color_tool.color_to_rgb(definition)
        except ArgumentError:
            rgb = FALLBACK_RGB
        # color_to_rgb passes sequences through unchecked
        self._red, self._green, self._blue = (
            max(0, min(CHANNEL_MAX, int(x))) for x in rgb[:3]
        )
        self._opacity: int | None = None
        self._alpha: int | None = None
        if opacity is not None:
            self._opacity = max(0, min(OPACITY_MAX, opacity))
            self._alpha = opacity_to_alpha(self._opacity)

    # ===============================================================================
    #   channels
    # ===============================================================================

    @property
    def red(self) -> int:
        return self._red

    @red.setter
    def red(self, value: int) -> None:
        self._red = _check_channel("red", value)

    @property
    def green(self) -> int:
        return self._green

    @green.setter
    def green(self, value: int) -> None:
        self._green = _check_channel("green", value)

    @property
    def blue(self) -> int:
        return self._blue

    @blue.setter
    def blue(self, value: int) -> None:
        self._blue = _check_channel("blue", value)

    @property
    def alpha(self) -> int:
        """Alpha in [0, 127]. 0 if alpha is not tracked."""
        return 0 if self._alpha is None else self._alpha

    @alpha.setter
    def alpha(self, value: int | None) -> None:
        """Set alpha and derive opacity. None stops tracking both."""
        if value is None:
            self._alpha = self._opacity = None
            return
        self._alpha = _check_alpha(value)
        self._opacity = alpha_to_opacity(value)

    @property
    def opacity(self) -> int:
        """Opacity in [0, 100]. 100 if opacity is not tracked."""
        return OPACITY_MAX if self._opacity is None else self._opacity

    @opacity.setter
    def opacity(self, value: int | None) -> None:
        """Set opacity and derive alpha. None stops tracking both."""
        if value is None:
            self._alpha = self._opacity = None
            return
        self._opacity = _check_opacity(value)
        self._alpha = opacity_to_alpha(value)

    @property
    def has_alpha(self) -> bool:
        """Return True if alpha (and opacity) are tracked."""
        return self._alpha is not None

    @property
    def hex(self) -> str:
        """The color as lowercase "#rrggbb"."""
        return f"#{self._red:02x}{self._green:02x}{self._blue:02x}"

    @property
    def rgb(self) -> RGB:
        return self._red, self._green, self._blue

    @property
    def argb(self) -> tuple[int, int, int, int]:
        return self.alpha, self._red, self._green, self._blue

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        return self._red, self._green, self._blue, self.alpha

    # ===============================================================================
    #   setters for several channels at once
    # ===============================================================================

    def _assign(self, r: int, g: int, b: int, alpha: int | None) -> None:
        """Range check and assign. Alpha, if given, also sets opacity."""
        _ = _check_channel("r", r), _check_channel("g", g), _check_channel("b", b)
        if alpha is not None:
            _ = _check_alpha(alpha)
        self._red, self._green, self._blue = r, g, b
        if alpha is not None:
            self.alpha = alpha

    def set_rgb(self, value: str | Sequence[int] | Mapping[str, Any]) -> Self:
        """Set red, green, and blue. Alpha and opacity are left alone.

        :param value: "rgb(r,g,b)", "r,g,b", [r, g, b], or an r/g/b mapping
        :return: self
        :raise ArgumentError: for other shapes or values outside [0, 255]
        """
        r, g, b, _ = _read_channels("rgb", value, alpha_first=False)
        self._assign(r, g, b, None)
        return self

    def set_argb(self, value: str | Sequence[int] | Mapping[str, Any]) -> Self:
        """Set the channels and alpha from an argb value.

        :param value: "argb(a,r,g,b)", "rgb(r,g,b)", [a, r, g, b], [r, g, b], or a
            mapping with optional a/alpha
        :return: self
        :raise ArgumentError: for other shapes or values out of range
        """
        r, g, b, a = _read_channels("argb", value, alpha_first=True)
        self._assign(r, g, b, 0 if a is None else a)
        return self

    def set_rgba(self, value: str | Sequence[int] | Mapping[str, Any]) -> Self:
        """Set the channels and alpha from an rgba value.

        :param value: "rgba(r,g,b,a)", "rgb(r,g,b)", [r, g, b, a], [r, g, b], or a
            mapping with optional a/alpha
        :return: self
        :raise ArgumentError: for other shapes or values out of range
        """
        r, g, b, a = _read_channels("rgba", value, alpha_first=False)
        self._assign(r, g, b, 0 if a is None else a)
        return self

    def set_web_color(self, definition: ColorDefinition) -> Self:
        """Set the channels from any color definition. The color becomes opaque.

        :param definition: a color definition (see drawing_kit.color_tool)
        :return: self
        :raise ArgumentError: if the definition cannot be read or a channel is
            outside [0, 255]
        """
        r, g, b = (int(x) for x in color_tool.color_to_rgb(definition)[:3])
        self._assign(r, g, b, 0)
        return self

    # ===============================================================================
    #   access by name
    # ===============================================================================

    _ALIASES: Mapping[str, str] = {
        "r": "red",
        "red": "red",
        "g": "green",
        "green": "green",
        "b": "blue",
        "blue": "blue",
        "a": "alpha",
        "alpha": "alpha",
        "o": "opacity",
        "opacity": "opacity",
        "rgb": "rgb",
        "rgba": "rgba",
        "argb": "argb",
        "h": "hex",
        "hex": "hex",
        "hexadecimal": "hex",
        "value": "web_color",
        "webcolor": "web_color",
    }

    _SETTERS: Mapping[str, str] = {
        "rgb": "set_rgb",
        "rgba": "set_rgba",
        "argb": "set_argb",
        "hex": "set_web_color",
        "web_color": "set_web_color",
    }

    @classmethod
    def _resolve(cls, name: str) -> str:
        """Map an alias to an attribute name."""
        try:
            return cls._ALIASES[name.lower()]
        except KeyError:
            msg = f"Expected one of {sorted(cls._ALIASES)}."
            raise ArgumentError("name", name, msg) from None

    def get(self, name: str) -> Any:
        """Get a value by case-insensitive name or alias ("r", "Red", "o", ...)."""
        attr = self._resolve(name)
        return getattr(self, "hex" if attr == "web_color" else attr)

    def set(self, name: str, value: Any) -> Self:
        """Set a value by case-insensitive name or alias ("r", "Red", "o", ...)."""
        attr = self._resolve(name)
        if attr in self._SETTERS:
            return getattr(self, self._SETTERS[attr])(value)
        setattr(self, attr, value)
        return self

    # ===============================================================================
    #   export
    # ===============================================================================

    def as_dict(self) -> dict[str, Any]:
        """Return the color values. alpha and opacity are None when not tracked."""
        return {
            "red": self._red,
            "green": self._green,
            "blue": self._blue,
            "alpha": self._alpha,
            "opacity": self._opacity,
            "hex": self.hex,
        }

    def as_pil_color(self) -> PilColor:
        """Return an rgba tuple for Pillow with opacity scaled to [0, 255]."""
        return (*self.rgb, round(self.opacity * CHANNEL_MAX / OPACITY_MAX))

    def to_packed_argb(self) -> int:
        """Pack the color into the legacy 32-bit integer, alpha in bits 24-30.

        :return: 0xRRGGBB if alpha is not tracked, else 0xAARRGGBB
        """
        rgb = (self._red << 16) | (self._green << 8) | self._blue
        if self._alpha is None:
            return rgb
        return (self._alpha << 24) | rgb

    def copy(self) -> Self:
        """Return an independent copy."""
        return copy.copy(self)

    def __str__(self) -> str:
        return self.hex

    def __repr__(self) -> str:
        if self._alpha is None:
            return f"{type(self).__name__}({self.hex!r})"
        return f"{type(self).__name__}({self.hex!r}, opacity={self._opacity})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return (self.rgb, self._alpha) == (other.rgb, other._alpha)

    def __hash__(self) -> int:
        return hash((self.rgb, self._alpha))

    # ===============================================================================
    #   alternate constructors
    # ===============================================================================

    @classmethod
    def from_string(cls, text: str) -> Self:
        """Create a color from text. Unreadable text gives black.

        :param text: a name, hex string, or "rgb()", "rgba()", "argb()", "r,g,b".
            Channels are clamped to [0, 255]; alpha in the text is kept.
        """
        parsed = color_tool.parse_color_text(text)
        if parsed is None:
            return cls(text)
        r, g, b, a = parsed
        color = cls(color_tool.rgb_to_hex(r, g, b) or "#000000")
        if a is not None:
            color.alpha = max(0, min(ALPHA_MAX, a))
        return color

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any]) -> Self:
        """Create a color from an r/g/b or red/green/blue mapping.

        Unreadable input gives black. Channels are clamped to [0, 255]; alpha in
        the mapping is kept.
        """
        parsed = color_tool.read_channel_mapping(value)
        if parsed is None:
            return cls("#000000")
        r, g, b, a = parsed
        color = cls(color_tool.rgb_to_hex(r, g, b) or "#000000")
        if a is not None:
            color.alpha = max(0, min(ALPHA_MAX, a))
        return color

    @classmethod
    def from_packed_argb(cls, value: int) -> Self:
        """Unpack the legacy 32-bit integer.

        :param value: 0xRRGGBB (opaque) or 0xAARRGGBB with alpha in bits 24-30
        :return: a color that tracks alpha and opacity
        """
        color = cls(((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF))
        color.alpha = (value >> 24) & ALPHA_MAX if value > _RGB_MASK else 0
        return color
