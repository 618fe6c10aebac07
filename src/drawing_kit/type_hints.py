"""Type hints for the "any shape" arguments accepted at the parsing boundary.

:author: Shay Hill
:created: 2024-12-27
"""

from collections.abc import Mapping, Sequence
from typing import Any, TypeAlias

# ("#ff0000", "red", "rgb(255, 0, 0)", "255,0,0"), [255, 0, 0], {"r": 255, ...}
ColorDefinition: TypeAlias = str | Sequence[int] | Mapping[str, Any]

# the r argument of rgb_to_hex
RgbArgument: TypeAlias = int | str | Sequence[int] | Mapping[str, Any]

RGB: TypeAlias = tuple[int, int, int]

# r, g, b, alpha. alpha is None when the text carries no alpha value.
ParsedColor: TypeAlias = tuple[int, int, int, int | None]

# an RGBA tuple in Pillow's 0-255 scale
PilColor: TypeAlias = tuple[int, int, int, int]
