"""Anclajes para colocar un recorte o una imagen dentro de otra.

Gravity numera las nueve posiciones por filas, de arriba a la izquierda (0) a abajo
a la derecha (8). ContentAlign es la numeración antigua de alineación de contenido,
que va en sentido contrario. ``ContentAlign.to_gravity`` convierte entre las dos.

:author: Shay Hill
:created: 2024-12-30
"""

from __future__ import annotations

import enum
import re
from typing import Self

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def _normalize_name(text: str) -> str:
    """Map "Middle-Center" and "middle center" to "MIDDLE_CENTER"."""
    return _NON_ALNUM.sub("_", text.strip().lower()).strip("_").upper()


class _Anchor(enum.IntEnum):
    """Common lenient parsing for both anchor enums."""

    @classmethod
    def _default(cls) -> Self:
        raise NotImplementedError

    @classmethod
    def try_parse(cls, value: object) -> Self | None:
        """Interpret a member, an int 0-8, a numeric string, or a member name.

        :return: the member or None if value names no member
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return None
        if isinstance(value, str):
            text = value.strip()
            if text.lstrip("-").isdigit():
                value = int(text)
            else:
                return cls.__members__.get(_normalize_name(text))
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return None
        return None

    @classmethod
    def parse(cls, value: object) -> Self:
        """Like try_parse, but return the middle anchor for unknown values."""
        parsed = cls.try_parse(value)
        return cls._default() if parsed is None else parsed


class Gravity(_Anchor):
    """Nueve anclajes, numerados por filas."""

    TOP_LEFT = 0
    TOP_CENTER = 1
    TOP_RIGHT = 2
    MIDDLE_LEFT = 3
    MIDDLE_CENTER = 4
    MIDDLE_RIGHT = 5
    BOTTOM_LEFT = 6
    BOTTOM_CENTER = 7
    BOTTOM_RIGHT = 8

    @classmethod
    def _default(cls) -> Gravity:
        return cls.MIDDLE_CENTER

    @property
    def column(self) -> int:
        """0 izquierda, 1 centro, 2 derecha."""
        return self.value % 3

    @property
    def row(self) -> int:
        """0 arriba, 1 medio, 2 abajo."""
        return self.value // 3


class ContentAlign(_Anchor):
    """Alineación de contenido, numerada desde abajo a la derecha."""

    BOTTOM_RIGHT = 0
    BOTTOM = 1
    BOTTOM_LEFT = 2
    MIDDLE_RIGHT = 3
    MIDDLE = 4
    MIDDLE_LEFT = 5
    TOP_RIGHT = 6
    TOP = 7
    TOP_LEFT = 8

    @classmethod
    def _default(cls) -> ContentAlign:
        return cls.MIDDLE

    def to_gravity(self) -> Gravity:
        """Return the Gravity at the same position."""
        return Gravity(8 - self.value)
