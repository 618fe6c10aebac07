"""Exceptions raised by drawing_kit.

Parsing helpers (every ``try_parse``) report failure by returning None. The classes
here are for everything else: bad arguments, writes to a fixed Size, and failures at
the Pillow boundary.

:author: Shay Hill
:created: 2024-12-30
"""

from __future__ import annotations

from typing import Any


class ArgumentError(ValueError):
    """An argument has the wrong format or is out of range."""

    def __init__(self, name: str, value: Any, message: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid {name}={value!r}. {message}")


class FixedSizeError(RuntimeError):
    """An attempt to change a Size instance created with ``fixed=True``."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(
            f'Invalid operation "{operation}"! This Size instance is a fixed size.'
        )


class ImageResourceError(OSError):
    """Reading or writing an image file failed."""

    def __init__(self, filename: object, message: str) -> None:
        self.filename = filename
        super().__init__(f"{message} ({filename})")


class ImageNotFoundError(ImageResourceError):
    """The image file does not exist."""


class ImageDecodeError(ImageResourceError):
    """The image file exists, but Pillow cannot read it."""


class ImageWriteError(ImageResourceError):
    """The image cannot be encoded or written."""
