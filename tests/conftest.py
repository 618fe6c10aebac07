"""Imágenes pequeñas generadas para las pruebas.

:author: Shay Hill
:created: 2024-12-31
"""

from pathlib import Path

import pytest
from PIL import Image

from drawing_kit.image_ops import Picture


def _write_image(path: Path, size: tuple[int, int], color: str, format_: str) -> Path:
    Image.new("RGB", size, color).save(path, format=format_)
    return path


@pytest.fixture
def png_file(tmp_path: Path) -> Path:
    """A 40 x 20 red png."""
    return _write_image(tmp_path / "red.png", (40, 20), "red", "PNG")


@pytest.fixture
def jpeg_file(tmp_path: Path) -> Path:
    """A 30 x 60 blue jpeg."""
    return _write_image(tmp_path / "blue.jpg", (30, 60), "blue", "JPEG")


@pytest.fixture
def broken_file(tmp_path: Path) -> Path:
    """A file with an image suffix that is not an image."""
    path = tmp_path / "broken.png"
    _ = path.write_text("not an image")
    return path


@pytest.fixture
def landscape() -> Picture:
    """A 250 x 150 white picture."""
    return Picture.create(250, 150)
