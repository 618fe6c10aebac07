"""Test the Pillow wrapper on small generated images.

:author: Shay Hill
:created: 2024-12-31
"""

from pathlib import Path

import pytest
from PIL import Image

from drawing_kit.color import Color
from drawing_kit.errors import (
    ArgumentError,
    ImageDecodeError,
    ImageNotFoundError,
    ImageWriteError,
)
from drawing_kit.gravity import ContentAlign, Gravity
from drawing_kit.image_ops import Picture, probe_size
from drawing_kit.type_point import Point
from drawing_kit.type_rect import Rectangle
from drawing_kit.type_size import Size

RED = (255, 0, 0)
WHITE = (255, 255, 255)


def _has_non_white(picture: Picture) -> bool:
    extrema = picture.image.convert("RGB").getextrema()
    return any(low < 255 for low, _ in extrema)


class TestLoad:
    """Read files and report failures with typed errors."""

    def test_png(self, png_file: Path):
        """Size, mime type, and file."""
        picture = Picture.load(png_file)
        assert picture.size == Size(40, 20)
        assert picture.is_png
        assert picture.file == png_file
        assert picture.image.getpixel((0, 0)) == RED

    def test_jpeg(self, jpeg_file: Path):
        """Mime type from the format."""
        picture = Picture.load(jpeg_file)
        assert picture.is_jpeg
        assert not picture.can_use_transparency
        assert (picture.width, picture.height) == (30, 60)

    def test_probe_size(self, jpeg_file: Path):
        """No decoding required."""
        assert probe_size(jpeg_file) == Size(30, 60)

    def test_missing(self, tmp_path: Path):
        """ImageNotFoundError is an OSError."""
        with pytest.raises(ImageNotFoundError):
            _ = Picture.load(tmp_path / "missing.png")
        with pytest.raises(OSError):
            _ = Picture.load(tmp_path / "missing.png")

    def test_broken(self, broken_file: Path):
        """Not an image."""
        with pytest.raises(ImageDecodeError):
            _ = Picture.load(broken_file)
        with pytest.raises(ImageDecodeError):
            _ = probe_size(broken_file)


class TestCreate:
    """New single-color pictures."""

    def test_fill(self):
        """Opaque colors give rgb images."""
        picture = Picture.create(10, 5, "red")
        assert picture.image.mode == "RGB"
        assert picture.image.getpixel((9, 4)) == RED
        assert picture.is_true_color

    def test_transparent(self):
        """Alpha 0 in Pillow terms."""
        picture = Picture.create(3, 3, "red", transparent=True)
        assert picture.image.getpixel((1, 1)) == (255, 0, 0, 0)

    def test_opacity(self):
        """Colors with opacity give rgba images."""
        picture = Picture.create(3, 3, Color("red", 50))
        assert picture.image.getpixel((0, 0)) == (255, 0, 0, 128)

    @pytest.mark.parametrize(("width", "height"), [(0, 5), (5, 0), (-1, -1)])
    def test_empty(self, width: int, height: int):
        """Raise an ArgumentError."""
        with pytest.raises(ArgumentError):
            _ = Picture.create(width, height)

    def test_palette_is_not_true_color(self):
        """Palette mode."""
        assert not Picture(Image.new("P", (2, 2))).is_true_color

    def test_image_is_a_copy(self):
        """Changing the returned image does not change the picture."""
        picture = Picture.create(2, 2, "white")
        picture.image.putpixel((0, 0), RED)
        assert picture.image.getpixel((0, 0)) == WHITE


class TestCrop:
    """Crops by rectangle and by gravity."""

    @pytest.fixture
    def marked(self) -> Picture:
        """A white 100 x 50 picture with a red 10 x 20 bottom-right corner."""
        picture = Picture.create(100, 50, "white")
        return picture.draw_rectangle(Rectangle.from_values(90, 30, 10, 20), "red")

    def test_draw_rectangle_edges(self, marked: Picture):
        """Right and bottom are exclusive."""
        image = marked.image
        assert image.getpixel((89, 29)) == WHITE
        assert image.getpixel((90, 30)) == RED
        assert image.getpixel((99, 49)) == RED

    def test_gravity(self, marked: Picture):
        """The bottom-right corner."""
        cropped = marked.crop(10, 20, Gravity.BOTTOM_RIGHT)
        assert cropped.size == Size(10, 20)
        assert cropped.image.getpixel((0, 0)) == RED
        assert marked.size == Size(100, 50)

    def test_default_gravity(self, marked: Picture):
        """Top-left."""
        assert marked.crop(10, 20).image.getpixel((9, 19)) == WHITE

    def test_aligned(self, marked: Picture):
        """ContentAlign is converted."""
        cropped = marked.crop_aligned(10, 20, ContentAlign.BOTTOM_RIGHT)
        assert cropped.image.getpixel((5, 5)) == RED

    def test_clamped(self, marked: Picture):
        """Nothing to crop."""
        assert marked.crop(500, 500).size == Size(100, 50)

    def test_rect_is_clipped(self, marked: Picture):
        """The part outside the image is dropped."""
        cropped = marked.crop_rect(Rectangle.from_values(90, 40, 20, 20))
        assert cropped.size == Size(10, 10)

    def test_rect_outside(self, marked: Picture):
        """Raise an ArgumentError."""
        with pytest.raises(ArgumentError):
            _ = marked.crop_rect(Rectangle.from_values(200, 200, 5, 5))

    def test_quadratic(self, landscape: Picture):
        """The largest square."""
        assert landscape.crop_quadratic().size == Size(150, 150)


class TestResize:
    """Resampling and the contract family."""

    def test_resample(self, landscape: Picture):
        """Exact size. Proportions are not kept."""
        assert landscape.resample(Size(20, 10)).size == Size(20, 10)
        assert landscape.size == Size(250, 150)

    def test_resample_empty(self, landscape: Picture):
        """Raise an ArgumentError."""
        with pytest.raises(ArgumentError):
            _ = landscape.resample(Size(0, 5))

    def test_contract(self, landscape: Picture):
        """Keep percent of each side."""
        assert landscape.contract(50).size == Size(125, 75)

    def test_contract_minimum(self, png_file: Path):
        """Sides never drop below 1."""
        assert Picture.load(png_file).contract(1).size == Size(1, 1)

    @pytest.mark.parametrize("percent", [0, 100, -5])
    def test_contract_range(self, landscape: Picture, percent: int):
        """Raise an ArgumentError."""
        with pytest.raises(ArgumentError):
            _ = landscape.contract(percent)

    def test_contract_to_max_size(self, landscape: Picture):
        """Fit inside."""
        assert landscape.contract_to_max_size(Size(75, 100)).size == Size(75, 45)

    def test_contract_to_sides(self, landscape: Picture):
        """Long side and short side."""
        assert landscape.contract_to_max_side(125, 10).size == Size(125, 75)
        assert landscape.contract_to_min_side(75, 10).size == Size(125, 75)


class TestTransform:
    """Rotation and negation."""

    def test_rotate(self, landscape: Picture):
        """Width and height swap."""
        assert landscape.rotate_squarely(90).size == Size(150, 250)
        assert landscape.rotate_squarely(-180).size == Size(250, 150)

    def test_rotate_not_square(self, landscape: Picture):
        """Raise an ArgumentError."""
        with pytest.raises(ArgumentError):
            _ = landscape.rotate_squarely(45)

    def test_negate(self):
        """Red becomes cyan."""
        picture = Picture.create(2, 2, "red").negate()
        assert picture.image.getpixel((0, 0)) == (0, 255, 255)

    def test_negate_keeps_alpha(self):
        """Only color channels are inverted."""
        picture = Picture.create(2, 2, Color("red", 50)).negate()
        assert picture.image.getpixel((0, 0)) == (0, 255, 255, 128)


class TestDraw:
    """Borders, overlays, text, and user colors."""

    def test_single_border(self):
        """One pixel inside the edge."""
        image = Picture.create(10, 10, "white").draw_single_border("red").image
        assert image.getpixel((0, 0)) == WHITE
        assert image.getpixel((1, 1)) == RED
        assert image.getpixel((8, 8)) == RED
        assert image.getpixel((5, 5)) == WHITE

    def test_double_border(self):
        """Outer on the edge, inner inside it."""
        picture = Picture.create(10, 10, "white")
        image = picture.draw_double_border("red", "blue").image
        assert image.getpixel((0, 0)) == (0, 0, 255)
        assert image.getpixel((1, 1)) == RED
        assert image.getpixel((2, 2)) == WHITE

    @pytest.mark.parametrize("side", [1, 2])
    def test_borders_on_tiny_pictures(self, side: int):
        """No room inside the edge. The outer border still fits."""
        picture = Picture.create(side, side, "white")
        assert picture.draw_single_border("red").image.getpixel((0, 0)) == WHITE
        doubled = picture.draw_double_border("red", "blue")
        assert doubled.image.getpixel((0, 0)) == (0, 0, 255)
        assert doubled.size == Size(side, side)

    def test_place(self):
        """Paste at a point."""
        base = Picture.create(10, 10, "white")
        image = base.place(Picture.create(2, 2, "red"), Point(3, 3)).image
        assert image.getpixel((3, 3)) == RED
        assert image.getpixel((4, 4)) == RED
        assert image.getpixel((5, 5)) == WHITE

    def test_place_opacity(self):
        """Opacity blends with the background."""
        base = Picture.create(4, 4, "white")
        image = base.place(Picture.create(4, 4, "red"), Point(0, 0), 50).image
        red, green, blue = image.getpixel((0, 0))
        assert red == 255
        assert 0 < green < 255
        assert green == blue

    @pytest.mark.parametrize("opacity", [-1, 101])
    def test_place_opacity_range(self, opacity: int):
        """Raise an ArgumentError."""
        base = Picture.create(4, 4)
        with pytest.raises(ArgumentError):
            _ = base.place(Picture.create(1, 1), Point(0, 0), opacity)

    def test_place_with_gravity(self):
        """Padding from the bottom-right edges."""
        base = Picture.create(10, 10, "white")
        overlay = Picture.create(2, 2, "red")
        image = base.place_with_gravity(overlay, 1, Gravity.BOTTOM_RIGHT).image
        assert image.getpixel((7, 7)) == RED
        assert image.getpixel((8, 8)) == RED
        assert image.getpixel((9, 9)) == WHITE

    def test_user_color(self):
        """Drawing methods accept registered names."""
        picture = Picture.create(4, 4, "white")
        picture.add_user_color("brand", "#102030")
        drawn = picture.draw_rectangle(Rectangle.from_values(0, 0, 4, 4), "brand")
        assert drawn.image.getpixel((2, 2)) == (16, 32, 48)
        assert drawn.get_user_color("brand") == Color("#102030", 100)

    def test_user_color_is_a_copy(self):
        """The registered color cannot be changed from outside."""
        picture = Picture.create(4, 4)
        color = Color("red")
        picture.add_user_color("accent", color)
        color.blue = 255
        fetched = picture.get_user_color("accent")
        assert fetched is not None
        assert fetched.rgb == RED
        assert picture.get_user_color("nope") is None

    def test_draw_text(self):
        """Something is drawn."""
        picture = Picture.create(60, 30, "white")
        drawn = picture.draw_text("X", "black", Point(5, 5))
        assert _has_non_white(drawn)
        assert not _has_non_white(picture)

    def test_draw_text_with_gravity(self):
        """Something is drawn."""
        picture = Picture.create(60, 30, "white")
        assert _has_non_white(picture.draw_text_with_gravity("X", "black", 2))


class TestOutput:
    """Encoding and writing files."""

    def test_to_bytes_png(self):
        """The default mime type is png."""
        assert Picture.create(2, 2).to_bytes().startswith(b"\x89PNG")

    def test_to_bytes_jpeg(self):
        """Rgba is flattened for jpeg."""
        picture = Picture.create(2, 2, Color("red", 50), mime_type="image/jpeg")
        assert picture.to_bytes().startswith(b"\xff\xd8")

    def test_unknown_mime(self):
        """Warn and write png."""
        picture = Picture.create(2, 2, mime_type="image/bmp")
        with pytest.warns(UserWarning, match="mime"):
            data = picture.to_bytes()
        assert data.startswith(b"\x89PNG")

    def test_save_by_suffix(self, png_file: Path, tmp_path: Path):
        """The suffix picks the format."""
        saved = Picture.load(png_file).save(tmp_path / "out.jpg")
        assert saved.is_jpeg
        assert saved.file == tmp_path / "out.jpg"
        assert Picture.load(tmp_path / "out.jpg").is_jpeg

    def test_overwrite(self, png_file: Path):
        """No file name writes back to the loaded file."""
        picture = Picture.load(png_file).crop(10, 10)
        _ = picture.save()
        assert probe_size(png_file) == Size(10, 10)

    def test_no_file_name(self):
        """Raise an ImageWriteError."""
        with pytest.raises(ImageWriteError):
            _ = Picture.create(2, 2).save()

    def test_missing_directory(self, tmp_path: Path):
        """Raise an ImageWriteError."""
        with pytest.raises(ImageWriteError):
            _ = Picture.create(2, 2).save(tmp_path / "nope" / "out.png")
