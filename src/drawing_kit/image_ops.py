"""A thin Pillow wrapper that applies sizes, crops, and colors to pixels.

Picture is the only place where drawing_kit touches image files. Every operation
returns a new Picture and leaves the original unchanged.

:author: Shay Hill
:created: 2024-11-20
"""

from __future__ import annotations

import io
import math
import os
import warnings
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw, ImageFont, ImageOps, UnidentifiedImageError
from PIL.Image import Image as ImageType

from drawing_kit.color import Color
from drawing_kit.crop_image import (
    get_crop_rect,
    get_placement_point,
    get_quadratic_crop_rect,
)
from drawing_kit.errors import (
    ArgumentError,
    ImageDecodeError,
    ImageNotFoundError,
    ImageWriteError,
)
from drawing_kit.globs import (
    DEFAULT_MIME,
    DEFAULT_QUALITY,
    FORMAT_TO_MIME,
    MIME_TO_FORMAT,
    OPACITY_MAX,
    SUFFIX_TO_MIME,
)
from drawing_kit.gravity import ContentAlign, Gravity
from drawing_kit.type_point import Point
from drawing_kit.type_rect import Rectangle
from drawing_kit.type_size import Size

if TYPE_CHECKING:
    from drawing_kit.size_reducer import ImageSizeReducer
    from drawing_kit.type_hints import ColorDefinition

_PALETTE_MODES = ("1", "L", "LA", "P", "PA", "I", "F")

_DEFAULT_FONT_SIZE = 12


def probe_size(filename: str | os.PathLike[str]) -> Size:
    """Read the size of an image file without decoding the pixels.

    :raise ImageNotFoundError: if there is no such file
    :raise ImageDecodeError: if Pillow cannot identify the file
    """
    return Size.from_image_file(filename)


def _get_font(
    font: str | os.PathLike[str] | None, font_size: int
) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    """Load a TrueType font if the file exists, else Pillow's default font."""
    if font is not None and Path(font).is_file():
        return ImageFont.truetype(os.fspath(font), size=font_size)
    return ImageFont.load_default()


class Picture:
    """An image in memory with the mime type it will be saved as."""

    def __init__(
        self,
        image: ImageType,
        mime_type: str = DEFAULT_MIME,
        file: Path | None = None,
        user_colors: dict[str, Color] | None = None,
    ) -> None:
        self._image = image
        self._mime_type = mime_type
        self._file = file
        self._user_colors = {} if user_colors is None else dict(user_colors)

    def _derive(self, image: ImageType) -> Picture:
        """Return a new Picture that shares this one's mime, file, and colors."""
        return Picture(image, self._mime_type, self._file, self._user_colors)

    def _editable_copy(self) -> ImageType:
        """Return a copy of the pixels in a mode that can blend rgba colors."""
        if self._image.mode in ("RGB", "RGBA"):
            return self._image.copy()
        return self._image.convert("RGBA")

    # ===============================================================================
    #   construction
    # ===============================================================================

    @classmethod
    def load(cls, filename: str | os.PathLike[str]) -> Picture:
        """Open and decode an image file.

        :raise ImageNotFoundError: if there is no such file
        :raise ImageDecodeError: if Pillow cannot read the file
        """
        path = Path(filename)
        if not path.is_file():
            raise ImageNotFoundError(path, "Can not open image file.")
        try:
            with Image.open(path) as image:
                image.load()
                format_ = image.format or ""
                pixels = image.copy()
        except (UnidentifiedImageError, OSError) as e:
            raise ImageDecodeError(path, "Can not decode image file.") from e
        mime_type = FORMAT_TO_MIME.get(format_) or SUFFIX_TO_MIME.get(
            path.suffix.lower(), DEFAULT_MIME
        )
        return cls(pixels, mime_type, path)

    @classmethod
    def create(
        cls,
        width: int,
        height: int,
        back_color: Color | ColorDefinition = "#ffffff",
        mime_type: str = DEFAULT_MIME,
        transparent: bool = False,
    ) -> Picture:
        """Create a new image filled with one color.

        :param width: width in pixels, at least 1
        :param height: height in pixels, at least 1
        :param back_color: the fill color
        :param mime_type: the mime type used when saving
        :param transparent: if True, the fill is fully transparent
        :raise ArgumentError: if a side is < 1
        """
        for name, value in (("width", width), ("height", height)):
            if value < 1:
                msg = "Image side lengths must be at least 1."
                raise ArgumentError(name, value, msg)
        color = back_color if isinstance(back_color, Color) else Color(back_color)
        if transparent:
            image = Image.new("RGBA", (width, height), (*color.rgb, 0))
        elif color.has_alpha:
            image = Image.new("RGBA", (width, height), color.as_pil_color())
        else:
            image = Image.new("RGB", (width, height), color.rgb)
        return cls(image, mime_type)

    # ===============================================================================
    #   properties
    # ===============================================================================

    @property
    def image(self) -> ImageType:
        """A copy of the Pillow image."""
        return self._image.copy()

    @property
    def size(self) -> Size:
        """A new Size instance. Changing it does not change the picture."""
        return Size(self._image.width, self._image.height)

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def mime_type(self) -> str:
        return self._mime_type

    @property
    def file(self) -> Path | None:
        """The file the picture was loaded from or last saved to."""
        return self._file

    @property
    def is_png(self) -> bool:
        return self._mime_type == "image/png"

    @property
    def is_gif(self) -> bool:
        return self._mime_type == "image/gif"

    @property
    def is_jpeg(self) -> bool:
        return self._mime_type == "image/jpeg"

    @property
    def is_true_color(self) -> bool:
        """True unless the pixels are palette, grayscale, or bitmap."""
        return self._image.mode not in _PALETTE_MODES

    @property
    def can_use_transparency(self) -> bool:
        """True if the output format can store transparent pixels."""
        return self.is_png or self.is_gif

    # ===============================================================================
    #   user colors
    # ===============================================================================

    def add_user_color(
        self, name: str, definition: Color | ColorDefinition, opacity: int = 100
    ) -> None:
        """Register a named color. Drawing methods accept the name.

        :param name: the name to register. Replaces an existing color.
        :param definition: a Color (stored as a copy) or a color definition
        :param opacity: opacity for color definitions. Ignored for Color instances.
        """
        if isinstance(definition, Color):
            self._user_colors[name] = definition.copy()
        else:
            self._user_colors[name] = Color(definition, opacity)

    def get_user_color(self, name: str) -> Color | None:
        color = self._user_colors.get(name)
        return None if color is None else color.copy()

    def _resolve_color(self, color: Color | ColorDefinition | None) -> Color:
        """Resolve a Color, a user color name, or a color definition."""
        if color is None:
            return Color("#000000")
        if isinstance(color, Color):
            return color
        if isinstance(color, str) and color in self._user_colors:
            return self._user_colors[color]
        return Color(color)

    # ===============================================================================
    #   geometry
    # ===============================================================================

    def crop_rect(self, rect: Rectangle) -> Picture:
        """Cut out a rectangle. Parts outside the image are dropped.

        :raise ArgumentError: if the rectangle does not overlap the image
        """
        bounds = Rectangle(Point(), self.size)
        inside = bounds.intersect(rect)
        if inside is None or inside.width < 1 or inside.height < 1:
            msg = "The crop rectangle does not overlap the image."
            raise ArgumentError("rect", str(rect), msg)
        return self._derive(self._image.crop(inside.as_box()))

    def crop(
        self,
        width: int,
        height: int,
        gravity: Gravity | ContentAlign = Gravity.TOP_LEFT,
    ) -> Picture:
        """Crop to width x height at a gravity anchor.

        Sides larger than the image are clamped. Nothing is cropped if the clamped
        size equals the image size.
        """
        rect = get_crop_rect(self.size, width, height, gravity)
        if rect.size == self.size:
            return self._derive(self._image.copy())
        return self.crop_rect(rect)

    def crop_aligned(self, width: int, height: int, align: ContentAlign) -> Picture:
        return self.crop(width, height, align.to_gravity())

    def crop_quadratic(
        self, gravity: Gravity | ContentAlign = Gravity.MIDDLE_CENTER
    ) -> Picture:
        """Crop the largest square at a gravity anchor."""
        rect = get_quadratic_crop_rect(self.size, gravity)
        if rect.size == self.size:
            return self._derive(self._image.copy())
        return self.crop_rect(rect)

    def resample(self, size: Size) -> Picture:
        """Scale to exactly size. Proportions are not kept.

        :raise ArgumentError: if a side of size is < 1
        """
        if size.is_empty():
            msg = "Can not resample to an empty size."
            raise ArgumentError("size", str(size), msg)
        if size == self.size:
            return self._derive(self._image.copy())
        resized = self._image.resize(size.as_tuple(), Image.Resampling.LANCZOS)
        return self._derive(resized)

    def contract(self, percent: int) -> Picture:
        """Keep percent of each side.

        :param percent: in [1, 99]. Each side becomes floor(side * percent / 100).
        :raise ArgumentError: if percent is outside [1, 99]
        """
        if percent >= 100 or percent < 1:
            msg = "Image contraction only works with percent values in [1, 99]."
            raise ArgumentError("percent", percent, msg)
        width = max(math.floor(self.width * percent / 100), 1)
        height = max(math.floor(self.height * percent / 100), 1)
        return self.resample(Size(width, height))

    def contract_to_max_size(self, max_size: Size) -> Picture:
        """Scale down proportionally to fit inside max_size."""
        size = self.size
        _ = size.reduce_to_max_size(max_size)
        return self.resample(size)

    def contract_to_max_side(self, landscape: int, portrait: int) -> Picture:
        """Scale down so the long side is at most landscape (or portrait)."""
        size = self.size
        _ = size.reduce_max_side_to2(landscape, portrait)
        return self.resample(size)

    def contract_to_min_side(self, landscape: int, portrait: int) -> Picture:
        """Scale down so the short side is at most landscape (or portrait)."""
        size = self.size
        _ = size.reduce_min_side_to2(landscape, portrait)
        return self.resample(size)

    def reduce(self, reducer: ImageSizeReducer) -> Picture:
        """Apply a size reduction policy."""
        return reducer.run(self)

    def rotate_squarely(
        self, angle: int = 90, fill_color: Color | ColorDefinition | None = None
    ) -> Picture:
        """Rotate counterclockwise by a multiple of 90 degrees.

        :param angle: 90, 180, 270, -90, ...
        :param fill_color: background for any uncovered pixels
        :raise ArgumentError: if angle is not a multiple of 90
        """
        if angle % 90 != 0:
            msg = "Only multiples of 90 degrees are allowed for square rotations."
            raise ArgumentError("angle", angle, msg)
        fill = self._resolve_color(fill_color)
        image = self._editable_copy()
        fillcolor = fill.rgb if image.mode == "RGB" else fill.as_pil_color()
        rotated = image.rotate(angle, expand=True, fillcolor=fillcolor)
        return self._derive(rotated)

    def negate(self) -> Picture:
        """Invert every color channel. Alpha is kept."""
        image = self._editable_copy()
        if image.mode == "RGBA":
            alpha = image.getchannel("A")
            negated = ImageOps.invert(image.convert("RGB"))
            negated.putalpha(alpha)
            return self._derive(negated)
        return self._derive(ImageOps.invert(image))

    # ===============================================================================
    #   drawing
    # ===============================================================================

    def draw_rectangle(
        self, rect: Rectangle, color: Color | ColorDefinition
    ) -> Picture:
        """Fill a rectangle. Colors with opacity < 100 are blended."""
        image = self._editable_copy()
        draw = ImageDraw.Draw(image, "RGBA")
        box = (rect.left, rect.top, rect.right - 1, rect.bottom - 1)
        draw.rectangle(box, fill=self._resolve_color(color).as_pil_color())
        return self._derive(image)

    def draw_single_border(self, color: Color | ColorDefinition) -> Picture:
        """Draw a one-pixel border one pixel inside the image edge.

        Pictures smaller than 3 x 3 have no room inside the edge and are returned
        unchanged.
        """
        image = self._editable_copy()
        if self.width >= 3 and self.height >= 3:
            draw = ImageDraw.Draw(image, "RGBA")
            box = (1, 1, self.width - 2, self.height - 2)
            draw.rectangle(box, outline=self._resolve_color(color).as_pil_color())
        return self._derive(image)

    def draw_double_border(
        self, inner_color: Color | ColorDefinition, outer_color: Color | ColorDefinition
    ) -> Picture:
        """Draw an outer border on the image edge and an inner border inside it.

        The inner border is skipped on pictures smaller than 3 x 3.
        """
        image = self._editable_copy()
        draw = ImageDraw.Draw(image, "RGBA")
        outer = (0, 0, self.width - 1, self.height - 1)
        draw.rectangle(outer, outline=self._resolve_color(outer_color).as_pil_color())
        if self.width >= 3 and self.height >= 3:
            inner = (1, 1, self.width - 2, self.height - 2)
            inner_outline = self._resolve_color(inner_color).as_pil_color()
            draw.rectangle(inner, outline=inner_outline)
        return self._derive(image)

    def place(self, picture: Picture, point: Point, opacity: int = 100) -> Picture:
        """Paste another picture with its top-left corner at point.

        :param picture: the picture to paste. Its own alpha is respected.
        :param point: top-left corner. Parts outside this picture are dropped.
        :param opacity: in [0, 100]. Scales the alpha of the pasted picture.
        :raise ArgumentError: if opacity is outside [0, 100]
        """
        if not 0 <= opacity <= OPACITY_MAX:
            msg = "Opacity must be in [0, 100]."
            raise ArgumentError("opacity", opacity, msg)
        overlay = picture._image.convert("RGBA")
        if opacity < OPACITY_MAX:
            alpha = overlay.getchannel("A").point(lambda a: a * opacity // 100)
            overlay.putalpha(alpha)
        image = self._editable_copy()
        image.paste(overlay, (point.x, point.y), overlay)
        return self._derive(image)

    def place_with_gravity(
        self,
        picture: Picture,
        padding: int = 0,
        gravity: Gravity | ContentAlign = Gravity.MIDDLE_CENTER,
        opacity: int = 100,
    ) -> Picture:
        """Paste another picture at a gravity anchor, padding from the edges."""
        point = get_placement_point(self.size, picture.size, padding, gravity)
        return self.place(picture, point, opacity)

    def draw_text(
        self,
        text: str,
        color: Color | ColorDefinition,
        point: Point,
        font: str | os.PathLike[str] | None = None,
        font_size: int = _DEFAULT_FONT_SIZE,
    ) -> Picture:
        """Draw text with its top-left corner at point.

        :param font: path to a TrueType font. Pillow's default font is used if
            None or missing.
        :param font_size: size for TrueType fonts
        """
        image = self._editable_copy()
        draw = ImageDraw.Draw(image, "RGBA")
        draw.text(
            (point.x, point.y),
            text,
            fill=self._resolve_color(color).as_pil_color(),
            font=_get_font(font, font_size),
        )
        return self._derive(image)

    def draw_text_with_gravity(
        self,
        text: str,
        color: Color | ColorDefinition,
        padding: int = 0,
        gravity: Gravity | ContentAlign = Gravity.BOTTOM_RIGHT,
        font: str | os.PathLike[str] | None = None,
        font_size: int = _DEFAULT_FONT_SIZE,
    ) -> Picture:
        """Draw text at a gravity anchor, padding from the edges."""
        draw = ImageDraw.Draw(self._image)
        left, top, right, bottom = draw.textbbox(
            (0, 0), text, font=_get_font(font, font_size)
        )
        text_size = Size(math.ceil(right - left), math.ceil(bottom - top))
        point = get_placement_point(self.size, text_size, padding, gravity)
        return self.draw_text(text, color, point, font, font_size)

    # ===============================================================================
    #   output
    # ===============================================================================

    def _get_format(self, mime_type: str) -> str:
        """Return the Pillow format name. Unknown mime types fall back to png."""
        format_ = MIME_TO_FORMAT.get(mime_type)
        if format_ is None:
            msg = f"Unsupported mime type {mime_type!r}. Writing png."
            warnings.warn(msg, stacklevel=3)
            return MIME_TO_FORMAT[DEFAULT_MIME]
        return format_

    def _encode(self, stream: io.BytesIO | Path, mime_type: str, quality: int) -> None:
        format_ = self._get_format(mime_type)
        image = self._image
        if format_ == "JPEG" and image.mode != "RGB":
            image = image.convert("RGB")
        if format_ == "JPEG":
            image.save(stream, format=format_, quality=quality)
        else:
            image.save(stream, format=format_)

    def to_bytes(self, quality: int = DEFAULT_QUALITY) -> bytes:
        """Encode the picture with its mime type."""
        stream = io.BytesIO()
        self._encode(stream, self._mime_type, quality)
        return stream.getvalue()

    def save(
        self, filename: str | os.PathLike[str] | None = None, quality: int = DEFAULT_QUALITY
    ) -> Picture:
        """Write the picture to a file.

        :param filename: output path. The suffix picks the format (png, gif, jpg,
            jpeg). Other suffixes use the picture's mime type. If None, overwrite
            the file the picture was loaded from.
        :param quality: jpeg quality
        :return: a Picture pointing to the written file
        :raise ImageWriteError: if there is no file name or writing fails
        """
        if filename is None:
            if self._file is None:
                raise ImageWriteError(None, "No file name to save to.")
            filename = self._file
        path = Path(filename)
        mime_type = SUFFIX_TO_MIME.get(path.suffix.lower(), self._mime_type)
        try:
            self._encode(path, mime_type, quality)
        except (OSError, ValueError) as e:
            raise ImageWriteError(path, "Can not write image file.") from e
        return Picture(self._image, mime_type, path, self._user_colors)
