"""Named image size reduction policies.

An ImageSizeReducer is a small frozen value that says *how* an image should be made
smaller:

    CROP        fill width x height exactly, cropping the overflow at a gravity
    RESIZE      fit inside width x height, keeping proportions
    LONG_SIDE   reduce the long side to landscape (or portrait for portrait images)
    SHORT_SIDE  reduce the short side to landscape (or portrait for portrait images)

``compute`` does the geometry on a Size and never touches pixels. ``run`` applies
the result to a Picture. Reducers serialize to a record (dict / json) and to an xml
element, so user-chosen policies can be stored.

:author: Shay Hill
:created: 2024-12-31
"""

from __future__ import annotations

import dataclasses
import enum
import json
import warnings
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Self

from lxml import etree
from lxml.etree import _Element as EtreeElement  # type: ignore

from drawing_kit.crop_image import get_crop_rect
from drawing_kit.errors import ArgumentError
from drawing_kit.gravity import ContentAlign, Gravity
from drawing_kit.type_rect import Rectangle
from drawing_kit.type_size import Size

if TYPE_CHECKING:
    from drawing_kit.image_ops import Picture

DEFAULT_TAG = "ImageSizeReducer"

_RECORD_KEYS = ("type", "width", "height", "landscape", "portrait", "gravity")


class ReducerType(enum.IntEnum):
    """The four reduction strategies. Values are the serialized ints."""

    CROP = 0
    RESIZE = 1
    LONG_SIDE = 2
    SHORT_SIDE = 3

    @property
    def xml_tag(self) -> str:
        return _TYPE_TO_TAG[self]

    @classmethod
    def try_parse(cls, value: object) -> ReducerType | None:
        """Interpret a member, an int 0-3, a numeric string, an xml tag, or a name.

        :return: the member or None
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return None
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                value = int(text)
            else:
                lowered = text.lower()
                if lowered in _TAG_TO_TYPE:
                    return _TAG_TO_TYPE[lowered]
                return cls.__members__.get(text.upper())
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return None
        return None


_TYPE_TO_TAG = {
    ReducerType.CROP: "crop",
    ReducerType.RESIZE: "resize",
    ReducerType.LONG_SIDE: "long",
    ReducerType.SHORT_SIDE: "short",
}

_TAG_TO_TYPE = {v: k for k, v in _TYPE_TO_TAG.items()}

# the xml attributes written for each type, in order
_TYPE_TO_ATTRIBUTES = {
    ReducerType.CROP: ("width", "height", "gravity"),
    ReducerType.RESIZE: ("width", "height"),
    ReducerType.LONG_SIDE: ("landscape", "portrait"),
    ReducerType.SHORT_SIDE: ("landscape", "portrait"),
}


@dataclasses.dataclass(frozen=True)
class Reduction:
    """The geometric result of a reducer on a source size.

    :param size: the proportionally scaled size
    :param crop: the crop rectangle inside ``size`` or None if there is nothing to
        crop
    """

    size: Size
    crop: Rectangle | None = None

    @property
    def final_size(self) -> Size:
        """The size of the finished image."""
        if self.crop is None:
            return self.size.copy()
        return self.crop.size.copy()


def _check_positive(name: str, value: int) -> None:
    if value < 1:
        msg = "Reducer side lengths must be at least 1."
        raise ArgumentError(name, value, msg)


@dataclasses.dataclass(frozen=True)
class ImageSizeReducer:
    """A single-purpose, immutable size reduction policy.

    Use the ``create_*`` factories. Fields not used by ``type`` are 0 (and gravity is
    middle-center).
    """

    type: ReducerType
    width: int = 0
    height: int = 0
    landscape: int = 0
    portrait: int = 0
    gravity: Gravity = Gravity.MIDDLE_CENTER

    def __post_init__(self) -> None:
        """Fail fast on field combinations that cannot run."""
        type_ = ReducerType.try_parse(self.type)
        if type_ is None:
            msg = "Expected one of crop (0), resize (1), long (2), short (3)."
            raise ArgumentError("type", self.type, msg)
        gravity = Gravity.try_parse(self.gravity)
        if gravity is None:
            msg = "Expected a gravity value in [0, 8]."
            raise ArgumentError("gravity", self.gravity, msg)
        object.__setattr__(self, "type", type_)
        object.__setattr__(self, "gravity", gravity)
        if type_ in (ReducerType.CROP, ReducerType.RESIZE):
            _check_positive("width", self.width)
            _check_positive("height", self.height)
        else:
            _check_positive("landscape", self.landscape)
            _check_positive("portrait", self.portrait)

    def with_gravity(self, gravity: Gravity | ContentAlign | int) -> Self:
        """Return a copy with a new gravity.

        :raise ArgumentError: if gravity is not a known anchor
        """
        if isinstance(gravity, ContentAlign):
            gravity = gravity.to_gravity()
        return dataclasses.replace(self, gravity=gravity)  # type: ignore[arg-type]

    # ===============================================================================
    #   geometry
    # ===============================================================================

    def _compute_crop(self, size: Size) -> Reduction:
        """Fill width x height. Scale so one side matches, then crop the other."""
        target_w, target_h = self.width, self.height
        if target_w > size.width or target_h > size.height:
            _ = size.reduce_to_max_size(Size(target_w, target_h))
            return Reduction(size)
        width_ratio = target_w / size.width
        height_ratio = target_h / size.height
        if height_ratio > width_ratio:
            # height fits exactly, width overshoots
            _ = size.reduce_to_max_size(Size(size.width, target_h))
        elif width_ratio > height_ratio:
            _ = size.reduce_to_max_size(Size(target_w, size.height))
        else:
            _ = size.reduce_to_max_size(Size(target_w, target_h))
            return Reduction(size)
        crop = get_crop_rect(size, target_w, target_h, self.gravity)
        if crop.size == size:
            return Reduction(size)
        return Reduction(size, crop)

    def compute(self, size: Size) -> Reduction:
        """Compute the new size (and crop) for an image of a given size.

        :param size: the current image size. Not altered.
        :return: the scaled size and optional crop rectangle
        """
        size = size.copy()
        if self.type == ReducerType.CROP:
            return self._compute_crop(size)
        if self.type == ReducerType.RESIZE:
            _ = size.reduce_to_max_size(Size(self.width, self.height))
        elif self.type == ReducerType.LONG_SIDE:
            _ = size.reduce_max_side_to2(self.landscape, self.portrait)
        else:
            _ = size.reduce_min_side_to2(self.landscape, self.portrait)
        return Reduction(size)

    def run(self, picture: Picture) -> Picture:
        """Reduce a picture.

        :param picture: the source picture. Not altered.
        :return: a new picture with the reduced size
        """
        reduction = self.compute(picture.size)
        result = picture.resample(reduction.size)
        if reduction.crop is not None:
            result = result.crop_rect(reduction.crop)
        return result

    # ===============================================================================
    #   record and json
    # ===============================================================================

    def as_dict(self) -> dict[str, int]:
        """Return the serialized record. Every key is always present."""
        return {
            "type": int(self.type),
            "width": self.width,
            "height": self.height,
            "landscape": self.landscape,
            "portrait": self.portrait,
            "gravity": int(self.gravity),
        }

    def to_json(self) -> str:
        return json.dumps(self.as_dict())

    @classmethod
    def _from_record(cls, record: Mapping[str, Any]) -> Self | None:
        """Build a reducer from a record or return None if it cannot be built."""
        if record.get("type") is None:
            return None
        type_ = ReducerType.try_parse(record["type"])
        if type_ is None:
            return None
        values: dict[str, int] = {}
        for key in ("width", "height", "landscape", "portrait"):
            try:
                values[key] = int(record.get(key) or 0)
            except (TypeError, ValueError, OverflowError):
                return None
        gravity = Gravity.MIDDLE_CENTER
        if record.get("gravity") is not None:
            parsed = Gravity.try_parse(record["gravity"])
            if parsed is None:
                msg = f"Unknown gravity {record['gravity']!r}. Using middle-center."
                warnings.warn(msg, stacklevel=3)
            else:
                gravity = parsed
        try:
            return cls.create(type_, gravity=gravity, **values)
        except ArgumentError:
            return None

    @classmethod
    def try_parse(cls, value: object) -> ImageSizeReducer | None:
        """Read a reducer from any of its serialized forms.

        :param value: a reducer, a record mapping, a json object string, an xml
            element, or an xml string
        :return: a reducer or None if value is malformed, missing ``type``, or
            describes a reducer that would fail validation
        """
        if isinstance(value, ImageSizeReducer):
            return value
        if isinstance(value, Mapping):
            return cls._from_record(value)
        if isinstance(value, EtreeElement):
            return cls.try_parse_xml_element(value)
        if not isinstance(value, str):
            return None
        text = value.strip()
        if text.startswith("<"):
            return cls.from_xml(text)
        if not text.startswith("{"):
            return None
        try:
            record = json.loads(text)
        except json.JSONDecodeError:
            return None
        if not isinstance(record, Mapping):
            return None
        return cls._from_record(record)

    # ===============================================================================
    #   xml
    # ===============================================================================

    def to_xml_element(self, tag: str = DEFAULT_TAG) -> EtreeElement:
        """Create an xml element with a type-specific set of attributes.

        :param tag: the element tag
        :return: e.g. ``<ImageSizeReducer type="long" landscape="800" portrait="600"/>``
        """
        elem = etree.Element(tag)
        elem.set("type", self.type.xml_tag)
        for attribute in _TYPE_TO_ATTRIBUTES[self.type]:
            elem.set(attribute, str(int(getattr(self, attribute))))
        return elem

    def to_xml(self, tag: str = DEFAULT_TAG) -> str:
        return etree.tostring(self.to_xml_element(tag), encoding="unicode")

    @classmethod
    def try_parse_xml_element(cls, elem: EtreeElement) -> Self | None:
        """Read a reducer from an xml element. The tag is not checked.

        :return: a reducer or None
        """
        type_ = ReducerType.try_parse(elem.get("type"))
        if type_ is None:
            return None
        record: dict[str, Any] = {"type": type_}
        for attribute in _TYPE_TO_ATTRIBUTES[type_]:
            record[attribute] = elem.get(attribute)
        return cls._from_record(record)

    @classmethod
    def from_xml(cls, text: str | bytes) -> Self | None:
        """Read a reducer from an xml string.

        :return: a reducer or None if the text is not xml or not a reducer
        """
        if isinstance(text, str):
            # lxml refuses str input with an encoding declaration
            text = text.encode("utf-8")
        try:
            elem = etree.fromstring(text)
        except (etree.XMLSyntaxError, ValueError):
            return None
        return cls.try_parse_xml_element(elem)

    # ===============================================================================
    #   factories
    # ===============================================================================

    @classmethod
    def create_cropper(
        cls,
        width: int,
        height: int,
        gravity: Gravity | ContentAlign | int = Gravity.MIDDLE_CENTER,
    ) -> Self:
        """Fill exactly width x height, cropping the overflow at gravity."""
        if isinstance(gravity, ContentAlign):
            gravity = gravity.to_gravity()
        return cls(ReducerType.CROP, width, height, gravity=gravity)  # type: ignore[arg-type]

    @classmethod
    def create_resizer(cls, width: int, height: int) -> Self:
        """Fit inside width x height, keeping proportions."""
        return cls(ReducerType.RESIZE, width, height)

    @classmethod
    def create_long_side_reducer(cls, landscape: int, portrait: int) -> Self:
        """Reduce the long side. landscape for landscape and quadratic images."""
        return cls(ReducerType.LONG_SIDE, landscape=landscape, portrait=portrait)

    @classmethod
    def create_short_side_reducer(cls, landscape: int, portrait: int) -> Self:
        """Reduce the short side. landscape for landscape and quadratic images."""
        return cls(ReducerType.SHORT_SIDE, landscape=landscape, portrait=portrait)

    @classmethod
    def create(
        cls,
        type_: ReducerType | int | str,
        width: int = 0,
        height: int = 0,
        landscape: int = 0,
        portrait: int = 0,
        gravity: Gravity | ContentAlign | int | str = Gravity.MIDDLE_CENTER,
    ) -> Self:
        """Create any reducer type from the full field set.

        Fields the type does not use are stored as 0. An unknown gravity degrades to
        middle-center with a warning.

        :raise ArgumentError: if type is unknown or the used fields are invalid
        """
        parsed_type = ReducerType.try_parse(type_)
        if parsed_type is None:
            msg = "Expected one of crop (0), resize (1), long (2), short (3)."
            raise ArgumentError("type", type_, msg)
        if isinstance(gravity, ContentAlign):
            gravity = gravity.to_gravity()
        parsed_gravity = Gravity.try_parse(gravity)
        if parsed_gravity is None:
            msg = f"Unknown gravity {gravity!r}. Using middle-center."
            warnings.warn(msg, stacklevel=2)
            parsed_gravity = Gravity.MIDDLE_CENTER
        if parsed_type == ReducerType.CROP:
            return cls.create_cropper(width, height, parsed_gravity)
        if parsed_type == ReducerType.RESIZE:
            return cls.create_resizer(width, height)
        if parsed_type == ReducerType.LONG_SIDE:
            return cls.create_long_side_reducer(landscape, portrait)
        return cls.create_short_side_reducer(landscape, portrait)
