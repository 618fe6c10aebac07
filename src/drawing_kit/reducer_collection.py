"""An ordered list of size reducers with json and xml serialization.

:author: Shay Hill
:created: 2024-12-31
"""

from __future__ import annotations

import json
import warnings
from collections.abc import Iterable, Mapping, MutableSequence
from typing import Any, overload

from lxml import etree
from lxml.etree import _Element as EtreeElement  # type: ignore

from drawing_kit.errors import ArgumentError
from drawing_kit.size_reducer import DEFAULT_TAG, ImageSizeReducer

DEFAULT_COLLECTION_TAG = "ImageSizeReducers"


def _check_reducer(value: object) -> ImageSizeReducer:
    if not isinstance(value, ImageSizeReducer):
        msg = "Only ImageSizeReducer instances can be stored."
        raise ArgumentError("value", value, msg)
    return value


class ImageSizeReducerCollection(MutableSequence[ImageSizeReducer]):
    """A list that only holds ImageSizeReducer instances."""

    def __init__(self, reducers: Iterable[ImageSizeReducer] = ()) -> None:
        self._reducers = [_check_reducer(x) for x in reducers]

    @overload
    def __getitem__(self, index: int) -> ImageSizeReducer: ...

    @overload
    def __getitem__(self, index: slice) -> ImageSizeReducerCollection: ...

    def __getitem__(
        self, index: int | slice
    ) -> ImageSizeReducer | ImageSizeReducerCollection:
        if isinstance(index, slice):
            return ImageSizeReducerCollection(self._reducers[index])
        return self._reducers[index]

    def __setitem__(self, index: Any, value: Any) -> None:
        if isinstance(index, slice):
            self._reducers[index] = [_check_reducer(x) for x in value]
        else:
            self._reducers[index] = _check_reducer(value)

    def __delitem__(self, index: int | slice) -> None:
        del self._reducers[index]

    def __len__(self) -> int:
        return len(self._reducers)

    def insert(self, index: int, value: ImageSizeReducer) -> None:
        self._reducers.insert(index, _check_reducer(value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImageSizeReducerCollection):
            return NotImplemented
        return self._reducers == other._reducers

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._reducers!r})"

    # ===============================================================================
    #   serialization
    # ===============================================================================

    def as_list(self) -> list[dict[str, int]]:
        """Return the record of every reducer."""
        return [x.as_dict() for x in self._reducers]

    def to_json(self) -> str:
        return json.dumps(self.as_list())

    def to_xml_element(
        self, tag: str = DEFAULT_COLLECTION_TAG, item_tag: str = DEFAULT_TAG
    ) -> EtreeElement:
        """Create an element with one child per reducer."""
        elem = etree.Element(tag)
        for reducer in self._reducers:
            elem.append(reducer.to_xml_element(item_tag))
        return elem

    def to_xml(
        self, tag: str = DEFAULT_COLLECTION_TAG, item_tag: str = DEFAULT_TAG
    ) -> str:
        return etree.tostring(self.to_xml_element(tag, item_tag), encoding="unicode")

    @classmethod
    def _from_items(cls, items: Iterable[object]) -> ImageSizeReducerCollection:
        """Parse every item. Warn about and skip items that are not reducers."""
        collection = cls()
        for item in items:
            if isinstance(item, EtreeElement) and not isinstance(item.tag, str):
                # comments and processing instructions
                continue
            reducer = ImageSizeReducer.try_parse(item)
            if reducer is None:
                msg = f"Skipping unreadable image size reducer {item!r}."
                warnings.warn(msg, stacklevel=3)
                continue
            collection.append(reducer)
        return collection

    @classmethod
    def parse(cls, value: object) -> ImageSizeReducerCollection:
        """Read reducers from any serialized collection form.

        :param value: an xml element (its children are the reducers), an xml
            string, a json string (an array of records, or a single record), or an
            iterable of records / reducers / xml elements
        :return: a collection, possibly empty. Unreadable items are skipped.
        """
        if isinstance(value, ImageSizeReducerCollection):
            return cls(value)
        if isinstance(value, EtreeElement):
            return cls._from_items(value)
        if isinstance(value, (str, bytes)):
            return cls._parse_text(value)
        if isinstance(value, Mapping):
            return cls._from_items([value])
        if isinstance(value, Iterable):
            return cls._from_items(value)
        return cls()

    @classmethod
    def _parse_text(cls, text: str | bytes) -> ImageSizeReducerCollection:
        """Parse an xml or json document. Bytes are handed to lxml or json undecoded."""
        data_bytes = text.encode("utf-8") if isinstance(text, str) else text
        data_bytes = data_bytes.strip()
        if data_bytes.startswith(b"<"):
            try:
                elem = etree.fromstring(data_bytes)
            except (etree.XMLSyntaxError, ValueError):
                return cls()
            if elem.tag == DEFAULT_TAG:
                return cls._from_items([elem])
            return cls._from_items(elem)
        try:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors
            data = json.loads(data_bytes)
        except ValueError:
            return cls()
        if isinstance(data, Mapping):
            return cls._from_items([data])
        if isinstance(data, list):
            return cls._from_items(data)
        return cls()
