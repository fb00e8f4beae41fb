"""Walk page resource dictionaries for image XObjects."""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from pypdf import PdfReader
from pypdf.generic import DictionaryObject, IndirectObject, NameObject, StreamObject

from ..types import Provenance, RasterObjectRecord
from .decoder import normalise_filters

_LOGGER = logging.getLogger("pdfree.extraction")


def walk(reader: PdfReader) -> Iterator[RasterObjectRecord]:
    """Yield image records for every page, in page then resource order."""

    for index in range(len(reader.pages)):
        yield from walk_page(reader, index)


def walk_page(reader: PdfReader, index: int) -> List[RasterObjectRecord]:
    page = reader.pages[index]
    resources = _resolve(page.get(NameObject("/Resources")))
    if not isinstance(resources, DictionaryObject):
        return []
    xobjects = _resolve(resources.get(NameObject("/XObject")))
    if not isinstance(xobjects, DictionaryObject):
        return []

    records: List[RasterObjectRecord] = []
    for name_obj, raw in xobjects.items():
        try:
            record = _to_record(_resolve(raw), str(name_obj), index)
        except Exception as exc:
            _LOGGER.debug("Skipping XObject %s on page %d: %s", name_obj, index + 1, exc)
            continue
        if record is not None:
            records.append(record)
    return records


def _to_record(stream: object, name: str, page_index: int) -> Optional[RasterObjectRecord]:
    if not isinstance(stream, StreamObject) or not _is_image_xobject(stream):
        return None

    width = _positive_int(stream.get(NameObject("/Width")))
    height = _positive_int(stream.get(NameObject("/Height")))
    if width is None or height is None:
        return None

    color_space = _resolve(stream.get(NameObject("/ColorSpace")))
    bits = _resolve(stream.get(NameObject("/BitsPerComponent")))
    raw = getattr(stream, "_data", None)
    data = bytes(raw) if raw is not None else stream.get_data()

    return RasterObjectRecord(
        width=width,
        height=height,
        color_space_hint=str(color_space) if color_space is not None else "",
        bits_per_component=int(bits) if bits is not None else 8,
        filter_chain=normalise_filters(_resolve(stream.get(NameObject("/Filter")))),
        raw_bytes=data,
        page_index=page_index,
        name=name,
        provenance=Provenance.RAW_OBJECT,
        decode_parms=_resolve(stream.get(NameObject("/DecodeParms"))),
    )


def _is_image_xobject(stream: StreamObject) -> bool:
    subtype = stream.get(NameObject("/Subtype"))
    return isinstance(subtype, NameObject) and subtype == NameObject("/Image")


def _positive_int(value: object) -> Optional[int]:
    value = _resolve(value)
    if value is None:
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if number <= 0 or number != int(number):
        return None
    return int(number)


def _resolve(obj: object) -> object:
    if isinstance(obj, IndirectObject):
        return obj.get_object()
    return obj


__all__ = ["walk", "walk_page"]
