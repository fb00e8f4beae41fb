"""Stream decoding for raster image objects."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple, Union

from pypdf.filters import ASCII85Decode, ASCIIHexDecode, FlateDecode

from ..exceptions import SkippableObjectError, UnmatchedBufferError, UnsupportedBitDepthError
from ..types import ChannelLayout, DecodedPixelBuffer, PassthroughBytes, RasterObjectRecord

_LOGGER = logging.getLogger("pdfree.extraction")

DecodeOutput = Union[DecodedPixelBuffer, PassthroughBytes]

_DCT_FILTERS = {"DCTDecode", "DCT"}
_FLATE_FILTERS = {"FlateDecode", "Fl"}
# Text encodings that may wrap a flate stream.
_ASCII_FILTERS = {
    "ASCII85Decode": ASCII85Decode,
    "A85": ASCII85Decode,
    "ASCIIHexDecode": ASCIIHexDecode,
    "AHx": ASCIIHexDecode,
}


def normalise_filters(filter_obj: object) -> Tuple[str, ...]:
    """Return filter names in application order, stripped of the leading slash."""

    if filter_obj is None:
        return ()
    if isinstance(filter_obj, (list, tuple)):
        return tuple(_clean_name(item) for item in filter_obj)
    return (_clean_name(filter_obj),)


def _clean_name(name: object) -> str:
    raw = str(name)
    return raw[1:] if raw.startswith("/") else raw


def is_jpeg_chain(filters: Iterable[str]) -> bool:
    return any(name in _DCT_FILTERS for name in filters)


def is_flate_chain(filters: Tuple[str, ...]) -> bool:
    """True for an empty chain, or a flate chain optionally wrapped in ASCII encodings."""

    if not filters:
        return True
    if not any(name in _FLATE_FILTERS for name in filters):
        return False
    return all(name in _FLATE_FILTERS or name in _ASCII_FILTERS for name in filters)


def _apply_chain(data: bytes, filters: Tuple[str, ...], decode_parms: object) -> bytes:
    for name in filters:
        if name in _FLATE_FILTERS:
            data = FlateDecode.decode(data, decode_parms)
        else:
            data = _ASCII_FILTERS[name].decode(data)
        if isinstance(data, str):
            data = data.encode("latin-1")
    return data


def select_layout(
    sample_count: int, pixel_count: int, color_space_hint: str = ""
) -> Optional[ChannelLayout]:
    """Choose a channel layout for ``sample_count`` bytes covering ``pixel_count`` pixels.

    An exact length match always wins over the colour-space name; the name is
    only consulted when no length matches and the buffer is long enough.
    """

    if pixel_count <= 0:
        return None
    if sample_count == pixel_count * 3:
        return ChannelLayout.RGB
    if sample_count == pixel_count:
        return ChannelLayout.GRAY
    if sample_count == pixel_count * 4:
        return ChannelLayout.RGBA
    if "RGB" in color_space_hint and sample_count >= pixel_count * 3:
        return ChannelLayout.RGB
    if ("Gray" in color_space_hint or "Grey" in color_space_hint) and sample_count >= pixel_count:
        return ChannelLayout.GRAY
    return None


def interpret_samples(
    samples: bytes, width: int, height: int, color_space_hint: str = ""
) -> DecodedPixelBuffer:
    """Wrap raw 8-bit ``samples`` as a :class:`DecodedPixelBuffer`."""

    if width <= 0 or height <= 0:
        raise SkippableObjectError(f"Invalid image dimensions {width}x{height}")
    pixel_count = width * height
    layout = select_layout(len(samples), pixel_count, color_space_hint)
    if layout is None:
        raise UnmatchedBufferError(
            f"{len(samples)} bytes do not fit a {width}x{height} RGB, Gray or RGBA image"
        )
    expected = pixel_count * layout.components
    return DecodedPixelBuffer(
        width=width,
        height=height,
        channel_layout=layout,
        samples=bytes(samples[:expected]),
    )


def decode(record: RasterObjectRecord) -> DecodeOutput:
    """Decode ``record`` into pixels, or hand back bytes that need no decoding.

    Raises :class:`~pdfree.exceptions.SkippableObjectError` (or a subclass)
    when the record cannot be used.
    """

    filters = record.filter_chain
    if is_jpeg_chain(filters):
        return PassthroughBytes(record.raw_bytes, "jpg")
    if not is_flate_chain(filters):
        _LOGGER.debug("Storing %s with unknown filters %s as raw bytes", record.name, filters)
        return PassthroughBytes(record.raw_bytes, "bin")

    if record.bits_per_component != 8:
        raise UnsupportedBitDepthError(record.bits_per_component)

    data = record.raw_bytes
    if filters:
        try:
            data = _apply_chain(data, filters, record.decode_parms)
        except Exception as exc:
            raise SkippableObjectError(f"Failed to inflate {record.name or 'image'}: {exc}") from exc

    return interpret_samples(data, record.width, record.height, record.color_space_hint)


__all__ = [
    "DecodeOutput",
    "decode",
    "interpret_samples",
    "is_flate_chain",
    "is_jpeg_chain",
    "normalise_filters",
    "select_layout",
]
