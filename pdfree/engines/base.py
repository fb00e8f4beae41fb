"""Rendering engine protocol used by the rasterizer and the fallback harvester."""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, List, Optional, Protocol, Tuple, Union

from PIL import Image


class PaintOp(IntEnum):
    """Paint operation codes reported by :meth:`RenderedDocument.operator_list`."""

    PAINT_JPEG_XOBJECT = 82
    PAINT_IMAGE_MASK_XOBJECT = 83
    PAINT_IMAGE_XOBJECT = 85
    PAINT_INLINE_IMAGE_XOBJECT = 86
    PAINT_IMAGE_XOBJECT_REPEAT = 88


IMAGE_PAINT_OPS = frozenset(
    {
        PaintOp.PAINT_JPEG_XOBJECT,
        PaintOp.PAINT_IMAGE_XOBJECT,
        PaintOp.PAINT_IMAGE_XOBJECT_REPEAT,
    }
)


@dataclass(frozen=True, slots=True)
class PaintOperation:
    code: int
    args: Tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class BitmapSurface:
    """A decoded image surface held by the engine."""

    image: Image.Image


@dataclass(frozen=True, slots=True)
class PixelBuffer:
    """Raw samples as the engine stores them; layout is inferred from length."""

    data: bytes
    width: int
    height: int


RasterPayload = Union[BitmapSurface, PixelBuffer]


class RenderedDocument:
    """A document opened by a rendering engine."""

    @property
    def page_count(self) -> int:
        raise NotImplementedError

    def page_size(self, index: int) -> Tuple[float, float]:
        """Return the page size in points at scale 1."""
        raise NotImplementedError

    def render_page(self, index: int, scale: float) -> Image.Image:
        """Render a page; uncovered areas may be transparent."""
        raise NotImplementedError

    def operator_list(self, index: int) -> List[PaintOperation]:
        raise NotImplementedError

    def lookup_object(self, index: int, name: str) -> Optional[RasterPayload]:
        """Return an already materialized per-page object, if any."""
        raise NotImplementedError

    def lookup_shared(self, name: str) -> Optional[RasterPayload]:
        """Return an already materialized document-wide object, if any."""
        raise NotImplementedError

    def resolve_object(self, index: int, name: str) -> "Future[Optional[RasterPayload]]":
        raise NotImplementedError

    def release_page(self, index: int) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def __enter__(self) -> "RenderedDocument":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class RenderingEngine(Protocol):
    """Protocol for engines that rasterize PDF pages."""

    def engine_id(self) -> str:
        """Short identifier used in logs."""

    def open(self, data: bytes) -> RenderedDocument:
        """Open a PDF from bytes. Raises :class:`~pdfree.exceptions.InvalidPDFError`."""


def completed_future(value: Optional[RasterPayload]) -> "Future[Optional[RasterPayload]]":
    future: "Future[Optional[RasterPayload]]" = Future()
    future.set_result(value)
    return future


__all__ = [
    "BitmapSurface",
    "IMAGE_PAINT_OPS",
    "PaintOp",
    "PaintOperation",
    "PixelBuffer",
    "RasterPayload",
    "RenderedDocument",
    "RenderingEngine",
    "completed_future",
]
