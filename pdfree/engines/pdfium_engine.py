"""pypdfium2 rendering engine."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import pypdfium2 as pdfium
import pypdfium2.raw as pdfium_c
from PIL import Image

from ..exceptions import InvalidPDFError
from .base import (
    BitmapSurface,
    PaintOp,
    PaintOperation,
    PixelBuffer,
    RasterPayload,
    RenderedDocument,
    RenderingEngine,
    completed_future,
)

_LOGGER = logging.getLogger("pdfree.engines.pdfium")

# Image objects nested in form XObjects are reported down to this depth.
MAX_FORM_DEPTH = 15

_TRANSPARENT = (255, 255, 255, 0)


class PdfiumDocument(RenderedDocument):
    """Wraps a :class:`pypdfium2.PdfDocument` with a per-page object cache."""

    def __init__(self, pdf: pdfium.PdfDocument) -> None:
        self._pdf = pdf
        self._pages: Dict[int, pdfium.PdfPage] = {}
        self._objects: Dict[int, Dict[str, RasterPayload]] = {}

    @property
    def page_count(self) -> int:
        return len(self._pdf)

    def _page(self, index: int) -> pdfium.PdfPage:
        if not 0 <= index < self.page_count:
            raise IndexError(f"Page index out of range: {index} (0..{self.page_count - 1})")
        page = self._pages.get(index)
        if page is None:
            page = self._pdf[index]
            self._pages[index] = page
        return page

    def page_size(self, index: int) -> Tuple[float, float]:
        width, height = self._page(index).get_size()
        return float(width), float(height)

    def render_page(self, index: int, scale: float) -> Image.Image:
        bitmap = self._page(index).render(scale=scale, fill_color=_TRANSPARENT)
        return bitmap.to_pil().copy()

    def operator_list(self, index: int) -> List[PaintOperation]:
        page = self._page(index)
        objects: Dict[str, RasterPayload] = {}
        operations: List[PaintOperation] = []
        image_objects = page.get_objects(
            filter=(pdfium_c.FPDF_PAGEOBJ_IMAGE,), max_depth=MAX_FORM_DEPTH
        )
        for position, obj in enumerate(image_objects):
            name = f"img_p{index + 1}_{position}"
            payload = self._materialize(obj)
            if payload is not None:
                objects[name] = payload
            operations.append(PaintOperation(PaintOp.PAINT_IMAGE_XOBJECT, (name,)))
        self._objects[index] = objects
        return operations

    @staticmethod
    def _materialize(obj: pdfium.PdfImage) -> Optional[RasterPayload]:
        try:
            bitmap = obj.get_bitmap(render=False)
            return BitmapSurface(bitmap.to_pil().copy())
        except pdfium.PdfiumError as exc:
            _LOGGER.debug("Bitmap unavailable for image object, reading samples: %s", exc)
        try:
            width, height = obj.get_size()
            data = obj.get_data(decode_simple=True)
            return PixelBuffer(bytes(data), int(width), int(height))
        except pdfium.PdfiumError as exc:
            _LOGGER.debug("Image object could not be materialized: %s", exc)
            return None

    def lookup_object(self, index: int, name: str) -> Optional[RasterPayload]:
        return self._objects.get(index, {}).get(name)

    def lookup_shared(self, name: str) -> Optional[RasterPayload]:
        # pdfium keeps no document-wide image cache.
        return None

    def resolve_object(self, index: int, name: str):
        # Every image is materialized by operator_list, so there is nothing left to wait for.
        return completed_future(self.lookup_object(index, name))

    def release_page(self, index: int) -> None:
        self._objects.pop(index, None)
        page = self._pages.pop(index, None)
        if page is not None:
            page.close()

    def close(self) -> None:
        for index in list(self._pages):
            self.release_page(index)
        self._objects.clear()
        self._pdf.close()


class PdfiumEngine(RenderingEngine):
    """Rendering engine backed by PDFium through :mod:`pypdfium2`."""

    def engine_id(self) -> str:
        return "pypdfium2"

    def open(self, data: bytes) -> PdfiumDocument:
        try:
            pdf = pdfium.PdfDocument(bytes(data))
        except pdfium.PdfiumError as exc:
            raise InvalidPDFError(f"Rendering engine could not open document: {exc}") from exc
        return PdfiumDocument(pdf)


__all__ = ["PdfiumDocument", "PdfiumEngine", "MAX_FORM_DEPTH"]
