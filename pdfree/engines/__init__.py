"""Rendering engine abstractions for PDFree."""

from .base import (
    IMAGE_PAINT_OPS,
    BitmapSurface,
    PaintOp,
    PaintOperation,
    PixelBuffer,
    RasterPayload,
    RenderedDocument,
    RenderingEngine,
    completed_future,
)
from .pdfium_engine import PdfiumDocument, PdfiumEngine

__all__ = [
    "BitmapSurface",
    "IMAGE_PAINT_OPS",
    "PaintOp",
    "PaintOperation",
    "PdfiumDocument",
    "PdfiumEngine",
    "PixelBuffer",
    "RasterPayload",
    "RenderedDocument",
    "RenderingEngine",
    "completed_future",
]
