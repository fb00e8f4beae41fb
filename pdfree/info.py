"""Document inspection and page export."""

from __future__ import annotations

import io
import logging
from typing import Optional

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from .archive import ArchiveBuilder
from .context import ProcessingContext, resolve_context
from .exceptions import InvalidOptionsError, InvalidPDFError
from .raster.rasterizer import flatten
from .types import PDFInfo

_LOGGER = logging.getLogger("pdfree.info")


def _text(value: object) -> Optional[str]:
    return str(value) if value is not None else None


def get_pdf_info(data: bytes) -> PDFInfo:
    """
    Report page count, page sizes and metadata of ``data``.

    Raises:
        InvalidPDFError: If the document cannot be parsed
    """

    try:
        reader = PdfReader(io.BytesIO(data))
        encrypted = reader.is_encrypted
        if encrypted:
            reader.decrypt("")
        pages = [(float(page.mediabox.width), float(page.mediabox.height)) for page in reader.pages]
        metadata = reader.metadata
    except (PdfReadError, ValueError, OSError) as exc:
        raise InvalidPDFError(f"Cannot read PDF: {exc}") from exc

    return PDFInfo(
        num_pages=len(pages),
        file_size=len(data),
        pages=pages,
        title=_text(metadata.title) if metadata else None,
        author=_text(metadata.author) if metadata else None,
        subject=_text(metadata.subject) if metadata else None,
        creator=_text(metadata.creator) if metadata else None,
        producer=_text(metadata.producer) if metadata else None,
        is_encrypted=encrypted,
    )


def pdf_to_images(
    data: bytes, scale: float = 2.0, context: Optional[ProcessingContext] = None
) -> bytes:
    """Render every page to PNG and bundle them as ``page_{n}.png`` in a ZIP archive."""

    if scale <= 0:
        raise InvalidOptionsError(f"Scale must be positive, got {scale}")
    context = resolve_context(context)
    archive = ArchiveBuilder()
    with context.ensure_engine().open(bytes(data)) as document:
        for index in range(document.page_count):
            try:
                surface = document.render_page(index, scale)
            finally:
                document.release_page(index)
            buffer = io.BytesIO()
            flatten(surface).save(buffer, format="PNG")
            archive.add_entry(f"page_{index + 1}.png", buffer.getvalue())
    _LOGGER.info("Rendered %d page(s) at scale %.2f", len(archive), scale)
    return archive.build()


__all__ = ["get_pdf_info", "pdf_to_images"]
