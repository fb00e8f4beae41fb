"""Full-page rasterization and lossy recompression."""

from __future__ import annotations

import io
import logging
from typing import List, Optional

from PIL import Image

from ..assembly import DocumentAssembler, stripped_metadata
from ..context import ProcessingContext, resolve_context
from ..engines.base import RenderedDocument
from ..exceptions import CompressionError, EncodingFailureError
from ..types import CompressionOptions, CompressionResult, EncodedPageImage, PageRasterJob

_LOGGER = logging.getLogger("pdfree.raster")

# Lowest quality used when full_page_mode is off.
QUALITY_FLOOR = 0.30


def effective_quality(options: CompressionOptions) -> float:
    quality = options.image_quality / 100.0
    if not options.full_page_mode:
        return max(quality, QUALITY_FLOOR)
    return quality


def jpeg_quality(quality: float) -> int:
    """Map a 0-1 quality to Pillow's 1-100 JPEG scale."""

    return min(100, max(1, int(round(quality * 100))))


def flatten(image: Image.Image, background=(255, 255, 255)) -> Image.Image:
    """Composite ``image`` onto an opaque canvas and return it as RGB."""

    canvas = Image.new("RGB", image.size, background)
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        canvas.paste(rgba, mask=rgba.getchannel("A"))
    else:
        canvas.paste(image.convert("RGB"))
    return canvas


def encode_jpeg(image: Image.Image, quality: float) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=jpeg_quality(quality))
    return buffer.getvalue()


class PageRasterizer:
    """Renders pages of an opened document into JPEG images."""

    def __init__(self, document: RenderedDocument) -> None:
        self.document = document

    def render(self, job: PageRasterJob) -> EncodedPageImage:
        """
        Render one page.

        Raises:
            EncodingFailureError: If the page has no area or the engine fails
        """

        try:
            width_pt, height_pt = self.document.page_size(job.page_index)
        except Exception as exc:
            raise EncodingFailureError(f"Page {job.page_index + 1}: cannot read size: {exc}") from exc
        if width_pt <= 0 or height_pt <= 0:
            raise EncodingFailureError(f"Page {job.page_index + 1} has zero size")

        try:
            surface = self.document.render_page(job.page_index, job.target_scale)
        except Exception as exc:
            raise EncodingFailureError(f"Page {job.page_index + 1}: render failed: {exc}") from exc
        if surface.width == 0 or surface.height == 0:
            raise EncodingFailureError(f"Page {job.page_index + 1} rendered to an empty surface")

        canvas = flatten(surface, job.color_background)
        try:
            data = encode_jpeg(canvas, job.output_quality)
        except (OSError, ValueError) as exc:
            raise EncodingFailureError(f"Page {job.page_index + 1}: JPEG encoding failed: {exc}") from exc

        return EncodedPageImage(
            data=data,
            width=canvas.width,
            height=canvas.height,
            quality=job.output_quality,
            page_width_pt=width_pt,
            page_height_pt=height_pt,
        )


def compress_pdf(
    data: bytes,
    options: Optional[CompressionOptions] = None,
    context: Optional[ProcessingContext] = None,
) -> CompressionResult:
    """
    Rebuild ``data`` from re-encoded page images.

    Pages that cannot be rendered are left out and listed in
    :attr:`CompressionResult.omitted_pages`.

    Raises:
        InvalidPDFError: If the rendering engine cannot open the document
        CompressionError: If not a single page could be produced
    """

    options = options or CompressionOptions()
    context = resolve_context(context)
    quality = effective_quality(options)
    engine = context.ensure_engine()

    assembler = DocumentAssembler()
    omitted: List[int] = []
    with engine.open(bytes(data)) as document:
        rasterizer = PageRasterizer(document)
        page_count = document.page_count
        for index in range(page_count):
            job = PageRasterJob(page_index=index, target_scale=options.scale, output_quality=quality)
            try:
                image = rasterizer.render(job)
            except EncodingFailureError as exc:
                _LOGGER.warning("Omitting page %d: %s", index + 1, exc)
                omitted.append(index + 1)
                continue
            finally:
                document.release_page(index)
            assembler.add_encoded_page(image)

    if assembler.page_count == 0:
        raise CompressionError("No page could be rendered; nothing to write")

    assembler.set_metadata(stripped_metadata(context.settings.producer))
    output = assembler.to_bytes()
    _LOGGER.info(
        "Compressed %d page(s) at %d dpi, quality %.2f: %d -> %d bytes",
        assembler.page_count,
        options.dpi,
        quality,
        len(data),
        len(output),
    )
    return CompressionResult(
        data=output,
        original_size=len(data),
        page_count=assembler.page_count,
        omitted_pages=omitted,
        options=options,
    )


__all__ = [
    "PageRasterizer",
    "QUALITY_FLOOR",
    "compress_pdf",
    "effective_quality",
    "encode_jpeg",
    "flatten",
    "jpeg_quality",
]
