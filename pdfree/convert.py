"""Conversions into PDF: markup, plain text and standalone images."""

from __future__ import annotations

import io
import logging
from typing import Optional, Sequence, Tuple

from PIL import Image, UnidentifiedImageError
from pypdf import PdfReader, PdfWriter
from pypdf.generic import IndirectObject

from .assembly import DocumentAssembler, fit_box
from .context import ProcessingContext, resolve_context
from .exceptions import ConversionError
from .markup.text import is_monospace_source, text_to_markup
from .raster.pagination import slice_capture
from .raster.rasterizer import encode_jpeg, flatten
from .utils import file_extension

_LOGGER = logging.getLogger("pdfree.convert")

_VERBATIM_JPEG_MODES = {"RGB": False, "L": True}

IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "bmp", "webp", "tif", "tiff"}
MARKUP_EXTENSIONS = {"html", "htm"}


def convert_markup_to_pdf(markup: str, context: Optional[ProcessingContext] = None) -> bytes:
    """
    Lay out ``markup`` on A4 pages and return the PDF bytes.

    The content is captured once at the configured capture scale, then cut
    into page-height slices placed full-bleed on each page.
    """

    context = resolve_context(context)
    settings = context.settings
    scale = settings.capture_scale
    capture = context.ensure_capture().capture(
        markup, settings.page_width_px, scale, settings.page_padding_px
    )
    pages = slice_capture(
        capture,
        settings.page_width_px * scale,
        settings.page_height_px * scale,
        settings.markup_quality,
        page_width_pt=settings.page_width_pt,
        page_height_pt=settings.page_height_pt,
    )

    assembler = DocumentAssembler()
    for page in pages:
        assembler.add_encoded_page(page)
    _LOGGER.info("Converted markup into %d page(s)", assembler.page_count)
    return assembler.to_bytes()


def convert_text_to_pdf(
    text: str, monospace: bool = False, context: Optional[ProcessingContext] = None
) -> bytes:
    return convert_markup_to_pdf(text_to_markup(text, monospace), context)


def _embed_image(
    assembler: DocumentAssembler, data: bytes, position: int, quality: float
) -> Tuple[IndirectObject, int, int]:
    """Embed one encoded image; JPEG stays JPEG, everything else is stored losslessly."""

    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            width, height = image.size
            if image.format != "JPEG":
                return assembler.embed_pixels(image), width, height
            if image.mode in _VERBATIM_JPEG_MODES:
                grayscale = _VERBATIM_JPEG_MODES[image.mode]
                return assembler.embed_jpeg(bytes(data), width, height, grayscale=grayscale), width, height
            payload = encode_jpeg(flatten(image), quality)
            return assembler.embed_jpeg(payload, width, height), width, height
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ConversionError(f"Image {position} could not be read: {exc}") from exc


def images_to_pdf(images: Sequence[bytes], context: Optional[ProcessingContext] = None) -> bytes:
    """
    Build a PDF with one page per image, each page sized to its image.

    JPEG images in RGB or grayscale are embedded as they are, other JPEGs are
    re-encoded. Every other format is stored losslessly with its transparency
    kept as a soft mask.

    Raises:
        ConversionError: If no image is given or one cannot be read
    """

    if not images:
        raise ConversionError("No images to convert")
    context = resolve_context(context)
    assembler = DocumentAssembler()

    for position, data in enumerate(images, start=1):
        image_ref, width, height = _embed_image(assembler, data, position, context.settings.image_quality)
        assembler.add_placed_page(image_ref, float(width), float(height))

    return assembler.to_bytes()


def convert_image_to_pdf(data: bytes, context: Optional[ProcessingContext] = None) -> bytes:
    """Place one image on an A4 page, scaled to fit and centred."""

    context = resolve_context(context)
    settings = context.settings
    assembler = DocumentAssembler()
    image_ref, width, height = _embed_image(assembler, data, 1, settings.image_quality)
    box = fit_box(width, height, settings.page_width_pt, settings.page_height_pt)
    assembler.add_placed_page(image_ref, settings.page_width_pt, settings.page_height_pt, box)
    return assembler.to_bytes()


def convert_file_to_pdf(
    name: str,
    data: bytes,
    context: Optional[ProcessingContext] = None,
    *,
    monospace: Optional[bool] = None,
    encoding: str = "utf-8",
) -> bytes:
    """
    Convert one file to PDF, choosing the route from its extension.

    Images are fitted onto an A4 page, HTML is laid out as markup and anything
    else is read as plain text (monospaced for data and log formats unless
    ``monospace`` says otherwise).
    """

    extension = file_extension(name)
    if extension in IMAGE_EXTENSIONS:
        _LOGGER.debug("Placing image %s on a page", name)
        return convert_image_to_pdf(data, context)

    text = bytes(data).decode(encoding, errors="replace")
    if extension in MARKUP_EXTENSIONS:
        _LOGGER.debug("Converting markup %s", name)
        return convert_markup_to_pdf(text, context)

    if monospace is None:
        monospace = is_monospace_source(name)
    _LOGGER.debug("Converting text %s (monospace=%s)", name, monospace)
    return convert_text_to_pdf(text, monospace, context)


def convert_files_to_pdf(
    files: Sequence[Tuple[str, bytes]],
    context: Optional[ProcessingContext] = None,
    *,
    monospace: Optional[bool] = None,
    encoding: str = "utf-8",
) -> bytes:
    """
    Convert each ``(name, data)`` pair and join the results into one PDF.

    Raises:
        ConversionError: If ``files`` is empty
    """

    if not files:
        raise ConversionError("No files to convert")
    parts = [
        convert_file_to_pdf(name, data, context, monospace=monospace, encoding=encoding)
        for name, data in files
    ]
    if len(parts) == 1:
        return parts[0]

    writer = PdfWriter()
    for (name, _), part in zip(files, parts):
        reader = PdfReader(io.BytesIO(part))
        for page in reader.pages:
            writer.add_page(page)
        _LOGGER.debug("Added %d page(s) from %s", len(reader.pages), name)
    buffer = io.BytesIO()
    writer.write(buffer)
    _LOGGER.info("Combined %d file(s) into %d page(s)", len(files), len(writer.pages))
    return buffer.getvalue()


__all__ = [
    "IMAGE_EXTENSIONS",
    "MARKUP_EXTENSIONS",
    "convert_file_to_pdf",
    "convert_files_to_pdf",
    "convert_image_to_pdf",
    "convert_markup_to_pdf",
    "convert_text_to_pdf",
    "images_to_pdf",
]
