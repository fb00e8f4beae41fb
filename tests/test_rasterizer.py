from __future__ import annotations

import io

import pytest
from PIL import Image
from pypdf import PdfReader

from pdf_samples import FakeDocument, FakeEngine, build_blank_pdf
from pdfree.context import ProcessingContext
from pdfree.engines.pdfium_engine import PdfiumEngine
from pdfree.exceptions import CompressionError, EncodingFailureError, InvalidOptionsError
from pdfree.raster.rasterizer import (
    QUALITY_FLOOR,
    PageRasterizer,
    compress_pdf,
    effective_quality,
    jpeg_quality,
)
from pdfree.types import CompressionOptions, PageRasterJob


@pytest.mark.parametrize(
    ("quality", "full_page", "expected"),
    [
        (10, False, QUALITY_FLOOR),
        (29, False, QUALITY_FLOOR),
        (80, False, 0.8),
        (10, True, 0.1),
        (1, True, 0.01),
    ],
)
def test_effective_quality(quality: int, full_page: bool, expected: float) -> None:
    options = CompressionOptions(image_quality=quality, full_page_mode=full_page)
    assert effective_quality(options) == pytest.approx(expected)


def test_quality_floor_holds_for_every_setting() -> None:
    for quality in range(1, 101):
        assert effective_quality(CompressionOptions(image_quality=quality, full_page_mode=False)) >= 0.30


def test_jpeg_quality_mapping() -> None:
    assert jpeg_quality(0.3) == 30
    assert jpeg_quality(0.001) == 1
    assert jpeg_quality(1.0) == 100


@pytest.mark.parametrize("options", [{"image_quality": 0}, {"image_quality": 101}, {"dpi": 35}, {"dpi": 601}])
def test_compression_options_validated(options: dict) -> None:
    with pytest.raises(InvalidOptionsError):
        CompressionOptions(**options)


def test_scale_follows_dpi() -> None:
    assert CompressionOptions(dpi=144).scale == pytest.approx(2.0)


def test_render_composites_transparency_onto_white() -> None:
    document = FakeDocument([(100, 50)])
    job = PageRasterJob(page_index=0, target_scale=1.5, output_quality=0.9)

    image = PageRasterizer(document).render(job)

    assert (image.width, image.height) == (150, 75)
    assert (image.page_width_pt, image.page_height_pt) == (100, 50)
    decoded = Image.open(io.BytesIO(image.data))
    assert decoded.format == "JPEG"
    assert all(channel > 245 for channel in decoded.convert("RGB").getpixel((75, 37)))


def test_render_keeps_opaque_content() -> None:
    document = FakeDocument([(40, 40)], fill=(0, 0, 255, 255))
    image = PageRasterizer(document).render(PageRasterJob(0, 1.0, 0.9))

    red, green, blue = Image.open(io.BytesIO(image.data)).convert("RGB").getpixel((20, 20))
    assert blue > 200 and red < 50 and green < 50


def test_zero_size_page_fails() -> None:
    with pytest.raises(EncodingFailureError):
        PageRasterizer(FakeDocument([(0, 100)])).render(PageRasterJob(0, 1.0, 0.5))


def test_engine_error_becomes_encoding_failure() -> None:
    with pytest.raises(EncodingFailureError):
        PageRasterizer(FakeDocument([(10, 10)], failing_pages=[0])).render(PageRasterJob(0, 1.0, 0.5))


def test_compress_omits_pages_that_fail() -> None:
    document = FakeDocument([(100, 100), (300, 200), (100, 100)], failing_pages=[1])

    result = compress_pdf(build_blank_pdf(3), CompressionOptions(dpi=72), _context(document))

    assert result.page_count == 2
    assert result.omitted_pages == [2]
    assert document.released == [0, 1, 2]
    assert len(PdfReader(io.BytesIO(result.data)).pages) == 2


def test_compress_without_any_page_raises() -> None:
    document = FakeDocument([(100, 100)], failing_pages=[0])

    with pytest.raises(CompressionError):
        compress_pdf(build_blank_pdf(1), CompressionOptions(), _context(document))


def test_compress_preserves_page_geometry_and_strips_metadata() -> None:
    source = build_blank_pdf(2, metadata={"/Title": "Secret", "/Author": "Someone", "/Keywords": "a, b"})
    document = FakeDocument([(300, 400), (200, 100)])

    result = compress_pdf(source, CompressionOptions(image_quality=40, dpi=100), _context(document))

    reader = PdfReader(io.BytesIO(result.data))
    sizes = [(float(page.mediabox.width), float(page.mediabox.height)) for page in reader.pages]
    assert sizes == [(300.0, 400.0), (200.0, 100.0)]
    metadata = reader.metadata
    assert metadata.get("/Title") == ""
    assert metadata.get("/Author") == ""
    assert metadata.get("/Keywords") == ""
    assert metadata.get("/Producer") == "PDFree"
    assert metadata.get("/Creator") == "PDFree"
    assert result.original_size == len(source)
    assert document.closed


def test_compress_embeds_jpeg_at_capture_resolution() -> None:
    document = FakeDocument([(72, 36)])

    result = compress_pdf(build_blank_pdf(1), CompressionOptions(dpi=144), _context(document))

    page = PdfReader(io.BytesIO(result.data)).pages[0]
    image = page["/Resources"]["/XObject"]["/Im0"].get_object()
    assert image["/Filter"] == "/DCTDecode"
    assert (image["/Width"], image["/Height"]) == (144, 72)


def test_compress_with_pdfium_engine() -> None:
    source = build_blank_pdf(2, size=(144, 72))
    context = ProcessingContext(engine=PdfiumEngine())

    result = compress_pdf(source, CompressionOptions(image_quality=30, dpi=72), context)

    reader = PdfReader(io.BytesIO(result.data))
    assert len(reader.pages) == 2
    assert float(reader.pages[0].mediabox.width) == pytest.approx(144)
    assert result.omitted_pages == []


def _context(document: FakeDocument):
    return ProcessingContext(engine=FakeEngine(document))
