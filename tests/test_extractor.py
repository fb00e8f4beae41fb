from __future__ import annotations

import io
import zipfile

import pytest
from PIL import Image

from pdf_samples import FakeDocument, FakeEngine, build_image_pdf, image_entry, noise, noise_bitmap, paint
from pdfree.exceptions import InvalidPDFError, NoExtractableImagesError
from pdfree.extraction.extractor import (
    DirectWalkStrategy,
    HarvestStrategy,
    ImageExtractor,
    extract_images,
)
from pdfree.types import Provenance


def _engine_for_third_page() -> FakeEngine:
    document = FakeDocument(
        [(200, 200)] * 3,
        operations={2: [paint("img_p3_0")]},
        objects={(2, "img_p3_0"): noise_bitmap(30, 20)},
    )
    return FakeEngine(document)


def _names(archive: bytes) -> list[str]:
    with zipfile.ZipFile(io.BytesIO(archive)) as bundle:
        return bundle.namelist()


def test_end_to_end_three_pages(three_page_pdf: bytes, context_factory) -> None:
    engine = _engine_for_third_page()

    result = ImageExtractor(context_factory(engine)).extract(three_page_pdf)

    assert result.image_count == 3
    assert [entry.name for entry in result.entries] == [
        "image_1_page1.png",
        "image_2_page2.png",
        "image_3_page3.png",
    ]
    assert _names(result.archive) == [entry.name for entry in result.entries]
    assert result.duplicates == 1
    assert result.strategies == {1: "direct-walk", 2: "direct-walk", 3: "harvest"}
    assert result.entries[2].provenance is Provenance.BITMAP
    assert engine.document.rendered == [(2, 2.0)]
    assert engine.document.closed


def test_archive_entries_decode_to_source_pixels(three_page_pdf: bytes, context_factory) -> None:
    result = ImageExtractor(context_factory(_engine_for_third_page())).extract(three_page_pdf)

    with zipfile.ZipFile(io.BytesIO(result.archive)) as bundle:
        first = Image.open(io.BytesIO(bundle.read("image_1_page1.png")))
        second = Image.open(io.BytesIO(bundle.read("image_2_page2.png")))
        third = Image.open(io.BytesIO(bundle.read("image_3_page3.png")))
        assert first.size == (100, 100)
        assert first.mode == "RGBA"
        assert second.size == (60, 40)
        assert third.size == (30, 20)


def test_document_scope_only_falls_back_when_walk_finds_nothing(three_page_pdf: bytes, context_factory) -> None:
    engine = _engine_for_third_page()

    result = ImageExtractor(context_factory(engine, fallback_scope="document")).extract(three_page_pdf)

    assert [entry.name for entry in result.entries] == ["image_1_page1.png", "image_2_page2.png"]
    assert engine.opened == 0


def test_document_scope_harvests_when_nothing_is_walkable(blank_pdf: bytes, context_factory) -> None:
    document = FakeDocument([(200, 200)] * 2, operations={1: [paint("a")]}, objects={(1, "a"): noise_bitmap()})

    result = ImageExtractor(context_factory(FakeEngine(document), fallback_scope="document")).extract(blank_pdf)

    assert [entry.name for entry in result.entries] == ["image_1_page2.png"]
    assert result.strategies == {2: "harvest"}


def test_page_of_duplicates_does_not_fall_back(context_factory) -> None:
    rgb = noise(20 * 20 * 3, seed=3)
    data = build_image_pdf([[image_entry(20, 20, rgb)], [image_entry(20, 20, rgb)]])
    document = FakeDocument([(200, 200)] * 2, operations={1: [paint("a")]}, objects={(1, "a"): noise_bitmap()})
    engine = FakeEngine(document)

    result = ImageExtractor(context_factory(engine)).extract(data)

    assert [entry.name for entry in result.entries] == ["image_1_page1.png"]
    assert result.strategies == {1: "direct-walk", 2: "direct-walk"}
    assert engine.opened == 0


def test_no_images_raises_with_hint(blank_pdf: bytes, context_factory) -> None:
    engine = FakeEngine(FakeDocument([(200, 200)] * 2))

    with pytest.raises(NoExtractableImagesError) as excinfo:
        ImageExtractor(context_factory(engine)).extract(blank_pdf)

    assert "pdf-to-images" in str(excinfo.value)
    assert engine.document.released == [0, 1]


def test_jpeg_streams_stored_verbatim(context_factory) -> None:
    buffer = io.BytesIO()
    Image.new("RGB", (16, 16), (200, 10, 10)).save(buffer, format="JPEG")
    jpeg = buffer.getvalue()
    source = image_entry(16, 16, jpeg, filters=("/DCTDecode",))

    result = ImageExtractor(context_factory(FakeEngine())).extract(build_image_pdf([[source]]))

    assert [entry.name for entry in result.entries] == ["image_1_page1.jpg"]
    with zipfile.ZipFile(io.BytesIO(result.archive)) as bundle:
        assert bundle.read("image_1_page1.jpg") == jpeg


def test_unsupported_objects_are_skipped_not_fatal(context_factory) -> None:
    data = build_image_pdf(
        [[image_entry(4, 4, bytes(2), bits=1), image_entry(4, 4, noise(48, seed=9))]]
    )

    result = ImageExtractor(context_factory(FakeEngine())).extract(data)

    assert [entry.name for entry in result.entries] == ["image_1_page1.png"]
    assert result.skipped == 1


def test_tiny_harvested_images_are_discarded(blank_pdf: bytes, context_factory) -> None:
    document = FakeDocument(
        [(200, 200)] * 2,
        operations={0: [paint("dot")]},
        objects={(0, "dot"): noise_bitmap(1, 1)},
    )

    with pytest.raises(NoExtractableImagesError):
        ImageExtractor(context_factory(FakeEngine(document))).extract(blank_pdf)


def test_broken_operand_keeps_the_rest_of_the_page(blank_pdf: bytes, context_factory) -> None:
    document = FakeDocument(
        [(200, 200)] * 2,
        operations={0: [paint("good1"), paint("broken"), paint("good2")]},
        objects={(0, "good1"): noise_bitmap(seed=1), (0, "good2"): noise_bitmap(seed=2)},
        broken=["broken"],
    )

    result = ImageExtractor(context_factory(FakeEngine(document))).extract(blank_pdf)

    assert [entry.name for entry in result.entries] == ["image_1_page1.png", "image_2_page1.png"]
    assert result.strategies == {1: "harvest"}


def test_unparseable_document_is_harvested(context_factory) -> None:
    document = FakeDocument([(100, 100)], operations={0: [paint("a")]}, objects={(0, "a"): noise_bitmap()})

    result = extract_images(b"garbage", context_factory(FakeEngine(document)))

    assert [entry.name for entry in result.entries] == ["image_1_page1.png"]


def test_unopenable_document_raises_invalid_pdf(context_factory) -> None:
    with pytest.raises(InvalidPDFError):
        extract_images(b"garbage", context_factory(FakeEngine(fail=True)))


def test_custom_strategy_order(three_page_pdf: bytes, context_factory) -> None:
    engine = _engine_for_third_page()
    extractor = ImageExtractor(context_factory(engine), strategies=[DirectWalkStrategy()])

    result = extractor.extract(three_page_pdf)

    assert result.image_count == 2
    assert engine.opened == 0
    assert [type(strategy) for strategy in ImageExtractor(context_factory(engine)).strategies] == [
        DirectWalkStrategy,
        HarvestStrategy,
    ]
