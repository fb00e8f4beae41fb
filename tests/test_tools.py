from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest
from pypdf import PdfReader

from pdf_samples import FakeDocument, FakeEngine, noise_bitmap, paint
from pdfree.context import ProcessingContext
from pdfree.pipeline import BaseTool, ToolRegistry
from pdfree.tools import load_builtin_plugins, registry


def setup_module(module):
    load_builtin_plugins()


def test_builtin_tools_registered() -> None:
    assert set(registry.names()) >= {
        "extract-images",
        "compress",
        "convert",
        "images-to-pdf",
        "pdf-to-images",
        "info",
    }


def test_registry_rejects_duplicates_and_unknown_names() -> None:
    local = ToolRegistry()
    local.register("noop", BaseTool)
    with pytest.raises(ValueError):
        local.register("noop", BaseTool)
    with pytest.raises(KeyError):
        local.create("missing", ProcessingContext())


def test_tool_requires_its_config(tmp_path: Path) -> None:
    tool = registry.create("info", ProcessingContext())
    with pytest.raises(ValueError):
        tool.run()


def test_extract_images_tool_writes_archive(three_page_pdf: bytes, tmp_path: Path) -> None:
    source = tmp_path / "in.pdf"
    source.write_bytes(three_page_pdf)
    output = tmp_path / "out" / "images.zip"
    document = FakeDocument(
        [(200, 200)] * 3, operations={2: [paint("a")]}, objects={(2, "a"): noise_bitmap()}
    )
    context = ProcessingContext(engine=FakeEngine(document)).with_updates(
        config={"input_path": source, "output_path": output}
    )

    result = registry.create("extract-images", context).run()

    assert result.image_count == 3
    assert context.resources["result"] is result
    with zipfile.ZipFile(output) as bundle:
        assert len(bundle.namelist()) == 3


def test_compress_tool(sample_pdf: Path, tmp_path: Path) -> None:
    output = tmp_path / "small.pdf"
    document = FakeDocument([(200, 200)] * 3)
    context = ProcessingContext(engine=FakeEngine(document)).with_updates(
        config={"input_path": sample_pdf, "output_path": output, "image_quality": 20, "dpi": 72}
    )

    result = registry.create("compress", context).run()

    assert result.page_count == 3
    assert result.options.image_quality == 20
    assert len(PdfReader(str(output)).pages) == 3


def test_convert_tool_picks_layout_from_extension(tmp_path: Path) -> None:
    source = tmp_path / "data.json"
    source.write_text('{"key": "value"}', encoding="utf-8")
    output = tmp_path / "data.pdf"
    context = ProcessingContext().with_updates(config={"input_path": source, "output_path": output})

    destination = registry.create("convert", context).run()

    assert destination == output.resolve()
    assert len(PdfReader(str(output)).pages) == 1


def test_convert_tool_handles_html(tmp_path: Path) -> None:
    source = tmp_path / "page.html"
    source.write_text("<h1>Heading</h1><p>Body</p>", encoding="utf-8")
    output = tmp_path / "page.pdf"
    context = ProcessingContext().with_updates(config={"input_path": source, "output_path": output})

    registry.create("convert", context).run()

    reader = PdfReader(str(output))
    assert float(reader.pages[0].mediabox.width) == pytest.approx(595)


def test_images_to_pdf_tool(tmp_path: Path) -> None:
    from PIL import Image

    paths = []
    for index, color in enumerate([(255, 0, 0), (0, 255, 0)]):
        path = tmp_path / f"img{index}.png"
        Image.new("RGB", (30, 20), color).save(path)
        paths.append(path)
    output = tmp_path / "album.pdf"
    context = ProcessingContext().with_updates(config={"inputs": paths, "output_path": output})

    registry.create("images-to-pdf", context).run()

    assert len(PdfReader(str(output)).pages) == 2


def test_info_and_pdf_to_images_tools(sample_pdf: Path, tmp_path: Path) -> None:
    info = registry.create("info", ProcessingContext().with_updates(config={"input_path": sample_pdf})).run()
    assert info.num_pages == 3
    assert info.title == "Sample"

    output = tmp_path / "pages.zip"
    document = FakeDocument([(10, 10)] * 3)
    context = ProcessingContext(engine=FakeEngine(document)).with_updates(
        config={"input_path": sample_pdf, "output_path": output, "scale": 1.0}
    )
    registry.create("pdf-to-images", context).run()

    with zipfile.ZipFile(io.BytesIO(output.read_bytes())) as bundle:
        assert bundle.namelist() == ["page_1.png", "page_2.png", "page_3.png"]


def test_convert_tool_places_images_on_a4(tmp_path: Path) -> None:
    from PIL import Image

    source = tmp_path / "photo.png"
    Image.new("RGB", (300, 100), (0, 0, 255)).save(source)
    output = tmp_path / "photo.pdf"
    context = ProcessingContext().with_updates(config={"input_path": source, "output_path": output})

    registry.create("convert", context).run()

    reader = PdfReader(str(output))
    page = reader.pages[0]
    assert (float(page.mediabox.width), float(page.mediabox.height)) == (595.0, 842.0)
    image = page["/Resources"]["/XObject"]["/Im0"].get_object()
    assert (image["/Width"], image["/Height"]) == (300, 100)


def test_convert_tool_joins_several_inputs(tmp_path: Path) -> None:
    from PIL import Image

    text = tmp_path / "notes.txt"
    text.write_text("first\nsecond", encoding="utf-8")
    picture = tmp_path / "photo.jpg"
    Image.new("RGB", (20, 20), (200, 200, 0)).save(picture, format="JPEG")
    output = tmp_path / "bundle.pdf"
    context = ProcessingContext().with_updates(config={"inputs": [text, picture], "output_path": output})

    destination = registry.create("convert", context).run()

    assert destination == output.resolve()
    reader = PdfReader(str(output))
    assert len(reader.pages) == 2
    assert reader.pages[1]["/Resources"]["/XObject"]["/Im0"].get_object()["/Filter"] == "/DCTDecode"
