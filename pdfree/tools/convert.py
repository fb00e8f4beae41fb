"""Plugins converting markup, text and images into PDF."""

from __future__ import annotations

from pathlib import Path

from ..convert import convert_files_to_pdf, images_to_pdf
from ..pipeline import BaseTool, register_tool
from ..utils import get_logger, read_bytes, write_bytes

LOGGER = get_logger("pdfree.tools.convert")


@register_tool("convert")
class ConvertTool(BaseTool):
    """Converts HTML, text or image files into one paginated PDF."""

    name = "convert"

    def run(self) -> Path:
        inputs = self.option("inputs") or [self.require("input_path")]
        output_path = self.require("output_path")
        files = [(Path(path).name, read_bytes(path)) for path in inputs]

        LOGGER.debug("Converting %d file(s) into %s", len(files), output_path)
        data = convert_files_to_pdf(
            files,
            self.context,
            monospace=self.option("monospace"),
            encoding=self.option("encoding", "utf-8"),
        )

        destination = write_bytes(output_path, data)
        self.context.resources["result"] = destination
        return destination


@register_tool("images-to-pdf")
class ImagesToPdfTool(BaseTool):
    name = "images-to-pdf"

    def run(self) -> Path:
        inputs = self.require("inputs")
        output_path = self.require("output_path")
        LOGGER.debug("Combining %d image(s) into %s", len(inputs), output_path)
        data = images_to_pdf([read_bytes(path) for path in inputs], self.context)
        destination = write_bytes(output_path, data)
        self.context.resources["result"] = destination
        return destination
