"""Plugins for page export and document information."""

from __future__ import annotations

from pathlib import Path

from ..info import get_pdf_info, pdf_to_images
from ..pipeline import BaseTool, register_tool
from ..types import PDFInfo
from ..utils import get_logger, read_bytes, write_bytes

LOGGER = get_logger("pdfree.tools.pages")


@register_tool("pdf-to-images")
class PdfToImagesTool(BaseTool):
    name = "pdf-to-images"

    def run(self) -> Path:
        input_path = self.require("input_path")
        output_path = self.require("output_path")
        scale = float(self.option("scale", 2.0))
        LOGGER.debug("Rendering pages of %s at scale %.2f", input_path, scale)
        archive = pdf_to_images(read_bytes(input_path), scale, self.context)
        destination = write_bytes(output_path, archive)
        self.context.resources["result"] = destination
        return destination


@register_tool("info")
class InfoTool(BaseTool):
    name = "info"

    def run(self) -> PDFInfo:
        info = get_pdf_info(read_bytes(self.require("input_path")))
        self.context.resources["result"] = info
        return info
