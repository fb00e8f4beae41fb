"""Plugin exposing image extraction through the registry."""

from __future__ import annotations

from ..extraction.extractor import ImageExtractor
from ..pipeline import BaseTool, register_tool
from ..types import ExtractionResult
from ..utils import get_logger, read_bytes, write_bytes

LOGGER = get_logger("pdfree.tools.extract")


@register_tool("extract-images")
class ExtractImagesTool(BaseTool):
    name = "extract-images"

    def run(self) -> ExtractionResult:
        input_path = self.require("input_path")
        output_path = self.require("output_path")
        LOGGER.debug("Extracting images from %s to %s", input_path, output_path)

        result = ImageExtractor(self.context).extract(read_bytes(input_path))
        write_bytes(output_path, result.archive)
        self.context.resources["result"] = result
        return result
