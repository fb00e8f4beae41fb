"""Plugin exposing full-page recompression through the registry."""

from __future__ import annotations

from ..raster.rasterizer import compress_pdf
from ..pipeline import BaseTool, register_tool
from ..types import CompressionOptions, CompressionResult
from ..utils import get_logger, read_bytes, write_bytes

LOGGER = get_logger("pdfree.tools.compress")


@register_tool("compress")
class CompressTool(BaseTool):
    name = "compress"

    def run(self) -> CompressionResult:
        input_path = self.require("input_path")
        output_path = self.require("output_path")
        options = CompressionOptions(
            image_quality=self.option("image_quality", 50),
            dpi=self.option("dpi", 150),
            full_page_mode=self.option("full_page_mode", True),
        )
        LOGGER.debug(
            "Compressing %s to %s at quality %d, %d dpi",
            input_path,
            output_path,
            options.image_quality,
            options.dpi,
        )
        result = compress_pdf(read_bytes(input_path), options, self.context)
        write_bytes(output_path, result.data)
        self.context.resources["result"] = result
        return result
