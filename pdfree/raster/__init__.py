"""Page rasterization, recompression and pagination."""

from .pagination import slice_capture
from .rasterizer import PageRasterizer, compress_pdf, effective_quality

__all__ = ["PageRasterizer", "compress_pdf", "effective_quality", "slice_capture"]
