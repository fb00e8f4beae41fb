"""
PDFree - PDF image extraction, recompression and conversion.

Every operation works on bytes in memory and returns bytes or a result
object; nothing is persisted between calls.

Quick Start:
    >>> from pdfree import extract_images
    >>> result = extract_images(open('input.pdf', 'rb').read())
    >>> open('images.zip', 'wb').write(result.archive)

Operations:
    - extract_images: Embedded images as a deduplicated ZIP archive
    - compress_pdf: Rebuild a document from re-encoded page images
    - convert_markup_to_pdf / convert_text_to_pdf: Paginate markup or text onto A4 pages
    - images_to_pdf: One page per image
    - convert_image_to_pdf / convert_files_to_pdf: Fit an image on A4, or join several files into one PDF
    - pdf_to_images: Every page rendered to PNG inside a ZIP archive
    - get_pdf_info: Page count, page sizes and metadata

Configuration:
    - Settings: Process-wide defaults
    - ProcessingContext: Settings plus the engines an operation uses

For CLI usage, use the 'pdfree' command after installation.
"""

# Operations
from pdfree.extraction.extractor import ImageExtractor, extract_images
from pdfree.raster.rasterizer import compress_pdf
from pdfree.convert import (
    convert_files_to_pdf,
    convert_image_to_pdf,
    convert_markup_to_pdf,
    convert_text_to_pdf,
    images_to_pdf,
)
from pdfree.info import get_pdf_info, pdf_to_images

# Configuration
from pdfree.context import ProcessingContext
from pdfree.settings import DEFAULT_SETTINGS, Settings

# Data types
from pdfree.types import (
    ArchiveEntry,
    CompressionOptions,
    CompressionResult,
    ExtractionResult,
    PDFInfo,
)

# Exceptions
from pdfree.exceptions import (
    PDFreeError,
    InvalidPDFError,
    InvalidOptionsError,
    NoExtractableImagesError,
    CompressionError,
    ConversionError,
)

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Operations
    "ImageExtractor",
    "extract_images",
    "compress_pdf",
    "convert_markup_to_pdf",
    "convert_text_to_pdf",
    "convert_image_to_pdf",
    "convert_files_to_pdf",
    "images_to_pdf",
    "pdf_to_images",
    "get_pdf_info",
    # Configuration
    "ProcessingContext",
    "Settings",
    "DEFAULT_SETTINGS",
    # Data types
    "ArchiveEntry",
    "CompressionOptions",
    "CompressionResult",
    "ExtractionResult",
    "PDFInfo",
    # Exceptions
    "PDFreeError",
    "InvalidPDFError",
    "InvalidOptionsError",
    "NoExtractableImagesError",
    "CompressionError",
    "ConversionError",
    # Version info
    "__version__",
]
