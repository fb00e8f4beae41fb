"""
Type definitions and dataclasses for PDFree.

This module defines the data structures passed between the extraction,
rasterization and pagination stages.
"""

from __future__ import annotations

import io
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple

from PIL import Image

from .exceptions import InvalidOptionsError


class Provenance(str, Enum):
    """Where a raster record came from; doubles as fingerprint namespace."""

    RAW_OBJECT = "raw-object"
    BITMAP = "bitmap"
    PIXELS = "pixels"


class ChannelLayout(str, Enum):
    RGB = "RGB"
    GRAY = "Gray"
    RGBA = "RGBA"

    @property
    def components(self) -> int:
        return {"RGB": 3, "Gray": 1, "RGBA": 4}[self.value]

    @property
    def pil_mode(self) -> str:
        return {"RGB": "RGB", "Gray": "L", "RGBA": "RGBA"}[self.value]


@dataclass(frozen=True, slots=True)
class RasterObjectRecord:
    """
    One raster object found in a document.

    Attributes:
        width: Width in samples
        height: Height in samples
        color_space_hint: Textual form of the declared colour space
        bits_per_component: Declared bit depth
        filter_chain: Filter names in application order, without the leading slash
        raw_bytes: Stored (still encoded) stream bytes
        page_index: Zero-based page the record was found on
        name: Resource or operand name
        provenance: Which extraction strategy produced the record
        decode_parms: Filter parameters, passed through to the flate decoder
    """

    width: int
    height: int
    color_space_hint: str
    bits_per_component: int
    filter_chain: Tuple[str, ...]
    raw_bytes: bytes
    page_index: int = 0
    name: str = ""
    provenance: Provenance = Provenance.RAW_OBJECT
    decode_parms: Any = None

    @property
    def page_number(self) -> int:
        return self.page_index + 1


@dataclass(frozen=True, slots=True)
class ContentFingerprint:
    namespace: str
    width: int
    height: int
    byte_length: int
    sample_hash: int

    def __str__(self) -> str:
        return f"{self.namespace}_{self.width}x{self.height}_{self.sample_hash}_{self.byte_length}"


@dataclass(frozen=True, slots=True)
class DecodedPixelBuffer:
    """Uncompressed 8-bit samples in a known channel layout."""

    width: int
    height: int
    channel_layout: ChannelLayout
    samples: bytes

    def to_image(self) -> Image.Image:
        """Return an RGBA image; a missing alpha channel becomes fully opaque."""

        image = Image.frombytes(
            self.channel_layout.pil_mode, (self.width, self.height), self.samples
        )
        return image.convert("RGBA")

    def to_png(self) -> bytes:
        buffer = io.BytesIO()
        self.to_image().save(buffer, format="PNG")
        return buffer.getvalue()


@dataclass(frozen=True, slots=True)
class PassthroughBytes:
    """Stream bytes stored verbatim; ``extension`` reflects what is known about them."""

    data: bytes
    extension: str


@dataclass(frozen=True, slots=True)
class PageRasterJob:
    page_index: int
    target_scale: float
    output_quality: float
    color_background: Tuple[int, int, int] = (255, 255, 255)


@dataclass(frozen=True, slots=True)
class EncodedPageImage:
    data: bytes
    width: int
    height: int
    quality: float = 0.0
    page_width_pt: float = 0.0
    page_height_pt: float = 0.0


@dataclass(frozen=True, slots=True)
class PaginationPlan:
    """How one tall capture is cut into fixed-height pages."""

    total_content_height: int
    page_height: int
    page_count: int

    @classmethod
    def for_content(cls, content_height: int, page_height: int) -> "PaginationPlan":
        if page_height <= 0:
            raise InvalidOptionsError(f"Page height must be positive, got {page_height}")
        content_height = max(0, int(content_height))
        page_count = max(1, math.ceil(content_height / page_height))
        return cls(total_content_height=content_height, page_height=page_height, page_count=page_count)

    def bands(self) -> Iterator[Tuple[int, int]]:
        """Yield ``(source_y, drawn_height)`` for each page in order."""

        for page in range(self.page_count):
            source_y = page * self.page_height
            drawn = min(self.page_height, self.total_content_height - source_y)
            yield source_y, max(0, drawn)


@dataclass(frozen=True)
class CompressionOptions:
    """
    Options controlling full-page recompression.

    Attributes:
        image_quality: JPEG quality in percent (1-100)
        dpi: Capture resolution (36-600)
        full_page_mode: ``True`` for pure lossy re-encoding, ``False`` keeps a quality floor
    """

    image_quality: int = 50
    dpi: int = 150
    full_page_mode: bool = True

    def __post_init__(self) -> None:
        if not 1 <= int(self.image_quality) <= 100:
            raise InvalidOptionsError(
                f"image_quality must be between 1 and 100, got {self.image_quality}"
            )
        if not 36 <= int(self.dpi) <= 600:
            raise InvalidOptionsError(f"dpi must be between 36 and 600, got {self.dpi}")

    @property
    def scale(self) -> float:
        return self.dpi / 72.0


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    name: str
    page_number: int
    size: int
    provenance: Provenance


@dataclass
class ExtractionResult:
    """
    Result of an image extraction run.

    Attributes:
        archive: ZIP archive bytes
        entries: Archive entries in emission order
        strategies: Strategy name that yielded, keyed by page number
        skipped: Number of records skipped as unusable
        duplicates: Number of records suppressed as duplicates
    """

    archive: bytes
    entries: List[ArchiveEntry] = field(default_factory=list)
    strategies: dict[int, str] = field(default_factory=dict)
    skipped: int = 0
    duplicates: int = 0

    @property
    def image_count(self) -> int:
        return len(self.entries)

    def __str__(self) -> str:
        return f"ExtractionResult(images={self.image_count}, duplicates={self.duplicates}, skipped={self.skipped})"


@dataclass
class CompressionResult:
    data: bytes
    original_size: int
    page_count: int
    omitted_pages: List[int] = field(default_factory=list)
    options: Optional[CompressionOptions] = None

    @property
    def compressed_size(self) -> int:
        return len(self.data)

    @property
    def bytes_saved(self) -> int:
        return max(self.original_size - self.compressed_size, 0)

    @property
    def compression_ratio(self) -> float:
        if self.original_size == 0:
            return 1.0
        return self.compressed_size / self.original_size


@dataclass
class PDFInfo:
    num_pages: int
    file_size: int
    pages: List[Tuple[float, float]] = field(default_factory=list)
    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    creator: Optional[str] = None
    producer: Optional[str] = None
    is_encrypted: bool = False
