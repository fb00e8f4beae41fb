"""Process-wide configuration for PDFree."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Literal

from .exceptions import InvalidOptionsError

FallbackScope = Literal["page", "document"]

_SCOPES = ("page", "document")


@dataclass(frozen=True, slots=True)
class Settings:
    """
    Defaults shared by every operation.

    Built once at startup and never mutated; use :meth:`with_overrides` to
    derive a variant.

    Attributes:
        resolve_timeout: Seconds to wait for an asynchronously resolved image operand
        harvest_render_scale: Scale used when rendering a page to materialize its images
        fingerprint_sample_size: Leading bytes folded into a content fingerprint
        min_harvested_png_bytes: Harvested PNGs at or below this size are discarded
        fallback_scope: ``"page"`` tries strategies per page, ``"document"`` only
            falls back when the direct walk found nothing in the whole document
        producer: Producer/Creator written into rebuilt documents
        page_width_px: Layout width of a markup page in CSS pixels
        page_height_px: Layout height of a markup page in CSS pixels
        page_padding_px: Padding around markup content
        capture_scale: Device pixel ratio used for markup captures
        page_width_pt: Output page width in points for converted documents
        page_height_pt: Output page height in points for converted documents
        markup_quality: JPEG quality for converted markup pages
        image_quality: JPEG quality for re-encoded standalone images
    """

    resolve_timeout: float = 2.0
    harvest_render_scale: float = 2.0
    fingerprint_sample_size: int = 100
    min_harvested_png_bytes: int = 100
    fallback_scope: FallbackScope = "page"
    producer: str = "PDFree"
    page_width_px: int = 794
    page_height_px: int = 1123
    page_padding_px: int = 60
    capture_scale: int = 2
    page_width_pt: float = 595.0
    page_height_pt: float = 842.0
    markup_quality: float = 0.92
    image_quality: float = 0.9

    def __post_init__(self) -> None:
        if self.fallback_scope not in _SCOPES:
            raise InvalidOptionsError(
                f"fallback_scope must be one of {', '.join(_SCOPES)}, got {self.fallback_scope!r}"
            )
        if self.resolve_timeout <= 0:
            raise InvalidOptionsError("resolve_timeout must be positive")
        if self.fingerprint_sample_size <= 0:
            raise InvalidOptionsError("fingerprint_sample_size must be positive")

    def with_overrides(self, **changes: Any) -> "Settings":
        changes = {key: value for key, value in changes.items() if value is not None}
        return dataclasses.replace(self, **changes)


DEFAULT_SETTINGS = Settings()

__all__ = ["Settings", "DEFAULT_SETTINGS", "FallbackScope"]
