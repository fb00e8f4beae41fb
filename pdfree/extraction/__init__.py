"""Embedded image extraction."""

from .decoder import decode, interpret_samples, normalise_filters, select_layout
from .dedup import Deduplicator, fingerprint, sample_hash
from .extractor import (
    DirectWalkStrategy,
    ExtractionStrategy,
    HarvestStrategy,
    ImageExtractor,
    extract_images,
)
from .harvester import Harvester
from .walker import walk, walk_page

__all__ = [
    "Deduplicator",
    "DirectWalkStrategy",
    "ExtractionStrategy",
    "HarvestStrategy",
    "Harvester",
    "ImageExtractor",
    "decode",
    "extract_images",
    "fingerprint",
    "interpret_samples",
    "normalise_filters",
    "sample_hash",
    "select_layout",
    "walk",
    "walk_page",
]
