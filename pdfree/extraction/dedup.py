"""Content fingerprinting and duplicate suppression."""

from __future__ import annotations

from typing import Set

from ..types import ContentFingerprint, RasterObjectRecord

DEFAULT_SAMPLE_SIZE = 100


def sample_hash(data: bytes, sample_size: int = DEFAULT_SAMPLE_SIZE) -> int:
    """Signed 32-bit rolling hash (``h * 31 + b``) of the first ``sample_size`` bytes."""

    value = 0
    for byte in data[:sample_size]:
        value = (value * 31 + byte) & 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def fingerprint(record: RasterObjectRecord, sample_size: int = DEFAULT_SAMPLE_SIZE) -> ContentFingerprint:
    return ContentFingerprint(
        namespace=record.provenance.value,
        width=record.width,
        height=record.height,
        byte_length=len(record.raw_bytes),
        sample_hash=sample_hash(record.raw_bytes, sample_size),
    )


class Deduplicator:
    """Remembers fingerprints seen during one extraction run.

    Records sharing a fingerprint are treated as the same image even when
    their bytes differ beyond the sampled prefix.
    """

    def __init__(self, sample_size: int = DEFAULT_SAMPLE_SIZE) -> None:
        self.sample_size = sample_size
        self._seen: Set[ContentFingerprint] = set()

    def should_emit(self, record: RasterObjectRecord) -> bool:
        key = fingerprint(record, self.sample_size)
        if key in self._seen:
            return False
        self._seen.add(key)
        return True

    def reset(self) -> None:
        self._seen.clear()

    def __len__(self) -> int:
        return len(self._seen)


__all__ = ["Deduplicator", "fingerprint", "sample_hash", "DEFAULT_SAMPLE_SIZE"]
