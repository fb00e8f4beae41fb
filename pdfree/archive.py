"""Deterministic ZIP archive builder used to bundle multiple outputs."""

from __future__ import annotations

import io
import zipfile
from typing import Dict, List

# Fixed timestamp so identical inputs produce byte-identical archives.
_EPOCH = (1980, 1, 1, 0, 0, 0)


class ArchiveBuilder:
    """Collects named entries in insertion order and serializes them as ZIP."""

    def __init__(self) -> None:
        self._entries: Dict[str, bytes] = {}

    def add_entry(self, name: str, data: bytes) -> None:
        if name in self._entries:
            raise ValueError(f"Archive entry '{name}' already exists")
        self._entries[name] = bytes(data)

    def names(self) -> List[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def build(self) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for name, data in self._entries.items():
                info = zipfile.ZipInfo(name, date_time=_EPOCH)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = 0o644 << 16
                archive.writestr(info, data)
        return buffer.getvalue()


__all__ = ["ArchiveBuilder"]
