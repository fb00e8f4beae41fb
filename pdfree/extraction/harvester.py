"""Recover images that only exist once a page has been painted."""

from __future__ import annotations

import logging
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import List, Optional

from ..engines.base import (
    IMAGE_PAINT_OPS,
    BitmapSurface,
    PixelBuffer,
    RasterPayload,
    RenderedDocument,
)
from ..exceptions import ResolutionTimeoutError
from ..settings import DEFAULT_SETTINGS, Settings
from ..types import Provenance, RasterObjectRecord

_LOGGER = logging.getLogger("pdfree.extraction")


class Harvester:
    """Collects raster operands from a rendering engine's paint operations.

    Each page is rendered once so the engine materializes its image operands,
    then every distinct operand painted by an image operation is looked up in
    the per-page cache, the shared cache and finally resolved asynchronously
    with a bounded wait.
    """

    def __init__(self, settings: Settings = DEFAULT_SETTINGS) -> None:
        self.settings = settings

    def harvest(self, document: RenderedDocument) -> List[RasterObjectRecord]:
        records: List[RasterObjectRecord] = []
        for index in range(document.page_count):
            records.extend(self.harvest_page(document, index))
        return records

    def harvest_page(self, document: RenderedDocument, index: int) -> List[RasterObjectRecord]:
        records: List[RasterObjectRecord] = []
        try:
            document.render_page(index, self.settings.harvest_render_scale)
            seen = set()
            for operation in document.operator_list(index):
                if operation.code not in IMAGE_PAINT_OPS or not operation.args:
                    continue
                name = operation.args[0]
                if not isinstance(name, str) or name in seen:
                    continue
                seen.add(name)

                try:
                    payload = self._resolve(document, index, name)
                    record = _to_record(payload, index, name)
                except ResolutionTimeoutError as exc:
                    _LOGGER.debug("Page %d: %s (%s)", index + 1, exc, name)
                    continue
                except Exception as exc:
                    _LOGGER.debug("Page %d: operand %s could not be resolved: %s", index + 1, name, exc)
                    continue

                if record is None:
                    _LOGGER.debug("Page %d: unsupported operand shape for %s", index + 1, name)
                    continue
                records.append(record)
        finally:
            document.release_page(index)
        return records

    def _resolve(self, document: RenderedDocument, index: int, name: str) -> Optional[RasterPayload]:
        payload = document.lookup_object(index, name)
        if payload is not None:
            return payload
        payload = document.lookup_shared(name)
        if payload is not None:
            return payload

        future = document.resolve_object(index, name)
        try:
            return future.result(timeout=self.settings.resolve_timeout)
        except FutureTimeoutError as exc:
            future.cancel()
            raise ResolutionTimeoutError(
                f"Timed out after {self.settings.resolve_timeout}s resolving {name}"
            ) from exc


def _to_record(payload: object, index: int, name: str) -> Optional[RasterObjectRecord]:
    if isinstance(payload, BitmapSurface):
        image = payload.image.convert("RGBA")
        width, height = image.size
        return RasterObjectRecord(
            width=width,
            height=height,
            color_space_hint="",
            bits_per_component=8,
            filter_chain=(),
            raw_bytes=image.tobytes(),
            page_index=index,
            name=name,
            provenance=Provenance.BITMAP,
        )
    if isinstance(payload, PixelBuffer):
        return RasterObjectRecord(
            width=payload.width,
            height=payload.height,
            color_space_hint="",
            bits_per_component=8,
            filter_chain=(),
            raw_bytes=bytes(payload.data),
            page_index=index,
            name=name,
            provenance=Provenance.PIXELS,
        )
    return None


__all__ = ["Harvester"]
