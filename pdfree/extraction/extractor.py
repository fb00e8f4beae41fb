"""Image extraction: ordered strategies feeding one deduplicated archive."""

from __future__ import annotations

import io
import logging
from typing import List, Optional, Sequence

from pypdf import PdfReader

from ..archive import ArchiveBuilder
from ..context import ProcessingContext, resolve_context
from ..engines.base import RenderedDocument
from ..exceptions import InvalidPDFError, NoExtractableImagesError, SkippableObjectError
from ..types import (
    ArchiveEntry,
    DecodedPixelBuffer,
    ExtractionResult,
    Provenance,
    RasterObjectRecord,
)
from .decoder import decode
from .dedup import Deduplicator
from .harvester import Harvester
from .walker import walk_page

_LOGGER = logging.getLogger("pdfree.extraction")


def load_reader(data: bytes) -> Optional[PdfReader]:
    """Open ``data`` with pypdf, returning ``None`` when it cannot be parsed."""

    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted:
            reader.decrypt("")
        len(reader.pages)
    except Exception as exc:
        _LOGGER.info("Object model unavailable, only harvesting is possible: %s", exc)
        return None
    return reader


class ExtractionRun:
    """State for one call to :meth:`ImageExtractor.extract`."""

    def __init__(self, data: bytes, context: ProcessingContext) -> None:
        self.data = data
        self.context = context
        self.settings = context.settings
        self.reader = load_reader(data)
        self.deduplicator = Deduplicator(self.settings.fingerprint_sample_size)
        self.archive = ArchiveBuilder()
        self.entries: List[ArchiveEntry] = []
        self.skipped = 0
        self.duplicates = 0
        self._document: Optional[RenderedDocument] = None
        self._document_failed = False

    @property
    def page_count(self) -> int:
        if self.reader is not None:
            return len(self.reader.pages)
        document = self.document()
        if document is None:
            raise InvalidPDFError("Neither pypdf nor the rendering engine could open the document")
        return document.page_count

    def document(self) -> Optional[RenderedDocument]:
        """Open the document with the rendering engine on first use."""

        if self._document is None and not self._document_failed:
            engine = self.context.ensure_engine()
            try:
                self._document = engine.open(self.data)
            except InvalidPDFError:
                self._document_failed = True
                if self.reader is None:
                    raise
                _LOGGER.warning("Rendering engine %s could not open the document", engine.engine_id())
        return self._document

    def emit(self, records: Sequence[RasterObjectRecord]) -> bool:
        """Deduplicate, decode and archive ``records``; report whether anything yielded."""

        yielded = False
        for record in records:
            if not self.deduplicator.should_emit(record):
                self.duplicates += 1
                yielded = True
                _LOGGER.debug("Page %d: %s is a duplicate", record.page_number, record.name)
                continue

            try:
                output = decode(record)
            except SkippableObjectError as exc:
                self.skipped += 1
                _LOGGER.debug("Page %d: skipping %s: %s", record.page_number, record.name, exc)
                continue

            if isinstance(output, DecodedPixelBuffer):
                payload, extension = output.to_png(), "png"
                if (
                    record.provenance is not Provenance.RAW_OBJECT
                    and len(payload) <= self.settings.min_harvested_png_bytes
                ):
                    self.skipped += 1
                    _LOGGER.debug("Page %d: discarding %d byte placeholder", record.page_number, len(payload))
                    continue
            else:
                payload, extension = output.data, output.extension

            name = f"image_{len(self.entries) + 1}_page{record.page_number}.{extension}"
            self.archive.add_entry(name, payload)
            self.entries.append(ArchiveEntry(name, record.page_number, len(payload), record.provenance))
            yielded = True
        return yielded

    def close(self) -> None:
        if self._document is not None:
            self._document.close()
            self._document = None


class ExtractionStrategy:
    """One way of turning a page into raster records."""

    name = ""

    def collect(self, run: ExtractionRun, index: int) -> List[RasterObjectRecord]:
        raise NotImplementedError


class DirectWalkStrategy(ExtractionStrategy):
    """Reads image XObjects straight out of the page resources."""

    name = "direct-walk"

    def collect(self, run: ExtractionRun, index: int) -> List[RasterObjectRecord]:
        if run.reader is None:
            return []
        try:
            return walk_page(run.reader, index)
        except Exception as exc:
            _LOGGER.debug("Page %d: resource walk failed: %s", index + 1, exc)
            return []


class HarvestStrategy(ExtractionStrategy):
    """Paints the page and keeps the image operands the engine materialized."""

    name = "harvest"

    def collect(self, run: ExtractionRun, index: int) -> List[RasterObjectRecord]:
        document = run.document()
        if document is None or index >= document.page_count:
            return []
        try:
            return Harvester(run.settings).harvest_page(document, index)
        except Exception as exc:
            _LOGGER.warning("Page %d: harvesting failed: %s", index + 1, exc)
            return []


DEFAULT_STRATEGIES = (DirectWalkStrategy, HarvestStrategy)


class ImageExtractor:
    """Extract embedded images from a PDF into a ZIP archive."""

    def __init__(
        self,
        context: Optional[ProcessingContext] = None,
        strategies: Optional[Sequence[ExtractionStrategy]] = None,
    ) -> None:
        self.context = resolve_context(context)
        if strategies is None:
            strategies = [strategy() for strategy in DEFAULT_STRATEGIES]
        self.strategies = list(strategies)

    def extract(self, data: bytes) -> ExtractionResult:
        run = ExtractionRun(bytes(data), self.context)
        try:
            if self.context.settings.fallback_scope == "page":
                used = self._run_by_page(run)
            else:
                used = self._run_by_document(run)
        finally:
            run.close()

        if not run.entries:
            raise NoExtractableImagesError()

        _LOGGER.info(
            "Extracted %d image(s), %d duplicate(s), %d skipped",
            len(run.entries),
            run.duplicates,
            run.skipped,
        )
        return ExtractionResult(
            archive=run.archive.build(),
            entries=list(run.entries),
            strategies=used,
            skipped=run.skipped,
            duplicates=run.duplicates,
        )

    def _run_by_page(self, run: ExtractionRun) -> dict[int, str]:
        used: dict[int, str] = {}
        for index in range(run.page_count):
            for strategy in self.strategies:
                if run.emit(strategy.collect(run, index)):
                    used[index + 1] = strategy.name
                    _LOGGER.info("Page %d: images recovered by %s", index + 1, strategy.name)
                    break
        return used

    def _run_by_document(self, run: ExtractionRun) -> dict[int, str]:
        page_count = run.page_count
        for strategy in self.strategies:
            used: dict[int, str] = {}
            for index in range(page_count):
                if run.emit(strategy.collect(run, index)):
                    used[index + 1] = strategy.name
            if used:
                _LOGGER.info("Images recovered by %s", strategy.name)
                return used
            _LOGGER.info("Strategy %s found no images", strategy.name)
        return {}


def extract_images(data: bytes, context: Optional[ProcessingContext] = None) -> ExtractionResult:
    """Extract every distinct embedded image of ``data`` into a ZIP archive.

    Raises:
        NoExtractableImagesError: If no strategy recovered a single image
        InvalidPDFError: If the document cannot be opened at all
    """

    return ImageExtractor(context).extract(data)


__all__ = [
    "DEFAULT_STRATEGIES",
    "DirectWalkStrategy",
    "ExtractionRun",
    "ExtractionStrategy",
    "HarvestStrategy",
    "ImageExtractor",
    "extract_images",
    "load_reader",
]
