"""Shared execution state passed to every PDFree operation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from .settings import DEFAULT_SETTINGS, Settings

if TYPE_CHECKING:
    from .engines.base import RenderingEngine
    from .markup.capture import MarkupCapture


@dataclass
class ProcessingContext:
    """Holds settings and engines for an operation.

    Built once at startup and passed explicitly. Missing engines are filled
    in with the pypdfium2 and Pillow defaults on first use.
    """

    settings: Settings = DEFAULT_SETTINGS
    engine: Optional["RenderingEngine"] = None
    capture: Optional["MarkupCapture"] = None
    resources: dict[str, Any] = field(default_factory=dict)
    config: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def default(cls, settings: Settings = DEFAULT_SETTINGS) -> "ProcessingContext":
        from .engines.pdfium_engine import PdfiumEngine
        from .markup.capture import TextFlowCapture

        return cls(settings=settings, engine=PdfiumEngine(), capture=TextFlowCapture())

    def ensure_engine(self) -> "RenderingEngine":
        if self.engine is None:
            from .engines.pdfium_engine import PdfiumEngine

            self.engine = PdfiumEngine()
        return self.engine

    def ensure_capture(self) -> "MarkupCapture":
        if self.capture is None:
            from .markup.capture import TextFlowCapture

            self.capture = TextFlowCapture()
        return self.capture

    def with_updates(
        self,
        *,
        settings: Optional[Settings] = None,
        engine: Optional["RenderingEngine"] = None,
        capture: Optional["MarkupCapture"] = None,
        config: Optional[dict[str, Any]] = None,
    ) -> "ProcessingContext":
        data = ProcessingContext(
            settings=settings or self.settings,
            engine=engine or self.engine,
            capture=capture or self.capture,
            resources=dict(self.resources),
            config=dict(self.config),
        )
        if config:
            data.config.update(config)
        return data


def resolve_context(context: Optional[ProcessingContext]) -> ProcessingContext:
    return context if context is not None else ProcessingContext.default()


__all__ = ["ProcessingContext", "resolve_context"]
