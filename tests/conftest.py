from __future__ import annotations

from pathlib import Path
from typing import Callable
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdfree.context import ProcessingContext  # noqa: E402
from pdfree.settings import Settings  # noqa: E402
from pdf_samples import build_blank_pdf, build_image_pdf, image_entry, noise  # noqa: E402


@pytest.fixture()
def fast_settings() -> Settings:
    return Settings(resolve_timeout=0.05)


@pytest.fixture()
def context_factory(fast_settings: Settings) -> Callable[..., ProcessingContext]:
    def _create(engine=None, **overrides) -> ProcessingContext:
        settings = fast_settings.with_overrides(**overrides)
        return ProcessingContext(settings=settings, engine=engine)

    return _create


@pytest.fixture()
def three_page_pdf() -> bytes:
    """Two identical RGB images on page 1, a gray image on page 2, nothing walkable on page 3."""

    rgb = noise(100 * 100 * 3, seed=1)
    gray = noise(60 * 40, seed=2)
    return build_image_pdf(
        [
            [image_entry(100, 100, rgb), image_entry(100, 100, rgb)],
            [image_entry(60, 40, gray, color_space="/DeviceGray")],
            [],
        ]
    )


@pytest.fixture()
def blank_pdf() -> bytes:
    return build_blank_pdf(pages=2)


@pytest.fixture()
def sample_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "sample.pdf"
    path.write_bytes(build_blank_pdf(pages=3, metadata={"/Title": "Sample", "/Author": "pdfree-tests"}))
    return path
