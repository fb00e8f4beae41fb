"""Cut a tall capture into fixed-size page images."""

from __future__ import annotations

import logging
from typing import List

from PIL import Image

from ..exceptions import InvalidOptionsError
from ..types import EncodedPageImage, PaginationPlan
from .rasterizer import encode_jpeg, flatten

_LOGGER = logging.getLogger("pdfree.raster")


def slice_capture(
    capture: Image.Image,
    page_width: int,
    page_height: int,
    quality: float,
    *,
    page_width_pt: float = 0.0,
    page_height_pt: float = 0.0,
) -> List[EncodedPageImage]:
    """
    Slice ``capture`` into pages of ``page_width`` x ``page_height`` pixels.

    Every slice starts from a fresh white canvas; the last one only carries the
    rows left over, the rest of it stays white. Cuts are purely geometric.

    Args:
        capture: Full-height surface of the laid out content
        page_width: Slice width in capture pixels
        page_height: Slice height in capture pixels
        quality: JPEG quality between 0 and 1
        page_width_pt: Page width recorded on each slice
        page_height_pt: Page height recorded on each slice

    Returns:
        One encoded image per page, top to bottom
    """

    if page_width <= 0:
        raise InvalidOptionsError(f"Page width must be positive, got {page_width}")
    plan = PaginationPlan.for_content(capture.height, page_height)
    source = flatten(capture)
    copy_width = min(source.width, page_width)

    pages: List[EncodedPageImage] = []
    for source_y, drawn in plan.bands():
        canvas = Image.new("RGB", (page_width, page_height), (255, 255, 255))
        if drawn > 0 and copy_width > 0:
            band = source.crop((0, source_y, copy_width, source_y + drawn))
            canvas.paste(band, (0, 0))
        pages.append(
            EncodedPageImage(
                data=encode_jpeg(canvas, quality),
                width=page_width,
                height=page_height,
                quality=quality,
                page_width_pt=page_width_pt,
                page_height_pt=page_height_pt,
            )
        )

    _LOGGER.debug(
        "Sliced %dpx capture into %d page(s) of %dpx", capture.height, plan.page_count, page_height
    )
    return pages


__all__ = ["slice_capture"]
