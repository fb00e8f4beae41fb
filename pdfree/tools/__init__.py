"""Namespace for pluggable PDFree tools."""

from __future__ import annotations

from ..pipeline import registry


def load_builtin_plugins() -> None:
    from . import extract  # noqa: F401  # register extract-images
    from . import compress  # noqa: F401
    from . import convert  # noqa: F401  # register convert and images-to-pdf
    from . import pages  # noqa: F401  # register pdf-to-images and info


__all__ = ["registry", "load_builtin_plugins"]
