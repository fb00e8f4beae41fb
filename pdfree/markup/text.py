"""Plain text to markup."""

from __future__ import annotations

import html

# Sources whose layout depends on exact spacing.
MONO_EXTENSIONS = frozenset({"json", "xml", "csv", "log", "md"})


def is_monospace_source(name: str) -> bool:
    extension = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    return extension in MONO_EXTENSIONS


def text_to_markup(text: str, monospace: bool = False) -> str:
    """Escape ``text`` into one paragraph per line, or one preformatted block."""

    escaped = html.escape(text, quote=False)
    if monospace:
        return f"<pre>{escaped}</pre>"
    return "".join(f"<p>{line or '&nbsp;'}</p>" for line in escaped.split("\n"))


__all__ = ["MONO_EXTENSIONS", "is_monospace_source", "text_to_markup"]
