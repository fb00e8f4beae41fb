"""Lay out simple markup and capture it as one full-height surface."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from html.parser import HTMLParser
from typing import List, Protocol, Tuple

from PIL import Image, ImageDraw, ImageFont


class MarkupCapture(Protocol):
    """Protocol for engines that turn markup into a pixel surface."""

    def capture(self, markup: str, width_px: int, scale: int, padding_px: int) -> Image.Image:
        """Return the laid out content, ``width_px * scale`` pixels wide."""


@dataclass(frozen=True)
class BlockStyle:
    font_size: int
    margin_top: int
    margin_bottom: int
    indent: int = 0
    preformatted: bool = False


# CSS pixel metrics for each block kind.
BLOCK_STYLES = {
    "h1": BlockStyle(26, 18, 10),
    "h2": BlockStyle(22, 16, 8),
    "h3": BlockStyle(18, 14, 6),
    "h4": BlockStyle(16, 12, 6),
    "h5": BlockStyle(14, 12, 6),
    "h6": BlockStyle(14, 12, 6),
    "p": BlockStyle(14, 6, 6),
    "li": BlockStyle(14, 3, 3, indent=28),
    "pre": BlockStyle(12, 6, 6, preformatted=True),
    "blockquote": BlockStyle(14, 10, 10, indent=16),
}
LINE_HEIGHT = 1.6

_BLOCK_TAGS = set(BLOCK_STYLES) | {"div", "section", "article", "tr", "ul", "ol", "table", "body"}
_IGNORED_TAGS = {"script", "style", "head", "title"}
_SPACES = re.compile(r"[ \t\n\r\f\v]+")


@dataclass
class Block:
    kind: str
    text: str


class BlockParser(HTMLParser):
    """Flattens markup into a list of styled text blocks."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.blocks: List[Block] = []
        self._kinds: List[str] = []
        self._buffer: List[str] = []
        self._ignored = 0

    @property
    def _kind(self) -> str:
        for kind in reversed(self._kinds):
            if kind in BLOCK_STYLES:
                return kind
        return "p"

    def handle_starttag(self, tag, attrs):
        if tag in _IGNORED_TAGS:
            self._ignored += 1
        elif tag == "br":
            self._buffer.append("\n")
        elif tag in ("td", "th"):
            self._buffer.append("  ")
        elif tag == "hr":
            self._flush()
        elif tag in _BLOCK_TAGS:
            self._flush()
            self._kinds.append(tag)

    def handle_endtag(self, tag):
        if tag in _IGNORED_TAGS:
            self._ignored = max(0, self._ignored - 1)
        elif tag in _BLOCK_TAGS:
            self._flush()
            if tag in self._kinds:
                while self._kinds and self._kinds.pop() != tag:
                    pass

    def handle_data(self, data):
        if self._ignored:
            return
        if not BLOCK_STYLES[self._kind].preformatted:
            # Source line breaks are plain whitespace; only <br> breaks a line.
            data = _SPACES.sub(" ", data)
        self._buffer.append(data)

    def close(self):
        super().close()
        self._flush()

    def _flush(self) -> None:
        raw = "".join(self._buffer)
        self._buffer = []
        kind = self._kind
        if BLOCK_STYLES[kind].preformatted:
            text = raw.strip("\n")
        else:
            lines = [re.sub(" +", " ", part).strip(" ") for part in raw.split("\n")]
            text = "\n".join(lines).strip("\n")
        if text:
            self.blocks.append(Block(kind, text))


def parse_blocks(markup: str) -> List[Block]:
    parser = BlockParser()
    parser.feed(markup)
    parser.close()
    return parser.blocks


@lru_cache(maxsize=None)
def _font(size: int) -> ImageFont.ImageFont:
    return ImageFont.load_default(size=size)


def wrap_text(
    text: str,
    font,
    max_width: float,
    draw: ImageDraw.ImageDraw,
    preserve_spaces: bool = False,
) -> List[str]:
    """Greedy word wrap; words wider than a line are broken by character.

    With ``preserve_spaces`` every line is wrapped by character so runs of
    spaces survive.
    """

    lines: List[str] = []
    for paragraph in text.split("\n"):
        current = ""
        if preserve_spaces:
            for char in paragraph:
                if current and draw.textlength(current + char, font=font) > max_width:
                    lines.append(current)
                    current = ""
                current += char
            lines.append(current)
            continue
        for word in paragraph.split(" "):
            candidate = f"{current} {word}" if current else word
            if draw.textlength(candidate, font=font) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
            current = ""
            for char in word:
                if current and draw.textlength(current + char, font=font) > max_width:
                    lines.append(current)
                    current = ""
                current += char
        lines.append(current)
    return lines


class TextFlowCapture:
    """Pillow based capture engine for headings, paragraphs, lists and preformatted text."""

    background = (255, 255, 255)
    foreground = (0, 0, 0)

    def capture(self, markup: str, width_px: int, scale: int, padding_px: int) -> Image.Image:
        width = width_px * scale
        content_width = max(1, (width_px - 2 * padding_px) * scale)
        scratch = ImageDraw.Draw(Image.new("RGB", (1, 1)))

        placed: List[Tuple[int, int, str, int]] = []
        y = padding_px * scale
        for index, block in enumerate(parse_blocks(markup)):
            style = BLOCK_STYLES[block.kind]
            size = style.font_size * scale
            font = _font(size)
            if index:
                y += style.margin_top * scale
            indent = style.indent * scale
            line_height = int(round(size * LINE_HEIGHT))
            lines = wrap_text(block.text, font, content_width - indent, scratch, style.preformatted)
            for line in lines:
                placed.append((indent, y, line, size))
                y += line_height
            y += style.margin_bottom * scale
        height = y + padding_px * scale

        surface = Image.new("RGB", (width, max(1, height)), self.background)
        draw = ImageDraw.Draw(surface)
        left = padding_px * scale
        for indent, top, line, size in placed:
            if line:
                draw.text((left + indent, top), line, fill=self.foreground, font=_font(size))
        return surface


__all__ = ["Block", "BlockParser", "MarkupCapture", "TextFlowCapture", "parse_blocks", "wrap_text"]
