"""Block segmentation of cleaned HTML and per-block conversion to document nodes"""

import logging
import re
from dataclasses import dataclass

from postpub.core.convert.inline import parse_inline
from postpub.core.models import Heading, ListBlock, Paragraph, Quote


logger = logging.getLogger(__name__)

BLOCK_TAGS = ('h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'p', 'ul', 'ol', 'blockquote')
CONTAINER_TAGS = {'ul', 'ol', 'blockquote'}
OPEN_RE = re.compile(r'<(h[1-6]|p|ul|ol|blockquote)(?:\s[^>]*)?>', re.IGNORECASE)
LI_RE = re.compile(r'<li\b[^>]*>(.*?)</li\s*>', re.IGNORECASE | re.DOTALL)


@dataclass
class RawBlock:
    """A top-level block located in the source: tag name and raw inner HTML."""
    tag:   str
    inner: str
    start: int


def _find_close(html: str, tag: str, pos: int) -> tuple[int, int] | None:
    """Return (close_start, close_end) of the tag closing at depth 0, counting same-tag nesting."""
    pattern = re.compile(rf'<(/?){tag}(?:\s[^>]*)?>', re.IGNORECASE)
    depth = 0
    for m in pattern.finditer(html, pos):
        if m.group(1):
            if depth == 0:
                return m.start(), m.end()
            depth -= 1
        else:
            depth += 1
    return None


def segment_blocks(html: str) -> list[RawBlock]:
    """Scan for top-level block elements in document order.

    Headings and paragraphs must close before the next block opens; containers
    (lists, blockquotes) may hold other blocks. Unclosed blocks are skipped.
    """
    blocks: list[RawBlock] = []
    pos = 0
    while (m := OPEN_RE.search(html, pos)) is not None:
        tag = m.group(1).lower()
        close = _find_close(html, tag, m.end())
        if close is not None and tag not in CONTAINER_TAGS:
            nxt = OPEN_RE.search(html, m.end())
            if nxt is not None and nxt.start() < close[0]:
                close = None
        if close is None:
            logger.debug("Skipping unclosed <%s> at offset %d", tag, m.start())
            pos = m.end()
            continue
        blocks.append(RawBlock(tag=tag, inner=html[m.end():close[0]], start=m.start()))
        pos = close[1]
    return blocks


def list_items(inner: str) -> list[str]:
    """Flat scan of <li> bodies in a list's inner HTML."""
    return [item for item in LI_RE.findall(inner) if item.strip()]


def convert_block(block: RawBlock):
    """Convert a RawBlock to a document node, or None when its text is empty."""
    if block.tag.startswith('h'):
        children = parse_inline(block.inner)
        return Heading(level=int(block.tag[1]), children=children) if children else None

    if block.tag == 'p':
        children = parse_inline(block.inner)
        return Paragraph(children=children) if children else None

    if block.tag in ('ul', 'ol'):
        items = [nodes for nodes in (parse_inline(i) for i in list_items(block.inner)) if nodes]
        return ListBlock(ordered=block.tag == 'ol', items=items) if items else None

    if block.tag == 'blockquote':
        children = parse_inline(block.inner)
        return Quote(children=children) if children else None

    raise ValueError(f"Unsupported block tag: {block.tag}")
