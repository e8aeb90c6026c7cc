"""Convert cleaned LLM HTML into the block/inline document tree"""

import logging

from postpub.config import Settings
from postpub.core.convert.blocks import convert_block, segment_blocks
from postpub.core.models import Paragraph, Text
from postpub.core.utils.markup import clean_html


logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Content conversion error - please edit manually"


def fallback_document() -> list:
    """The single-paragraph document returned when conversion cannot proceed."""
    return [Paragraph(children=[Text(value=FALLBACK_MESSAGE)])]


class DocumentConverter:
    """HTML to document-node converter that degrades instead of raising.

    The first H1 is dropped because the CMS renders the post title itself;
    any later H1 is kept as a normal heading. A block that fails to convert
    is logged and skipped. If nothing survives, the fallback document is
    returned so callers always receive a non-empty tree.
    """

    def __init__(self, settings: Settings = None):
        self.settings = settings or Settings()

    def convert(self, html: str) -> list:
        try:
            nodes = self._convert(html or "")
        except Exception as e:
            logger.error("Document conversion failed, using fallback: %s", e, exc_info=True)
            return fallback_document()
        if not nodes:
            logger.warning("No convertible blocks found (%d chars of input), using fallback", len(html or ""))
            return fallback_document()
        return nodes

    def _convert(self, html: str) -> list:
        cleaned = clean_html(html, self.settings.parser_config, self.settings.repair_spacing)
        nodes = []
        h1_dropped = False
        for block in segment_blocks(cleaned):
            if block.tag == 'h1' and not h1_dropped:
                h1_dropped = True
                continue
            try:
                node = convert_block(block)
            except Exception as e:
                logger.warning("Failed to convert <%s> block at offset %d, skipping: %s", block.tag, block.start, e)
                continue
            if node is not None:
                nodes.append(node)
        logger.debug("Converted %d block(s)", len(nodes))
        return nodes


def convert(html: str, settings: Settings = None) -> list:
    """Convert html with a default-configured DocumentConverter."""
    return DocumentConverter(settings).convert(html)
