"""Inline HTML to Text / BoldText / Link node parsing"""

import re

from postpub.core.models import BoldText, Link, Text, inline_text
from postpub.core.utils.text import (
    BLOCK_TAG_RE, BR_RE, WS_RE, decode_entities, extract_text, normalize_ws,
)


# alternatives are tried in priority order at each position
INLINE_RE = re.compile(
    r'<(?P<btag>strong|b)(?:\s[^>]*)?>(?P<bold>.*?)</(?P=btag)\s*>'
    r'|<a\b[^>]*?\bhref\s*=\s*(?P<q>["\'])(?P<href>.*?)(?P=q)[^>]*>(?P<label>.*?)</a\s*>'
    r'|(?P<br><br\s*/?>)'
    r'|(?P<tag><(?=[/!a-zA-Z])[^<>]*>)'
    r'|(?P<text>[^<]+)'
    r'|(?P<lt><)',
    re.IGNORECASE | re.DOTALL,
)
# only real tags; a bare "<" in prose is text
INLINE_TAG_RE = re.compile(r"<(?=[/!a-zA-Z])[^<>]*>")
BR = '\x00'


def _clean(raw: str) -> str:
    """Decode and whitespace-collapse a fragment, keeping <br> as newline and edge spaces."""
    raw = BR_RE.sub(BR, raw)
    raw = BLOCK_TAG_RE.sub(' ', raw)
    text = WS_RE.sub(' ', decode_entities(INLINE_TAG_RE.sub('', raw)))
    return re.sub(r' ?\x00 ?', '\n', text)


def _tokenize(fragment: str) -> list[tuple[str, str, str | None]]:
    """Split a fragment into (kind, text, url) pieces; plain runs between spans are merged."""
    pieces: list[tuple[str, str, str | None]] = []
    pending: list[str] = []

    def flush() -> None:
        if pending:
            pieces.append(("text", _clean("".join(pending)), None))
            pending.clear()

    for m in INLINE_RE.finditer(fragment):
        if m.group("bold") is not None:
            flush()
            pieces.append(("bold", _clean(m.group("bold")), None))
        elif m.group("href") is not None:
            url = decode_entities(m.group("href")).strip()
            if url:
                flush()
                pieces.append(("link", _clean(m.group("label")), url))
            else:
                pending.append(m.group("label"))
        elif m.group("br"):
            pending.append(BR)
        elif m.group("tag"):
            # unknown inline tags are transparent; block tags still separate words
            if BLOCK_TAG_RE.fullmatch(m.group("tag")):
                pending.append(" ")
        else:
            pending.append(m.group("text") or m.group("lt"))
    flush()
    return pieces


def _append_space(node) -> None:
    if isinstance(node, Link):
        node.text += " "
    else:
        node.value += " "


def parse_inline(fragment: str) -> list:
    """Parse an inline HTML fragment into Text, BoldText and Link nodes.

    Whitespace-only runs are never emitted; the separating space is carried onto
    the neighbouring node so adjacent texts stay apart. Falls back to a single
    Text node of the stripped text when nothing else survives.
    """
    nodes: list = []
    need_space = False

    for kind, text, url in _tokenize(fragment):
        if not text.strip():
            need_space = need_space or bool(text)
            continue
        if kind == "text":
            if need_space and nodes and not text[0].isspace():
                text = " " + text
            nodes.append(Text(value=text))
            need_space = False
            continue

        if (need_space or text[0].isspace()) and nodes and not inline_text(nodes[-1])[-1].isspace():
            _append_space(nodes[-1])
        core = text.strip()
        nodes.append(BoldText(value=core) if kind == "bold" else Link(url=url, text=core))
        need_space = text[-1].isspace()

    if nodes and isinstance(nodes[0], Text):
        nodes[0].value = nodes[0].value.lstrip()
    if nodes and isinstance(nodes[-1], Text):
        nodes[-1].value = nodes[-1].value.rstrip()
    nodes = [n for n in nodes if inline_text(n).strip()]

    if not nodes:
        text = normalize_ws(extract_text(fragment))
        if text:
            nodes.append(Text(value=text))
    return nodes
