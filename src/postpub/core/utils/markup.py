"""Best-effort textual cleanup of LLM-produced HTML before block conversion"""

import re

from markdown_it import MarkdownIt


WRAPPER_PATTERNS = [
    re.compile(r'<!DOCTYPE[^>]*>', re.IGNORECASE),
    re.compile(r'<head\b[\s\S]*?</head>', re.IGNORECASE),
    re.compile(r'</?html\b[^>]*>', re.IGNORECASE),
    re.compile(r'</?body\b[^>]*>', re.IGNORECASE),
    re.compile(r'```[a-zA-Z]*'),
]
BLOCK_OPEN_RE = re.compile(r'<(?:h[1-6]|p|ul|ol|li|blockquote|div|table|pre)\b', re.IGNORECASE)
MD_BOLD_RE = re.compile(r'\*\*([^*\n]+)\*\*')
MARKUP_TAG_RE = re.compile(r"(<(?=[/!a-zA-Z])[^<>]*>)")

# word<strong> / </strong>word and the same for links
SPACING_FIXES = [
    (re.compile(r'([A-Za-z0-9)])(<(?:strong|b)>)'), r'\1 \2'),
    (re.compile(r'(</(?:strong|b)>)([A-Za-z0-9(])'), r'\1 \2'),
    (re.compile(r'([A-Za-z0-9)])(<a\s)'), r'\1 \2'),
    (re.compile(r'(</a>)([A-Za-z0-9(])'), r'\1 \2'),
    (re.compile(r'([,;:!?])(<(?:strong|b|a)[\s>])'), r'\1 \2'),
    (re.compile(r'<strong>\s*<strong>'), '<strong>'),
    (re.compile(r'</strong>\s*</strong>'), '</strong>'),
]


def strip_wrappers(content: str) -> str:
    """Remove document wrapper tags and code-fence markers around the HTML."""
    for pattern in WRAPPER_PATTERNS:
        content = pattern.sub('', content)
    return content.strip()


def has_block_markup(content: str) -> bool:
    return bool(BLOCK_OPEN_RE.search(content))


def repair_markdown(content: str, preset: str = 'gfm-like') -> str:
    """Render a markdown answer to HTML, or convert stray **bold** left inside HTML."""
    if content.strip() and not has_block_markup(content):
        return MarkdownIt(preset, options_update={"linkify": False}).render(content)
    # attributes (link URLs) are left alone; only text between tags is touched
    parts = MARKUP_TAG_RE.split(content)
    for i in range(0, len(parts), 2):
        parts[i] = MD_BOLD_RE.sub(r"<strong>\1</strong>", parts[i]).replace("**", "")
    return "".join(parts)


def repair_inline_spacing(content: str) -> str:
    """Insert spaces the model dropped between words and adjacent <strong>/<a> tags."""
    for pattern, repl in SPACING_FIXES:
        content = pattern.sub(repl, content)
    return content


def clean_html(content: str, preset: str = 'gfm-like', repair_spacing: bool = True) -> str:
    """Full pre-clean: wrappers, markdown artifacts, then optional spacing repair."""
    cleaned = repair_markdown(strip_wrappers(content), preset)
    if repair_spacing:
        cleaned = repair_inline_spacing(cleaned)
    return cleaned
