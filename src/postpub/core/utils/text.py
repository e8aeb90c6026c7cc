"""Plain-text helpers shared by the validator and converter: tag stripping, entities, counting"""

import hashlib
import html
import re


BR_RE = re.compile(r'<br\s*/?>', re.IGNORECASE)
BLOCK_TAG_RE = re.compile(r'</?(?:p|h[1-6]|li|ul|ol|blockquote|div|section|article|table|tr|td|th|pre)\b[^>]*>', re.IGNORECASE)
TAG_RE = re.compile(r'<[^>]*>')
WS_RE = re.compile(r'\s+')
SENTENCE_SPLIT_RE = re.compile(r'[.!?]+')


def decode_entities(text: str) -> str:
    """Decode HTML entities; non-breaking spaces become plain spaces."""
    return html.unescape(text).replace('\xa0', ' ')


def strip_tags(markup: str) -> str:
    """Remove tags; <br> becomes a newline and block tags a space so words never fuse."""
    text = BR_RE.sub('\n', markup)
    text = BLOCK_TAG_RE.sub(' ', text)
    return TAG_RE.sub('', text)


def extract_text(markup: str) -> str:
    """Return decoded, tag-free text of an HTML fragment, trimmed."""
    return decode_entities(strip_tags(markup)).strip()


def normalize_ws(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return WS_RE.sub(' ', text).strip()


def words(text: str) -> list[str]:
    return text.split()


def count_words(markup: str) -> int:
    """Whitespace-delimited word count of the visible text of markup."""
    return len(words(extract_text(markup)))


def split_sentences(text: str) -> list[str]:
    """Split on runs of . ! ? and drop empty fragments."""
    return [s.strip() for s in SENTENCE_SPLIT_RE.split(text) if s.strip()]


def phrase_pattern(phrase: str) -> re.Pattern:
    """Case-insensitive, word-bounded pattern for a literal phrase."""
    return re.compile(r'(?<!\w)' + re.escape(phrase) + r'(?!\w)', re.IGNORECASE)


def count_phrase(text: str, phrase: str) -> int:
    if not phrase.strip():
        return 0
    return len(phrase_pattern(phrase.strip()).findall(text))


def truncate(text: str, limit: int = 100) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


def slugify(text: str, max_length: int = 50) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug of at most max_length chars."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')[:max_length].rstrip('-')


def fingerprint(text: str) -> str:
    """SHA-256 of case- and whitespace-normalized text; equal for trivially different titles."""
    return hashlib.sha256(normalize_ws(text).lower().encode("utf-8")).hexdigest()
