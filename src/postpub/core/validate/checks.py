"""Individual quality checks run by the content validator.

Each check takes the raw post data plus Settings and returns a CheckResult;
none of them stop on the first problem. Thresholds quoted in messages always
come from Settings so operators can see which policy value was violated.
"""

import re
from datetime import date
from typing import Optional

from postpub.config import Settings
from postpub.core.models import CheckResult, ImageDescriptor, PostContent
from postpub.core.utils.text import (
    count_phrase, count_words, extract_text, phrase_pattern, split_sentences, truncate, words,
)
from postpub.core.validate.reachability import ReachabilityChecker


HEADING_RE = re.compile(r'<h([1-6])\b[^>]*>(.*?)</h\1\s*>', re.IGNORECASE | re.DOTALL)
PARAGRAPH_RE = re.compile(r'<p\b[^>]*>(.*?)</p\s*>', re.IGNORECASE | re.DOTALL)
ANCHOR_RE = re.compile(r'<a\b[^>]*\bhref\s*=[^>]*>', re.IGNORECASE)
HREF_RE = re.compile(r'<a\b[^>]*?\bhref\s*=\s*["\']([^"\']*)["\']', re.IGNORECASE)
LIST_RE = re.compile(r'<(?:ul|ol)\b', re.IGNORECASE)
BOLD_RE = re.compile(r'<(?:strong|b)(?:\s[^>]*)?>', re.IGNORECASE)
H2_OPEN_RE = re.compile(r'<h2\b', re.IGNORECASE)
HEADING_CLOSE_END_RE = re.compile(r'</h[1-6]\s*>\s*$', re.IGNORECASE)

CITATION_RE = re.compile(r'according to|cited in|published in|\bstud(?:y|ies)\b|\bresearch\b|\breport\b', re.IGNORECASE)
PASSIVE_RE = re.compile(r'\b(?:is|are|was|were|been|being)\s+\w+ed\b', re.IGNORECASE)
FIRST_PERSON_RE = re.compile(
    r"(?<!\w)(?:I['’]ve|I have|I believe|I think|I argue|I['’]m convinced"
    r"|in my (?:experience|work|view)|my research|we['’]ve)(?!\w)",
    re.IGNORECASE,
)
YEAR_RE = re.compile(r'\b(20\d{2})\b')
PERCENT_RE = re.compile(r'\b\d+(?:\.\d+)?%(?!\s*</a>)')
VAGUE_EXAMPLE_RES = [
    re.compile(r'\ban? (?:unnamed|anonymous) (?:company|organization|organisation|firm)\b', re.IGNORECASE),
    re.compile(r'\ba (?:singapore|apac|sea|southeast asian) (?:startup|company|firm|brand)\b', re.IGNORECASE),
]
FAQ_HEADING = "frequently asked questions"


# --- extraction helpers ---

def extract_headings(html: str) -> list[tuple[int, str]]:
    """Return (level, text) for every heading in document order."""
    return [(int(level), extract_text(inner)) for level, inner in HEADING_RE.findall(html)]


def extract_links(html: str) -> list[str]:
    """Absolute http(s) hrefs in document order."""
    return [u.strip() for u in HREF_RE.findall(html) if u.strip().lower().startswith(("http://", "https://"))]


def count_paragraphs(html: str) -> int:
    return len(PARAGRAPH_RE.findall(html))


def count_anchors(html: str) -> int:
    return len(ANCHOR_RE.findall(html))


def count_first_person(text: str) -> int:
    return len(FIRST_PERSON_RE.findall(text))


def count_regional(text: str, regions: list[str]) -> int:
    return sum(count_phrase(text, r) for r in regions)


# --- checks ---

def _is_generic_title(title: str, terms: list[str], names: list[str] = None) -> bool:
    if not any(phrase_pattern(t).search(title) for t in terms):
        return False
    if re.search(r'\d', title):
        return False
    if any(phrase_pattern(n).search(title) for n in names or []):
        return False
    tokens = re.findall(r"[A-Za-z][\w'-]*", title)
    filler = {t.lower() for t in terms}
    if sum(t[0].isupper() for t in tokens) > len(tokens) / 2:
        # Title Case hides other proper nouns; only acronyms still count as distinguishing
        return not any(t.isupper() and len(t) > 1 for t in tokens)
    return not any(t[0].isupper() and t.lower() not in filler for t in tokens[1:])


def check_title(title: str, settings: Settings) -> CheckResult:
    result = CheckResult()
    title = (title or "").strip()
    if not title:
        result.error("Title is empty")
        return result

    if len(title) > settings.title_max_chars:
        result.error(f"Title too long ({len(title)} chars, max {settings.title_max_chars})")
    if title.endswith(("...", "…")):
        result.error("Title appears incomplete (ends with ...)")
    if len(title) < settings.title_min_chars:
        result.warn(
            f"Title quite short ({len(title)} chars, recommend "
            f"{settings.title_min_chars}-{settings.title_max_chars})"
        )
    if _is_generic_title(title, settings.generic_title_terms, settings.regions):
        result.warn(f'Title looks generic: "{title}" - add a number, name or specific angle')
    return result


def check_structure(html: str, template_type: Optional[str], settings: Settings) -> CheckResult:
    result = CheckResult()
    if not html or not html.strip():
        result.error("Content is empty")
        return result

    word_count = count_words(html)
    if word_count < settings.min_words:
        result.error(f"Content too short ({word_count} words, minimum {settings.min_words})")
    elif word_count > settings.max_words:
        result.error(f"Content too long ({word_count} words, maximum {settings.max_words})")

    paragraphs = count_paragraphs(html)
    if paragraphs < settings.min_paragraphs:
        result.warn(f"Few paragraphs ({paragraphs}, recommend at least {settings.min_paragraphs})")

    long_sentences = [s for s in split_sentences(extract_text(html)) if len(words(s)) > settings.max_sentence_words]
    if len(long_sentences) > settings.long_sentence_limit:
        result.warn(
            f"{len(long_sentences)} sentences exceed {settings.max_sentence_words} words "
            f"- aim for 15-20 words per sentence"
        )

    headings = extract_headings(html)
    per_level = {level: sum(1 for lv, _ in headings if lv == level) for level in range(1, 7)}
    if per_level[1] > 1:
        result.warn(f"Multiple H1 headings found ({per_level[1]}) - only the first is replaced by the title")
    if per_level[2] < settings.min_h2:
        result.warn(f"Few H2 headings ({per_level[2]}, recommend at least {settings.min_h2})")
    elif per_level[2] > settings.max_h2:
        result.warn(f"Many H2 headings ({per_level[2]}, may be too fragmented)")

    generic = {h.lower() for h in settings.generic_headings}
    for _, text in headings:
        if text.strip().lower() in generic:
            result.warn(f'Generic heading found: "{text}" - make headings more specific and valuable')

    if not LIST_RE.search(html):
        result.warn("No bullet or numbered list found - add a <ul> or <ol> for scannability")
    if not BOLD_RE.search(html):
        result.warn("No bold emphasis found - highlight key phrases with <strong>")

    if template_type and template_type in settings.faq_templates:
        if not any(level == 2 and FAQ_HEADING in text.lower() for level, text in headings):
            result.error(f'Missing required "Frequently Asked Questions" section for template {template_type}')
    return result


def check_voice(html: str, settings: Settings) -> CheckResult:
    result = CheckResult()
    text = extract_text(html or "")
    sentences = split_sentences(text)
    exempt = {p.lower() for p in settings.citation_exempt_phrases}

    for phrase in settings.banned_phrases:
        pattern = phrase_pattern(phrase)
        for sentence in sentences:
            if not pattern.search(sentence):
                continue
            if phrase.lower() in exempt and CITATION_RE.search(sentence):
                continue
            result.error(f'Found prohibited phrase "{phrase}" in: "{truncate(sentence)}"')

    passive = len(PASSIVE_RE.findall(text))
    if passive > settings.passive_voice_limit:
        result.warn(f"High passive voice usage detected ({passive} instances) - prefer active voice")

    if settings.min_first_person:
        first_person = count_first_person(text)
        if first_person < settings.min_first_person:
            result.error(
                f"Too little first-person voice ({first_person} markers, minimum {settings.min_first_person})"
            )
    return result


def check_regional(html: str, settings: Settings, today: date = None) -> CheckResult:
    result = CheckResult()
    if not settings.regions:
        return result
    text = extract_text(html or "")

    mentions = count_regional(text, settings.regions)
    if settings.require_regional:
        if mentions == 0:
            result.error(f"No regional context - mention at least one of: {', '.join(settings.regions)}")
        elif mentions == 1:
            result.warn("Only 1 regional mention - add more local context")

    year = (today or date.today()).year
    recent = {str(y) for y in range(year - settings.recent_year_span, year + 1)}
    if not recent & set(YEAR_RE.findall(text)):
        result.warn(f"No recent year ({min(recent)}-{year}) mentioned - examples and statistics may look stale")
    return result


def check_seo(post: PostContent, settings: Settings) -> CheckResult:
    result = CheckResult()

    meta_title = (post.meta_title or "").strip()
    if not meta_title:
        result.error("Meta title is missing")
    elif len(meta_title) > settings.meta_title_max:
        result.error(f"Meta title too long ({len(meta_title)} chars, max {settings.meta_title_max})")
    elif len(meta_title) < settings.meta_title_min:
        result.warn(f"Meta title short ({len(meta_title)} chars, recommend {settings.meta_title_min}-{settings.meta_title_max})")

    desc = (post.meta_description or "").strip()
    if not desc:
        result.error("Meta description is missing")
    elif len(desc) < settings.meta_description_min:
        result.warn(
            f"Meta description short ({len(desc)} chars, recommend "
            f"{settings.meta_description_min}-{settings.meta_description_max})"
        )
    elif len(desc) > settings.meta_description_max:
        result.error(f"Meta description too long ({len(desc)} chars, max {settings.meta_description_max})")

    keyword = (post.keyword or "").strip()
    word_count = count_words(post.html or "")
    if keyword and word_count:
        density = keyword_density(post.html, keyword)
        if density < settings.keyword_density_min:
            result.warn(
                f'Keyword "{keyword}" density low ({density:.2f}%, target '
                f"{settings.keyword_density_min}-{settings.keyword_density_max}%)"
            )
        elif density > settings.keyword_density_max:
            result.warn(f'Keyword "{keyword}" density high ({density:.2f}%) - risk of over-optimization')
    return result


def keyword_density(html: str, keyword: str) -> float:
    """Exact-phrase occurrences per 100 words of visible text."""
    text = extract_text(html or "")
    total = len(words(text))
    if not total or not keyword.strip():
        return 0.0
    return count_phrase(text, keyword) / total * 100


def check_image(image: Optional[ImageDescriptor], settings: Settings, checker: Optional[ReachabilityChecker]) -> CheckResult:
    result = CheckResult()
    if image is None or not image.url:
        result.warn("No featured image - recommend adding one for better engagement")
        return result

    if checker is not None:
        probe = checker.head(image.url)
        if probe.error is not None:
            result.error(f"Image URL not accessible: {probe.error}")
        else:
            if probe.status != 200:
                result.error(f"Image URL returned status {probe.status}")
            if "image" not in probe.content_type.lower():
                result.error(f"Image URL does not point to an image ({probe.content_type or 'no content type'})")

    alt = (image.alt_text or "").strip()
    if not alt:
        result.warn("Image alt text is missing - bad for SEO and accessibility")
    elif len(alt) < settings.alt_text_min:
        result.warn(f"Image alt text is very short ({len(alt)} chars) - should be descriptive")
    elif len(alt) > settings.alt_text_max:
        result.warn(f"Image alt text is too long ({len(alt)} chars) - keep under {settings.alt_text_max}")
    return result


def check_links(html: str, settings: Settings, checker: Optional[ReachabilityChecker]) -> CheckResult:
    result = CheckResult()
    links = extract_links(html or "")
    if not links:
        result.warn(f"No external links found - recommend adding {settings.min_links} authoritative sources")
        return result
    if len(links) < settings.min_links:
        result.warn(f"Only {len(links)} external link(s) - recommend at least {settings.min_links} for credibility")

    if checker is None or not settings.check_links_online or not settings.link_sample_size:
        return result
    sample = list(dict.fromkeys(links))[:settings.link_sample_size]
    for probe in checker.probe_many(sample):
        if not probe.ok:
            reason = probe.error or f"status {probe.status}"
            result.warn(f"Link unreachable: {probe.url} ({reason})")
    return result


def check_conclusion(html: str, settings: Settings) -> CheckResult:
    result = CheckResult()
    paragraphs = list(PARAGRAPH_RE.finditer(html or ""))
    if not paragraphs:
        result.error("No paragraphs found in content")
        return result

    last = paragraphs[-1]
    before = html[:last.start()]
    h2_positions = [m.start() for m in H2_OPEN_RE.finditer(html)]
    window_start = last.start() - settings.conclusion_heading_window
    if (h2_positions and h2_positions[-1] > window_start) or HEADING_CLOSE_END_RE.search(before):
        result.error("Conclusion should not have a heading - end with 2-3 plain sentences")

    inner = last.group(1)
    if ANCHOR_RE.search(inner):
        result.error("Conclusion should not contain hyperlinks")
    if settings.strict_conclusion and BOLD_RE.search(inner):
        result.error("Conclusion should not contain <strong> formatting")

    conclusion_words = count_words(inner)
    if conclusion_words > settings.conclusion_max_words:
        result.warn(
            f"Conclusion is long ({conclusion_words} words) - recommend "
            f"{settings.conclusion_min_words}-{settings.conclusion_max_words}"
        )
    elif conclusion_words < settings.conclusion_min_words:
        result.warn(
            f"Conclusion is short ({conclusion_words} words) - recommend "
            f"{settings.conclusion_min_words}-{settings.conclusion_max_words}"
        )
    return result


def check_facts(html: str, today: date = None) -> CheckResult:
    """Advisory anti-hallucination signals; never produces errors."""
    result = CheckResult()
    html = html or ""

    stats = PERCENT_RE.findall(html)
    if len(stats) > 3:
        result.warn(f"Found {len(stats)} statistics - ensure all are from credible sources with citations")

    for pattern in VAGUE_EXAMPLE_RES:
        if len(pattern.findall(html)) > 2:
            result.warn("Multiple vague examples found - use specific company names for real case studies")

    year = (today or date.today()).year
    future = sorted({y for y in YEAR_RE.findall(extract_text(html)) if int(y) > year})
    if future:
        result.warn(f"Found future dates ({', '.join(future)}) - verify these are intentional forward-looking statements")
    return result
