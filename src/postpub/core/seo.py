"""SEO quality report: weighted component scores, letter grade and recommendations"""

import logging
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, Field

from postpub.core.models import ImageDescriptor, PostContent, ValidationResult
from postpub.core.utils.text import extract_text, words
from postpub.core.validate.checks import HEADING_RE, keyword_density


logger = logging.getLogger(__name__)

POWER_WORDS = ["ultimate", "guide", "complete", "essential", "proven", "effective", "master", "unlock"]
CTA_WORDS = ["discover", "learn", "explore", "find out", "understand", "master"]
WEIGHTS = {
    "meta_title":       0.15,
    "meta_description": 0.15,
    "keyword":          0.20,
    "headings":         0.15,
    "readability":      0.15,
    "links":            0.10,
    "image":            0.10,
}
GRADES = [(90, "A"), (80, "B"), (70, "C"), (60, "D")]
PRIORITY_ORDER = {"Critical": 0, "High": 1, "Medium": 2, "Low": 3}

Priority = Literal["Critical", "High", "Medium", "Low"]


class MetaScore(BaseModel):
    value:   str
    length:  int
    optimal: bool
    score:   int = Field(..., ge=0, le=100)


class KeywordScore(BaseModel):
    target:              str
    in_title:            bool
    in_meta_description: bool
    in_opening:          bool
    density:             float
    score:               int = Field(..., ge=0, le=100)


class HeadingScore(BaseModel):
    structure: dict[str, int]
    score:     int = Field(..., ge=0, le=100)


class ReadabilityScore(BaseModel):
    word_count:              int
    paragraph_count:         int
    avg_words_per_paragraph: int
    score:                   int = Field(..., ge=0, le=100)


class LinkScore(BaseModel):
    total: int
    score: int = Field(..., ge=0, le=100)


class ImageScore(BaseModel):
    present:          bool
    has_alt_text:     bool
    alt_text_length:  int
    alt_text_optimal: bool
    score:            int = Field(..., ge=0, le=100)


class Recommendation(BaseModel):
    category: str
    priority: Priority
    issue:    str
    fix:      str


class SeoReport(BaseModel):
    timestamp:        str
    title:            str
    keyword:          str
    template:         str
    author:           Optional[str] = None
    meta_title:       MetaScore
    meta_description: MetaScore
    keyword_usage:    KeywordScore
    headings:         HeadingScore
    readability:      ReadabilityScore
    links:            LinkScore
    image:            ImageScore
    passed:           bool
    errors:           list[str] = []
    warnings:         list[str] = []
    score:            int = Field(default=0, ge=0, le=100)
    grade:            str = "F"
    recommendations:  list[Recommendation] = []


def _contains(text: str, needle: str) -> bool:
    return bool(needle) and needle.lower() in (text or "").lower()


def _clamp(score: int) -> int:
    return max(0, min(100, score))


# --- component scores ---

def score_meta_title(title: str) -> int:
    score = 100
    if len(title) < 30:
        score -= 30
    elif len(title) < 50:
        score -= 10
    elif len(title) > 60:
        score -= 20
    if not any(w in title.lower() for w in POWER_WORDS):
        score -= 5
    return _clamp(score)


def score_meta_description(description: str, keyword: str) -> int:
    score = 100
    if len(description) < 120:
        score -= 20
    elif len(description) < 150:
        score -= 10
    elif len(description) > 160:
        score -= 30
    if not _contains(description, keyword):
        score -= 20
    if not any(w in description.lower() for w in CTA_WORDS):
        score -= 10
    return _clamp(score)


def score_keyword(post: PostContent, density: float, in_opening: bool) -> int:
    score = 100
    if not _contains(post.title, post.keyword):
        score -= 25
    if not _contains(post.meta_description, post.keyword):
        score -= 15
    if density < 0.5 or density > 3:
        score -= 20
    if not in_opening:
        score -= 15
    return _clamp(score)


def heading_structure(html: str) -> dict[str, int]:
    structure = {f"h{i}": 0 for i in range(1, 7)}
    for level, _ in HEADING_RE.findall(html or ""):
        structure[f"h{level}"] += 1
    return structure


def score_headings(structure: dict[str, int]) -> int:
    score = 100
    if structure["h1"] == 0:
        score -= 5  # the CMS renders the title as H1
    elif structure["h1"] > 1:
        score -= 15
    if structure["h2"] < 3:
        score -= 20
    elif structure["h2"] > 10:
        score -= 10
    if structure["h3"] == 0 and structure["h2"] > 5:
        score -= 10
    return _clamp(score)


def score_readability(word_count: int, paragraph_count: int) -> int:
    score = 100
    if word_count < 1200:
        score -= 25
    elif word_count > 2000:
        score -= 10
    if paragraph_count < 8:
        score -= 15
    avg = word_count / paragraph_count if paragraph_count else 0
    if avg > 100:
        score -= 20
    elif avg > 75:
        score -= 10
    return _clamp(score)


def score_links(total: int) -> int:
    if total == 0:
        return 60
    if total == 1:
        return 80
    return 90 if total > 10 else 100


def score_image(image: Optional[ImageDescriptor]) -> int:
    if image is None or not image.url:
        return 50
    alt = image.alt_text or ""
    if not alt:
        return 70
    if len(alt) < 10:
        return 80
    return 90 if len(alt) > 125 else 100


def grade_for(score: int) -> str:
    for floor, grade in GRADES:
        if score >= floor:
            return grade
    return "F"


# --- report ---

def recommendations_for(report: SeoReport) -> list[Recommendation]:
    """Fixes for components scoring under 80, most urgent first."""
    recs: list[Recommendation] = []

    def add(category: str, priority: str, issue: str, fix: str) -> None:
        recs.append(Recommendation(category=category, priority=priority, issue=issue, fix=fix))

    if report.meta_title.score < 80 and not report.meta_title.optimal:
        add("Meta Title", "High", f"Title length is {report.meta_title.length} characters",
            "Optimize title to 50-60 characters")

    if report.meta_description.score < 80:
        if not report.meta_description.optimal:
            add("Meta Description", "High", f"Description length is {report.meta_description.length} characters",
                "Optimize description to 150-160 characters")
        if not report.keyword_usage.in_meta_description:
            add("Meta Description", "Medium", "Target keyword not in meta description",
                "Include target keyword naturally in description")

    kw = report.keyword_usage
    if kw.score < 80:
        if kw.density < 0.5:
            add("Keyword", "High", f"Low keyword density ({kw.density:.2f}%)", "Increase keyword usage to 1-2% of content")
        elif kw.density > 3:
            add("Keyword", "High", f"High keyword density ({kw.density:.2f}%)", "Reduce keyword usage to avoid over-optimization")
        if not kw.in_title:
            add("Keyword", "Critical", "Target keyword not in title", "Include keyword in title for better SEO")
        if not kw.in_opening:
            add("Keyword", "Low", "Target keyword not in the first 100 words", "Mention the keyword early in the introduction")

    if report.headings.score < 80 and report.headings.structure["h2"] < 3:
        add("Headings", "Medium", f"Only {report.headings.structure['h2']} H2 headings",
            "Add more H2 headings (aim for 4-6) to improve structure")

    r = report.readability
    if r.score < 80:
        if r.word_count < 1200:
            add("Readability", "High", f"Content is short ({r.word_count} words)",
                "Expand content to 1,400-1,600 words for better depth")
        if r.avg_words_per_paragraph > 75:
            add("Readability", "Medium", "Paragraphs are too long", "Break paragraphs into 2-3 sentences each")

    if report.links.score < 80 and report.links.total < 2:
        add("Links", "Medium", f"Only {report.links.total} links in content",
            "Add 2-3 external links to authoritative sources")

    if report.image.score < 80:
        if not report.image.present:
            add("Image", "High", "No featured image", "Add a featured image for social sharing")
        elif not report.image.has_alt_text:
            add("Image", "High", "Missing alt text", "Add descriptive alt text with target keyword")

    return sorted(recs, key=lambda rec: PRIORITY_ORDER[rec.priority])


def build_report(post: PostContent, validation: ValidationResult, image: Optional[ImageDescriptor] = None) -> SeoReport:
    """Score post for search readiness using the validator's metrics."""
    html = post.html or ""
    metrics = validation.metrics
    opening = " ".join(words(extract_text(html))[:100])
    density = round(keyword_density(html, post.keyword), 2) if post.keyword else 0.0
    in_opening = _contains(opening, post.keyword)
    structure = heading_structure(html)
    alt = image.alt_text if image is not None else ""

    report = SeoReport(
        timestamp=datetime.now(timezone.utc).isoformat(),
        title=post.title,
        keyword=post.keyword,
        template=post.template_type,
        author=post.author,
        meta_title=MetaScore(
            value=post.meta_title,
            length=len(post.meta_title),
            optimal=50 <= len(post.meta_title) <= 60,
            score=score_meta_title(post.meta_title),
        ),
        meta_description=MetaScore(
            value=post.meta_description,
            length=len(post.meta_description),
            optimal=150 <= len(post.meta_description) <= 160,
            score=score_meta_description(post.meta_description, post.keyword),
        ),
        keyword_usage=KeywordScore(
            target=post.keyword,
            in_title=_contains(post.title, post.keyword),
            in_meta_description=_contains(post.meta_description, post.keyword),
            in_opening=in_opening,
            density=density,
            score=score_keyword(post, density, in_opening),
        ),
        headings=HeadingScore(structure=structure, score=score_headings(structure)),
        readability=ReadabilityScore(
            word_count=metrics.word_count,
            paragraph_count=metrics.paragraph_count,
            avg_words_per_paragraph=round(metrics.word_count / metrics.paragraph_count) if metrics.paragraph_count else 0,
            score=score_readability(metrics.word_count, metrics.paragraph_count),
        ),
        links=LinkScore(total=metrics.link_count, score=score_links(metrics.link_count)),
        image=ImageScore(
            present=bool(image and image.url),
            has_alt_text=bool(alt),
            alt_text_length=len(alt),
            alt_text_optimal=10 <= len(alt) <= 125,
            score=score_image(image),
        ),
        passed=validation.valid,
        errors=validation.errors,
        warnings=validation.warnings,
    )

    components = {
        "meta_title":       report.meta_title.score,
        "meta_description": report.meta_description.score,
        "keyword":          report.keyword_usage.score,
        "headings":         report.headings.score,
        "readability":      report.readability.score,
        "links":            report.links.score,
        "image":            report.image.score,
    }
    report.score = round(sum(components[k] * w for k, w in WEIGHTS.items()))
    report.grade = grade_for(report.score)
    report.recommendations = recommendations_for(report)
    logger.info("SEO score for %r: %d (%s)", post.title, report.score, report.grade)
    return report
