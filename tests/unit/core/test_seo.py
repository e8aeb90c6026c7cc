"""Unit tests for core/seo.py"""

import pytest

from postpub.core.models import ImageDescriptor, PostContent, ValidationResult
from postpub.core.seo import (
    PRIORITY_ORDER, build_report, grade_for, heading_structure, score_image, score_links,
    score_meta_description, score_meta_title, score_readability,
)
from postpub.core.validate.validator import ContentValidator


@pytest.fixture(name="validation")
def validation_fixture(post, image, checker):
    return ContentValidator(checker=checker).validate_post(post, image)


@pytest.mark.parametrize("score,grade", [(100, "A"), (90, "A"), (89, "B"), (80, "B"), (70, "C"), (60, "D"), (59, "F"), (0, "F")])
def test_grade_for(score, grade):
    """Grades follow 10-point bands."""
    assert grade_for(score) == grade


def test_score_meta_title_bands():
    """Short, long, and power-word-free titles lose points."""
    assert score_meta_title("The Ultimate Brand Strategy Guide for Singapore 2025") == 100
    assert score_meta_title("Short") == 65
    assert score_meta_title("x" * 61) == 75


def test_score_meta_description_keyword_and_cta():
    """Descriptions lose points for a missing keyword or call to action."""
    desc = "Discover how brand strategy works. " + "x" * 120
    assert score_meta_description(desc, "brand strategy") == 100
    assert score_meta_description(desc, "pricing") == 80


def test_score_readability_no_paragraphs():
    """Zero paragraphs never divides by zero."""
    assert score_readability(0, 0) == 60


def test_score_links_and_image():
    """Link and image scores follow their bands."""
    assert [score_links(n) for n in (0, 1, 3, 11)] == [60, 80, 100, 90]
    assert score_image(None) == 50
    assert score_image(ImageDescriptor(url="https://x.com/a.png")) == 70
    assert score_image(ImageDescriptor(url="https://x.com/a.png", alt_text="A descriptive alt text")) == 100


def test_heading_structure_counts_levels():
    """Every heading level is counted."""
    structure = heading_structure("<h1>a</h1><h2>b</h2><h2>c</h2><h3>d</h3>")
    assert structure == {"h1": 1, "h2": 2, "h3": 1, "h4": 0, "h5": 0, "h6": 0}


def test_build_report_sample_post(post, image, validation):
    """The sample post report carries the validator verdict and a bounded score."""
    report = build_report(post, validation, image)
    assert report.passed is True
    assert 0 <= report.score <= 100
    assert report.grade == grade_for(report.score)
    assert report.keyword_usage.in_title is True
    assert report.keyword_usage.in_opening is True
    assert report.readability.word_count == validation.metrics.word_count
    assert report.links.total == 4
    assert report.image.present is True


def test_build_report_recommendations_sorted(post, validation):
    """Recommendations are ordered Critical, High, Medium, Low."""
    weak = post.model_copy(update={"title": "Short", "meta_title": "Short", "meta_description": "Too short."})
    report = build_report(weak, validation, None)
    ranks = [PRIORITY_ORDER[r.priority] for r in report.recommendations]
    assert ranks == sorted(ranks)
    assert report.recommendations[0].priority == "Critical"
    assert any(r.category == "Image" and r.issue == "No featured image" for r in report.recommendations)


def test_build_report_empty_post():
    """An empty post with zero metrics still produces a report."""
    report = build_report(PostContent(title="t", html=""), ValidationResult(valid=True), None)
    assert report.readability.avg_words_per_paragraph == 0
    assert report.keyword_usage.density == 0.0
    assert report.grade in {"A", "B", "C", "D", "F"}
