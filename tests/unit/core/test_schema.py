"""Unit tests for core/schema.py"""

from datetime import datetime, timezone

from postpub.config import Settings
from postpub.core.schema import article_schema, build_schema, extract_faqs, faq_schema


FAQ_HTML = (
    "<h2>Pricing</h2><p>Intro.</p>"
    "<h2>Frequently Asked Questions</h2>"
    "<h3>How long does it take?</h3><p>About <strong>two</strong> quarters.</p>"
    "<h3>Unanswered?</h3>"
    "<h3>Where to start?</h3><p>Singapore first.</p>"
    "<h2>Next steps</h2><h3>Not a FAQ</h3><p>Ignored.</p>"
)


def test_extract_faqs_pairs_questions_with_answers():
    """H3 questions are paired with the paragraph right after them, inside the FAQ section only."""
    assert extract_faqs(FAQ_HTML) == [
        ("How long does it take?", "About two quarters."),
        ("Where to start?", "Singapore first."),
    ]


def test_extract_faqs_none():
    """Posts without an FAQ section have no FAQs."""
    assert extract_faqs("<h2>Pricing</h2><p>x</p>") == []
    assert faq_schema("<p>x</p>") is None


def test_faq_schema_shape():
    """FAQPage lists each question with its accepted answer."""
    schema = faq_schema(FAQ_HTML)
    assert schema["@type"] == "FAQPage"
    assert schema["mainEntity"][0] == {
        "@type": "Question",
        "name": "How long does it take?",
        "acceptedAnswer": {"@type": "Answer", "text": "About two quarters."},
    }


def test_article_schema(post):
    """Article schema links author and page by slug."""
    when = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
    schema = article_schema(post, None, "Mei Tan", when, "https://blog.example.com/", "Example Co")
    assert schema["headline"] == post.title
    assert schema["image"] == "https://blog.example.com/content/images/default-og.png"
    assert schema["author"]["url"] == "https://blog.example.com/author/mei-tan"
    assert schema["publisher"]["name"] == "Example Co"
    assert schema["datePublished"] == "2025-03-01T09:00:00+00:00"
    assert schema["mainEntityOfPage"]["@id"].startswith("https://blog.example.com/brand-strategy-in-singapore")


def test_build_schema_order(post, faq_post_html):
    """Article comes first, FAQPage only when present, breadcrumbs last."""
    plain = build_schema(post, settings=Settings())
    assert [s["@type"] for s in plain] == ["Article", "BreadcrumbList"]
    with_faq = build_schema(post.model_copy(update={"html": faq_post_html}), settings=Settings())
    assert [s["@type"] for s in with_faq] == ["Article", "FAQPage", "BreadcrumbList"]
