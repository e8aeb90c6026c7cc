"""Root test configuration: sample posts, post files, and a fake reachability checker"""

from datetime import date

import pytest
import yaml

from postpub.config import Settings
from postpub.core.models import ImageDescriptor, PostContent
from postpub.core.validate.reachability import ProbeResult


TITLE = "Brand Strategy in Singapore: 7 Moves That Win Customers"
META_DESCRIPTION = (
    "Learn how brand strategy helps Singapore companies win loyal customers, with seven "
    "practical moves, regional data and a clear plan for the next quarter."
)
IMAGE_URL = "https://cdn.example.com/hero.png"
IMAGE_ALT = "Singapore marketing team reviewing brand strategy dashboards"

OPENING = "Brand strategy shapes how regional teams plan every quarter of their yearly roadmap. "
FILLER = "Marketing leads in Singapore compare customer data with clear goals before they commit budget. "
SOURCES = (
    '<p>Useful benchmarks come from <a href="https://www.example.com/sbr">Singapore Business Review</a>, '
    '<a href="https://www.example.com/think">Think with Google</a> and '
    '<a href="https://www.example.com/stats">Statista</a>.</p>'
)
CHECKLIST = (
    "<ul><li><strong>Audit</strong> your current positioning</li>"
    "<li>Test new messaging in two APAC markets</li></ul>"
)
CONCLUSION = (
    "<p>Strong positioning comes from steady habits rather than one big launch. Start with one market "
    "in Singapore, measure the response each month, and expand across APAC once the numbers hold up "
    "for your team.</p>"
)


def build_post_html(year: int = None, faq: bool = False) -> str:
    """A post body that passes every validator check (about 1,150 words, 5 H2 sections)."""
    year = year or date.today().year
    paragraph = "<p>" + (OPENING + FILLER * 4).strip() + "</p>"
    parts = [
        "<h1>Brand Strategy in Singapore</h1>",
        f'<p>Brand strategy matters more than ever for APAC firms heading into {year}, according to '
        f'<a href="https://www.example.com/apac-outlook">a regional outlook</a>.</p>',
    ]
    for i in range(1, 6):
        parts.append(f"<h2>Move {i}: Align Budgets With Buyer Signals</h2>")
        parts.extend([paragraph] * 3)
        if i == 1:
            parts.extend([SOURCES, CHECKLIST])
    if faq:
        parts.extend([
            "<h2>Frequently Asked Questions</h2>",
            "<h3>How long does a rebrand take?</h3><p>Most teams need one to two quarters.</p>",
            "<h3>Which market should we test first?</h3><p>Start where you already have customers.</p>",
        ])
        parts.extend([paragraph] * 2)
    parts.append(CONCLUSION)
    return "\n".join(parts)


def write_post_file(path, html: str, **meta) -> None:
    """Write a post file: YAML frontmatter followed by the HTML body."""
    fm = {
        "title": TITLE,
        "meta_title": TITLE,
        "meta_description": META_DESCRIPTION,
        "keyword": "brand strategy",
        "template_type": "Strategic Framework",
        "tags": ["Strategy", "Singapore"],
        "author": "Mei Tan",
        "image_url": IMAGE_URL,
        "image_alt": IMAGE_ALT,
    }
    fm.update(meta)
    path.write_text(f"---\n{yaml.safe_dump(fm, sort_keys=False)}---\n{html}\n", encoding="utf-8")


class FakeChecker:
    """Stands in for ReachabilityChecker; every URL answers 200 unless configured otherwise."""

    def __init__(self, statuses: dict = None, errors: dict = None, content_type: str = "image/png"):
        self.statuses = statuses or {}
        self.errors = errors or {}
        self.content_type = content_type
        self.calls: list[str] = []

    def head(self, url: str) -> ProbeResult:
        self.calls.append(url)
        if url in self.errors:
            return ProbeResult(url=url, error=self.errors[url])
        return ProbeResult(url=url, status=self.statuses.get(url, 200), content_type=self.content_type)

    def probe_many(self, urls: list[str]) -> list[ProbeResult]:
        return [self.head(u) for u in urls]


@pytest.fixture(name="settings")
def settings_fixture():
    return Settings()


@pytest.fixture(name="post_html")
def post_html_fixture():
    return build_post_html()


@pytest.fixture(name="faq_post_html")
def faq_post_html_fixture():
    return build_post_html(faq=True)


@pytest.fixture(name="post")
def post_fixture(post_html):
    """A PostContent that passes validation."""
    return PostContent(
        title=TITLE, html=post_html, meta_title=TITLE, meta_description=META_DESCRIPTION,
        keyword="brand strategy", tags=["Strategy", "Singapore"], author="Mei Tan",
    )


@pytest.fixture(name="image")
def image_fixture():
    return ImageDescriptor(url=IMAGE_URL, alt_text=IMAGE_ALT)


@pytest.fixture(name="checker")
def checker_fixture():
    return FakeChecker()


@pytest.fixture(name="make_checker")
def make_checker_fixture():
    return FakeChecker


@pytest.fixture(name="make_post_file")
def make_post_file_fixture():
    return write_post_file


@pytest.fixture(name="post_file")
def post_file_fixture(tmp_path, post_html):
    """A valid post file on disk."""
    p = tmp_path / "brand-strategy.html"
    write_post_file(p, post_html)
    return p
