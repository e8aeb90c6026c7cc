"""JSON-LD structured data (Article, FAQPage, BreadcrumbList) for a post"""

import re
from datetime import datetime, timezone
from typing import Optional

from postpub.config import Settings
from postpub.core.models import PostContent
from postpub.core.utils.text import extract_text, slugify


SCHEMA_CONTEXT = "https://schema.org"
FAQ_SECTION_RE = re.compile(
    r'<h2\b[^>]*>\s*(?:Frequently Asked Questions|FAQs?)\s*</h2\s*>(.*?)(?=<h2\b|$)',
    re.IGNORECASE | re.DOTALL,
)
QUESTION_RE = re.compile(r'<h3\b[^>]*>((?:(?!<h3\b).)*?)</h3\s*>\s*<p\b[^>]*>(.*?)</p\s*>', re.IGNORECASE | re.DOTALL)


def article_schema(
    post: PostContent,
    image_url: Optional[str],
    author: Optional[str],
    publish_at: Optional[datetime],
    site_url: str,
    org_name: str,
    ) -> dict:
    site_url = site_url.rstrip("/")
    published = (publish_at or datetime.now(timezone.utc)).isoformat()
    author = author or org_name
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "Article",
        "headline": post.title,
        "description": post.meta_description,
        "image": image_url or f"{site_url}/content/images/default-og.png",
        "author": {
            "@type": "Person",
            "name": author,
            "url": f"{site_url}/author/{slugify(author)}",
        },
        "publisher": {
            "@type": "Organization",
            "name": org_name,
            "logo": {"@type": "ImageObject", "url": f"{site_url}/content/images/logo.png"},
        },
        "datePublished": published,
        "dateModified": published,
        "mainEntityOfPage": {"@type": "WebPage", "@id": f"{site_url}/{slugify(post.title)}"},
    }


def extract_faqs(html: str) -> list[tuple[str, str]]:
    """Return (question, answer) pairs: each H3 in the FAQ section with the paragraph right after it."""
    m = FAQ_SECTION_RE.search(html or "")
    if not m:
        return []
    faqs = []
    for q, a in QUESTION_RE.findall(m.group(1)):
        question, answer = extract_text(q), extract_text(a)
        if question and answer:
            faqs.append((question, answer))
    return faqs


def faq_schema(html: str) -> dict | None:
    faqs = extract_faqs(html)
    if not faqs:
        return None
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "FAQPage",
        "mainEntity": [
            {"@type": "Question", "name": q, "acceptedAnswer": {"@type": "Answer", "text": a}}
            for q, a in faqs
        ],
    }


def breadcrumb_schema(title: str, site_url: str, category: str = "insights") -> dict:
    site_url = site_url.rstrip("/")
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": 1, "name": "Home", "item": site_url},
            {"@type": "ListItem", "position": 2, "name": category.title(), "item": f"{site_url}/{category}"},
            {"@type": "ListItem", "position": 3, "name": title},
        ],
    }


def build_schema(
    post: PostContent,
    image_url: Optional[str] = None,
    publish_at: Optional[datetime] = None,
    settings: Settings = None,
    ) -> list[dict]:
    """Article, FAQPage when the post has FAQs, then BreadcrumbList."""
    s = settings or Settings()
    schemas = [article_schema(post, image_url, post.author, publish_at, s.site_url, s.org_name)]
    if (faq := faq_schema(post.html)) is not None:
        schemas.append(faq)
    schemas.append(breadcrumb_schema(post.title, s.site_url))
    return schemas
