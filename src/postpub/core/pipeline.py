"""Pipeline step functions: validate, convert, and build orchestration"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from postpub.config import Settings
from postpub.core.convert.convert import DocumentConverter
from postpub.core.export import build_post_payload, write_outputs
from postpub.core.models import ImageDescriptor, PostContent, ValidationResult
from postpub.core.parse import load_post
from postpub.core.schema import build_schema
from postpub.core.seo import SeoReport, build_report
from postpub.core.utils.text import slugify
from postpub.core.validate.reachability import ReachabilityChecker
from postpub.core.validate.validator import ContentValidator
from postpub.crud.history import TopicHistoryStore


logger = logging.getLogger(__name__)


class PostRejected(Exception):
    """Raised by run_build when a post fails the quality gate."""

    def __init__(self, title: str, validation: ValidationResult):
        self.title = title
        self.validation = validation
        super().__init__(f"Post {title!r} rejected with {len(validation.errors)} error(s)")


@dataclass
class BuildResult:
    slug:       str
    post:       PostContent
    image:      ImageDescriptor
    validation: ValidationResult
    report:     SeoReport
    nodes:      list
    payload:    dict
    schema:     list[dict]
    paths:      list[Path] = field(default_factory=list)


def run_validate(
    path: str | Path,
    settings: Settings,
    checker: Optional[ReachabilityChecker] = None,
    online: bool = True,
    ) -> tuple[PostContent, ImageDescriptor, ValidationResult]:
    """Load the post at path and run the quality gate. Returns (post, image, validation)."""
    post, image = load_post(Path(path))
    validation = ContentValidator(settings, checker=checker, online=online).validate_post(post, image)
    return post, image, validation


def run_convert(path: str | Path, settings: Settings) -> list:
    """Load the post at path and convert its body to document nodes."""
    post, _ = load_post(Path(path))
    return DocumentConverter(settings).convert(post.html)


def run_build(
    path: str | Path,
    settings: Settings,
    store: Optional[TopicHistoryStore] = None,
    status: str = "draft",
    publish_at: Optional[datetime] = None,
    checker: Optional[ReachabilityChecker] = None,
    online: bool = True,
    output_dir: Optional[Path] = None,
    ) -> BuildResult:
    """Validate, convert, and write CMS outputs for one post.

    Raises PostRejected when the post fails validation; nothing is written or
    recorded in that case. On success the title is recorded in store, if given.
    """
    post, image, validation = run_validate(path, settings, checker, online)
    if not validation.valid:
        raise PostRejected(post.title, validation)

    if store is not None and store.is_used(post.title):
        logger.warning("Title %r already in topic history", post.title)

    report = build_report(post, validation, image)
    nodes = DocumentConverter(settings).convert(post.html)
    payload = build_post_payload(post, nodes, image, status=status, publish_at=publish_at)
    schema = build_schema(post, image.url, publish_at, settings)
    slug = slugify(post.title) or slugify(Path(path).stem) or "post"

    out_dir = Path(output_dir or settings.output_dir)
    paths = list(write_outputs(slug, payload, report, schema, out_dir))
    if store is not None:
        store.record(post.title, post.keyword)
    logger.info("Built %s (%s, SEO %d/%s)", slug, status, report.score, report.grade)
    return BuildResult(
        slug=slug, post=post, image=image, validation=validation, report=report,
        nodes=nodes, payload=payload, schema=schema, paths=paths,
    )
