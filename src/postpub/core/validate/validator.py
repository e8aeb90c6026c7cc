"""Pre-publication quality gate for generated posts"""

import logging
from datetime import date
from typing import Optional

from postpub.config import Settings
from postpub.core.models import CheckResult, ContentMetrics, ImageDescriptor, PostContent, ValidationResult
from postpub.core.utils.text import count_words, extract_text
from postpub.core.validate import checks
from postpub.core.validate.reachability import ReachabilityChecker


logger = logging.getLogger(__name__)


class ContentValidator:
    """Runs every check against a post and aggregates errors, warnings and metrics.

    With online=False no network probes are made: the image is only checked
    for alt text and body links only for count.
    """

    def __init__(self, settings: Settings = None, checker: ReachabilityChecker = None, online: bool = True):
        self.settings = settings or Settings()
        if checker is None and online:
            checker = ReachabilityChecker.from_settings(self.settings)
        self.checker = checker if online else None

    def validate_post(
        self,
        post: PostContent,
        image: Optional[ImageDescriptor] = None,
        template_type: Optional[str] = None,
        today: date = None,
    ) -> ValidationResult:
        s = self.settings
        html = post.html or ""
        template = template_type or post.template_type

        results: list[CheckResult] = [
            checks.check_title(post.title, s),
            checks.check_structure(html, template, s),
            checks.check_voice(html, s),
            checks.check_regional(html, s, today),
            checks.check_seo(post, s),
            checks.check_image(image, s, self.checker),
            checks.check_links(html, s, self.checker),
            checks.check_conclusion(html, s),
            checks.check_facts(html, today),
        ]
        errors = [msg for r in results for msg in r.errors]
        warnings = [msg for r in results for msg in r.warnings]

        result = ValidationResult(
            valid=not errors, errors=errors, warnings=warnings, metrics=self.metrics(html),
        )
        logger.info(
            "Validated %r: %s (%d errors, %d warnings, %d words)",
            post.title, "PASS" if result.valid else "FAIL",
            len(errors), len(warnings), result.metrics.word_count,
        )
        for msg in errors:
            logger.warning("Validation error: %s", msg)
        return result

    def metrics(self, html: str) -> ContentMetrics:
        text = extract_text(html)
        return ContentMetrics(
            word_count=count_words(html),
            paragraph_count=checks.count_paragraphs(html),
            heading_count=len(checks.extract_headings(html)),
            link_count=checks.count_anchors(html),
            first_person_count=checks.count_first_person(text),
            regional_mention_count=checks.count_regional(text, self.settings.regions),
        )


def validate_post(
    post: PostContent,
    image: Optional[ImageDescriptor] = None,
    template_type: Optional[str] = None,
    settings: Settings = None,
    online: bool = True,
) -> ValidationResult:
    """Validate post with a one-off ContentValidator."""
    return ContentValidator(settings, online=online).validate_post(post, image, template_type)
