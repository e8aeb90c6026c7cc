"""Unit tests for core/validate/validator.py"""

import logging

from postpub.config import Settings
from postpub.core.models import ImageDescriptor
from postpub.core.validate.validator import ContentValidator, validate_post


def test_validate_post_sample_is_valid(post, image, checker):
    """The sample post passes the gate with no errors."""
    result = ContentValidator(Settings(), checker=checker).validate_post(post, image)
    assert result.errors == []
    assert result.valid is True


def test_validate_post_metrics(post, image, checker):
    """Metrics describe the body that was validated."""
    metrics = ContentValidator(Settings(), checker=checker).validate_post(post, image).metrics
    assert metrics.word_count == 1148
    assert metrics.paragraph_count == 18
    assert metrics.heading_count == 6
    assert metrics.link_count == 4
    assert metrics.first_person_count == 0
    assert metrics.regional_mention_count > 2


def test_validate_post_title_boundary(post, image, checker):
    """A 61-character title flips the verdict; 60 is still valid."""
    validator = ContentValidator(Settings(), checker=checker)
    ok = post.model_copy(update={"title": "B" * 60})
    too_long = post.model_copy(update={"title": "B" * 61})
    assert validator.validate_post(ok, image).valid is True
    result = validator.validate_post(too_long, image)
    assert result.valid is False
    assert "Title too long (61 chars, max 60)" in result.errors


def test_validate_post_faq_template(post, image, checker):
    """Validating against the How-To template without an FAQ is an error."""
    result = ContentValidator(Settings(), checker=checker).validate_post(post, image, "How-To / Playbook")
    assert result.valid is False
    assert any("Frequently Asked Questions" in e for e in result.errors)


def test_validate_post_deterministic(post, image, checker):
    """Identical input and network answers give identical results."""
    validator = ContentValidator(Settings(), checker=checker)
    assert validator.validate_post(post, image) == validator.validate_post(post, image)


def test_validate_post_errors_in_check_order(post, checker):
    """Messages keep the order of the checks that produced them."""
    bad = post.model_copy(update={"title": "", "meta_title": ""})
    result = ContentValidator(Settings(), checker=checker).validate_post(bad, None)
    assert result.errors[:2] == ["Title is empty", "Meta title is missing"]


def test_validate_post_network_failures_never_raise(post, make_checker):
    """Unreachable image and links are reported, not raised."""
    image = ImageDescriptor(url="https://cdn.example.com/gone.png", alt_text="A descriptive alt text")
    checker = make_checker(errors={image.url: "connection refused", "https://www.example.com/sbr": "timed out"})
    result = ContentValidator(Settings(), checker=checker).validate_post(post, image)
    assert result.errors == ["Image URL not accessible: connection refused"]
    assert "Link unreachable: https://www.example.com/sbr (timed out)" in result.warnings


def test_validate_post_offline(post, image):
    """online=False makes no probes and still validates the rest."""
    validator = ContentValidator(Settings(), online=False)
    assert validator.checker is None
    assert validator.validate_post(post, image).valid is True


def test_validate_post_function(post, image):
    """The module-level helper builds a validator per call."""
    assert validate_post(post, image, online=False).valid is True


def test_validate_post_logs_errors_at_warning(post, image, checker, caplog):
    """Each error is logged at WARNING; the verdict at INFO."""
    long_title = post.model_copy(update={"title": "A" * 61})
    with caplog.at_level(logging.INFO, logger="postpub"):
        ContentValidator(Settings(), checker=checker).validate_post(long_title, image)
    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert "Validation error: Title too long (61 chars, max 60)" in warnings
    assert any(r.levelno == logging.INFO and "FAIL" in r.getMessage() for r in caplog.records)
