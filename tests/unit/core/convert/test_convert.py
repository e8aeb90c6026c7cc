"""Unit tests for core/convert/convert.py"""

import logging

import pytest

import postpub.core.convert.convert as convert_module
from postpub.config import Settings
from postpub.core.convert.convert import FALLBACK_MESSAGE, DocumentConverter, convert, fallback_document
from postpub.core.models import BoldText, Heading, Link, Paragraph, Text, block_text


def test_convert_round_trip_example():
    """The title H1 is dropped and the paragraph keeps bold and link spans."""
    nodes = convert('<h1>T</h1><p>Hello <strong>world</strong>, visit <a href="https://x.com">us</a>.</p>')
    assert nodes == [Paragraph(children=[
        Text(value="Hello "),
        BoldText(value="world"),
        Text(value=", visit "),
        Link(url="https://x.com", text="us"),
        Text(value="."),
    ])]
    assert block_text(nodes[0]) == "Hello world, visit us."


def test_convert_drops_only_first_h1():
    """A second H1 is kept as a level-1 heading."""
    nodes = convert("<h1>A</h1><p>x</p><h1>B</h1>")
    assert [type(n) for n in nodes] == [Paragraph, Heading]
    assert nodes[1].level == 1
    assert block_text(nodes[1]) == "B"


def test_convert_separates_word_and_bold():
    """word<strong>x</strong> never fuses into 'wordx'."""
    nodes = convert("<p>word<strong>x</strong></p>")
    assert block_text(nodes[0]) == "word x"


def test_convert_spacing_repair_can_be_disabled():
    """With repair_spacing off the source spacing is kept as-is."""
    nodes = DocumentConverter(Settings(repair_spacing=False)).convert("<p>word<strong>x</strong></p>")
    assert block_text(nodes[0]) == "wordx"


@pytest.mark.parametrize("html", ["", "   ", "<h1>Only a title</h1>", "<div>no blocks</div>"])
def test_convert_falls_back_when_nothing_converts(html):
    """Inputs with no convertible blocks produce the single fallback paragraph."""
    assert convert(html) == fallback_document()


def test_fallback_document_text():
    """The fallback is one paragraph carrying the manual-edit message."""
    [node] = fallback_document()
    assert block_text(node) == FALLBACK_MESSAGE


def test_convert_never_raises(monkeypatch, caplog):
    """An unexpected failure is logged and replaced by the fallback document."""
    def boom(*args, **kwargs):
        raise RuntimeError("cleanup exploded")

    monkeypatch.setattr(convert_module, "clean_html", boom)
    with caplog.at_level(logging.ERROR, logger="postpub.core.convert.convert"):
        nodes = convert("<p>fine</p>")
    assert nodes == fallback_document()
    assert "cleanup exploded" in caplog.text


def test_convert_skips_failing_block(monkeypatch):
    """One block failing to convert does not lose its neighbours."""
    original = convert_module.convert_block

    def flaky(block):
        if block.tag == "h2":
            raise ValueError("bad heading")
        return original(block)

    monkeypatch.setattr(convert_module, "convert_block", flaky)
    nodes = convert("<h2>Broken</h2><p>Kept</p>")
    assert nodes == [Paragraph(children=[Text(value="Kept")])]


def test_convert_markdown_answer():
    """A markdown answer with no HTML blocks is rendered first."""
    nodes = convert("## Heading\n\nSome **bold** text.")
    assert nodes[0] == Heading(level=2, children=[Text(value="Heading")])
    assert nodes[1] == Paragraph(children=[Text(value="Some "), BoldText(value="bold"), Text(value=" text.")])


def test_convert_strips_code_fence_wrappers():
    """Document wrappers and code fences around the HTML are removed."""
    nodes = convert("```html\n<html><body><p>Hi</p></body></html>\n```")
    assert nodes == [Paragraph(children=[Text(value="Hi")])]


def test_convert_is_deterministic(post_html):
    """Converting the same input twice gives identical trees."""
    assert convert(post_html) == convert(post_html)


def test_convert_garbage_input_is_non_empty():
    """Arbitrary junk still yields at least one node."""
    assert len(convert("<<<>>> <p <a")) >= 1


def test_convert_keeps_comparison_text():
    """Comparison operators in a paragraph survive conversion."""
    [node] = convert("<p>If 5 < 10 and 10 > 3 then the ratio holds.</p>")
    assert block_text(node) == "If 5 < 10 and 10 > 3 then the ratio holds."
