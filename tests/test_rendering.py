"""Markdown to sanitised HTML."""
import pytest

from blogstore.rendering import render_markdown


@pytest.mark.parametrize("text", [None, ""])
def test_empty_input_renders_empty(text):
    assert render_markdown(text) == ""


def test_basic_markdown():
    html = render_markdown("# Heading\n\nSome **bold** and a [link](https://example.com).")
    assert "<h1>Heading</h1>" in html
    assert "<strong>bold</strong>" in html
    assert '<a href="https://example.com">link</a>' in html


def test_fenced_code_and_tables():
    html = render_markdown("```\nprint('hi')\n```\n\n| a | b |\n|---|---|\n| 1 | 2 |\n")
    assert "<pre><code>" in html
    assert "<table>" in html and "<td>1</td>" in html


def test_script_and_unsafe_links_are_stripped():
    html = render_markdown('Hi <script>alert(1)</script>\n\n[x](javascript:alert(1))')
    assert "<script>" not in html
    assert "javascript:" not in html
