from __future__ import annotations

from exam_app.core.markdown_renderer import MarkdownRenderer


def test_render_fragment_converts_markdown_and_keeps_math():
    html = MarkdownRenderer().render_fragment("Solve **carefully**: $x^2 = 4$")

    assert "<strong>carefully</strong>" in html
    assert "$x^2 = 4$" in html


def test_render_fragment_placeholder_for_blank_text():
    assert MarkdownRenderer().render_fragment("   ") == "<p><em>No content provided.</em></p>"


def test_render_inline_has_no_paragraph_wrapper():
    assert MarkdownRenderer().render_inline(" *x* ") == "<em>x</em>"


def test_raw_html_is_escaped_by_default():
    assert "&lt;script&gt;" in MarkdownRenderer().render_fragment("<script>alert(1)</script>")
