"""Tests for gfmify.converter.renderer -- the GitHub HTML rendering rules."""

from __future__ import annotations

import pytest
from mistune.core import BlockState

import gfmify.converter.renderer as renderer_module
from gfmify.config import RenderOptions
from gfmify.converter.renderer import (
    ANCHOR_ICON,
    GfmRenderer,
    alert_icon,
    github_extras,
    normalize_language,
    render_inline,
)
from gfmify.converter.tokens import create_tokenizer
from gfmify.errors import GfmifyMathError


def _parse(markdown: str, renderer: GfmRenderer | None = None) -> str:
    md = create_tokenizer(RenderOptions(), renderer=renderer or GfmRenderer())
    github_extras(md)
    return md(markdown)


# =========================================================================
# normalize_language
# =========================================================================


class TestNormalizeLanguage:
    @pytest.mark.parametrize(
        "info, expected",
        [
            ("ts", "ts"),
            ("TS, ignore", "ts"),
            ("Rust,no_run", "rust"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_first_segment_lowercased(self, info, expected):
        assert normalize_language(info) == expected


# =========================================================================
# Heading rule
# =========================================================================


class TestHeading:
    def test_exact_markup(self, renderer):
        html = renderer.heading("Hi", level=2, id="hi")
        assert html == (
            '<h2 id="hi"><a class="anchor" aria-hidden="true" tabindex="-1" '
            f'href="#hi">{ANCHOR_ICON}</a>Hi</h2>\n'
        )

    def test_anchor_present_for_empty_heading(self, renderer):
        html = renderer.heading("", level=1, id="")
        assert 'class="anchor"' in html

    def test_ids_assigned_in_document_order(self):
        html = _parse("# A\n\n## A\n\n### A")
        assert html.index('id="a"') < html.index('id="a-1"') < html.index('id="a-2"')

    def test_slug_from_visible_text(self):
        assert 'id="hello-world"' in _parse("# Hello, *World*!")

    def test_slug_ignores_link_url(self):
        html = _parse("## [v1.2.0](https://github.com/o/r/releases)")
        assert html.startswith('<h2 id="v120">')

    def test_slug_uses_image_alt_not_path(self):
        assert _parse("# ![logo](a.png) Title").startswith('<h1 id="logo-title">')

    def test_slug_keeps_codespan_text(self):
        assert 'id="run-make-test"' in _parse("# Run `make test`")

    def test_heading_without_id_gets_fallback_slug(self, renderer):
        token = {
            "type": "heading",
            "attrs": {"level": 3},
            "children": [{"type": "text", "raw": "Foot Note"}],
        }
        html = renderer.render_token(token, BlockState())
        assert html.startswith('<h3 id="foot-note">')

    def test_nested_heading_in_blockquote(self):
        assert 'id="inner"' in _parse("> # Inner")


# =========================================================================
# Image rule
# =========================================================================


class TestImage:
    def test_title_defaults_to_empty(self, renderer):
        assert renderer.image("alt", "a.png") == '<img src="a.png" alt="alt" title="" />'

    def test_title_kept(self, renderer):
        assert 'title="T"' in renderer.image("alt", "a.png", "T")

    def test_alt_has_no_markup(self):
        html = _parse("![*em* alt](a.png)")
        assert 'alt="em alt"' in html


# =========================================================================
# Code rule
# =========================================================================


class TestBlockCode:
    def test_unknown_language(self, renderer):
        html = renderer.block_code("a < b\n", info="nosuchlang")
        assert html == '<pre><code class="notranslate">a &lt; b</code></pre>\n'

    def test_known_language(self, renderer):
        html = renderer.block_code("x = 1\n", info="python")
        assert html.startswith('<div class="highlight highlight-source-python notranslate"><pre>')
        assert '<span class="token operator">=</span>' in html

    def test_math_ignored_when_disabled(self, renderer):
        html = renderer.block_code("x^2\n", info="math")
        assert "<math" not in html

    def test_math_rendered_when_enabled(self):
        html = GfmRenderer(allow_math=True).block_code("x^2\n", info="math")
        assert html.startswith("<math")
        assert 'display="block"' in html

    def test_math_failure_falls_back(self, monkeypatch, caplog):
        def fail(expression, *, display):
            raise GfmifyMathError("bad", context={"expression": expression})

        monkeypatch.setattr(renderer_module, "render_math", fail)
        with caplog.at_level("WARNING", logger="gfmify.renderer"):
            html = GfmRenderer(allow_math=True).block_code("\\bad\n", info="math")
        assert html == '<pre><code class="notranslate">\\bad</code></pre>\n'
        assert any("math block rendering failed" in r.getMessage() for r in caplog.records)


# =========================================================================
# Link rule
# =========================================================================


class TestLink:
    def test_anchor(self, renderer):
        assert renderer.link("x", "#top") == '<a href="#top">x</a>'

    def test_external(self, renderer):
        assert renderer.link("x", "http://a.com") == (
            '<a href="http://a.com" rel="noopener noreferrer">x</a>'
        )

    def test_title(self, renderer):
        html = renderer.link("x", "http://a.com", 'say "hi"')
        assert 'title="say &quot;hi&quot;"' in html

    def test_empty_title_omitted(self, renderer):
        assert "title" not in renderer.link("x", "http://a.com", "")

    def test_resolved_against_base(self):
        html = GfmRenderer(base_url="https://host/a/").link("x", "b/c")
        assert 'href="https://host/a/b/c"' in html

    def test_anchor_not_resolved(self):
        html = GfmRenderer(base_url="https://host/").link("x", "#frag")
        assert html == '<a href="#frag">x</a>'

    def test_malformed_href_kept(self):
        html = GfmRenderer(base_url="https://host/").link("x", "http://[::1")
        assert 'href="http://[::1"' in html
        assert 'rel="noopener noreferrer"' in html

    def test_relative_base_keeps_href(self):
        html = GfmRenderer(base_url="not-absolute").link("x", "/p")
        assert 'href="/p"' in html


# =========================================================================
# GitHub extras
# =========================================================================


class TestExtras:
    def test_alert_markup(self, renderer):
        html = renderer.alert("<p>body</p>\n", variant="warning")
        assert html == (
            '<div class="markdown-alert markdown-alert-warning">\n'
            f'<p class="markdown-alert-title">{alert_icon("warning")}Warning</p>\n'
            "<p>body</p>\n</div>\n"
        )

    @pytest.mark.parametrize(
        "variant, icon",
        [
            ("note", "info"),
            ("tip", "light-bulb"),
            ("important", "report"),
            ("warning", "alert"),
            ("caution", "stop"),
        ],
    )
    def test_alert_icon_per_variant(self, variant, icon):
        svg = alert_icon(variant)
        assert svg.startswith(f'<svg class="octicon octicon-{icon} mr-2"')
        assert svg.endswith("</path></svg>")

    def test_alert_icon_unknown_variant(self):
        assert alert_icon("danger") == ""

    def test_alert_inside_list_item(self):
        html = _parse("- > [!TIP]\n  > nested")
        assert "markdown-alert-tip" in html
        assert "[!TIP]" not in html
        assert "<blockquote>" not in html

    def test_alert_inside_blockquote(self):
        html = _parse("> > [!CAUTION]\n> > deep")
        assert "markdown-alert-caution" in html

    @pytest.mark.parametrize("kind", ["NOTE", "tip", "Important", "WARNING", "CAUTION"])
    def test_alert_kinds(self, kind):
        html = _parse(f"> [!{kind}]\n> text")
        assert f"markdown-alert-{kind.lower()}" in html

    def test_alert_marker_alone(self):
        html = _parse("> [!TIP]")
        assert "markdown-alert-tip" in html
        assert "[!TIP]" not in html

    def test_unknown_alert_kind_is_blockquote(self):
        html = _parse("> [!DANGER]\n> text")
        assert "<blockquote>" in html

    def test_task_item(self, renderer):
        assert renderer.task_list_item("a", checked=True) == (
            '<li><input type="checkbox" disabled checked /> a</li>\n'
        )
        assert renderer.task_list_item("<p>b</p>\n") == (
            '<li><p><input type="checkbox" disabled /> b</p>\n</li>\n'
        )

    def test_table_cell(self, renderer):
        assert renderer.table_cell("x", align="center", head=True) == '  <th align="center">x</th>\n'
        assert renderer.table_cell("y") == "  <td>y</td>\n"

    def test_footnote_ref(self, renderer):
        assert renderer.footnote_ref("note", index=2) == (
            '<sup><a href="#footnote-2" id="footnote-ref-2" data-footnote-ref '
            'aria-describedby="footnote-label">2</a></sup>'
        )

    def test_footnote_item_backref_inside_paragraph(self, renderer):
        html = renderer.footnote_item("<p>text</p>\n", key="a", index=1)
        assert html.startswith('<li id="footnote-1">\n<p>text <a href="#footnote-ref-1"')
        assert html.endswith("</a></p>\n</li>\n")

    def test_footnotes_section(self, renderer):
        html = renderer.footnotes("<li>x</li>\n")
        assert html.startswith('<section class="footnotes" data-footnotes>')
        assert '<h2 id="footnote-label" class="sr-only">Footnotes</h2>' in html

    def test_summary_blank_line_collapsed(self, renderer):
        assert renderer.block_html("<details>\n<summary>S</summary>\n\n").endswith(
            "</summary>\n"
        )

    def test_render_inline(self):
        md = create_tokenizer(RenderOptions(), renderer=GfmRenderer())
        assert render_inline(md, "*a* [b](#c)") == '<em>a</em> <a href="#c">b</a>'
