"""Tests for gfmify.converter.highlight."""

from __future__ import annotations

import html
import re

import pytest
from pygments.token import Comment, Keyword, Name, Number, Operator, String, Text

from gfmify.converter.highlight import find_lexer, highlight, prism_class


class TestFindLexer:
    def test_known(self):
        assert find_lexer("python") is not None
        assert find_lexer("ts") is not None

    @pytest.mark.parametrize("name", ["", "nosuchlang", "c++ but wrong"])
    def test_unknown_returns_none(self, name):
        assert find_lexer(name) is None


class TestPrismClass:
    @pytest.mark.parametrize(
        "ttype, expected",
        [
            (Keyword, "keyword"),
            (Keyword.Declaration, "keyword"),
            (Keyword.Constant, "boolean"),
            (Name.Function, "function"),
            (Name.Class, "class-name"),
            (Name.Tag, "tag"),
            (Name.Attribute, "attr-name"),
            (String.Double, "string"),
            (String.Regex, "regex"),
            (Number.Integer, "number"),
            (Comment.Single, "comment"),
            (Operator, "operator"),
            (Operator.Word, "keyword"),
        ],
    )
    def test_mapping(self, ttype, expected):
        assert prism_class(ttype) == expected

    def test_plain_text_unmapped(self):
        assert prism_class(Text) is None
        assert prism_class(Name) is None


class TestHighlight:
    def test_text_preserved(self):
        code = 'def f(x):\n    return x + "<b>"  # note'
        out = highlight(code, find_lexer("python"))
        assert html.unescape(re.sub(r"<[^>]+>", "", out)) == code

    def test_markup_escaped(self):
        out = highlight('s = "<b>"', find_lexer("python"))
        assert "&lt;b&gt;" in out
        assert "<b>" not in out

    def test_span_classes(self):
        out = highlight("# hi", find_lexer("python"))
        assert out.startswith('<span class="token comment"># hi</span>')
