"""
Tests for ParsedDocument lookups.
"""

import pytest

from kanon.parsing import ScopeKind, parse


class TestLines:
    """Tests for line access."""

    def test_line(self):
        document = parse("let a = 1\n    let b = 2\n")
        line = document.line(2)
        assert line.number == 2
        assert line.text == "    let b = 2"
        assert line.indent == 4
        assert line.indentation == "    "
        assert not line.is_blank

    def test_blank_line(self):
        assert parse("a\n   \nb").line(2).is_blank

    @pytest.mark.parametrize("number", [0, 3])
    def test_out_of_range(self, number):
        with pytest.raises(IndexError):
            parse("a\nb").line(number)


class TestTokenNavigation:
    """Tests for neighbouring-token helpers."""

    def test_tokens_on_line(self):
        document = parse("a b\nc\n\nd")
        assert [t.text for t in document.tokens_on_line(1)] == ["a", "b"]
        assert [t.text for t in document.tokens_on_line(2)] == ["c"]
        assert document.tokens_on_line(3) == ()

    def test_previous_and_next(self):
        document = parse("a b")
        a, b = document.tokens
        assert document.previous_token(a) is None
        assert document.next_token(a) is b
        assert document.previous_token(b) is a
        assert document.next_token(b) is None

    def test_on_line_stops_at_line_break(self):
        document = parse("a\nb")
        a, b = document.tokens
        assert document.next_on_line(a) is None
        assert document.previous_on_line(b) is None


class TestLiteralLines:
    """Tests for literal-aware line queries."""

    def test_code_end_ignores_comments(self):
        document = parse("let x = 1 // a long trailing comment")
        assert document.code_end_column(1) == 9

    def test_code_end_ignores_strings(self):
        document = parse('let s = "text"')
        assert document.code_end_column(1) == 7

    def test_code_end_of_empty_line(self):
        assert parse("a\n\nb").code_end_column(2) == 0

    def test_multiline_string_lines(self):
        document = parse('let s = """\nabc\n"""\nx')
        assert not document.is_literal_interior(1)
        assert document.is_literal_interior(2)
        assert document.is_literal_interior(3)
        assert not document.is_literal_interior(4)
        assert document.line_ends_in_string(1)
        assert document.line_ends_in_string(2)
        assert not document.line_ends_in_string(3)

    def test_block_comment_is_interior_but_not_string(self):
        document = parse("/*\nnote\n*/")
        assert document.is_literal_interior(2)
        assert not document.line_ends_in_string(1)


class TestScopeQueries:
    """Tests for scope iteration."""

    def test_iter_scopes_filter(self):
        document = parse("func f(a: [Int]) {\n}")
        assert [s.kind for s in document.iter_scopes()] == [
            ScopeKind.PARAMETERS,
            ScopeKind.COLLECTION,
            ScopeKind.BLOCK,
        ]
        assert [s.kind for s in document.iter_scopes(ScopeKind.COLLECTION)] == [
            ScopeKind.COLLECTION
        ]

    def test_document_is_unhashable(self):
        with pytest.raises(TypeError):
            hash(parse("a"))
