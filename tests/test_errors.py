"""Tests for error classification, messages and code excerpts."""

import re

import pytest
from lark.exceptions import UnexpectedInput

from scad_parser import (
    InvalidInvocationError,
    LexerError,
    ParserError,
    SCADParser,
    SCADParserError,
    SCADSyntaxError,
)
from scad_parser.ast import Location, getASTfromString
from scad_parser.tokens import TokenKind

from conftest import parse_failure


class TestLexerErrors:
    """Input the lexer cannot tokenize."""

    def test_lexer_error(self, parser):
        """Unmatched characters raise LexerError."""
        error = parse_failure(parser, "&%!;", LexerError)
        assert str(error).startswith("Lexer error:\n& [Location: ")
        assert error.token.kind is TokenKind.LEXER_ERROR
        assert error.file == "<string>"

    def test_lexer_error_location(self, parser):
        """The location points at the unmatched run."""
        error = parse_failure(parser, "a = 1;\nb = 2 & 3;", LexerError)
        assert error.location == Location(offset=13, size=1, line_breaks=0, line=2, column=7)

    def test_lexer_error_is_syntax_error(self):
        """Lexer errors share the syntax error base."""
        assert issubclass(LexerError, SCADSyntaxError)
        assert issubclass(LexerError, SCADParserError)


class TestParserErrors:
    """Token sequences without a derivation."""

    def test_parser_error(self, parser):
        """A misplaced keyword raises ParserError."""
        error = parse_failure(parser, "myVar module ;", ParserError)
        message = str(error)
        assert re.match(r"Parser error: Unexpected token 'module' \(Type: IDENTIFIER, \[Location: ", message)
        assert 'Last tokens: ["myVar", "module"]' in message

    def test_last_tokens(self, parser):
        """At most the last three tokens are reported."""
        error = parse_failure(parser, "a = 1; b = 2 3;", ParserError)
        assert [str(token) for token in error.last_tokens] == ["=", "2", "3"]
        assert error.token.value == "3"

    def test_unexpected_end_of_input(self, parser):
        """Input ending mid-statement is a parser error at the last token."""
        error = parse_failure(parser, "x = ", ParserError)
        assert error.token.value == "="

    def test_error_on_first_token(self, parser):
        """A statement cannot start with a closing bracket."""
        error = parse_failure(parser, ")", ParserError)
        assert error.location.line == 1
        assert error.location.column == 1

    def test_lark_error_is_chained(self, parser):
        """The underlying lark exception is kept as the cause."""
        error = parse_failure(parser, "cube(1)", ParserError)
        assert isinstance(error.__cause__, UnexpectedInput)

    def test_error_from_convenience_function(self):
        """getASTfromString raises the same errors."""
        with pytest.raises(ParserError):
            getASTfromString("module ;")

    def test_file_identifier(self):
        """Errors carry the file identifier they were parsed under."""
        with pytest.raises(ParserError) as excinfo:
            SCADParser().parse_ast(file="model.scad", code="= 1;")
        assert excinfo.value.file == "model.scad"


class TestInvalidInvocation:
    """Calling the entry point without input."""

    def test_no_code_no_file(self, parser):
        """Neither code nor file raises InvalidInvocationError."""
        with pytest.raises(InvalidInvocationError, match="You have to pass either code or file parameter!"):
            parser.parse_ast()

    def test_is_value_error(self):
        """InvalidInvocationError is also a ValueError."""
        assert issubclass(InvalidInvocationError, ValueError)


class TestCodeExcerpt:
    """Rendering of source excerpts."""

    def test_excerpt_in_message(self, parser):
        """The excerpt is appended to the message."""
        error = parse_failure(parser, "a = 1;\nb = = 2;\nc = 3;", ParserError)
        assert str(error).endswith("Excerpt:\n\n" + error.excerpt)
        assert error.excerpt == "\n".join([
            "1: a = 1;",
            "2: b = = 2;",
            "       ^",
            "3: c = 3;",
        ])

    def test_excerpt_padding_and_marker(self, parser):
        """Line numbers are zero-padded and the marker spans the token."""
        code = "\n".join(f"v{n} = {n};" for n in range(1, 10)) + "\nlonger_name name2 = 1;\nz = 1;"
        error = parse_failure(parser, code, ParserError)
        assert error.location.line == 10
        lines = error.excerpt.split("\n")
        assert lines[0] == "07: v7 = 7;"
        assert lines[3] == "10: longer_name name2 = 1;"
        assert lines[4] == " " * 16 + "^---^"
        assert lines[-1] == "11: z = 1;"

    def test_excerpt_window(self, parser):
        """At most three lines are shown on either side."""
        parser.code_cache["f"] = "\n".join(f"line {n}" for n in range(1, 21))
        excerpt = parser.get_code_excerpt("f", Location(line=10, column=1, size=4))
        lines = [line for line in excerpt.split("\n") if line[:1].isdigit()]
        assert lines[0].startswith("07: ")
        assert lines[-1].startswith("13: ")

    def test_custom_window(self, parser):
        """The window size is configurable."""
        parser.code_cache["f"] = "a\nb\nc\nd\ne"
        excerpt = parser.get_code_excerpt("f", Location(line=3, column=1, size=1), lines=1)
        assert excerpt == "2: b\n3: c\n   ^\n4: d"


class TestTokenLookup:
    """Token cache queries."""

    def test_find_tokens(self, parser):
        """Tokens can be filtered by value and kind."""
        parser.parse_ast(code="a = 1; b = a;")
        found = parser.find_tokens("<string>", value="a")
        assert [(t.line, t.column) for t in found] == [(1, 1), (1, 12)]
        identifiers = parser.find_tokens("<string>", kind=TokenKind.IDENTIFIER)
        assert [str(t) for t in identifiers] == ["a", "b", "a"]
        assert parser.find_tokens("<string>", value="a", kind=TokenKind.FLOAT) == []

    def test_get_token(self, parser):
        """get_token finds the token covering a column."""
        parser.parse_ast(file="m.scad", code="x = 1;\ncube(size);")
        token = parser.get_token("m.scad", line=2, column=3)
        assert token.kind is TokenKind.ACTION_CALL
        assert token.value == "cube"
        assert parser.get_token("m.scad", line=2, column=7).value == "size"
        assert parser.get_token("m.scad", line=5, column=1) is None

    def test_caches(self, parser):
        """Code and results are cached by file identifier."""
        root = parser.parse_ast(file="k.scad", code="k = 1;")
        assert parser.cache["k.scad"] is root
        assert parser.code_cache["k.scad"] == "k = 1;"
        assert len(parser.token_cache["k.scad"]) == 4

    def test_unknown_file(self, parser):
        """Unknown files have no tokens."""
        assert parser.find_tokens("nope") == []
        assert parser.get_token("nope", 1, 1) is None
