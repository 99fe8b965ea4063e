#######################################################################
# Text to AST pipeline with per-file caches and located errors
#######################################################################

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from lark.exceptions import UnexpectedInput

from . import getSCADParser
from .ast.builder import ASTBuilder
from .ast.location import Location
from .ast.nodes import RootNode
from .errors import InvalidInvocationError, LexerError, ParserError, SCADSyntaxError
from .lexer import Lexer, Token
from .tokens import TOKEN_SPEC, TokenKind, TokenSpec

logger = logging.getLogger(__name__)


DEFAULT_FILE = "<string>"


class SCADParser(object):
    """Parses SCAD code into an AST and keeps per-file parse state.

    Three caches are kept, keyed by file identifier: `cache` (parse
    results), `code_cache` (sources) and `token_cache` (the tokens fed to
    the grammar). They are mutated without locking, so a single instance
    must not parse the same file identifier from two threads at once.

    Example:
        parser = SCADParser()
        root = parser.parse_ast(code="cube([1, 2, 3]);")
        token = parser.get_token("<string>", line=1, column=2)
    """

    def __init__(self, token_spec: TokenSpec = TOKEN_SPEC,
                 ignored_tokens: Iterable[TokenKind] = (TokenKind.WHITESPACE, TokenKind.EOL),
                 debug: bool = False):
        self.token_spec = token_spec
        self.ignored_tokens = frozenset(ignored_tokens)
        self.lexer = Lexer(token_spec)
        self.grammar = getSCADParser(token_spec, debug=debug)
        self.cache: dict[str, RootNode] = {}
        self.code_cache: dict[str, str] = {}
        self.token_cache: dict[str, list[Token]] = {}

    def parse_ast(self, file: Optional[str] = None, code: Optional[str] = None) -> RootNode:
        """Parse `code`, or the contents of `file` if no code is given.

        Args:
            file: File identifier. Read as UTF-8 when `code` is None.
            code: Source text. Parsed under `file`, or "<string>" if no file
                is given.

        Returns:
            The root node of the parsed tree.

        Raises:
            InvalidInvocationError: If neither code nor file is a string.
            LexerError: If the input contains characters no token matches.
            ParserError: If the token sequence is not valid SCAD.
        """
        if not isinstance(file, str) and not isinstance(code, str):
            raise InvalidInvocationError("You have to pass either code or file parameter!")

        if code is None:
            with open(file, 'r', encoding='utf-8') as f:
                code = f.read()
        if file is None:
            file = DEFAULT_FILE

        self.code_cache[file] = code
        self.cache[file] = self.parse(code, file)
        return self.cache[file]

    def parse(self, code: str, file: str) -> RootNode:
        """Feed `code` through the lexer and the grammar, one token at a time."""
        captured = self.token_cache[file] = []
        self.code_cache[file] = code
        logger.debug("Parsing %s (%d characters)", file, len(code))
        try:
            tree = self.grammar.parse(self._feed(code, captured))
        except UnexpectedInput as error:
            raise self._syntax_error(file, captured) from error
        root = ASTBuilder().transform(tree)
        logger.debug("Parsed %s: %d tokens, %d statements",
                     file, len(captured), len(root.children))
        return root

    def _feed(self, code: str, captured: list[Token]) -> Iterator[Token]:
        self.lexer.reset(code)
        for token in self.lexer:
            if token.kind in self.ignored_tokens:
                continue
            captured.append(token)
            yield token

    def _syntax_error(self, file: str, captured: list[Token]) -> SCADSyntaxError:
        last = captured[-1] if captured else None
        location = Location.from_token(last)
        excerpt = self.get_code_excerpt(file, location)
        if last is not None and last.kind is TokenKind.LEXER_ERROR:
            error = LexerError(file, last, location, excerpt)
        else:
            error = ParserError(file, last, location, excerpt, captured[-3:])
        logger.debug("%s in %s at %s", type(error).__name__, file, location)
        return error

    # --- Token lookup ---

    def find_tokens(self, file: str, value: Optional[str] = None,
                    kind: Optional[TokenKind] = None) -> list[Token]:
        """Return the captured tokens of `file` matching value and/or kind."""
        return [
            token for token in self.token_cache.get(file, [])
            if (value is None or token.value == value)
            and (kind is None or token.type == kind)
        ]

    def get_token(self, file: str, line: int, column: int) -> Optional[Token]:
        """Return the first captured token of `file` covering line/column."""
        for token in self.token_cache.get(file, []):
            if token.line == line and token.column <= column < token.column + token.size:
                return token
        return None

    def get_code_excerpt(self, file: str, location: Location, lines: int = 3) -> str:
        """Render the source lines around `location` with a marker under it.

        Each line is prefixed with its zero-padded line number. The marker
        spans the located token: `^` for a single character, `^--^` for
        longer tokens.
        """
        source = self.code_cache.get(file, '').split('\n')
        first = max(1, location.line - lines)
        last = min(len(source), location.line + lines)
        width = len(str(last))

        if location.size > 1:
            marker = '^' + '-' * (location.size - 2) + '^'
        else:
            marker = '^'

        excerpt = []
        for number in range(first, last + 1):
            excerpt.append(f"{number:0{width}d}: {source[number - 1]}")
            if number == location.line:
                excerpt.append(' ' * (width + 2 + location.column - 1) + marker)
        return '\n'.join(excerpt)


# vim: set ts=4 sw=4 expandtab:
