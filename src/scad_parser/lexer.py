#######################################################################
# Stateful scanner producing located tokens
#######################################################################

from __future__ import annotations

from typing import Iterator, Optional

import lark
from lark.lexer import Lexer as LarkLexer

from .tokens import TOKEN_SPEC, TokenKind, TokenSpec


class Token(lark.Token):
    """A lexed token.

    Behaves like a `lark.Token` whose string value is the captured value of
    the match, and additionally keeps the raw matched text and the number of
    line breaks it contains.
    """
    __slots__ = ('text', 'line_breaks')

    text: str
    line_breaks: int

    @classmethod
    def create(cls, kind: TokenKind, text: str, value: str, offset: int,
               line: int, column: int) -> "Token":
        line_breaks = text.count('\n')
        if line_breaks:
            end_column = len(text) - text.rfind('\n')
        else:
            end_column = column + len(text)
        token = cls(kind.value, value, offset, line, column,
                    line + line_breaks, end_column, offset + len(text))
        token.text = text
        token.line_breaks = line_breaks
        return token

    @property
    def kind(self) -> TokenKind:
        return TokenKind(self.type)

    @property
    def offset(self) -> int:
        return self.start_pos

    @property
    def size(self) -> int:
        return len(self.text)


class Lexer(object):
    """Scans a code buffer into tokens, one token per `next()` call.

    Matching is longest-match-first over the ordered rule table; on equal
    length the earlier rule wins. Input that no rule matches is reported as a
    single LEXER_ERROR token, after which the lexer is exhausted.

    Example:
        lexer = Lexer()
        lexer.reset("x = 1;")
        for token in lexer:
            print(token.type, repr(token.text))
    """

    def __init__(self, token_spec: TokenSpec = TOKEN_SPEC):
        self.token_spec = token_spec
        self.reset("")

    def reset(self, code: str) -> None:
        self._code = code
        self._offset = 0
        self._line = 1
        self._line_start = 0
        self._done = False

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next()
            if token is None:
                return
            yield token

    def next(self) -> Optional[Token]:
        if self._done or self._offset >= len(self._code):
            self._done = True
            return None

        best = None
        for rule, match in self.token_spec.match_all(self._code, self._offset):
            if best is None or match.end() > best[1].end():
                best = (rule, match)

        if best is None:
            return self._error_token()

        rule, match = best
        text = match.group(0)
        value = match.group(1) if match.re.groups else text
        kind = self.token_spec.refine(rule.kind, value)
        token = self._emit(kind, text, value)
        if self.token_spec.may_span_lines(rule.kind):
            self._count_lines(text)
        return token

    def _emit(self, kind: TokenKind, text: str, value: str) -> Token:
        column = self._offset - self._line_start + 1
        token = Token.create(kind, text, value, self._offset, self._line, column)
        self._offset += len(text)
        return token

    def _count_lines(self, text: str) -> None:
        breaks = text.count('\n')
        if breaks:
            self._line += breaks
            self._line_start = self._offset - (len(text) - text.rfind('\n') - 1)

    def _error_token(self) -> Token:
        # The offending run ends where some rule matches again, or at a newline.
        end = self._offset + 1
        while end < len(self._code) and self._code[end] != '\n':
            if next(self.token_spec.match_all(self._code, end), None) is not None:
                break
            end += 1
        text = self._code[self._offset:end]
        token = self._emit(TokenKind.LEXER_ERROR, text, text)
        self._done = True
        return token


class TokenFeed(LarkLexer):
    """Adapter handing an already-lexed token stream to lark.

    Used as the custom `lexer` of the Earley parser: whatever object is passed
    to `Lark.parse()` is iterated, and every token is fed to the parser as it
    is pulled from the stream.
    """

    def __init__(self, lexer_conf):
        self.lexer_conf = lexer_conf

    def lex(self, data):
        yield from data


# vim: set ts=4 sw=4 expandtab:
