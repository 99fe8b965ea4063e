#######################################################################
# Token specification for the SCAD lexer
#######################################################################

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Mapping


IDENTIFIER_PATTERN = r'[A-Za-z_$][A-Za-z0-9_]*'

MODIFIERS = ('!', '#', '*', '%')


class TokenKind(str, Enum):
    """Kinds of tokens produced by the lexer.

    The values double as the terminal names of the grammar.
    """
    INCLUDE = 'INCLUDE'
    USE = 'USE'
    MODULE_DEFINITION = 'MODULE_DEFINITION'
    FUNCTION_DEFINITION = 'FUNCTION_DEFINITION'
    ACTION_CALL = 'ACTION_CALL'
    FOR = 'FOR'
    COMMENT = 'COMMENT'
    ML_COMMENT = 'ML_COMMENT'
    COMMA = 'COMMA'
    SEPARATOR = 'SEPARATOR'
    LVECT = 'LVECT'
    RVECT = 'RVECT'
    LPARENT = 'LPARENT'
    RPARENT = 'RPARENT'
    LBLOCK = 'LBLOCK'
    RBLOCK = 'RBLOCK'
    BOOL = 'BOOL'
    OPERATOR1 = 'OPERATOR1'
    OPERATOR2 = 'OPERATOR2'
    OPERATOR3 = 'OPERATOR3'
    ASSIGN = 'ASSIGN'
    IDENTIFIER = 'IDENTIFIER'
    STRING = 'STRING'
    FLOAT = 'FLOAT'
    EOL = 'EOL'
    EOS = 'EOS'
    WHITESPACE = 'WHITESPACE'
    LEXER_ERROR = 'LEXER_ERROR'


@dataclass(frozen=True)
class TokenRule:
    """A single match rule of the token table.

    Attributes:
        kind: The kind of token this rule produces.
        pattern: Regular expression source. If it has a capture group, the
            first group becomes the token value.
        line_breaks: True if a match may span multiple lines.
        keywords: Maps a captured value to a more specific token kind.
    """
    kind: TokenKind
    pattern: str
    line_breaks: bool = False
    keywords: Mapping[str, TokenKind] = field(default_factory=dict)

    @classmethod
    def literal(cls, kind: TokenKind, text: str) -> "TokenRule":
        return cls(kind, re.escape(text))

    @classmethod
    def keyword_set(cls, kind: TokenKind, *words: str) -> "TokenRule":
        alternatives = '|'.join(re.escape(word) for word in words)
        return cls(kind, rf'(?:{alternatives})(?![A-Za-z0-9_])')


class TokenSpec:
    """Ordered, immutable table of token rules.

    A TokenSpec is handed to both the lexer and the grammar builder, so the
    set of terminals the grammar declares always matches what the lexer emits.
    """

    def __init__(self, rules):
        self._rules = tuple(rules)
        self._compiled = tuple((rule, re.compile(rule.pattern)) for rule in self._rules)
        self._by_kind = {rule.kind: rule for rule in self._rules}

    @property
    def rules(self) -> tuple[TokenRule, ...]:
        return self._rules

    def match_all(self, code: str, pos: int) -> Iterator[tuple[TokenRule, re.Match]]:
        """Yield every rule matching at `pos`, in table order."""
        for rule, regex in self._compiled:
            match = regex.match(code, pos)
            if match is not None and match.end() > pos:
                yield rule, match

    def may_span_lines(self, kind: TokenKind) -> bool:
        rule = self._by_kind.get(kind)
        return rule is not None and rule.line_breaks

    def refine(self, kind: TokenKind, value: str) -> TokenKind:
        """Return the keyword kind registered for `value`, or `kind` itself."""
        rule = self._by_kind.get(kind)
        if rule is None:
            return kind
        return rule.keywords.get(value, kind)

    def terminals(self) -> list[str]:
        """Names of every terminal this spec can emit, in table order."""
        names = []
        for rule in self._rules:
            for kind in (rule.kind, *rule.keywords.values()):
                if kind.value not in names:
                    names.append(kind.value)
        return names


# --- Default token table ---
# Call and definition rules require a trailing '(' and therefore win over the
# bare identifier rule on longest match.

TOKEN_SPEC = TokenSpec([
    TokenRule(TokenKind.INCLUDE, r'include\s*<([^>]*)>', line_breaks=True),
    TokenRule(TokenKind.USE, r'use\s*<([^>]*)>', line_breaks=True),
    TokenRule(TokenKind.MODULE_DEFINITION,
              rf'module\s+({IDENTIFIER_PATTERN})\s*\(', line_breaks=True),
    TokenRule(TokenKind.FUNCTION_DEFINITION,
              rf'function\s+({IDENTIFIER_PATTERN})\s*\(', line_breaks=True),
    TokenRule(TokenKind.ACTION_CALL,
              rf'([!#*%]?{IDENTIFIER_PATTERN})\s*\(', line_breaks=True,
              keywords={'for': TokenKind.FOR}),
    TokenRule(TokenKind.COMMENT, r'//([^\n]*)\n?', line_breaks=True),
    TokenRule(TokenKind.ML_COMMENT, r'/\*([\s\S]*?)\*/', line_breaks=True),
    TokenRule.literal(TokenKind.COMMA, ','),
    TokenRule.literal(TokenKind.SEPARATOR, ':'),
    TokenRule.literal(TokenKind.LVECT, '['),
    TokenRule.literal(TokenKind.RVECT, ']'),
    TokenRule.literal(TokenKind.LPARENT, '('),
    TokenRule.literal(TokenKind.RPARENT, ')'),
    TokenRule.literal(TokenKind.LBLOCK, '{'),
    TokenRule.literal(TokenKind.RBLOCK, '}'),
    TokenRule.keyword_set(TokenKind.BOOL, 'true', 'false'),
    TokenRule(TokenKind.OPERATOR1, r'[*/%]'),
    TokenRule(TokenKind.OPERATOR2, r'[+\-]'),
    TokenRule(TokenKind.OPERATOR3, r'<=|>=|==|!=|&&|\|\||<|>'),
    TokenRule.literal(TokenKind.ASSIGN, '='),
    TokenRule(TokenKind.IDENTIFIER, IDENTIFIER_PATTERN),
    TokenRule(TokenKind.STRING, r'"((?:[^"\\\n]|\\.)*)"'),
    TokenRule(TokenKind.FLOAT, r'[0-9]+(?:\.[0-9]*)?(?:[eE][-+]?[0-9]+)?'),
    TokenRule(TokenKind.EOL, r'\r?\n', line_breaks=True),
    TokenRule(TokenKind.EOS, r'[ \t]*;'),
    TokenRule(TokenKind.WHITESPACE, r'[ \t\r]+'),
])


# vim: set ts=4 sw=4 expandtab:
