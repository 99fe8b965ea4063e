#######################################################################
# Earley parser for SCAD
#######################################################################

from __future__ import annotations

import lark

from .grammar import build_grammar
from .lexer import TokenFeed
from .tokens import TOKEN_SPEC, TokenSpec


# --- The parser ---

def getSCADParser(token_spec: TokenSpec = TOKEN_SPEC, debug: bool = False) -> lark.Lark:
    """Create a SCAD grammar parser instance.

    The returned parser consumes an iterable of lexer tokens rather than a
    string; see `SCADParser` for the complete text-to-AST pipeline.

    Args:
        token_spec: Token table whose kinds are declared as terminals.
        debug: If True, enable lark debug output (default: False)

    Returns:
        lark.Lark instance configured for Earley parsing with ambiguity resolution
    """
    return lark.Lark(
        build_grammar(token_spec),
        parser='earley',
        lexer=TokenFeed,
        ambiguity='resolve',
        debug=debug,
    )


from .errors import (  # noqa: E402
    SCADParserError,
    InvalidInvocationError,
    SCADSyntaxError,
    LexerError,
    ParserError,
    RenderError,
)
from .lexer import Lexer, Token  # noqa: E402
from .tokens import TokenKind, TokenRule  # noqa: E402
from .parser import SCADParser  # noqa: E402


# vim: set ts=4 sw=4 expandtab:
