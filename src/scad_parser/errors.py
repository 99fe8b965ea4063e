"""Exceptions raised by the SCAD parser."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from .ast.location import Location
    from .lexer import Token


class SCADParserError(Exception):
    """Base class for all errors raised by this package."""


class InvalidInvocationError(SCADParserError, ValueError):
    """Raised when an entry point is called without code or file."""


class SCADSyntaxError(SCADParserError):
    """Malformed input, located in the source.

    Attributes:
        file: File identifier the source was parsed under.
        token: The last token captured before the failure, or None.
        location: Location derived from `token`.
        excerpt: Rendered source excerpt around `location`.
    """

    def __init__(self, message: str, file: str, token: Optional["Token"],
                 location: "Location", excerpt: str):
        super().__init__(message)
        self.file = file
        self.token = token
        self.location = location
        self.excerpt = excerpt


class LexerError(SCADSyntaxError):
    """Raised when the input contains characters no token rule matches."""

    def __init__(self, file, token, location, excerpt):
        message = f"Lexer error:\n{token.value} {location}\nExcerpt:\n\n{excerpt}"
        super().__init__(message, file, token, location, excerpt)


class ParserError(SCADSyntaxError):
    """Raised when the token stream has no valid derivation.

    Attributes:
        last_tokens: Up to three tokens seen last, oldest first.
    """

    def __init__(self, file, token, location, excerpt, last_tokens: Sequence["Token"]):
        value = token.value if token is not None else 'undefined'
        kind = token.type if token is not None else 'undefined'
        seen = '", "'.join(str(t) for t in last_tokens)
        message = (
            f"Parser error: Unexpected token '{value}' (Type: {kind}, {location})\n"
            f"Last tokens: [\"{seen}\"]\n"
            f"Excerpt:\n\n{excerpt}"
        )
        super().__init__(message, file, token, location, excerpt)
        self.last_tokens = list(last_tokens)


class RenderError(SCADParserError):
    """Raised when the external renderer exits with an error."""

    def __init__(self, message: str, returncode: int, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
