from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..lexer import Token


@dataclass(frozen=True)
class Location:
    """Where in the source a node or an error originates.

    Attributes:
        offset: Character offset of the token (0-indexed).
        size: Length of the raw token text.
        line_breaks: Number of line breaks inside the token.
        line: Line number (1-indexed).
        column: Column number (1-indexed).
    """
    offset: int = 0
    size: int = 0
    line_breaks: int = 0
    line: int = 1
    column: int = 1

    @classmethod
    def from_token(cls, token: Optional["Token"]) -> "Location":
        if token is None:
            return cls()
        return cls(
            offset=token.start_pos,
            size=len(getattr(token, 'text', token)),
            line_breaks=getattr(token, 'line_breaks', 0),
            line=token.line,
            column=token.column,
        )

    def __str__(self):
        return (
            f"[Location: Offset={self.offset}, Size={self.size}, "
            f"lineBreaks={self.line_breaks}, Line={self.line}, Column={self.column}]"
        )
