from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union

from .nodes import Node, NodeKind


# --- Value nodes. ---
# Values render as source-like literals instead of tags.

@dataclass(eq=False)
class Value(Node):
    """Base class for literal and reference values."""

    def to_string(self, indent: int = 0) -> str:
        return '  ' * indent + self.literal()

    def literal(self) -> str:
        raise NotImplementedError


def _format_number(value: float) -> str:
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


@dataclass(eq=False)
class NumberValue(Value):
    """A numeric literal, kept as magnitude plus sign.

    Example:
        NumberValue("1.5e3")  # value == 1500.0

    Attributes:
        value: The magnitude. A string literal is converted with `float()`.
        negative: True if the literal was negated.
    """
    kind: ClassVar[NodeKind] = NodeKind.NUMBER
    value: Union[float, str]
    negative: bool = False

    def __post_init__(self):
        self.value = float(self.value)
        super().__post_init__()

    def set_negative(self, negative: bool) -> NumberValue:
        self.negative = negative
        return self

    def literal(self):
        return ('-' if self.negative else '') + _format_number(self.value)


@dataclass(eq=False)
class StringValue(Value):
    """A double-quoted string literal; `value` is the body without quotes."""
    kind: ClassVar[NodeKind] = NodeKind.STRING
    value: str

    def literal(self):
        return f'"{self.value}"'


@dataclass(eq=False)
class BooleanValue(Value):
    kind: ClassVar[NodeKind] = NodeKind.BOOLEAN
    value: bool

    def literal(self):
        return 'true' if self.value else 'false'


@dataclass(eq=False)
class VectorValue(Value):
    """A `[a, b, ...]` literal; `value` holds the element expressions."""
    kind: ClassVar[NodeKind] = NodeKind.VECTOR
    value: list[Node] = field(default_factory=list)

    def literal(self):
        return '[' + ', '.join(str(item) for item in self.value) + ']'


@dataclass(eq=False)
class RangeValue(Value):
    """A `[start:end]` or `[start:step:end]` range.

    The three-part source form puts the step in the middle, so
    `[0:2:10]` means start 0, step 2, end 10.
    """
    kind: ClassVar[NodeKind] = NodeKind.RANGE
    start: Node
    end: Node
    step: Optional[Node] = None

    def literal(self):
        if self.step is None:
            return f"[{self.start}:{self.end}]"
        return f"[{self.start}:{self.step}:{self.end}]"


@dataclass(eq=False)
class ReferenceValue(Value):
    """A reference to a variable by name, optionally negated."""
    kind: ClassVar[NodeKind] = NodeKind.REFERENCE
    name: str
    negative: bool = False

    def set_negative(self, negative: bool) -> ReferenceValue:
        self.negative = negative
        return self

    def literal(self):
        return ('-' if self.negative else '') + self.name
