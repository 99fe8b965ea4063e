from __future__ import annotations

import re
import weakref
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar, Iterator, Optional

from .location import Location


class NodeKind(str, Enum):
    """Discriminator carried by every node class.

    The values are the tag names used by the string rendering and the
    `_type` key used by serialization.
    """
    ROOT = 'Root'
    COMMENT = 'Comment'
    VARIABLE = 'Variable'
    INCLUDE = 'Include'
    USE = 'Use'
    MODULE = 'Module'
    FUNCTION = 'Function'
    FOR_LOOP = 'ForLoop'
    ACTION = 'Action'
    EXPRESSION = 'Expression'
    NUMBER = 'NumberValue'
    STRING = 'StringValue'
    BOOLEAN = 'BooleanValue'
    VECTOR = 'VectorValue'
    RANGE = 'RangeValue'
    REFERENCE = 'ReferenceValue'


_MODIFIER_RE = re.compile(r'([!#*%]?)(.*)', re.DOTALL)


def _values_equal(a: Any, b: Any) -> bool:
    if isinstance(a, Node):
        return isinstance(b, Node) and a.is_equal(b)
    if isinstance(a, (list, tuple)):
        return (isinstance(b, (list, tuple)) and len(a) == len(b)
                and all(_values_equal(x, y) for x, y in zip(a, b)))
    if isinstance(a, dict):
        return (isinstance(b, dict) and a.keys() == b.keys()
                and all(_values_equal(a[key], b[key]) for key in a))
    return a == b


def _param_text(param: Any) -> str:
    if isinstance(param, VariableNode):
        return f"{param.name}={param.value}"
    return str(param)


# --- AST nodes classes. ---

@dataclass(eq=False)
class Node(object):
    """Base class for all AST nodes.

    Every node knows where it came from in the source, its ordered children,
    and the node holding it. The parent link is a weak reference: a tree is
    owned top-down by its root, and `parent` becomes None once the holder is
    gone.

    Attributes:
        location: Source location of the token that produced this node.
        children: Ordered child statements.
    """
    kind: ClassVar[NodeKind]

    location: Location = field(default_factory=Location, kw_only=True,
                               compare=False, repr=False)
    children: list[Node] = field(default_factory=list, kw_only=True)

    def __post_init__(self):
        self._parent = None
        self.set_children(self.children)
        for f in fields(self):
            if f.name not in ('children', 'location'):
                self._adopt(getattr(self, f.name))

    @property
    def parent(self) -> Optional[Node]:
        return self._parent() if self._parent is not None else None

    def _adopt(self, value: Any) -> None:
        if isinstance(value, Node):
            value._parent = weakref.ref(self)
        elif isinstance(value, (list, tuple)):
            for item in value:
                self._adopt(item)
        elif isinstance(value, dict):
            for item in value.values():
                self._adopt(item)

    def set_children(self, children) -> Node:
        """Replace the children, dropping None entries, and adopt them."""
        self.children = [child for child in children if child is not None]
        self._adopt(self.children)
        return self

    def is_equal(self, other: Any) -> bool:
        """Structural equality, ignoring locations and parent links."""
        if not isinstance(other, Node) or other.kind is not self.kind:
            return False
        return all(
            _values_equal(getattr(self, f.name), getattr(other, f.name))
            for f in fields(self) if f.compare
        )

    def walk(self) -> Iterator[Node]:
        """Yield this node and its descendant statements in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def _attributes(self) -> dict[str, Any]:
        return {}

    def _content(self, indent: int) -> str:
        if not self.children:
            return ''
        pad = '  ' * indent
        inner = ''.join(child.to_string(indent + 1) + '\n' for child in self.children)
        return '\n' + inner + pad

    def to_string(self, indent: int = 0) -> str:
        pad = '  ' * indent
        tag = self.kind.value
        attrs = ''.join(f' {name}="{value}"' for name, value in self._attributes().items())
        return f"{pad}<{tag}{attrs}>{self._content(indent)}</{tag}>"

    def __str__(self):
        return self.to_string()


@dataclass(eq=False)
class RootNode(Node):
    """Top of a parsed tree; its children are the top-level statements."""
    kind: ClassVar[NodeKind] = NodeKind.ROOT


@dataclass(eq=False)
class CommentNode(Node):
    """A `// line` or `/* block */` comment.

    Attributes:
        text: Comment text without the markers. Single-line text is stripped,
            multi-line text is kept exactly as written.
        multiline: True for block comments.
    """
    kind: ClassVar[NodeKind] = NodeKind.COMMENT
    text: str
    multiline: bool = False

    def __post_init__(self):
        if not self.multiline:
            self.text = self.text.strip()
        super().__post_init__()

    def _content(self, indent):
        return self.text


@dataclass(eq=False)
class VariableNode(Node):
    """Assignment of a value or expression to a name.

    Example:
        size = [1, 2, 3];

    Attributes:
        name: The assigned identifier.
        value: A Value node or an ExpressionNode.
    """
    kind: ClassVar[NodeKind] = NodeKind.VARIABLE
    name: str
    value: Node

    def _attributes(self):
        return {'name': self.name, 'type': self.value.kind.value}

    def _content(self, indent):
        return str(self.value)


@dataclass(eq=False)
class IncludeNode(Node):
    """`include <file>` statement.

    Attributes:
        file: The path between the angle brackets, verbatim.
    """
    kind: ClassVar[NodeKind] = NodeKind.INCLUDE
    file: str

    def _content(self, indent):
        return self.file


@dataclass(eq=False)
class UseNode(IncludeNode):
    """`use <file>` statement."""
    kind: ClassVar[NodeKind] = NodeKind.USE


@dataclass(eq=False)
class ModuleNode(Node):
    """Module definition; the children are the body statements.

    Example:
        module box(size, center = false) { cube(size, center); }

    Attributes:
        name: Module name.
        params: Parameter names in declaration order.
        defaults: Default expressions of the parameters that declare one.
    """
    kind: ClassVar[NodeKind] = NodeKind.MODULE
    name: str
    params: list[str] = field(default_factory=list)
    defaults: dict[str, Node] = field(default_factory=dict)

    def _attributes(self):
        attrs = {'name': self.name}
        if self.params:
            attrs['params'] = ', '.join(self.params)
        return attrs


@dataclass(eq=False)
class FunctionNode(Node):
    """Function definition.

    Example:
        function double(x) = x * 2;

    Attributes:
        name: Function name.
        params: Parameter names in declaration order.
        expression: The body, always an ExpressionNode.
        defaults: Default expressions of the parameters that declare one.
    """
    kind: ClassVar[NodeKind] = NodeKind.FUNCTION
    name: str
    params: list[str]
    expression: Node
    defaults: dict[str, Node] = field(default_factory=dict)

    def __post_init__(self):
        if self.expression.kind is not NodeKind.EXPRESSION:
            self.expression = ExpressionNode(self.expression,
                                             location=self.expression.location)
        super().__post_init__()

    def _attributes(self):
        attrs = {'name': self.name}
        if self.params:
            attrs['params'] = ', '.join(self.params)
        return attrs

    def _content(self, indent):
        return str(self.expression)


@dataclass(eq=False)
class ForLoopNode(Node):
    """`for (...)` statement; the children are the loop body.

    Attributes:
        params: One VariableNode per loop assignment.
    """
    kind: ClassVar[NodeKind] = NodeKind.FOR_LOOP
    params: list[VariableNode] = field(default_factory=list)

    def _attributes(self):
        return {'params': ', '.join(_param_text(p) for p in self.params)}


@dataclass(eq=False)
class ActionNode(Node):
    """Invocation of a module, e.g. `#translate([1, 0, 0]) cube(1);`.

    A modifier prefix on the raw name is split off at construction, so
    `ActionNode('#cube')` has name `cube` and modifier `#`.

    Attributes:
        name: Invoked module name without modifier.
        params: Positional argument expressions, and a VariableNode for each
            named argument.
        modifier: One of `! # * %`, or the empty string.
        label: Optional label given as `label: action(...)`.
    """
    kind: ClassVar[NodeKind] = NodeKind.ACTION
    name: str
    params: list[Node] = field(default_factory=list)
    modifier: str = ''
    label: Optional[str] = None

    def __post_init__(self):
        if not self.modifier:
            self.modifier, self.name = _MODIFIER_RE.fullmatch(self.name).groups()
        super().__post_init__()

    def set_label(self, label: Optional[str]) -> ActionNode:
        self.label = label
        return self

    def _attributes(self):
        attrs = {'name': self.name}
        if self.label is not None:
            attrs['label'] = self.label
        if self.modifier:
            attrs['modifier'] = self.modifier
        if self.params:
            attrs['params'] = ', '.join(_param_text(p) for p in self.params)
        return attrs


@dataclass(eq=False)
class ExpressionNode(Node):
    """Unary or binary expression.

    A node without a right operand wraps a single value, either for a
    parenthesised expression or to carry a negation.

    Attributes:
        left_expression: Left operand, or the only operand.
        right_expression: Right operand of a binary expression.
        operator: Operator text of a binary expression.
        negative: True if the whole expression is negated.
    """
    kind: ClassVar[NodeKind] = NodeKind.EXPRESSION
    left_expression: Node
    right_expression: Optional[Node] = None
    operator: Optional[str] = None
    negative: bool = False

    @property
    def is_binary(self) -> bool:
        return self.right_expression is not None and self.operator is not None

    def set_negative(self, negative: bool) -> ExpressionNode:
        self.negative = negative
        return self

    def to_string(self, indent: int = 0) -> str:
        sign = '- ' if self.negative else ''
        if self.is_binary:
            body = f"({self.left_expression} {self.operator} {self.right_expression})"
        else:
            body = str(self.left_expression)
        return '  ' * indent + sign + body
