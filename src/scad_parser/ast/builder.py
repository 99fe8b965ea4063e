from __future__ import annotations

from typing import Any, Optional

import lark
import lark.visitors

from ..tokens import TokenKind
from .location import Location
from .nodes import (
    ActionNode,
    CommentNode,
    ExpressionNode,
    ForLoopNode,
    FunctionNode,
    IncludeNode,
    ModuleNode,
    Node,
    NodeKind,
    RootNode,
    UseNode,
    VariableNode,
)
from .values import (
    BooleanValue,
    NumberValue,
    RangeValue,
    ReferenceValue,
    StringValue,
    VectorValue,
)


# Intermediate results of list rules, told apart by type while reducing.

class _Block(list):
    pass


class _Parameters(list):
    pass


class _Arguments(list):
    pass


class _Assignments(list):
    pass


def _token(children: list[Any], kind: TokenKind) -> Optional[lark.Token]:
    for child in children:
        if isinstance(child, lark.Token) and child.type == kind.value:
            return child
    return None


def _nodes(children: list[Any]) -> list[Node]:
    return [child for child in children if isinstance(child, Node)]


def _of_type(children: list[Any], cls: type, default=None):
    for child in children:
        if isinstance(child, cls):
            return child
    return default


def _body(children: list[Any]) -> list[Node]:
    """Statements of a block, or the single chained statement."""
    block = _of_type(children, _Block)
    if block is not None:
        return list(block)
    return _nodes(children)


class ASTBuilder(lark.visitors.Transformer_NonRecursive):
    """Reduces a lark parse tree into an AST rooted at a RootNode.

    One method per grammar rule; each method instantiates exactly one node
    or value, or an intermediate list for the list rules.

    Example:
        tree = getSCADParser().parse(tokens)
        root = ASTBuilder().transform(tree)
    """

    # --- Statements ---

    def start(self, children):
        return RootNode(children=_nodes(children))

    def variable(self, children):
        name = _token(children, TokenKind.IDENTIFIER)
        value = _nodes(children)[0]
        return VariableNode(str(name), value, location=Location.from_token(name))

    def line_comment(self, children):
        token = children[0]
        return CommentNode(str(token), location=Location.from_token(token))

    def block_comment(self, children):
        token = children[0]
        return CommentNode(str(token), multiline=True, location=Location.from_token(token))

    def include(self, children):
        token = _token(children, TokenKind.INCLUDE)
        return IncludeNode(str(token), location=Location.from_token(token))

    def use(self, children):
        token = _token(children, TokenKind.USE)
        return UseNode(str(token), location=Location.from_token(token))

    def module(self, children):
        token = _token(children, TokenKind.MODULE_DEFINITION)
        parameters = _of_type(children, _Parameters, _Parameters())
        return ModuleNode(
            str(token),
            params=[name for name, _ in parameters],
            defaults={name: default for name, default in parameters if default is not None},
            children=_body(children),
            location=Location.from_token(token),
        )

    def function(self, children):
        token = _token(children, TokenKind.FUNCTION_DEFINITION)
        parameters = _of_type(children, _Parameters, _Parameters())
        return FunctionNode(
            str(token),
            [name for name, _ in parameters],
            _nodes(children)[0],
            defaults={name: default for name, default in parameters if default is not None},
            location=Location.from_token(token),
        )

    def for_loop(self, children):
        token = _token(children, TokenKind.FOR)
        assignments = _of_type(children, _Assignments, _Assignments())
        return ForLoopNode(list(assignments), children=_body(children),
                           location=Location.from_token(token))

    def action(self, children):
        token = _token(children, TokenKind.ACTION_CALL)
        arguments = _of_type(children, _Arguments, _Arguments())
        return ActionNode(str(token), list(arguments), children=_body(children),
                          location=Location.from_token(token))

    def labeled_action(self, children):
        label = _token(children, TokenKind.IDENTIFIER)
        return _nodes(children)[0].set_label(str(label))

    def block(self, children):
        return _Block(_nodes(children))

    # --- Lists ---

    def parameters(self, children):
        return _Parameters(child for child in children if isinstance(child, tuple))

    def parameter(self, children):
        name = _token(children, TokenKind.IDENTIFIER)
        default = _of_type(children, Node)
        return (str(name), default)

    def arguments(self, children):
        return _Arguments(_nodes(children))

    def named_argument(self, children):
        name = _token(children, TokenKind.IDENTIFIER)
        return VariableNode(str(name), _nodes(children)[0], location=Location.from_token(name))

    def assignments(self, children):
        return _Assignments(_nodes(children))

    assignment = named_argument

    # --- Expressions ---

    def binary(self, children):
        left, operator, right = children
        return ExpressionNode(left, right, str(operator), location=Location.from_token(operator))

    def signed(self, children):
        operator, operand = children
        if operator == '+':
            return operand
        if operand.kind in (NodeKind.NUMBER, NodeKind.REFERENCE, NodeKind.EXPRESSION):
            return operand.set_negative(True)
        return ExpressionNode(operand, negative=True, location=Location.from_token(operator))

    def number(self, children):
        token = children[0]
        return NumberValue(str(token), location=Location.from_token(token))

    def string(self, children):
        token = children[0]
        return StringValue(str(token), location=Location.from_token(token))

    def boolean(self, children):
        token = children[0]
        return BooleanValue(token == 'true', location=Location.from_token(token))

    def reference(self, children):
        token = children[0]
        return ReferenceValue(str(token), location=Location.from_token(token))

    def vector(self, children):
        token = _token(children, TokenKind.LVECT)
        return VectorValue(_nodes(children), location=Location.from_token(token))

    def range(self, children):
        token = _token(children, TokenKind.LVECT)
        bounds = _nodes(children)
        if len(bounds) == 3:
            start, step, end = bounds
        else:
            (start, end), step = bounds, None
        return RangeValue(start, end, step, location=Location.from_token(token))

    def paren(self, children):
        token = _token(children, TokenKind.LPARENT)
        return ExpressionNode(_nodes(children)[0], location=Location.from_token(token))
