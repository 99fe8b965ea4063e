"""Tests for AST node construction, string rendering and equality."""

from scad_parser.ast import (
    ActionNode,
    BooleanValue,
    CommentNode,
    ExpressionNode,
    ForLoopNode,
    FunctionNode,
    IncludeNode,
    Location,
    ModuleNode,
    NodeKind,
    NumberValue,
    RangeValue,
    ReferenceValue,
    RootNode,
    StringValue,
    UseNode,
    VariableNode,
    VectorValue,
)


def _num(val, negative=False):
    return NumberValue(val, negative=negative)


def _ref(name):
    return ReferenceValue(name)


def test_value_literals_str():
    assert str(_num(5)) == "5"
    assert str(_num("2.5").set_negative(True)) == "-2.5"
    assert str(_num(1e-3)) == "0.001"
    assert str(StringValue("hi")) == '"hi"'
    assert str(BooleanValue(True)) == "true"
    assert str(BooleanValue(False)) == "false"
    assert str(VectorValue([_num(1), StringValue("s")])) == '[1, "s"]'
    assert str(RangeValue(_num(0), _num(10))) == "[0:10]"
    assert str(RangeValue(_num(0), _num(10), _num(2))) == "[0:2:10]"
    assert str(ReferenceValue("w", negative=True)) == "-w"


def test_expression_str():
    expr = ExpressionNode(_ref("a"), _num(1), "+")
    assert str(expr) == "(a + 1)"
    assert str(expr.set_negative(True)) == "- (a + 1)"
    assert str(ExpressionNode(_num(3))) == "3"
    nested = ExpressionNode(_ref("a"), ExpressionNode(_ref("b"), _ref("c"), "*"), "+")
    assert str(nested) == "(a + (b * c))"


def test_statement_tags_str():
    assert str(VariableNode("x", _num(5))) == '<Variable name="x" type="NumberValue">5</Variable>'
    assert str(CommentNode("  hi ")) == "<Comment>hi</Comment>"
    assert str(IncludeNode("a.scad")) == "<Include>a.scad</Include>"
    assert str(UseNode("a.scad")) == "<Use>a.scad</Use>"
    assert str(ActionNode("#cube", [_num(1)])) == '<Action name="cube" modifier="#" params="1"></Action>'
    assert str(ActionNode("cube", [VariableNode("center", BooleanValue(True))]).set_label("p")) == \
        '<Action name="cube" label="p" params="center=true"></Action>'
    assert str(FunctionNode("f", ["x"], ExpressionNode(_ref("x"), _num(2), "*"))) == \
        '<Function name="f" params="x">(x * 2)</Function>'
    loop = ForLoopNode([VariableNode("i", RangeValue(_num(0), _num(10)))])
    assert str(loop) == '<ForLoop params="i=[0:10]"></ForLoop>'


def test_nested_indentation_str():
    root = RootNode(children=[
        VariableNode("x", _num(5)),
        ModuleNode("m", ["a"], children=[ActionNode("cube")]),
    ])
    assert str(root) == "\n".join([
        "<Root>",
        '  <Variable name="x" type="NumberValue">5</Variable>',
        '  <Module name="m" params="a">',
        '    <Action name="cube"></Action>',
        "  </Module>",
        "</Root>",
    ])


def test_to_string_indent():
    assert ActionNode("cube").to_string(2) == '    <Action name="cube"></Action>'


class TestConstruction:
    """Construction rules of individual nodes."""

    def test_number_from_string(self):
        """Numeric strings are converted to floats."""
        assert _num("1.5e3").value == 1500.0
        assert _num(7).value == 7.0

    def test_comment_trimming(self):
        """Only single-line comments are trimmed."""
        assert CommentNode("  x  ").text == "x"
        assert CommentNode("  x  ", multiline=True).text == "  x  "

    def test_modifier_split(self):
        """A modifier is split from the name unless given explicitly."""
        assert (ActionNode("%cube").modifier, ActionNode("%cube").name) == ("%", "cube")
        action = ActionNode("cube", modifier="!")
        assert (action.modifier, action.name) == ("!", "cube")
        assert ActionNode("cube").modifier == ""

    def test_function_wraps_value(self):
        """A function body that is a value is wrapped."""
        function = FunctionNode("one", [], _num(1))
        assert function.expression.kind is NodeKind.EXPRESSION
        assert function.expression.parent is function
        assert function.expression.left_expression.parent is function.expression

    def test_is_binary(self):
        """is_binary needs both a right operand and an operator."""
        assert ExpressionNode(_num(1), _num(2), "+").is_binary
        assert not ExpressionNode(_num(1)).is_binary

    def test_use_is_include(self):
        """UseNode specializes IncludeNode with its own kind."""
        assert isinstance(UseNode("x"), IncludeNode)
        assert UseNode("x").kind is NodeKind.USE


class TestParentLinks:
    """Parent back-references."""

    def test_set_children(self):
        """set_children drops None entries and adopts the rest."""
        root = RootNode()
        child = ActionNode("cube")
        assert root.set_children([None, child, None]) is root
        assert root.children == [child]
        assert child.parent is root

    def test_field_nodes_are_adopted(self):
        """Nodes held in fields point at their holder."""
        value = VectorValue([_num(1), _num(2)])
        variable = VariableNode("v", value)
        assert value.parent is variable
        assert all(item.parent is value for item in value.value)

    def test_parent_is_weak(self):
        """A node does not keep its parent alive."""
        child = ActionNode("cube")
        root = RootNode(children=[child])
        assert child.parent is root
        del root
        assert child.parent is None


class TestIsEqual:
    """Structural equality."""

    def test_location_is_ignored(self):
        """Nodes at different locations compare equal."""
        a = VariableNode("x", _num(1), location=Location(offset=4, size=1, line=2, column=3))
        b = VariableNode("x", _num(1))
        assert a.is_equal(b)

    def test_kind_must_match(self):
        """Include and use of the same file differ."""
        assert not IncludeNode("a.scad").is_equal(UseNode("a.scad"))
        assert not _num(1).is_equal(BooleanValue(True))

    def test_sign_matters(self):
        """Negative and positive numbers differ."""
        assert not _num(1).is_equal(_num(1, negative=True))
        assert _num("1.0").is_equal(_num(1))

    def test_vectors_compare_elementwise(self):
        """Vectors of different length or content differ."""
        assert VectorValue([_num(1), _num(2)]).is_equal(VectorValue([_num(1), _num(2)]))
        assert not VectorValue([_num(1)]).is_equal(VectorValue([_num(1), _num(2)]))
        assert not VectorValue([_num(1), _num(3)]).is_equal(VectorValue([_num(1), _num(2)]))

    def test_children_compared(self):
        """Children are part of the structure."""
        a = ModuleNode("m", children=[ActionNode("cube")])
        b = ModuleNode("m", children=[ActionNode("sphere")])
        assert not a.is_equal(b)
        assert a.is_equal(ModuleNode("m", children=[ActionNode("cube")]))

    def test_not_a_node(self):
        """Comparing with other objects is false."""
        assert not _num(1).is_equal(1.0)
        assert not _ref("a").is_equal(None)
