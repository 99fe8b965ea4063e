"""JSON and YAML serialization for SCAD AST trees.

This module provides functions to serialize AST trees to JSON and YAML formats,
and to deserialize them back to AST nodes.

Example:
    from scad_parser.ast import getASTfromString, ast_to_json, ast_from_json

    ast = getASTfromString("cube(10);")
    json_str = ast_to_json(ast)
    ast_restored = ast_from_json(json_str)
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any

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


# Registry mapping node kinds to classes for deserialization
_NODE_REGISTRY: dict[str, type[Node]] = {
    cls.kind.value: cls
    for cls in [
        # Statements
        RootNode,
        CommentNode,
        VariableNode,
        IncludeNode,
        UseNode,
        ModuleNode,
        FunctionNode,
        ForLoopNode,
        ActionNode,
        ExpressionNode,
        # Values
        NumberValue,
        StringValue,
        BooleanValue,
        VectorValue,
        RangeValue,
        ReferenceValue,
    ]
}


def _serialize_location(location: Location) -> dict[str, Any]:
    """Serialize a Location to a dictionary."""
    return dataclasses.asdict(location)


def _serialize_value(value: Any, include_location: bool) -> Any:
    """Serialize a field value recursively."""
    if value is None:
        return None
    elif isinstance(value, Node):
        return _serialize_node(value, include_location)
    elif isinstance(value, list):
        return [_serialize_value(item, include_location) for item in value]
    elif isinstance(value, dict):
        return {key: _serialize_value(item, include_location) for key, item in value.items()}
    elif isinstance(value, (str, int, float, bool)):
        return value
    else:
        raise TypeError(f"Unsupported type for serialization: {type(value)}")


def _serialize_node(node: Node, include_location: bool) -> dict[str, Any]:
    """Serialize a single AST node to a dictionary."""
    result: dict[str, Any] = {
        "_type": node.kind.value,
    }

    if include_location:
        result["_location"] = _serialize_location(node.location)

    for field in dataclasses.fields(node):
        if field.name == "location":
            continue
        value = getattr(node, field.name)
        result[field.name] = _serialize_value(value, include_location)

    return result


def ast_to_dict(
    ast: Node | list[Node] | None,
    include_location: bool = True,
) -> dict[str, Any] | list[dict[str, Any]] | None:
    """Convert an AST to a Python dictionary (JSON-serializable).

    Args:
        ast: An AST node, list of AST nodes, or None.
        include_location: If True, include source location information (default: True).

    Returns:
        A dictionary representation of the AST, a list of dictionaries, or None.

    Example:
        ast = getASTfromString("x = 42;")
        data = ast_to_dict(ast)
    """
    if ast is None:
        return None
    elif isinstance(ast, list):
        return [_serialize_node(node, include_location) for node in ast]
    else:
        return _serialize_node(ast, include_location)


def ast_to_json(
    ast: Node | list[Node] | None,
    include_location: bool = True,
    indent: int | None = 2,
) -> str:
    """Serialize an AST to a JSON string.

    Args:
        ast: An AST node, list of AST nodes, or None.
        include_location: If True, include source location information (default: True).
        indent: Indentation level for pretty-printing. Use None for compact output.

    Returns:
        A JSON string representation of the AST.
    """
    data = ast_to_dict(ast, include_location=include_location)
    return json.dumps(data, indent=indent)


def _deserialize_value(value: Any) -> Any:
    """Deserialize a field value recursively."""
    if value is None:
        return None
    elif isinstance(value, dict) and "_type" in value:
        return _deserialize_node(value)
    elif isinstance(value, dict):
        return {key: _deserialize_value(item) for key, item in value.items()}
    elif isinstance(value, list):
        return [_deserialize_value(item) for item in value]
    elif isinstance(value, (str, int, float, bool)):
        return value
    else:
        raise TypeError(f"Unsupported type for deserialization: {type(value)}")


def _deserialize_node(data: dict[str, Any]) -> Node:
    """Deserialize a single AST node from a dictionary."""
    if "_type" not in data:
        raise ValueError("Missing '_type' field in node data")

    type_name = data["_type"]
    if type_name not in _NODE_REGISTRY:
        raise ValueError(f"Unknown node type: {type_name}")

    node_class = _NODE_REGISTRY[type_name]

    if "_location" in data:
        location = Location(**data["_location"])
    else:
        location = Location()

    field_names = {f.name for f in dataclasses.fields(node_class) if f.name != "location"}

    kwargs: dict[str, Any] = {"location": location}
    for key, value in data.items():
        if key.startswith("_"):
            continue  # Skip _type, _location
        if key in field_names:
            kwargs[key] = _deserialize_value(value)

    return node_class(**kwargs)


def ast_from_dict(data: dict[str, Any] | list[dict[str, Any]] | None) -> Node | list[Node] | None:
    """Reconstruct an AST from a Python dictionary.

    Args:
        data: A dictionary, list of dictionaries, or None (as returned by ast_to_dict).

    Returns:
        An AST node, list of AST nodes, or None.

    Raises:
        ValueError: If the data contains an unknown node type or is malformed.
    """
    if data is None:
        return None
    elif isinstance(data, list):
        return [_deserialize_node(item) for item in data]
    else:
        return _deserialize_node(data)


def ast_from_json(json_str: str) -> Node | list[Node] | None:
    """Deserialize an AST from a JSON string.

    Raises:
        ValueError: If the JSON contains an unknown node type or is malformed.
        json.JSONDecodeError: If the string is not valid JSON.
    """
    data = json.loads(json_str)
    return ast_from_dict(data)


def ast_to_yaml(
    ast: Node | list[Node] | None,
    include_location: bool = True,
) -> str:
    """Serialize an AST to a YAML string.

    Requires PyYAML to be installed: pip install scad_parser[yaml]

    Raises:
        ImportError: If PyYAML is not installed.
    """
    try:
        import yaml
    except ImportError:
        raise ImportError(
            "PyYAML is required for YAML serialization. "
            "Install it with: pip install scad_parser[yaml]"
        )

    data = ast_to_dict(ast, include_location=include_location)
    return yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)


def ast_from_yaml(yaml_str: str) -> Node | list[Node] | None:
    """Deserialize an AST from a YAML string.

    Requires PyYAML to be installed: pip install scad_parser[yaml]

    Raises:
        ImportError: If PyYAML is not installed.
        ValueError: If the YAML contains an unknown node type or is malformed.
    """
    try:
        import yaml
    except ImportError:
        raise ImportError(
            "PyYAML is required for YAML deserialization. "
            "Install it with: pip install scad_parser[yaml]"
        )

    data = yaml.safe_load(yaml_str)
    return ast_from_dict(data)
