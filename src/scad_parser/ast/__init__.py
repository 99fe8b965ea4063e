import os

from .location import Location

# Import all AST nodes from nodes and values
from .nodes import (
    NodeKind,
    Node,
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
)
from .values import (
    Value,
    NumberValue,
    StringValue,
    BooleanValue,
    VectorValue,
    RangeValue,
    ReferenceValue,
)

# Import ASTBuilder
from .builder import ASTBuilder

# Import serialization functions
from .serialization import (
    ast_to_dict,
    ast_to_json,
    ast_from_dict,
    ast_from_json,
    ast_to_yaml,
    ast_from_yaml,
)


# --- AST convenience functions ---

def getASTfromString(code: str, origin: str = "<string>") -> RootNode:
    """
    Parse SCAD source code from a string and return its abstract syntax tree (AST).

    Args:
        code (str): The SCAD source code to be parsed.
        origin (str): File identifier used for error reporting (default: "<string>").

    Returns:
        RootNode: The root of the parsed tree.

    Raises:
        LexerError: If the code contains characters no token matches.
        ParserError: If the token sequence is not valid SCAD.

    Example:
        ast = getASTfromString("cube([1,2,3]);")
    """
    from ..parser import SCADParser
    return SCADParser().parse_ast(file=origin, code=code)


def getASTfromFile(file: str) -> RootNode:
    """
    Parse a SCAD source file and return its abstract syntax tree (AST).

    Args:
        file (str): Path of the SCAD source file, read as UTF-8.

    Returns:
        RootNode: The root of the parsed tree.

    Raises:
        FileNotFoundError: If the specified file does not exist.
        LexerError: If the file contains characters no token matches.
        ParserError: If the token sequence is not valid SCAD.

    Example:
        ast = getASTfromFile("my_model.scad")
    """
    if not os.path.exists(file):
        raise FileNotFoundError(f"File {file} not found")
    from ..parser import SCADParser
    return SCADParser().parse_ast(file=file)


__all__ = [
    "Location",
    "NodeKind",
    "Node",
    "RootNode",
    "CommentNode",
    "VariableNode",
    "IncludeNode",
    "UseNode",
    "ModuleNode",
    "FunctionNode",
    "ForLoopNode",
    "ActionNode",
    "ExpressionNode",
    "Value",
    "NumberValue",
    "StringValue",
    "BooleanValue",
    "VectorValue",
    "RangeValue",
    "ReferenceValue",
    "ASTBuilder",
    "ast_to_dict",
    "ast_to_json",
    "ast_from_dict",
    "ast_from_json",
    "ast_to_yaml",
    "ast_from_yaml",
    "getASTfromString",
    "getASTfromFile",
]
