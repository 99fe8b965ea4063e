#######################################################################
# Earley grammar for SCAD
#######################################################################

from __future__ import annotations

from .tokens import TOKEN_SPEC, TokenSpec


# --- Statements ---

STATEMENT_RULES = r"""
start: statement*

?statement: variable
          | line_comment
          | block_comment
          | include
          | use
          | module
          | function
          | for_loop
          | labeled_action
          | action

variable: IDENTIFIER ASSIGN expr EOS

line_comment: COMMENT

block_comment: ML_COMMENT

include: INCLUDE EOS?

use: USE EOS?

module: MODULE_DEFINITION parameters? RPARENT (block | action | for_loop)

function: FUNCTION_DEFINITION parameters? RPARENT ASSIGN expr EOS

for_loop: FOR assignments RPARENT (block | action | for_loop)

action: ACTION_CALL arguments? RPARENT (EOS | block | action | for_loop)

labeled_action: IDENTIFIER SEPARATOR action

block: LBLOCK statement* RBLOCK
"""


# --- Parameter, argument and assignment lists ---

LIST_RULES = r"""
parameters: parameter (COMMA parameter)*

parameter: IDENTIFIER (ASSIGN expr)?

arguments: argument (COMMA argument)*

?argument: named_argument
         | expr

named_argument: IDENTIFIER ASSIGN expr

assignments: assignment (COMMA assignment)*

assignment: IDENTIFIER ASSIGN expr
"""


# --- Expressions ---
# Precedence is encoded by the layering, lowest first.

EXPRESSION_RULES = r"""
?expr: comparison

?comparison: comparison OPERATOR3 sum -> binary
           | sum

?sum: sum OPERATOR2 product -> binary
    | product

?product: product OPERATOR1 unary -> binary
        | unary

?unary: OPERATOR2 atom -> signed
      | atom

?atom: FLOAT -> number
     | STRING -> string
     | BOOL -> boolean
     | IDENTIFIER -> reference
     | vector
     | range
     | LPARENT expr RPARENT -> paren

vector: LVECT (expr (COMMA expr)*)? RVECT

range: LVECT expr SEPARATOR expr (SEPARATOR expr)? RVECT
"""


def build_grammar(token_spec: TokenSpec = TOKEN_SPEC) -> str:
    """Assemble the grammar source for the given token specification.

    Terminals are not defined in the grammar; they are declared from the
    token specification and supplied by the lexer.
    """
    declarations = '%declare ' + ' '.join(token_spec.terminals())
    return '\n'.join([STATEMENT_RULES, LIST_RULES, EXPRESSION_RULES, declarations, ''])


# vim: set ts=4 sw=4 expandtab:
