"""tinyc/grammar.py – reader for the generated C-like syntax.

A PEG grammar (parsimonious) for what :mod:`tinyc.codegen` prints, and
a ``NodeVisitor`` that rebuilds the call structure as *source* AST
nodes.  Because source nodes compare by value, a compilation preserves
structure exactly when::

    read_output(compile(text)) == parse(lex(text))

The grammar is deliberately a little looser than the printer: any
whitespace may separate statements and surround arguments.
"""

from __future__ import annotations

import logging
from typing import Any, List

from parsimonious.exceptions import IncompleteParseError, ParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from tinyc import ast as A
from tinyc.errors import ErrorPhase, MaxDepthExceededError, OutputSyntaxError

__all__ = ["OUTPUT_GRAMMAR", "OutputReader", "read_output"]

_log = logging.getLogger("tinyc.grammar")


OUTPUT_GRAMMAR = Grammar(r'''
    program     = _ statements? _
    statements  = statement (_ statement)*
    statement   = call_stmt / literal

    call_stmt   = call ";"
    call        = identifier "(" _ arguments? _ ")"
    arguments   = argument (_ "," _ argument)*
    argument    = call / literal

    literal     = number / string
    identifier  = ~"[A-Za-z]+"
    number      = ~"[0-9]+"
    string      = ~'"[^"]*"'

    _           = ~r"\s*"
''')


class OutputReader(NodeVisitor):
    """Transforms the parsimonious parse tree into a source AST."""

    grammar = OUTPUT_GRAMMAR
    unwrapped_exceptions = (RecursionError,)

    def generic_visit(self, node: Node, visited_children: List[Any]) -> Any:
        return visited_children

    # ─────────────────────────────────────────────────────────────
    # Structure
    # ─────────────────────────────────────────────────────────────

    def visit_program(self, node: Node, visited_children: List[Any]) -> A.Program:
        _, statements, _ = visited_children
        body = statements[0] if statements else []
        return A.Program(body=tuple(body))

    def visit_statements(self, node: Node, visited_children: List[Any]) -> List[Any]:
        first, rest = visited_children
        return [first] + [stmt for _, stmt in rest]

    def visit_statement(self, node: Node, visited_children: List[Any]) -> Any:
        return visited_children[0]

    def visit_call_stmt(self, node: Node, visited_children: List[Any]) -> A.CallExpression:
        call, _ = visited_children
        return call

    def visit_call(self, node: Node, visited_children: List[Any]) -> A.CallExpression:
        name, _, _, arguments, _, _ = visited_children
        params = arguments[0] if arguments else []
        return A.CallExpression(name=name, params=tuple(params))

    def visit_arguments(self, node: Node, visited_children: List[Any]) -> List[Any]:
        first, rest = visited_children
        return [first] + [arg for *_, arg in rest]

    def visit_argument(self, node: Node, visited_children: List[Any]) -> Any:
        return visited_children[0]

    def visit_literal(self, node: Node, visited_children: List[Any]) -> Any:
        return visited_children[0]

    # ─────────────────────────────────────────────────────────────
    # Terminals
    # ─────────────────────────────────────────────────────────────

    def visit_identifier(self, node: Node, visited_children: List[Any]) -> str:
        return node.text

    def visit_number(self, node: Node, visited_children: List[Any]) -> A.NumberLiteral:
        return A.NumberLiteral(node.text)

    def visit_string(self, node: Node, visited_children: List[Any]) -> A.StringLiteral:
        return A.StringLiteral(node.text[1:-1])


def read_output(text: str) -> A.Program:
    """Parse generated C-like text back into a source-shaped AST.

    parsimonious spends several stack frames per nesting level, so this
    reader gives out well before the compiler's own depth limit; that
    surfaces as :class:`~tinyc.errors.MaxDepthExceededError`.
    """
    try:
        tree = OUTPUT_GRAMMAR.parse(text)
        program = OutputReader().visit(tree)
    except RecursionError:
        raise MaxDepthExceededError(None, phase=ErrorPhase.VERIFY) from None
    except IncompleteParseError as exc:
        raise OutputSyntaxError(
            f"Unexpected text after the last statement: {text[exc.pos:exc.pos + 20]!r}",
            position=exc.pos,
        ) from exc
    except ParseError as exc:
        raise OutputSyntaxError(
            f"Output does not match rule {exc.expr.name or exc.expr.as_rule()!r}",
            position=exc.pos,
        ) from exc
    _log.debug("read back %d statements", len(program.body))
    return program
