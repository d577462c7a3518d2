"""tinyc/sexp.py – canonical S-expression form of the source AST.

Bridges the source AST and :mod:`sexpdata` structures:

* callee names and number text become :class:`sexpdata.Symbol`
  (numbers stay text, so ``007`` survives a dump);
* string literals become Python ``str``;
* a call is a list ``[Symbol(name), param, ...]``.

``dumps`` prints one top-level form per line.  ``loads`` reads such
text (or any input in the call-expression grammar) back through
``sexpdata.parse``, which makes it an independent reader of the input
language: for inputs whose numbers have no leading zeros and whose
strings hold no backslashes, ``loads(text)`` and ``parse_text(text)``
build equal trees.
"""

from __future__ import annotations

from typing import Any, List

import sexpdata
from sexpdata import Symbol

from tinyc import ast as A
from tinyc.errors import ErrorPhase, MaxDepthExceededError, ParseError

__all__ = ["to_sexp", "from_sexp", "dumps", "loads"]

Sexp = Any  # Union[list, Symbol, str, int]


def to_sexp(node: A.Node) -> Sexp:
    """Convert a source-AST node to sexpdata structures.

    A Program converts to the list of its top-level forms.
    """
    if isinstance(node, A.Program):
        return [to_sexp(child) for child in node.body]
    if isinstance(node, A.CallExpression):
        return [Symbol(node.name)] + [to_sexp(p) for p in node.params]
    if isinstance(node, A.NumberLiteral):
        return Symbol(node.value)
    if isinstance(node, A.StringLiteral):
        return node.value
    raise TypeError(f"Not a source-AST node: {node!r}")


def _as_name(s: Sexp) -> str:
    if isinstance(s, Symbol) and s.value().isascii() and s.value().isalpha():
        return s.value()
    raise ParseError(f"Expected call name, got {s!r}", expected=["name"])


def from_sexp(s: Sexp) -> A.Expression:
    """Convert one sexpdata form into a source-AST expression."""
    if isinstance(s, list):
        if not s:
            raise ParseError("Empty call form ()", expected=["name"])
        return A.CallExpression(
            name=_as_name(s[0]),
            params=tuple(from_sexp(p) for p in s[1:]),
        )
    if isinstance(s, bool):
        raise ParseError(f"Unsupported atom {s!r}")
    if isinstance(s, int) and s >= 0:
        return A.NumberLiteral(str(s))
    if isinstance(s, Symbol) and s.value().isascii() and s.value().isdigit():
        return A.NumberLiteral(s.value())
    if isinstance(s, str) and not isinstance(s, Symbol):
        return A.StringLiteral(s)
    raise ParseError(
        f"Unsupported atom {s!r}",
        expected=["number", "string", "call"],
    )


def dumps(program: A.Program) -> str:
    """Render *program* as canonical S-expressions, one form per line.

    Both this module and sexpdata recurse per nesting level and run out
    of stack below the default depth limit; that surfaces as
    :class:`~tinyc.errors.MaxDepthExceededError`.
    """
    try:
        forms: List[Sexp] = to_sexp(program)
        return "\n".join(sexpdata.dumps(form) for form in forms)
    except RecursionError:
        raise MaxDepthExceededError(None, phase=ErrorPhase.CODEGEN) from None


def loads(text: str) -> A.Program:
    """Read S-expression text into a :class:`tinyc.ast.Program`."""
    try:
        forms = sexpdata.parse(text, nil=None, true=None, false=None)
        return A.Program(body=tuple(from_sexp(form) for form in forms))
    except RecursionError:
        raise MaxDepthExceededError(None, phase=ErrorPhase.SYNTAX) from None
