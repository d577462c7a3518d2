"""tinyc/parser.py – token stream → source AST.

Recursive descent with a single node-producing procedure,
:meth:`Parser.parse_expression`::

    program    ::= expression*
    expression ::= NUMBER | STRING | "(" NAME expression* ")"

Design principles
-----------------
* **Fail-fast** – the first token that fits no form at its position
  raises :class:`~tinyc.errors.UnexpectedTokenError`; running out of
  tokens inside a call raises
  :class:`~tinyc.errors.UnexpectedEndOfInputError`.  There is no
  recovery.
* **Bounded nesting** – with ``max_depth`` set, a call nested deeper
  than the limit raises :class:`~tinyc.errors.MaxDepthExceededError`
  before the interpreter stack is at risk.

Public API
----------
``parse(tokens) -> tinyc.ast.Program``
    Parse a complete token sequence.

``parse_text(text) -> tinyc.ast.Program``
    Lex and parse in one call (REPL/tests).
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from tinyc import ast as A
from tinyc.errors import (
    MaxDepthExceededError,
    UnexpectedEndOfInputError,
    UnexpectedTokenError,
)
from tinyc.lexer import Token, TokenKind, lex

__all__ = ["Parser", "parse", "parse_text"]

_log = logging.getLogger("tinyc.parser")

_EXPRESSION_START = ["number", "string", "'('"]


class Parser:
    """Recursive-descent parser over a fully materialised token list."""

    def __init__(self, tokens: Sequence[Token], max_depth: Optional[int] = None) -> None:
        self.tokens = list(tokens)
        self.current = 0
        self.max_depth = max_depth

    # ─────────────────────────────────────────────────────────────
    # Cursor helpers
    # ─────────────────────────────────────────────────────────────

    def _peek(self) -> Optional[Token]:
        if self.current < len(self.tokens):
            return self.tokens[self.current]
        return None

    def _advance(self) -> Token:
        token = self.tokens[self.current]
        self.current += 1
        return token

    def _end_position(self) -> Optional[int]:
        if not self.tokens:
            return None
        last = self.tokens[-1]
        # Strings span their quotes.
        width = len(last.value) + 2 if last.kind is TokenKind.STRING else len(last.value)
        return last.position + width

    # ─────────────────────────────────────────────────────────────
    # Grammar
    # ─────────────────────────────────────────────────────────────

    def parse(self) -> A.Program:
        body: List[A.Expression] = []
        while self._peek() is not None:
            body.append(self.parse_expression())
        _log.debug("parsed %d top-level expressions", len(body))
        return A.Program(body=tuple(body))

    def parse_expression(self, depth: int = 0) -> A.Expression:
        token = self._peek()
        if token is None:
            raise UnexpectedEndOfInputError(_EXPRESSION_START, self._end_position())

        if token.kind is TokenKind.NUMBER:
            self._advance()
            return A.NumberLiteral(token.value)

        if token.kind is TokenKind.STRING:
            self._advance()
            return A.StringLiteral(token.value)

        if token.is_open:
            return self._parse_call(depth + 1)

        raise UnexpectedTokenError(token, _EXPRESSION_START)

    def _parse_call(self, depth: int) -> A.CallExpression:
        open_paren = self._advance()
        if self.max_depth is not None and depth > self.max_depth:
            raise MaxDepthExceededError(self.max_depth, open_paren.position)

        name = self._peek()
        if name is None:
            raise UnexpectedEndOfInputError(["name"], self._end_position())
        if name.kind is not TokenKind.NAME:
            raise UnexpectedTokenError(name, ["name"])
        self._advance()

        params: List[A.Expression] = []
        while True:
            token = self._peek()
            if token is None:
                raise UnexpectedEndOfInputError(["')'"], self._end_position())
            if token.is_close:
                self._advance()
                break
            params.append(self.parse_expression(depth))

        return A.CallExpression(name=name.value, params=tuple(params))


def parse(tokens: Sequence[Token], *, max_depth: Optional[int] = None) -> A.Program:
    """Parse a token sequence into a :class:`tinyc.ast.Program`."""
    return Parser(tokens, max_depth=max_depth).parse()


def parse_text(text: str, *, max_depth: Optional[int] = None) -> A.Program:
    return parse(lex(text), max_depth=max_depth)
