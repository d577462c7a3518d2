"""tinyc/lexer.py – source text → token stream.

Single left-to-right scan with a cursor; never backtracks.  At each
cursor position the first matching rule wins:

    (  )        paren token
    whitespace  skipped
    [0-9]+      number token (digits kept as text)
    "..."       string token (no escapes; payload may be empty)
    [A-Za-z]+   name token
    other       UnknownCharacterError

Public API
----------
``lex(text) -> list[Token]``
    Eager tokenization.

``iter_tokens(text) -> Iterator[Token]``
    Lazy form; yields tokens in the same order.
"""

from __future__ import annotations

import enum
import logging
import string
from dataclasses import dataclass
from typing import Iterator, List

from tinyc.errors import UnknownCharacterError, UnterminatedStringError

__all__ = ["TokenKind", "Token", "Lexer", "lex", "iter_tokens"]

_log = logging.getLogger("tinyc.lexer")

DIGITS = frozenset(string.digits)
LETTERS = frozenset(string.ascii_letters)
QUOTE = '"'


class TokenKind(enum.Enum):
    PAREN = "paren"
    NUMBER = "number"
    STRING = "string"
    NAME = "name"


@dataclass(frozen=True, slots=True)
class Token:
    """One lexical unit.

    ``position`` is the offset of the token's first character (the
    opening quote for strings).
    """

    kind: TokenKind
    value: str
    position: int = 0

    @property
    def is_open(self) -> bool:
        return self.kind is TokenKind.PAREN and self.value == "("

    @property
    def is_close(self) -> bool:
        return self.kind is TokenKind.PAREN and self.value == ")"

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.value!r}@{self.position}"


class Lexer:
    """Cursor-based scanner over one input string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def __iter__(self) -> Iterator[Token]:
        return self.tokens()

    def tokens(self) -> Iterator[Token]:
        text = self.text
        end = len(text)
        while self.pos < end:
            ch = text[self.pos]
            if ch in "()":
                yield Token(TokenKind.PAREN, ch, self.pos)
                self.pos += 1
            elif ch.isspace():
                self.pos += 1
            elif ch in DIGITS:
                yield self._run(TokenKind.NUMBER, DIGITS)
            elif ch == QUOTE:
                yield self._string()
            elif ch in LETTERS:
                yield self._run(TokenKind.NAME, LETTERS)
            else:
                raise UnknownCharacterError(ch, self.pos)

    def _run(self, kind: TokenKind, charset: frozenset) -> Token:
        """Consume the maximal run of characters from *charset*."""
        start = self.pos
        text = self.text
        while self.pos < len(text) and text[self.pos] in charset:
            self.pos += 1
        return Token(kind, text[start:self.pos], start)

    def _string(self) -> Token:
        start = self.pos
        close = self.text.find(QUOTE, start + 1)
        if close < 0:
            raise UnterminatedStringError(start)
        self.pos = close + 1
        return Token(TokenKind.STRING, self.text[start + 1:close], start)


def iter_tokens(text: str) -> Iterator[Token]:
    return Lexer(text).tokens()


def lex(text: str) -> List[Token]:
    """Tokenize *text* completely before returning."""
    tokens = list(iter_tokens(text))
    _log.debug("lexed %d tokens from %d characters", len(tokens), len(text))
    return tokens
