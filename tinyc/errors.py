# tinyc/errors.py
"""
tinyc Error Types

Error hierarchy and structured error codes for every phase of the tinyc
pipeline.

Architecture Overview:
─────────────────────
┌─────────────────────────────────────────────────────────────────────────────┐
│                          Error Hierarchy                                     │
├─────────────────────────────────────────────────────────────────────────────┤
│  CompileError (base)                                                        │
│  ├── LexicalError              - Tokenization failures                      │
│  │   ├── UnknownCharacterError                                              │
│  │   └── UnterminatedStringError                                            │
│  ├── ParseError                - Grammar violations                         │
│  │   ├── UnexpectedTokenError                                               │
│  │   └── UnexpectedEndOfInputError                                          │
│  ├── OutputSyntaxError         - Generated text rejected by the reader      │
│  ├── MaxDepthExceededError     - Nesting limit hit                          │
│  └── InternalError             - Compiler bugs (should never happen)        │
│      ├── UnknownNodeKindError                                               │
│      └── RoundTripMismatchError                                             │
└─────────────────────────────────────────────────────────────────────────────┘

Error Codes:
────────────
Each error has a unique code following the pattern TC-XXXX where XXXX is
a 4-digit number in ranges:
  - 0001-0999: Lexical errors
  - 1000-1999: Syntax errors
  - 3000-3999: Output verification errors
  - 4000-4999: Resource limits
  - 9000-9999: Internal compiler errors

Positions are 0-based character offsets into the source text; they are
turned into line/column pairs only when an error is formatted.
"""

from __future__ import annotations

from enum import Enum, unique
from typing import TYPE_CHECKING, Any, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from tinyc.lexer import Token

__all__ = [
    "ErrorPhase",
    "ErrorCode",
    "ErrorCodes",
    "CompileError",
    "LexicalError",
    "UnknownCharacterError",
    "UnterminatedStringError",
    "ParseError",
    "UnexpectedTokenError",
    "UnexpectedEndOfInputError",
    "OutputSyntaxError",
    "MaxDepthExceededError",
    "InternalError",
    "UnknownNodeKindError",
    "RoundTripMismatchError",
    "line_col",
]


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════════

@unique
class ErrorPhase(Enum):
    """Compilation phase where the error occurred."""

    LEXICAL = "lexical"        # Tokenization
    SYNTAX = "syntax"          # Parsing
    TRANSFORM = "transform"    # Source-AST → target-AST
    CODEGEN = "codegen"        # Target-AST → text
    VERIFY = "verify"          # Output re-reading
    INTERNAL = "internal"      # Compiler internals


class ErrorCode:
    """
    Structured error code, ``TC-NNNN``.

    Compares equal to another ``ErrorCode`` with the same number, or to
    its string form.
    """

    __slots__ = ("prefix", "number", "phase")

    def __init__(self, prefix: str, number: int, phase: ErrorPhase) -> None:
        self.prefix = prefix
        self.number = number
        self.phase = phase

    @property
    def code(self) -> str:
        """Get the full error code string."""
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.phase.name})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class ErrorCodes:
    """Predefined error codes."""

    # LEXICAL ERRORS (0001-0999)
    UNKNOWN_CHARACTER = ErrorCode("TC", 1, ErrorPhase.LEXICAL)
    UNTERMINATED_STRING = ErrorCode("TC", 2, ErrorPhase.LEXICAL)

    # SYNTAX ERRORS (1000-1999)
    INVALID_SYNTAX = ErrorCode("TC", 1000, ErrorPhase.SYNTAX)
    UNEXPECTED_TOKEN = ErrorCode("TC", 1001, ErrorPhase.SYNTAX)
    UNEXPECTED_END_OF_INPUT = ErrorCode("TC", 1002, ErrorPhase.SYNTAX)

    # OUTPUT VERIFICATION (3000-3999)
    OUTPUT_SYNTAX = ErrorCode("TC", 3001, ErrorPhase.VERIFY)

    # LIMITS (4000-4999)
    MAX_DEPTH_EXCEEDED = ErrorCode("TC", 4001, ErrorPhase.SYNTAX)

    # INTERNAL ERRORS (9000-9999)
    INTERNAL_ERROR = ErrorCode("TC", 9000, ErrorPhase.INTERNAL)
    UNKNOWN_NODE_KIND = ErrorCode("TC", 9001, ErrorPhase.INTERNAL)
    ROUND_TRIP_MISMATCH = ErrorCode("TC", 9002, ErrorPhase.VERIFY)


def line_col(source: str, position: int) -> Tuple[int, int]:
    """Convert a 0-based offset into a 1-based ``(line, column)`` pair."""
    position = max(0, min(position, len(source)))
    line = source.count("\n", 0, position) + 1
    column = position - (source.rfind("\n", 0, position) + 1) + 1
    return line, column


def _describe_char(char: str) -> str:
    if len(char) == 1 and not char.isprintable():
        return f"U+{ord(char):04X}"
    return repr(char)


# ═══════════════════════════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════════════════════════

class CompileError(Exception):
    """
    Base exception for all tinyc errors.

    Carries the error code, the offending position (when known) and an
    optional hint for the reader.
    """

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        position: Optional[int] = None,
        hint: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or ErrorCodes.INTERNAL_ERROR
        self.position = position
        self.hint = hint

    @property
    def phase(self) -> ErrorPhase:
        return self.code.phase

    def format(self, filename: str = "<input>", source: Optional[str] = None) -> str:
        """Format as a GCC-style error message.

        When *source* is given the position is rendered as
        ``line:column``; otherwise the raw offset is shown.
        """
        if self.position is None:
            loc = f"{filename}: "
        elif source is not None:
            line, column = line_col(source, self.position)
            loc = f"{filename}:{line}:{column}: "
        else:
            loc = f"{filename}:@{self.position}: "
        text = f"{loc}error[{self.code}]: {self.message}"
        if self.hint:
            text += f"\n  hint: {self.hint}"
        return text

    def __str__(self) -> str:
        if self.position is None:
            return f"[{self.code}] {self.message}"
        return f"[{self.code}] {self.message} (at offset {self.position})"


# ───────────────────────────────────────────────────────────────────────────────
# LEXICAL ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class LexicalError(CompileError):
    """Error during tokenization."""


class UnknownCharacterError(LexicalError):
    """A character that starts no token."""

    def __init__(self, char: str, position: int) -> None:
        super().__init__(
            message=f"Unknown character {_describe_char(char)}",
            code=ErrorCodes.UNKNOWN_CHARACTER,
            position=position,
        )
        self.char = char


class UnterminatedStringError(LexicalError):
    """String literal not closed before the end of input."""

    def __init__(self, position: int) -> None:
        super().__init__(
            message='Unterminated string literal (missing closing ")',
            code=ErrorCodes.UNTERMINATED_STRING,
            position=position,
            hint='Add the closing " character',
        )


# ───────────────────────────────────────────────────────────────────────────────
# SYNTAX ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class ParseError(CompileError):
    """Error during parsing."""

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        position: Optional[int] = None,
        expected: Optional[Sequence[str]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=message,
            code=code or ErrorCodes.INVALID_SYNTAX,
            position=position,
            **kwargs,
        )
        self.expected = list(expected) if expected else []
        if self.expected and not self.hint:
            if len(self.expected) == 1:
                self.hint = f"Expected {self.expected[0]}"
            else:
                self.hint = f"Expected one of: {', '.join(self.expected)}"


def _expected_suffix(expected: Optional[Sequence[str]]) -> str:
    if not expected:
        return ""
    if len(expected) == 1:
        return f", expected {expected[0]}"
    return f", expected one of: {', '.join(expected)}"


class UnexpectedTokenError(ParseError):
    """Token whose kind matches none of the forms allowed at its position."""

    def __init__(self, token: "Token", expected: Optional[Sequence[str]] = None) -> None:
        super().__init__(
            message=(
                f"Unexpected {token.kind.value} token {token.value!r}"
                f"{_expected_suffix(expected)}"
            ),
            code=ErrorCodes.UNEXPECTED_TOKEN,
            position=token.position,
            expected=expected,
        )
        self.token = token


class UnexpectedEndOfInputError(ParseError):
    """Token stream exhausted inside a call expression."""

    def __init__(
        self,
        expected: Optional[Sequence[str]] = None,
        position: Optional[int] = None,
    ) -> None:
        super().__init__(
            message=f"Unexpected end of input{_expected_suffix(expected)}",
            code=ErrorCodes.UNEXPECTED_END_OF_INPUT,
            position=position,
            expected=expected,
        )


# ───────────────────────────────────────────────────────────────────────────────
# OUTPUT / LIMIT ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class OutputSyntaxError(CompileError):
    """Generated C-like text that the output grammar rejects."""

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.OUTPUT_SYNTAX,
            position=position,
        )


class MaxDepthExceededError(CompileError):
    """Nesting deeper than the configured limit, or than the stack allows.

    ``limit`` is ``None`` when no configured limit was hit and the
    interpreter stack ran out first.
    """

    def __init__(
        self,
        limit: Optional[int],
        position: Optional[int] = None,
        phase: ErrorPhase = ErrorPhase.SYNTAX,
    ) -> None:
        if limit is None:
            message = f"Nesting too deep for the interpreter stack during {phase.value}"
            hint = "Flatten the expression or set --max-depth"
        else:
            message = f"Maximum nesting depth of {limit} exceeded"
            hint = "Raise --max-depth or flatten the expression"
        super().__init__(
            message=message,
            code=ErrorCodes.MAX_DEPTH_EXCEEDED,
            position=position,
            hint=hint,
        )
        self.limit = limit
        self.during = phase

    @property
    def phase(self) -> ErrorPhase:
        return self.during


# ───────────────────────────────────────────────────────────────────────────────
# INTERNAL ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class InternalError(CompileError):
    """Invariant violation inside the compiler."""

    def __init__(self, message: str, code: Optional[ErrorCode] = None) -> None:
        super().__init__(message=message, code=code or ErrorCodes.INTERNAL_ERROR)


class UnknownNodeKindError(InternalError):
    """Node kind outside the fixed kind set of the tree being walked."""

    def __init__(self, kind: Any, phase: ErrorPhase) -> None:
        super().__init__(
            message=f"Unknown node kind {kind!r} during {phase.value}",
            code=ErrorCodes.UNKNOWN_NODE_KIND,
        )
        self.kind = kind
        self.during = phase


class RoundTripMismatchError(InternalError):
    """Generated output does not rebuild the source call structure."""

    def __init__(self, output: str) -> None:
        super().__init__(
            message="Generated output does not match the source call structure",
            code=ErrorCodes.ROUND_TRIP_MISMATCH,
        )
        self.output = output
