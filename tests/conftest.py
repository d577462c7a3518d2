# tests/conftest.py
"""
Shared sample sources and helpers for the tinyc test suite.
"""

from tinyc import ast as A

# ── Sample programs ──────────────────────────────────────────────────────

ADD_SRC = "(add 2 2)"
SUBTRACT_SRC = "(subtract 4 2)"
NESTED_SRC = "(add 2 (subtract 4 2))"
STRING_SRC = '(concat "foo" "bar")'
MULTI_SRC = "(foo)(bar)"
BAD_CHAR_SRC = "(foo ?)"

DEEP_SRC = "(a (b (c (d 1))))"

MIXED_SRC = '''
(print "total:" (sum 1 (mul 2 3) "x") 42)
(log)
(max 10 (min 3 7) (abs (neg 5)))
'''

EMPTY_STRING_SRC = '(say "")'

#: Well-formed inputs without leading zeros or backslashes.
WELL_FORMED = [
    ADD_SRC,
    SUBTRACT_SRC,
    NESTED_SRC,
    STRING_SRC,
    MULTI_SRC,
    DEEP_SRC,
    MIXED_SRC,
    EMPTY_STRING_SRC,
    "",
    "(f (g (h)) (i 1 2) \"three\")",
    "(HelloWorld 123456789)",
]

WELL_FORMED_IDS = [
    "add", "subtract", "nested", "strings", "multi", "deep",
    "mixed", "empty_string", "empty", "mixed_args", "case",
]


def nested_calls(depth: int, name: str = "f") -> str:
    """``(f (f ... (f 1)...))`` with *depth* nested calls."""
    return f"({name} " * depth + "1" + ")" * depth


def call(name: str, *params: A.Expression) -> A.CallExpression:
    """Shorthand for building source call nodes in expectations."""
    return A.CallExpression(name=name, params=tuple(params))


def num(value: str) -> A.NumberLiteral:
    return A.NumberLiteral(value)


def text(value: str) -> A.StringLiteral:
    return A.StringLiteral(value)
