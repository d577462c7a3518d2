# tests/test_codegen.py
"""
Tests for the code generator: target AST → C-like text.
"""

import pytest

from tinyc import target as T
from tinyc.codegen import CodeGenerator, generate
from tinyc.errors import ErrorPhase, MaxDepthExceededError, UnknownNodeKindError


def _call(name, *args):
    return T.CallExpression(callee=T.Identifier(name), arguments=list(args))


class TestGenerateNodes:

    def test_identifier(self):
        assert generate(T.Identifier("add")) == "add"

    def test_number_verbatim(self):
        assert generate(T.NumberLiteral("007")) == "007"

    def test_string_quoted(self):
        assert generate(T.StringLiteral("foo")) == '"foo"'

    def test_string_not_escaped(self):
        assert generate(T.StringLiteral("a\\b")) == '"a\\b"'

    def test_call_without_arguments(self):
        assert generate(_call("foo")) == "foo()"

    def test_call_arguments_comma_space(self):
        call = _call("add", T.NumberLiteral("2"), T.NumberLiteral("2"))
        assert generate(call) == "add(2, 2)"

    def test_statement_semicolon(self):
        assert generate(T.ExpressionStatement(_call("foo"))) == "foo();"


class TestGenerateProgram:

    def test_nested(self):
        program = T.Program(body=[
            T.ExpressionStatement(_call(
                "add",
                T.NumberLiteral("2"),
                _call("subtract", T.NumberLiteral("4"), T.NumberLiteral("2")),
            )),
        ])
        assert generate(program) == "add(2, subtract(4, 2));"

    def test_statements_newline_separated(self):
        program = T.Program(body=[
            T.ExpressionStatement(_call("foo")),
            T.ExpressionStatement(_call("bar")),
        ])
        assert generate(program) == "foo();\nbar();"

    def test_empty_program(self):
        assert generate(T.Program()) == ""

    def test_bare_literal_statement(self):
        program = T.Program(body=[T.NumberLiteral("1"), T.ExpressionStatement(_call("f"))])
        assert generate(program) == "1\nf();"


class TestGenerateErrors:

    def test_unknown_node(self):
        with pytest.raises(UnknownNodeKindError) as info:
            generate(object())
        assert info.value.kind == "object"
        assert info.value.during is ErrorPhase.CODEGEN

    def test_unknown_argument(self):
        with pytest.raises(UnknownNodeKindError):
            generate(_call("f", 3))

    def test_depth_limit(self):
        node = _call("a", _call("b", _call("c")))
        assert CodeGenerator(max_depth=3).generate(node) == "a(b(c()))"
        with pytest.raises(MaxDepthExceededError) as info:
            CodeGenerator(max_depth=2).generate(node)
        assert info.value.limit == 2
        assert info.value.phase is ErrorPhase.CODEGEN
