# tests/test_end_to_end.py
"""
End-to-end tests: source text → C-like text through the whole pipeline.
"""

import logging

import pytest

import tinyc
from tinyc import compile, CompilerConfig, Pipeline
from tinyc.compiler import DEFAULT_MAX_DEPTH
from tinyc.errors import (
    CompileError,
    ErrorPhase,
    LexicalError,
    MaxDepthExceededError,
    OutputSyntaxError,
    ParseError,
    RoundTripMismatchError,
    UnknownCharacterError,
    UnterminatedStringError,
)
from tinyc.grammar import read_output
from tinyc.parser import parse_text
from tinyc.sexp import loads
from tests.conftest import (
    ADD_SRC, SUBTRACT_SRC, NESTED_SRC, STRING_SRC, MULTI_SRC, BAD_CHAR_SRC,
    DEEP_SRC, MIXED_SRC, WELL_FORMED, WELL_FORMED_IDS, nested_calls,
)


class TestScenarios:

    def test_add(self):
        assert compile(ADD_SRC) == "add(2, 2);"

    def test_subtract(self):
        assert compile(SUBTRACT_SRC) == "subtract(4, 2);"

    def test_nested(self):
        assert compile(NESTED_SRC) == "add(2, subtract(4, 2));"

    def test_strings(self):
        assert compile(STRING_SRC) == 'concat("foo", "bar");'

    def test_multiple_statements(self):
        assert compile(MULTI_SRC) == "foo();\nbar();"

    def test_unknown_character(self):
        with pytest.raises(UnknownCharacterError) as info:
            compile(BAD_CHAR_SRC)
        assert info.value.position == 5
        assert isinstance(info.value, LexicalError)


class TestCompileBehaviour:

    def test_empty_source(self):
        assert compile("") == ""
        assert compile("   \n\t") == ""

    def test_deep(self):
        assert compile(DEEP_SRC) == "a(b(c(d(1))));"

    def test_mixed(self):
        assert compile(MIXED_SRC) == (
            'print("total:", sum(1, mul(2, 3), "x"), 42);\n'
            "log();\n"
            "max(10, min(3, 7), abs(neg(5)));"
        )

    def test_whitespace_does_not_matter(self):
        spaced = "\n  (add\t2\n     (subtract   4 2)\n  )  \n"
        assert compile(spaced) == compile(NESTED_SRC)

    def test_top_level_literals_unwrapped(self):
        assert compile('42 "x" (f)') == '42\n"x"\nf();'

    def test_number_text_preserved(self):
        assert compile("(f 007 0)") == "f(007, 0);"

    def test_string_content_verbatim(self):
        assert compile('(f "(a 1) b")') == 'f("(a 1) b");'

    @pytest.mark.parametrize("src,error", [
        ("(foo ?)", UnknownCharacterError),
        ('(f "abc', UnterminatedStringError),
        ("(add 1", ParseError),
        ("()", ParseError),
        ("(add foo)", ParseError),
        (")", ParseError),
    ])
    def test_failures_produce_no_output(self, src, error):
        with pytest.raises(error):
            compile(src)

    def test_error_format(self):
        with pytest.raises(CompileError) as info:
            compile(BAD_CHAR_SRC)
        assert info.value.format("x.lisp", BAD_CHAR_SRC) == (
            "x.lisp:1:6: error[TC-0001]: Unknown character '?'"
        )

    def test_error_format_on_later_line(self):
        src = "(a 1)\n(b ())"
        with pytest.raises(ParseError) as info:
            compile(src)
        assert info.value.format("p.lisp", src).startswith("p.lisp:2:5: error[TC-1001]")


class TestStructurePreserved:

    @pytest.mark.parametrize("src", WELL_FORMED, ids=WELL_FORMED_IDS)
    def test_output_rebuilds_source_tree(self, src):
        assert read_output(compile(src)) == parse_text(src)

    @pytest.mark.parametrize("src", WELL_FORMED, ids=WELL_FORMED_IDS)
    def test_independent_reader_agrees(self, src):
        assert loads(src) == parse_text(src)

    @pytest.mark.parametrize("src", WELL_FORMED, ids=WELL_FORMED_IDS)
    def test_verify_accepts_correct_output(self, src):
        assert compile(src, CompilerConfig(verify=True)) == compile(src)

    def test_verify_detects_mismatch(self, monkeypatch):
        monkeypatch.setattr(
            "tinyc.compiler.generate",
            lambda target, max_depth=None: "wrong();",
        )
        assert compile(ADD_SRC) == "wrong();"
        with pytest.raises(RoundTripMismatchError) as info:
            compile(ADD_SRC, CompilerConfig(verify=True))
        assert info.value.output == "wrong();"
        assert info.value.code == "TC-9002"

    def test_verify_rejects_malformed_output(self, monkeypatch):
        monkeypatch.setattr(
            "tinyc.compiler.generate",
            lambda target, max_depth=None: "add(2, 2",
        )
        with pytest.raises(OutputSyntaxError):
            compile(ADD_SRC, CompilerConfig(verify=True))


class TestDepthLimit:

    def test_default_limit(self):
        assert DEFAULT_MAX_DEPTH == 256
        assert CompilerConfig().max_depth == DEFAULT_MAX_DEPTH

    def test_at_limit(self):
        out = compile(nested_calls(DEFAULT_MAX_DEPTH))
        assert out.startswith("f(f(f(")
        assert out.endswith("1" + ")" * DEFAULT_MAX_DEPTH + ";")

    def test_over_limit(self):
        with pytest.raises(MaxDepthExceededError) as info:
            compile(nested_calls(DEFAULT_MAX_DEPTH + 1))
        assert info.value.position == DEFAULT_MAX_DEPTH * 3

    def test_custom_limit(self):
        config = CompilerConfig(max_depth=3)
        assert compile(DEEP_SRC, CompilerConfig(max_depth=4)) == "a(b(c(d(1))));"
        with pytest.raises(MaxDepthExceededError):
            compile(DEEP_SRC, config)

    def test_unlimited(self):
        assert compile(nested_calls(50), CompilerConfig(max_depth=None))

    def test_unlimited_runs_out_of_stack_cleanly(self):
        with pytest.raises(MaxDepthExceededError) as info:
            compile(nested_calls(5000), CompilerConfig(max_depth=None))
        assert info.value.limit is None
        assert info.value.phase is ErrorPhase.SYNTAX
        assert info.value.code == "TC-4001"

    def test_verify_at_default_limit(self):
        src = nested_calls(DEFAULT_MAX_DEPTH)
        assert compile(src)
        with pytest.raises(MaxDepthExceededError) as info:
            compile(src, CompilerConfig(verify=True))
        assert info.value.phase is ErrorPhase.VERIFY
        assert isinstance(info.value, CompileError)

    def test_limit_errors_name_their_phase(self):
        with pytest.raises(MaxDepthExceededError) as info:
            compile(DEEP_SRC, CompilerConfig(max_depth=3))
        assert info.value.phase is ErrorPhase.SYNTAX
        assert info.value.limit == 3

    @pytest.mark.parametrize("bad", [0, -1])
    def test_invalid_limit(self, bad):
        with pytest.raises(ValueError):
            CompilerConfig(max_depth=bad)


class TestPipeline:

    def test_artifacts(self):
        result = Pipeline().run(NESTED_SRC)
        assert len(result.tokens) == 9
        assert result.program == parse_text(NESTED_SRC)
        assert result.target is not None
        assert result.output == "add(2, subtract(4, 2));"
        assert set(result.timings) == {"lex", "parse", "transform", "generate"}

    def test_verify_timing(self):
        result = Pipeline(CompilerConfig(verify=True)).run(ADD_SRC)
        assert "verify" in result.timings

    def test_partial_stages(self):
        pipeline = Pipeline()
        lexed = pipeline.lex(ADD_SRC)
        assert lexed.program is None and len(lexed.tokens) == 5
        parsed = pipeline.parse(ADD_SRC)
        assert parsed.target is None and parsed.output == ""

    def test_debug_logging(self, caplog):
        caplog.set_level(logging.DEBUG, logger="tinyc")
        Pipeline().run(ADD_SRC)
        messages = [r.getMessage() for r in caplog.records]
        assert any(m.startswith("[lex] completed") for m in messages)
        assert any(m.startswith("[generate] completed") for m in messages)
        assert all(r.name.startswith("tinyc") for r in caplog.records)

    def test_package_exports(self):
        assert tinyc.compile is compile
        assert tinyc.__version__
