"""tinyc — a tiny call-expression compiler.

Converts a Lisp-like call-expression language into C-like call syntax::

    (add 2 (subtract 4 2))   →   add(2, subtract(4, 2));

Submodules
----------
lexer
    Source text → tokens.

parser
    Tokens → source AST (``tinyc.ast``), recursive descent.

visitor
    Generic depth-first traversal driven by enter/exit visitor tables.

transformer
    Source AST → target AST (``tinyc.target``) as a set of rewrite rules.

codegen
    Target AST → C-like text.

compiler
    ``Pipeline`` / ``compile`` composing the four stages, plus
    ``CompilerConfig``.

grammar
    parsimonious reader for the generated text (round-trip checks).

sexp
    Canonical S-expression dump / reader built on sexpdata.

errors
    Error hierarchy and ``TC-NNNN`` codes.

Usage
-----
Command-line::

    python -m tinyc compile -e '(add 2 (subtract 4 2))'
    echo '(concat "foo" "bar")' | python -m tinyc compile
    python -m tinyc dump-ast program.lisp

Programmatic::

    from tinyc import compile, CompilerConfig

    compile("(add 2 2)")                       # 'add(2, 2);'
    compile(src, CompilerConfig(verify=True))
"""

from __future__ import annotations

from tinyc.compiler import CompilerConfig, Pipeline, compile
from tinyc.errors import CompileError

__version__: str = "0.1.0"
__all__: list[str] = [
    "__version__",
    "compile",
    "CompilerConfig",
    "Pipeline",
    "CompileError",
]
