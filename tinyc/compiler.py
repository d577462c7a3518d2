"""tinyc/compiler.py – the four-stage pipeline.

    source text
        │  lex        tinyc.lexer
        ▼
    tokens
        │  parse      tinyc.parser
        ▼
    source AST
        │  transform  tinyc.transformer (traversal + rewrite rules)
        ▼
    target AST
        │  generate   tinyc.codegen
        ▼
    output text

Every stage is a pure function of its input; the first failure
propagates to the caller and no partial output is produced.
"""

from __future__ import annotations

import contextlib
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from tinyc import ast as A
from tinyc import target as T
from tinyc.codegen import generate
from tinyc.errors import ErrorPhase, MaxDepthExceededError, RoundTripMismatchError
from tinyc.grammar import read_output
from tinyc.lexer import Token, lex
from tinyc.parser import parse
from tinyc.transformer import transform

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "CompilerConfig",
    "Compilation",
    "Pipeline",
    "compile",
]

_log = logging.getLogger("tinyc.compiler")

DEFAULT_MAX_DEPTH: int = 256

_PHASES = {
    "lex": ErrorPhase.LEXICAL,
    "parse": ErrorPhase.SYNTAX,
    "transform": ErrorPhase.TRANSFORM,
    "generate": ErrorPhase.CODEGEN,
    "verify": ErrorPhase.VERIFY,
}


@dataclass(frozen=True)
class CompilerConfig:
    """Options for one compilation.

    Parameters
    ----------
    max_depth:
        Deepest call nesting accepted by parse, traverse and generate.
        ``None`` disables the check; input deeper than the interpreter
        stack allows then fails with ``MaxDepthExceededError`` as well.
    verify:
        Re-read the generated text with :func:`tinyc.grammar.read_output`
        and require it to rebuild the source AST.
    """

    max_depth: Optional[int] = DEFAULT_MAX_DEPTH
    verify: bool = False

    def __post_init__(self) -> None:
        if self.max_depth is not None and self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")


@dataclass
class Compilation:
    """Every artifact produced by one pipeline run."""

    source: str
    tokens: List[Token] = field(default_factory=list)
    program: Optional[A.Program] = None
    target: Optional[T.Program] = None
    output: str = ""
    timings: Dict[str, float] = field(default_factory=dict)


class Pipeline:
    """Runs the stages in order and records how long each one took."""

    def __init__(self, config: Optional[CompilerConfig] = None) -> None:
        self.config = config or CompilerConfig()

    @contextlib.contextmanager
    def _timed(self, result: Compilation, phase: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        except RecursionError:
            # Only reachable with max_depth=None or a limit above what the
            # interpreter stack holds.
            raise MaxDepthExceededError(None, phase=_PHASES[phase]) from None
        finally:
            elapsed = time.perf_counter() - start
            result.timings[phase] = elapsed
            _log.debug("[%s] completed in %.6fs", phase, elapsed)

    def _lex(self, result: Compilation) -> List[Token]:
        with self._timed(result, "lex"):
            result.tokens = lex(result.source)
        return result.tokens

    def _parse(self, result: Compilation) -> A.Program:
        tokens = self._lex(result)
        with self._timed(result, "parse"):
            program = parse(tokens, max_depth=self.config.max_depth)
        result.program = program
        return program

    def lex(self, source: str) -> Compilation:
        """Run the lexer only."""
        result = Compilation(source=source)
        self._lex(result)
        return result

    def parse(self, source: str) -> Compilation:
        """Run the lexer and the parser."""
        result = Compilation(source=source)
        self._parse(result)
        return result

    def run(self, source: str) -> Compilation:
        """Run every stage; ``result.output`` holds the generated text."""
        result = Compilation(source=source)
        program = self._parse(result)
        max_depth = self.config.max_depth

        with self._timed(result, "transform"):
            target = transform(program, max_depth=max_depth)
        result.target = target

        with self._timed(result, "generate"):
            output = generate(target, max_depth=max_depth)

        if self.config.verify:
            with self._timed(result, "verify"):
                if read_output(output) != program:
                    raise RoundTripMismatchError(output)

        result.output = output
        return result


def compile(source: str, config: Optional[CompilerConfig] = None) -> str:
    """Compile call-expression source into C-like call syntax.

    >>> compile("(add 2 (subtract 4 2))")
    'add(2, subtract(4, 2));'
    """
    return Pipeline(config).run(source).output
