#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
tinyc/__main__.py
=================

Entry point for the tinyc command-line tool.

Usage
-----
    python -m tinyc <command> [options] [input]

Commands
--------
    compile     Compile call-expression source to C-like call syntax
    tokens      Print the token stream
    dump-ast    Parse the source and dump the source (or target) AST
    dump-sexp   Parse the source and dump its canonical S-expression form

Input is read from a file, from standard input (``-`` or no argument),
or inline with ``-e``.  Generated text goes to standard output;
diagnostics go to standard error.

Exit codes
----------
    0    success
    1    compilation error (bad input)
    2    internal error (compiler defect)
    130  interrupted
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
import textwrap
from typing import Any, List, Optional, Sequence, TextIO, Tuple

from tinyc import __version__
from tinyc.compiler import DEFAULT_MAX_DEPTH, CompilerConfig, Pipeline
from tinyc.errors import CompileError, InternalError, line_col

__description__ = "tinyc — compile (call args...) expressions to call(args...) syntax"

_log = logging.getLogger("tinyc")

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INTERNAL: int = 2


# ═══════════════════════════════════════════════════════════════════════════
# TERMINAL COLORS
# ═══════════════════════════════════════════════════════════════════════════

class _Colors:
    """ANSI color codes, disabled when not writing to a TTY."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def _code(self, code: str) -> str:
        return code if self.enabled else ""

    @property
    def RESET(self) -> str:
        return self._code("\033[0m")

    @property
    def BOLD(self) -> str:
        return self._code("\033[1m")

    @property
    def DIM(self) -> str:
        return self._code("\033[2m")

    @property
    def RED(self) -> str:
        return self._code("\033[31m")

    @property
    def GREEN(self) -> str:
        return self._code("\033[32m")

    @property
    def YELLOW(self) -> str:
        return self._code("\033[33m")

    @property
    def CYAN(self) -> str:
        return self._code("\033[36m")


def _get_colors(stream: Optional[TextIO] = None) -> _Colors:
    """Get color codes appropriate for the given stream (default stderr)."""
    if stream is None:
        stream = sys.stderr
    try:
        is_tty = hasattr(stream, "isatty") and stream.isatty()
    except ValueError:
        is_tty = False
    return _Colors(enabled=is_tty and os.environ.get("NO_COLOR") is None)


def _configure_logging(verbosity: int) -> None:
    """Set up the ``tinyc`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("tinyc")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        root.addHandler(handler)


# ═══════════════════════════════════════════════════════════════════════════
# DIAGNOSTIC FORMATTER
# ═══════════════════════════════════════════════════════════════════════════

class DiagnosticFormatter:
    """Format diagnostics for terminal output.

    Produces GCC/Clang-style diagnostic messages:

        prog.lisp:1:6: error[TC-0001]: Unknown character '?'
          (foo ?)
               ^
    """

    def __init__(self, colors: _Colors, stream: Optional[TextIO] = None) -> None:
        self.colors = colors
        self.stream = stream if stream is not None else sys.stderr
        self._error_count = 0

    def error(self, message: str) -> None:
        """Emit a plain error without a source position."""
        self._error_count += 1
        c = self.colors
        self.stream.write(f"{c.BOLD}{c.RED}error:{c.RESET}{c.BOLD} {message}{c.RESET}\n")

    def report(self, exc: CompileError, filename: str, source: str) -> int:
        """Emit *exc* with source context and return the exit code for it."""
        self._error_count += 1
        c = self.colors
        label = "internal error" if isinstance(exc, InternalError) else "error"

        if exc.position is not None:
            line, column = line_col(source, exc.position)
            loc = f"{filename}:{line}:{column}: "
        else:
            line = column = 0
            loc = f"{filename}: "

        self.stream.write(
            f"{c.BOLD}{loc}{c.RED}{label}[{exc.code}]:{c.RESET}"
            f"{c.BOLD} {exc.message}{c.RESET}\n"
        )
        if line:
            self._print_source_context(source.splitlines()[line - 1:line], column)
        if exc.hint:
            self.stream.write(f"  {c.CYAN}hint:{c.RESET} {exc.hint}\n")

        if isinstance(exc, InternalError):
            self.stream.write(
                f"{c.DIM}This is a bug in tinyc. Please report it.{c.RESET}\n"
            )
            return EXIT_INTERNAL
        return EXIT_ERROR

    @property
    def has_errors(self) -> bool:
        return self._error_count > 0

    def _print_source_context(self, lines: List[str], column: int) -> None:
        """Print the offending source line with a caret under *column*."""
        if not lines:
            return
        c = self.colors
        self.stream.write(f"  {lines[0].rstrip()}\n")
        padding = " " * (column - 1 + 2)  # +2 for leading indent
        self.stream.write(f"{c.GREEN}{padding}^{c.RESET}\n")


# ═══════════════════════════════════════════════════════════════════════════
# SOURCE LOADING
# ═══════════════════════════════════════════════════════════════════════════

def _load_source(args: argparse.Namespace) -> Tuple[str, str]:
    """Return ``(source, display_name)`` for the command's input."""
    if getattr(args, "expr", None) is not None:
        return args.expr, "<expr>"
    if args.input in (None, "-"):
        return sys.stdin.read(), "<stdin>"
    try:
        with open(args.input, "r", encoding="utf-8") as f:
            return f.read(), os.path.relpath(args.input)
    except FileNotFoundError:
        raise FileNotFoundError(f"Source file not found: {args.input}") from None
    except UnicodeDecodeError as e:
        raise ValueError(f"Source file is not valid UTF-8: {args.input} ({e})") from None


def _config_from_args(args: argparse.Namespace) -> CompilerConfig:
    max_depth = getattr(args, "max_depth", DEFAULT_MAX_DEPTH)
    return CompilerConfig(
        max_depth=max_depth if max_depth and max_depth > 0 else None,
        verify=getattr(args, "verify", False),
    )


# ═══════════════════════════════════════════════════════════════════════════
# AST DUMPER
# ═══════════════════════════════════════════════════════════════════════════

class ASTDumper:
    """Dump a source or target AST in a human-readable tree format."""

    def __init__(self, stream: Optional[TextIO] = None,
                 colors: Optional[_Colors] = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.colors = colors or _Colors(enabled=False)

    def dump(self, node: Any, indent: int = 0) -> None:
        """Recursively dump an AST node."""
        prefix = "  " * indent
        c = self.colors
        kind = getattr(node, "kind", None)
        header = f"{c.CYAN}{kind.value if kind is not None else type(node).__name__}{c.RESET}"

        children: List[Tuple[str, Any]] = []
        for f in dataclasses.fields(node):
            value = getattr(node, f.name)
            if isinstance(value, str):
                header += f" {c.DIM}{f.name}={c.RESET}{c.YELLOW}{value!r}{c.RESET}"
            else:
                children.append((f.name, value))

        self.stream.write(f"{prefix}{header}\n")

        for name, value in children:
            if isinstance(value, (list, tuple)):
                if not value:
                    continue
                self.stream.write(f"{prefix}  {c.DIM}{name}:{c.RESET}\n")
                for item in value:
                    self.dump(item, indent + 2)
            elif dataclasses.is_dataclass(value):
                self.stream.write(f"{prefix}  {c.DIM}{name}:{c.RESET}\n")
                self.dump(value, indent + 2)


# ═══════════════════════════════════════════════════════════════════════════
# COMMAND HANDLERS
# ═══════════════════════════════════════════════════════════════════════════

def _log_timings(timings: dict) -> None:
    for phase, elapsed in timings.items():
        _log.info("%-10s %.6fs", phase, elapsed)


def cmd_compile(args: argparse.Namespace) -> int:
    """Handle the 'compile' command."""
    formatter = DiagnosticFormatter(_get_colors())
    source, filename = _load_source(args)

    try:
        result = Pipeline(_config_from_args(args)).run(source)
    except CompileError as e:
        return formatter.report(e, filename, source)
    _log_timings(result.timings)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(result.output + "\n")
        _log.info("wrote %s", args.output)
    else:
        sys.stdout.write(result.output + "\n")
    return EXIT_OK


def cmd_tokens(args: argparse.Namespace) -> int:
    """Handle the 'tokens' command."""
    formatter = DiagnosticFormatter(_get_colors())
    source, filename = _load_source(args)

    try:
        result = Pipeline(_config_from_args(args)).lex(source)
    except CompileError as e:
        return formatter.report(e, filename, source)

    for token in result.tokens:
        sys.stdout.write(f"{token.kind.value:<7s} {token.value!r:<12s} @{token.position}\n")
    return EXIT_OK


def cmd_dump_ast(args: argparse.Namespace) -> int:
    """Handle the 'dump-ast' command."""
    formatter = DiagnosticFormatter(_get_colors())
    source, filename = _load_source(args)
    pipeline = Pipeline(_config_from_args(args))

    try:
        result = pipeline.run(source) if args.target else pipeline.parse(source)
    except CompileError as e:
        return formatter.report(e, filename, source)

    dumper = ASTDumper(stream=sys.stdout, colors=_get_colors(sys.stdout))
    dumper.dump(result.target if args.target else result.program)
    return EXIT_OK


def cmd_dump_sexp(args: argparse.Namespace) -> int:
    """Handle the 'dump-sexp' command."""
    from tinyc.sexp import dumps

    formatter = DiagnosticFormatter(_get_colors())
    source, filename = _load_source(args)

    try:
        result = Pipeline(_config_from_args(args)).parse(source)
        text = dumps(result.program)
    except CompileError as e:
        return formatter.report(e, filename, source)

    if text:
        sys.stdout.write(text + "\n")
    return EXIT_OK


# ═══════════════════════════════════════════════════════════════════════════
# ARGUMENT PARSER
# ═══════════════════════════════════════════════════════════════════════════

def _add_input_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Input source file (use '-' or omit for stdin)",
    )
    p.add_argument(
        "-e", "--expr",
        default=None,
        help="Inline source text instead of a file",
    )
    p.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        metavar="N",
        help=f"Maximum call nesting depth, 0 for unlimited (default: {DEFAULT_MAX_DEPTH})",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the tinyc CLI."""
    parser = argparse.ArgumentParser(
        prog="tinyc",
        description=__description__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              %(prog)s compile -e '(add 2 (subtract 4 2))'
              %(prog)s compile program.lisp -o program.c
              %(prog)s tokens program.lisp
              %(prog)s dump-ast --target program.lisp
              %(prog)s dump-sexp program.lisp
        """),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="available commands",
        metavar="<command>",
    )

    # ── compile ──────────────────────────────────────────────────────────

    p_compile = subparsers.add_parser(
        "compile",
        help="Compile call-expression source to C-like call syntax",
    )
    _add_input_arguments(p_compile)
    p_compile.add_argument(
        "-o", "--output",
        help="Output file (default: stdout)",
    )
    p_compile.add_argument(
        "--verify",
        action="store_true",
        default=False,
        help="Re-read the output and check it rebuilds the source structure",
    )
    p_compile.set_defaults(func=cmd_compile)

    # ── tokens ───────────────────────────────────────────────────────────

    p_tokens = subparsers.add_parser(
        "tokens",
        help="Print the token stream, one token per line",
    )
    _add_input_arguments(p_tokens)
    p_tokens.set_defaults(func=cmd_tokens)

    # ── dump-ast ─────────────────────────────────────────────────────────

    p_dump_ast = subparsers.add_parser(
        "dump-ast",
        help="Parse the source and dump the AST in tree form",
    )
    _add_input_arguments(p_dump_ast)
    p_dump_ast.add_argument(
        "--target",
        action="store_true",
        default=False,
        help="Dump the transformed (C-like) AST instead of the source AST",
    )
    p_dump_ast.set_defaults(func=cmd_dump_ast)

    # ── dump-sexp ────────────────────────────────────────────────────────

    p_dump_sexp = subparsers.add_parser(
        "dump-sexp",
        help="Parse the source and dump canonical S-expression form",
    )
    _add_input_arguments(p_dump_sexp)
    p_dump_sexp.set_defaults(func=cmd_dump_sexp)

    return parser


# ═══════════════════════════════════════════════════════════════════════════
# MAIN
# ═══════════════════════════════════════════════════════════════════════════

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the tinyc CLI.

    Parameters
    ----------
    argv : sequence of str, optional
        Command-line arguments. Defaults to sys.argv[1:].

    Returns
    -------
    int
        Exit code (0 = success, non-zero = failure).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    try:
        return args.func(args)
    except KeyboardInterrupt:
        sys.stderr.write("\nInterrupted.\n")
        return 130
    except (OSError, ValueError) as e:
        DiagnosticFormatter(_get_colors()).error(str(e))
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
