# tests/test_visitor.py
"""
Tests for the generic traversal engine.
"""

import pytest

from tinyc import ast as A
from tinyc import target as T
from tinyc.errors import ErrorPhase, MaxDepthExceededError, UnknownNodeKindError
from tinyc.parser import parse_text
from tinyc.visitor import Visit, Visitor, traverse, visitor_table
from tests.conftest import NESTED_SRC, nested_calls


def _label(node):
    if isinstance(node, A.Program):
        return "Program"
    if isinstance(node, A.CallExpression):
        return node.name
    return node.value


class Recorder(Visitor):
    """Logs every enter/exit as ``(event, label)``."""

    def __init__(self):
        self.events = []

    def _log(self, event, node):
        self.events.append((event, _label(node)))

    def enter_program(self, node, parent):
        self._log("enter", node)

    def exit_program(self, node, parent):
        self._log("exit", node)

    def enter_call_expression(self, node, parent):
        self._log("enter", node)

    def exit_call_expression(self, node, parent):
        self._log("exit", node)

    def enter_number_literal(self, node, parent):
        self._log("enter", node)

    def exit_number_literal(self, node, parent):
        self._log("exit", node)


class TestTraverseOrder:

    def test_pre_and_post_order(self):
        rec = Recorder()
        rec.traverse(parse_text(NESTED_SRC))
        assert rec.events == [
            ("enter", "Program"),
            ("enter", "add"),
            ("enter", "2"),
            ("exit", "2"),
            ("enter", "subtract"),
            ("enter", "4"),
            ("exit", "4"),
            ("enter", "2"),
            ("exit", "2"),
            ("exit", "subtract"),
            ("exit", "add"),
            ("exit", "Program"),
        ]

    def test_siblings_left_to_right(self):
        seen = []
        table = {A.NodeKind.CALL_EXPRESSION: Visit(enter=lambda n, p: seen.append(n.name))}
        traverse(parse_text("(a (b) (c (d)) (e))"), table)
        assert seen == ["a", "b", "c", "d", "e"]

    def test_missing_kinds_are_skipped(self):
        seen = []
        table = {A.NodeKind.STRING_LITERAL: Visit(exit=lambda n, p: seen.append(n.value))}
        traverse(parse_text('(f 1 "x" (g "y"))'), table)
        assert seen == ["x", "y"]

    def test_empty_table_visits_silently(self):
        traverse(parse_text(NESTED_SRC), {})


class TestTraverseParents:

    def test_root_has_no_parent(self):
        parents = []
        table = {A.NodeKind.PROGRAM: Visit(enter=lambda n, p: parents.append(p))}
        traverse(parse_text(""), table)
        assert parents == [None]

    def test_parent_is_enclosing_node(self):
        program = parse_text(NESTED_SRC)
        pairs = []
        table = {
            A.NodeKind.CALL_EXPRESSION: Visit(enter=lambda n, p: pairs.append((n, p))),
        }
        traverse(program, table)
        add = program.body[0]
        subtract = add.params[1]
        assert pairs[0][0] is add and pairs[0][1] is program
        assert pairs[1][0] is subtract and pairs[1][1] is add


class TestTraverseErrors:

    def test_unknown_kind_fires_no_callback(self):
        seen = []
        everything = Visit(enter=lambda n, p: seen.append(n), exit=lambda n, p: seen.append(n))
        table = {kind: everything for kind in A.SOURCE_KINDS}
        with pytest.raises(UnknownNodeKindError) as info:
            traverse(T.Identifier("x"), table)
        assert seen == []
        assert info.value.kind is A.NodeKind.IDENTIFIER
        assert info.value.during is ErrorPhase.TRANSFORM

    def test_unknown_child_stops_walk(self):
        bad = A.Program(body=(A.NumberLiteral("1"), object()))
        seen = []
        table = {A.NodeKind.NUMBER_LITERAL: Visit(enter=lambda n, p: seen.append(n.value))}
        with pytest.raises(UnknownNodeKindError) as info:
            traverse(bad, table)
        assert seen == ["1"]
        assert info.value.kind == "object"

    def test_depth_limit(self):
        traverse(parse_text(nested_calls(4)), {}, max_depth=4)
        with pytest.raises(MaxDepthExceededError) as info:
            traverse(parse_text(nested_calls(5)), {}, max_depth=4)
        assert info.value.phase is ErrorPhase.TRANSFORM


class TestVisitorTable:

    def test_collects_only_defined_hooks(self):
        class OnlyCalls:
            def enter_call_expression(self, node, parent):
                pass

        table = visitor_table(OnlyCalls())
        assert list(table) == [A.NodeKind.CALL_EXPRESSION]
        assert table[A.NodeKind.CALL_EXPRESSION].exit is None

    def test_recorder_table_covers_three_kinds(self):
        assert set(Recorder().table()) == {
            A.NodeKind.PROGRAM,
            A.NodeKind.CALL_EXPRESSION,
            A.NodeKind.NUMBER_LITERAL,
        }

    def test_name_collector(self):
        class NameCollector(Visitor):
            def __init__(self):
                self.names = []

            def enter_call_expression(self, node, parent):
                self.names.append(node.name)

        collector = NameCollector()
        collector.traverse(parse_text("(foo (bar) (baz 1))"))
        assert collector.names == ["foo", "bar", "baz"]
