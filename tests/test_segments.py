"""Tests for segment extraction."""

import logging

import pytest

from jschunker.chunking import SegmentExtractor, exported_names
from jschunker.errors import GenerationError


class FailingGenerator:
    """Copies source text except for the node types it refuses."""

    name = "failing"

    def __init__(self, *refused: str):
        self.refused = set(refused)

    def can_generate(self, node) -> bool:
        return True

    def generate(self, node, options=None) -> str:
        if not self.refused or node.type in self.refused:
            raise GenerationError(f"refused {node.type}", node_type=node.type)
        return node.text.decode()


class TestSegmentExtractor:
    """Test one segment per top-level statement."""

    def test_segments_in_source_order(self, extract):
        segments = extract("const a = 1;\n// note\nfunction f() { return a; }\nf();\n")

        assert [s.code for s in segments] == [
            "const a = 1;",
            "function f() { return a; }",
            "f();",
        ]
        assert [s.index for s in segments] == [0, 1, 2]
        assert [s.exports for s in segments] == [["a"], ["f"], []]

    def test_hashbang_skipped(self, extract):
        segments = extract("#!/usr/bin/env node\nconst a = 1;\n")

        assert [s.code for s in segments] == ["const a = 1;"]

    def test_size_is_utf8_bytes(self, extract):
        (segment,) = extract('const greeting = "héllo wörld ✓";')

        assert segment.size == len(segment.code.encode("utf-8"))
        assert segment.size > len(segment.code)

    def test_dependencies_from_exported_functions(self, extract):
        segments = extract(
            "function helper() { return 42; }\nfunction main() { return helper(); }"
        )

        assert segments[0].dependencies == []
        assert segments[1].dependencies == ["helper"]

    def test_self_recursion_listed_as_dependency(self, extract):
        (segment,) = extract("function fact(n) { return n ? n * fact(n - 1) : 1; }")

        assert segment.exports == ["fact"]
        assert segment.dependencies == ["fact"]

    def test_empty_program(self, extract):
        assert extract("") == []
        assert extract("// only a comment\n") == []

    def test_failed_statement_skipped(self, parser, analyzer, caplog):
        tree = parser.parse("const a = 1;\nfunction f() {}\nconst b = 2;")
        extractor = SegmentExtractor(FailingGenerator("function_declaration"))

        with caplog.at_level(logging.WARNING):
            segments = extractor.extract(tree, analyzer.analyze(tree))

        assert [s.code for s in segments] == ["const a = 1;", "const b = 2;"]
        assert [s.index for s in segments] == [0, 2]
        assert "function_declaration" in caplog.text

    def test_all_statements_failing_raises(self, parser, analyzer):
        tree = parser.parse("const a = 1;\nconst b = 2;")
        extractor = SegmentExtractor(FailingGenerator())

        with pytest.raises(GenerationError, match="all 2 top-level statements"):
            extractor.extract(tree, analyzer.analyze(tree))


class TestExportedNames:
    """Test which names a statement exports."""

    def _first(self, parser, source):
        return parser.parse(source).root_node.named_children[0]

    def test_function_declaration(self, parser):
        assert exported_names(self._first(parser, "function run() {}")) == ["run"]

    def test_generator_declaration(self, parser):
        assert exported_names(self._first(parser, "function* ids() { yield 1; }")) == ["ids"]

    def test_multiple_declarators(self, parser):
        assert exported_names(self._first(parser, "let d = 1, e = 2;")) == ["d", "e"]

    def test_var_declaration(self, parser):
        assert exported_names(self._first(parser, "var legacy;")) == ["legacy"]

    def test_destructuring_exports_nothing(self, parser):
        assert exported_names(self._first(parser, "const { a, b } = obj;")) == []
        assert exported_names(self._first(parser, "const [c] = arr;")) == []

    def test_other_statements_export_nothing(self, parser):
        assert exported_names(self._first(parser, "class Widget {}")) == []
        assert exported_names(self._first(parser, "run();")) == []
