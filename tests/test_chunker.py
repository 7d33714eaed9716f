"""End-to-end tests for the chunker and chunk materializer."""

import networkx as nx
import pytest
from pydantic import ValidationError

from jschunker.chunking import (
    ChunkIdAllocator,
    ChunkMaterializer,
    Chunker,
    ChunkerOptions,
    build_dependency_graph,
)

HELPER_MAIN = "function helper() { return 42; }\nfunction main() { return helper(); }\n"

CYCLE = "function a() { return b(); }\nfunction b() { return a(); }\n"


def chunk_with(exports, chunks):
    return next(chunk for chunk in chunks if exports in chunk.exports)


class TestChunkIdAllocator:
    """Test sequential chunk ids."""

    def test_sequential_ids(self):
        allocator = ChunkIdAllocator()

        assert [allocator.next_id() for _ in range(3)] == ["chunk_000", "chunk_001", "chunk_002"]
        assert allocator.allocated == 3

    def test_reset(self):
        allocator = ChunkIdAllocator(start=7)

        assert allocator.next_id() == "chunk_007"
        allocator.reset()
        assert allocator.next_id() == "chunk_000"

    def test_ids_beyond_three_digits(self):
        assert ChunkIdAllocator(start=1000).next_id() == "chunk_1000"


class TestChunkMaterializer:
    """Test chunk construction from segment groups."""

    def test_dependencies_are_chunk_ids(self, make_segments):
        helper, main = make_segments(("helper", 4), ("main", 4, ["helper"]))
        graph = build_dependency_graph([helper, main])

        chunks = ChunkMaterializer().materialize([[helper], [main]], graph)

        assert [c.id for c in chunks] == ["chunk_000", "chunk_001"]
        assert chunks[0].dependencies == []
        assert chunks[1].dependencies == ["chunk_000"]

    def test_no_self_dependency(self, make_segments):
        a, b = make_segments(("a", 4, ["b"]), ("b", 4, ["a"]))
        graph = build_dependency_graph([a, b])

        (chunk,) = ChunkMaterializer().materialize([[a, b]], graph)

        assert chunk.dependencies == []
        assert chunk.content == "xxxx\nxxxx"
        assert chunk.size == 9
        assert chunk.exports == ["a", "b"]
        assert chunk.segment_count == 2

    def test_order_offset(self, make_segments):
        segments = make_segments(("a", 1), ("b", 1))

        chunks = ChunkMaterializer().materialize([[s] for s in segments], nx.DiGraph(), order_offset=5)

        assert [c.order for c in chunks] == [5, 6]

    def test_shared_allocator(self, make_segments):
        allocator = ChunkIdAllocator()
        materializer = ChunkMaterializer(allocator)
        (segment,) = make_segments(("a", 1))

        materializer.materialize([[segment]], nx.DiGraph())
        (second,) = materializer.materialize([[segment]], nx.DiGraph())

        assert second.id == "chunk_001"


class TestChunker:
    """Test chunking real JavaScript."""

    def test_two_constants_single_chunk(self, chunk_source):
        chunks = chunk_source("const x = 1; const y = 2;", strategy="auto", max_chunk_size=256 * 1024)

        assert len(chunks) == 1
        chunk = chunks[0]
        assert chunk.id == "chunk_000"
        assert chunk.order == 0
        assert chunk.content == "const x = 1;\nconst y = 2;"
        assert chunk.exports == ["x", "y"]
        assert chunk.dependencies == []

    def test_small_budget_splits(self, chunk_source):
        source = (
            'function longFunction1() { return "a".repeat(30); }\n'
            'function longFunction2() { return "b".repeat(30); }\n'
        )

        chunks = chunk_source(source, strategy="aggressive", max_chunk_size=50)

        assert len(chunks) > 1
        assert [c.exports for c in chunks] == [["longFunction1"], ["longFunction2"]]

    def test_conservative_keeps_caller_with_callee(self, chunk_source):
        chunks = chunk_source(HELPER_MAIN, strategy="conservative", max_chunk_size=100)

        assert "helper" in chunk_with("main", chunks).exports

    def test_exports_tracked(self, chunk_source):
        source = (
            "function publicFunc() { return 1; }\n"
            "function privateFunc() { return 2; }\n"
            "const publicVar = 3;\n"
        )

        (chunk,) = chunk_source(source)

        assert set(chunk.exports) == {"publicFunc", "privateFunc", "publicVar"}

    @pytest.mark.parametrize("strategy", ["auto", "conservative"])
    def test_cycle_in_same_chunk(self, chunk_source, strategy):
        chunks = chunk_source(CYCLE + "const pad = 0;\n", strategy=strategy, max_chunk_size=60)

        assert chunk_with("a", chunks) is chunk_with("b", chunks)
        assert chunk_with("a", chunks).dependencies == []

    def test_split_dependency_recorded(self, chunk_source):
        chunks = chunk_source(HELPER_MAIN, strategy="aggressive", max_chunk_size=40)

        assert len(chunks) == 2
        assert chunk_with("helper", chunks).dependencies == []
        assert chunk_with("main", chunks).dependencies == [chunk_with("helper", chunks).id]

    def test_dependency_emitted_first(self, chunk_source):
        source = "function main() { return helper(); }\nfunction helper() { return 42; }\n"

        chunks = chunk_source(source, strategy="auto", max_chunk_size=40)

        assert [c.exports for c in chunks] == [["helper"], ["main"]]
        assert chunks[1].dependencies == [chunks[0].id]

    def test_utf8_size(self, chunk_source):
        (chunk,) = chunk_source('const s = "ü日本";')

        assert chunk.size == len(chunk.content.encode("utf-8"))
        assert chunk.size > len(chunk.content)

    def test_min_chunk_size(self, chunk_source):
        source = "".join(f"function small{i}() {{ return {i}; }}\n" for i in range(1, 5))

        unmerged = chunk_source(source, strategy="conservative", max_chunk_size=100)
        merged = chunk_source(source, strategy="conservative", max_chunk_size=100, min_chunk_size=60)

        assert len(unmerged) == 4
        assert len(merged) == 2
        assert all(c.size <= 100 for c in merged)

    def test_ids_continue_across_calls(self, parser, analyzer):
        chunker = Chunker()
        tree = parser.parse(HELPER_MAIN)
        analysis = analyzer.analyze(tree)

        first = chunker.chunk(tree, analysis)
        second = chunker.chunk(tree, analysis, order_offset=len(first))

        ids = [c.id for c in first + second]
        assert len(ids) == len(set(ids))
        assert second[0].id == "chunk_001"
        assert second[0].order == 1

    def test_rerun_after_reset_is_identical(self, parser, analyzer):
        chunker = Chunker(ChunkerOptions(strategy="aggressive", max_chunk_size=40))
        tree = parser.parse(HELPER_MAIN)
        analysis = analyzer.analyze(tree)

        first = chunker.chunk(tree, analysis)
        chunker.reset_ids()
        second = chunker.chunk(tree, analysis)

        assert [c.content for c in first] == [c.content for c in second]
        assert [c.dependencies for c in first] == [c.dependencies for c in second]
        assert [c.id for c in first] == [c.id for c in second]

    def test_source_order_preserved(self, chunk_source):
        source = "const a = 1;\nconst b = 2;\nconst c = 3;\nconst d = 4;\n"

        chunks = chunk_source(source, strategy="aggressive", max_chunk_size=26)

        joined = "\n".join(c.content for c in sorted(chunks, key=lambda c: c.order))
        assert joined == source.rstrip("\n")

    def test_invalid_options(self):
        with pytest.raises(ValidationError):
            ChunkerOptions(max_chunk_size=0)
        with pytest.raises(ValidationError):
            ChunkerOptions(strategy="greedy")


class TestEmissionOrder:
    """Test that chunk order never breaks source semantics."""

    CALL_BEFORE_DEFINITION = (
        "function main() { return helper(); }\n"
        "main();\n"
        "function helper() { return 42; }\n"
    )

    @pytest.mark.parametrize("strategy", ["auto", "conservative"])
    def test_dependent_stays_ahead_of_later_statement(self, chunk_source, strategy):
        chunks = chunk_source(self.CALL_BEFORE_DEFINITION, strategy=strategy, max_chunk_size=40)

        joined = "\n".join(c.content for c in sorted(chunks, key=lambda c: c.order))
        assert joined.index("function helper") < joined.index("function main")
        assert joined.index("function main") < joined.index("main();")

    @pytest.mark.parametrize("strategy", ["aggressive", "auto", "conservative"])
    def test_independent_statements_keep_source_order(self, chunk_source, strategy):
        source = "const a = 1;\nconst b = 2;\nconst c = 3;\nconst d = 4;\n"

        chunks = chunk_source(source, strategy=strategy, max_chunk_size=26)

        joined = "\n".join(c.content for c in sorted(chunks, key=lambda c: c.order))
        assert joined == source.rstrip("\n")

    def test_segment_count(self, chunk_source):
        chunks = chunk_source(self.CALL_BEFORE_DEFINITION, strategy="auto", max_chunk_size=60)

        assert sum(c.segment_count for c in chunks) == 3
        assert [c.segment_count for c in chunks] == [1, 2]
