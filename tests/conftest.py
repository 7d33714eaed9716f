"""Pytest configuration and shared fixtures."""

import pytest
from pathlib import Path

from jschunker.analyzer import Analyzer
from jschunker.chunking import Chunker, ChunkerOptions, CodeSegment, SegmentExtractor
from jschunker.config import Config
from jschunker.parser import Parser

ENV_VARS = (
    "JSCHUNKER_MAX_CHUNK_SIZE",
    "JSCHUNKER_MIN_CHUNK_SIZE",
    "JSCHUNKER_STRATEGY",
    "JSCHUNKER_OUTPUT_DIR",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer environment settings out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def parser() -> Parser:
    return Parser()


@pytest.fixture
def analyzer() -> Analyzer:
    return Analyzer()


@pytest.fixture
def extract(parser, analyzer):
    """Parse, analyze and extract segments from source text."""

    def _extract(source: str) -> list[CodeSegment]:
        tree = parser.parse(source)
        return SegmentExtractor().extract(tree, analyzer.analyze(tree))

    return _extract


@pytest.fixture
def chunk_source(parser, analyzer):
    """Chunk source text with a fresh Chunker."""

    def _chunk(source: str, **options):
        tree = parser.parse(source)
        return Chunker(ChunkerOptions(**options)).chunk(tree, analyzer.analyze(tree))

    return _chunk


class UnpicklableNode:
    """Stands in for a tree-sitter node, which cannot be copied or pickled."""

    def __reduce_ex__(self, protocol):
        raise TypeError("cannot pickle 'UnpicklableNode' object")


@pytest.fixture
def make_segments():
    """Build segments with explicit sizes for strategy tests.

    Each entry is (name, size) or (name, size, [dependency names]).
    """

    def _make(*entries) -> list[CodeSegment]:
        segments = []
        for index, entry in enumerate(entries):
            name, size = entry[0], entry[1]
            dependencies = list(entry[2]) if len(entry) > 2 else []
            segments.append(
                CodeSegment(
                    node=UnpicklableNode(),
                    code="x" * size,
                    size=size,
                    index=index,
                    exports=[name],
                    dependencies=dependencies,
                )
            )
        return segments

    return _make


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Provide a test configuration writing into a temporary directory."""
    return Config(output_dir=tmp_path / "out", beautify=False)


@pytest.fixture
def sample_files(tmp_path: Path) -> Path:
    """Create a small JavaScript project."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "math.js").write_text(
        "function add(a, b) { return a + b; }\n"
        "function sum(values) { return values.reduce(add, 0); }\n"
    )
    (src / "app.js").write_text(
        "const total = 10;\n"
        "function main() { return format(total); }\n"
        "function format(n) { return String(n); }\n"
        "main();\n"
    )
    return src
