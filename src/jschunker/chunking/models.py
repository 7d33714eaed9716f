"""Data models for code segments and chunks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tree_sitter import Node


def byte_size(text: str) -> int:
    """UTF-8 byte length of text."""
    return len(text.encode("utf-8"))


@dataclass(eq=False)
class CodeSegment:
    """One top-level statement with its export/dependency metadata.

    Segments hash by identity so they can be graph nodes.
    """

    node: Node = field(repr=False)
    code: str = field(repr=False)
    size: int
    index: int
    exports: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)


def joined_size(segments: list[CodeSegment]) -> int:
    """Byte size of the segments once joined with newline separators."""
    if not segments:
        return 0
    return sum(s.size for s in segments) + len(segments) - 1


@dataclass
class Chunk:
    """A unit of output: concatenated segments plus metadata."""

    id: str
    content: str = field(repr=False)
    size: int
    order: int
    exports: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    segment_count: int = 0

    @property
    def filename(self) -> str:
        return f"{self.id}.js"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "filename": self.filename,
            "dependencies": list(self.dependencies),
            "exports": list(self.exports),
            "size": self.size,
            "order": self.order,
        }
