"""Dependency-aware chunking of top-level statements."""

from .models import Chunk, CodeSegment, byte_size, joined_size
from .segments import SegmentExtractor, exported_names
from .graph import build_dependency_graph, find_strongly_connected_components
from .strategies import (
    STRATEGIES,
    Strategy,
    aggressive_strategy,
    apply_strategy,
    auto_strategy,
    conservative_strategy,
    merge_small_groups,
)
from .materializer import ChunkIdAllocator, ChunkMaterializer
from .chunker import DEFAULT_MAX_CHUNK_SIZE, Chunker, ChunkerOptions

__all__ = [
    "Chunk",
    "CodeSegment",
    "byte_size",
    "joined_size",
    "SegmentExtractor",
    "exported_names",
    "build_dependency_graph",
    "find_strongly_connected_components",
    "STRATEGIES",
    "Strategy",
    "aggressive_strategy",
    "apply_strategy",
    "auto_strategy",
    "conservative_strategy",
    "merge_small_groups",
    "ChunkIdAllocator",
    "ChunkMaterializer",
    "DEFAULT_MAX_CHUNK_SIZE",
    "Chunker",
    "ChunkerOptions",
]
