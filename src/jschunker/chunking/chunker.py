"""Chunker: segments, dependency graph, strategy, materialized chunks."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, Field
from tree_sitter import Node, Tree

from ..analyzer import AnalysisResult
from ..generator import CodeGenerator
from .graph import build_dependency_graph
from .materializer import ChunkIdAllocator, ChunkMaterializer
from .models import Chunk
from .segments import SegmentExtractor
from .strategies import Strategy, apply_strategy

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHUNK_SIZE = 256 * 1024  # 256KB


class ChunkerOptions(BaseModel):
    """Options for grouping segments into chunks."""

    strategy: Strategy = Field(default="auto")
    max_chunk_size: int = Field(default=DEFAULT_MAX_CHUNK_SIZE, gt=0)
    min_chunk_size: Optional[int] = Field(default=None, gt=0)


class Chunker:
    """Split an analysed program into dependency-respecting chunks.

    The chunk id counter lives on the instance and keeps counting across
    calls, so one Chunker shared by a multi-file run hands out unique ids.
    Use reset_ids() to start again from chunk_000.
    """

    def __init__(
        self,
        options: ChunkerOptions | None = None,
        generator: CodeGenerator | None = None,
    ) -> None:
        self.options = options or ChunkerOptions()
        self.extractor = SegmentExtractor(generator)
        self.allocator = ChunkIdAllocator()
        self.materializer = ChunkMaterializer(self.allocator)

    def chunk(
        self, tree: Tree | Node, analysis: AnalysisResult, order_offset: int = 0
    ) -> list[Chunk]:
        segments = self.extractor.extract(tree, analysis)
        graph = build_dependency_graph(segments)
        groups = apply_strategy(
            self.options.strategy,
            segments,
            graph,
            self.options.max_chunk_size,
            self.options.min_chunk_size,
        )
        chunks = self.materializer.materialize(groups, graph, order_offset=order_offset)

        logger.debug(
            "Built %d chunk(s) from %d segment(s) with %s strategy",
            len(chunks),
            len(segments),
            self.options.strategy,
        )
        return chunks

    def reset_ids(self) -> None:
        self.allocator.reset()
