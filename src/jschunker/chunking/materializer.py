"""Turn segment groups into chunks with inter-chunk dependencies."""

from __future__ import annotations

import networkx as nx

from .models import Chunk, CodeSegment, byte_size


class ChunkIdAllocator:
    """Hands out run-wide unique chunk ids: chunk_000, chunk_001, ..."""

    def __init__(self, start: int = 0) -> None:
        self._next = start

    def next_id(self) -> str:
        chunk_id = f"chunk_{self._next:03d}"
        self._next += 1
        return chunk_id

    def reset(self) -> None:
        self._next = 0

    @property
    def allocated(self) -> int:
        return self._next


class ChunkMaterializer:
    """Build Chunk objects from groups of segments."""

    def __init__(self, allocator: ChunkIdAllocator | None = None) -> None:
        self.allocator = allocator or ChunkIdAllocator()

    def materialize(
        self,
        groups: list[list[CodeSegment]],
        graph: nx.DiGraph,
        order_offset: int = 0,
    ) -> list[Chunk]:
        """Create one chunk per group.

        Args:
            groups: Segment groups in emission order
            graph: Segment dependency graph
            order_offset: Order of the first chunk, for runs that already
                emitted chunks from earlier files
        """
        chunks: list[Chunk] = []
        chunk_of: dict[CodeSegment, Chunk] = {}

        for position, group in enumerate(groups):
            content = "\n".join(segment.code for segment in group)
            exports: list[str] = []
            for segment in group:
                for name in segment.exports:
                    if name not in exports:
                        exports.append(name)

            chunk = Chunk(
                id=self.allocator.next_id(),
                content=content,
                size=byte_size(content),
                order=order_offset + position,
                exports=exports,
                segment_count=len(group),
            )
            chunks.append(chunk)
            for segment in group:
                chunk_of[segment] = chunk

        # Second pass needs every segment assigned to a chunk
        for chunk, group in zip(chunks, groups):
            targets: dict[str, int] = {}
            for segment in group:
                if segment not in graph:
                    continue
                for dependency in graph.successors(segment):
                    target = chunk_of.get(dependency)
                    if target is not None and target is not chunk:
                        targets[target.id] = target.order
            chunk.dependencies = sorted(targets, key=targets.__getitem__)

        return chunks
