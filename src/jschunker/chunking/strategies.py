"""Packing strategies that group segments into chunks under a byte budget.

Sizes are measured the way the chunk content will be built: segment code
joined with one newline between segments.
"""

from __future__ import annotations

import logging
from itertools import chain
from typing import Callable, Literal, Optional

import networkx as nx

from .graph import find_strongly_connected_components
from .models import CodeSegment, joined_size

logger = logging.getLogger(__name__)

Strategy = Literal["aggressive", "conservative", "auto"]
StrategyFn = Callable[[list[CodeSegment], nx.DiGraph, int], list[list[CodeSegment]]]


def _pack(segments: list[CodeSegment], max_chunk_size: int) -> list[list[CodeSegment]]:
    """Greedily pack segments in the given order.

    A segment larger than the budget is placed alone, never split.
    """
    groups: list[list[CodeSegment]] = []
    current: list[CodeSegment] = []
    current_size = 0

    for segment in segments:
        added = segment.size + (1 if current else 0)
        if current and current_size + added > max_chunk_size:
            groups.append(current)
            current = []
            current_size = 0
            added = segment.size
        current.append(segment)
        current_size += added

    if current:
        groups.append(current)
    return groups


def aggressive_strategy(
    segments: list[CodeSegment], graph: nx.DiGraph, max_chunk_size: int
) -> list[list[CodeSegment]]:
    """Pack segments in source order, ignoring dependencies."""
    return _pack(segments, max_chunk_size)


def conservative_strategy(
    segments: list[CodeSegment], graph: nx.DiGraph, max_chunk_size: int
) -> list[list[CodeSegment]]:
    """Keep everything connected by dependencies together when it fits.

    SCCs linked by an edge in either direction are merged transitively. If
    the merged group is over budget, its SCCs are emitted individually, and
    an SCC that is over budget on its own is packed aggressively.
    """
    components = find_strongly_connected_components(segments, graph)
    component_of = {segment: i for i, component in enumerate(components) for segment in component}
    processed: set[int] = set()
    groups: list[list[CodeSegment]] = []

    for i in range(len(components)):
        if i in processed:
            continue

        members = [i]
        processed.add(i)
        pending = [i]
        while pending:
            current = pending.pop()
            for segment in components[current]:
                for other in chain(graph.successors(segment), graph.predecessors(segment)):
                    j = component_of.get(other)
                    if j is not None and j not in processed:
                        processed.add(j)
                        members.append(j)
                        pending.append(j)

        merged = [segment for j in members for segment in components[j]]
        if joined_size(merged) <= max_chunk_size:
            groups.append(merged)
            continue

        for j in sorted(members):
            component = components[j]
            if joined_size(component) <= max_chunk_size:
                groups.append(component)
            else:
                groups.extend(_pack(component, max_chunk_size))

    return groups


def auto_strategy(
    segments: list[CodeSegment], graph: nx.DiGraph, max_chunk_size: int
) -> list[list[CodeSegment]]:
    """Pack whole SCCs, in dependency order, under the budget."""
    groups: list[list[CodeSegment]] = []
    current: list[CodeSegment] = []
    current_size = 0

    for component in find_strongly_connected_components(segments, graph):
        component_size = joined_size(component)

        if current and current_size + 1 + component_size > max_chunk_size:
            groups.append(current)
            current = []
            current_size = 0

        if component_size > max_chunk_size:
            groups.extend(_pack(component, max_chunk_size))
            continue

        current_size += component_size + (1 if current else 0)
        current.extend(component)

    if current:
        groups.append(current)
    return groups


STRATEGIES: dict[str, StrategyFn] = {
    "aggressive": aggressive_strategy,
    "conservative": conservative_strategy,
    "auto": auto_strategy,
}


def merge_small_groups(
    groups: list[list[CodeSegment]], min_chunk_size: int, max_chunk_size: int
) -> list[list[CodeSegment]]:
    """Coalesce groups smaller than min_chunk_size with the groups after them.

    A merge never pushes a group over max_chunk_size. The minimum is best
    effort: a trailing group that is still too small is kept as is.
    """
    merged: list[list[CodeSegment]] = []
    pending: list[CodeSegment] = []

    for group in groups:
        if pending and joined_size(pending + group) > max_chunk_size:
            merged.append(pending)
            pending = []
        pending = pending + group
        if joined_size(pending) >= min_chunk_size:
            merged.append(pending)
            pending = []

    if pending:
        merged.append(pending)
    return merged


def apply_strategy(
    strategy: str,
    segments: list[CodeSegment],
    graph: nx.DiGraph,
    max_chunk_size: int,
    min_chunk_size: Optional[int] = None,
) -> list[list[CodeSegment]]:
    """Group segments into future chunks, in emission order.

    Within each group segments keep their source order.

    Raises:
        ValueError: If the strategy name is unknown.
    """
    try:
        strategy_fn = STRATEGIES[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown chunking strategy: {strategy!r} (expected one of {', '.join(STRATEGIES)})"
        ) from None

    groups = strategy_fn(segments, graph, max_chunk_size)
    if min_chunk_size:
        groups = merge_small_groups(groups, min_chunk_size, max_chunk_size)

    groups = [sorted(group, key=lambda s: s.index) for group in groups]
    for group in groups:
        size = joined_size(group)
        if size > max_chunk_size:
            logger.debug(
                "Group of %d segment(s) is %d bytes, over the %d byte budget",
                len(group),
                size,
                max_chunk_size,
            )
    return groups
