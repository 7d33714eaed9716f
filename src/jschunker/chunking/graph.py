"""Dependency graph over segments and its strongly connected components."""

from __future__ import annotations

import networkx as nx

from .models import CodeSegment


def build_dependency_graph(segments: list[CodeSegment]) -> nx.DiGraph:
    """Build the segment dependency graph.

    Edges point from a segment to the segments it depends on. Each
    dependency name resolves to the first other segment, in list order, that
    exports it. Names nobody exports (built-ins, external globals) and
    self-references produce no edge.
    """
    graph = nx.DiGraph()
    graph.add_nodes_from(segments)

    exporters: dict[str, list[CodeSegment]] = {}
    for segment in segments:
        for name in segment.exports:
            exporters.setdefault(name, []).append(segment)

    for segment in segments:
        for name in segment.dependencies:
            target = next((s for s in exporters.get(name, []) if s is not segment), None)
            if target is not None:
                graph.add_edge(segment, target)

    return graph


def find_strongly_connected_components(
    segments: list[CodeSegment], graph: nx.DiGraph
) -> list[list[CodeSegment]]:
    """Partition segments into SCCs listed in dependency order.

    SCCs are emitted in DFS post-order over the condensation, starting from
    roots in source order and visiting dependencies in source order. Every
    SCC therefore comes after the SCCs it depends on, and a dependent
    follows its dependencies directly instead of waiting behind unrelated
    later statements. Members are in source order.
    """
    subgraph = graph.subgraph(segments)
    components = sorted(
        (sorted(component, key=lambda s: s.index) for component in nx.strongly_connected_components(subgraph)),
        key=lambda component: component[0].index,
    )
    condensed = nx.condensation(subgraph, scc=[set(c) for c in components])

    # Rebuild without the members attribute so adjacency follows source order
    dag = nx.DiGraph()
    dag.add_nodes_from(range(len(components)))
    dag.add_edges_from(sorted(condensed.edges))

    # Edges point at dependencies, so post-order yields dependencies first
    return [components[i] for i in nx.dfs_postorder_nodes(dag)]
