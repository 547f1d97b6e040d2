"""Graph source adapter: in-memory edge triples (examples and tests)."""

from __future__ import annotations

from typing import Iterable

from unfold.domain.graph import Graph
from unfold.ports.graph_source import GraphSourcePort, WeightedEdge

# Five-node demonstration graph: a weighted triangle with a heavy self-loop
# on node 1, plus a separate pair.
SAMPLE_EDGES: list[tuple[int, int, float]] = [
    (1, 2, 1),
    (1, 1, 10),
    (2, 3, 2),
    (1, 3, 3),
    (4, 5, 4),
]


def graph_from_edges(edges: Iterable[WeightedEdge]) -> Graph:
    """Build a graph, creating each node in its own community on first reference."""
    graph = Graph()
    for edge in edges:
        source = graph.ensure_node(edge.source)
        target = graph.ensure_node(edge.target)
        graph.add_edge(source, target, edge.weight)
    return graph


class InMemorySource(GraphSourcePort):
    """Serve a graph built from a list of ``(source, target, weight)`` triples."""

    def __init__(self, edges: Iterable[tuple[int, int, float]] | None = None) -> None:
        triples = SAMPLE_EDGES if edges is None else edges
        self._edges = [WeightedEdge(source=s, target=t, weight=w) for s, t, w in triples]

    def load(self) -> Graph:
        return graph_from_edges(self._edges)
