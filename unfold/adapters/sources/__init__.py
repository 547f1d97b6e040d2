"""Graph sources: edge-list files, keyword co-occurrence, in-memory triples."""

from unfold.adapters.sources.cooccurrence import CooccurrenceSource, build_cooccurrence_graph
from unfold.adapters.sources.edge_list import EdgeListSource
from unfold.adapters.sources.in_memory import SAMPLE_EDGES, InMemorySource, graph_from_edges

__all__ = [
    "CooccurrenceSource",
    "EdgeListSource",
    "InMemorySource",
    "SAMPLE_EDGES",
    "build_cooccurrence_graph",
    "graph_from_edges",
]
