"""Shared test fixtures: sample graphs and helpers."""

from __future__ import annotations

import json

import pytest

from unfold.adapters.sources.in_memory import InMemorySource, graph_from_edges
from unfold.domain.graph import Community, Graph, Node
from unfold.ports.graph_source import WeightedEdge


# ── Helpers ──


def inside_weight(graph: Graph, community: Community) -> float:
    """Recompute a community's internal weight from the edges themselves."""
    return sum(
        w for a, b, w in graph.edges()
        if a.community is community and b.community is community
    )


def edge_weight(graph: Graph, a: int, b: int) -> float:
    """Total weight of the edges between node ids *a* and *b*."""
    return sum(w for n, w in graph.nodes[a].neighbours if n.id == b)


def build_graph(triples: list[tuple[int, int, float]]) -> Graph:
    return graph_from_edges(WeightedEdge(s, t, w) for s, t, w in triples)


# ── Fixtures ──


@pytest.fixture
def sample_graph():
    """Five nodes, each in its own community: a weighted triangle with a
    self-loop on node 1, plus the pair 4-5."""
    return InMemorySource().load()


@pytest.fixture
def preset_graph():
    """The same five nodes, edges added first, then grouped by hand as
    {1, 2}, {3} and {4, 5}."""
    g = Graph()
    n1, n2, n3, n4, n5 = (g.add_node(Node(i, f"Node {i}")) for i in range(1, 6))
    g.add_edge(n1, n2, 1)
    g.add_edge(n1, n1, 10)
    g.add_edge(n2, n3, 2)
    g.add_edge(n1, n3, 3)
    g.add_edge(n4, n5, 4)

    c1 = g.add_community()
    c1.add_node(n1)
    c1.add_node(n2)
    c2 = g.add_community()
    c2.add_node(n3)
    c3 = g.add_community()
    c3.add_node(n4)
    c3.add_node(n5)
    return g


@pytest.fixture
def two_triangles():
    """Two unit-weight triangles {0,1,2} and {3,4,5} joined by the bridge 2-3."""
    return build_graph([
        (0, 1, 1), (1, 2, 1), (0, 2, 1),
        (3, 4, 1), (4, 5, 1), (3, 5, 1),
        (2, 3, 1),
    ])


@pytest.fixture
def two_pairs():
    """Pairs 0-1 and 2-3 joined by an equally heavy 1-2 edge.

    Level 0 finds the two pairs.  The coarse level merges them, which
    drops modularity on the input graph to 0.
    """
    return build_graph([(0, 1, 10), (2, 3, 10), (1, 2, 10)])


@pytest.fixture
def four_pairs():
    """Pairs 0-1, 2-3, 4-5 and 6-7 chained by links 1-2 (8), 3-4 (1), 5-6 (8).

    Level 0 finds the four pairs; level 1 merges them into {0..3} and
    {4..7}, which raises modularity on the input graph.
    """
    return build_graph([
        (0, 1, 10), (2, 3, 10), (4, 5, 10), (6, 7, 10),
        (1, 2, 8), (5, 6, 8), (3, 4, 1),
    ])


@pytest.fixture
def ring_of_cliques():
    """Four unit-weight 4-cliques, consecutive cliques linked by a weight-2 edge."""
    triples = []
    for c in range(4):
        base = 4 * c
        members = range(base, base + 4)
        triples += [(a, b, 1) for a in members for b in members if a < b]
        triples.append((base + 3, (base + 4) % 16, 2))
    return build_graph(triples)


@pytest.fixture
def articles_file(tmp_path):
    articles = [
        {"connected_keywords": [
            {"word_title": "A"}, {"word_title": "Politique"}, {"word_title": "B"},
        ]},
        {"connected_keywords": [
            {"word_title": "A"}, {"word_title": "B"}, {"word_title": "C"},
        ]},
    ]
    path = tmp_path / "community.json"
    path.write_text(json.dumps(articles), encoding="utf-8")
    return path


@pytest.fixture
def edge_list_file(tmp_path):
    path = tmp_path / "graph.txt"
    path.write_text(
        "# two triangles\n"
        "0 1 1\n1 2 1\n0 2 1\n"
        "3 4 1\n4 5 1\n3 5 1\n"
        "\n"
        "2 3 1\n",
        encoding="utf-8",
    )
    return path
