"""Global modularity of a partitioned graph."""

from __future__ import annotations

from collections import defaultdict

from unfold.domain.graph import Graph


def modularity(graph: Graph) -> float:
    """Return Q = sum over communities of in_c / m - (k_c / 2m)^2.

    Uses the cached community weights, so it reflects the partition the
    graph currently holds.  A graph without edges has modularity 0.
    """
    m = graph.total_weight
    if not m:
        return 0.0

    res = 0.0
    for community in graph.communities:
        res += community.sum_inside_weight / m - (community.sum_outward_weight / (2.0 * m)) ** 2
    return res


def partition_modularity(graph: Graph, partition: dict[int, int]) -> float:
    """Q of *graph* grouped by *partition* (node id -> community id).

    Recomputed from the edges and node degrees, so it ignores the
    communities the graph currently holds.  Coarse graphs keep internal
    weight as a self-loop counted once in the degree; measuring a deeper
    level on them is not the same as measuring it on the input graph.
    """
    m = graph.total_weight
    if not m:
        return 0.0

    inside: dict[int, float] = defaultdict(float)
    degree: dict[int, float] = defaultdict(float)
    for nid, node in graph.nodes.items():
        degree[partition[nid]] += node.outward_weight
    for a, b, weight in graph.edges():
        if partition[a.id] == partition[b.id]:
            inside[partition[a.id]] += weight

    res = 0.0
    for cid, k in degree.items():
        res += inside[cid] / m - (k / (2.0 * m)) ** 2
    return res
