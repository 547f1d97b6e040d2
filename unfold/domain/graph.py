"""Weighted undirected graph with Louvain local-move optimisation.

Implements the first phase of "Fast unfolding of communities in large
networks" (Blondel et al., arXiv:0803.0476).  Nodes start in a community
of their own; each sweep moves every node into the neighbouring community
that increases modularity the most, until a full sweep moves nothing.
``Graph.communities_graph`` then collapses each community into a single
node so the same optimisation can run on the coarser graph.

Pure domain code, zero external dependencies.
"""

from __future__ import annotations

import logging
import weakref
from typing import Any, Iterator

from unfold.domain.errors import ForeignNodeError, MissingCommunityError

log = logging.getLogger(__name__)


# ── Node ────────────────────────────────────────────────────────────────────

class Node:
    """A graph vertex with its weighted adjacency and current community."""

    __slots__ = ("id", "value", "neighbours", "outward_weight", "_community", "__weakref__")

    def __init__(self, id: int, value: Any = None):
        self.id = id
        self.value = id if value is None else value
        self.neighbours: list[tuple[Node, float]] = []
        self.outward_weight: float = 0
        self._community: weakref.ref[Community] | None = None

    def __repr__(self) -> str:
        return f"Node(id={self.id!r}, value={self.value!r})"

    @property
    def community(self) -> Community | None:
        if self._community is None:
            return None
        return self._community()

    @community.setter
    def community(self, community: Community | None) -> None:
        self._community = None if community is None else weakref.ref(community)

    def add_neighbour(self, other: Node, weight: float) -> None:
        """Record an edge to *other*.  Parallel edges are kept apart."""
        self.neighbours.append((other, weight))
        self.outward_weight += weight

    def neighbour_ids(self) -> list[int]:
        return [n.id for n, _ in self.neighbours]

    # ── modularity deltas ──

    def _require_community(self) -> Community:
        community = self.community
        if community is None:
            raise MissingCommunityError(f"Node {self.id} does not belong to any community")
        return community

    def delta_modularity_remove(self) -> float:
        """Modularity variation if this node leaves its community.

        A node alone in its community gives 0: taking it out changes nothing.
        """
        community = self._require_community()
        if len(community.nodes) == 1:
            return 0

        total = community.graph.total_weight
        expected = 0.0
        if total:
            expected = self.outward_weight * (community.sum_outward_weight - self.outward_weight) / (2 * total)
        return -community.weight_to_node(self) + expected

    def delta_modularity_add(self, community: Community) -> float:
        """Modularity variation if this node joins *community*.

        Same scale as :meth:`delta_modularity_remove`; dividing by the total
        weight would give the exact variation, comparisons do not need it.
        """
        current = self._require_community()
        if community is current:
            return 0

        total = current.graph.total_weight
        expected = 0.0
        if total:
            expected = self.outward_weight * community.sum_outward_weight / (2 * total)
        return community.weight_to_node(self) - expected

    def move_to_best_community(self) -> bool:
        """Move into the neighbouring community with the best gain.

        Only communities reached through an edge are candidates.  On equal
        gains the first one met in adjacency order wins.  When the best
        candidate is the node's own community the node stays put without
        being removed and re-added.  Returns ``True`` when the node changed
        community.
        """
        dmr = self.delta_modularity_remove()
        current = self.community

        best: Community | None = None
        best_gain = 0.0
        for neighbour, _ in self.neighbours:
            candidate = neighbour.community
            if candidate is None:
                continue
            gain = dmr + self.delta_modularity_add(candidate)
            if gain > best_gain:
                best_gain = gain
                best = candidate

        if best is None or best is current:
            return False

        current.remove_node(self)
        best.add_node(self)
        return True


# ── Community ───────────────────────────────────────────────────────────────

class Community:
    """A group of nodes with cached incident and internal weights."""

    __slots__ = ("id", "nodes", "sum_outward_weight", "sum_inside_weight", "_graph", "__weakref__")

    def __init__(self, id: int, graph: Graph):
        self.id = id
        self.nodes: dict[int, Node] = {}
        self.sum_outward_weight: float = 0
        self.sum_inside_weight: float = 0
        self._graph = weakref.ref(graph)

    def __repr__(self) -> str:
        return f"Community(id={self.id!r}, nodes={self.member_ids()!r})"

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes.values())

    @property
    def graph(self) -> Graph:
        graph = self._graph()
        if graph is None:
            raise RuntimeError(f"Community {self.id} outlived its graph")
        return graph

    def member_ids(self) -> list[int]:
        return list(self.nodes)

    def values(self) -> list[Any]:
        return [n.value for n in self.nodes.values()]

    def label(self) -> str:
        """Member values joined into one label, e.g. ``[a,b,c]``."""
        return "[" + ",".join(str(v) for v in self.values()) + "]"

    def is_empty(self) -> bool:
        return not self.nodes

    def add_node(self, node: Node) -> None:
        node.community = self
        self.nodes[node.id] = node
        self.sum_outward_weight += node.outward_weight
        # Edges from the incoming node to members already present (self-loop included)
        self.sum_inside_weight += self.weight_to_node(node)

    def remove_node(self, node: Node) -> None:
        if self.nodes.get(node.id) is not node:
            raise MissingCommunityError(f"Node {node.id} is not a member of community {self.id}")

        # Measured while the node is still a member
        inside = self.weight_to_node(node)
        del self.nodes[node.id]
        self.sum_inside_weight -= inside
        self.sum_outward_weight -= node.outward_weight
        node.community = None

    def weight_to_node(self, node: Node) -> float:
        """Total weight of the edges joining *node* to members of this community."""
        result = 0
        for neighbour, weight in node.neighbours:
            if neighbour.community is self:
                result += weight
        return result

    def weight_to_community(self, other: Community) -> float:
        """Total weight of the edges joining this community to *other*."""
        if other is self:
            return self.sum_inside_weight
        return sum(other.weight_to_node(n) for n in self.nodes.values())


# ── Graph ───────────────────────────────────────────────────────────────────

class Graph:
    """Weighted undirected graph partitioned into communities."""

    __slots__ = ("nodes", "communities", "total_weight", "current_community_id", "__weakref__")

    def __init__(self) -> None:
        self.nodes: dict[int, Node] = {}
        self.communities: list[Community] = []
        self.total_weight: float = 0
        self.current_community_id = 0

    def __repr__(self) -> str:
        return (
            f"Graph(nodes={len(self.nodes)}, communities={len(self.communities)}, "
            f"total_weight={self.total_weight!r})"
        )

    # ── construction ──

    def add_node(self, node: Node) -> Node:
        if node.id in self.nodes:
            raise ValueError(f"Graph already has a node with id {node.id}")
        self.nodes[node.id] = node
        return node

    def ensure_node(self, node_id: int, value: Any = None) -> Node:
        """Return node *node_id*, creating it in a fresh community on first reference."""
        node = self.nodes.get(node_id)
        if node is None:
            node = self.add_node(Node(node_id, value))
            self.add_community().add_node(node)
        return node

    def add_community(self) -> Community:
        community = Community(self.current_community_id, self)
        self.communities.append(community)
        self.current_community_id += 1
        return community

    def owns(self, node: Node) -> bool:
        return self.nodes.get(node.id) is node

    def add_edge(self, node1: Node, node2: Node, weight: float) -> None:
        """Join *node1* and *node2* with an edge of the given weight."""
        for node in (node1, node2):
            if not self.owns(node):
                raise ForeignNodeError(f"Cannot add edge: node {node.id} does not belong to the graph")

        community1 = node1.community
        community2 = node2.community

        node1.add_neighbour(node2, weight)
        if community1 is not None:
            community1.sum_outward_weight += weight

        # A self-loop is listed once in the adjacency
        if node1 is not node2:
            node2.add_neighbour(node1, weight)
            if community2 is not None:
                community2.sum_outward_weight += weight

        if community1 is not None and community1 is community2:
            community1.sum_inside_weight += weight

        self.total_weight += weight

    # ── queries ──

    def community_of(self, node_id: int) -> Community | None:
        return self.nodes[node_id].community

    def partition(self) -> dict[int, int]:
        """Map each node id to the id of its community."""
        return {
            nid: node.community.id
            for nid, node in self.nodes.items()
            if node.community is not None
        }

    def edges(self) -> Iterator[tuple[Node, Node, float]]:
        """Yield every edge once, self-loops included."""
        position = {nid: i for i, nid in enumerate(self.nodes)}
        for node in self.nodes.values():
            for neighbour, weight in node.neighbours:
                if position[neighbour.id] >= position[node.id]:
                    yield node, neighbour, weight

    # ── optimisation ──

    def find_communities(self) -> int:
        """Sweep all nodes until no move improves modularity.

        Returns the number of sweeps; 1 means the partition was already a
        local optimum.  Empty communities are then dropped and the survivors
        renumbered from 0.
        """
        sweeps = 0
        while True:
            moves = 0
            for node in self.nodes.values():
                if node.move_to_best_community():
                    moves += 1
            sweeps += 1
            log.debug("Sweep %d: %d node(s) moved", sweeps, moves)
            if not moves:
                break

        self._compact_communities()
        log.debug("Converged after %d sweep(s) with %d communities", sweeps, len(self.communities))
        return sweeps

    def _compact_communities(self) -> None:
        self.communities = [c for c in self.communities if not c.is_empty()]
        for i, community in enumerate(self.communities):
            community.id = i

    def communities_graph(self) -> Graph:
        """Collapse every community into one node of a new graph.

        Node ``i`` of the result stands for community ``i``; the edge between
        two nodes weighs as much as all edges joining the two communities,
        and a community's internal weight becomes a self-loop.
        """
        coarse = Graph()
        for community in self.communities:
            node = coarse.add_node(Node(community.id, community.label()))
            coarse.add_community().add_node(node)

        count = len(self.communities)
        for i in range(count):
            community1 = self.communities[i]
            for j in range(i, count):
                community2 = self.communities[j]
                weight = community1.weight_to_community(community2)
                if weight > 0:
                    coarse.add_edge(coarse.nodes[community1.id], coarse.nodes[community2.id], weight)

        return coarse
