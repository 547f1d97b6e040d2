"""Report adapter: plain-text dump of nodes, communities and levels."""

from __future__ import annotations

from unfold.domain.graph import Community, Graph, Node
from unfold.domain.models import DetectionResult
from unfold.ports.report import ReportPort


def _fmt_weight(weight: float) -> str:
    if isinstance(weight, float) and weight.is_integer():
        return str(int(weight))
    return str(weight)


class TextReport(ReportPort):
    """Blocks of ``Key: value`` lines separated by blank lines."""

    def render_node(self, node: Node) -> str:
        neighbours = ", ".join(
            f"(id: {n.id}, weight: {_fmt_weight(w)})" for n, w in node.neighbours
        )
        community = node.community
        return "\n".join([
            f"Node: {node.id}",
            f"Value: {node.value}",
            f"Neighbours: {neighbours}",
            f"Community: {community.id if community is not None else 'none'}",
        ])

    def render_community(self, community: Community) -> str:
        members = ", ".join(str(nid) for nid in community.member_ids())
        return f"Community {community.id}\nNodes: {members}"

    def render_graph(self, graph: Graph) -> str:
        blocks = [self.render_node(n) for n in graph.nodes.values()]
        blocks += [self.render_community(c) for c in graph.communities]
        return "\n\n".join(blocks) + "\n"

    def render_result(self, result: DetectionResult) -> str:
        lines: list[str] = []
        for level in result.levels:
            lines.append(
                f"Level {level.level}: {level.node_count} nodes, {level.sweeps} sweep(s), "
                f"{level.community_count} communities, modularity {level.modularity:.4f}"
            )
            for cid, members in enumerate(level.communities):
                lines.append(f"  Community {cid}: {', '.join(str(m) for m in members)}")
        return "\n".join(lines) + "\n"
