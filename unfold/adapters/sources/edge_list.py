"""Graph source adapter: whitespace-separated edge-list file.

One edge per line: ``<source id> <target id> <weight>``, all integers.
Blank lines and lines starting with ``#`` are skipped.  Repeated lines
become parallel edges.
"""

from __future__ import annotations

import logging
from pathlib import Path

from unfold.adapters.sources.in_memory import graph_from_edges
from unfold.domain.errors import DataSourceError
from unfold.domain.graph import Graph
from unfold.ports.graph_source import GraphSourcePort, WeightedEdge

log = logging.getLogger(__name__)


class EdgeListSource(GraphSourcePort):
    """Read a graph from an edge-list text file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def load(self) -> Graph:
        edges = self.read_edges()
        graph = graph_from_edges(edges)
        log.info(
            "Loaded %s: %d nodes, %d edges, total weight %s",
            self._path, len(graph.nodes), len(edges), graph.total_weight,
        )
        return graph

    def read_edges(self) -> list[WeightedEdge]:
        """Parse the whole file before anything is built."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DataSourceError(f"Cannot read edge list {self._path}: {exc}") from exc

        edges: list[WeightedEdge] = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            edges.append(self._parse_line(line, lineno))
        return edges

    def _parse_line(self, line: str, lineno: int) -> WeightedEdge:
        parts = line.split()
        if len(parts) != 3:
            raise DataSourceError(
                f"{self._path}:{lineno}: expected '<source> <target> <weight>', got {line!r}"
            )
        try:
            source, target, weight = (int(p) for p in parts)
        except ValueError as exc:
            raise DataSourceError(f"{self._path}:{lineno}: non-integer field in {line!r}") from exc
        return WeightedEdge(source=source, target=target, weight=weight)
