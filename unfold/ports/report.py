"""Port: human-readable rendering of graphs and detection results."""

from __future__ import annotations

from abc import ABC, abstractmethod

from unfold.domain.graph import Graph
from unfold.domain.models import DetectionResult


class ReportPort(ABC):
    """Render the state of a graph and the outcome of a detection run."""

    @abstractmethod
    def render_graph(self, graph: Graph) -> str:
        """Describe every node, then every community."""

    @abstractmethod
    def render_result(self, result: DetectionResult) -> str:
        """Describe each level of a detection run."""
