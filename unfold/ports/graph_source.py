"""Port: source of a weighted graph."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from unfold.domain.graph import Graph


@dataclass
class WeightedEdge:
    """An undirected edge between two node ids."""

    source: int
    target: int
    weight: float


class GraphSourcePort(ABC):
    """Build a populated graph from external data."""

    @abstractmethod
    def load(self) -> Graph:
        """Return a graph where every node sits in its own community.

        Raises ``DataSourceError`` when the input cannot be read.
        """
