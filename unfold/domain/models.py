"""Result models produced by community detection. Zero external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field

from unfold.domain.graph import Graph


@dataclass
class DetectionLevel:
    """The partition reached at one optimisation level."""

    level: int
    sweeps: int
    modularity: float
    node_count: int
    communities: list[list[int]] = field(default_factory=list)  # input node ids

    @property
    def community_count(self) -> int:
        return len(self.communities)


@dataclass
class DetectionResult:
    """All levels of a detection run, finest first."""

    levels: list[DetectionLevel] = field(default_factory=list)
    partition: dict[int, int] = field(default_factory=dict)  # input node id → community id
    graph: Graph | None = None  # last graph that was optimised

    @property
    def height(self) -> int:
        return len(self.levels)

    @property
    def final_level(self) -> DetectionLevel | None:
        return self.levels[-1] if self.levels else None

    @property
    def community_count(self) -> int:
        return len(set(self.partition.values()))

    def members_of(self, community_id: int) -> list[int]:
        return [nid for nid, cid in self.partition.items() if cid == community_id]
