"""Service: multilevel Louvain community detection.

Level 0 optimises the input graph.  In ``multilevel`` mode each further
level collapses the communities found so far into a coarse graph and
optimises that one, until a level brings no move or no modularity gain,
a single community is left, the level cap is hit, or the time budget runs
out.  Modularity is always measured on the input graph.  ``single`` mode
stops after level 0.
"""

from __future__ import annotations

import logging
import time

from unfold.domain.graph import Graph
from unfold.domain.models import DetectionLevel, DetectionResult
from unfold.domain.modularity import partition_modularity

log = logging.getLogger(__name__)

MODES = ("single", "multilevel")


class CommunityDetectionService:
    """Run ``Graph.find_communities`` once or level after level."""

    def __init__(
        self,
        *,
        mode: str = "single",
        max_levels: int = 10,
        time_budget: float | None = None,
    ):
        if mode not in MODES:
            raise ValueError(f"Unknown detection mode: {mode!r} (expected one of {', '.join(MODES)})")
        if max_levels < 1:
            raise ValueError("max_levels must be at least 1")
        self._mode = mode
        self._max_levels = max_levels
        self._time_budget = time_budget

    @property
    def mode(self) -> str:
        return self._mode

    # ── public ──

    def detect(self, graph: Graph) -> DetectionResult:
        """Partition *graph* and report every level reached.

        Each level's modularity is measured on *graph* itself under the
        partition of its nodes reached so far.
        """
        started = time.monotonic()
        result = DetectionResult()

        # input node id → id of the node standing for it in the current graph
        assignment = {nid: nid for nid in graph.nodes}
        current = graph
        level = 0

        while True:
            sweeps = current.find_communities()
            if level > 0 and sweeps == 1:
                log.info("Level %d brought no move, stopping", level)
                break

            candidate = {
                orig: current.nodes[nid].community.id
                for orig, nid in assignment.items()
            }
            q = partition_modularity(graph, candidate)
            if level > 0 and q <= result.levels[-1].modularity:
                log.info(
                    "Level %d does not raise modularity (%.4f -> %.4f), stopping",
                    level, result.levels[-1].modularity, q,
                )
                break

            assignment = candidate
            detected = self._record_level(level, sweeps, current, assignment, q)
            result.levels.append(detected)
            result.graph = current

            if not self._should_continue(detected, started):
                break

            current = current.communities_graph()
            level += 1

        result.partition = assignment
        log.info(
            "Detection finished: %d level(s), %d communities",
            result.height,
            result.community_count,
        )
        return result

    # ── private helpers ──

    def _record_level(
        self,
        level: int,
        sweeps: int,
        graph: Graph,
        assignment: dict[int, int],
        q: float,
    ) -> DetectionLevel:
        groups: dict[int, list[int]] = {c.id: [] for c in graph.communities}
        for orig, cid in assignment.items():
            groups[cid].append(orig)

        log.info(
            "Level %d: %d nodes, %d sweep(s), %d communities, modularity %.4f",
            level, len(graph.nodes), sweeps, len(groups), q,
        )
        return DetectionLevel(
            level=level,
            sweeps=sweeps,
            modularity=q,
            node_count=len(graph.nodes),
            communities=[groups[cid] for cid in sorted(groups)],
        )

    def _should_continue(self, detected: DetectionLevel, started: float) -> bool:
        if self._mode == "single":
            return False
        if detected.sweeps == 1:
            log.info("Level %d is already a local optimum, stopping", detected.level)
            return False
        if detected.community_count <= 1:
            log.info("Single community at level %d, stopping", detected.level)
            return False
        if detected.level + 1 >= self._max_levels:
            log.info("Reached max_levels=%d, stopping", self._max_levels)
            return False
        if self._time_budget is not None:
            elapsed = time.monotonic() - started
            if elapsed > self._time_budget:
                log.warning(
                    "Time budget of %.1fs exhausted after %.1fs, stopping at level %d",
                    self._time_budget, elapsed, detected.level,
                )
                return False
        return True
