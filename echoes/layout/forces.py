"""Force-directed layout step: centering, pairwise repulsion and link springs.

Each frame runs a few sub-iterations. A sub-iteration accumulates velocity
from all three forces, then integrates positions, damps velocity and clamps
nodes inside the viewport. Repulsion is O(n^2); graphs here hold tens of nodes.
"""

import logging
import math
from collections.abc import Sequence

from echoes.config import SimulationConfig
from echoes.layout.positions import KinematicState, PositionStore
from echoes.models import Edge, Node

logger = logging.getLogger(__name__)


class ForceSimulator:
    """Advances a PositionStore in place."""

    def __init__(self, config: SimulationConfig | None = None) -> None:
        self.config = config or SimulationConfig()

    def step(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        positions: PositionStore,
        center: tuple[float, float] | None = None,
    ) -> None:
        """Run one frame worth of sub-iterations."""
        viewport = positions.viewport
        if viewport.is_degenerate:
            logger.debug("Skipping simulation step: degenerate viewport %s", viewport)
            return
        if center is None:
            center = viewport.center

        tracked = [(node, positions.get(node.id)) for node in nodes]
        tracked = [(node, state) for node, state in tracked if state is not None]

        for _ in range(self.config.iterations):
            self._apply_center_and_repulsion(tracked, center)
            self._apply_links(edges, positions)
            self._integrate(tracked, viewport.width, viewport.height)

    def _apply_center_and_repulsion(
        self,
        tracked: list[tuple[Node, KinematicState]],
        center: tuple[float, float],
    ) -> None:
        cx, cy = center
        k_center = self.config.k_center
        k_repulsion = self.config.k_repulsion

        for node, pos in tracked:
            pos.vx += (cx - pos.x) * k_center
            pos.vy += (cy - pos.y) * k_center

            for other, other_pos in tracked:
                if other.id == node.id:
                    continue
                dx = pos.x - other_pos.x
                dy = pos.y - other_pos.y
                dist = math.sqrt(dx * dx + dy * dy) + 1
                force = (node.size + other.size) * k_repulsion / (dist * dist)
                pos.vx += (dx / dist) * force
                pos.vy += (dy / dist) * force

    def _apply_links(self, edges: Sequence[Edge], positions: PositionStore) -> None:
        rest_length = self.config.rest_length
        k_link = self.config.k_link

        for edge in edges:
            source = positions.get(edge.source)
            target = positions.get(edge.target)
            if source is None or target is None:
                continue

            dx = target.x - source.x
            dy = target.y - source.y
            dist = math.sqrt(dx * dx + dy * dy) + 1
            force = (dist - rest_length) * edge.strength * k_link

            source.vx += (dx / dist) * force
            source.vy += (dy / dist) * force
            target.vx -= (dx / dist) * force
            target.vy -= (dy / dist) * force

    def _integrate(
        self,
        tracked: list[tuple[Node, KinematicState]],
        width: float,
        height: float,
    ) -> None:
        damping = self.config.damping
        for node, pos in tracked:
            pos.x += pos.vx
            pos.y += pos.vy
            pos.vx *= damping
            pos.vy *= damping

            # Clamp, don't reflect: overshoot is absorbed at the edge.
            margin = node.size
            pos.x = max(margin, min(width - margin, pos.x))
            pos.y = max(margin, min(height - margin, pos.y))
