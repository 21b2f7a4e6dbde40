"""Per-node kinematic state that survives snapshot transitions."""

import logging
import random
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from echoes.models import Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Viewport:
    """Logical pixel space the layout lives in."""

    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        return self.width / 2, self.height / 2

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def contains(self, x: float, y: float) -> bool:
        return 0 <= x <= self.width and 0 <= y <= self.height


@dataclass
class KinematicState:
    """Position and velocity of one node."""

    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0

    @property
    def speed(self) -> float:
        return (self.vx * self.vx + self.vy * self.vy) ** 0.5


class PositionStore:
    """Kinematic state keyed by node id.

    Entries are inserted when a node id first appears and removed when a
    reconciled snapshot no longer contains it. Surviving ids keep their state
    untouched, so the layout animates continuously across snapshot changes.
    """

    def __init__(self, viewport: Viewport, rng: random.Random | None = None) -> None:
        self.viewport = viewport
        self._rng = rng or random.Random()
        self._states: dict[str, KinematicState] = {}

    def set_viewport(self, viewport: Viewport) -> None:
        self.viewport = viewport

    def reconcile(self, nodes: Iterable[Node]) -> None:
        """Insert state for new node ids and drop state for departed ones."""
        current_ids: set[str] = set()
        added = 0
        for node in nodes:
            current_ids.add(node.id)
            if node.id not in self._states:
                self._states[node.id] = self._initial_state()
                added += 1

        stale = [node_id for node_id in self._states if node_id not in current_ids]
        for node_id in stale:
            del self._states[node_id]

        logger.debug(
            "Reconciled positions: %d added, %d removed, %d tracked",
            added, len(stale), len(self._states),
        )

    def _initial_state(self) -> KinematicState:
        if self.viewport.is_degenerate:
            return KinematicState(x=0.0, y=0.0)
        return KinematicState(
            x=self._rng.uniform(0, self.viewport.width),
            y=self._rng.uniform(0, self.viewport.height),
        )

    def get(self, node_id: str) -> KinematicState | None:
        return self._states.get(node_id)

    def __getitem__(self, node_id: str) -> KinematicState:
        return self._states[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._states

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[str]:
        return iter(self._states)

    def clear(self) -> None:
        self._states.clear()

    def snapshot(self) -> dict[str, tuple[float, float]]:
        """Copy of current positions, for presentation and serialization."""
        return {node_id: (s.x, s.y) for node_id, s in self._states.items()}
