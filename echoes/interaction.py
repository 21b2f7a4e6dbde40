"""Pointer hover tracking."""

import logging
import math
from collections.abc import Sequence

from echoes.layout.positions import PositionStore, Viewport
from echoes.models import Node
from echoes.observable import Observable, ReadOnlyObservable

logger = logging.getLogger(__name__)


def locate(
    pointer: tuple[float, float],
    nodes: Sequence[Node],
    positions: PositionStore,
    bounds: Viewport | None = None,
) -> str | None:
    """Return the id of the first node (snapshot order) under the pointer.

    First match wins, not the nearest node. A pointer outside `bounds`
    never hovers anything.
    """
    x, y = pointer
    if bounds is not None and not bounds.contains(x, y):
        return None

    for node in nodes:
        pos = positions.get(node.id)
        if pos is None:
            continue
        if math.hypot(x - pos.x, y - pos.y) < node.size:
            return node.id
    return None


class InteractionTracker:
    """Owns the hover target for one mounted view.

    Pointer events only update `hovered`; the renderer picks the new value up
    on its next frame.
    """

    def __init__(self) -> None:
        self._hovered: Observable[str | None] = Observable(None)
        self._nodes: Sequence[Node] = ()
        self._positions: PositionStore | None = None

    def attach(self, nodes: Sequence[Node], positions: PositionStore) -> None:
        """Track a new snapshot's nodes against the shared position store."""
        self._nodes = nodes
        self._positions = positions

    def detach(self) -> None:
        self._nodes = ()
        self._positions = None
        self._hovered.set(None)

    @property
    def hovered(self) -> ReadOnlyObservable[str | None]:
        return self._hovered.readonly()

    @property
    def hover_target(self) -> str | None:
        return self._hovered.value

    def locate(
        self,
        pointer: tuple[float, float],
        nodes: Sequence[Node],
        positions: PositionStore,
    ) -> str | None:
        return locate(pointer, nodes, positions, bounds=positions.viewport)

    def pointer_move(self, x: float, y: float) -> str | None:
        if self._positions is None:
            return None
        target = self.locate((x, y), self._nodes, self._positions)
        if target != self._hovered.value:
            logger.debug("Hover target: %s", target)
        self._hovered.set(target)
        return target

    def pointer_leave(self) -> None:
        self._hovered.set(None)
