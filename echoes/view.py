"""The memetic evolution view: one concept, one surface, a year to look at."""

import logging
import random

from echoes.config import Config
from echoes.interaction import InteractionTracker
from echoes.layout.forces import ForceSimulator
from echoes.layout.positions import PositionStore, Viewport
from echoes.models import ConceptData, GraphSnapshot
from echoes.observable import Observable, ReadOnlyObservable
from echoes.provider import SnapshotProvider
from echoes.render.surface import RenderSurface
from echoes.scheduler import FrameClock, FrameScheduler, ManualFrameClock

logger = logging.getLogger(__name__)


class EvolutionView:
    """Ties snapshot resolution, layout state and the frame loop together.

    Surrounding UI reads `current_year` and `hovered_node` and feeds pointer
    and year changes back in. The loop restarts only when the resolved
    snapshot, the surface or its size changes.
    """

    def __init__(
        self,
        data: ConceptData,
        config: Config | None = None,
        clock: FrameClock | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or Config()
        self.provider = SnapshotProvider(data)
        self.clock = clock or ManualFrameClock()
        self.positions = PositionStore(
            Viewport(0, 0), rng or random.Random(self.config.simulation.seed),
        )
        self.tracker = InteractionTracker()
        self.scheduler = FrameScheduler(
            self.clock,
            self.positions,
            ForceSimulator(self.config.simulation),
            self.tracker,
            self.config.render,
        )
        self.requested_year = self.config.default_year
        self._current_year: Observable[int] = Observable(self.provider.resolve(self.requested_year))
        self.surface: RenderSurface | None = None

    @property
    def concept(self) -> str:
        return self.provider.data.concept

    @property
    def current_year(self) -> ReadOnlyObservable[int]:
        return self._current_year.readonly()

    @property
    def hovered_node(self) -> ReadOnlyObservable[str | None]:
        return self.tracker.hovered

    @property
    def snapshot(self) -> GraphSnapshot:
        return self.provider.snapshot(self._current_year.value)

    @property
    def available_years(self) -> list[int]:
        return self.provider.available_keys

    def mount(self, surface: RenderSurface | None) -> bool:
        self.surface = surface
        return self._restart()

    def unmount(self) -> None:
        self.scheduler.stop()
        self.tracker.detach()
        self.surface = None

    def set_year(self, year: int) -> bool:
        """Request a year. Returns True when this switched snapshots."""
        self.requested_year = year
        key = self.provider.resolve(year)
        if key == self._current_year.value:
            return False

        logger.info("%s: %d -> snapshot %d", self.concept, year, key)
        self._current_year.set(key)
        if self.surface is not None:
            self._restart()
        return True

    def resize(self, width: int, height: int) -> None:
        if self.surface is None:
            return
        self.surface.resize(width, height)
        self._restart()

    def pointer_move(self, x: float, y: float) -> str | None:
        return self.tracker.pointer_move(x, y)

    def pointer_leave(self) -> None:
        self.tracker.pointer_leave()

    def _restart(self) -> bool:
        return self.scheduler.start(self.snapshot, self.surface)
