"""Frame loop: simulate then render once per display refresh.

The scheduler never sleeps or blocks. It asks a frame clock for the next
refresh and re-requests from inside each frame until stopped, so exactly one
simulate+render pass runs per clock tick.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from echoes.config import RenderConfig
from echoes.interaction import InteractionTracker
from echoes.layout.forces import ForceSimulator
from echoes.layout.positions import PositionStore
from echoes.models import GraphSnapshot
from echoes.render.renderer import Renderer
from echoes.render.surface import RenderSurface

logger = logging.getLogger(__name__)

FrameCallback = Callable[[], None]


class FrameClock(Protocol):
    def request_frame(self, callback: FrameCallback) -> int: ...

    def cancel_frame(self, handle: int) -> None: ...


class ManualFrameClock:
    """Cooperative refresh source driven by explicit ticks.

    Each `tick()` runs every callback requested before the tick began;
    callbacks requested during a tick wait for the next one.
    """

    def __init__(self) -> None:
        self._next_handle = 1
        self._pending: dict[int, FrameCallback] = {}
        self._due: dict[int, FrameCallback] = {}
        self.ticks = 0

    def request_frame(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)
        self._due.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def tick(self) -> int:
        """Run one refresh. Returns the number of callbacks invoked."""
        self._due = self._pending
        self._pending = {}
        self.ticks += 1
        ran = 0
        while self._due:
            handle = next(iter(self._due))
            callback = self._due.pop(handle)
            callback()
            ran += 1
        return ran

    def run(self, frames: int) -> None:
        for _ in range(frames):
            self.tick()


class SchedulerState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class FrameScheduler:
    """Drives ForceSimulator.step and Renderer.render for one snapshot at a time."""

    def __init__(
        self,
        clock: FrameClock,
        positions: PositionStore,
        simulator: ForceSimulator,
        tracker: InteractionTracker,
        render_config: RenderConfig | None = None,
    ) -> None:
        self.clock = clock
        self.positions = positions
        self.simulator = simulator
        self.tracker = tracker
        self.render_config = render_config or RenderConfig()
        self.state = SchedulerState.STOPPED
        self.frame_count = 0
        self._handle: int | None = None
        self._snapshot: GraphSnapshot | None = None
        self._renderer: Renderer | None = None

    @property
    def running(self) -> bool:
        return self.state is SchedulerState.RUNNING

    def start(self, snapshot: GraphSnapshot, surface: RenderSurface | None) -> bool:
        """Reconcile positions against `snapshot` and begin animating.

        Returns False, scheduling nothing, when there is no surface to draw on.
        """
        self.stop()
        if surface is None:
            logger.warning("No render surface available; animation not started")
            return False

        self.positions.set_viewport(surface.viewport)
        self.positions.reconcile(snapshot.nodes)
        self.tracker.attach(snapshot.nodes, self.positions)
        self._snapshot = snapshot
        self._renderer = Renderer(surface, self.render_config)
        self.state = SchedulerState.RUNNING
        logger.debug(
            "Animation started: %d nodes, %d links", len(snapshot.nodes), len(snapshot.links),
        )
        self._frame()
        return True

    def stop(self) -> None:
        if self._handle is not None:
            self.clock.cancel_frame(self._handle)
            self._handle = None
        if self.state is SchedulerState.RUNNING:
            logger.debug("Animation stopped after %d frames", self.frame_count)
        self.state = SchedulerState.STOPPED

    def _frame(self) -> None:
        self._handle = None
        if self.state is not SchedulerState.RUNNING or self._snapshot is None:
            return

        snapshot = self._snapshot
        if not self.positions.viewport.is_degenerate:
            self.simulator.step(snapshot.nodes, snapshot.links, self.positions)
            self._renderer.render(
                snapshot.nodes, snapshot.links, self.positions, self.tracker.hover_target,
            )
        self.frame_count += 1
        self._handle = self.clock.request_frame(self._frame)
