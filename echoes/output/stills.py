"""Headless output: settled-layout stills and year-scrubbing animations.

Both drive an EvolutionView with a ManualFrameClock, so the frames written
are exactly the frames the live loop would have drawn.
"""

import logging
import random
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from echoes.config import Config
from echoes.models import ConceptData
from echoes.render.surface import RenderSurface
from echoes.scheduler import ManualFrameClock
from echoes.view import EvolutionView

logger = logging.getLogger(__name__)


@dataclass
class StillResult:
    """A rendered snapshot after a number of simulated frames."""

    concept: str
    requested_year: int
    year: int
    frames: int
    positions: dict[str, tuple[float, float]]
    hovered: str | None = None
    image: Image.Image | None = None
    output_path: Path | None = None


@dataclass
class AnimationResult:
    concept: str
    years: list[int]
    frame_count: int
    output_path: Path | None = None


def _safe_name(concept: str) -> str:
    return concept.strip().replace("/", "_").replace(" ", "_") or "concept"


def build_view(
    data: ConceptData,
    config: Config,
    seed: int | None = None,
) -> tuple[EvolutionView, ManualFrameClock, RenderSurface]:
    rc = config.render
    clock = ManualFrameClock()
    rng = random.Random(seed if seed is not None else config.simulation.seed)
    view = EvolutionView(data, config, clock=clock, rng=rng)
    surface = RenderSurface(rc.width, rc.height, scale=rc.scale, background=rc.background)
    return view, clock, surface


def render_still(
    data: ConceptData,
    config: Config,
    year: int | None = None,
    frames: int | None = None,
    pointer: tuple[float, float] | None = None,
    output_path: Path | None = None,
    seed: int | None = None,
) -> StillResult:
    """Simulate `frames` frames for the snapshot nearest `year`, then capture it.

    With a pointer, the hover target is resolved against the settled layout
    and one more frame is drawn so the emphasis shows.
    """
    requested = year if year is not None else config.default_year
    n_frames = frames if frames is not None else config.output.frames
    if n_frames < 1:
        raise ValueError("frames must be at least 1")

    view, clock, surface = build_view(data, config, seed)
    view.set_year(requested)
    view.mount(surface)
    # mount() draws the first frame synchronously
    clock.run(n_frames - 1)

    hovered = None
    if pointer is not None:
        hovered = view.pointer_move(*pointer)
        clock.tick()

    result = StillResult(
        concept=data.concept,
        requested_year=requested,
        year=view.current_year.value,
        frames=view.scheduler.frame_count,
        positions=view.positions.snapshot(),
        hovered=hovered,
        image=surface.copy_frame(),
    )
    view.unmount()

    if output_path is not None:
        result.output_path = surface.save(output_path)
        logger.info("Wrote %s (%s, %d, %d frames)", output_path, data.concept, result.year, result.frames)
    return result


def render_animation(
    data: ConceptData,
    config: Config,
    output_path: Path,
    frames_per_year: int | None = None,
    seed: int | None = None,
) -> AnimationResult:
    """Scrub through every year, keeping positions across transitions, into a GIF."""
    per_year = frames_per_year if frames_per_year is not None else config.output.frames_per_year
    if per_year < 1:
        raise ValueError("frames_per_year must be at least 1")

    view, clock, surface = build_view(data, config, seed)
    years = view.available_years
    view.set_year(years[0])
    view.mount(surface)

    captured: list[Image.Image] = [surface.copy_frame()]
    for i, year in enumerate(years):
        if i > 0:
            view.set_year(year)
            captured.append(surface.copy_frame())
        for _ in range(per_year - 1):
            clock.tick()
            captured.append(surface.copy_frame())
        logger.info("  %s %d: %d frames", data.concept, year, per_year)
    view.unmount()

    output_path.parent.mkdir(parents=True, exist_ok=True)
    captured[0].save(
        output_path,
        save_all=True,
        append_images=captured[1:],
        duration=config.output.frame_duration_ms,
        loop=0,
    )
    logger.info("Wrote %s (%d frames)", output_path, len(captured))
    return AnimationResult(
        concept=data.concept,
        years=years,
        frame_count=len(captured),
        output_path=output_path,
    )


def default_still_path(config: Config, concept: str, year: int) -> Path:
    return config.resolved_output_dir / f"{_safe_name(concept)}_{year}.png"


def default_animation_path(config: Config, concept: str) -> Path:
    return config.resolved_output_dir / f"{_safe_name(concept)}_evolution.gif"
