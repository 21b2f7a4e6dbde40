"""CLI entry point for the echoes visualizer."""

import argparse
import logging
from pathlib import Path

from echoes.config import load_config
from echoes.output.stills import (
    default_animation_path,
    default_still_path,
    render_animation,
    render_still,
)
from echoes.provider import SnapshotProvider
from echoes.sources.loader import check_backend_health, load_concept_data


def _parse_pointer(value: str) -> tuple[float, float]:
    try:
        x, y = (float(part) for part in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected X,Y but got {value!r}") from None
    return x, y


def main() -> None:
    parser = argparse.ArgumentParser(description="Echoes - memetic evolution graphs")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument(
        "--offline", action="store_true",
        help="Skip the backend and use bundled datasets",
    )
    sub = parser.add_subparsers(dest="command")

    # years command
    years_parser = sub.add_parser("years", help="List the snapshot years of a concept")
    years_parser.add_argument("concept", help="Concept to look up")
    years_parser.add_argument(
        "--resolve", type=int, default=None,
        help="Also show which snapshot this year resolves to",
    )

    # summary command
    summary_parser = sub.add_parser("summary", help="Show a concept's narrative summary")
    summary_parser.add_argument("concept", help="Concept to look up")

    # render command
    render_parser = sub.add_parser("render", help="Render the settled graph for one year to PNG")
    render_parser.add_argument("concept", help="Concept to render")
    render_parser.add_argument("--year", type=int, default=None, help="Requested year (nearest snapshot is used)")
    render_parser.add_argument("--frames", type=int, default=None, help="Frames to simulate before capture")
    render_parser.add_argument(
        "--pointer", type=_parse_pointer, default=None,
        help="Simulated pointer position X,Y for hover emphasis",
    )
    render_parser.add_argument("--seed", type=int, default=None, help="Seed for initial placement")
    render_parser.add_argument("-o", "--output", type=Path, default=None, help="Output PNG path")

    # animate command
    animate_parser = sub.add_parser("animate", help="Render a GIF scrubbing through every year")
    animate_parser.add_argument("concept", help="Concept to render")
    animate_parser.add_argument("--frames-per-year", type=int, default=None)
    animate_parser.add_argument("--seed", type=int, default=None, help="Seed for initial placement")
    animate_parser.add_argument("-o", "--output", type=Path, default=None, help="Output GIF path")

    # health command
    sub.add_parser("health", help="Check whether the backend is reachable")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.offline:
        config.api.offline = True

    if args.command is None:
        parser.print_help()
        return

    if args.command == "health":
        ok = check_backend_health(config.api)
        print(f"{config.api.base_url}: {'ok' if ok else 'unavailable'}")
        return

    try:
        data = load_concept_data(args.concept, config.api)

        if args.command == "years":
            provider = SnapshotProvider(data)
            print(f"{data.concept} ({data.time_range}):")
            for year in provider.available_keys:
                snap = provider.snapshot(year)
                print(f"  {year}: {len(snap.nodes)} nodes, {len(snap.links)} links")
            if args.resolve is not None:
                print(f"\n{args.resolve} -> {provider.resolve(args.resolve)}")

        elif args.command == "summary":
            n = data.narrative
            print(f"Analyzing: {data.concept}")
            print(f"Decoding patterns across {data.time_range}\n")
            print(n.summary)
            print(f"\nSemantic shift: {n.semantic_shift}%")
            print(f"Primary association: {n.primary_association.from_} -> {n.primary_association.to}")

        elif args.command == "render":
            provider = SnapshotProvider(data)
            year = provider.resolve(args.year if args.year is not None else config.default_year)
            output = args.output or default_still_path(config, data.concept, year)
            result = render_still(
                data, config,
                year=args.year,
                frames=args.frames,
                pointer=args.pointer,
                output_path=output,
                seed=args.seed,
            )
            print(f"{result.concept} {result.year} after {result.frames} frames")
            if args.pointer is not None:
                print(f"Hovered: {result.hovered or '-'}")
            print(f"Output: {result.output_path}")

        elif args.command == "animate":
            output = args.output or default_animation_path(config, data.concept)
            result = render_animation(
                data, config, output,
                frames_per_year=args.frames_per_year,
                seed=args.seed,
            )
            years = ", ".join(str(y) for y in result.years)
            print(f"{result.concept}: {years} ({result.frame_count} frames)")
            print(f"Output: {result.output_path}")

    except ValueError as e:
        print(f"Error: {e}")


if __name__ == "__main__":
    main()
