#!/usr/bin/env python3
"""Echoes MCP Server - explore how a concept's associations evolve."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

from mcp.server.fastmcp import FastMCP

from echoes.config import Config, load_config
from echoes.models import ConceptData
from echoes.output.stills import default_still_path, render_still
from echoes.provider import SnapshotProvider
from echoes.sources.loader import load_concept_data

mcp = FastMCP("echoes")
logger = logging.getLogger(__name__)

# Redirect all logging to stderr so stdout stays clean for MCP stdio transport
logging.basicConfig(
    stream=sys.stderr,
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

_config: Config | None = None


def _get_config() -> Config:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _load(concept: str) -> ConceptData:
    return load_concept_data(concept, _get_config().api)


@mcp.tool()
def list_years(concept: str) -> str:
    """List the snapshot years available for a concept, with node and link counts."""
    try:
        data = _load(concept)
        return json.dumps({
            "concept": data.concept,
            "time_range": data.time_range,
            "years": [
                {"year": y, "nodes": len(s.nodes), "links": len(s.links)}
                for y, s in sorted(data.evolution.items())
            ],
        })
    except ValueError as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def resolve_year(concept: str, year: int) -> str:
    """Resolve a requested year to the nearest available snapshot year."""
    try:
        provider = SnapshotProvider(_load(concept))
        return json.dumps({"requested": year, "year": provider.resolve(year)})
    except ValueError as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def get_snapshot(concept: str, year: int) -> str:
    """Get the nodes and links of the snapshot nearest to a year."""
    try:
        provider = SnapshotProvider(_load(concept))
        key, snapshot = provider.snapshot_for(year)
        return json.dumps({"year": key, **snapshot.model_dump()})
    except ValueError as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def simulate_layout(
    concept: str,
    year: int,
    frames: int = 120,
    seed: Optional[int] = None,
) -> str:
    """Run the force layout for a number of frames and return node positions."""
    try:
        result = render_still(_load(concept), _get_config(), year=year, frames=frames, seed=seed)
        return json.dumps({
            "year": result.year,
            "frames": result.frames,
            "positions": {
                node_id: {"x": round(x, 2), "y": round(y, 2)}
                for node_id, (x, y) in result.positions.items()
            },
        })
    except ValueError as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def render_snapshot(
    concept: str,
    year: int,
    frames: int = 120,
    pointer_x: Optional[float] = None,
    pointer_y: Optional[float] = None,
    output_path: Optional[str] = None,
    seed: Optional[int] = None,
) -> str:
    """Render the settled graph nearest a year to PNG. Optional pointer adds hover emphasis."""
    try:
        config = _get_config()
        data = _load(concept)
        pointer = None
        if pointer_x is not None and pointer_y is not None:
            pointer = (pointer_x, pointer_y)
        year_key = SnapshotProvider(data).resolve(year)
        path = Path(output_path) if output_path else default_still_path(config, data.concept, year_key)
        result = render_still(
            data, config, year=year, frames=frames, pointer=pointer,
            output_path=path, seed=seed,
        )
        return json.dumps({
            "year": result.year,
            "frames": result.frames,
            "hovered": result.hovered,
            "output_path": str(result.output_path),
        })
    except ValueError as e:
        return json.dumps({"error": str(e)})


if __name__ == "__main__":
    mcp.run()
