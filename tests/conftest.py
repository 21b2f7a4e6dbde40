"""Shared test fixtures for echoes tests."""

import random

import pytest

from echoes.config import ApiConfig, Config, OutputConfig
from echoes.layout.positions import PositionStore, Viewport
from echoes.models import ConceptData, Edge, GraphSnapshot, Narrative, Node, PrimaryAssociation
from echoes.sources.offline import get_offline_concept_data


def make_node(node_id: str, size: float = 10, color: str = "#ff0000", label: str | None = None) -> Node:
    return Node(id=node_id, label=label or node_id.title(), size=size, color=color)


@pytest.fixture()
def viewport():
    return Viewport(400, 400)


@pytest.fixture()
def store(viewport):
    """PositionStore with seeded placement."""
    return PositionStore(viewport, random.Random(7))


@pytest.fixture()
def config(tmp_path):
    """Offline config writing into a temp output dir."""
    return Config(
        api=ApiConfig(offline=True),
        output=OutputConfig(output_dir=str(tmp_path / "out"), frames=30, frames_per_year=4),
    )


@pytest.fixture()
def freedom():
    return get_offline_concept_data("Freedom")


@pytest.fixture()
def small_concept():
    """Three years; 'main' and 'b' persist, 'a' leaves, 'c' arrives."""
    def snap(ids: list[str], links: list[tuple[str, str, float]]) -> GraphSnapshot:
        return GraphSnapshot(
            nodes=[make_node(i, size=30 if i == "main" else 12) for i in ids],
            links=[Edge(source=s, target=t, strength=w) for s, t, w in links],
        )

    return ConceptData(
        concept="Test",
        time_range="1940 - 2020 CE",
        narrative=Narrative(
            summary="test",
            semantic_shift=10,
            primary_association=PrimaryAssociation(from_="old", to="new"),
        ),
        evolution={
            1940: snap(["main", "a", "b"], [("main", "a", 0.9), ("main", "b", 0.5)]),
            1980: snap(["main", "b"], [("main", "b", 0.8)]),
            2020: snap(["main", "b", "c"], [("main", "b", 0.8), ("b", "c", 0.6)]),
        },
    )
