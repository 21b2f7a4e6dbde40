"""Pydantic models for concept evolution data."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# --- Graph models (immutable once produced by a data source) ---


class Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    size: float = Field(gt=0)  # visual radius in logical pixels
    color: str


class Edge(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    strength: float = Field(ge=0.0, le=1.0)


class GraphSnapshot(BaseModel):
    """Node/edge graph for one time key."""
    model_config = ConfigDict(frozen=True)

    nodes: list[Node] = Field(default_factory=list)
    links: list[Edge] = Field(default_factory=list)

    @property
    def node_ids(self) -> set[str]:
        return {n.id for n in self.nodes}


# --- Concept data ---


class PrimaryAssociation(BaseModel):
    from_: str = Field(alias="from")
    to: str

    model_config = ConfigDict(populate_by_name=True)


class Narrative(BaseModel):
    summary: str
    semantic_shift: int
    primary_association: PrimaryAssociation


class PatternSide(BaseModel):
    title: str
    description: str
    era: str
    image_path: str | None = None


class PatternPair(BaseModel):
    ancient: PatternSide
    modern: PatternSide


class ConceptData(BaseModel):
    """Everything known about a concept across time keys."""
    concept: str
    time_range: str
    narrative: Narrative
    evolution: dict[int, GraphSnapshot]
    patterns: dict[int, PatternPair] = Field(default_factory=dict)

    @property
    def years(self) -> list[int]:
        return sorted(self.evolution)


# --- Backend response models ---


class TimelineItem(BaseModel):
    text: str
    similarity: float | None = None
    metadata: dict[str, Any] | None = None


class EraData(BaseModel):
    era: str
    items: list[TimelineItem] = Field(default_factory=list)
    centroid: list[float] | None = None


class TimelineResponse(BaseModel):
    concept: str
    eras: list[EraData] = Field(default_factory=list)
    semantic_shift: float | None = None
    primary_association: PrimaryAssociation | None = None


class EraQueryResponse(BaseModel):
    concept: str
    era: str
    items: list[TimelineItem] = Field(default_factory=list)


class EmbeddingResponse(BaseModel):
    embedding: list[float]


class SymbolSide(BaseModel):
    path: str
    title: str
    description: str
    era: str


class SymbolPair(BaseModel):
    ancient: SymbolSide
    modern: SymbolSide


class SymbolPairsResponse(BaseModel):
    symbol: str
    pairs: dict[str, SymbolPair] = Field(default_factory=dict)
