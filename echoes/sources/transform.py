"""Map backend timeline responses onto ConceptData."""

import math
import re

from echoes.models import (
    ConceptData,
    Edge,
    GraphSnapshot,
    Narrative,
    Node,
    PatternPair,
    PatternSide,
    PrimaryAssociation,
    SymbolPairsResponse,
    TimelineItem,
    TimelineResponse,
)

MAIN_NODE_ID = "main"
MAIN_NODE_SIZE = 30
MAIN_NODE_COLOR = "#06b6d4"
ITEM_COLORS = ["#3b82f6", "#8b5cf6", "#06b6d4", "#3b82f6", "#8b5cf6"]
MAX_ITEM_NODES = 6
DEFAULT_YEAR = 2000
DEFAULT_TIME_RANGE = "1900 - 2025 CE"
DEFAULT_SEMANTIC_SHIFT = 42

_YEAR_RE = re.compile(r"(\d{4})s?")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def era_to_year(era: str) -> int:
    """Map an era label to a display year.

    Decade labels ("1900s") land mid-century (+40); plain years pass through.
    """
    match = _YEAR_RE.search(era)
    if not match:
        return DEFAULT_YEAR
    base_year = int(match.group(1))
    return base_year + (40 if "s" in era else 0)


def _first_long_word(text: str) -> str | None:
    words = [w for w in text.split() if len(w) > 3]
    return words[0] if words else None


def _era_snapshot(concept: str, items: list[TimelineItem]) -> GraphSnapshot:
    nodes = [Node(id=MAIN_NODE_ID, label=concept, size=MAIN_NODE_SIZE, color=MAIN_NODE_COLOR)]
    links: list[Edge] = []

    for idx, item in enumerate(items[:MAX_ITEM_NODES]):
        word = _first_long_word(item.text)
        label = word[0].upper() + word[1:] if word else f"Term {idx + 1}"
        node_id = f"node-{idx}"
        nodes.append(Node(
            id=node_id,
            label=label,
            size=20 + (item.similarity or 0) * 10,
            color=ITEM_COLORS[idx % len(ITEM_COLORS)],
        ))
        strength = item.similarity or 0.5
        links.append(Edge(source=MAIN_NODE_ID, target=node_id, strength=min(1.0, max(0.0, strength))))

    return GraphSnapshot(nodes=nodes, links=links)


def _narrative(concept: str, timeline: TimelineResponse) -> Narrative:
    assoc = timeline.primary_association
    if timeline.semantic_shift:
        shift = _round_half_up(timeline.semantic_shift)
        origin = assoc.from_ if assoc and assoc.from_ else "traditional contexts"
        target = assoc.to if assoc and assoc.to else "contemporary usage"
        summary = (
            f'The concept of "{concept}" evolved by a {shift}% semantic shift, '
            f'moving its primary association from "{origin}" to "{target}".'
        )
    else:
        shift = DEFAULT_SEMANTIC_SHIFT
        summary = (
            f'The concept of "{concept}" has undergone significant transformation '
            "throughout history, adapting to cultural, technological, and social changes."
        )

    return Narrative(
        summary=summary,
        semantic_shift=shift,
        primary_association=assoc or PrimaryAssociation(
            from_="traditional meaning", to="contemporary interpretation",
        ),
    )


def transform_timeline_to_concept_data(
    concept: str,
    timeline: TimelineResponse,
    symbol_pairs: SymbolPairsResponse | None = None,
) -> ConceptData:
    """Build per-era graphs, narrative and pattern pairs from a timeline response."""
    eras = timeline.eras
    years = sorted(era_to_year(e.era) for e in eras)
    time_range = f"{years[0]} - {years[-1]} CE" if years else DEFAULT_TIME_RANGE

    evolution = {era_to_year(e.era): _era_snapshot(concept, e.items) for e in eras}

    patterns: dict[int, PatternPair] = {}
    if symbol_pairs and symbol_pairs.pairs:
        for era_key, pair in symbol_pairs.pairs.items():
            patterns[era_to_year(era_key)] = PatternPair(
                ancient=PatternSide(
                    title=pair.ancient.title, description=pair.ancient.description,
                    era=pair.ancient.era, image_path=pair.ancient.path,
                ),
                modern=PatternSide(
                    title=pair.modern.title, description=pair.modern.description,
                    era=pair.modern.era, image_path=pair.modern.path,
                ),
            )
    else:
        for e in eras:
            patterns[era_to_year(e.era)] = PatternPair(
                ancient=PatternSide(
                    title=f"Historical {concept}",
                    description="Representation from earlier period",
                    era=e.era,
                ),
                modern=PatternSide(
                    title=f"Modern {concept}",
                    description="Contemporary interpretation",
                    era=e.era,
                ),
            )

    return ConceptData(
        concept=concept,
        time_range=time_range,
        narrative=_narrative(concept, timeline),
        evolution=evolution,
        patterns=patterns,
    )


def calculate_semantic_shift(era1_items: list[TimelineItem], era2_items: list[TimelineItem]) -> float:
    """Percentage difference between two eras' mean similarities."""
    avg1 = sum(i.similarity or 0 for i in era1_items) / (len(era1_items) or 1)
    avg2 = sum(i.similarity or 0 for i in era2_items) / (len(era2_items) or 1)
    return abs(avg2 - avg1) * 100


def extract_associations(
    old_era_items: list[TimelineItem],
    new_era_items: list[TimelineItem],
) -> PrimaryAssociation:
    """Most relevant term of each era, taken from its top item."""

    def top_term(items: list[TimelineItem]) -> str:
        if not items:
            return "unknown"
        return _first_long_word(items[0].text) or "concept"

    return PrimaryAssociation(from_=top_term(old_era_items), to=top_term(new_era_items))
