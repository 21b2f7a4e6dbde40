"""Bundled concept datasets for offline use."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from echoes.models import ConceptData

logger = logging.getLogger(__name__)

DATASET_PATH = Path(__file__).with_name("offline_concepts.yaml")


@lru_cache(maxsize=1)
def _load_raw() -> dict[str, Any]:
    return yaml.safe_load(DATASET_PATH.read_text()) or {}


def _fill(value: Any, concept: str) -> Any:
    """Substitute the concept name into every string of the generic template."""
    if isinstance(value, str):
        return value.replace("{concept}", concept)
    if isinstance(value, dict):
        return {k: _fill(v, concept) for k, v in value.items()}
    if isinstance(value, list):
        return [_fill(v, concept) for v in value]
    return value


def offline_concepts() -> list[str]:
    return list(_load_raw().get("concepts", {}))


def get_offline_concept_data(concept: str) -> ConceptData:
    """Case-insensitive lookup; unknown concepts get the generic dataset."""
    datasets: dict[str, Any] = _load_raw().get("concepts", {})
    wanted = concept.lower()
    for name, raw in datasets.items():
        if name.lower() == wanted:
            return ConceptData.model_validate(raw)

    logger.debug("No bundled dataset for %r, using generic template", concept)
    return ConceptData.model_validate(_fill(_load_raw()["generic"], concept))
