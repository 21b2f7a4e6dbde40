"""Load concept data from the backend, falling back to bundled datasets."""

import logging

import httpx

from echoes.config import ApiConfig
from echoes.models import ConceptData, SymbolPairsResponse
from echoes.sources.api_client import APIError, EchoesAPI
from echoes.sources.offline import get_offline_concept_data
from echoes.sources.transform import transform_timeline_to_concept_data

logger = logging.getLogger(__name__)


def load_concept_data(
    concept: str,
    config: ApiConfig,
    api: EchoesAPI | None = None,
) -> ConceptData:
    """Fetch and transform a concept's timeline.

    Symbol pairs are optional: failing to fetch them still yields data. Any
    failure on the timeline itself switches to offline mode.
    """
    if not concept:
        raise ValueError("Concept must not be empty")

    if config.offline:
        return get_offline_concept_data(concept)

    owns_client = api is None
    if api is None:
        api = EchoesAPI.from_config(config)

    try:
        timeline = api.get_timeline(concept, config.top_n)

        symbol_pairs: SymbolPairsResponse | None = None
        try:
            symbol_pairs = api.get_symbol_pairs(concept)
        except (APIError, httpx.HTTPError, ValueError) as e:
            logger.debug("Symbol pairs unavailable for %r: %s", concept, e)

        data = transform_timeline_to_concept_data(concept, timeline, symbol_pairs)
        if not data.evolution:
            raise ValueError(f"Backend returned no eras for {concept!r}")
        return data
    except (APIError, httpx.HTTPError, ValueError) as e:
        logger.info("Backend unavailable - using offline mode for %r (%s)", concept, e)
        return get_offline_concept_data(concept)
    finally:
        if owns_client:
            api.close()


def check_backend_health(config: ApiConfig, api: EchoesAPI | None = None) -> bool:
    owns_client = api is None
    if api is None:
        api = EchoesAPI.from_config(config)
    try:
        api.health()
        return True
    except (APIError, httpx.HTTPError, ValueError) as e:
        logger.warning("Backend not available: %s", e)
        return False
    finally:
        if owns_client:
            api.close()
