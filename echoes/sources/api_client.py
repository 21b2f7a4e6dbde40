"""HTTP client for the Echoes backend."""

import logging

import httpx

from echoes.config import ApiConfig
from echoes.models import (
    EmbeddingResponse,
    EraQueryResponse,
    SymbolPairsResponse,
    TimelineResponse,
)

logger = logging.getLogger(__name__)


class APIError(RuntimeError):
    """The backend answered with a non-success status."""

    def __init__(self, operation: str, response: httpx.Response) -> None:
        self.status_code = response.status_code
        super().__init__(f"{operation} failed: {response.reason_phrase or response.status_code}")


class EchoesAPI:
    """Thin wrapper over the backend's JSON endpoints.

    Transport errors (timeouts, refused connections) surface as
    `httpx.HTTPError`; non-2xx answers as `APIError`.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.Client(
            base_url=self.base_url, timeout=timeout, transport=transport,
        )

    @classmethod
    def from_config(cls, config: ApiConfig, transport: httpx.BaseTransport | None = None) -> "EchoesAPI":
        return cls(config.base_url, config.timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "EchoesAPI":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _get(self, operation: str, path: str, params: dict[str, str] | None = None) -> dict:
        logger.debug("GET %s%s %s", self.base_url, path, params or "")
        response = self._client.get(path, params=params)
        if not response.is_success:
            raise APIError(operation, response)
        return response.json()

    def health(self) -> dict:
        return self._get("Health check", "/health")

    def embed(self, text: str) -> EmbeddingResponse:
        response = self._client.post("/embed", json={"text": text})
        if not response.is_success:
            raise APIError("Embed", response)
        return EmbeddingResponse.model_validate(response.json())

    def get_timeline(self, concept: str, top_n: int = 5) -> TimelineResponse:
        """Timeline data for a concept across eras."""
        data = self._get(
            "Timeline fetch", "/timeline",
            {"concept": concept.lower(), "top_n": str(top_n)},
        )
        return TimelineResponse.model_validate(data)

    def get_era_data(self, concept: str, era: str, top_n: int = 10) -> EraQueryResponse:
        data = self._get(
            "Era data fetch", "/era",
            {"concept": concept.lower(), "era": era, "top_n": str(top_n)},
        )
        return EraQueryResponse.model_validate(data)

    def get_symbol_pairs(self, symbol: str) -> SymbolPairsResponse:
        data = self._get("Symbol pairs fetch", "/symbol-pairs", {"symbol": symbol.lower()})
        return SymbolPairsResponse.model_validate(data)
