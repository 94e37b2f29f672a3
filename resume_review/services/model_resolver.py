"""
Model Resolver

Chooses which Gemini model identifier the gateway addresses.

Resolution order: configured override, then the process-wide cache, then
a live query against the stable (v1) model-listing endpoint. The cache has
no TTL; a stale entry lives until `invalidate()` or a restart.
"""

import time
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

import httpx

from resume_review.config import Config
from resume_review.utils.logger import get_logger

logger = get_logger(__name__)

# Substrings checked in order; the first model name matching one wins
MODEL_PREFERENCE = ("2.0", "1.5-flash", "1.5-pro")
MAX_LIST_PAGES = 10


@dataclass
class ResolvedModel:
    identifier: str
    source: str  # "override" | "cache" | "live" | "fallback"


class ModelCache:
    """Process-wide holder for the last live-resolved model."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.identifier: Optional[str] = None
        self.resolved_at: Optional[float] = None

    def get(self) -> Optional[str]:
        return self.identifier

    def set(self, identifier: str) -> None:
        self.identifier = identifier
        self.resolved_at = self._clock()

    def age(self) -> Optional[float]:
        if self.resolved_at is None:
            return None
        return self._clock() - self.resolved_at

    def invalidate(self) -> None:
        if self.identifier:
            logger.info(f"[ModelResolver] Cache invalidated (was {self.identifier})")
        self.identifier = None
        self.resolved_at = None


def strip_model_prefix(name: str) -> str:
    return name[len("models/"):] if name.startswith("models/") else name


def select_preferred_model(names: Iterable[str]) -> Optional[str]:
    """Pick a model name by MODEL_PREFERENCE, else the first one. Prefix stripped."""
    names = list(names)
    for marker in MODEL_PREFERENCE:
        for name in names:
            if marker in name:
                return strip_model_prefix(name)
    if names:
        return strip_model_prefix(names[0])
    return None


class ModelResolver:
    """Resolves the Gemini model to use for generation calls."""

    def __init__(
        self,
        config: Config,
        cache: Optional[ModelCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.cache = cache or ModelCache()
        self._transport = transport

    @property
    def override(self) -> Optional[str]:
        return self.config.gemini.model_override

    async def resolve(self, api_key: str) -> ResolvedModel:
        """
        Determine the model identifier. Never raises: any failure of the
        live query degrades to the configured fallback model.
        """
        if self.override:
            return ResolvedModel(self.override, "override")

        cached = self.cache.get()
        if cached:
            return ResolvedModel(cached, "cache")

        try:
            names = await self.list_generation_models(api_key)
            logger.info(f"[ModelResolver] 📋 Models available on API v1: {names}")
            preferred = select_preferred_model(names)
            if preferred:
                self.cache.set(preferred)
                logger.info(f"[ModelResolver] ✅ Model selected automatically: {preferred}")
                return ResolvedModel(preferred, "live")
            logger.warning("[ModelResolver] ⚠️ No model supports generateContent")
        except Exception as e:
            logger.error(f"[ModelResolver] ❌ Failed to list models from API v1: {e}")

        fallback = self.config.gemini.fallback_model
        logger.warning(f"[ModelResolver] ⚠️ Using fallback model {fallback}")
        return ResolvedModel(fallback, "fallback")

    async def list_generation_models(self, api_key: str) -> List[str]:
        """
        Query the stable model-listing endpoint and return the names of
        models that support generateContent, following pagination.

        Raises:
            httpx.HTTPError: Network failure or non-2xx response
            ValueError: Malformed response body
        """
        url = f"{self.config.gemini.base_url}/v1/models"
        names: List[str] = []
        page_token: Optional[str] = None

        async with httpx.AsyncClient(
            timeout=self.config.gemini.timeout_seconds,
            transport=self._transport,
        ) as client:
            for _ in range(MAX_LIST_PAGES):
                params = {"pageSize": 1000}
                if page_token:
                    params["pageToken"] = page_token
                response = await client.get(
                    url,
                    params=params,
                    headers={"x-goog-api-key": api_key},
                )
                response.raise_for_status()
                data = response.json()
                if not isinstance(data, dict):
                    raise ValueError("Unexpected model list payload")

                for model in data.get("models") or []:
                    methods = model.get("supportedGenerationMethods") or []
                    if "generateContent" in methods and model.get("name"):
                        names.append(model["name"])

                page_token = data.get("nextPageToken")
                if not page_token:
                    break

        return names
