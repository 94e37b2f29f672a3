"""
LLM Gateway

Sends prompts to Google Gemini and returns plain text.

Generation is a two-attempt strategy:

1. the google-genai SDK (which addresses the v1beta surface), and
2. only when the SDK error says the model is not on that surface
   (HTTP 404 / "v1beta"), a raw REST call to the stable v1
   ``generateContent`` endpoint.

Any other SDK failure propagates unchanged. Replies from either path are
normalized by :func:`normalize_reply`.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

import httpx
from google import genai
from google.genai import types as genai_types

from resume_review.config import Config
from resume_review.services.prompt_service import SYSTEM_INSTRUCTION
from resume_review.utils.logger import get_logger
from resume_review.utils.exceptions import ProviderError

logger = get_logger(__name__)

DEGRADED_REPLY_MESSAGE = "The AI provider returned a response without any text. Please try again."


@dataclass
class SdkReply:
    """Response object returned by the google-genai SDK."""
    response: Any


@dataclass
class RawReply:
    """Decoded JSON body of a REST generateContent call."""
    payload: Dict[str, Any]


Reply = Union[SdkReply, RawReply]


@dataclass
class NormalizedReply:
    text: str
    # True when no text field was found and `text` is the serialized response
    degraded: bool = False


def _sdk_text(response: Any) -> Optional[str]:
    try:
        return response.text
    except (AttributeError, ValueError):
        return None


def _serialize_sdk(response: Any) -> str:
    if hasattr(response, "model_dump_json"):
        return response.model_dump_json(exclude_none=True)
    return repr(response)


def _raw_parts_text(payload: Dict[str, Any]) -> Optional[str]:
    candidates = payload.get("candidates") or []
    if not candidates:
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []
    texts = [part["text"] for part in parts if isinstance(part.get("text"), str)]
    return "".join(texts) if texts else None


def normalize_reply(reply: Reply) -> NormalizedReply:
    """
    Reduce either reply shape to text.

    Takes the first non-blank of: the structured text field, an
    ``output_text`` field, else the whole response serialized and flagged
    as degraded.
    """
    if isinstance(reply, SdkReply):
        text = _sdk_text(reply.response)
        output_text = getattr(reply.response, "output_text", None)
        serialize = lambda: _serialize_sdk(reply.response)
    elif isinstance(reply, RawReply):
        text = _raw_parts_text(reply.payload)
        output_text = reply.payload.get("output_text")
        serialize = lambda: json.dumps(reply.payload, ensure_ascii=False)
    else:
        raise TypeError(f"Unknown reply type: {type(reply).__name__}")

    for candidate in (text, output_text):
        if isinstance(candidate, str) and candidate.strip():
            return NormalizedReply(text=candidate)
    return NormalizedReply(text=serialize(), degraded=True)


def is_api_surface_mismatch(exc: BaseException) -> bool:
    """True when an SDK error means the model is not served on the SDK's API surface."""
    if getattr(exc, "code", None) == 404:
        return True
    message = str(exc)
    return "v1beta" in message or "404" in message


class GeminiGateway:
    """Gateway to the Gemini generateContent API."""

    def __init__(
        self,
        config: Config,
        sdk_client_factory: Optional[Callable[[str], Any]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self._sdk_client_factory = sdk_client_factory or self._default_sdk_client
        self._transport = transport
        # One SDK client per API key; each holds its own connection pool
        self._sdk_clients: Dict[str, Any] = {}

    def _sdk_http_options(self) -> genai_types.HttpOptions:
        # The SDK takes its timeout in milliseconds
        return genai_types.HttpOptions(timeout=int(self.config.gemini.timeout_seconds * 1000))

    def _default_sdk_client(self, api_key: str) -> genai.Client:
        return genai.Client(api_key=api_key, http_options=self._sdk_http_options())

    def _sdk_client(self, api_key: str) -> Any:
        client = self._sdk_clients.get(api_key)
        if client is None:
            client = self._sdk_client_factory(api_key)
            self._sdk_clients[api_key] = client
        return client

    async def aclose(self) -> None:
        """Close the cached SDK clients."""
        clients = list(self._sdk_clients.values())
        self._sdk_clients.clear()
        for client in clients:
            close = getattr(client.aio, "aclose", None)
            if close is not None:
                await close()
        if clients:
            logger.info(f"[LLMGateway] Closed {len(clients)} SDK client(s)")

    async def generate(self, prompt: str, model: str, api_key: str) -> str:
        """
        Generate text for a prompt.

        Raises:
            ProviderError: REST fallback failed or the reply held no text
            Exception: Any SDK error that is not an API-surface mismatch
        """
        logger.info(f"[LLMGateway] 🔁 Generating with model {model} ({len(prompt)} prompt chars)")
        try:
            reply = await self._generate_with_sdk(prompt, model, api_key)
        except Exception as e:
            if not is_api_surface_mismatch(e):
                raise
            logger.warning(f"[LLMGateway] ⚠️ SDK call failed ({e}); falling back to API v1")
            reply = await self._generate_with_rest(prompt, model, api_key)

        normalized = normalize_reply(reply)
        if normalized.degraded:
            logger.error(
                f"[LLMGateway] ❌ Reply without text from {model}: {normalized.text[:500]}"
            )
            raise ProviderError(DEGRADED_REPLY_MESSAGE)

        logger.info(f"[LLMGateway] ✅ Reply received ({len(normalized.text)} chars)")
        return normalized.text

    async def _generate_with_sdk(self, prompt: str, model: str, api_key: str) -> SdkReply:
        client = self._sdk_client(api_key)
        response = await client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=genai_types.GenerateContentConfig(
                system_instruction=SYSTEM_INSTRUCTION,
                temperature=self.config.gemini.temperature,
                max_output_tokens=self.config.gemini.max_output_tokens,
            ),
        )
        return SdkReply(response)

    async def _generate_with_rest(self, prompt: str, model: str, api_key: str) -> RawReply:
        url = f"{self.config.gemini.base_url}/v1/models/{model}:generateContent"
        body = {
            "contents": [{
                "role": "user",
                "parts": [{"text": f"{SYSTEM_INSTRUCTION}\n\n{prompt}"}],
            }],
            "generationConfig": {
                "temperature": self.config.gemini.temperature,
                "maxOutputTokens": self.config.gemini.max_output_tokens,
            },
        }
        async with httpx.AsyncClient(
            timeout=self.config.gemini.timeout_seconds,
            transport=self._transport,
        ) as client:
            response = await client.post(
                url,
                headers={
                    "x-goog-api-key": api_key,
                    "Content-Type": "application/json",
                },
                json=body,
            )

        if response.is_error:
            try:
                detail = (response.json().get("error") or {}).get("message")
            except (ValueError, AttributeError):
                detail = None
            raise ProviderError(f"Gemini API v1 error: {detail or response.reason_phrase}")

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError("Gemini API v1 returned a non-JSON response") from e

        logger.info("[LLMGateway] ✅ Response received from API v1")
        return RawReply(payload if isinstance(payload, dict) else {"response": payload})
