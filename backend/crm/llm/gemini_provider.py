"""Gemini ``generateContent`` client with a response schema."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

import httpx

from crm.config import settings
from crm.llm.base import LLMProvider

logger = logging.getLogger(__name__)


class GeminiResponseError(ValueError):
    """The response did not carry a candidate with a text part."""


def build_generate_payload(prompt: str, field_names: Sequence[str]) -> dict[str, Any]:
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": settings.llm_temperature,
            "responseMimeType": "application/json",
            "responseSchema": {
                "type": "OBJECT",
                "properties": {name: {"type": "STRING"} for name in field_names},
                "propertyOrdering": list(field_names),
            },
        },
    }


def extract_response_text(result: dict[str, Any]) -> str:
    candidates = result.get("candidates") or []
    if not candidates:
        raise GeminiResponseError("Response has no candidates")
    parts = (candidates[0].get("content") or {}).get("parts") or []
    if not parts or "text" not in parts[0]:
        raise GeminiResponseError("First candidate has no text part")
    return parts[0]["text"]


class GeminiProvider(LLMProvider):
    def __init__(self, http_client: httpx.AsyncClient | None = None) -> None:
        self.http_client = http_client or httpx.AsyncClient(
            timeout=settings.llm_timeout_seconds
        )
        self._model = settings.gemini_model

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def endpoint(self) -> str:
        return f"{settings.gemini_base_url}/models/{self._model}:generateContent"

    async def extract_fields(
        self, prompt: str, field_names: Sequence[str]
    ) -> dict[str, Any]:
        response = await self.http_client.post(
            self.endpoint,
            params={"key": settings.gemini_api_key},
            json=build_generate_payload(prompt, field_names),
        )
        response.raise_for_status()
        text = extract_response_text(response.json())
        parsed = json.loads(text)
        if not isinstance(parsed, dict):
            raise GeminiResponseError(f"Expected a JSON object, got {type(parsed).__name__}")
        return parsed
