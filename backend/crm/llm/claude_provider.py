from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

import anthropic

from crm.config import settings
from crm.llm.base import LLMProvider
from crm.llm.prompts.extraction import build_json_only_system_prompt


class ClaudeProvider(LLMProvider):
    def __init__(self) -> None:
        self.client = anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)
        self._model = settings.anthropic_model

    @property
    def provider_name(self) -> str:
        return "claude"

    @property
    def model_name(self) -> str:
        return self._model

    async def extract_fields(
        self, prompt: str, field_names: Sequence[str]
    ) -> dict[str, Any]:
        response = await self.client.messages.create(
            model=self._model,
            max_tokens=4096,
            temperature=settings.llm_temperature,
            system=build_json_only_system_prompt(field_names),
            messages=[{"role": "user", "content": prompt}],
        )
        raw_text = response.content[0].text
        return self._parse_json_response(raw_text)

    @staticmethod
    def _parse_json_response(text: str) -> dict[str, Any]:
        text = text.strip()
        if text.startswith("```"):
            text = text.split("\n", 1)[1]
            text = text.rsplit("```", 1)[0]
        return json.loads(text.strip())
