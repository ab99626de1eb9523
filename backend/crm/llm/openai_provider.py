from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from openai import AsyncOpenAI

from crm.config import settings
from crm.llm.base import LLMProvider, string_object_schema


class OpenAIProvider(LLMProvider):
    def __init__(self) -> None:
        self.client = AsyncOpenAI(api_key=settings.openai_api_key)
        self._model = settings.openai_model

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def model_name(self) -> str:
        return self._model

    async def extract_fields(
        self, prompt: str, field_names: Sequence[str]
    ) -> dict[str, Any]:
        response = await self.client.chat.completions.create(
            model=self._model,
            temperature=settings.llm_temperature,
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": "extracted_fields",
                    "strict": True,
                    "schema": string_object_schema(field_names),
                },
            },
            messages=[{"role": "user", "content": prompt}],
        )
        raw_text = response.choices[0].message.content or "{}"
        return json.loads(raw_text)
