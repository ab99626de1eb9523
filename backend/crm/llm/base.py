from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any


class LLMProvider(ABC):
    @abstractmethod
    async def extract_fields(
        self, prompt: str, field_names: Sequence[str]
    ) -> dict[str, Any]:
        """Return the model's JSON object for ``prompt``, constrained to
        string properties named ``field_names``."""

    @property
    @abstractmethod
    def provider_name(self) -> str: ...

    @property
    @abstractmethod
    def model_name(self) -> str: ...


def string_object_schema(field_names: Sequence[str]) -> dict[str, Any]:
    """JSON Schema for an object whose properties are all strings."""
    return {
        "type": "object",
        "properties": {name: {"type": "string"} for name in field_names},
        "required": list(field_names),
        "additionalProperties": False,
    }
