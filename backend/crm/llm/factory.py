from __future__ import annotations

from crm.config import settings
from crm.llm.base import LLMProvider

_provider_instance: LLMProvider | None = None


def get_llm_provider() -> LLMProvider:
    global _provider_instance
    if _provider_instance is None:
        if settings.llm_provider == "gemini":
            from crm.llm.gemini_provider import GeminiProvider

            _provider_instance = GeminiProvider()
        elif settings.llm_provider == "claude":
            from crm.llm.claude_provider import ClaudeProvider

            _provider_instance = ClaudeProvider()
        elif settings.llm_provider == "openai":
            from crm.llm.openai_provider import OpenAIProvider

            _provider_instance = OpenAIProvider()
        else:
            raise ValueError(f"Unknown LLM provider: {settings.llm_provider}")
    return _provider_instance
