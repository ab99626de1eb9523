"""Free-text extraction through the hosted LLM, and the merge policies that
apply extraction results to drafts."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from crm.fields import (
    CUSTOMER_NEEDS_FIELDS,
    EMPTY_PLACEHOLDER,
    NEEDS_SUMMARY_LABELS,
    NEEDS_SUMMARY_PREFIX,
    PROPERTY_EXTRACTION_FIELDS,
    SEARCH_FIELDS,
)
from crm.llm.prompts.extraction import (
    build_customer_needs_prompt,
    build_property_prompt,
    build_search_prompt,
)
from crm.schemas.search import SearchCriteria
from crm.utils.exceptions import EmptyInputError, ExtractionError

if TYPE_CHECKING:
    from crm.llm.base import LLMProvider
    from crm.schemas.property import PropertyRecord
    from crm.services.notifications import Notifier

logger = logging.getLogger(__name__)


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float, bool)):
        return str(value)
    if isinstance(value, list):
        return ", ".join(_to_text(v) for v in value if v is not None)
    return ""


def validate_payload(raw: Any, field_names: Sequence[str]) -> dict[str, str]:
    """Reduce an untrusted model reply to exactly ``field_names``, as strings."""
    if not isinstance(raw, dict):
        raise ExtractionError(f"Expected a JSON object, got {type(raw).__name__}")
    unexpected = set(raw) - set(field_names)
    if unexpected:
        logger.debug("Ignoring unexpected extraction fields: %s", sorted(unexpected))
    return {name: _to_text(raw.get(name)) for name in field_names}


def is_present(value: str | None) -> bool:
    return bool(value and value.strip() and value.strip() != EMPTY_PLACEHOLDER)


async def extract_fields(
    llm: LLMProvider,
    text: str,
    field_names: Sequence[str],
    build_prompt: Callable[[str], str],
    *,
    notifier: Notifier | None = None,
    subject: str = "text",
) -> dict[str, str]:
    if not text.strip():
        if notifier:
            notifier.warning(f"Please enter a {subject} to analyse.")
        raise EmptyInputError(f"Empty {subject}")

    if notifier:
        notifier.info(f"Analysing {subject} with AI...")
    try:
        raw = await llm.extract_fields(build_prompt(text), field_names)
        result = validate_payload(raw, field_names)
    except Exception as e:
        logger.exception("Extraction of %s failed (%s)", subject, llm.provider_name)
        if notifier:
            notifier.error(f"Could not analyse the {subject} with AI.")
        raise ExtractionError(f"Extraction failed: {e}") from e

    if notifier:
        notifier.info("AI analysis complete. Please review and edit if needed.")
    return result


async def extract_property_fields(
    llm: LLMProvider, description: str, notifier: Notifier | None = None
) -> dict[str, str]:
    return await extract_fields(
        llm,
        description,
        PROPERTY_EXTRACTION_FIELDS,
        build_property_prompt,
        notifier=notifier,
        subject="property description",
    )


async def extract_customer_needs(
    llm: LLMProvider, needs_text: str, notifier: Notifier | None = None
) -> dict[str, str]:
    return await extract_fields(
        llm,
        needs_text,
        CUSTOMER_NEEDS_FIELDS,
        build_customer_needs_prompt,
        notifier=notifier,
        subject="customer needs description",
    )


async def extract_search_criteria(
    llm: LLMProvider, query: str, notifier: Notifier | None = None
) -> SearchCriteria:
    fields = await extract_fields(
        llm,
        query,
        SEARCH_FIELDS,
        build_search_prompt,
        notifier=notifier,
        subject="search query",
    )
    return SearchCriteria.model_validate(fields)


def merge_property_extraction(
    draft: PropertyRecord, extracted: dict[str, str], raw_text: str
) -> PropertyRecord:
    """Overwrite every AI-managed field of ``draft``.

    Absent or placeholder values clear the field.  The total land price falls
    back to the extracted price, and the description is always the raw text.
    """
    updates = {
        name: extracted.get(name, "").strip() if is_present(extracted.get(name)) else ""
        for name in PROPERTY_EXTRACTION_FIELDS
    }
    if not updates["tongGiaDat"]:
        updates["tongGiaDat"] = updates["price"]
    updates["description"] = raw_text
    return draft.updated(updates)


def summarize_customer_needs(extracted: dict[str, str]) -> str:
    parts = [NEEDS_SUMMARY_PREFIX]
    for name in CUSTOMER_NEEDS_FIELDS:
        value = extracted.get(name)
        if is_present(value):
            parts.append(f"{NEEDS_SUMMARY_LABELS[name]}: {value.strip()}.")
    return " ".join(parts)
