from __future__ import annotations

from collections.abc import Sequence

from crm.fields import (
    CRITERIA_HINTS,
    CUSTOMER_NEEDS_FIELDS,
    EMPTY_PLACEHOLDER,
    PROPERTY_EXTRACTION_FIELDS,
    PROPERTY_LABELS,
    SEARCH_FIELDS,
)


def build_json_only_system_prompt(field_names: Sequence[str]) -> str:
    keys = ", ".join(f'"{name}"' for name in field_names)
    return f"""You convert Vietnamese real estate text into structured data.

Output ONLY a valid JSON object with exactly these keys: {keys}.
Every value must be a string. Use an empty string or "{EMPTY_PLACEHOLDER}" when the text does not say.
Return ONLY the JSON object. No markdown, no explanation, no wrapping."""


def _describe_property_fields() -> str:
    return "\n".join(
        f'- "{name}": {PROPERTY_LABELS[name][0]}' for name in PROPERTY_EXTRACTION_FIELDS
    )


def _describe_criteria(field_names: Sequence[str]) -> str:
    return "\n".join(f'- "{name}": {CRITERIA_HINTS[name]}' for name in field_names)


def build_property_prompt(description: str) -> str:
    return f"""You are a real estate listing analyst. Read the property description below and extract the following fields into a JSON object. Keep values in the language of the text (Vietnamese). If a field is not mentioned, leave it empty or use "{EMPTY_PLACEHOLDER}".

FIELDS:
{_describe_property_fields()}

DESCRIPTION:
---
{description}
---"""


def build_customer_needs_prompt(needs_text: str) -> str:
    return f"""You are a real estate assistant analysing what a customer is looking for. Read the text below and extract the following fields into a JSON object. If a field is not mentioned, leave it empty or use "{EMPTY_PLACEHOLDER}".

FIELDS:
{_describe_criteria(CUSTOMER_NEEDS_FIELDS)}

CUSTOMER NEEDS:
---
{needs_text}
---"""


def build_search_prompt(query: str) -> str:
    return f"""You are a real estate search assistant. Turn the search request below into filter criteria as a JSON object with the following fields. Leave every field empty if the request has no clear criteria.

FIELDS:
{_describe_criteria(SEARCH_FIELDS)}

SEARCH REQUEST:
---
{query}
---"""
