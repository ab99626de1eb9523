"""Client-side filtering of the property list by extracted search criteria.

Every criterion applies only when both the criterion and the property field
are present.  Numeric comparisons are fail-closed: if either side does not
parse, the property is excluded.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable

from crm.fields import KEYWORD_FALLBACK_FIELDS
from crm.schemas.property import PropertyRecord
from crm.schemas.search import SearchCriteria

SMALL_AREA_KEYWORDS = ("nhỏ", "small")
LARGE_AREA_KEYWORDS = ("lớn", "large")
SMALL_AREA_MAX = 50.0
LARGE_AREA_MIN = 100.0

# Criteria matched by case-insensitive containment; same attribute on both sides.
SUBSTRING_CRITERIA = (
    "location",
    "huong_cua",
    "loai_nha_dat",
    "loai_giao_dich",
    "loai_hinh_bat_dong_san",
    "du_an",
)

_NON_NUMERIC = re.compile(r"[^0-9.]")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_FIRST_NUMBER = re.compile(r"\d+(?:[.,]\d+)*")
# 1.500.000.000 / 800.000 / 1,200: separators between groups of three digits
_GROUPED_THOUSANDS = re.compile(r"\d{1,3}(?:([.,])\d{3})(?:\1\d{3})*")


def _fold(text: str) -> str:
    return unicodedata.normalize("NFC", text).lower()


def _to_float(token: str) -> float | None:
    if _GROUPED_THOUSANDS.fullmatch(token):
        token = token.replace(".", "").replace(",", "")
    else:
        token = token.replace(",", ".")
    try:
        return float(token)
    except ValueError:
        return None


def parse_price(text: str) -> float | None:
    """Numeric value of a price after dropping everything but digits and dots."""
    return _to_float(_NON_NUMERIC.sub("", text))


def parse_leading_int(text: str) -> int | None:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None


def parse_area(text: str) -> float | None:
    """First number in an area field, e.g. 45 for "45 m2"."""
    match = _FIRST_NUMBER.search(text)
    return _to_float(match.group()) if match else None


def _contains(haystack: str, needle: str) -> bool:
    return _fold(needle) in _fold(haystack)


def matches_criteria(prop: PropertyRecord, criteria: SearchCriteria) -> bool:
    for attr in SUBSTRING_CRITERIA:
        wanted = getattr(criteria, attr)
        actual = getattr(prop, attr)
        if wanted and actual and not _contains(actual, wanted):
            return False

    price_text = prop.price or prop.tong_gia_dat
    if price_text and criteria.min_price:
        price, bound = parse_price(price_text), parse_price(criteria.min_price)
        if price is None or bound is None or price < bound:
            return False
    if price_text and criteria.max_price:
        price, bound = parse_price(price_text), parse_price(criteria.max_price)
        if price is None or bound is None or price > bound:
            return False

    if prop.bedrooms and criteria.min_bedrooms:
        beds, bound = parse_leading_int(prop.bedrooms), parse_leading_int(criteria.min_bedrooms)
        if beds is None or bound is None or beds < bound:
            return False
    if prop.bedrooms and criteria.max_bedrooms:
        beds, bound = parse_leading_int(prop.bedrooms), parse_leading_int(criteria.max_bedrooms)
        if beds is None or bound is None or beds > bound:
            return False

    if prop.area and criteria.area_keyword:
        area = parse_area(prop.area)
        keyword = _fold(criteria.area_keyword)
        if area is not None:
            if any(k in keyword for k in SMALL_AREA_KEYWORDS):
                if area > SMALL_AREA_MAX:
                    return False
            elif any(k in keyword for k in LARGE_AREA_KEYWORDS):
                if area < LARGE_AREA_MIN:
                    return False

    return True


def matches_keyword(prop: PropertyRecord, query: str) -> bool:
    needle = _fold(query.strip())
    return any(needle in _fold(prop.get_field(name)) for name in KEYWORD_FALLBACK_FIELDS)


def filter_properties(
    properties: Iterable[PropertyRecord],
    criteria: SearchCriteria | None,
    query: str,
) -> list[PropertyRecord]:
    """Properties matching every criterion, in source order.

    An empty query returns everything.  With no usable criteria, the raw
    query is matched as a substring against the keyword fields instead.
    """
    if not query.strip():
        return list(properties)
    if criteria is None or criteria.is_empty():
        return [p for p in properties if matches_keyword(p, query)]
    return [p for p in properties if matches_criteria(p, criteria)]
