from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from crm.fields import EMPTY_PLACEHOLDER


class SearchCriteria(BaseModel):
    """Filter criteria extracted from a free-text search query.

    Blank values and the "N/A" placeholder are normalised to ``None`` so that
    an absent criterion imposes no constraint.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    location: str | None = None
    min_price: str | None = None
    max_price: str | None = None
    min_bedrooms: str | None = None
    max_bedrooms: str | None = None
    area_keyword: str | None = None
    huong_cua: str | None = None
    loai_nha_dat: str | None = None
    loai_giao_dich: str | None = None
    loai_hinh_bat_dong_san: str | None = None
    du_an: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value).strip()
        if not text or text == EMPTY_PLACEHOLDER:
            return None
        return text

    def is_empty(self) -> bool:
        return all(v is None for v in self.model_dump().values())


class SearchRequest(BaseModel):
    query: str = ""
