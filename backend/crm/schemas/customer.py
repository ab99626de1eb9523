from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class CustomerRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    id: str | None = None
    name: str = ""
    phone: str = ""
    email: str = ""
    zalo_link: str = ""
    facebook_link: str = ""
    needs: str = ""
    notes: str = ""

    @field_validator(
        "name", "phone", "email", "zalo_link", "facebook_link", "needs", "notes",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def to_document(self) -> dict[str, str]:
        return self.model_dump(by_alias=True, exclude={"id"})

    def updated(self, values: Mapping[str, Any]) -> CustomerRecord:
        return CustomerRecord.model_validate(
            {**self.model_dump(by_alias=True), **values}
        )
