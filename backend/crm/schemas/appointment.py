from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

MISSING_REFERENT = "N/A"


class AppointmentRecord(BaseModel):
    """An appointment with a customer, optionally about a property.

    References are plain identifiers and are not kept in sync with the
    referenced records: either may point at something already deleted.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    id: str | None = None
    customer_id: str = ""
    property_id: str = ""
    date: str = ""
    time: str = ""
    purpose: str = ""
    notes: str = ""

    @field_validator(
        "customer_id", "property_id", "date", "time", "purpose", "notes",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_document(self) -> dict[str, str]:
        return self.model_dump(by_alias=True, exclude={"id"})

    def updated(self, values: Mapping[str, Any]) -> AppointmentRecord:
        return AppointmentRecord.model_validate(
            {**self.model_dump(by_alias=True), **values}
        )


class AppointmentView(AppointmentRecord):
    customer_name: str = MISSING_REFERENT
    property_title: str = MISSING_REFERENT
