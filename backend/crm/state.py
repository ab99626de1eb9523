"""In-memory application state for one user's workspace."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from crm.schemas.appointment import AppointmentRecord
from crm.schemas.customer import CustomerRecord
from crm.schemas.property import PropertyRecord
from crm.store.base import Collection
from crm.store.events import StoreEvent, SubscriptionFailed

logger = logging.getLogger(__name__)

_RECORD_TYPES: dict[Collection, type[PropertyRecord | CustomerRecord | AppointmentRecord]] = {
    Collection.PROPERTIES: PropertyRecord,
    Collection.CUSTOMERS: CustomerRecord,
    Collection.APPOINTMENTS: AppointmentRecord,
}


def _parse_documents(collection: Collection, documents: list[dict[str, Any]]) -> list[Any]:
    record_type = _RECORD_TYPES[collection]
    records = []
    for doc in documents:
        try:
            records.append(record_type.model_validate(doc))
        except ValidationError:
            logger.warning("Skipping malformed %s document %s", collection, doc.get("id"))
    return records


@dataclass
class WorkspaceState:
    properties: list[PropertyRecord] = field(default_factory=list)
    filtered_properties: list[PropertyRecord] = field(default_factory=list)
    customers: list[CustomerRecord] = field(default_factory=list)
    appointments: list[AppointmentRecord] = field(default_factory=list)

    property_draft: PropertyRecord = field(default_factory=PropertyRecord)
    customer_draft: CustomerRecord = field(default_factory=CustomerRecord)
    appointment_draft: AppointmentRecord = field(default_factory=AppointmentRecord)
    property_input: str = ""
    customer_needs_input: str = ""
    search_query: str = ""

    loading: bool = False

    def apply(self, event: StoreEvent) -> None:
        """Dispatch a store event.

        A snapshot replaces the whole list for its collection in one
        assignment; a properties snapshot also resets the filtered view.
        Subscription failures leave the state as it was.
        """
        if isinstance(event, SubscriptionFailed):
            return
        records = _parse_documents(event.collection, event.documents)
        if event.collection == Collection.PROPERTIES:
            self.properties = records
            self.filtered_properties = list(records)
        elif event.collection == Collection.CUSTOMERS:
            self.customers = records
        elif event.collection == Collection.APPOINTMENTS:
            self.appointments = records

    def find_property(self, property_id: str) -> PropertyRecord | None:
        return next((p for p in self.properties if p.id == property_id), None)

    def find_customer(self, customer_id: str) -> CustomerRecord | None:
        return next((c for c in self.customers if c.id == customer_id), None)

    def find_appointment(self, appointment_id: str) -> AppointmentRecord | None:
        return next((a for a in self.appointments if a.id == appointment_id), None)

    def clear_property_draft(self) -> None:
        self.property_draft = PropertyRecord()
        self.property_input = ""

    def clear_customer_draft(self) -> None:
        self.customer_draft = CustomerRecord()
        self.customer_needs_input = ""

    def clear_appointment_draft(self) -> None:
        self.appointment_draft = AppointmentRecord()
