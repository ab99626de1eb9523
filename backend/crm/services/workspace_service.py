"""Per-user workspace: wires the store, the extractor and the filter engine
around one :class:`WorkspaceState`.

All state changes happen on the event loop that drives the workspace, either
in response to a completed store/extraction call or to a store snapshot.
Overlapping submissions are not serialised; the last write to land in the
store wins.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from crm.config import settings
from crm.schemas.appointment import MISSING_REFERENT, AppointmentRecord, AppointmentView
from crm.schemas.customer import CustomerRecord
from crm.schemas.property import PropertyRecord, ShareLinks
from crm.services import extraction_service, share_service, spreadsheet_service
from crm.services.filter_service import filter_properties
from crm.services.notifications import Notifier
from crm.state import WorkspaceState
from crm.store.base import Collection, Unsubscribe
from crm.store.events import CollectionReplaced, StoreEvent, SubscriptionFailed
from crm.utils.codes import generate_property_code
from crm.utils.exceptions import (
    DraftValidationError,
    ExtractionError,
    NothingToExportError,
    RecordNotFoundError,
    SpreadsheetError,
    StoreError,
)

if TYPE_CHECKING:
    from crm.llm.base import LLMProvider
    from crm.store.base import DocumentStore

logger = logging.getLogger(__name__)

_COLLECTION_NOUNS = {
    Collection.PROPERTIES: "property",
    Collection.CUSTOMERS: "customer",
    Collection.APPOINTMENTS: "appointment",
}


def _apply_draft_values(draft: Any, values: Mapping[str, Any]) -> Any:
    try:
        return draft.updated(values)
    except ValidationError as e:
        raise DraftValidationError(f"Invalid draft values: {e}") from e


class Workspace:
    def __init__(
        self,
        user_id: str,
        store: DocumentStore,
        llm: LLMProvider,
        notifier: Notifier | None = None,
    ) -> None:
        self.user_id = user_id
        self.store = store
        self.llm = llm
        self.notifier = notifier or Notifier(settings.notification_seconds)
        self.state = WorkspaceState()
        self._unsubscribers: list[Unsubscribe] = []

    # ── Subscriptions ─────────────────────────────────────────────────────

    def start(self) -> None:
        for collection in Collection:
            self._unsubscribers.append(
                self.store.subscribe(
                    self.user_id,
                    collection,
                    lambda docs, c=collection: self.dispatch(CollectionReplaced(c, docs)),
                    lambda error, c=collection: self.dispatch(SubscriptionFailed(c, error)),
                )
            )

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def dispatch(self, event: StoreEvent) -> None:
        if isinstance(event, SubscriptionFailed):
            logger.error(
                "Subscription to %s failed for user %s: %s",
                event.collection, self.user_id, event.error,
            )
            self.notifier.error(f"Could not load {event.collection} data.")
        self.state.apply(event)

    @asynccontextmanager
    async def _busy(self) -> AsyncIterator[None]:
        self.state.loading = True
        try:
            yield
        finally:
            self.state.loading = False

    # ── Store writes ──────────────────────────────────────────────────────

    async def _save(self, collection: Collection, doc_id: str | None, data: dict[str, Any]) -> str:
        noun = _COLLECTION_NOUNS[collection]
        async with self._busy():
            try:
                if doc_id:
                    await self.store.update(self.user_id, collection, doc_id, data)
                else:
                    doc_id = await self.store.create(self.user_id, collection, data)
            except Exception as e:
                logger.exception("Saving %s failed for user %s", noun, self.user_id)
                self.notifier.error(f"Could not save the {noun}.")
                if isinstance(e, StoreError):
                    raise
                raise StoreError(f"Could not save the {noun}: {e}") from e
        return doc_id

    async def _remove(self, collection: Collection, doc_id: str) -> None:
        noun = _COLLECTION_NOUNS[collection]
        async with self._busy():
            try:
                await self.store.delete(self.user_id, collection, doc_id)
            except Exception as e:
                logger.exception("Deleting %s %s failed", noun, doc_id)
                self.notifier.error(f"Could not delete the {noun}.")
                if isinstance(e, StoreError):
                    raise
                raise StoreError(f"Could not delete the {noun}: {e}") from e
        self.notifier.info(f"Deleted the {noun}.")

    # ── Properties ────────────────────────────────────────────────────────

    def update_property_draft(self, values: Mapping[str, Any]) -> PropertyRecord:
        self.state.property_draft = _apply_draft_values(self.state.property_draft, values)
        return self.state.property_draft

    def edit_property(self, property_id: str) -> PropertyRecord:
        prop = self.state.find_property(property_id)
        if prop is None:
            raise RecordNotFoundError(f"Property {property_id} not found")
        self.state.property_draft = prop
        self.state.property_input = prop.description
        self.notifier.info("Loaded the property into the form for editing.")
        return prop

    async def submit_property(self) -> PropertyRecord:
        """Create or update the property draft.

        A new property gets its internal code here; an existing one keeps
        the code it was created with.  On failure the draft is kept.
        """
        draft = self.state.property_draft
        is_update = bool(draft.id)
        if not is_update:
            draft = draft.updated({"maBatDongSan": generate_property_code()})
        doc_id = await self._save(Collection.PROPERTIES, draft.id, draft.to_document())
        self.state.clear_property_draft()
        self.notifier.info("Property updated." if is_update else "Property added.")
        return draft.model_copy(update={"id": doc_id})

    async def delete_property(self, property_id: str) -> None:
        await self._remove(Collection.PROPERTIES, property_id)

    async def analyze_property_text(self, text: str) -> PropertyRecord:
        self.state.property_input = text
        async with self._busy():
            extracted = await extraction_service.extract_property_fields(
                self.llm, text, self.notifier
            )
        self.state.property_draft = extraction_service.merge_property_extraction(
            self.state.property_draft, extracted, text
        )
        return self.state.property_draft

    def share_links(self, property_id: str, page_url: str | None = None) -> ShareLinks:
        prop = self.state.find_property(property_id)
        if prop is None:
            raise RecordNotFoundError(f"Property {property_id} not found")
        return share_service.build_share_links(prop, page_url or settings.public_app_url)

    # ── Customers ─────────────────────────────────────────────────────────

    def update_customer_draft(self, values: Mapping[str, Any]) -> CustomerRecord:
        self.state.customer_draft = _apply_draft_values(self.state.customer_draft, values)
        return self.state.customer_draft

    def edit_customer(self, customer_id: str) -> CustomerRecord:
        customer = self.state.find_customer(customer_id)
        if customer is None:
            raise RecordNotFoundError(f"Customer {customer_id} not found")
        self.state.customer_draft = customer
        self.state.customer_needs_input = customer.needs
        self.notifier.info("Loaded the customer into the form for editing.")
        return customer

    async def submit_customer(self) -> CustomerRecord:
        draft = self.state.customer_draft
        if not draft.name.strip():
            self.notifier.warning("Customer name is required.")
            raise DraftValidationError("Customer name is required")
        doc_id = await self._save(Collection.CUSTOMERS, draft.id, draft.to_document())
        self.state.clear_customer_draft()
        self.notifier.info("Customer updated." if draft.id else "Customer added.")
        return draft.model_copy(update={"id": doc_id})

    async def delete_customer(self, customer_id: str) -> None:
        await self._remove(Collection.CUSTOMERS, customer_id)

    async def analyze_customer_needs(self, text: str) -> CustomerRecord:
        self.state.customer_needs_input = text
        async with self._busy():
            extracted = await extraction_service.extract_customer_needs(
                self.llm, text, self.notifier
            )
        summary = extraction_service.summarize_customer_needs(extracted)
        self.state.customer_draft = self.state.customer_draft.updated({"needs": summary})
        return self.state.customer_draft

    # ── Appointments ──────────────────────────────────────────────────────

    def update_appointment_draft(self, values: Mapping[str, Any]) -> AppointmentRecord:
        self.state.appointment_draft = _apply_draft_values(self.state.appointment_draft, values)
        return self.state.appointment_draft

    def edit_appointment(self, appointment_id: str) -> AppointmentRecord:
        appointment = self.state.find_appointment(appointment_id)
        if appointment is None:
            raise RecordNotFoundError(f"Appointment {appointment_id} not found")
        self.state.appointment_draft = appointment
        self.notifier.info("Loaded the appointment into the form for editing.")
        return appointment

    async def submit_appointment(self) -> AppointmentRecord:
        draft = self.state.appointment_draft
        if not draft.customer_id.strip():
            self.notifier.warning("Please choose a customer for the appointment.")
            raise DraftValidationError("Appointment customer is required")
        doc_id = await self._save(Collection.APPOINTMENTS, draft.id, draft.to_document())
        self.state.clear_appointment_draft()
        self.notifier.info("Appointment updated." if draft.id else "Appointment added.")
        return draft.model_copy(update={"id": doc_id})

    async def delete_appointment(self, appointment_id: str) -> None:
        await self._remove(Collection.APPOINTMENTS, appointment_id)

    def appointment_views(self) -> list[AppointmentView]:
        """Appointments with their customer name and property title.

        Missing referents are shown as a placeholder rather than an error.
        """
        views = []
        for appointment in self.state.appointments:
            customer = self.state.find_customer(appointment.customer_id)
            prop = (
                self.state.find_property(appointment.property_id)
                if appointment.property_id
                else None
            )
            views.append(
                AppointmentView.model_validate(
                    {
                        **appointment.model_dump(),
                        "customer_name": customer.name if customer else MISSING_REFERENT,
                        "property_title": prop.title if prop else MISSING_REFERENT,
                    }
                )
            )
        return views

    # ── Search ────────────────────────────────────────────────────────────

    async def search(self, query: str) -> list[PropertyRecord]:
        self.state.search_query = query
        if not query.strip():
            self.state.filtered_properties = list(self.state.properties)
            self.notifier.info("Please enter a search query. Showing all properties.")
            return self.state.filtered_properties

        async with self._busy():
            try:
                criteria = await extraction_service.extract_search_criteria(
                    self.llm, query, self.notifier
                )
            except ExtractionError:
                self.state.filtered_properties = []
                raise

        results = filter_properties(self.state.properties, criteria, query)
        self.state.filtered_properties = results
        logger.info(
            "Search %r for user %s matched %d of %d properties",
            query, self.user_id, len(results), len(self.state.properties),
        )
        self.notifier.info(f"AI search complete. Found {len(results)} result(s).")
        return results

    def reset_search(self) -> list[PropertyRecord]:
        self.state.search_query = ""
        self.state.filtered_properties = list(self.state.properties)
        self.notifier.info("Showing all properties.")
        return self.state.filtered_properties

    # ── Spreadsheets ──────────────────────────────────────────────────────

    async def import_spreadsheet(self, filename: str, content: bytes) -> int:
        """Create one property per row, sequentially.

        Rows already created stay in the store if a later row fails.
        """
        async with self._busy():
            self.notifier.info("Importing properties from the spreadsheet...")
            try:
                rows = spreadsheet_service.read_property_rows(filename, content)
            except SpreadsheetError:
                self.notifier.error(
                    "Could not read the spreadsheet. Please check the file format."
                )
                raise

            imported = 0
            for row in rows:
                record = spreadsheet_service.row_to_property(row)
                try:
                    await self.store.create(
                        self.user_id, Collection.PROPERTIES, record.to_document()
                    )
                except Exception as e:
                    logger.exception("Import of %s stopped at row %d", filename, imported + 1)
                    self.notifier.error(
                        f"Import stopped after {imported} properties: could not save a row."
                    )
                    raise StoreError(
                        f"Import stopped after {imported} properties: {e}"
                    ) from e
                imported += 1

        logger.info("Imported %d properties from %s for user %s", imported, filename, self.user_id)
        self.notifier.info(f"Imported {imported} properties from the spreadsheet.")
        return imported

    def export_spreadsheet(self) -> bytes:
        if not self.state.properties:
            self.notifier.warning("There is no data to export.")
            raise NothingToExportError("No properties to export")
        content = spreadsheet_service.export_properties(
            self.state.properties, settings.export_sheet_name
        )
        self.notifier.info("Exported the properties to a spreadsheet.")
        return content


# ── Per-user registry ─────────────────────────────────────────────────────

_workspaces: dict[str, Workspace] = {}


def get_workspace(user_id: str, store: DocumentStore, llm: LLMProvider) -> Workspace:
    """Return the user's workspace, creating and subscribing it on first use."""
    workspace = _workspaces.get(user_id)
    if workspace is None:
        workspace = Workspace(user_id, store, llm)
        workspace.start()
        _workspaces[user_id] = workspace
    return workspace


def close_all_workspaces() -> None:
    for workspace in _workspaces.values():
        workspace.close()
    _workspaces.clear()
