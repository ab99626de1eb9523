"""Document store backed by Cloud Firestore."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore

from crm.store.base import (
    Collection,
    DocumentStore,
    ErrorCallback,
    SnapshotCallback,
    Unsubscribe,
)
from crm.utils.exceptions import DocumentNotFoundError, StoreError

logger = logging.getLogger(__name__)


class FirestoreDocumentStore(DocumentStore):
    """Collections live under ``artifacts/{app_id}/users/{user_id}/{collection}``.

    Firestore delivers ``on_snapshot`` callbacks on its own watch thread.
    They are handed to the event loop that subscribed, so listeners always
    run on the control thread and see a whole snapshot at once.
    """

    def __init__(self, client: firestore.Client, app_id: str) -> None:
        self.client = client
        self.app_id = app_id

    @property
    def backend_name(self) -> str:
        return "firestore"

    def collection_path(self, user_id: str, collection: Collection) -> str:
        return f"artifacts/{self.app_id}/users/{user_id}/{collection.value}"

    def _collection(self, user_id: str, collection: Collection) -> Any:
        return self.client.collection(self.collection_path(user_id, collection))

    async def create(
        self, user_id: str, collection: Collection, data: dict[str, Any]
    ) -> str:
        payload = {k: v for k, v in data.items() if k != "id"}
        try:
            _, doc_ref = await asyncio.to_thread(
                self._collection(user_id, collection).add, payload
            )
        except gcp_exceptions.GoogleAPICallError as e:
            raise StoreError(f"Could not create document in {collection}: {e}") from e
        return doc_ref.id

    async def update(
        self, user_id: str, collection: Collection, doc_id: str, data: dict[str, Any]
    ) -> None:
        payload = {k: v for k, v in data.items() if k != "id"}
        try:
            document = self._collection(user_id, collection).document(doc_id)
            await asyncio.to_thread(document.update, payload)
        except gcp_exceptions.NotFound as e:
            raise DocumentNotFoundError(f"No document {doc_id} in {collection}") from e
        except gcp_exceptions.GoogleAPICallError as e:
            raise StoreError(f"Could not update {doc_id} in {collection}: {e}") from e

    async def delete(self, user_id: str, collection: Collection, doc_id: str) -> None:
        try:
            document = self._collection(user_id, collection).document(doc_id)
            await asyncio.to_thread(document.delete)
        except gcp_exceptions.GoogleAPICallError as e:
            raise StoreError(f"Could not delete {doc_id} from {collection}: {e}") from e

    def subscribe(
        self,
        user_id: str,
        collection: Collection,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        loop = asyncio.get_running_loop()

        def handle_snapshot(docs: list[Any], changes: Any, read_time: Any) -> None:
            try:
                documents = [{**(doc.to_dict() or {}), "id": doc.id} for doc in docs]
            except Exception as e:
                logger.exception("Could not decode %s snapshot", collection)
                loop.call_soon_threadsafe(on_error, e)
                return
            loop.call_soon_threadsafe(on_snapshot, documents)

        try:
            watch = self._collection(user_id, collection).on_snapshot(handle_snapshot)
        except gcp_exceptions.GoogleAPICallError as e:
            on_error(e)
            return lambda: None
        return watch.unsubscribe
