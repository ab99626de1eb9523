"""Document store backed by a single SQL table of JSON documents."""

from __future__ import annotations

import json
import logging
import uuid
from collections import defaultdict
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from crm.models.document import Document
from crm.store.base import (
    Collection,
    DocumentStore,
    ErrorCallback,
    SnapshotCallback,
    Unsubscribe,
)
from crm.utils.exceptions import DocumentNotFoundError, StoreError

logger = logging.getLogger(__name__)

_Listener = tuple[SnapshotCallback, ErrorCallback]


class SqlDocumentStore(DocumentStore):
    """Stores each record as a JSON blob partitioned by (owner, collection).

    Subscribers receive the full collection once on subscribe and again after
    every write to that partition, on the caller's thread.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._listeners: dict[tuple[str, Collection], list[_Listener]] = defaultdict(list)

    @property
    def backend_name(self) -> str:
        return "sql"

    async def create(
        self, user_id: str, collection: Collection, data: dict[str, Any]
    ) -> str:
        doc_id = uuid.uuid4().hex
        payload = {k: v for k, v in data.items() if k != "id"}
        try:
            with self._session_factory() as db:
                db.add(
                    Document(
                        doc_id=doc_id,
                        owner_id=user_id,
                        collection=collection.value,
                        data_json=json.dumps(payload, ensure_ascii=False),
                    )
                )
                db.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"Could not create document in {collection}: {e}") from e
        self._publish(user_id, collection)
        return doc_id

    async def update(
        self, user_id: str, collection: Collection, doc_id: str, data: dict[str, Any]
    ) -> None:
        try:
            with self._session_factory() as db:
                document = self._get(db, user_id, collection, doc_id)
                if document is None:
                    raise DocumentNotFoundError(f"No document {doc_id} in {collection}")
                merged = json.loads(document.data_json)
                merged.update({k: v for k, v in data.items() if k != "id"})
                document.data_json = json.dumps(merged, ensure_ascii=False)
                db.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"Could not update {doc_id} in {collection}: {e}") from e
        self._publish(user_id, collection)

    async def delete(self, user_id: str, collection: Collection, doc_id: str) -> None:
        # Deleting a missing document is a no-op, as in the managed store.
        try:
            with self._session_factory() as db:
                document = self._get(db, user_id, collection, doc_id)
                if document is not None:
                    db.delete(document)
                    db.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"Could not delete {doc_id} from {collection}: {e}") from e
        self._publish(user_id, collection)

    def load(self, user_id: str, collection: Collection) -> list[dict[str, Any]]:
        with self._session_factory() as db:
            rows = (
                db.query(Document)
                .filter(
                    Document.owner_id == user_id,
                    Document.collection == collection.value,
                )
                .order_by(Document.seq.asc())
                .all()
            )
            return [{**json.loads(row.data_json), "id": row.doc_id} for row in rows]

    def subscribe(
        self,
        user_id: str,
        collection: Collection,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        key = (user_id, collection)
        listener = (on_snapshot, on_error)
        self._listeners[key].append(listener)
        self._deliver(user_id, collection, [listener])

        def unsubscribe() -> None:
            if listener in self._listeners[key]:
                self._listeners[key].remove(listener)

        return unsubscribe

    def close(self) -> None:
        self._listeners.clear()

    def _publish(self, user_id: str, collection: Collection) -> None:
        listeners = list(self._listeners.get((user_id, collection), ()))
        if listeners:
            self._deliver(user_id, collection, listeners)

    def _deliver(
        self, user_id: str, collection: Collection, listeners: list[_Listener]
    ) -> None:
        try:
            documents = self.load(user_id, collection)
        except (SQLAlchemyError, ValueError) as e:
            logger.exception("Snapshot of %s for user %s failed", collection, user_id)
            for _, on_error in listeners:
                on_error(e)
            return
        for on_snapshot, _ in listeners:
            on_snapshot([dict(doc) for doc in documents])

    @staticmethod
    def _get(
        db: Session, user_id: str, collection: Collection, doc_id: str
    ) -> Document | None:
        return (
            db.query(Document)
            .filter(
                Document.doc_id == doc_id,
                Document.owner_id == user_id,
                Document.collection == collection.value,
            )
            .first()
        )
