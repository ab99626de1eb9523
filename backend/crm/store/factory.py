from __future__ import annotations

import logging

from crm.config import settings
from crm.store.base import DocumentStore
from crm.utils.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

_store_instance: DocumentStore | None = None


def get_document_store() -> DocumentStore:
    global _store_instance
    if _store_instance is None:
        try:
            if settings.store_backend == "sql":
                # Import models so Base.metadata knows about them
                import crm.models  # noqa: F401
                from crm.database import SessionLocal, create_tables
                from crm.store.sql_store import SqlDocumentStore

                create_tables()
                _store_instance = SqlDocumentStore(SessionLocal)
            elif settings.store_backend == "firestore":
                from google.cloud import firestore

                from crm.store.firestore_store import FirestoreDocumentStore

                client = firestore.Client(project=settings.firestore_project_id or None)
                _store_instance = FirestoreDocumentStore(client, settings.app_id)
            else:
                raise ValueError(f"Unknown store backend: {settings.store_backend}")
        except Exception as e:
            logger.exception("Document store initialisation failed")
            raise StoreUnavailableError(f"Could not initialise document store: {e}") from e
        logger.info("Document store ready (%s)", _store_instance.backend_name)
    return _store_instance


def reset_document_store() -> None:
    global _store_instance
    if _store_instance is not None:
        _store_instance.close()
    _store_instance = None
