from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import StrEnum
from typing import Any


class Collection(StrEnum):
    PROPERTIES = "properties"
    CUSTOMERS = "customers"
    APPOINTMENTS = "appointments"


# A snapshot is the whole collection: one dict per document, each carrying its "id".
SnapshotCallback = Callable[[list[dict[str, Any]]], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class DocumentStore(ABC):
    """Per-user partitioned document collections with live snapshots."""

    @abstractmethod
    async def create(
        self, user_id: str, collection: Collection, data: dict[str, Any]
    ) -> str: ...

    @abstractmethod
    async def update(
        self, user_id: str, collection: Collection, doc_id: str, data: dict[str, Any]
    ) -> None: ...

    @abstractmethod
    async def delete(self, user_id: str, collection: Collection, doc_id: str) -> None: ...

    @abstractmethod
    def subscribe(
        self,
        user_id: str,
        collection: Collection,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe: ...

    def close(self) -> None:
        pass

    @property
    @abstractmethod
    def backend_name(self) -> str: ...
