from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from crm.store.base import Collection


@dataclass(frozen=True)
class CollectionReplaced:
    collection: Collection
    documents: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class SubscriptionFailed:
    collection: Collection
    error: Exception


StoreEvent = CollectionReplaced | SubscriptionFailed
