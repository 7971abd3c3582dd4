"""
Per-user stores with whole-collection replace semantics.

Stores derive the storage key, coerce payloads into records and hand plain
dicts to whichever ``StorageBackend`` they were built with.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, Mapping, Optional

from tracker.keys import derive_storage_key
from tracker.models import RecordT, Reward, StateRecord, Task, coerce_records
from tracker.storage import StorageBackend

logger = logging.getLogger(__name__)


class CollectionStore(Generic[RecordT]):
    """Ordered list of records per user; full read and full replace only."""

    def __init__(self, backend: StorageBackend, kind: str, record_type: type[RecordT]):
        self.backend = backend
        self.kind = kind
        self.record_type = record_type

    def load(self, identity: Optional[str]) -> list[RecordT]:
        key = derive_storage_key(identity)
        return coerce_records(
            self.backend.load_collection(self.kind, key), self.record_type
        )

    def replace_all(self, identity: Optional[str], records: Any) -> list[RecordT]:
        """
        Discard the user's collection and store ``records`` in its place.
        A payload that is not a list replaces the collection with nothing.
        """
        key = derive_storage_key(identity)
        normalized = coerce_records(records, self.record_type)
        self.backend.replace_collection(
            self.kind, key, [record.as_dict() for record in normalized]
        )
        logger.info("Replaced %s for %r (%d records)", self.kind, key, len(normalized))
        return normalized


class StateStore:
    """Exactly one ``StateRecord`` per user, created lazily."""

    def __init__(self, backend: StorageBackend):
        self.backend = backend

    def load(self, identity: Optional[str]) -> StateRecord:
        stored = self.backend.load_state(derive_storage_key(identity))
        if stored is None:
            return StateRecord.default()
        return StateRecord.from_dict(stored)

    def upsert(
        self,
        identity: Optional[str],
        saldo_anterior: Any = 0,
        task_checks: Optional[Mapping] = None,
    ) -> StateRecord:
        key = derive_storage_key(identity)
        record = StateRecord.from_dict(
            {"saldoAnterior": saldo_anterior, "taskChecks": task_checks}
        )
        self.backend.upsert_state(key, record.as_dict())
        logger.info("Upserted state for %r", key)
        return record


class Tracker:
    """The six read/replace operations consumed by the HTTP layer."""

    def __init__(self, backend: StorageBackend):
        self.tasks: CollectionStore[Task] = CollectionStore(backend, "tasks", Task)
        self.rewards: CollectionStore[Reward] = CollectionStore(
            backend, "rewards", Reward
        )
        self.state = StateStore(backend)

    def get_tasks(self, identity: Optional[str]) -> list[Task]:
        return self.tasks.load(identity)

    def save_tasks(self, identity: Optional[str], tasks: Any) -> list[Task]:
        return self.tasks.replace_all(identity, tasks)

    def get_rewards(self, identity: Optional[str]) -> list[Reward]:
        return self.rewards.load(identity)

    def save_rewards(self, identity: Optional[str], rewards: Any) -> list[Reward]:
        return self.rewards.replace_all(identity, rewards)

    def get_state(self, identity: Optional[str]) -> StateRecord:
        return self.state.load(identity)

    def save_state(self, identity: Optional[str], payload: Any) -> StateRecord:
        record = StateRecord.from_dict(payload)
        return self.state.upsert(identity, record.saldo_anterior, record.task_checks)
