"""Record store contract and an in-memory implementation."""

from __future__ import annotations

import threading
from typing import Protocol

from agenda.common.errors import ConflictError
from agenda.common.models import PartyRecord, RecordKind


class RecordStore(Protocol):
    kind: RecordKind

    def find_by_id(self, record_id: str) -> PartyRecord | None: ...

    def find_by_prefix(self, prefix: str) -> list[PartyRecord]: ...

    def find_by_email(self, email: str) -> PartyRecord | None: ...

    def exists_by_id(self, record_id: str) -> bool: ...

    def save(self, record: PartyRecord, *, create: bool = False) -> PartyRecord: ...

    def delete_by_id(self, record_id: str) -> None: ...

    def list_all(self) -> list[PartyRecord]: ...


class InMemoryRecordStore:
    """Dict-backed store for one record kind, keyed by tax identifier."""

    def __init__(self, kind: RecordKind, records: list[PartyRecord] | None = None) -> None:
        self.kind = kind
        self.lock = threading.Lock()
        self._records: dict[str, PartyRecord] = {}
        for record in records or []:
            self._records[self._key(record)] = record

    def _key(self, record: PartyRecord) -> str:
        record_id = self.kind.record_id(record)
        if not record_id:
            raise ValueError(f"{self.kind.name} record has no {self.kind.id_field}")
        return record_id

    def find_by_id(self, record_id: str) -> PartyRecord | None:
        with self.lock:
            return self._records.get(record_id)

    def find_by_prefix(self, prefix: str) -> list[PartyRecord]:
        with self.lock:
            return [self._records[key] for key in sorted(self._records) if key.startswith(prefix)]

    def find_by_email(self, email: str) -> PartyRecord | None:
        with self.lock:
            for record in self._records.values():
                if record.email == email:
                    return record
        return None

    def exists_by_id(self, record_id: str) -> bool:
        with self.lock:
            return record_id in self._records

    def save(self, record: PartyRecord, *, create: bool = False) -> PartyRecord:
        key = self._key(record)
        with self.lock:
            if create and key in self._records:
                raise ConflictError.for_field(self.kind.id_field, self.kind.id_taken_message)
            self._records[key] = record
        return record

    def delete_by_id(self, record_id: str) -> None:
        with self.lock:
            self._records.pop(record_id, None)

    def list_all(self) -> list[PartyRecord]:
        with self.lock:
            return [self._records[key] for key in sorted(self._records)]
