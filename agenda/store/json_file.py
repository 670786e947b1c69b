"""Record store persisted to a single JSON document shared by both kinds."""

from __future__ import annotations

from pathlib import Path

from agenda.common.errors import ConflictError
from agenda.common.fs import read_json, write_json
from agenda.common.models import PartyRecord, RecordKind, record_from_storage
from agenda.store.memory import InMemoryRecordStore


class JsonFileRecordStore(InMemoryRecordStore):
    def __init__(self, kind: RecordKind, path: Path) -> None:
        self.path = path
        payload = read_json(path) if path.exists() else {}
        rows = payload.get(kind.name, {})
        super().__init__(kind, [record_from_storage(kind.model, row) for row in rows.values()])

    def _flush(self) -> None:
        payload = read_json(self.path) if self.path.exists() else {}
        payload[self.kind.name] = {key: record.to_dict() for key, record in self._records.items()}
        write_json(self.path, payload)

    def save(self, record: PartyRecord, *, create: bool = False) -> PartyRecord:
        key = self._key(record)
        with self.lock:
            if create and key in self._records:
                raise ConflictError.for_field(self.kind.id_field, self.kind.id_taken_message)
            self._records[key] = record
            self._flush()
        return record

    def delete_by_id(self, record_id: str) -> None:
        with self.lock:
            if self._records.pop(record_id, None) is not None:
                self._flush()
