"""Fail-fast uniqueness checks for tax identifiers and e-mail addresses."""

from __future__ import annotations

from agenda.common.constants import MSG_EMAIL_TAKEN
from agenda.common.errors import ConflictError
from agenda.common.models import PartyRecord, RecordKind
from agenda.store.memory import RecordStore


def _ensure_id_free(store: RecordStore, kind: RecordKind, record_id: str | None) -> None:
    if record_id and store.exists_by_id(record_id):
        raise ConflictError.for_field(kind.id_field, kind.id_taken_message)


def _ensure_email_free(store: RecordStore, email: str | None) -> None:
    if email and store.find_by_email(email) is not None:
        raise ConflictError.for_field("email", MSG_EMAIL_TAKEN)


def ensure_unique_on_create(store: RecordStore, kind: RecordKind, record: PartyRecord) -> None:
    _ensure_id_free(store, kind, kind.record_id(record))
    _ensure_email_free(store, record.email)


def ensure_unique_on_update(
    store: RecordStore,
    kind: RecordKind,
    before: PartyRecord,
    after: PartyRecord,
) -> list[str]:
    """Check only the unique fields whose value changed; return the fields checked."""
    checked: list[str] = []
    if kind.record_id(after) != kind.record_id(before):
        checked.append(kind.id_field)
        _ensure_id_free(store, kind, kind.record_id(after))
    if after.email != before.email:
        checked.append("email")
        _ensure_email_free(store, after.email)
    return checked
