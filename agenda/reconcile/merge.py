"""Overwrite-if-present merge of partial update candidates."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from agenda.common.models import PartyRecord, RecordKind


def is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def merge_record(kind: RecordKind, existing: PartyRecord, candidate: PartyRecord) -> PartyRecord:
    """Return ``existing`` with every present mutable candidate field applied.

    The tax identifier and coordinates are never taken from the candidate.
    """
    changes = {
        field: getattr(candidate, field)
        for field in kind.mutable_fields()
        if is_present(getattr(candidate, field))
    }
    if not changes:
        return existing
    return replace(existing, **changes)


def changed_fields(kind: RecordKind, before: PartyRecord, after: PartyRecord) -> list[str]:
    return [field for field in kind.mutable_fields() if getattr(before, field) != getattr(after, field)]
