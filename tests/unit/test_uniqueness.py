from dataclasses import replace

import pytest

from agenda.common.errors import ConflictError
from agenda.common.models import INDIVIDUAL, Individual
from agenda.reconcile.uniqueness import ensure_unique_on_create, ensure_unique_on_update
from agenda.store.memory import InMemoryRecordStore

STORED = Individual(cpf="52998224725", nome="Maria Silva", email="maria@example.com")


def _store() -> InMemoryRecordStore:
    return InMemoryRecordStore(INDIVIDUAL, [STORED])


def test_create_conflict_on_identifier():
    with pytest.raises(ConflictError) as excinfo:
        ensure_unique_on_create(_store(), INDIVIDUAL, Individual(cpf="52998224725", email="outra@example.com"))
    assert excinfo.value.errors == {"cpf": "CPF já cadastrado"}


def test_create_conflict_on_email():
    with pytest.raises(ConflictError) as excinfo:
        ensure_unique_on_create(_store(), INDIVIDUAL, Individual(cpf="11144477735", email="maria@example.com"))
    assert excinfo.value.errors == {"email": "E-mail já cadastrado"}


def test_create_without_conflicts_passes():
    ensure_unique_on_create(_store(), INDIVIDUAL, Individual(cpf="11144477735", email="joao@example.com"))


def test_update_checks_only_changed_fields():
    store = _store()
    other = Individual(cpf="11144477735", email="joao@example.com")
    store.save(other)

    assert ensure_unique_on_update(store, INDIVIDUAL, STORED, replace(STORED, nome="Maria Souza")) == []

    with pytest.raises(ConflictError) as excinfo:
        ensure_unique_on_update(store, INDIVIDUAL, STORED, replace(STORED, email="joao@example.com"))
    assert excinfo.value.errors == {"email": "E-mail já cadastrado"}
