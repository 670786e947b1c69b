from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta

import pytest

from agenda.common.errors import ConflictError, ExternalServiceError, FormatError, NotFoundError
from agenda.common.models import INDIVIDUAL, ORGANIZATION, Coordinates, Individual, Organization
from agenda.reconcile.service import PartyService
from agenda.store.memory import InMemoryRecordStore

RESOLVED = Coordinates(latitude=-23.5613, longitude=-46.6565)


class SpyStore(InMemoryRecordStore):
    def __init__(self, kind, records=None):
        super().__init__(kind, records)
        self.lookups: list[str] = []

    def exists_by_id(self, record_id):
        self.lookups.append(f"id:{record_id}")
        return super().exists_by_id(record_id)

    def find_by_email(self, email):
        self.lookups.append(f"email:{email}")
        return super().find_by_email(email)


def _individual(**overrides) -> Individual:
    values = {
        "cpf": "529.982.247-25",
        "nome": "Maria Silva",
        "data_nascimento": "1990-04-12",
        "telefone": "(11) 98765-4321",
        "cep": "01310-100",
        "email": "maria@example.com",
        "endereco": "Avenida Paulista, 1578 - Bela Vista",
    }
    values.update(overrides)
    return Individual(**values)


def _organization(**overrides) -> Organization:
    values = {
        "cnpj": "11.444.777/0001-62",
        "razao_social": "Padaria Central",
        "nome_fantasia": "Pao Quente",
        "telefone": "(48) 3333-44445",
        "email": "contato@padaria.example.com",
        "endereco": "Rua das Flores, 12 - Centro",
        "cep": "88010-000",
    }
    values.update(overrides)
    return Organization(**values)


@pytest.fixture
def people(settings, geocoder, notifier, logger):
    return PartyService(INDIVIDUAL, SpyStore(INDIVIDUAL), geocoder, settings, notifier=notifier, logger=logger)


@pytest.fixture
def companies(settings, geocoder, notifier, logger):
    return PartyService(ORGANIZATION, SpyStore(ORGANIZATION), geocoder, settings, notifier=notifier, logger=logger)


@pytest.mark.integration
def test_create_individual_normalises_geocodes_persists_and_notifies(people, notifier):
    saved = people.create(_individual())

    assert saved.cpf == "52998224725"
    assert saved.coordenadas == RESOLVED
    assert people.get("529.982.247-25") == saved
    assert notifier.sent == [("Maria Silva", "maria@example.com")]


@pytest.mark.integration
def test_create_individual_with_invalid_cep_format(people, geocoder):
    with pytest.raises(FormatError) as excinfo:
        people.create(_individual(cep="00000-000"))

    assert excinfo.value.errors == {"cep": "CEP inválido"}
    assert geocoder.calls == []
    assert people.list_all() == []


@pytest.mark.integration
def test_create_individual_with_taken_email_reports_conflict_first(people, notifier):
    people.store.save(Individual(cpf="11144477735", email="maria@example.com"))

    with pytest.raises(ConflictError) as excinfo:
        people.create(_individual(nome="Al", telefone="123"))

    assert excinfo.value.errors == {"email": "E-mail já cadastrado"}
    assert notifier.sent == []


@pytest.mark.integration
def test_create_batches_every_format_error(people):
    with pytest.raises(FormatError) as excinfo:
        people.create(
            _individual(
                cpf="52998224726",
                nome="Al",
                data_nascimento=(date.today() + timedelta(days=1)).isoformat(),
                endereco=None,
            )
        )

    assert excinfo.value.errors == {
        "cpf": "CPF inválido",
        "nome": "Nome inválido",
        "data_nascimento": "Data inválida",
        "endereco": "Endereço é obrigatório",
    }
    assert people.list_all() == []


@pytest.mark.integration
def test_birth_date_today_is_accepted(people):
    saved = people.create(_individual(data_nascimento=date.today().isoformat()))
    assert saved.data_nascimento == date.today().isoformat()


@pytest.mark.integration
@pytest.mark.parametrize("outcome", ["unresolvable", "failure"])
def test_individual_creation_survives_geocode_failures(people, geocoder, outcome):
    geocoder.outcomes["01310100"] = outcome

    saved = people.create(_individual())

    assert saved.coordenadas is None
    assert people.get("52998224725") is not None


@pytest.mark.integration
def test_create_organization(companies):
    saved = companies.create(_organization())
    assert saved.cnpj == "11444777000162"
    assert saved.coordenadas == RESOLVED


@pytest.mark.integration
def test_organization_with_unresolvable_cep_is_rejected(companies, geocoder):
    geocoder.outcomes["88010000"] = "unresolvable"

    with pytest.raises(FormatError) as excinfo:
        companies.create(_organization())

    assert excinfo.value.errors == {"cep": "Não foi possível obter as coordenadas para este CEP"}
    assert companies.list_all() == []


@pytest.mark.integration
def test_organization_provider_failure_propagates(companies, geocoder):
    geocoder.outcomes["88010000"] = "failure"

    with pytest.raises(ExternalServiceError) as excinfo:
        companies.create(_organization())

    assert excinfo.value.errors == {"cep": "Não foi possível obter as coordenadas para este CEP"}
    assert companies.list_all() == []


@pytest.mark.integration
def test_update_only_phone_skips_uniqueness_and_geocode(people, geocoder):
    original = people.create(_individual())
    geocoder.calls.clear()
    people.store.lookups.clear()

    updated = people.update("529.982.247-25", Individual(telefone="(21) 99876-5432"))

    assert updated == replace(original, telefone="(21) 99876-5432")
    assert geocoder.calls == []
    assert people.store.lookups == []


@pytest.mark.integration
def test_update_invalid_phone_is_rejected_and_not_saved(people):
    original = people.create(_individual())

    with pytest.raises(FormatError) as excinfo:
        people.update("52998224725", Individual(telefone="(10) 99876-5432"))

    assert excinfo.value.errors == {"telefone": "Telefone inválido"}
    assert people.get("52998224725") == original


@pytest.mark.integration
def test_update_with_empty_candidate_is_idempotent(people):
    original = people.create(_individual())
    assert people.update("52998224725", Individual(nome="", email=None)) == original


@pytest.mark.integration
def test_update_missing_record_is_not_found(people):
    with pytest.raises(NotFoundError):
        people.update("11144477735", Individual(nome="Joao Souza"))


@pytest.mark.integration
def test_update_email_checks_uniqueness(people):
    people.create(_individual())
    people.create(_individual(cpf="111.444.777-35", email="joao@example.com", nome="Joao Souza"))

    with pytest.raises(ConflictError) as excinfo:
        people.update("11144477735", Individual(email="maria@example.com"))
    assert excinfo.value.errors == {"email": "E-mail já cadastrado"}


@pytest.mark.integration
def test_update_cep_change_regeocodes_and_soft_fails(people, geocoder):
    people.create(_individual())
    geocoder.outcomes["20040020"] = "failure"

    updated = people.update("52998224725", Individual(cep="20040-020"))

    assert geocoder.calls[-1] == "20040020"
    assert updated.cep == "20040-020"
    assert updated.coordenadas is None


@pytest.mark.integration
def test_update_same_cep_in_other_format_is_not_a_change(people, geocoder):
    original = people.create(_individual())
    geocoder.calls.clear()

    updated = people.update("52998224725", Individual(cep="01310100"))

    assert geocoder.calls == []
    assert updated.coordenadas == original.coordenadas


@pytest.mark.integration
def test_update_ignores_identifier_in_payload(people):
    people.create(_individual())
    updated = people.update("52998224725", Individual(cpf="111.444.777-35", nome="Maria Souza"))
    assert updated.cpf == "52998224725"
    assert people.get("11144477735") is None


@pytest.mark.integration
def test_delete_and_prefix_search(people):
    people.create(_individual())
    assert [r.cpf for r in people.search_by_prefix("529.98")] == ["52998224725"]
    assert people.search_by_prefix("--") == []

    people.delete("529.982.247-25")
    assert people.get("52998224725") is None
    with pytest.raises(NotFoundError):
        people.delete("52998224725")


@pytest.mark.integration
@pytest.mark.parametrize("outcome", ["unresolvable", "failure"])
def test_organization_update_to_unresolvable_cep_is_soft(companies, geocoder, outcome):
    companies.create(_organization())
    geocoder.outcomes["20040020"] = outcome

    updated = companies.update("11.444.777/0001-62", Organization(cep="20040-020"))

    assert geocoder.calls[-1] == "20040020"
    assert updated.cep == "20040-020"
    assert updated.coordenadas is None
    assert companies.get("11444777000162") == updated


@pytest.mark.integration
def test_update_with_malformed_cep_is_rejected_without_lookup(companies, geocoder):
    original = companies.create(_organization())
    geocoder.calls.clear()

    with pytest.raises(FormatError) as excinfo:
        companies.update("11444777000162", Organization(cep="00000-000"))

    assert excinfo.value.errors == {"cep": "CEP inválido"}
    assert geocoder.calls == []
    assert companies.get("11444777000162") == original


@pytest.mark.integration
def test_rejected_create_logs_normalised_identifier(people, caplog):
    with caplog.at_level("WARNING", logger="agenda.tests"):
        with pytest.raises(FormatError):
            people.create(_individual(nome="Al"))

    rejected = [record for record in caplog.records if getattr(record, "event", None) == "REJECTED"]
    assert [record.record_id for record in rejected] == ["52998224725"]
