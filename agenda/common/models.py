"""Party record models shared by validation, storage and reconciliation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping, Union

from agenda.common.constants import (
    MSG_CNPJ_TAKEN,
    MSG_CPF_TAKEN,
    MSG_INDIVIDUAL_NOT_FOUND,
    MSG_ORGANIZATION_NOT_FOUND,
)


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def to_dict(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "Coordinates | None":
        if not payload:
            return None
        return cls(latitude=float(payload["latitude"]), longitude=float(payload["longitude"]))


@dataclass(frozen=True)
class Individual:
    cpf: str | None = None
    nome: str | None = None
    data_nascimento: str | None = None
    telefone: str | None = None
    cep: str | None = None
    email: str | None = None
    endereco: str | None = None
    coordenadas: Coordinates | None = None

    def to_dict(self) -> dict[str, Any]:
        return _to_dict(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Individual":
        return _from_dict(cls, payload)


@dataclass(frozen=True)
class Organization:
    cnpj: str | None = None
    razao_social: str | None = None
    nome_fantasia: str | None = None
    telefone: str | None = None
    email: str | None = None
    endereco: str | None = None
    cep: str | None = None
    coordenadas: Coordinates | None = None

    def to_dict(self) -> dict[str, Any]:
        return _to_dict(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Organization":
        return _from_dict(cls, payload)


PartyRecord = Union[Individual, Organization]


def _to_dict(record: PartyRecord) -> dict[str, Any]:
    payload = asdict(record)
    payload["coordenadas"] = record.coordenadas.to_dict() if record.coordenadas else None
    return payload


def _from_dict(cls, payload: Mapping[str, Any]):
    """Build a record from caller input. Coordinates are derived data and never read from input."""
    values = {}
    for field in fields(cls):
        if field.name == "coordenadas":
            continue
        value = payload.get(field.name)
        values[field.name] = None if value is None else str(value)
    return cls(**values)


def record_from_storage(cls, payload: Mapping[str, Any]) -> PartyRecord:
    record = cls.from_dict(payload)
    coordinates = Coordinates.from_dict(payload.get("coordenadas"))
    if coordinates is None:
        return record
    return replace(record, coordenadas=coordinates)


@dataclass(frozen=True)
class RecordKind:
    name: str
    id_field: str
    id_length: int
    display_field: str
    model: type
    create_policy: str
    id_taken_message: str
    not_found_message: str

    def record_id(self, record: PartyRecord) -> str | None:
        return getattr(record, self.id_field)

    def display_name(self, record: PartyRecord) -> str | None:
        return getattr(record, self.display_field)

    def mutable_fields(self) -> tuple[str, ...]:
        return tuple(
            field.name
            for field in fields(self.model)
            if field.name not in (self.id_field, "coordenadas")
        )


INDIVIDUAL = RecordKind(
    name="individual",
    id_field="cpf",
    id_length=11,
    display_field="nome",
    model=Individual,
    create_policy="individual_create",
    id_taken_message=MSG_CPF_TAKEN,
    not_found_message=MSG_INDIVIDUAL_NOT_FOUND,
)

ORGANIZATION = RecordKind(
    name="organization",
    id_field="cnpj",
    id_length=14,
    display_field="razao_social",
    model=Organization,
    create_policy="organization_create",
    id_taken_message=MSG_CNPJ_TAKEN,
    not_found_message=MSG_ORGANIZATION_NOT_FOUND,
)

KIND_BY_NAME = {kind.name: kind for kind in (INDIVIDUAL, ORGANIZATION)}
