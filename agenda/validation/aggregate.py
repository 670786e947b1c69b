"""Batch evaluation of field rules into a single field -> message mapping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from agenda.common import constants as c
from agenda.common.config_loader import Settings
from agenda.common.errors import FormatError
from agenda.common.models import PartyRecord
from agenda.validation import fields as f
from agenda.validation.checksum import is_valid_cnpj, is_valid_cpf


@dataclass(frozen=True)
class FieldRule:
    field: str
    check: Callable[[Any, Settings], bool]
    message: str


def _email(value, settings: Settings) -> bool:
    return f.is_valid_email(value, settings.blocked_email_domains)


def _phone(value, settings: Settings) -> bool:
    return f.is_valid_phone(value, settings.region_codes)


def _birth_date(value, settings: Settings) -> bool:
    return f.is_valid_birth_date(value, settings.birth_date_format)


def _cnpj(value, settings: Settings) -> bool:
    return is_valid_cnpj(value, settings.cnpj_second_digit_span)


def _ignore_settings(predicate: Callable[[Any], bool]) -> Callable[[Any, Settings], bool]:
    return lambda value, _settings: predicate(value)


INDIVIDUAL_RULES = (
    FieldRule("cpf", _ignore_settings(is_valid_cpf), c.MSG_INVALID_CPF),
    FieldRule("email", _email, c.MSG_INVALID_EMAIL),
    FieldRule("data_nascimento", _birth_date, c.MSG_INVALID_DATE),
    FieldRule("cep", _ignore_settings(f.is_valid_postal_code), c.MSG_INVALID_CEP),
    FieldRule("telefone", _phone, c.MSG_INVALID_PHONE),
    FieldRule("endereco", _ignore_settings(f.is_valid_address), c.MSG_INVALID_ADDRESS),
    FieldRule("nome", _ignore_settings(f.is_valid_name), c.MSG_INVALID_NAME),
)

ORGANIZATION_RULES = (
    FieldRule("cnpj", _cnpj, c.MSG_INVALID_CNPJ),
    FieldRule("razao_social", _ignore_settings(f.is_valid_name), c.MSG_INVALID_LEGAL_NAME),
    FieldRule("nome_fantasia", _ignore_settings(f.is_valid_name), c.MSG_INVALID_TRADE_NAME),
    FieldRule("telefone", _phone, c.MSG_INVALID_PHONE),
    FieldRule("email", _email, c.MSG_INVALID_EMAIL),
    FieldRule("endereco", _ignore_settings(f.is_valid_address), c.MSG_INVALID_ADDRESS),
    FieldRule("cep", _ignore_settings(f.is_valid_postal_code), c.MSG_INVALID_CEP),
)

REQUIRED_INDIVIDUAL_FIELDS = {
    "cpf": "CPF é obrigatório",
    "nome": "Nome é obrigatório",
    "data_nascimento": "Data de nascimento é obrigatória",
    "telefone": "Telefone é obrigatório",
    "cep": "CEP é obrigatório",
    "email": "E-mail é obrigatório",
    "endereco": "Endereço é obrigatório",
}

REQUIRED_ORGANIZATION_FIELDS = {
    "cnpj": "CNPJ é obrigatório",
    "razao_social": "Razão Social é obrigatória",
    "nome_fantasia": "Nome Fantasia é obrigatório",
    "telefone": "Telefone é obrigatório",
    "email": "E-mail é obrigatório",
    "endereco": "Endereço é obrigatório",
    "cep": "CEP é obrigatório",
}

REQUIRED_BY_KIND = {
    "individual": REQUIRED_INDIVIDUAL_FIELDS,
    "organization": REQUIRED_ORGANIZATION_FIELDS,
}

RULES_BY_KIND = {
    "individual": INDIVIDUAL_RULES,
    "organization": ORGANIZATION_RULES,
}


def collect_errors(record: PartyRecord, rules: tuple[FieldRule, ...], settings: Settings) -> dict[str, str]:
    """Run every rule against the record; absent values are skipped, never short-circuited."""
    errors: dict[str, str] = {}
    for rule in rules:
        value = getattr(record, rule.field, None)
        if value is None:
            continue
        if not rule.check(value, settings):
            errors[rule.field] = rule.message
    return errors


def raise_for_errors(errors: dict[str, str]) -> None:
    if errors:
        raise FormatError(errors)


def collect_missing(record: PartyRecord, required: dict[str, str]) -> dict[str, str]:
    errors: dict[str, str] = {}
    for field, message in required.items():
        value = getattr(record, field, None)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors[field] = message
    return errors
