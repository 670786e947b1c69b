from __future__ import annotations

import copy
import logging

import pytest

from agenda.common.config_loader import build_settings
from agenda.common.models import Coordinates
from agenda.geocode.provider import ProviderFailure, Resolved, Unresolvable

BASE_CONFIG = {
    "validation": {
        "region_codes": ["11", "21", "31", "41", "47", "48", "51", "61", "71", "81", "91"],
        "blocked_email_domains": ["yopmail.com", "mailinator.com", "tempmail.com", "10minutemail.com"],
        "birth_date_format": "%Y-%m-%d",
        "cnpj_second_digit_span": 12,
    },
    "geocode": {
        "base_url": "https://cep.example.test/api/cep/v2",
        "timeout": {"connect": 1, "read": 1},
        "retry": {"max_attempts": 1, "multiplier": 0, "max_wait": 0},
    },
    "geocode_policy": {
        "individual_create": {"unresolvable": "skip", "provider_failure": "skip"},
        "organization_create": {"unresolvable": "reject", "provider_failure": "raise"},
        "update": {"unresolvable": "skip", "provider_failure": "skip"},
    },
    "notification": {"enabled": False, "url": "https://notify.example.test/ping", "timeout_seconds": 1},
    "store": {"path": "./data/agenda.json"},
}

SAO_PAULO = Coordinates(latitude=-23.5613, longitude=-46.6565)


class FakeGeocoder:
    """Answers from a fixed table and remembers every CEP it was asked about."""

    def __init__(self, outcomes: dict[str, str] | None = None) -> None:
        self.outcomes = outcomes or {}
        self.calls: list[str] = []

    def resolve(self, postal_code: str):
        cep = "".join(ch for ch in postal_code if ch.isdigit())
        self.calls.append(cep)
        outcome = self.outcomes.get(cep, "resolved")
        if outcome == "unresolvable":
            return Unresolvable(postal_code=cep)
        if outcome == "failure":
            return ProviderFailure(postal_code=cep, reason="timeout")
        return Resolved(postal_code=cep, coordinates=SAO_PAULO)


class RecordingNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple[str | None, str | None]] = []

    def notify(self, display_name, email) -> None:
        self.sent.append((display_name, email))


@pytest.fixture
def base_config() -> dict:
    return copy.deepcopy(BASE_CONFIG)


@pytest.fixture
def settings(base_config):
    return build_settings(base_config)


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("agenda.tests")
