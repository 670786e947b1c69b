"""CEP lookup: confirms a postal code is known and resolves its coordinates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol, Union

from agenda.common.http import HttpClient, HttpRequestError
from agenda.common.logging import log_event
from agenda.common.models import Coordinates
from agenda.validation.checksum import only_digits

LOGGER = logging.getLogger("agenda.geocode")

# Statuses meaning the provider understood the request and does not know the CEP.
UNRESOLVABLE_STATUS_CODES = {400, 404}


@dataclass(frozen=True)
class Resolved:
    postal_code: str
    coordinates: Coordinates


@dataclass(frozen=True)
class Unresolvable:
    postal_code: str


@dataclass(frozen=True)
class ProviderFailure:
    postal_code: str
    reason: str


GeocodeResult = Union[Resolved, Unresolvable, ProviderFailure]


class GeocodeProvider(Protocol):
    def resolve(self, postal_code: str) -> GeocodeResult: ...


def _safe_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def extract_coordinates(payload: dict[str, Any]) -> Coordinates | None:
    location = payload.get("location") or {}
    if not isinstance(location, dict):
        return None
    raw = location.get("coordinates") or {}
    if not isinstance(raw, dict):
        return None
    lat = _safe_float(raw.get("latitude"))
    lon = _safe_float(raw.get("longitude"))
    if lat is None or lon is None:
        return None
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        return None
    return Coordinates(latitude=lat, longitude=lon)


class CepGeocoder:
    """Geocoder backed by a BrasilAPI-compatible ``/cep/v2/{cep}`` endpoint."""

    def __init__(self, client: HttpClient, base_url: str, logger: logging.Logger | None = None) -> None:
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.logger = logger or LOGGER

    def resolve(self, postal_code: str) -> GeocodeResult:
        cep = only_digits(postal_code)
        url = f"{self.base_url}/{cep}"
        try:
            payload = self.client.get_json(url)
        except HttpRequestError as exc:
            if exc.status_code in UNRESOLVABLE_STATUS_CODES:
                return Unresolvable(postal_code=cep)
            log_event(
                self.logger,
                f"geocode provider failed for {cep}: {exc}",
                level=logging.WARNING,
                event="GEOCODE_PROVIDER_FAILURE",
                status="error",
                error_code=exc.error_code,
            )
            return ProviderFailure(postal_code=cep, reason=str(exc))

        if not isinstance(payload, dict):
            return ProviderFailure(postal_code=cep, reason="Unexpected payload shape")

        coordinates = extract_coordinates(payload)
        if coordinates is None:
            return Unresolvable(postal_code=cep)
        return Resolved(postal_code=cep, coordinates=coordinates)
