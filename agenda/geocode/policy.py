"""Named handling of geocode outcomes per operation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from agenda.common.config_loader import GeocodePolicyConfig
from agenda.common.constants import MSG_COORDINATES_UNAVAILABLE
from agenda.common.errors import ExternalServiceError, FormatError
from agenda.common.logging import log_event
from agenda.common.models import Coordinates
from agenda.geocode.provider import GeocodeResult, ProviderFailure, Resolved, Unresolvable

SKIP = "skip"
REJECT = "reject"
RAISE = "raise"


@dataclass(frozen=True)
class GeocodePolicy:
    name: str
    on_unresolvable: str
    on_failure: str

    @classmethod
    def from_config(cls, name: str, cfg: GeocodePolicyConfig) -> "GeocodePolicy":
        return cls(name=name, on_unresolvable=cfg.unresolvable, on_failure=cfg.provider_failure)


def apply_policy(
    result: GeocodeResult,
    policy: GeocodePolicy,
    logger: logging.Logger,
    *,
    kind: str,
    record_id: str | None,
) -> Coordinates | None:
    """Return coordinates for a resolved CEP, or act on the failure as the policy says."""
    if isinstance(result, Resolved):
        return result.coordinates

    if isinstance(result, Unresolvable):
        action = policy.on_unresolvable
        event = "GEOCODE_UNRESOLVABLE"
        detail = f"CEP {result.postal_code} not known to provider"
    elif isinstance(result, ProviderFailure):
        action = policy.on_failure
        event = "GEOCODE_PROVIDER_FAILURE"
        detail = f"provider failure for CEP {result.postal_code}: {result.reason}"
    else:
        raise TypeError(f"Unexpected geocode result: {result!r}")

    if action == REJECT:
        raise FormatError({"cep": MSG_COORDINATES_UNAVAILABLE})
    if action == RAISE:
        raise ExternalServiceError({"cep": MSG_COORDINATES_UNAVAILABLE}, message=detail)

    log_event(
        logger,
        f"{detail}; continuing without coordinates",
        level=logging.WARNING,
        operation=policy.name,
        kind=kind,
        record_id=record_id,
        event=event,
        status="skipped",
    )
    return None
