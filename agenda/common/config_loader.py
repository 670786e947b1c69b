"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from agenda.common.constants import CNPJ_SECOND_DIGIT_SPAN
from agenda.common.errors import ConfigError
from agenda.common.fs import read_yaml
from agenda.common.http import RetryConfig, TimeoutConfig
from agenda.common.schema import validate_settings_config

SETTINGS_FILENAME = "agenda.yml"


@dataclass(frozen=True)
class GeocodePolicyConfig:
    unresolvable: str
    provider_failure: str


@dataclass(frozen=True)
class Settings:
    region_codes: frozenset[str]
    blocked_email_domains: frozenset[str]
    birth_date_format: str
    cnpj_second_digit_span: int
    geocode_base_url: str
    geocode_timeout: TimeoutConfig
    geocode_retry: RetryConfig
    geocode_policies: dict[str, GeocodePolicyConfig]
    notification_enabled: bool
    notification_url: str
    notification_timeout_seconds: float
    store_path: Path


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing settings file: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay settings must be a mapping: {overlay_path}")
    return _deep_merge(base, overlay)


def build_settings(cfg: dict, *, allow_unknown: bool = False) -> Settings:
    cfg = validate_settings_config(cfg, allow_unknown=allow_unknown)
    validation = cfg["validation"]
    geocode = cfg["geocode"]
    notification = cfg["notification"]
    return Settings(
        region_codes=frozenset(str(code) for code in validation["region_codes"]),
        blocked_email_domains=frozenset(str(domain).lower() for domain in validation["blocked_email_domains"]),
        birth_date_format=validation["birth_date_format"],
        cnpj_second_digit_span=int(validation.get("cnpj_second_digit_span", CNPJ_SECOND_DIGIT_SPAN)),
        geocode_base_url=str(geocode["base_url"]).rstrip("/"),
        geocode_timeout=TimeoutConfig(
            connect=float(geocode["timeout"]["connect"]),
            read=float(geocode["timeout"]["read"]),
        ),
        geocode_retry=RetryConfig(
            max_attempts=int(geocode["retry"]["max_attempts"]),
            multiplier=float(geocode["retry"]["multiplier"]),
            max_wait=float(geocode["retry"]["max_wait"]),
        ),
        geocode_policies={
            name: GeocodePolicyConfig(
                unresolvable=policy["unresolvable"],
                provider_failure=policy["provider_failure"],
            )
            for name, policy in cfg["geocode_policy"].items()
        },
        notification_enabled=bool(notification["enabled"]),
        notification_url=str(notification["url"]),
        notification_timeout_seconds=float(notification["timeout_seconds"]),
        store_path=Path(cfg["store"]["path"]),
    )


def load_settings(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> Settings:
    overlay_path = None
    if overlay_config_dir is not None:
        overlay_path = overlay_config_dir / SETTINGS_FILENAME
    cfg = _load_yaml_with_overlay(config_dir / SETTINGS_FILENAME, overlay_path)
    return build_settings(cfg, allow_unknown=allow_unknown)
