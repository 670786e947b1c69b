"""Minimal strict schemas for YAML settings validation."""

from __future__ import annotations

from agenda.common.constants import CNPJ_SECOND_DIGIT_SPANS, GEOCODE_ACTIONS, GEOCODE_POLICY_NAMES
from agenda.common.errors import ConfigError


def _assert_mapping(obj, ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    _assert_mapping(obj, ctx)
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive(value, ctx: str) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive number")


def validate_settings_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"validation", "geocode", "geocode_policy", "notification", "store"}
    _assert_required_keys(cfg, top_required, "settings")
    _assert_no_unknown_keys(cfg, top_required, "settings", allow_unknown)

    validation = cfg["validation"]
    _assert_required_keys(
        validation,
        {"region_codes", "blocked_email_domains", "birth_date_format"},
        "validation",
    )
    region_codes = validation["region_codes"]
    if not isinstance(region_codes, list) or not region_codes:
        raise ConfigError("validation.region_codes must be a non-empty list")
    bad_codes = [str(code) for code in region_codes if len(str(code)) != 2 or not str(code).isdigit()]
    if bad_codes:
        raise ConfigError(f"validation.region_codes has invalid entries: {', '.join(bad_codes)}")
    if not isinstance(validation["blocked_email_domains"], list):
        raise ConfigError("validation.blocked_email_domains must be a list")
    span = validation.get("cnpj_second_digit_span")
    if span is not None and (isinstance(span, bool) or span not in CNPJ_SECOND_DIGIT_SPANS):
        raise ConfigError(
            f"validation.cnpj_second_digit_span must be one of {', '.join(str(s) for s in CNPJ_SECOND_DIGIT_SPANS)}"
        )

    geocode = cfg["geocode"]
    _assert_required_keys(geocode, {"base_url", "timeout", "retry"}, "geocode")
    _assert_required_keys(geocode["timeout"], {"connect", "read"}, "geocode.timeout")
    _assert_required_keys(geocode["retry"], {"max_attempts", "multiplier", "max_wait"}, "geocode.retry")
    _assert_positive(geocode["timeout"]["connect"], "geocode.timeout.connect")
    _assert_positive(geocode["timeout"]["read"], "geocode.timeout.read")
    _assert_positive(geocode["retry"]["max_attempts"], "geocode.retry.max_attempts")

    policies = cfg["geocode_policy"]
    _assert_required_keys(policies, set(GEOCODE_POLICY_NAMES), "geocode_policy")
    _assert_no_unknown_keys(policies, set(GEOCODE_POLICY_NAMES), "geocode_policy", allow_unknown)
    for name in GEOCODE_POLICY_NAMES:
        policy = policies[name]
        _assert_required_keys(policy, {"unresolvable", "provider_failure"}, f"geocode_policy.{name}")
        for outcome in ("unresolvable", "provider_failure"):
            if policy[outcome] not in GEOCODE_ACTIONS:
                raise ConfigError(
                    f"geocode_policy.{name}.{outcome} must be one of {', '.join(GEOCODE_ACTIONS)}"
                )

    _assert_required_keys(cfg["notification"], {"enabled", "url", "timeout_seconds"}, "notification")
    _assert_required_keys(cfg["store"], {"path"}, "store")

    return cfg
