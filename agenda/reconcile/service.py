"""Create, update, query and delete party records behind the validation rules."""

from __future__ import annotations

import logging
import time
from dataclasses import replace

from agenda.common.config_loader import Settings
from agenda.common.errors import AgendaError, NotFoundError
from agenda.common.http import HttpClient
from agenda.common.logging import log_event
from agenda.common.models import KIND_BY_NAME, PartyRecord, RecordKind
from agenda.geocode.policy import GeocodePolicy, apply_policy
from agenda.geocode.provider import CepGeocoder, GeocodeProvider
from agenda.notify import HttpNotificationSender, NotificationSender, NullNotificationSender
from agenda.reconcile.merge import merge_record
from agenda.reconcile.uniqueness import ensure_unique_on_create, ensure_unique_on_update
from agenda.store.memory import RecordStore
from agenda.validation.aggregate import (
    REQUIRED_BY_KIND,
    RULES_BY_KIND,
    collect_errors,
    collect_missing,
    raise_for_errors,
)
from agenda.validation.checksum import only_digits
from agenda.validation.fields import is_valid_postal_code

LOGGER = logging.getLogger("agenda.service")


class PartyService:
    def __init__(
        self,
        kind: RecordKind,
        store: RecordStore,
        geocoder: GeocodeProvider,
        settings: Settings,
        *,
        notifier: NotificationSender | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.kind = kind
        self.store = store
        self.geocoder = geocoder
        self.settings = settings
        self.notifier = notifier or NullNotificationSender()
        self.logger = logger or LOGGER
        self.rules = RULES_BY_KIND[kind.name]
        self.required = REQUIRED_BY_KIND[kind.name]

    def _policy(self, name: str) -> GeocodePolicy:
        return GeocodePolicy.from_config(name, self.settings.geocode_policies[name])

    def _normalise_id(self, record: PartyRecord) -> PartyRecord:
        raw_id = self.kind.record_id(record)
        if raw_id is None:
            return record
        return replace(record, **{self.kind.id_field: only_digits(raw_id)})

    def _resolve_coordinates(self, postal_code: str, policy_name: str, record_id: str | None):
        result = self.geocoder.resolve(postal_code)
        return apply_policy(
            result,
            self._policy(policy_name),
            self.logger,
            kind=self.kind.name,
            record_id=record_id,
        )

    def _log(self, message: str, operation: str, record_id: str | None, **fields) -> None:
        log_event(self.logger, message, operation=operation, kind=self.kind.name, record_id=record_id, **fields)

    def _log_rejection(self, operation: str, record_id: str | None, exc: AgendaError) -> None:
        log_event(
            self.logger,
            f"{operation} rejected: {exc}",
            level=logging.WARNING,
            operation=operation,
            kind=self.kind.name,
            record_id=record_id,
            event="REJECTED",
            status="error",
            error_code=exc.error_code,
        )

    def validate_and_prepare_create(self, candidate: PartyRecord) -> PartyRecord:
        """Validate a new record and attach coordinates; nothing is written.

        Format errors are collected first, the CEP is geocoded when its format is
        valid, uniqueness conflicts are raised immediately, and only then are the
        collected format errors raised as one batch.
        """
        record = replace(self._normalise_id(candidate), coordenadas=None)
        record_id = self.kind.record_id(record)

        errors = collect_errors(record, self.rules, self.settings)
        errors.update(collect_missing(record, self.required))

        coordinates = None
        if record.cep and is_valid_postal_code(record.cep):
            coordinates = self._resolve_coordinates(record.cep, self.kind.create_policy, record_id)

        ensure_unique_on_create(self.store, self.kind, record)
        raise_for_errors(errors)
        return replace(record, coordenadas=coordinates)

    def validate_and_prepare_update(self, record_id: str, candidate: PartyRecord) -> PartyRecord:
        key = only_digits(record_id)
        existing = self.store.find_by_id(key)
        if existing is None:
            raise NotFoundError(self.kind.not_found_message)

        candidate = self._normalise_id(candidate)
        candidate_id = self.kind.record_id(candidate)
        if candidate_id and candidate_id != key:
            self._log(
                f"ignoring {self.kind.id_field} {candidate_id} in update payload",
                "update",
                key,
                event="IMMUTABLE_ID_IGNORED",
                status="warning",
            )

        merged = merge_record(self.kind, existing, candidate)

        if only_digits(merged.cep) != only_digits(existing.cep):
            coordinates = None
            if merged.cep and is_valid_postal_code(merged.cep):
                coordinates = self._resolve_coordinates(merged.cep, "update", key)
            merged = replace(merged, coordenadas=coordinates)

        ensure_unique_on_update(self.store, self.kind, existing, merged)
        raise_for_errors(collect_errors(merged, self.rules, self.settings))
        return merged

    def create(self, candidate: PartyRecord) -> PartyRecord:
        started = time.monotonic()
        try:
            record = self.validate_and_prepare_create(candidate)
            saved = self.store.save(record, create=True)
        except AgendaError as exc:
            self._log_rejection("create", only_digits(self.kind.record_id(candidate)) or None, exc)
            raise
        self._log(
            "record created",
            "create",
            self.kind.record_id(saved),
            event="CREATED",
            status="ok",
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        self.notifier.notify(self.kind.display_name(saved), saved.email)
        return saved

    def update(self, record_id: str, candidate: PartyRecord) -> PartyRecord:
        started = time.monotonic()
        try:
            record = self.validate_and_prepare_update(record_id, candidate)
            saved = self.store.save(record)
        except AgendaError as exc:
            self._log_rejection("update", only_digits(record_id), exc)
            raise
        self._log(
            "record updated",
            "update",
            self.kind.record_id(saved),
            event="UPDATED",
            status="ok",
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return saved

    def get(self, record_id: str) -> PartyRecord | None:
        return self.store.find_by_id(only_digits(record_id))

    def list_all(self) -> list[PartyRecord]:
        return self.store.list_all()

    def search_by_prefix(self, prefix: str) -> list[PartyRecord]:
        digits = only_digits(prefix)
        if not digits:
            return []
        return self.store.find_by_prefix(digits)

    def delete(self, record_id: str) -> None:
        key = only_digits(record_id)
        if not self.store.exists_by_id(key):
            raise NotFoundError(self.kind.not_found_message)
        self.store.delete_by_id(key)
        self._log("record deleted", "delete", key, event="DELETED", status="ok")


def build_service(
    kind_name: str,
    settings: Settings,
    store: RecordStore,
    *,
    http_client: HttpClient | None = None,
    logger: logging.Logger | None = None,
) -> PartyService:
    kind = KIND_BY_NAME[kind_name]
    client = http_client or HttpClient(timeout=settings.geocode_timeout, retry=settings.geocode_retry)
    notifier: NotificationSender = NullNotificationSender()
    if settings.notification_enabled:
        # The sender runs on worker threads; it gets a session of its own.
        notifier = HttpNotificationSender(
            HttpClient(retry=settings.geocode_retry),
            settings.notification_url,
            timeout_seconds=settings.notification_timeout_seconds,
            logger=logger,
        )
    return PartyService(
        kind,
        store,
        CepGeocoder(client, settings.geocode_base_url, logger=logger),
        settings,
        notifier=notifier,
        logger=logger,
    )
