"""Domain errors and failure typing."""

from __future__ import annotations

from typing import Mapping


class AgendaError(Exception):
    """Base class for record-handling failures."""

    error_code = "AGENDA_ERROR"


class ConfigError(AgendaError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class RecordValidationError(AgendaError):
    """Carries a field -> message mapping meant for direct display."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, errors: Mapping[str, str], message: str = "Erros de validação encontrados") -> None:
        super().__init__(message)
        self.errors = dict(errors)


class FormatError(RecordValidationError):
    """One or more fields failed pattern or checksum checks."""

    error_code = "FORMAT_ERROR"


class ConflictError(RecordValidationError):
    """A unique field already exists in the store."""

    error_code = "CONFLICT_ERROR"

    @classmethod
    def for_field(cls, field: str, message: str) -> "ConflictError":
        return cls({field: message})


class ExternalServiceError(RecordValidationError):
    """The geocode provider could not be used and the policy refuses to continue."""

    error_code = "EXTERNAL_SERVICE_ERROR"


class NotFoundError(AgendaError):
    """Update or delete target does not exist."""

    error_code = "NOT_FOUND"


class NotificationError(AgendaError):
    """Notification delivery failed. Logged, never surfaced."""

    error_code = "NOTIFICATION_ERROR"
