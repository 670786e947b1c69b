"""Best-effort confirmation notifications sent after a record is created."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol

from agenda.common.errors import NotificationError
from agenda.common.http import HttpClient, HttpRequestError, TimeoutConfig
from agenda.common.logging import log_event

LOGGER = logging.getLogger("agenda.notify")


class NotificationSender(Protocol):
    def notify(self, display_name: str | None, email: str | None) -> None: ...


class NullNotificationSender:
    def notify(self, display_name: str | None, email: str | None) -> None:
        return None


class HttpNotificationSender:
    """Pings a notification endpoint on a background thread.

    Failures are logged and dropped; ``notify`` never raises and never blocks
    on the request.
    """

    def __init__(
        self,
        client: HttpClient,
        url: str,
        *,
        timeout_seconds: float = 5.0,
        executor: ThreadPoolExecutor | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.url = url
        self.timeout = TimeoutConfig(connect=timeout_seconds, read=timeout_seconds)
        self.executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="agenda-notify")
        self.logger = logger or LOGGER

    def _send(self, display_name: str | None, email: str | None) -> None:
        try:
            self.client.request_status(
                "POST",
                self.url,
                json_body={"name": display_name, "email": email},
                timeout=self.timeout,
            )
        except HttpRequestError as exc:
            raise NotificationError(f"Notification to {email} failed: {exc}") from exc

    def _log_outcome(self, future: Future, email: str | None) -> None:
        exc = future.exception()
        if exc is None:
            log_event(self.logger, f"confirmation sent to <{email}>", event="NOTIFY", status="ok")
            return
        error_code = getattr(exc, "error_code", "UNEXPECTED_ERROR")
        log_event(
            self.logger,
            f"confirmation to <{email}> not delivered: {exc}",
            level=logging.WARNING,
            event="NOTIFY",
            status="error",
            error_code=error_code,
        )

    def notify(self, display_name: str | None, email: str | None) -> None:
        try:
            future = self.executor.submit(self._send, display_name, email)
        except RuntimeError as exc:
            log_event(
                self.logger,
                f"notification executor unavailable: {exc}",
                level=logging.WARNING,
                event="NOTIFY",
                status="error",
                error_code=NotificationError.error_code,
            )
            return
        future.add_done_callback(lambda done: self._log_outcome(done, email))

    def close(self) -> None:
        self.executor.shutdown(wait=True)
