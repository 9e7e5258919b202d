"""Utilidades compartidas por los tests."""

from datetime import datetime, timezone

from app.application.interfaces.notification_gateway import (
    ConfirmacionReservaEmail,
    NotificationDispatcher,
)

FIXED_NOW = datetime(2025, 3, 10, 15, 30, tzinfo=timezone.utc)

ADMIN_HEADERS = {"X-User-Id": "a-1", "X-User-Role": "USER_ADMIN", "X-User-Name": "Admin%20Torre"}
SUPER_HEADERS = {"X-User-Id": "s-1", "X-User-Role": "SUPER_USER", "X-User-Name": "Super"}
CASUAL_HEADERS = {
    "X-User-Id": "u-100",
    "X-User-Role": "USER_CASUAL",
    "X-User-Name": "Ana%20L%C3%B3pez",
    "X-User-Email": "ana@example.com",
}
OTHER_CASUAL_HEADERS = {"X-User-Id": "u-200", "X-User-Role": "USER_CASUAL", "X-User-Name": "Beto"}


class RecordingDispatcher(NotificationDispatcher):
    """Dispatcher de prueba: guarda los correos encolados."""

    def __init__(self, fail: bool = False) -> None:
        self.emails: list[ConfirmacionReservaEmail] = []
        self.fail = fail

    def dispatch(self, email: ConfirmacionReservaEmail) -> bool:
        if self.fail:
            raise RuntimeError("queue unavailable")
        self.emails.append(email)
        return True
