"""Notifier port abstraction."""

from __future__ import annotations

from typing import Protocol

from ..domain import Notification


class NotifierPort(Protocol):
    """Shows transient messages to the user."""

    def notify(self, notification: Notification) -> None:  # pragma: no cover - protocol
        ...
