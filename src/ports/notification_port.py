"""Notification port — abstract interface for desktop notifications.

Core modules depend on this protocol, never on a specific notification
backend.
"""

from __future__ import annotations

from typing import Literal, Protocol

Permission = Literal["granted", "denied", "default"]


class NotificationHandle(Protocol):
    """A notification currently on screen."""

    def close(self) -> None: ...


class NotificationPort(Protocol):
    """Abstract desktop notification interface used by core modules."""

    def permission(self) -> Permission: ...

    def request_permission(self) -> Permission: ...

    def show(
        self,
        title: str,
        body: str,
        *,
        icon: str | None = None,
        timeout: int = 10,
    ) -> NotificationHandle: ...
