"""Plyer notification adapter — implements NotificationPort.

Desktop toasts through plyer need no user grant, so permission is always
"granted". plyer cannot retract a toast once shown; the timeout passed to
show() lets the OS dismiss it, and close() only marks the handle closed.
"""

from __future__ import annotations

import logging
from pathlib import Path

from plyer import notification

logger = logging.getLogger(__name__)

APP_NAME = "Posture Guardian"


class PlyerNotification:
    """Handle for a toast shown through plyer."""

    def __init__(self, title: str) -> None:
        self.title = title
        self.closed = False

    def close(self) -> None:
        # plyer has no retract call; the OS timeout removes the toast
        self.closed = True
        logger.debug("Notification '%s' marked closed (toast stays until OS timeout)", self.title)


class PlyerNotifier:
    """plyer implementation of NotificationPort."""

    def __init__(self, app_name: str = APP_NAME) -> None:
        self._app_name = app_name

    def permission(self) -> str:
        return "granted"

    def request_permission(self) -> str:
        return self.permission()

    def show(
        self,
        title: str,
        body: str,
        *,
        icon: str | None = None,
        timeout: int = 10,
    ) -> PlyerNotification:
        notification.notify(
            title=title,
            message=body,
            app_name=self._app_name,
            app_icon=icon if icon and Path(icon).exists() else "",
            timeout=timeout,
        )
        logger.debug("Desktop notification shown: %s", title)
        return PlyerNotification(title)
