"""Update notifications: log records, listeners and desktop popups."""

from __future__ import annotations

from typing import Callable

from upstream_updater.config.models import NotificationSettings
from upstream_updater.runtime_logging import RuntimeLogger, get_runtime_logger
from upstream_updater.versioning.model import Update

try:
    from notifypy import Notify
except Exception:  # pragma: no cover
    Notify = None

UpdateListener = Callable[[Update], None]


def render_notification(template: str, update: Update) -> str:
    return template.replace("{version}", update.value).replace("{url}", update.url)


class Notifier:
    def __init__(self, settings: NotificationSettings, logger: RuntimeLogger | None = None) -> None:
        self.settings = settings
        self._logger = logger
        self._listeners: list[UpdateListener] = []

    @property
    def logger(self) -> RuntimeLogger:
        return self._logger or get_runtime_logger()

    def subscribe(self, listener: UpdateListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: UpdateListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def send(self, update: Update) -> str | None:
        """Announce ``update``; returns the rendered message when notifying is enabled."""
        for listener in list(self._listeners):
            try:
                listener(update)
            except Exception as exc:
                self.logger.exception("notification.listener.failed", exc, version=update.value)

        if not self.settings.notify:
            return None

        message = render_notification(self.settings.message, update)
        self.logger.warning(
            "update.available",
            message=message,
            version=update.value,
            url=update.url,
            upstream=update.upstream,
        )
        if self.settings.desktop:
            self._send_desktop(message)
        return message

    def _send_desktop(self, message: str) -> None:
        if Notify is None:
            self.logger.debug("notification.desktop.unavailable")
            return

        note = Notify()
        note.title = self.settings.title
        note.message = message
        if self.settings.sound:
            try:
                note.audio = "default"
            except Exception:
                pass
        try:
            note.send()
        except Exception as exc:
            self.logger.warning("notification.desktop.failed", error=str(exc))
