import logging

from ..config import Settings
from ..core.events.bookmark_events import NotificationRaisedEvent
from ..core.events.event_bus import DomainEventBus
from ..models import NotificationSeverity


class NotificationService:
    """
    User-facing notification sink.

    Applies the show-* flags and hands passing notifications to the event bus,
    where presenters pick them up. State stays visible through the status
    summary regardless of these flags.
    """

    def __init__(self, settings: Settings, event_bus: DomainEventBus):
        self._settings = settings
        self._event_bus = event_bus

    def update_settings(self, settings: Settings) -> None:
        self._settings = settings

    def should_notify(self, severity: NotificationSeverity) -> bool:
        if not self._settings.show_notifications:
            return False
        if severity == NotificationSeverity.ERROR:
            return self._settings.show_error_notifications
        return self._settings.show_success_notifications

    async def notify(
        self,
        title: str,
        message: str,
        severity: NotificationSeverity = NotificationSeverity.INFO,
    ) -> bool:
        if not self.should_notify(severity):
            logging.debug(f"Notification suppressed by settings: {title} - {message}")
            return False

        logging.info(
            f"Notification: {title} - {message}",
            extra={"operation": "notification", "severity": severity.value},
        )
        try:
            await self._event_bus.publish(
                NotificationRaisedEvent(title=title, message=message, severity=severity)
            )
        except Exception as e:
            logging.error(f"Error publishing NotificationRaisedEvent: {e}")
            return False
        return True
