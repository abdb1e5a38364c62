"""Fan-out of system events to transient banners and speech."""
import asyncio
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from visionassist.core.config import settings
from visionassist.core.exceptions import ValidationError
from visionassist.core.logging import get_logger
from visionassist.domain.interfaces.devices.speech import SpeechSynthesizer
from visionassist.domain.value_objects.notification import Notification, Severity

logger = get_logger(__name__)


class NotificationBridge:
    """Keeps an ordered list of pending notifications and speaks each one.

    Each entry removes itself after ``ttl`` seconds unless dismissed first.
    Entries are independent: removing one never touches the others.
    Must be used from within a running event loop.
    """

    def __init__(self, speech: SpeechSynthesizer, ttl: Optional[float] = None) -> None:
        self.speech = speech
        self.ttl = settings.NOTIFICATION_TTL_SECONDS if ttl is None else ttl
        self._pending: List[Notification] = []
        self._timers: Dict[str, asyncio.TimerHandle] = {}

    @property
    def pending(self) -> List[Notification]:
        """Pending notifications in the order they were raised."""
        return list(self._pending)

    def notify(self, message: str, severity: Union[Severity, str] = Severity.INFO) -> Notification:
        """Show and speak a message.

        Args:
            message: Text for the banner and the utterance
            severity: One of info, success, warning, error

        Returns:
            The pending notification entry

        Raises:
            ValidationError: If the severity is not recognized
        """
        try:
            level = Severity(severity)
        except ValueError:
            raise ValidationError("Unknown notification severity", details={"severity": severity})

        notification = Notification(
            id=uuid.uuid4().hex,
            message=message,
            severity=level,
            created_at=datetime.now(timezone.utc),
        )
        self._pending.append(notification)
        logger.info("Notification", message=message, severity=level.value)

        self._speak(message)

        loop = asyncio.get_running_loop()
        self._timers[notification.id] = loop.call_later(self.ttl, self._expire, notification.id)
        return notification

    def _speak(self, message: str) -> None:
        try:
            self.speech.speak(message)
        except Exception as e:
            logger.warning("Speech output failed", error=str(e))

    def _expire(self, notification_id: str) -> None:
        self._timers.pop(notification_id, None)
        self._remove(notification_id)

    def _remove(self, notification_id: str) -> bool:
        before = len(self._pending)
        self._pending = [n for n in self._pending if n.id != notification_id]
        return len(self._pending) != before

    def dismiss(self, notification_id: str) -> bool:
        """Remove a notification before it expires.

        Returns:
            bool: True if the notification was still pending
        """
        timer = self._timers.pop(notification_id, None)
        if timer is not None:
            timer.cancel()
        return self._remove(notification_id)

    def clear(self) -> None:
        """Drop every pending notification and cancel their timers."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._pending.clear()
