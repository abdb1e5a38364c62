"""Tests for the notification/speech bridge."""
import asyncio

import pytest

from visionassist.core.exceptions import ValidationError
from visionassist.domain.value_objects.notification import Severity
from visionassist.services.notifications import NotificationBridge


class BrokenSpeech:
    def speak(self, text: str) -> None:
        raise RuntimeError("audio device gone")


class TestNotificationBridge:
    """Test suite for NotificationBridge."""

    async def test_notify_speaks_and_queues(self, speech):
        bridge = NotificationBridge(speech, ttl=10)

        first = bridge.notify("Camera started", "success")
        second = bridge.notify("Person removed")

        assert [n.id for n in bridge.pending] == [first.id, second.id]
        assert first.severity == Severity.SUCCESS
        assert second.severity == Severity.INFO
        assert speech.spoken == ["Camera started", "Person removed"]
        bridge.clear()

    async def test_entries_expire_independently(self, speech):
        """Each entry removes itself after the delay without touching the others."""
        bridge = NotificationBridge(speech, ttl=0.2)
        bridge.notify("first")
        await asyncio.sleep(0.1)
        second = bridge.notify("second")

        await asyncio.sleep(0.15)
        assert [n.id for n in bridge.pending] == [second.id]

        await asyncio.sleep(0.15)
        assert bridge.pending == []

    async def test_dismiss(self, speech):
        bridge = NotificationBridge(speech, ttl=0.05)
        first = bridge.notify("first")
        second = bridge.notify("second")

        assert bridge.dismiss(first.id) is True
        assert bridge.dismiss(first.id) is False
        assert [n.id for n in bridge.pending] == [second.id]

        await asyncio.sleep(0.1)
        assert bridge.pending == []

    async def test_unknown_severity(self, speech):
        bridge = NotificationBridge(speech, ttl=10)

        with pytest.raises(ValidationError):
            bridge.notify("hello", "critical")

        assert bridge.pending == []
        assert speech.spoken == []

    async def test_speech_failure_is_not_raised(self):
        bridge = NotificationBridge(BrokenSpeech(), ttl=10)

        notification = bridge.notify("Camera stopped")

        assert bridge.pending == [notification]
        bridge.clear()
