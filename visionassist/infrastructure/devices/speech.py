"""Speech output engines."""
import queue
import threading
from typing import Optional

import pyttsx3

from visionassist.core.config import settings
from visionassist.core.logging import get_logger
from visionassist.domain.interfaces.devices.speech import SpeechSynthesizer

logger = get_logger(__name__)

_STOP = object()


class Pyttsx3SpeechSynthesizer(SpeechSynthesizer):
    """Speaks through pyttsx3 on a dedicated worker thread.

    pyttsx3 blocks while talking, so utterances are queued and spoken one at
    a time by the worker. ``speak`` only enqueues and returns immediately.
    """

    def __init__(self, rate: Optional[int] = None) -> None:
        self.rate = rate or settings.SPEECH_RATE
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._thread = threading.Thread(target=self._run, name="speech-worker", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        engine = pyttsx3.init()
        engine.setProperty("rate", self.rate)
        while True:
            item = self._queue.get()
            if item is _STOP:
                break
            try:
                engine.say(item)
                engine.runAndWait()
            except RuntimeError as e:
                logger.warning("Speech engine error", error=str(e))
        engine.stop()

    def speak(self, text: str) -> None:
        if text:
            self._queue.put(text)

    def close(self) -> None:
        if self._thread.is_alive():
            self._queue.put(_STOP)
            self._thread.join(timeout=2)


class NullSpeechSynthesizer(SpeechSynthesizer):
    """Used when speech output is disabled, e.g. on a headless server."""

    def speak(self, text: str) -> None:
        logger.debug("Speech disabled, skipping utterance", text=text)


def create_speech_synthesizer(enabled: Optional[bool] = None) -> SpeechSynthesizer:
    """Build the configured speech engine."""
    enabled = settings.SPEECH_ENABLED if enabled is None else enabled
    if enabled:
        return Pyttsx3SpeechSynthesizer()
    return NullSpeechSynthesizer()
