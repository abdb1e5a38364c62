"""Speech output interface."""
from abc import ABC, abstractmethod


class SpeechSynthesizer(ABC):
    """Interface for a text-to-speech engine.

    ``speak`` is fire-and-forget. Overlapping requests are queued by the
    engine itself.
    """

    @abstractmethod
    def speak(self, text: str) -> None:
        pass

    def close(self) -> None:
        """Stop the engine. Default is a no-op."""
