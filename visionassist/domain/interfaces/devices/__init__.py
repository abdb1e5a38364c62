from .camera import Camera
from .speech import SpeechSynthesizer

__all__ = ["Camera", "SpeechSynthesizer"]
