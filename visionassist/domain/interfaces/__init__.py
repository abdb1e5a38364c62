"""Service interfaces package."""
from .devices import Camera, SpeechSynthesizer
from .recognition import FaceEmbedder
from .storage import DescriptorStore

__all__ = ["Camera", "DescriptorStore", "FaceEmbedder", "SpeechSynthesizer"]
