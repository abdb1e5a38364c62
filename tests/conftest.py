"""Shared fixtures and fakes for the VisionAssist test suite."""
import asyncio
from typing import Callable, List, Optional

import numpy as np
import pytest

from visionassist.core.exceptions import DeviceError
from visionassist.domain.entities.face import BoundingBox, DetectedFace
from visionassist.domain.interfaces.devices.camera import Camera
from visionassist.domain.interfaces.devices.speech import SpeechSynthesizer
from visionassist.domain.interfaces.recognition.face_embedder import FaceEmbedder
from visionassist.infrastructure.storage.memory import InMemoryDescriptorStore


def make_face(descriptor, confidence: float = 0.99) -> DetectedFace:
    """Build a detected face centered in the frame."""
    return DetectedFace(
        confidence=confidence,
        bounding_box=BoundingBox(left=0.25, top=0.25, width=0.5, height=0.5),
        descriptor=descriptor,
    )


class FakeCamera(Camera):
    """Camera that hands out blank frames."""

    def __init__(self, fail_open: bool = False) -> None:
        self.fail_open = fail_open
        self.opened = 0
        self.released = 0
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    async def open(self) -> None:
        if self.fail_open:
            raise DeviceError("Permission denied")
        self.opened += 1
        self._open = True

    async def read_frame(self) -> np.ndarray:
        if not self._open:
            raise DeviceError("Camera is not open")
        return np.zeros((48, 64, 3), dtype=np.uint8)

    async def release(self) -> None:
        if self._open:
            self.released += 1
        self._open = False


class FakeEmbedder(FaceEmbedder):
    """Embedding model returning preset faces.

    ``errors`` are raised, in order, by the next calls. When ``gate`` is set
    every call waits for it, which simulates slow inference.
    """

    def __init__(self, faces: Optional[List[DetectedFace]] = None) -> None:
        self.faces = faces or []
        self.errors: List[Exception] = []
        self.gate: Optional[asyncio.Event] = None
        self.started = asyncio.Event()
        self.calls = 0

    async def _infer(self) -> List[DetectedFace]:
        self.calls += 1
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.errors:
            raise self.errors.pop(0)
        return list(self.faces)

    async def detect_all(self, frame: np.ndarray) -> List[DetectedFace]:
        return await self._infer()

    async def detect_single(self, frame: np.ndarray) -> Optional[DetectedFace]:
        faces = await self._infer()
        return faces[0] if faces else None


class RecordingSpeech(SpeechSynthesizer):
    """Speech engine that remembers what it was asked to say."""

    def __init__(self) -> None:
        self.spoken: List[str] = []

    def speak(self, text: str) -> None:
        self.spoken.append(text)


@pytest.fixture
def camera() -> FakeCamera:
    return FakeCamera()


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def speech() -> RecordingSpeech:
    return RecordingSpeech()


@pytest.fixture
def memory_store() -> InMemoryDescriptorStore:
    return InMemoryDescriptorStore(default_user_id="default_user")


@pytest.fixture
def face_factory() -> Callable[..., DetectedFace]:
    return make_face


@pytest.fixture
def wait_until():
    """Poll a condition on the event loop until it holds or a timeout expires."""
    async def _wait(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("Condition not met before timeout")
            await asyncio.sleep(0.005)
    return _wait
