"""
Face pipeline controller.

Orchestrates the camera, the external embedding model, the descriptor store
and the matcher cache for one interactive session:

    Idle -> CameraActive -> (Detecting | RegistrationPending) -> CameraActive -> Idle

The detection loop runs as an asyncio task that fires a tick every
``detection_interval`` seconds. Each tick grabs a frame, runs the embedding
model and labels every detected face with the current matcher. Ticks that
fire while the previous tick's inference is still running are dropped
(or, with ``drop_superseded_ticks=False``, wait for it), so slow inference
never builds a backlog. Stopping the loop does not abort inference already
in flight; its result is discarded when it arrives.

Example:
    ```python
    controller = FacePipelineController(camera, embedder, store)
    await controller.load()
    await controller.start_camera()
    await controller.register("Alice")
    await controller.start_detection()
    ...
    await controller.stop_camera()
    ```
"""
import asyncio
import contextlib
from typing import Any, Callable, List, Optional

from visionassist.core.config import settings
from visionassist.core.exceptions import (
    NoFaceDetectedError,
    ValidationError,
    VisionAssistError,
)
from visionassist.core.logging import get_logger
from visionassist.domain.entities.face import DetectedFace, FaceRecord
from visionassist.domain.interfaces.devices.camera import Camera
from visionassist.domain.interfaces.recognition.face_embedder import FaceEmbedder
from visionassist.domain.interfaces.storage.descriptor_store import DescriptorStore
from visionassist.domain.value_objects.notification import Severity
from visionassist.domain.value_objects.recognition import (
    UNKNOWN_LABEL,
    DetectionTick,
    FaceAnnotation,
    MatchResult,
    PipelineState,
)
from visionassist.services.face_matching import DescriptorMatcher
from visionassist.services.notifications import NotificationBridge

logger = get_logger(__name__)

AnnotationCallback = Callable[[DetectionTick], Any]


class FacePipelineController:
    """Owns the camera handle and the matcher cache for one session.

    Attributes:
        latest: Annotations of the most recent applied tick
        dropped_ticks: Ticks skipped because inference was still in flight
        discarded_results: Tick results thrown away because detection or
            the camera was stopped before they arrived
        failed_ticks: Ticks that raised unexpectedly and were skipped
    """

    def __init__(
        self,
        camera: Camera,
        embedder: FaceEmbedder,
        store: DescriptorStore,
        notifier: Optional[NotificationBridge] = None,
        user_id: Optional[str] = None,
        threshold: Optional[float] = None,
        detection_interval: Optional[float] = None,
        drop_superseded_ticks: Optional[bool] = None,
        on_annotations: Optional[AnnotationCallback] = None,
    ) -> None:
        self.camera = camera
        self.embedder = embedder
        self.store = store
        self.notifier = notifier
        self.user_id = user_id or settings.DEFAULT_USER_ID
        self.threshold = settings.MATCH_THRESHOLD if threshold is None else threshold
        self.detection_interval = (
            settings.detection_interval if detection_interval is None else detection_interval
        )
        self.drop_superseded_ticks = (
            settings.DROP_SUPERSEDED_TICKS if drop_superseded_ticks is None else drop_superseded_ticks
        )
        self.on_annotations = on_annotations

        self.latest: Optional[DetectionTick] = None
        self.dropped_ticks = 0
        self.discarded_results = 0
        self.failed_ticks = 0

        self._matcher: Optional[DescriptorMatcher] = None
        self._camera_active = False
        self._detecting = False
        self._registering = False
        self._generation = 0
        self._loop_task: Optional[asyncio.Task] = None
        self._inflight: Optional[asyncio.Task] = None

    async def __aenter__(self) -> "FacePipelineController":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop_camera()

    # State

    @property
    def state(self) -> PipelineState:
        if not self._camera_active:
            return PipelineState.IDLE
        if self._registering:
            return PipelineState.REGISTRATION_PENDING
        if self._detecting:
            return PipelineState.DETECTING
        return PipelineState.CAMERA_ACTIVE

    @property
    def camera_active(self) -> bool:
        return self._camera_active

    @property
    def is_detecting(self) -> bool:
        return self._detecting

    @property
    def matcher(self) -> Optional[DescriptorMatcher]:
        """Current matcher cache, None until the first successful load."""
        return self._matcher

    def _announce(self, message: str, severity: Severity = Severity.INFO) -> None:
        if self.notifier is not None:
            self.notifier.notify(message, severity)

    # Matcher cache

    async def rebuild_cache(self) -> DescriptorMatcher:
        """Rebuild the matcher wholesale from the store's descriptor list.

        The new matcher replaces the old one only once it is fully built; if
        the store read fails the previous cache stays in place.

        Raises:
            ExternalServiceError: If the store read fails
            ValidationError: If stored descriptors have inconsistent lengths
        """
        records = await self.store.list_with_descriptors(self.user_id)
        matcher = DescriptorMatcher.from_records(records, threshold=self.threshold)
        self._matcher = matcher
        logger.info(
            "Matcher cache rebuilt",
            user_id=self.user_id,
            records=len(records),
            labels=len(matcher.labels)
        )
        return matcher

    async def load(self) -> List[FaceRecord]:
        """Load the registered faces and build the matcher cache.

        Returns:
            Registered face metadata, newest first
        """
        try:
            faces = await self.store.list(self.user_id)
            await self.rebuild_cache()
        except VisionAssistError:
            self._announce("Failed to load registered faces", Severity.ERROR)
            raise
        self._announce(f"Loaded {len(faces)} registered faces", Severity.SUCCESS)
        return faces

    async def list_faces(self) -> List[FaceRecord]:
        return await self.store.list(self.user_id)

    def identify(self, descriptor) -> MatchResult:
        """Match a descriptor against the current cache."""
        if self._matcher is None:
            return MatchResult(label=UNKNOWN_LABEL, distance=float("inf"))
        return self._matcher.match(descriptor)

    # Camera

    async def start_camera(self) -> None:
        """Acquire the camera. No-op when it is already active.

        Raises:
            DeviceError: If permission is denied or no device exists
        """
        if self._camera_active:
            return
        try:
            await self.camera.open()
        except VisionAssistError as e:
            logger.error("Failed to access camera", error=str(e))
            self._announce("Failed to access camera", Severity.ERROR)
            raise
        self._camera_active = True
        logger.info("Camera started")
        self._announce("Camera started", Severity.SUCCESS)

    async def stop_camera(self) -> None:
        """Cancel detection and release the camera. Safe to call in any state."""
        was_active = self._camera_active
        await self.stop_detection()
        self._camera_active = False
        await self.camera.release()
        if was_active:
            logger.info("Camera stopped")
            self._announce("Camera stopped", Severity.INFO)

    # Detection loop

    async def start_detection(self) -> None:
        """Start the periodic detection loop.

        Raises:
            ValidationError: If the camera is not active
        """
        if not self._camera_active:
            raise ValidationError("Camera not ready", details={"state": self.state.value})
        if self._detecting:
            return
        self._generation += 1
        self._detecting = True
        self._loop_task = asyncio.create_task(self._run_detection(self._generation))
        logger.info("Detection started", interval=self.detection_interval, generation=self._generation)

    async def stop_detection(self) -> None:
        """Cancel the detection loop. In-flight inference is left to finish and ignored."""
        self._generation += 1
        self._detecting = False
        task, self._loop_task = self._loop_task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            logger.info("Detection stopped")

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and self._detecting and self._camera_active

    async def _run_detection(self, generation: int) -> None:
        sequence = 0
        while self._is_current(generation):
            if self._inflight is not None and not self._inflight.done():
                if self.drop_superseded_ticks:
                    self.dropped_ticks += 1
                    logger.debug("Dropped detection tick, inference still running")
                    await asyncio.sleep(self.detection_interval)
                    continue
                await asyncio.wait([self._inflight])
                if not self._is_current(generation):
                    break
            sequence += 1
            self._inflight = asyncio.create_task(self._tick(generation, sequence))
            await asyncio.sleep(self.detection_interval)

    async def _tick(self, generation: int, sequence: int) -> None:
        try:
            frame = await self.camera.read_frame()
            faces = await self.embedder.detect_all(frame)
        except VisionAssistError as e:
            logger.warning("Detection tick skipped", sequence=sequence, error=str(e))
            return
        except Exception as e:
            self.failed_ticks += 1
            logger.error("Detection tick failed", sequence=sequence, error=str(e), exc_info=True)
            return

        if not self._is_current(generation):
            self.discarded_results += 1
            logger.debug("Discarded stale detection result", sequence=sequence)
            return

        try:
            tick = DetectionTick(
                sequence=sequence,
                annotations=[self._annotate(face) for face in faces],
            )
            self.latest = tick
            if self.on_annotations is not None:
                self.on_annotations(tick)
        except Exception as e:
            self.failed_ticks += 1
            logger.error("Publishing detection tick failed", sequence=sequence, error=str(e), exc_info=True)

    def _annotate(self, face: DetectedFace) -> FaceAnnotation:
        annotation = FaceAnnotation(bounding_box=face.bounding_box, confidence=face.confidence)
        matcher = self._matcher
        if matcher is None:
            return annotation
        try:
            result = matcher.match(face.descriptor)
        except ValidationError as e:
            logger.warning("Descriptor does not fit the matcher cache", error=str(e))
            return annotation
        annotation.label = result.label
        annotation.distance = result.distance
        return annotation

    # Registration

    async def register(self, name: str, image_url: Optional[str] = None) -> FaceRecord:
        """Capture the current face and register it under ``name``.

        The matcher cache is rebuilt before returning, so the new face is
        recognized on the very next tick.

        Raises:
            ValidationError: If the name is blank or the camera is not active
            NoFaceDetectedError: If no face is in frame
            ModelInferenceError: If the embedding model fails
            ExternalServiceError: If the store write or reload fails
        """
        if not name or not name.strip():
            self._announce("Please enter a name", Severity.WARNING)
            raise ValidationError("Name is required", details={"field": "name"})
        if not self._camera_active:
            self._announce("Camera not ready", Severity.WARNING)
            raise ValidationError("Camera not ready", details={"state": self.state.value})

        name = name.strip()
        self._registering = True
        self._announce("Capturing face...", Severity.INFO)
        try:
            frame = await self.camera.read_frame()
            face = await self.embedder.detect_single(frame)
            if face is None:
                raise NoFaceDetectedError("No face detected", details={"name": name})

            record = await self.store.register(
                name, face.descriptor.tolist(), user_id=self.user_id, image_url=image_url
            )
            await self.rebuild_cache()
        except NoFaceDetectedError:
            logger.warning("Registration attempted without a face in frame", name=name)
            self._announce(
                "No face detected. Please position your face clearly in the camera.",
                Severity.WARNING
            )
            raise
        except VisionAssistError as e:
            logger.error("Face registration failed", name=name, error=str(e))
            self._announce("Failed to register face", Severity.ERROR)
            raise
        finally:
            self._registering = False

        logger.info("Face registered", face_id=record.id, name=record.name)
        self._announce(f"{record.name} registered successfully", Severity.SUCCESS)
        return record

    async def remove(self, face_id: str) -> bool:
        """Delete a registered face and rebuild the matcher cache.

        Raises:
            ExternalServiceError: If the store delete or reload fails
        """
        try:
            success = await self.store.delete(face_id)
            await self.rebuild_cache()
        except VisionAssistError as e:
            logger.error("Face removal failed", face_id=face_id, error=str(e))
            self._announce("Failed to remove person", Severity.ERROR)
            raise
        self._announce("Person removed", Severity.SUCCESS)
        return success
