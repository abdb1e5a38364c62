"""Service container for dependency injection."""
from typing import Optional

from visionassist.core.config import Settings, settings as default_settings
from visionassist.core.exceptions import ExternalServiceError
from visionassist.core.logging import get_logger
from visionassist.domain.interfaces.devices.speech import SpeechSynthesizer
from visionassist.domain.interfaces.recognition.face_embedder import FaceEmbedder
from visionassist.domain.interfaces.storage.descriptor_store import DescriptorStore
from visionassist.infrastructure.devices.camera import OpenCVCamera
from visionassist.infrastructure.devices.speech import create_speech_synthesizer
from visionassist.infrastructure.storage.factory import create_descriptor_store
from visionassist.services.face_pipeline import FacePipelineController
from visionassist.services.navigation import NavigationService
from visionassist.services.notifications import NotificationBridge

logger = get_logger(__name__)


class ServiceContainer:
    """Container for application services.

    The descriptor store backend is selected once here and shared by every
    consumer. Matcher caches are not shared: each pipeline controller built
    by the container owns its own.

    Example:
        ```python
        container = ServiceContainer()
        await container.initialize()

        store = container.descriptor_store
        controller = container.create_face_pipeline()
        ```
    """

    def __init__(self, config: Optional[Settings] = None) -> None:
        """Initialize empty container."""
        self.config = config or default_settings

        # Core services
        self.descriptor_store: Optional[DescriptorStore] = None
        self.speech: Optional[SpeechSynthesizer] = None
        self.embedder: Optional[FaceEmbedder] = None

        # Domain services
        self.navigation_service: Optional[NavigationService] = None
        self.notifier: Optional[NotificationBridge] = None

    @property
    def initialized(self) -> bool:
        return self.descriptor_store is not None

    async def initialize(self, store: Optional[DescriptorStore] = None) -> None:
        """Initialize all services in the correct order."""
        self.log_configuration()
        self.descriptor_store = store or create_descriptor_store(self.config)
        try:
            await self.descriptor_store.initialize()
        except ExternalServiceError as e:
            # Requests will report the outage; startup carries on
            logger.error("Face store initialization failed", error=e.message, details=e.details)
        self.speech = create_speech_synthesizer(self.config.SPEECH_ENABLED)
        self.navigation_service = NavigationService(
            api_key=self.config.GOOGLE_MAPS_API_KEY,
            timeout=self.config.MAPS_REQUEST_TIMEOUT,
        )
        self.notifier = NotificationBridge(self.speech, ttl=self.config.NOTIFICATION_TTL_SECONDS)

    def log_configuration(self) -> None:
        """Report which optional integrations are configured."""
        logger.info(
            "Configuration status",
            port=self.config.PORT,
            database_configured=bool(self.config.DATABASE_URL),
            maps_configured=bool(self.config.GOOGLE_MAPS_API_KEY),
            speech_enabled=self.config.SPEECH_ENABLED,
        )
        if not self.config.GOOGLE_MAPS_API_KEY:
            logger.warning("GOOGLE_MAPS_API_KEY missing, navigation endpoints will fail")

    def get_embedder(self) -> FaceEmbedder:
        """Load the embedding model on first use."""
        if self.embedder is None:
            # insightface is slow to import and only the camera pipeline needs it
            from visionassist.services.recognition.insight_face import InsightFaceEmbedder
            self.embedder = InsightFaceEmbedder(model_name=self.config.MODEL_NAME)
        return self.embedder

    def create_face_pipeline(self, user_id: Optional[str] = None) -> FacePipelineController:
        """Build a pipeline controller on the local camera."""
        return FacePipelineController(
            camera=OpenCVCamera(
                device_index=self.config.CAMERA_INDEX,
                width=self.config.CAMERA_WIDTH,
                height=self.config.CAMERA_HEIGHT,
            ),
            embedder=self.get_embedder(),
            store=self.descriptor_store,
            notifier=self.notifier,
            user_id=user_id or self.config.DEFAULT_USER_ID,
            threshold=self.config.MATCH_THRESHOLD,
            detection_interval=self.config.detection_interval,
            drop_superseded_ticks=self.config.DROP_SUPERSEDED_TICKS,
        )

    async def cleanup(self) -> None:
        """Cleanup all services in reverse order of initialization."""
        if self.notifier:
            self.notifier.clear()
            self.notifier = None
        self.navigation_service = None
        if self.speech:
            self.speech.close()
            self.speech = None
        self.embedder = None
        if self.descriptor_store:
            await self.descriptor_store.close()
            self.descriptor_store = None


# Global container instance
container = ServiceContainer()
