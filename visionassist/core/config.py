"""Configuration settings for the VisionAssist backend."""
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    These settings are loaded from environment variables with the following precedence:
    1. Environment variables
    2. .env file
    3. Default values

    Attributes:
        DATABASE_URL: SQLAlchemy async URL for the durable face store. When unset
            the service keeps registered faces in process memory.
        MATCH_THRESHOLD: Maximum descriptor distance considered the same identity
        DETECTION_INTERVAL_MS: Period of the camera detection loop
        GOOGLE_MAPS_API_KEY: Key for the Directions and Geocoding APIs
    """
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",
        env_nested_delimiter="__"
    )

    # Core Settings
    PROJECT_NAME: str = "VisionAssist Backend"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"

    # CORS Settings
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    @property
    def cors_origins(self) -> List[str]:
        """Get list of allowed origins."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Face Store Settings
    DATABASE_URL: Optional[str] = None
    DATABASE_ECHO: bool = False
    DEFAULT_USER_ID: str = "default_user"

    # Face Recognition Settings
    MATCH_THRESHOLD: float = 0.6
    MODEL_NAME: str = "buffalo_l"
    MODEL_CACHE_DIR: str = ".model_cache"
    DETECTION_SIZE: int = 640

    # Detection loop settings
    DETECTION_INTERVAL_MS: int = 100
    DROP_SUPERSEDED_TICKS: bool = True

    # Camera Settings
    CAMERA_INDEX: int = 0
    CAMERA_WIDTH: int = 640
    CAMERA_HEIGHT: int = 480

    # Notification / speech settings
    NOTIFICATION_TTL_SECONDS: float = 5.0
    SPEECH_ENABLED: bool = False
    SPEECH_RATE: int = 180

    # Navigation Settings
    GOOGLE_MAPS_API_KEY: Optional[str] = None
    MAPS_REQUEST_TIMEOUT: float = 10.0
    DIRECTIONS_URL: str = "https://maps.googleapis.com/maps/api/directions/json"
    GEOCODE_URL: str = "https://maps.googleapis.com/maps/api/geocode/json"

    # Optional settings with defaults
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    @property
    def detection_interval(self) -> float:
        """Detection loop period in seconds."""
        return self.DETECTION_INTERVAL_MS / 1000.0

settings = Settings()
