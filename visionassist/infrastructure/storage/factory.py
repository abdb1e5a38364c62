"""Selects the descriptor store backend once at startup."""
from typing import Optional

from visionassist.core.config import Settings, settings as default_settings
from visionassist.core.logging import get_logger
from visionassist.domain.interfaces.storage.descriptor_store import DescriptorStore
from visionassist.infrastructure.database import SqlDescriptorStore
from visionassist.infrastructure.storage.memory import InMemoryDescriptorStore

logger = get_logger(__name__)


def create_descriptor_store(config: Optional[Settings] = None) -> DescriptorStore:
    """Build the durable store when a database is configured, else the in-memory one.

    Args:
        config: Settings to read, defaults to the application settings

    Returns:
        DescriptorStore: Uninitialized store instance
    """
    config = config or default_settings
    if config.DATABASE_URL:
        logger.info("Using database face store")
        return SqlDescriptorStore(
            config.DATABASE_URL,
            echo=config.DATABASE_ECHO,
            default_user_id=config.DEFAULT_USER_ID,
        )

    logger.warning("DATABASE_URL not set, face records will be kept in memory")
    return InMemoryDescriptorStore(default_user_id=config.DEFAULT_USER_ID)
