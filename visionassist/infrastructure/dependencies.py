"""FastAPI dependency providers."""
from typing import AsyncGenerator

from fastapi import Depends

from visionassist.core.container import ServiceContainer, container
from visionassist.core.exceptions import ServiceNotInitializedError
from visionassist.domain.interfaces.storage.descriptor_store import DescriptorStore
from visionassist.services.navigation import NavigationService


async def get_container() -> ServiceContainer:
    """Dependency provider for the global ServiceContainer instance."""
    if not container.initialized:
        # Attempt to initialize if not already done (e.g., during testing)
        try:
            await container.initialize()
        except Exception as e:
            raise ServiceNotInitializedError(f"Service container could not be initialized: {e}")
    return container


async def get_descriptor_store(
    cont: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[DescriptorStore, None]:
    """Provide the descriptor store selected at startup.

    Raises:
        ServiceNotInitializedError: If the store is not initialized
    """
    if cont.descriptor_store is None:
        raise ServiceNotInitializedError("Descriptor store not initialized")
    yield cont.descriptor_store


async def get_navigation_service(
    cont: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[NavigationService, None]:
    """Provide the navigation service.

    Raises:
        ServiceNotInitializedError: If the service is not initialized
    """
    if cont.navigation_service is None:
        raise ServiceNotInitializedError("Navigation service not initialized")
    yield cont.navigation_service
