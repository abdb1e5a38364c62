"""Descriptor store interface for registered faces."""
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ...entities.face import FaceRecord


class DescriptorStore(ABC):
    """Interface for persisting named face descriptors keyed by user.

    The active backend is chosen once at startup. Callers must not depend on
    which backend is in use.
    """

    async def initialize(self) -> None:
        """Prepare backend resources. Default is a no-op."""

    async def close(self) -> None:
        """Release backend resources. Default is a no-op."""

    @abstractmethod
    async def register(
        self,
        name: str,
        descriptor: Optional[Sequence[float]],
        user_id: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> FaceRecord:
        """
        Append one durable face record.

        Args:
            name: Display label, must be non-empty
            descriptor: Face embedding vector, must be non-empty
            user_id: Partition key, defaults to the configured default tenant
            image_url: Optional snapshot location

        Returns:
            The created record, including its store-assigned id

        Raises:
            ValidationError: If name or descriptor is missing/empty
            ExternalServiceError: If the backend write fails
        """
        pass

    @abstractmethod
    async def list(self, user_id: Optional[str] = None) -> List[FaceRecord]:
        """
        List record metadata (no descriptor payload), newest first.

        Args:
            user_id: Restrict to one tenant; all tenants when None

        Raises:
            ExternalServiceError: If the backend read fails
        """
        pass

    @abstractmethod
    async def list_with_descriptors(self, user_id: Optional[str] = None) -> List[FaceRecord]:
        """
        List records including descriptor payloads, in no particular order.

        Args:
            user_id: Restrict to one tenant; all tenants when None

        Raises:
            ExternalServiceError: If the backend read fails
        """
        pass

    @abstractmethod
    async def delete(self, face_id: str) -> bool:
        """
        Delete a record by id. Deleting an unknown id still reports success.

        Raises:
            ExternalServiceError: If the backend write fails
        """
        pass
