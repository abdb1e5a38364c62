"""Database repositories for the face descriptor store."""
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from visionassist.infrastructure.database.models import Face


class FaceRepository:
    """Repository for face operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository.

        Args:
            session: Database session
        """
        self._session = session

    async def create(
        self,
        name: str,
        descriptor: List[float],
        user_id: str,
        image_url: Optional[str] = None
    ) -> Face:
        """Create a new face record.

        Args:
            name: Display label
            descriptor: Face embedding vector
            user_id: Partition key
            image_url: Optional snapshot location

        Returns:
            Face: Created face record
        """
        face = Face(
            name=name,
            descriptor=descriptor,
            user_id=user_id,
            image_url=image_url
        )
        self._session.add(face)
        await self._session.flush()
        return face

    async def list_newest_first(self, user_id: Optional[str] = None) -> List[Face]:
        """Get faces ordered by creation time, newest first.

        Args:
            user_id: Optional tenant filter

        Returns:
            List[Face]: Found face records
        """
        stmt = select(Face).order_by(Face.timestamp.desc())
        if user_id is not None:
            stmt = stmt.where(Face.user_id == user_id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_all(self, user_id: Optional[str] = None) -> List[Face]:
        """Get faces in storage order."""
        stmt = select(Face)
        if user_id is not None:
            stmt = stmt.where(Face.user_id == user_id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def descriptor_length(self, user_id: str) -> Optional[int]:
        """Length of one stored descriptor for the user, None when there are none."""
        stmt = select(Face.descriptor).where(Face.user_id == user_id).limit(1)
        result = await self._session.execute(stmt)
        descriptor = result.scalar_one_or_none()
        return len(descriptor) if descriptor else None

    async def delete_by_id(self, face_id: str) -> int:
        """Delete a face by id.

        Returns:
            int: Number of rows removed (0 when the id is unknown)
        """
        result = await self._session.execute(delete(Face).where(Face.id == face_id))
        return result.rowcount or 0
