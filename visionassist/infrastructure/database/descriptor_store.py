"""SQLAlchemy-backed durable descriptor store."""
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from visionassist.core.config import settings
from visionassist.core.exceptions import ExternalServiceError
from visionassist.core.logging import get_logger
from visionassist.domain.entities.face import FaceRecord
from visionassist.domain.interfaces.storage.descriptor_store import DescriptorStore
from visionassist.infrastructure.database.models import Base, Face
from visionassist.infrastructure.database.session import (
    create_engine,
    create_session_factory,
    session_scope,
)
from visionassist.infrastructure.database.unit_of_work import UnitOfWork
from visionassist.infrastructure.storage.validation import check_descriptor_length, validate_registration

logger = get_logger(__name__)


def _to_record(face: Face, with_descriptor: bool = True) -> FaceRecord:
    return FaceRecord(
        id=face.id,
        name=face.name,
        descriptor=list(face.descriptor) if with_descriptor else None,
        user_id=face.user_id,
        timestamp=face.timestamp,
        image_url=face.image_url,
    )


class SqlDescriptorStore(DescriptorStore):
    """Durable face store on any SQLAlchemy async database.

    Example:
        ```python
        store = SqlDescriptorStore("postgresql+asyncpg://user:pass@db/visionassist")
        await store.initialize()
        record = await store.register("Alice", descriptor)
        ```
    """

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        default_user_id: Optional[str] = None,
        engine: Optional[AsyncEngine] = None,
    ) -> None:
        self._engine = engine or create_engine(database_url, echo=echo)
        self._session_factory = create_session_factory(self._engine)
        self._default_user_id = default_user_id or settings.DEFAULT_USER_ID
        self._closed = False

    async def initialize(self) -> None:
        """Create the faces table if it does not exist yet."""
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise ExternalServiceError("Face store is unreachable", details={"error": str(e)})
        logger.info("Face store schema ready", dialect=self._engine.dialect.name)

    async def close(self) -> None:
        if self._closed:
            return
        await self._engine.dispose()
        self._closed = True

    async def register(
        self,
        name: str,
        descriptor: Optional[Sequence[float]],
        user_id: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> FaceRecord:
        values = validate_registration(name, descriptor)
        owner = user_id or self._default_user_id
        try:
            async with session_scope(self._session_factory) as session:
                async with UnitOfWork(session) as uow:
                    expected = await uow.faces.descriptor_length(owner)
                    check_descriptor_length(values, expected, owner)
                    face = await uow.faces.create(
                        name=name.strip(),
                        descriptor=values,
                        user_id=owner,
                        image_url=image_url,
                    )
                record = _to_record(face)
        except SQLAlchemyError as e:
            logger.error("Face registration failed", name=name, error=str(e))
            raise ExternalServiceError("Failed to store face", details={"error": str(e)})

        logger.info("Registered face", face_id=record.id, name=record.name, user_id=record.user_id)
        return record

    async def list(self, user_id: Optional[str] = None) -> List[FaceRecord]:
        try:
            async with session_scope(self._session_factory) as session:
                faces = await UnitOfWork(session).faces.list_newest_first(user_id)
                return [_to_record(face, with_descriptor=False) for face in faces]
        except SQLAlchemyError as e:
            raise ExternalServiceError("Failed to list faces", details={"error": str(e)})

    async def list_with_descriptors(self, user_id: Optional[str] = None) -> List[FaceRecord]:
        try:
            async with session_scope(self._session_factory) as session:
                faces = await UnitOfWork(session).faces.list_all(user_id)
                return [_to_record(face) for face in faces]
        except SQLAlchemyError as e:
            raise ExternalServiceError("Failed to load face descriptors", details={"error": str(e)})

    async def delete(self, face_id: str) -> bool:
        try:
            async with session_scope(self._session_factory) as session:
                async with UnitOfWork(session) as uow:
                    removed = await uow.faces.delete_by_id(face_id)
        except SQLAlchemyError as e:
            logger.error("Face deletion failed", face_id=face_id, error=str(e))
            raise ExternalServiceError("Failed to delete face", details={"error": str(e)})

        logger.info("Deleted face", face_id=face_id, removed=removed)
        return True
