"""Process-local descriptor store used when no database is configured."""
import asyncio
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from visionassist.core.config import settings
from visionassist.core.logging import get_logger
from visionassist.domain.entities.face import FaceRecord
from visionassist.domain.interfaces.storage.descriptor_store import DescriptorStore
from visionassist.infrastructure.storage.validation import check_descriptor_length, validate_registration

logger = get_logger(__name__)


class InMemoryDescriptorStore(DescriptorStore):
    """Keeps face records in a list owned by this instance.

    Records live as long as the process. The list is kept in insertion
    (chronological) order.
    """

    def __init__(self, default_user_id: Optional[str] = None) -> None:
        self._default_user_id = default_user_id or settings.DEFAULT_USER_ID
        self._records: List[FaceRecord] = []
        self._lock = asyncio.Lock()

    async def register(
        self,
        name: str,
        descriptor: Optional[Sequence[float]],
        user_id: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> FaceRecord:
        values = validate_registration(name, descriptor)
        owner = user_id or self._default_user_id
        record = FaceRecord(
            id=uuid.uuid4().hex,
            name=name.strip(),
            descriptor=values,
            user_id=owner,
            timestamp=datetime.now(timezone.utc),
            image_url=image_url,
        )
        async with self._lock:
            existing = next((r for r in self._records if r.user_id == owner and r.descriptor), None)
            check_descriptor_length(values, len(existing.descriptor) if existing else None, owner)
            self._records.append(record)
        logger.info("Registered face in memory", face_id=record.id, name=record.name, user_id=record.user_id)
        return record

    def _filtered(self, user_id: Optional[str]) -> List[FaceRecord]:
        if user_id is None:
            return list(self._records)
        return [r for r in self._records if r.user_id == user_id]

    async def list(self, user_id: Optional[str] = None) -> List[FaceRecord]:
        async with self._lock:
            records = self._filtered(user_id)
        # Appended chronologically, so reversing gives newest first
        return [r.without_descriptor() for r in reversed(records)]

    async def list_with_descriptors(self, user_id: Optional[str] = None) -> List[FaceRecord]:
        async with self._lock:
            return self._filtered(user_id)

    async def delete(self, face_id: str) -> bool:
        async with self._lock:
            before = len(self._records)
            self._records = [r for r in self._records if r.id != face_id]
            removed = before - len(self._records)
        logger.info("Deleted face from memory", face_id=face_id, removed=removed)
        return True
