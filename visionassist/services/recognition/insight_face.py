"""
InsightFace-based implementation of the face embedding model.

Wraps ``insightface.app.FaceAnalysis`` behind the FaceEmbedder interface:
every detected face comes back with a normalized bounding box, its detection
score and its embedding vector (the descriptor stored and matched by the
rest of the service).

Example:
    ```python
    embedder = InsightFaceEmbedder()
    faces = await embedder.detect_all(frame)
    ```

Note:
    This implementation uses CPU inference by default. For GPU support,
    pass ``providers=['CUDAExecutionProvider', 'CPUExecutionProvider']``.
"""
import asyncio
from typing import Any, List, Optional, Sequence

import numpy as np
from insightface.app import FaceAnalysis
from insightface.app.common import Face as InsightFace

from visionassist.core.config import settings
from visionassist.core.exceptions import ModelInferenceError
from visionassist.core.logging import get_logger
from visionassist.domain.entities.face import BoundingBox, DetectedFace
from visionassist.domain.interfaces.recognition.face_embedder import FaceEmbedder

logger = get_logger(__name__)


class InsightFaceEmbedder(FaceEmbedder):
    """
    Face detection and embedding extraction with InsightFace.

    Inference runs in a worker thread so the detection loop never blocks
    the event loop.

    Attributes:
        model: InsightFace model instance for face analysis
    """

    def __init__(
        self,
        model_name: Optional[str] = None,
        providers: Optional[Sequence[str]] = None,
    ) -> None:
        """Load the InsightFace model pack."""
        self.model_name = model_name or settings.MODEL_NAME
        self.model = FaceAnalysis(
            name=self.model_name,
            root=settings.MODEL_CACHE_DIR,
            providers=list(providers or ["CPUExecutionProvider"])
        )
        # Detection size affects accuracy significantly
        self.model.prepare(ctx_id=0, det_size=(settings.DETECTION_SIZE, settings.DETECTION_SIZE))
        logger.info("Loaded face embedding model", model=self.model_name)

    def _convert_to_face(self, face_data: InsightFace, height: int, width: int) -> DetectedFace:
        """Convert an InsightFace result to a DetectedFace with 0-1 coordinates."""
        bbox = face_data.bbox.astype(int)
        bounding_box = BoundingBox(
            top=float(bbox[1] / height),
            left=float(bbox[0] / width),
            width=float((bbox[2] - bbox[0]) / width),
            height=float((bbox[3] - bbox[1]) / height)
        )
        return DetectedFace(
            bounding_box=bounding_box,
            confidence=float(face_data.det_score),
            descriptor=face_data.embedding,
        )

    async def _process_frame(self, frame: np.ndarray, max_faces: int = 0) -> List[InsightFace]:
        if self.model is None:
            raise ModelInferenceError("Face embedding model is not loaded")
        try:
            faces = await asyncio.to_thread(self.model.get, frame, max_num=max_faces)
        except Exception as e:
            logger.error(
                "Face embedding inference failed",
                error=str(e),
                frame_shape=getattr(frame, "shape", None),
                exc_info=True
            )
            raise ModelInferenceError(f"Face embedding inference failed: {e}")
        # Faces without an embedding cannot be matched
        return [face for face in faces or [] if face.embedding is not None]

    async def detect_all(self, frame: np.ndarray) -> List[DetectedFace]:
        faces = await self._process_frame(frame)
        height, width = frame.shape[:2]
        return [self._convert_to_face(face, height, width) for face in faces]

    async def detect_single(self, frame: np.ndarray) -> Optional[DetectedFace]:
        faces = await self._process_frame(frame, max_faces=1)
        if not faces:
            return None
        height, width = frame.shape[:2]
        best = max(faces, key=lambda face: float(face.det_score))
        return self._convert_to_face(best, height, width)

    def close(self) -> None:
        self.model = None

    async def __aenter__(self) -> "InsightFaceEmbedder":
        return self

    async def __aexit__(self, exc_type: Optional[type], exc_val: Optional[Exception],
                        exc_tb: Optional[Any]) -> None:
        logger.debug("Cleaning up InsightFace resources")
        self.close()
