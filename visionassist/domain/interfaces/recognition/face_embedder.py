"""Face embedding model interface."""
from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

from ...entities.face import DetectedFace


class FaceEmbedder(ABC):
    """Interface for the external face detection + embedding model."""

    @abstractmethod
    async def detect_all(self, frame: np.ndarray) -> List[DetectedFace]:
        """
        Detect every face in a frame and extract its descriptor.

        Args:
            frame: BGR image array from the camera

        Returns:
            Detected faces, empty when the frame holds none

        Raises:
            ModelInferenceError: If the model call fails
        """
        pass

    @abstractmethod
    async def detect_single(self, frame: np.ndarray) -> Optional[DetectedFace]:
        """
        Detect the most prominent face in a frame.

        Returns:
            The detected face, or None when the frame holds none

        Raises:
            ModelInferenceError: If the model call fails
        """
        pass
