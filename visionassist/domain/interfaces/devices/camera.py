"""Video capture device interface."""
from abc import ABC, abstractmethod

import numpy as np


class Camera(ABC):
    """Interface for a video capture handle."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        pass

    @abstractmethod
    async def open(self) -> None:
        """
        Acquire the capture device.

        Raises:
            DeviceError: If permission is denied or no device exists
        """
        pass

    @abstractmethod
    async def read_frame(self) -> np.ndarray:
        """
        Grab the current frame.

        Raises:
            DeviceError: If the device is closed or the read failed
        """
        pass

    @abstractmethod
    async def release(self) -> None:
        """Release the capture device. Idempotent."""
        pass
