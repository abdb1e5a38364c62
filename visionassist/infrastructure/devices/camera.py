"""OpenCV-backed video capture."""
import asyncio
from typing import Optional

import cv2
import numpy as np

from visionassist.core.config import settings
from visionassist.core.exceptions import DeviceError
from visionassist.core.logging import get_logger
from visionassist.domain.interfaces.devices.camera import Camera

logger = get_logger(__name__)


class OpenCVCamera(Camera):
    """Camera on top of ``cv2.VideoCapture``.

    Blocking capture calls run in a worker thread so the event loop keeps
    serving other work while a frame is grabbed.
    """

    def __init__(
        self,
        device_index: Optional[int] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> None:
        self.device_index = settings.CAMERA_INDEX if device_index is None else device_index
        self.width = width or settings.CAMERA_WIDTH
        self.height = height or settings.CAMERA_HEIGHT
        self._capture: Optional[cv2.VideoCapture] = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None and self._capture.isOpened()

    def _open_sync(self) -> cv2.VideoCapture:
        capture = cv2.VideoCapture(self.device_index)
        if not capture.isOpened():
            capture.release()
            raise DeviceError(
                "Camera unavailable or access denied",
                details={"device_index": self.device_index}
            )
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        return capture

    async def open(self) -> None:
        if self.is_open:
            return
        self._capture = await asyncio.to_thread(self._open_sync)
        logger.info("Opened camera", device_index=self.device_index, width=self.width, height=self.height)

    async def read_frame(self) -> np.ndarray:
        capture = self._capture
        if capture is None:
            raise DeviceError("Camera is not open")
        ok, frame = await asyncio.to_thread(capture.read)
        if not ok or frame is None:
            raise DeviceError("Failed to read frame from camera", details={"device_index": self.device_index})
        return frame

    async def release(self) -> None:
        capture, self._capture = self._capture, None
        if capture is not None:
            await asyncio.to_thread(capture.release)
            logger.info("Released camera", device_index=self.device_index)
