"""OpenCV webcam frame source."""
import asyncio
from typing import Optional

import cv2
import numpy as np

from faceapp.core.config import settings
from faceapp.core.exceptions import CameraUnavailableError
from faceapp.core.logging import get_logger

logger = get_logger(__name__)


class OpenCVCamera:
    """Reads BGR frames from a local video device."""

    def __init__(self, index: Optional[int] = None) -> None:
        self.index = settings.CAMERA_INDEX if index is None else index
        self._capture: Optional[cv2.VideoCapture] = None

    def __enter__(self) -> "OpenCVCamera":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    def open(self) -> None:
        """Open the video device.

        Raises:
            CameraUnavailableError: If the device cannot be opened
        """
        capture = cv2.VideoCapture(self.index)
        if not capture.isOpened():
            capture.release()
            raise CameraUnavailableError(
                f"Could not open camera {self.index}",
                details={"camera_index": self.index}
            )
        self._capture = capture
        logger.info("Camera opened", camera_index=self.index)

    def _read(self) -> np.ndarray:
        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise CameraUnavailableError(
                f"Camera {self.index} stopped delivering frames",
                details={"camera_index": self.index}
            )
        return frame

    async def read_frame(self) -> np.ndarray:
        """Grab the next frame without blocking the event loop."""
        if self._capture is None:
            raise CameraUnavailableError("Camera is not open", details={"camera_index": self.index})
        return await asyncio.to_thread(self._read)

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info("Camera released", camera_index=self.index)
