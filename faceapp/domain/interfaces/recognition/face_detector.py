"""Face detector interface."""
from abc import ABC, abstractmethod

import numpy as np

from ...value_objects.recognition import DetectionResult


class FaceDetector(ABC):
    """Interface for face inference on video frames."""

    @abstractmethod
    async def detect(self, frame: np.ndarray) -> DetectionResult:
        """
        Detect faces in a frame and compute their attributes.

        Args:
            frame: BGR image as produced by the camera

        Returns:
            DetectionResult with zero or more faces. Faces carry a descriptor
            when the model computes one.

        Raises:
            DetectorError: If inference fails on this frame
        """
        pass
