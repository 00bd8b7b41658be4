"""Recognition interfaces package."""
from .face_detector import FaceDetector

__all__ = ["FaceDetector"]
