"""Custom exceptions for the face app."""
from typing import Optional


class FaceAppError(Exception):
    """Base exception for face app operations."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize face app error.

        Args:
            message: Error description
            details: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StoreUnavailableError(FaceAppError):
    """Raised when the descriptor store cannot be reached or rejects the request."""
    pass


class InvalidDescriptorError(FaceAppError):
    """Raised when a face descriptor has the wrong shape, length or values."""
    pass


class EmptyNameError(FaceAppError):
    """Raised when an enrollment is attempted without a usable name."""
    pass


class DetectorError(FaceAppError):
    """Raised when face inference fails on a frame."""
    pass


class ModelLoadError(DetectorError):
    """Raised when the face recognition model fails to load."""
    pass


class CameraUnavailableError(FaceAppError):
    """Raised when the camera cannot be opened or stops delivering frames."""
    pass


class ServiceNotInitializedError(FaceAppError):
    """Raised when a service is requested before the container is initialized."""
    pass
