"""Service container for dependency injection."""
from typing import Optional

from faceapp.core.config import settings
from faceapp.core.logging import get_logger
from faceapp.domain.interfaces.recognition.face_detector import FaceDetector
from faceapp.domain.interfaces.storage.descriptor_store import DescriptorStore
from faceapp.services.identity_matcher import IdentityMatcher

logger = get_logger(__name__)


def create_descriptor_store(backend: Optional[str] = None) -> DescriptorStore:
    """Build the descriptor store selected by STORE_BACKEND."""
    backend = backend or settings.STORE_BACKEND
    if backend == "memory":
        from faceapp.infrastructure.storage.memory import InMemoryDescriptorStore
        return InMemoryDescriptorStore()
    if backend == "firestore":
        from faceapp.infrastructure.storage.firestore import FirestoreDescriptorStore
        return FirestoreDescriptorStore()
    raise ValueError(f"Unknown store backend: {backend}")


class ServiceContainer:
    """Container for application services.

    Example:
        ```python
        container = ServiceContainer()
        await container.initialize()

        matcher = container.identity_matcher
        ```
    """

    def __init__(self) -> None:
        """Initialize empty container."""
        self.descriptor_store: Optional[DescriptorStore] = None
        self.face_detector: Optional[FaceDetector] = None
        self.identity_matcher: Optional[IdentityMatcher] = None

    @property
    def initialized(self) -> bool:
        return self.identity_matcher is not None

    async def initialize(
        self,
        store: Optional[DescriptorStore] = None,
        with_detector: bool = False,
    ) -> None:
        """Initialize all services in the correct order.

        Args:
            store: Descriptor store to use instead of the configured backend
            with_detector: Also load the face model (needed for camera sessions)
        """
        self.descriptor_store = store or create_descriptor_store()
        self.identity_matcher = IdentityMatcher(store=self.descriptor_store)

        if with_detector:
            from faceapp.services.recognition.insight_face import InsightFaceDetector
            self.face_detector = InsightFaceDetector()

        logger.info(
            "Services initialized",
            store=type(self.descriptor_store).__name__,
            detector=type(self.face_detector).__name__ if self.face_detector else None,
            threshold=self.identity_matcher.threshold,
            strategy=self.identity_matcher.strategy
        )

    async def cleanup(self) -> None:
        """Cleanup all services in reverse order of initialization."""
        self.face_detector = None
        self.identity_matcher = None
        self.descriptor_store = None


# Global container instance
container = ServiceContainer()
