"""Service interfaces package."""
from .prompt import NamePrompt
from .recognition import FaceDetector
from .storage import DescriptorStore

__all__ = ["DescriptorStore", "FaceDetector", "NamePrompt"]
