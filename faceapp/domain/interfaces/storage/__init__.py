"""Storage interfaces package."""
from .descriptor_store import DescriptorStore

__all__ = ["DescriptorStore"]
