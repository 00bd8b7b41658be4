"""Firestore storage package."""
from .descriptor_store import FirestoreDescriptorStore

__all__ = ["FirestoreDescriptorStore"]
