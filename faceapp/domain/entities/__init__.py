"""Domain entities package."""
from .face import BoundingBox, Face
from .identity import IdentityRecord

__all__ = ["BoundingBox", "Face", "IdentityRecord"]
