"""Face recognition value objects."""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from faceapp.domain.entities.face import Face


class DetectionResult(BaseModel):
    """Result of face detection on a single frame."""
    faces: List[Face] = Field(..., description="List of detected faces")

    @property
    def has_face(self) -> bool:
        return bool(self.faces)


class MatchResult(BaseModel):
    """A stored identity matched against a live descriptor."""
    name: str = Field(..., description="Name of the matched identity")
    distance: float = Field(..., description="Euclidean distance to the stored descriptor", ge=0.0)
    record_id: Optional[str] = Field(None, description="Store identifier of the matched record")


class CycleOutcome(str, Enum):
    """What a single detection-and-match cycle ended with."""
    NO_FACE = "no_face"
    MATCHED = "matched"
    PROMPTED = "prompted"
    AWAITING_NAME = "awaiting_name"
    BUSY = "busy"
    STORE_UNAVAILABLE = "store_unavailable"
    DETECTOR_FAILED = "detector_failed"
    ERROR = "error"


class CycleReport(BaseModel):
    """Summary of a detection-and-match cycle."""
    outcome: CycleOutcome = Field(..., description="How the cycle ended")
    detection: Optional[DetectionResult] = Field(None, description="Faces seen during the cycle")
    match: Optional[MatchResult] = Field(None, description="Identity matched for the first face")
