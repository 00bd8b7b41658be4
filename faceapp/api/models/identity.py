"""API specific identity models."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from faceapp.domain.entities.identity import IdentityRecord
from faceapp.domain.value_objects.recognition import MatchResult


class MatchRequest(BaseModel):
    """Request model for the /identities/match endpoint."""
    descriptor: List[float] = Field(
        ...,
        description="Face descriptor of the live face",
        min_length=1
    )


class MatchResponse(BaseModel):
    """Response model for the /identities/match endpoint."""
    matched: bool = Field(..., description="Whether an enrolled identity matched")
    name: Optional[str] = Field(None, description="Name of the matched identity")
    distance: Optional[float] = Field(None, description="Euclidean distance to the matched descriptor")

    @classmethod
    def from_match(cls, match: Optional[MatchResult]) -> "MatchResponse":
        if match is None:
            return cls(matched=False)
        return cls(matched=True, name=match.name, distance=match.distance)


class EnrollRequest(BaseModel):
    """Request model for enrolling a new identity."""
    name: str = Field(..., description="Display name for the identity", min_length=1, max_length=100)
    descriptor: List[float] = Field(
        ...,
        description="Face descriptor to store",
        min_length=1
    )


class IdentitySummary(BaseModel):
    """API model for a stored identity (descriptor omitted)."""
    record_id: Optional[str] = Field(None, description="Store identifier of the record")
    name: str = Field(..., description="Display name")
    created_at: datetime = Field(..., description="Enrollment timestamp")

    @classmethod
    def from_record(cls, record: IdentityRecord) -> "IdentitySummary":
        return cls(record_id=record.record_id, name=record.name, created_at=record.created_at)


class IdentityListResponse(BaseModel):
    """Response model for listing identities."""
    identities: List[IdentitySummary] = Field(..., description="Enrolled identities")
