"""Identity record entity."""
from datetime import datetime
from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from faceapp.core.utils.descriptors import as_descriptor


class IdentityRecord(BaseModel):
    """A named face descriptor as persisted in the descriptor store.

    Records are immutable: the model is frozen and the descriptor array is
    read-only.
    """
    name: str = Field(..., min_length=1, description="Display name supplied at enrollment")
    descriptor: np.ndarray = Field(..., description="Face descriptor vector")
    created_at: datetime = Field(..., description="Enrollment timestamp")
    record_id: Optional[str] = Field(None, description="Store-assigned document identifier")

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @field_validator('descriptor', mode='before')
    @classmethod
    def validate_descriptor(cls, v) -> np.ndarray:
        return as_descriptor(v)
