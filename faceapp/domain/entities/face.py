"""Core face domain entities."""
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
from pydantic import BaseModel, Field, field_validator, ConfigDict


class BoundingBox(BaseModel):
    """Face bounding box coordinates, relative to frame size (0-1)."""
    left: float = Field(..., description="Left coordinate of the bounding box")
    top: float = Field(..., description="Top coordinate of the bounding box")
    width: float = Field(..., description="Width of the bounding box")
    height: float = Field(..., description="Height of the bounding box")

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


class Face(BaseModel):
    """Face detection result with optional attributes and descriptor."""
    confidence: float = Field(..., description="Confidence score of the detection")
    bounding_box: BoundingBox = Field(..., description="Bounding box coordinates")
    landmarks: List[Tuple[float, float]] = Field(
        default_factory=list, description="Landmark points, relative to frame size"
    )
    expressions: Optional[Dict[str, float]] = Field(None, description="Expression scores by label")
    age: Optional[float] = Field(None, description="Estimated age in years")
    gender: Optional[str] = Field(None, description="Estimated gender")
    descriptor: Optional[np.ndarray] = Field(None, description="Face descriptor vector")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator('descriptor')
    @classmethod
    def validate_descriptor(cls, v: Optional[Union[np.ndarray, list]]) -> Optional[np.ndarray]:
        """Validate and convert descriptor to numpy array if needed."""
        if v is None:
            return None
        if isinstance(v, list):
            return np.array(v, dtype=np.float64)
        return v
