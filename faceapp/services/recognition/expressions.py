"""
Facial expression scoring with DeepFace.

The detector hands over each face already cropped from the frame, so
DeepFace's own detection step is skipped. Scores come back as percentages
and are scaled to the 0-1 range.
"""
from typing import Dict, Optional

import numpy as np
from deepface import DeepFace

from faceapp.core.logging import get_logger

logger = get_logger(__name__)


class DeepFaceExpressionClassifier:
    """Scores angry, disgust, fear, happy, sad, surprise and neutral for a face crop."""

    def classify(self, face_image: np.ndarray) -> Optional[Dict[str, float]]:
        """Return expression scores for a BGR face crop, or None if DeepFace has none."""
        results = DeepFace.analyze(
            img_path=face_image,
            actions=("emotion",),
            enforce_detection=False,
            detector_backend="skip",
            silent=True,
        )
        # Older releases return a dict, newer ones a list with one entry per face
        if isinstance(results, dict):
            results = [results]
        if not results:
            return None

        emotion = results[0].get("emotion")
        if not emotion:
            return None
        return {label: float(score) / 100.0 for label, score in emotion.items()}
