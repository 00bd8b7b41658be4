"""
Overlay drawing for annotated video frames.
"""
from typing import Dict, List, Optional, Tuple

import cv2
import numpy as np

from faceapp.core.config import settings
from faceapp.domain.entities.face import Face

BOX_COLOR = (0, 180, 0)  # Darker green
LANDMARK_COLOR = (0, 220, 255)
TEXT_COLOR = (255, 255, 255)
FONT = cv2.FONT_HERSHEY_SIMPLEX


def _draw_label(
    image: np.ndarray,
    text: str,
    origin: Tuple[int, int],
    font_scale: float = 0.5,
    thickness: int = 1,
    padding: int = 4,
) -> None:
    """Draw text on a filled box whose top-left corner is at origin."""
    (text_width, text_height), baseline = cv2.getTextSize(text, FONT, font_scale, thickness)
    x, y = origin
    cv2.rectangle(
        image,
        (x, y),
        (x + text_width + padding * 2, y + text_height + baseline + padding * 2),
        BOX_COLOR,
        -1
    )
    cv2.putText(
        image,
        text,
        (x + padding, y + text_height + padding),
        FONT,
        font_scale,
        TEXT_COLOR,
        thickness
    )


def draw_overlays(
    frame: np.ndarray,
    faces: List[Face],
    names: Optional[Dict[int, str]] = None,
    size: Optional[Tuple[int, int]] = None,
) -> np.ndarray:
    """
    Draw detections, landmarks, age/gender and names on a copy of the frame.

    Args:
        frame: Original BGR frame
        faces: Faces detected in the frame (relative coordinates)
        names: Recognized names keyed by face index
        size: Output (width, height), defaults to CANVAS_WIDTH x CANVAS_HEIGHT

    Returns:
        numpy.ndarray: Annotated frame at the requested size
    """
    width, height = size or (settings.CANVAS_WIDTH, settings.CANVAS_HEIGHT)
    canvas = cv2.resize(frame, (width, height), interpolation=cv2.INTER_AREA)
    names = names or {}

    for i, face in enumerate(faces):
        bbox = face.bounding_box
        x1, y1 = int(bbox.left * width), int(bbox.top * height)
        x2, y2 = int(bbox.right * width), int(bbox.bottom * height)

        cv2.rectangle(canvas, (x1, y1), (x2, y2), BOX_COLOR, 2)

        for lx, ly in face.landmarks:
            cv2.circle(canvas, (int(lx * width), int(ly * height)), 2, LANDMARK_COLOR, -1)

        name = names.get(i)
        if name:
            _draw_label(canvas, name, (x1, max(0, y1 - 24)))

        if face.expressions:
            expression, score = max(face.expressions.items(), key=lambda item: item[1])
            _draw_label(canvas, f"{expression} ({score:.2f})", (x1, min(height - 20, y2 + 2)))

        if face.age is not None and face.gender:
            _draw_label(canvas, f"{face.age:.0f} years, {face.gender}", (x2, y2))

    return canvas
