"""
InsightFace-based implementation of the face detector.

Runs the ``buffalo_l`` model pack on video frames: detection, 5-point
landmarks, age/gender estimation and a 512-dimensional descriptor per face.
Each face crop can also be scored for facial expressions.
Descriptors are the L2-normalized embeddings, so Euclidean distances between
them fall in the 0-2 range.

Example:
    ```python
    detector = InsightFaceDetector()
    result = await detector.detect(frame)
    ```

Note:
    This implementation uses CPU inference by default. For GPU support,
    pass 'CUDAExecutionProvider' in ``providers``.
"""
import asyncio
from typing import Any, Dict, List, Optional

import numpy as np
from insightface.app import FaceAnalysis
from insightface.app.common import Face as InsightFace

from faceapp.core.config import settings
from faceapp.core.exceptions import DetectorError, ModelLoadError
from faceapp.core.logging import get_logger
from faceapp.domain.entities.face import BoundingBox, Face
from faceapp.domain.interfaces.recognition.face_detector import FaceDetector
from faceapp.domain.value_objects.recognition import DetectionResult

logger = get_logger(__name__)

GENDER_LABELS = {1: "male", 0: "female"}


class InsightFaceDetector(FaceDetector):
    """
    InsightFace-based face detector.

    Attributes:
        model: InsightFace model instance for face analysis
        min_confidence: Detections scoring below this are dropped
        expression_classifier: Scores face crops for expressions, or None
    """

    def __init__(
        self,
        model: Optional[Any] = None,
        min_confidence: Optional[float] = None,
        providers: Optional[List[str]] = None,
        expression_classifier: Optional[Any] = None,
    ) -> None:
        """Load the InsightFace model pack.

        Args:
            model: Prepared FaceAnalysis instance, loaded from settings when omitted
            min_confidence: Minimum detection score, defaults to MIN_FACE_CONFIDENCE
            providers: ONNX Runtime execution providers
            expression_classifier: Object with ``classify(face_image)`` returning
                expression scores. When omitted, a DeepFace classifier is loaded
                alongside the model pack if DETECT_EXPRESSIONS is set.
        """
        self.min_confidence = settings.MIN_FACE_CONFIDENCE if min_confidence is None else min_confidence
        self.expression_classifier = expression_classifier
        if model is not None:
            self.model = model
            return

        try:
            self.model = FaceAnalysis(
                name=settings.MODEL_NAME,
                root=settings.MODEL_CACHE_DIR,
                providers=providers or ['CPUExecutionProvider']
            )
            self.model.prepare(ctx_id=0, det_size=(settings.DETECTION_SIZE, settings.DETECTION_SIZE))
        except Exception as e:
            logger.error("Failed to load face model", model=settings.MODEL_NAME, error=str(e), exc_info=True)
            raise ModelLoadError(f"Failed to load face model {settings.MODEL_NAME}: {str(e)}")

        logger.info("Face model loaded", model=settings.MODEL_NAME, det_size=settings.DETECTION_SIZE)

        if self.expression_classifier is None and settings.DETECT_EXPRESSIONS:
            try:
                from faceapp.services.recognition.expressions import DeepFaceExpressionClassifier
                self.expression_classifier = DeepFaceExpressionClassifier()
            except Exception as e:
                logger.error("Failed to load expression model", error=str(e), exc_info=True)
                raise ModelLoadError(f"Failed to load expression model: {str(e)}")
            logger.info("Expression model loaded")

    def _score_expressions(self, frame: np.ndarray, face_data: InsightFace) -> Optional[Dict[str, float]]:
        """Run the expression classifier on the face crop. Failures leave the face unscored."""
        height, width = frame.shape[:2]
        x1, y1, x2, y2 = [int(round(float(v))) for v in face_data.bbox]
        crop = frame[max(0, y1):min(height, y2), max(0, x1):min(width, x2)]
        if crop.size == 0:
            return None

        try:
            return self.expression_classifier.classify(crop)
        except Exception as e:
            logger.warning("Expression scoring failed", error=str(e))
            return None

    def _convert_to_face(
        self,
        face_data: InsightFace,
        height: int,
        width: int,
        expressions: Optional[Dict[str, float]] = None,
    ) -> Face:
        """Convert an InsightFace result to the Face domain model with relative coordinates."""
        x1, y1, x2, y2 = [float(v) for v in face_data.bbox]
        bounding_box = BoundingBox(
            left=max(0.0, x1 / width),
            top=max(0.0, y1 / height),
            width=(x2 - x1) / width,
            height=(y2 - y1) / height
        )

        kps = face_data.get("kps")
        landmarks = [(float(x / width), float(y / height)) for x, y in kps] if kps is not None else []

        gender = face_data.get("gender")
        age = face_data.get("age")
        descriptor = face_data.normed_embedding if face_data.get("embedding") is not None else None

        return Face(
            confidence=float(face_data.det_score),
            bounding_box=bounding_box,
            landmarks=landmarks,
            expressions=expressions,
            age=float(age) if age is not None else None,
            gender=GENDER_LABELS.get(int(gender)) if gender is not None else None,
            descriptor=np.asarray(descriptor, dtype=np.float64) if descriptor is not None else None,
        )

    def _analyze(self, frame: np.ndarray) -> List[Face]:
        height, width = frame.shape[:2]
        faces = []
        for face_data in self.model.get(frame):
            if float(face_data.det_score) < self.min_confidence:
                continue
            expressions = None
            if self.expression_classifier is not None:
                expressions = self._score_expressions(frame, face_data)
            faces.append(self._convert_to_face(face_data, height, width, expressions))
        return faces

    async def detect(self, frame: np.ndarray) -> DetectionResult:
        """Detect faces off the event loop thread."""
        if frame is None or frame.ndim != 3:
            raise DetectorError("Frame must be a 3-channel image")

        try:
            faces = await asyncio.to_thread(self._analyze, frame)
        except Exception as e:
            logger.error(
                "Face processing failed",
                error=str(e),
                frame_shape=frame.shape,
                exc_info=True
            )
            raise DetectorError(f"Face processing failed: {str(e)}")

        # Largest face first, so the matcher sees the most prominent person
        faces.sort(key=lambda f: f.bounding_box.width * f.bounding_box.height, reverse=True)
        logger.debug("Face detection results", faces_found=len(faces))
        return DetectionResult(faces=faces)
