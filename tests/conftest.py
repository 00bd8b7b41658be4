"""Shared fixtures and fakes for the face app tests."""
import asyncio
from typing import List, Optional, Sequence

import numpy as np
import pytest

from faceapp.core.exceptions import CameraUnavailableError
from faceapp.domain.entities.face import BoundingBox, Face
from faceapp.domain.interfaces.prompt import NamePrompt
from faceapp.domain.interfaces.recognition.face_detector import FaceDetector
from faceapp.domain.value_objects.recognition import DetectionResult
from faceapp.infrastructure.storage.memory import InMemoryDescriptorStore
from faceapp.services.identity_matcher import IdentityMatcher

DIM = 128


def axis_descriptor(*offsets: float, base: Optional[np.ndarray] = None) -> np.ndarray:
    """Descriptor whose i-th coordinate is offsets[i] added to base.

    Moving along a single axis keeps Euclidean distances exact.
    """
    vector = np.zeros(DIM) if base is None else np.array(base, dtype=np.float64)
    for i, offset in enumerate(offsets):
        vector[i] += offset
    return vector


def make_face(descriptor: Optional[np.ndarray]) -> Face:
    return Face(
        confidence=0.99,
        bounding_box=BoundingBox(left=0.25, top=0.2, width=0.3, height=0.4),
        landmarks=[(0.3, 0.3), (0.45, 0.3)],
        age=31.0,
        gender="female",
        descriptor=descriptor,
    )


class FakeCamera:
    """Frame source returning blank frames."""

    def __init__(self, fail: bool = False) -> None:
        self.reads = 0
        self.fail = fail

    async def read_frame(self) -> np.ndarray:
        self.reads += 1
        if self.fail:
            raise CameraUnavailableError("camera unplugged")
        return np.zeros((48, 64, 3), dtype=np.uint8)


class ScriptedDetector(FaceDetector):
    """Returns one face per scripted descriptor; None means an empty frame."""

    def __init__(self, script: Sequence[Optional[np.ndarray]] = ()) -> None:
        self.script: List[Optional[np.ndarray]] = list(script)
        self.calls = 0
        # Repeat the last entry once the script runs out
        self._last: Optional[np.ndarray] = None

    async def detect(self, frame: np.ndarray) -> DetectionResult:
        self.calls += 1
        if self.script:
            self._last = self.script.pop(0)
        if self._last is None:
            return DetectionResult(faces=[])
        return DetectionResult(faces=[make_face(self._last)])


class ScriptedPrompt(NamePrompt):
    """Answers prompts from a list of names; None means declined."""

    def __init__(self, answers: Sequence[Optional[str]] = ()) -> None:
        self.answers = list(answers)
        self.calls = 0
        self.release = asyncio.Event()
        self.release.set()

    async def request_name(self, face: Face) -> Optional[str]:
        self.calls += 1
        await self.release.wait()
        return self.answers.pop(0) if self.answers else None


@pytest.fixture
def store() -> InMemoryDescriptorStore:
    return InMemoryDescriptorStore()


@pytest.fixture
def matcher(store) -> IdentityMatcher:
    return IdentityMatcher(store=store, threshold=0.6, strategy="first", descriptor_length=DIM)
