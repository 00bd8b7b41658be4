"""Tests for the OpenCV camera frame source."""
import numpy as np
import pytest

from faceapp.core.exceptions import CameraUnavailableError
from faceapp.infrastructure.camera import opencv_camera
from faceapp.infrastructure.camera.opencv_camera import OpenCVCamera


class FakeCapture:
    """Stands in for cv2.VideoCapture."""

    instances = []

    def __init__(self, index, opened=True, frames=None):
        self.index = index
        self.opened = opened
        self.frames = list(frames or [])
        self.releases = 0
        FakeCapture.instances.append(self)

    def isOpened(self):
        return self.opened

    def read(self):
        if not self.frames:
            return False, None
        return True, self.frames.pop(0)

    def release(self):
        self.releases += 1


@pytest.fixture
def capture_factory(monkeypatch):
    FakeCapture.instances = []

    def install(**kwargs):
        monkeypatch.setattr(opencv_camera.cv2, "VideoCapture", lambda index: FakeCapture(index, **kwargs))
        return FakeCapture.instances

    return install


def test_open_failure_raises_and_releases_the_device(capture_factory):
    captures = capture_factory(opened=False)
    camera = OpenCVCamera(index=3)

    with pytest.raises(CameraUnavailableError) as exc_info:
        camera.open()

    assert exc_info.value.details == {"camera_index": 3}
    assert captures[0].index == 3
    assert captures[0].releases == 1


def test_context_manager_propagates_open_failure(capture_factory):
    capture_factory(opened=False)

    with pytest.raises(CameraUnavailableError):
        with OpenCVCamera(index=0):
            pass


async def test_read_frame_returns_frames(capture_factory):
    frame = np.zeros((48, 64, 3), dtype=np.uint8)
    capture_factory(frames=[frame])

    with OpenCVCamera(index=0) as camera:
        assert await camera.read_frame() is frame


async def test_failed_read_raises(capture_factory):
    capture_factory(frames=[])

    with OpenCVCamera(index=1) as camera:
        with pytest.raises(CameraUnavailableError) as exc_info:
            await camera.read_frame()

    assert exc_info.value.details == {"camera_index": 1}


async def test_read_before_open_raises():
    camera = OpenCVCamera(index=0)

    with pytest.raises(CameraUnavailableError):
        await camera.read_frame()


def test_release_is_idempotent(capture_factory):
    captures = capture_factory()
    camera = OpenCVCamera(index=0)
    camera.open()

    camera.release()
    camera.release()

    assert captures[0].releases == 1
