"""CLI tool that recognizes faces on a live webcam feed."""
import argparse
import asyncio
import sys
from typing import Optional

import cv2
import numpy as np

from faceapp.core.config import settings
from faceapp.core.container import ServiceContainer, create_descriptor_store
from faceapp.core.exceptions import CameraUnavailableError, FaceAppError
from faceapp.core.logging import bind_log_context, get_logger, setup_logging
from faceapp.core.utils.drawing import draw_overlays
from faceapp.domain.value_objects.recognition import CycleReport
from faceapp.infrastructure.camera.opencv_camera import OpenCVCamera
from faceapp.services.prompts import TerminalNamePrompt
from faceapp.services.recognition_session import RecognitionSession

logger = get_logger(__name__)

WINDOW_NAME = "Face App"


class OverlayWindow:
    """Keeps the latest annotated frame and shows it in an OpenCV window."""

    def __init__(self) -> None:
        self.latest: Optional[np.ndarray] = None
        self._shown: Optional[np.ndarray] = None

    def on_cycle(self, frame: np.ndarray, report: CycleReport) -> None:
        faces = report.detection.faces if report.detection else []
        names = {0: report.match.name} if report.match else {}
        self.latest = draw_overlays(frame, faces, names)

    def refresh(self) -> bool:
        """Show the latest frame. Returns False when the user pressed q."""
        if self.latest is not None and self.latest is not self._shown:
            cv2.imshow(WINDOW_NAME, self.latest)
            self._shown = self.latest
        return (cv2.waitKey(30) & 0xFF) != ord("q")


async def watch(camera_index: int, interval: float, store_backend: str, show_window: bool) -> None:
    """
    Run a recognition session against the webcam until interrupted.

    Args:
        camera_index: OpenCV device index
        interval: Seconds between detection cycles
        store_backend: "firestore" or "memory"
        show_window: Whether to display annotated frames
    """
    services = ServiceContainer()
    await services.initialize(store=create_descriptor_store(store_backend), with_detector=True)

    window = OverlayWindow() if show_window else None
    with OpenCVCamera(camera_index) as camera:
        session = RecognitionSession(
            camera=camera,
            detector=services.face_detector,
            matcher=services.identity_matcher,
            prompt=TerminalNamePrompt(),
            interval=interval,
            on_cycle=window.on_cycle if window else None,
        )
        try:
            async with session:
                while session.running:
                    if window is not None and not window.refresh():
                        logger.info("Quit requested from window")
                        break
                    await asyncio.sleep(0.03)
                # Surface a fatal camera error from the loop
                if not session.running:
                    await session.join()
        finally:
            if window is not None:
                cv2.destroyAllWindows()
            await services.cleanup()


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Recognize and enroll faces from a webcam")
    parser.add_argument("--camera", type=int, default=settings.CAMERA_INDEX, help="Camera device index")
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.POLL_INTERVAL_SECONDS,
        help="Seconds between detection cycles"
    )
    parser.add_argument(
        "--store",
        choices=["firestore", "memory"],
        default=settings.STORE_BACKEND,
        help="Where enrolled identities are kept"
    )
    parser.add_argument("--no-window", action="store_true", help="Don't display annotated frames")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Log level, e.g. DEBUG")
    args = parser.parse_args()

    setup_logging(level=args.log_level)
    bind_log_context(camera_index=args.camera, store=args.store)
    try:
        asyncio.run(watch(args.camera, args.interval, args.store, not args.no_window))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except CameraUnavailableError as e:
        logger.error("Camera unavailable", error=str(e), **e.details)
        sys.exit(1)
    except FaceAppError as e:
        logger.error("Face app failed to start", error=str(e), exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
