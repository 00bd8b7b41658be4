"""
Polling recognition session.

A session owns the detection loop: every ``interval`` seconds it grabs a
frame, runs face inference, matches the first face against enrolled
identities and, when nobody matches, asks for a name and enrolls the face.

Key behaviour:
    - Cycles never overlap. A cycle requested while another is running is
      reported as BUSY and skipped.
    - Store and inference failures end the current cycle only. The loop
      tries again on the next tick.
    - The name prompt runs as a separate task, so polling continues while
      the user answers. Only one prompt is outstanding at a time.
    - Camera failures are fatal and end the loop.

Example:
    ```python
    session = RecognitionSession(camera, detector, matcher, TerminalNamePrompt())
    async with session:
        await session.join()
    ```
"""
import asyncio
from typing import Any, Callable, Optional

import numpy as np

from faceapp.core.config import settings
from faceapp.core.exceptions import (
    DetectorError,
    InvalidDescriptorError,
    StoreUnavailableError,
)
from faceapp.core.logging import get_logger, log_context
from faceapp.domain.entities.face import Face
from faceapp.domain.entities.identity import IdentityRecord
from faceapp.domain.interfaces.prompt import NamePrompt
from faceapp.domain.interfaces.recognition.face_detector import FaceDetector
from faceapp.domain.value_objects.recognition import CycleOutcome, CycleReport
from faceapp.services.enrollment_gate import EnrollmentGate
from faceapp.services.identity_matcher import IdentityMatcher

logger = get_logger(__name__)

CycleCallback = Callable[[np.ndarray, CycleReport], None]


class RecognitionSession:
    """Runs detection-and-match cycles on a fixed cadence."""

    def __init__(
        self,
        camera: Any,
        detector: FaceDetector,
        matcher: IdentityMatcher,
        prompt: NamePrompt,
        interval: Optional[float] = None,
        on_cycle: Optional[CycleCallback] = None,
    ) -> None:
        """Initialize the session.

        Args:
            camera: Frame source exposing an async ``read_frame()``
            detector: Face inference backend
            matcher: Identity matcher over the descriptor store
            prompt: Asks the user to name unknown faces
            interval: Seconds between cycles, defaults to POLL_INTERVAL_SECONDS
            on_cycle: Called with the frame and report after every completed cycle
        """
        self.camera = camera
        self.detector = detector
        self.matcher = matcher
        self.prompt = prompt
        self.interval = settings.POLL_INTERVAL_SECONDS if interval is None else interval
        self.on_cycle = on_cycle

        self.gate = EnrollmentGate()
        self.prompt_count = 0
        self.cycle_count = 0
        self.last_report: Optional[CycleReport] = None

        self._cycle_lock = asyncio.Lock()
        self._poll_task: Optional[asyncio.Task] = None
        self._enrollment_task: Optional[asyncio.Task] = None

    async def __aenter__(self) -> "RecognitionSession":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()

    @property
    def running(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    @property
    def enrollment_in_flight(self) -> bool:
        return self._enrollment_task is not None and not self._enrollment_task.done()

    def start(self) -> None:
        """Start the polling loop."""
        if self.running:
            return
        logger.info("Starting recognition session", interval=self.interval)
        self._poll_task = asyncio.create_task(self._poll())

    async def stop(self) -> None:
        """Cancel the polling loop and any outstanding name prompt."""
        tasks = [
            task for task in (self._poll_task, self._enrollment_task)
            if task is not None and not task.done()
        ]
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._poll_task = None
        logger.info("Recognition session stopped", cycles_run=self.cycle_count, prompts_issued=self.prompt_count)

    async def join(self) -> None:
        """Wait for the polling loop to end, re-raising a fatal error."""
        if self._poll_task is not None:
            await self._poll_task

    async def wait_for_enrollment(self) -> Optional[IdentityRecord]:
        """Wait for the outstanding prompt and enrollment, if any."""
        if self._enrollment_task is None:
            return None
        return await self._enrollment_task

    async def _poll(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            started = loop.time()
            await self.run_cycle()
            elapsed = loop.time() - started
            await asyncio.sleep(max(0.0, self.interval - elapsed))

    async def run_cycle(self) -> CycleReport:
        """Run one detection-and-match cycle, or skip it if one is running.

        Raises:
            CameraUnavailableError: If no frame can be read
        """
        if self._cycle_lock.locked():
            logger.debug("Previous cycle still running, skipping tick")
            return CycleReport(outcome=CycleOutcome.BUSY)

        async with self._cycle_lock:
            self.cycle_count += 1
            # The enrollment task started by this cycle inherits the cycle number
            with log_context(cycle=self.cycle_count):
                frame = await self.camera.read_frame()
                try:
                    report = await self._process_frame(frame)
                except Exception as e:
                    logger.error("Recognition cycle failed", error=str(e), exc_info=True)
                    report = CycleReport(outcome=CycleOutcome.ERROR)

                self.last_report = report
                if self.on_cycle is not None:
                    try:
                        self.on_cycle(frame, report)
                    except Exception as e:
                        logger.error("Cycle callback failed", error=str(e), exc_info=True)
                return report

    async def _process_frame(self, frame: np.ndarray) -> CycleReport:
        try:
            detection = await self.detector.detect(frame)
        except DetectorError as e:
            logger.warning("Face detection failed, skipping cycle", error=str(e))
            return CycleReport(outcome=CycleOutcome.DETECTOR_FAILED)

        for face in detection.faces:
            logger.debug("Face landmarks", landmarks_count=len(face.landmarks), age=face.age, gender=face.gender)

        if not detection.has_face:
            self.gate.on_face_lost()
            return CycleReport(outcome=CycleOutcome.NO_FACE, detection=detection)

        face = detection.faces[0]
        if face.descriptor is None:
            logger.warning("Detected face has no descriptor, skipping cycle")
            return CycleReport(outcome=CycleOutcome.DETECTOR_FAILED, detection=detection)

        try:
            match = await self.matcher.match(face.descriptor)
        except StoreUnavailableError as e:
            logger.warning("Descriptor store unavailable, skipping cycle", error=str(e))
            return CycleReport(outcome=CycleOutcome.STORE_UNAVAILABLE, detection=detection)
        except InvalidDescriptorError as e:
            logger.warning("Detected face has an invalid descriptor", error=str(e), details=e.details)
            return CycleReport(outcome=CycleOutcome.DETECTOR_FAILED, detection=detection)

        if match is not None:
            logger.info("Recognized face", name=match.name, distance=round(match.distance, 4))
            return CycleReport(outcome=CycleOutcome.MATCHED, detection=detection, match=match)

        should_prompt = self.gate.on_unmatched()
        if not should_prompt or self.enrollment_in_flight:
            return CycleReport(outcome=CycleOutcome.AWAITING_NAME, detection=detection)

        self.prompt_count += 1
        logger.info("Unknown face, requesting a name", prompt_number=self.prompt_count)
        self._enrollment_task = asyncio.create_task(self._request_and_enroll(face))
        return CycleReport(outcome=CycleOutcome.PROMPTED, detection=detection)

    async def _request_and_enroll(self, face: Face) -> Optional[IdentityRecord]:
        try:
            name = await self.prompt.request_name(face)
        except Exception as e:
            logger.error("Name prompt failed", error=str(e), exc_info=True)
            return None

        if not name or not name.strip():
            # The gate stays armed: no new prompt until the face leaves the frame
            logger.info("Name prompt declined, skipping enrollment")
            return None

        try:
            return await self.matcher.enroll(name, face.descriptor)
        except StoreUnavailableError as e:
            logger.warning("Enrollment failed, will prompt again", name=name.strip(), error=str(e))
            self.gate.reset()
            return None
        except Exception as e:
            logger.error("Enrollment failed unexpectedly, will prompt again", name=name.strip(), error=str(e), exc_info=True)
            self.gate.reset()
            return None
