"""Enrollment gate for unrecognized faces."""
from enum import Enum

from faceapp.core.logging import get_logger

logger = get_logger(__name__)


class GateState(str, Enum):
    IDLE = "idle"
    PROMPT_PENDING = "prompt_pending"


class EnrollmentGate:
    """Tracks whether the current unmatched face has already been prompted for.

    The gate opens again only when the face leaves the frame, so a face that
    stays in view unmatched is asked for its name once. A successful match
    does not change the state.
    """

    def __init__(self) -> None:
        self.state = GateState.IDLE

    @property
    def is_pending(self) -> bool:
        return self.state is GateState.PROMPT_PENDING

    def on_unmatched(self) -> bool:
        """Register an unmatched face. Returns True if a prompt should be issued."""
        if self.state is GateState.PROMPT_PENDING:
            return False
        self.state = GateState.PROMPT_PENDING
        logger.debug("Enrollment gate armed")
        return True

    def on_face_lost(self) -> None:
        if self.state is GateState.PROMPT_PENDING:
            logger.debug("Face left the frame, enrollment gate reset")
        self.state = GateState.IDLE

    def reset(self) -> None:
        self.state = GateState.IDLE
