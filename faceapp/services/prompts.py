"""Name prompt implementations."""
import asyncio
import threading
from typing import Optional

from faceapp.core.logging import get_logger
from faceapp.domain.entities.face import Face
from faceapp.domain.interfaces.prompt import NamePrompt

logger = get_logger(__name__)


def _deliver(future: asyncio.Future, answer: Optional[str], error: Optional[Exception]) -> None:
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(answer)


class TerminalNamePrompt(NamePrompt):
    """Reads the name of an unknown face from standard input.

    The read runs on a daemon thread so the detection loop keeps polling
    while the user types, and a prompt cancelled on shutdown does not keep
    the process alive waiting for Enter.
    """

    def __init__(self, message: str = "Unknown face detected. Enter a name (leave blank to skip): ") -> None:
        self.message = message

    def _describe(self, face: Face) -> str:
        parts = []
        if face.age is not None:
            parts.append(f"{face.age:.0f} years")
        if face.gender:
            parts.append(face.gender)
        return f"[{', '.join(parts)}] " if parts else ""

    def _read_line(self, loop: asyncio.AbstractEventLoop, future: asyncio.Future, text: str) -> None:
        answer, error = None, None
        try:
            answer = input(text)
        except Exception as e:
            error = e
        try:
            loop.call_soon_threadsafe(_deliver, future, answer, error)
        except RuntimeError:
            # Event loop already closed, nobody is waiting for the answer
            pass

    async def request_name(self, face: Face) -> Optional[str]:
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        reader = threading.Thread(
            target=self._read_line,
            args=(loop, future, self._describe(face) + self.message),
            name="name-prompt",
            daemon=True,
        )
        reader.start()

        try:
            answer = await future
        except EOFError:
            logger.info("Standard input closed, skipping name prompt")
            return None
        except asyncio.CancelledError:
            logger.info("Name prompt cancelled")
            raise

        name = answer.strip()
        return name or None
