"""User input interface for naming unknown faces."""
from abc import ABC, abstractmethod
from typing import Optional

from ..entities.face import Face


class NamePrompt(ABC):
    """Asks the user who an unrecognized face belongs to."""

    @abstractmethod
    async def request_name(self, face: Face) -> Optional[str]:
        """
        Ask for the name of an unrecognized face.

        Args:
            face: The face that failed to match any stored identity

        Returns:
            The entered name, or None if the user declined or cancelled
        """
        pass
