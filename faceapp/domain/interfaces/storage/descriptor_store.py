"""Descriptor store interface for identity records."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

import numpy as np

from ...entities.identity import IdentityRecord


class DescriptorStore(ABC):
    """Interface for reading and appending identity records.

    The store is append-only: records are never updated or deleted through
    this interface.
    """

    @abstractmethod
    async def fetch_all(self) -> List[IdentityRecord]:
        """
        Read every stored identity record.

        Returns:
            All records, in no particular order

        Raises:
            StoreUnavailableError: If the store cannot be reached or rejects the read
        """
        pass

    @abstractmethod
    async def append(
        self,
        name: str,
        descriptor: np.ndarray,
        timestamp: datetime,
    ) -> IdentityRecord:
        """
        Persist a new identity record.

        Args:
            name: Display name for the identity
            descriptor: Face descriptor vector
            timestamp: Enrollment time

        Returns:
            The stored record, including its store-assigned identifier

        Raises:
            StoreUnavailableError: If the store cannot be reached or rejects the write
        """
        pass
