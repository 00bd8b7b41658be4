"""In-memory descriptor store for offline runs and tests."""
import uuid
from datetime import datetime
from typing import List, Optional

import numpy as np

from faceapp.core.exceptions import StoreUnavailableError
from faceapp.core.logging import get_logger
from faceapp.domain.entities.identity import IdentityRecord
from faceapp.domain.interfaces.storage.descriptor_store import DescriptorStore

logger = get_logger(__name__)


class InMemoryDescriptorStore(DescriptorStore):
    """Append-only list of identity records held in process memory."""

    def __init__(self, records: Optional[List[IdentityRecord]] = None) -> None:
        self._records: List[IdentityRecord] = list(records or [])
        # Set to an error message to make every call fail
        self.fail_with: Optional[str] = None
        self.fetch_calls = 0
        self.append_calls = 0

    def _check_available(self) -> None:
        if self.fail_with is not None:
            raise StoreUnavailableError(self.fail_with)

    async def fetch_all(self) -> List[IdentityRecord]:
        self.fetch_calls += 1
        self._check_available()
        return list(self._records)

    async def append(
        self,
        name: str,
        descriptor: np.ndarray,
        timestamp: datetime,
    ) -> IdentityRecord:
        self.append_calls += 1
        self._check_available()
        record = IdentityRecord(
            name=name,
            descriptor=descriptor,
            created_at=timestamp,
            record_id=uuid.uuid4().hex,
        )
        self._records.append(record)
        logger.debug("Stored identity record in memory", name=name, record_id=record.record_id)
        return record
