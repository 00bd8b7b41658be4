"""Identity matching service for recognizing returning faces."""
from datetime import datetime, timezone
from typing import List, Optional

import numpy as np

from faceapp.core.config import settings
from faceapp.core.exceptions import EmptyNameError
from faceapp.core.logging import get_logger
from faceapp.core.utils.descriptors import DescriptorLike, as_descriptor, euclidean_distance
from faceapp.domain.entities.identity import IdentityRecord
from faceapp.domain.interfaces.storage.descriptor_store import DescriptorStore
from faceapp.domain.value_objects.recognition import MatchResult

logger = get_logger(__name__)

MATCH_STRATEGIES = ("nearest", "first")


class IdentityMatcher:
    """Matches live face descriptors against enrolled identities.

    Every call to ``match`` re-reads the whole collection from the store and
    compares the live descriptor to each record by Euclidean distance. A
    record is a candidate when its distance is strictly below the threshold.

    Example:
        ```python
        matcher = IdentityMatcher(store=InMemoryDescriptorStore())

        result = await matcher.match(descriptor)
        if result is None:
            await matcher.enroll("Alice", descriptor)
        ```
    """

    def __init__(
        self,
        store: DescriptorStore,
        threshold: Optional[float] = None,
        strategy: Optional[str] = None,
        descriptor_length: Optional[int] = None,
    ) -> None:
        """Initialize the identity matcher.

        Args:
            store: Descriptor store holding enrolled identities
            threshold: Distance cutoff, defaults to MATCH_THRESHOLD
            strategy: "nearest" or "first", defaults to MATCH_STRATEGY
            descriptor_length: Required descriptor size, defaults to DESCRIPTOR_LENGTH
        """
        self.store = store
        self.threshold = settings.MATCH_THRESHOLD if threshold is None else threshold
        self.strategy = strategy or settings.MATCH_STRATEGY
        self.descriptor_length = descriptor_length or settings.DESCRIPTOR_LENGTH

        if self.threshold <= 0:
            raise ValueError(f"Match threshold must be positive, got {self.threshold}")
        if self.strategy not in MATCH_STRATEGIES:
            raise ValueError(f"Unknown match strategy: {self.strategy}")

        # Identities enrolled by this process, kept until the store returns them
        self._recent: List[IdentityRecord] = []

    def _merge_recent(self, records: List[IdentityRecord]) -> List[IdentityRecord]:
        """Append recently enrolled records the store has not returned yet."""
        if not self._recent:
            return records

        stored_ids = {record.record_id for record in records if record.record_id}
        still_missing = []
        for recent in self._recent:
            if recent.record_id and recent.record_id in stored_ids:
                continue
            if any(
                record.name == recent.name and np.array_equal(record.descriptor, recent.descriptor)
                for record in records
            ):
                continue
            still_missing.append(recent)

        # Forget records once the store has caught up
        self._recent = still_missing
        return records + still_missing

    async def match(self, live_descriptor: DescriptorLike) -> Optional[MatchResult]:
        """Find the enrolled identity for a live descriptor.

        Args:
            live_descriptor: Descriptor of the face currently in frame

        Returns:
            MatchResult for the selected candidate, or None if no stored
            descriptor is closer than the threshold

        Raises:
            InvalidDescriptorError: If the live descriptor is malformed
            StoreUnavailableError: If the store cannot be read
        """
        live = as_descriptor(live_descriptor, self.descriptor_length)
        records = self._merge_recent(await self.store.fetch_all())

        best: Optional[MatchResult] = None
        for record in records:
            if record.descriptor.shape != live.shape:
                logger.warning(
                    "Skipping identity with mismatched descriptor length",
                    name=record.name,
                    record_id=record.record_id,
                    expected=live.size,
                    actual=record.descriptor.size
                )
                continue

            distance = euclidean_distance(live, record.descriptor)
            if distance >= self.threshold:
                continue

            candidate = MatchResult(name=record.name, distance=distance, record_id=record.record_id)
            if self.strategy == "first":
                best = candidate
                break
            if best is None or distance < best.distance:
                best = candidate

        logger.debug(
            "Identity match completed",
            records_count=len(records),
            matched=best is not None,
            name=best.name if best else None,
            distance=best.distance if best else None,
            strategy=self.strategy
        )
        return best

    async def enroll(self, name: str, live_descriptor: DescriptorLike) -> IdentityRecord:
        """Persist a new identity for a face that matched nobody.

        Args:
            name: Name entered by the user
            live_descriptor: Descriptor of the unmatched face

        Returns:
            The stored identity record

        Raises:
            EmptyNameError: If the name is blank
            InvalidDescriptorError: If the descriptor is malformed
            StoreUnavailableError: If the store rejects the write
        """
        clean_name = (name or "").strip()
        if not clean_name:
            raise EmptyNameError("Cannot enroll an identity without a name")

        descriptor = as_descriptor(live_descriptor, self.descriptor_length)
        record = await self.store.append(clean_name, descriptor, datetime.now(timezone.utc))
        self._recent.append(record)

        logger.info("Enrolled new identity", name=clean_name, record_id=record.record_id)
        return record
