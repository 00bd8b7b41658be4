"""Firestore implementation of the descriptor store."""
from datetime import datetime
from typing import Any, Dict, List, Optional

import firebase_admin
import numpy as np
from firebase_admin import credentials, firestore_async

from faceapp.core.config import settings
from faceapp.core.exceptions import InvalidDescriptorError, StoreUnavailableError
from faceapp.core.logging import get_logger
from faceapp.domain.entities.identity import IdentityRecord
from faceapp.domain.interfaces.storage.descriptor_store import DescriptorStore

logger = get_logger(__name__)


def _get_firebase_app() -> firebase_admin.App:
    """Return the default Firebase app, initializing it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    if settings.FIREBASE_CREDENTIALS_PATH:
        cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS_PATH)
    else:
        cred = credentials.ApplicationDefault()

    options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
    app = firebase_admin.initialize_app(cred, options)
    logger.info("Firebase app initialized", project_id=app.project_id)
    return app


class FirestoreDescriptorStore(DescriptorStore):
    """Identity records kept as documents in a Firestore collection.

    Each document has the shape ``{name, descriptor, timestamp}``.
    """

    def __init__(self, client: Optional[Any] = None, collection_name: Optional[str] = None) -> None:
        """Initialize the Firestore client and collection reference.

        Args:
            client: Async Firestore client, created from the default Firebase app when omitted
            collection_name: Collection holding identity documents
        """
        self.collection_name = collection_name or settings.FIRESTORE_COLLECTION
        try:
            self.client = client or firestore_async.client(_get_firebase_app())
            self.collection = self.client.collection(self.collection_name)
            logger.info(
                "Firestore descriptor store initialized",
                collection=self.collection_name
            )
        except Exception as e:
            logger.error(
                "Failed to initialize Firestore",
                error=str(e),
                exc_info=True
            )
            raise StoreUnavailableError(f"Failed to initialize Firestore: {str(e)}")

    def _to_record(self, doc_id: str, data: Dict[str, Any]) -> Optional[IdentityRecord]:
        """Convert a Firestore document to a record, or None if malformed."""
        try:
            return IdentityRecord(
                name=data["name"],
                descriptor=data["descriptor"],
                created_at=data["timestamp"],
                record_id=doc_id,
            )
        except (KeyError, ValueError, TypeError, InvalidDescriptorError) as e:
            logger.warning(
                "Skipping malformed identity document",
                record_id=doc_id,
                collection=self.collection_name,
                error=str(e)
            )
            return None

    async def fetch_all(self) -> List[IdentityRecord]:
        """Read every document in the identity collection."""
        try:
            records = []
            async for snapshot in self.collection.stream():
                record = self._to_record(snapshot.id, snapshot.to_dict() or {})
                if record is not None:
                    records.append(record)

            logger.debug(
                "Fetched identity records",
                collection=self.collection_name,
                records_count=len(records)
            )
            return records

        except Exception as e:
            logger.error(
                "Failed to fetch identity records",
                error=str(e),
                collection=self.collection_name,
                exc_info=True
            )
            raise StoreUnavailableError(
                f"Failed to fetch identity records: {str(e)}",
                details={"collection": self.collection_name, "error": str(e)}
            )

    async def append(
        self,
        name: str,
        descriptor: np.ndarray,
        timestamp: datetime,
    ) -> IdentityRecord:
        """Add one identity document to the collection."""
        document = {
            "name": name,
            "descriptor": [float(value) for value in descriptor],
            "timestamp": timestamp,
        }
        try:
            _, doc_ref = await self.collection.add(document)
        except Exception as e:
            logger.error(
                "Failed to store identity record",
                error=str(e),
                name=name,
                collection=self.collection_name,
                exc_info=True
            )
            raise StoreUnavailableError(
                f"Failed to store identity record: {str(e)}",
                details={"collection": self.collection_name, "error": str(e)}
            )

        logger.info(
            "Stored identity record",
            name=name,
            record_id=doc_ref.id,
            collection=self.collection_name
        )
        return IdentityRecord(
            name=name,
            descriptor=descriptor,
            created_at=timestamp,
            record_id=doc_ref.id,
        )
