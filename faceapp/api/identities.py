"""Identity API endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from faceapp.api.models.identity import (
    EnrollRequest,
    IdentityListResponse,
    IdentitySummary,
    MatchRequest,
    MatchResponse,
)
from faceapp.core.exceptions import (
    EmptyNameError,
    InvalidDescriptorError,
    StoreUnavailableError,
)
from faceapp.core.logging import get_logger
from faceapp.infrastructure.dependencies import get_identity_matcher
from faceapp.services.identity_matcher import IdentityMatcher

logger = get_logger(__name__)
router = APIRouter(
    tags=["identities"],
    responses={
        422: {"description": "Invalid descriptor or name"},
        503: {"description": "Descriptor store unavailable"}
    }
)


@router.get(
    "",
    response_model=IdentityListResponse,
    summary="List enrolled identities",
)
async def list_identities(
    matcher: IdentityMatcher = Depends(get_identity_matcher)
) -> IdentityListResponse:
    """List every identity in the descriptor store."""
    try:
        records = await matcher.store.fetch_all()
    except StoreUnavailableError as e:
        logger.error("Failed to list identities", error=str(e))
        raise HTTPException(status_code=503, detail="Descriptor store unavailable")

    return IdentityListResponse(
        identities=[IdentitySummary.from_record(record) for record in records]
    )


@router.post(
    "/match",
    response_model=MatchResponse,
    summary="Match a face descriptor",
    description="Compares a live descriptor against every enrolled identity.",
)
async def match_identity(
    request: MatchRequest,
    matcher: IdentityMatcher = Depends(get_identity_matcher)
) -> MatchResponse:
    """Match a descriptor against enrolled identities.

    Raises:
        HTTPException: 422 for a malformed descriptor, 503 if the store is down
    """
    try:
        match = await matcher.match(request.descriptor)
    except InvalidDescriptorError as e:
        logger.warning("Invalid descriptor in match request", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))
    except StoreUnavailableError as e:
        logger.error("Failed to match identity", error=str(e))
        raise HTTPException(status_code=503, detail="Descriptor store unavailable")

    return MatchResponse.from_match(match)


@router.post(
    "",
    response_model=IdentitySummary,
    status_code=201,
    summary="Enroll a new identity",
)
async def enroll_identity(
    request: EnrollRequest,
    matcher: IdentityMatcher = Depends(get_identity_matcher)
) -> IdentitySummary:
    """Store a new name and descriptor.

    Raises:
        HTTPException: 422 for a blank name or malformed descriptor, 503 if the store is down
    """
    try:
        record = await matcher.enroll(request.name, request.descriptor)
    except (EmptyNameError, InvalidDescriptorError) as e:
        logger.warning("Rejected enrollment request", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))
    except StoreUnavailableError as e:
        logger.error("Failed to enroll identity", error=str(e))
        raise HTTPException(status_code=503, detail="Descriptor store unavailable")

    return IdentitySummary.from_record(record)
