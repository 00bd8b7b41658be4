"""API v1 router initialization."""
from fastapi import APIRouter

from .identities import router as identities_router

# Create v1 router
router = APIRouter()

router.include_router(
    identities_router,
    prefix="/identities",
    tags=["identities"]
)
