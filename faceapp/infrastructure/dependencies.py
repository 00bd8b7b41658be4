"""FastAPI dependency providers."""
from typing import AsyncGenerator

from fastapi import Depends

from faceapp.core.container import ServiceContainer, container
from faceapp.core.exceptions import ServiceNotInitializedError
from faceapp.services.identity_matcher import IdentityMatcher


async def get_container() -> ServiceContainer:
    """Dependency provider for the global ServiceContainer instance."""
    if not container.initialized:
        # Attempt to initialize if not already done (e.g. when lifespan did not run)
        try:
            await container.initialize()
        except Exception as e:
            raise ServiceNotInitializedError(f"Service container could not be initialized: {e}")
    return container


async def get_identity_matcher(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[IdentityMatcher, None]:
    """Provide the identity matcher.

    Yields:
        IdentityMatcher: Matcher bound to the configured descriptor store

    Raises:
        ServiceNotInitializedError: If the matcher is not initialized
    """
    if container.identity_matcher is None:
        raise ServiceNotInitializedError("Identity matcher not initialized")
    yield container.identity_matcher
