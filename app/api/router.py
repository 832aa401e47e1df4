from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from fastapi import APIRouter, Depends


# Shared default error responses for all routers for consistency
DEFAULT_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"description": "Bad Request"},
    401: {"description": "Unauthorized"},
    403: {"description": "Forbidden"},
    404: {"description": "Not Found"},
    409: {"description": "Conflict"},
    500: {"description": "Internal Server Error"},
}


def create_router(
    *,
    name: Optional[str] = None,
    dependencies: Optional[Sequence[Depends]] = None,
    default_responses: Optional[Dict[int, Dict[str, Any]]] = None,
    extra_responses: Optional[Dict[int, Dict[str, Any]]] = None,
) -> APIRouter:
    """Create an APIRouter with the shared error responses.

    Args:
        name: Optional logical name for the router.
        dependencies: Optional dependencies applied to all routes in the router.
        default_responses: Replaces the shared error responses entirely.
        extra_responses: Added on top of the shared error responses.
    """
    responses = dict(default_responses or DEFAULT_ERROR_RESPONSES)
    if extra_responses:
        responses.update(extra_responses)
    router = APIRouter(
        dependencies=list(dependencies) if dependencies else None,
        responses=responses,
    )
    if name:
        setattr(router, "name", name)
    return router
