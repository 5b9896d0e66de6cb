"""FastAPI dependencies."""

from fastapi import HTTPException, Request

from folderbridge.domain.errors import (
    EditMatchError,
    FolderBridgeError,
    InvalidPathError,
    NotFoundError,
    PatternError,
    PermissionDeniedError,
)
from folderbridge.runtime.bridge import FolderBridge


def get_bridge(request: Request) -> FolderBridge:
    """The FolderBridge created by the application lifespan."""
    return request.app.state.bridge


def http_error(exc: FolderBridgeError) -> HTTPException:
    """Map a domain error onto an HTTP error response."""
    if isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, PermissionDeniedError):
        status_code = 403
    elif isinstance(exc, (PatternError, EditMatchError, InvalidPathError)):
        status_code = 400
    else:
        status_code = 500
    return HTTPException(status_code=status_code, detail=str(exc))
