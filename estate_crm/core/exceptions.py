"""
Custom exceptions for the Estate CRM API.
Provides consistent error handling across the application.
"""
from typing import Optional, List

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class CRMException(Exception):
    """Base exception for Estate CRM"""
    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class UnauthenticatedError(CRMException):
    """No authenticated identity on the request"""
    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class ForbiddenError(CRMException):
    """
    Identity present but not allowed.

    Role-gate rejections carry the allow-list and the caller's role so the
    client can explain the refusal; ownership rejections carry neither.
    """
    def __init__(
        self,
        message: str = "Access denied",
        required: Optional[List[str]] = None,
        current: Optional[str] = None
    ):
        self.required = required
        self.current = current
        super().__init__(message)


class NotFoundError(CRMException):
    """Resource not found"""
    def __init__(self, resource: str = "Resource", resource_id: str = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        super().__init__(message)


class AlreadyExistsError(CRMException):
    """Resource already exists"""
    def __init__(self, resource: str = "Resource", field: str = None, value: str = None):
        if field and value:
            message = f"{resource} with {field} '{value}' already exists"
        else:
            message = f"{resource} already exists"
        super().__init__(message)


class ValidationError(CRMException):
    """Validation failed"""
    def __init__(self, message: str = "Validation failed", field: str = None):
        if field:
            message = f"Validation failed for field '{field}': {message}"
        super().__init__(message)


class SyncInProgressError(CRMException):
    """A score synchronization pass is already running"""
    def __init__(self, message: str = "Score synchronization already in progress"):
        super().__init__(message)


class ScoreComputationError(CRMException):
    """
    Part of the error taxonomy only. Scoring is total over its inputs and
    treats missing or malformed fields as contributing nothing, so this is
    never raised.
    """


# Exception handlers
async def _unauthenticated_handler(request: Request, exc: UnauthenticatedError):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"message": exc.message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _forbidden_handler(request: Request, exc: ForbiddenError):
    content = {"message": exc.message}
    if exc.required is not None:
        content["required"] = exc.required
        content["current"] = exc.current
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content=content)


async def _not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": exc.message})


async def _already_exists_handler(request: Request, exc: AlreadyExistsError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": exc.message})


async def _validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"message": exc.message})


async def _sync_in_progress_handler(request: Request, exc: SyncInProgressError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"message": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain exceptions to HTTP responses."""
    app.add_exception_handler(UnauthenticatedError, _unauthenticated_handler)
    app.add_exception_handler(ForbiddenError, _forbidden_handler)
    app.add_exception_handler(NotFoundError, _not_found_handler)
    app.add_exception_handler(AlreadyExistsError, _already_exists_handler)
    app.add_exception_handler(ValidationError, _validation_handler)
    app.add_exception_handler(SyncInProgressError, _sync_in_progress_handler)
