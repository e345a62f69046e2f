# app/core/exceptions.py

"""
Error kinds shared by every domain.

All of them are HTTPException subclasses, so FastAPI renders them as
`{"detail": ...}` with the matching status code without extra handlers.
Services raise NotFoundError / ConflictError / ForbiddenError directly;
anything unexpected is logged and re-raised as InternalError.
"""

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class for errors that carry their own domain meaning."""
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Bad request"

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not enough permissions."


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"


class InvalidRequestError(AppError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Invalid request"
