"""
Custom exception hierarchy for LeetBoard.

Rule: every HTTP error body carries a human-readable `error` string plus a
machine-readable `code` so clients can branch without parsing English.
"""
from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class LeetBoardException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidRequestError(LeetBoardException):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "INVALID_REQUEST"


class AuthenticationRequiredError(LeetBoardException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "AUTHENTICATION_REQUIRED"

    def __init__(self):
        super().__init__(message="Sign in required.")


class ForbiddenError(LeetBoardException):
    http_status = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"

    def __init__(self, group_id: str):
        super().__init__(
            message="Only the group owner can do this.",
            details={"group_id": group_id},
        )


class ProfileNotFoundError(LeetBoardException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "PROFILE_NOT_FOUND"

    def __init__(self, username: str):
        super().__init__(message="User not found", details={"username": username})


class GroupNotFoundError(LeetBoardException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "GROUP_NOT_FOUND"

    def __init__(self, group_id: str):
        super().__init__(message="Group not found", details={"group_id": group_id})


class MemberNotFoundError(LeetBoardException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "MEMBER_NOT_FOUND"

    def __init__(self, member_id: str):
        super().__init__(message="Member not found", details={"member_id": member_id})


class PublicLinkNotFoundError(LeetBoardException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "PUBLIC_LINK_NOT_FOUND"

    def __init__(self):
        super().__init__(message="Group not found")


class UpstreamUnavailableError(LeetBoardException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "UPSTREAM_UNAVAILABLE"

    def __init__(self, message: str = "Error fetching user", source: str | None = None):
        super().__init__(
            message=message,
            details={"source": source} if source else {},
        )


class StorageFailureError(LeetBoardException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORAGE_FAILURE"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def leetboard_exception_handler(request: Request, exc: LeetBoardException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Request validation failed.",
            "code": "VALIDATION_ERROR",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "An unexpected error occurred.",
            "code": "INTERNAL_ERROR",
        },
    )
