"""
Error taxonomy shared by the services and the HTTP layer.

Every error is an HTTPException subclass, so a service can raise it and
FastAPI renders it as ``{"detail": ...}`` with the right status code.
"""

from typing import Optional

from fastapi import HTTPException, status


class WorkflowError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be completed"

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


class AuthenticationError(WorkflowError):
    """No session, or the presented token is invalid, expired or revoked."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class UnauthorizedError(WorkflowError):
    """The caller is not a party to the resource, or has the wrong role."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not allowed to perform this action"


class ConflictError(WorkflowError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"


class InvalidInputError(WorkflowError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


class NotFoundError(WorkflowError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class UpstreamError(WorkflowError):
    """A database or transport failure, passed through without retry."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Upstream data store failure"
