"""
Domain error taxonomy.

Services and CRUD helpers raise these instead of HTTPException so the same
operations can be driven from tests or scripts; main.py translates them to
HTTP responses.
"""
from fastapi import status


class LMSError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(LMSError):
    status_code = status.HTTP_404_NOT_FOUND


class Forbidden(LMSError):
    status_code = status.HTTP_403_FORBIDDEN


class Unauthenticated(LMSError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ValidationError(LMSError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class DependencyFailure(LMSError):
    """A collaborator (email, blob storage) failed."""
    status_code = status.HTTP_502_BAD_GATEWAY
