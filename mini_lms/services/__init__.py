# This package contains business logic services.

from . import email_service
from . import blob_service
from . import consistency_service

__all__ = [
    "email_service",
    "blob_service",
    "consistency_service",
]
