"""
Service Layer Data Transfer Objects.

Pydantic models for validated output at service boundaries.
"""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

__all__ = ["ServiceResult"]


class ServiceResult(BaseModel, Generic[T]):
    """
    Standard service return envelope.

    All service methods return this, providing a consistent contract
    for the view layer: ``success`` picks the happy path, ``error`` is
    the message for the error banner, ``status_code`` mirrors the HTTP
    status (``401`` means the session is gone and the shell must return
    to login; ``0`` means the backend could not be reached).
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    status_code: int = 200

    @property
    def session_expired(self) -> bool:
        return self.status_code == 401
