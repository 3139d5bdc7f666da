"""
Base Service Class.

Minimal base class standardizing the logger pattern for all services,
plus the translation of ``PortalApiClient`` failures into
``ServiceResult`` envelopes so the UI never sees a raw exception.
Services extend this and add their own repository dependencies via __init__.
"""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

from pydantic import ValidationError

from portal.api_client import (
    ApiConnectionError,
    ApiError,
    NotAuthenticatedError,
    PortalApiError,
    SessionExpiredError,
)
from portal.auth import SessionManager
from portal.logger import StructuredLogger
from portal.models.service_models import ServiceResult

T = TypeVar("T")


class BaseService:
    """Base class for all service classes. Provides a logger."""

    def __init__(
        self,
        logger: StructuredLogger,
        session: Optional[SessionManager] = None,
    ) -> None:
        self._logger: StructuredLogger = logger
        self._session: Optional[SessionManager] = session

    def _call(self, operation: str, fn: Callable[[], T]) -> ServiceResult[T]:
        """Run a repository call and wrap its outcome.

        ``status_code`` mirrors the failure: 401 for a missing or expired
        session (the in-memory session is cleared too), the HTTP status
        for backend errors, and 0 when the backend is unreachable.
        """
        try:
            return ServiceResult(success=True, data=fn())
        except (SessionExpiredError, NotAuthenticatedError) as exc:
            self._logger.warning("%s: %s", operation, exc.message)
            if self._session is not None:
                self._session.clear()
            return ServiceResult(success=False, error=exc.message, status_code=401)
        except ApiConnectionError as exc:
            return ServiceResult(success=False, error=exc.message, status_code=0)
        except ApiError as exc:
            self._logger.error("%s failed (%d): %s", operation, exc.status_code, exc.message)
            # ``success: false`` arrives with a 2xx status; report it as a bad request.
            status_code = exc.status_code if exc.status_code >= 400 else 400
            return ServiceResult(success=False, error=exc.message, status_code=status_code)
        except PortalApiError as exc:
            self._logger.error("%s failed: %s", operation, exc.message)
            return ServiceResult(success=False, error=exc.message, status_code=500)
        except ValidationError as exc:
            self._logger.error("%s: unexpected response shape: %s", operation, exc)
            return ServiceResult(
                success=False, error="Unexpected response from server.", status_code=502,
            )

    @staticmethod
    def _invalid(message: str) -> ServiceResult:
        """Client-side validation failure; no request was sent."""
        return ServiceResult(success=False, error=message, status_code=400)
