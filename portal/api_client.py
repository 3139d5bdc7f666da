"""
Portal REST Client.

Thin wrapper over ``requests.Session`` for the portal backend.  Every
endpoint path is relative to ``AppConfig.api_root`` (``<base>/api``).

Behaviour:
    - Authenticated calls carry ``Authorization: Bearer <token>`` read
      from the ``TokenStore`` at call time.  With no stored token the
      call fails with ``NotAuthenticatedError`` before touching the
      network.
    - HTTP 401 wipes the token store and raises ``SessionExpiredError``.
    - Any other non-2xx raises ``ApiError`` carrying the backend's
      ``message`` when the body has one.
    - A 2xx JSON body with ``success: false`` also raises ``ApiError``.
    - Connection failures and timeouts raise ``ApiConnectionError``.

No retries, no request de-duplication.  Callers own the error path.
"""

from __future__ import annotations

import re
from typing import Any, Optional

import requests

from portal.config import AppConfig
from portal.logger import StructuredLogger
from portal.models.document import DownloadedFile
from portal.models.envelope import ApiEnvelope
from portal.token_store import TokenStore
from portal.utils.general import safe_filename

__all__ = [
    "ApiConnectionError",
    "ApiError",
    "NotAuthenticatedError",
    "PortalApiClient",
    "PortalApiError",
    "SessionExpiredError",
]

_FILENAME_RE = re.compile(r"filename\*?=(?:UTF-8'')?\"?([^\";]+)\"?", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class PortalApiError(Exception):
    """Base class for every failure raised by ``PortalApiClient``."""

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.message: str = message
        self.status_code: int = status_code


class ApiError(PortalApiError):
    """The backend answered, but with an error status or ``success: false``."""


class ApiConnectionError(PortalApiError):
    """The backend could not be reached (DNS, refused, timeout)."""


class NotAuthenticatedError(PortalApiError):
    """An authenticated call was attempted with no stored token."""

    def __init__(self, message: str = "Please login first") -> None:
        super().__init__(message, status_code=401)


class SessionExpiredError(PortalApiError):
    """The backend rejected the token; the stored session has been wiped."""

    def __init__(self, message: str = "Session expired. Please login again.") -> None:
        super().__init__(message, status_code=401)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class PortalApiClient:
    """HTTP client for the portal backend.

    Parameters
    ----------
    config:
        Supplies ``api_root`` and ``REQUEST_TIMEOUT_S``.
    token_store:
        Source of the bearer token; cleared on 401.
    logger:
        Injected structured logger.  Tokens are never logged.
    session:
        Optional pre-built ``requests.Session`` (tests pass a fake).
    """

    def __init__(
        self,
        config: AppConfig,
        token_store: TokenStore,
        logger: StructuredLogger,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._config: AppConfig = config
        self._tokens: TokenStore = token_store
        self._logger: StructuredLogger = logger
        self._session: requests.Session = session or requests.Session()

    @property
    def token_store(self) -> TokenStore:
        return self._tokens

    def url(self, path: str) -> str:
        """Absolute URL for an ``/api``-relative *path*."""
        if not path.startswith("/"):
            path = "/" + path
        return f"{self._config.api_root}{path}"

    def close(self) -> None:
        """Release pooled connections.  Safe to call more than once."""
        self._session.close()

    # -- Core ------------------------------------------------------------------

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
        files: Optional[Any] = None,
        data: Optional[dict[str, Any]] = None,
        auth: bool = True,
        stream: bool = False,
    ) -> requests.Response:
        headers: dict[str, str] = {}
        if auth:
            token = self._tokens.get_token()
            if not token:
                self._logger.warning("%s %s blocked: no stored token.", method, path)
                raise NotAuthenticatedError()
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = self._session.request(
                method,
                self.url(path),
                params=params,
                json=json,
                files=files,
                data=data,
                headers=headers,
                timeout=self._config.REQUEST_TIMEOUT_S,
                stream=stream,
            )
        except requests.RequestException as exc:
            self._logger.error("%s %s failed: %s", method, path, exc)
            raise ApiConnectionError(
                "Unable to reach the server. Check your connection and try again."
            ) from exc

        self._logger.debug("%s %s -> %d", method, path, response.status_code)

        if response.status_code == 401:
            self._tokens.clear()
            self._logger.warning("%s %s -> 401; stored session cleared.", method, path)
            raise SessionExpiredError(_error_message(response, "Session expired. Please login again."))

        if not 200 <= response.status_code < 300:
            message = _error_message(response, f"Request failed with status {response.status_code}")
            self._logger.warning("%s %s -> %d: %s", method, path, response.status_code, message)
            raise ApiError(message, status_code=response.status_code)

        return response

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
        files: Optional[Any] = None,
        data: Optional[dict[str, Any]] = None,
        auth: bool = True,
    ) -> ApiEnvelope:
        """Send a request and return the parsed envelope.

        A bare (non-object) JSON body is wrapped as ``{"data": body}``.

        Raises:
            NotAuthenticatedError, SessionExpiredError, ApiError,
            ApiConnectionError
        """
        response = self._send(
            method, path, params=params, json=json, files=files, data=data, auth=auth,
        )
        try:
            body = response.json()
        except ValueError as exc:
            raise ApiError("Invalid response from server", status_code=response.status_code) from exc

        if not isinstance(body, dict):
            body = {"data": body}
        envelope = ApiEnvelope.model_validate(body)
        if not envelope.success:
            message = envelope.message or "Request was not successful"
            self._logger.warning("%s %s -> success=false: %s", method, path, message)
            raise ApiError(message, status_code=response.status_code)
        return envelope

    # -- Verb shortcuts --------------------------------------------------------

    def get(self, path: str, *, params: Optional[dict[str, Any]] = None, auth: bool = True) -> ApiEnvelope:
        return self.request("GET", path, params=params, auth=auth)

    def post(
        self,
        path: str,
        *,
        json: Optional[Any] = None,
        files: Optional[Any] = None,
        data: Optional[dict[str, Any]] = None,
        auth: bool = True,
    ) -> ApiEnvelope:
        return self.request("POST", path, json=json, files=files, data=data, auth=auth)

    def put(self, path: str, *, json: Optional[Any] = None) -> ApiEnvelope:
        return self.request("PUT", path, json=json)

    def patch(self, path: str, *, json: Optional[Any] = None) -> ApiEnvelope:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str) -> ApiEnvelope:
        return self.request("DELETE", path)

    # -- Binary ----------------------------------------------------------------

    def download(self, path: str, fallback_name: str = "download") -> DownloadedFile:
        """Fetch a file endpoint and return its bytes with a usable filename."""
        response = self._send("GET", path)
        content_type = response.headers.get("Content-Type", "application/octet-stream")
        filename = _filename_from_headers(response.headers.get("Content-Disposition"))
        self._logger.info("Downloaded %s (%d bytes).", path, len(response.content))
        return DownloadedFile(
            filename=safe_filename(filename or fallback_name, fallback=fallback_name),
            content=response.content,
            content_type=content_type.split(";")[0].strip(),
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _error_message(response: requests.Response, default: str) -> str:
    """Prefer the backend's ``message`` (or ``error``) field over *default*."""
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return default


def _filename_from_headers(disposition: Optional[str]) -> Optional[str]:
    if not disposition:
        return None
    match = _FILENAME_RE.search(disposition)
    return match.group(1).strip() if match else None
