"""
Base Repository.

Provides shared infrastructure for all repositories:
- ``PortalApiClient`` reference
- Logger reference
- Envelope unwrapping and key normalisation into models
"""

from __future__ import annotations

from typing import Any, BinaryIO, Optional, TypeVar, Union

from pydantic import BaseModel

from portal.api_client import PortalApiClient
from portal.logger import StructuredLogger
from portal.models.envelope import ApiEnvelope
from portal.utils.general import convert_to_json_safe
from portal.utils.string_helpers import denormalize_keys, normalize_keys

M = TypeVar("M", bound=BaseModel)

FilePart = tuple[str, Union[bytes, BinaryIO], str]
"""Multipart file field: ``(filename, content, content_type)``."""


class BaseRepository:
    """Base class for all repositories. Receives dependencies via __init__."""

    RESOURCE: str = ""

    def __init__(self, api: PortalApiClient, logger: StructuredLogger) -> None:
        self._api = api
        self._logger = logger

    @property
    def api(self) -> PortalApiClient:
        return self._api

    def _path(self, *parts: object) -> str:
        """``/<RESOURCE>/<part>/<part>`` with empty parts skipped."""
        segments = [self.RESOURCE, *(str(p).strip("/") for p in parts if p not in (None, ""))]
        return "/" + "/".join(s for s in segments if s)

    # -- Envelope → model ------------------------------------------------------

    def _one(
        self,
        envelope: ApiEnvelope,
        model: type[M],
        key: Optional[str] = None,
    ) -> Optional[M]:
        """Validate a single document payload; ``None`` when absent."""
        raw = envelope.payload(key)
        if raw is None:
            return None
        return model.model_validate(normalize_keys(raw))

    def _many(
        self,
        envelope: ApiEnvelope,
        model: type[M],
        key: Optional[str] = None,
    ) -> list[M]:
        """Validate a list payload.

        A payload of ``{"<key>": [...], "pagination": ...}`` (``data``
        wrapping a named list) is unwrapped one level.
        """
        raw = envelope.payload(key)
        if isinstance(raw, dict):
            raw = next((v for v in raw.values() if isinstance(v, list)), [])
        if not raw:
            return []
        return [model.model_validate(normalize_keys(item)) for item in raw]

    @staticmethod
    def _raw(envelope: ApiEnvelope, key: Optional[str] = None) -> Any:
        """Payload with keys normalised, for endpoints without a model."""
        return normalize_keys(envelope.payload(key))

    @staticmethod
    def _outbound(payload: dict[str, Any]) -> dict[str, Any]:
        """JSON-safe camelCase body for POST/PUT/PATCH, ``None`` values dropped."""
        cleaned = {k: v for k, v in payload.items() if v is not None}
        return denormalize_keys(convert_to_json_safe(cleaned))  # type: ignore[return-value]
