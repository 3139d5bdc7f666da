"""
Base Model for Backend Documents.

Every document the REST API returns is a MongoDB-shaped JSON object.
Repositories normalise keys to snake_case before validation, so the
only quirk left to absorb here is the ``_id`` primary key.
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PortalDocument(BaseModel):
    """Common base for backend documents.

    Unknown keys are ignored: the backend adds fields freely and the
    client only depends on the ones it renders.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        extra="ignore",
    )

    id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("id", "_id"),
    )
