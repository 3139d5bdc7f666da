"""
Status View Models.

View-ready bundles produced by the status resolver and consumed by the
badge and stage-tracker widgets.  This is the only typed boundary
between status derivation and rendering.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from portal.models.enums import BadgeColor, BadgeVariant, StageState


class StatusBadge(BaseModel):
    """Colour key + label for a single status tag."""

    model_config = ConfigDict(frozen=True)

    color: BadgeColor
    text: str


class StageView(BaseModel):
    """Display state of one program stage.

    Attributes
    ----------
    stage_id:
        Stage identifier (``tna``, ``rtec`` ...).
    name:
        Human-readable stage name.
    state:
        ``completed`` / ``current`` / ``pending``.
    color:
        Hex colour for the stage dot.
    accessible:
        Whether the user may open the stage (TNA gate).
    """

    model_config = ConfigDict(frozen=True)

    stage_id: str
    name: str
    state: StageState
    color: str
    accessible: bool


class StatusView(BaseModel):
    """Everything a list row or detail header needs to render a status."""

    model_config = ConfigDict(frozen=True)

    variant: BadgeVariant
    label: str
    stages: tuple[StageView, ...] = ()
    conflicts: tuple[str, ...] = ()
