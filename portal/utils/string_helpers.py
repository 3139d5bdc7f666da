"""
Key Case Conversion at the REST Boundary.

The backend speaks camelCase JSON (``tnaStatus``, ``stageData``,
``forwardedToPSTO``); models and services speak snake_case.
Repositories run every inbound payload through :func:`normalize_keys`
and every outbound body through :func:`denormalize_keys`.  Only keys
change; values pass through untouched.
"""

from __future__ import annotations

import re
from typing import Any, Callable

__all__ = [
    "denormalize_keys",
    "normalize_keys",
    "to_camel_case",
    "to_snake_case",
]

# "PSTOStatus" -> "PSTO_Status"
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
# "tnaStatus" -> "tna_Status"
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")


def to_snake_case(name: str) -> str:
    """``tnaStatus`` -> ``tna_status``; ``forwardedToPSTO`` -> ``forwarded_to_psto``.

    A leading underscore (Mongo's ``_id``) is kept so ``_id`` and a
    plain ``id`` stay distinguishable.
    """
    prefix = "_" if name.startswith("_") else ""
    body = _WORD_BOUNDARY.sub(r"\1_\2", _ACRONYM_BOUNDARY.sub(r"\1_\2", name.lstrip("_")))
    return prefix + _REPEATED_UNDERSCORES.sub("_", body).lower()


def to_camel_case(name: str) -> str:
    """``review_notes`` -> ``reviewNotes``.  Keys without underscores pass through."""
    if "_" not in name.strip("_"):
        return name
    head, *rest = name.split("_")
    return head + "".join(word[:1].upper() + word[1:] for word in rest if word)


def _rekey(data: Any, convert: Callable[[str], str]) -> Any:
    if isinstance(data, dict):
        return {convert(key): _rekey(value, convert) for key, value in data.items()}
    if isinstance(data, list):
        return [_rekey(item, convert) for item in data]
    return data


def normalize_keys(data: Any) -> Any:
    """Recursively snake_case every dict key in an inbound payload."""
    return _rekey(data, to_snake_case)


def denormalize_keys(data: Any) -> Any:
    """Recursively camelCase every dict key in an outbound body."""
    return _rekey(data, to_camel_case)
