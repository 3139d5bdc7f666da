"""General Utility Functions."""

from __future__ import annotations

import mimetypes
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel

__all__ = ["convert_to_json_safe", "file_part", "format_date", "safe_filename"]

JsonSafe = Union[None, str, int, float, bool, dict[str, "JsonSafe"], list["JsonSafe"]]

_UNSAFE_FILENAME_CHARS = frozenset('<>:"/\\|?*')


def convert_to_json_safe(data: Any) -> JsonSafe:
    """Make an outbound request body serialisable by ``requests``.

    Dates become ISO strings (the backend parses ``scheduledDate`` that
    way), enums their values, paths POSIX strings, models their dumps.
    Anything else unknown is stringified.
    """
    if data is None or isinstance(data, (bool, int, float, str)):
        return data.value if isinstance(data, Enum) else data
    if isinstance(data, Enum):
        return convert_to_json_safe(data.value)
    if isinstance(data, (datetime, date)):
        return data.isoformat()
    if isinstance(data, Path):
        return data.as_posix()
    if isinstance(data, BaseModel):
        return convert_to_json_safe(data.model_dump(exclude_none=True))
    if isinstance(data, dict):
        return {str(key): convert_to_json_safe(value) for key, value in data.items()}
    if isinstance(data, (list, tuple, set, frozenset)):
        return [convert_to_json_safe(item) for item in data]
    return str(data)


def format_date(value: Optional[datetime], *, with_time: bool = True) -> str:
    """Render a timestamp the way the portal lists show it.

    ``September 22, 2025, 11:06 PM``; ``"-"`` when *value* is ``None``.
    """
    if value is None:
        return "-"
    text = f"{value:%B} {value.day}, {value.year}"
    if with_time:
        text += f", {value:%I:%M %p}"
    return text


def safe_filename(name: str, fallback: str = "download") -> str:
    """Strip path separators and reserved characters from a server filename."""
    cleaned = "".join(
        "_" if ch in _UNSAFE_FILENAME_CHARS or ord(ch) < 32 else ch
        for ch in name
    ).strip(" .")
    return cleaned or fallback


def file_part(path: Path) -> tuple[str, bytes, str]:
    """Read *path* into a multipart ``(filename, content, content_type)`` triple.

    Raises:
        OSError: the file cannot be read.
    """
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return path.name, path.read_bytes(), content_type
