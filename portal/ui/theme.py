"""UI Theme Constants for the DOST-MIMAROPA Portal client.

Centralises all colour, font, and sizing constants for the
CustomTkinter interface.  Navy sidebar + light content area, with the
tag palette the status badges and stage tracker draw from.

Constants only.
"""

from __future__ import annotations

from typing import Final

from portal.models.enums import BadgeColor, BadgeVariant

# ---------------------------------------------------------------------------
# Colour palette: navy sidebar, light content
# ---------------------------------------------------------------------------

SIDEBAR_BG: Final[str] = "#0b2545"
SIDEBAR_HOVER: Final[str] = "#13315c"
SIDEBAR_ACTIVE: Final[str] = "#1d4e89"
SIDEBAR_TEXT: Final[str] = "#dbe4f0"

CONTENT_BG: Final[str] = "#f3f4f6"
CONTENT_CARD_BG: Final[str] = "#ffffff"

ACCENT_PRIMARY: Final[str] = "#1d4ed8"
ACCENT_HOVER: Final[str] = "#1e40af"
TEXT_PRIMARY: Final[str] = "#111827"
TEXT_SECONDARY: Final[str] = "#6b7280"
TEXT_LIGHT: Final[str] = "#ffffff"

# Input / form
INPUT_BG: Final[str] = "#ffffff"
INPUT_BORDER: Final[str] = "#d1d5db"
ERROR_TEXT: Final[str] = "#dc2626"
ERROR_BG: Final[str] = "#fef2f2"
ERROR_BORDER: Final[str] = "#fecaca"
SUCCESS_TEXT: Final[str] = "#16a34a"

# Tab / interactive
TAB_BORDER: Final[str] = "#e5e7eb"
TAB_HOVER: Final[str] = "#f3f4f6"
LOGOUT_PRIMARY: Final[str] = "#ef4444"
LOGOUT_HOVER: Final[str] = "#3b1219"
UNREAD_DOT: Final[str] = "#2563eb"

# ---------------------------------------------------------------------------
# Status tags: (background, foreground) per badge colour key
# ---------------------------------------------------------------------------

BADGE_COLORS: Final[dict[str, tuple[str, str]]] = {
    BadgeColor.GRAY: ("#f3f4f6", "#374151"),
    BadgeColor.YELLOW: ("#fef9c3", "#854d0e"),
    BadgeColor.BLUE: ("#dbeafe", "#1e40af"),
    BadgeColor.GREEN: ("#dcfce7", "#166534"),
    BadgeColor.ORANGE: ("#ffedd5", "#9a3412"),
    BadgeColor.RED: ("#fee2e2", "#991b1b"),
    BadgeColor.PURPLE: ("#f3e8ff", "#6b21a8"),
}

# Variant keys of the enrollment list badge fold onto the same palette.
BADGE_VARIANT_COLORS: Final[dict[str, str]] = {
    BadgeVariant.SECONDARY: BadgeColor.GRAY,
    BadgeVariant.WARNING: BadgeColor.YELLOW,
    BadgeVariant.SUCCESS: BadgeColor.GREEN,
    BadgeVariant.DANGER: BadgeColor.RED,
    BadgeVariant.INFO: BadgeColor.BLUE,
}

# ---------------------------------------------------------------------------
# Fonts (Segoe UI on Windows, system fallback elsewhere)
# ---------------------------------------------------------------------------

FONT_FAMILY: Final[str] = "Segoe UI"
FONT_BRAND: Final[tuple[str, int, str]] = (FONT_FAMILY, 22, "bold")
FONT_HEADING: Final[tuple[str, int, str]] = (FONT_FAMILY, 20, "bold")
FONT_SUBHEADING: Final[tuple[str, int, str]] = (FONT_FAMILY, 15, "bold")
FONT_SUBTITLE: Final[tuple[str, int]] = (FONT_FAMILY, 12)
FONT_BODY: Final[tuple[str, int]] = (FONT_FAMILY, 13)
FONT_SIDEBAR: Final[tuple[str, int]] = (FONT_FAMILY, 14)
FONT_SIDEBAR_ACTIVE: Final[tuple[str, int, str]] = (FONT_FAMILY, 14, "bold")
FONT_LABEL: Final[tuple[str, int, str]] = (FONT_FAMILY, 11, "bold")
FONT_SMALL: Final[tuple[str, int]] = (FONT_FAMILY, 11)
FONT_CAPTION: Final[tuple[str, int]] = (FONT_FAMILY, 10)
FONT_BUTTON: Final[tuple[str, int, str]] = (FONT_FAMILY, 13, "bold")
FONT_BADGE: Final[tuple[str, int, str]] = (FONT_FAMILY, 11, "bold")

# ---------------------------------------------------------------------------
# Dimensions
# ---------------------------------------------------------------------------

SIDEBAR_WIDTH: Final[int] = 250
LOGIN_WINDOW_WIDTH: Final[int] = 480
LOGIN_WINDOW_HEIGHT: Final[int] = 720
MAIN_WINDOW_WIDTH: Final[int] = 1200
MAIN_WINDOW_HEIGHT: Final[int] = 750
CORNER_RADIUS: Final[int] = 8
PADDING_SM: Final[int] = 8
PADDING_MD: Final[int] = 16
PADDING_LG: Final[int] = 24
STAGE_DOT_SIZE: Final[int] = 22
