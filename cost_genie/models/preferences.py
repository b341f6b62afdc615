"""
Display preferences.

The active display mode belongs to the presentation layer. It is passed
around as a value and never stored with cost or profile data.
"""

from enum import Enum


class ThemePreference(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


def resolve_theme(preference: ThemePreference, system_prefers_dark: bool = False) -> str:
    """Resolve a preference to the concrete mode to render: 'light' or 'dark'."""
    preference = ThemePreference(preference)
    if preference is ThemePreference.SYSTEM:
        return "dark" if system_prefers_dark else "light"
    return preference.value
