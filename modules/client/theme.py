"""
Theme Preferences.

Persists the colour scheme (light, dark or system) and an accent colour
to a JSON file, and derives the CSS custom properties for the accent.

Usage:
    theme = ThemeManager.load()
    theme.set_accent_color("#6366f1")
    variables = theme.css_variables(system_prefers_dark=True)
"""

import colorsys
import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from modules.backend.core.config import find_project_root, get_app_config
from modules.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

ThemeMode = Literal["light", "dark", "system"]


class ThemePreferences(BaseModel):
    theme: ThemeMode = "system"
    accent_color: str = Field(default="#0d9488", pattern=r"^#[0-9a-fA-F]{6}$")


def hex_to_hsl(hex_color: str) -> tuple[int, int, int]:
    """Hue in degrees, saturation and lightness in percent, all rounded."""
    r, g, b = (int(hex_color[i:i + 2], 16) / 255 for i in (1, 3, 5))
    h, l, s = colorsys.rgb_to_hls(r, g, b)
    return round(h * 360), round(s * 100), round(l * 100)


class ThemeManager:
    def __init__(self, path: Path, preferences: ThemePreferences | None = None) -> None:
        self.path = path
        self.preferences = preferences or ThemePreferences()

    @classmethod
    def load(cls, path: Path | None = None) -> "ThemeManager":
        """Read preferences from disk; a missing or invalid file gives defaults."""
        if path is None:
            path = find_project_root() / get_app_config().client.theme_file
        if not path.exists():
            return cls(path)
        try:
            preferences = ThemePreferences.model_validate(json.loads(path.read_text()))
        except (ValueError, ValidationError) as e:
            log_with_source(logger, "client", "warning", "Ignoring invalid theme file", path=str(path), error=str(e))
            return cls(path)
        return cls(path, preferences)

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.preferences.model_dump_json(indent=2))

    @property
    def theme(self) -> ThemeMode:
        return self.preferences.theme

    @property
    def accent_color(self) -> str:
        return self.preferences.accent_color

    def set_theme(self, theme: ThemeMode) -> None:
        self.preferences = ThemePreferences(theme=theme, accent_color=self.accent_color)
        self.save()

    def set_accent_color(self, color: str) -> None:
        self.preferences = ThemePreferences(theme=self.theme, accent_color=color)
        self.save()

    def resolved_theme(self, system_prefers_dark: bool = False) -> Literal["light", "dark"]:
        if self.theme == "system":
            return "dark" if system_prefers_dark else "light"
        return self.theme

    def css_variables(self, system_prefers_dark: bool = False) -> dict[str, str]:
        h, s, l = hex_to_hsl(self.accent_color)
        primary = f"{h} {s}% {l}%"
        if self.resolved_theme(system_prefers_dark) == "dark":
            accent, accent_foreground = f"{h} 40% 15%", f"{h} 70% 60%"
        else:
            accent, accent_foreground = f"{h} 50% 95%", f"{h} 76% 30%"
        return {
            "--primary": primary,
            "--ring": primary,
            "--accent": accent,
            "--accent-foreground": accent_foreground,
            "--sidebar-primary": primary,
            "--sidebar-ring": primary,
            "--sidebar-accent": accent,
            "--sidebar-accent-foreground": accent_foreground,
        }
