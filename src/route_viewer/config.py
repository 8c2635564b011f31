"""Viewer settings from environment variables and an optional .env file."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from src.route_viewer.models import Viewport
from src.route_viewer.theme import THEMES

# Defaults match the vector scene's fixed canvas
DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
DEFAULT_PADDING = 60
DEFAULT_THEME = "light"


@dataclass(frozen=True)
class ViewerSettings:
    """Resolved configuration for the route viewer."""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    padding: int = DEFAULT_PADDING
    theme: str = DEFAULT_THEME

    @property
    def viewport(self) -> Viewport:
        return Viewport(width=self.width, height=self.height, padding=self.padding)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings(env_file: str | None = None) -> ViewerSettings:
    """
    Read settings from the environment.

    Variables: ROUTE_VIEWER_WIDTH, ROUTE_VIEWER_HEIGHT, ROUTE_VIEWER_PADDING,
    ROUTE_VIEWER_THEME. Values already in the environment win over the .env
    file.

    Args:
        env_file: Path to a .env file; None searches from the working directory

    Raises:
        ValueError: If a numeric variable is not an integer or the theme is unknown
    """
    load_dotenv(env_file)

    theme = os.getenv("ROUTE_VIEWER_THEME", DEFAULT_THEME).lower()
    if theme not in THEMES:
        raise ValueError(f"ROUTE_VIEWER_THEME must be one of {sorted(THEMES)}, got {theme!r}")

    return ViewerSettings(
        width=_int_env("ROUTE_VIEWER_WIDTH", DEFAULT_WIDTH),
        height=_int_env("ROUTE_VIEWER_HEIGHT", DEFAULT_HEIGHT),
        padding=_int_env("ROUTE_VIEWER_PADDING", DEFAULT_PADDING),
        theme=theme,
    )
