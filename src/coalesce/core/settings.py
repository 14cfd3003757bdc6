"""User preferences and their validation."""

import logging
from dataclasses import dataclass, fields
from typing import Any

from .display import DEFAULT_HEADER_STYLE, HEADER_STYLES
from .strategies import DEFAULT_STRATEGY, STRATEGIES

logger = logging.getLogger(__name__)

THEMES = ("default", "modern", "compact", "naked")
DEFAULT_THEME = "default"


@dataclass
class Settings:
    """User preferences. The core reads them; writes go to a SettingsStore."""
    block_boundary_strategy: str = DEFAULT_STRATEGY
    sort_descending: bool = True
    sort_by_full_path: bool = False
    blocks_collapsed: bool = False
    header_style: str = DEFAULT_HEADER_STYLE
    hide_backlink_line: bool = False
    hide_first_header: bool = False
    theme: str = DEFAULT_THEME
    only_daily_notes: bool = False
    show_in_daily_notes: bool = False
    daily_notes_folder: str = ""
    filter_debounce_ms: int = 120


_CHOICES = {
    "block_boundary_strategy": (tuple(STRATEGIES), DEFAULT_STRATEGY),
    "header_style": (HEADER_STYLES, DEFAULT_HEADER_STYLE),
    "theme": (THEMES, DEFAULT_THEME),
}


def normalize_settings(data: dict[str, Any], base: Settings | None = None) -> Settings:
    """
    Build Settings from raw values layered over ``base``.

    Unknown choices and values of the wrong type fall back to the default
    with a warning; unknown keys are ignored.
    """
    settings = base or Settings()
    defaults = Settings()
    known = {f.name: f for f in fields(Settings)}

    for key, value in data.items():
        if key not in known:
            logger.debug("Ignoring unknown setting %r", key)
            continue
        default = getattr(defaults, key)

        if key in _CHOICES:
            choices, fallback = _CHOICES[key]
            if value not in choices:
                logger.warning("Invalid %s %r, using %r", key, value, fallback)
                value = fallback
        elif isinstance(default, bool):
            if not isinstance(value, bool):
                logger.warning("%s must be a boolean, got %r", key, value)
                value = default
        elif isinstance(default, int):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                logger.warning("%s must be a non-negative integer, got %r", key, value)
                value = default
        elif not isinstance(value, str):
            logger.warning("%s must be a string, got %r", key, value)
            value = default

        setattr(settings, key, value)
    return settings
