import json
import logging
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SETTINGS_FILE = ".coalesce/settings.json"


class JsonSettingsStore:
    """Settings persisted as a JSON object, usually inside the vault."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable settings file %s", self.path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file %s does not hold an object", self.path)
            return {}
        return data

    def save(self, settings: Any) -> None:
        data = asdict(settings) if is_dataclass(settings) else dict(settings)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        logger.debug("Saved settings to %s", self.path)
