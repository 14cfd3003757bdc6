"""Configuration loader for coalesce.toml."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .core.settings import Settings, normalize_settings

logger = logging.getLogger(__name__)

CONFIG_NAME = "coalesce.toml"


@dataclass
class VaultConfig:
    """Vault-specific configuration."""
    root: Path


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Path | None = None


@dataclass
class CoalesceConfig:
    """Complete coalesce configuration."""
    vault: VaultConfig
    settings: Settings = field(default_factory=Settings)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Path | None = None, vault_path: Path | None = None) -> CoalesceConfig:
    """
    Load configuration from coalesce.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/coalesce.toml
    3. vault_path/coalesce.toml

    Args:
        config_path: Explicit path to config file
        vault_path: Vault root path for fallback search

    Returns:
        CoalesceConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if vault_path:
        search_paths.append(vault_path / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            logger.debug("Loaded configuration from %s", path)
            break

    vault_data = toml_data.get("vault", {})
    vault_config = VaultConfig(root=Path(vault_data.get("root", vault_path or Path("."))))

    settings = normalize_settings(toml_data.get("settings", {}))

    logging_data = toml_data.get("logging", {})
    log_file = logging_data.get("file")
    logging_config = LoggingConfig(
        level=str(logging_data.get("level", "INFO")).upper(),
        file=Path(log_file) if log_file else None,
    )

    return CoalesceConfig(vault=vault_config, settings=settings, logging=logging_config)
