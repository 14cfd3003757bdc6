"""Tests for configuration loading."""

import tempfile
from pathlib import Path

from coalesce.config import load_config
from coalesce.core.settings import Settings, normalize_settings


def test_load_config_defaults():
    """Test loading config with defaults when no file exists."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config = load_config(vault_path=Path(tmpdir))

        assert config.vault.root == Path(tmpdir)
        assert config.settings == Settings()
        assert config.settings.sort_descending is True
        assert config.settings.theme == "default"
        assert config.settings.filter_debounce_ms == 120
        assert config.logging.level == "INFO"
        assert config.logging.file is None


def test_load_config_from_file():
    """Test loading config from a file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "coalesce.toml"
        config_path.write_text("""
[vault]
root = "my-vault"

[settings]
block_boundary_strategy = "top-line"
header_style = "short"
sort_descending = false
daily_notes_folder = "journal"

[logging]
level = "debug"
file = "logs/coalesce.log"
""")

        config = load_config(config_path=config_path)

        assert config.vault.root == Path("my-vault")
        assert config.settings.block_boundary_strategy == "top-line"
        assert config.settings.header_style == "short"
        assert config.settings.sort_descending is False
        assert config.settings.daily_notes_folder == "journal"
        assert config.logging.level == "DEBUG"
        assert config.logging.file == Path("logs/coalesce.log")


def test_load_config_from_vault():
    """Test the vault fallback location."""
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        (vault / "coalesce.toml").write_text('[settings]\ntheme = "compact"\n')

        config = load_config(vault_path=vault)

        assert config.settings.theme == "compact"


def test_invalid_values_fall_back():
    """Test unknown choices and wrong types."""
    settings = normalize_settings({
        "block_boundary_strategy": "sideways",
        "theme": "neon",
        "header_style": "huge",
        "hide_backlink_line": "yes",
        "filter_debounce_ms": -5,
        "daily_notes_folder": 3,
        "not_a_setting": True,
    })

    assert settings == Settings()


def test_normalize_layers_over_base():
    """Test in-place updates of an existing snapshot."""
    base = Settings(theme="modern")
    result = normalize_settings({"blocks_collapsed": True}, base=base)

    assert result is base
    assert base.theme == "modern"
    assert base.blocks_collapsed is True


def test_loaded_settings_use_core_type():
    """Test that the loader builds the Settings the core reads."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config = load_config(vault_path=Path(tmpdir))

    assert type(config.settings) is Settings
