"""Runtime wiring helper for CLI applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_vault import FsVault
from .adapters.link_index import VaultLinkIndex
from .adapters.settings_store import SETTINGS_FILE, JsonSettingsStore
from .config import CoalesceConfig, load_config
from .core.coordinator import ViewLifecycleCoordinator
from .core.daily import daily_note_skip
from .core.ports import Navigator, Renderer
from .core.settings import Settings, normalize_settings


@dataclass
class Runtime:
    """Container for all wired components."""
    vault: FsVault
    link_index: VaultLinkIndex
    settings: Settings
    settings_store: JsonSettingsStore
    coordinator: ViewLifecycleCoordinator
    config: CoalesceConfig


def build_runtime(
    vault_path: Path | None = None,
    config_path: Path | None = None,
    renderer: Renderer | None = None,
    navigator: Navigator | None = None,
) -> Runtime:
    """Build and wire all components for a vault."""
    config = load_config(config_path=config_path, vault_path=vault_path)

    # CLI argument wins over config
    if vault_path is None:
        vault_path = config.vault.root

    vault = FsVault(vault_path)
    link_index = VaultLinkIndex(vault)
    link_index.rebuild()

    # settings saved from earlier sessions override coalesce.toml
    store = JsonSettingsStore(vault_path / SETTINGS_FILE)
    settings = normalize_settings(store.load(), base=config.settings)

    coordinator = ViewLifecycleCoordinator(
        link_index=link_index,
        content=vault,
        aliases=vault,
        settings=settings,
        should_skip=daily_note_skip(settings),
        renderer=renderer,
        navigator=navigator,
        settings_store=store,
    )

    return Runtime(
        vault=vault,
        link_index=link_index,
        settings=settings,
        settings_store=store,
        coordinator=coordinator,
        config=config,
    )
