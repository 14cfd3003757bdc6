from typing import Any, Callable, Collection, Mapping, Protocol

from .model import BlockView, PaneId

SkipPredicate = Callable[[str], bool]


class LinkIndex(Protocol):
    """
    Host-maintained link graph, queried read-only.

    Both mappings are keyed by source path. Resolved values hold target paths,
    unresolved values hold the raw link text the host could not resolve.
    """

    def resolved_links(self) -> Mapping[str, Collection[str]]:
        pass

    def unresolved_links(self) -> Mapping[str, Collection[str]]:
        pass


class ContentProvider(Protocol):
    """
    Asynchronous file reader. May raise for any single path.
    """

    async def read(self, path: str) -> str:
        pass


class AliasProvider(Protocol):
    def declared_aliases(self, path: str) -> list[str]:
        pass


class Renderer(Protocol):
    """
    Turns block view-models into visuals. Markdown rendering lives here.
    """

    def render(self, pane_id: PaneId, views: list[BlockView], theme: str) -> None:
        pass

    def clear(self, pane_id: PaneId) -> None:
        pass


class Navigator(Protocol):
    def open(self, path: str, open_in_new_tab: bool) -> None:
        pass


class SettingsStore(Protocol):
    """
    Persistence for settings writes; the core never persists on its own.
    """

    def load(self) -> dict[str, Any]:
        pass

    def save(self, settings: Any) -> None:
        pass
