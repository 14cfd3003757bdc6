"""
Per-pane lifecycle of excerpt collections.

Every open pane showing a note gets its own ViewInstance. Pane events drive
the pipeline backlinks -> segmenter -> aliases -> filter/sort and the result
is handed to the renderer. Reads are the only suspension points; a newer
event for a pane makes any older in-flight result for that pane stale.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from .aliases import annotate_aliases, extract_unsaved_aliases
from .backlinks import find_sources_linking_to
from .daily import is_daily_note
from .debounce import Debouncer
from .display import display_content, title_for
from .filtering import apply
from .model import Block, BlockView, PaneId, PaneState, TargetNote, ViewInstance
from .ports import (
    AliasProvider,
    ContentProvider,
    LinkIndex,
    Navigator,
    Renderer,
    SettingsStore,
    SkipPredicate,
)
from .segmenter import segment_source
from .settings import normalize_settings
from .strategies import BoundaryStrategy, get_strategy

logger = logging.getLogger(__name__)


class ViewRegistry:
    """
    Pane id -> ViewInstance, plus a generation counter per pane.

    The generation is bumped by every event that starts a recomputation or
    ends a pane; a result is committed only if its generation is still the
    latest for its pane.
    """

    def __init__(self) -> None:
        self._views: dict[PaneId, ViewInstance] = {}
        self._generations: dict[PaneId, int] = {}
        self._targets: dict[PaneId, str] = {}

    def __contains__(self, pane_id: object) -> bool:
        return pane_id in self._views

    def __len__(self) -> int:
        return len(self._views)

    def __iter__(self) -> Iterator[PaneId]:
        return iter(list(self._views))

    def get(self, pane_id: PaneId) -> ViewInstance | None:
        return self._views.get(pane_id)

    def put(self, instance: ViewInstance) -> None:
        self._views[instance.pane_id] = instance

    def remove(self, pane_id: PaneId) -> ViewInstance | None:
        return self._views.pop(pane_id, None)

    def tracked(self) -> set[PaneId]:
        """Panes with an instance or a recomputation in flight."""
        return set(self._views) | set(self._targets)

    def begin(self, pane_id: PaneId, target_path: str) -> int:
        generation = self._generations.get(pane_id, 0) + 1
        self._generations[pane_id] = generation
        self._targets[pane_id] = target_path
        return generation

    def is_current(self, pane_id: PaneId, generation: int, target_path: str) -> bool:
        return (
            self._generations.get(pane_id) == generation
            and self._targets.get(pane_id) == target_path
        )

    def target(self, pane_id: PaneId) -> str | None:
        """Path of the latest recomputation started for the pane."""
        return self._targets.get(pane_id)

    def forget(self, pane_id: PaneId) -> None:
        # keep the counter so late results for this pane stay stale
        self._generations[pane_id] = self._generations.get(pane_id, 0) + 1
        self._targets.pop(pane_id, None)


class ViewLifecycleCoordinator:
    def __init__(
        self,
        link_index: LinkIndex,
        content: ContentProvider,
        aliases: AliasProvider,
        settings: Any,
        should_skip: SkipPredicate | None = None,
        renderer: Renderer | None = None,
        navigator: Navigator | None = None,
        settings_store: SettingsStore | None = None,
        registry: ViewRegistry | None = None,
    ):
        self.link_index = link_index
        self.content = content
        self.aliases = aliases
        self.settings = settings
        self.should_skip = should_skip or (lambda path: False)
        self.renderer = renderer
        self.navigator = navigator
        self.settings_store = settings_store
        self.registry = registry if registry is not None else ViewRegistry()
        self.debouncer = Debouncer(settings.filter_debounce_ms)
        self._pending_filters: dict[PaneId, str] = {}

    # ----- state machine -------------------------------------------------

    def state(self, pane_id: PaneId) -> PaneState:
        instance = self.registry.get(pane_id)
        return instance.state if instance else PaneState.ABSENT

    async def on_file_open(self, pane_id: PaneId, path: str | None) -> ViewInstance | None:
        """
        A pane opened or gained focus with ``path``.

        Returns the committed instance, or None when the pane is skipped or
        the result was superseded by a newer event.
        """
        if not pane_id or not path:
            return None

        if self.should_skip(path):
            logger.debug("Skipping pane %s for %s", pane_id, path)
            self.teardown(pane_id)
            return None

        existing = self.registry.get(pane_id)
        if existing is not None and existing.target.path == path:
            # an in-flight recompute of the same note stays current
            if self.registry.target(pane_id) != path:
                self.registry.begin(pane_id, path)
            existing.state = PaneState.ATTACHED
            logger.debug("Reattached pane %s (%s)", pane_id, path)
            self._emit(existing)
            return existing

        return await self._recompute(pane_id, path)

    async def on_mode_switch(self, pane_id: PaneId, mode: str | None = None) -> ViewInstance | None:
        instance = self.registry.get(pane_id)
        if instance is None:
            return None
        path = instance.target.path
        if self.should_skip(path):
            logger.debug("Pane %s switched to %s and is now skipped", pane_id, mode)
            self.teardown(pane_id)
            return None
        logger.debug("Pane %s switched to %s, recomputing", pane_id, mode)
        return await self._recompute(pane_id, path)

    def on_layout_change(self, open_pane_ids: Iterable[PaneId]) -> list[PaneId]:
        """Tear down every pane that is no longer open. Returns the removed ids."""
        still_open = set(open_pane_ids)
        removed = sorted(p for p in self.registry.tracked() if p not in still_open)
        for pane_id in removed:
            self.teardown(pane_id)
        return removed

    def detach(self, pane_id: PaneId) -> None:
        instance = self.registry.get(pane_id)
        if instance is not None and instance.state is PaneState.ATTACHED:
            instance.state = PaneState.DETACHED
            logger.debug("Detached pane %s", pane_id)

    def teardown(self, pane_id: PaneId) -> None:
        self.debouncer.cancel(pane_id)
        self._pending_filters.pop(pane_id, None)
        self.registry.forget(pane_id)
        instance = self.registry.remove(pane_id)
        if instance is None:
            return
        instance.state = PaneState.DESTROYED
        if self.renderer is not None:
            self.renderer.clear(pane_id)
        logger.info("Tore down pane %s (%s)", pane_id, instance.target.path)

    def teardown_all(self) -> None:
        for pane_id in sorted(self.registry.tracked()):
            self.teardown(pane_id)

    async def refresh_all(self) -> None:
        """Recompute every pane, e.g. after the link index changed."""
        for pane_id in self.registry:
            instance = self.registry.get(pane_id)
            if instance is not None:
                await self._recompute(pane_id, instance.target.path)

    # ----- pipeline ------------------------------------------------------

    def _declared_aliases(self, path: str) -> list[str]:
        try:
            return list(self.aliases.declared_aliases(path))
        except Exception:
            logger.error("Failed to read aliases of %s", path, exc_info=True)
            return []

    async def _collect_blocks(
        self, target: TargetNote, strategy: BoundaryStrategy
    ) -> list[Block]:
        sources = find_sources_linking_to(
            target.path,
            self.link_index.resolved_links(),
            self.link_index.unresolved_links(),
        )
        blocks: list[Block] = []
        for source in sources:
            if self.settings.only_daily_notes and not is_daily_note(
                source, self.settings.daily_notes_folder
            ):
                continue
            blocks.extend(
                await segment_source(self.content, source, target.basename, strategy, target.path)
            )
        return blocks

    async def _recompute(self, pane_id: PaneId, path: str) -> ViewInstance | None:
        generation = self.registry.begin(pane_id, path)
        target = TargetNote.from_path(path, self._declared_aliases(path))
        strategy = get_strategy(self.settings.block_boundary_strategy)

        blocks = await self._collect_blocks(target, strategy)
        if not self.registry.is_current(pane_id, generation, path):
            logger.debug("Discarding stale result for pane %s (%s)", pane_id, path)
            return None

        # built after the reads so pane changes made meanwhile carry over
        instance = self._new_instance(pane_id, target, self.registry.get(pane_id))
        instance.generation = generation
        instance.strategy_name = strategy.name
        instance.blocks = blocks
        annotate_aliases(blocks, target.basename)
        for block in blocks:
            block.is_collapsed = instance.blocks_collapsed_default
        self._retitle(instance)
        self._refilter(instance)
        self.registry.put(instance)
        logger.info("Attached pane %s (%s): %d blocks", pane_id, path, len(blocks))
        self._emit(instance)
        return instance

    def _new_instance(
        self, pane_id: PaneId, target: TargetNote, previous: ViewInstance | None
    ) -> ViewInstance:
        if previous is not None and previous.target.path == target.path:
            return ViewInstance(
                pane_id=pane_id,
                target=target,
                filter_text=previous.filter_text,
                alias_filter=previous.alias_filter,
                sort_descending=previous.sort_descending,
                sort_by_full_path=previous.sort_by_full_path,
                blocks_collapsed_default=previous.blocks_collapsed_default,
                state=previous.state,
            )
        return ViewInstance(
            pane_id=pane_id,
            target=target,
            sort_descending=self.settings.sort_descending,
            sort_by_full_path=self.settings.sort_by_full_path,
            blocks_collapsed_default=self.settings.blocks_collapsed,
        )

    def _retitle(self, instance: ViewInstance) -> None:
        for block in instance.blocks:
            block.title = title_for(block.source_path, block.content, self.settings.header_style)

    def _refilter(self, instance: ViewInstance) -> None:
        instance.ordered = apply(
            instance.blocks,
            instance.filter_text,
            instance.alias_filter,
            instance.sort_config,
            instance.target.declared_aliases,
            instance.target.basename,
        )

    def views(self, pane_id: PaneId) -> list[BlockView]:
        """Ordered view-models for the renderer."""
        instance = self.registry.get(pane_id)
        if instance is None:
            return []
        strategy = instance.strategy_name
        return [
            BlockView(
                source_path=block.source_path,
                title=block.title,
                content=display_content(
                    block.content,
                    instance.target.basename,
                    strategy,
                    self.settings.hide_backlink_line,
                    self.settings.hide_first_header,
                ),
                start_line=block.start_line,
                is_collapsed=block.is_collapsed,
                is_visible=block.is_visible,
            )
            for block in instance.ordered
        ]

    def _emit(self, instance: ViewInstance) -> None:
        if self.renderer is None or instance.state is not PaneState.ATTACHED:
            return
        self.renderer.render(instance.pane_id, self.views(instance.pane_id), self.settings.theme)

    # ----- per-pane user actions -----------------------------------------

    def set_filter_text(self, pane_id: PaneId, text: str) -> None:
        """Debounced: only the last text of a burst is applied."""
        if pane_id not in self.registry:
            return
        self._pending_filters[pane_id] = text
        self.debouncer.schedule(pane_id, lambda: self._apply_filter(pane_id))

    def flush_filter(self, pane_id: PaneId) -> None:
        self.debouncer.flush(pane_id)

    def _apply_filter(self, pane_id: PaneId) -> None:
        text = self._pending_filters.pop(pane_id, None)
        instance = self.registry.get(pane_id)
        if instance is None or text is None:
            return
        instance.filter_text = text
        self._refilter(instance)
        self._emit(instance)

    def set_alias_filter(self, pane_id: PaneId, alias: str | None) -> None:
        instance = self.registry.get(pane_id)
        if instance is None:
            return
        instance.alias_filter = alias
        self._refilter(instance)
        self._emit(instance)

    def toggle_sort_direction(self, pane_id: PaneId) -> None:
        instance = self.registry.get(pane_id)
        if instance is None:
            return
        instance.sort_descending = not instance.sort_descending
        self.update_settings(sort_descending=instance.sort_descending)
        self._refilter(instance)
        self._emit(instance)

    def toggle_sort_by_full_path(self, pane_id: PaneId) -> None:
        instance = self.registry.get(pane_id)
        if instance is None:
            return
        instance.sort_by_full_path = not instance.sort_by_full_path
        self.update_settings(sort_by_full_path=instance.sort_by_full_path)
        self._refilter(instance)
        self._emit(instance)

    def set_collapsed(self, pane_id: PaneId, collapsed: bool) -> None:
        instance = self.registry.get(pane_id)
        if instance is None:
            return
        instance.blocks_collapsed_default = collapsed
        for block in instance.blocks:
            block.is_collapsed = collapsed
        self.update_settings(blocks_collapsed=collapsed)
        self._emit(instance)

    def toggle_block(self, pane_id: PaneId, position: int) -> None:
        """Collapse or expand one block, by its position in display order."""
        instance = self.registry.get(pane_id)
        if instance is None or not 0 <= position < len(instance.ordered):
            return
        block = instance.ordered[position]
        block.is_collapsed = not block.is_collapsed
        self._emit(instance)

    def unsaved_aliases(self, pane_id: PaneId) -> list[str]:
        instance = self.registry.get(pane_id)
        if instance is None:
            return []
        return extract_unsaved_aliases(
            instance.blocks, instance.target.declared_aliases, instance.target.basename
        )

    def activate_link(self, path: str, open_in_new_tab: bool = False) -> str:
        """Hand a clicked block link to the navigator. Returns the clean path."""
        clean = path.strip()
        while clean.startswith("[["):
            clean = clean[2:]
        while clean.endswith("]]"):
            clean = clean[:-2]
        if self.navigator is not None:
            self.navigator.open(clean, open_in_new_tab)
        return clean

    # ----- global settings changes ---------------------------------------

    def update_settings(self, **changes: Any) -> None:
        """
        Apply changes to the settings snapshot and forward them to the store.
        """
        normalize_settings(changes, base=self.settings)
        self.debouncer.delay_ms = self.settings.filter_debounce_ms
        if self.settings_store is not None:
            self.settings_store.save(self.settings)

    async def set_strategy(self, name: str) -> None:
        self.update_settings(block_boundary_strategy=name)
        await self.refresh_all()

    def set_header_style(self, style: str) -> None:
        self.update_settings(header_style=style)
        for pane_id in self.registry:
            instance = self.registry.get(pane_id)
            if instance is not None:
                self._retitle(instance)
                self._refilter(instance)
                self._emit(instance)

    def set_theme(self, theme: str) -> None:
        self.update_settings(theme=theme)
        for pane_id in self.registry:
            instance = self.registry.get(pane_id)
            if instance is not None:
                self._emit(instance)
