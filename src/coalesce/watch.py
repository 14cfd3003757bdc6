"""Watch mode - re-render a note's excerpts whenever the vault changes."""

import asyncio
import logging
import signal
import sys
import time
from pathlib import Path
from typing import Any, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class DebounceHandler(FileSystemEventHandler):
    """File system event handler with debouncing."""

    def __init__(
        self,
        vault_path: Path,
        on_batch: Callable[[set[str], set[str]], None] | None,
        debounce_ms: int = 150,
    ):
        super().__init__()
        self.vault_path = vault_path
        self.on_batch = on_batch
        self.debounce_ms = debounce_ms

        # Pending changes by vault-relative path
        self.changed: set[str] = set()
        self.deleted: set[str] = set()
        self.last_event_time = 0.0

    def _should_skip(self, path: Path) -> bool:
        name = path.name
        if name.startswith("."):
            return True
        if name.endswith("~") or name.endswith(".swp"):
            return True
        return not name.endswith(".md")

    def _relative(self, raw: Any) -> str | None:
        path = Path(str(raw))
        if self._should_skip(path):
            return None
        try:
            rel = path.relative_to(self.vault_path)
        except ValueError:
            return None
        if any(part.startswith(".") for part in rel.parts):
            return None
        return rel.as_posix()

    def _touch(self) -> None:
        self.last_event_time = time.time()

    def on_created(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        rel = self._relative(event.src_path)
        if rel:
            self.deleted.discard(rel)
            self.changed.add(rel)
            self._touch()

    on_modified = on_created

    def on_deleted(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        rel = self._relative(event.src_path)
        if rel:
            self.changed.discard(rel)
            self.deleted.add(rel)
            self._touch()

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        src = self._relative(event.src_path)
        dest = self._relative(getattr(event, "dest_path", ""))
        if src:
            self.changed.discard(src)
            self.deleted.add(src)
        if dest:
            self.deleted.discard(dest)
            self.changed.add(dest)
        if src or dest:
            self._touch()

    def check_and_flush(self) -> None:
        """Flush if the debounce period has elapsed."""
        if not (self.changed or self.deleted):
            return
        elapsed = (time.time() - self.last_event_time) * 1000
        if elapsed >= self.debounce_ms:
            self.flush()

    def flush(self) -> None:
        if not (self.changed or self.deleted):
            return
        changed, deleted = set(self.changed), set(self.deleted)
        self.changed.clear()
        self.deleted.clear()
        if self.on_batch:
            self.on_batch(changed, deleted)


def watch_note(
    rt: Any,
    pane_id: str,
    note_path: str,
    debounce_ms: int = 150,
    quiet: bool = False,
) -> int:
    """
    Show ``note_path`` in ``pane_id`` and refresh it on every vault change.

    Returns:
        Exit code
    """
    vault_path = rt.vault.root
    if not vault_path.exists():
        print(f"Error: Vault not found: {vault_path}", file=sys.stderr)
        return 1
    vault_path = vault_path.resolve()

    running = True
    loop = asyncio.new_event_loop()

    def handle_batch(changed: set[str], deleted: set[str]) -> None:
        start_time = time.time()
        try:
            counts = rt.link_index.update_notes(changed, deleted)
            loop.run_until_complete(rt.coordinator.refresh_all())
            duration_ms = int((time.time() - start_time) * 1000)
            logger.info("Refreshed after %s (%dms)", counts, duration_ms)
        except Exception as e:
            logger.error("Refresh failed", exc_info=True)
            print(f"Error: {e}", file=sys.stderr, flush=True)

    def signal_handler(signum: int, frame: Any) -> None:
        nonlocal running
        running = False
        if not quiet:
            print("\nShutting down...", flush=True)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    loop.run_until_complete(rt.coordinator.on_file_open(pane_id, note_path))

    handler = DebounceHandler(vault_path, handle_batch, debounce_ms)
    observer = Observer()
    observer.schedule(handler, str(vault_path), recursive=True)

    if not quiet:
        print(f"Watching {vault_path} for {note_path} (debounce: {debounce_ms}ms)", flush=True)
        print("Press Ctrl+C to stop", flush=True)

    observer.start()
    try:
        while running:
            time.sleep(0.1)
            handler.check_and_flush()
    finally:
        handler.flush()
        observer.stop()
        observer.join()
        rt.coordinator.teardown_all()
        loop.close()

    if not quiet:
        print("Watch stopped", flush=True)
    return 0
