"""Tests for watch mode functionality."""

import tempfile
import time
from pathlib import Path

from watchdog.events import (
    DirCreatedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from coalesce.watch import DebounceHandler


def make_handler(vault_path: Path, debounce_ms: int = 150):
    batches = []
    handler = DebounceHandler(vault_path, lambda c, d: batches.append((c, d)), debounce_ms)
    return handler, batches


def test_debounce_handler_collects_relative_paths():
    """Test batching of created and modified notes."""
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        handler, batches = make_handler(vault)

        handler.on_created(FileCreatedEvent(str(vault / "a.md")))
        handler.on_modified(FileModifiedEvent(str(vault / "sub" / "b.md")))
        handler.on_modified(FileModifiedEvent(str(vault / "a.md")))
        handler.flush()

        assert batches == [({"a.md", "sub/b.md"}, set())]


def test_debounce_handler_skips_non_notes():
    """Test hidden, temporary, non-Markdown and directory events."""
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        handler, batches = make_handler(vault)

        handler.on_created(FileCreatedEvent(str(vault / ".hidden.md")))
        handler.on_created(FileCreatedEvent(str(vault / "a.md.swp")))
        handler.on_created(FileCreatedEvent(str(vault / "notes.txt")))
        handler.on_created(FileCreatedEvent(str(vault / ".obsidian" / "x.md")))
        handler.on_created(DirCreatedEvent(str(vault / "folder.md")))
        handler.on_created(FileCreatedEvent("/elsewhere/a.md"))
        handler.flush()

        assert batches == []


def test_debounce_handler_deletes_and_moves():
    """Test deletion and rename bookkeeping."""
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        handler, batches = make_handler(vault)

        handler.on_created(FileCreatedEvent(str(vault / "tmp.md")))
        handler.on_deleted(FileDeletedEvent(str(vault / "tmp.md")))
        handler.on_moved(FileMovedEvent(str(vault / "a.md"), str(vault / "sub" / "b.md")))
        handler.flush()

        assert batches == [({"sub/b.md"}, {"tmp.md", "a.md"})]


def test_check_and_flush_waits_for_quiet_period():
    """Test the debounce window."""
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        handler, batches = make_handler(vault, debounce_ms=50)

        handler.on_created(FileCreatedEvent(str(vault / "a.md")))
        handler.check_and_flush()
        assert batches == []

        time.sleep(0.1)
        handler.check_and_flush()
        assert batches == [({"a.md"}, set())]

        handler.check_and_flush()
        assert len(batches) == 1
