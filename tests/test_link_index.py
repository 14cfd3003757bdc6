"""Tests for the in-memory vault link index."""

import tempfile
from pathlib import Path

from coalesce.adapters.fs_vault import FsVault
from coalesce.adapters.link_index import VaultLinkIndex, extract_link_texts


def write(root: Path, rel: str, text: str) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_extract_link_texts():
    """Test anchors, aliases and embeds."""
    text = "[[B]] [[sub/C|see]] ![[A.md]] [[B#Heading]] [[D^block]] [[]]"

    assert extract_link_texts(text) == ["B", "sub/C", "A.md", "B", "D"]


def test_rebuild_resolves_and_collects_unresolved():
    """Test resolved and unresolved mappings."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        write(root, "A.md", "[[B]] and [[sub/C|see]] [[Missing]] [[B#Heading]]")
        write(root, "B.md", "[[a]]")
        write(root, "sub/C.md", "![[A.md]]")

        index = VaultLinkIndex(FsVault(root))
        assert index.rebuild() == 3

        assert index.resolved_links() == {
            "A.md": ["B.md", "sub/C.md"],
            "B.md": ["A.md"],
            "sub/C.md": ["A.md"],
        }
        assert index.unresolved_links() == {"A.md": ["Missing"]}


def test_update_notes_incremental():
    """Test created and deleted notes."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        write(root, "A.md", "[[B]] [[Missing]]")
        write(root, "B.md", "text")
        index = VaultLinkIndex(FsVault(root))
        index.rebuild()

        write(root, "Missing.md", "now here")
        counts = index.update_notes({"Missing.md"}, set())
        assert counts == {"updated": 0, "inserted": 1, "removed": 0}
        assert index.resolved_links()["A.md"] == ["B.md", "Missing.md"]
        assert index.unresolved_links() == {}

        (root / "B.md").unlink()
        counts = index.update_notes(set(), {"B.md"})
        assert counts["removed"] == 1
        assert index.unresolved_links() == {"A.md": ["B"]}

        write(root, "A.md", "[[Missing]]")
        counts = index.update_notes({"A.md"}, set())
        assert counts["updated"] == 1
        assert index.resolved_links() == {"A.md": ["Missing.md"]}


def test_changed_but_gone_counts_as_removed():
    """Test a change event for a file that no longer exists."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        write(root, "A.md", "x")
        index = VaultLinkIndex(FsVault(root))
        index.rebuild()
        (root / "A.md").unlink()

        assert index.update_notes({"A.md"}, set())["removed"] == 1


def test_resolution_rules():
    """Test path, case-insensitive and ambiguous names."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        write(root, "x/N.md", "")
        write(root, "y/N.md", "")
        write(root, "Topic.md", "")
        index = VaultLinkIndex(FsVault(root))
        index.rebuild()

        assert index.resolve("x/N") == "x/N.md"
        assert index.resolve("Y/n.md") == "y/N.md"
        assert index.resolve("topic") == "Topic.md"
        assert index.resolve("N") is None
        assert index.resolve("Nope") is None


def test_rebuild_skips_undecodable_note():
    """Test that a note that is not UTF-8 is left out of the index."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        write(root, "A.md", "target")
        write(root, "B.md", "[[A]]")
        (root / "bad.md").write_bytes(b"\xff\xfe[[A]] \xc3")

        index = VaultLinkIndex(FsVault(root))

        assert index.rebuild() == 2
        assert index.resolved_links() == {"B.md": ["A.md"]}
