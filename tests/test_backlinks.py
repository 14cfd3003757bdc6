"""Tests for backlink source aggregation."""

from coalesce.core.backlinks import find_sources_linking_to


def test_resolved_sources_in_index_order():
    """Test sources whose resolved targets contain the note."""
    resolved = {
        "b.md": ["a.md"],
        "c.md": ["x.md", "a.md", "a.md"],
        "d.md": ["x.md"],
    }

    assert find_sources_linking_to("a.md", resolved) == ["b.md", "c.md"]


def test_no_sources():
    """Test empty and unrelated indexes."""
    assert find_sources_linking_to("a.md", {}) == []
    assert find_sources_linking_to("a.md", {"b.md": []}) == []


def test_unresolved_sources_follow_resolved():
    """Test case-insensitive matching of unresolved link text."""
    resolved = {"b.md": ["notes/Alpha.md"]}
    unresolved = {
        "e.md": ["alpha"],
        "f.md": ["ALPHA.md"],
        "g.md": ["beta"],
        "b.md": ["Alpha"],
    }

    assert find_sources_linking_to("notes/Alpha.md", resolved, unresolved) == [
        "b.md",
        "e.md",
        "f.md",
    ]
