"""Tests for alias extraction and alias filtering."""

from coalesce.core.aliases import (
    alias_tokens,
    annotate_aliases,
    block_matches_alias,
    extract_unsaved_aliases,
)
from coalesce.core.model import Block


def block(content, source="s.md"):
    return Block(source_path=source, start_offset=0, end_offset=len(content), content=content)


def test_unsaved_aliases_exclude_declared():
    """Test declared ['x'] with '[[A|x|y]]' gives ['y']."""
    assert extract_unsaved_aliases([block("[[A|x|y]]")], ["x"], "A") == ["y"]


def test_unsaved_aliases_sorted_unique_across_blocks():
    """Test ordering and deduplication."""
    blocks = [block("[[A|zeta]] [[A|alpha]]"), block("[[folder/A.md|zeta]] [[A| beta ]]")]

    assert extract_unsaved_aliases(blocks, [], "A") == ["alpha", "beta", "zeta"]


def test_unsaved_aliases_exclude_note_name():
    """Test that '[[A|A]]' is not an alias."""
    assert extract_unsaved_aliases([block("[[A|A]]")], [], "A") == []


def test_malformed_syntax_is_tolerated():
    """Test unclosed and empty alias suffixes."""
    assert alias_tokens("[[A|", "A") == []
    assert alias_tokens("[[A||x]]", "A") == ["x"]
    assert alias_tokens("[[B|x]]", "A") == []


def test_annotate_aliases():
    """Test that aliases_found is filled per block."""
    blocks = [block("[[A|p|q]]"), block("[[A]]")]
    annotate_aliases(blocks, "A")

    assert blocks[0].aliases_found == ["p", "q"]
    assert blocks[1].aliases_found == []


def test_block_matches_alias():
    """Test alias filter rules."""
    assert block_matches_alias(block("[[A]]"), None, [], "A")
    assert block_matches_alias(block("[[A|foo]]"), "foo", [], "A")
    assert block_matches_alias(block("[[A|bar|foo]]"), "foo", [], "A")
    assert not block_matches_alias(block("[[A]]"), "foo", [], "A")
    assert not block_matches_alias(block("[[B|foo]]"), "foo", [], "A")


def test_declared_alias_matches_bare_reference():
    """Test that a declared alias also selects plain links."""
    assert block_matches_alias(block("see [[A]]"), "x", ["x"], "A")
    assert not block_matches_alias(block("see [[A]]"), "y", ["x"], "A")


def test_alias_match_is_case_sensitive():
    """Test exact token comparison."""
    assert not block_matches_alias(block("[[A|foo]]"), "Foo", [], "A")
