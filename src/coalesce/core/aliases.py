"""Alias discovery and alias-based block selection."""

import re
from collections.abc import Collection, Iterable

from .matcher import MD_SUFFIX, strip_extension
from .model import Block


def _alias_pattern(note_name: str) -> re.Pattern[str]:
    name = re.escape(strip_extension(note_name))
    return re.compile(
        r"\[\[(?:[^\[\]|]*/)?" + name + r"(?:" + re.escape(MD_SUFFIX) + r")?\|([^\]]+)\]\]"
    )


def bare_reference(note_name: str) -> str:
    return f"[[{strip_extension(note_name)}]]"


def alias_tokens(content: str, note_name: str) -> list[str]:
    """
    Pipe-separated tokens following each reference to the note.

    ``[[Note|a|b]]`` gives ``["a", "b"]``. Empty tokens are skipped.
    """
    tokens: list[str] = []
    for m in _alias_pattern(note_name).finditer(content):
        for token in m.group(1).split("|"):
            token = token.strip()
            if token and token not in tokens:
                tokens.append(token)
    return tokens


def annotate_aliases(blocks: Iterable[Block], note_name: str) -> None:
    for block in blocks:
        block.aliases_found = alias_tokens(block.content, note_name)


def extract_unsaved_aliases(
    blocks: Iterable[Block], declared_aliases: Collection[str], note_name: str
) -> list[str]:
    """Aliases used in links to the note but not declared on it, sorted."""
    base = strip_extension(note_name)
    found: set[str] = set()
    for block in blocks:
        for token in alias_tokens(block.content, note_name):
            if token not in declared_aliases and token != base:
                found.add(token)
    return sorted(found)


def block_matches_alias(
    block: Block,
    alias: str | None,
    declared_aliases: Collection[str],
    note_name: str,
) -> bool:
    """
    Whether ``block`` belongs under ``alias``. Matching is case-sensitive.

    No alias selected matches everything. A declared alias also matches blocks
    that link to the note under its own name.
    """
    if alias is None:
        return True
    if alias in declared_aliases and bare_reference(note_name) in block.content:
        return True
    return alias in alias_tokens(block.content, note_name)
