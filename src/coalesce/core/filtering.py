"""Text filter, alias filter and ordering for one pane's blocks."""

from collections.abc import Collection, Sequence

from .aliases import block_matches_alias
from .model import Block, SortConfig


def sort_key(block: Block, by_full_path: bool) -> tuple[str, str]:
    primary = block.source_path if by_full_path else block.source_path.rsplit("/", 1)[-1]
    return (primary, block.content)


def sort_blocks(blocks: Sequence[Block], config: SortConfig) -> list[Block]:
    # sorted() keeps equal keys in input order, also with reverse=True
    return sorted(
        blocks, key=lambda b: sort_key(b, config.by_full_path), reverse=config.descending
    )


def matches_text(block: Block, filter_text: str) -> bool:
    if not filter_text:
        return True
    needle = filter_text.lower()
    return needle in block.content.lower() or needle in block.title.lower()


def apply(
    blocks: Sequence[Block],
    filter_text: str,
    alias_filter: str | None,
    sort_config: SortConfig,
    declared_aliases: Collection[str] = (),
    note_name: str = "",
) -> list[Block]:
    """
    Annotate visibility and return the blocks in display order.

    Only ``is_visible`` is written; content and discovery order of the input
    sequence are left alone, so applying twice gives the same result.
    """
    for block in blocks:
        block.is_visible = block_matches_alias(
            block, alias_filter, declared_aliases, note_name
        ) and matches_text(block, filter_text)
    return sort_blocks(blocks, sort_config)
