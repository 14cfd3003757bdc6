"""Cut one source document into blocks around its references to a note."""

import logging

from .model import Block
from .ports import ContentProvider
from .strategies import BoundaryStrategy

logger = logging.getLogger(__name__)


def line_number(content: str, offset: int) -> int:
    """1-based line number of ``offset``."""
    return content.count("\n", 0, offset) + 1


def segment(
    content: str,
    note_name: str,
    strategy: BoundaryStrategy,
    source_path: str = "",
    note_path: str | None = None,
) -> list[Block]:
    """
    Blocks for every valid boundary, in match order.

    The title is a placeholder (the source path); the coordinator replaces it
    according to the header style.
    """
    blocks = []
    for boundary in strategy.find_boundaries(content, note_name, note_path):
        blocks.append(
            Block(
                source_path=source_path,
                start_offset=boundary.start,
                end_offset=boundary.end,
                content=strategy.excerpt(content, boundary),
                title=source_path,
                start_line=line_number(content, boundary.start),
            )
        )
    return blocks


async def segment_source(
    provider: ContentProvider,
    source_path: str,
    note_name: str,
    strategy: BoundaryStrategy,
    note_path: str | None = None,
) -> list[Block]:
    """
    Read ``source_path`` and segment it.

    A failed read is logged and yields no blocks for that file.
    """
    try:
        content = await provider.read(source_path)
    except Exception:
        logger.error("Failed to read %s; it contributes no blocks", source_path, exc_info=True)
        return []
    blocks = segment(content, note_name, strategy, source_path, note_path)
    logger.debug(
        "Segmented %s: strategy=%s blocks=%d", source_path, strategy.name, len(blocks)
    )
    return blocks
