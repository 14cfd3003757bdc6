"""Which source files link to a target note."""

import logging
from collections.abc import Collection, Mapping

from .matcher import strip_extension

logger = logging.getLogger(__name__)


def find_sources_linking_to(
    target_path: str,
    resolved_links: Mapping[str, Collection[str]],
    unresolved_links: Mapping[str, Collection[str]] | None = None,
) -> list[str]:
    """
    Source paths referencing ``target_path``, deduplicated.

    Resolved sources come first, in index order. Sources whose unresolved link
    text names the target's file (case-insensitive, with or without the
    extension) follow. Nothing is cached; every call reads the given snapshot.
    """
    sources: list[str] = []
    seen: set[str] = set()

    for source, targets in resolved_links.items():
        if target_path in targets and source not in seen:
            seen.add(source)
            sources.append(source)
    resolved_count = len(sources)

    if unresolved_links:
        file_name = target_path.rsplit("/", 1)[-1].lower()
        names = {file_name, strip_extension(file_name)}
        for source, texts in unresolved_links.items():
            if source in seen:
                continue
            if any(text.lower() in names for text in texts):
                seen.add(source)
                sources.append(source)

    logger.debug(
        "Backlinks for %s: resolved=%d unresolved=%d",
        target_path,
        resolved_count,
        len(sources) - resolved_count,
    )
    return sources
