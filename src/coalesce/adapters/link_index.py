import logging
import re
from collections.abc import Iterable

from ..core.matcher import MD_SUFFIX, strip_extension
from .fs_vault import FsVault

logger = logging.getLogger(__name__)

# [[target]], [[target|alias]], [[target#heading]], ![[embed]]
WIKILINK_TARGET_RE = re.compile(r"\[\[([^\[\]|#^]*)(?:[#^][^\[\]|]*)?(?:\|[^\]]*)?\]\]")


def extract_link_texts(text: str) -> list[str]:
    """Link targets in document order, without anchors or aliases."""
    out = []
    for m in WIKILINK_TARGET_RE.finditer(text):
        target = m.group(1).strip()
        if target:
            out.append(target)
    return out


class VaultLinkIndex:
    """
    In-memory link graph of an FsVault.

    Raw link texts are kept per source; resolution against the current file
    set happens on query, so a newly created note resolves links that were
    unresolved before.
    """

    def __init__(self, vault: FsVault):
        self.vault = vault
        self._links_out: dict[str, list[str]] = {}
        self._cache: tuple[dict[str, list[str]], dict[str, list[str]]] | None = None

    def _read_links(self, path: str) -> list[str] | None:
        try:
            return extract_link_texts(self.vault.read_text(path))
        except (OSError, UnicodeDecodeError):
            logger.warning("Could not read %s while indexing", path, exc_info=True)
            return None

    def rebuild(self) -> int:
        self._links_out.clear()
        for path in self.vault.list_paths():
            links = self._read_links(path)
            if links is not None:
                self._links_out[path] = links
        self._cache = None
        logger.info("Indexed %d notes", len(self._links_out))
        return len(self._links_out)

    def update_notes(self, changed: Iterable[str], deleted: Iterable[str]) -> dict[str, int]:
        """
        Incrementally update specific notes.

        Returns:
            Dictionary with counts: updated, inserted, removed
        """
        counts = {"updated": 0, "inserted": 0, "removed": 0}
        for path in deleted:
            if self._links_out.pop(path, None) is not None:
                counts["removed"] += 1
        for path in changed:
            if not self.vault.exists(path):
                if self._links_out.pop(path, None) is not None:
                    counts["removed"] += 1
                continue
            links = self._read_links(path)
            if links is None:
                continue
            counts["updated" if path in self._links_out else "inserted"] += 1
            self._links_out[path] = links
        self._cache = None
        logger.debug("Index update: %s", counts)
        return counts

    def resolve(self, text: str) -> str | None:
        """
        Resolve link text to a note path.

        Tries the exact path, the path plus ``.md``, a case-insensitive path,
        and finally a unique case-insensitive match on the file name (or path
        suffix when the text has folders).
        """
        paths = self._links_out
        for candidate in (text, text + MD_SUFFIX):
            if candidate in paths:
                return candidate

        wanted = strip_extension(text).lower()
        by_path = [p for p in paths if strip_extension(p).lower() == wanted]
        if len(by_path) == 1:
            return by_path[0]

        suffix = "/" + wanted
        by_name = [p for p in paths if ("/" + strip_extension(p).lower()).endswith(suffix)]
        if len(by_name) == 1:
            return by_name[0]
        if len(by_name) > 1:
            logger.debug("Ambiguous link %r matches %d notes", text, len(by_name))
        return None

    def _resolve_all(self) -> tuple[dict[str, list[str]], dict[str, list[str]]]:
        if self._cache is None:
            resolved: dict[str, list[str]] = {}
            unresolved: dict[str, list[str]] = {}
            for source, texts in self._links_out.items():
                for text in texts:
                    target = self.resolve(text)
                    if target is None:
                        bucket, value = unresolved.setdefault(source, []), text
                    else:
                        bucket, value = resolved.setdefault(source, []), target
                    if value not in bucket:
                        bucket.append(value)
            self._cache = (resolved, unresolved)
        return self._cache

    def resolved_links(self) -> dict[str, list[str]]:
        return self._resolve_all()[0]

    def unresolved_links(self) -> dict[str, list[str]]:
        return self._resolve_all()[1]
