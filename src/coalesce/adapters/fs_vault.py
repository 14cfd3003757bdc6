import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path

from .yaml_codec import YamlFrontmatter, aliases_from_meta

logger = logging.getLogger(__name__)


class FsVault:
    """
    A directory of Markdown notes addressed by vault-relative posix paths.

    Serves as the content provider and the alias provider.
    """

    def __init__(self, root: Path, fm: YamlFrontmatter | None = None):
        self.root = root
        self.fm = fm or YamlFrontmatter()

    def _path(self, path: str) -> Path:
        return self.root / Path(*path.split("/"))

    def relative(self, p: Path) -> str:
        return p.relative_to(self.root).as_posix()

    def exists(self, path: str) -> bool:
        return self._path(path).is_file()

    def list_paths(self) -> Iterable[str]:
        if not self.root.exists():
            return []
        paths = []
        for p in self.root.rglob("*.md"):
            rel = p.relative_to(self.root)
            # skip .obsidian, .trash and friends
            if any(part.startswith(".") for part in rel.parts):
                continue
            if p.is_file():
                paths.append(rel.as_posix())
        return sorted(paths)

    def read_text(self, path: str) -> str:
        return self._path(path).read_text(encoding="utf-8")

    async def read(self, path: str) -> str:
        return await asyncio.to_thread(self.read_text, path)

    def declared_aliases(self, path: str) -> list[str]:
        p = self._path(path)
        if not p.is_file():
            return []
        meta, _ = self.fm.decode(p.read_text(encoding="utf-8"))
        return aliases_from_meta(meta)
