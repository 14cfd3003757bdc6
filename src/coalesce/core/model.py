from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

PaneId = str


@dataclass(frozen=True)
class TargetNote:
    path: str  # vault-relative, posix separators, with extension
    basename: str  # file name without extension
    declared_aliases: tuple[str, ...] = ()

    @classmethod
    def from_path(cls, path: str, declared_aliases: list[str] | tuple[str, ...] = ()) -> "TargetNote":
        name = path.rsplit("/", 1)[-1]
        if name.endswith(".md"):
            name = name[: -len(".md")]
        return cls(path=path, basename=name, declared_aliases=tuple(declared_aliases))


@dataclass(frozen=True)
class ReferenceMatch:
    offset: int
    raw_text: str  # the full "[[...]]" token
    alias_text: str | None = None  # everything after the first "|"

    @property
    def end(self) -> int:
        return self.offset + len(self.raw_text)


@dataclass(frozen=True)
class Boundary:
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass
class Block:
    source_path: str
    start_offset: int
    end_offset: int
    content: str
    title: str = ""
    start_line: int = 1
    is_collapsed: bool = False
    is_visible: bool = True
    aliases_found: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SortConfig:
    descending: bool = True
    by_full_path: bool = False


@dataclass(frozen=True)
class BlockView:
    """What the rendering collaborator receives for one block."""

    source_path: str
    title: str
    content: str
    start_line: int
    is_collapsed: bool
    is_visible: bool


class PaneState(Enum):
    ABSENT = "absent"
    ATTACHED = "attached"
    DETACHED = "detached"
    DESTROYED = "destroyed"


@dataclass
class ViewInstance:
    pane_id: PaneId
    target: TargetNote
    blocks: list[Block] = field(default_factory=list)  # discovery order
    ordered: list[Block] = field(default_factory=list)  # after filter/sort
    filter_text: str = ""
    alias_filter: str | None = None
    sort_descending: bool = True
    sort_by_full_path: bool = False
    blocks_collapsed_default: bool = False
    state: PaneState = PaneState.ATTACHED
    generation: int = 0
    strategy_name: str = ""

    @property
    def sort_config(self) -> SortConfig:
        return SortConfig(descending=self.sort_descending, by_full_path=self.sort_by_full_path)

    @property
    def visible_blocks(self) -> list[Block]:
        return [b for b in self.ordered if b.is_visible]
