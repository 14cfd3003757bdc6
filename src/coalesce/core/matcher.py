"""Find wiki-link references to a note inside another note's text."""

import re

from .model import ReferenceMatch

MD_SUFFIX = ".md"

# Optional folder prefix; the alias suffix is captured without its leading pipe.
_PREFIX = r"\[\[(?:[^\[\]|]*/)?"
_SUFFIX = r"(?:\|([^\]]*))?\]\]"


def strip_extension(name: str) -> str:
    return name[: -len(MD_SUFFIX)] if name.endswith(MD_SUFFIX) else name


def reference_names(note_name: str, note_path: str | None = None) -> list[str]:
    """
    Every spelling a link to the note may use.

    Order: full path with extension, full path without extension, bare
    basename, basename with extension. Duplicates and empty names are dropped.
    """
    candidates: list[str] = []
    if note_path:
        candidates.append(note_path)
        candidates.append(strip_extension(note_path))
    base = strip_extension(note_name)
    candidates.append(base)
    candidates.append(base + MD_SUFFIX)

    names: list[str] = []
    for name in candidates:
        if name and name not in names:
            names.append(name)
    return names


def reference_pattern(name: str) -> re.Pattern[str]:
    return re.compile(_PREFIX + re.escape(name) + _SUFFIX)


def find_references(
    content: str, note_name: str, note_path: str | None = None
) -> list[ReferenceMatch]:
    """
    Return every reference to the note in document order.

    Matches found by several spellings at the same offset count once.
    """
    by_offset: dict[int, ReferenceMatch] = {}
    for name in reference_names(note_name, note_path):
        for m in reference_pattern(name).finditer(content):
            if m.start() in by_offset:
                continue
            by_offset[m.start()] = ReferenceMatch(
                offset=m.start(), raw_text=m.group(0), alias_text=m.group(1)
            )
    return [by_offset[offset] for offset in sorted(by_offset)]


def next_reference_offset(
    content: str, note_name: str, after: int, note_path: str | None = None
) -> int:
    """Offset of the first reference starting after ``after``, or -1."""
    best = -1
    for name in reference_names(note_name, note_path):
        m = reference_pattern(name).search(content, after + 1)
        if m and (best == -1 or m.start() < best):
            best = m.start()
    return best
