"""Block titles (header styles) and the text handed to the renderer."""

import logging
import re

from .matcher import find_references, strip_extension
from .strategies import HeadersOnlyStrategy

logger = logging.getLogger(__name__)

FIRST_HEADING_RE = re.compile(r"^#{1,5}\s+(.+?)$", re.MULTILINE)
WIKILINK_RE = re.compile(r"\[\[([^\]]+)\]\]")
BRACKETED_RE = re.compile(r"(\[[^\]]+\])")

HEADER_STYLES = (
    "full",
    "short",
    "first-heading-bold",
    "first-heading-short",
    "first-heading-tidy",
    "first-heading-tidy-bold",
)
DEFAULT_HEADER_STYLE = "full"
ADD_HEADING_PROMPT = "📝 Add a heading"

_BOLD_A = 0x1D5D4  # MATHEMATICAL SANS-SERIF BOLD CAPITAL A


def file_name(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def first_heading(content: str) -> str | None:
    m = FIRST_HEADING_RE.search(content)
    return m.group(1) if m else None


def _tidy_link(m: re.Match[str]) -> str:
    # [[a/B]] -> [B], [[a/B|B]] -> [B], [[a/B|C]] -> [B > C]
    target, _, alias = m.group(1).partition("|")
    last = target.strip().rsplit("/", 1)[-1]
    alias = alias.strip()
    if not alias or alias == last:
        return f"[{alias or last}]"
    return f"[{last} > {alias}]"


def tidy_links(text: str) -> str:
    return WIKILINK_RE.sub(_tidy_link, text)


def to_bold(text: str) -> str:
    return "".join(
        chr(_BOLD_A + ord(c) - ord("A")) if "A" <= c <= "Z" else c for c in text.upper()
    )


def _bold_outside_brackets(text: str) -> str:
    parts = BRACKETED_RE.split(text)
    return "".join(p if BRACKETED_RE.fullmatch(p) else to_bold(p) for p in parts)


def title_for(source_path: str, content: str, header_style: str) -> str:
    """
    Title shown above a block.

    The ``.md`` extension is always dropped. Styles starting with
    ``first-heading`` append the block's first heading to the file name.
    Unknown styles behave like ``full``.
    """
    path = strip_extension(source_path)
    name = file_name(path)
    heading = first_heading(content)

    if header_style == "short":
        return name
    if header_style == "first-heading-short":
        return f"{name} - {heading}" if heading else name
    if header_style == "first-heading-tidy":
        return f"{name} - {tidy_links(heading)}" if heading else name
    if header_style == "first-heading-tidy-bold":
        return f"{name} - {to_bold(tidy_links(heading))}" if heading else name
    if header_style == "first-heading-bold":
        if not heading:
            return f"{name} - {ADD_HEADING_PROMPT}"
        return f"{name} - {_bold_outside_brackets(tidy_links(heading))}"
    if header_style != DEFAULT_HEADER_STYLE:
        logger.debug("Unknown header style %r, showing full path", header_style)
    return path


def display_content(
    content: str,
    note_name: str,
    strategy_name: str = "default",
    hide_backlink_line: bool = False,
    hide_first_header: bool = False,
) -> str:
    """
    Text passed to the renderer for one block.

    Headers-only excerpts are already reduced to headings and pass through.
    """
    if strategy_name == HeadersOnlyStrategy.name:
        return content

    lines = content.split("\n")
    if hide_backlink_line:
        lines = [line for line in lines if not find_references(line, note_name)]
    if hide_first_header:
        for i, line in enumerate(lines):
            if FIRST_HEADING_RE.match(line):
                del lines[i]
                break
    return "\n".join(lines)
