"""Block boundary strategies: where an excerpt starts and ends around a link."""

import logging
import re

from .matcher import find_references, next_reference_offset
from .model import Boundary, ReferenceMatch

logger = logging.getLogger(__name__)

HEADING_LINE_RE = re.compile(r"^#{1,5}\s")
HORIZONTAL_RULE_RE = re.compile(r"^[ \t]*-{3,}[ \t]*\r?$", re.MULTILINE)

DEFAULT_STRATEGY = "default"


def line_start(content: str, offset: int) -> int:
    return content.rfind("\n", 0, offset) + 1


def line_end(content: str, offset: int) -> int:
    end = content.find("\n", offset)
    return len(content) if end == -1 else end


def find_horizontal_rule(content: str, pos: int) -> int:
    """
    Start of the first horizontal-rule line at or after ``pos``, or -1.

    Table separator rows (``| --- |``) are not rules.
    """
    m = HORIZONTAL_RULE_RE.search(content, pos)
    return m.start() if m else -1


def is_heading_line(line: str) -> bool:
    return bool(HEADING_LINE_RE.match(line))


class BoundaryStrategy:
    """
    Shared contract for all strategies. Implementations are stateless.
    """

    name = "base"
    description = ""

    def determine_boundary(
        self, content: str, match: ReferenceMatch, note_name: str
    ) -> Boundary:
        raise NotImplementedError

    def is_valid_block(self, content: str, boundary: Boundary) -> bool:
        return 0 <= boundary.start < boundary.end <= len(content)

    def excerpt(self, content: str, boundary: Boundary) -> str:
        """Text shown for a boundary."""
        return content[boundary.start : boundary.end]

    def find_boundaries(
        self, content: str, note_name: str, note_path: str | None = None
    ) -> list[Boundary]:
        boundaries = []
        for match in find_references(content, note_name, note_path):
            boundary = self.determine_boundary(content, match, note_name)
            if self.is_valid_block(content, boundary):
                boundaries.append(boundary)
            else:
                logger.debug(
                    "Dropping invalid block: strategy=%s boundary=%s", self.name, boundary
                )
        return boundaries


class DefaultStrategy(BoundaryStrategy):
    """
    From the start of the link's line up to the next horizontal rule, the next
    mention of the same note, or the end of the document, whichever is first.
    """

    name = "default"
    description = "Everything up to the next rule or mention"

    def determine_boundary(
        self, content: str, match: ReferenceMatch, note_name: str
    ) -> Boundary:
        start = line_start(content, match.offset)
        rule = find_horizontal_rule(content, match.end)
        mention = next_reference_offset(content, note_name, match.offset)

        end = len(content)
        for candidate in (rule, mention):
            if candidate != -1 and candidate < end:
                end = candidate
        logger.debug(
            "Boundary for %r at %d: start=%d rule=%d mention=%d end=%d",
            note_name,
            match.offset,
            start,
            rule,
            mention,
            end,
        )
        return Boundary(start, end)


class HeadersOnlyStrategy(DefaultStrategy):
    name = "headers-only"
    description = "Only the headings of the default block"

    def is_valid_block(self, content: str, boundary: Boundary) -> bool:
        if not super().is_valid_block(content, boundary):
            return False
        lines = content[boundary.start : boundary.end].split("\n")
        return any(is_heading_line(line) for line in lines)

    def excerpt(self, content: str, boundary: Boundary) -> str:
        lines = content[boundary.start : boundary.end].split("\n")
        return "\n".join(line for line in lines if is_heading_line(line))


class TopLineStrategy(BoundaryStrategy):
    name = "top-line"
    description = "Only the line holding the link"

    def determine_boundary(
        self, content: str, match: ReferenceMatch, note_name: str
    ) -> Boundary:
        return Boundary(line_start(content, match.offset), line_end(content, match.offset))


class SingleLineStrategy(BoundaryStrategy):
    """Legacy behaviour kept for old configurations: the document's first line."""

    name = "single-line"
    description = "First line of the document"

    def determine_boundary(
        self, content: str, match: ReferenceMatch, note_name: str
    ) -> Boundary:
        return Boundary(0, line_end(content, 0))


STRATEGIES: dict[str, BoundaryStrategy] = {
    s.name: s
    for s in (DefaultStrategy(), HeadersOnlyStrategy(), TopLineStrategy(), SingleLineStrategy())
}


def get_strategy(name: str | None) -> BoundaryStrategy:
    """Strategy for a configuration value; unknown values get the default."""
    key = (name or "").strip().lower()
    strategy = STRATEGIES.get(key)
    if strategy is None:
        logger.warning("Unknown block boundary strategy %r, using %r", name, DEFAULT_STRATEGY)
        return STRATEGIES[DEFAULT_STRATEGY]
    return strategy
