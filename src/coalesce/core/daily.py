"""Daily note detection."""

import re
from typing import Any

from .ports import SkipPredicate

DAILY_NOTE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}\.md$")


def is_daily_note(path: str, folder: str = "") -> bool:
    """
    True for ``YYYY-MM-DD.md`` files inside ``folder`` (any folder if empty).
    """
    folder = folder.strip("/")
    if folder and not path.startswith(folder + "/"):
        return False
    return bool(DAILY_NOTE_RE.match(path.rsplit("/", 1)[-1]))


def daily_note_skip(settings: Any) -> SkipPredicate:
    """
    Skip predicate that hides excerpts on daily notes unless the settings
    ask for them.
    """

    def should_skip(path: str) -> bool:
        if settings.show_in_daily_notes:
            return False
        return is_daily_note(path, settings.daily_notes_folder)

    return should_skip
