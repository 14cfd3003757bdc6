import json
import sys
from dataclasses import asdict
from typing import TextIO

from ..core.model import BlockView, PaneId


class TextRenderer:
    """
    Prints block views to a terminal stream.

    Themes change the chrome only: ``naked`` prints bare excerpts,
    ``compact`` drops the blank line between blocks.
    """

    def __init__(self, stream: TextIO | None = None, json_output: bool = False, show_all: bool = False):
        self.stream = stream or sys.stdout
        self.json_output = json_output
        self.show_all = show_all

    def _selected(self, views: list[BlockView]) -> list[BlockView]:
        return views if self.show_all else [v for v in views if v.is_visible]

    def render(self, pane_id: PaneId, views: list[BlockView], theme: str) -> None:
        views = self._selected(views)
        if self.json_output:
            payload = {"pane": pane_id, "theme": theme, "blocks": [asdict(v) for v in views]}
            print(json.dumps(payload, ensure_ascii=False), file=self.stream, flush=True)
            return

        for i, view in enumerate(views):
            if i and theme != "compact":
                print(file=self.stream)
            if theme != "naked":
                marker = "+" if view.is_collapsed else "-"
                hidden = "" if view.is_visible else " (filtered)"
                print(f"{marker} {view.title} :{view.start_line}{hidden}", file=self.stream)
            if not view.is_collapsed:
                print(view.content, file=self.stream)
        self.stream.flush()

    def clear(self, pane_id: PaneId) -> None:
        if self.json_output:
            print(json.dumps({"pane": pane_id, "cleared": True}), file=self.stream, flush=True)
