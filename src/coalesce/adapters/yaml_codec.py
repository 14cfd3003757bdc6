import io
import logging
import re
from typing import Any

import yaml

logger = logging.getLogger(__name__)

_FM = re.compile(r"^\s*---\s*\n(.*?)\n---\s*\n?", re.DOTALL)

ALIAS_KEYS = ("aliases", "alias")


class YamlFrontmatter:
    def decode(self, text: str) -> tuple[dict[str, Any], str]:
        m = _FM.match(text)
        if not m:
            return {}, text
        try:
            fm = yaml.safe_load(io.StringIO(m.group(1))) or {}
        except yaml.YAMLError:
            logger.warning("Unreadable frontmatter, treating it as body", exc_info=True)
            return {}, text
        if not isinstance(fm, dict):
            return {}, text[m.end() :]
        return (fm, text[m.end() :])


def aliases_from_meta(meta: dict[str, Any]) -> list[str]:
    """
    Declared aliases from frontmatter.

    Accepts a list or a single string under ``aliases`` (or ``alias``);
    a string may hold several comma-separated names.
    """
    for key in ALIAS_KEYS:
        value = meta.get(key)
        if value is None:
            continue
        if isinstance(value, str):
            items = value.split(",")
        elif isinstance(value, (list, tuple)):
            items = [str(v) for v in value if v is not None]
        else:
            items = [str(value)]
        return [item.strip() for item in items if item.strip()]
    return []
