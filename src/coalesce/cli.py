"""CLI for coalesce - backlink excerpts for Markdown vaults."""

import argparse
import asyncio
import json
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.text_renderer import TextRenderer
from .core.display import HEADER_STYLES
from .core.model import BlockView
from .core.settings import normalize_settings
from .core.strategies import STRATEGIES
from .logging_setup import setup_logging
from .runtime import build_runtime
from .watch import watch_note

PANE = "cli"


def _resolve_note(text: str, rt: Any) -> str | None:
    text = text.strip().removeprefix("[[").removesuffix("]]")
    return rt.link_index.resolve(text)


async def _collect_views(
    rt: Any, path: str, filter_text: str | None, alias: str | None
) -> list[BlockView] | None:
    coordinator = rt.coordinator
    try:
        if await coordinator.on_file_open(PANE, path) is None:
            return None
        if alias:
            coordinator.set_alias_filter(PANE, alias)
        if filter_text:
            coordinator.set_filter_text(PANE, filter_text)
            coordinator.flush_filter(PANE)
        return coordinator.views(PANE)
    finally:
        coordinator.teardown_all()


def cmd_show(args: argparse.Namespace, rt: Any) -> int:
    """Print the excerpts of every note linking to NOTE."""
    path = _resolve_note(args.note, rt)
    if path is None:
        print(f"Note {args.note} not found", file=sys.stderr)
        return 1

    # one-off overrides, not persisted
    overrides = {}
    if args.strategy:
        overrides["block_boundary_strategy"] = args.strategy
    if args.header_style:
        overrides["header_style"] = args.header_style
    normalize_settings(overrides, base=rt.settings)

    views = asyncio.run(_collect_views(rt, path, args.filter, args.alias))
    if views is None:
        if not args.quiet:
            print(f"Excerpts are hidden on daily note {path}", file=sys.stderr)
        return 0

    TextRenderer(json_output=args.json, show_all=args.all).render(PANE, views, rt.settings.theme)
    if not views and not args.quiet and not args.json:
        print(f"No backlinks to {path}", file=sys.stderr)
    return 0


def cmd_aliases(args: argparse.Namespace, rt: Any) -> int:
    """Print the aliases NOTE declares and the ones links use without declaring."""
    path = _resolve_note(args.note, rt)
    if path is None:
        print(f"Note {args.note} not found", file=sys.stderr)
        return 1

    async def collect() -> list[str]:
        try:
            await rt.coordinator.on_file_open(PANE, path)
            return rt.coordinator.unsaved_aliases(PANE)
        finally:
            rt.coordinator.teardown_all()

    declared = rt.vault.declared_aliases(path)
    unsaved = asyncio.run(collect())
    if args.json:
        print(json.dumps({"declared": declared, "unsaved": unsaved}, ensure_ascii=False))
    else:
        print(f"declared: {', '.join(declared)}")
        print(f"unsaved: {', '.join(unsaved)}")
    return 0


def cmd_watch(args: argparse.Namespace, rt: Any) -> int:
    """Keep NOTE's excerpts on screen, refreshing on vault changes."""
    path = _resolve_note(args.note, rt)
    if path is None:
        print(f"Note {args.note} not found", file=sys.stderr)
        return 1
    rt.coordinator.renderer = TextRenderer(json_output=args.json)
    return watch_note(rt, PANE, path, debounce_ms=args.debounce, quiet=args.quiet or args.json)


def _version_string() -> str:
    return f"coalesce {__version__} (python {platform.python_version()}, platform {platform.platform()})"


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="coalesce", description="Backlink excerpts for Markdown vaults"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/coalesce.toml, vault/coalesce.toml)",
    )
    parser.add_argument(
        "--vault",
        type=Path,
        default=None,
        help="Path to vault directory (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )
    parser.add_argument("--version", action="version", version=_version_string())

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # show command
    parser_show = subparsers.add_parser("show", help="Print backlink excerpts for a note")
    parser_show.add_argument("note", help="Note path or name")
    parser_show.add_argument(
        "--strategy", choices=list(STRATEGIES), help="Block boundary strategy"
    )
    parser_show.add_argument("--filter", help="Case-insensitive text filter")
    parser_show.add_argument("--alias", help="Only blocks using this alias")
    parser_show.add_argument(
        "--header-style", dest="header_style", choices=list(HEADER_STYLES),
        help="Block title style",
    )
    parser_show.add_argument(
        "--all", action="store_true", help="Include blocks hidden by filters"
    )

    # aliases command
    parser_aliases = subparsers.add_parser(
        "aliases", help="List aliases used in links but not declared in frontmatter"
    )
    parser_aliases.add_argument("note", help="Note path or name")

    # watch command
    parser_watch = subparsers.add_parser("watch", help="Re-render excerpts on vault changes")
    parser_watch.add_argument("note", help="Note path or name")
    parser_watch.add_argument(
        "--debounce", type=int, default=150, help="Debounce window in ms (default: 150)"
    )

    args = parser.parse_args(argv)

    rt = build_runtime(vault_path=args.vault, config_path=args.config)
    level = "WARNING" if args.quiet else rt.config.logging.level
    setup_logging(level, rt.config.logging.file)

    if not rt.vault.root.exists():
        print(f"Error: Vault not found: {rt.vault.root}", file=sys.stderr)
        sys.exit(1)

    handlers = {
        "show": cmd_show,
        "aliases": cmd_aliases,
        "watch": cmd_watch,
    }
    handler = handlers.get(args.cmd)

    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
