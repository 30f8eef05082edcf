"""Command-line front door for lazynotes.

Parses CLI options, resolves the notes folder, configures logging, and then
either prints the index (``--list`` or non-TTY) or starts the interactive
browser.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from .logs import configure_logging
from .notes.directory_view import SORT_POLICIES, sort_documents
from .notes.index import scan
from .notes.types import Document
from .render.theme import available_theme_names
from .runtime import run_session
from .runtime.config import NotesConfig, load_notes_config

DEFAULT_NOTES_DIR = Path("~/notes")
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


def format_index_listing(documents: Sequence[Document]) -> str:
    """One line per note: title, then its tags."""
    out: list[str] = []
    for doc in documents:
        if doc.tags:
            out.append(f"{doc.title}  " + " ".join(f"#{tag}" for tag in doc.tags))
        else:
            out.append(doc.title)
    return "".join(f"{line}\n" for line in out)


def resolve_notes_root(raw: str | None, default_root: Path | None = None) -> Path:
    """Expand and create the notes folder; exit when it is unusable."""
    root = Path(raw).expanduser() if raw else (default_root or DEFAULT_NOTES_DIR).expanduser()
    if not root.exists():
        try:
            root.mkdir(parents=True)
        except OSError as exc:
            raise SystemExit(f"Cannot create notes folder {root}: {exc}") from exc
    if not root.is_dir():
        raise SystemExit(f"Not a directory: {root}")
    return root.resolve()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazynotes",
        description="Browse, search, and edit a folder of Markdown notes in the terminal.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Notes folder. Defaults to ~/notes.")
    parser.add_argument("--sort", choices=SORT_POLICIES, default=None, help="Initial sort policy.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--editor", default=None, help="Editor command (overrides config and $EDITOR).")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write log records to this file.")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="INFO", help="Minimum log level.")
    parser.add_argument("--list", action="store_true", help="Print the note index and exit.")
    return parser


def _apply_overrides(config: NotesConfig, args: argparse.Namespace) -> NotesConfig:
    changes: dict[str, object] = {}
    if args.sort is not None:
        changes["sort_mode"] = args.sort
    if args.theme is not None:
        changes["theme"] = args.theme
    if args.editor is not None:
        changes["editor_cmd"] = args.editor
    return dataclasses.replace(config, **changes) if changes else config


def _is_tty(stream) -> bool:
    try:
        return os.isatty(stream.fileno())
    except (OSError, ValueError):
        return False


def main(argv: Sequence[str] | None = None, default_root: Path | None = None) -> None:
    """Parse CLI arguments and launch lazynotes.

    ``default_root`` is primarily for tests; when omitted ``~/notes`` is used.
    """
    args = _build_parser().parse_args(argv)
    log_buffer = configure_logging(getattr(logging, args.log_level), args.log_file)
    root = resolve_notes_root(args.path, default_root)
    config = _apply_overrides(load_notes_config(), args)

    if args.list or not (_is_tty(sys.stdin) and _is_tty(sys.stdout)):
        sys.stdout.write(format_index_listing(sort_documents(scan(root), config.sort_mode)))
        return

    run_session(root, config, no_color=args.no_color, log_buffer=log_buffer)


if __name__ == "__main__":
    main()
