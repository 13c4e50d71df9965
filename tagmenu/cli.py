"""Command-line entry point for tagmenu.

Reads a TOML menu (from a file, or piped on stdin), shows it in the picker
and launches whatever was chosen.
"""

from __future__ import annotations

import argparse
import logging
import sys
import typing as typ

from tagmenu.config import load_config, read_config
from tagmenu.display import render
from tagmenu.errors import AdHocRejectedError, ConfigError, TagmenuError
from tagmenu.executor import execute
from tagmenu.picker import run_picker
from tagmenu.resolve import resolve
from tagmenu.selection import resolve_selection

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from tagmenu.config import LauncherConfig

_log = logging.getLogger(__name__)

_LOG_FORMAT = "%(levelname)s: %(message)s"


def _parse_args(argv: cabc.Sequence[str] | None) -> argparse.Namespace:
    """Parse command-line arguments for the launcher."""
    parser = argparse.ArgumentParser(
        prog="tagmenu",
        description=(
            "A dmenu launcher configured with a TOML file. The config may be "
            "piped in instead of naming a file."
        ),
    )
    parser.add_argument(
        "config",
        metavar="CONFIG",
        nargs="?",
        help="Path to the TOML menu config.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log resolution and launch details to stderr.",
    )
    parser.add_argument(
        "--print-menu",
        action="store_true",
        help="Write the rendered menu to stdout instead of running the picker.",
    )
    args = parser.parse_args(argv)
    if args.config is None and sys.stdin.isatty():
        parser.error("CONFIG is required unless a config is piped on stdin")
    return args


def _load(args: argparse.Namespace) -> LauncherConfig:
    if args.config is not None:
        return read_config(args.config)
    try:
        text = sys.stdin.buffer.read().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = "can't read config from stdin"
        raise ConfigError(msg) from exc
    return load_config(text)


def run(config: LauncherConfig, *, print_menu: bool = False) -> int:
    """Show the menu for ``config`` and launch the selection.

    Returns the process exit status. Commands that fail to start are
    reported as warnings and do not change the status.
    """
    entries = resolve(
        config.entries,
        config.path,
        shell_enabled=config.shell.enabled,
    )
    _log.debug("menu has %d entries", len(entries))
    menu = render(entries, config.display)
    if print_menu:
        sys.stdout.write(menu)
        return 0

    raw_choice = run_picker(menu, config.picker)
    try:
        runs = resolve_selection(
            raw_choice,
            entries,
            config.selection,
            codec=config.display.codec,
        )
    except AdHocRejectedError as exc:
        if config.selection.strict:
            raise
        _log.warning("%s", exc)
        runs = exc.resolved

    execute(runs, config.shell)
    return 0


def describe_error(exc: BaseException) -> str:
    """Join an exception and its causes into one line."""
    parts: list[str] = []
    current: BaseException | None = exc
    while current is not None:
        parts.append(str(current) or type(current).__name__)
        current = current.__cause__
    return ": ".join(parts)


def main(argv: cabc.Sequence[str] | None = None) -> int:
    """Run the launcher and return the process exit status."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=_LOG_FORMAT,
    )
    try:
        return run(_load(args), print_menu=args.print_menu)
    except TagmenuError as exc:
        print(f"Error: {describe_error(exc)}.", file=sys.stderr)  # noqa: T201
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
