"""tagmenu package.

Turns named commands into a picker menu whose lines carry invisible index
tags, then maps the picker's output back to the exact command chosen.
Re-exports the core types and operations for convenience.

Example:
>>> from tagmenu import FullEntry, ShellRun, render, resolve
>>> entries = resolve([FullEntry("hi", ShellRun("echo hi"))])
>>> render(entries).startswith("hi")
True

"""

from __future__ import annotations

from tagmenu.config import LauncherConfig, load_config, read_config
from tagmenu.display import DisplayConfig, render
from tagmenu.entry import (
    BareRun,
    ConfiguredEntry,
    FilterEntry,
    FullEntry,
    NameEntry,
    ResolvedEntry,
    Run,
    ShellRun,
)
from tagmenu.errors import (
    AdHocRejectedError,
    CommandSpawnError,
    ConfigError,
    PathScanWarning,
    PickerIOError,
    PickerUnavailableError,
    TagDesyncError,
    TagmenuError,
)
from tagmenu.executor import ExecutionReport, ShellPolicy, execute
from tagmenu.picker import DmenuOptions, PickerCommand, run_picker
from tagmenu.resolve import resolve
from tagmenu.scan import Executable, PathConfig, ScanResult, scan
from tagmenu.selection import SelectionPolicy, resolve_selection
from tagmenu.tag import COMPACT, DECIMAL, TagCodec

PACKAGE_NAME = "tagmenu"

__all__ = [
    "COMPACT",
    "DECIMAL",
    "PACKAGE_NAME",
    "AdHocRejectedError",
    "BareRun",
    "CommandSpawnError",
    "ConfigError",
    "ConfiguredEntry",
    "DisplayConfig",
    "DmenuOptions",
    "Executable",
    "ExecutionReport",
    "FilterEntry",
    "FullEntry",
    "LauncherConfig",
    "NameEntry",
    "PathConfig",
    "PathScanWarning",
    "PickerCommand",
    "PickerIOError",
    "PickerUnavailableError",
    "ResolvedEntry",
    "Run",
    "ScanResult",
    "SelectionPolicy",
    "ShellPolicy",
    "ShellRun",
    "TagCodec",
    "TagDesyncError",
    "TagmenuError",
    "execute",
    "load_config",
    "read_config",
    "render",
    "resolve",
    "resolve_selection",
    "run_picker",
    "scan",
]
