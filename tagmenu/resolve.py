"""Merge configured entries with discovered executables.

The result of ``resolve`` is the single ordered menu for one invocation. Its
positions are the tag values written into the display, so the tuple must be
passed unchanged to ``tagmenu.selection``.
"""

from __future__ import annotations

import logging
import typing as typ

from tagmenu.entry import (
    BareRun,
    FilterEntry,
    FullEntry,
    NameEntry,
    ResolvedEntry,
    run_for_name,
)
from tagmenu.scan import ScanResult, scan, search_directories
from tagmenu.tag import strip_tag_chars

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from tagmenu.entry import ConfiguredEntry, Run
    from tagmenu.scan import PathConfig

    type Scanner = cabc.Callable[..., ScanResult]

_log = logging.getLogger(__name__)


def sort_key(entry: ResolvedEntry) -> tuple[int, str, str]:
    """Order by group descending, then case-insensitive and exact name."""
    return (-entry.group, entry.name.casefold(), entry.name)


def _configured_run(entry: FullEntry | NameEntry, *, shell_enabled: bool) -> Run:
    if isinstance(entry, FullEntry):
        return entry.run
    return run_for_name(entry.name, shell_enabled=shell_enabled)


def _configured_group(entry: FullEntry | NameEntry) -> int:
    return entry.group if isinstance(entry, FullEntry) else 0


def _discover(
    configured_names: set[str],
    filtered_names: set[str],
    path_config: PathConfig,
    scanner: Scanner,
) -> tuple[list[ResolvedEntry], dict[str, Path]]:
    """Return new entries and the overrides for configured names."""
    result = scanner(
        search_directories(path_config),
        recursive=path_config.recursive,
        follow_symlinks=path_config.follow_symlinks,
    )
    discovered: list[ResolvedEntry] = []
    overrides: dict[str, Path] = {}
    claimed: set[str] = set()
    for executable in result.executables:
        name = executable.name
        if name in claimed:
            continue
        claimed.add(name)
        if name in filtered_names:
            _log.debug("filtered discovered executable %s", executable.path)
        elif name not in configured_names:
            discovered.append(
                ResolvedEntry(
                    name=strip_tag_chars(name),
                    run=BareRun((str(executable.path),)),
                    group=path_config.group,
                ),
            )
        elif path_config.replace:
            overrides[name] = executable.path
        else:
            _log.debug("configured entry %s shadows %s", name, executable.path)
    _log.debug(
        "discovered %d executables (%d warnings)",
        len(result.executables),
        len(result.warnings),
    )
    return discovered, overrides


def resolve(
    configured: cabc.Sequence[ConfiguredEntry],
    path_config: PathConfig | None = None,
    *,
    shell_enabled: bool = True,
    scanner: Scanner = scan,
) -> tuple[ResolvedEntry, ...]:
    """Build the ordered menu.

    Parameters
    ----------
    configured:
        Entries from the configuration, in file order. Duplicate names are
        kept as separate menu lines.
    path_config:
        Search path settings; ``None`` or a disabled config skips scanning.
    shell_enabled:
        Whether a bare ``NameEntry`` runs as shell text or as an executable.
    scanner:
        Executable discovery function, replaceable in tests.

    Returns
    -------
    tuple[ResolvedEntry, ...]
        Entries sorted by group descending, case-insensitive name, then
        exact name. Filtered names never appear.

    """
    filtered_names = {e.name for e in configured if isinstance(e, FilterEntry)}
    runnable = [e for e in configured if not isinstance(e, FilterEntry)]

    discovered: list[ResolvedEntry] = []
    overrides: dict[str, Path] = {}
    if path_config is not None and path_config.enabled:
        discovered, overrides = _discover(
            {e.name for e in runnable},
            filtered_names,
            path_config,
            scanner,
        )

    resolved: list[ResolvedEntry] = []
    for entry in runnable:
        if entry.name in filtered_names:
            continue
        override = overrides.get(entry.name)
        run = (
            BareRun((str(override),))
            if override is not None
            else _configured_run(entry, shell_enabled=shell_enabled)
        )
        resolved.append(
            ResolvedEntry(
                name=strip_tag_chars(entry.name),
                run=run,
                group=_configured_group(entry),
            ),
        )
    resolved.extend(discovered)
    resolved.sort(key=sort_key)
    return tuple(resolved)


__all__ = ["resolve", "sort_key"]
