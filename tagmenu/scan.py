"""Executable discovery on filesystem search paths.

``scan`` walks each search directory in turn and reports every regular file
the current user may execute. Unreadable directories and undecodable file
names are reported as ``PathScanWarning`` values rather than raised.
"""

from __future__ import annotations

import collections
import dataclasses as dc
import logging
import os
import typing as typ
from pathlib import Path

from tagmenu.errors import PathScanWarning

if typ.TYPE_CHECKING:
    import collections.abc as cabc

_log = logging.getLogger(__name__)

_HOME_PREFIX = "~/"


@dc.dataclass(frozen=True, slots=True)
class PathConfig:
    """Search path settings for executable discovery.

    Attributes
    ----------
    dirs:
        Directories to scan, in priority order. A ``~/`` prefix is resolved
        against the user's home directory.
    env:
        When True, the directories of ``$PATH`` are scanned after ``dirs``.
    recursive:
        Descend into subdirectories.
    follow_symlinks:
        Descend into symlinked directories when recursing.
    replace:
        Let discovered executables override configured entries of the same
        name instead of being dropped.
    group:
        Ordering group assigned to newly discovered entries.
    enabled:
        Master switch for path scanning.

    """

    dirs: tuple[str, ...] = ()
    env: bool = True
    recursive: bool = False
    follow_symlinks: bool = True
    replace: bool = False
    group: int = 0
    enabled: bool = True


@dc.dataclass(frozen=True, slots=True)
class Executable:
    """A discovered executable file."""

    path: Path
    name: str


@dc.dataclass(frozen=True, slots=True)
class ScanResult:
    """Executables found by ``scan`` plus recoverable warnings."""

    executables: tuple[Executable, ...] = ()
    warnings: tuple[PathScanWarning, ...] = ()


def expand_search_path(raw: str) -> Path:
    """Resolve a ``~/`` prefix against the home directory."""
    if raw.startswith(_HOME_PREFIX):
        return Path.home() / raw.removeprefix(_HOME_PREFIX)
    return Path(raw)


def search_directories(
    config: PathConfig,
    *,
    environ: cabc.Mapping[str, str] | None = None,
) -> tuple[Path, ...]:
    """Return the directories to scan, configured ones first."""
    directories = [expand_search_path(raw) for raw in config.dirs]
    if config.env:
        env = os.environ if environ is None else environ
        directories.extend(
            expand_search_path(raw)
            for raw in env.get("PATH", "").split(os.pathsep)
            if raw
        )
    return tuple(directories)


def _is_valid_utf8(name: str) -> bool:
    # Undecodable bytes surface as lone surrogates under surrogateescape.
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


class _Scanner:
    """Stateful walker shared by every pass of one ``scan`` call."""

    __slots__ = ("_follow_symlinks", "_recursive", "_visited", "warnings")

    def __init__(self, *, recursive: bool, follow_symlinks: bool) -> None:
        self._recursive = recursive
        self._follow_symlinks = follow_symlinks
        self._visited: set[tuple[int, int]] = set()
        self.warnings: list[PathScanWarning] = []

    def _warn(self, path: Path, reason: str) -> None:
        warning = PathScanWarning(path, reason)
        _log.warning("%s", warning)
        self.warnings.append(warning)

    def _claim(self, directory: Path) -> bool:
        """Mark ``directory`` visited; False when it was seen already."""
        try:
            stat = directory.stat()
        except (FileNotFoundError, NotADirectoryError):
            _log.debug("search directory %s does not exist", directory)
            return False
        except OSError as exc:
            self._warn(directory, exc.strerror or str(exc))
            return False
        identity = (stat.st_dev, stat.st_ino)
        if identity in self._visited:
            _log.debug("search directory %s already visited", directory)
            return False
        self._visited.add(identity)
        return True

    def _list(self, directory: Path) -> list[os.DirEntry[str]]:
        try:
            with os.scandir(directory) as it:
                return sorted(it, key=lambda entry: entry.name)
        except (FileNotFoundError, NotADirectoryError):
            _log.debug("search directory %s does not exist", directory)
        except OSError as exc:
            self._warn(directory, exc.strerror or str(exc))
        return []

    def scan_pass(self, root: Path) -> list[Executable]:
        """Scan ``root`` (and its subdirectories when recursive)."""
        found: list[Executable] = []
        seen: set[str] = set()
        pending = collections.deque([root.absolute()])
        while pending:
            directory = pending.popleft()
            if not self._claim(directory):
                continue
            for entry in self._list(directory):
                self._visit(entry, found, seen, pending)
        return found

    def _visit(
        self,
        entry: os.DirEntry[str],
        found: list[Executable],
        seen: set[str],
        pending: collections.deque[Path],
    ) -> None:
        path = Path(entry.path)
        try:
            # Both checks follow symlinks; broken links report neither.
            is_dir = entry.is_dir()
            is_file = not is_dir and entry.is_file()
        except OSError as exc:
            self._warn(path, exc.strerror or str(exc))
            return
        if is_dir:
            if self._recursive and (self._follow_symlinks or not entry.is_symlink()):
                pending.append(path)
            return
        if not is_file or entry.name in seen or not os.access(path, os.X_OK):
            return
        if not _is_valid_utf8(entry.name):
            self._warn(path, "file name is not valid UTF-8")
            return
        seen.add(entry.name)
        found.append(Executable(path=path, name=entry.name))


def scan(
    directories: cabc.Iterable[Path | str],
    *,
    recursive: bool = False,
    follow_symlinks: bool = True,
) -> ScanResult:
    """Find executables in ``directories``.

    Parameters
    ----------
    directories:
        Directories to scan, in priority order. Each one is a separate pass;
        names are unique within a pass but may repeat across passes.
    recursive:
        Descend into subdirectories, breadth first.
    follow_symlinks:
        Descend into symlinked directories when recursing.

    Returns
    -------
    ScanResult
        Executables in discovery order, and warnings for skipped paths.

    Notes
    -----
    Every directory is visited at most once per call, keyed by device and
    inode, so symlink cycles terminate.

    """
    scanner = _Scanner(recursive=recursive, follow_symlinks=follow_symlinks)
    executables: list[Executable] = []
    for directory in directories:
        executables.extend(scanner.scan_pass(Path(directory)))
    return ScanResult(
        executables=tuple(executables),
        warnings=tuple(scanner.warnings),
    )


__all__ = [
    "Executable",
    "PathConfig",
    "ScanResult",
    "expand_search_path",
    "scan",
    "search_directories",
]
