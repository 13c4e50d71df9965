"""Exception hierarchy for tagmenu.

Fatal errors propagate to the command-line entry point, which reports the
cause chain and exits non-zero. Recoverable errors (``CommandSpawnError`` and
``PathScanWarning``) are collected into result objects and logged instead of
being raised.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from tagmenu.entry import Run


class TagmenuError(Exception):
    """Base class for all tagmenu errors."""


class ConfigError(TagmenuError, ValueError):
    """Raised when the launcher configuration is malformed."""


class PickerUnavailableError(TagmenuError):
    """Raised when the picker process cannot be spawned."""


class PickerIOError(TagmenuError):
    """Raised when writing to or reading from the picker fails."""


class TagDesyncError(TagmenuError, LookupError):
    """Raised when a decoded tag does not address a resolved entry.

    This signals that the menu text and the entry list have diverged, which
    is a programming error rather than a user error.
    """

    def __init__(self, index: int, size: int) -> None:
        super().__init__(
            f"tag {index} does not address any of the {size} menu entries",
        )
        self.index = index
        self.size = size


class AdHocRejectedError(TagmenuError):
    """Raised when selected text carries no tag and ad-hoc input is disabled.

    Attributes
    ----------
    lines:
        Every rejected line, in picker output order.
    resolved:
        Runs resolved from sibling lines before (strict) or across (lenient)
        the rejection.

    """

    def __init__(
        self,
        lines: tuple[str, ...],
        resolved: tuple[Run, ...] = (),
    ) -> None:
        quoted = ", ".join(f"`{line}`" for line in lines)
        super().__init__(
            f"ad-hoc commands are disabled; {quoted} is not a menu option "
            "(choose a menu option or set `config.ad-hoc = true`)",
        )
        self.lines = lines
        self.resolved = resolved


class CommandSpawnError(TagmenuError):
    """A resolved command could not be started. Recoverable."""

    def __init__(self, argv: tuple[str, ...], reason: str) -> None:
        super().__init__(f"failed to run command `{' '.join(argv)}`: {reason}")
        self.argv = argv
        self.reason = reason


class PathScanWarning(TagmenuError):
    """A directory or file was skipped while scanning. Recoverable."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"skipped `{path}`: {reason}")
        self.path = path
        self.reason = reason


__all__ = [
    "AdHocRejectedError",
    "CommandSpawnError",
    "ConfigError",
    "PathScanWarning",
    "PickerIOError",
    "PickerUnavailableError",
    "TagDesyncError",
    "TagmenuError",
]
