"""Menu entry data model.

Configured entries arrive from the configuration layer and are immutable.
Resolved entries are produced once by ``tagmenu.resolve`` and held in a
tuple whose positions double as tag values, so nothing downstream may
reorder or mutate them.
"""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(frozen=True, slots=True)
class ShellRun:
    """A command string interpreted by the configured shell."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class BareRun:
    """A direct invocation; ``argv[0]`` is the executable."""

    argv: tuple[str, ...]

    def __post_init__(self) -> None:
        """Reject empty argument vectors."""
        if not self.argv:
            msg = "BareRun requires at least the executable"
            raise ValueError(msg)


type Run = ShellRun | BareRun


@dc.dataclass(frozen=True, slots=True)
class FullEntry:
    """A fully specified runnable entry.

    Attributes
    ----------
    name:
        Text shown in the menu.
    run:
        Invocation performed when the entry is chosen.
    group:
        Ordering key; higher groups sort first.

    """

    name: str
    run: Run
    group: int = 0


@dc.dataclass(frozen=True, slots=True)
class NameEntry:
    """A bare name that runs as itself."""

    name: str


@dc.dataclass(frozen=True, slots=True)
class FilterEntry:
    """A name suppressed from the final menu."""

    name: str


type ConfiguredEntry = FullEntry | NameEntry | FilterEntry


@dc.dataclass(frozen=True, slots=True)
class ResolvedEntry:
    """A merged, runnable menu item."""

    name: str
    run: Run
    group: int = 0


def run_for_name(name: str, *, shell_enabled: bool) -> Run:
    """Return the run a bare name stands for under the shell policy."""
    if shell_enabled:
        return ShellRun(name)
    return BareRun((name,))


__all__ = [
    "BareRun",
    "ConfiguredEntry",
    "FilterEntry",
    "FullEntry",
    "NameEntry",
    "ResolvedEntry",
    "Run",
    "ShellRun",
    "run_for_name",
]
