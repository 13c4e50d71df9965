"""Map picker output back to runnable commands."""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from tagmenu.entry import ShellRun
from tagmenu.errors import AdHocRejectedError, TagDesyncError
from tagmenu.tag import COMPACT, TagCodec

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from tagmenu.entry import ResolvedEntry, Run

_log = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class SelectionPolicy:
    """Treatment of selected lines that carry no tag.

    Attributes
    ----------
    ad_hoc:
        Run untagged lines as shell text instead of rejecting them.
    strict:
        When rejecting, stop at the first rejected line. Otherwise every line
        is examined and the error carries the runs resolved from the others.

    """

    ad_hoc: bool = False
    strict: bool = True


def resolve_line(
    line: str,
    entries: cabc.Sequence[ResolvedEntry],
    *,
    codec: TagCodec = COMPACT,
) -> Run | None:
    """Return the run for a tagged line, or ``None`` when it has no tag.

    Raises
    ------
    TagDesyncError
        If the tag addresses a position outside ``entries``.

    """
    decoded = codec.decode(line)
    if decoded is None:
        return None
    index, _ = decoded
    if index >= len(entries):
        raise TagDesyncError(index, len(entries))
    return entries[index].run


def resolve_selection(
    raw_output: str,
    entries: cabc.Sequence[ResolvedEntry],
    policy: SelectionPolicy | None = None,
    *,
    codec: TagCodec = COMPACT,
) -> tuple[Run, ...]:
    """Resolve every selected line of ``raw_output``.

    Parameters
    ----------
    raw_output:
        Text written by the picker; blank lines are ignored.
    entries:
        The exact sequence that produced the menu text.
    policy:
        Ad-hoc handling; defaults to rejecting untagged lines strictly.
    codec:
        The codec the menu was rendered with.

    Returns
    -------
    tuple[Run, ...]
        Runs in picker output order. Empty when nothing was selected.

    Raises
    ------
    AdHocRejectedError
        If an untagged line was selected while ad-hoc input is disabled.
    TagDesyncError
        If a tag does not address an entry.

    """
    rules = policy or SelectionPolicy()
    runs: list[Run] = []
    rejected: list[str] = []
    for raw_line in raw_output.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        run = resolve_line(line, entries, codec=codec)
        if run is None and rules.ad_hoc:
            _log.debug("running ad-hoc selection %r", line)
            run = ShellRun(line)
        if run is not None:
            runs.append(run)
            continue
        rejected.append(line)
        if rules.strict:
            raise AdHocRejectedError((line,), tuple(runs))
    if rejected:
        raise AdHocRejectedError(tuple(rejected), tuple(runs))
    return tuple(runs)


__all__ = ["SelectionPolicy", "resolve_line", "resolve_selection"]
