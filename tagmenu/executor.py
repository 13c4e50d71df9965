"""Launch resolved commands.

Bare runs are executed directly; shell runs go through the configured shell
either as a trailing argument or on the shell's standard input. Commands are
started and left running. A command that fails to start is recorded in the
``ExecutionReport`` and the remaining commands are still attempted.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import subprocess  # noqa: S404  # launching user-configured commands is the point
import typing as typ

from tagmenu.entry import BareRun, ShellRun
from tagmenu.errors import CommandSpawnError

if typ.TYPE_CHECKING:
    from tagmenu.entry import Run

type Spawner = cabc.Callable[[tuple[str, ...], str | None], object]

_log = logging.getLogger(__name__)

_DEFAULT_SHELL = ("sh", "-c")
_DEFAULT_PIPED_SHELL = ("sh",)
_DEFAULT_ENCODING = "utf-8"


@dc.dataclass(frozen=True, slots=True)
class ShellPolicy:
    """How ``ShellRun`` commands are executed.

    Attributes
    ----------
    argv:
        Shell invocation, or ``None`` when shell execution is disabled.
    piped:
        Write the command text to the shell's stdin instead of appending it
        as the final argument.

    """

    argv: tuple[str, ...] | None = _DEFAULT_SHELL
    piped: bool = False

    def __post_init__(self) -> None:
        """Reject an empty shell invocation."""
        if self.argv is not None and not self.argv:
            msg = "ShellPolicy.argv cannot be empty; use ShellPolicy.disabled()"
            raise ValueError(msg)

    @classmethod
    def disabled(cls) -> ShellPolicy:
        """Return a policy that refuses shell commands."""
        return cls(argv=None)

    @classmethod
    def default(cls, *, piped: bool = False) -> ShellPolicy:
        """Return the ``sh`` policy for the requested mode."""
        return cls(argv=_DEFAULT_PIPED_SHELL if piped else _DEFAULT_SHELL, piped=piped)

    @property
    def enabled(self) -> bool:
        """Return True when shell commands may run."""
        return self.argv is not None


@dc.dataclass(frozen=True, slots=True)
class Invocation:
    """A concrete process launch derived from a run."""

    argv: tuple[str, ...]
    stdin_text: str | None = None


@dc.dataclass(frozen=True, slots=True)
class ExecutionReport:
    """Outcome of ``execute``.

    Attributes
    ----------
    launched:
        Invocations that started, in submission order.
    failures:
        Commands that could not be started, in submission order.

    """

    launched: tuple[Invocation, ...] = ()
    failures: tuple[CommandSpawnError, ...] = ()

    @property
    def ok(self) -> bool:
        """Return True when every command started."""
        return not self.failures


def invocation_for(run: Run, shell: ShellPolicy) -> Invocation:
    """Translate ``run`` into a process launch under ``shell``.

    Raises
    ------
    CommandSpawnError
        If ``run`` needs a shell and shell execution is disabled.

    """
    match run:
        case BareRun(argv=argv):
            return Invocation(argv=argv)
        case ShellRun(text=text):
            if shell.argv is None:
                raise CommandSpawnError((text,), "shell execution is disabled")
            if shell.piped:
                return Invocation(argv=shell.argv, stdin_text=text)
            return Invocation(argv=(*shell.argv, text))
    msg = f"unsupported run {run!r}"
    raise TypeError(msg)


def spawn_detached(argv: tuple[str, ...], stdin_text: str | None) -> object:
    """Start ``argv`` without waiting for it to finish.

    When ``stdin_text`` is given it is written to the child's stdin, which is
    then closed. A child that exits before reading all of it still counts as
    started; the broken pipe is only logged.
    """
    payload = None if stdin_text is None else stdin_text.encode(_DEFAULT_ENCODING)
    process = subprocess.Popen(  # noqa: S603  # argv comes from the trusted menu
        argv,
        stdin=subprocess.PIPE if payload is not None else None,
    )
    if payload is not None and process.stdin is not None:
        try:
            with process.stdin:
                process.stdin.write(payload)
        except BrokenPipeError:
            _log.info("%s exited before reading its input", argv[0])
    return process


def execute(
    runs: cabc.Iterable[Run],
    shell: ShellPolicy | None = None,
    *,
    spawner: Spawner = spawn_detached,
) -> ExecutionReport:
    """Start every run, isolating failures per command.

    Parameters
    ----------
    runs:
        Commands in the order they should be started.
    shell:
        Shell policy for ``ShellRun`` commands; defaults to ``sh -c``.
    spawner:
        Callable that starts one process from argv and optional stdin text.
        It signals failure by raising ``OSError`` or, for an argv the OS
        cannot accept such as one with a NUL character, ``ValueError``.

    Returns
    -------
    ExecutionReport
        Started invocations and per-command failures.

    """
    policy = shell or ShellPolicy()
    launched: list[Invocation] = []
    failures: list[CommandSpawnError] = []
    for run in runs:
        try:
            invocation = invocation_for(run, policy)
        except CommandSpawnError as exc:
            _log.warning("%s", exc)
            failures.append(exc)
            continue
        try:
            spawner(invocation.argv, invocation.stdin_text)
        except (OSError, ValueError) as exc:
            reason = getattr(exc, "strerror", None) or str(exc)
            failure = CommandSpawnError(invocation.argv, reason)
            _log.warning("%s", failure)
            failures.append(failure)
            continue
        _log.debug("started %s", invocation.argv)
        launched.append(invocation)
    return ExecutionReport(launched=tuple(launched), failures=tuple(failures))


__all__ = [
    "ExecutionReport",
    "Invocation",
    "ShellPolicy",
    "Spawner",
    "execute",
    "invocation_for",
    "spawn_detached",
]
