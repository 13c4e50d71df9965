"""Run the external picker over the rendered menu.

The picker receives the menu on stdin and prints the selected line(s) on
stdout. A large menu can fill the stdin pipe before the picker starts
draining it, so one writer thread feeds stdin while the calling thread reads
stdout and stderr and waits for the picker to exit. The writer is always
joined and its failure re-raised in the calling thread.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import subprocess  # noqa: S404  # the picker is an external program
import threading
import typing as typ

from tagmenu.errors import PickerIOError, PickerUnavailableError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

_log = logging.getLogger(__name__)

_DEFAULT_PICKER = ("dmenu",)
_DEFAULT_ENCODING = "utf-8"


@dc.dataclass(frozen=True, slots=True)
class DmenuOptions:
    """dmenu appearance and behaviour flags.

    ``None`` leaves the corresponding flag to dmenu's own default.
    """

    bottom: bool = False
    fast: bool = False
    case_sensitive: bool = False
    lines: int | None = None
    monitor: int | None = None
    prompt: str | None = None
    font: str | None = None
    background: str | None = None
    foreground: str | None = None
    selected_background: str | None = None
    selected_foreground: str | None = None
    window_id: str | None = None

    def args(self) -> tuple[str, ...]:
        """Return the dmenu command-line flags for these options."""
        args: list[str] = []
        if self.bottom:
            args.append("-b")
        if self.fast:
            args.append("-f")
        if not self.case_sensitive:
            args.append("-i")
        valued: tuple[tuple[str, object | None], ...] = (
            ("-l", self.lines),
            ("-m", self.monitor),
            ("-p", self.prompt),
            ("-fn", self.font),
            ("-nb", self.background),
            ("-nf", self.foreground),
            ("-sb", self.selected_background),
            ("-sf", self.selected_foreground),
            ("-w", self.window_id),
        )
        for flag, value in valued:
            if value is not None:
                args.extend((flag, str(value)))
        return tuple(args)


@dc.dataclass(frozen=True, slots=True)
class PickerCommand:
    """Picker program and its options.

    Attributes
    ----------
    argv:
        Picker invocation; the first element is the executable.
    options:
        dmenu flags appended after ``argv``, or ``None`` for pickers that do
        not understand them.

    """

    argv: tuple[str, ...] = _DEFAULT_PICKER
    options: DmenuOptions | None = dc.field(default_factory=DmenuOptions)

    def __post_init__(self) -> None:
        """Reject an empty picker invocation."""
        if not self.argv:
            msg = "PickerCommand.argv cannot be empty"
            raise ValueError(msg)

    @property
    def argv_with_options(self) -> tuple[str, ...]:
        """Return the full argument vector for the picker process."""
        if self.options is None:
            return self.argv
        return (*self.argv, *self.options.args())


class _StdinWriter(threading.Thread):
    """Writes the menu to the picker and records any failure."""

    def __init__(self, pipe: typ.IO[bytes], payload: bytes) -> None:
        super().__init__(name="tagmenu-picker-stdin")
        self._pipe = pipe
        self._payload = payload
        self.error: BaseException | None = None

    def run(self) -> None:
        try:
            with self._pipe:
                self._pipe.write(self._payload)
        except BaseException as exc:  # noqa: BLE001  # re-raised after join()
            self.error = exc


def _raise_writer_error(error: BaseException | None) -> None:
    if error is None:
        return
    if isinstance(error, OSError):
        msg = "failed to write to picker stdin"
        raise PickerIOError(msg) from error
    raise error


def _log_picker_exit(argv: cabc.Sequence[str], returncode: int, stderr: bytes) -> None:
    _log.debug("picker %s exited with status %d", argv[0], returncode)
    message = stderr.decode(_DEFAULT_ENCODING, errors="replace").strip()
    if message:
        _log.debug("picker stderr: %s", message)


def run_picker(display_text: str, command: PickerCommand | None = None) -> str:
    """Show ``display_text`` in the picker and return what it printed.

    Parameters
    ----------
    display_text:
        Rendered menu, one entry per line.
    command:
        Picker to run; defaults to plain ``dmenu -i``.

    Returns
    -------
    str
        The picker's stdout, possibly empty when nothing was chosen.

    Raises
    ------
    PickerUnavailableError
        If the picker cannot be started.
    PickerIOError
        If the menu cannot be encoded, writing it or reading the selection
        fails, or the output is not valid UTF-8. Encoding is checked before
        the picker starts.

    """
    picker = command or PickerCommand()
    argv = picker.argv_with_options
    try:
        payload = display_text.encode(_DEFAULT_ENCODING)
    except UnicodeEncodeError as exc:
        msg = "menu text cannot be encoded as UTF-8"
        raise PickerIOError(msg) from exc
    try:
        process = subprocess.Popen(  # noqa: S603  # argv comes from configuration
            argv,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except (OSError, ValueError) as exc:
        msg = f"failed to spawn picker `{argv[0]}`"
        raise PickerUnavailableError(msg) from exc

    stdin = typ.cast("typ.IO[bytes]", process.stdin)
    # Hand stdin to the writer so communicate() only drains the outputs.
    process.stdin = None
    writer = _StdinWriter(stdin, payload)
    writer.start()
    try:
        stdout, stderr = process.communicate()
    except OSError as exc:
        process.kill()
        writer.join()
        msg = "failed to read picker output"
        raise PickerIOError(msg) from exc
    writer.join()
    _raise_writer_error(writer.error)
    _log_picker_exit(argv, process.returncode, stderr)

    try:
        return stdout.decode(_DEFAULT_ENCODING)
    except UnicodeDecodeError as exc:
        msg = "picker output is not valid UTF-8"
        raise PickerIOError(msg) from exc


__all__ = ["DmenuOptions", "PickerCommand", "run_picker"]
