"""Unit tests for the picker process boundary."""

from __future__ import annotations

import sys
import typing as typ

import pytest

from tagmenu import picker as picker_module
from tagmenu.errors import PickerIOError, PickerUnavailableError
from tagmenu.picker import DmenuOptions, PickerCommand, run_picker
from tests.helpers.picker import (
    cat_picker,
    choosing_picker,
    closed_picker,
    typing_picker,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


def test_default_options_only_request_case_insensitivity() -> None:
    """Plain dmenu runs with ``-i`` and nothing else."""
    assert DmenuOptions().args() == ("-i",)
    assert PickerCommand().argv_with_options == ("dmenu", "-i")


def test_options_map_to_dmenu_flags() -> None:
    """Every option becomes its dmenu flag."""
    options = DmenuOptions(
        bottom=True,
        fast=True,
        case_sensitive=True,
        lines=10,
        monitor=1,
        prompt="run:",
        font="monospace-10",
        background="#000000",
        foreground="#ffffff",
        selected_background="#005577",
        selected_foreground="#eeeeee",
        window_id="0x1",
    )

    assert options.args() == (
        "-b",
        "-f",
        "-l",
        "10",
        "-m",
        "1",
        "-p",
        "run:",
        "-fn",
        "monospace-10",
        "-nb",
        "#000000",
        "-nf",
        "#ffffff",
        "-sb",
        "#005577",
        "-sf",
        "#eeeeee",
        "-w",
        "0x1",
    )


def test_pickers_without_options_get_bare_argv() -> None:
    """Non-dmenu pickers do not receive dmenu flags."""
    command = PickerCommand(argv=("rofi", "-dmenu"), options=None)

    assert command.argv_with_options == ("rofi", "-dmenu")


def test_picker_command_rejects_empty_argv() -> None:
    """A picker needs an executable."""
    with pytest.raises(ValueError, match="empty"):
        PickerCommand(argv=())


def test_run_picker_round_trips_menu_text(tmp_path: Path) -> None:
    """Tags and names survive the trip through the picker unchanged."""
    menu = "firefox\u2069\u200b\u2069\nvim\u2069\u200c\u2069\n"

    assert run_picker(menu, cat_picker(tmp_path)) == menu


def test_run_picker_returns_only_the_chosen_line(tmp_path: Path) -> None:
    """The picker output is exactly what it printed."""
    menu = "firefox\u2069\u200b\u2069\nvim\u2069\u200c\u2069\n"

    chosen = run_picker(menu, choosing_picker(tmp_path, "vim"))

    assert chosen == "vim\u2069\u200c\u2069\n"


def test_run_picker_passes_typed_text_through(tmp_path: Path) -> None:
    """Free text typed into the picker comes back verbatim."""
    assert run_picker("a\n", typing_picker(tmp_path, "echo hi")) == "echo hi\n"


def test_run_picker_handles_menus_larger_than_pipe_buffers(tmp_path: Path) -> None:
    """Writing and reading concurrently avoids a pipe deadlock."""
    menu = "".join(f"entry-{index:06d}\n" for index in range(200_000))

    assert run_picker(menu, cat_picker(tmp_path)) == menu


def test_run_picker_reports_missing_program(tmp_path: Path) -> None:
    """An unspawnable picker names the program."""
    command = PickerCommand(argv=(str(tmp_path / "no-such-picker"),), options=None)

    with pytest.raises(PickerUnavailableError, match="no-such-picker") as excinfo:
        run_picker("a\n", command)

    assert isinstance(excinfo.value.__cause__, OSError)


def test_run_picker_reports_picker_that_closes_stdin(tmp_path: Path) -> None:
    """A picker that exits unread breaks the pipe for large menus."""
    menu = "x" * (4 * 1024 * 1024)

    with pytest.raises(PickerIOError, match="stdin") as excinfo:
        run_picker(menu, closed_picker(tmp_path))

    assert isinstance(excinfo.value.__cause__, OSError)


def test_run_picker_rejects_undecodable_output(tmp_path: Path) -> None:
    """Output that is not UTF-8 cannot be mapped back to entries."""
    script = tmp_path / "bad_bytes.py"
    script.write_text(
        "import sys\nsys.stdin.read()\nsys.stdout.buffer.write(b'\\xff\\n')\n",
        encoding="utf-8",
    )
    command = PickerCommand(argv=(sys.executable, str(script)), options=None)

    with pytest.raises(PickerIOError, match="UTF-8"):
        run_picker("a\n", command)


def test_writer_errors_other_than_os_errors_are_reraised(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    """Unexpected writer failures propagate unchanged after the join."""

    class Boom(RuntimeError):
        pass

    def exploding_run(self: picker_module._StdinWriter) -> None:
        self._pipe.close()
        self.error = Boom("writer failed")

    monkeypatch.setattr(picker_module._StdinWriter, "run", exploding_run)

    with pytest.raises(Boom, match="writer failed"):
        run_picker("a\n", cat_picker(tmp_path))


def test_unencodable_menu_fails_before_the_picker_starts(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    """Menu text that is not valid Unicode never spawns a picker."""
    spawned: list[object] = []
    monkeypatch.setattr(
        picker_module.subprocess,
        "Popen",
        lambda *args, **kwargs: spawned.append(args),
    )

    with pytest.raises(PickerIOError, match="UTF-8") as excinfo:
        run_picker("bad\udcff\n", cat_picker(tmp_path))

    assert isinstance(excinfo.value.__cause__, UnicodeEncodeError)
    assert spawned == []
