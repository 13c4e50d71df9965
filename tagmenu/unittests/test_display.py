"""Unit tests for menu rendering."""

from __future__ import annotations

from pathlib import Path

import pytest

from tagmenu.display import DisplayConfig, render, render_line
from tagmenu.entry import FilterEntry, NameEntry, ResolvedEntry, ShellRun
from tagmenu.resolve import resolve
from tagmenu.scan import Executable, PathConfig, ScanResult
from tagmenu.tag import COMPACT, DECIMAL, strip_tag_chars

_ENTRIES = (
    ResolvedEntry("browser", ShellRun("firefox")),
    ResolvedEntry("browser", ShellRun("chromium")),
    ResolvedEntry("editor", ShellRun("vim")),
)


def test_compact_lines_show_only_names() -> None:
    """Compact tags are invisible and follow the name."""
    text = render(_ENTRIES)

    lines = text.splitlines()
    assert [strip_tag_chars(line) for line in lines] == [
        "browser",
        "browser",
        "editor",
    ]
    assert lines[1] == f"browser{COMPACT.encode(1)}"
    assert text.endswith("\n")


def test_duplicate_names_get_distinct_tags() -> None:
    """Identical visible text still decodes to separate positions."""
    lines = render(_ENTRIES).splitlines()

    assert [COMPACT.decode(line) for line in lines] == [
        (0, "browser"),
        (1, "browser"),
        (2, "editor"),
    ]


@pytest.mark.parametrize(
    ("separator", "expected"),
    [
        pytest.param(True, ": ", id="default"),
        pytest.param(False, "", id="none"),
        pytest.param(None, "", id="unset"),
        pytest.param(" | ", " | ", id="custom"),
    ],
)
def test_numbered_lines_lead_with_the_index(
    separator: str | bool | None,
    expected: str,
) -> None:
    """Numbered mode prefixes a decimal tag and the separator."""
    display = DisplayConfig(numbered=True, separator=separator)

    line = render_line(2, _ENTRIES[2], display)

    assert line == f"{DECIMAL.encode(2)}{expected}editor"
    assert display.codec is DECIMAL


def test_compact_mode_ignores_separator() -> None:
    """The separator only applies to numbered menus."""
    display = DisplayConfig(numbered=False, separator=" | ")

    assert render_line(0, _ENTRIES[0], display) == f"browser{COMPACT.encode(0)}"
    assert display.codec is COMPACT


def test_empty_menu_renders_nothing() -> None:
    """No entries means no lines."""
    assert render(()) == ""


def test_filtered_names_never_reach_the_menu_text() -> None:
    """A filtered name is absent from the rendered text, even when discovered."""
    found = ScanResult(
        executables=(
            Executable(path=Path("/usr/bin/y"), name="y"),
            Executable(path=Path("/usr/bin/z"), name="z"),
        ),
    )

    def scanner(*_args: object, **_kwargs: object) -> ScanResult:
        return found

    entries = resolve(
        [FilterEntry("y"), NameEntry("w")],
        PathConfig(env=False),
        scanner=scanner,
    )
    lines = strip_tag_chars(render(entries)).splitlines()

    assert lines == ["w", "z"]
    assert all("y" not in line for line in lines)
