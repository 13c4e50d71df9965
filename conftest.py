"""Shared pytest fixtures for tagmenu tests.

Use these fixtures to build scratch search directories and to observe
command launches without starting real processes.

Example
-------
def test_launches(recording_spawner):
    execute([BareRun(("true",))], spawner=recording_spawner)
    assert recording_spawner.calls == [(("true",), None)]
"""

from __future__ import annotations

import typing as typ

import pytest

from tests.helpers.filesystem import make_executable
from tests.helpers.spawn import RecordingSpawner

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(name="recording_spawner")
def fixture_recording_spawner() -> RecordingSpawner:
    """Provide a spawner double that records every launch.

    Returns
    -------
    RecordingSpawner
        A spawner with no failing executables configured.
    """
    return RecordingSpawner()


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """Provide an empty directory to populate with executables.

    Parameters
    ----------
    tmp_path : Path
        Pytest temporary directory for the active test.

    Returns
    -------
    Path
        The ``bin`` directory inside ``tmp_path``.
    """
    directory = tmp_path / "bin"
    directory.mkdir()
    return directory


@pytest.fixture
def isolated_path(
    monkeypatch: pytest.MonkeyPatch,
    bin_dir: Path,
) -> Path:
    """Point ``$PATH`` at ``bin_dir`` holding a single ``tool`` executable.

    Parameters
    ----------
    monkeypatch : pytest.MonkeyPatch
        Pytest monkeypatch for environment variable isolation.
    bin_dir : Path
        Directory that becomes the whole search path.

    Returns
    -------
    Path
        The directory now on ``$PATH``.
    """
    make_executable(bin_dir, "tool")
    monkeypatch.setenv("PATH", str(bin_dir))
    return bin_dir
