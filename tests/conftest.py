"""Collect Gherkin files so every scenario is known to be bound.

Each ``tests/features/*.feature`` file becomes one item. The item fails when
a scenario title in the file has no ``@scenario`` binding in any module under
``tests/behaviour``, so a scenario added to a feature file cannot be silently
skipped by the suite.
"""

from __future__ import annotations

import typing as typ

import pytest

if typ.TYPE_CHECKING:
    from pathlib import Path

_SCENARIO_PREFIX = "Scenario:"
_BEHAVIOUR_DIR = "behaviour"


def _scenario_titles(feature: Path) -> list[str]:
    titles: list[str] = []
    for line in feature.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if stripped.startswith(_SCENARIO_PREFIX):
            titles.append(stripped.removeprefix(_SCENARIO_PREFIX).strip())
    return titles


def _binding_sources(feature: Path) -> str:
    behaviour = feature.parent.parent / _BEHAVIOUR_DIR
    return "\n".join(
        module.read_text(encoding="utf-8")
        for module in sorted(behaviour.glob("test_*.py"))
    )


class ScenarioBindingFile(pytest.File):
    """A feature file whose scenarios must all be bound."""

    def collect(self) -> list[pytest.Item]:
        """Yield the binding check for this file."""
        return [ScenarioBindingItem.from_parent(self, name=self.path.stem)]


class ScenarioBindingItem(pytest.Item):
    """Fails on scenario titles that no behaviour module binds."""

    def runtest(self) -> None:
        """Compare the file's scenario titles against the behaviour modules."""
        titles = _scenario_titles(self.path)
        if not titles:
            msg = f"{self.path.name} declares no scenarios"
            raise AssertionError(msg)
        sources = _binding_sources(self.path)
        unbound = [title for title in titles if f'"{title}"' not in sources]
        if unbound:
            msg = f"{self.path.name}: unbound scenarios {unbound}"
            raise AssertionError(msg)

    def reportinfo(self) -> tuple[Path, int, str]:
        """Report the item under its feature file."""
        return self.path, 0, f"scenario bindings of {self.path.name}"


def pytest_collect_file(
    file_path: Path,
    parent: pytest.Collector,
) -> ScenarioBindingFile | None:
    """Turn ``.feature`` files into binding checks."""
    if file_path.suffix != ".feature":
        return None
    return ScenarioBindingFile.from_parent(parent, path=file_path)
