"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Literal
from unittest.mock import patch

import pytest
from trashctl.core.paths import TrashLayout
from trashctl.filesystem.engine import Trashcan


class ScriptedUI:
    """TrashUI double answering confirmations from a script.

    Confirmations beyond the scripted answers are declined.
    """

    def __init__(self, answers: list[bool] | None = None) -> None:
        self.answers = list(answers or [])
        self.prompts: list[tuple[str, str]] = []
        self.responses: list[str] = []
        self.errors: list[str] = []

    def confirm(self, action: str, subject: str) -> bool:
        self.prompts.append((action, subject))
        return self.answers.pop(0) if self.answers else False

    def respond(self, *lines: str) -> None:
        self.responses.extend(lines)

    def error(self, *lines: str) -> Literal[False]:
        self.errors.extend(lines)
        return False


class RecordingLister:
    """Lister double remembering which names it was asked to render."""

    def __init__(self) -> None:
        self.calls: list[tuple[Path, list[str]]] = []

    def __call__(self, directory: Path, names: list[str]) -> list[str]:
        self.calls.append((directory, list(names)))
        return sorted(names)


@pytest.fixture
def ui() -> ScriptedUI:
    """UI double without scripted answers."""
    return ScriptedUI()


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Home directory inside the test's temporary directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def workdir(home: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Working directory below home; the test runs inside it."""
    path = home / "work"
    path.mkdir()
    monkeypatch.chdir(path)
    return path


@pytest.fixture
def layout(home: Path) -> TrashLayout:
    """Linux trashcan layout with the home trashcan below the test home."""
    return TrashLayout(home_trash=home / "Trash" / "files", root_name=".Trash", nested="files")


@pytest.fixture
def no_mounts() -> Iterator[None]:
    """Hide every mounted device except the home device."""
    with patch("trashctl.filesystem.locator.TrashLocator.mount_points", return_value=[]):
        yield


@pytest.fixture
def lister() -> RecordingLister:
    return RecordingLister()


@pytest.fixture
def trashcan(
    ui: ScriptedUI,
    home: Path,
    workdir: Path,
    layout: TrashLayout,
    lister: RecordingLister,
    no_mounts: None,
) -> Trashcan:
    """Trashcan confined to the test home."""
    return Trashcan(ui, layout=layout, lister=lister, home=home)


@pytest.fixture
def trash_dir(trashcan: Trashcan) -> Path:
    """Directory of the home trashcan."""
    return trashcan.home_trash.path
