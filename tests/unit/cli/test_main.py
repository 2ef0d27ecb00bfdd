"""Unit tests for the trash command.

Runs the Typer application against a temporary home with the trashcan
layout taken from XDG_DATA_HOME.
"""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from trashctl import __version__
from trashctl.cli.main import app
from trashctl.filesystem.models import OperationResult, TrashRequest
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Temporary home and working directory; yields the home trashcan path."""
    home = tmp_path / "home"
    work = home / "work"
    work.mkdir(parents=True)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.chdir(work)
    with patch("trashctl.filesystem.locator.TrashLocator.mount_points", return_value=[]):
        yield home / ".local" / "share" / "Trash" / "files"


def requested(argv: list[str]) -> TrashRequest:
    """Run the command with a mocked engine and return the request it got."""
    with patch("trashctl.cli.main.Trashcan") as mock_cls:
        engine = mock_cls.return_value
        for operation in ("transfer", "restore", "empty", "list"):
            getattr(engine, operation).return_value = OperationResult()

        result = runner.invoke(app, argv)

    assert result.exit_code == 0, result.output
    for operation in ("transfer", "restore", "empty", "list"):
        call = getattr(engine, operation).call_args
        if call is not None:
            return call.args[1]
    raise AssertionError("no operation was called")


class TestTrashCommand:
    """End-to-end tests of the trash command."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["-V"])

        assert result.exit_code == 0
        assert f"trash version {__version__}" in result.output

    def test_missing_operand(self, env: Path) -> None:
        """Transfer without files is a usage error."""
        result = runner.invoke(app, [])

        assert result.exit_code == 2

    def test_transfer_and_restore(self, env: Path) -> None:
        Path("a.txt").write_text("hello")

        moved = runner.invoke(app, ["a.txt"])
        assert moved.exit_code == 0, moved.output
        assert (env / "a.txt").read_text() == "hello"
        assert not Path("a.txt").exists()

        restored = runner.invoke(app, ["-W", "a.txt"])
        assert restored.exit_code == 0, restored.output
        assert Path("a.txt").read_text() == "hello"

    def test_no_match_exits_nonzero(self, env: Path) -> None:
        result = runner.invoke(app, ["*123*"])

        assert result.exit_code == 1
        assert "trash: *123*: No such file or directory" in result.output

    def test_list_empty(self, env: Path) -> None:
        result = runner.invoke(app, ["-l"])

        assert result.exit_code == 0
        assert "Trashcan is empty." in result.output

    def test_list_and_empty(self, env: Path) -> None:
        Path("a.txt").write_text("x")
        runner.invoke(app, ["a.txt"])

        listed = runner.invoke(app, ["-l"])
        emptied = runner.invoke(app, ["-e"])

        assert f"{env}:" in listed.output
        assert "a.txt" in listed.output
        assert emptied.exit_code == 0
        assert not (env / "a.txt").exists()

    def test_interactive_yes_and_no(self, env: Path) -> None:
        """Single keypress confirmations decide per file."""
        Path("a.txt").write_text("x")

        declined = runner.invoke(app, ["-i", "a.txt"], input="n")
        assert declined.exit_code == 0
        assert "Move to trash" in declined.output
        assert Path("a.txt").exists()

        accepted = runner.invoke(app, ["-i", "a.txt"], input="y")
        assert accepted.exit_code == 0
        assert not Path("a.txt").exists()

    def test_writes_default_config(self, env: Path) -> None:
        """The first run leaves an editable config file behind."""
        config = env.parents[3] / ".config" / "trashctl" / "config.toml"

        result = runner.invoke(app, ["-l"])

        assert result.exit_code == 0
        assert "probe_timeout = 10.0" in config.read_text()

    def test_invalid_config(self, env: Path) -> None:
        config = env.parents[3] / ".config" / "trashctl" / "config.toml"
        config.parent.mkdir(parents=True)
        config.write_text("probe_timeout = [")

        result = runner.invoke(app, ["-l"])

        assert result.exit_code == 1
        assert "Invalid TOML syntax" in " ".join(result.output.split())

    def test_unsafe_home_trash(self, env: Path) -> None:
        env.mkdir(parents=True)
        env.chmod(0o777)

        result = runner.invoke(app, ["-l"])

        assert result.exit_code == 1
        assert "Unsafe access permissions" in " ".join(result.output.split())


class TestFlagInterplay:
    """Tests for how options combine into a TrashRequest."""

    def test_last_of_force_and_interactive_wins(self, env: Path) -> None:
        forced = requested(["-i", "-f", "a"])
        prompted = requested(["-f", "-i", "a"])

        assert forced.force and not forced.interactive
        assert prompted.interactive and not prompted.force

    def test_overwrite_implies_purge(self, env: Path) -> None:
        request = requested(["-P", "a"])

        assert request.permanent and request.overwrite

    def test_recursive_supersedes_directory(self, env: Path) -> None:
        request = requested(["-d", "-r", "a"])

        assert request.recursive and not request.directory

    def test_whiteout_implies_recursive(self, env: Path) -> None:
        request = requested(["-W", "a"])

        assert request.whiteout and request.recursive

    def test_dispatch(self, env: Path) -> None:
        """-l, -e and -W select the operation."""
        with patch("trashctl.cli.main.Trashcan") as mock_cls:
            engine: MagicMock = mock_cls.return_value
            engine.list.return_value = OperationResult()
            engine.empty.return_value = OperationResult(errors=["x: Permission denied"])

            listed = runner.invoke(app, ["-l", "*.txt"])
            emptied = runner.invoke(app, ["-e"])

        engine.list.assert_called_once()
        assert engine.list.call_args.args[0] == ["*.txt"]
        assert listed.exit_code == 0
        assert emptied.exit_code == 1
        engine.transfer.assert_not_called()
