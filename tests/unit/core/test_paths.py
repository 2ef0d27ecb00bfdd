"""Unit tests for path management.

Tests for the configuration paths and the platform trashcan layouts.
"""

import os
from pathlib import Path
from unittest.mock import patch

from trashctl.core.paths import (
    APP_NAME,
    TrashLayout,
    get_config_dir,
    get_config_path,
    get_theme_path,
    get_trash_layout,
)


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_default_config_dir(self) -> None:
        """get_config_dir returns default path when XDG_CONFIG_HOME not set."""
        with patch.dict(os.environ, {}, clear=True):
            result = get_config_dir()

        assert result == Path.home() / ".config" / APP_NAME

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_config_dir()

        assert result == tmp_path / APP_NAME

    def test_config_files(self, tmp_path: Path) -> None:
        """Config and theme files live in the config dir."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            assert get_config_path() == tmp_path / APP_NAME / "config.toml"
            assert get_theme_path() == tmp_path / APP_NAME / "theme.toml"


class TestGetTrashLayout:
    """Tests for get_trash_layout function."""

    def test_linux_default(self, tmp_path: Path) -> None:
        """Linux home trashcan defaults to ~/.local/share/Trash/files."""
        with patch.dict(os.environ, {"HOME": str(tmp_path)}, clear=True):
            layout = get_trash_layout("linux")

        assert layout.home_trash == tmp_path / ".local" / "share" / "Trash" / "files"
        assert layout.root_name == ".Trash"
        assert layout.nested == "files"

    def test_linux_respects_xdg_data_home(self, tmp_path: Path) -> None:
        """Linux home trashcan follows XDG_DATA_HOME."""
        with patch.dict(os.environ, {"XDG_DATA_HOME": str(tmp_path)}):
            layout = get_trash_layout("linux")

        assert layout.home_trash == tmp_path / "Trash" / "files"

    def test_darwin(self, tmp_path: Path) -> None:
        """macOS uses ~/.Trash and per-device .Trashes."""
        with patch.dict(os.environ, {"HOME": str(tmp_path)}, clear=True):
            layout = get_trash_layout("darwin")

        assert layout.home_trash == tmp_path / ".Trash"
        assert layout.root_name == ".Trashes"
        assert layout.nested is None

    def test_unknown_platform_uses_linux_layout(self) -> None:
        """Platforms other than macOS get the freedesktop layout."""
        assert get_trash_layout("freebsd").root_name == ".Trash"


class TestTrashLayout:
    """Tests for TrashLayout device paths."""

    def test_nested_user_trash(self) -> None:
        """Nested layouts put the trashcan below the per-user directory."""
        layout = TrashLayout(home_trash=Path("/h"), root_name=".Trash", nested="files")

        assert layout.user_trash(Path("/mnt/usb"), 1000) == Path("/mnt/usb/.Trash/1000/files")
        assert layout.trash_root(Path("/mnt/usb")) == Path("/mnt/usb/.Trash")

    def test_flat_user_trash(self) -> None:
        """Flat layouts use the per-user directory itself."""
        layout = TrashLayout(home_trash=Path("/h"), root_name=".Trashes")

        assert layout.user_trash(Path("/Volumes/usb"), 501) == Path("/Volumes/usb/.Trashes/501")
