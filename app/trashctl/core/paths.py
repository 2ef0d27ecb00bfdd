"""XDG-compliant and platform-specific path management for trashctl.

This module provides the configuration paths of trashctl itself and the
trashcan layout used on the current platform.

Layouts:
- Linux: ~/.local/share/Trash/files (home), <mount>/.Trash/<uid>/files (device)
- macOS: ~/.Trash (home), <mount>/.Trashes/<uid> (device)
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "trashctl"


@dataclass(frozen=True, slots=True)
class TrashLayout:
    """Where trashcans live on a given platform.

    Attributes:
        home_trash: Trashcan used for files on the home device (and as fallback).
        root_name: Name of the shared trash root at the top of each device.
        nested: Optional subdirectory below the per-user directory.
    """

    home_trash: Path
    root_name: str
    nested: str | None = None

    def user_trash(self, mount_point: Path, uid: int) -> Path:
        """Return the per-user trash directory on the device at mount_point."""
        user_dir = mount_point / self.root_name / str(uid)
        return user_dir / self.nested if self.nested else user_dir

    def trash_root(self, mount_point: Path) -> Path:
        """Return the shared trash root on the device at mount_point."""
        return mount_point / self.root_name


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG base directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the XDG base directory (not application-specific).
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base)
    return Path.home() / default_subdir


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/trashctl/ (or XDG_CONFIG_HOME/trashctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config") / APP_NAME


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path to ~/.config/trashctl/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to ~/.config/trashctl/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_trash_layout(platform: str | None = None) -> TrashLayout:
    """Get the trashcan layout for a platform.

    Args:
        platform: Platform identifier as in sys.platform. Defaults to the
            running platform.

    Returns:
        TrashLayout for the platform. Anything that is not macOS uses the
        freedesktop-style Linux layout.
    """
    platform = platform or sys.platform

    if platform == "darwin":
        return TrashLayout(home_trash=Path.home() / ".Trash", root_name=".Trashes")

    data_home = _get_xdg_dir("XDG_DATA_HOME", ".local/share")
    return TrashLayout(
        home_trash=data_home / "Trash" / "files",
        root_name=".Trash",
        nested="files",
    )
