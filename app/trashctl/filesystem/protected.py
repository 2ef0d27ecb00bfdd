"""Protected mount points and trashcan paths.

This module defines the mount points on which trashctl never creates a
shared trash root (pseudo and system filesystems), and guards the
trashcans themselves against being transferred into a trashcan.
"""

import fnmatch
import os
from collections.abc import Iterable
from pathlib import Path

# Mount point patterns (glob-style) that never receive a shared trashcan.
# Each entry covers the mount point itself and everything mounted below it.
PROTECTED_MOUNT_POINTS: tuple[str, ...] = (
    # Root device: files outside home on it go to the home trashcan
    "/",
    # Boot and firmware
    "/boot",
    # Kernel pseudo filesystems
    "/dev",
    "/proc",
    "/sys",
    # Volatile runtime state
    "/run",
    "/tmp",
    "/var",
    # Snap squashfs images
    "/snap",
)


def is_protected_mount(
    mount_point: str | Path,
    patterns: Iterable[str] = PROTECTED_MOUNT_POINTS,
) -> bool:
    """Check if no shared trash root may be created on a mount point.

    The root pattern "/" only matches the root mount point itself; every
    other pattern also matches mount points nested below it (e.g. /run/user/1000).

    Args:
        mount_point: Absolute mount point path.
        patterns: Mount point patterns to check against.

    Returns:
        True if the mount point matches a protected pattern, False otherwise.
    """
    path = os.path.normpath(str(mount_point))

    for pattern in patterns:
        if pattern == "/":
            if path == "/":
                return True
            continue

        if fnmatch.fnmatch(path, pattern) or fnmatch.fnmatch(path, pattern.rstrip("/") + "/*"):
            return True

    return False


def is_trash_path(path: str | Path, trash_dirs: Iterable[Path]) -> bool:
    """Check if a path is a trashcan or an ancestor of one.

    Transferring such a path would move a trashcan into itself.

    Args:
        path: Path about to be transferred.
        trash_dirs: Known trashcan directories.

    Returns:
        True if path is, or contains, one of the trashcans.
    """
    # Resolve the parent only: a symlink to a trashcan is an ordinary file
    absolute = os.path.abspath(path)
    try:
        resolved = Path(os.path.realpath(os.path.dirname(absolute))) / os.path.basename(absolute)
    except (OSError, ValueError):
        return False

    for trash_dir in trash_dirs:
        trash = Path(os.path.realpath(trash_dir))
        if trash == resolved or trash.is_relative_to(resolved):
            return True

    return False
