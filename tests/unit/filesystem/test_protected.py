"""Unit tests for protected mount points and trashcan paths."""

import os
from pathlib import Path

import pytest
from trashctl.filesystem.protected import PROTECTED_MOUNT_POINTS, is_protected_mount, is_trash_path


class TestIsProtectedMount:
    """Tests for is_protected_mount."""

    @pytest.mark.parametrize(
        "mount_point",
        ["/", "/boot", "/boot/efi", "/proc", "/sys/fs/cgroup", "/run/user/1000", "/tmp", "/snap/core/1"],
    )
    def test_protected(self, mount_point: str) -> None:
        """System and pseudo filesystems are protected."""
        assert is_protected_mount(mount_point)

    @pytest.mark.parametrize("mount_point", ["/home", "/mnt/usb", "/media/me/disk", "/bootstrap"])
    def test_not_protected(self, mount_point: str) -> None:
        """Data filesystems are not protected; "/" only matches itself."""
        assert not is_protected_mount(mount_point)

    def test_custom_patterns(self) -> None:
        """Glob patterns from configuration are honoured."""
        assert is_protected_mount("/media/me/disk", ("/media/*",))
        assert not is_protected_mount("/", ("/media/*",))

    def test_default_includes_root(self) -> None:
        assert "/" in PROTECTED_MOUNT_POINTS


class TestIsTrashPath:
    """Tests for is_trash_path."""

    def test_trashcan_and_ancestors(self, tmp_path: Path) -> None:
        """A trashcan and every directory above it are trash paths."""
        trash = tmp_path / "home" / "Trash" / "files"
        trash.mkdir(parents=True)

        assert is_trash_path(trash, [trash])
        assert is_trash_path(tmp_path / "home", [trash])

    def test_unrelated_paths(self, tmp_path: Path) -> None:
        """Siblings and entries inside the trashcan are not."""
        trash = tmp_path / "Trash"
        trash.mkdir()
        (tmp_path / "other").mkdir()

        assert not is_trash_path(tmp_path / "other", [trash])
        assert not is_trash_path(trash / "a.txt", [trash])

    def test_symlink_to_trashcan_is_ordinary(self, tmp_path: Path) -> None:
        """A symlink pointing at a trashcan may be transferred."""
        trash = tmp_path / "Trash"
        trash.mkdir()
        link = tmp_path / "link"
        link.symlink_to(trash)

        assert not is_trash_path(link, [trash])

    def test_relative_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Relative paths are resolved against the working directory."""
        trash = tmp_path / "Trash"
        trash.mkdir()
        monkeypatch.chdir(tmp_path)

        assert is_trash_path("Trash", [Path(os.path.realpath(trash))])
