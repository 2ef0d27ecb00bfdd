"""Unit tests for SecureEraser.

Tests in-place overwriting of files and trees, pass counts, symlink
handling, failure reporting and removal.
"""

from pathlib import Path
from unittest.mock import patch

from trashctl.filesystem.eraser import SecureEraser


class TestSecureOverwrite:
    """Tests for SecureEraser.secure_overwrite."""

    def test_overwrites_in_place(self, tmp_path: Path) -> None:
        """Content is replaced, size and inode are kept."""
        target = tmp_path / "secret.txt"
        target.write_bytes(b"A" * 1000)
        inode = target.stat().st_ino

        assert SecureEraser().secure_overwrite(target)

        assert target.stat().st_ino == inode
        assert target.stat().st_size == 1000
        assert target.read_bytes() != b"A" * 1000

    def test_pass_count(self, tmp_path: Path) -> None:
        """Each pass writes the whole file once."""
        target = tmp_path / "secret.txt"
        target.write_bytes(b"A" * 10)

        with patch(
            "trashctl.filesystem.eraser.secrets.token_bytes", side_effect=lambda n: b"\0" * n
        ) as mock_random:
            assert SecureEraser(passes=5).secure_overwrite(target)

        assert mock_random.call_count == 5
        assert target.read_bytes() == b"\0" * 10

    def test_walks_directories(self, tmp_path: Path) -> None:
        """Every regular file of a tree is overwritten."""
        tree = tmp_path / "tree"
        (tree / "sub").mkdir(parents=True)
        (tree / "a").write_bytes(b"A" * 8)
        (tree / "sub" / "b").write_bytes(b"B" * 8)

        with patch(
            "trashctl.filesystem.eraser.secrets.token_bytes", side_effect=lambda n: b"\0" * n
        ):
            assert SecureEraser(passes=1).secure_overwrite(tree)

        assert (tree / "a").read_bytes() == b"\0" * 8
        assert (tree / "sub" / "b").read_bytes() == b"\0" * 8

    def test_symlinks_untouched(self, tmp_path: Path) -> None:
        """Symlink targets, inside a tree or given directly, keep their content."""
        outside = tmp_path / "outside.txt"
        outside.write_bytes(b"keep")
        tree = tmp_path / "tree"
        tree.mkdir()
        (tree / "link").symlink_to(outside)
        direct = tmp_path / "direct"
        direct.symlink_to(outside)

        eraser = SecureEraser()
        assert eraser.secure_overwrite(tree)
        assert eraser.secure_overwrite(direct)

        assert outside.read_bytes() == b"keep"

    def test_failure_returns_false(self, tmp_path: Path) -> None:
        """A file that cannot be examined makes the overwrite incomplete."""
        assert not SecureEraser().secure_overwrite(tmp_path / "missing")


class TestRemove:
    """Tests for SecureEraser.remove."""

    def test_removes_tree(self, tmp_path: Path) -> None:
        tree = tmp_path / "tree"
        (tree / "sub").mkdir(parents=True)
        (tree / "sub" / "f").write_text("x")

        SecureEraser().remove(tree)

        assert not tree.exists()

    def test_removes_link_not_target(self, tmp_path: Path) -> None:
        """A symlink to a directory is unlinked, the directory survives."""
        target = tmp_path / "dir"
        target.mkdir()
        link = tmp_path / "link"
        link.symlink_to(target)

        SecureEraser().remove(link)

        assert not link.is_symlink()
        assert target.is_dir()
