"""Secure overwrite and removal of files.

Overwriting is best-effort: it runs before a permanent deletion and a
failure while wiping never prevents the deletion itself. The caller is
told whether every regular file was wiped.
"""

import logging
import os
import secrets
import shutil
import stat
from pathlib import Path

from trashctl.core.config import DEFAULT_OVERWRITE_PASSES

logger = logging.getLogger(__name__)

BLOCK_SIZE = 64 * 1024


class SecureEraser:
    """Overwrites regular files with random bytes before removal.

    Attributes:
        passes: Number of overwrite passes per file.
    """

    def __init__(self, passes: int = DEFAULT_OVERWRITE_PASSES) -> None:
        self.passes = passes

    def secure_overwrite(self, path: str | Path) -> bool:
        """Overwrite path, or every regular file beneath it, in place.

        Symlinks, special files and directories themselves are left
        untouched. The first failure aborts the overwrite phase.

        Args:
            path: File or directory to wipe.

        Returns:
            True if every regular file was overwritten, False otherwise.
        """
        try:
            mode = os.lstat(path).st_mode
            if stat.S_ISREG(mode):
                self._overwrite_file(path)
            elif stat.S_ISDIR(mode):
                for file_path in self._regular_files(path):
                    self._overwrite_file(file_path)
        except OSError as e:
            logger.warning("Secure overwrite of %s incomplete: %s", path, e)
            return False

        return True

    def remove(self, path: str | Path) -> None:
        """Remove path: directory trees recursively, anything else unlinked.

        Raises:
            OSError: If the path cannot be removed.
        """
        if stat.S_ISDIR(os.lstat(path).st_mode):
            shutil.rmtree(path)
        else:
            os.unlink(path)

    def _regular_files(self, directory: str | Path) -> list[str]:
        def fail(error: OSError) -> None:
            raise error

        files: list[str] = []
        for root, _dirs, names in os.walk(directory, onerror=fail, followlinks=False):
            for name in names:
                file_path = os.path.join(root, name)
                if stat.S_ISREG(os.lstat(file_path).st_mode):
                    files.append(file_path)
        return files

    def _overwrite_file(self, path: str | Path) -> None:
        size = os.lstat(path).st_size
        # O_NOFOLLOW: never write through a symlink swapped in after the check
        fd = os.open(path, os.O_WRONLY | getattr(os, "O_NOFOLLOW", 0))
        with os.fdopen(fd, "wb") as f:
            for _ in range(self.passes):
                f.seek(0)
                remaining = size
                while remaining > 0:
                    chunk = min(BLOCK_SIZE, remaining)
                    f.write(secrets.token_bytes(chunk))
                    remaining -= chunk
                f.flush()
                os.fsync(f.fileno())
        logger.debug("Overwrote %s (%d bytes, %d passes)", path, size, self.passes)
