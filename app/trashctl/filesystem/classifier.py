"""Path classification queries.

Answers containment and identity questions about paths: home membership,
owning mount point, emptiness and access predicates. Every query is free
of side effects and tolerant of races: a path that disappears while it is
being examined yields False, never an exception.

The only functions that raise are stat_of() and set_times(), which operate
on a path the caller is about to mutate anyway.
"""

import logging
import os
import stat
from datetime import datetime
from pathlib import Path

from trashctl.filesystem.models import PathStat, PathType
from trashctl.utils.shell import run_command

logger = logging.getLogger(__name__)

ROOT = Path("/")


def canonical_path(path: str | Path) -> Path:
    """Return an absolute path with its parent directories resolved.

    The final component is kept as is, so a symlink stays a symlink.
    """
    absolute = os.path.abspath(path)
    parent = os.path.realpath(os.path.dirname(absolute))
    return Path(parent) / os.path.basename(absolute)


def is_under_home(path: str | Path, home: Path | None = None) -> bool:
    """Check if a path lies inside the user's home tree (home included)."""
    try:
        home_dir = Path(os.path.realpath(home or Path.home()))
        return canonical_path(path).is_relative_to(home_dir)
    except (OSError, RuntimeError, ValueError):
        return False


def mount_point_of(path: str | Path, *, verbose: bool = False) -> Path:
    """Return the mount point of the device on which path resides.

    Walks up from the path until os.path.ismount() holds. A path that is a
    symlink belongs to the device of the directory holding the link.

    Args:
        path: Path to look up (need not exist).
        verbose: Log lookup failures at warning rather than debug level.

    Returns:
        Mount point path, or the root directory if the lookup fails.
    """
    try:
        current = str(canonical_path(path))
        while not os.path.ismount(current):
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent
        return Path(current)
    except (OSError, ValueError) as e:
        logger.log(
            logging.WARNING if verbose else logging.DEBUG,
            "mount_point: %s: %s",
            path,
            e,
        )
        return ROOT


def _stat_mode(path: str | Path, *, follow_symlinks: bool = True) -> int | None:
    try:
        return os.stat(path, follow_symlinks=follow_symlinks).st_mode
    except (OSError, ValueError):
        return None


def exists(path: str | Path) -> bool:
    """Check if path exists (dead symlinks included)."""
    return os.path.lexists(path)


def is_directory(path: str | Path) -> bool:
    """Check if path is a real directory (not a symlink to one)."""
    mode = _stat_mode(path, follow_symlinks=False)
    return mode is not None and stat.S_ISDIR(mode)


def is_symlink(path: str | Path) -> bool:
    """Check if path is a symbolic link."""
    return os.path.islink(path)


def is_world_writable(path: str | Path) -> bool:
    """Check if anyone may write to path (sticky or not)."""
    mode = _stat_mode(path)
    return mode is not None and bool(mode & stat.S_IWOTH)


def is_sticky(path: str | Path) -> bool:
    """Check if path has the restricted deletion (sticky) bit set."""
    mode = _stat_mode(path)
    return mode is not None and bool(mode & stat.S_ISVTX)


def is_readable(path: str | Path) -> bool:
    """Check if the caller may read path."""
    return _access(path, os.R_OK)


def is_writable(path: str | Path) -> bool:
    """Check if the caller may write path."""
    return _access(path, os.W_OK)


def is_executable(path: str | Path) -> bool:
    """Check if the caller may execute (search) path."""
    return _access(path, os.X_OK)


def _access(path: str | Path, mode: int) -> bool:
    try:
        return os.access(path, mode)
    except (OSError, ValueError):
        return False


def is_owner_private(path: str | Path, uid: int | None = None) -> bool:
    """Check if path is a directory owned by uid with no group/other bits.

    Args:
        path: Directory to check.
        uid: Expected owner. Defaults to the effective user id.

    Returns:
        True if path is a real directory owned by uid and mode & 0o077 == 0.
    """
    try:
        st = os.lstat(path)
    except (OSError, ValueError):
        return False

    owner = os.geteuid() if uid is None else uid
    return stat.S_ISDIR(st.st_mode) and st.st_uid == owner and not st.st_mode & 0o077


def is_empty_directory(path: str | Path) -> bool:
    """Check if path is a directory without any entries."""
    try:
        with os.scandir(path) as entries:
            return next(entries, None) is None
    except (OSError, ValueError):
        return False


def path_type_of(mode: int) -> PathType:
    """Classify an st_mode value."""
    if stat.S_ISLNK(mode):
        return PathType.SYMLINK
    if stat.S_ISDIR(mode):
        return PathType.DIRECTORY
    if stat.S_ISREG(mode):
        return PathType.FILE
    return PathType.OTHER


def stat_of(path: str | Path) -> PathStat:
    """Return metadata of path itself, never of a symlink target.

    Raises:
        OSError: If path cannot be examined.
    """
    st = os.lstat(path)
    return PathStat(
        size=st.st_size,
        atime_ns=st.st_atime_ns,
        mtime_ns=st.st_mtime_ns,
        path_type=path_type_of(st.st_mode),
    )


def set_times(path: str | Path, atime_ns: int, mtime_ns: int) -> None:
    """Set access and modification times of path itself.

    Symlinks are changed in place where the platform supports lutimes(),
    otherwise via touch(1) -h with second precision.

    Raises:
        OSError: If the times cannot be changed.
    """
    if not os.path.islink(path):
        os.utime(path, ns=(atime_ns, mtime_ns))
        return

    if os.utime in os.supports_follow_symlinks:
        os.utime(path, ns=(atime_ns, mtime_ns), follow_symlinks=False)
        return

    for flag, value in (("-a", atime_ns), ("-m", mtime_ns)):
        stamp = datetime.fromtimestamp(value / 1e9).strftime("%Y%m%d%H%M.%S")
        result = run_command(["touch", "-h", flag, "-t", stamp, str(path)], timeout=10.0)
        if not result.success:
            raise OSError(result.stderr.strip() or f"touch failed on {path}")
