"""Trashcan domain models.

This module defines the core data structures of the trashcan engine:
path metadata, resolved trash directories, the per-call request options
and the result of each top-level operation.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class PathType(str, Enum):
    """Type of filesystem entry, as seen without following symlinks.

    Attributes:
        DIRECTORY: Regular directory.
        FILE: Regular file.
        SYMLINK: Symbolic link (live or dead).
        OTHER: Device, socket, FIFO or anything else.
    """

    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class PathStat:
    """Metadata of a path itself, never of a symlink target.

    Attributes:
        size: Size in bytes.
        atime_ns: Last access time in nanoseconds since the epoch.
        mtime_ns: Last modification time in nanoseconds since the epoch.
        path_type: Type of the entry.
    """

    size: int
    atime_ns: int
    mtime_ns: int
    path_type: PathType


@dataclass(frozen=True, slots=True)
class TrashDirectory:
    """A resolved trashcan directory.

    Attributes:
        path: Directory that receives transferred files.
        mount_point: Device root that this trashcan was resolved for.
        is_home: Whether this is the home trashcan.
    """

    path: Path
    mount_point: Path
    is_home: bool = False

    def __str__(self) -> str:
        return str(self.path)


class TrashRequest(BaseModel):
    """Options of one trashcan operation.

    Attributes:
        force: Ignore warnings and never prompt.
        interactive: Prompt before acting on each file.
        recursive: Transfer directory hierarchies.
        directory: Transfer empty directories.
        permanent: Delete instead of transferring to the trashcan.
        overwrite: Overwrite regular files before deleting them.
        verbose: Report diagnostics of degraded operation.
        whiteout: Restore files from the trashcan.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    force: bool = False
    interactive: bool = False
    recursive: bool = False
    directory: bool = False
    permanent: bool = False
    overwrite: bool = False
    verbose: bool = False
    whiteout: bool = False


@dataclass(slots=True)
class OperationResult:
    """Outcome of one top-level trashcan operation.

    Attributes:
        count: Number of files successfully acted upon.
        errors: Diagnostics reported while processing.
    """

    count: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if the operation completed without any error."""
        return not self.errors

    @property
    def exit_status(self) -> int:
        """Process exit status corresponding to this result."""
        return 0 if self.success else 1
