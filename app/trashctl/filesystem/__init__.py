"""Trashcan engine.

This package provides path classification, the revision naming scheme,
trashcan resolution across devices, per-name revision stacks, secure
erasure and the Trashcan engine composing them.

Only the leaf modules are re-exported here; import the engine from
trashctl.filesystem.engine.
"""

from trashctl.filesystem.models import (
    OperationResult,
    PathStat,
    PathType,
    TrashDirectory,
    TrashRequest,
)
from trashctl.filesystem.naming import (
    base_name_of,
    is_revision_name,
    next_revision_name,
    revision_pattern,
)
from trashctl.filesystem.protected import PROTECTED_MOUNT_POINTS, is_protected_mount, is_trash_path

__all__ = [
    "PROTECTED_MOUNT_POINTS",
    "OperationResult",
    "PathStat",
    "PathType",
    "TrashDirectory",
    "TrashRequest",
    "base_name_of",
    "is_protected_mount",
    "is_revision_name",
    "is_trash_path",
    "next_revision_name",
    "revision_pattern",
]
