"""Revision naming scheme.

Older versions of a file in a trashcan carry a revision suffix:

    <basename>.#<mtime>#-<index>

where <mtime> is the modification time of the version when it entered its
revision slot and <index> is a 3-digit counter disambiguating versions that
share basename and mtime. The counter wraps modulo 1000.

Lexical order of revision names is not chronological order; the revision
stack orders versions by access time instead.
"""

import glob
import os
import re
from datetime import datetime
from pathlib import Path

from trashctl.filesystem.classifier import stat_of

MTIME_FORMAT = "%Y%m%dT%H%M%S"
INDEX_WIDTH = 3
INDEX_MODULUS = 1000

# Matches a complete revision name, capturing basename, mtime and index
_REVISION_RE = re.compile(r"^(?P<base>.+)\.#(?P<mtime>[^#/]*)#-(?P<index>\d{3,})$", re.DOTALL)


def revision_prefix(base_name: str, mtime_ns: int) -> str:
    """Return the revision name prefix for a version with the given mtime."""
    stamp = datetime.fromtimestamp(mtime_ns / 1e9).strftime(MTIME_FORMAT)
    return f"{base_name}.#{stamp}#-"


def revision_pattern(base_name: str) -> str:
    """Return a glob pattern matching every revision of base_name.

    Glob characters inside base_name are escaped, so a file named "a[1]"
    only matches its own revisions.
    """
    return glob.escape(base_name) + ".#*#-*"


def is_revision_name(name: str) -> bool:
    """Check if name carries a revision suffix."""
    return _REVISION_RE.match(name) is not None


def base_name_of(name: str) -> str:
    """Return the basename of a revision name (name itself if it is none)."""
    match = _REVISION_RE.match(name)
    return match.group("base") if match else name


def revision_index(name: str) -> int | None:
    """Return the numeric index of a revision name, None if it is none."""
    match = _REVISION_RE.match(name)
    return int(match.group("index")) if match else None


def next_revision_name(
    base_name: str,
    directory: Path,
    source: Path | None = None,
) -> str:
    """Compute the next free revision name for base_name in directory.

    Args:
        base_name: Basename of the file being versioned.
        directory: Trash directory that will hold the revision.
        source: File whose mtime stamps the revision. Defaults to the bare
            entry directory/base_name.

    Returns:
        Revision name with index one above the highest existing index for
        the same prefix, modulo 1000.

    Raises:
        OSError: If source cannot be examined.
    """
    mtime_ns = stat_of(source if source is not None else directory / base_name).mtime_ns
    prefix = revision_prefix(base_name, mtime_ns)

    highest = 0
    for name in os.listdir(directory):
        if not name.startswith(prefix) or base_name_of(name) != base_name:
            continue
        index = revision_index(name)
        if index is not None:
            highest = max(highest, index)

    index = (highest + 1) % INDEX_MODULUS
    return f"{prefix}{index:0{INDEX_WIDTH}d}"
