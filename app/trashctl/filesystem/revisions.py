"""Per-name revision stack inside a trashcan.

For every basename a trashcan holds at most one bare entry, the most
recently transferred version, plus any number of older versions under
revision names (see trashctl.filesystem.naming). Versions are ordered by
access time, which this module sets explicitly:

- a version displaced from the bare slot by push() becomes the newest
  revision;
- a file displaced by a restore, via shift(), becomes the oldest revision.

Restoring pops the bare entry and promotes the newest revision into the
bare slot, so versions come back in reverse order of transfer.
"""

import errno
import glob
import logging
import os
import shutil
import time
from pathlib import Path

from trashctl.core.ui import Reporter
from trashctl.filesystem import classifier
from trashctl.filesystem.locator import TrashLocator
from trashctl.filesystem.naming import base_name_of, next_revision_name, revision_pattern

logger = logging.getLogger(__name__)

NS_PER_SECOND = 1_000_000_000


def describe(error: OSError) -> str:
    """Return the human-readable reason of an OSError."""
    return error.strerror or str(error)


def revisions_of(base_name: str, trash_dir: Path) -> list[str]:
    """Return the revision names of base_name in trash_dir, unordered."""
    return glob.glob(revision_pattern(base_name), root_dir=trash_dir, include_hidden=True)


def move(source: str | Path, destination: Path) -> None:
    """Move source to destination, refusing to replace an existing entry.

    Moves across devices copy and then delete the source.

    Raises:
        FileExistsError: If destination already exists.
        OSError: If the move fails.
    """
    if classifier.exists(destination):
        raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), str(destination))
    shutil.move(os.fspath(source), os.fspath(destination))


class RevisionStack:
    """Push, pop, shift and age operations on trashcan revision stacks.

    Failures are reported through the reporter and signalled by a False
    return value; nothing is raised for filesystem errors.
    """

    def __init__(self, locator: TrashLocator, reporter: Reporter) -> None:
        self._locator = locator
        self._reporter = reporter

    def push(self, path: str | Path, verbose: bool = False) -> bool:
        """Move path into its trashcan as the top of its revision stack.

        An entry already holding the bare name is renamed to the next
        revision name first.

        Args:
            path: File to transfer.
            verbose: Report degraded trashcan resolution.

        Returns:
            True if path was moved into the trashcan.
        """
        trash = self._locator.locate(path, create_if_missing=True, verbose=verbose)
        name = os.path.basename(os.path.abspath(path))
        bare = trash.path / name

        demoted: str | None = None
        try:
            if classifier.exists(bare):
                demoted = self._demote(name, trash.path)
            move(path, bare)
        except OSError as e:
            self._reporter.error(f"{path}: {describe(e)}")
            if demoted is not None:
                self._reinstate(demoted, name, trash.path)
            return False

        logger.debug("Pushed %s to %s", path, trash)
        return True

    def pop(self, name: str, trash_dir: Path, destination_dir: Path) -> bool:
        """Move the bare entry name out of trash_dir into destination_dir.

        Afterwards the newest revision (by access time), if any, is
        promoted to the bare slot.

        Args:
            name: Bare entry name inside trash_dir.
            trash_dir: Trashcan holding the entry.
            destination_dir: Directory receiving the restored file.

        Returns:
            True if the entry was restored.
        """
        try:
            move(trash_dir / name, destination_dir / name)
        except OSError as e:
            return self._reporter.error(f"{name}: {describe(e)}")

        logger.debug("Popped %s from %s", name, trash_dir)

        try:
            revisions = revisions_of(name, trash_dir)
            if revisions:
                newest = max(
                    revisions, key=lambda rev: classifier.stat_of(trash_dir / rev).atime_ns
                )
                self._rename(trash_dir / newest, trash_dir / name)
        except OSError as e:
            self._reporter.error(f"{name}: cannot promote previous revision: {describe(e)}")

        return True

    def shift(self, path: str | Path, verbose: bool = False) -> bool:
        """Move path into its trashcan as the oldest revision of its name.

        The bare slot is never used, so the current top of the stack keeps
        its place.

        Args:
            path: File about to be overwritten by a restore.
            verbose: Report degraded trashcan resolution.

        Returns:
            True if path was moved into the trashcan.
        """
        trash = self._locator.locate(path, create_if_missing=True, verbose=verbose)
        name = os.path.basename(os.path.abspath(path))

        try:
            revision = next_revision_name(name, trash.path, source=Path(path))
            move(path, trash.path / revision)
        except OSError as e:
            return self._reporter.error(f"{path}: {describe(e)}")

        logger.debug("Shifted %s to %s as %s", path, trash, revision)
        self.age(revision, trash.path)
        return True

    def age(self, revision_name: str, trash_dir: Path) -> bool:
        """Make a revision older than every other revision of its name.

        Sets its access time one second before the oldest other revision's;
        the modification time is kept. A lone revision is left as is.

        Returns:
            True on success, False if the times could not be changed.
        """
        target = trash_dir / revision_name
        try:
            others = [
                rev for rev in revisions_of(base_name_of(revision_name), trash_dir)
                if rev != revision_name
            ]
            if not others:
                return True

            oldest = min(classifier.stat_of(trash_dir / rev).atime_ns for rev in others)
            classifier.set_times(target, oldest - NS_PER_SECOND, classifier.stat_of(target).mtime_ns)
        except OSError as e:
            return self._reporter.error(f"{revision_name}: age: {describe(e)}")

        return True

    def _demote(self, name: str, trash_dir: Path) -> str:
        """Rename the bare entry to a revision name, as the newest revision."""
        newest = max(
            (classifier.stat_of(trash_dir / rev).atime_ns for rev in revisions_of(name, trash_dir)),
            default=0,
        )
        revision = next_revision_name(name, trash_dir)
        target = trash_dir / revision
        self._rename(trash_dir / name, target)

        try:
            mtime_ns = classifier.stat_of(target).mtime_ns
            classifier.set_times(target, max(time.time_ns(), newest + NS_PER_SECOND), mtime_ns)
        except OSError:
            os.rename(target, trash_dir / name)
            raise
        logger.debug("Demoted %s to %s", name, revision)
        return revision

    def _reinstate(self, revision: str, name: str, trash_dir: Path) -> None:
        """Move a demoted revision back into the bare slot after a failed push."""
        try:
            self._rename(trash_dir / revision, trash_dir / name)
        except OSError as e:
            self._reporter.error(f"{name}: cannot reinstate previous version: {describe(e)}")
            return
        logger.debug("Reinstated %s as %s", revision, name)

    @staticmethod
    def _rename(source: Path, destination: Path) -> None:
        if classifier.exists(destination):
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), str(destination))
        os.rename(source, destination)
