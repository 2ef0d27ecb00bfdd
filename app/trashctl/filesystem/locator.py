"""Trashcan resolution across mounted devices.

Decides which trashcan receives a given file. Files on the home device go
to the home trashcan; files on other devices go to a per-user trashcan at
the top of their device when one exists (or can be created safely), so
that transfers stay cheap renames instead of cross-device copies.

Resolution never fails: whenever a device trashcan is missing, unsafe,
unreachable or too slow to answer, the home trashcan is used.
"""

import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Protocol, TypeVar

import psutil

from trashctl.core.config import TrashConfig
from trashctl.core.errors import HomeTrashError, UnsafeTrashError
from trashctl.core.paths import TrashLayout, get_trash_layout
from trashctl.core.ui import Reporter
from trashctl.filesystem import classifier
from trashctl.filesystem.models import TrashDirectory
from trashctl.filesystem.protected import is_protected_mount

logger = logging.getLogger(__name__)

T = TypeVar("T")

USER_TRASH_MODE = 0o700
# Sticky, and writable/searchable (but not listable) by everyone
SHARED_ROOT_MODE = 0o1333


class Escalator(Protocol):
    """Privileged operations used to create shared trash roots."""

    def make_directory(self, path: Path, mode: int) -> bool: ...

    def change_mode(self, path: Path, mode: int) -> bool: ...


def prepare_home_trash(path: Path) -> Path:
    """Create the home trashcan if needed and validate its safety.

    Args:
        path: Home trashcan directory.

    Returns:
        The home trashcan path.

    Raises:
        HomeTrashError: If the directory cannot be created or is not writable.
        UnsafeTrashError: If the directory is world-writable.
    """
    if not os.path.isdir(path):
        try:
            path.mkdir(mode=USER_TRASH_MODE, parents=True, exist_ok=True)
            path.chmod(USER_TRASH_MODE)
        except PermissionError as e:
            msg = f"Cannot create home trashcan {path}: Permission denied"
            raise HomeTrashError(msg) from e
        except OSError as e:
            msg = f"Cannot create home trashcan {path}: {e}"
            raise HomeTrashError(msg) from e

    if not classifier.is_writable(path):
        raise HomeTrashError(f"{path}: Permission denied")
    if classifier.is_world_writable(path):
        raise UnsafeTrashError(f"{path}: Unsafe access permissions")

    return path


def call_with_deadline(func: Callable[[], T], timeout: float) -> T:
    """Run func, giving up after timeout seconds.

    The call runs on a daemon thread which is abandoned on expiry, so a
    hung filesystem call cannot keep the process alive.

    Raises:
        TimeoutError: If func did not finish in time.
        Exception: Whatever func raised.
    """
    outcome: dict[str, object] = {}

    def target() -> None:
        try:
            outcome["value"] = func()
        except Exception as e:  # re-raised in the calling thread
            outcome["error"] = e

    worker = threading.Thread(target=target, name="trashctl-probe", daemon=True)
    worker.start()
    worker.join(timeout)

    if worker.is_alive():
        raise TimeoutError(f"no answer within {timeout:g}s")
    if "error" in outcome:
        raise outcome["error"]  # type: ignore[misc]
    return outcome["value"]  # type: ignore[return-value]


class TrashLocator:
    """Resolves the trashcan responsible for a path.

    Attributes:
        home_trash: The guaranteed home trashcan.
    """

    def __init__(
        self,
        home_trash: Path,
        *,
        reporter: Reporter,
        config: TrashConfig | None = None,
        layout: TrashLayout | None = None,
        escalator: Escalator | None = None,
        uid: int | None = None,
        home: Path | None = None,
    ) -> None:
        """Initialize the TrashLocator.

        Args:
            home_trash: Home trashcan directory (already prepared).
            reporter: Diagnostics sink.
            config: Engine configuration. Defaults to TrashConfig().
            layout: Trashcan layout. Defaults to the running platform's.
            escalator: Privileged helper for creating shared trash roots.
            uid: User id owning per-user trashcans. Defaults to the effective uid.
            home: Home directory. Defaults to Path.home().
        """
        self._reporter = reporter
        self._config = config or TrashConfig()
        self._layout = layout or get_trash_layout()
        self._escalator = escalator
        self._uid = os.geteuid() if uid is None else uid
        self._home = home or Path.home()
        self._home_mount = self._mount_point(self._home) or classifier.ROOT
        self.home_trash = TrashDirectory(
            path=home_trash,
            mount_point=self._mount_point(home_trash) or classifier.ROOT,
            is_home=True,
        )

    def locate(
        self,
        path: str | Path,
        create_if_missing: bool = False,
        verbose: bool = False,
    ) -> TrashDirectory:
        """Return the trashcan that should receive path.

        Args:
            path: File about to be transferred.
            create_if_missing: Allow privileged creation of a missing shared
                trash root on the file's device.
            verbose: Report degraded resolution through the reporter.

        Returns:
            A usable TrashDirectory; the home trashcan in the worst case.
        """
        mount_point = self._mount_point(path, verbose)
        if mount_point is None:
            return self.home_trash

        home = classifier.canonical_path(self._home)
        if classifier.is_under_home(path, self._home) and home.is_relative_to(mount_point):
            return self.home_trash

        return self._probe(
            mount_point,
            create_user=True,
            create_root=create_if_missing,
            verbose=verbose,
        )

    def device_map(self, verbose: bool = False) -> dict[Path, TrashDirectory]:
        """Map every current mount point to its trashcan.

        Every mount point is probed, the home device and protected ones
        included, so that each trashcan locate() can return is found again.
        Nothing is created. The map is computed fresh on every call since
        devices come and go between operations.

        Returns:
            Mapping of mount point to TrashDirectory, home device first.
            Mount points without a trashcan of their own map to the home
            trashcan.
        """
        return {
            mount_point: self._probe(
                mount_point,
                create_user=False,
                create_root=False,
                verbose=verbose,
            )
            for mount_point in dict.fromkeys([self._home_mount, *self.mount_points()])
        }

    def trash_directories(self, verbose: bool = False) -> list[TrashDirectory]:
        """Return the distinct trashcans of all current mount points, home first."""
        return list(dict.fromkeys([self.home_trash, *self.device_map(verbose).values()]))

    def mount_points(self) -> list[Path]:
        """Return the mount points of all mounted filesystems.

        Falls back to the home device alone if the mount table is unreadable
        or does not answer in time.
        """
        try:
            partitions = self._within_deadline(lambda: psutil.disk_partitions(all=True))
        except (OSError, RuntimeError) as e:
            logger.warning("Cannot read mount table: %s", e)
            return [self._home_mount]

        return list(dict.fromkeys(Path(p.mountpoint) for p in partitions))

    def _within_deadline(self, func: Callable[[], T]) -> T:
        return call_with_deadline(func, self._config.probe_timeout)

    def _degraded(self, message: str, verbose: bool) -> None:
        logger.warning(message)
        if verbose:
            self._reporter.respond(message)

    def _mount_point(self, path: str | Path, verbose: bool = False) -> Path | None:
        """Return the mount point of path, None if the lookup timed out."""
        try:
            return self._within_deadline(lambda: classifier.mount_point_of(path, verbose=verbose))
        except TimeoutError as e:
            self._degraded(f"{path}: mount point lookup timed out ({e})", verbose)
            return None

    def _probe(
        self,
        mount_point: Path,
        *,
        create_user: bool,
        create_root: bool,
        verbose: bool,
    ) -> TrashDirectory:
        try:
            found = self._within_deadline(lambda: self._find_user_trash(mount_point, create_user))
            if (
                found is None
                and create_root
                and self._within_deadline(lambda: self._may_escalate(mount_point))
            ):
                # The escalator may wait for a password: no deadline
                root = self._layout.trash_root(mount_point)
                logger.debug("Creating shared trash root %s", root)
                if self._create_shared_root(root):
                    found = self._within_deadline(
                        lambda: self._find_user_trash(mount_point, create_user)
                    )
        except TimeoutError as e:
            self._degraded(
                f"{mount_point}: trashcan probe timed out ({e}), using {self.home_trash}", verbose
            )
            return self.home_trash
        except OSError as e:
            self._degraded(
                f"{mount_point}: cannot access trashcan ({e}), using {self.home_trash}", verbose
            )
            return self.home_trash

        if found is None:
            logger.debug("No usable trashcan on %s, using %s", mount_point, self.home_trash)
            return self.home_trash
        return found

    def _find_user_trash(self, mount_point: Path, create: bool) -> TrashDirectory | None:
        user_trash = self._layout.user_trash(mount_point, self._uid)
        if self._is_usable(user_trash):
            return TrashDirectory(path=user_trash, mount_point=mount_point)

        root = self._layout.trash_root(mount_point)
        if not create or not self._is_shared_root(root):
            return None

        try:
            for directory in self._user_dirs(mount_point):
                if not classifier.exists(directory):
                    directory.mkdir(mode=USER_TRASH_MODE)
                    directory.chmod(USER_TRASH_MODE)
        except OSError as e:
            logger.debug("Cannot create %s: %s", user_trash, e)
            return None

        if self._is_usable(user_trash):
            return TrashDirectory(path=user_trash, mount_point=mount_point)
        return None

    def _user_dirs(self, mount_point: Path) -> list[Path]:
        user_dir = self._layout.trash_root(mount_point) / str(self._uid)
        user_trash = self._layout.user_trash(mount_point, self._uid)
        return [user_dir] if user_dir == user_trash else [user_dir, user_trash]

    def _is_usable(self, trash_dir: Path) -> bool:
        """Check all access predicates of a per-user trashcan."""
        for directory in self._user_dirs_for(trash_dir):
            if not classifier.is_owner_private(directory, self._uid):
                return False
        return (
            not classifier.is_world_writable(trash_dir)
            and classifier.is_readable(trash_dir)
            and classifier.is_writable(trash_dir)
            and classifier.is_executable(trash_dir)
        )

    def _user_dirs_for(self, trash_dir: Path) -> list[Path]:
        # The per-user directory and, in nested layouts, the trashcan below it
        return [trash_dir.parent, trash_dir] if self._layout.nested else [trash_dir]

    @staticmethod
    def _is_shared_root(root: Path) -> bool:
        return (
            classifier.is_directory(root)
            and classifier.is_writable(root)
            and classifier.is_executable(root)
            and classifier.is_sticky(root)
        )

    def _may_escalate(self, mount_point: Path) -> bool:
        return (
            self._config.escalate
            and self._escalator is not None
            and not is_protected_mount(mount_point, self._config.protected_mounts)
            and not classifier.exists(self._layout.trash_root(mount_point))
        )

    def _create_shared_root(self, root: Path) -> bool:
        if self._escalator is None or not self._escalator.make_directory(root, SHARED_ROOT_MODE):
            return False
        return self._escalator.change_mode(root, SHARED_ROOT_MODE)
