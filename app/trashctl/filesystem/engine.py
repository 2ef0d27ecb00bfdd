"""Trashcan engine: transfer, restore, empty and list.

The Trashcan composes trashcan resolution, revision stacks and secure
erasure into the four user-facing operations. Every operation processes
files independently: a failure is reported and the file skipped, the
rest of the batch carries on. Each operation returns an OperationResult
with the number of files acted upon and the diagnostics reported.
"""

from __future__ import annotations

import glob
import logging
import os
import re
from collections.abc import Callable
from pathlib import Path

from trashctl.core.config import TrashConfig
from trashctl.core.paths import TrashLayout, get_trash_layout
from trashctl.core.ui import Reporter, TrashUI
from trashctl.filesystem import classifier
from trashctl.filesystem.eraser import SecureEraser
from trashctl.filesystem.locator import Escalator, TrashLocator, prepare_home_trash
from trashctl.filesystem.models import OperationResult, TrashDirectory, TrashRequest
from trashctl.filesystem.naming import is_revision_name
from trashctl.filesystem.protected import is_trash_path
from trashctl.filesystem.revisions import RevisionStack, describe
from trashctl.utils.shell import list_entries

logger = logging.getLogger(__name__)

Lister = Callable[[Path, list[str]], list[str]]

EVERYTHING = "*"

_MAGIC_RE = re.compile(r"[*?[]")


def has_magic(pattern: str) -> bool:
    """Check if a pattern contains glob wildcards."""
    return _MAGIC_RE.search(pattern) is not None


class Trashcan:
    """The trashcan engine.

    Constructing a Trashcan creates the home trashcan if needed; an
    unusable home trashcan is fatal (HomeTrashError).

    Example:
        >>> trashcan = Trashcan(ConsoleUI())
        >>> result = trashcan.transfer(["*.log"], TrashRequest())
        >>> result.count, result.errors
    """

    def __init__(
        self,
        ui: TrashUI,
        *,
        config: TrashConfig | None = None,
        layout: TrashLayout | None = None,
        escalator: Escalator | None = None,
        lister: Lister | None = None,
        eraser: SecureEraser | None = None,
        home_trash: Path | None = None,
        home: Path | None = None,
        uid: int | None = None,
    ) -> None:
        """Initialize the Trashcan.

        Args:
            ui: Confirmation and reporting backend.
            config: Engine configuration. Defaults to TrashConfig().
            layout: Trashcan layout. Defaults to the running platform's.
            escalator: Privileged helper for creating shared trash roots.
            lister: Renders trashcan entries. Defaults to ls(1).
            eraser: Secure eraser. Defaults to one using config passes.
            home_trash: Home trashcan override (takes precedence over config).
            home: Home directory. Defaults to Path.home().
            uid: Owner of per-user trashcans. Defaults to the effective uid.

        Raises:
            HomeTrashError: If the home trashcan is unusable.
        """
        self._config = config or TrashConfig()
        layout = layout or get_trash_layout()
        trash_path = home_trash or self._config.home_trash or layout.home_trash

        self._reporter = Reporter(ui)
        self._locator = TrashLocator(
            prepare_home_trash(Path(trash_path).expanduser()),
            reporter=self._reporter,
            config=self._config,
            layout=layout,
            escalator=escalator,
            uid=uid,
            home=home,
        )
        self._stack = RevisionStack(self._locator, self._reporter)
        self._eraser = eraser or SecureEraser(self._config.overwrite_passes)
        self._lister = lister or list_entries

    @property
    def home_trash(self) -> TrashDirectory:
        """The home trashcan."""
        return self._locator.home_trash

    # =========================================================================
    # Operations
    # =========================================================================

    def transfer(self, patterns: list[str], request: TrashRequest) -> OperationResult:
        """Move matching files to their trashcans, or delete them if permanent.

        Patterns are expanded anywhere in the filesystem. Unmatched patterns
        are reported as "No such file or directory" unless forced.
        """
        result = self._reporter.begin()
        trash_dirs = [trash.path for trash in self._locator.trash_directories(request.verbose)]

        for path in self._expand(patterns, request):
            if not self._preflight(path, request, trash_dirs):
                continue

            if request.permanent:
                done = self._unlink(path, request)
            else:
                done = self._confirmed("Move to trash", path, request) and self._stack.push(
                    path, request.verbose
                )

            if done:
                result.count += 1

        return result

    def restore(self, patterns: list[str], request: TrashRequest) -> OperationResult:
        """Restore matching trashcan entries into the current directory.

        Without patterns, every entry is restored. A file already present in
        the current directory is first shifted into the trashcan as the
        oldest revision of its name; if that is refused, the entry is skipped.
        """
        result = self._reporter.begin()
        destination = Path.cwd()
        matched: set[str] = set()

        for trash in self._trash_directories(request):
            for name in self._expand_toplevel(trash.path, patterns, matched, skip_revisions=True):
                target = destination / name
                if classifier.exists(target) and not self._displace(target, request):
                    continue
                if self._stack.pop(name, trash.path, destination):
                    result.count += 1

        self._report_unmatched(patterns, matched, request)
        return result

    def empty(self, patterns: list[str], request: TrashRequest) -> OperationResult:
        """Permanently delete matching trashcan entries (all without patterns)."""
        result = self._reporter.begin()
        matched: set[str] = set()

        for trash in self._trash_directories(request):
            for name in self._expand_toplevel(trash.path, patterns, matched):
                if self._unlink(str(trash.path / name), request):
                    result.count += 1

        self._report_unmatched(patterns, matched, request)
        return result

    # =========================================================================
    # Helpers
    # =========================================================================

    def _trash_directories(self, request: TrashRequest) -> list[TrashDirectory]:
        return [
            trash
            for trash in self._locator.trash_directories(request.verbose)
            if os.path.isdir(trash.path)
        ]

    def _expand(self, patterns: list[str], request: TrashRequest) -> list[str]:
        """Expand patterns anywhere in the filesystem.

        A pattern naming an existing file literally (e.g. "a[1]") matches
        that file even if it also works as a wildcard.
        """
        expanded: list[str] = []

        for pattern in patterns:
            matches = glob.glob(pattern)
            if classifier.exists(pattern) and pattern not in matches:
                matches.insert(0, pattern)
            matches = [m for m in matches if os.path.basename(m.rstrip("/")) not in (".", "..")]

            if matches:
                expanded.extend(matches)
            elif not request.force:
                self._reporter.error(f"{pattern}: No such file or directory")

        return list(dict.fromkeys(expanded))

    def _expand_toplevel(
        self,
        trash_dir: Path,
        patterns: list[str],
        matched: set[str],
        skip_revisions: bool = False,
    ) -> list[str]:
        """Expand patterns to entry names at the top level of trash_dir.

        Without patterns everything matches, hidden entries included.
        Patterns that matched something are added to matched.

        Args:
            trash_dir: Trashcan to search.
            patterns: Name patterns.
            matched: Collects the patterns that matched at least one entry.
            skip_revisions: Leave revision entries out of wildcard matches;
                they remain reachable by their exact name.

        Returns:
            Distinct entry names.
        """
        names: dict[str, None] = {}

        for pattern in patterns or [EVERYTHING]:
            wildcard = has_magic(pattern)
            matches = glob.glob(pattern, root_dir=trash_dir, include_hidden=not patterns)
            if "/" not in pattern and pattern not in matches and classifier.exists(trash_dir / pattern):
                matches.append(pattern)

            for match in matches:
                name = os.path.basename(match.rstrip("/"))
                if name in (".", "..") or not classifier.exists(trash_dir / name):
                    continue
                if skip_revisions and wildcard and is_revision_name(name):
                    continue
                matched.add(pattern)
                names[name] = None

        return list(names)

    def _report_unmatched(
        self,
        patterns: list[str],
        matched: set[str],
        request: TrashRequest,
    ) -> None:
        """Report explicit names that matched nothing in any trashcan.

        Wildcard patterns matching nothing are not reported.
        """
        if request.force:
            return
        for pattern in patterns:
            if pattern not in matched and not has_magic(pattern):
                self._reporter.error(f"{pattern}: Not found in trashcan")

    def _preflight(self, path: str, request: TrashRequest, trash_dirs: list[Path]) -> bool:
        """Check that path may be transferred or deleted."""
        absolute = os.path.abspath(path)
        parent = os.path.dirname(absolute)

        if not os.path.basename(absolute):
            return self._reporter.error(f"{path}: Invalid argument")
        if not classifier.is_writable(parent):
            return self._reporter.error(f"{parent}: Permission denied")
        if (
            not request.force
            and not classifier.is_symlink(path)
            and not classifier.is_writable(path)
        ):
            return self._reporter.error(f"{path}: Use -f to override permissions")
        if is_trash_path(path, trash_dirs):
            return self._reporter.error(f"{path}: Refusing to transfer trashcan")
        if classifier.is_directory(path) and not request.recursive:
            if not classifier.is_empty_directory(path):
                return self._reporter.error(f"{path}: Directory not empty")
            if not request.directory:
                return self._reporter.error(f"{path}: Use -r or -d for directories")
        return True

    def _confirmed(self, action: str, subject: str, request: TrashRequest) -> bool:
        return request.force or not request.interactive or self._reporter.confirm(action, subject)

    def _unlink(self, path: str, request: TrashRequest) -> bool:
        """Permanently delete path, secure-erasing it first if requested."""
        if not self._confirmed("Permanently delete", path, request):
            return False

        if request.overwrite and not self._eraser.secure_overwrite(path):
            self._reporter.error(f"{path}: Secure overwrite incomplete")

        try:
            self._eraser.remove(path)
        except OSError as e:
            return self._reporter.error(f"{path}: {describe(e)}")

        logger.debug("Deleted %s", path)
        return True

    def _displace(self, target: Path, request: TrashRequest) -> bool:
        """Shift an existing file out of the way of a restore."""
        if not (request.force or self._reporter.confirm("Overwrite existing", target.name)):
            return self._reporter.error(f"{target.name}: Use -f to overwrite")
        if not classifier.is_writable(target.parent):
            return self._reporter.error(f"{target.parent}: Permission denied")
        return self._stack.shift(target, request.verbose)

    # Defined last: the name shadows the builtin inside the class body.
    def list(self, patterns: list[str], request: TrashRequest) -> OperationResult:
        """List matching trashcan entries (all without patterns).

        Entries are rendered per trashcan by the lister. Reports
        "Trashcan is empty." when nothing matched anywhere.
        """
        result = self._reporter.begin()
        matched: set[str] = set()

        for trash in self._trash_directories(request):
            names = self._expand_toplevel(trash.path, patterns, matched)
            if not names:
                continue
            self._reporter.respond(f"{trash.path}:")
            self._reporter.respond(*self._lister(trash.path, names))
            result.count += len(names)

        if result.count == 0:
            self._reporter.respond("Trashcan is empty.")

        self._report_unmatched(patterns, matched, request)
        return result
