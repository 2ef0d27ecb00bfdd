"""Shell execution utilities.

Provides safe subprocess execution with proper error handling, plus the
two external collaborators of the trashcan engine that are backed by
commands: the directory lister (ls) and privilege escalation (sudo).
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


def run_command(
    args: list[str],
    *,
    check: bool = False,
    timeout: float | None = 60.0,
    cwd: str | None = None,
    merge_stderr: bool = False,
) -> CommandResult:
    """Execute a shell command and return the result.

    Args:
        args: Command and arguments to execute.
        check: If True, raise CalledProcessError on non-zero exit.
        timeout: Maximum time in seconds to wait for command.
        cwd: Working directory for the command. If None, uses current directory.
        merge_stderr: If True, interleave stderr into stdout (stderr is then empty).

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.CalledProcessError: If check=True and command fails.
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    result = subprocess.run(
        args,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
        text=True,
        check=check,
        timeout=timeout,
        cwd=cwd,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr or "",
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


# =============================================================================
# Directory listing
# =============================================================================

# Prefix that keeps names starting with "-" from being read as ls options
NAME_PREFIX = "./"


def _ls_path() -> str:
    return shutil.which("ls") or "/bin/ls"


def list_entries(directory: Path, names: list[str]) -> list[str]:
    """List names inside directory in long format without dereferencing.

    Runs ``ls -ald`` in directory. Each name is qualified with "./" so that
    a name such as "-rf" reaches ls as a file operand; the prefix is
    stripped again from the output.

    Args:
        directory: Directory holding the entries.
        names: Entry names (basenames) to list.

    Returns:
        Output lines of ls (stdout and stderr combined).
    """
    if not names:
        return []

    args = [_ls_path(), "-ald", *(NAME_PREFIX + name for name in names)]
    try:
        result = run_command(args, cwd=str(directory), timeout=60.0, merge_stderr=True)
    except (FileNotFoundError, OSError, subprocess.SubprocessError) as e:
        logger.warning("Cannot list %s: %s", directory, e)
        return [f"ls: {e}"]

    return [line.replace(f" {NAME_PREFIX}", " ", 1) for line in result.stdout.splitlines()]


# =============================================================================
# Privilege escalation
# =============================================================================


class SudoEscalator:
    """Performs privileged directory operations through sudo.

    Output of sudo and the commands it runs is captured so that only the
    password prompt (written to the terminal by sudo) reaches the user.
    """

    def __init__(self, timeout: float = 120.0) -> None:
        self._timeout = timeout

    def is_available(self) -> bool:
        """Check if sudo is installed."""
        return command_exists("sudo")

    def make_directory(self, path: Path, mode: int) -> bool:
        """Create a directory as root with the given mode."""
        return self._run(["mkdir", "-m", f"{mode:o}", str(path)])

    def change_mode(self, path: Path, mode: int) -> bool:
        """Change the mode of a path as root."""
        return self._run(["chmod", f"{mode:o}", str(path)])

    def _run(self, args: list[str]) -> bool:
        if not self.is_available():
            logger.debug("sudo not available, cannot run %s", args)
            return False

        try:
            result = run_command(["sudo", *args], timeout=self._timeout)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("sudo %s failed: %s", " ".join(args), e)
            return False

        if not result.success:
            logger.warning("sudo %s failed: %s", " ".join(args), result.stderr.strip())
        return result.success
