"""Exception hierarchy for trashctl.

Only conditions that must stop the program are raised as exceptions.
Per-file failures during an operation are reported as diagnostics in an
OperationResult instead.
"""


class TrashError(Exception):
    """Base exception for trashctl errors."""


class HomeTrashError(TrashError):
    """Raised when the home trashcan cannot be created or written."""


class UnsafeTrashError(HomeTrashError):
    """Raised when the home trashcan has unsafe (world-writable) permissions."""


class ConfigError(TrashError):
    """Raised when the configuration file content is invalid."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file is not valid TOML."""
