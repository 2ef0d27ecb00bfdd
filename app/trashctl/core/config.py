"""trashctl configuration and settings.

This module provides the configuration model and I/O functions for the
trashcan engine: probe deadlines, secure-overwrite passes, the home
trashcan location and the mount points that never get a shared trashcan.

Configuration is stored in ~/.config/trashctl/config.toml
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from trashctl.core.errors import ConfigError, ConfigParseError
from trashctl.core.paths import get_config_path
from trashctl.filesystem.protected import PROTECTED_MOUNT_POINTS

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 10.0
DEFAULT_OVERWRITE_PASSES = 3


class TrashConfig(BaseModel):
    """Configuration for the trashcan engine.

    Attributes:
        probe_timeout: Deadline in seconds for probing a device's trashcan.
        overwrite_passes: Number of random overwrite passes before purging.
        home_trash: Override for the home trashcan location.
        protected_mounts: Mount points on which no shared trashcan is created.
        escalate: Whether sudo may be used to create shared trash roots.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    probe_timeout: Annotated[
        float,
        Field(ge=1, le=300, description="Probe deadline in seconds (1-300)"),
    ] = DEFAULT_PROBE_TIMEOUT
    overwrite_passes: Annotated[
        int,
        Field(ge=1, le=35, description="Secure overwrite passes (1-35)"),
    ] = DEFAULT_OVERWRITE_PASSES
    home_trash: Annotated[
        Path | None,
        Field(description="Home trashcan override (None = platform default)"),
    ] = None
    protected_mounts: Annotated[
        tuple[str, ...],
        Field(description="Mount points never given a shared trashcan"),
    ] = PROTECTED_MOUNT_POINTS
    escalate: Annotated[
        bool,
        Field(description="Allow sudo to create shared trash roots"),
    ] = True


def load_config(path: Path | None = None) -> TrashConfig:
    """Load configuration from a TOML file.

    A missing file is not an error: defaults are returned.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated TrashConfig object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config at %s, using defaults", config_path)
        return TrashConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return TrashConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


def load_or_create_config(path: Path | None = None) -> TrashConfig:
    """Load configuration, writing a default config file on first use.

    Failure to write the defaults is logged and otherwise ignored.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated TrashConfig object.

    Raises:
        ConfigError: If an existing file cannot be loaded.
    """
    config_path = path or get_config_path()
    if config_path.exists():
        return load_config(config_path)

    config = TrashConfig()
    try:
        save_config(config, config_path)
        logger.info("Created default configuration at %s", config_path)
    except ConfigError as e:
        logger.warning("Could not save default config: %s", e)
    return config


def save_config(config: TrashConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The TrashConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def _config_to_dict(config: TrashConfig) -> dict[str, object]:
    """Convert TrashConfig to a dictionary for TOML serialization.

    TOML has no null, so an unset home_trash is left out.
    """
    return config.model_dump(mode="json", exclude_none=True)
