"""Colors of the trash CLI.

The bundled data/theme.toml provides every color; a theme.toml in the
configuration directory may override any subset of them. Colors that fail
validation discard the whole override and the defaults apply.
"""

import logging
import tomllib
from importlib import resources
from pathlib import Path
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError
from rich.theme import Theme

from trashctl.core.paths import get_theme_path

logger = logging.getLogger(__name__)


def _hex_color(value: str) -> str:
    color = value.strip()
    if not color.startswith("#"):
        raise ValueError(f"color must start with '#', got {value!r}")
    digits = color[1:]
    if len(digits) not in (3, 6) or any(c not in "0123456789abcdefABCDEF" for c in digits):
        raise ValueError(f"invalid hex color {value!r} (expected #RGB or #RRGGBB)")
    return color


HexColor = Annotated[str, AfterValidator(_hex_color)]


class ThemeColors(BaseModel):
    """Hex colors used for trash output."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    # Verbose log levels
    muted: HexColor = "#b2bec3"
    info: HexColor = "#0ec1c8"
    warning: HexColor = "#f5b332"
    # Diagnostics and log errors
    error: HexColor = "#f53263"
    # "/path/to/trashcan:" listing headings
    trashcan: HexColor = "#3b82f6"
    # Confirmation questions
    prompt: HexColor = "#faf870"


def get_bundled_theme_path() -> Path:
    """Path of the theme shipped inside the package."""
    return Path(str(resources.files("trashctl.data").joinpath("theme.toml")))


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the [colors] table of a theme file.

    Non-string values are dropped. Returns None if the file is missing,
    unreadable or not valid TOML.
    """
    try:
        with open(path, "rb") as f:
            table: Any = tomllib.load(f).get("colors", {})
    except FileNotFoundError:
        return None
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    if not isinstance(table, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return None
    return {str(k): v for k, v in table.items() if isinstance(v, str)}


def load_theme() -> ThemeColors:
    """Merge the user theme over the bundled one."""
    colors = _load_toml_colors(get_bundled_theme_path())
    if colors is None:
        logger.error("Bundled theme missing, using built-in colors")
        colors = {}

    user_path = get_theme_path()
    overrides = _load_toml_colors(user_path)
    if overrides:
        logger.debug("Theme overrides from %s: %s", user_path, ", ".join(sorted(overrides)))
        colors.update(overrides)

    try:
        return ThemeColors(**colors)
    except ValidationError as e:
        logger.warning("Invalid theme in %s, using defaults: %s", user_path, e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich styles for colors (the loaded theme by default)."""
    c = colors or load_theme()
    return Theme(
        {
            "muted": c.muted,
            "info": c.info,
            "warning": c.warning,
            "error": f"bold {c.error}",
            "trashcan": f"bold {c.trashcan}",
            "prompt": c.prompt,
            # Level names rendered by RichHandler
            "logging.level.debug": c.muted,
            "logging.level.info": c.info,
            "logging.level.warning": c.warning,
            "logging.level.error": f"bold {c.error}",
        }
    )


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Rich theme of the process, loaded on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
