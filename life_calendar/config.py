"""
Configuration settings for Life Calendar
Config file loading, theme palettes and output constants
"""
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from loguru import logger

from life_calendar.errors import ConfigParseError

# Config file, resolved against the working directory at load time
CONFIG_FILENAME = "config.json"

# Grid constants
YEARS = 80
WEEKS_PER_YEAR = 52
DAYS_PER_WEEK = 7

# Screen defaults (fallback resolution and the width all scaling is based on)
DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080

DEFAULT_CONFIG = {
    "theme": "dark",
}


def _hex(color: str) -> Tuple[int, ...]:
    """Convert #rrggbb / #rrggbbaa to an RGB(A) tuple"""
    value = color.lstrip("#")
    return tuple(int(value[i:i + 2], 16) for i in range(0, len(value), 2))


# Theme definitions
THEMES = {
    "dark": {
        "name": "Dark",
        "background": _hex("#121110"),
        "past_weeks": _hex("#f5f1e6"),
        "current_week": _hex("#e5c98a"),
        "future_weeks": _hex("#f0d090"),
        "text": _hex("#ffffff"),
        "attribution": _hex("#e5c98a"),
        "grid_markers": _hex("#e5c98a"),
        "labels": _hex("#e5c98a"),
        "credit": _hex("#b08d57"),
    },
    "light": {
        "name": "Light",
        "background": _hex("#fdf7e3"),   # aged parchment
        "past_weeks": _hex("#3b3024"),   # burnt ink
        "current_week": _hex("#c1a97b"),
        "future_weeks": _hex("#c1a97b"),  # faded bronze
        "text": _hex("#5a4636"),
        "attribution": _hex("#857c6d"),
        "grid_markers": _hex("#c9b79f"),
        "labels": _hex("#a89060"),
        "credit": _hex("#4c3a2c"),
    },
}

# Label and credit opacity (0-255)
LABEL_ALPHA = 178
CREDIT_ALPHA = 230

CREDIT_TEXT = "Inspired by Tim Urban's 'Your Life in Weeks' — waitbutwhy.com"

# Wallpaper output settings
WALLPAPER_CONFIG = {
    "output_filename": "life_calendar_wallpaper.png",
    "test_dir": "resolution_tests",
    "fit": "fill",
}

# Most common desktop resolutions, used by the multi-resolution preview
TEST_RESOLUTIONS = [
    (1920, 1080, "Full HD"),
    (1366, 768, "Laptop"),
    (1536, 864, "Mid-range Laptop"),
    (1440, 900, "MacBook"),
    (1280, 720, "HD"),
    (1600, 900, "Mid-tier Laptop"),
    (2560, 1440, "QHD"),
    (1360, 768, "Old Laptop"),
    (1024, 768, "Legacy 4:3"),
    (1680, 1050, "Widescreen"),
]


@dataclass(frozen=True)
class CalendarConfig:
    """Everything the user configures, threaded through each component"""
    birthdate: str
    theme: str
    quotes: Tuple[str, ...]
    attributions: Tuple[str, ...]


def get_theme(theme_name: str) -> Dict:
    """Get theme colors by name"""
    return THEMES.get(theme_name, THEMES["dark"])


def default_config_path() -> Path:
    return Path.cwd() / CONFIG_FILENAME


def default_output_path() -> Path:
    return Path.cwd() / WALLPAPER_CONFIG["output_filename"]


def parse_config(data: Dict) -> CalendarConfig:
    """
    Validate a raw config mapping

    Raises:
        ConfigParseError: if a field is missing or quotes and attributions
            do not line up
    """
    if not isinstance(data, dict):
        raise ConfigParseError("Config must be a JSON object")

    settings = DEFAULT_CONFIG.copy()
    settings.update(data)

    birthdate = settings.get("birthdate")
    if not isinstance(birthdate, str) or not birthdate.strip():
        raise ConfigParseError("Config is missing 'birthdate'")

    quotes = settings.get("quotes")
    attributions = settings.get("attributions")
    if not isinstance(quotes, list) or not quotes:
        raise ConfigParseError("Config needs a non-empty 'quotes' list")
    if not isinstance(attributions, list):
        raise ConfigParseError("Config needs an 'attributions' list")
    if len(quotes) != len(attributions):
        raise ConfigParseError(
            f"'quotes' has {len(quotes)} entries but 'attributions' has {len(attributions)}"
        )

    theme = settings.get("theme")
    if theme not in THEMES:
        logger.warning(f"Unknown theme {theme!r}, using 'dark'")

    return CalendarConfig(
        birthdate=birthdate.strip(),
        theme=str(theme),
        quotes=tuple(str(q) for q in quotes),
        attributions=tuple(str(a) for a in attributions),
    )


def load_config(path: Optional[Union[str, Path]] = None) -> CalendarConfig:
    """Load the calendar config from a JSON file"""
    config_path = Path(path) if path else default_config_path()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigParseError(f"Config file not found: {config_path}") from e
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"Invalid JSON in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigParseError(f"Could not read {config_path}: {e}") from e

    logger.debug(f"Loaded config from {config_path}")
    return parse_config(data)
