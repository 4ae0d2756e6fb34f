"""
Wallpaper Setter - hands the finished image to the desktop
One strategy per platform: Windows API, macOS System Events, GNOME / feh on Linux.
"""
import ctypes
import os
import platform
import subprocess
from pathlib import Path
from typing import Union

from loguru import logger

from life_calendar.errors import WallpaperApplyError, WallpaperNotFoundError


# Windows API constants
SPI_SETDESKWALLPAPER = 0x0014
SPIF_UPDATEINIFILE = 0x01
SPIF_SENDCHANGE = 0x02

# Fit mode -> (WallpaperStyle, TileWallpaper) registry values
WINDOWS_FIT_STYLES = {
    "fill": ("10", "0"),
    "fit": ("6", "0"),
    "stretch": ("2", "0"),
    "center": ("0", "0"),
    "tile": ("0", "1"),
}

# Fit mode -> GNOME picture-options
GNOME_FIT_OPTIONS = {
    "fill": "zoom",
    "fit": "scaled",
    "stretch": "stretched",
    "center": "centered",
    "tile": "wallpaper",
}

# Fit mode -> feh --bg-* flag
FEH_FIT_FLAGS = {
    "fill": "--bg-fill",
    "fit": "--bg-max",
    "stretch": "--bg-scale",
    "center": "--bg-center",
    "tile": "--bg-tile",
}


def _set_windows(abs_path: str, fit: str) -> None:
    import winreg

    style, tile = WINDOWS_FIT_STYLES.get(fit, WINDOWS_FIT_STYLES["fill"])
    key = winreg.OpenKey(
        winreg.HKEY_CURRENT_USER,
        r"Control Panel\Desktop",
        0,
        winreg.KEY_SET_VALUE
    )
    try:
        winreg.SetValueEx(key, "WallpaperStyle", 0, winreg.REG_SZ, style)
        winreg.SetValueEx(key, "TileWallpaper", 0, winreg.REG_SZ, tile)
    finally:
        winreg.CloseKey(key)

    result = ctypes.windll.user32.SystemParametersInfoW(
        SPI_SETDESKWALLPAPER,
        0,
        abs_path,
        SPIF_UPDATEINIFILE | SPIF_SENDCHANGE
    )
    if not result:
        raise WallpaperApplyError(f"SystemParametersInfoW rejected {abs_path}")


def _set_macos(abs_path: str, fit: str) -> None:
    # System Events always scales to fill the screen
    quoted = abs_path.replace("\\", "\\\\").replace('"', '\\"')
    script = f'''
    tell application "System Events"
        tell every desktop
            set picture to "{quoted}"
        end tell
    end tell
    '''
    subprocess.run(["osascript", "-e", script], check=True, capture_output=True, text=True)


def _set_linux(abs_path: str, fit: str) -> None:
    desktop = (os.environ.get("XDG_CURRENT_DESKTOP", "") + os.environ.get("DESKTOP_SESSION", "")).lower()

    if "gnome" in desktop or "ubuntu" in desktop:
        uri = Path(abs_path).as_uri()
        schema = "org.gnome.desktop.background"
        for key in ("picture-uri", "picture-uri-dark"):
            subprocess.run(["gsettings", "set", schema, key, uri], check=True)
        subprocess.run(
            ["gsettings", "set", schema, "picture-options", GNOME_FIT_OPTIONS.get(fit, "zoom")],
            check=True
        )
    else:
        subprocess.run(["feh", FEH_FIT_FLAGS.get(fit, "--bg-fill"), abs_path], check=True)


_STRATEGIES = {
    "Windows": _set_windows,
    "Darwin": _set_macos,
    "Linux": _set_linux,
}


def set_wallpaper(image_path: Union[str, Path], fit: str = "fill") -> bool:
    """
    Set the desktop wallpaper

    Args:
        image_path: Path to the image file
        fit: How the image covers the screen (fill, fit, stretch, center, tile)

    Returns:
        True once the platform accepted the image

    Raises:
        WallpaperNotFoundError: if the image does not exist
        WallpaperApplyError: if the platform is unsupported or refuses the image
    """
    # Ensure absolute path
    abs_path = str(Path(image_path).absolute())

    # Verify file exists
    if not os.path.exists(abs_path):
        raise WallpaperNotFoundError(f"Wallpaper image not found at: {abs_path}")

    system = platform.system()
    strategy = _STRATEGIES.get(system)
    if strategy is None:
        raise WallpaperApplyError(f"Setting the wallpaper is not supported on {system}")

    logger.info(f"Setting wallpaper from: {abs_path} ({fit})")
    strategy(abs_path, fit)
    logger.info("Wallpaper set successfully")
    return True
