"""
Screen resolution detection with a 1920x1080 fallback
"""
import ctypes
import json
import platform
import re
import subprocess
from typing import Optional

from loguru import logger

from life_calendar.config import DEFAULT_HEIGHT, DEFAULT_WIDTH
from life_calendar.errors import ResolutionDetectionFailure
from life_calendar.layout import ScreenDimensions

# Windows API constants
SM_CXSCREEN = 0
SM_CYSCREEN = 1

DEFAULT_DIMENSIONS = ScreenDimensions(DEFAULT_WIDTH, DEFAULT_HEIGHT)

_RESOLUTION_RE = re.compile(r"(\d+)\s*[xX×]\s*(\d+)")


def parse_resolution(text: str) -> ScreenDimensions:
    """Parse 'WIDTHxHEIGHT' (e.g. 2560x1440)"""
    match = _RESOLUTION_RE.fullmatch(text.strip()) if text else None
    if not match:
        raise ResolutionDetectionFailure(f"Invalid resolution {text!r}, expected WIDTHxHEIGHT")

    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        raise ResolutionDetectionFailure(f"Resolution must be positive, got {text!r}")
    return ScreenDimensions(width, height)


def _windows_resolution() -> ScreenDimensions:
    user32 = ctypes.windll.user32
    user32.SetProcessDPIAware()
    return ScreenDimensions(user32.GetSystemMetrics(SM_CXSCREEN),
                            user32.GetSystemMetrics(SM_CYSCREEN))


def _macos_resolution() -> ScreenDimensions:
    result = subprocess.run(
        ["system_profiler", "SPDisplaysDataType", "-json"],
        capture_output=True, text=True, check=True
    )
    data = json.loads(result.stdout)
    for gpu in data.get("SPDisplaysDataType", []):
        for display in gpu.get("spdisplays_ndrvs", []):
            # Format: "3024 x 1964" or "2560 x 1440 Retina"
            for key in ("_spdisplays_pixels", "_spdisplays_resolution"):
                match = _RESOLUTION_RE.search(display.get(key, ""))
                if match:
                    return ScreenDimensions(int(match.group(1)), int(match.group(2)))
    raise ResolutionDetectionFailure("system_profiler reported no displays")


def _linux_resolution() -> ScreenDimensions:
    result = subprocess.run(["xrandr", "--current"], capture_output=True, text=True, check=True)
    # "Screen 0: minimum 320 x 200, current 1920 x 1080, maximum ..."
    match = re.search(r"current\s+(\d+)\s*x\s*(\d+)", result.stdout)
    if not match:
        raise ResolutionDetectionFailure("xrandr did not report a current resolution")
    return ScreenDimensions(int(match.group(1)), int(match.group(2)))


_DETECTORS = {
    "Windows": _windows_resolution,
    "Darwin": _macos_resolution,
    "Linux": _linux_resolution,
}


def query_screen_resolution() -> ScreenDimensions:
    """
    Ask the operating system for the primary screen size

    Raises:
        ResolutionDetectionFailure: on any failure
    """
    system = platform.system()
    detector = _DETECTORS.get(system)
    if detector is None:
        raise ResolutionDetectionFailure(f"No resolution detection for {system}")

    try:
        dimensions = detector()
    except ResolutionDetectionFailure:
        raise
    except (OSError, AttributeError, ValueError, subprocess.SubprocessError) as e:
        raise ResolutionDetectionFailure(f"Resolution detection failed on {system}: {e}") from e

    if dimensions.width <= 0 or dimensions.height <= 0:
        raise ResolutionDetectionFailure(f"Detected invalid resolution {dimensions}")
    return dimensions


def detect_screen_resolution(override: Optional[str] = None) -> ScreenDimensions:
    """
    Screen size for the wallpaper.
    An override ('WIDTHxHEIGHT') wins; failures fall back to 1920x1080.
    """
    if override:
        try:
            dimensions = parse_resolution(override)
            logger.info(f"TESTING MODE: Simulating screen resolution: {dimensions}")
            return dimensions
        except ResolutionDetectionFailure as e:
            logger.warning(f"{e}; detecting the real resolution instead")

    logger.debug("Detecting screen resolution...")
    try:
        dimensions = query_screen_resolution()
    except ResolutionDetectionFailure as e:
        logger.warning(f"{e}. Using default resolution {DEFAULT_DIMENSIONS}")
        return DEFAULT_DIMENSIONS

    logger.info(f"Detected screen resolution: {dimensions}")
    return dimensions
