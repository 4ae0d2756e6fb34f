"""
Error types raised while building and applying the life calendar wallpaper
"""


class LifeCalendarError(Exception):
    """Base class for every failure the app reports"""


class ConfigParseError(LifeCalendarError):
    """Config file is missing, unreadable or malformed"""


class DateParseError(LifeCalendarError, ValueError):
    """Birthdate (or a test date override) could not be used"""


class ResolutionDetectionFailure(LifeCalendarError):
    """Screen resolution could not be determined"""


class LayoutError(LifeCalendarError, ValueError):
    """Canvas dimensions cannot hold a layout"""


class RenderError(LifeCalendarError):
    """Drawing or saving the wallpaper image failed"""


class WallpaperApplyError(LifeCalendarError):
    """The operating system refused the new wallpaper"""


class WallpaperNotFoundError(WallpaperApplyError, FileNotFoundError):
    """Wallpaper image does not exist"""
