"""
Life Calendar - an 80 year by 52 week wallpaper of your life in weeks.
"""
__version__ = "1.0.0"
