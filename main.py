"""
Life Calendar Wallpaper - Main Entry Point

Renders an 80 year by 52 week grid of your life, marking the weeks already
lived, and sets it as your desktop background.

Usage:
    python main.py [--config config.json] [--no-set]
"""
import sys

from life_calendar.app import run_app


if __name__ == "__main__":
    sys.exit(run_app())
