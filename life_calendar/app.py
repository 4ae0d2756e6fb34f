"""
Main Application - generate the life calendar and set it as wallpaper
"""
import argparse
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Union

from loguru import logger

from life_calendar.config import (
    TEST_RESOLUTIONS, WALLPAPER_CONFIG, CalendarConfig, load_config
)
from life_calendar.errors import DateParseError
from life_calendar.layout import ScreenDimensions
from life_calendar.life_position import calculate_life_position
from life_calendar.screen import detect_screen_resolution
from life_calendar.wallpaper_generator import render_life_calendar
from life_calendar.wallpaper_setter import set_wallpaper

# Environment overrides for testing
ENV_TEST_DATE = "TEST_DATE"
ENV_TEST_RESOLUTION = "TEST_RESOLUTION"
ENV_TEST_MULTIPLE_RESOLUTIONS = "TEST_MULTIPLE_RESOLUTIONS"


def parse_now(text: Optional[str]) -> datetime:
    """Current instant, or the simulated one from a test date override"""
    if not text:
        return datetime.now()
    try:
        now = datetime.fromisoformat(text.strip())
    except ValueError as e:
        raise DateParseError(f"Invalid test date {text!r}, expected ISO format") from e
    logger.info(f"TESTING MODE: Simulating date: {now.isoformat()}")
    # Local wall-clock time, like datetime.now()
    return now.replace(tzinfo=None)


def run(config_path: Optional[Union[str, Path]] = None,
        now: Optional[datetime] = None,
        resolution_override: Optional[str] = None,
        set_as_wallpaper: bool = True,
        output_path: Optional[Union[str, Path]] = None) -> Path:
    """Generate the wallpaper and (optionally) apply it"""
    now = now or datetime.now()

    logger.info("Loading configuration...")
    config = load_config(config_path)

    logger.info("Calculating life position...")
    position = calculate_life_position(config.birthdate, now)
    logger.info(
        f"Current life position: year {position.current_year_of_life}, "
        f"week {position.current_week_of_year}, {position.total_weeks_lived} weeks lived, "
        f"{position.weeks_until_next_birthday} weeks until next birthday"
    )

    dimensions = detect_screen_resolution(resolution_override)

    logger.info("Generating wallpaper...")
    wallpaper_path = render_life_calendar(position, config, dimensions, now, output_path)

    if set_as_wallpaper:
        set_wallpaper(wallpaper_path, WALLPAPER_CONFIG["fit"])
        logger.info("Done! Your life calendar wallpaper has been set.")

    return wallpaper_path


def render_test_resolutions(config: CalendarConfig, now: datetime,
                            out_dir: Optional[Union[str, Path]] = None) -> List[Path]:
    """Render one wallpaper per common resolution, without applying any"""
    target_dir = Path(out_dir) if out_dir else Path.cwd() / WALLPAPER_CONFIG["test_dir"]
    target_dir.mkdir(parents=True, exist_ok=True)

    position = calculate_life_position(config.birthdate, now)

    outputs = []
    for width, height, name in TEST_RESOLUTIONS:
        logger.info(f"Testing {name} ({width}x{height})...")
        path = target_dir / f"life_calendar_{width}x{height}.png"
        outputs.append(render_life_calendar(position, config, ScreenDimensions(width, height),
                                            now, path))

    logger.info(f"Test wallpapers saved to: {target_dir}")
    return outputs


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="life-calendar",
        description="Render your life in weeks and set it as the desktop wallpaper."
    )
    parser.add_argument("--config", help="Path to config.json (default: ./config.json)")
    parser.add_argument("--output", help="Where to write the wallpaper PNG")
    parser.add_argument("--date", help="Simulate the current date (ISO format)")
    parser.add_argument("--resolution", help="Simulate a screen resolution, e.g. 2560x1440")
    parser.add_argument("--no-set", action="store_true", help="Only generate the image")
    parser.add_argument("--test-resolutions", action="store_true",
                        help="Render previews for common resolutions into resolution_tests/")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def configure_logging(verbose: bool = False) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO",
               format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}")


def run_app(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point; returns the process exit code"""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        now = parse_now(args.date or os.environ.get(ENV_TEST_DATE))
        resolution = args.resolution or os.environ.get(ENV_TEST_RESOLUTION)

        if args.test_resolutions or os.environ.get(ENV_TEST_MULTIPLE_RESOLUTIONS) == "true":
            logger.info("TESTING MODE: Testing multiple resolutions")
            render_test_resolutions(load_config(args.config), now)
            return 0

        run(
            config_path=args.config,
            now=now,
            resolution_override=resolution,
            set_as_wallpaper=not args.no_set,
            output_path=args.output,
        )
    except Exception as e:
        logger.error(f"Error: {e}")
        logger.opt(exception=e).debug("Traceback")
        return 1

    return 0


def main() -> None:
    sys.exit(run_app())


if __name__ == "__main__":
    main()
