"""
Wallpaper Generator - Life Calendar Edition
Paints the 80 x 52 week grid, axis labels, weekly quote and credit line.
"""
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from loguru import logger

from life_calendar.config import (
    CREDIT_ALPHA, CREDIT_TEXT, LABEL_ALPHA, WEEKS_PER_YEAR, YEARS,
    CalendarConfig, default_output_path, get_theme
)
from life_calendar.errors import RenderError
from life_calendar.layout import LayoutPlan, ScreenDimensions, compute_layout
from life_calendar.life_position import LifePosition, week_of_year

CURRENT_WEEK_OUTLINE = 4
FUTURE_WEEK_OUTLINE = 1

# Vertical nudge applied to axis labels
LABEL_BASELINE_OFFSET = 3


# ============================================================================
# FONT UTILITIES
# ============================================================================

FONTS = {
    "labels": ["segoeui.ttf", "arial.ttf", "Arial.ttf", "DejaVuSans.ttf"],
    "quote": ["georgia.ttf", "Georgia.ttf", "times.ttf", "DejaVuSerif.ttf"],
    "attribution": ["segoeuii.ttf", "ariali.ttf", "Arial Italic.ttf", "DejaVuSans-Oblique.ttf"],
    "credit": ["georgia.ttf", "Georgia.ttf", "garamond.ttf", "DejaVuSerif.ttf"],
}


def get_font(size: int, role: str = "labels") -> ImageFont.FreeTypeFont:
    """Get system font for a text role, falling back to Pillow's own"""
    for name in FONTS.get(role, FONTS["labels"]):
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


# ============================================================================
# QUOTE SELECTION
# ============================================================================

def select_quote_index(calendar_week: int, life_position: LifePosition,
                       quote_count: int) -> int:
    """
    Pick this week's quote.
    The anchor quote (index 0) is shown in the first calendar week of the
    year and in the first week after a birthday.
    """
    if calendar_week == 1:
        logger.debug("Using anchor quote: first week of the year")
        return 0
    if life_position.current_week_of_year == 0:
        logger.debug("Using anchor quote: first week after birthday")
        return 0

    index = (calendar_week - 1) % quote_count
    logger.debug(f"Using quote #{index + 1} for calendar week {calendar_week}")
    return index


# ============================================================================
# GRID
# ============================================================================

def week_states(total_weeks_lived: int) -> np.ndarray:
    """
    Marker state for every cell, indexed [week, year]:
    -1 past, 0 current, 1 future
    """
    weeks, years = np.meshgrid(np.arange(WEEKS_PER_YEAR), np.arange(YEARS), indexing="ij")
    index = years * WEEKS_PER_YEAR + weeks
    return np.sign(index - total_weeks_lived)


def draw_grid(draw: ImageDraw.ImageDraw, plan: LayoutPlan,
              life_position: LifePosition, theme: Dict) -> None:
    """Draw one circle per week of an 80 year life"""
    r = plan.circle_radius
    xs, ys = plan.cell_centers()
    states = week_states(life_position.total_weeks_lived)

    for week in range(WEEKS_PER_YEAR):
        for year in range(YEARS):
            cx = int(round(xs[week, year]))
            cy = int(round(ys[week, year]))
            box = [cx - r, cy - r, cx + r, cy + r]
            state = states[week, year]

            if state < 0:
                draw.ellipse(box, fill=theme["past_weeks"])
            elif state == 0:
                draw.ellipse(box, outline=theme["current_week"], width=CURRENT_WEEK_OUTLINE)
            else:
                draw.ellipse(box, outline=theme["future_weeks"], width=FUTURE_WEEK_OUTLINE)


def draw_axis_labels(draw: ImageDraw.ImageDraw, plan: LayoutPlan, theme: Dict) -> None:
    """Decade markers above the grid, then week markers to its left"""
    font = get_font(plan.marker_font_size, "labels")
    fill = (*theme["labels"][:3], LABEL_ALPHA)

    for text, x, y in plan.year_labels():
        draw.text((x, y + LABEL_BASELINE_OFFSET), text, font=font, fill=fill, anchor="ms")

    for text, x, y in plan.week_labels():
        draw.text((x, y + LABEL_BASELINE_OFFSET), text, font=font, fill=fill, anchor="rs")


def draw_quote(draw: ImageDraw.ImageDraw, plan: LayoutPlan, theme: Dict,
               quote: str, attribution: str) -> None:
    center_x = plan.width / 2

    quote_font = get_font(plan.quote_font_size, "quote")
    draw.text((center_x, plan.quote_y), quote, font=quote_font,
              fill=theme["text"], anchor="ms")

    attribution_font = get_font(plan.attribution_font_size, "attribution")
    draw.text((center_x, plan.attribution_y), f"— {attribution}", font=attribution_font,
              fill=theme["attribution"], anchor="ms")


def draw_credit(draw: ImageDraw.ImageDraw, plan: LayoutPlan, theme: Dict) -> None:
    font = get_font(plan.credit_font_size, "credit")
    fill = (*theme["credit"][:3], CREDIT_ALPHA)
    draw.text((plan.width / 2, plan.credit_y), CREDIT_TEXT, font=font, fill=fill, anchor="ms")


# ============================================================================
# MAIN GENERATOR
# ============================================================================

def draw_life_calendar(life_position: LifePosition, config: CalendarConfig,
                       plan: LayoutPlan, quote_index: int) -> Image.Image:
    """Paint the calendar for a computed layout and return the image"""
    theme = get_theme(config.theme)

    image = Image.new("RGB", (plan.width, plan.height), theme["background"])
    # RGBA mode blends translucent label colors into the background
    draw = ImageDraw.Draw(image, "RGBA")

    draw_axis_labels(draw, plan, theme)
    draw_grid(draw, plan, life_position, theme)
    draw_quote(draw, plan, theme, config.quotes[quote_index], config.attributions[quote_index])
    draw_credit(draw, plan, theme)

    return image


def render_life_calendar(life_position: LifePosition, config: CalendarConfig,
                         dimensions: ScreenDimensions, now: datetime,
                         output_path: Optional[Union[str, Path]] = None) -> Path:
    """
    Render the life calendar wallpaper and save it as PNG

    Args:
        life_position: where the user is on the grid
        config: user config (theme, quotes)
        dimensions: canvas size, normally the screen resolution
        now: current instant, used for the weekly quote
        output_path: target file, overwritten if present

    Returns:
        Path of the written image

    Raises:
        RenderError: if drawing or saving fails
    """
    plan = compute_layout(dimensions.width, dimensions.height)
    logger.debug(
        f"Layout {dimensions}: profile={plan.profile.name} cell={plan.cell_size:.2f} "
        f"radius={plan.circle_radius}"
    )

    quote_index = select_quote_index(week_of_year(now), life_position, len(config.quotes))
    logger.info(f"Selected quote: \"{config.quotes[quote_index]}\" — {config.attributions[quote_index]}")

    target = Path(output_path) if output_path else default_output_path()

    try:
        image = draw_life_calendar(life_position, config, plan, quote_index)
        image.save(target, "PNG")
    except (OSError, ValueError) as e:
        raise RenderError(f"Could not render wallpaper to {target}: {e}") from e

    logger.info(f"Wallpaper saved to: {target} ({dimensions})")
    return target
