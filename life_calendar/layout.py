"""
Layout Engine - resolution-adaptive geometry for the life calendar.

Every position the renderer needs (cell centers, axis labels, quote,
attribution and credit lines) is derived here from the screen size alone,
so the same resolution always yields the same plan.
"""
import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from life_calendar.config import DEFAULT_WIDTH, WEEKS_PER_YEAR, YEARS
from life_calendar.errors import LayoutError


@dataclass(frozen=True)
class ScreenDimensions:
    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


# ============================================================================
# SIZING PROFILES
# ============================================================================

@dataclass(frozen=True)
class SizingProfile:
    name: str
    min_width: int
    circle_radius_percent: float
    cell_padding_percent: float
    label_frequency: int


# Ordered ascending by min_width
SIZING_PROFILES = (
    SizingProfile("small", 0, 0.38, 0.18, 4),
    SizingProfile("medium", 1600, 0.40, 0.18, 4),
    SizingProfile("large", 2560, 0.42, 0.18, 4),
    SizingProfile("xl", 3440, 0.44, 0.18, 4),
)

# Share of the screen the grid may occupy
USABLE_WIDTH_PERCENT = 0.85
USABLE_HEIGHT_PERCENT = 0.75

# Cells are inflated slightly past the strict fit for a denser grid
CELL_SIZE_FACTOR = 1.08

GRID_TOP_PERCENT = 0.08
CREDIT_GAP_PERCENT = 0.33
MIN_CIRCLE_RADIUS = 3

DECADE_MARKERS = range(10, YEARS + 1, 10)
FIRST_WEEK_MARKER = 4

# Base sizes at 1920px wide
MARKER_FONT_BASE = 14
QUOTE_FONT_BASE = 24
ATTRIBUTION_FONT_BASE = 12
CREDIT_FONT_BASE = 12
CREDIT_FONT_MIN = 10
MARKER_OFFSET_BASE = 10
QUOTE_SPACING_BASE = 35

# Widest width:height ratio the text above the grid is scaled for
MAX_TEXT_ASPECT = 2.4


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (not banker's rounding)"""
    return int(math.floor(value + 0.5))


def scale_for_resolution(base_value: float, screen_width: int) -> int:
    """Scale a size given for a 1920px wide screen to `screen_width`"""
    return max(1, round_half_up(base_value * screen_width / DEFAULT_WIDTH))


def text_scale_width(width: int, height: int) -> int:
    """
    Width used for scaling text and spacing. Past MAX_TEXT_ASPECT the quote
    would be pushed above the top edge, so ultra-wide screens scale as if
    they were MAX_TEXT_ASPECT wide.
    """
    return min(width, round_half_up(height * MAX_TEXT_ASPECT))


def select_profile(width: int) -> SizingProfile:
    """Pick the profile with the largest breakpoint not above `width`"""
    selected = SIZING_PROFILES[0]
    for profile in SIZING_PROFILES:
        if width >= profile.min_width:
            selected = profile
        else:
            break
    return selected


@dataclass(frozen=True)
class CellSizing:
    cell_size: float
    circle_radius: int
    cell_padding: float
    profile: SizingProfile


def calculate_cell_size(width: int, height: int) -> CellSizing:
    """Largest cell that lets the 80 x 52 grid fit the usable area"""
    usable_width = width * USABLE_WIDTH_PERCENT
    usable_height = height * USABLE_HEIGHT_PERCENT

    cell_size = min(usable_width / YEARS, usable_height / WEEKS_PER_YEAR)
    cell_size *= CELL_SIZE_FACTOR

    profile = select_profile(width)
    circle_radius = max(MIN_CIRCLE_RADIUS, round_half_up(cell_size * profile.circle_radius_percent))
    cell_padding = cell_size * profile.cell_padding_percent

    return CellSizing(cell_size, circle_radius, cell_padding, profile)


# ============================================================================
# LAYOUT PLAN
# ============================================================================

@dataclass(frozen=True)
class LayoutPlan:
    width: int
    height: int
    profile: SizingProfile
    cell_size: float
    circle_radius: int
    cell_padding: float
    grid_x: float
    grid_y: float
    grid_width: float
    grid_height: float
    year_marker_y: float
    week_marker_x: float
    quote_y: float
    attribution_y: float
    credit_y: float
    marker_font_size: int
    quote_font_size: int
    attribution_font_size: int
    credit_font_size: int

    @property
    def label_frequency(self) -> int:
        return self.profile.label_frequency

    @property
    def grid_bottom(self) -> float:
        return self.grid_y + self.grid_height

    def cell_center(self, year: int, week: int) -> Tuple[float, float]:
        """Center of the circle for (year, week), both zero-based"""
        x = self.grid_x + year * self.cell_size + self.cell_size / 2
        y = self.grid_y + week * self.cell_size + self.cell_size / 2
        return x, y

    def cell_centers(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Centers of all cells as two (WEEKS_PER_YEAR, YEARS) arrays,
        indexed [week, year].
        """
        xs = self.grid_x + (np.arange(YEARS) + 0.5) * self.cell_size
        ys = self.grid_y + (np.arange(WEEKS_PER_YEAR) + 0.5) * self.cell_size
        return np.meshgrid(xs, ys)

    def year_labels(self) -> List[Tuple[str, float, float]]:
        """(text, x, y) for each decade marker above the grid"""
        return [
            (str(decade), self.grid_x + (decade - 0.5) * self.cell_size, self.year_marker_y)
            for decade in DECADE_MARKERS
        ]

    def week_labels(self) -> List[Tuple[str, float, float]]:
        """(text, x, y) for each week marker left of the grid"""
        return [
            (str(week), self.week_marker_x,
             self.grid_y + (week - 1) * self.cell_size + self.cell_size / 2)
            for week in range(FIRST_WEEK_MARKER, WEEKS_PER_YEAR + 1, self.label_frequency)
        ]


def compute_layout(width: int, height: int) -> LayoutPlan:
    """
    Compute the full layout for a screen

    Raises:
        LayoutError: if either dimension is not positive
    """
    if width <= 0 or height <= 0:
        raise LayoutError(f"Cannot lay out a {width}x{height} canvas")

    sizing = calculate_cell_size(width, height)
    cell = sizing.cell_size

    grid_width = YEARS * cell
    grid_height = WEEKS_PER_YEAR * cell
    grid_x = (width - grid_width) / 2
    grid_y = height * GRID_TOP_PERCENT

    # Text scales with width, up to the widest aspect the top margin can hold
    text_width = text_scale_width(width, height)

    marker_offset = scale_for_resolution(MARKER_OFFSET_BASE, text_width)
    year_marker_y = grid_y - marker_offset
    week_marker_x = grid_x - marker_offset

    attribution_font_size = scale_for_resolution(ATTRIBUTION_FONT_BASE, text_width)

    # Quote sits above the year markers, attribution halfway between
    quote_spacing = scale_for_resolution(QUOTE_SPACING_BASE, text_width)
    quote_y = year_marker_y - quote_spacing
    attribution_y = year_marker_y - quote_spacing / 2 + attribution_font_size / 4

    grid_bottom = grid_y + grid_height
    credit_y = grid_bottom + (height - grid_bottom) * CREDIT_GAP_PERCENT

    return LayoutPlan(
        width=width,
        height=height,
        profile=sizing.profile,
        cell_size=cell,
        circle_radius=sizing.circle_radius,
        cell_padding=sizing.cell_padding,
        grid_x=grid_x,
        grid_y=grid_y,
        grid_width=grid_width,
        grid_height=grid_height,
        year_marker_y=year_marker_y,
        week_marker_x=week_marker_x,
        quote_y=quote_y,
        attribution_y=attribution_y,
        credit_y=credit_y,
        marker_font_size=scale_for_resolution(MARKER_FONT_BASE, text_width),
        quote_font_size=scale_for_resolution(QUOTE_FONT_BASE, text_width),
        attribution_font_size=attribution_font_size,
        credit_font_size=max(scale_for_resolution(CREDIT_FONT_BASE, text_width), CREDIT_FONT_MIN),
    )
