"""
Life position - where "now" falls on the 80 x 52 week grid
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Union

from life_calendar.config import DAYS_PER_WEEK, WEEKS_PER_YEAR
from life_calendar.errors import DateParseError

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class LifePosition:
    total_weeks_lived: int
    current_year_of_life: int
    current_week_of_year: int
    week_progress: float
    weeks_until_next_birthday: int


def parse_birthdate(text: str) -> date:
    """Parse a YYYY-MM-DD birthdate"""
    try:
        return datetime.strptime(text.strip(), "%Y-%m-%d").date()
    except (ValueError, AttributeError) as e:
        raise DateParseError(f"Invalid birthdate {text!r}, expected YYYY-MM-DD") from e


def anniversary(birth: date, year: int) -> datetime:
    """
    Midnight of the birthday in the given year.
    Feb 29 birthdays fall on Mar 1 in non-leap years.
    """
    try:
        return datetime(year, birth.month, birth.day)
    except ValueError:
        return datetime(year, birth.month, birth.day - 1) + timedelta(days=1)


def day_of_week(now: datetime) -> int:
    """Day of week, Monday = 0"""
    return now.weekday()


def day_progress(now: datetime) -> float:
    """Fraction of the current day elapsed (0.0-1.0)"""
    seconds = now.hour * 3600 + now.minute * 60 + now.second
    return seconds / SECONDS_PER_DAY


def week_of_year(now: datetime) -> int:
    """Calendar week number, counted in whole 7-day blocks from Jan 1"""
    start = datetime(now.year, 1, 1)
    elapsed = (now - start).total_seconds()
    return max(1, math.ceil(elapsed / (DAYS_PER_WEEK * SECONDS_PER_DAY)))


def calculate_life_position(birthdate: Union[str, date], now: datetime) -> LifePosition:
    """
    Calculate where `now` falls in a life that started on `birthdate`

    Args:
        birthdate: date or YYYY-MM-DD string
        now: the current instant, passed in rather than read from the clock

    Returns:
        LifePosition for the grid renderer

    Raises:
        DateParseError: if the birthdate is malformed or after `now`
    """
    birth = parse_birthdate(birthdate) if isinstance(birthdate, str) else birthdate
    if isinstance(birth, datetime):
        birth = birth.date()

    if now < datetime(birth.year, birth.month, birth.day):
        raise DateParseError(f"Birthdate {birth.isoformat()} is after {now.isoformat()}")

    this_year = anniversary(birth, now.year)
    before_birthday = now < this_year

    if before_birthday:
        cycle_start = anniversary(birth, now.year - 1)
        next_birthday = this_year
    else:
        cycle_start = this_year
        next_birthday = anniversary(birth, now.year + 1)

    days_since = (now - cycle_start) // timedelta(days=1)
    # A 365/366 day life-year has one or two days past week 51
    weeks_since = min(days_since // DAYS_PER_WEEK, WEEKS_PER_YEAR - 1)

    years = now.year - birth.year - (1 if before_birthday else 0)
    total_weeks = years * WEEKS_PER_YEAR + weeks_since

    days_until = math.ceil((next_birthday - now).total_seconds() / SECONDS_PER_DAY)
    weeks_until = math.ceil(days_until / DAYS_PER_WEEK)

    progress = (day_of_week(now) + day_progress(now)) / DAYS_PER_WEEK

    return LifePosition(
        total_weeks_lived=total_weeks,
        current_year_of_life=years,
        current_week_of_year=weeks_since,
        week_progress=progress,
        weeks_until_next_birthday=weeks_until,
    )
