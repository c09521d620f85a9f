# almanac/calendar.py
"""
The world calendar: current time, date arithmetic, seasons, daylight and moons.

Months and days are 1-indexed, hours and minutes 0-indexed.
"""
import logging
from typing import Dict, Any, List, NamedTuple, Optional, Tuple, TYPE_CHECKING

from .definitions import calendar as calendar_defs

if TYPE_CHECKING:
    from .models import ClimateZone

log = logging.getLogger(__name__)

Date = Tuple[int, int, int]


class TimeComponents(NamedTuple):
    year: int
    month: int
    day: int
    hour: int
    minute: int


class MoonState(NamedTuple):
    name: str
    phase_position: float  # 0 = new, 0.5 = full
    color: Optional[str]
    moon_brightness_max: Optional[float]


class GameCalendar:
    """Holds the current world time and answers calendar questions about it."""

    def __init__(self, year: int = calendar_defs.STARTING_YEAR, month: int = calendar_defs.STARTING_MONTH,
                 day: int = calendar_defs.STARTING_DAY, hour: int = calendar_defs.STARTING_HOUR,
                 minute: int = 0, moons: Optional[List[Dict[str, Any]]] = None):
        self.year = year
        self.month = month
        self.day = day
        self.hour = hour
        self.minute = minute
        self.moon_defs: List[Dict[str, Any]] = list(calendar_defs.MOONS if moons is None else moons)

    # --- Structure ---
    @property
    def hours_per_day(self) -> int:
        return calendar_defs.HOURS_PER_DAY

    @property
    def minutes_per_hour(self) -> int:
        return calendar_defs.MINUTES_PER_HOUR

    @property
    def season_names(self) -> List[str]:
        return list(calendar_defs.SEASON_NAMES)

    def components(self) -> TimeComponents:
        return TimeComponents(self.year, self.month, self.day, self.hour, self.minute)

    def today(self) -> Date:
        return self.year, self.month, self.day

    # --- Date arithmetic ---
    @staticmethod
    def absolute_day(year: int, month: int, day: int) -> int:
        """Days since the calendar epoch (year 0, month 1, day 1)."""
        return (year * calendar_defs.MONTHS_PER_YEAR + (month - 1)) * calendar_defs.DAYS_PER_MONTH + (day - 1)

    @staticmethod
    def date_from_absolute(absolute: int) -> Date:
        months, day_index = divmod(absolute, calendar_defs.DAYS_PER_MONTH)
        year, month_index = divmod(months, calendar_defs.MONTHS_PER_YEAR)
        return year, month_index + 1, day_index + 1

    def add_days(self, year: int, month: int, day: int, offset: int) -> Date:
        return self.date_from_absolute(self.absolute_day(year, month, day) + offset)

    def days_between(self, start: Date, end: Date) -> int:
        return self.absolute_day(*end) - self.absolute_day(*start)

    @property
    def world_minutes(self) -> int:
        """Absolute game minutes since the epoch; used as a monotonic world clock."""
        days = self.absolute_day(self.year, self.month, self.day)
        return (days * self.hours_per_day + self.hour) * self.minutes_per_hour + self.minute

    # --- Seasons & daylight ---
    def season_for_date(self, year: int, month: int, day: int) -> str:
        return calendar_defs.get_season(month)

    def current_season(self) -> str:
        return self.season_for_date(self.year, self.month, self.day)

    def sunrise(self, zone: Optional["ClimateZone"] = None) -> float:
        """Decimal hour of sunrise for the current season."""
        swing = calendar_defs.DAYLIGHT_SEASONAL_SWING.get(self.current_season(), 0.0)
        return calendar_defs.DAWN_HOUR + swing

    def sunset(self, zone: Optional["ClimateZone"] = None) -> float:
        """Decimal hour of sunset for the current season."""
        swing = calendar_defs.DAYLIGHT_SEASONAL_SWING.get(self.current_season(), 0.0)
        return calendar_defs.DUSK_HOUR - swing

    # --- Moons ---
    def moons(self) -> List[MoonState]:
        """Returns every moon with its phase position for the current moment."""
        day_fraction = (self.hour + self.minute / self.minutes_per_hour) / self.hours_per_day
        today = self.absolute_day(self.year, self.month, self.day) + day_fraction
        states = []
        for moon in self.moon_defs:
            cycle = moon.get("cycle_length") or 0
            if cycle <= 0:
                log.warning("Moon '%s' has no usable cycle length; skipping.", moon.get("name"))
                continue
            position = ((today - moon.get("reference_day", 0)) % cycle) / cycle
            states.append(MoonState(moon.get("name", "Moon"), position, moon.get("color"),
                                    moon.get("moon_brightness_max")))
        return states

    def moon_phase_indices(self, phases: int = 8) -> Tuple[int, ...]:
        """Discrete phase bucket per moon; a change here means a new moon phase."""
        return tuple(int(m.phase_position * phases) % phases for m in self.moons())

    # --- Time progression ---
    def advance(self, minutes: int) -> Tuple[int, int]:
        """
        Advances the clock by whole game minutes.
        Returns (hours_crossed, days_crossed).
        """
        if minutes <= 0:
            return 0, 0
        start_hours = self.world_minutes // self.minutes_per_hour
        start_day = self.absolute_day(self.year, self.month, self.day)
        self.set_from_world_minutes(self.world_minutes + minutes)
        hours_crossed = self.world_minutes // self.minutes_per_hour - start_hours
        days_crossed = self.absolute_day(self.year, self.month, self.day) - start_day
        return hours_crossed, days_crossed

    def set_from_world_minutes(self, total: int):
        total_hours, self.minute = divmod(total, self.minutes_per_hour)
        days, self.hour = divmod(total_hours, self.hours_per_day)
        self.year, self.month, self.day = self.date_from_absolute(days)

    # --- Persistence ---
    def to_dict(self) -> Dict[str, int]:
        return {"year": self.year, "month": self.month, "day": self.day,
                "hour": self.hour, "minute": self.minute}

    def load(self, data: Optional[Dict[str, Any]]):
        if not data:
            return
        self.year = data.get("year", self.year)
        self.month = data.get("month", self.month)
        self.day = data.get("day", self.day)
        self.hour = data.get("hour", self.hour)
        self.minute = data.get("minute", self.minute)
