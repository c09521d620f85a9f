# almanac/darkness.py
"""
Base darkness curve: time of day -> darkness in [0, 1] (0 = fully lit).

With known sunrise/sunset the day is split into two cosine halves so the
curve meets exactly 0.5 at both seams: daylight stays in [0, 0.5], night in
[0.5, 1]. Without them a symmetric cosine is used, darkest at midnight.
"""
import math
from typing import Optional, TYPE_CHECKING

from . import utils

if TYPE_CHECKING:
    from .calendar import GameCalendar
    from .models import ClimateZone


def base_darkness(hour: float, minute: float = 0, hours_per_day: int = 24, minutes_per_hour: int = 60,
                  sunrise: Optional[float] = None, sunset: Optional[float] = None) -> float:
    if hours_per_day <= 0:
        return 0.0
    time_of_day = (hour + (minute / minutes_per_hour if minutes_per_hour else 0)) % hours_per_day

    if sunrise is None or sunset is None or not (0 <= sunrise < sunset <= hours_per_day):
        return utils.clamp((math.cos(2 * math.pi * time_of_day / hours_per_day) + 1) / 2)

    daylight_hours = sunset - sunrise
    night_hours = hours_per_day - daylight_hours

    if sunrise <= time_of_day < sunset:
        progress = (time_of_day - sunrise) / daylight_hours
        return utils.clamp((math.cos(2 * math.pi * progress) + 1) / 4)

    if night_hours <= 0:
        return 0.5
    since_sunset = (time_of_day - sunset) % hours_per_day
    progress = since_sunset / night_hours
    return utils.clamp(0.5 + (1 - math.cos(2 * math.pi * progress)) / 4)


def darkness_for_calendar(calendar: "GameCalendar", zone: Optional["ClimateZone"] = None) -> float:
    """Base darkness for the calendar's current moment."""
    return base_darkness(calendar.hour, calendar.minute, calendar.hours_per_day, calendar.minutes_per_hour,
                         calendar.sunrise(zone), calendar.sunset(zone))
