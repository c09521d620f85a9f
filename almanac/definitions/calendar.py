# almanac/definitions/calendar.py
"""Defines the world calendar structure, time constants, seasons and moons."""

#--- Time Progression ratio ---
# Real seconds that pass for each game minute. A 26-hour day passes in 156 real minutes.
SECONDS_PER_GAME_MINUTE: float = 6.0

# --- Calendar structure ---
MINUTES_PER_HOUR: int = 60
HOURS_PER_DAY: int = 26
DAYS_PER_WEEK: int = 10
WEEKS_PER_MONTH: int = 3
MONTHS_PER_YEAR: int = 12

DAYS_PER_MONTH: int = DAYS_PER_WEEK * WEEKS_PER_MONTH
DAYS_PER_YEAR: int = MONTHS_PER_YEAR * DAYS_PER_MONTH

# --- Day/Night Cycle ---
# Decimal hours. Sunrise and sunset drift with the season by up to
# DAYLIGHT_SEASONAL_SWING hours either side of these values.
DAWN_HOUR: float = 7.0
DUSK_HOUR: float = 21.0
DAYLIGHT_SEASONAL_SWING: dict = {
    "Winter": 1.5,   # later dawn, earlier dusk
    "Spring": 0.0,
    "Summer": -1.5,  # earlier dawn, later dusk
    "Autumn": 0.0,
}

# --- Starting Date ---
STARTING_YEAR: int = 218
STARTING_MONTH: int = 5
STARTING_DAY: int = 1
STARTING_HOUR: int = 7

SEASON_NAMES = ["Spring", "Summer", "Autumn", "Winter"]

# --- Moons ---
# cycle_length is in days; reference_day is the absolute day number of a new moon.
MOONS = [
    {
        "name": "Celene",
        "cycle_length": 28,
        "reference_day": 0,
        "color": None,
        "moon_brightness_max": 0.15,
    },
    {
        "name": "Malakor's Eye",
        "cycle_length": 45,
        "reference_day": 11,
        "color": "#B03030",
        "moon_brightness_max": 0.08,
    },
]


def get_season(month: int) -> str:
    """
    Returns the name of the season for a given month number (1-12).
    """
    if month in [12, 1, 2]:
        return "Winter"
    elif month in [3, 4, 5]:
        return "Spring"
    elif month in [6, 7, 8]:
        return "Summer"
    else:  # months 9, 10, 11
        return "Autumn"
