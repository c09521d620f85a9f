# almanac/utils.py
"""
General utility functions: clamping, interpolation, color and unit conversion.
"""
import logging
import math
from typing import Optional, Tuple

from .definitions import weather as weather_defs

log = logging.getLogger(__name__)

# --- Math helpers ---

def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamps value into [low, high]. NaN collapses to low."""
    if value != value:  # NaN
        return low
    return max(low, min(high, value))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def normalize_hue(hue: float) -> float:
    return hue % 360.0


def lerp_hue(a: float, b: float, t: float) -> float:
    """Interpolates between two hues along the shortest path around the circle."""
    delta = ((b - a + 180.0) % 360.0) - 180.0
    return normalize_hue(a + delta * t)


def circular_mean_hue(weighted_hues) -> Optional[float]:
    """
    Weighted circular mean of (hue, weight) pairs, in degrees.
    Returns None when there is no weight or the hues cancel out.
    """
    x = y = total = 0.0
    for hue, weight in weighted_hues:
        if weight <= 0:
            continue
        rad = math.radians(hue)
        x += math.cos(rad) * weight
        y += math.sin(rad) * weight
        total += weight
    if total <= 0 or (abs(x) < 1e-9 and abs(y) < 1e-9):
        return None
    return normalize_hue(math.degrees(math.atan2(y, x)))

# --- Color ---

def hex_to_hsl(color: str) -> Optional[Tuple[float, float, float]]:
    """
    Converts '#RRGGBB' (or 'RRGGBB', or '#RGB') to (hue 0-360, saturation 0-1, lightness 0-1).
    Returns None for anything unparseable.
    """
    if not color or not isinstance(color, str):
        return None
    value = color.strip().lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    if len(value) != 6:
        return None
    try:
        r, g, b = (int(value[i:i + 2], 16) / 255.0 for i in (0, 2, 4))
    except ValueError:
        log.warning("Invalid hex color '%s'.", color)
        return None

    high, low = max(r, g, b), min(r, g, b)
    lightness = (high + low) / 2.0
    if high == low:
        return 0.0, 0.0, lightness

    delta = high - low
    saturation = delta / (2.0 - high - low) if lightness > 0.5 else delta / (high + low)
    if high == r:
        hue = ((g - b) / delta) % 6
    elif high == g:
        hue = (b - r) / delta + 2
    else:
        hue = (r - g) / delta + 4
    return normalize_hue(hue * 60.0), saturation, lightness

# --- Units ---

def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def fahrenheit_to_celsius(fahrenheit: float) -> float:
    return (fahrenheit - 32) * 5 / 9


def format_temperature(celsius: Optional[float], unit: str = "celsius") -> str:
    """Renders a Celsius value in the requested unit, always with a degree symbol."""
    if celsius is None:
        return "--°"
    if unit == "fahrenheit":
        return f"{round(celsius_to_fahrenheit(celsius))}°F"
    return f"{round(celsius)}°C"


def format_wind_speed(speed: int, unit: str = "kph") -> str:
    """Renders a 0-5 wind speed as its label plus a real-world speed."""
    entry = weather_defs.WIND_SPEEDS.get(int(clamp(speed, 0, weather_defs.MAX_WIND_SPEED)))
    kph = entry["kph"]
    if unit == "mph":
        return f"{entry['label']} ({round(kph * 0.621371)} mph)"
    return f"{entry['label']} ({kph} kph)"


def format_precipitation(precip_type: Optional[str], intensity: float) -> str:
    if not precip_type or intensity <= 0:
        return "None"
    if intensity < 0.34:
        strength = "Light"
    elif intensity < 0.67:
        strength = "Moderate"
    else:
        strength = "Heavy"
    return f"{strength} {precip_type}"

