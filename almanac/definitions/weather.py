# almanac/definitions/weather.py
"""
Built-in weather presets, categories, wind scale and compass definitions.
"""
from typing import Dict, Any, List, Optional

# --- Categories ---
CATEGORY_STANDARD = "standard"
CATEGORY_SEVERE = "severe"
CATEGORY_ENVIRONMENTAL = "environmental"
CATEGORY_FANTASY = "fantasy"
CATEGORY_CUSTOM = "custom"

WEATHER_CATEGORIES = {
    CATEGORY_STANDARD: "Standard",
    CATEGORY_SEVERE: "Severe",
    CATEGORY_ENVIRONMENTAL: "Environmental",
    CATEGORY_FANTASY: "Fantasy",
    CATEGORY_CUSTOM: "Custom",
}

# Fallback display values for presets authored without them.
DEFAULT_ICON = "fa-question"
DEFAULT_COLOR = "#888888"
CUSTOM_WEATHER_ID = "custom"

# --- Wind ---
# Beaufort-like 0-5 scale with kph values used for display.
WIND_SPEEDS = {
    0: {"label": "Calm", "kph": 0},
    1: {"label": "Light", "kph": 10},
    2: {"label": "Moderate", "kph": 25},
    3: {"label": "Strong", "kph": 45},
    4: {"label": "Severe", "kph": 70},
    5: {"label": "Extreme", "kph": 110},
}
MAX_WIND_SPEED = 5

# Compass direction -> degrees.
COMPASS_DIRECTIONS = {
    "N": 0, "NNE": 22.5, "NE": 45, "ENE": 67.5,
    "E": 90, "ESE": 112.5, "SE": 135, "SSE": 157.5,
    "S": 180, "SSW": 202.5, "SW": 225, "WSW": 247.5,
    "W": 270, "WNW": 292.5, "NW": 315, "NNW": 337.5,
}

# --- Precipitation ---
PRECIPITATION_TYPES = ("drizzle", "rain", "snow", "sleet", "hail")


def _preset(preset_id: str, label: str, icon: str, color: str, category: str,
            temp_min: float, temp_max: float, darkness_penalty: float = 0.0,
            env_base: Optional[Dict[str, Any]] = None, env_dark: Optional[Dict[str, Any]] = None,
            wind_speed: int = 0, wind_forced: bool = False,
            precip_type: Optional[str] = None, precip_intensity: float = 0.0,
            inertia_weight: float = 0.0, fx_preset: Optional[str] = "same",
            description: str = "") -> Dict[str, Any]:
    """Builds a preset record in the shape accepted by `WeatherPreset`."""
    return {
        "id": preset_id,
        "label": label,
        "description": description,
        "icon": icon,
        "color": color,
        "category": category,
        "temp_min": temp_min,
        "temp_max": temp_max,
        "darkness_penalty": darkness_penalty,
        "environment_base": env_base,
        "environment_dark": env_dark,
        "wind": {"speed": wind_speed, "direction": None, "forced": wind_forced},
        "precipitation": {"type": precip_type, "intensity": precip_intensity},
        "inertia_weight": inertia_weight,
        "fx_preset": preset_id if fx_preset == "same" else fx_preset,
    }


STANDARD_PRESETS: List[Dict[str, Any]] = [
    _preset("clear", "Clear", "fa-sun", "#FFEE88", CATEGORY_STANDARD, 18, 32,
            inertia_weight=1.2, fx_preset=None, description="Clear skies and sunshine."),
    _preset("partly-cloudy", "Partly Cloudy", "fa-cloud-sun", "#D0E8FF", CATEGORY_STANDARD, 15, 28,
            wind_speed=1, inertia_weight=1.0),
    _preset("cloudy", "Cloudy", "fa-cloud", "#B0C4DE", CATEGORY_STANDARD, 12, 24,
            env_base={"hue": None, "saturation": 0.7}, wind_speed=1, inertia_weight=1.2),
    _preset("overcast", "Overcast", "fa-smog", "#CCCCCC", CATEGORY_STANDARD, 10, 20, 0.05,
            env_base={"hue": None, "saturation": 0.5}, wind_speed=1, inertia_weight=1.5),
    _preset("drizzle", "Drizzle", "fa-cloud-rain", "#CDEFFF", CATEGORY_STANDARD, 8, 18,
            env_base={"hue": None, "saturation": 0.8}, precip_type="drizzle", precip_intensity=0.2,
            inertia_weight=1.0),
    _preset("rain", "Rain", "fa-cloud-showers-heavy", "#A0D8EF", CATEGORY_STANDARD, 10, 22, 0.05,
            env_base={"hue": None, "saturation": 0.6}, wind_speed=2, precip_type="rain",
            precip_intensity=0.6, inertia_weight=1.3),
    _preset("fog", "Fog", "fa-smog", "#E6E6E6", CATEGORY_STANDARD, 5, 15, 0.05,
            env_base={"hue": None, "saturation": 0.3}, precip_type="drizzle", precip_intensity=0.1,
            inertia_weight=1.5),
    _preset("mist", "Mist", "fa-water", "#F0F8FF", CATEGORY_STANDARD, 8, 18,
            env_base={"hue": None, "saturation": 0.7}, inertia_weight=1.0),
    _preset("windy", "Windy", "fa-wind", "#E0F7FA", CATEGORY_STANDARD, 10, 25,
            wind_speed=3, inertia_weight=1.0),
    _preset("sunshower", "Sunshower", "fa-cloud-sun-rain", "#FCEABB", CATEGORY_STANDARD, 15, 26,
            wind_speed=1, precip_type="rain", precip_intensity=0.3),
    _preset("snow", "Snow", "fa-snowflake", "#FFFFFF", CATEGORY_STANDARD, -10, 2,
            env_base={"hue": 200, "saturation": 0.6}, wind_speed=1, precip_type="snow",
            precip_intensity=0.5, inertia_weight=1.3),
    _preset("sleet", "Sleet", "fa-cloud-rain", "#C0D8E8", CATEGORY_STANDARD, -2, 4, 0.05,
            env_base={"hue": 200, "saturation": 0.5}, wind_speed=2, precip_type="sleet",
            precip_intensity=0.5, inertia_weight=1.0),
    _preset("heat-wave", "Heat Wave", "fa-temperature-arrow-up", "#FF9944", CATEGORY_STANDARD, 35, 48,
            env_base={"hue": 30, "saturation": 0.4}, inertia_weight=1.5),
]

SEVERE_PRESETS: List[Dict[str, Any]] = [
    _preset("thunderstorm", "Thunderstorm", "fa-cloud-bolt", "#3D3560", CATEGORY_SEVERE, 15, 28, 0.1,
            env_base={"hue": 220, "saturation": 0.4}, wind_speed=4, wind_forced=True,
            precip_type="rain", precip_intensity=0.9, inertia_weight=0.3),
    _preset("blizzard", "Blizzard", "fa-snowflake", "#C8DCE8", CATEGORY_SEVERE, -20, -5, 0.15,
            env_base={"hue": 200, "saturation": 0.3}, env_dark={"hue": 210, "saturation": None},
            wind_speed=5, wind_forced=True, precip_type="snow", precip_intensity=1.0, inertia_weight=0.5),
    _preset("hail", "Hail", "fa-cloud-meatball", "#D1EFFF", CATEGORY_SEVERE, 5, 18, 0.05,
            env_base={"hue": None, "saturation": 0.5}, wind_speed=3, precip_type="hail",
            precip_intensity=0.7, inertia_weight=0.3),
    _preset("tornado", "Tornado", "fa-tornado", "#4A5A3A", CATEGORY_SEVERE, 18, 35, 0.15,
            env_base={"hue": 100, "saturation": 0.4}, wind_speed=5, wind_forced=True,
            precip_type="rain", precip_intensity=0.8),
    _preset("hurricane", "Hurricane", "fa-hurricane", "#445566", CATEGORY_SEVERE, 22, 35, 0.15,
            env_base={"hue": None, "saturation": 0.3}, wind_speed=5, wind_forced=True,
            precip_type="rain", precip_intensity=1.0),
    _preset("ice-storm", "Ice Storm", "fa-icicles", "#A0C8E0", CATEGORY_SEVERE, -10, 0, 0.1,
            env_base={"hue": 200, "saturation": 0.5}, env_dark={"hue": 210, "saturation": 0.4},
            wind_speed=4, wind_forced=True, precip_type="hail", precip_intensity=0.8, inertia_weight=0.3),
    _preset("monsoon", "Monsoon", "fa-cloud-showers-water", "#3A6080", CATEGORY_SEVERE, 22, 35, 0.1,
            env_base={"hue": None, "saturation": 0.4}, wind_speed=4, wind_forced=True,
            precip_type="rain", precip_intensity=1.0, inertia_weight=0.5),
]

ENVIRONMENTAL_PRESETS: List[Dict[str, Any]] = [
    _preset("ashfall", "Ashfall", "fa-volcano", "#8B5A30", CATEGORY_ENVIRONMENTAL, 15, 40, 0.1,
            env_base={"hue": 30, "saturation": 0.4}, wind_speed=1, inertia_weight=0.5),
    _preset("sandstorm", "Sandstorm", "fa-wind", "#C49A44", CATEGORY_ENVIRONMENTAL, 25, 45, 0.1,
            env_base={"hue": 35, "saturation": 0.6}, wind_speed=4, inertia_weight=0.3),
    _preset("luminous-sky", "Luminous Sky", "fa-star", "#2E8B57", CATEGORY_ENVIRONMENTAL, -5, 10, -0.1,
            env_dark={"hue": 280, "saturation": 0.8}),
    _preset("sakura-bloom", "Sakura Bloom", "fa-spa", "#FFB7C5", CATEGORY_ENVIRONMENTAL, 18, 32,
            wind_speed=1),
    _preset("autumn-leaves", "Autumn Leaves", "fa-leaf", "#CC7733", CATEGORY_ENVIRONMENTAL, 5, 18,
            env_base={"hue": 30, "saturation": 0.6}, wind_speed=1),
    _preset("rolling-fog", "Rolling Fog", "fa-smog", "#D0D0D0", CATEGORY_ENVIRONMENTAL, 2, 12, 0.05,
            env_base={"hue": None, "saturation": 0.2}, inertia_weight=1.5),
    _preset("wildfire-smoke", "Wildfire Smoke", "fa-fire", "#8B6040", CATEGORY_ENVIRONMENTAL, 20, 40, 0.1,
            env_base={"hue": 25, "saturation": 0.5}, wind_speed=1, inertia_weight=0.5),
    _preset("dust-devil", "Dust Devil", "fa-wind", "#C8A060", CATEGORY_ENVIRONMENTAL, 28, 45, 0.1,
            env_base={"hue": 35, "saturation": 0.5}, wind_speed=3),
]

FANTASY_PRESETS: List[Dict[str, Any]] = [
    _preset("black-sun", "Black Sun", "fa-circle", "#1A0E22", CATEGORY_FANTASY, 5, 20, 0.3,
            env_base={"hue": 270, "saturation": 0.3}, env_dark={"hue": 280, "saturation": 0.4}, wind_speed=1),
    _preset("ley-surge", "Ley Surge", "fa-wand-sparkles", "#3A9BDC", CATEGORY_FANTASY, 10, 25, -0.1,
            env_base={"hue": 180, "saturation": 0.9}, env_dark={"hue": 200, "saturation": 0.8}, wind_speed=2),
    _preset("aether-haze", "Aether Haze", "fa-smog", "#7B3F96", CATEGORY_FANTASY, 12, 22, 0.15,
            env_base={"hue": 280, "saturation": 0.6}, env_dark={"hue": 270, "saturation": 0.7}),
    _preset("nullfront", "Nullfront", "fa-ban", "#2A2030", CATEGORY_FANTASY, 0, 15, 0.15,
            env_base={"hue": None, "saturation": 0.1}, env_dark={"hue": None, "saturation": 0.1}),
    _preset("permafrost-surge", "Permafrost Surge", "fa-icicles", "#A8D8EA", CATEGORY_FANTASY, -30, -10, 0.1,
            env_base={"hue": 190, "saturation": 0.7}, env_dark={"hue": 200, "saturation": 0.6},
            wind_speed=3, precip_type="snow", precip_intensity=0.4),
    _preset("gravewind", "Gravewind", "fa-ghost", "#3A5040", CATEGORY_FANTASY, 5, 18, 0.15,
            env_base={"hue": 250, "saturation": 0.5}, env_dark={"hue": 260, "saturation": 0.6}, wind_speed=3),
    _preset("veilfall", "Veilfall", "fa-droplet", "#6A5A8E", CATEGORY_FANTASY, 8, 20, 0.1,
            env_base={"hue": 180, "saturation": 0.4}, wind_speed=1, precip_type="rain", precip_intensity=0.3),
    _preset("arcane-winds", "Arcane Winds", "fa-hat-wizard", "#8A40B0", CATEGORY_FANTASY, 15, 28, -0.05,
            env_base={"hue": 50, "saturation": 0.8}, wind_speed=2),
    _preset("acid-rain", "Acid Rain", "fa-flask", "#55BB33", CATEGORY_FANTASY, 10, 25, 0.05,
            env_base={"hue": 100, "saturation": 0.6}, wind_speed=1, precip_type="rain", precip_intensity=0.6),
    _preset("blood-rain", "Blood Rain", "fa-droplet", "#880022", CATEGORY_FANTASY, 12, 28, 0.1,
            env_base={"hue": 0, "saturation": 0.7}, env_dark={"hue": 350, "saturation": 0.6},
            wind_speed=1, precip_type="rain", precip_intensity=0.7),
    _preset("meteor-shower", "Meteor Shower", "fa-meteor", "#FF6622", CATEGORY_FANTASY, 10, 30, -0.1,
            env_dark={"hue": 20, "saturation": 0.7}),
    _preset("spore-cloud", "Spore Cloud", "fa-disease", "#88AA44", CATEGORY_FANTASY, 15, 28, 0.15,
            env_base={"hue": 80, "saturation": 0.5}, env_dark={"hue": 90, "saturation": 0.4}),
    _preset("divine-light", "Divine Light", "fa-sun", "#FFD700", CATEGORY_FANTASY, 18, 30, -0.2,
            env_base={"hue": 45, "saturation": 0.9}),
    _preset("plague-miasma", "Plague Miasma", "fa-biohazard", "#556B2F", CATEGORY_FANTASY, 10, 22, 0.25,
            env_base={"hue": 80, "saturation": 0.4}, env_dark={"hue": 90, "saturation": 0.3}),
]

ALL_PRESETS: List[Dict[str, Any]] = STANDARD_PRESETS + SEVERE_PRESETS + ENVIRONMENTAL_PRESETS + FANTASY_PRESETS
BUILTIN_PRESET_IDS = frozenset(p["id"] for p in ALL_PRESETS)
