# almanac/definitions/settings.py
"""
World setting keys, their defaults, and per-scene flag names.
"""
import config

# --- Persisted weather state ---
CURRENT_WEATHER = "current_weather"
WEATHER_HISTORY = "weather_history"
FORECAST_PLAN = "forecast_plan"
CUSTOM_WEATHER_PRESETS = "custom_weather_presets"
WEATHER_PRESET_ALIASES = "weather_preset_aliases"
CLIMATE_ZONES = "climate_zones"
ACTIVE_ZONE = "active_zone"
WORLD_TIME = "world_time"

# --- Weather tuning ---
WEATHER_INERTIA = "weather_inertia"
FORECAST_ACCURACY = "forecast_accuracy"
FORECAST_DAYS = "forecast_days"
WEATHER_HISTORY_DAYS = "weather_history_days"
CLEAR_FORECAST_ON_OVERRIDE = "clear_forecast_on_override"
AUTO_GENERATE_WEATHER = "auto_generate_weather"
TEMPERATURE_UNIT = "temperature_unit"
WIND_UNIT = "wind_unit"

# --- Darkness / lighting ---
DARKNESS_SYNC = "darkness_sync"
DARKNESS_SYNC_ALL_SCENES = "darkness_sync_all_scenes"
DARKNESS_MOON_SYNC = "darkness_moon_sync"
DARKNESS_WEATHER_SYNC = "darkness_weather_sync"
COLOR_SHIFT_SYNC = "color_shift_sync"
DEFAULT_BRIGHTNESS_MULTIPLIER = "default_brightness_multiplier"
FX_INTEGRATION_ACTIVE = "fx_integration_active"

DEFAULTS = {
    CURRENT_WEATHER: None,
    WEATHER_HISTORY: {},
    FORECAST_PLAN: {},
    CUSTOM_WEATHER_PRESETS: [],
    WEATHER_PRESET_ALIASES: {},
    CLIMATE_ZONES: [],
    ACTIVE_ZONE: None,
    WORLD_TIME: None,
    WEATHER_INERTIA: config.DEFAULT_WEATHER_INERTIA,
    FORECAST_ACCURACY: config.DEFAULT_FORECAST_ACCURACY,
    FORECAST_DAYS: config.DEFAULT_FORECAST_DAYS,
    WEATHER_HISTORY_DAYS: config.DEFAULT_HISTORY_DAYS,
    CLEAR_FORECAST_ON_OVERRIDE: True,
    AUTO_GENERATE_WEATHER: True,
    TEMPERATURE_UNIT: "celsius",
    WIND_UNIT: "kph",
    DARKNESS_SYNC: True,
    DARKNESS_SYNC_ALL_SCENES: False,
    DARKNESS_MOON_SYNC: True,
    DARKNESS_WEATHER_SYNC: True,
    COLOR_SHIFT_SYNC: True,
    DEFAULT_BRIGHTNESS_MULTIPLIER: config.DEFAULT_BRIGHTNESS_MULTIPLIER,
    FX_INTEGRATION_ACTIVE: False,
}

# --- Scene flags ---
SCENE_DARKNESS_SYNC = "darkness_sync"          # "enabled" | "disabled" | "default" | bool
SCENE_BRIGHTNESS_MULTIPLIER = "brightness_multiplier"
SCENE_CLIMATE_ZONE_OVERRIDE = "climate_zone_override"
SCENE_WEATHER_FX_DISABLED = "weather_fx_disabled"

# Stored in SCENE_CLIMATE_ZONE_OVERRIDE to mean "this scene has no climate zone".
NO_ZONE = "none"
