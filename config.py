# config.py
"""
Server configuration settings.
"""

# --- Environment Loop & Save ---
TICKER_INTERVAL_SECONDS = 1.0     # How often the main loop runs.
AUTOSAVE_INTERVAL_SECONDS = 300   # 300 seconds = 5 minutes

# --- Multi-client ---
# Only the designated writer computes and writes shared weather/darkness state.
PRIMARY_WRITER_ID = "primary-gm"
WRITER_ID = "primary-gm"

# --- Weather defaults ---
DEFAULT_CLIMATE_ZONE = "temperate"
DEFAULT_WEATHER_INERTIA = 0.3     # 0-1, bias toward repeating yesterday's category
DEFAULT_FORECAST_ACCURACY = 70    # 0-100, chance a planned forecast is honoured
DEFAULT_FORECAST_DAYS = 7
DEFAULT_HISTORY_DAYS = 365        # 0 disables history recording

# --- Darkness ---
DEFAULT_BRIGHTNESS_MULTIPLIER = 1.0
MOON_BRIGHTNESS_MAX = 0.15        # Default per-moon brightness contribution
MAX_MOON_REDUCTION = 0.3          # Cap on total darkness removed by moonlight

# Animated scene transitions (milliseconds)
TRANSITION_MIN_MS = 500
TRANSITION_MAX_MS = 3000
TRANSITION_MS_PER_REAL_SECOND = 800
