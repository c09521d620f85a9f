# almanac/definitions/climate.py
"""
Climate zone templates: seasonal temperature ranges and weather weight tables.

Temperatures are keyed by calendar season name (plus a `_default` fallback).
Weather weights are keyed by canonical season bucket (see
`almanac.climate.normalize_season_name`) plus a `default` bucket.
"""

# Climate template ids
CLIMATE_ARCTIC = "arctic"
CLIMATE_SUBARCTIC = "subarctic"
CLIMATE_TEMPERATE = "temperate"
CLIMATE_SUBTROPICAL = "subtropical"
CLIMATE_TROPICAL = "tropical"
CLIMATE_ARID = "arid"
CLIMATE_POLAR = "polar"

# Range used when a template carries no `_default` temperature entry.
FALLBACK_TEMPERATURE_RANGE = {"min": 10, "max": 22}

# Canonical season buckets, in lookup order. Each maps to the substrings
# that identify it inside a free-text season name.
SEASON_ALIASES = {
    "spring": ("spring", "vernal"),
    "summer": ("summer", "estival"),
    "autumn": ("autumn", "fall", "autumnal"),
    "winter": ("winter", "hibernal"),
}
DEFAULT_SEASON_BUCKET = "default"

CLIMATE_ZONE_TEMPLATES = {
    CLIMATE_ARCTIC: {
        "id": CLIMATE_ARCTIC,
        "name": "Arctic",
        "description": "Frozen wastes with brief, cold summers and brutal winters.",
        "temperatures": {
            "Spring": {"min": -15, "max": 0},
            "Summer": {"min": -5, "max": 8},
            "Autumn": {"min": -20, "max": -5},
            "Winter": {"min": -45, "max": -20},
            "_default": {"min": -25, "max": -5},
        },
        "weather": {
            "summer": {"clear": 3, "partly-cloudy": 3, "snow": 3, "blizzard": 2, "windy": 3, "fog": 1},
            "winter": {"blizzard": 6, "snow": 5, "overcast": 2, "windy": 4},
            "default": {"snow": 5, "blizzard": 4, "overcast": 3, "windy": 3, "clear": 1},
        },
    },
    CLIMATE_SUBARCTIC: {
        "id": CLIMATE_SUBARCTIC,
        "name": "Subarctic",
        "description": "Boreal forests and tundra edges with long winters.",
        "temperatures": {
            "Spring": {"min": -10, "max": 8},
            "Summer": {"min": 5, "max": 18},
            "Autumn": {"min": -5, "max": 10},
            "Winter": {"min": -35, "max": -10},
            "_default": {"min": -10, "max": 5},
        },
        "weather": {
            "summer": {"clear": 4, "partly-cloudy": 4, "rain": 3, "snow": 1, "mist": 2},
            "winter": {"snow": 6, "blizzard": 4, "overcast": 3, "windy": 3},
            "default": {"snow": 4, "cloudy": 3, "overcast": 3, "windy": 2, "clear": 2},
        },
    },
    CLIMATE_TEMPERATE: {
        "id": CLIMATE_TEMPERATE,
        "name": "Temperate",
        "description": "Four distinct seasons with mild summers and cool winters.",
        "temperatures": {
            "Spring": {"min": 8, "max": 18},
            "Summer": {"min": 18, "max": 30},
            "Autumn": {"min": 8, "max": 18},
            "Winter": {"min": -5, "max": 5},
            "_default": {"min": 8, "max": 20},
        },
        "weather": {
            "summer": {"clear": 6, "partly-cloudy": 4, "thunderstorm": 2, "rain": 2},
            "winter": {"snow": 5, "blizzard": 2, "fog": 2, "overcast": 3, "clear": 2},
            "spring": {"rain": 4, "drizzle": 3, "partly-cloudy": 3, "clear": 2, "mist": 2},
            "autumn": {"cloudy": 4, "rain": 3, "fog": 3, "partly-cloudy": 2, "windy": 2},
            "default": {"rain": 3, "cloudy": 3, "mist": 2, "drizzle": 2, "clear": 3},
        },
    },
    CLIMATE_SUBTROPICAL: {
        "id": CLIMATE_SUBTROPICAL,
        "name": "Subtropical",
        "description": "Hot, humid summers and mild winters.",
        "temperatures": {
            "Spring": {"min": 15, "max": 28},
            "Summer": {"min": 22, "max": 35},
            "Autumn": {"min": 15, "max": 28},
            "Winter": {"min": 5, "max": 17},
            "_default": {"min": 12, "max": 28},
        },
        "weather": {
            "summer": {"clear": 5, "partly-cloudy": 4, "rain": 5, "drizzle": 2, "thunderstorm": 3, "sunshower": 1},
            "winter": {"clear": 2, "cloudy": 4, "rain": 3, "mist": 2, "fog": 1},
            "default": {"clear": 4, "partly-cloudy": 5, "cloudy": 3, "rain": 2},
        },
    },
    CLIMATE_TROPICAL: {
        "id": CLIMATE_TROPICAL,
        "name": "Tropical",
        "description": "Warm all year with frequent rain.",
        "temperatures": {
            "Spring": {"min": 24, "max": 32},
            "Summer": {"min": 26, "max": 35},
            "Autumn": {"min": 24, "max": 32},
            "Winter": {"min": 22, "max": 30},
            "_default": {"min": 24, "max": 35},
        },
        "weather": {
            "default": {"clear": 8, "partly-cloudy": 5, "rain": 7, "thunderstorm": 3, "fog": 2, "sunshower": 1},
        },
    },
    CLIMATE_ARID: {
        "id": CLIMATE_ARID,
        "name": "Arid",
        "description": "Desert heat by day, little rain, occasional sandstorms.",
        "temperatures": {
            "Spring": {"min": 18, "max": 35},
            "Summer": {"min": 28, "max": 48},
            "Autumn": {"min": 18, "max": 35},
            "Winter": {"min": 5, "max": 22},
            "_default": {"min": 15, "max": 40},
        },
        "weather": {
            "summer": {"clear": 10, "partly-cloudy": 3, "sandstorm": 2, "windy": 1},
            "winter": {"clear": 6, "partly-cloudy": 4, "cloudy": 2, "drizzle": 1},
            "default": {"clear": 8, "partly-cloudy": 4, "sandstorm": 1, "windy": 1},
        },
    },
    CLIMATE_POLAR: {
        "id": CLIMATE_POLAR,
        "name": "Polar",
        "description": "Ice caps where even summer rarely thaws.",
        "temperatures": {
            "Spring": {"min": -20, "max": -5},
            "Summer": {"min": -5, "max": 10},
            "Autumn": {"min": -25, "max": -10},
            "Winter": {"min": -50, "max": -25},
            "_default": {"min": -30, "max": -10},
        },
        "weather": {
            "summer": {"clear": 4, "partly-cloudy": 3, "windy": 2, "mist": 1, "snow": 2},
            "winter": {"blizzard": 6, "snow": 5, "overcast": 2, "windy": 3},
            "default": {"snow": 4, "overcast": 3, "blizzard": 2, "windy": 2, "clear": 1},
        },
    },
}
