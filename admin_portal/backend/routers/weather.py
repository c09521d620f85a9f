from fastapi import APIRouter, HTTPException
from typing import Optional

from almanac.definitions import settings as setting_defs
from almanac.history import WeatherHistoryStore
from almanac.models import ClimateZone, WeatherState
from almanac.presets import WeatherPresetRegistry
from ..database import db
from ..models.weather import WeatherSummary

router = APIRouter(prefix="/weather", tags=["weather"])

@router.get("/current", response_model=WeatherSummary)
async def get_current_weather():
    """Current weather with display strings in the world's configured units."""
    data = await db.get_setting(setting_defs.CURRENT_WEATHER)
    unit = await db.get_setting(setting_defs.TEMPERATURE_UNIT, "celsius")
    wind_unit = await db.get_setting(setting_defs.WIND_UNIT, "kph")
    state = WeatherState.model_validate(data) if data else None
    return WeatherSummary.from_state(state, unit, wind_unit)

@router.get("/history")
async def get_weather_history(year: Optional[int] = None, month: Optional[int] = None):
    """Recorded weather, oldest first, optionally filtered by year and month."""
    store = WeatherHistoryStore(await db.get_setting(setting_defs.WEATHER_HISTORY, {}))
    return [entry.model_dump() for entry in store.query(year=year, month=month)]

@router.get("/history/{year}/{month}/{day}")
async def get_weather_for_date(year: int, month: int, day: int):
    store = WeatherHistoryStore(await db.get_setting(setting_defs.WEATHER_HISTORY, {}))
    entry = store.get_for_date(year, month, day)
    if not entry:
        raise HTTPException(status_code=404, detail="No weather recorded for that date")
    return entry.model_dump()

@router.get("/forecast")
async def get_forecast_plan():
    """The persisted forecast plan as last extended by the environment service."""
    plan = await db.get_setting(setting_defs.FORECAST_PLAN, {})
    return plan.get("entries", [])

@router.get("/zones")
async def get_zones():
    zones = await db.get_setting(setting_defs.CLIMATE_ZONES, [])
    active = await db.get_setting(setting_defs.ACTIVE_ZONE)
    return {
        "active_zone": active,
        "zones": [ClimateZone.model_validate(z).model_dump() for z in zones],
    }

@router.get("/presets")
async def get_presets():
    """Built-in and custom presets as the service would resolve them."""
    registry = WeatherPresetRegistry(
        await db.get_setting(setting_defs.CUSTOM_WEATHER_PRESETS, []),
        await db.get_setting(setting_defs.WEATHER_PRESET_ALIASES, {}),
    )
    return [preset.model_dump() for preset in registry.list_all()]
