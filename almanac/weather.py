# almanac/weather.py
"""
Weather manager: the public API for current weather, forecasts, history,
presets and climate zones. Owns persistence of all weather-related world
settings and announces weather changes to listeners.
"""
import logging
import random
from typing import Any, Callable, Dict, List, Optional, Tuple, TYPE_CHECKING

from pydantic import ValidationError

import config
from .climate import ClimateZoneCatalog
from .definitions import settings as setting_defs
from .definitions import weather as weather_defs
from .generator import WeatherGenerator, apply_temperature_modifier, date_seed
from .history import WeatherHistoryStore
from .models import (ClimateZone, ClimateZoneTemplate, ForecastEntry, HistoryEntry, Precipitation,
                     WeatherPreset, WeatherState, Wind)
from .presets import WeatherPresetRegistry
from . import utils

if TYPE_CHECKING:
    from .calendar import GameCalendar
    from .scene import Scene
    from .settings_store import WorldSettings

log = logging.getLogger(__name__)

WeatherListener = Callable[[Optional[WeatherState]], None]


class WeatherManager:
    def __init__(self, settings: "WorldSettings", calendar: "GameCalendar",
                 rng: Optional[random.Random] = None,
                 is_designated_writer: Optional[Callable[[], bool]] = None):
        self.settings = settings
        self.calendar = calendar
        self.catalog = ClimateZoneCatalog()
        self.registry = WeatherPresetRegistry()
        self.generator = WeatherGenerator(self.registry, rng)
        self.history = WeatherHistoryStore()
        self.is_designated_writer = is_designated_writer or (lambda: True)
        self._zones: Dict[str, ClimateZone] = {}
        self._listeners: List[WeatherListener] = []

    async def load(self):
        """Loads presets, history and zones from world settings. Seeds a default zone if none exist."""
        self.registry.load(self.settings.get(setting_defs.CUSTOM_WEATHER_PRESETS),
                           self.settings.get(setting_defs.WEATHER_PRESET_ALIASES))
        self.history.max_days = int(self.settings.get(setting_defs.WEATHER_HISTORY_DAYS))
        self.history.load(self.settings.get(setting_defs.WEATHER_HISTORY))

        self._zones = {}
        for data in self.settings.get(setting_defs.CLIMATE_ZONES) or []:
            try:
                zone = ClimateZone.model_validate(data)
            except ValidationError as e:
                log.warning("Skipping malformed climate zone %r: %s", data.get("id"), e)
                continue
            self._zones[zone.id] = zone

        if not self._zones and self.is_designated_writer():
            zone = await self.add_zone_from_template(config.DEFAULT_CLIMATE_ZONE)
            if zone:
                await self.set_active_zone(zone.id)
        log.info("Weather manager loaded: %d zone(s), %d custom preset(s), %d day(s) of history.",
                 len(self._zones), len(self.registry.list_custom()), len(self.history))

    def add_listener(self, listener: WeatherListener):
        self._listeners.append(listener)

    def _announce(self, state: Optional[WeatherState]):
        for listener in self._listeners:
            try:
                listener(state)
            except Exception:
                log.exception("Weather change listener %r failed.", listener)

    # --- Climate zones ---
    def get_climate_zone_templates(self) -> List[ClimateZoneTemplate]:
        return self.catalog.list_templates()

    def get_calendar_zones(self) -> List[ClimateZone]:
        return [zone.model_copy(deep=True) for zone in self._zones.values()]

    def get_zone(self, zone_id: Optional[str]) -> Optional[ClimateZone]:
        zone = self._zones.get(zone_id) if zone_id else None
        return zone.model_copy(deep=True) if zone else None

    def get_active_zone(self, scene: Optional["Scene"] = None, zone_id: Optional[str] = None) -> Optional[ClimateZone]:
        """
        Resolution order: explicit id, scene override, world active zone,
        the default climate, then the first defined zone.
        A scene explicitly set to no zone resolves to None.
        """
        if not self._zones:
            return None
        if zone_id:
            return self.get_zone(zone_id)
        if scene is not None:
            override = scene.get_flag(setting_defs.SCENE_CLIMATE_ZONE_OVERRIDE)
            if override == setting_defs.NO_ZONE:
                return None
            if override and override in self._zones:
                return self.get_zone(override)
        active_id = self.settings.get(setting_defs.ACTIVE_ZONE)
        if active_id in self._zones:
            return self.get_zone(active_id)
        if config.DEFAULT_CLIMATE_ZONE in self._zones:
            return self.get_zone(config.DEFAULT_CLIMATE_ZONE)
        return self.get_zone(next(iter(self._zones)))

    async def add_zone_from_template(self, template_id: str, zone_id: Optional[str] = None) -> Optional[ClimateZone]:
        zone = self.catalog.instantiate(template_id, self.calendar.season_names, zone_id=zone_id)
        if zone is None:
            return None
        if zone.id in self._zones:
            log.warning("Climate zone '%s' already exists.", zone.id)
            return None
        self._zones[zone.id] = zone
        await self._save_zones()
        log.info("Climate zone '%s' created from template '%s'.", zone.id, template_id)
        return zone.model_copy(deep=True)

    async def save_zone(self, zone: ClimateZone):
        """Adds or replaces a zone as authored in a zone editor."""
        self._zones[zone.id] = zone.model_copy(deep=True)
        await self._save_zones()

    async def remove_zone(self, zone_id: str) -> bool:
        if self._zones.pop(zone_id, None) is None:
            return False
        await self._save_zones()
        if self.settings.get(setting_defs.ACTIVE_ZONE) == zone_id:
            await self.settings.set(setting_defs.ACTIVE_ZONE, None)
        return True

    async def set_active_zone(self, zone_id: str) -> bool:
        if zone_id not in self._zones:
            log.warning("Cannot activate unknown climate zone '%s'.", zone_id)
            return False
        await self.settings.set(setting_defs.ACTIVE_ZONE, zone_id)
        return True

    async def set_scene_zone_override(self, scene: "Scene", zone_id: Optional[str]) -> bool:
        """Pins a scene to a zone. None pins it to no zone at all."""
        if zone_id is None:
            await scene.set_flag(setting_defs.SCENE_CLIMATE_ZONE_OVERRIDE, setting_defs.NO_ZONE)
            return True
        if zone_id not in self._zones:
            log.warning("Cannot override scene %s with unknown zone '%s'.", scene.id, zone_id)
            return False
        await scene.set_flag(setting_defs.SCENE_CLIMATE_ZONE_OVERRIDE, zone_id)
        return True

    async def clear_scene_zone_override(self, scene: "Scene"):
        await scene.unset_flag(setting_defs.SCENE_CLIMATE_ZONE_OVERRIDE)

    async def _save_zones(self):
        await self.settings.set(setting_defs.CLIMATE_ZONES, [z.model_dump() for z in self._zones.values()])

    # --- Current weather ---
    def get_current_weather(self) -> Optional[WeatherState]:
        data = self.settings.get(setting_defs.CURRENT_WEATHER)
        if not data:
            return None
        try:
            return WeatherState.model_validate(data)
        except ValidationError as e:
            log.warning("Stored current weather is malformed; treating as none: %s", e)
            return None

    def get_temperature(self) -> Optional[float]:
        weather = self.get_current_weather()
        return weather.temperature if weather else None

    async def generate_weather(self, options: Optional[Dict[str, Any]] = None,
                               zone_id: Optional[str] = None) -> Optional[WeatherState]:
        """Draws today's weather, honouring a planned forecast entry per forecast accuracy."""
        if not self.is_designated_writer():
            log.warning("generate_weather called on a non-writer client; ignoring.")
            return None
        zone = self.get_active_zone(zone_id=zone_id)
        today = self.calendar.today()
        planned = self._planned_entry(today, zone)
        state = self.generator.generate(
            zone,
            season=self.calendar.current_season(),
            previous=self.get_current_weather(),
            inertia=float(self.settings.get(setting_defs.WEATHER_INERTIA)),
            forecast=planned,
            accuracy=float(self.settings.get(setting_defs.FORECAST_ACCURACY)),
            options=options,
        )
        await self._consume_forecast(today)
        await self._save_weather(state)
        log.info("Generated weather for %d-%d-%d: %s, %s.", *today, state.id,
                 self.format_temperature(state.temperature))
        return state

    async def set_weather(self, preset_id: str,
                          overrides: Optional[Dict[str, Any]] = None) -> Optional[WeatherState]:
        """
        Sets weather from a preset. Unknown ids leave the current weather unchanged.

        `overrides` may carry `temperature`, `wind` and `precipitation`, which
        win over the drawn values.
        """
        if not self.is_designated_writer():
            return None
        preset = self.registry.get(preset_id)
        if preset is None:
            log.warning("set_weather: unknown weather preset '%s'.", preset_id)
            return None
        overrides = overrides or {}
        wind = overrides.get("wind")
        precipitation = overrides.get("precipitation")
        zone = self.get_active_zone()
        season = self.calendar.current_season()
        drawn = self.generator.draw_temperature(preset, zone, season)
        state = self.generator.build_state(
            preset,
            temperature=apply_temperature_modifier(drawn, overrides.get("temperature")),
            wind=Wind.model_validate(wind) if wind is not None else self.generator.draw_wind(preset),
            precipitation=(Precipitation.model_validate(precipitation) if precipitation is not None
                           else self.generator.draw_precipitation(preset)),
            season=season,
            zone=zone,
        )
        await self._override_forecast()
        await self._save_weather(state)
        return state

    async def set_custom_weather(self, definition: Dict[str, Any]) -> Optional[WeatherState]:
        """Sets one-off weather that is not backed by any preset."""
        if not self.is_designated_writer():
            return None
        data = {**definition, "id": weather_defs.CUSTOM_WEATHER_ID, "category": weather_defs.CATEGORY_CUSTOM}
        data.setdefault("label", "Custom")
        data["season"] = self.calendar.current_season()
        zone = self.get_active_zone()
        data.setdefault("zone_id", zone.id if zone else None)
        try:
            state = WeatherState.model_validate(data)
        except ValidationError as e:
            log.warning("Custom weather had invalid fields; keeping label only: %s", e)
            state = WeatherState(id=weather_defs.CUSTOM_WEATHER_ID, label=str(data["label"]),
                                 category=weather_defs.CATEGORY_CUSTOM, season=data["season"],
                                 zone_id=data["zone_id"])
        await self._override_forecast()
        await self._save_weather(state)
        return state

    async def clear_weather(self):
        if not self.is_designated_writer():
            return
        await self.settings.set(setting_defs.CURRENT_WEATHER, None)
        self._announce(None)

    async def _save_weather(self, state: WeatherState):
        state.set_at = self.calendar.world_minutes
        await self.settings.set(setting_defs.CURRENT_WEATHER, state.model_dump())
        self.history.max_days = int(self.settings.get(setting_defs.WEATHER_HISTORY_DAYS))
        if self.history.record(*self.calendar.today(), state):
            await self.settings.set(setting_defs.WEATHER_HISTORY, self.history.to_data())
        self._announce(state)

    # --- Day changes ---
    async def on_day_change(self, previous_day: Tuple[int, int, int]):
        """Generates the new day's weather, backfilling history for any skipped days."""
        if not self.is_designated_writer() or not self.settings.get(setting_defs.AUTO_GENERATE_WEATHER):
            return
        gap = self.calendar.days_between(previous_day, self.calendar.today())
        if gap > 1:
            await self._backfill_history(previous_day, gap - 1)
        await self.generate_weather()

    async def _backfill_history(self, previous_day: Tuple[int, int, int], skipped: int):
        self.history.max_days = int(self.settings.get(setting_defs.WEATHER_HISTORY_DAYS))
        if self.history.max_days <= 0:
            return
        skipped = min(skipped, self.history.max_days)
        start = self.calendar.add_days(*self.calendar.today(), -skipped)
        zone = self.get_active_zone()
        previous = self.get_current_weather()
        inertia = float(self.settings.get(setting_defs.WEATHER_INERTIA))
        for offset in range(skipped):
            year, month, day = self.calendar.add_days(*start, offset)
            state = self.generator.generate(zone, season=self.calendar.season_for_date(year, month, day),
                                            previous=previous, inertia=inertia,
                                            rng=random.Random(date_seed(year, month, day)))
            self.history.record(year, month, day, state)
            previous = state
        # The last backfilled day becomes "yesterday" for inertia purposes.
        if previous is not None:
            await self.settings.set(setting_defs.CURRENT_WEATHER, previous.model_dump())
        await self.settings.set(setting_defs.WEATHER_HISTORY, self.history.to_data())
        log.info("Backfilled %d day(s) of weather history after a time jump from %d-%d-%d.",
                 skipped, *previous_day)

    # --- Forecast ---
    def _load_plan(self) -> Tuple[Optional[str], List[ForecastEntry]]:
        plan = self.settings.get(setting_defs.FORECAST_PLAN) or {}
        entries = []
        for data in plan.get("entries", []):
            try:
                entries.append(ForecastEntry.model_validate(data))
            except ValidationError:
                log.warning("Dropping malformed forecast entry %r.", data)
        return plan.get("zone_id"), entries

    async def _save_plan(self, zone_id: Optional[str], entries: List[ForecastEntry]):
        await self.settings.set(setting_defs.FORECAST_PLAN,
                                {"zone_id": zone_id, "entries": [e.model_dump() for e in entries]})

    def _planned_entry(self, day: Tuple[int, int, int], zone: Optional[ClimateZone]) -> Optional[ForecastEntry]:
        zone_id, entries = self._load_plan()
        if zone_id != (zone.id if zone else None):
            return None
        for entry in entries:
            if entry.same_date(*day):
                return entry
        return None

    async def _consume_forecast(self, day: Tuple[int, int, int]):
        """Drops plan entries for `day` and anything before it."""
        zone_id, entries = self._load_plan()
        today = self.calendar.absolute_day(*day)
        remaining = [e for e in entries if self.calendar.absolute_day(e.year, e.month, e.day) > today]
        if len(remaining) != len(entries):
            await self._save_plan(zone_id, remaining)

    async def _override_forecast(self):
        if self.settings.get(setting_defs.CLEAR_FORECAST_ON_OVERRIDE):
            await self._consume_forecast(self.calendar.today())

    async def get_weather_forecast(self, days: Optional[int] = None) -> List[ForecastEntry]:
        """
        Planned weather for the coming days, starting tomorrow. The plan is
        extended (and persisted) as needed; existing entries are kept stable.
        """
        horizon = int(self.settings.get(setting_defs.FORECAST_DAYS))
        count = min(days, horizon) if days is not None else horizon
        if count <= 0:
            return []

        zone = self.get_active_zone()
        zone_id = zone.id if zone else None
        tomorrow = self.calendar.add_days(*self.calendar.today(), 1)
        plan_zone, entries = self._load_plan()

        # Keep the plan only if it belongs to this zone and runs contiguously from tomorrow.
        kept: List[ForecastEntry] = []
        if plan_zone == zone_id:
            expected = tomorrow
            for entry in entries:
                if not entry.same_date(*expected):
                    break
                kept.append(entry)
                expected = self.calendar.add_days(*expected, 1)

        if len(kept) < count:
            if kept:
                last = kept[-1]
                start = self.calendar.add_days(last.year, last.month, last.day, 1)
                previous = self.generator.state_from_forecast(last, zone)
            else:
                start, previous = tomorrow, self.get_current_weather()
            kept += self.generator.plan_forecast(
                self.calendar, zone, start, count - len(kept), previous=previous,
                inertia=float(self.settings.get(setting_defs.WEATHER_INERTIA)))
            if self.is_designated_writer():
                await self._save_plan(zone_id, kept)
        return kept[:count]

    # --- History ---
    def get_weather_history(self, year: Optional[int] = None, month: Optional[int] = None) -> List[HistoryEntry]:
        return self.history.query(year=year, month=month)

    def get_weather_for_date(self, year: int, month: int, day: int) -> Optional[HistoryEntry]:
        return self.history.get_for_date(year, month, day)

    # --- Presets ---
    def get_preset(self, preset_id: str) -> Optional[WeatherPreset]:
        return self.registry.get(preset_id)

    def get_weather_presets(self) -> List[WeatherPreset]:
        return self.registry.list_all()

    async def add_weather_preset(self, preset: Dict[str, Any]) -> Optional[WeatherPreset]:
        added = self.registry.add(preset)
        if added:
            await self._save_custom_presets()
        return added

    async def update_weather_preset(self, preset_id: str, updates: Dict[str, Any]) -> Optional[WeatherPreset]:
        updated = self.registry.update(preset_id, updates)
        if updated:
            await self._save_custom_presets()
        return updated

    async def remove_weather_preset(self, preset_id: str) -> bool:
        removed = self.registry.remove(preset_id)
        if removed:
            await self._save_custom_presets()
        return removed

    async def set_preset_alias(self, preset_id: str, alias: Optional[str], zone_id: Optional[str] = None):
        self.registry.set_alias(preset_id, alias, zone_id)
        await self.settings.set(setting_defs.WEATHER_PRESET_ALIASES, self.registry.aliases_data())

    async def _save_custom_presets(self):
        await self.settings.set(setting_defs.CUSTOM_WEATHER_PRESETS, self.registry.custom_presets_data())

    # --- Formatting ---
    def format_temperature(self, value: Optional[float]) -> str:
        return utils.format_temperature(value, self.settings.get(setting_defs.TEMPERATURE_UNIT))

    def format_wind_speed(self, speed: int) -> str:
        return utils.format_wind_speed(speed, self.settings.get(setting_defs.WIND_UNIT))
