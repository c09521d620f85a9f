# almanac/generator.py
"""
Procedural weather generation from climate zones and seasons.

Weather is drawn by weighted random selection over a zone's enabled presets
for the current season bucket. Continuity comes from two knobs:

* inertia (0-1) moves probability mass toward the previous day's category;
* forecast accuracy (0-100) is the chance that a planned forecast entry for
  the target date is honoured verbatim instead of being redrawn.
"""
import logging
import random
from typing import Dict, Any, List, Optional, Tuple, Union, TYPE_CHECKING

from .climate import normalize_season_name, presets_for_season, temperature_range
from .definitions import weather as weather_defs
from .models import (ClimateZone, ForecastEntry, ForecastPreset, Precipitation, WeatherPreset,
                     WeatherState, Wind, ZonePresetConfig)
from .presets import WeatherPresetRegistry
from . import utils

if TYPE_CHECKING:
    from .calendar import GameCalendar

log = logging.getLogger(__name__)

FALLBACK_PRESET_ID = "clear"

Weights = List[Tuple[str, float]]


def date_seed(year: int, month: int, day: int) -> int:
    return year * 10000 + month * 100 + day


def weighted_select(weights: Weights, rng: random.Random) -> Optional[str]:
    """
    Picks an id with probability proportional to its weight.
    Ties go to the first entry encountered; a zero total picks the first entry.
    """
    if not weights:
        return None
    total = sum(w for _, w in weights)
    if total <= 0:
        return weights[0][0]
    roll = rng.random() * total
    for entry_id, weight in weights:
        roll -= weight
        if roll <= 0:
            return entry_id
    return weights[-1][0]


def apply_temperature_modifier(base: float, modifier: Union[int, float, str, None]) -> float:
    """
    Numbers are absolute. Strings ending in '+' or '-' are relative to base
    ('5+' adds 5, '3-' subtracts 3); other numeric strings are absolute.
    Anything unparseable leaves base unchanged.
    """
    if modifier is None:
        return base
    if isinstance(modifier, (int, float)):
        return base if modifier != modifier else modifier
    text = str(modifier).strip()
    try:
        if text.endswith("+"):
            return base + float(text[:-1])
        if text.endswith("-"):
            return base - float(text[:-1])
        return float(text)
    except ValueError:
        log.warning("Ignoring unparseable temperature modifier %r.", modifier)
        return base


class WeatherGenerator:
    """Draws weather states and forecast plans for climate zones."""

    def __init__(self, registry: WeatherPresetRegistry, rng: Optional[random.Random] = None):
        self.registry = registry
        self.rng = rng or random.Random()

    # --- Weight shaping ---
    def candidate_weights(self, zone: Optional[ClimateZone], season: Optional[str]) -> Weights:
        """Enabled, known presets for the season bucket as (id, chance) pairs."""
        if zone is None:
            return [(FALLBACK_PRESET_ID, 1.0)]
        weights = [
            (entry.id, entry.chance)
            for entry in presets_for_season(zone, season)
            if entry.enabled and entry.chance > 0 and self.registry.get(entry.id)
        ]
        return weights or [(FALLBACK_PRESET_ID, 1.0)]

    def apply_inertia(self, weights: Weights, previous_id: Optional[str], inertia: float) -> Weights:
        """
        Boosts entries sharing the previous preset's category by the mass removed
        from every other entry. Total weight is preserved.
        """
        previous = self.registry.get(previous_id)
        if previous is None or inertia <= 0:
            return weights
        effective = min(1.0, inertia * previous.inertia_weight)
        if effective <= 0:
            return weights

        categories = {entry_id: getattr(self.registry.get(entry_id), "category", None) for entry_id, _ in weights}
        matching_total = sum(w for entry_id, w in weights if categories[entry_id] == previous.category)
        other_total = sum(w for entry_id, w in weights if categories[entry_id] != previous.category)
        if matching_total <= 0 or other_total <= 0:
            return weights

        boost = other_total * effective
        adjusted = []
        for entry_id, weight in weights:
            if categories[entry_id] == previous.category:
                adjusted.append((entry_id, weight + boost * weight / matching_total))
            else:
                adjusted.append((entry_id, weight * (1 - effective)))
        return adjusted

    # --- Single draws ---
    def draw_temperature(self, preset: WeatherPreset, zone: Optional[ClimateZone], season: Optional[str],
                         rng: Optional[random.Random] = None) -> float:
        """
        Uniform draw within the zone's seasonal range narrowed by the preset's clamps
        (zone entry clamps win over the preset's own). Disjoint ranges fall back to the
        zone range.
        """
        rng = rng or self.rng
        zone_range = temperature_range(zone, season)
        low, high = zone_range.min, zone_range.max

        entry = self._zone_entry(zone, preset.id, season)
        clamp_min = entry.temp_min if entry and entry.temp_min is not None else preset.temp_min
        clamp_max = entry.temp_max if entry and entry.temp_max is not None else preset.temp_max
        if clamp_min is not None:
            low = max(low, clamp_min)
        if clamp_max is not None:
            high = min(high, clamp_max)
        if low > high:
            low, high = zone_range.min, zone_range.max
        return round(low + rng.random() * (high - low))

    def draw_wind(self, preset: WeatherPreset, rng: Optional[random.Random] = None) -> Wind:
        rng = rng or self.rng
        wind = preset.wind.model_copy()
        if wind.speed > 0 and wind.direction is None:
            wind.direction = rng.choice(list(weather_defs.COMPASS_DIRECTIONS))
        return wind

    def draw_precipitation(self, preset: WeatherPreset) -> Precipitation:
        precip = preset.precipitation
        if not precip.type:
            return Precipitation()
        return Precipitation(type=precip.type, intensity=utils.clamp(precip.intensity, 0.1, 1.0))

    # --- Generation ---
    def generate(self, zone: Optional[ClimateZone], season: Optional[str] = None,
                 previous: Optional[WeatherState] = None, inertia: float = 0.0,
                 forecast: Optional[ForecastEntry] = None, accuracy: float = 100.0,
                 options: Optional[Dict[str, Any]] = None, rng: Optional[random.Random] = None) -> WeatherState:
        """
        Produces a new weather state for the zone and season.

        `options` may carry `temperature`, `wind` and `precipitation` overrides
        which replace the generated values verbatim.
        """
        rng = rng or self.rng
        options = options or {}

        state = None
        if forecast is not None and rng.random() * 100 < accuracy:
            state = self.state_from_forecast(forecast, zone)
        if state is None:
            state = self._draw(zone, season, previous, inertia, rng)

        if "temperature" in options and options["temperature"] is not None:
            state.temperature = apply_temperature_modifier(state.temperature, options["temperature"])
        if options.get("wind") is not None:
            state.wind = Wind.model_validate(options["wind"])
        if options.get("precipitation") is not None:
            state.precipitation = Precipitation.model_validate(options["precipitation"])
        return state

    def _draw(self, zone: Optional[ClimateZone], season: Optional[str], previous: Optional[WeatherState],
              inertia: float, rng: random.Random) -> WeatherState:
        if previous is not None and previous.season and season \
                and normalize_season_name(previous.season) != normalize_season_name(season):
            inertia /= 2

        weights = self.candidate_weights(zone, season)
        if previous is not None:
            weights = self.apply_inertia(weights, previous.id, inertia)
        preset_id = weighted_select(weights, rng)
        preset = self.registry.get(preset_id) or self.registry.get(FALLBACK_PRESET_ID)

        return self.build_state(
            preset,
            temperature=self.draw_temperature(preset, zone, season, rng),
            wind=self.draw_wind(preset, rng),
            precipitation=self.draw_precipitation(preset),
            season=season,
            generated=True,
            zone=zone,
        )

    def build_state(self, preset: WeatherPreset, temperature: Optional[float] = None,
                    wind: Optional[Wind] = None, precipitation: Optional[Precipitation] = None,
                    season: Optional[str] = None, generated: bool = False,
                    zone: Optional[ClimateZone] = None) -> WeatherState:
        return WeatherState(
            id=preset.id,
            label=self.registry.display_label(preset, zone.id if zone else None),
            description=preset.description,
            icon=preset.icon,
            color=preset.color,
            category=preset.category,
            temperature=temperature,
            wind=wind if wind is not None else preset.wind.model_copy(),
            precipitation=precipitation if precipitation is not None else preset.precipitation.model_copy(),
            darkness_penalty=preset.darkness_penalty,
            environment_base=preset.environment_base,
            environment_dark=preset.environment_dark,
            fx_preset=preset.fx_preset,
            season=season,
            generated=generated,
            zone_id=zone.id if zone else None,
        )

    def state_from_forecast(self, entry: ForecastEntry, zone: Optional[ClimateZone]) -> Optional[WeatherState]:
        preset = self.registry.get(entry.preset.id)
        if preset is None:
            log.warning("Forecast references unknown preset '%s'; redrawing.", entry.preset.id)
            return None
        return self.build_state(preset, temperature=entry.temperature, wind=entry.wind.model_copy(),
                                precipitation=entry.precipitation.model_copy(), season=entry.season,
                                generated=True, zone=zone)

    # --- Forecasting ---
    def plan_forecast(self, calendar: "GameCalendar", zone: Optional[ClimateZone],
                      start: Tuple[int, int, int], days: int,
                      previous: Optional[WeatherState] = None, inertia: float = 0.0,
                      rng: Optional[random.Random] = None) -> List[ForecastEntry]:
        """
        Plans `days` consecutive days starting at `start`, chaining each day's
        inertia from the day before and resolving the season per date.
        """
        rng = rng or self.rng
        entries = []
        for offset in range(max(0, days)):
            year, month, day = calendar.add_days(*start, offset)
            season = calendar.season_for_date(year, month, day)
            state = self._draw(zone, season, previous, inertia, rng)
            entries.append(self.forecast_entry(state, year, month, day))
            previous = state
        return entries

    @staticmethod
    def forecast_entry(state: WeatherState, year: int, month: int, day: int) -> ForecastEntry:
        return ForecastEntry(
            year=year, month=month, day=day,
            preset=ForecastPreset(id=state.id, label=state.label, icon=state.icon,
                                  color=state.color, category=state.category),
            temperature=state.temperature if state.temperature is not None else 0,
            season=state.season,
            wind=state.wind.model_copy(),
            precipitation=state.precipitation.model_copy(),
        )

    @staticmethod
    def _zone_entry(zone: Optional[ClimateZone], preset_id: str, season: Optional[str]) -> Optional[ZonePresetConfig]:
        if zone is None:
            return None
        for entry in presets_for_season(zone, season):
            if entry.id == preset_id:
                return entry
        return None
