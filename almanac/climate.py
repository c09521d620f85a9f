# almanac/climate.py
"""
Climate zone catalog: read-only templates and their instantiation into world zones.
"""
import logging
from typing import Dict, List, Optional, Iterable

from .definitions import climate as climate_defs
from .definitions import weather as weather_defs
from .models import ClimateZone, ClimateZoneTemplate, TemperatureRange, ZonePresetConfig

log = logging.getLogger(__name__)


def normalize_season_name(season_name: Optional[str]) -> str:
    """
    Maps a free-text season name onto a canonical bucket
    ('spring', 'summer', 'autumn', 'winter'), or 'default' if nothing matches.
    """
    if not season_name:
        return climate_defs.DEFAULT_SEASON_BUCKET
    lower = season_name.lower()
    for bucket, needles in climate_defs.SEASON_ALIASES.items():
        if any(needle in lower for needle in needles):
            return bucket
    return climate_defs.DEFAULT_SEASON_BUCKET


def weights_to_presets(weights: Dict[str, float], preset_ids: Iterable[str]) -> List[ZonePresetConfig]:
    """
    Converts a {preset_id: weight} table into chance percentages over preset_ids.
    Enabled chances in the result sum to at most 100.
    """
    builtin = {p["id"]: p for p in weather_defs.ALL_PRESETS}
    total = sum(w for w in weights.values() if w > 0)
    entries = []
    for preset_id in preset_ids:
        weight = max(0.0, weights.get(preset_id, 0))
        chance = round(weight / total * 100, 2) if total > 0 else 0.0
        preset = builtin.get(preset_id, {})
        entries.append(ZonePresetConfig(
            id=preset_id,
            enabled=weight > 0,
            chance=chance,
            temp_min=preset.get("temp_min"),
            temp_max=preset.get("temp_max"),
        ))

    # Rounding can push the sum a hair over 100; take it back from the largest entry.
    excess = round(sum(e.chance for e in entries if e.enabled) - 100, 2)
    if excess > 0:
        largest = max(entries, key=lambda e: e.chance)
        largest.chance = round(largest.chance - excess, 2)
    return entries


def temperature_range(zone: Optional[ClimateZone], season_name: Optional[str]) -> TemperatureRange:
    """Resolves a zone's temperature range for a season, falling back to `_default`."""
    fallback = TemperatureRange(**climate_defs.FALLBACK_TEMPERATURE_RANGE)
    if zone is None:
        return fallback
    temps = zone.temperatures
    if season_name:
        found = temps.get(season_name) or temps.get(season_name.lower())
        if found:
            return found
        bucket = normalize_season_name(season_name)
        for name, value in temps.items():
            if name != "_default" and normalize_season_name(name) == bucket:
                return value
    return temps.get("_default") or fallback


def presets_for_season(zone: ClimateZone, season_name: Optional[str]) -> List[ZonePresetConfig]:
    """Returns the weighted preset bucket for a season, falling back to the default bucket."""
    bucket = normalize_season_name(season_name)
    return zone.season_presets.get(bucket) or zone.presets


class ClimateZoneCatalog:
    """Pure lookup over the built-in climate templates."""

    def __init__(self, templates: Optional[Dict[str, dict]] = None):
        source = climate_defs.CLIMATE_ZONE_TEMPLATES if templates is None else templates
        self._templates: Dict[str, ClimateZoneTemplate] = {
            template_id: ClimateZoneTemplate.model_validate(data) for template_id, data in source.items()
        }

    def get_template(self, template_id: str) -> Optional[ClimateZoneTemplate]:
        return self._templates.get(template_id)

    def list_template_ids(self) -> List[str]:
        return list(self._templates)

    def list_templates(self) -> List[ClimateZoneTemplate]:
        return list(self._templates.values())

    def instantiate(self, template_id: str, season_names: Optional[List[str]] = None,
                    zone_id: Optional[str] = None) -> Optional[ClimateZone]:
        """
        Builds an independent world zone from a template.

        Season temperatures come from the template's entry for each requested
        season name (exact, then lowercased), else the template's `_default`.
        Chances for the default bucket cover every built-in preset; each
        seasonal weight table becomes its own bucket in `season_presets`.
        """
        template = self.get_template(template_id)
        if template is None:
            log.warning("Unknown climate template '%s'.", template_id)
            return None
        if season_names is None:
            season_names = ["Spring", "Summer", "Autumn", "Winter"]

        default_range = template.temperatures.get("_default") or TemperatureRange(
            **climate_defs.FALLBACK_TEMPERATURE_RANGE)
        temperatures = {"_default": default_range.model_copy()}
        for season in season_names:
            found = (template.temperatures.get(season)
                     or template.temperatures.get(season.lower())
                     or default_range)
            temperatures[season] = found.model_copy()

        preset_ids = [p["id"] for p in weather_defs.ALL_PRESETS]
        default_weights = template.weather.get(climate_defs.DEFAULT_SEASON_BUCKET, {})
        season_presets = {
            bucket: weights_to_presets(weights, preset_ids)
            for bucket, weights in template.weather.items()
            if bucket != climate_defs.DEFAULT_SEASON_BUCKET
        }

        return ClimateZone(
            id=zone_id or template.id,
            name=template.name,
            description=template.description,
            temperatures=temperatures,
            presets=weights_to_presets(default_weights, preset_ids),
            season_presets=season_presets,
        )
