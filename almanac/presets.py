# almanac/presets.py
"""
Weather preset registry: an immutable built-in set plus world-authored custom presets,
with optional per-zone display aliases.
"""
import logging
from typing import Dict, Any, List, Optional, Union

from pydantic import ValidationError

from .definitions import weather as weather_defs
from .models import WeatherPreset

log = logging.getLogger(__name__)

GLOBAL_ALIAS_SCOPE = "_global"

PresetInput = Union[WeatherPreset, Dict[str, Any]]


class WeatherPresetRegistry:
    """
    Lookups check custom presets first, then built-ins. Custom presets share the
    built-in id space but may never reuse a built-in id.
    """

    def __init__(self, custom_presets: Optional[List[Dict[str, Any]]] = None,
                 aliases: Optional[Dict[str, Dict[str, str]]] = None):
        self._builtin: Dict[str, WeatherPreset] = {
            data["id"]: WeatherPreset.model_validate(data) for data in weather_defs.ALL_PRESETS
        }
        self._custom: Dict[str, WeatherPreset] = {}
        self._aliases: Dict[str, Dict[str, str]] = {}
        self.load(custom_presets or [], aliases or {})

    def load(self, custom_presets: List[Dict[str, Any]], aliases: Dict[str, Dict[str, str]]):
        """Replaces the custom presets and aliases with persisted data."""
        self._custom.clear()
        for data in custom_presets:
            try:
                preset = WeatherPreset.model_validate({**data, "category": weather_defs.CATEGORY_CUSTOM})
            except ValidationError as e:
                log.warning("Skipping malformed custom weather preset %r: %s", data.get("id"), e)
                continue
            if preset.id in self._builtin:
                log.warning("Skipping custom preset '%s': id collides with a built-in preset.", preset.id)
                continue
            self._custom[preset.id] = preset
        self._aliases = {scope: dict(entries) for scope, entries in aliases.items() if entries}

    # --- Lookup ---
    def is_builtin(self, preset_id: str) -> bool:
        return preset_id in self._builtin

    def get(self, preset_id: Optional[str]) -> Optional[WeatherPreset]:
        if not preset_id:
            return None
        preset = self._custom.get(preset_id) or self._builtin.get(preset_id)
        return preset.model_copy(deep=True) if preset else None

    def list_all(self) -> List[WeatherPreset]:
        return [p.model_copy(deep=True) for p in list(self._builtin.values()) + list(self._custom.values())]

    def list_custom(self) -> List[WeatherPreset]:
        return [p.model_copy(deep=True) for p in self._custom.values()]

    def list_by_category(self, category: str) -> List[WeatherPreset]:
        return [p for p in self.list_all() if p.category == category]

    # --- Custom preset CRUD ---
    def add(self, preset: PresetInput) -> Optional[WeatherPreset]:
        """Adds a custom preset. Returns None on an id collision or invalid shape."""
        data = preset.model_dump() if isinstance(preset, WeatherPreset) else dict(preset)
        preset_id = data.get("id")
        if not preset_id or preset_id in self._builtin or preset_id in self._custom:
            log.warning("Cannot add weather preset '%s': id is missing or already in use.", preset_id)
            return None
        data["category"] = weather_defs.CATEGORY_CUSTOM
        data.setdefault("label", preset_id)
        try:
            validated = WeatherPreset.model_validate(data)
        except ValidationError as e:
            log.warning("Rejected custom weather preset '%s': %s", preset_id, e)
            return None
        self._custom[validated.id] = validated
        log.info("Added custom weather preset '%s'.", validated.id)
        return validated.model_copy(deep=True)

    def update(self, preset_id: str, updates: Dict[str, Any]) -> Optional[WeatherPreset]:
        """Applies a partial update to a custom preset. Built-ins cannot be updated."""
        existing = self._custom.get(preset_id)
        if existing is None:
            log.warning("Cannot update weather preset '%s': no such custom preset.", preset_id)
            return None
        merged = {**existing.model_dump(), **updates, "id": preset_id,
                  "category": weather_defs.CATEGORY_CUSTOM}
        try:
            validated = WeatherPreset.model_validate(merged)
        except ValidationError as e:
            log.warning("Rejected update to weather preset '%s': %s", preset_id, e)
            return None
        self._custom[preset_id] = validated
        return validated.model_copy(deep=True)

    def remove(self, preset_id: str) -> bool:
        if self._custom.pop(preset_id, None) is None:
            return False
        log.info("Removed custom weather preset '%s'.", preset_id)
        return True

    # --- Aliases ---
    def get_alias(self, preset_id: str, zone_id: Optional[str] = None) -> Optional[str]:
        return self._aliases.get(zone_id or GLOBAL_ALIAS_SCOPE, {}).get(preset_id)

    def set_alias(self, preset_id: str, alias: Optional[str], zone_id: Optional[str] = None):
        """Sets a display alias for a preset within a zone. A blank alias removes it."""
        scope = zone_id or GLOBAL_ALIAS_SCOPE
        alias = alias.strip() if alias else ""
        if alias:
            self._aliases.setdefault(scope, {})[preset_id] = alias
            return
        entries = self._aliases.get(scope)
        if entries is not None:
            entries.pop(preset_id, None)
            if not entries:
                del self._aliases[scope]

    def display_label(self, preset: WeatherPreset, zone_id: Optional[str] = None) -> str:
        return self.get_alias(preset.id, zone_id) or preset.label

    # --- Persistence ---
    def custom_presets_data(self) -> List[Dict[str, Any]]:
        return [p.model_dump() for p in self._custom.values()]

    def aliases_data(self) -> Dict[str, Dict[str, str]]:
        return {scope: dict(entries) for scope, entries in self._aliases.items()}
