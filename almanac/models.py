# almanac/models.py
"""
Pydantic models for climate zones, weather presets, weather state and lighting.

Persisted records round-trip through `model_dump()` / `model_validate()`; the
database stores them as JSONB.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Dict

from .definitions import weather as weather_defs


class TemperatureRange(BaseModel):
    min: float
    max: float


class HueOverride(BaseModel):
    """A lighting override carried by zones and presets. `None` fields mean 'no override'."""
    hue: Optional[float] = None
    saturation: Optional[float] = None


class LightingChannel(BaseModel):
    hue: Optional[float] = None
    intensity: Optional[float] = None
    luminosity: Optional[float] = None

    def is_empty(self) -> bool:
        return self.hue is None and self.intensity is None and self.luminosity is None


class EnvironmentLighting(BaseModel):
    """Ambient color for the lit (`base`) and unlit (`dark`) states of a scene."""
    base: LightingChannel = Field(default_factory=LightingChannel)
    dark: LightingChannel = Field(default_factory=LightingChannel)

    def is_empty(self) -> bool:
        return self.base.is_empty() and self.dark.is_empty()


class ColorShift(BaseModel):
    """Per-zone overrides for the time-of-day color keyframes."""
    dawn_hue: Optional[float] = None
    midday_hue: Optional[float] = None
    dusk_hue: Optional[float] = None
    night_hue: Optional[float] = None
    transition_minutes: Optional[float] = None
    # Partial channel overrides keyed by keyframe name (dawn/midday/dusk/night).
    keyframes: Dict[str, LightingChannel] = Field(default_factory=dict)


class ClimateZoneTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    temperatures: Dict[str, TemperatureRange]
    weather: Dict[str, Dict[str, float]]


class ZonePresetConfig(BaseModel):
    id: str
    enabled: bool = True
    chance: float = 0.0
    temp_min: Optional[float] = None
    temp_max: Optional[float] = None


class ClimateZone(BaseModel):
    id: str
    name: str
    description: str = ""
    temperatures: Dict[str, TemperatureRange] = Field(default_factory=dict)
    presets: List[ZonePresetConfig] = Field(default_factory=list)
    # Canonical season bucket -> preset weights for that season.
    season_presets: Dict[str, List[ZonePresetConfig]] = Field(default_factory=dict)
    brightness_multiplier: Optional[float] = None
    color_shift: Optional[ColorShift] = None
    environment_base: Optional[HueOverride] = None
    environment_dark: Optional[HueOverride] = None


class Wind(BaseModel):
    speed: int = 0
    direction: Optional[str] = None
    forced: bool = False


class Precipitation(BaseModel):
    type: Optional[str] = None
    intensity: float = 0.0


class WeatherPreset(BaseModel):
    id: str = Field(min_length=1)
    label: str
    description: str = ""
    icon: str = weather_defs.DEFAULT_ICON
    color: str = weather_defs.DEFAULT_COLOR
    category: str = weather_defs.CATEGORY_CUSTOM
    temp_min: Optional[float] = None
    temp_max: Optional[float] = None
    darkness_penalty: float = Field(default=0.0, ge=-1.0, le=1.0)
    environment_base: Optional[HueOverride] = None
    environment_dark: Optional[HueOverride] = None
    wind: Wind = Field(default_factory=Wind)
    precipitation: Precipitation = Field(default_factory=Precipitation)
    inertia_weight: float = 1.0
    fx_preset: Optional[str] = None


class WeatherState(BaseModel):
    id: str
    label: str
    description: str = ""
    icon: str = weather_defs.DEFAULT_ICON
    color: str = weather_defs.DEFAULT_COLOR
    category: str = weather_defs.CATEGORY_CUSTOM
    temperature: Optional[float] = None
    wind: Wind = Field(default_factory=Wind)
    precipitation: Precipitation = Field(default_factory=Precipitation)
    darkness_penalty: float = 0.0
    environment_base: Optional[HueOverride] = None
    environment_dark: Optional[HueOverride] = None
    fx_preset: Optional[str] = None
    season: Optional[str] = None
    zone_id: Optional[str] = None
    generated: bool = False
    set_at: Optional[int] = None  # absolute game minute


class HistoryEntry(WeatherState):
    year: int
    month: int
    day: int


class ForecastPreset(BaseModel):
    id: str
    label: str
    icon: str = weather_defs.DEFAULT_ICON
    color: str = weather_defs.DEFAULT_COLOR
    category: str = weather_defs.CATEGORY_CUSTOM


class ForecastEntry(BaseModel):
    year: int
    month: int
    day: int
    preset: ForecastPreset
    temperature: float
    season: Optional[str] = None
    wind: Wind = Field(default_factory=Wind)
    precipitation: Precipitation = Field(default_factory=Precipitation)

    def same_date(self, year: int, month: int, day: int) -> bool:
        return (self.year, self.month, self.day) == (year, month, day)
