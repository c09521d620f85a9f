# almanac/lighting.py
"""
Environment composer: turns base darkness into a scene's final darkness and
ambient lighting, layering scene, zone, moon and weather modifiers.

Every stage clamps darkness to [0, 1] so malformed multipliers or penalties
degrade gracefully instead of raising.
"""
import logging
import math
from typing import Callable, Dict, NamedTuple, Optional, Tuple, TYPE_CHECKING

import config
from .darkness import darkness_for_calendar
from .definitions import settings as setting_defs
from .models import ClimateZone, EnvironmentLighting, LightingChannel, WeatherState
from . import utils

if TYPE_CHECKING:
    from .calendar import GameCalendar
    from .scene import Scene
    from .settings_store import WorldSettings

log = logging.getLogger(__name__)

# --- Time-of-day keyframes: (hue, intensity, luminosity) ---
DEFAULT_KEYFRAMES: Dict[str, Tuple[float, float, float]] = {
    "dawn": (30.0, 0.25, 0.05),
    "midday": (45.0, 0.3, 0.15),
    "dusk": (15.0, 0.25, 0.0),
    "night": (220.0, 0.12, -0.1),
}
DEFAULT_TRANSITION_MINUTES = 60

# Moon tint saturation is capped, then scaled into an intensity.
MOON_SATURATION_CAP = 0.5
MOON_INTENSITY_SCALE = 0.55
MOON_LUMINOSITY_MAX = 0.25


class MoonIllumination(NamedTuple):
    reduction: float
    hue: Optional[float]
    intensity: Optional[float]
    luminosity: Optional[float]


NO_MOONLIGHT = MoonIllumination(0.0, None, None, None)


def _blend(a: LightingChannel, b: LightingChannel, t: float) -> LightingChannel:
    return LightingChannel(
        hue=utils.lerp_hue(a.hue, b.hue, t),
        intensity=utils.lerp(a.intensity, b.intensity, t),
        luminosity=utils.lerp(a.luminosity, b.luminosity, t),
    )


def keyframes_for_zone(zone: Optional[ClimateZone]) -> Dict[str, LightingChannel]:
    """Default keyframes with the zone's color-shift overrides applied."""
    frames = {name: LightingChannel(hue=h, intensity=i, luminosity=l)
              for name, (h, i, l) in DEFAULT_KEYFRAMES.items()}
    shift = zone.color_shift if zone else None
    if shift is None:
        return frames
    for name, override in shift.keyframes.items():
        if name in frames:
            frames[name] = frames[name].model_copy(update=override.model_dump(exclude_none=True))
    for name in frames:
        hue = getattr(shift, f"{name}_hue")
        if hue is not None:
            frames[name].hue = utils.normalize_hue(hue)
    return frames


def time_of_day_color(hour: float, hours_per_day: int, sunrise: Optional[float] = None,
                      sunset: Optional[float] = None, zone: Optional[ClimateZone] = None) -> LightingChannel:
    """
    Blends the dawn/midday/dusk/night keyframes for a decimal hour.

    Regions: pre-dawn (night->dawn), sunrise->midpoint (dawn->midday),
    midpoint->sunset (midday->dusk), post-dusk (dusk->night). Without a known
    sunrise/sunset the day is split into quarters.
    """
    frames = keyframes_for_zone(zone)
    if hours_per_day <= 0:
        return frames["midday"]

    shift = zone.color_shift if zone else None
    if sunrise is None or sunset is None or not (0 <= sunrise < sunset <= hours_per_day):
        sunrise, sunset = hours_per_day / 4, hours_per_day * 3 / 4
        transition = hours_per_day / 8
    else:
        minutes = (shift.transition_minutes if shift and shift.transition_minutes is not None
                   else DEFAULT_TRANSITION_MINUTES)
        transition = minutes / 60

    hour = hour % hours_per_day
    if sunrise <= hour < sunset:
        midpoint = (sunrise + sunset) / 2
        if hour < midpoint:
            return _blend(frames["dawn"], frames["midday"], (hour - sunrise) / (midpoint - sunrise))
        return _blend(frames["midday"], frames["dusk"], (hour - midpoint) / (sunset - midpoint))

    if transition > 0:
        after_sunset = (hour - sunset) % hours_per_day
        if after_sunset < transition:
            return _blend(frames["dusk"], frames["night"], after_sunset / transition)
        before_sunrise = (sunrise - hour) % hours_per_day
        if 0 < before_sunrise <= transition:
            return _blend(frames["night"], frames["dawn"], 1 - before_sunrise / transition)
    return frames["night"]


class EnvironmentComposer:
    """Applies world, scene, zone, moon and weather modifiers to base darkness."""

    def __init__(self, calendar: "GameCalendar", settings: "WorldSettings",
                 fx_active: Optional[Callable[[], bool]] = None):
        self.calendar = calendar
        self.settings = settings
        self._fx_active = fx_active

    # --- Inputs ---
    def fx_integration_active(self) -> bool:
        if self._fx_active is not None:
            return bool(self._fx_active())
        return bool(self.settings.get(setting_defs.FX_INTEGRATION_ACTIVE))

    def scene_brightness_multiplier(self, scene: Optional["Scene"]) -> float:
        default = self.settings.get(setting_defs.DEFAULT_BRIGHTNESS_MULTIPLIER)
        value = scene.get_flag(setting_defs.SCENE_BRIGHTNESS_MULTIPLIER) if scene else None
        if value is None:
            value = default
        try:
            return float(value)
        except (TypeError, ValueError):
            log.warning("Invalid brightness multiplier %r; using %s.", value, config.DEFAULT_BRIGHTNESS_MULTIPLIER)
            return config.DEFAULT_BRIGHTNESS_MULTIPLIER

    def is_fx_deferred(self, weather: Optional[WeatherState], scene: Optional["Scene"] = None) -> bool:
        """True when an active particle-FX integration owns this weather's visuals."""
        if weather is None or not weather.fx_preset:
            return False
        if scene is not None and scene.get_flag(setting_defs.SCENE_WEATHER_FX_DISABLED):
            return False
        return self.fx_integration_active()

    # --- Moonlight ---
    def moon_illumination(self, base: float) -> MoonIllumination:
        """
        Moonlight for a given base darkness. Only applies at night (base >= 0.5),
        scaled by how deep into the night it is.
        """
        if base < 0.5:
            return NO_MOONLIGHT
        moons = self.calendar.moons()
        if not moons:
            return MoonIllumination(0.0, None, None, 0.0)

        night_factor = (base - 0.5) / 0.5
        reduction = 0.0
        hue_weights = []
        saturation_sum = weight_sum = 0.0
        for moon in moons:
            illum = (1 - math.cos(2 * math.pi * moon.phase_position)) / 2
            brightness = moon.moon_brightness_max if moon.moon_brightness_max is not None else config.MOON_BRIGHTNESS_MAX
            reduction += illum * brightness * night_factor
            hsl = utils.hex_to_hsl(moon.color) if moon.color else None
            if hsl and illum > 0:
                hue_weights.append((hsl[0], illum))
                saturation_sum += hsl[1] * illum
                weight_sum += illum

        reduction = utils.clamp(reduction, 0.0, config.MAX_MOON_REDUCTION)
        hue = utils.circular_mean_hue(hue_weights)
        intensity = None
        if hue is not None and weight_sum > 0:
            intensity = min(saturation_sum / weight_sum, MOON_SATURATION_CAP) * MOON_INTENSITY_SCALE
        luminosity = MOON_LUMINOSITY_MAX * reduction / config.MAX_MOON_REDUCTION
        return MoonIllumination(reduction, hue, intensity, luminosity)

    # --- Darkness ---
    def adjust(self, base: float, scene: Optional["Scene"] = None, zone: Optional[ClimateZone] = None,
               weather: Optional[WeatherState] = None) -> float:
        """Final scene darkness from a base darkness value."""
        base = utils.clamp(base)
        zone_multiplier = zone.brightness_multiplier if zone and zone.brightness_multiplier is not None else 1.0
        brightness = (1 - base) * self.scene_brightness_multiplier(scene) * zone_multiplier
        darkness = utils.clamp(1 - brightness)

        if self.settings.get(setting_defs.DARKNESS_MOON_SYNC) and base >= 0.5:
            darkness = utils.clamp(darkness - self.moon_illumination(base).reduction)

        if (weather is not None and self.settings.get(setting_defs.DARKNESS_WEATHER_SYNC)
                and not self.is_fx_deferred(weather, scene)):
            darkness = utils.clamp(darkness + weather.darkness_penalty)
        return utils.clamp(darkness)

    # --- Lighting ---
    def compose_lighting(self, scene: Optional["Scene"] = None, zone: Optional[ClimateZone] = None,
                         weather: Optional[WeatherState] = None,
                         base: Optional[float] = None) -> Optional[EnvironmentLighting]:
        """
        Ambient color for the scene's lit and dark states.
        Returns None when nothing overrides the engine's defaults.
        """
        if base is None:
            base = darkness_for_calendar(self.calendar, zone)

        lighting = EnvironmentLighting()
        if self.settings.get(setting_defs.COLOR_SHIFT_SYNC):
            hour = self.calendar.hour + self.calendar.minute / self.calendar.minutes_per_hour
            color = time_of_day_color(hour, self.calendar.hours_per_day, self.calendar.sunrise(zone),
                                      self.calendar.sunset(zone), zone)
            lighting.base = color.model_copy()
            lighting.dark = color.model_copy()

        if self.settings.get(setting_defs.DARKNESS_MOON_SYNC) and base > 0.5:
            moon = self.moon_illumination(base)
            if moon.hue is not None:
                lighting.dark.hue = moon.hue
                lighting.dark.intensity = moon.intensity
            if moon.luminosity and moon.luminosity > 0:
                lighting.dark.luminosity = utils.clamp((lighting.dark.luminosity or 0.0) + moon.luminosity, -1.0, 1.0)

        overrides = []
        if zone is not None:
            overrides.append((zone.environment_base, zone.environment_dark))
        if weather is not None and not self.is_fx_deferred(weather, scene):
            overrides.append((weather.environment_base, weather.environment_dark))
        for base_override, dark_override in overrides:
            if base_override is not None and base_override.hue is not None:
                lighting.base.hue = utils.normalize_hue(base_override.hue)
            if dark_override is not None and dark_override.hue is not None:
                lighting.dark.hue = utils.normalize_hue(dark_override.hue)

        return None if lighting.is_empty() else lighting

    def compute(self, scene: Optional["Scene"] = None, zone: Optional[ClimateZone] = None,
                weather: Optional[WeatherState] = None) -> Tuple[float, Optional[EnvironmentLighting]]:
        """Darkness and lighting for the calendar's current moment."""
        base = darkness_for_calendar(self.calendar, zone)
        return self.adjust(base, scene, zone, weather), self.compose_lighting(scene, zone, weather, base)
