from pydantic import BaseModel, ConfigDict
from typing import Optional

from almanac.models import WeatherState
from almanac import utils


class WeatherSummary(BaseModel):
    """Current weather plus human-readable renderings for the admin UI."""
    weather: Optional[WeatherState] = None
    temperature_display: str
    wind_display: Optional[str] = None
    precipitation_display: str

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_state(cls, state: Optional[WeatherState], temperature_unit: str = "celsius",
                   wind_unit: str = "kph") -> "WeatherSummary":
        if state is None:
            return cls(temperature_display=utils.format_temperature(None), precipitation_display="None")
        wind = utils.format_wind_speed(state.wind.speed, wind_unit)
        if state.wind.direction:
            wind = f"{wind} from the {state.wind.direction}"
        return cls(
            weather=state,
            temperature_display=utils.format_temperature(state.temperature, temperature_unit),
            wind_display=wind,
            precipitation_display=utils.format_precipitation(state.precipitation.type,
                                                             state.precipitation.intensity),
        )


class SceneEnvironment(BaseModel):
    id: int
    name: str
    is_active: bool = False
    darkness_level: Optional[float] = None
    climate_zone_override: Optional[str] = None
