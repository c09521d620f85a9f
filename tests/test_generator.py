# tests/test_generator.py
import unittest
from unittest.mock import Mock, patch
import random
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from almanac.calendar import GameCalendar
from almanac.climate import ClimateZoneCatalog
from almanac.generator import WeatherGenerator, apply_temperature_modifier, weighted_select
from almanac.models import ForecastEntry, ForecastPreset, WeatherState
from almanac.presets import WeatherPresetRegistry

class TestWeightedSelect(unittest.TestCase):

    def test_roll_picks_proportionally(self):
        weights = [("clear", 50), ("rain", 30), ("fog", 20)]
        rng = Mock()
        rng.random.return_value = 0.0
        self.assertEqual(weighted_select(weights, rng), "clear")
        rng.random.return_value = 0.6
        self.assertEqual(weighted_select(weights, rng), "rain")
        rng.random.return_value = 0.99
        self.assertEqual(weighted_select(weights, rng), "fog")

    def test_degenerate_inputs(self):
        self.assertIsNone(weighted_select([], random.Random(1)))
        self.assertEqual(weighted_select([("a", 0), ("b", 0)], random.Random(1)), "a")


class TestTemperatureModifier(unittest.TestCase):

    def test_modifiers(self):
        """Numbers are absolute, trailing +/- strings are relative."""
        self.assertEqual(apply_temperature_modifier(10, 5), 5)
        self.assertEqual(apply_temperature_modifier(10, "5+"), 15)
        self.assertEqual(apply_temperature_modifier(10, "3-"), 7)
        self.assertEqual(apply_temperature_modifier(10, "12"), 12)
        self.assertEqual(apply_temperature_modifier(10, "warm"), 10)
        self.assertEqual(apply_temperature_modifier(10, None), 10)
        self.assertEqual(apply_temperature_modifier(10, float("nan")), 10)


class TestWeatherGenerator(unittest.TestCase):

    def setUp(self):
        self.registry = WeatherPresetRegistry()
        self.generator = WeatherGenerator(self.registry, random.Random(1234))
        self.zone = ClimateZoneCatalog().instantiate("temperate")

    def test_inertia_preserves_total_and_boosts_category(self):
        """Inertia moves weight toward the previous preset's category without changing the total."""
        weights = [("clear", 50.0), ("rain", 30.0), ("thunderstorm", 20.0)]
        adjusted = dict(self.generator.apply_inertia(weights, "thunderstorm", 1.0))
        self.assertAlmostEqual(sum(adjusted.values()), 100.0)
        # thunderstorm inertia_weight is 0.3
        self.assertAlmostEqual(adjusted["thunderstorm"], 44.0)
        self.assertAlmostEqual(adjusted["clear"], 35.0)
        self.assertAlmostEqual(adjusted["rain"], 21.0)

    def test_inertia_noop_cases(self):
        weights = [("clear", 50.0), ("thunderstorm", 50.0)]
        self.assertEqual(self.generator.apply_inertia(weights, "clear", 0.0), weights)
        self.assertEqual(self.generator.apply_inertia(weights, None, 0.5), weights)
        self.assertEqual(self.generator.apply_inertia(weights, "unknown", 0.5), weights)
        # sunshower carries no inertia weight at all
        self.assertEqual(self.generator.apply_inertia(weights, "sunshower", 1.0), weights)

    def test_inertia_halved_on_season_change(self):
        previous = WeatherState(id="rain", label="Rain", category="standard", season="Summer")
        with patch.object(self.generator, "apply_inertia", wraps=self.generator.apply_inertia) as spy:
            self.generator.generate(self.zone, "Winter", previous=previous, inertia=0.5)
            self.assertAlmostEqual(spy.call_args[0][2], 0.25)
            self.generator.generate(self.zone, "Winter", previous=previous.model_copy(update={"season": "Winter"}),
                                    inertia=0.5)
            self.assertAlmostEqual(spy.call_args[0][2], 0.5)

    def test_generated_temperatures_stay_in_zone_range(self):
        """Repeated draws never leave the zone's seasonal range."""
        previous = None
        for _ in range(50):
            state = self.generator.generate(self.zone, "Summer", previous=previous, inertia=0.3)
            self.assertGreaterEqual(state.temperature, 18)
            self.assertLessEqual(state.temperature, 30)
            self.assertIn(state.id, {"clear", "partly-cloudy", "thunderstorm", "rain"})
            self.assertTrue(state.generated)
            previous = state

    def test_no_zone_falls_back_to_clear(self):
        state = self.generator.generate(None, "Summer")
        self.assertEqual(state.id, "clear")
        # Fallback range 10-22 narrowed by clear's 18-32
        self.assertGreaterEqual(state.temperature, 18)
        self.assertLessEqual(state.temperature, 22)

    def test_options_override_generated_values(self):
        state = self.generator.generate(self.zone, "Summer", options={
            "temperature": 5,
            "wind": {"speed": 2, "direction": "NW"},
            "precipitation": {"type": "snow", "intensity": 0.4},
        })
        self.assertEqual(state.temperature, 5)
        self.assertEqual(state.wind.direction, "NW")
        self.assertEqual(state.precipitation.type, "snow")

    def test_forecast_honoured_at_full_accuracy(self):
        entry = ForecastEntry(year=218, month=6, day=2, temperature=21, season="Summer",
                              preset=ForecastPreset(id="blizzard", label="Blizzard", category="severe"))
        state = self.generator.generate(self.zone, "Summer", forecast=entry, accuracy=100)
        self.assertEqual(state.id, "blizzard")
        self.assertEqual(state.temperature, 21)

    def test_forecast_redrawn_at_zero_accuracy(self):
        entry = ForecastEntry(year=218, month=6, day=2, temperature=21, season="Summer",
                              preset=ForecastPreset(id="blizzard", label="Blizzard", category="severe"))
        for _ in range(10):
            state = self.generator.generate(self.zone, "Summer", forecast=entry, accuracy=0)
            self.assertNotEqual(state.id, "blizzard")

    def test_wind_and_precipitation(self):
        """Windy presets get a compass direction; precipitation intensity stays in range."""
        storm = self.registry.get("thunderstorm")
        wind = self.generator.draw_wind(storm)
        self.assertEqual(wind.speed, 4)
        self.assertTrue(wind.forced)
        self.assertIsNotNone(wind.direction)

        calm = self.generator.draw_wind(self.registry.get("clear"))
        self.assertIsNone(calm.direction)

        precip = self.generator.draw_precipitation(storm)
        self.assertEqual(precip.type, "rain")
        self.assertTrue(0.1 <= precip.intensity <= 1.0)
        self.assertIsNone(self.generator.draw_precipitation(self.registry.get("clear")).type)

    def test_alias_used_as_label(self):
        self.registry.set_alias("rain", "Downpour", "temperate")
        state = self.generator.build_state(self.registry.get("rain"), temperature=12, zone=self.zone)
        self.assertEqual(state.label, "Downpour")

    def test_plan_forecast_crosses_year_boundary(self):
        """Forecast plans chain consecutive dates and resolve seasons per date."""
        calendar = GameCalendar(year=218, month=12, day=29)
        entries = self.generator.plan_forecast(calendar, self.zone, (218, 12, 29), 3)
        self.assertEqual([(e.year, e.month, e.day) for e in entries],
                         [(218, 12, 29), (218, 12, 30), (219, 1, 1)])
        for entry in entries:
            self.assertEqual(entry.season, "Winter")
            self.assertTrue(entry.preset.id)
            self.assertTrue(entry.preset.label)
            self.assertTrue(entry.preset.icon)
            self.assertGreaterEqual(entry.temperature, -5)
            self.assertLessEqual(entry.temperature, 5)
        self.assertEqual(self.generator.plan_forecast(calendar, self.zone, (218, 12, 29), 0), [])


if __name__ == '__main__':
    unittest.main()
