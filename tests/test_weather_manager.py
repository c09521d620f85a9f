# tests/test_weather_manager.py
import random
import unittest
from unittest.mock import AsyncMock, Mock
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from almanac.calendar import GameCalendar
from almanac.definitions import calendar as calendar_defs
from almanac.definitions import settings as setting_defs
from almanac.scene import Scene
from almanac.settings_store import WorldSettings
from almanac.weather import WeatherManager

MINUTES_PER_DAY = calendar_defs.HOURS_PER_DAY * calendar_defs.MINUTES_PER_HOUR

class TestWeatherManager(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.mock_db_manager = AsyncMock()
        self.settings = WorldSettings(self.mock_db_manager)
        self.calendar = GameCalendar(year=218, month=6, day=10, hour=12, moons=[])
        self.manager = WeatherManager(self.settings, self.calendar, rng=random.Random(42))
        await self.manager.load()

    def plan_dates(self):
        plan = self.settings.get(setting_defs.FORECAST_PLAN)
        return [(e["year"], e["month"], e["day"]) for e in plan.get("entries", [])]

    async def test_load_seeds_default_zone(self):
        """A world with no zones gets the temperate zone, activated."""
        zones = self.manager.get_calendar_zones()
        self.assertEqual([z.id for z in zones], ["temperate"])
        self.assertEqual(self.settings.get(setting_defs.ACTIVE_ZONE), "temperate")
        self.assertEqual(self.manager.get_active_zone().id, "temperate")
        self.assertEqual(len(self.manager.get_climate_zone_templates()), 7)

    async def test_zone_chances_never_exceed_one_hundred(self):
        await self.manager.add_zone_from_template("arid")
        for zone in self.manager.get_calendar_zones():
            for bucket in [zone.presets] + list(zone.season_presets.values()):
                self.assertLessEqual(sum(e.chance for e in bucket if e.enabled), 100.0 + 1e-6)

    async def test_format_temperature_has_degree_symbol(self):
        self.assertIn("°", self.manager.format_temperature(0))
        self.assertIn("°", self.manager.format_temperature(100))
        await self.settings.set(setting_defs.TEMPERATURE_UNIT, "fahrenheit")
        self.assertEqual(self.manager.format_temperature(0), "32°F")
        self.assertEqual(self.manager.format_wind_speed(2), "Moderate (25 kph)")

    async def test_generated_temperatures_stay_near_zone_range(self):
        """Seven consecutive generations stay within the summer range, give or take 15."""
        for _ in range(7):
            state = await self.manager.generate_weather()
            self.assertIsNotNone(state)
            self.assertGreaterEqual(state.temperature, 18 - 15)
            self.assertLessEqual(state.temperature, 30 + 15)
        self.assertEqual(self.manager.get_current_weather().id, state.id)

    async def test_set_weather_with_temperature(self):
        state = await self.manager.set_weather("clear", {"temperature": 5})
        self.assertEqual(state.id, "clear")
        self.assertEqual(self.manager.get_temperature(), 5)
        self.assertFalse(state.generated)
        self.assertEqual(state.set_at, self.calendar.world_minutes)

    async def test_set_weather_overrides_wind_and_precipitation(self):
        state = await self.manager.set_weather("clear", {"wind": {"speed": 3, "direction": "E"},
                                                         "precipitation": {"type": "snow", "intensity": 0.4}})
        self.assertEqual(state.wind.speed, 3)
        self.assertEqual(state.wind.direction, "E")
        self.assertEqual(state.precipitation.type, "snow")

    async def test_set_weather_unknown_preset_leaves_current(self):
        await self.manager.set_weather("rain")
        self.assertIsNone(await self.manager.set_weather("no-such-weather"))
        self.assertEqual(self.manager.get_current_weather().id, "rain")

    async def test_set_custom_weather(self):
        state = await self.manager.set_custom_weather({"label": "Eerie Calm", "temperature": 12})
        self.assertEqual(state.id, "custom")
        self.assertEqual(state.label, "Eerie Calm")
        self.assertEqual(self.manager.get_current_weather().temperature, 12)

    async def test_clear_weather(self):
        listener = Mock()
        self.manager.add_listener(listener)
        await self.manager.set_weather("fog")
        await self.manager.clear_weather()
        self.assertIsNone(self.manager.get_current_weather())
        self.assertEqual(listener.call_count, 2)
        listener.assert_called_with(None)

    async def test_add_builtin_preset_fails(self):
        self.assertIsNone(await self.manager.add_weather_preset({"id": "clear", "label": "Mine"}))

    async def test_custom_preset_lifecycle(self):
        """Add, use, update and remove a custom preset through the manager."""
        added = await self.manager.add_weather_preset({"id": "ember-rain", "label": "Ember Rain",
                                                       "darkness_penalty": 0.2})
        self.assertIsNotNone(added)
        self.assertEqual(self.manager.get_preset("ember-rain").label, "Ember Rain")
        stored = self.settings.get(setting_defs.CUSTOM_WEATHER_PRESETS)
        self.assertEqual([p["id"] for p in stored], ["ember-rain"])

        state = await self.manager.set_weather("ember-rain")
        self.assertEqual(state.id, "ember-rain")
        self.assertAlmostEqual(state.darkness_penalty, 0.2)

        await self.manager.update_weather_preset("ember-rain", {"label": "Cinder Rain"})
        self.assertEqual(self.manager.get_preset("ember-rain").label, "Cinder Rain")

        self.assertTrue(await self.manager.remove_weather_preset("ember-rain"))
        self.assertIsNone(self.manager.get_preset("ember-rain"))
        self.assertEqual(self.settings.get(setting_defs.CUSTOM_WEATHER_PRESETS), [])

    async def test_preset_alias_used_for_labels(self):
        await self.manager.set_preset_alias("rain", "Downpour", "temperate")
        state = await self.manager.set_weather("rain")
        self.assertEqual(state.label, "Downpour")

    async def test_forecast_shape_and_horizon(self):
        """Forecasts start tomorrow, cover at most the configured horizon and stay stable."""
        forecast = await self.manager.get_weather_forecast(3)
        self.assertLessEqual(len(forecast), 3)
        self.assertEqual((forecast[0].year, forecast[0].month, forecast[0].day), (218, 6, 11))
        for entry in forecast:
            self.assertTrue(entry.preset.id)
            self.assertTrue(entry.preset.label)
            self.assertTrue(entry.preset.icon)
            self.assertIsNotNone(entry.temperature)

        again = await self.manager.get_weather_forecast(3)
        self.assertEqual([e.model_dump() for e in again], [e.model_dump() for e in forecast])
        self.assertEqual(len(await self.manager.get_weather_forecast(30)), 7)

    async def test_forecast_for_zero_days_is_empty(self):
        self.assertEqual(await self.manager.get_weather_forecast(0), [])

    async def test_forecast_honoured_at_full_accuracy(self):
        await self.settings.set(setting_defs.FORECAST_ACCURACY, 100)
        planned = (await self.manager.get_weather_forecast(2))[0]
        self.calendar.advance(MINUTES_PER_DAY)

        state = await self.manager.generate_weather()
        self.assertEqual(state.id, planned.preset.id)
        self.assertEqual(state.temperature, planned.temperature)
        self.assertNotIn((218, 6, 11), self.plan_dates())
        self.assertIn((218, 6, 12), self.plan_dates())

    async def test_override_clears_todays_forecast(self):
        await self.manager.get_weather_forecast(2)
        self.calendar.advance(MINUTES_PER_DAY)
        await self.manager.set_weather("rain")
        self.assertNotIn((218, 6, 11), self.plan_dates())

    async def test_override_keeps_forecast_when_configured(self):
        await self.settings.set(setting_defs.CLEAR_FORECAST_ON_OVERRIDE, False)
        await self.manager.get_weather_forecast(2)
        self.calendar.advance(MINUTES_PER_DAY)
        await self.manager.set_weather("rain")
        self.assertIn((218, 6, 11), self.plan_dates())

    async def test_history_records_each_day(self):
        state = await self.manager.generate_weather()
        entry = self.manager.get_weather_for_date(218, 6, 10)
        self.assertEqual(entry.id, state.id)
        self.assertEqual(len(self.manager.get_weather_history(year=218)), 1)
        self.assertEqual(self.manager.get_weather_history(year=218, month=7), [])
        self.assertIn("218", self.settings.get(setting_defs.WEATHER_HISTORY))

    async def test_history_disabled(self):
        await self.settings.set(setting_defs.WEATHER_HISTORY_DAYS, 0)
        await self.manager.load()
        await self.manager.generate_weather()
        self.assertIsNone(self.manager.get_weather_for_date(218, 6, 10))

    async def test_history_limit_change_applies_without_reload(self):
        await self.manager.generate_weather()
        await self.settings.set(setting_defs.WEATHER_HISTORY_DAYS, 1)
        self.calendar.advance(MINUTES_PER_DAY)
        await self.manager.generate_weather()
        days = [(e.year, e.month, e.day) for e in self.manager.get_weather_history(year=218)]
        self.assertEqual(days, [(218, 6, 11)])

    async def test_history_records_zone(self):
        """Each history entry remembers the zone its weather was made for."""
        await self.manager.generate_weather()
        self.assertEqual(self.manager.get_weather_for_date(218, 6, 10).zone_id, "temperate")
        self.calendar.advance(MINUTES_PER_DAY)
        await self.manager.set_custom_weather({"label": "Ash Fall"})
        self.assertEqual(self.manager.get_weather_for_date(218, 6, 11).zone_id, "temperate")

    async def test_day_change_backfills_skipped_days(self):
        """Jumping several days records history for every skipped day."""
        await self.manager.generate_weather()
        previous_day = self.calendar.today()
        self.calendar.advance(3 * MINUTES_PER_DAY)
        await self.manager.on_day_change(previous_day)

        days = [(e.year, e.month, e.day) for e in self.manager.get_weather_history(year=218, month=6)]
        self.assertEqual(days, [(218, 6, 10), (218, 6, 11), (218, 6, 12), (218, 6, 13)])

    async def test_day_change_respects_auto_generate(self):
        await self.settings.set(setting_defs.AUTO_GENERATE_WEATHER, False)
        previous_day = self.calendar.today()
        self.calendar.advance(MINUTES_PER_DAY)
        await self.manager.on_day_change(previous_day)
        self.assertIsNone(self.manager.get_current_weather())

    async def test_scene_zone_override(self):
        """Scenes can pin a zone, opt out of zones entirely, or follow the world."""
        scene = Scene({"id": 1}, self.mock_db_manager)
        await self.manager.add_zone_from_template("arid")

        self.assertTrue(await self.manager.set_scene_zone_override(scene, "arid"))
        self.assertEqual(self.manager.get_active_zone(scene).id, "arid")

        self.assertTrue(await self.manager.set_scene_zone_override(scene, None))
        self.assertEqual(scene.get_flag(setting_defs.SCENE_CLIMATE_ZONE_OVERRIDE), setting_defs.NO_ZONE)
        self.assertIsNone(self.manager.get_active_zone(scene))

        self.assertFalse(await self.manager.set_scene_zone_override(scene, "underdark"))

        await self.manager.clear_scene_zone_override(scene)
        self.assertEqual(self.manager.get_active_zone(scene).id, "temperate")
        self.mock_db_manager.save_scene_flags.assert_called()

    async def test_zone_management(self):
        self.assertIsNone(await self.manager.add_zone_from_template("temperate"))
        self.assertIsNone(await self.manager.add_zone_from_template("underdark"))
        coast = await self.manager.add_zone_from_template("temperate", zone_id="coast")
        self.assertEqual(coast.id, "coast")
        self.assertTrue(await self.manager.set_active_zone("coast"))
        self.assertFalse(await self.manager.set_active_zone("underdark"))

        self.assertTrue(await self.manager.remove_zone("coast"))
        self.assertIsNone(self.settings.get(setting_defs.ACTIVE_ZONE))
        self.assertEqual(self.manager.get_active_zone().id, "temperate")
        self.assertFalse(await self.manager.remove_zone("coast"))

    async def test_non_writer_cannot_change_weather(self):
        """Non-writer clients read weather but never generate or set it."""
        manager = WeatherManager(WorldSettings(AsyncMock()), self.calendar, is_designated_writer=lambda: False)
        await manager.load()
        self.assertEqual(manager.get_calendar_zones(), [])
        self.assertIsNone(await manager.generate_weather())
        self.assertIsNone(await manager.set_weather("clear"))
        manager.settings.db_manager.save_world_setting.assert_not_called()


if __name__ == '__main__':
    unittest.main()
