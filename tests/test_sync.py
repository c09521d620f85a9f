# tests/test_sync.py
import asyncio
import unittest
from unittest.mock import AsyncMock
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from almanac.calendar import GameCalendar
from almanac.definitions import settings as setting_defs
from almanac.lighting import EnvironmentComposer
from almanac.scene import Scene
from almanac.settings_store import WorldSettings
from almanac.sync import (MoonPhaseChanged, SceneActivated, SceneSynchronizer, TimeAdvanced, WeatherChanged,
                          transition_duration_ms)

class TestSceneSynchronizer(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.mock_db_manager = AsyncMock()
        self.calendar = GameCalendar(year=218, month=5, day=1, hour=14, minute=0, moons=[])
        self.settings = WorldSettings(self.mock_db_manager)
        self.composer = EnvironmentComposer(self.calendar, self.settings)
        self.scenes = [
            Scene({"id": 1, "name": "Tavern", "is_active": True}, self.mock_db_manager),
            Scene({"id": 2, "name": "Forest"}, self.mock_db_manager),
            Scene({"id": 3, "name": "Crypt", "flags": {setting_defs.SCENE_DARKNESS_SYNC: "disabled"}},
                  self.mock_db_manager),
        ]
        self.writer = True
        self.sync = SceneSynchronizer(
            self.calendar, self.settings, self.composer,
            scenes=lambda: self.scenes,
            zone_for_scene=lambda scene: None,
            current_weather=lambda: None,
            is_designated_writer=lambda: self.writer,
        )

    def written_scene_ids(self):
        return [c.args[0] for c in self.mock_db_manager.save_scene_environment.call_args_list]

    async def test_first_sync_writes_active_scene_without_animation(self):
        """The first recompute snaps instead of animating."""
        self.assertTrue(await self.sync.dispatch(TimeAdvanced()))
        self.assertEqual(self.written_scene_ids(), [1])
        environment = self.scenes[0].environment
        self.assertAlmostEqual(environment["darkness_level"], 0.0)
        self.assertFalse(environment["transition"]["animate"])
        self.assertIn("base", environment)

    async def test_time_updates_within_the_hour_are_debounced(self):
        await self.sync.dispatch(TimeAdvanced())
        self.calendar.advance(30)
        self.assertFalse(await self.sync.dispatch(TimeAdvanced()))
        self.assertEqual(len(self.written_scene_ids()), 1)

        self.calendar.advance(30)
        self.assertTrue(await self.sync.dispatch(TimeAdvanced()))
        self.assertEqual(len(self.written_scene_ids()), 2)
        # Normal flow of time animates the change
        transition = self.scenes[0].environment["transition"]
        self.assertTrue(transition["animate"])
        self.assertEqual(transition["duration_ms"], 3000)

    async def test_time_jump_snaps(self):
        await self.sync.dispatch(TimeAdvanced())
        self.calendar.advance(5 * 60)
        self.assertTrue(await self.sync.dispatch(TimeAdvanced()))
        self.assertFalse(self.scenes[0].environment["transition"]["animate"])

    async def test_backward_time_jump_snaps(self):
        """Rewinding the clock by days is a jump too, not normal flow."""
        await self.sync.dispatch(TimeAdvanced())
        minutes_per_day = self.calendar.hours_per_day * self.calendar.minutes_per_hour
        self.calendar.set_from_world_minutes(self.calendar.world_minutes - 5 * minutes_per_day)
        self.assertTrue(await self.sync.dispatch(WeatherChanged()))
        self.assertFalse(self.scenes[0].environment["transition"]["animate"])

    async def test_weather_and_moon_changes_bypass_debounce(self):
        await self.sync.dispatch(TimeAdvanced())
        self.assertTrue(await self.sync.dispatch(WeatherChanged()))
        self.assertTrue(await self.sync.dispatch(MoonPhaseChanged()))
        self.assertEqual(len(self.written_scene_ids()), 3)
        self.assertTrue(self.scenes[0].environment["transition"]["animate"])

    async def test_non_writer_does_nothing(self):
        """Only the designated writer computes or writes anything."""
        self.writer = False
        self.assertFalse(await self.sync.dispatch(TimeAdvanced()))
        self.assertFalse(await self.sync.dispatch(WeatherChanged()))
        self.mock_db_manager.save_scene_environment.assert_not_called()
        self.assertIsNone(self.sync.last_hour)

    async def test_sync_all_scenes_respects_scene_flags(self):
        self.settings._values[setting_defs.DARKNESS_SYNC_ALL_SCENES] = True
        await self.sync.dispatch(WeatherChanged())
        self.assertEqual(sorted(self.written_scene_ids()), [1, 2])

    async def test_scene_flag_overrides_world_setting(self):
        self.settings._values[setting_defs.DARKNESS_SYNC] = False
        self.assertFalse(self.sync.should_sync(self.scenes[1]))
        forced = Scene({"id": 4, "flags": {setting_defs.SCENE_DARKNESS_SYNC: "enabled"}})
        self.assertTrue(self.sync.should_sync(forced))
        self.assertFalse(self.sync.should_sync(self.scenes[2]))

    async def test_scene_activation_targets_that_scene(self):
        await self.sync.dispatch(SceneActivated(2))
        self.assertEqual(self.written_scene_ids(), [2])

    async def test_failing_scene_does_not_block_others(self):
        """A write failure on one scene is logged and the rest still sync."""
        self.settings._values[setting_defs.DARKNESS_SYNC_ALL_SCENES] = True
        self.scenes[0].update_environment = AsyncMock(side_effect=RuntimeError("write rejected"))
        with self.assertLogs("almanac.sync", level="ERROR"):
            self.assertTrue(await self.sync.dispatch(WeatherChanged()))
        self.assertEqual(self.written_scene_ids(), [2])

    async def test_events_during_recompute_collapse_into_one_followup(self):
        gate = asyncio.Event()
        calls = []

        async def slow_update(*args, **kwargs):
            calls.append(kwargs)
            await gate.wait()

        self.scenes[0].update_environment = slow_update
        first = asyncio.create_task(self.sync.dispatch(WeatherChanged()))
        await asyncio.sleep(0)
        self.assertEqual(len(calls), 1)

        self.assertTrue(await self.sync.dispatch(WeatherChanged()))
        self.assertTrue(await self.sync.dispatch(MoonPhaseChanged()))
        gate.set()
        self.assertTrue(await first)
        self.assertEqual(len(calls), 2)

    async def test_notify_and_drain(self):
        self.sync.notify(WeatherChanged())
        await self.sync.drain()
        self.assertEqual(self.written_scene_ids(), [1])

    def test_transition_duration_bounds(self):
        self.assertEqual(transition_duration_ms(0.1), 500)
        self.assertEqual(transition_duration_ms(2), 1600)
        self.assertEqual(transition_duration_ms(360), 3000)


if __name__ == '__main__':
    unittest.main()
