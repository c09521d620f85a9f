# almanac/world.py
"""
Manages the world's loaded state and orchestrates ticker-driven updates:
the calendar clock, daily weather, and scene darkness synchronization.
"""
from __future__ import annotations
import asyncio
import logging
import random
from typing import Dict, List, Optional, TYPE_CHECKING

import config
from .calendar import GameCalendar
from .definitions import calendar as calendar_defs
from .definitions import settings as setting_defs
from .lighting import EnvironmentComposer
from .scene import Scene
from .settings_store import WorldSettings
from .sync import MoonPhaseChanged, SceneActivated, SceneSynchronizer, TimeAdvanced, WeatherChanged
from .weather import WeatherManager

if TYPE_CHECKING:
    from .database import DatabaseManager
    from .ticker import Ticker

log = logging.getLogger(__name__)


class World:
    """
    Holds the calendar, settings, scenes and environment systems for one world session.
    """
    def __init__(self, db_manager: "DatabaseManager", writer_id: str = config.WRITER_ID,
                 rng: Optional[random.Random] = None):
        self.db_manager = db_manager
        self.writer_id = writer_id
        self.calendar = GameCalendar()
        self.settings = WorldSettings(db_manager)
        self.scenes: Dict[int, Scene] = {}
        self.game_time_accumulator: float = 0.0

        self.weather = WeatherManager(self.settings, self.calendar, rng, self.is_designated_writer)
        self.composer = EnvironmentComposer(self.calendar, self.settings)
        self.synchronizer = SceneSynchronizer(
            self.calendar, self.settings, self.composer,
            scenes=self.get_scenes,
            zone_for_scene=self.weather.get_active_zone,
            current_weather=self.weather.get_current_weather,
            is_designated_writer=self.is_designated_writer,
        )
        self.weather.add_listener(lambda state: self.synchronizer.notify(WeatherChanged()))
        self._moon_phases = self.calendar.moon_phase_indices()

    def is_designated_writer(self) -> bool:
        return self.writer_id == config.PRIMARY_WRITER_ID

    async def build(self) -> bool:
        """Loads settings and scenes, restores the clock and makes sure today has weather."""
        log.info("Building world state from PostgreSQL database...")
        try:
            _, scene_rows = await asyncio.gather(
                self.settings.load(),
                self.db_manager.load_scenes(),
            )
            self.scenes = {row['id']: Scene(row, self.db_manager) for row in scene_rows or []}
            self.calendar.load(self.settings.get(setting_defs.WORLD_TIME))
            self._moon_phases = self.calendar.moon_phase_indices()
            await self.weather.load()

            if (self.weather.get_current_weather() is None
                    and self.settings.get(setting_defs.AUTO_GENERATE_WEATHER)):
                await self.weather.generate_weather()

            await self.synchronizer.dispatch(TimeAdvanced(hour_changed=True))
        except Exception:
            log.exception("!!! Failed to build world state.")
            return False

        log.info("World built: %d scene(s), time %s.", len(self.scenes), self.calendar.to_dict())
        return True

    # --- Scenes ---
    def get_scenes(self) -> List[Scene]:
        return list(self.scenes.values())

    def get_scene(self, scene_id: int) -> Optional[Scene]:
        return self.scenes.get(scene_id)

    def active_scene(self) -> Optional[Scene]:
        return next((s for s in self.scenes.values() if s.active), None)

    async def activate_scene(self, scene_id: int) -> bool:
        scene = self.get_scene(scene_id)
        if scene is None:
            log.warning("Cannot activate unknown scene %s.", scene_id)
            return False
        if self.is_designated_writer():
            await self.db_manager.set_active_scene(scene_id)
        for other in self.scenes.values():
            other.active = other.id == scene_id
        self.synchronizer.notify(SceneActivated(scene_id))
        return True

    # --- Ticker ---
    def subscribe_to_ticker(self, ticker: "Ticker"):
        log.info("Subscribing world systems to the ticker...")
        ticker.subscribe(self.update_game_time)

    async def update_game_time(self, dt: float):
        """Ticker: Advances the calendar clock in whole game minutes."""
        self.game_time_accumulator += dt
        if self.game_time_accumulator < calendar_defs.SECONDS_PER_GAME_MINUTE:
            return

        minutes_passed = int(self.game_time_accumulator / calendar_defs.SECONDS_PER_GAME_MINUTE)
        self.game_time_accumulator %= calendar_defs.SECONDS_PER_GAME_MINUTE
        if minutes_passed:
            await self.advance_time(minutes_passed)

    async def advance_time(self, minutes: int):
        """
        Moves the clock forward. New days get new weather; hour and moon phase
        changes trigger a scene resync.
        """
        previous_day = self.calendar.today()
        hours_crossed, days_crossed = self.calendar.advance(minutes)

        if days_crossed:
            await self.weather.on_day_change(previous_day)

        phases = self.calendar.moon_phase_indices()
        if phases != self._moon_phases:
            self._moon_phases = phases
            self.synchronizer.notify(MoonPhaseChanged())
        elif hours_crossed:
            self.synchronizer.notify(TimeAdvanced(hour_changed=True))

    async def save_state(self):
        """Persists the world clock."""
        if not self.is_designated_writer():
            return
        await self.settings.set(setting_defs.WORLD_TIME, self.calendar.to_dict())
        log.info("World state saved at %s.", self.calendar.to_dict())
