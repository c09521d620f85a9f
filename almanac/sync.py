# almanac/sync.py
"""
Scene synchronizer: recomputes darkness and lighting when time, weather,
moon phase or the active scene changes, and writes the result to scenes.

Only the designated writer computes and writes; every other client reads.
Time updates are debounced to whole-hour changes. Weather, moon and scene
activation events always recompute. Events arriving while a recompute is
in flight collapse into a single follow-up recompute (last event wins).
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Set, Union, TYPE_CHECKING

import config
from .definitions import calendar as calendar_defs
from .definitions import settings as setting_defs
from . import utils

if TYPE_CHECKING:
    from .calendar import GameCalendar
    from .lighting import EnvironmentComposer
    from .models import ClimateZone, WeatherState
    from .scene import Scene
    from .settings_store import WorldSettings

log = logging.getLogger(__name__)


# --- Events ---
@dataclass(frozen=True)
class TimeAdvanced:
    hour_changed: bool = True


@dataclass(frozen=True)
class WeatherChanged:
    pass


@dataclass(frozen=True)
class MoonPhaseChanged:
    pass


@dataclass(frozen=True)
class SceneActivated:
    scene_id: int


SyncEvent = Union[TimeAdvanced, WeatherChanged, MoonPhaseChanged, SceneActivated]


def transition_duration_ms(real_seconds_per_game_hour: float) -> int:
    """Animated transition length, scaled by how fast game time runs."""
    return int(utils.clamp(real_seconds_per_game_hour * config.TRANSITION_MS_PER_REAL_SECOND,
                           config.TRANSITION_MIN_MS, config.TRANSITION_MAX_MS))


class SceneSynchronizer:
    """One instance per world session. Holds all debounce and transition state."""

    def __init__(self, calendar: "GameCalendar", settings: "WorldSettings", composer: "EnvironmentComposer",
                 scenes: Callable[[], List["Scene"]],
                 zone_for_scene: Callable[["Scene"], Optional["ClimateZone"]],
                 current_weather: Callable[[], Optional["WeatherState"]],
                 is_designated_writer: Callable[[], bool],
                 clock: Optional[Callable[[], int]] = None):
        self.calendar = calendar
        self.settings = settings
        self.composer = composer
        self._scenes = scenes
        self._zone_for_scene = zone_for_scene
        self._current_weather = current_weather
        self.is_designated_writer = is_designated_writer
        self._clock = clock or (lambda: calendar.world_minutes)

        self.last_hour: Optional[int] = None
        self.last_recompute_minute: Optional[int] = None
        self._running = False
        self._pending: Optional[SyncEvent] = None
        self._tasks: Set[asyncio.Task] = set()

    # --- Public API ---
    def notify(self, event: SyncEvent):
        """Fire-and-forget dispatch; callers never wait on scene writes."""
        task = asyncio.create_task(self.dispatch(event), name=f"SceneSync-{type(event).__name__}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self):
        """Waits for any fire-and-forget dispatches still in flight."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def dispatch(self, event: SyncEvent) -> bool:
        """
        Handles one event. Returns True if a recompute ran (or was queued behind
        one already running).
        """
        if not self.is_designated_writer():
            return False

        if isinstance(event, TimeAdvanced) and not self._hour_changed(event):
            return False

        if self._running:
            self._pending = event
            return True

        self._running = True
        try:
            await self._recompute(event)
            while self._pending is not None:
                event, self._pending = self._pending, None
                await self._recompute(event)
        finally:
            self._running = False
        return True

    def should_sync(self, scene: "Scene") -> bool:
        """Scene flag wins ('enabled'/'disabled' or a bool); anything else defers to the world setting."""
        mode = scene.get_flag(setting_defs.SCENE_DARKNESS_SYNC)
        if mode is True or mode == "enabled":
            return True
        if mode is False or mode == "disabled":
            return False
        return bool(self.settings.get(setting_defs.DARKNESS_SYNC))

    def eligible_scenes(self, event: Optional[SyncEvent] = None) -> List["Scene"]:
        scenes = self._scenes()
        if self.settings.get(setting_defs.DARKNESS_SYNC_ALL_SCENES):
            candidates = scenes
        elif isinstance(event, SceneActivated):
            candidates = [s for s in scenes if s.id == event.scene_id]
        else:
            candidates = [s for s in scenes if s.active]
        return [s for s in candidates if self.should_sync(s)]

    # --- Internals ---
    def _current_hour(self) -> int:
        return self._clock() // self.calendar.minutes_per_hour

    def _hour_changed(self, event: TimeAdvanced) -> bool:
        if self.last_hour is None:
            return True
        if not event.hour_changed:
            return False
        return self._current_hour() != self.last_hour

    async def _recompute(self, event: SyncEvent) -> int:
        now = self._clock()
        animate = (self.last_recompute_minute is not None
                   and abs(now - self.last_recompute_minute) <= self.calendar.minutes_per_hour)
        self.last_hour = now // self.calendar.minutes_per_hour
        self.last_recompute_minute = now

        duration = transition_duration_ms(calendar_defs.SECONDS_PER_GAME_MINUTE * self.calendar.minutes_per_hour)
        weather = self._current_weather()
        synced = 0
        for scene in self.eligible_scenes(event):
            try:
                zone = self._zone_for_scene(scene)
                darkness, lighting = self.composer.compute(scene, zone, weather)
                await scene.update_environment(darkness, lighting, animate=animate, duration_ms=duration)
                synced += 1
            except Exception:
                log.exception("Scene sync failed for scene %s; continuing with remaining scenes.", scene.id)
        log.debug("Scene sync (%s): %d scene(s) updated, animate=%s.", type(event).__name__, synced, animate)
        return synced
