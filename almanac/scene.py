# almanac/scene.py
"""
Represents a scene: a persisted map whose ambient darkness and lighting are
driven by the environment simulation.
"""
import logging
from typing import Any, Dict, Optional, TYPE_CHECKING

from .models import EnvironmentLighting

if TYPE_CHECKING:
    from .database import DatabaseManager

log = logging.getLogger(__name__)


class Scene:
    def __init__(self, scene_data: Dict[str, Any], db_manager: Optional["DatabaseManager"] = None):
        self.db_manager = db_manager
        self.id: int = scene_data['id']
        self.name: str = scene_data.get('name', f"Scene {self.id}")
        self.active: bool = bool(scene_data.get('is_active', False))
        self.flags: Dict[str, Any] = dict(scene_data.get('flags') or {})
        self.environment: Dict[str, Any] = dict(scene_data.get('environment') or {})

    def __repr__(self) -> str:
        return f"<Scene {self.id}: '{self.name}'{' (active)' if self.active else ''}>"

    # --- Flags ---
    def get_flag(self, key: str, default: Any = None) -> Any:
        return self.flags.get(key, default)

    def has_flag(self, key: str) -> bool:
        return key in self.flags

    async def set_flag(self, key: str, value: Any):
        self.flags[key] = value
        await self._save_flags()

    async def unset_flag(self, key: str):
        if self.flags.pop(key, None) is not None:
            await self._save_flags()

    async def _save_flags(self):
        if self.db_manager:
            await self.db_manager.save_scene_flags(self.id, self.flags)

    # --- Environment ---
    @property
    def darkness_level(self) -> Optional[float]:
        return self.environment.get('darkness_level')

    async def update_environment(self, darkness: float, lighting: Optional[EnvironmentLighting] = None,
                                 animate: bool = False, duration_ms: int = 0):
        """
        Writes darkness plus any defined lighting channels. `animate` asks clients
        to interpolate over `duration_ms` instead of snapping.
        """
        environment = dict(self.environment)
        environment['darkness_level'] = darkness
        if lighting is not None:
            for state in ('base', 'dark'):
                channel = getattr(lighting, state).model_dump(exclude_none=True)
                if channel:
                    environment[state] = {**environment.get(state, {}), **channel}
        environment['transition'] = {'animate': animate, 'duration_ms': duration_ms if animate else 0}

        if self.db_manager:
            await self.db_manager.save_scene_environment(self.id, environment)
        self.environment = environment
        log.debug("Scene %s environment written: darkness=%.3f animate=%s", self.id, darkness, animate)
