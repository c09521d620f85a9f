# almanac/settings_store.py
"""
World-scoped settings: an in-memory cache in front of the world_settings table.
Reads are synchronous; writes update the cache then persist.
"""
import copy
import logging
from typing import Any, Dict, Optional, TYPE_CHECKING

from .definitions import settings as setting_defs

if TYPE_CHECKING:
    from .database import DatabaseManager

log = logging.getLogger(__name__)


class WorldSettings:
    def __init__(self, db_manager: "DatabaseManager", defaults: Optional[Dict[str, Any]] = None):
        self.db_manager = db_manager
        self.defaults = dict(setting_defs.DEFAULTS if defaults is None else defaults)
        self._values: Dict[str, Any] = {}

    async def load(self):
        """Replaces the cache with what is persisted."""
        stored = await self.db_manager.load_world_settings()
        self._values = dict(stored or {})
        log.info("Loaded %d world setting(s).", len(self._values))

    def get(self, key: str, default: Any = None) -> Any:
        """Returns a copy of a setting, falling back to its registered default."""
        if key in self._values:
            value = self._values[key]
        elif default is not None:
            value = default
        else:
            value = self.defaults.get(key)
        return copy.deepcopy(value)

    async def set(self, key: str, value: Any):
        self._values[key] = copy.deepcopy(value)
        await self.db_manager.save_world_setting(key, value)
        log.debug("World setting '%s' updated.", key)

