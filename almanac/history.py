# almanac/history.py
"""
Day-by-day record of the weather that actually happened.

Stored as nested {year: {month: {day: state}}} with string keys so it
round-trips through JSONB unchanged.
"""
import logging
from typing import Dict, Any, List, Optional, Tuple

from pydantic import ValidationError

import config
from .models import HistoryEntry, WeatherState

log = logging.getLogger(__name__)


class WeatherHistoryStore:
    """One record per calendar day. Recording overwrites; retention is enforced on write."""

    def __init__(self, data: Optional[Dict[str, Any]] = None, max_days: int = config.DEFAULT_HISTORY_DAYS):
        self.max_days = max_days
        self._days: Dict[Tuple[int, int, int], WeatherState] = {}
        self.load(data or {})

    def load(self, data: Dict[str, Any]):
        self._days.clear()
        for year_key, months in data.items():
            for month_key, days in (months or {}).items():
                for day_key, state in (days or {}).items():
                    try:
                        key = (int(year_key), int(month_key), int(day_key))
                        self._days[key] = WeatherState.model_validate(state)
                    except (ValueError, TypeError, ValidationError):
                        log.warning("Dropping malformed weather history entry %s-%s-%s.",
                                    year_key, month_key, day_key)

    def __len__(self) -> int:
        return len(self._days)

    def record(self, year: int, month: int, day: int, state: WeatherState) -> bool:
        """Stores the weather for a day. Returns False when recording is disabled."""
        if self.max_days <= 0:
            return False
        self._days[(year, month, day)] = state.model_copy(deep=True)
        self.prune()
        return True

    def prune(self):
        """Drops the oldest days until at most `max_days` remain."""
        if self.max_days <= 0:
            return
        excess = len(self._days) - self.max_days
        if excess <= 0:
            return
        for key in sorted(self._days)[:excess]:
            del self._days[key]
        log.debug("Pruned %d day(s) of weather history.", excess)

    def get_for_date(self, year: int, month: int, day: int) -> Optional[HistoryEntry]:
        state = self._days.get((year, month, day))
        if state is None:
            return None
        return HistoryEntry(year=year, month=month, day=day, **state.model_dump())

    def query(self, year: Optional[int] = None, month: Optional[int] = None) -> List[HistoryEntry]:
        """Chronological records, optionally restricted to a year and month."""
        results = []
        for key in sorted(self._days):
            if year is not None and key[0] != year:
                continue
            if month is not None and key[1] != month:
                continue
            results.append(HistoryEntry(year=key[0], month=key[1], day=key[2], **self._days[key].model_dump()))
        return results

    def to_data(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for (year, month, day), state in sorted(self._days.items()):
            data.setdefault(str(year), {}).setdefault(str(month), {})[str(day)] = state.model_dump()
        return data
