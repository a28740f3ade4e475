"""Compute-once memoization of station forecasts."""
from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Iterable, List, Optional

from aqi_engine.forecasting import StationForecastResult

logger = logging.getLogger(__name__)


class ForecastCache:
    """Holds one forecast per station id for the lifetime of the cache.

    ``compute`` is called at most once per id until ``clear`` is called.
    """

    def __init__(self, compute: Callable[[str], StationForecastResult]):
        self._compute = compute
        self._entries: Dict[str, StationForecastResult] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def has(self, station_id: str) -> bool:
        return station_id in self._entries

    def peek(self, station_id: str) -> Optional[StationForecastResult]:
        return self._entries.get(station_id)

    def get_or_compute(self, station_id: str) -> StationForecastResult:
        cached = self._entries.get(station_id)
        if cached is not None:
            return cached
        with self._lock:
            cached = self._entries.get(station_id)
            if cached is None:
                logger.debug('Forecast cache miss for %s', station_id)
                cached = self._compute(station_id)
                self._entries[station_id] = cached
        return cached

    def prewarm(self, station_ids: Iterable[str]) -> None:
        for station_id in station_ids:
            self.get_or_compute(station_id)

    def cached_station_ids(self) -> List[str]:
        return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
