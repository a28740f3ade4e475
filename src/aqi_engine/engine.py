"""Single entry point wiring the registry, resolver, generator and cache together."""
from __future__ import annotations

from typing import List, Optional

from aqi_engine.cache import ForecastCache
from aqi_engine.config import BUFFER_DISTANCE_KM, RANDOM_STATE, REGION_BOUNDS
from aqi_engine.forecasting import CityWideStats, ForecastGenerator, StationForecastResult, city_wide_stats
from aqi_engine.spatial import AreaStationResult, LayerVisibility, SpatialResolver
from aqi_engine.stations import Station, StationRegistry


class ForecastEngine:
    def __init__(
        self,
        registry: Optional[StationRegistry] = None,
        seed: Optional[int] = None,
        buffer_km: Optional[float] = None,
    ):
        self.registry = registry or StationRegistry()
        self.resolver = SpatialResolver(
            self.registry.list_stations(),
            bounds=REGION_BOUNDS,
            buffer_km=BUFFER_DISTANCE_KM if buffer_km is None else buffer_km,
        )
        self.generator = ForecastGenerator(self.registry, RANDOM_STATE if seed is None else seed)
        self.cache = ForecastCache(self.generator.forecast)

    def list_stations(self) -> List[Station]:
        return self.registry.list_stations()

    def resolve(
        self,
        lat: float,
        lng: float,
        visible_layers: Optional[LayerVisibility] = None,
    ) -> AreaStationResult:
        return self.resolver.resolve(lat, lng, visible_layers)

    def forecast(self, station_id: str) -> StationForecastResult:
        return self.cache.get_or_compute(station_id)

    def forecast_all(self) -> List[StationForecastResult]:
        return [self.forecast(station.id) for station in self.registry.list_stations()]

    def city_wide_stats(self) -> CityWideStats:
        return city_wide_stats(self.forecast_all())

    def reset(self) -> None:
        self.cache.clear()
