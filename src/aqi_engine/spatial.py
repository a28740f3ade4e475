"""Map an arbitrary point to the monitoring station that governs it.

Stages are tried in priority order: Voronoi cell membership, then the
influence buffer around each station, then the plain nearest station. The
last stage is total, so ``resolve`` always returns a station for a
non-empty registry. Equidistant candidates resolve to the lowest station id.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from shapely.geometry import MultiPoint, Point, Polygon, box
from shapely.ops import voronoi_diagram
from shapely.strtree import STRtree

from aqi_engine.config import BUFFER_DISTANCE_KM, REGION_BOUNDS
from aqi_engine.geo import haversine_km, nearest_station
from aqi_engine.stations import Station

logger = logging.getLogger(__name__)

REASON_VORONOI = 'voronoi'
REASON_BUFFER = 'buffer'
REASON_NEAREST = 'nearest'


@dataclass(frozen=True)
class AssignmentReason:
    kind: str
    distance_km: Optional[float] = None


@dataclass(frozen=True)
class AreaStationResult:
    station_id: str
    station_name: str
    lat: float
    lng: float
    distance_km: float
    reason: AssignmentReason


@dataclass(frozen=True)
class LayerVisibility:
    voronoi: bool = True
    buffers: bool = True


class VoronoiTessellation:
    """Voronoi cells of the station sites, clipped to the region rectangle.

    Cells are computed in planar lng/lat space, the same space the map layer
    draws them in.
    """

    def __init__(self, stations: Sequence[Station], bounds: Mapping[str, float] = REGION_BOUNDS):
        if not stations:
            raise ValueError('Cannot tessellate an empty station set')
        self.bounds = box(bounds['min_lng'], bounds['min_lat'], bounds['max_lng'], bounds['max_lat'])
        self._cells = self._build_cells(stations)
        self._ids: List[str] = list(self._cells)
        self._tree = STRtree([self._cells[station_id] for station_id in self._ids])

    def _build_cells(self, stations: Sequence[Station]) -> Dict[str, Polygon]:
        if len(stations) == 1:
            return {stations[0].id: self.bounds}
        sites = MultiPoint([(station.lng, station.lat) for station in stations])
        polygons = list(voronoi_diagram(sites, envelope=self.bounds).geoms)
        cells: Dict[str, Polygon] = {}
        for station in stations:
            site = Point(station.lng, station.lat)
            cell = next((polygon for polygon in polygons if polygon.covers(site)), None)
            if cell is None:
                raise RuntimeError(f"No Voronoi cell produced for station {station.id}")
            cells[station.id] = cell.intersection(self.bounds)
        return cells

    def cells(self) -> Dict[str, Polygon]:
        return dict(self._cells)

    def locate(self, lat: float, lng: float) -> Optional[str]:
        """Station id whose cell contains the point, or None outside the region."""
        point = Point(lng, lat)
        if not self.bounds.covers(point):
            return None
        hits = self._tree.query(point, predicate='covered_by')
        candidates = sorted(self._ids[int(idx)] for idx in hits)
        return candidates[0] if candidates else None


class SpatialResolver:
    def __init__(
        self,
        stations: Sequence[Station],
        bounds: Mapping[str, float] = REGION_BOUNDS,
        buffer_km: float = BUFFER_DISTANCE_KM,
    ):
        if not stations:
            raise ValueError('SpatialResolver requires at least one station')
        if buffer_km <= 0:
            raise ValueError(f"Buffer radius must be positive, got {buffer_km}")
        self._stations = tuple(stations)
        self._by_id = {station.id: station for station in self._stations}
        self._bounds = dict(bounds)
        self.buffer_km = buffer_km
        self._tessellation: Optional[VoronoiTessellation] = None
        self._lock = threading.Lock()

    @property
    def tessellation(self) -> VoronoiTessellation:
        if self._tessellation is None:
            with self._lock:
                if self._tessellation is None:
                    logger.debug('Building Voronoi tessellation for %d stations', len(self._stations))
                    self._tessellation = VoronoiTessellation(self._stations, self._bounds)
        return self._tessellation

    def _result(self, station: Station, distance: float, reason: AssignmentReason) -> AreaStationResult:
        return AreaStationResult(
            station_id=station.id,
            station_name=station.name,
            lat=station.lat,
            lng=station.lng,
            distance_km=distance,
            reason=reason,
        )

    def find_by_voronoi(self, lat: float, lng: float) -> Optional[AreaStationResult]:
        station_id = self.tessellation.locate(lat, lng)
        if station_id is None:
            return None
        station = self._by_id[station_id]
        distance = haversine_km(lat, lng, station.lat, station.lng)
        return self._result(station, distance, AssignmentReason(REASON_VORONOI))

    def find_by_buffer(self, lat: float, lng: float) -> Optional[AreaStationResult]:
        match = nearest_station(lat, lng, self._stations, max_distance_km=self.buffer_km)
        if match is None:
            return None
        station, distance = match
        return self._result(station, distance, AssignmentReason(REASON_BUFFER, distance))

    def find_nearest(self, lat: float, lng: float) -> AreaStationResult:
        station, distance = nearest_station(lat, lng, self._stations)
        return self._result(station, distance, AssignmentReason(REASON_NEAREST, distance))

    def resolve(
        self,
        lat: float,
        lng: float,
        visible_layers: Optional[LayerVisibility] = None,
    ) -> AreaStationResult:
        visibility = visible_layers or LayerVisibility()
        if visibility.voronoi:
            result = self.find_by_voronoi(lat, lng)
            if result is not None:
                return result
        if visibility.buffers:
            result = self.find_by_buffer(lat, lng)
            if result is not None:
                return result
        logger.debug('Falling back to nearest station for (%.5f, %.5f)', lat, lng)
        return self.find_nearest(lat, lng)


def reason_text(result: AreaStationResult) -> str:
    reason = result.reason
    if reason.kind == REASON_VORONOI:
        return f"Inside Voronoi zone of {result.station_name}"
    if reason.kind == REASON_BUFFER:
        return f"Within influence buffer of {result.station_name} ({reason.distance_km:.1f} km)"
    return f"Nearest station: {result.station_name} ({reason.distance_km:.1f} km)"
