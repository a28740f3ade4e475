import math
import threading
import time

import pytest

from aqi_engine import spatial
from aqi_engine.config import REGION_BOUNDS
from aqi_engine.geo import haversine_km, nearest_station
from aqi_engine.spatial import LayerVisibility, SpatialResolver, reason_text
from aqi_engine.stations import DELHI_STATIONS, Station

SYNTHETIC_STATIONS = [
    Station('a-south-west', 'South West', 28.5, 76.9),
    Station('b-north-west', 'North West', 28.8, 76.9),
    Station('c-east', 'East', 28.65, 77.4),
]


@pytest.fixture()
def resolver():
    return SpatialResolver(SYNTHETIC_STATIONS)


def test_haversine_matches_known_distance():
    # One degree of latitude on the 6371 km sphere.
    assert haversine_km(28.0, 77.0, 29.0, 77.0) == pytest.approx(6371.0 * math.pi / 180, rel=1e-9)
    assert haversine_km(28.6, 77.2, 28.6, 77.2) == pytest.approx(0.0, abs=1e-12)


def test_nearest_station_breaks_ties_by_lowest_id():
    stations = [Station('b', 'B', 0.0, 1.0), Station('a', 'A', 0.0, -1.0)]
    station, distance = nearest_station(0.0, 0.0, stations)
    assert station.id == 'a'
    assert distance == pytest.approx(haversine_km(0.0, 0.0, 0.0, 1.0))


def test_point_inside_cell_far_from_stations_resolves_by_voronoi(resolver):
    result = resolver.resolve(28.5, 77.05)

    assert result.station_id == 'a-south-west'
    assert result.reason.kind == 'voronoi'
    assert result.distance_km > resolver.buffer_km
    assert result.distance_km == pytest.approx(haversine_km(28.5, 77.05, 28.5, 76.9))


def test_hidden_voronoi_layer_falls_back_to_buffer(resolver):
    result = resolver.resolve(28.51, 76.91, LayerVisibility(voronoi=False, buffers=True))

    assert result.station_id == 'a-south-west'
    assert result.reason.kind == 'buffer'
    assert result.reason.distance_km == pytest.approx(result.distance_km)
    assert result.distance_km <= 5


def test_point_outside_buffers_without_voronoi_resolves_nearest(resolver):
    result = resolver.resolve(28.5, 77.05, LayerVisibility(voronoi=False, buffers=True))

    assert result.station_id == 'a-south-west'
    assert result.reason.kind == 'nearest'
    assert result.reason.distance_km == pytest.approx(result.distance_km)


def test_point_outside_region_still_resolves_nearest(resolver):
    result = resolver.resolve(30.0, 79.0)

    assert result.reason.kind == 'nearest'
    assert result.station_id == 'c-east'
    assert result.distance_km > 0


def test_tessellation_is_built_once(monkeypatch):
    built = []
    real_tessellation = spatial.VoronoiTessellation

    def counting(*args, **kwargs):
        built.append(1)
        return real_tessellation(*args, **kwargs)

    monkeypatch.setattr(spatial, 'VoronoiTessellation', counting)
    resolver = SpatialResolver(SYNTHETIC_STATIONS)
    assert built == []
    for lat in (28.45, 28.6, 28.75):
        resolver.resolve(lat, 77.0)
    assert len(built) == 1


def test_concurrent_first_access_builds_one_tessellation(monkeypatch):
    built = []
    real_tessellation = spatial.VoronoiTessellation

    def counting(*args, **kwargs):
        built.append(1)
        time.sleep(0.05)
        return real_tessellation(*args, **kwargs)

    monkeypatch.setattr(spatial, 'VoronoiTessellation', counting)
    resolver = SpatialResolver(SYNTHETIC_STATIONS)
    start = threading.Barrier(8)
    seen = []

    def worker():
        start.wait()
        seen.append(resolver.tessellation)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(built) == 1
    assert len(seen) == 8
    assert all(tessellation is seen[0] for tessellation in seen)


def test_cells_cover_their_sites_and_the_region(resolver):
    cells = resolver.tessellation.cells()

    assert sorted(cells) == [station.id for station in SYNTHETIC_STATIONS]
    for station in SYNTHETIC_STATIONS:
        assert resolver.tessellation.locate(station.lat, station.lng) == station.id
    region_area = (REGION_BOUNDS['max_lat'] - REGION_BOUNDS['min_lat']) * (
        REGION_BOUNDS['max_lng'] - REGION_BOUNDS['min_lng']
    )
    assert sum(cell.area for cell in cells.values()) == pytest.approx(region_area, rel=1e-6)


def test_voronoi_agrees_with_planar_nearest_site():
    resolver = SpatialResolver(DELHI_STATIONS)
    checked = 0
    for i in range(1, 20):
        for j in range(1, 20):
            lat = REGION_BOUNDS['min_lat'] + (REGION_BOUNDS['max_lat'] - REGION_BOUNDS['min_lat']) * i / 20
            lng = REGION_BOUNDS['min_lng'] + (REGION_BOUNDS['max_lng'] - REGION_BOUNDS['min_lng']) * j / 20
            ranked = sorted(
                ((station.lng - lng) ** 2 + (station.lat - lat) ** 2, station.id) for station in DELHI_STATIONS
            )
            if ranked[1][0] - ranked[0][0] < 1e-6:
                continue
            assert resolver.tessellation.locate(lat, lng) == ranked[0][1]
            checked += 1
    assert checked > 300


def test_resolve_is_total_around_region():
    resolver = SpatialResolver(DELHI_STATIONS)
    known = {station.id for station in DELHI_STATIONS}
    margin = 0.5
    for i in range(11):
        for j in range(11):
            lat = REGION_BOUNDS['min_lat'] - margin + (REGION_BOUNDS['max_lat'] - REGION_BOUNDS['min_lat'] + 2 * margin) * i / 10
            lng = REGION_BOUNDS['min_lng'] - margin + (REGION_BOUNDS['max_lng'] - REGION_BOUNDS['min_lng'] + 2 * margin) * j / 10
            result = resolver.resolve(lat, lng)
            assert result.station_id in known
            assert result.distance_km >= 0


def test_single_station_cell_is_whole_region():
    resolver = SpatialResolver([Station('solo', 'Solo', 28.6, 77.2)])
    assert resolver.resolve(28.45, 77.45).reason.kind == 'voronoi'


def test_resolver_rejects_unusable_configuration():
    with pytest.raises(ValueError):
        SpatialResolver([])
    with pytest.raises(ValueError):
        SpatialResolver(SYNTHETIC_STATIONS, buffer_km=0)


def test_reason_text(resolver):
    assert reason_text(resolver.resolve(28.5, 77.05)) == 'Inside Voronoi zone of South West'
    buffered = resolver.resolve(28.51, 76.91, LayerVisibility(voronoi=False))
    assert reason_text(buffered).startswith('Within influence buffer of South West (')
    assert reason_text(resolver.resolve(30.0, 79.0)).startswith('Nearest station: East (')
