import threading
import time

import pytest

from aqi_engine.aqi_levels import aqi_info, health_advisory, zone_for, zone_info
from aqi_engine.cache import ForecastCache
from aqi_engine.engine import ForecastEngine
from aqi_engine.stations import DELHI_STATIONS, StationNotFoundError


@pytest.fixture()
def engine():
    return ForecastEngine(seed=42)


def test_cache_computes_each_station_once():
    calls = []

    def compute(station_id):
        calls.append(station_id)
        return object()

    cache = ForecastCache(compute)
    first = cache.get_or_compute('delhi-ito')
    second = cache.get_or_compute('delhi-ito')

    assert first is second
    assert calls == ['delhi-ito']
    assert cache.has('delhi-ito')
    assert cache.peek('delhi-ito') is first
    assert cache.peek('delhi-okhla') is None


def test_cache_concurrent_misses_compute_once():
    calls = []

    def compute(station_id):
        calls.append(station_id)
        time.sleep(0.05)
        return object()

    cache = ForecastCache(compute)
    start = threading.Barrier(8)
    results = []

    def worker():
        start.wait()
        results.append(cache.get_or_compute('x'))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert calls == ['x']
    assert len(results) == 8
    assert all(result is results[0] for result in results)


def test_cache_prewarm_and_clear():
    calls = []
    cache = ForecastCache(lambda station_id: calls.append(station_id) or station_id.upper())

    cache.prewarm(['a', 'b', 'a'])
    assert cache.cached_station_ids() == ['a', 'b']
    assert calls == ['a', 'b']

    cache.clear()
    assert len(cache) == 0
    assert not cache.has('a')
    cache.get_or_compute('a')
    assert calls == ['a', 'b', 'a']


def test_engine_forecast_identical_after_reset(engine):
    for station in DELHI_STATIONS:
        cached = engine.forecast(station.id)
        assert engine.forecast(station.id) is cached
    before = engine.forecast_all()

    engine.reset()
    assert not engine.cache.has(DELHI_STATIONS[0].id)
    assert engine.forecast_all() == before


def test_engine_unknown_station_is_not_cached(engine):
    with pytest.raises(StationNotFoundError):
        engine.forecast('delhi-atlantis')
    assert not engine.cache.has('delhi-atlantis')


def test_engine_resolves_clicks_to_forecastable_stations(engine):
    result = engine.resolve(28.6469, 77.3160)
    assert result.station_id == 'delhi-anand-vihar'
    assert result.reason.kind == 'voronoi'
    assert result.distance_km == pytest.approx(0.0, abs=1e-9)
    assert engine.forecast(result.station_id).station_name == 'Anand Vihar'


def test_engine_lists_registry_in_order(engine):
    assert [station.id for station in engine.list_stations()] == [station.id for station in DELHI_STATIONS]


def test_city_wide_stats_reuses_cache(engine):
    stats = engine.city_wide_stats()
    assert engine.cache.cached_station_ids() == [station.id for station in DELHI_STATIONS]
    assert stats.highly_livable_count + stats.moderately_livable_count + stats.low_livability_count == 25


def test_aqi_levels_follow_inclusive_bands():
    assert aqi_info(50).level == 'good'
    assert aqi_info(51).level == 'satisfactory'
    assert aqi_info(150).level == 'moderate'
    assert aqi_info(200).level == 'poor'
    assert aqi_info(300).level == 'very-poor'
    assert aqi_info(301).level == 'hazardous'
    assert health_advisory(301).mask.startswith('Avoid any outdoor exposure')
    assert [zone_for(value) for value in (100, 101, 200, 201)] == ['blue', 'yellow', 'yellow', 'red']
    assert zone_info('red')['label'] == 'Red Zone'
    with pytest.raises(ValueError):
        zone_info('green')
