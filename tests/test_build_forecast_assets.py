import pandas as pd
import shapefile  # type: ignore

from aqi_engine import build_forecast_assets as assets
from aqi_engine.contributors import aqi_contributors, aqi_summary
from aqi_engine.engine import ForecastEngine
from aqi_engine.stations import DELHI_STATIONS


def test_forecasts_frame_has_one_row_per_station_year():
    engine = ForecastEngine(seed=42)
    df = assets.forecasts_frame(engine.forecast_all())

    assert len(df) == len(DELHI_STATIONS) * 5
    assert {
        'station_id',
        'year',
        'predicted_aqi',
        'aqi_category',
        'zone',
        'pm25',
        'pm10',
        'confidence',
        'aqi_winter',
        'aqi_monsoon',
        'livability_score',
        'livability_class',
        'top_contributors',
        'aqi_summary',
    } <= set(df.columns)
    assert df['predicted_aqi'].between(50, 450).all()
    assert df.groupby('station_id')['livability_score'].nunique().eq(1).all()
    assert df['top_contributors'].str.split('; ').str.len().between(3, 5).all()


def test_forecast_rows_name_contributors_for_their_year():
    engine = ForecastEngine(seed=42)
    df = assets.forecasts_frame([engine.forecast('delhi-wazirpur')])
    row = df.iloc[0]

    expected = aqi_contributors('delhi-wazirpur', row['predicted_aqi'], row['trend'])
    assert row['top_contributors'] == '; '.join(contributor.factor for contributor in expected)
    assert row['top_contributors'].startswith('Industrial Activity')
    assert row['aqi_summary'] == aqi_summary(row['predicted_aqi'])


def test_stations_and_historical_frames():
    engine = ForecastEngine(seed=42)
    stations = assets.stations_frame(engine.registry)
    historical = assets.historical_frame(engine.forecast_all())

    assert len(stations) == len(DELHI_STATIONS)
    assert stations.loc[stations['station_id'] == 'delhi-okhla', 'station_type'].item() == 'industrial'
    assert sorted(historical['year'].unique()) == [2021, 2022, 2023, 2024]
    assert len(historical) == len(DELHI_STATIONS) * 4


def test_main_writes_requested_csv(tmp_path, capsys):
    assets.main(['forecasts', 'city_stats', 'bogus', '--output-dir', str(tmp_path)])

    df = pd.read_csv(tmp_path / 'station_forecasts.csv')
    assert len(df) == len(DELHI_STATIONS) * 5
    stats = pd.read_csv(tmp_path / 'city_wide_stats.csv')
    assert 'avg_livability_score' in set(stats['metric'])
    assert not (tmp_path / 'stations.csv').exists()
    assert "Unknown output 'bogus'" in capsys.readouterr().err


def test_voronoi_shapefile_has_a_cell_per_station(tmp_path):
    engine = ForecastEngine(seed=42)
    path = tmp_path / 'zones.shp'
    assets.write_voronoi_shapefile(engine.resolver.tessellation, path, engine.registry)

    assert path.with_suffix('.prj').read_text(encoding='utf-8').startswith('GEOGCS')
    with shapefile.Reader(str(path)) as reader:
        ids = sorted(record['station_id'] for record in reader.records())
        assert reader.shapeType == shapefile.POLYGON
    assert ids == sorted(station.id for station in DELHI_STATIONS)


def test_optional_output_failure_is_skipped(tmp_path, capsys):
    def broken(path):
        raise RuntimeError('no geometry')

    outputs = {'voronoi': {'writer': broken, 'output': tmp_path / 'x.shp', 'optional': True}}
    assets.build_output('voronoi', outputs)
    assert 'Skipping voronoi: no geometry' in capsys.readouterr().out
