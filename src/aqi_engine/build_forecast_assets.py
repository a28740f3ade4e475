#!/usr/bin/env python3
"""Export station forecasts, livability and Voronoi zones as CSV and shapefile assets."""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import asdict
from functools import partial
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

import pandas as pd
import shapefile  # type: ignore
from pyproj import CRS
from pyproj.enums import WktVersion
from shapely.geometry.polygon import orient

from aqi_engine.aqi_levels import aqi_info, zone_for
from aqi_engine.config import OUTPUT_DIR
from aqi_engine.contributors import aqi_contributors, aqi_summary
from aqi_engine.engine import ForecastEngine
from aqi_engine.forecasting import SEASON_MONTHS, StationForecastResult
from aqi_engine.spatial import VoronoiTessellation
from aqi_engine.stations import StationRegistry

logger = logging.getLogger(__name__)

OutputConfig = Dict[str, object]


def _write_csv(df: pd.DataFrame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    try:
        display_path = path.relative_to(Path.cwd())
    except ValueError:
        display_path = path
    print(f"✔️  Wrote {display_path}")


def stations_frame(registry: StationRegistry) -> pd.DataFrame:
    rows = []
    for station in registry.list_stations():
        coefficients = registry.get_coefficients(station.id)
        rows.append(
            {
                'station_id': station.id,
                'station_name': station.name,
                'latitude': station.lat,
                'longitude': station.lng,
                'station_type': coefficients.station_type,
                'base_multiplier': coefficients.base_multiplier,
                'trend_sensitivity': coefficients.trend_sensitivity,
                'green_cover_score': coefficients.green_cover_score,
            }
        )
    return pd.DataFrame(rows)


def historical_frame(results: Iterable[StationForecastResult]) -> pd.DataFrame:
    rows = [
        {'station_id': result.station_id, 'year': point.year, 'avg_aqi': point.avg_aqi}
        for result in results
        for point in result.historical
    ]
    return pd.DataFrame(rows, columns=['station_id', 'year', 'avg_aqi'])


def forecasts_frame(results: Iterable[StationForecastResult]) -> pd.DataFrame:
    """One row per station and forecast year, seasonal values spread into columns."""
    rows = []
    for result in results:
        for item in result.forecasts:
            row = {
                'station_id': result.station_id,
                'station_name': result.station_name,
                'station_type': result.station_type,
                'latitude': result.lat,
                'longitude': result.lng,
                'year': item.year,
                'predicted_aqi': item.predicted_aqi,
                'aqi_category': aqi_info(item.predicted_aqi).label,
                'zone': zone_for(item.predicted_aqi),
                'pm25': item.pm25,
                'pm10': item.pm10,
                'confidence': item.confidence,
                'trend': item.trend,
                'top_contributors': '; '.join(
                    contributor.factor
                    for contributor in aqi_contributors(result.station_id, item.predicted_aqi, item.trend)
                ),
                'aqi_summary': aqi_summary(item.predicted_aqi),
            }
            for season, _ in SEASON_MONTHS:
                row[f'aqi_{season.lower()}'] = item.seasonal_breakdown[season]
            row.update(
                {
                    'livability_score': result.livability_score,
                    'livability_class': result.livability_class,
                    'overall_trend': result.overall_trend,
                    'recommendation': result.recommendation,
                }
            )
            rows.append(row)
    return pd.DataFrame(rows)


def city_stats_frame(engine: ForecastEngine) -> pd.DataFrame:
    stats = asdict(engine.city_wide_stats())
    yearly = stats.pop('avg_future_aqi')
    rows = [{'metric': key, 'value': value} for key, value in stats.items()]
    rows.extend({'metric': f'avg_future_aqi_{year}', 'value': value} for year, value in yearly.items())
    return pd.DataFrame(rows, columns=['metric', 'value'])


def write_voronoi_shapefile(tessellation: VoronoiTessellation, path: Path, registry: StationRegistry) -> None:
    """Write each clipped Voronoi cell as a polygon record with a WGS84 .prj sidecar."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with shapefile.Writer(str(path), shapeType=shapefile.POLYGON) as writer:
        writer.field('station_id', 'C', size=64)
        writer.field('name', 'C', size=64)
        writer.field('area_deg2', 'N', decimal=8)
        for station_id, cell in tessellation.cells().items():
            parts = getattr(cell, 'geoms', [cell])
            rings: List[List[List[float]]] = []
            for part in parts:
                if part.geom_type != 'Polygon' or part.is_empty:
                    continue
                # Shapefile outer rings are clockwise.
                rings.append([list(coord) for coord in orient(part, sign=-1.0).exterior.coords])
            if not rings:
                logger.warning('Voronoi cell for %s is empty inside the region; skipped', station_id)
                continue
            station = registry.require(station_id)
            writer.poly(rings)
            writer.record(station_id, station.name, cell.area)
    path.with_suffix('.prj').write_text(CRS.from_epsg(4326).to_wkt(WktVersion.WKT1_ESRI), encoding='utf-8')
    print(f"✔️  Wrote {path}")


def _build_outputs(engine: ForecastEngine, output_dir: Path) -> Dict[str, OutputConfig]:
    return {
        'stations': {
            'builder': partial(stations_frame, engine.registry),
            'output': output_dir / 'stations.csv',
        },
        'historical': {
            'builder': lambda: historical_frame(engine.forecast_all()),
            'output': output_dir / 'historical_aqi.csv',
        },
        'forecasts': {
            'builder': lambda: forecasts_frame(engine.forecast_all()),
            'output': output_dir / 'station_forecasts.csv',
        },
        'city_stats': {
            'builder': partial(city_stats_frame, engine),
            'output': output_dir / 'city_wide_stats.csv',
        },
        'voronoi': {
            'writer': lambda path: write_voronoi_shapefile(engine.resolver.tessellation, path, engine.registry),
            'output': output_dir / 'voronoi_zones.shp',
            'optional': True,
        },
    }


def build_output(key: str, outputs: Dict[str, OutputConfig]) -> None:
    config = outputs[key]
    try:
        if 'writer' in config:
            writer: Callable[[Path], None] = config['writer']  # type: ignore[assignment]
            writer(config['output'])  # type: ignore[arg-type]
        else:
            builder: Callable[[], pd.DataFrame] = config['builder']  # type: ignore[assignment]
            _write_csv(builder(), config['output'])  # type: ignore[arg-type]
    except Exception as exc:
        if config.get('optional'):
            print(f"⚠️  Skipping {key}: {exc}")
            return
        raise


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='Export deterministic AQI forecasts and livability assets.')
    parser.add_argument('outputs', nargs='*', help='Optional output keys (default: all)')
    parser.add_argument('--seed', type=int, default=None, help='Global random state (default: AQ_RANDOM_STATE or 42)')
    parser.add_argument('--output-dir', type=Path, default=OUTPUT_DIR, help='Directory for generated assets')
    args = parser.parse_args(argv)

    engine = ForecastEngine(seed=args.seed)
    outputs = _build_outputs(engine, args.output_dir)
    keys = args.outputs or list(outputs.keys())
    for key in keys:
        if key not in outputs:
            print(f"Unknown output '{key}'. Available: {', '.join(outputs)}", file=sys.stderr)
            continue
        build_output(key, outputs)


if __name__ == '__main__':
    main()
