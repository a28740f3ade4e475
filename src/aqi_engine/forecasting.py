"""Deterministic multi-year AQI forecasts per monitoring station.

Each station's forecast is built recursively: every predicted year is rounded,
clamped and appended to a running series, and that series feeds the lag and
rolling-average features of the next year. The only stochastic inputs are the
PM jitters, drawn from a Mulberry32 stream seeded from the station id, so a
given station id and random state always produce the same result.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from aqi_engine.config import FIRST_FORECAST_YEAR, FORECAST_HORIZON_YEARS, RANDOM_STATE
from aqi_engine.livability import (
    HIGHLY_LIVABLE,
    LOW_LIVABILITY,
    MODERATELY_LIVABLE,
    classify,
    livability_score,
    round_half_up,
    sequential_sum,
)
from aqi_engine.seeded_random import create_generator, station_seed
from aqi_engine.stations import StationRegistry

logger = logging.getLogger(__name__)

IMPROVING = 'improving'
STABLE = 'stable'
DECLINING = 'declining'

# City-wide yearly averages the station baselines are scaled from.
HISTORICAL_YEARLY_AQI: Dict[int, Dict[str, float]] = {
    2021: {'avg_aqi': 298, 'pm25': 156.2, 'pm10': 289.4, 'good_days': 52, 'moderate_days': 89, 'poor_days': 224},
    2022: {'avg_aqi': 285, 'pm25': 148.7, 'pm10': 275.8, 'good_days': 61, 'moderate_days': 95, 'poor_days': 209},
    2023: {'avg_aqi': 271, 'pm25': 139.4, 'pm10': 261.2, 'good_days': 68, 'moderate_days': 102, 'poor_days': 195},
    2024: {'avg_aqi': 262, 'pm25': 132.1, 'pm10': 248.5, 'good_days': 75, 'moderate_days': 108, 'poor_days': 182},
}
FIRST_HISTORICAL_YEAR = min(HISTORICAL_YEARLY_AQI)

# Monthly multipliers on the yearly mean.
SEASONAL_PATTERNS: Dict[int, float] = {
    1: 1.25,
    2: 1.15,
    3: 0.95,
    4: 0.75,
    5: 0.70,
    6: 0.65,
    7: 0.55,
    8: 0.60,
    9: 0.75,
    10: 1.10,
    11: 1.45,
    12: 1.35,
}

SEASON_MONTHS: List[Tuple[str, Tuple[int, ...]]] = [
    ('Winter', (12, 1, 2)),
    ('Spring', (3, 4, 5)),
    ('Monsoon', (6, 7, 8)),
    ('Autumn', (9, 10, 11)),
]

TREND_SLOPE = -8.5
TREND_INTERCEPT = 298
LAG_WEIGHT = 0.35
ROLLING_WEIGHT = 0.25
FEATURE_SCALE = 0.1
GREEN_COVER_DAMPING = 0.3
ROLLING_WINDOW = 3

MIN_AQI = 50
MAX_AQI = 450
PM25_RATIO, PM25_JITTER = 0.52, 5
PM10_RATIO, PM10_JITTER = 0.95, 10

BASE_CONFIDENCE = 0.95
CONFIDENCE_DECAY = 0.06
MIN_CONFIDENCE = 0.65

YEARLY_TREND_BAND = 10
OVERALL_TREND_BAND = 15

RECOMMENDATIONS: Dict[str, Dict[str, str]] = {
    HIGHLY_LIVABLE: {
        IMPROVING: 'Excellent choice for long-term residence. Air quality is improving and expected to remain good.',
        STABLE: 'Highly recommended for residential purposes. Consistent good air quality expected.',
        DECLINING: 'Currently good but monitor trends. Consider air purifiers as precaution.',
    },
    MODERATELY_LIVABLE: {
        IMPROVING: 'Promising area with improving air quality. Good for investment as conditions will improve.',
        STABLE: 'Acceptable for residence with precautions. Air purifiers recommended for sensitive groups.',
        DECLINING: 'Caution advised. Consider other areas or invest in robust air filtration.',
    },
    LOW_LIVABILITY: {
        IMPROVING: 'Wait for further improvement before considering for residence. Industrial activity affects air quality.',
        STABLE: 'Not recommended for long-term residence without significant air quality measures.',
        DECLINING: 'Avoid for residential purposes. High pollution expected to continue.',
    },
}

STATION_TYPE_NOTES = {
    'industrial': ' Industrial area - expect higher pollution.',
    'traffic': ' High traffic area - peak hour pollution expected.',
}


@dataclass(frozen=True)
class HistoricalYear:
    year: int
    avg_aqi: int


@dataclass(frozen=True)
class YearlyForecast:
    year: int
    predicted_aqi: int
    pm25: int
    pm10: int
    confidence: float
    seasonal_breakdown: Dict[str, int]
    trend: str


@dataclass(frozen=True)
class StationForecastResult:
    station_id: str
    station_name: str
    station_type: str
    lat: float
    lng: float
    historical: Tuple[HistoricalYear, ...]
    forecasts: Tuple[YearlyForecast, ...]
    livability_score: int
    livability_class: str
    overall_trend: str
    recommendation: str


@dataclass(frozen=True)
class CityWideStats:
    avg_livability_score: int
    highly_livable_count: int
    moderately_livable_count: int
    low_livability_count: int
    overall_trend: str
    avg_future_aqi: Dict[int, int]


def _lag_features(series: Sequence[int]) -> Tuple[int, int, int]:
    lag1 = series[-1]
    lag2 = series[-2] if len(series) >= 2 else lag1
    lag3 = series[-3] if len(series) >= 3 else lag2
    return lag1, lag2, lag3


def _rolling_average(series: Sequence[int], window: int = ROLLING_WINDOW) -> float:
    values = series[-window:]
    return sequential_sum(values) / len(values)


def _trend_label(current: float, reference: float, band: float) -> str:
    if current < reference - band:
        return IMPROVING
    if current > reference + band:
        return DECLINING
    return STABLE


def seasonal_breakdown(predicted_aqi: int) -> Dict[str, int]:
    breakdown = {}
    for season, months in SEASON_MONTHS:
        factor = sequential_sum(SEASONAL_PATTERNS[month] for month in months) / len(months)
        breakdown[season] = round_half_up(predicted_aqi * factor)
    return breakdown


def recommendation_for(livability_class: str, overall_trend: str, station_type: str) -> str:
    text = RECOMMENDATIONS.get(livability_class, {}).get(overall_trend, 'Assessment pending.')
    return text + STATION_TYPE_NOTES.get(station_type, '')


class ForecastGenerator:
    def __init__(self, registry: StationRegistry, random_state: int = RANDOM_STATE):
        self.registry = registry
        self.random_state = random_state

    def historical_series(self, base_multiplier: float) -> List[HistoricalYear]:
        return [
            HistoricalYear(year, round_half_up(data['avg_aqi'] * base_multiplier))
            for year, data in sorted(HISTORICAL_YEARLY_AQI.items())
        ]

    def forecast(self, station_id: str) -> StationForecastResult:
        station = self.registry.require(station_id)
        coefficients = self.registry.get_coefficients(station_id)
        random = create_generator(station_seed(station_id, self.random_state))

        historical = self.historical_series(coefficients.base_multiplier)
        historical_values = [point.avg_aqi for point in historical]
        running = list(historical_values)
        green_cover_effect = 1 - coefficients.green_cover_score * GREEN_COVER_DAMPING

        forecasts: List[YearlyForecast] = []
        for year_offset in range(FORECAST_HORIZON_YEARS):
            year = FIRST_FORECAST_YEAR + year_offset
            lag1, lag2, lag3 = _lag_features(running)
            rolling_avg = _rolling_average(running)

            trend_component = TREND_SLOPE * (year - FIRST_HISTORICAL_YEAR) * coefficients.trend_sensitivity
            lag_component = (
                lag1 * LAG_WEIGHT
                + lag2 * LAG_WEIGHT * 0.5
                + lag3 * LAG_WEIGHT * 0.25
            )
            rolling_component = rolling_avg * ROLLING_WEIGHT
            raw = (
                TREND_INTERCEPT * coefficients.base_multiplier
                + trend_component
                + lag_component * FEATURE_SCALE
                + rolling_component * FEATURE_SCALE
            ) * green_cover_effect
            predicted_aqi = max(MIN_AQI, min(MAX_AQI, round_half_up(raw)))

            # pm25 before pm10: the draw order is part of the reproducible output.
            pm25 = round_half_up(predicted_aqi * PM25_RATIO + random() * PM25_JITTER)
            pm10 = round_half_up(predicted_aqi * PM10_RATIO + random() * PM10_JITTER)

            forecasts.append(
                YearlyForecast(
                    year=year,
                    predicted_aqi=predicted_aqi,
                    pm25=pm25,
                    pm10=pm10,
                    confidence=max(MIN_CONFIDENCE, BASE_CONFIDENCE - year_offset * CONFIDENCE_DECAY),
                    seasonal_breakdown=seasonal_breakdown(predicted_aqi),
                    trend=_trend_label(predicted_aqi, running[-1], YEARLY_TREND_BAND),
                )
            )
            running.append(predicted_aqi)

        future_values = [item.predicted_aqi for item in forecasts]
        score = livability_score(future_values, historical_values, coefficients.green_cover_score)
        livability_class = classify(score)
        overall_trend = _trend_label(future_values[-1], future_values[0], OVERALL_TREND_BAND)
        logger.debug('Forecast for %s: score=%d class=%s trend=%s', station_id, score, livability_class, overall_trend)

        return StationForecastResult(
            station_id=station.id,
            station_name=station.name,
            station_type=coefficients.station_type,
            lat=station.lat,
            lng=station.lng,
            historical=tuple(historical),
            forecasts=tuple(forecasts),
            livability_score=score,
            livability_class=livability_class,
            overall_trend=overall_trend,
            recommendation=recommendation_for(livability_class, overall_trend, coefficients.station_type),
        )


def city_wide_stats(results: Sequence[StationForecastResult]) -> CityWideStats:
    if not results:
        raise ValueError('City-wide statistics need at least one station forecast')
    classes = [result.livability_class for result in results]
    years = sorted({item.year for result in results for item in result.forecasts})
    avg_future_aqi = {}
    for year in years:
        values = [
            next((item.predicted_aqi for item in result.forecasts if item.year == year), 0)
            for result in results
        ]
        avg_future_aqi[year] = round_half_up(sequential_sum(values) / len(values))

    improving = sum(1 for result in results if result.overall_trend == IMPROVING)
    declining = sum(1 for result in results if result.overall_trend == DECLINING)
    if improving > declining + 3:
        overall_trend = IMPROVING
    elif declining > improving + 3:
        overall_trend = DECLINING
    else:
        overall_trend = STABLE

    return CityWideStats(
        avg_livability_score=round_half_up(
            sequential_sum(result.livability_score for result in results) / len(results)
        ),
        highly_livable_count=classes.count(HIGHLY_LIVABLE),
        moderately_livable_count=classes.count(MODERATELY_LIVABLE),
        low_livability_count=classes.count(LOW_LIVABILITY),
        overall_trend=overall_trend,
        avg_future_aqi=avg_future_aqi,
    )
