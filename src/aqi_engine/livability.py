"""Reduce a station's AQI series to a 0-100 livability score and class."""
from __future__ import annotations

import math
from typing import Iterable, Sequence

HIGHLY_LIVABLE = 'highly-livable'
MODERATELY_LIVABLE = 'moderately-livable'
LOW_LIVABILITY = 'low-livability'

AQI_LEVEL_WEIGHT = 0.50
STABILITY_WEIGHT = 0.25
GOOD_DAYS_WEIGHT = 0.25
GREEN_COVER_BONUS = 10
GOOD_AQI_CEILING = 150

HIGHLY_LIVABLE_MIN = 70
MODERATELY_LIVABLE_MIN = 45


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def sequential_sum(values: Iterable[float]) -> float:
    """Add floats strictly left to right, without compensated summation."""
    total = 0.0
    for value in values:
        total += value
    return total


def _mean(values: Sequence[float]) -> float:
    return sequential_sum(values) / len(values)


def _population_std(values: Sequence[float]) -> float:
    mean = _mean(values)
    return math.sqrt(sequential_sum((value - mean) ** 2 for value in values) / len(values))


def aqi_level_score(future_aqi: Sequence[float]) -> float:
    return max(0.0, 100 - (_mean(future_aqi) - 50) * 0.3)


def stability_score(historical_aqi: Sequence[float], future_aqi: Sequence[float]) -> float:
    return max(0.0, 100 - _population_std([*historical_aqi, *future_aqi]) * 0.5)


def good_days_score(future_aqi: Sequence[float]) -> float:
    good = sum(1 for aqi in future_aqi if aqi <= GOOD_AQI_CEILING)
    return good / len(future_aqi) * 100


def livability_score(
    future_aqi: Sequence[float],
    historical_aqi: Sequence[float],
    green_cover_score: float,
) -> int:
    """Weighted livability score.

    Mean future AQI counts for half, variability across the whole series and
    the share of future years at or below AQI 150 for a quarter each. Green
    cover adds up to ten points on top before the result is clamped to
    ``[0, 100]``.
    """
    if not future_aqi:
        raise ValueError('Livability needs at least one forecast value')
    final_score = (
        aqi_level_score(future_aqi) * AQI_LEVEL_WEIGHT
        + stability_score(historical_aqi, future_aqi) * STABILITY_WEIGHT
        + good_days_score(future_aqi) * GOOD_DAYS_WEIGHT
        + green_cover_score * GREEN_COVER_BONUS
    )
    return round_half_up(max(0.0, min(100.0, final_score)))


def classify(score: float) -> str:
    if score >= HIGHLY_LIVABLE_MIN:
        return HIGHLY_LIVABLE
    if score >= MODERATELY_LIVABLE_MIN:
        return MODERATELY_LIVABLE
    return LOW_LIVABILITY
