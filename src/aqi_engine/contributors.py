"""Explain a station's AQI through its main contributing factors."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from aqi_engine.stations import DEFAULT_COEFFICIENTS, STATION_COEFFICIENTS

# Relative 0-1 estimates per station.
POPULATION_DENSITY: Dict[str, float] = {
    'delhi-anand-vihar': 0.85,
    'delhi-ito': 0.90,
    'delhi-mandir-marg': 0.70,
    'delhi-punjabi-bagh': 0.80,
    'delhi-r-k-puram': 0.75,
    'delhi-shadipur': 0.78,
    'delhi-dwarka-sec-8': 0.65,
    'delhi-ashok-vihar': 0.72,
    'delhi-bawana': 0.55,
    'delhi-jawaharlal-nehru-stadium': 0.60,
    'delhi-lodhi-road': 0.55,
    'delhi-major-dhyan-chand-stadium': 0.58,
    'delhi-mathura-road': 0.82,
    'delhi-mundka': 0.50,
    'delhi-narela': 0.45,
    'delhi-nehru-nagar': 0.75,
    'delhi-north-campus': 0.68,
    'delhi-okhla': 0.72,
    'delhi-patparganj': 0.78,
    'delhi-pusa': 0.50,
    'delhi-rohini': 0.70,
    'delhi-siri-fort': 0.62,
    'delhi-sonia-vihar': 0.65,
    'delhi-vivek-vihar': 0.75,
    'delhi-wazirpur': 0.60,
}

TRAFFIC_INTENSITY: Dict[str, float] = {
    'delhi-anand-vihar': 0.95,
    'delhi-ito': 0.92,
    'delhi-mandir-marg': 0.60,
    'delhi-punjabi-bagh': 0.70,
    'delhi-r-k-puram': 0.75,
    'delhi-shadipur': 0.72,
    'delhi-dwarka-sec-8': 0.55,
    'delhi-ashok-vihar': 0.65,
    'delhi-bawana': 0.45,
    'delhi-jawaharlal-nehru-stadium': 0.50,
    'delhi-lodhi-road': 0.55,
    'delhi-major-dhyan-chand-stadium': 0.52,
    'delhi-mathura-road': 0.88,
    'delhi-mundka': 0.48,
    'delhi-narela': 0.42,
    'delhi-nehru-nagar': 0.68,
    'delhi-north-campus': 0.58,
    'delhi-okhla': 0.72,
    'delhi-patparganj': 0.70,
    'delhi-pusa': 0.45,
    'delhi-rohini': 0.65,
    'delhi-siri-fort': 0.50,
    'delhi-sonia-vihar': 0.55,
    'delhi-vivek-vihar': 0.80,
    'delhi-wazirpur': 0.62,
}

INDUSTRIAL_PROXIMITY: Dict[str, float] = {
    'delhi-anand-vihar': 0.70,
    'delhi-ito': 0.40,
    'delhi-mandir-marg': 0.20,
    'delhi-punjabi-bagh': 0.35,
    'delhi-r-k-puram': 0.30,
    'delhi-shadipur': 0.45,
    'delhi-dwarka-sec-8': 0.25,
    'delhi-ashok-vihar': 0.35,
    'delhi-bawana': 0.90,
    'delhi-jawaharlal-nehru-stadium': 0.15,
    'delhi-lodhi-road': 0.10,
    'delhi-major-dhyan-chand-stadium': 0.15,
    'delhi-mathura-road': 0.55,
    'delhi-mundka': 0.85,
    'delhi-narela': 0.88,
    'delhi-nehru-nagar': 0.40,
    'delhi-north-campus': 0.20,
    'delhi-okhla': 0.82,
    'delhi-patparganj': 0.60,
    'delhi-pusa': 0.15,
    'delhi-rohini': 0.35,
    'delhi-siri-fort': 0.15,
    'delhi-sonia-vihar': 0.45,
    'delhi-vivek-vihar': 0.50,
    'delhi-wazirpur': 0.92,
}

DEFAULT_POPULATION_DENSITY = 0.6
DEFAULT_TRAFFIC_INTENSITY = 0.6
DEFAULT_INDUSTRIAL_PROXIMITY = 0.4

SIGNIFICANT_SCORE = 0.35
MAX_CONTRIBUTORS = 5
MIN_CONTRIBUTORS = 3

TREND_SCORES = {'declining': 0.8, 'stable': 0.4, 'improving': 0.2}
TREND_DESCRIPTIONS = {
    'declining': 'Air quality is worsening over time',
    'stable': 'Air quality remains relatively unchanged',
    'improving': 'Air quality shows improvement trend',
}

_SUMMARY_BANDS: List[Tuple[float, str]] = [
    (50, 'Air quality is excellent with minimal pollution sources.'),
    (100, 'Air quality is acceptable with minor pollution factors.'),
    (150, 'Moderate pollution from multiple sources affects air quality.'),
    (200, 'Poor air quality due to significant pollution factors.'),
    (300, 'Very poor air quality with high pollution from multiple sources.'),
]


@dataclass(frozen=True)
class AqiContributor:
    factor: str
    impact: str
    description: str
    icon: str


def _banded(score: float, bands: List[Tuple[float, str]], fallback: str) -> str:
    for floor, text in bands:
        if score > floor:
            return text
    return fallback


def _weather_description(aqi: float) -> str:
    if aqi > 200:
        return 'Atmospheric conditions trap pollutants'
    if aqi > 150:
        return 'Weather patterns limit pollutant dispersion'
    return 'Favorable conditions for air circulation'


def _impact(score: float) -> str:
    if score > 0.7:
        return 'high'
    if score > 0.5:
        return 'medium'
    return 'low'


def aqi_contributors(station_id: str, aqi: float, trend: Optional[str] = None) -> List[AqiContributor]:
    """Rank the factors behind ``aqi`` at a station, strongest first.

    Factors scoring above 0.35 are kept, at most five of them; when fewer
    than three qualify the three strongest are returned regardless. Ties keep
    their listing order.
    """
    population = POPULATION_DENSITY.get(station_id, DEFAULT_POPULATION_DENSITY)
    traffic = TRAFFIC_INTENSITY.get(station_id, DEFAULT_TRAFFIC_INTENSITY)
    industrial = INDUSTRIAL_PROXIMITY.get(station_id, DEFAULT_INDUSTRIAL_PROXIMITY)
    green_cover = STATION_COEFFICIENTS.get(station_id, DEFAULT_COEFFICIENTS).green_cover_score

    high = aqi > 150
    moderate = 100 < aqi <= 150

    scored: List[Tuple[str, float, str, Callable[[float], str]]] = [
        (
            'Traffic Pollution', traffic * (1.3 if high else 1.0), 'traffic',
            lambda score: _banded(score, [
                (0.8, 'Heavy vehicular emissions dominate this zone'),
                (0.6, 'Moderate traffic contributes to particulate matter'),
            ], 'Low traffic impact on air quality'),
        ),
        (
            'Industrial Activity', industrial * (1.4 if high else 1.0), 'industry',
            lambda score: _banded(score, [
                (0.7, 'Industrial emissions significantly affect air quality'),
                (0.4, 'Nearby industrial zones add particulate matter'),
            ], 'Minimal industrial influence detected'),
        ),
        (
            'Population Density', population * (1.2 if high else 0.9), 'population',
            lambda score: _banded(score, [
                (0.75, 'High population density increases emissions'),
                (0.5, 'Moderate urban density affects local air'),
            ], 'Lower density reduces pollution sources'),
        ),
        (
            # Inverted: sparse greenery scores high.
            'Green Cover', (1 - green_cover) * (1.2 if high else 0.8), 'greenery',
            lambda score: _banded(score, [
                (0.6, 'Low green cover reduces natural air purification'),
                (0.4, 'Moderate vegetation provides some filtration'),
            ], 'Good green cover helps purify air'),
        ),
        (
            'Weather Conditions', 0.75 if high else (0.5 if moderate else 0.3), 'weather',
            lambda score: _weather_description(aqi),
        ),
    ]
    if trend:
        if trend not in TREND_SCORES:
            raise ValueError(f"Unknown trend '{trend}'. Available: {', '.join(TREND_SCORES)}")
        scored.append(('AQI Trend', TREND_SCORES[trend], 'trend', lambda score: TREND_DESCRIPTIONS[trend]))

    ranked = sorted(scored, key=lambda entry: entry[1], reverse=True)
    significant = [entry for entry in ranked if entry[1] > SIGNIFICANT_SCORE][:MAX_CONTRIBUTORS]
    selected = significant if len(significant) >= MIN_CONTRIBUTORS else ranked[:MIN_CONTRIBUTORS]
    return [
        AqiContributor(factor=factor, impact=_impact(score), description=describe(score), icon=icon)
        for factor, score, icon, describe in selected
    ]


def aqi_summary(aqi: float) -> str:
    for upper, text in _SUMMARY_BANDS:
        if aqi <= upper:
            return text
    return 'Hazardous air quality due to severe pollution levels.'
