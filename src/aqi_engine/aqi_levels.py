"""AQI category, zone and health advisory lookups (Indian National AQI bands)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class AqiInfo:
    level: str
    label: str
    description: str
    health_implications: str
    cautionary_statement: str


@dataclass(frozen=True)
class HealthAdvisory:
    general: str
    sensitive_groups: str
    outdoor: str
    indoor: str
    mask: str


# Inclusive upper bound per band; anything above the last bound is hazardous.
_AQI_BANDS: List[Tuple[float, AqiInfo]] = [
    (50, AqiInfo(
        'good', 'Good', 'Air quality is satisfactory',
        'Air quality is considered satisfactory, and air pollution poses little or no risk.',
        'None',
    )),
    (100, AqiInfo(
        'satisfactory', 'Satisfactory', 'Acceptable air quality',
        'Air quality is acceptable. However, there may be a risk for some people, '
        'particularly those who are unusually sensitive to air pollution.',
        'Unusually sensitive people should consider reducing prolonged outdoor exertion.',
    )),
    (150, AqiInfo(
        'moderate', 'Moderate', 'May cause breathing discomfort',
        'Members of sensitive groups may experience health effects. '
        'The general public is less likely to be affected.',
        'Active children and adults, and people with respiratory disease should limit prolonged outdoor exertion.',
    )),
    (200, AqiInfo(
        'poor', 'Poor', 'Breathing discomfort likely',
        'Everyone may begin to experience health effects; '
        'members of sensitive groups may experience more serious health effects.',
        'Active children and adults, and people with respiratory disease should avoid prolonged outdoor exertion.',
    )),
    (300, AqiInfo(
        'very-poor', 'Very Poor', 'Respiratory illness likely',
        'Health warnings of emergency conditions. The entire population is more likely to be affected.',
        'Everyone should avoid all outdoor exertion.',
    )),
]
_HAZARDOUS = AqiInfo(
    'hazardous', 'Hazardous', 'Serious health effects',
    'Health alert: everyone may experience more serious health effects.',
    'Everyone should avoid all outdoor physical activity.',
)

_ADVISORY_BANDS: List[Tuple[float, HealthAdvisory]] = [
    (50, HealthAdvisory(
        'Air quality is ideal for most activities.',
        'No precautions needed.',
        'Great day for outdoor exercise and activities.',
        'Open windows for fresh air.',
        'No mask required.',
    )),
    (100, HealthAdvisory(
        'Air quality is acceptable for most people.',
        'Unusually sensitive people may want to reduce prolonged outdoor exertion.',
        'Good for outdoor activities with minor precautions.',
        'Normal activities recommended.',
        'Optional for sensitive individuals.',
    )),
    (150, HealthAdvisory(
        'Moderate health concern for sensitive groups.',
        'People with respiratory conditions, elderly, and children should limit outdoor exposure.',
        'Reduce prolonged outdoor exertion.',
        'Consider running air purifiers.',
        'N95 mask recommended for prolonged outdoor exposure.',
    )),
    (200, HealthAdvisory(
        'Unhealthy for sensitive groups, concerning for all.',
        'Avoid outdoor activities. Keep medications handy.',
        'Avoid prolonged outdoor exertion.',
        'Keep windows closed. Use air purifiers.',
        'N95/N99 mask required outdoors.',
    )),
    (300, HealthAdvisory(
        'Health alert - everyone may experience effects.',
        'Stay indoors. Seek medical attention if symptoms occur.',
        'Avoid all outdoor activities.',
        'Keep all windows and doors sealed. Run air purifiers on high.',
        'N95/N99 mask essential for any outdoor exposure.',
    )),
]
_EMERGENCY_ADVISORY = HealthAdvisory(
    'Health emergency - serious risk to all.',
    'Emergency conditions. Stay indoors at all times.',
    'Do not go outdoors under any circumstances.',
    'Seal all openings. Use maximum air filtration.',
    'Avoid any outdoor exposure. If unavoidable, use N99 or P100 respirator.',
)

ZONE_INFO: Dict[str, Dict[str, str]] = {
    'blue': {
        'label': 'Blue Zone',
        'description': 'Safe for all - Good air quality',
        'recommendation': 'Excellent for residential living and outdoor activities',
    },
    'yellow': {
        'label': 'Yellow Zone',
        'description': 'Caution advised - Moderate air quality',
        'recommendation': 'Consider air purifiers for sensitive individuals',
    },
    'red': {
        'label': 'Red Zone',
        'description': 'Health risk - Poor air quality',
        'recommendation': 'Not recommended for long-term residence without precautions',
    },
}


def aqi_info(aqi: float) -> AqiInfo:
    for upper, info in _AQI_BANDS:
        if aqi <= upper:
            return info
    return _HAZARDOUS


def health_advisory(aqi: float) -> HealthAdvisory:
    for upper, advisory in _ADVISORY_BANDS:
        if aqi <= upper:
            return advisory
    return _EMERGENCY_ADVISORY


def zone_for(aqi: float) -> str:
    if aqi <= 100:
        return 'blue'
    if aqi <= 200:
        return 'yellow'
    return 'red'


def zone_info(zone: str) -> Dict[str, str]:
    if zone not in ZONE_INFO:
        raise ValueError(f"Unknown zone '{zone}'. Available: {', '.join(ZONE_INFO)}")
    return dict(ZONE_INFO[zone])
