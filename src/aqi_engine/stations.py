"""Monitoring station registry and per-station model coefficients."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

STATION_TYPES = ('industrial', 'residential', 'traffic', 'mixed')


class StationNotFoundError(KeyError):
    """Raised when a station id is not present in the registry."""

    def __init__(self, station_id: str):
        super().__init__(station_id)
        self.station_id = station_id

    def __str__(self) -> str:
        return f"Unknown station id: {self.station_id!r}"


@dataclass(frozen=True)
class Station:
    id: str
    name: str
    lat: float
    lng: float


@dataclass(frozen=True)
class StationCoefficients:
    base_multiplier: float = 1.0
    trend_sensitivity: float = 1.0
    station_type: str = 'mixed'
    green_cover_score: float = 0.4


DEFAULT_COEFFICIENTS = StationCoefficients()

DELHI_STATIONS: List[Station] = [
    Station('delhi-anand-vihar', 'Anand Vihar', 28.6469, 77.3160),
    Station('delhi-ito', 'ITO', 28.6289, 77.2405),
    Station('delhi-mandir-marg', 'Mandir Marg', 28.6369, 77.2010),
    Station('delhi-punjabi-bagh', 'Punjabi Bagh', 28.6683, 77.1167),
    Station('delhi-r-k-puram', 'R.K. Puram', 28.5633, 77.1861),
    Station('delhi-shadipur', 'Shadipur', 28.6519, 77.1478),
    Station('delhi-dwarka-sec-8', 'Dwarka Sector 8', 28.5708, 77.0711),
    Station('delhi-ashok-vihar', 'Ashok Vihar', 28.6950, 77.1817),
    Station('delhi-bawana', 'Bawana', 28.7761, 77.0511),
    Station('delhi-jawaharlal-nehru-stadium', 'JLN Stadium', 28.5833, 77.2333),
    Station('delhi-lodhi-road', 'Lodhi Road', 28.5918, 77.2273),
    Station('delhi-major-dhyan-chand-stadium', 'Major Dhyan Chand Stadium', 28.6117, 77.2378),
    Station('delhi-mathura-road', 'Mathura Road', 28.5558, 77.2506),
    Station('delhi-mundka', 'Mundka', 28.6833, 77.0333),
    Station('delhi-narela', 'Narela', 28.8528, 77.0928),
    Station('delhi-nehru-nagar', 'Nehru Nagar', 28.5678, 77.2500),
    Station('delhi-north-campus', 'North Campus DU', 28.6879, 77.2089),
    Station('delhi-okhla', 'Okhla', 28.5310, 77.2690),
    Station('delhi-patparganj', 'Patparganj', 28.6236, 77.2878),
    Station('delhi-pusa', 'PUSA', 28.6400, 77.1467),
    Station('delhi-rohini', 'Rohini', 28.7328, 77.1089),
    Station('delhi-siri-fort', 'Siri Fort', 28.5503, 77.2156),
    Station('delhi-sonia-vihar', 'Sonia Vihar', 28.7108, 77.2489),
    Station('delhi-vivek-vihar', 'Vivek Vihar', 28.6722, 77.3156),
    Station('delhi-wazirpur', 'Wazirpur', 28.6989, 77.1658),
]

# Spatial variation by land use around each monitor.
STATION_COEFFICIENTS: Dict[str, StationCoefficients] = {
    'delhi-anand-vihar': StationCoefficients(1.35, 1.1, 'traffic', 0.2),
    'delhi-ito': StationCoefficients(1.25, 1.0, 'traffic', 0.3),
    'delhi-mandir-marg': StationCoefficients(0.95, 0.9, 'residential', 0.5),
    'delhi-punjabi-bagh': StationCoefficients(1.10, 1.0, 'residential', 0.4),
    'delhi-r-k-puram': StationCoefficients(1.05, 0.95, 'residential', 0.45),
    'delhi-shadipur': StationCoefficients(1.15, 1.0, 'mixed', 0.35),
    'delhi-dwarka-sec-8': StationCoefficients(0.88, 0.85, 'residential', 0.6),
    'delhi-ashok-vihar': StationCoefficients(1.08, 0.95, 'residential', 0.4),
    'delhi-bawana': StationCoefficients(1.28, 1.15, 'industrial', 0.25),
    'delhi-jawaharlal-nehru-stadium': StationCoefficients(0.92, 0.9, 'mixed', 0.55),
    'delhi-lodhi-road': StationCoefficients(0.85, 0.85, 'residential', 0.65),
    'delhi-major-dhyan-chand-stadium': StationCoefficients(0.90, 0.9, 'mixed', 0.55),
    'delhi-mathura-road': StationCoefficients(1.18, 1.05, 'traffic', 0.3),
    'delhi-mundka': StationCoefficients(1.22, 1.1, 'industrial', 0.3),
    'delhi-narela': StationCoefficients(1.30, 1.15, 'industrial', 0.35),
    'delhi-nehru-nagar': StationCoefficients(1.12, 1.0, 'residential', 0.35),
    'delhi-north-campus': StationCoefficients(0.88, 0.85, 'residential', 0.6),
    'delhi-okhla': StationCoefficients(1.25, 1.1, 'industrial', 0.25),
    'delhi-patparganj': StationCoefficients(1.20, 1.05, 'mixed', 0.35),
    'delhi-pusa': StationCoefficients(0.82, 0.8, 'residential', 0.7),
    'delhi-rohini': StationCoefficients(1.05, 0.95, 'residential', 0.45),
    'delhi-siri-fort': StationCoefficients(0.88, 0.85, 'residential', 0.6),
    'delhi-sonia-vihar': StationCoefficients(1.15, 1.0, 'mixed', 0.4),
    'delhi-vivek-vihar': StationCoefficients(1.18, 1.05, 'traffic', 0.35),
    'delhi-wazirpur': StationCoefficients(1.32, 1.15, 'industrial', 0.2),
}


class StationRegistry:
    """Read-only view over a fixed station table and its coefficients."""

    def __init__(
        self,
        stations: Iterable[Station] = DELHI_STATIONS,
        coefficients: Optional[Dict[str, StationCoefficients]] = None,
    ):
        self._stations = tuple(stations)
        self._by_id = {station.id: station for station in self._stations}
        if len(self._by_id) != len(self._stations):
            raise ValueError('Station ids must be unique')
        self._coefficients = dict(STATION_COEFFICIENTS if coefficients is None else coefficients)
        for station_id, entry in self._coefficients.items():
            if entry.station_type not in STATION_TYPES:
                raise ValueError(f"Station {station_id} has unknown type '{entry.station_type}'")

    def __len__(self) -> int:
        return len(self._stations)

    def __contains__(self, station_id: object) -> bool:
        return station_id in self._by_id

    def list_stations(self) -> List[Station]:
        return list(self._stations)

    def get_station(self, station_id: str) -> Optional[Station]:
        return self._by_id.get(station_id)

    def require(self, station_id: str) -> Station:
        station = self._by_id.get(station_id)
        if station is None:
            raise StationNotFoundError(station_id)
        return station

    def get_coefficients(self, station_id: str) -> StationCoefficients:
        return self._coefficients.get(station_id, DEFAULT_COEFFICIENTS)
