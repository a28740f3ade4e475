"""Great-circle helpers shared by the resolver and anything that reports distances."""
from __future__ import annotations

import math
from typing import Iterable, Optional, Tuple

from aqi_engine.config import EARTH_RADIUS_KM
from aqi_engine.stations import Station


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lam = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def nearest_station(
    lat: float,
    lng: float,
    stations: Iterable[Station],
    max_distance_km: Optional[float] = None,
) -> Optional[Tuple[Station, float]]:
    """Closest station to the point, optionally only within ``max_distance_km``.

    Equidistant candidates resolve to the lowest station id.
    """
    best = None
    best_key = (float('inf'), '')
    for station in stations:
        dist = haversine_km(lat, lng, station.lat, station.lng)
        if max_distance_km is not None and dist > max_distance_km:
            continue
        key = (dist, station.id)
        if key < best_key:
            best = station
            best_key = key
    if best is None:
        return None
    return best, best_key[0]
