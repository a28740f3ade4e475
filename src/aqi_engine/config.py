"""Engine-wide constants; the tunable ones can be overridden from the environment."""
from __future__ import annotations

import os
from pathlib import Path

RANDOM_STATE = int(os.environ.get('AQ_RANDOM_STATE', 42))
BUFFER_DISTANCE_KM = float(os.environ.get('AQ_BUFFER_KM', 5.0))
OUTPUT_DIR = Path(os.environ.get('AQ_OUTPUT_DIR', Path.cwd() / 'forecast_assets'))

EARTH_RADIUS_KM = 6371.0

# Clipping rectangle for the Voronoi tessellation (Delhi NCT).
REGION_BOUNDS = {
    'min_lat': 28.4,
    'max_lat': 28.9,
    'min_lng': 76.8,
    'max_lng': 77.5,
}

FIRST_FORECAST_YEAR = 2025
FORECAST_HORIZON_YEARS = 5
