# tests/conftest.py
import os
import sys

import pytest

# Add the project root directory to sys.path so that "import tripcheck" works
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tripcheck.models.geo import Coordinate, PlaceCandidate, RouteGeometry, RouteResult  # noqa: E402

# Near Av. Corrientes 1000 and Av. Santa Fe 2000, Buenos Aires
CORRIENTES = Coordinate(lon=-58.3817, lat=-34.6037)
SANTA_FE = Coordinate(lon=-58.3960, lat=-34.5955)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def origin() -> Coordinate:
    return CORRIENTES


@pytest.fixture
def destination() -> Coordinate:
    return SANTA_FE


def make_candidate(name: str, coordinate: Coordinate, place_id: str = "address.1") -> PlaceCandidate:
    return PlaceCandidate(id=place_id, display_name=name, coordinate=coordinate)


def make_route(distance_m: float) -> RouteResult:
    return RouteResult(
        distance_m=distance_m,
        duration_s=distance_m / 10.0,
        geometry=RouteGeometry(
            coordinates=[
                (CORRIENTES.lon, CORRIENTES.lat),
                (SANTA_FE.lon, SANTA_FE.lat),
            ]
        ),
    )


def geocoding_payload(*names: str) -> dict:
    return {
        "type": "FeatureCollection",
        "query": ["av", "corrientes"],
        "features": [
            {
                "id": f"address.{i}",
                "type": "Feature",
                "place_name": name,
                "relevance": 1.0 - i * 0.1,
                "center": [-58.38 - i * 0.01, -34.60],
                "geometry": {"type": "Point", "coordinates": [-58.38 - i * 0.01, -34.60]},
            }
            for i, name in enumerate(names)
        ],
    }


def directions_payload(*distances: float) -> dict:
    return {
        "code": "Ok",
        "uuid": "test",
        "waypoints": [],
        "routes": [
            {
                "distance": d,
                "duration": d / 10.0,
                "weight": d,
                "weight_name": "auto",
                "legs": [],
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[-58.3817, -34.6037], [-58.39, -34.60], [-58.396, -34.5955]],
                },
            }
            for d in distances
        ],
    }
