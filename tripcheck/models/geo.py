# tripcheck/models/geo.py

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """
    WGS84 coordinate in decimal degrees.

    Stored as (lon, lat), the order used by Mapbox and GeoJSON.
    """
    model_config = ConfigDict(frozen=True)

    lon: float = Field(ge=-180.0, le=180.0)
    lat: float = Field(ge=-90.0, le=90.0)

    def as_path_segment(self) -> str:
        return f"{self.lon},{self.lat}"


class PlaceCandidate(BaseModel):
    """
    One geocoded address suggestion.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    coordinate: Coordinate


class RouteRequest(BaseModel):
    """
    Request body for the /route endpoint.
    """
    origin: Coordinate
    destination: Coordinate


class RouteGeometry(BaseModel):
    """
    Geometry of the computed route as a GeoJSON LineString.

    coordinates is a list of (lon, lat) pairs, e.g.:
    [
        [-58.3816, -34.6037],
        [-58.3900, -34.5990],
        ...
    ]
    """
    type: Literal["LineString"] = "LineString"
    coordinates: List[Tuple[float, float]]


class RouteResult(BaseModel):
    """
    Distance and path for one origin/destination pair.
    """
    model_config = ConfigDict(frozen=True)

    distance_m: float = Field(ge=0.0)
    duration_s: Optional[float] = None
    geometry: RouteGeometry

    @property
    def distance_km(self) -> float:
        return self.distance_m / 1000.0
