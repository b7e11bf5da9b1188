# tripcheck/models/mapbox.py
"""
Typed views of the Mapbox JSON payloads we consume.

External responses are parsed into these models as soon as they arrive so that
nothing untyped travels further into the core. Unknown keys are ignored.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from tripcheck.models.geo import Coordinate, PlaceCandidate, RouteGeometry, RouteResult


class _MapboxModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PointGeometry(_MapboxModel):
    type: str = "Point"
    coordinates: Tuple[float, float]


class GeocodingFeature(_MapboxModel):
    id: str
    place_name: str
    geometry: PointGeometry

    def to_candidate(self) -> PlaceCandidate:
        lon, lat = self.geometry.coordinates
        return PlaceCandidate(
            id=self.id,
            display_name=self.place_name,
            coordinate=Coordinate(lon=lon, lat=lat),
        )


class GeocodingResponse(_MapboxModel):
    type: str = "FeatureCollection"
    features: List[GeocodingFeature] = []


class DirectionsRoute(_MapboxModel):
    distance: float = Field(ge=0.0)
    duration: Optional[float] = None
    geometry: RouteGeometry

    def to_result(self) -> RouteResult:
        return RouteResult(
            distance_m=self.distance,
            duration_s=self.duration,
            geometry=self.geometry,
        )


class DirectionsResponse(_MapboxModel):
    code: str = "Ok"
    message: Optional[str] = None
    routes: List[DirectionsRoute] = []
