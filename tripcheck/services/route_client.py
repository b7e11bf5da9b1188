# tripcheck/services/route_client.py

from time import perf_counter
from typing import Optional

import httpx
import pydantic

from tripcheck.core.config import settings
from tripcheck.core.errors import InvalidInput, NoRouteFound, ServiceUnavailable
from tripcheck.core.logger import logger
from tripcheck.models.geo import Coordinate, RouteResult
from tripcheck.models.mapbox import DirectionsResponse


class RouteServiceClient:
    """
    Driving route lookup backed by the Mapbox Directions API:
    - rejects missing coordinates before any request is made
    - requests full-overview GeoJSON geometry
    - always returns the first alternative
    """

    DIRECTIONS_PATH = "/directions/v5/mapbox/{profile}/{origin};{destination}"

    # Response codes meaning "the service worked, but there is no route".
    NO_ROUTE_CODES = frozenset({"NoRoute", "NoSegment"})

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        profile: Optional[str] = None,
    ) -> None:
        self.http_client = http_client
        self.access_token = access_token if access_token is not None else settings.MAPBOX_ACCESS_TOKEN
        self.base_url = (base_url or settings.MAPBOX_BASE_URL).rstrip("/")
        self.profile = profile or settings.ROUTING_PROFILE

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    async def get_route(
        self,
        origin: Optional[Coordinate],
        destination: Optional[Coordinate],
    ) -> RouteResult:
        """
        Fetch the driving route between origin and destination.

        Raises:
            InvalidInput: origin or destination is missing.
            NoRouteFound: the service found no route between the points.
            ServiceUnavailable: network error, error status or malformed payload.
        """
        if origin is None or destination is None:
            raise InvalidInput("origin and destination coordinates are both required")

        t0 = perf_counter()
        logger.info(
            "Requesting route ({:.6f}, {:.6f}) -> ({:.6f}, {:.6f})",
            origin.lon,
            origin.lat,
            destination.lon,
            destination.lat,
        )

        payload = await self._fetch(origin, destination)

        if payload.code in self.NO_ROUTE_CODES or not payload.routes:
            logger.warning("No route found: code={} message={}", payload.code, payload.message)
            raise NoRouteFound("no route between the selected points")

        route = payload.routes[0].to_result()
        logger.info(
            "Route received: distance={:.1f} m, {} alternatives, time={:.2f} ms",
            route.distance_m,
            len(payload.routes),
            (perf_counter() - t0) * 1000.0,
        )
        return route

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    async def _fetch(self, origin: Coordinate, destination: Coordinate) -> DirectionsResponse:
        url = self.base_url + self.DIRECTIONS_PATH.format(
            profile=self.profile,
            origin=origin.as_path_segment(),
            destination=destination.as_path_segment(),
        )
        params = {
            "access_token": self.access_token,
            "geometries": "geojson",
            "overview": "full",
        }

        try:
            response = await self.http_client.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.error("Directions request failed: {}", exc)
            raise ServiceUnavailable("directions service unreachable") from exc

        try:
            payload = DirectionsResponse.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as exc:
            logger.error("Malformed directions response (status {}): {}", response.status_code, exc)
            raise ServiceUnavailable("malformed directions response") from exc

        # Mapbox reports "no route" with a 4xx status and a code in the body.
        if response.is_error and payload.code not in self.NO_ROUTE_CODES:
            logger.error(
                "Directions service error: status={} code={} message={}",
                response.status_code,
                payload.code,
                payload.message,
            )
            raise ServiceUnavailable(f"directions service error ({response.status_code})")

        return payload
