# tripcheck/api/v1/routes_trips.py
from fastapi import APIRouter, Depends

from tripcheck.api.deps import get_route_client
from tripcheck.core.errors import NoRouteFound
from tripcheck.models.trips import TripAnalysisRequest, TripAnalysisResponse
from tripcheck.services.profitability import evaluate
from tripcheck.services.route_client import RouteServiceClient

router = APIRouter(
    prefix="/trips",
    tags=["trips"],
)


@router.post(
    "/analysis",
    response_model=TripAnalysisResponse,
    summary="Evaluate the profitability of a trip",
)
async def analyse_trip(
    request: TripAnalysisRequest,
    route_client: RouteServiceClient = Depends(get_route_client),
) -> TripAnalysisResponse:
    """
    Fetch the driving route, then compare the trip's price per km with the
    desired one. Values are returned unrounded.

    Prices are validated by the request model before any route is requested.
    A zero-length route is reported as no route (404).
    """
    route = await route_client.get_route(request.origin, request.destination)
    if route.distance_m <= 0:
        raise NoRouteFound("origin and destination resolve to the same point")
    analysis = evaluate(route.distance_km, request.trip_price, request.desired_price_per_km)
    return TripAnalysisResponse(analysis=analysis, route=route)
