# tripcheck/api/v1/routes_routing.py
from fastapi import APIRouter, Depends

from tripcheck.api.deps import get_route_client
from tripcheck.models.geo import RouteRequest, RouteResult
from tripcheck.services.route_client import RouteServiceClient

router = APIRouter(
    prefix="/route",
    tags=["routing"],
)


@router.post(
    "/",
    response_model=RouteResult,
    summary="Compute a driving route between origin and destination",
)
async def compute_route(
    request: RouteRequest,
    route_client: RouteServiceClient = Depends(get_route_client),
) -> RouteResult:
    """
    Driving route between origin and destination from the directions service.

    - Distance in metres, GeoJSON LineString geometry.
    - 404 when there is no route, 503 when the service is unavailable.
    """
    return await route_client.get_route(request.origin, request.destination)
