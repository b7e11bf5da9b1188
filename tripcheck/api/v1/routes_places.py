# tripcheck/api/v1/routes_places.py
from typing import List

from fastapi import APIRouter, Depends, Query

from tripcheck.api.deps import get_resolver
from tripcheck.models.geo import PlaceCandidate
from tripcheck.services.address_resolver import AddressResolver

router = APIRouter(
    prefix="/places",
    tags=["places"],
)


@router.get(
    "/",
    response_model=List[PlaceCandidate],
    summary="Suggest places matching a free-text address",
)
async def suggest_places(
    query: str = Query(..., description="Free-text address, at least 3 characters to search"),
    resolver: AddressResolver = Depends(get_resolver),
) -> List[PlaceCandidate]:
    """
    Address suggestions for an origin or destination field.

    Short queries and geocoding failures both answer with an empty list.
    """
    return await resolver.resolve(query)
