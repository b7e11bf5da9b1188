# tripcheck/services/address_resolver.py
from typing import List, Optional
from urllib.parse import quote

import httpx
import pydantic

from tripcheck.core.config import settings
from tripcheck.core.errors import SuggestionLookupFailure
from tripcheck.core.logger import logger
from tripcheck.models.geo import PlaceCandidate
from tripcheck.models.mapbox import GeocodingResponse


class AddressResolver:
    """
    Turns free text into ranked place suggestions using Mapbox Geocoding.

    Suggestions are a best-effort affordance: every failure is logged and
    reported to the caller as an empty list.
    """

    GEOCODING_PATH = "/geocoding/v5/mapbox.places/{query}.json"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        country: Optional[str] = None,
        limit: Optional[int] = None,
        min_query_length: Optional[int] = None,
    ) -> None:
        self.http_client = http_client
        self.access_token = access_token if access_token is not None else settings.MAPBOX_ACCESS_TOKEN
        self.base_url = (base_url or settings.MAPBOX_BASE_URL).rstrip("/")
        self.country = country if country is not None else settings.GEOCODING_COUNTRY
        self.limit = limit if limit is not None else settings.GEOCODING_LIMIT
        self.min_query_length = (
            min_query_length if min_query_length is not None else settings.MIN_QUERY_LENGTH
        )

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    async def resolve(self, query: str) -> List[PlaceCandidate]:
        if len(query) < self.min_query_length:
            return []

        try:
            candidates = await self._lookup(query)
        except SuggestionLookupFailure as exc:
            logger.warning("Address lookup failed for {!r}: {}", query, exc.message)
            return []

        logger.info("Address lookup for {!r} returned {} candidates", query, len(candidates))
        return candidates

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    async def _lookup(self, query: str) -> List[PlaceCandidate]:
        url = self.base_url + self.GEOCODING_PATH.format(query=quote(query, safe=""))
        params = {
            "access_token": self.access_token,
            "limit": self.limit,
            "autocomplete": "true",
        }
        if self.country:
            params["country"] = self.country

        try:
            response = await self.http_client.get(url, params=params)
            response.raise_for_status()
            payload = GeocodingResponse.model_validate(response.json())
            return [feature.to_candidate() for feature in payload.features[: self.limit]]
        except httpx.HTTPError as exc:
            raise SuggestionLookupFailure(f"geocoding request failed: {exc}") from exc
        except (ValueError, pydantic.ValidationError) as exc:
            raise SuggestionLookupFailure(f"malformed geocoding response: {exc}") from exc
