# tripcheck/services/persistence.py
"""
Storage of saved trip analyses.

`TripStore` is the interface the session and the history depend on. Two
implementations are provided: an in-process store and a Supabase (PostgREST)
store talking to the `trip_analysis` table over HTTPS.
"""
import itertools
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol
from uuid import uuid4

import httpx
import pydantic

from tripcheck.core.config import settings
from tripcheck.core.errors import PersistenceFailure
from tripcheck.core.logger import logger
from tripcheck.models.trips import Identity, TripAnalysisRecord


class TripStore(Protocol):
    async def insert(self, identity: Identity, record: TripAnalysisRecord) -> TripAnalysisRecord:
        ...

    async def list_for_user(self, identity: Identity) -> List[TripAnalysisRecord]:
        ...

    async def delete(self, identity: Identity, record_id: str) -> None:
        ...


class InMemoryTripStore:
    """
    Keeps records in a dict. Newest first on listing.
    """

    def __init__(self) -> None:
        self._records: Dict[str, TripAnalysisRecord] = {}
        self._order: Dict[str, int] = {}
        self._counter = itertools.count()

    async def insert(self, identity: Identity, record: TripAnalysisRecord) -> TripAnalysisRecord:
        if record.user_id != identity.user_id:
            raise PersistenceFailure("record does not belong to the current user")

        stored = record.model_copy(
            update={
                "id": uuid4().hex,
                "created_at": datetime.now(timezone.utc),
            }
        )
        self._records[stored.id] = stored
        self._order[stored.id] = next(self._counter)
        return stored

    async def list_for_user(self, identity: Identity) -> List[TripAnalysisRecord]:
        records = [r for r in self._records.values() if r.user_id == identity.user_id]
        return sorted(records, key=lambda r: self._order[r.id], reverse=True)

    async def delete(self, identity: Identity, record_id: str) -> None:
        record = self._records.get(record_id)
        if record is not None and record.user_id == identity.user_id:
            del self._records[record_id]
            del self._order[record_id]


class SupabaseTripStore:
    """
    PostgREST client for the trip_analysis table.

    Row level security on the Supabase side scopes rows to the user of the
    bearer token; the user_id filters are sent as well.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        url: Optional[str] = None,
        anon_key: Optional[str] = None,
        table: Optional[str] = None,
    ) -> None:
        url = url or settings.SUPABASE_URL
        anon_key = anon_key or settings.SUPABASE_ANON_KEY
        if not url or not anon_key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set.")

        self.http_client = http_client
        self.anon_key = anon_key
        self.endpoint = f"{url.rstrip('/')}/rest/v1/{table or settings.TRIP_ANALYSIS_TABLE}"

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    async def insert(self, identity: Identity, record: TripAnalysisRecord) -> TripAnalysisRecord:
        body = record.model_dump(mode="json", exclude_none=True)
        response = await self._request(
            "POST",
            identity,
            json=[body],
            headers={"Prefer": "return=representation"},
        )
        rows = self._parse_rows(response)
        if not rows:
            raise PersistenceFailure("insert returned no rows")
        logger.info("Saved trip analysis {} for user {}", rows[0].id, identity.user_id)
        return rows[0]

    async def list_for_user(self, identity: Identity) -> List[TripAnalysisRecord]:
        response = await self._request(
            "GET",
            identity,
            params={
                "select": "*",
                "user_id": f"eq.{identity.user_id}",
                "order": "created_at.desc",
            },
        )
        return self._parse_rows(response)

    async def delete(self, identity: Identity, record_id: str) -> None:
        await self._request(
            "DELETE",
            identity,
            params={"id": f"eq.{record_id}", "user_id": f"eq.{identity.user_id}"},
        )
        logger.info("Deleted trip analysis {} for user {}", record_id, identity.user_id)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _headers(self, identity: Identity) -> Dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {identity.access_token or self.anon_key}",
        }

    async def _request(self, method: str, identity: Identity, **kwargs) -> httpx.Response:
        headers = self._headers(identity)
        headers.update(kwargs.pop("headers", {}))
        try:
            response = await self.http_client.request(method, self.endpoint, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Supabase {} failed: {}", method, exc)
            raise PersistenceFailure(f"storage unreachable: {exc}") from exc

        if response.is_error:
            message = self._error_message(response)
            logger.error("Supabase {} returned {}: {}", method, response.status_code, message)
            raise PersistenceFailure(message)
        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text or f"storage error ({response.status_code})"
        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
        return f"storage error ({response.status_code})"

    @staticmethod
    def _parse_rows(response: httpx.Response) -> List[TripAnalysisRecord]:
        try:
            return [TripAnalysisRecord.model_validate(row) for row in response.json()]
        except (ValueError, TypeError, pydantic.ValidationError) as exc:
            raise PersistenceFailure(f"unexpected storage response: {exc}") from exc
