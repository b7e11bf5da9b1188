# tripcheck/services/history.py
from typing import Callable, List, Optional

from tripcheck.core.logger import logger
from tripcheck.models.trips import Identity, TripAnalysisRecord
from tripcheck.services.events import EventBus, TripSaved
from tripcheck.services.persistence import TripStore


class TripHistory:
    """
    Saved analyses of one user, newest first.

    Reloads itself from the store whenever a TripSaved event for the same user
    is published on the bus.
    """

    def __init__(self, store: TripStore, identity: Identity, bus: Optional[EventBus] = None) -> None:
        self.store = store
        self.identity = identity
        self.records: List[TripAnalysisRecord] = []
        self._unsubscribe: Optional[Callable[[], None]] = None
        if bus is not None:
            self._unsubscribe = bus.subscribe(TripSaved, self._on_trip_saved)

    async def reload(self) -> List[TripAnalysisRecord]:
        self.records = await self.store.list_for_user(self.identity)
        logger.info("History reloaded: {} records for user {}", len(self.records), self.identity.user_id)
        return self.records

    async def delete(self, record_id: str) -> None:
        await self.store.delete(self.identity, record_id)
        self.records = [r for r in self.records if r.id != record_id]

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _on_trip_saved(self, event: TripSaved) -> None:
        if event.record.user_id == self.identity.user_id:
            await self.reload()
