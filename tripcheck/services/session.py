# tripcheck/services/session.py
import math
import re
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, List, Literal, Optional, Set, Tuple

from tripcheck.core.config import settings
from tripcheck.core.errors import (
    InvalidInput,
    NoRouteFound,
    PersistenceFailure,
    ServiceUnavailable,
    ValidationError,
)
from tripcheck.core.logger import logger
from tripcheck.models.geo import Coordinate, PlaceCandidate, RouteGeometry, RouteResult
from tripcheck.models.trips import (
    AddressField,
    Identity,
    Notification,
    ProfitabilityAnalysis,
    TripAnalysisRecord,
    TripFormState,
)
from tripcheck.services.address_resolver import AddressResolver
from tripcheck.services.events import EventBus, TripSaved
from tripcheck.services.persistence import TripStore
from tripcheck.services.profitability import evaluate
from tripcheck.services.route_client import RouteServiceClient

MSG_SELECT_ADDRESSES = "Por favor selecciona origen y destino válidos de las sugerencias"
MSG_MISSING_PRICES = "Por favor completa el precio deseado por km y el precio del viaje"
MSG_INVALID_PRICES = "Por favor ingresa precios válidos"
MSG_NO_ROUTE = "No se pudo calcular la ruta entre los puntos seleccionados"
MSG_CONNECTION = "Error al calcular la ruta. Verifica tu conexión a internet"
MSG_LOGIN_REQUIRED = "Debes iniciar sesión para guardar el análisis"
MSG_SAVED = "Análisis guardado correctamente"

_PRICE_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")


class SessionState(str, Enum):
    IDLE = "idle"
    CALCULATING = "calculating"
    READY = "ready"
    FAILED = "failed"


class TripAnalysisSession:
    """
    Interactive trip profitability workflow for one user on one screen.

    Address fields are resolved to suggestions, a suggestion pins the
    coordinates of its field, and calculate() fetches the route and runs the
    profitability calculator. The result can be saved through the store, which
    resets the form.

    Every edit, calculate and clear bumps `version`. Awaited calls that come
    back after the version moved on do not touch the session. Suggestions use
    a separate per-field sequence number so only the latest lookup of a field
    can fill its list.
    """

    def __init__(
        self,
        resolver: AddressResolver,
        route_client: RouteServiceClient,
        *,
        store: Optional[TripStore] = None,
        identity: Optional[Identity] = None,
        bus: Optional[EventBus] = None,
        min_query_length: Optional[int] = None,
        notification_ttl_s: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.resolver = resolver
        self.route_client = route_client
        self.store = store
        self.identity = identity
        self.bus = bus
        self.min_query_length = (
            min_query_length if min_query_length is not None else settings.MIN_QUERY_LENGTH
        )
        self.notification_ttl_s = (
            notification_ttl_s if notification_ttl_s is not None else settings.NOTIFICATION_TTL_S
        )
        self._clock = clock
        self._now = now

        self.version = 0
        self._query_seq: Dict[AddressField, int] = {f: 0 for f in AddressField}
        self._reset()

    # ------------------------------------------------------------------ #
    # State
    # ------------------------------------------------------------------ #

    def _reset(self) -> None:
        self.form = TripFormState()
        self.suggestions: Dict[AddressField, List[PlaceCandidate]] = {f: [] for f in AddressField}
        self.resolving: Set[AddressField] = set()
        self.state = SessionState.IDLE
        self.analysis: Optional[ProfitabilityAnalysis] = None
        self.route: Optional[RouteResult] = None
        self.error: Optional[Exception] = None
        self.saving = False
        self._notification: Optional[Notification] = None
        self._prices: Optional[Tuple[float, float]] = None

    @property
    def route_geometry(self) -> Optional[RouteGeometry]:
        return self.route.geometry if self.route is not None else None

    @property
    def can_save(self) -> bool:
        return self.state is SessionState.READY and not self.saving

    @property
    def notification(self) -> Optional[Notification]:
        note = self._notification
        if note is not None and self._clock() - note.created_at >= self.notification_ttl_s:
            self._notification = None
        return self._notification

    def _notify(self, kind: Literal["success", "error"], message: str) -> None:
        self._notification = Notification(kind=kind, message=message, created_at=self._clock())

    def _supersede(self) -> None:
        """Invalidate in-flight results and drop any analysis built on the old input."""
        self.version += 1
        if self.state is not SessionState.IDLE:
            logger.info("Trip form edited in state {}: analysis discarded", self.state.value)
        self.state = SessionState.IDLE
        self.analysis = None
        self.route = None
        self.error = None
        self._prices = None

    # ------------------------------------------------------------------ #
    # Form input
    # ------------------------------------------------------------------ #

    async def change_address(self, field: AddressField, text: str) -> List[PlaceCandidate]:
        """
        Store new text for an address field and refresh its suggestions.

        The field's coordinates are cleared: they only ever describe the text
        of the suggestion they came from.
        """
        self._set_address(field, text, None)
        self._supersede()
        self._query_seq[field] += 1
        seq = self._query_seq[field]

        if len(text) < self.min_query_length:
            self.suggestions[field] = []
            self.resolving.discard(field)
            return []

        self.resolving.add(field)
        try:
            candidates = await self.resolver.resolve(text)
        finally:
            if seq == self._query_seq[field]:
                self.resolving.discard(field)

        if seq != self._query_seq[field]:
            logger.debug("Discarding stale suggestions for {} ({!r})", field.value, text)
            return self.suggestions[field]

        self.suggestions[field] = list(candidates)
        return self.suggestions[field]

    def select_suggestion(self, field: AddressField, candidate: PlaceCandidate) -> None:
        self._set_address(field, candidate.display_name, candidate.coordinate)
        self._supersede()
        # a lookup still in flight must not reopen the list
        self._query_seq[field] += 1
        self.suggestions[field] = []
        self.resolving.discard(field)

    def change_desired_price(self, text: str) -> None:
        self.form.desired_price_per_km = text
        self._supersede()

    def change_trip_price(self, text: str) -> None:
        self.form.trip_price = text
        self._supersede()

    def _set_address(self, field: AddressField, text: str, coords: Optional[Coordinate]) -> None:
        if field is AddressField.ORIGIN:
            self.form.origin_text = text
            self.form.origin_coords = coords
        else:
            self.form.destination_text = text
            self.form.destination_coords = coords

    # ------------------------------------------------------------------ #
    # Actions
    # ------------------------------------------------------------------ #

    async def calculate(self) -> Optional[ProfitabilityAnalysis]:
        """
        Fetch the route and evaluate the trip.

        Invalid form input raises ValidationError before any network call and
        leaves the session as it was. Route failures move the session to
        FAILED with an error notification; they are not re-raised.
        Returns None when the calculation failed or was superseded.
        """
        try:
            origin, destination, trip_price, desired = self._validated_inputs()
        except ValidationError as exc:
            self._notify("error", exc.message)
            raise

        self.version += 1
        version = self.version
        self.state = SessionState.CALCULATING
        self.error = None

        try:
            route = await self.route_client.get_route(origin, destination)
            analysis = evaluate(route.distance_km, trip_price, desired)
        except (NoRouteFound, InvalidInput) as exc:
            self._fail(version, exc, MSG_NO_ROUTE)
            return None
        except ServiceUnavailable as exc:
            self._fail(version, exc, MSG_CONNECTION)
            return None

        if version != self.version:
            logger.info("Discarding superseded route result")
            return None

        self.route = route
        self.analysis = analysis
        self._prices = (trip_price, desired)
        self.state = SessionState.READY
        logger.info(
            "Trip evaluated: {:.2f} km, {:.2f}/km, {:+.1f}% -> {}",
            analysis.distance_km,
            analysis.actual_price_per_km,
            analysis.percent_difference,
            analysis.profitability.value,
        )
        return analysis

    def clear(self) -> None:
        """Return form, coordinates, analysis and route to their initial values."""
        self.version += 1
        for f in AddressField:
            self._query_seq[f] += 1
        self._reset()

    async def save(self) -> Optional[TripAnalysisRecord]:
        """
        Store the current analysis.

        On success the session is cleared and TripSaved is published. On
        failure the analysis is kept so saving can be retried without
        recomputing the route. Returns the stored record, or None on failure.
        """
        if self.saving:
            raise InvalidInput("the analysis is already being saved")
        if not self.can_save or self.analysis is None or self._prices is None:
            raise InvalidInput("there is no analysis to save")
        if self.store is None:
            raise InvalidInput("no trip store configured")

        identity = self.identity
        if identity is None or not identity.is_active(self._now()):
            self.error = PersistenceFailure(MSG_LOGIN_REQUIRED)
            self._notify("error", MSG_LOGIN_REQUIRED)
            return None

        trip_price, desired = self._prices
        record = TripAnalysisRecord(
            user_id=identity.user_id,
            origin=self.form.origin_text,
            destination=self.form.destination_text,
            distance_km=self.analysis.distance_km,
            trip_price=trip_price,
            desired_price_per_km=desired,
            actual_price_per_km=self.analysis.actual_price_per_km,
            profitability=self.analysis.profitability,
        )

        version = self.version
        self.saving = True
        try:
            stored = await self.store.insert(identity, record)
        except PersistenceFailure as exc:
            if version == self.version:
                self.error = exc
                self._notify("error", exc.message)
            logger.warning("Saving trip analysis failed: {}", exc.message)
            return None
        finally:
            self.saving = False

        if version == self.version:
            self.clear()
            self._notify("success", MSG_SAVED)
        else:
            logger.info("Trip saved after the form changed; keeping current input")

        if self.bus is not None:
            await self.bus.publish(TripSaved(record=stored))
        return stored

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _fail(self, version: int, exc: Exception, message: str) -> None:
        if version != self.version:
            logger.info("Ignoring failure of superseded calculation: {}", exc)
            return
        logger.warning("Trip calculation failed: {}", exc)
        self.state = SessionState.FAILED
        self.analysis = None
        self.route = None
        self._prices = None
        self.error = exc
        self._notify("error", message)

    def _validated_inputs(self) -> Tuple[Coordinate, Coordinate, float, float]:
        form = self.form
        if form.origin_coords is None or form.destination_coords is None:
            raise ValidationError(MSG_SELECT_ADDRESSES)
        if not form.desired_price_per_km.strip() or not form.trip_price.strip():
            raise ValidationError(MSG_MISSING_PRICES)

        trip_price = _parse_price(form.trip_price)
        desired = _parse_price(form.desired_price_per_km)
        return form.origin_coords, form.destination_coords, trip_price, desired


def _parse_price(text: str) -> float:
    # plain decimal notation only: no sign, exponent, underscores, nan or inf
    if _PRICE_RE.fullmatch(text.strip()) is None:
        raise ValidationError(MSG_INVALID_PRICES)
    value = float(text.strip())
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(MSG_INVALID_PRICES)
    return value
