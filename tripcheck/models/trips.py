# tripcheck/models/trips.py

from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from tripcheck.models.geo import Coordinate, RouteResult


class Profitability(str, Enum):
    """
    Profitability tier of a trip. Values are the ones stored in the database.
    """
    RENTABLE = "rentable"
    POCO_RENTABLE = "poco_rentable"
    NO_RENTABLE = "no_rentable"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").upper()


class ProfitabilityAnalysis(BaseModel):
    """
    Economics of one trip, derived from the route distance and the two prices.

    Values are unrounded; presentation rounding belongs to the caller.
    """
    model_config = ConfigDict(frozen=True)

    distance_km: float = Field(gt=0.0)
    actual_price_per_km: float
    profitability: Profitability
    percent_difference: float


class AddressField(str, Enum):
    ORIGIN = "origin"
    DESTINATION = "destination"


class TripFormState(BaseModel):
    """
    Raw form input of a trip analysis session.

    Prices are kept as typed by the user and parsed only on calculate.
    """
    origin_text: str = ""
    destination_text: str = ""
    desired_price_per_km: str = ""
    trip_price: str = ""
    origin_coords: Optional[Coordinate] = None
    destination_coords: Optional[Coordinate] = None


class Identity(BaseModel):
    """
    Current user as supplied by the auth collaborator.
    """
    model_config = ConfigDict(frozen=True)

    user_id: str
    access_token: Optional[str] = None
    expires_at: Optional[datetime] = None

    def is_active(self, now: datetime) -> bool:
        return self.expires_at is None or now < self.expires_at


class TripAnalysisRecord(BaseModel):
    """
    Row of the trip_analysis table.
    """
    id: Optional[str] = None
    user_id: str
    origin: str
    destination: str
    distance_km: float
    trip_price: float
    desired_price_per_km: float
    actual_price_per_km: float
    profitability: Profitability
    created_at: Optional[datetime] = None


class Notification(BaseModel):
    """
    Transient message for the user, dismissed after a fixed time.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["success", "error"]
    message: str
    created_at: float


class TripAnalysisRequest(BaseModel):
    """
    Request body for the /trips/analysis endpoint.
    """
    origin: Coordinate
    destination: Coordinate
    trip_price: float = Field(gt=0.0, allow_inf_nan=False)
    desired_price_per_km: float = Field(gt=0.0, allow_inf_nan=False)


class TripAnalysisResponse(BaseModel):
    analysis: ProfitabilityAnalysis
    route: RouteResult
