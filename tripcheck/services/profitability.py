# tripcheck/services/profitability.py
import math

from tripcheck.core.errors import InvalidInput
from tripcheck.models.trips import Profitability, ProfitabilityAnalysis

# Percentage deviation from the desired price per km that separates the tiers.
# +THRESHOLD belongs to RENTABLE, -THRESHOLD belongs to POCO_RENTABLE.
THRESHOLD_PCT: float = 10.0


def classify(percent_difference: float) -> Profitability:
    if percent_difference >= THRESHOLD_PCT:
        return Profitability.RENTABLE
    if percent_difference >= -THRESHOLD_PCT:
        return Profitability.POCO_RENTABLE
    return Profitability.NO_RENTABLE


def evaluate(
    distance_km: float,
    trip_price: float,
    desired_price_per_km: float,
) -> ProfitabilityAnalysis:
    """
    Compare what a trip actually pays per km against the driver's target.

    actual_price_per_km = trip_price / distance_km
    percent_difference  = (actual - desired) / desired * 100

    All three inputs must be positive finite numbers. Nothing is rounded here.
    """
    for name, value in (
        ("distance_km", distance_km),
        ("trip_price", trip_price),
        ("desired_price_per_km", desired_price_per_km),
    ):
        if not math.isfinite(value) or value <= 0:
            raise InvalidInput(f"{name} must be a positive number, got {value!r}")

    actual_price_per_km = trip_price / distance_km
    percent_difference = (
        (actual_price_per_km - desired_price_per_km) / desired_price_per_km * 100
    )

    return ProfitabilityAnalysis(
        distance_km=distance_km,
        actual_price_per_km=actual_price_per_km,
        profitability=classify(percent_difference),
        percent_difference=percent_difference,
    )
