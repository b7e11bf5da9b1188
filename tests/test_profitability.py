# tests/test_profitability.py
import math

import pytest

from tripcheck.core.errors import InvalidInput
from tripcheck.models.trips import Profitability
from tripcheck.services.profitability import classify, evaluate


def test_rentable_at_plus_ten_percent_boundary():
    analysis = evaluate(distance_km=10, trip_price=1100, desired_price_per_km=100)

    assert analysis.actual_price_per_km == 110
    assert analysis.percent_difference == 10.0
    assert analysis.profitability is Profitability.RENTABLE


def test_just_under_plus_ten_percent_is_poco_rentable():
    analysis = evaluate(distance_km=10, trip_price=1099.999, desired_price_per_km=100)

    assert analysis.percent_difference < 10
    assert analysis.profitability is Profitability.POCO_RENTABLE


def test_minus_ten_percent_is_poco_rentable():
    analysis = evaluate(distance_km=10, trip_price=900, desired_price_per_km=100)

    assert analysis.percent_difference == -10.0
    assert analysis.profitability is Profitability.POCO_RENTABLE


def test_below_minus_ten_percent_is_no_rentable():
    analysis = evaluate(distance_km=10, trip_price=899, desired_price_per_km=100)

    assert analysis.percent_difference == pytest.approx(-10.1)
    assert analysis.profitability is Profitability.NO_RENTABLE


def test_buenos_aires_trip():
    analysis = evaluate(distance_km=5000 / 1000, trip_price=3000, desired_price_per_km=500)

    assert analysis.distance_km == 5
    assert analysis.actual_price_per_km == pytest.approx(600)
    assert analysis.percent_difference == pytest.approx(20)
    assert analysis.profitability is Profitability.RENTABLE


def test_evaluate_is_deterministic():
    first = evaluate(7.3, 4321.5, 512.25)
    second = evaluate(7.3, 4321.5, 512.25)

    assert first == second
    assert first.actual_price_per_km.hex() == second.actual_price_per_km.hex()
    assert first.percent_difference.hex() == second.percent_difference.hex()


def test_values_are_not_rounded():
    analysis = evaluate(distance_km=3, trip_price=1000, desired_price_per_km=300)

    assert analysis.actual_price_per_km == 1000 / 3
    assert analysis.percent_difference == (1000 / 3 - 300) / 300 * 100


@pytest.mark.parametrize(
    "distance_km, trip_price, desired_price_per_km",
    [
        (0, 1000, 100),
        (-1, 1000, 100),
        (10, -500, 100),
        (10, 0, 100),
        (10, 1000, -100),
        (10, 1000, 0),
        (math.nan, 1000, 100),
        (10, math.inf, 100),
    ],
)
def test_rejects_non_positive_or_non_finite_inputs(distance_km, trip_price, desired_price_per_km):
    with pytest.raises(InvalidInput):
        evaluate(distance_km, trip_price, desired_price_per_km)


def test_classify_thresholds():
    assert classify(25.0) is Profitability.RENTABLE
    assert classify(0.0) is Profitability.POCO_RENTABLE
    assert classify(-10.000001) is Profitability.NO_RENTABLE


def test_profitability_labels():
    assert Profitability.RENTABLE.label == "RENTABLE"
    assert Profitability.POCO_RENTABLE.label == "POCO RENTABLE"
    assert Profitability.NO_RENTABLE.label == "NO RENTABLE"
