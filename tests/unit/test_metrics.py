"""Tests for the metric primitives."""

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from efecos.core_types import BudgetLevel, Driver, Vehicle
from efecos.metrics import (
    calculate_driver_ranking,
    calculate_efficiency_score,
    calculate_fuel_savings,
    calculate_vehicle_ranking,
    detect_fuel_anomalies,
    expected_fuel,
    get_budget_status,
    get_route_optimization_suggestions,
    predict_fuel_consumption,
)

finite = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False)
positive = st.floats(min_value=0.01, max_value=1e6, allow_nan=False)


class TestEfficiencyScore:
    def test_reference_values(self):
        assert calculate_efficiency_score(10, 10) == 100
        assert calculate_efficiency_score(20, 10) == 50
        assert calculate_efficiency_score(5, 10) == 100

    def test_zero_consumption_is_perfect(self):
        assert calculate_efficiency_score(0, 10) == 100.0

    def test_missing_baseline_scores_zero(self):
        assert calculate_efficiency_score(10, 0) == 0.0

    @given(actual=positive, average=st.floats(min_value=0, max_value=1e6))
    def test_always_within_bounds(self, actual, average):
        score = calculate_efficiency_score(actual, average)
        assert 0.0 <= score <= 100.0


class TestAnomalyDetection:
    @pytest.fixture
    def baseline(self):
        # 1000 km at 10 L/100km -> 100 L expected
        return Vehicle(id="v1", name="Hilux", average_consumption=10.0)

    @pytest.mark.parametrize(
        "liters, anomalous",
        [
            (135, True),  # 35% over
            (125, False),  # 25% over, within the 30% band
            (85, False),  # 15% under
            (75, True),  # 25% under, beyond the stricter 20% band
            (100, False),
        ],
    )
    def test_asymmetric_thresholds(self, make_log, baseline, liters, anomalous):
        log = make_log(liters=liters, trip_distance=1000)
        assert detect_fuel_anomalies(log, baseline) is anomalous

    @given(liters=st.floats(min_value=0, max_value=1e6))
    def test_zero_distance_never_anomalous(self, liters):
        from efecos.core_types import FuelLog

        log = FuelLog(
            id="f",
            vehicle_id="v1",
            driver_id="d1",
            date=None,
            liters=liters,
            cost=0.0,
            trip_distance=0.0,
        )
        vehicle = Vehicle(id="v1", name="", average_consumption=10.0)
        assert detect_fuel_anomalies(log, vehicle) is False

    def test_custom_thresholds(self, make_log, baseline):
        log = make_log(liters=115, trip_distance=1000)
        assert detect_fuel_anomalies(log, baseline) is False
        assert detect_fuel_anomalies(log, baseline, over_threshold=0.10) is True

    def test_expected_fuel(self):
        assert expected_fuel(250, 8) == pytest.approx(20.0)


class TestFuelSavings:
    def test_default_price(self):
        assert calculate_fuel_savings(10, 8) == pytest.approx(3.0)

    def test_overspend_is_negative(self):
        assert calculate_fuel_savings(8, 10, fuel_price=2.0) == pytest.approx(-4.0)

    def test_prediction_formula(self):
        assert predict_fuel_consumption(100, 10, 100) == pytest.approx(10.0)
        assert predict_fuel_consumption(100, 10, 0) == pytest.approx(20.0)
        assert predict_fuel_consumption(100, 10, 50) == pytest.approx(15.0)


class TestBudgetStatus:
    @given(spend=finite, budget=st.floats(max_value=0, allow_nan=False))
    def test_non_positive_budget_is_good(self, spend, budget):
        status = get_budget_status(spend, budget)
        assert status.status is BudgetLevel.GOOD
        assert status.percentage == 0
        assert status.remaining == 0

    def test_missing_budget_is_good(self):
        status = get_budget_status(50, None)
        assert (status.status, status.percentage, status.remaining) == (
            BudgetLevel.GOOD,
            0.0,
            0.0,
        )

    @given(budget=positive)
    def test_spend_equal_to_budget_is_critical(self, budget):
        status = get_budget_status(budget, budget)
        assert status.percentage == 100
        assert status.status is BudgetLevel.CRITICAL

    @given(budget=positive, fraction=st.floats(min_value=0.8, max_value=0.999))
    def test_between_threshold_and_limit_is_warning(self, budget, fraction):
        status = get_budget_status(budget * fraction, budget)
        assume(80 <= status.percentage < 100)
        assert status.status is BudgetLevel.WARNING

    def test_below_threshold_is_good(self):
        status = get_budget_status(40, 100)
        assert status.status is BudgetLevel.GOOD
        assert status.percentage == pytest.approx(40.0)
        assert status.remaining == pytest.approx(60.0)

    def test_custom_threshold(self):
        assert get_budget_status(60, 100, threshold=50).status is BudgetLevel.WARNING

    def test_nan_spend_is_coerced(self):
        status = get_budget_status(float("nan"), 100)
        assert status.percentage == 0.0
        assert status.remaining == 0.0

    def test_to_dict_uses_plain_status(self):
        assert get_budget_status(120, 100).to_dict()["status"] == "critical"


class TestRankings:
    def test_driver_ranking_descending_and_pure(self):
        drivers = [
            Driver(id="a", name="A", efficiency_score=70),
            Driver(id="b", name="B", efficiency_score=95),
            Driver(id="c", name="C", efficiency_score=70),
        ]
        ranked = calculate_driver_ranking(drivers)
        assert [d.id for d in ranked] == ["b", "a", "c"]
        assert [d.id for d in drivers] == ["a", "b", "c"]

    def test_vehicle_ranking(self):
        vehicles = [
            Vehicle(id="x", name="X", efficiency_score=60),
            Vehicle(id="y", name="Y", efficiency_score=88),
        ]
        assert [v.id for v in calculate_vehicle_ranking(vehicles)] == ["y", "x"]


class TestRouteSuggestions:
    def test_grouped_and_sorted_by_savings(self, make_trip):
        trips = [
            make_trip(id="t1", route="A", predicted_fuel=14, actual_fuel=12, efficiency=10),
            make_trip(id="t2", route="A", predicted_fuel=10, actual_fuel=11, efficiency=14),
            make_trip(id="t3", route="B", predicted_fuel=20, actual_fuel=10, efficiency=8),
        ]
        suggestions = get_route_optimization_suggestions(trips)

        assert [s.route for s in suggestions] == ["B", "A"]
        route_a = suggestions[1]
        assert route_a.trip_count == 2
        assert route_a.average_efficiency == pytest.approx(12.0)
        assert route_a.potential_savings == pytest.approx(1.5)
        assert suggestions[0].potential_savings == pytest.approx(15.0)

    def test_unnamed_routes_share_a_bucket(self, make_trip):
        trips = [make_trip(id="t1", route=""), make_trip(id="t2", route="")]
        suggestions = get_route_optimization_suggestions(trips, fuel_price=1.0)
        assert len(suggestions) == 1
        assert suggestions[0].route == ""

    def test_no_trips(self):
        assert get_route_optimization_suggestions([]) == []
