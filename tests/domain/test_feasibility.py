"""Tests for shandu.domain.feasibility pure functions."""

from datetime import timedelta

from conftest import NOW, make_goal, make_txn

from shandu.domain.feasibility import MIN_MONTHS_LEFT, evaluate_goal, months_until
from shandu.domain.models import Money
from shandu.domain.projection import RateProjection, project_rates


def projection_with_surplus(surplus: float) -> RateProjection:
    return RateProjection(Money(surplus), Money(0.0), Money(surplus))


class TestMonthsUntil:
    """Tests for months_until."""

    def test_future_deadline(self) -> None:
        assert months_until(NOW + timedelta(days=90), NOW) == 3.0

    def test_deadline_today_floors(self) -> None:
        assert months_until(NOW, NOW) == MIN_MONTHS_LEFT

    def test_past_deadline_floors(self) -> None:
        assert months_until(NOW - timedelta(days=400), NOW) == MIN_MONTHS_LEFT

    def test_deadline_just_inside_floor(self) -> None:
        assert months_until(NOW + timedelta(days=3), NOW) == MIN_MONTHS_LEFT


class TestEvaluateGoal:
    """Tests for evaluate_goal."""

    def test_deadline_today_uses_half_month_floor(self) -> None:
        """Should require twice the target per month when the deadline is today."""
        verdict = evaluate_goal(make_goal(target=1000.0, deadline=NOW), projection_with_surplus(0.0), now=NOW)

        assert verdict.months_left == 0.5
        assert verdict.required_per_month == 2000.0

    def test_past_deadline_is_a_severe_shortfall(self) -> None:
        """Should not reject past deadlines, only report a large gap."""
        goal = make_goal(target=1000.0, deadline=NOW - timedelta(days=30))
        verdict = evaluate_goal(goal, projection_with_surplus(500.0), now=NOW)

        assert verdict.months_left == 0.5
        assert not verdict.is_achievable
        assert verdict.gap == 1500.0

    def test_surplus_equal_to_requirement_is_achievable(self) -> None:
        """Should compare inclusively."""
        goal = make_goal(target=2000.0, deadline=NOW + timedelta(days=60))
        verdict = evaluate_goal(goal, projection_with_surplus(1000.0), now=NOW)

        assert verdict.required_per_month == 1000.0
        assert verdict.is_achievable
        assert verdict.gap == 0.0

    def test_surplus_above_requirement_gives_negative_gap(self) -> None:
        goal = make_goal(target=900.0, deadline=NOW + timedelta(days=90))
        verdict = evaluate_goal(goal, projection_with_surplus(500.0), now=NOW)

        assert verdict.is_achievable
        assert verdict.gap == -200.0

    def test_reports_projection_surplus(self) -> None:
        verdict = evaluate_goal(make_goal(), projection_with_surplus(-42.0), now=NOW)
        assert verdict.monthly_surplus == -42.0

    def test_sixty_day_scenario(self) -> None:
        """Ledger of 6000 in / 3000 out over 60 days against 4000 due in two months."""
        txns = [
            make_txn("income", 6000.0, date=NOW - timedelta(days=60), id="a"),
            make_txn("expense", 3000.0, date=NOW, id="b"),
        ]
        projection = project_rates(txns)
        goal = make_goal(target=4000.0, deadline=NOW + timedelta(days=60))

        verdict = evaluate_goal(goal, projection, now=NOW)

        assert projection.monthly_surplus == 1500.0
        assert verdict.months_left == 2.0
        assert verdict.required_per_month == 2000.0
        assert verdict.is_achievable is False
        assert verdict.gap == 500.0

    def test_does_not_mutate_inputs_and_is_repeatable(self) -> None:
        goal = make_goal(target=1234.5, deadline=NOW + timedelta(days=17))
        projection = projection_with_surplus(321.0)

        first = evaluate_goal(goal, projection, now=NOW)
        second = evaluate_goal(goal, projection, now=NOW)

        assert first == second
        assert goal == make_goal(target=1234.5, deadline=NOW + timedelta(days=17))
        assert projection == projection_with_surplus(321.0)
