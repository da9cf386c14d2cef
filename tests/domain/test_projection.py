"""Tests for shandu.domain.projection pure functions."""

from datetime import timedelta

from conftest import NOW, make_txn

from shandu.domain.projection import RateProjection, months_spanned, project_rates


class TestMonthsSpanned:
    """Tests for months_spanned."""

    def test_empty_ledger_floors_to_one_month(self) -> None:
        assert months_spanned([], now=NOW) == 1.0

    def test_single_day_floors_to_one_month(self) -> None:
        txns = [make_txn(id="a"), make_txn(id="b")]
        assert months_spanned(txns) == 1.0

    def test_short_span_floors_to_one_month(self) -> None:
        txns = [make_txn(id="a"), make_txn(id="b", date=NOW + timedelta(days=10))]
        assert months_spanned(txns) == 1.0

    def test_span_uses_thirty_day_months(self) -> None:
        txns = [make_txn(id="a", date=NOW + timedelta(days=90)), make_txn(id="b")]
        assert months_spanned(txns) == 3.0

    def test_fractional_span(self) -> None:
        txns = [make_txn(id="a"), make_txn(id="b", date=NOW + timedelta(days=45))]
        assert months_spanned(txns) == 1.5


class TestProjectRates:
    """Tests for project_rates."""

    def test_empty_ledger_is_all_zero(self) -> None:
        """Should return zero rates without dividing by zero."""
        assert project_rates([], now=NOW) == RateProjection(0.0, 0.0, 0.0)

    def test_single_day_ledger_rates_equal_totals(self) -> None:
        """Should treat a single-day ledger as one month."""
        txns = [
            make_txn("income", 2500.0, id="a"),
            make_txn("income", 500.0, id="b"),
            make_txn("expense", 700.0, id="c"),
        ]
        projection = project_rates(txns)

        assert projection.avg_monthly_income == 3000.0
        assert projection.avg_monthly_expense == 700.0
        assert projection.monthly_surplus == 2300.0

    def test_sixty_day_ledger(self) -> None:
        """Should divide totals by a two-month span."""
        txns = [
            make_txn("income", 6000.0, date=NOW, id="a"),
            make_txn("expense", 1000.0, date=NOW + timedelta(days=30), id="b"),
            make_txn("expense", 2000.0, date=NOW + timedelta(days=60), id="c"),
        ]
        projection = project_rates(txns)

        assert projection.avg_monthly_income == 3000.0
        assert projection.avg_monthly_expense == 1500.0
        assert projection.monthly_surplus == 1500.0

    def test_order_does_not_matter(self) -> None:
        """Should give the same result for unsorted input."""
        txns = [
            make_txn("expense", 300.0, date=NOW + timedelta(days=60), id="a"),
            make_txn("income", 900.0, date=NOW, id="b"),
        ]
        assert project_rates(txns) == project_rates(list(reversed(txns)))

    def test_negative_surplus(self) -> None:
        """Should report a negative surplus when spending exceeds income."""
        txns = [make_txn("income", 100.0, id="a"), make_txn("expense", 400.0, id="b")]
        assert project_rates(txns).monthly_surplus == -300.0

    def test_repeated_calls_are_identical(self) -> None:
        """Should be a pure function of its input."""
        txns = [make_txn("income", 123.45, id="a"), make_txn("expense", 67.89, date=NOW + timedelta(days=77), id="b")]
        assert project_rates(txns) == project_rates(txns)
