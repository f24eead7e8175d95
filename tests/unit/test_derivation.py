"""Unit tests for the derivation engine"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from debt_tracker.domain.models import Debt, Payment
from debt_tracker.domain.derivation import (
    balance_history,
    payments_for,
    payments_newest_first,
    progress_percentage,
    recent_payments,
    remaining,
    summarize,
    summarize_all,
    total_paid,
)


def _payment(pid: str, day: date, amount: str, debt_id: str = "debt-1") -> Payment:
    return Payment(id=pid, debt_id=debt_id, date=day, amount=Decimal(amount))


def test_payments_for_keeps_store_order(debt, sample_payments):
    """Test only the debt's payments are returned, in store order"""
    result = payments_for(sample_payments, debt.id)

    assert [p.id for p in result] == ["p1", "p2"]


def test_scenario_partial_then_overpaid(debt):
    """Test 1000 total with 200 + 300 paid, then 600 more"""
    payments = [
        _payment("a", date(2024, 2, 1), "200"),
        _payment("b", date(2024, 3, 1), "300"),
    ]

    assert total_paid(payments, debt.id) == 500
    assert remaining(debt, payments) == 500
    assert progress_percentage(debt, payments) == 50

    payments.append(_payment("c", date(2024, 4, 1), "600"))

    assert total_paid(payments, debt.id) == 1100
    assert remaining(debt, payments) == 0  # Floored
    assert progress_percentage(debt, payments) == 100  # Capped


def test_debt_without_payments(debt):
    """Test zero payments: full remaining, 0%, single history point"""
    assert remaining(debt, []) == debt.total_amount
    assert progress_percentage(debt, []) == 0

    history = balance_history(debt, [])
    assert len(history) == 1
    assert history[0].date == date(2024, 1, 1)
    assert history[0].balance == debt.total_amount
    assert history[0].paid == 0


def test_decimal_amounts_do_not_drift(debt):
    """Test cents add up exactly"""
    payments = [_payment(str(i), date(2024, 2, 1), "0.10") for i in range(3)]

    assert total_paid(payments, debt.id) == Decimal("0.30")
    assert remaining(debt, payments) == Decimal("999.70")


def test_balance_history_sorted_by_date(debt, sample_payments):
    """Test history anchors at start date and follows payment dates"""
    history = balance_history(debt, sample_payments)

    assert [p.date for p in history] == [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1)]
    assert [p.balance for p in history] == [Decimal("1000"), Decimal("800"), Decimal("500")]
    assert [p.paid for p in history] == [Decimal("0"), Decimal("200"), Decimal("300")]


def test_balance_history_ties_keep_insertion_order(debt):
    """Test same-day payments stay in the order they were recorded"""
    same_day = date(2024, 5, 5)
    payments = [
        _payment("first", same_day, "10"),
        _payment("second", same_day, "20"),
        _payment("third", same_day, "30"),
    ]

    history = balance_history(debt, payments)

    assert [p.paid for p in history[1:]] == [Decimal("10"), Decimal("20"), Decimal("30")]


def test_balance_history_floors_and_never_increases(debt):
    """Test overpayment floors the running balance at zero"""
    payments = [
        _payment("a", date(2024, 2, 1), "700"),
        _payment("b", date(2024, 3, 1), "700"),
        _payment("c", date(2024, 4, 1), "50"),
    ]

    history = balance_history(debt, payments)
    balances = [p.balance for p in history]

    assert len(history) == len(payments) + 1
    assert balances == [Decimal("1000"), Decimal("300"), Decimal("0"), Decimal("0")]
    assert all(a >= b for a, b in zip(balances, balances[1:]))


@pytest.mark.parametrize("total", ["1", "250", "999.99", "100000"])
def test_bounds_hold_for_any_total(total):
    """Test remaining >= 0 and progress <= 100 whatever the overpayment"""
    debt = Debt(
        id="d",
        creditor_name="Bank",
        total_amount=Decimal(total),
        start_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    payments = [_payment(str(i), date(2024, 1, i + 1), "333.33", debt_id="d") for i in range(5)]

    assert remaining(debt, payments) >= 0
    assert progress_percentage(debt, payments) <= 100


def test_recent_payments_newest_first_limited(debt):
    """Test report list: 5 most recent by date, descending"""
    payments = [_payment(f"p{i}", date(2024, 1, i + 1), "10") for i in range(7)]

    recent = recent_payments(payments, debt.id)

    assert [p.id for p in recent] == ["p6", "p5", "p4", "p3", "p2"]


def test_recent_payments_ties_keep_store_order(debt):
    same_day = date(2024, 6, 1)
    payments = [_payment("x", same_day, "1"), _payment("y", same_day, "2")]

    assert [p.id for p in recent_payments(payments, debt.id)] == ["x", "y"]


def test_payments_newest_first_reverses_store_order(debt, sample_payments):
    assert [p.id for p in payments_newest_first(sample_payments, debt.id)] == ["p2", "p1"]


def test_summarize_all_covers_every_debt(debt, sample_payments):
    """Test dashboard cards are computed per debt"""
    other = Debt(
        id="debt-2",
        creditor_name="Luis",
        total_amount=Decimal("200"),
        start_date=datetime(2024, 2, 1, tzinfo=timezone.utc),
    )

    cards = summarize_all([debt, other], sample_payments)

    assert [c.debt.id for c in cards] == ["debt-1", "debt-2"]
    assert cards[0].total_paid == 500
    assert cards[0].payment_count == 2
    assert cards[1].remaining == 150
    assert cards[1].progress_percentage == 25


def test_summarize_matches_individual_functions(debt, sample_payments):
    summary = summarize(debt, sample_payments)

    assert summary.total_paid == total_paid(sample_payments, debt.id)
    assert summary.remaining == remaining(debt, sample_payments)
    assert summary.progress_percentage == progress_percentage(debt, sample_payments)
