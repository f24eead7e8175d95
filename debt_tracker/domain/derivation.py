"""Derivation engine - payoff figures computed fresh from the store contents"""

from decimal import Decimal
from typing import Iterable, List
from debt_tracker.domain.models import Debt, Payment, BalancePoint, DebtSummary

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def payments_for(payments: Iterable[Payment], debt_id: str) -> List[Payment]:
    """Payments recorded against a debt, in store order"""
    return [p for p in payments if p.debt_id == debt_id]


def total_paid(payments: Iterable[Payment], debt_id: str) -> Decimal:
    return sum((p.amount for p in payments_for(payments, debt_id)), ZERO)


def remaining(debt: Debt, payments: Iterable[Payment]) -> Decimal:
    """Outstanding balance, floored at zero when the debt is overpaid"""
    return max(ZERO, debt.total_amount - total_paid(payments, debt.id))


def progress_percentage(debt: Debt, payments: Iterable[Payment]) -> Decimal:
    """Share of the total already paid, capped at 100"""
    # total_amount > 0 is enforced on every write path
    return min(HUNDRED, total_paid(payments, debt.id) / debt.total_amount * HUNDRED)


def balance_history(debt: Debt, payments: Iterable[Payment]) -> List[BalancePoint]:
    """
    Chronological balance series backing the payoff chart.

    The first point is anchored at the debt's start date with the full total.
    Each payment (sorted by date, ties kept in store order) adds one point
    with the running balance floored at zero and that payment's amount.

    Returns:
        len(payments_for(debt)) + 1 points with non-increasing balance
    """
    ordered = sorted(payments_for(payments, debt.id), key=lambda p: p.date)

    history = [BalancePoint(date=debt.start_date.date(), balance=debt.total_amount, paid=ZERO)]
    running = debt.total_amount
    for payment in ordered:
        running -= payment.amount
        history.append(BalancePoint(date=payment.date, balance=max(ZERO, running), paid=payment.amount))

    return history


def recent_payments(payments: Iterable[Payment], debt_id: str, limit: int = 5) -> List[Payment]:
    """Most recent payments by date, newest first (ties keep store order)"""
    ordered = sorted(payments_for(payments, debt_id), key=lambda p: p.date, reverse=True)
    # reverse=True keeps the sort stable, so equal dates stay in store order
    return ordered[:limit]


def payments_newest_first(payments: Iterable[Payment], debt_id: str) -> List[Payment]:
    """Payment list as shown on the detail screen: last recorded first"""
    return list(reversed(payments_for(payments, debt_id)))


def summarize(debt: Debt, payments: Iterable[Payment]) -> DebtSummary:
    payments = list(payments)
    return DebtSummary(
        debt=debt,
        total_paid=total_paid(payments, debt.id),
        remaining=remaining(debt, payments),
        progress_percentage=progress_percentage(debt, payments),
        payment_count=len(payments_for(payments, debt.id)),
    )


def summarize_all(debts: Iterable[Debt], payments: Iterable[Payment]) -> List[DebtSummary]:
    """Dashboard cards for every debt, in store order"""
    payments = list(payments)
    return [summarize(debt, payments) for debt in debts]
