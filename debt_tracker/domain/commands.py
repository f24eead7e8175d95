"""Command handlers - validated mutations of the tracker state"""

import math
import uuid
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional
from debt_tracker.domain.exceptions import NotFoundError, ValidationError
from debt_tracker.domain.models import Debt, DeletionPlan, Payment
from debt_tracker.domain.state import TrackerState
from debt_tracker.infrastructure.observability.logging import log_command
from debt_tracker.infrastructure.observability.metrics import record_command
from debt_tracker.utils.date_utils import parse_calendar_date, utc_now

Confirm = Callable[[DeletionPlan], bool]


def parse_amount(value: object, field: str = "amount") -> Decimal:
    """
    Coerce user input to a finite, strictly positive Decimal.

    Accepts Decimal, int, float and numeric strings; rejects booleans,
    NaN, infinities, zero and negatives. Amounts are stored as JSON
    numbers, so values that underflow or overflow a float are rejected too.

    Raises:
        ValidationError: When the value is not a finite positive number
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a positive number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"{field} must be a positive number, got {value!r}") from e
    if not amount.is_finite() or amount <= 0 or not _fits_float(amount):
        raise ValidationError(f"{field} must be a positive number, got {value!r}")
    return amount


def _fits_float(amount: Decimal) -> bool:
    as_float = float(amount)
    return math.isfinite(as_float) and as_float > 0


def _rejected(command: str, error: Exception, **fields) -> None:
    outcome = "not_found" if isinstance(error, NotFoundError) else "rejected"
    record_command(command, outcome)
    log_command(command, outcome, reason=str(error), **fields)


def _done(state: TrackerState, command: str, **fields) -> None:
    state.invalidate_analysis()
    record_command(command)
    log_command(command, "ok", generation=state.store.generation, **fields)


def create_debt(state: TrackerState, creditor_name: str, total_amount: object) -> Debt:
    """
    Register a new debt starting now.

    Raises:
        ValidationError: Empty creditor name or non-positive total
    """
    try:
        name = (creditor_name or "").strip()
        if not name:
            raise ValidationError("creditor_name must not be empty")
        amount = parse_amount(total_amount, "total_amount")
    except ValidationError as e:
        _rejected("create_debt", e)
        raise

    debt = Debt(id=str(uuid.uuid4()), creditor_name=name, total_amount=amount, start_date=utc_now())
    with state.store.mutate() as store:
        store.append_debt(debt)

    _done(state, "create_debt", debt_id=debt.id)
    return debt


def plan_debt_deletion(state: TrackerState, debt_id: str) -> DeletionPlan:
    """
    Describe what deleting a debt would remove, without touching anything.

    Raises:
        NotFoundError: Unknown debt
    """
    debt = state.store.require_debt(debt_id)
    cascaded = [p.id for p in state.store.payments if p.debt_id == debt.id]
    return DeletionPlan(
        target_id=debt.id,
        description=f"Delete debt with {debt.creditor_name} and its {len(cascaded)} payment(s)",
        cascaded_payment_ids=cascaded,
    )


def delete_debt(state: TrackerState, debt_id: str, confirm: Optional[Confirm] = None) -> bool:
    """
    Delete a debt together with every payment recorded against it.

    The confirmation policy belongs to the caller: when `confirm` is given
    and declines the plan, nothing changes. Clears the selection if it
    pointed at the removed debt.

    Returns:
        True when the debt was deleted

    Raises:
        NotFoundError: Unknown debt
    """
    try:
        plan = plan_debt_deletion(state, debt_id)
    except NotFoundError as e:
        _rejected("delete_debt", e, debt_id=debt_id)
        raise

    if confirm is not None and not confirm(plan):
        record_command("delete_debt", "cancelled")
        return False

    with state.store.mutate() as store:
        removed = store.remove_debt(debt_id)

    if state.selected_debt_id == debt_id:
        state.selected_debt_id = None

    _done(state, "delete_debt", debt_id=debt_id, cascaded_payments=len(removed))
    return True


def add_payment(
    state: TrackerState,
    debt_id: str,
    amount: object,
    payment_date: date | str | None = None,
    note: str = "",
) -> Payment:
    """
    Record a payment against an existing debt.

    Overpayment is allowed; remaining simply floors at zero.

    Raises:
        ValidationError: Non-positive amount, bad date, or unknown debt
    """
    try:
        if state.store.get_debt(debt_id) is None:
            raise ValidationError(f"Debt {debt_id} does not exist")
        value = parse_amount(amount)
        try:
            when = parse_calendar_date(payment_date) if payment_date is not None else date.today()
        except (TypeError, ValueError) as e:
            raise ValidationError(f"date must be an ISO calendar date, got {payment_date!r}") from e
    except ValidationError as e:
        _rejected("add_payment", e, debt_id=debt_id)
        raise

    payment = Payment(id=str(uuid.uuid4()), debt_id=debt_id, date=when, amount=value, note=note or "")
    with state.store.mutate() as store:
        store.append_payment(payment)

    _done(state, "add_payment", debt_id=debt_id, payment_id=payment.id)
    return payment


def plan_payment_deletion(state: TrackerState, payment_id: str) -> DeletionPlan:
    """
    Raises:
        NotFoundError: Unknown payment
    """
    payment = state.store.require_payment(payment_id)
    return DeletionPlan(
        target_id=payment.id,
        description=f"Delete payment of {payment.amount} on {payment.date.isoformat()}",
        cascaded_payment_ids=[],
    )


def delete_payment(state: TrackerState, payment_id: str, confirm: Optional[Confirm] = None) -> bool:
    """
    Delete one payment.

    Raises:
        NotFoundError: Unknown payment
    """
    try:
        plan = plan_payment_deletion(state, payment_id)
    except NotFoundError as e:
        _rejected("delete_payment", e, payment_id=payment_id)
        raise

    if confirm is not None and not confirm(plan):
        record_command("delete_payment", "cancelled")
        return False

    with state.store.mutate() as store:
        removed = store.remove_payment(payment_id)

    _done(state, "delete_payment", debt_id=removed.debt_id, payment_id=payment_id)
    return True


def edit_debt_total(state: TrackerState, debt_id: str, new_total: object) -> Debt:
    """
    Change a debt's total amount in place.

    Existing payments are left alone, even when they now exceed the total.

    Raises:
        ValidationError: New total is not a finite positive number
        NotFoundError: Unknown debt
    """
    try:
        state.store.require_debt(debt_id)
        amount = parse_amount(new_total, "total_amount")
    except (ValidationError, NotFoundError) as e:
        _rejected("edit_debt_total", e, debt_id=debt_id)
        raise

    with state.store.mutate() as store:
        debt = store.set_debt_total(debt_id, amount)

    _done(state, "edit_debt_total", debt_id=debt_id)
    return debt


def select_debt(state: TrackerState, debt_id: Optional[str]) -> Optional[Debt]:
    """
    Point the session at a debt (or at none). A different selection drops the cached analysis.

    Raises:
        NotFoundError: Unknown debt
    """
    debt = state.store.require_debt(debt_id) if debt_id is not None else None
    if debt_id != state.selected_debt_id:
        state.selected_debt_id = debt_id
        state.invalidate_analysis()
    return debt
