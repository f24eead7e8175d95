"""/v1/debts - dashboard, detail, create, edit total, delete"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from debt_tracker.api.dependencies import get_state
from debt_tracker.api.v1.schemas import (
    BalancePointSchema,
    CreateDebtRequest,
    DashboardResponse,
    DebtDetailResponse,
    DebtSummarySchema,
    DeletionPlanResponse,
    EditDebtTotalRequest,
    HistoryResponse,
    PaymentSchema,
)
from debt_tracker.domain import commands, derivation
from debt_tracker.domain.state import TrackerState

router = APIRouter()


@router.get("/debts", response_model=DashboardResponse)
async def list_debts(state: TrackerState = Depends(get_state)):
    """Dashboard: one summary card per debt, in creation order"""
    summaries = derivation.summarize_all(state.store.debts, state.store.payments)
    return DashboardResponse(
        count=len(summaries),
        debts=[DebtSummarySchema.from_domain(s) for s in summaries],
    )


@router.post("/debts", response_model=DebtSummarySchema, status_code=status.HTTP_201_CREATED)
async def create_debt(request_body: CreateDebtRequest, state: TrackerState = Depends(get_state)):
    debt = commands.create_debt(state, request_body.creditor_name, request_body.total_amount)
    return DebtSummarySchema.from_domain(derivation.summarize(debt, state.store.payments))


@router.get("/debts/{debt_id}", response_model=DebtDetailResponse)
async def get_debt(debt_id: str, state: TrackerState = Depends(get_state)):
    """
    Detail screen for one debt.

    Returns:
        Summary figures, payments (last recorded first) and the balance history
    """
    debt = state.store.require_debt(debt_id)
    payments = state.store.payments
    return DebtDetailResponse(
        summary=DebtSummarySchema.from_domain(derivation.summarize(debt, payments)),
        payments=[PaymentSchema.from_domain(p) for p in derivation.payments_newest_first(payments, debt.id)],
        history=[BalancePointSchema.from_domain(p) for p in derivation.balance_history(debt, payments)],
    )


@router.patch("/debts/{debt_id}", response_model=DebtSummarySchema)
async def edit_debt_total(
    debt_id: str,
    request_body: EditDebtTotalRequest,
    state: TrackerState = Depends(get_state),
):
    debt = commands.edit_debt_total(state, debt_id, request_body.total_amount)
    return DebtSummarySchema.from_domain(derivation.summarize(debt, state.store.payments))


@router.get("/debts/{debt_id}/history", response_model=HistoryResponse)
async def get_history(debt_id: str, state: TrackerState = Depends(get_state)):
    """Balance-over-time series backing the payoff chart"""
    debt = state.store.require_debt(debt_id)
    points = derivation.balance_history(debt, state.store.payments)
    return HistoryResponse(debt_id=debt.id, points=[BalancePointSchema.from_domain(p) for p in points])


@router.get("/debts/{debt_id}/deletion", response_model=DeletionPlanResponse)
async def plan_debt_deletion(debt_id: str, state: TrackerState = Depends(get_state)):
    """What DELETE would remove; lets a client ask the user before confirming"""
    return DeletionPlanResponse.from_domain(commands.plan_debt_deletion(state, debt_id))


@router.delete("/debts/{debt_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_debt(
    debt_id: str,
    confirm: bool = Query(False, description="Must be true to actually delete"),
    state: TrackerState = Depends(get_state),
):
    """Delete a debt and all its payments. Requires ?confirm=true."""
    deleted = commands.delete_debt(state, debt_id, confirm=lambda plan: confirm)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_428_PRECONDITION_REQUIRED,
            detail="Deletion must be confirmed with ?confirm=true",
        )
