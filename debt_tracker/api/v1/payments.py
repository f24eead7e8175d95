"""/v1 payment endpoints - record and delete payments"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from debt_tracker.api.dependencies import get_state
from debt_tracker.api.v1.schemas import AddPaymentRequest, DeletionPlanResponse, PaymentSchema
from debt_tracker.domain import commands
from debt_tracker.domain.state import TrackerState

router = APIRouter()


@router.post("/debts/{debt_id}/payments", response_model=PaymentSchema, status_code=status.HTTP_201_CREATED)
async def add_payment(
    debt_id: str,
    request_body: AddPaymentRequest,
    state: TrackerState = Depends(get_state),
):
    payment = commands.add_payment(
        state,
        debt_id,
        request_body.amount,
        payment_date=request_body.payment_date,
        note=request_body.note,
    )
    return PaymentSchema.from_domain(payment)


@router.get("/payments/{payment_id}/deletion", response_model=DeletionPlanResponse)
async def plan_payment_deletion(payment_id: str, state: TrackerState = Depends(get_state)):
    return DeletionPlanResponse.from_domain(commands.plan_payment_deletion(state, payment_id))


@router.delete("/payments/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(
    payment_id: str,
    confirm: bool = Query(False, description="Must be true to actually delete"),
    state: TrackerState = Depends(get_state),
):
    deleted = commands.delete_payment(state, payment_id, confirm=lambda plan: confirm)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_428_PRECONDITION_REQUIRED,
            detail="Deletion must be confirmed with ?confirm=true",
        )
