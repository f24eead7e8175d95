"""/v1/selection and /v1/analysis - selected debt and its advisory assessment"""

from fastapi import APIRouter, Depends, HTTPException

from debt_tracker.api.dependencies import get_advisory_client, get_state
from debt_tracker.api.v1.schemas import AnalysisResponse, SelectionRequest, SelectionResponse
from debt_tracker.domain import commands
from debt_tracker.domain.advisory import request_analysis
from debt_tracker.domain.state import TrackerState
from debt_tracker.infrastructure.clients.advisory import AdvisoryClient

router = APIRouter()


@router.get("/selection", response_model=SelectionResponse)
async def get_selection(state: TrackerState = Depends(get_state)):
    return SelectionResponse(debt_id=state.selected_debt_id)


@router.put("/selection", response_model=SelectionResponse)
async def put_selection(request_body: SelectionRequest, state: TrackerState = Depends(get_state)):
    commands.select_debt(state, request_body.debt_id)
    return SelectionResponse(debt_id=state.selected_debt_id)


@router.get("/analysis", response_model=AnalysisResponse)
async def get_analysis(state: TrackerState = Depends(get_state)):
    """Cached assessment for the selected debt, if one is still valid"""
    if state.analysis is None or state.selected_debt_id is None:
        raise HTTPException(status_code=404, detail="No analysis available")
    return AnalysisResponse(
        debt_id=state.selected_debt_id,
        message=state.analysis.message,
        tone=state.analysis.tone,
        estimated_completion=state.analysis.estimated_completion,
    )


@router.post("/analysis", response_model=AnalysisResponse)
async def create_analysis(
    state: TrackerState = Depends(get_state),
    advisory_client: AdvisoryClient = Depends(get_advisory_client),
):
    """
    Ask the advisory service about the selected debt.

    Flow:
    1. Snapshot the selected debt, its payments and the store generation
    2. Await the advisory service (fallback text on any failure)
    3. Cache the result only if nothing changed in the meantime

    A result that arrives after the data changed is discarded (409).
    """
    debt_id = state.selected_debt_id
    if debt_id is None:
        raise HTTPException(status_code=409, detail="Select a debt first")

    result = await request_analysis(state, advisory_client)
    if result is not None:
        return AnalysisResponse(
            debt_id=debt_id,
            message=result.message,
            tone=result.tone,
            estimated_completion=result.estimated_completion,
        )

    raise HTTPException(status_code=409, detail="Debt data changed while the analysis was running")
