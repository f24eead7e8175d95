"""GET /v1/debts/{debt_id}/report - exportable payoff snapshot"""

from urllib.parse import quote
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from debt_tracker.api.dependencies import get_state
from debt_tracker.api.v1.schemas import ReportResponse
from debt_tracker.config import settings
from debt_tracker.domain.report import build_report, render_ticket, ticket_filename
from debt_tracker.domain.state import TrackerState

router = APIRouter()


@router.get("/debts/{debt_id}/report", response_model=ReportResponse)
async def get_report(debt_id: str, state: TrackerState = Depends(get_state)):
    debt = state.store.require_debt(debt_id)
    report = build_report(debt, state.store.payments, recent_limit=settings.report_recent_payments)
    return ReportResponse.from_domain(report)


@router.get("/debts/{debt_id}/report.txt", response_class=PlainTextResponse)
async def download_ticket(debt_id: str, state: TrackerState = Depends(get_state)):
    """Plain-text receipt, served as an attachment"""
    debt = state.store.require_debt(debt_id)
    report = build_report(debt, state.store.payments, recent_limit=settings.report_recent_payments)
    return PlainTextResponse(
        render_ticket(report),
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(ticket_filename(report))}"},
    )
