"""Advisory round-trip guarded against results that arrive after the data changed"""

import time
from dataclasses import dataclass
from typing import List, Optional, Protocol
from debt_tracker.domain import derivation
from debt_tracker.domain.exceptions import NotFoundError
from debt_tracker.domain.models import AnalysisResult, Debt, Payment
from debt_tracker.domain.state import TrackerState
from debt_tracker.infrastructure.observability.logging import log_analysis
from debt_tracker.infrastructure.observability.metrics import advisory_counter


class Advisor(Protocol):
    async def analyze(self, debt: Debt, payments: List[Payment]) -> AnalysisResult:
        ...


@dataclass(frozen=True)
class AnalysisTicket:
    """Snapshot taken when an analysis is dispatched"""

    debt_id: str
    generation: int
    debt: Debt
    payments: List[Payment]


def begin_analysis(state: TrackerState) -> AnalysisTicket:
    """
    Snapshot the selected debt and its payments for an advisory request.

    Raises:
        NotFoundError: No debt is selected
    """
    debt = state.selected_debt
    if debt is None:
        raise NotFoundError("No debt selected")

    snapshot = Debt(
        id=debt.id,
        creditor_name=debt.creditor_name,
        total_amount=debt.total_amount,
        start_date=debt.start_date,
    )
    return AnalysisTicket(
        debt_id=debt.id,
        generation=state.store.generation,
        debt=snapshot,
        payments=derivation.payments_for(state.store.payments, debt.id),
    )


def is_current(state: TrackerState, ticket: AnalysisTicket) -> bool:
    return ticket.debt_id == state.selected_debt_id and ticket.generation == state.store.generation


def complete_analysis(state: TrackerState, ticket: AnalysisTicket, result: AnalysisResult) -> bool:
    """
    Cache the result if nothing changed since dispatch.

    Returns:
        False when the result is stale and was discarded
    """
    if not is_current(state, ticket):
        advisory_counter.labels(outcome="stale").inc()
        return False

    state.analysis = result
    advisory_counter.labels(outcome="applied").inc()
    return True


async def request_analysis(state: TrackerState, advisor: Advisor) -> Optional[AnalysisResult]:
    """
    Run an advisory request for the selected debt.

    Returns:
        The cached result, or None if the selection or data changed while
        the request was in flight

    Raises:
        NotFoundError: No debt is selected
    """
    start_time = time.time()
    ticket = begin_analysis(state)

    result = await advisor.analyze(ticket.debt, ticket.payments)
    applied = complete_analysis(state, ticket, result)

    duration_ms = (time.time() - start_time) * 1000
    log_analysis(ticket.debt_id, "applied" if applied else "stale", result.tone, duration_ms)
    return result if applied else None
