"""Tracker state - the store plus the selection and the transient analysis cache"""

from typing import Optional
from debt_tracker.domain.models import AnalysisResult, Debt
from debt_tracker.infrastructure.storage.store import DebtStore


class TrackerState:
    """Single owner of everything a session reads and mutates"""

    def __init__(self, store: DebtStore):
        self.store = store
        self.selected_debt_id: Optional[str] = None
        self.analysis: Optional[AnalysisResult] = None

    @property
    def selected_debt(self) -> Optional[Debt]:
        if self.selected_debt_id is None:
            return None
        return self.store.get_debt(self.selected_debt_id)

    def invalidate_analysis(self) -> None:
        self.analysis = None
