"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from debt_tracker.domain.state import TrackerState
from debt_tracker.infrastructure.clients.advisory import AdvisoryClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_state(request: Request) -> TrackerState:
    """Provide the application's tracker state"""
    return request.app.state.tracker


def get_advisory_client() -> AdvisoryClient:
    """Provide advisory client instance"""
    return AdvisoryClient()
