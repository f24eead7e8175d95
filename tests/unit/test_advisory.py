"""Unit tests for the advisory client and the stale-result guard"""

import asyncio
import json
import httpx
import pytest
from datetime import date
from debt_tracker.domain import commands
from debt_tracker.domain.advisory import begin_analysis, complete_analysis, request_analysis
from debt_tracker.domain.exceptions import NotFoundError
from debt_tracker.domain.models import AnalysisResult
from debt_tracker.infrastructure.clients.advisory import (
    UNAVAILABLE_MESSAGE,
    UNCONFIGURED_MESSAGE,
    AdvisoryClient,
    build_prompt,
)


def _gemini_response(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _client(handler) -> AdvisoryClient:
    return AdvisoryClient(
        api_key="test-key",
        base_url="https://advisory.test",
        model="test-model",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def selected(state):
    """State with one selected debt and two payments"""
    debt = commands.create_debt(state, "Ana", 1000)
    commands.add_payment(state, debt.id, 200, payment_date="2024-02-01")
    commands.add_payment(state, debt.id, 300, payment_date="2024-03-01")
    commands.select_debt(state, debt.id)
    return state


async def test_analyze_parses_model_answer(debt, sample_payments):
    """Test a well-formed answer becomes an AnalysisResult"""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers["x-goog-api-key"]
        seen["body"] = json.loads(request.content)
        answer = {"message": "Vas genial", "estimatedCompletion": "Junio 2024", "tone": "positive"}
        return httpx.Response(200, json=_gemini_response(json.dumps(answer)))

    result = await _client(handler).analyze(debt, sample_payments)

    assert result == AnalysisResult(message="Vas genial", tone="positive", estimated_completion="Junio 2024")
    assert seen["url"] == "https://advisory.test/v1beta/models/test-model:generateContent"
    assert seen["key"] == "test-key"
    assert seen["body"]["generationConfig"]["responseMimeType"] == "application/json"
    assert "Ana" in seen["body"]["contents"][0]["parts"][0]["text"]


async def test_unconfigured_client_returns_fallback(debt):
    """Test no API key means a neutral fallback without any request"""

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    client = AdvisoryClient(api_key="", transport=httpx.MockTransport(handler))
    result = await client.analyze(debt, [])

    assert result.message == UNCONFIGURED_MESSAGE
    assert result.tone == "neutral"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "boom"}),
        httpx.Response(200, json={"candidates": []}),
        httpx.Response(200, json=_gemini_response("not json")),
        httpx.Response(200, json=_gemini_response(json.dumps({"message": "hi", "tone": "ecstatic"}))),
        httpx.Response(200, json=_gemini_response("")),
    ],
)
async def test_failures_become_neutral_fallback(debt, response):
    """Test HTTP errors and malformed answers never raise"""
    result = await _client(lambda request: response).analyze(debt, [])

    assert result.message == UNAVAILABLE_MESSAGE
    assert result.tone == "neutral"
    assert result.estimated_completion is None


async def test_timeout_becomes_neutral_fallback(debt):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    result = await _client(handler).analyze(debt, [])

    assert result.message == UNAVAILABLE_MESSAGE


async def test_network_error_becomes_neutral_fallback(debt):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    result = await _client(handler).analyze(debt, [])

    assert result.tone == "neutral"


def test_prompt_summarizes_debt(debt, sample_payments):
    prompt = build_prompt(debt, sample_payments, "Spanish")

    assert "Debt to: Ana" in prompt
    assert "Total Paid: €500" in prompt
    assert "Percentage Paid: 50.0%" in prompt
    assert "Number of payments made: 2" in prompt
    assert "in Spanish" in prompt
    # Payment for another debt is not leaked into the prompt
    assert "2024-02-15" not in prompt


class FakeAdvisor:
    """Advisor whose answer can be held back until the test releases it"""

    def __init__(self, result: AnalysisResult):
        self.result = result
        self.release = asyncio.Event()
        self.calls = []

    async def analyze(self, debt, payments):
        self.calls.append((debt, payments))
        await self.release.wait()
        return self.result


async def test_request_analysis_caches_result(selected):
    advisor = FakeAdvisor(AnalysisResult(message="Bien", tone="positive"))
    advisor.release.set()

    result = await request_analysis(selected, advisor)

    assert result == advisor.result
    assert selected.analysis == advisor.result
    debt, payments = advisor.calls[0]
    assert debt.creditor_name == "Ana"
    assert [p.date for p in payments] == [date(2024, 2, 1), date(2024, 3, 1)]


async def test_result_discarded_after_mutation(selected):
    """Test a result arriving after a payment was added is not applied"""
    advisor = FakeAdvisor(AnalysisResult(message="Stale", tone="positive"))

    task = asyncio.create_task(request_analysis(selected, advisor))
    await asyncio.sleep(0)
    commands.add_payment(selected, selected.selected_debt_id, 100)
    advisor.release.set()

    assert await task is None
    assert selected.analysis is None


async def test_result_discarded_after_selection_change(selected):
    other = commands.create_debt(selected, "Luis", 50)
    advisor = FakeAdvisor(AnalysisResult(message="Stale"))

    task = asyncio.create_task(request_analysis(selected, advisor))
    await asyncio.sleep(0)
    commands.select_debt(selected, other.id)
    advisor.release.set()

    assert await task is None
    assert selected.analysis is None


def test_complete_analysis_checks_generation(selected):
    ticket = begin_analysis(selected)
    assert complete_analysis(selected, ticket, AnalysisResult(message="ok")) is True

    commands.edit_debt_total(selected, ticket.debt_id, 2000)

    assert complete_analysis(selected, ticket, AnalysisResult(message="late")) is False
    assert selected.analysis is None


def test_ticket_is_a_snapshot(selected):
    """Test later edits do not leak into an in-flight request's data"""
    ticket = begin_analysis(selected)

    commands.edit_debt_total(selected, ticket.debt_id, 5000)

    assert ticket.debt.total_amount == 1000


def test_begin_analysis_requires_selection(state):
    with pytest.raises(NotFoundError):
        begin_analysis(state)
