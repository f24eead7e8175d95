"""Advisory HTTP client - short natural-language assessment of a debt's progress"""

import json
import logging
from typing import List, Literal, Optional
import httpx
from pydantic import BaseModel, Field, ValidationError as PayloadValidationError
from debt_tracker.config import settings
from debt_tracker.domain import derivation
from debt_tracker.domain.exceptions import AdvisoryUnavailableError
from debt_tracker.domain.models import AnalysisResult, Debt, Payment
from debt_tracker.infrastructure.observability.metrics import advisory_counter, advisory_latency_histogram

logger = logging.getLogger(__name__)

UNCONFIGURED_MESSAGE = "Configure an advisory API key to get personalised advice."
UNAVAILABLE_MESSAGE = "The analysis could not be generated right now."


class AdvisoryPayload(BaseModel):
    """JSON object the model is asked to return"""

    message: str = Field(..., min_length=1)
    estimatedCompletion: Optional[str] = None
    tone: Literal["positive", "neutral", "concerned"] = "neutral"


def build_prompt(debt: Debt, payments: List[Payment], language: str) -> str:
    """Summarize the debt for the model and describe the expected JSON answer"""
    paid = derivation.total_paid(payments, debt.id)
    left = debt.total_amount - paid
    percentage = derivation.progress_percentage(debt, payments)
    recent = [
        {"date": p.date.isoformat(), "amount": float(p.amount), "note": p.note}
        for p in derivation.recent_payments(payments, debt.id, settings.report_recent_payments)
    ]

    return f"""
Act as a friendly financial assistant. Analyze this personal debt situation.

Data:
- Debt to: {debt.creditor_name}
- Total Debt: €{debt.total_amount}
- Total Paid: €{paid}
- Remaining: €{left}
- Percentage Paid: {percentage:.1f}%
- Number of payments made: {len(derivation.payments_for(payments, debt.id))}
- Recent payments: {json.dumps(recent)}

Task:
Provide a short, encouraging summary in {language} (max 3 sentences).
If they are making good progress, congratulate them.
If they haven't paid anything recently, gently encourage them.
Estimate when they might finish if the payment consistency continues (rough guess).

Return ONLY raw JSON with this structure:
{{
  "message": "The summary text...",
  "estimatedCompletion": "Estimated date or text (optional)",
  "tone": "positive" | "neutral" | "concerned"
}}
"""


class AdvisoryClient:
    """Client for the Google Generative Language generateContent endpoint"""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = settings.advisory_api_key if api_key is None else api_key
        self.base_url = (base_url or settings.advisory_api_base).rstrip("/")
        self.model = model or settings.advisory_model
        self.timeout = timeout or settings.http_timeout_seconds
        self.language = settings.advisory_language
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def analyze(self, debt: Debt, payments: List[Payment]) -> AnalysisResult:
        """
        Ask the model for an assessment of the debt.

        Never raises: an unconfigured client or any failure yields a neutral
        fallback result.
        """
        if not self.configured:
            advisory_counter.labels(outcome="unconfigured").inc()
            return AnalysisResult(message=UNCONFIGURED_MESSAGE, tone="neutral")

        try:
            with advisory_latency_histogram.time():
                payload = await self._generate(build_prompt(debt, payments, self.language))
        except AdvisoryUnavailableError as e:
            advisory_counter.labels(outcome="fallback").inc()
            logger.warning(f"Advisory unavailable: {e}", extra={"debt_id": debt.id})
            return AnalysisResult(message=UNAVAILABLE_MESSAGE, tone="neutral")

        return AnalysisResult(
            message=payload.message,
            tone=payload.tone,
            estimated_completion=payload.estimatedCompletion,
        )

    async def _generate(self, prompt: str) -> AdvisoryPayload:
        """
        Run one generateContent call and parse the JSON answer.

        Raises:
            AdvisoryUnavailableError: On timeout, HTTP errors, or a malformed answer
        """
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/v1beta/models/{self.model}:generateContent",
                    headers={"x-goog-api-key": self.api_key},
                    json=body,
                )
                response.raise_for_status()
                data = response.json()

                text = data["candidates"][0]["content"]["parts"][0]["text"]
                if not text:
                    raise AdvisoryUnavailableError("Empty answer from advisory service")
                return AdvisoryPayload.model_validate_json(text)

            except httpx.TimeoutException as e:
                raise AdvisoryUnavailableError(f"Advisory timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise AdvisoryUnavailableError(f"Advisory error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise AdvisoryUnavailableError(f"Advisory unreachable: {e}") from e
            except (KeyError, IndexError, TypeError, ValueError, PayloadValidationError) as e:
                raise AdvisoryUnavailableError(f"Invalid answer from advisory service: {e}") from e
