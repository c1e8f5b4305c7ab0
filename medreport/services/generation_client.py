"""
Generation client for medreport.
Calls Gemini generateContent, retries transient failures with exponential backoff,
and decodes the reply into a MedicalReport.
Temperature is always 0.0 for deterministic output.
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from medreport.models.generation import (
    AttemptOutcome,
    GenerationAttempt,
    GenerationRequest,
)
from medreport.models.report import MedicalReport
from medreport.services.errors import (
    EmptyResponse,
    GenerationError,
    PayloadError,
    TransportFailure,
)
from medreport.services.payload_extractor import decode_report
from medreport.services.prompts import SYSTEM_INSTRUCTION
from medreport.services.retry_policy import RetryPolicy
from medreport.utils.config import settings
from medreport.utils.logging import (
    RequestContext,
    attempt_var,
    get_compliance_logger,
    get_logger,
    monitor_latency,
)

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


class GenerationClient:
    """Structured report generation against Gemini with bounded retries."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        retry_policy: Optional[RetryPolicy] = None,
        search_grounding: Optional[bool] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.model = model or settings.gemini_model
        self.retry_policy = retry_policy or RetryPolicy(max_attempts=settings.max_attempts)
        self.search_grounding = (
            settings.enable_search_grounding
            if search_grounding is None
            else search_grounding
        )
        self.http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout),
            headers={"x-goog-api-key": api_key or settings.gemini_api_key},
        )
        self._sleep = sleep
        self._is_generating = False
        self.last_attempts: List[GenerationAttempt] = []
        self.performance_stats = {
            "total_requests": 0,
            "successful_requests": 0,
            "failed_requests": 0,
            "total_attempts": 0,
        }

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self.http_client.aclose()

    @property
    def is_generating(self) -> bool:
        """True while a generate call, including its backoff waits, is in flight."""
        return self._is_generating

    @property
    def endpoint(self) -> str:
        return f"{settings.gemini_base_url.rstrip('/')}/models/{self.model}:generateContent"

    def build_request(self, prompt_text: str) -> GenerationRequest:
        return GenerationRequest(
            prompt_text=prompt_text,
            system_instruction=SYSTEM_INSTRUCTION,
            search_grounding=self.search_grounding,
        )

    @monitor_latency("llm_gemini")
    async def _call_gemini(self, request: GenerationRequest) -> str:
        """Issue one generateContent call and return the reply text."""
        try:
            response = await self.http_client.post(
                self.endpoint, json=request.to_payload()
            )
            response.raise_for_status()
            envelope = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Gemini API error {e.response.status_code}")
            raise TransportFailure(e) from e
        except httpx.RequestError as e:
            logger.warning(f"Gemini API request failed: {e!r}")
            raise TransportFailure(e) from e
        except ValueError as e:
            logger.warning("Gemini API returned a non-JSON envelope")
            raise TransportFailure(e) from e

        if not isinstance(envelope, dict):
            logger.warning(
                f"Gemini API returned a {type(envelope).__name__} envelope, expected an object"
            )
            raise TransportFailure(
                TypeError(f"unexpected envelope type: {type(envelope).__name__}")
            )

        return self._response_text(envelope)

    @staticmethod
    def _response_text(envelope: Dict[str, Any]) -> str:
        """Join the text parts of the first candidate, skipping thought parts."""
        candidates = envelope.get("candidates") or []
        if not isinstance(candidates, list) or not candidates:
            feedback = envelope.get("promptFeedback")
            block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
            raise EmptyResponse(
                f"prompt blocked: {block_reason}" if block_reason else "no candidates"
            )

        candidate = candidates[0]
        if not isinstance(candidate, dict):
            raise EmptyResponse("malformed candidate")
        content = candidate.get("content")
        parts = (content.get("parts") if isinstance(content, dict) else None) or []
        if not isinstance(parts, list):
            parts = []
        text = "".join(
            part.get("text", "")
            for part in parts
            if isinstance(part, dict) and not part.get("thought")
        )
        if not text.strip():
            raise EmptyResponse(f"finish reason: {candidate.get('finishReason')}")
        return text

    def _record_attempt(
        self,
        attempt: int,
        started_at: float,
        outcome: AttemptOutcome,
        error: Optional[Exception] = None,
    ) -> None:
        self.last_attempts.append(
            GenerationAttempt(
                attempt_index=attempt,
                started_at=started_at,
                outcome=outcome,
                detail=str(error) if error else None,
            )
        )

    async def generate(self, prompt_text: str) -> MedicalReport:
        """
        Generate a MedicalReport for ``prompt_text``.

        Transport failures and empty replies are retried up to
        ``retry_policy.max_attempts`` times with exponential backoff. A reply that
        arrives but does not decode is raised immediately, because an identical
        deterministic request would produce the same reply.

        Raises:
            TransportFailure: every attempt failed and the last one failed in transport.
            EmptyResponse: every attempt failed and the last one returned no text.
            PayloadError: the reply could not be decoded into a report.
        """
        self._is_generating = True
        self.last_attempts = []
        self.performance_stats["total_requests"] += 1
        request = self.build_request(prompt_text)
        max_attempts = self.retry_policy.max_attempts
        context = RequestContext()
        response_length = 0
        success = False

        try:
            with context:
                last_error: Optional[GenerationError] = None
                for attempt in range(max_attempts):
                    started_at = time.time()
                    token = attempt_var.set(attempt)
                    try:
                        raw_text = await self._call_gemini(request)
                        response_length = len(raw_text)
                        report = decode_report(raw_text)
                    except PayloadError as e:
                        self._record_attempt(
                            attempt, started_at, AttemptOutcome.DECODE_ERROR, e
                        )
                        logger.error(
                            f"API call attempt {attempt + 1} of {max_attempts} "
                            f"returned an undecodable reply: {e}"
                        )
                        raise
                    except (TransportFailure, EmptyResponse) as e:
                        outcome = (
                            AttemptOutcome.TRANSPORT_FAILURE
                            if isinstance(e, TransportFailure)
                            else AttemptOutcome.EMPTY_RESPONSE
                        )
                        self._record_attempt(attempt, started_at, outcome, e)
                        last_error = e
                        logger.warning(
                            f"API call attempt {attempt + 1} of {max_attempts} failed: {e}"
                        )
                        if self.retry_policy.should_retry(attempt):
                            backoff = self.retry_policy.delay_for_attempt(attempt)
                            logger.info(f"Retrying in {backoff:g} seconds...")
                            await self._sleep(backoff)
                        continue
                    finally:
                        attempt_var.reset(token)

                    self._record_attempt(attempt, started_at, AttemptOutcome.SUCCESS)
                    success = True
                    return report

                logger.error(f"Report generation failed after {max_attempts} attempts")
                raise last_error
        finally:
            self._is_generating = False
            self.performance_stats["total_attempts"] += len(self.last_attempts)
            if success:
                self.performance_stats["successful_requests"] += 1
            else:
                self.performance_stats["failed_requests"] += 1
            self._log_generation(
                context.request_id, len(prompt_text), response_length, success
            )

    def _log_generation(
        self,
        request_id: str,
        prompt_length: int,
        response_length: int,
        success: bool,
    ) -> None:
        """Log the generate call for compliance."""
        get_compliance_logger().log_generation(
            request_id=request_id,
            model=self.model,
            prompt_length=prompt_length,
            response_length=response_length,
            attempts=len(self.last_attempts),
            success=success,
            outcomes=[a.outcome.value for a in self.last_attempts],
        )

    async def health_check(self) -> Dict[str, Any]:
        """Report client state without spending a remote call."""
        return {
            "service": "generation",
            "status": "healthy",
            "model": self.model,
            "is_generating": self.is_generating,
            "max_attempts": self.retry_policy.max_attempts,
            "timestamp": time.time(),
        }

    def get_performance_stats(self) -> Dict[str, Any]:
        """Get performance statistics."""
        return {**self.performance_stats, "model": self.model}


# Global generation client instance
generation_client = GenerationClient()
