"""Proof submission workflow.

Sequences identifier resolution, the balance guard and submission into
the two operations exposed to callers, ``submit_proof`` and
``get_proof_status``. Every failure is caught here and turned into a
reported WorkflowResult; nothing escapes as an exception.

Quick start::

    from aligned_proofs import AlignedClient, ProofWorkflow, get_settings

    settings = get_settings()
    async with AlignedClient.from_settings(settings) as client:
        workflow = ProofWorkflow.from_settings(settings, client)
        result = await workflow.submit_proof("0xdeadbeef")
        if result.success:
            status = await workflow.get_proof_status(result.data["job_id"])
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional

from .balance import BalanceGuard, SleepFunc
from .clients.base import ProofClient
from .config import AlignedSettings, DEFAULT_SETTLEMENT_DELAY_SECONDS, DEFAULT_SUBMISSION_THRESHOLD
from .exceptions import AlignedError, MissingJobIdError, MissingProofError
from .identifiers import IdentifierResolver
from .logging_config import LogContext, set_identifier_context, set_job_context
from .models import ProofPayload
from .status import StatusPoller
from .submitter import ProofSubmitter

logger = logging.getLogger(__name__)

HandlerCallback = Callable[[dict[str, Any]], Any]


class SubmissionState(str, Enum):
    IDLE = "idle"
    RESOLVING_IDENTIFIER = "resolving_identifier"
    CHECKING_BALANCE = "checking_balance"
    TOPPING_UP = "topping_up"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class WorkflowResult:
    """Reported outcome of a workflow operation.

    ``message`` is for humans; ``data`` (on success) and ``error`` (on
    failure) carry the structured payload.
    """

    success: bool
    message: str
    state: SubmissionState
    data: dict[str, Any] = field(default_factory=dict)
    error: Optional[dict[str, Any]] = None
    transitions: list[SubmissionState] = field(default_factory=list)

    @property
    def content(self) -> dict[str, Any]:
        return self.data if self.success else (self.error or {})

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "success": self.success,
            "message": self.message,
            "state": self.state.value,
        }
        if self.success:
            result["data"] = self.data
        else:
            result["error"] = self.error
        return result


class _Run:
    """Tracks the state of one submit_proof invocation."""

    def __init__(self) -> None:
        self.state = SubmissionState.IDLE
        self.transitions: list[SubmissionState] = []

    def advance(self, state: SubmissionState) -> None:
        logger.debug("Submission state %s -> %s", self.state.value, state.value)
        self.state = state
        self.transitions.append(state)


class ProofWorkflow:
    """Coordinates proof submission and status lookup against one client.

    Args:
        client: Proof network client
        configured_identifier: Identifier hex from deployment configuration
        threshold: Minimum balance required before submitting
        settlement_delay: Seconds to wait after a top-up
        require_settled: Fail when the balance is still short after a top-up
        sleep: Awaitable sleep used for the settlement wait
    """

    def __init__(
        self,
        client: ProofClient,
        *,
        configured_identifier: Optional[str] = None,
        threshold: Decimal = DEFAULT_SUBMISSION_THRESHOLD,
        settlement_delay: float = DEFAULT_SETTLEMENT_DELAY_SECONDS,
        require_settled: bool = False,
        sleep: SleepFunc = asyncio.sleep,
        resolver: Optional[IdentifierResolver] = None,
        submitter: Optional[ProofSubmitter] = None,
        poller: Optional[StatusPoller] = None,
    ) -> None:
        self.client = client
        self.configured_identifier = configured_identifier
        self.resolver = resolver or IdentifierResolver()
        self.guard = BalanceGuard(
            threshold,
            settlement_delay,
            require_settled=require_settled,
            sleep=sleep,
        )
        self.submitter = submitter or ProofSubmitter()
        self.poller = poller or StatusPoller()

    @classmethod
    def from_settings(
        cls,
        settings: AlignedSettings,
        client: ProofClient,
        *,
        sleep: SleepFunc = asyncio.sleep,
    ) -> "ProofWorkflow":
        return cls(
            client,
            configured_identifier=settings.identifier,
            threshold=settings.submission_threshold,
            settlement_delay=settings.settlement_delay_seconds,
            require_settled=settings.require_settled_balance,
            sleep=sleep,
        )

    # ------------------------------------------------------------------
    # SubmitProof
    # ------------------------------------------------------------------

    async def submit_proof(
        self,
        proof: Optional[ProofPayload],
        identifier: Optional[str] = None,
        *,
        callback: Optional[HandlerCallback] = None,
    ) -> WorkflowResult:
        """Resolve an identifier, make sure it is funded, and submit the proof."""
        with LogContext():
            logger.info("Starting proof submission")
            run = _Run()

            if not proof:
                result = self._failure(run, MissingProofError(), "Error submitting proof")
                return await self._report(result, callback)

            try:
                run.advance(SubmissionState.RESOLVING_IDENTIFIER)
                resolved = await self.resolver.resolve(
                    identifier,
                    self.configured_identifier,
                    client=self.client,
                )
                set_identifier_context(resolved.hex())
                logger.info("Using identifier (hex): %s", resolved.hex())

                run.advance(SubmissionState.CHECKING_BALANCE)
                check = await self.guard.check(resolved, client=self.client)
                if not check.settled:
                    run.advance(SubmissionState.TOPPING_UP)
                    check = await self.guard.replenish(check, client=self.client)

                run.advance(SubmissionState.SUBMITTING)
                submission = await self.submitter.submit(proof, resolved, client=self.client)
            except Exception as exc:
                result = self._failure(run, exc, "Error submitting proof")
                return await self._report(result, callback)

            set_job_context(submission.job_id)
            run.advance(SubmissionState.SUCCEEDED)
            data: dict[str, Any] = {
                "job_id": submission.job_id,
                "identifier": resolved.hex(),
                "balance": str(check.settled_balance if check.topped_up else check.initial_balance),
                "topped_up": check.topped_up,
            }
            if check.top_up is not None:
                data["top_up"] = check.top_up.to_dict()
            result = WorkflowResult(
                success=True,
                message=(
                    f"Proof submitted successfully! Job ID: {submission.job_id}. "
                    "You can check the status of your submission using this job ID."
                ),
                state=run.state,
                data=data,
                transitions=run.transitions,
            )
            return await self._report(result, callback)

    # ------------------------------------------------------------------
    # GetProofStatus
    # ------------------------------------------------------------------

    async def get_proof_status(
        self,
        job_id: Optional[str],
        *,
        callback: Optional[HandlerCallback] = None,
    ) -> WorkflowResult:
        """Fetch the current status of a submitted proof's job."""
        with LogContext(job_id=job_id or None):
            logger.info("Starting proof status lookup")
            run = _Run()

            if not job_id:
                result = self._failure(run, MissingJobIdError(), "Error checking proof submission status")
                return await self._report(result, callback)

            try:
                status = await self.poller.get_status(job_id, client=self.client)
            except Exception as exc:
                result = self._failure(run, exc, "Error checking proof submission status")
                return await self._report(result, callback)

            message = f"Current status for proof submission job {job_id}: {status.status.value}"
            if status.error:
                message += f". Error: {status.error}"
            message += f"\nYou can also track it with Request ID: {status.request_id}"

            data = status.to_dict()
            data["job_id"] = job_id
            run.advance(SubmissionState.SUCCEEDED)
            result = WorkflowResult(
                success=True,
                message=message,
                state=run.state,
                data=data,
                transitions=run.transitions,
            )
            return await self._report(result, callback)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _failure(run: _Run, exc: Exception, prefix: str) -> WorkflowResult:
        failed_in = run.state
        run.advance(SubmissionState.FAILED)
        if isinstance(exc, AlignedError):
            error = exc.to_dict()
            detail = exc.message
        else:
            error = {"error": type(exc).__name__, "message": str(exc)}
            detail = str(exc)
        error["failed_in"] = failed_in.value
        logger.error("%s: %s", prefix, detail, exc_info=not isinstance(exc, AlignedError))
        return WorkflowResult(
            success=False,
            message=f"{prefix}: {detail}",
            state=run.state,
            error=error,
            transitions=run.transitions,
        )

    @staticmethod
    async def _report(result: WorkflowResult, callback: Optional[HandlerCallback]) -> WorkflowResult:
        if callback is not None:
            try:
                outcome = callback({"text": result.message, "content": result.content})
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception:
                logger.exception("Result callback failed")
        return result
