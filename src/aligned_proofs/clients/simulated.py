"""
In-process proof network for demos and tests.

All state lives in memory; no network calls are made. Top-ups can be made
to land only after a number of balance reads, which reproduces a remote
ledger that lags behind the top-up transaction.
"""
from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import uuid4

from ..exceptions import APIError
from ..models import (
    Identifier,
    JobState,
    JobStatus,
    ProofPayload,
    SubmissionResult,
    TopUpResult,
    proof_to_wire,
)

_PROGRESSION = (JobState.PENDING, JobState.PROCESSING, JobState.COMPLETED)


@dataclass
class _SimulatedJob:
    job_id: str
    request_id: str
    identifier: Identifier
    proof: str
    polls: int = 0


@dataclass
class _PendingTopUp:
    amount: Decimal
    reads_remaining: int


@dataclass
class SimulatedProofClient:
    """ProofClient backed by dictionaries.

    Args:
        submission_fee: Amount debited from the identifier per submission
        settlement_reads: Balance reads before a top-up becomes visible
    """

    submission_fee: Decimal = Decimal("0")
    settlement_reads: int = 0
    identifiers: list[Identifier] = field(default_factory=list)
    balances: dict[Identifier, Decimal] = field(default_factory=dict)
    jobs: dict[str, _SimulatedJob] = field(default_factory=dict)
    _pending: dict[Identifier, list[_PendingTopUp]] = field(default_factory=dict)

    def add_identifier(self, identifier: Identifier, balance: Decimal = Decimal("0")) -> Identifier:
        """Register an existing identifier with a starting balance."""
        if identifier not in self.identifiers:
            self.identifiers.append(identifier)
        self.balances[identifier] = Decimal(str(balance))
        return identifier

    async def list_identifiers(self) -> list[Identifier]:
        return list(self.identifiers)

    async def create_identifier(self) -> Identifier:
        return self.add_identifier(Identifier(secrets.token_bytes(32)))

    async def get_balance(self, identifier: Identifier) -> Decimal:
        self._settle(identifier)
        return self.balances.get(identifier, Decimal("0"))

    async def top_up_credits(self, identifier: Identifier, amount: Decimal) -> TopUpResult:
        amount = Decimal(str(amount))
        if amount <= 0:
            raise APIError("Top-up amount must be positive", status_code=422)
        self.balances.setdefault(identifier, Decimal("0"))
        self._pending.setdefault(identifier, []).append(
            _PendingTopUp(amount=amount, reads_remaining=self.settlement_reads)
        )
        return TopUpResult(
            identifier=identifier,
            amount=amount,
            status="submitted",
            tx_hash="0x" + secrets.token_hex(32),
        )

    async def submit_proof(self, proof: ProofPayload, identifier: Identifier) -> SubmissionResult:
        balance = await self.get_balance(identifier)
        if balance < self.submission_fee:
            raise APIError(
                f"Insufficient balance for submission: {balance} < {self.submission_fee}",
                status_code=402,
                error_code="INSUFFICIENT_BALANCE",
            )
        self.balances[identifier] = balance - self.submission_fee
        job = _SimulatedJob(
            job_id=uuid4().hex[:12],
            request_id=f"req_{uuid4().hex[:12]}",
            identifier=identifier,
            proof=proof_to_wire(proof),
        )
        self.jobs[job.job_id] = job
        return SubmissionResult(job_id=job.job_id)

    async def get_proof_status(self, job_id: str) -> JobStatus:
        job = self.jobs.get(job_id)
        if job is None:
            raise APIError(f"Job not found: {job_id}", status_code=404, error_code="NOT_FOUND")
        state = _PROGRESSION[min(job.polls, len(_PROGRESSION) - 1)]
        job.polls += 1
        return JobStatus(
            status=state,
            request_id=job.request_id,
            additional_info=f"identifier={job.identifier.hex()}",
        )

    def _settle(self, identifier: Identifier) -> None:
        pending = self._pending.get(identifier)
        if not pending:
            return
        still_pending: list[_PendingTopUp] = []
        for top_up in pending:
            if top_up.reads_remaining <= 0:
                self.balances[identifier] = self.balances.get(identifier, Decimal("0")) + top_up.amount
            else:
                top_up.reads_remaining -= 1
                still_pending.append(top_up)
        self._pending[identifier] = still_pending
