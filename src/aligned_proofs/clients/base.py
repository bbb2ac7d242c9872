"""Capability contract for remote proof network clients."""
from __future__ import annotations

from decimal import Decimal
from typing import Protocol, Sequence, runtime_checkable

from ..models import Identifier, JobStatus, ProofPayload, SubmissionResult, TopUpResult


@runtime_checkable
class ProofClient(Protocol):
    """Operations the workflow needs from a proof network backend.

    Implementations own their transport (HTTP, RPC, in-process) and are
    treated as stateless by the workflow.
    """

    async def list_identifiers(self) -> Sequence[Identifier]:
        ...

    async def create_identifier(self) -> Identifier:
        ...

    async def get_balance(self, identifier: Identifier) -> Decimal:
        ...

    async def top_up_credits(self, identifier: Identifier, amount: Decimal) -> TopUpResult:
        ...

    async def submit_proof(self, proof: ProofPayload, identifier: Identifier) -> SubmissionResult:
        ...

    async def get_proof_status(self, job_id: str) -> JobStatus:
        ...
