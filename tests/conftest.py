"""
Pytest configuration and fixtures for aligned-proofs tests.
"""
from __future__ import annotations

import os
from decimal import Decimal
from typing import Any, Optional, Sequence

import pytest

from aligned_proofs.config import get_settings
from aligned_proofs.models import (
    Identifier,
    JobState,
    JobStatus,
    ProofPayload,
    SubmissionResult,
    TopUpResult,
)

CREATED_IDENTIFIER = Identifier(bytes.fromhex("cc" * 32))
DISCOVERED_IDENTIFIER = Identifier(bytes.fromhex("dd" * 32))


class FakeProofClient:
    """Recording ProofClient with scripted responses.

    ``balances`` is consumed one value per get_balance call; the last value
    repeats once the script runs out.
    """

    def __init__(
        self,
        *,
        identifiers: Sequence[Identifier] = (),
        created: Identifier = CREATED_IDENTIFIER,
        balances: Sequence[Any] = (Decimal("1"),),
        job_id: str = "job_123",
        status: Optional[JobStatus] = None,
        balance_error: Optional[Exception] = None,
        top_up_error: Optional[Exception] = None,
        submit_error: Optional[Exception] = None,
        status_error: Optional[Exception] = None,
    ) -> None:
        self.identifiers = list(identifiers)
        self.created = created
        self._balances = list(balances)
        self.job_id = job_id
        self.status = status or JobStatus(status=JobState.PENDING, request_id="req_0")
        self.balance_error = balance_error
        self.top_up_error = top_up_error
        self.submit_error = submit_error
        self.status_error = status_error
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    def args_for(self, method: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == method]

    async def list_identifiers(self) -> list[Identifier]:
        self.calls.append(("list_identifiers", ()))
        return list(self.identifiers)

    async def create_identifier(self) -> Identifier:
        self.calls.append(("create_identifier", ()))
        return self.created

    async def get_balance(self, identifier: Identifier) -> Decimal:
        self.calls.append(("get_balance", (identifier,)))
        if self.balance_error is not None:
            raise self.balance_error
        if len(self._balances) > 1:
            return self._balances.pop(0)
        return self._balances[0]

    async def top_up_credits(self, identifier: Identifier, amount: Decimal) -> TopUpResult:
        self.calls.append(("top_up_credits", (identifier, amount)))
        if self.top_up_error is not None:
            raise self.top_up_error
        return TopUpResult(identifier=identifier, amount=amount, tx_hash="0xfeed")

    async def submit_proof(self, proof: ProofPayload, identifier: Identifier) -> SubmissionResult:
        self.calls.append(("submit_proof", (proof, identifier)))
        if self.submit_error is not None:
            raise self.submit_error
        return SubmissionResult(job_id=self.job_id)

    async def get_proof_status(self, job_id: str) -> JobStatus:
        self.calls.append(("get_proof_status", (job_id,)))
        if self.status_error is not None:
            raise self.status_error
        return self.status


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep ALIGNED_* variables from the host out of the settings under test."""
    for key in list(os.environ):
        if key.startswith("ALIGNED_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_client() -> FakeProofClient:
    return FakeProofClient()


@pytest.fixture
def no_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def identifier() -> Identifier:
    return Identifier.from_hex("0x12")


@pytest.fixture
def make_client():
    """Factory for FakeProofClient with scripted responses."""
    return FakeProofClient


@pytest.fixture
def created_identifier() -> Identifier:
    return CREATED_IDENTIFIER


@pytest.fixture
def discovered_identifier() -> Identifier:
    return DISCOVERED_IDENTIFIER
