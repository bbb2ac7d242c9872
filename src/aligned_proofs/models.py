"""Data model for proof submission and job status."""
from __future__ import annotations

import json
import string
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from .exceptions import MalformedIdentifierError

IDENTIFIER_BYTES = 32
IDENTIFIER_HEX_CHARS = IDENTIFIER_BYTES * 2

_HEX_DIGITS = frozenset(string.hexdigits)

ProofPayload = Union[str, bytes]


@dataclass(frozen=True)
class Identifier:
    """32-byte billing identifier the proof network tracks prepaid balance under."""

    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != IDENTIFIER_BYTES:
            raise MalformedIdentifierError(
                f"Identifier must be {IDENTIFIER_BYTES} bytes, got {len(self.value)}",
                value=self.value.hex(),
            )

    @classmethod
    def from_hex(cls, raw: str) -> "Identifier":
        """Decode a hex string, with or without ``0x``, left-padding to 32 bytes.

        A bare ``0x`` decodes to the all-zero identifier.

        Raises:
            MalformedIdentifierError: If the hex body is longer than 64
                characters or contains non-hex characters.
        """
        text = raw.strip()
        body = text[2:] if text[:2] in ("0x", "0X") else text
        if len(body) > IDENTIFIER_HEX_CHARS:
            raise MalformedIdentifierError(
                f"Identifier exceeds {IDENTIFIER_BYTES} bytes ({len(body)} hex characters)",
                value=raw,
            )
        if not _HEX_DIGITS.issuperset(body):
            raise MalformedIdentifierError("Identifier contains non-hex characters", value=raw)
        return cls(bytes.fromhex(body.rjust(IDENTIFIER_HEX_CHARS, "0")))

    def hex(self) -> str:
        return "0x" + self.value.hex()

    def __str__(self) -> str:
        return self.hex()


class JobState(str, Enum):
    """Lifecycle state of a verification job on the remote network."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def _missing_(cls, value: object) -> "JobState":
        if isinstance(value, str):
            normalized = value.strip().upper()
            for member in cls:
                if member.value == normalized:
                    return member
        return cls.UNKNOWN


class AlignedModel(BaseModel):
    """Base model with common configuration."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary."""
        return self.model_dump(mode="json")


class SubmissionResult(AlignedModel):
    """Handle for a submitted proof; the only key for later status queries."""

    job_id: str


class JobStatus(AlignedModel):
    """Snapshot of a job's state, fetched fresh on every query."""

    status: JobState = JobState.UNKNOWN
    request_id: str = ""
    additional_info: Optional[str] = None
    error: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, v: Any) -> JobState:
        if v is None:
            return JobState.UNKNOWN
        return JobState(v)

    @field_validator("request_id", mode="before")
    @classmethod
    def coerce_request_id(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("additional_info", mode="before")
    @classmethod
    def stringify_additional_info(cls, v: Any) -> Optional[str]:
        # Remote side may send structured blob info here.
        if v is None or isinstance(v, str):
            return v
        return json.dumps(v, default=str, sort_keys=True)


@dataclass(frozen=True)
class TopUpResult:
    """Top-up transaction issued against an identifier."""

    identifier: Identifier
    amount: Decimal
    status: str = "submitted"
    tx_hash: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier.hex(),
            "amount": str(self.amount),
            "status": self.status,
            "tx_hash": self.tx_hash,
        }


@dataclass(frozen=True)
class SubmissionRequest:
    """A proof paired with the identifier it is billed to."""

    proof: ProofPayload
    identifier: Identifier


def proof_to_wire(proof: ProofPayload) -> str:
    """Render a proof payload for JSON transport; bytes become 0x-hex."""
    if isinstance(proof, bytes):
        return "0x" + proof.hex()
    return proof


__all__ = [
    "IDENTIFIER_BYTES",
    "IDENTIFIER_HEX_CHARS",
    "ProofPayload",
    "Identifier",
    "JobState",
    "AlignedModel",
    "SubmissionResult",
    "JobStatus",
    "TopUpResult",
    "SubmissionRequest",
    "proof_to_wire",
]
