"""Proof network client adapters."""

from .base import ProofClient
from .http import AlignedClient
from .simulated import SimulatedProofClient

__all__ = [
    "ProofClient",
    "AlignedClient",
    "SimulatedProofClient",
]
