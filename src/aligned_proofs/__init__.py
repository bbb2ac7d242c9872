"""Balance-aware proof submission for the Aligned verification network.

Resolves a 32-byte billing identifier, tops up its prepaid balance when it
is below the submission threshold, submits the proof, and lets callers
poll the verification job afterwards.

Quick start::

    from aligned_proofs import AlignedClient, ProofWorkflow, get_settings

    settings = get_settings()
    async with AlignedClient.from_settings(settings) as client:
        workflow = ProofWorkflow.from_settings(settings, client)
        result = await workflow.submit_proof("0xdeadbeef")
        print(result.message)
"""

from .balance import BalanceCheck, BalanceGuard
from .clients import AlignedClient, ProofClient, SimulatedProofClient
from .config import AlignedSettings, get_settings, validate_settings
from .exceptions import (
    AlignedError,
    APIError,
    AuthenticationError,
    ConfigurationError,
    InsufficientBalanceAfterTopUpError,
    MalformedIdentifierError,
    MissingJobIdError,
    MissingProofError,
    RateLimitError,
    StatusLookupFailedError,
    SubmissionRejectedError,
    SubmissionTimeoutError,
)
from .handlers import ProofToolHandler
from .identifiers import IdentifierResolver
from .models import (
    Identifier,
    JobState,
    JobStatus,
    SubmissionRequest,
    SubmissionResult,
    TopUpResult,
)
from .status import StatusPoller
from .submitter import ProofSubmitter
from .tools import ALL_TOOLS, GET_PROOF_STATUS_TOOL, READ_ONLY_TOOLS, SUBMIT_PROOF_TOOL, TOOL_NAMES
from .workflow import ProofWorkflow, SubmissionState, WorkflowResult

__version__ = "0.1.0"

__all__ = [
    # Workflow
    "ProofWorkflow",
    "SubmissionState",
    "WorkflowResult",
    # Components
    "IdentifierResolver",
    "BalanceGuard",
    "BalanceCheck",
    "ProofSubmitter",
    "StatusPoller",
    # Clients
    "ProofClient",
    "AlignedClient",
    "SimulatedProofClient",
    # Models
    "Identifier",
    "JobState",
    "JobStatus",
    "SubmissionRequest",
    "SubmissionResult",
    "TopUpResult",
    # Configuration
    "AlignedSettings",
    "get_settings",
    "validate_settings",
    # Agent tools
    "ProofToolHandler",
    "ALL_TOOLS",
    "READ_ONLY_TOOLS",
    "TOOL_NAMES",
    "SUBMIT_PROOF_TOOL",
    "GET_PROOF_STATUS_TOOL",
    # Errors
    "AlignedError",
    "APIError",
    "AuthenticationError",
    "ConfigurationError",
    "InsufficientBalanceAfterTopUpError",
    "MalformedIdentifierError",
    "MissingJobIdError",
    "MissingProofError",
    "RateLimitError",
    "StatusLookupFailedError",
    "SubmissionRejectedError",
    "SubmissionTimeoutError",
]
