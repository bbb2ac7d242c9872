"""Anthropic tool_use definitions for proof submission.

Each tool is a dict matching the Anthropic Messages API ``tools``
parameter schema. The agent supplies structured arguments; the
:class:`~aligned_proofs.handlers.ProofToolHandler` runs them through
:class:`~aligned_proofs.workflow.ProofWorkflow`.

Example::

    import anthropic
    from aligned_proofs.tools import ALL_TOOLS

    client = anthropic.Anthropic()
    response = client.messages.create(
        model="claude-sonnet-4-5-20250929",
        tools=ALL_TOOLS,
        messages=[{"role": "user", "content": "Submit this proof: 0xdeadbeef"}],
    )
"""

from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------------
# aligned_submit_proof
# ---------------------------------------------------------------------------

SUBMIT_PROOF_TOOL: dict[str, Any] = {
    "name": "aligned_submit_proof",
    "description": (
        "Submit a ZK proof to the Aligned verification network. The billing "
        "identifier is topped up automatically if its prepaid balance is too "
        "low. Returns a job ID that can be used to check the verification status."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "proof": {
                "type": "string",
                "description": "The proof data as a hex or base64 string. Example: '0xdeadbeefcafebabe'.",
            },
            "identifier": {
                "type": "string",
                "description": (
                    "Optional 32-byte billing identifier as hex, with or without "
                    "0x. Shorter values are left-padded with zeros."
                ),
            },
        },
        "required": ["proof"],
    },
}

# ---------------------------------------------------------------------------
# aligned_get_proof_status
# ---------------------------------------------------------------------------

GET_PROOF_STATUS_TOOL: dict[str, Any] = {
    "name": "aligned_get_proof_status",
    "description": (
        "Check the status of a proof submission. Provides the current status "
        "(PENDING, PROCESSING, COMPLETED, FAILED), the request ID, and any "
        "additional proof submission information."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "job_id": {
                "type": "string",
                "description": "Job ID returned when the proof was submitted. Example: 'abc123def456'.",
            },
        },
        "required": ["job_id"],
    },
}

# ---------------------------------------------------------------------------
# Action names and similes, for hosts that route by action name
# ---------------------------------------------------------------------------

TOOL_ACTIONS: dict[str, dict[str, Any]] = {
    SUBMIT_PROOF_TOOL["name"]: {
        "action": "SUBMIT_PROOF",
        "similes": [
            "SUBMIT_PROOF_TO_ALIGNED",
            "SEND_PROOF",
            "PROOF_SUBMISSION",
            "SUBMIT_ZKPROOF",
            "SEND_ZKPROOF",
        ],
    },
    GET_PROOF_STATUS_TOOL["name"]: {
        "action": "GET_PROOF_STATUS",
        "similes": [
            "CHECK_PROOF_STATUS",
            "GET_PROOF_JOB_STATUS",
            "CHECK_PROOF_JOB_STATUS",
            "GET_PROOF_SUBMISSION_STATUS",
            "CHECK_PROOF_SUBMISSION_STATUS",
        ],
    },
}

# ---------------------------------------------------------------------------
# Convenience aggregates
# ---------------------------------------------------------------------------

ALL_TOOLS: list[dict[str, Any]] = [
    SUBMIT_PROOF_TOOL,
    GET_PROOF_STATUS_TOOL,
]

READ_ONLY_TOOLS: list[dict[str, Any]] = [
    GET_PROOF_STATUS_TOOL,
]

TOOL_NAMES: set[str] = {tool["name"] for tool in ALL_TOOLS}


def resolve_tool_name(name: str) -> str:
    """Map a tool name, action name or simile to the canonical tool name.

    Raises:
        ValueError: If *name* matches no tool.
    """
    if name in TOOL_NAMES:
        return name
    key = name.strip().upper()
    for tool_name, meta in TOOL_ACTIONS.items():
        if key == meta["action"] or key in meta["similes"]:
            return tool_name
    raise ValueError(
        f"Unknown tool '{name}'. Valid tools: {', '.join(sorted(TOOL_NAMES))}"
    )
