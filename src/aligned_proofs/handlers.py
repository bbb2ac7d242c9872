"""Tool call handlers for proof submission tools.

Processes Claude ``tool_use`` content blocks and returns ``tool_result``
blocks that can be sent back in the conversation. Workflow failures are
already reported as results, so the agent always receives useful
feedback rather than an exception.
"""

from __future__ import annotations

import json
from typing import Any, Awaitable, Callable

from .tools import GET_PROOF_STATUS_TOOL, SUBMIT_PROOF_TOOL, resolve_tool_name
from .workflow import ProofWorkflow, WorkflowResult


class ProofToolHandler:
    """Processes tool_use calls against a ProofWorkflow.

    Args:
        workflow: A configured :class:`ProofWorkflow`.
    """

    def __init__(self, workflow: ProofWorkflow) -> None:
        self.workflow = workflow
        self._handlers: dict[str, Callable[[dict[str, Any]], Awaitable[WorkflowResult]]] = {
            SUBMIT_PROOF_TOOL["name"]: self._handle_submit_proof,
            GET_PROOF_STATUS_TOOL["name"]: self._handle_get_proof_status,
        }

    async def handle(self, tool_name: str, tool_input: dict[str, Any]) -> dict[str, Any]:
        """Process a tool call and return the result as a dict.

        Args:
            tool_name: Tool name, action name (``"SUBMIT_PROOF"``) or simile.
            tool_input: The ``input`` dict from the Claude tool_use block.

        Returns:
            A dict with ``"status"`` (``"success"`` or ``"error"``), the
            human-readable ``"text"``, and a ``"result"`` or ``"error"`` key.

        Raises:
            ValueError: If *tool_name* is not a recognised tool.
        """
        handler = self._handlers[resolve_tool_name(tool_name)]
        outcome = await handler(tool_input or {})
        if outcome.success:
            return {"status": "success", "text": outcome.message, "result": outcome.data}
        return {"status": "error", "text": outcome.message, "error": outcome.error}

    async def process_tool_use_block(self, tool_use_block: Any) -> dict[str, Any]:
        """Process a Claude API tool_use content block directly.

        Accepts a dict shaped like::

            {
                "type": "tool_use",
                "id": "toolu_...",
                "name": "aligned_submit_proof",
                "input": {"proof": "0xdeadbeef"}
            }

        or an Anthropic SDK ``ToolUseBlock`` object, and returns::

            {
                "type": "tool_result",
                "tool_use_id": "toolu_...",
                "content": "..."
            }

        ``"is_error"`` is set when the call failed or the tool is unknown.
        """
        if isinstance(tool_use_block, dict):
            tool_use_id = tool_use_block.get("id", "")
            tool_name = tool_use_block.get("name", "")
            tool_input = tool_use_block.get("input", {})
        else:
            tool_use_id = tool_use_block.id
            tool_name = tool_use_block.name
            tool_input = tool_use_block.input

        try:
            result = await self.handle(tool_name, tool_input)
        except ValueError as exc:
            result = {"status": "error", "error": {"error": "UNKNOWN_TOOL", "message": str(exc)}}

        if result["status"] == "success":
            return {
                "type": "tool_result",
                "tool_use_id": tool_use_id,
                "content": json.dumps({"text": result["text"], **result["result"]}, default=str),
            }
        return {
            "type": "tool_result",
            "tool_use_id": tool_use_id,
            "content": json.dumps({"error": result["error"]}, default=str),
            "is_error": True,
        }

    async def _handle_submit_proof(self, input_data: dict[str, Any]) -> WorkflowResult:
        return await self.workflow.submit_proof(
            input_data.get("proof"),
            input_data.get("identifier"),
        )

    async def _handle_get_proof_status(self, input_data: dict[str, Any]) -> WorkflowResult:
        return await self.workflow.get_proof_status(input_data.get("job_id"))
