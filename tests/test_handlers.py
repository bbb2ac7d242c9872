"""Tests for tool definitions and the tool_use handler."""
from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from aligned_proofs.exceptions import APIError
from aligned_proofs.handlers import ProofToolHandler
from aligned_proofs.models import JobStatus
from aligned_proofs.tools import (
    ALL_TOOLS,
    GET_PROOF_STATUS_TOOL,
    READ_ONLY_TOOLS,
    SUBMIT_PROOF_TOOL,
    TOOL_NAMES,
    resolve_tool_name,
)
from aligned_proofs.workflow import ProofWorkflow


@pytest.fixture
def handler_for(no_sleep):
    def build(client):
        return ProofToolHandler(ProofWorkflow(client, sleep=no_sleep))

    return build


class TestToolDefinitions:
    def test_all_tools_have_schema(self):
        for tool in ALL_TOOLS:
            assert tool["input_schema"]["type"] == "object"
            assert tool["description"]

    def test_required_fields(self):
        assert SUBMIT_PROOF_TOOL["input_schema"]["required"] == ["proof"]
        assert "identifier" in SUBMIT_PROOF_TOOL["input_schema"]["properties"]
        assert GET_PROOF_STATUS_TOOL["input_schema"]["required"] == ["job_id"]

    def test_read_only_tools(self):
        assert READ_ONLY_TOOLS == [GET_PROOF_STATUS_TOOL]
        assert TOOL_NAMES == {"aligned_submit_proof", "aligned_get_proof_status"}

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("aligned_submit_proof", "aligned_submit_proof"),
            ("SUBMIT_PROOF", "aligned_submit_proof"),
            ("send_zkproof", "aligned_submit_proof"),
            ("CHECK_PROOF_SUBMISSION_STATUS", "aligned_get_proof_status"),
            ("get_proof_status", "aligned_get_proof_status"),
        ],
    )
    def test_resolve_tool_name(self, name, expected):
        assert resolve_tool_name(name) == expected

    def test_resolve_unknown_tool(self):
        with pytest.raises(ValueError, match="Unknown tool"):
            resolve_tool_name("FETCH_PRICE")


class TestHandle:
    @pytest.mark.asyncio
    async def test_submit_success(self, make_client, handler_for):
        client = make_client(job_id="job_t")

        result = await handler_for(client).handle("aligned_submit_proof", {"proof": "0xdead", "identifier": "0x12"})

        assert result["status"] == "success"
        assert result["result"]["job_id"] == "job_t"
        assert "Job ID: job_t" in result["text"]

    @pytest.mark.asyncio
    async def test_submit_without_proof(self, fake_client, handler_for):
        result = await handler_for(fake_client).handle("SUBMIT_PROOF", {})

        assert result["status"] == "error"
        assert result["error"]["error"] == "MISSING_PROOF"
        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_status_by_simile(self, make_client, handler_for):
        client = make_client(status=JobStatus(status="PROCESSING", request_id="req_s"))

        result = await handler_for(client).handle("CHECK_PROOF_STATUS", {"job_id": "job_s"})

        assert result["status"] == "success"
        assert result["result"]["status"] == "PROCESSING"

    @pytest.mark.asyncio
    async def test_unknown_tool_raises(self, fake_client, handler_for):
        with pytest.raises(ValueError):
            await handler_for(fake_client).handle("nope", {})


class TestProcessToolUseBlock:
    @pytest.mark.asyncio
    async def test_dict_block(self, make_client, handler_for):
        client = make_client(job_id="job_d")
        block = {
            "type": "tool_use",
            "id": "toolu_1",
            "name": "aligned_submit_proof",
            "input": {"proof": "0xdead", "identifier": "0x12"},
        }

        result = await handler_for(client).process_tool_use_block(block)

        assert result["type"] == "tool_result"
        assert result["tool_use_id"] == "toolu_1"
        assert "is_error" not in result
        content = json.loads(result["content"])
        assert content["job_id"] == "job_d"
        assert content["text"].startswith("Proof submitted successfully!")

    @pytest.mark.asyncio
    async def test_object_block(self, make_client, handler_for):
        client = make_client(status=JobStatus(status="COMPLETED", request_id="req1"))
        block = SimpleNamespace(id="toolu_2", name="aligned_get_proof_status", input={"job_id": "abc"})

        result = await handler_for(client).process_tool_use_block(block)

        content = json.loads(result["content"])
        assert result["tool_use_id"] == "toolu_2"
        assert content["status"] == "COMPLETED"
        assert content["request_id"] == "req1"

    @pytest.mark.asyncio
    async def test_failed_call_is_error(self, make_client, handler_for):
        client = make_client(status_error=APIError("Job not found: abc", status_code=404))
        block = {"id": "toolu_3", "name": "aligned_get_proof_status", "input": {"job_id": "abc"}}

        result = await handler_for(client).process_tool_use_block(block)

        assert result["is_error"] is True
        content = json.loads(result["content"])
        assert content["error"]["error"] == "STATUS_LOOKUP_FAILED"

    @pytest.mark.asyncio
    async def test_unknown_tool_is_error(self, fake_client, handler_for):
        block = {"id": "toolu_4", "name": "fetch_price", "input": {}}

        result = await handler_for(fake_client).process_tool_use_block(block)

        assert result["is_error"] is True
        assert json.loads(result["content"])["error"]["error"] == "UNKNOWN_TOOL"
