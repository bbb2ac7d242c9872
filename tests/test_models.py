"""Tests for data models and the error payload shape."""
from __future__ import annotations

from decimal import Decimal

from aligned_proofs.exceptions import (
    APIError,
    InsufficientBalanceAfterTopUpError,
    MissingProofError,
)
from aligned_proofs.models import Identifier, JobState, JobStatus, TopUpResult, proof_to_wire


class TestJobStatus:
    def test_status_is_case_insensitive(self):
        assert JobStatus(status="processing").status is JobState.PROCESSING

    def test_unrecognized_status_is_unknown(self):
        assert JobStatus(status="QUEUED").status is JobState.UNKNOWN
        assert JobStatus(status=None).status is JobState.UNKNOWN

    def test_missing_request_id_is_empty(self):
        assert JobStatus.model_validate({"status": "PENDING", "request_id": None}).request_id == ""

    def test_extra_fields_ignored(self):
        status = JobStatus.model_validate({"status": "PENDING", "queue_position": 3})
        assert status.to_dict() == {
            "status": "PENDING",
            "request_id": "",
            "additional_info": None,
            "error": None,
        }


class TestWireHelpers:
    def test_bytes_proof_becomes_hex(self):
        assert proof_to_wire(b"\xca\xfe") == "0xcafe"

    def test_string_proof_passes_through(self):
        assert proof_to_wire("AAEC") == "AAEC"

    def test_top_up_to_dict(self):
        top_up = TopUpResult(identifier=Identifier.from_hex("0x1"), amount=Decimal("0.004"))
        assert top_up.to_dict()["amount"] == "0.004"
        assert top_up.to_dict()["status"] == "submitted"


class TestErrorPayloads:
    def test_error_without_details(self):
        assert MissingProofError().to_dict() == {
            "error": "MISSING_PROOF",
            "message": "No proof provided for submission",
        }

    def test_insufficient_balance_details(self):
        error = InsufficientBalanceAfterTopUpError("short", identifier="0x01", balance="0", threshold="0.004")
        assert error.to_dict()["details"] == {"identifier": "0x01", "balance": "0", "threshold": "0.004"}

    def test_api_error_from_string_body(self):
        error = APIError.from_response(503, {"detail": "maintenance"})
        assert error.message == "maintenance"
        assert error.error_code == "API_ERROR"
        assert error.to_dict()["status_code"] == 503

    def test_api_error_from_validation_list(self):
        error = APIError.from_response(422, {"detail": [{"loc": ["proof"], "msg": "required"}]})
        assert error.error_code == "VALIDATION_ERROR"
        assert error.details["errors"][0]["msg"] == "required"

    def test_api_error_from_null_error(self):
        error = APIError.from_response(503, {"error": None})
        assert error.status_code == 503
        assert error.error_code == "API_ERROR"
        assert error.message == "{'error': None}"

    def test_api_error_from_numeric_detail(self):
        error = APIError.from_response(500, {"detail": 42})
        assert error.to_dict()["status_code"] == 500

    def test_api_error_from_non_dict_body(self):
        error = APIError.from_response(500, ["boom"])
        assert error.message == "['boom']"
