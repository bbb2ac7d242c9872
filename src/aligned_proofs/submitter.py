"""Single round-trip proof submission."""
from __future__ import annotations

import asyncio
import logging

import httpx

from .clients.base import ProofClient
from .exceptions import AlignedError, SubmissionRejectedError, SubmissionTimeoutError
from .models import Identifier, ProofPayload, SubmissionRequest, SubmissionResult

logger = logging.getLogger(__name__)


class ProofSubmitter:
    """Send a proof to the network and hand back the job handle.

    There is no local retry: a failed submission is reported to the caller,
    who can decide whether to submit again.
    """

    async def submit(
        self,
        proof: ProofPayload,
        identifier: Identifier,
        *,
        client: ProofClient,
    ) -> SubmissionResult:
        request = SubmissionRequest(proof=proof, identifier=identifier)
        logger.info("Submitting proof to Aligned billed to %s", request.identifier)
        try:
            result = await client.submit_proof(request.proof, request.identifier)
        except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
            raise SubmissionTimeoutError(f"Proof submission timed out: {exc}") from exc
        except AlignedError as exc:
            raise SubmissionRejectedError(
                exc.message,
                details={"cause": exc.to_dict()},
            ) from exc
        except Exception as exc:
            raise SubmissionRejectedError(str(exc) or type(exc).__name__) from exc

        if not result.job_id:
            raise SubmissionRejectedError("Proof network returned no job ID")

        logger.info("Proof submitted successfully. Job ID: %s", result.job_id)
        return result
