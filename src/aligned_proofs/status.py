"""Job status lookup."""
from __future__ import annotations

import logging

from .clients.base import ProofClient
from .exceptions import AlignedError, StatusLookupFailedError
from .models import JobStatus

logger = logging.getLogger(__name__)


class StatusPoller:
    """Stateless proxy for the remote job state machine; nothing is cached."""

    async def get_status(self, job_id: str, *, client: ProofClient) -> JobStatus:
        try:
            status = await client.get_proof_status(job_id)
        except AlignedError as exc:
            raise StatusLookupFailedError(exc.message, job_id=job_id) from exc
        except Exception as exc:
            raise StatusLookupFailedError(str(exc) or type(exc).__name__, job_id=job_id) from exc

        logger.info(
            "Request ID: %s, Additional Info: %s",
            status.request_id,
            status.additional_info,
        )
        return status
