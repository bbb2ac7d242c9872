"""
HTTP client for the Aligned proof network API.

Example usage:
    ```python
    from aligned_proofs.clients import AlignedClient

    async with AlignedClient(
        base_url="https://api.alignedlayer.com",
        api_key="your-api-key",
    ) as client:
        identifiers = await client.list_identifiers()
        result = await client.submit_proof("0xdeadbeef", identifiers[0])
        status = await client.get_proof_status(result.job_id)
    ```
"""
from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ..exceptions import APIError, AuthenticationError, RateLimitError
from ..models import (
    Identifier,
    JobStatus,
    ProofPayload,
    SubmissionResult,
    TopUpResult,
    proof_to_wire,
)

logger = logging.getLogger(__name__)


class AlignedClient:
    """
    Aligned proof network API client.

    Implements the ProofClient capability set over HTTP. Only GET requests
    are retried on transport errors; top-ups and proof submissions are sent
    exactly once so a dropped response never turns into a double charge.

    Args:
        base_url: API base URL
        api_key: Your API key
        timeout: Request timeout in seconds (default: 30)
        max_retries: Maximum attempts for idempotent requests (default: 3)
    """

    DEFAULT_BASE_URL = "https://api.alignedlayer.com"
    DEFAULT_TIMEOUT = 30.0
    DEFAULT_MAX_RETRIES = 3

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ):
        if not api_key:
            raise ValueError("API key is required")

        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._max_retries = max(1, max_retries)
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(cls, settings: Any) -> "AlignedClient":
        """Build a client from an AlignedSettings instance."""
        return cls(
            base_url=settings.api_base_url,
            api_key=settings.api_key,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={
                    "X-API-Key": self._api_key,
                    "Content-Type": "application/json",
                    "User-Agent": "aligned-proofs/0.1.0",
                },
                timeout=self._timeout,
            )
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Make an HTTP request, retrying idempotent calls."""
        client = await self._get_client()
        attempts = self._max_retries if method == "GET" else 1

        for attempt in range(attempts):
            try:
                response = await client.request(method=method, url=path, json=json)
            except (httpx.TimeoutException, httpx.TransportError) as e:
                if attempt < attempts - 1:
                    logger.warning(
                        "%s %s failed (%s), retrying attempt %d/%d",
                        method, path, type(e).__name__, attempt + 2, attempts,
                    )
                    await asyncio.sleep(2 ** attempt)
                    continue
                raise

            if response.status_code == 429:
                retry_after = int(response.headers.get("Retry-After", "5"))
                if attempt < attempts - 1:
                    await asyncio.sleep(retry_after)
                    continue
                raise RateLimitError(retry_after=retry_after)

            if response.status_code == 401:
                raise AuthenticationError()

            if response.status_code >= 400:
                try:
                    body = response.json()
                except ValueError:
                    body = {"detail": response.text}
                raise APIError.from_response(response.status_code, body)

            return response.json() if response.content else {}

        raise RuntimeError("Unexpected exit from request retry loop")

    # ==================== Identifiers ====================

    async def list_identifiers(self) -> list[Identifier]:
        response = await self._request("GET", "/v1/identifiers")
        return [Identifier.from_hex(raw) for raw in response.get("identifiers", [])]

    async def create_identifier(self) -> Identifier:
        response = await self._request("POST", "/v1/identifiers")
        return Identifier.from_hex(response["identifier"])

    # ==================== Balance ====================

    async def get_balance(self, identifier: Identifier) -> Decimal:
        response = await self._request("GET", f"/v1/identifiers/{identifier.hex()}/balance")
        return Decimal(str(response.get("balance", "0")))

    async def top_up_credits(self, identifier: Identifier, amount: Decimal) -> TopUpResult:
        response = await self._request(
            "POST",
            f"/v1/identifiers/{identifier.hex()}/topups",
            json={"amount": str(amount)},
        )
        return TopUpResult(
            identifier=identifier,
            amount=Decimal(str(response.get("amount", amount))),
            status=str(response.get("status") or "submitted"),
            tx_hash=response.get("tx_hash"),
        )

    # ==================== Proofs ====================

    async def submit_proof(self, proof: ProofPayload, identifier: Identifier) -> SubmissionResult:
        response = await self._request(
            "POST",
            "/v1/proofs",
            json={"proof": proof_to_wire(proof), "identifier": identifier.hex()},
        )
        return SubmissionResult.model_validate(response)

    async def get_proof_status(self, job_id: str) -> JobStatus:
        response = await self._request("GET", f"/v1/proofs/{quote(job_id, safe='')}")
        return JobStatus.model_validate(response)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "AlignedClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
