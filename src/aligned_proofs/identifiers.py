"""Billing identifier resolution."""
from __future__ import annotations

import logging
from typing import Optional

from .clients.base import ProofClient
from .models import Identifier

logger = logging.getLogger(__name__)


class IdentifierResolver:
    """Pick the identifier a submission is billed to.

    Precedence is fixed: an explicit identifier from the caller wins over
    the configured one, which wins over whatever the network already knows
    about. Only when nothing else is available is a new identifier created.
    """

    async def resolve(
        self,
        explicit_hex: Optional[str] = None,
        configured_hex: Optional[str] = None,
        *,
        client: ProofClient,
    ) -> Identifier:
        """Resolve the identifier for one submission.

        Args:
            explicit_hex: Identifier supplied with the request
            configured_hex: Identifier from deployment configuration
            client: Proof network client for discovery and creation

        Returns:
            The resolved 32-byte identifier

        Raises:
            MalformedIdentifierError: If a supplied hex value cannot be decoded.
        """
        if explicit_hex:
            identifier = Identifier.from_hex(explicit_hex)
            logger.debug("Using explicit identifier %s", identifier)
            return identifier

        if configured_hex:
            identifier = Identifier.from_hex(configured_hex)
            logger.debug("Using configured identifier %s", identifier)
            return identifier

        existing = await client.list_identifiers()
        if existing:
            identifier = existing[0]
            logger.debug("Using existing identifier %s (%d known)", identifier, len(existing))
            return identifier

        identifier = await client.create_identifier()
        logger.info("Created new identifier %s", identifier)
        return identifier
