"""Prepaid balance check and top-up before submission."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Awaitable, Callable, Optional

from .clients.base import ProofClient
from .config import DEFAULT_SETTLEMENT_DELAY_SECONDS, DEFAULT_SUBMISSION_THRESHOLD
from .exceptions import InsufficientBalanceAfterTopUpError
from .models import Identifier, TopUpResult

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class BalanceCheck:
    """What BalanceGuard.ensure observed and did."""

    identifier: Identifier
    threshold: Decimal
    initial_balance: Decimal
    top_up: Optional[TopUpResult] = None
    settled_balance: Optional[Decimal] = None

    @property
    def topped_up(self) -> bool:
        return self.top_up is not None

    @property
    def settled(self) -> bool:
        """True when the latest observed balance meets the threshold."""
        latest = self.settled_balance if self.topped_up else self.initial_balance
        return latest is not None and latest >= self.threshold


class BalanceGuard:
    """Make sure an identifier holds enough credit to pay for a submission.

    When the balance is short, exactly one top-up of ``threshold`` is
    issued, followed by a fixed settlement wait and a re-read of the
    balance. The top-up call returning is what counts as confirmation: if
    the ledger still lags after the wait, the shortfall is logged and the
    caller proceeds, unless ``require_settled`` is set, in which case
    InsufficientBalanceAfterTopUpError is raised instead.

    Args:
        threshold: Minimum balance required to submit
        settlement_delay: Seconds to wait after a top-up
        require_settled: Raise when the post-wait balance is still short
        sleep: Awaitable sleep, replaceable in tests
    """

    def __init__(
        self,
        threshold: Decimal = DEFAULT_SUBMISSION_THRESHOLD,
        settlement_delay: float = DEFAULT_SETTLEMENT_DELAY_SECONDS,
        *,
        require_settled: bool = False,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        threshold = Decimal(str(threshold))
        if threshold < 0:
            raise ValueError("threshold must be non-negative")
        if settlement_delay < 0:
            raise ValueError("settlement_delay must be non-negative")
        self.threshold = threshold
        self.settlement_delay = settlement_delay
        self.require_settled = require_settled
        self._sleep = sleep

    async def ensure(self, identifier: Identifier, *, client: ProofClient) -> BalanceCheck:
        """Check the balance and top up once if it is below the threshold."""
        check = await self.check(identifier, client=client)
        if check.settled:
            return check
        return await self.replenish(check, client=client)

    async def check(self, identifier: Identifier, *, client: ProofClient) -> BalanceCheck:
        """Read the current balance without side effects."""
        balance = Decimal(str(await client.get_balance(identifier)))
        logger.info("Current balance for %s: %s", identifier, balance)
        return BalanceCheck(
            identifier=identifier,
            threshold=self.threshold,
            initial_balance=balance,
        )

    async def replenish(self, check: BalanceCheck, *, client: ProofClient) -> BalanceCheck:
        """Top up by the threshold, wait for settlement and re-read the balance."""
        identifier = check.identifier
        logger.info("Balance low, topping up %s with %s", identifier, self.threshold)
        top_up = await client.top_up_credits(identifier, self.threshold)
        logger.info("Top-up transaction: %s", top_up.tx_hash or top_up.status)

        await self._sleep(self.settlement_delay)
        settled_balance = Decimal(str(await client.get_balance(identifier)))
        logger.info("New balance after top-up for %s: %s", identifier, settled_balance)

        result = replace(check, top_up=top_up, settled_balance=settled_balance)
        if not result.settled:
            error = InsufficientBalanceAfterTopUpError(
                f"Balance {settled_balance} still below {self.threshold} after top-up",
                identifier=identifier.hex(),
                balance=str(settled_balance),
                threshold=str(self.threshold),
            )
            if self.require_settled:
                raise error
            logger.warning("%s; submitting anyway", error.message, extra={"error_code": error.error_code})
        return result
