from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

DEFAULT_DELAY_S = 0.5

logger = logging.getLogger(__name__)


class Pacer:
    """Fixed delay between consecutive remote calls of one batch.

    Never sleeps before the first call or after the last one, and does not
    back off further when the remote side reports rate limiting.
    """

    def __init__(
        self,
        delay_s: float = DEFAULT_DELAY_S,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.delay_s = max(0.0, float(delay_s))
        self._sleep = sleep

    def should_wait(self, index: int, total: int) -> bool:
        return 1 < index <= total

    async def wait_between(self, index: int, total: int) -> None:
        if not self.should_wait(index, total):
            return
        logger.debug("pacing before test %d/%d delay_s=%.3f", index, total, self.delay_s)
        await self._sleep(self.delay_s)


__all__ = ["Pacer", "DEFAULT_DELAY_S"]
