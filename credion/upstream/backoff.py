import asyncio
from typing import Protocol


class BackoffPolicy(Protocol):
    def next_delay(self, attempt: int) -> float:
        """Seconds to wait before retry number ``attempt`` (1-based)."""
        ...


class FixedBackoff:
    def __init__(self, delay: float):
        self.delay = delay

    def next_delay(self, attempt: int) -> float:
        return self.delay


class NoBackoff:
    def next_delay(self, attempt: int) -> float:
        return 0.0


async def wait(policy: BackoffPolicy, attempt: int) -> None:
    delay = policy.next_delay(attempt)
    if delay > 0:
        await asyncio.sleep(delay)
