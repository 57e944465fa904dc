import asyncio
import time
from typing import Any, Awaitable, Callable, Optional


class RateLimiter:
    """
    Enforces a minimum interval between calls to an external service.

    The caller owns the limiter and passes it to whatever needs throttling.
    ``clock`` and ``sleep`` are injectable so tests can run without waiting.
    """

    def __init__(
        self,
        min_interval: float = 0.1,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self.clock = clock
        self.sleep = sleep
        self._last_call: Optional[float] = None
        self._lock = asyncio.Lock()

    async def wait(self) -> float:
        """Block until the next call is allowed. Returns the time waited."""
        async with self._lock:
            waited = 0.0
            if self._last_call is not None:
                elapsed = self.clock() - self._last_call
                if elapsed < self.min_interval:
                    waited = self.min_interval - elapsed
                    await self.sleep(waited)
            self._last_call = self.clock()
            return waited

    async def call(self, func: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
        await self.wait()
        return await func(*args, **kwargs)
