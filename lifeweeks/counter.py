"""
Count-up animation: 0 -> target over a fixed wall-clock duration.

counter_frames is the interpolation contract: a lazy, finite generator
whose values are keyed on elapsed clock time, not on how often it is
pulled. CounterAnimator drives it from the asyncio loop, one sample per
frame interval, and publishes each value.
"""

import asyncio
import logging
import math
import time
from typing import Callable, Iterator, Optional

from lifeweeks.config import CounterParams

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


# ---------------------------------------------------------------------------
# Display formatting
# ---------------------------------------------------------------------------

def format_value(value: int) -> str:
    """Three-tier abbreviation: 1.23B, 4.5M, 12,345, 999."""
    if value > 1_000_000_000:
        return f"{value / 1_000_000_000:.2f}B"
    if value > 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value > 1000:
        return f"{value:,}"
    return str(value)


# ---------------------------------------------------------------------------
# Interpolation
# ---------------------------------------------------------------------------

def interpolate(target: int, duration_ms: float, elapsed_ms: float) -> int:
    """
    Linear progress toward target at elapsed_ms.

    Anything short of the full duration stays below target, so target is
    only reached by the final sample.
    """
    if duration_ms <= 0 or elapsed_ms >= duration_ms:
        return target
    if target == 0:
        return 0
    progress = max(0.0, elapsed_ms / duration_ms)
    return min(math.floor(progress * target), target - 1)


def counter_frames(
    target: int,
    duration_ms: float,
    clock: Clock = time.monotonic,
) -> Iterator[int]:
    """
    Generate the values of one count-up.

    The clock starts on the first pull. Values never decrease, and the last
    one is exactly `target`, yielded once. A zero target yields a single 0.
    """
    if target < 0:
        raise ValueError(f"Counter target must be >= 0, got {target}")
    if duration_ms < 0:
        raise ValueError(f"Counter duration must be >= 0, got {duration_ms}")
    return _frames(int(target), duration_ms, clock)


def _frames(target: int, duration_ms: float, clock: Clock) -> Iterator[int]:
    if target == 0:
        yield 0
        return

    start = clock()
    current = 0
    while True:
        elapsed_ms = (clock() - start) * 1000.0
        if elapsed_ms >= duration_ms:
            yield target
            return
        current = max(current, interpolate(target, duration_ms, elapsed_ms))
        yield current


# ---------------------------------------------------------------------------
# Async driver
# ---------------------------------------------------------------------------

class CounterAnimator:
    """
    Publishes a count-up for one displayed number.

    Single-use: start() once, then either let it finish or cancel() it.
    After cancel() no further value is published.
    """

    def __init__(
        self,
        target: int,
        on_value: Optional[Callable[[int], None]] = None,
        cfg: Optional[CounterParams] = None,
        clock: Clock = time.monotonic,
    ):
        if target < 0:
            raise ValueError(f"Counter target must be >= 0, got {target}")
        self.target = int(target)
        self.cfg = cfg if cfg is not None else CounterParams()
        self.value = 0
        self._on_value = on_value
        self._clock = clock
        self._task: Optional[asyncio.Task] = None
        self._cancelled = False

    @property
    def display(self) -> str:
        return format_value(self.value)

    @property
    def started(self) -> bool:
        return self._task is not None

    @property
    def finished(self) -> bool:
        return self._task is not None and self._task.done() and not self._cancelled

    def start(self) -> asyncio.Task:
        if self._task is not None:
            raise RuntimeError("CounterAnimator cannot be restarted")
        if self._cancelled:
            raise RuntimeError("CounterAnimator was cancelled")
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    def cancel(self) -> None:
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait(self) -> None:
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            if not self._cancelled:
                raise

    async def _run(self) -> None:
        interval = self.cfg.frame_interval_ms / 1000.0
        for value in counter_frames(self.target, self.cfg.duration_ms, self._clock):
            self._publish(value)
            if value == self.target:
                break
            await asyncio.sleep(interval)
        logger.debug("Counter reached %d", self.target)

    def _publish(self, value: int) -> None:
        if self._cancelled:
            return
        self.value = value
        if self._on_value is not None:
            self._on_value(value)
