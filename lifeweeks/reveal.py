"""
Visibility-gated, one-shot activation.

A RevealScheduler watches one element through a VisibilityObserver and
calls its activation callback once, the first time the element's visible
fraction reaches the threshold, after an optional delay.

    PENDING    attached, waiting for visibility
    ARMED      threshold crossed, observation released, delay timer running
    TRIGGERED  callback delivered (terminal)

Viewport is an in-process VisibilityObserver: elements stacked vertically
with a scroll offset, reporting visible fractions in layout order.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Hashable, List, Optional, Protocol, Tuple

from lifeweeks.config import RevealParams

logger = logging.getLogger(__name__)

VisibilityCallback = Callable[[float], None]
Disconnect = Callable[[], None]


class RevealState(Enum):
    PENDING = "pending"
    ARMED = "armed"
    TRIGGERED = "triggered"


class VisibilityObserver(Protocol):
    """Host capability: report an element's visible fraction until disconnected."""

    def observe(self, element: Hashable, callback: VisibilityCallback) -> Disconnect:
        ...


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------

class RevealScheduler:
    """
    Fire `on_activate` once when an element becomes visible enough.

    With no observer (or one that cannot observe) the element is treated as
    visible on attach, so content never stays hidden.
    """

    def __init__(
        self,
        config: Optional[RevealParams] = None,
        observer: Optional[VisibilityObserver] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.config = config if config is not None else RevealParams()
        self.state = RevealState.PENDING
        self._observer = observer
        self._loop = loop
        self._element: Optional[Hashable] = None
        self._on_activate: Optional[Callable[[], None]] = None
        self._disconnect: Optional[Disconnect] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._closed = False

    @property
    def triggered(self) -> bool:
        return self.state is RevealState.TRIGGERED

    @property
    def observing(self) -> bool:
        return self._disconnect is not None

    def attach(self, element: Hashable, on_activate: Callable[[], None]) -> None:
        if self._element is not None:
            raise RuntimeError("RevealScheduler is single-use; already attached")
        if self._closed:
            raise RuntimeError("RevealScheduler is closed")

        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self._element = element
        self._on_activate = on_activate

        if self._observer is None:
            logger.debug("No visibility observer for %r, activating on attach", element)
            self._arm()
            return

        try:
            disconnect = self._observer.observe(element, self._on_visibility)
        except NotImplementedError:
            logger.warning("Visibility observation unavailable for %r, activating on attach", element)
            self._arm()
            return

        self._disconnect = disconnect
        # the host may report visibility synchronously inside observe()
        if self.state is not RevealState.PENDING:
            self._release_observation()

    def close(self) -> None:
        """Release observation and cancel a pending activation. Idempotent."""
        self._closed = True
        self._release_observation()
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def __enter__(self) -> "RevealScheduler":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # -- internals ------------------------------------------------------------

    def _on_visibility(self, fraction: float) -> None:
        if self._closed or self.state is not RevealState.PENDING:
            return
        if fraction <= 0.0 or fraction < self.config.visibility_threshold:
            return
        self._arm()

    def _arm(self) -> None:
        self.state = RevealState.ARMED
        self._release_observation()
        delay = self.config.activation_delay_ms / 1000.0
        self._timer = self._loop.call_later(delay, self._fire)
        logger.debug("Armed %r, activating in %d ms", self._element, self.config.activation_delay_ms)

    def _fire(self) -> None:
        self._timer = None
        if self._closed:
            return
        self.state = RevealState.TRIGGERED
        logger.debug("Triggered %r", self._element)
        self._on_activate()

    def _release_observation(self) -> None:
        if self._disconnect is not None:
            disconnect, self._disconnect = self._disconnect, None
            disconnect()


# ---------------------------------------------------------------------------
# In-process viewport
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Region:
    top: float
    height: float


class Viewport:
    """
    A vertical scroll container holding regions of known size.

    observe() reports the current fraction right away, then again after
    every scroll. Notifications go out in layout order (top to bottom), so
    activation order follows scroll position, not attach order.
    """

    def __init__(self, height: float, scroll_top: float = 0.0):
        if height <= 0:
            raise ValueError(f"Viewport height must be positive, got {height}")
        self.height = height
        self.scroll_top = scroll_top
        self._regions: Dict[Hashable, Region] = {}
        self._observers: Dict[int, Tuple[Hashable, VisibilityCallback]] = {}
        self._next_id = 0

    @property
    def content_height(self) -> float:
        return max((r.top + r.height for r in self._regions.values()), default=0.0)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def place(self, element: Hashable, top: float, height: float) -> None:
        self._regions[element] = Region(top, height)

    def stack(self, element: Hashable, height: float, gap: float = 0.0) -> float:
        """Place element below everything already laid out. Returns its top."""
        top = self.content_height + (gap if self._regions else 0.0)
        self.place(element, top, height)
        return top

    def visible_fraction(self, element: Hashable) -> float:
        region = self._regions.get(element)
        if region is None:
            return 0.0

        view_top = self.scroll_top
        view_bottom = self.scroll_top + self.height
        if region.height <= 0:
            return 1.0 if view_top <= region.top <= view_bottom else 0.0

        overlap = min(region.top + region.height, view_bottom) - max(region.top, view_top)
        return max(0.0, min(1.0, overlap / region.height))

    def observe(self, element: Hashable, callback: VisibilityCallback) -> Disconnect:
        key = self._next_id
        self._next_id += 1
        self._observers[key] = (element, callback)

        def disconnect() -> None:
            self._observers.pop(key, None)

        callback(self.visible_fraction(element))
        return disconnect

    def scroll_to(self, offset: float) -> None:
        limit = max(0.0, self.content_height - self.height)
        self.scroll_top = max(0.0, min(offset, limit))
        self._notify()

    def scroll_by(self, delta: float) -> None:
        self.scroll_to(self.scroll_top + delta)

    def _notify(self) -> None:
        pending: List[Tuple[float, int, Hashable, VisibilityCallback]] = []
        for key, (element, callback) in self._observers.items():
            region = self._regions.get(element)
            top = region.top if region is not None else float("inf")
            pending.append((top, key, element, callback))
        pending.sort(key=lambda item: (item[0], item[1]))

        for _, key, element, callback in pending:
            # an earlier callback may have disconnected this one
            if key in self._observers:
                callback(self.visible_fraction(element))
