"""
Dashboard composition: the grid plus stat cards, revealed as they scroll
into view.

Each card owns two schedulers, both observing the same viewport:
    - the card itself flips in at 10% visibility, after its stagger delay
    - its number starts counting up at 50% visibility
and one CounterAnimator for the number. Nothing is shared between cards
except the read-only LifeStats record.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from lifeweeks.config import LifeWeeksConfig, RevealParams
from lifeweeks.counter import CounterAnimator, format_value
from lifeweeks.grid import LifeGrid
from lifeweeks.reveal import RevealScheduler, RevealState, Viewport, VisibilityObserver
from lifeweeks.stats import LifeStats

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Card:
    """One animated metric: which LifeStats field, how it is labelled."""

    key: str
    label: str
    unit: Optional[str] = None
    delay_ms: int = 0


@dataclass(frozen=True)
class Section:
    title: str
    cards: Tuple[Card, ...]


SECTIONS: Tuple[Section, ...] = (
    Section("your journey so far", (
        Card("weeks_lived", "weeks lived", "approx.", 100),
        Card("heartbeats", "heartbeats", "approx.", 200),
        Card("full_moons_seen", "full moons seen", None, 300),
    )),
    Section("fun estimates & quirky stats", (
        Card("meals_eaten", "meals eaten", "approx.", 100),
        Card("hours_slept", "hours slept", "approx.", 200),
        Card("dreams_dreamt", "dreams dreamt", "approx.", 300),
        Card("people_met", "people met", "estimate", 400),
    )),
    Section("your place in time", (
        Card("earth_orbits", "orbits of the sun", None, 100),
        Card("iphone_models_released", "iphone models released", "in your lifetime", 200),
    )),
)

PRESIDENTS_LABEL = "u.s. presidents during your lifetime"
PRESIDENTS_SEPARATOR = " • "


def all_cards() -> Tuple[Card, ...]:
    return tuple(card for section in SECTIONS for card in section.cards)


def card_value(stats: LifeStats, card: Card) -> int:
    return int(getattr(stats, card.key))


# ---------------------------------------------------------------------------
# Live card
# ---------------------------------------------------------------------------

class CardView:
    """Reveal and count-up state of one card."""

    def __init__(
        self,
        card: Card,
        value: int,
        observer: Optional[VisibilityObserver],
        cfg: LifeWeeksConfig,
        clock=time.monotonic,
        on_reveal=None,
    ):
        self.card = card
        self.revealed = False
        self.closed = False
        self._on_reveal = on_reveal
        self.animator = CounterAnimator(value, cfg=cfg.counter, clock=clock)
        self.card_reveal = RevealScheduler(
            RevealParams(cfg.reveal.visibility_threshold, card.delay_ms),
            observer,
        )
        self.counter_reveal = RevealScheduler(
            RevealParams(cfg.counter.visibility_threshold, 0),
            observer,
        )

    @property
    def element(self) -> str:
        return self.card.key

    @property
    def display(self) -> str:
        return self.animator.display

    @property
    def done(self) -> bool:
        return self.revealed and self.animator.finished

    @property
    def settled(self) -> bool:
        """True once nothing about this card can change unless the viewport moves."""
        if self.closed:
            return True
        for scheduler in (self.card_reveal, self.counter_reveal):
            if scheduler.state is RevealState.ARMED:
                return False
        return not self.animator.started or self.animator.finished

    @property
    def waiting(self) -> bool:
        """A gate is still observing for a visibility it has not reached."""
        return self.card_reveal.observing or self.counter_reveal.observing

    def mount(self) -> None:
        self.card_reveal.attach(self.element, self._reveal)
        self.counter_reveal.attach(self.element, self.animator.start)

    def close(self) -> None:
        self.closed = True
        self.card_reveal.close()
        self.counter_reveal.close()
        self.animator.cancel()

    def _reveal(self) -> None:
        self.revealed = True
        if self._on_reveal is not None:
            self._on_reveal(self.card)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

class Dashboard:
    """
    Lays out the grid and every card in a viewport and drives their reveal.

    Must be built for a computed, non-future record. Cards within a section
    share a row; sections stack below the grid.
    """

    def __init__(
        self,
        stats: LifeStats,
        viewport: Viewport,
        cfg: Optional[LifeWeeksConfig] = None,
        clock=time.monotonic,
        grid_height: float = 480.0,
        title_height: float = 40.0,
        card_height: float = 120.0,
        gap: float = 16.0,
    ):
        if stats is None or stats.is_future:
            raise ValueError("Dashboard requires a computed, non-future LifeStats")
        self.cfg = cfg if cfg is not None else LifeWeeksConfig()
        self.stats = stats
        self.viewport = viewport
        self.grid = LifeGrid(stats.weeks_lived, self.cfg)
        self.reveal_order: List[str] = []
        self.cards: Dict[str, CardView] = {}
        self._mounted = False

        viewport.stack("grid", grid_height)
        for section in SECTIONS:
            viewport.stack(section.title, title_height, gap)
            row_top = viewport.content_height + gap
            for card in section.cards:
                viewport.place(card.key, row_top, card_height)
                self.cards[card.key] = CardView(
                    card,
                    card_value(stats, card),
                    viewport,
                    self.cfg,
                    clock=clock,
                    on_reveal=self._record_reveal,
                )
        viewport.stack("presidents", title_height, gap)

    @property
    def presidents_line(self) -> str:
        return PRESIDENTS_SEPARATOR.join(self.stats.presidents_in_lifetime)

    @property
    def done(self) -> bool:
        return all(view.done for view in self.cards.values())

    def mount(self) -> None:
        if self._mounted:
            return
        self._mounted = True
        self.grid.mount()
        for view in self.cards.values():
            view.mount()

    def values(self) -> Dict[str, int]:
        return {key: view.animator.value for key, view in self.cards.items()}

    def displays(self) -> Dict[str, str]:
        return {key: format_value(value) for key, value in self.values().items()}

    async def run(self, scroll_step: Optional[float] = None) -> Dict[str, int]:
        """
        Scroll from top to bottom, then wait until every card has settled.

        A card settles when its pending activations have fired and its
        counter has finished. Gates still waiting on a visibility the
        viewport never reached stay closed, and that card keeps value 0.
        Returns the value of each card.
        """
        step = scroll_step if scroll_step is not None else self.viewport.height / 2
        if step <= 0:
            raise ValueError(f"scroll_step must be positive, got {step}")
        self.mount()
        interval = self.cfg.counter.frame_interval_ms / 1000.0
        bottom = max(0.0, self.viewport.content_height - self.viewport.height)

        while self.viewport.scroll_top < bottom:
            await asyncio.sleep(interval)
            self.viewport.scroll_by(step)

        while not all(view.settled for view in self.cards.values()):
            await asyncio.sleep(interval)

        stuck = [key for key, view in self.cards.items() if view.waiting]
        if stuck:
            logger.warning("Cards never reached their visibility threshold: %s", ", ".join(stuck))
        logger.info("Dashboard settled: %d cards revealed", len(self.reveal_order))
        return self.values()

    def close(self) -> None:
        for view in self.cards.values():
            view.close()

    def __enter__(self) -> "Dashboard":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _record_reveal(self, card: Card) -> None:
        self.reveal_order.append(card.key)
