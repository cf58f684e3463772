"""
Lifetime grid: one unit per week for 90 years of 52 weeks.

build_grid is a pure column build, vectorised over all units. LifeGrid
wraps it with the one-time entrance effect: after mount() every unit
fades in with a delay proportional to its index, a left-to-right,
top-to-bottom wave that does not wait on visibility.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

import numpy as np
import pandas as pd

from lifeweeks.config import GridParams, LifeWeeksConfig

logger = logging.getLogger(__name__)

TOTAL_WEEKS = GridParams().total_weeks

GRID_COLUMNS = ("index", "year", "week", "is_lived", "is_decade_boundary", "delay_ms")


@dataclass(frozen=True)
class GridUnit:
    index: int
    year: int
    week: int
    is_lived: bool
    is_decade_boundary: bool
    delay_ms: float


def clamp_weeks(weeks_lived: int, total_weeks: int = TOTAL_WEEKS) -> int:
    """Fit weeks_lived into the grid; overflow fills it, negatives empty it."""
    return int(min(max(weeks_lived, 0), total_weeks))


def build_grid(weeks_lived: int, cfg: Optional[LifeWeeksConfig] = None) -> pd.DataFrame:
    """
    One row per unit with its lived flag, decade flag and entrance delay.

    A decade boundary is the last week of year 10, 20, 30, ...
    (indices 519, 1039, 1559, ... on the default grid).
    """
    if cfg is None:
        cfg = LifeWeeksConfig()
    g = cfg.grid

    idx = np.arange(g.total_weeks, dtype=np.int64)
    year = idx // g.weeks_in_year
    week = idx % g.weeks_in_year

    df = pd.DataFrame({
        "index": idx,
        "year": year,
        "week": week,
        "is_lived": idx < clamp_weeks(weeks_lived, g.total_weeks),
        "is_decade_boundary": ((year + 1) % g.decade_years == 0) & (week == g.weeks_in_year - 1),
        "delay_ms": idx * g.stagger_ms,
    }, columns=list(GRID_COLUMNS))
    return df


class LifeGrid:
    """The rendered grid for one weeks_lived value."""

    def __init__(self, weeks_lived: int, cfg: Optional[LifeWeeksConfig] = None):
        self.cfg = cfg if cfg is not None else LifeWeeksConfig()
        self.weeks_lived = clamp_weeks(weeks_lived, self.cfg.grid.total_weeks)
        self.frame = build_grid(weeks_lived, self.cfg)
        self.mounted = False
        if weeks_lived > self.cfg.grid.total_weeks:
            logger.debug("weeks_lived %d exceeds grid capacity, clamped", weeks_lived)

    def __len__(self) -> int:
        return len(self.frame)

    @property
    def lived_count(self) -> int:
        return int(self.frame["is_lived"].sum())

    @property
    def entrance_duration_ms(self) -> float:
        """Time from mount until the last unit finishes its transition."""
        return float(self.frame["delay_ms"].iloc[-1]) + self.cfg.grid.transition_ms

    def mount(self) -> None:
        """Start the entrance wave. Only the first call has an effect."""
        if self.mounted:
            return
        self.mounted = True
        logger.debug("Grid mounted: %d units, %d lived", len(self), self.weeks_lived)

    def unit(self, i: int) -> GridUnit:
        row = self.frame.iloc[i]
        return GridUnit(
            index=int(row["index"]),
            year=int(row["year"]),
            week=int(row["week"]),
            is_lived=bool(row["is_lived"]),
            is_decade_boundary=bool(row["is_decade_boundary"]),
            delay_ms=float(row["delay_ms"]),
        )

    def units(self) -> Iterator[GridUnit]:
        columns = [self.frame[c].to_numpy() for c in GRID_COLUMNS]
        for index, year, week, is_lived, is_decade, delay in zip(*columns):
            yield GridUnit(
                index=int(index),
                year=int(year),
                week=int(week),
                is_lived=bool(is_lived),
                is_decade_boundary=bool(is_decade),
                delay_ms=float(delay),
            )

    def unit_style(self, i: int) -> Dict[str, object]:
        """Target visual state of unit i: hidden before mount, shown after."""
        shown = self.mounted
        return {
            "opacity": 1.0 if shown else 0.0,
            "scale": 1.0 if shown else 0.0,
            "delay_ms": float(self.frame["delay_ms"].iat[i]),
            "transition_ms": self.cfg.grid.transition_ms,
            "title": f"Week {i + 1}",
        }

    def shown_at(self, elapsed_ms: float) -> int:
        """Units whose entrance has started elapsed_ms after mount."""
        if not self.mounted:
            return 0
        return int(np.count_nonzero(self.frame["delay_ms"].to_numpy() <= elapsed_ms))

    def render_text(self, lived: str = "●", unlived: str = "○") -> str:
        """Draw 52-unit rows, with a blank line after each decade."""
        g = self.cfg.grid
        cells = np.where(self.frame["is_lived"].to_numpy(), lived, unlived)
        rows = cells.reshape(g.total_years, g.weeks_in_year)
        decade_rows = self.frame["is_decade_boundary"].to_numpy().reshape(rows.shape)[:, -1]

        lines = []
        for r, row in enumerate(rows):
            lines.append("".join(row))
            if decade_rows[r] and r < g.total_years - 1:
                lines.append("")
        return "\n".join(lines)
