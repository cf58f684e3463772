"""
Centralized configuration for formula constants, grid geometry, animation
timing, and the static reference tables.

Every tunable constant lives here. The reference tables are fixed data,
not user-editable at runtime; pass a custom LifeWeeksConfig to override.
"""

from dataclasses import dataclass, field
from typing import Tuple


# ---------------------------------------------------------------------------
# Reference tables
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Officeholder:
    """One presidential term, by calendar year."""

    name: str
    start: int
    end: int


US_PRESIDENTS: Tuple[Officeholder, ...] = (
    Officeholder("Jimmy Carter", 1977, 1981),
    Officeholder("Ronald Reagan", 1981, 1989),
    Officeholder("George H. W. Bush", 1989, 1993),
    Officeholder("Bill Clinton", 1993, 2001),
    Officeholder("George W. Bush", 2001, 2009),
    Officeholder("Barack Obama", 2009, 2017),
    Officeholder("Donald Trump", 2017, 2021),
    Officeholder("Joe Biden", 2021, 2025),
)

IPHONE_RELEASES: Tuple[int, ...] = tuple(range(2007, 2025))


# ---------------------------------------------------------------------------
# Stats formulas
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StatsParams:
    """Constants behind each derived life metric."""

    beats_per_minute: int = 70
    synodic_month_days: float = 29.53
    orbital_speed_km_s: float = 29.78

    meals_per_day: int = 3
    sleep_hours_per_day: int = 8
    dreams_per_sleep_hour: int = 2

    # people_met ramps linearly to the cap over the horizon, then flattens
    people_met_cap: int = 80_000
    people_met_horizon_years: int = 80

    def __post_init__(self):
        if self.synodic_month_days <= 0:
            raise ValueError(f"synodic_month_days must be positive, got {self.synodic_month_days}")
        if self.people_met_horizon_years <= 0:
            raise ValueError(
                f"people_met_horizon_years must be positive, got {self.people_met_horizon_years}"
            )


# ---------------------------------------------------------------------------
# Grid geometry and entrance wave
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GridParams:
    """Lifetime grid shape and the staggered entrance animation."""

    weeks_in_year: int = 52
    total_years: int = 90
    decade_years: int = 10

    # unit i starts its entrance transition at i * stagger_ms after mount
    stagger_ms: float = 0.2
    transition_ms: float = 500.0

    def __post_init__(self):
        if self.weeks_in_year <= 0 or self.total_years <= 0 or self.decade_years <= 0:
            raise ValueError("Grid dimensions must be positive")
        if self.stagger_ms < 0 or self.transition_ms < 0:
            raise ValueError("Grid timings must be non-negative")

    @property
    def total_weeks(self) -> int:
        return self.weeks_in_year * self.total_years


# ---------------------------------------------------------------------------
# Visibility-gated reveal
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RevealParams:
    """When an element counts as visible, and how long to wait after that."""

    visibility_threshold: float = 0.1
    activation_delay_ms: int = 0

    def __post_init__(self):
        if not 0.0 <= self.visibility_threshold <= 1.0:
            raise ValueError(
                f"visibility_threshold must be in [0, 1], got {self.visibility_threshold}"
            )
        if self.activation_delay_ms < 0:
            raise ValueError(
                f"activation_delay_ms must be >= 0, got {self.activation_delay_ms}"
            )


# ---------------------------------------------------------------------------
# Counter animation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CounterParams:
    """Timing of the 0 -> target count-up."""

    duration_ms: int = 1500
    frame_interval_ms: int = 16
    visibility_threshold: float = 0.5

    def __post_init__(self):
        if self.duration_ms < 0:
            raise ValueError(f"duration_ms must be >= 0, got {self.duration_ms}")
        if self.frame_interval_ms <= 0:
            raise ValueError(f"frame_interval_ms must be positive, got {self.frame_interval_ms}")


# ---------------------------------------------------------------------------
# Top-level config aggregate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LifeWeeksConfig:
    """Complete engine configuration. Pass to any entry point to override defaults."""

    stats: StatsParams = field(default_factory=StatsParams)
    grid: GridParams = field(default_factory=GridParams)
    reveal: RevealParams = field(default_factory=RevealParams)
    counter: CounterParams = field(default_factory=CounterParams)
    presidents: Tuple[Officeholder, ...] = US_PRESIDENTS
    iphone_releases: Tuple[int, ...] = IPHONE_RELEASES
