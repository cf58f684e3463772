"""
Life statistics: turns a birth date into weeks lived and a set of derived
metrics (heartbeats, full moons, meals, presidents, ...).

compute_stats is pure given its `now` argument. It never raises for bad
input: an empty value or an unparseable date comes back as None, a birth
date after `now` as a record with only is_future set.
"""

import logging
import math
from dataclasses import asdict, dataclass
from datetime import date
from typing import Dict, Optional, Tuple, Union

import numpy as np
import pandas as pd

from lifeweeks.config import LifeWeeksConfig, Officeholder

logger = logging.getLogger(__name__)

DateInput = Union[str, date, pd.Timestamp, None]


# ---------------------------------------------------------------------------
# Output record
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LifeStats:
    """
    Immutable result of compute_stats.

    When is_future is True every other field is None; callers check
    is_future first and read nothing else.
    """

    is_future: bool = False
    days_lived: Optional[int] = None
    years_lived: Optional[int] = None
    weeks_lived: Optional[int] = None
    heartbeats: Optional[int] = None
    full_moons_seen: Optional[int] = None
    km_traveled_around_sun: Optional[int] = None
    earth_orbits: Optional[int] = None
    meals_eaten: Optional[int] = None
    hours_slept: Optional[int] = None
    dreams_dreamt: Optional[int] = None
    people_met: Optional[int] = None
    iphone_models_released: Optional[int] = None
    presidents_in_lifetime: Optional[Tuple[str, ...]] = None

    @classmethod
    def future(cls) -> "LifeStats":
        return cls(is_future=True)

    def to_dict(self) -> Dict:
        if self.is_future:
            return {"is_future": True}
        out = asdict(self)
        out["presidents_in_lifetime"] = list(self.presidents_in_lifetime)
        return out


# ---------------------------------------------------------------------------
# Date handling
# ---------------------------------------------------------------------------

def parse_birth_date(value: DateInput) -> Optional[pd.Timestamp]:
    """
    Parse a YYYY-MM-DD string (or a date/datetime) into a Timestamp.

    Returns None for empty or unparseable input. A timezone offset carried
    by the input is kept; naive values are left naive.
    """
    if value is None:
        return None

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    elif not isinstance(value, date):
        logger.debug("Unsupported birth date type: %s", type(value).__name__)
        return None

    try:
        ts = pd.to_datetime(value, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        # out-of-bounds datetime objects raise even with errors="coerce"
        ts = pd.NaT

    if pd.isna(ts):
        logger.debug("Unparseable birth date: %r", value)
        return None
    return ts


def _as_utc(ts: pd.Timestamp) -> pd.Timestamp:
    """Naive timestamps are read as UTC."""
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def _resolve_now(now: DateInput) -> pd.Timestamp:
    if now is None:
        return pd.Timestamp.now(tz="UTC")
    return pd.Timestamp(now)


# ---------------------------------------------------------------------------
# Reference-table lookups
# ---------------------------------------------------------------------------

def presidents_in_lifetime(
    birth_year: int,
    table: Tuple[Officeholder, ...],
) -> Tuple[str, ...]:
    """
    Names of officeholders whose term overlaps a life starting in birth_year.

    A term counts if it started in or after the birth year, or started
    before it and ended after it. Table order is preserved.
    """
    if not table:
        return ()

    df = pd.DataFrame([asdict(o) for o in table])
    started_after = df["start"] >= birth_year
    spans_birth = (df["start"] < birth_year) & (df["end"] > birth_year)
    return tuple(df.loc[started_after | spans_birth, "name"])


def count_releases_since(birth_year: int, release_years: Tuple[int, ...]) -> int:
    """Number of release years at or after birth_year."""
    years = np.asarray(release_years, dtype=np.int64)
    return int(np.count_nonzero(years >= birth_year))


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def compute_stats(
    birth_date: DateInput,
    now: DateInput = None,
    cfg: Optional[LifeWeeksConfig] = None,
) -> Optional[LifeStats]:
    """
    Derive every life metric from a birth date.

    `now` is the instant the metrics are measured at; it defaults to the
    current UTC time. Calling twice with the same `now` gives equal records.

    years_lived is calendar-year subtraction (now.year - birth.year), not
    elapsed full years. hours_slept, dreams_dreamt, people_met and
    earth_orbits all build on it.
    """
    if cfg is None:
        cfg = LifeWeeksConfig()

    birth = parse_birth_date(birth_date)
    if birth is None:
        return None

    now_ts = _resolve_now(now)
    birth_utc = _as_utc(birth)
    now_utc = _as_utc(now_ts)

    if birth_utc > now_utc:
        logger.debug("Birth date %s is after now (%s)", birth.isoformat(), now_utc.isoformat())
        return LifeStats.future()

    s = cfg.stats
    birth_year = birth.year

    # plain datetimes: the span can exceed what a nanosecond Timedelta holds
    elapsed = now_utc.to_pydatetime(warn=False) - birth_utc.to_pydatetime(warn=False)
    days_lived = elapsed.days
    years_lived = max(0, now_ts.year - birth_year)

    hours_slept = years_lived * 365 * s.sleep_hours_per_day
    people_per_year = s.people_met_cap / s.people_met_horizon_years

    stats = LifeStats(
        is_future=False,
        days_lived=days_lived,
        years_lived=years_lived,
        weeks_lived=days_lived // 7,
        heartbeats=math.floor(days_lived * 24 * 60 * s.beats_per_minute),
        full_moons_seen=math.floor(days_lived / s.synodic_month_days),
        km_traveled_around_sun=math.floor(days_lived * 24 * 60 * 60 * s.orbital_speed_km_s),
        earth_orbits=years_lived,
        meals_eaten=days_lived * s.meals_per_day,
        hours_slept=hours_slept,
        dreams_dreamt=hours_slept * s.dreams_per_sleep_hour,
        people_met=min(s.people_met_cap, math.floor(years_lived * people_per_year)),
        iphone_models_released=count_releases_since(birth_year, cfg.iphone_releases),
        presidents_in_lifetime=presidents_in_lifetime(birth_year, cfg.presidents),
    )

    logger.debug("Computed stats for %s: %d weeks lived", birth.date(), stats.weeks_lived)
    return stats
