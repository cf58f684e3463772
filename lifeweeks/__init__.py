"""
lifeweeks — Your Life in Weeks

Turns a birth date into life statistics and a progressively revealed
summary: a 90-year grid of weekly units plus count-up stat cards that
animate as they scroll into view.

Architecture:
    config          — Formula constants, grid geometry, timings, reference tables
    stats           — Birth date → LifeStats record (pure given `now`)
    reveal          — Visibility-gated one-shot activation + in-process viewport
    counter         — Time-keyed 0 → target count-up and its display format
    grid            — 4680-unit lifetime grid and its entrance wave
    shell           — Card layout and the async dashboard that drives reveal
    pipeline        — Orchestration: parse → stats → grid → report

Public API:
    compute_stats(birth_date, now)   → LifeStats | None
    analyze(birth_date, now)         → result dict (no_input / future / ready)
    generate_report(result)          → formatted report
"""

from lifeweeks.pipeline import analyze, generate_report
from lifeweeks.stats import LifeStats, compute_stats

__version__ = "1.0.0"

__all__ = ["analyze", "compute_stats", "generate_report", "LifeStats"]
