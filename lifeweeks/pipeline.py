"""
Pipeline orchestration: parse → compute stats → build grid → report.

analyze() collapses every input into one of three terminal states:
    "no_input"  empty or unparseable date, show the input prompt
    "future"    birth date after now, show the future-date message
    "ready"     full stats and grid summary
generate_report() formats any of them as plain text.
"""

import logging
from typing import Dict, Optional

from lifeweeks.config import LifeWeeksConfig
from lifeweeks.counter import format_value
from lifeweeks.grid import LifeGrid, build_grid, clamp_weeks
from lifeweeks.shell import PRESIDENTS_LABEL, PRESIDENTS_SEPARATOR, SECTIONS
from lifeweeks.stats import DateInput, compute_stats

logger = logging.getLogger(__name__)

STATE_NO_INPUT = "no_input"
STATE_FUTURE = "future"
STATE_READY = "ready"

TITLE = "your life in weeks"


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

def analyze(
    birth_date: DateInput,
    now: DateInput = None,
    cfg: Optional[LifeWeeksConfig] = None,
) -> Dict:
    """Run the full computation for one birth date."""
    if cfg is None:
        cfg = LifeWeeksConfig()

    stats = compute_stats(birth_date, now=now, cfg=cfg)
    if stats is None:
        return {"state": STATE_NO_INPUT}
    if stats.is_future:
        return {"state": STATE_FUTURE}

    g = cfg.grid
    grid = build_grid(stats.weeks_lived, cfg)
    lived = clamp_weeks(stats.weeks_lived, g.total_weeks)

    logger.info("Analyzed birth date %s: %d weeks lived", birth_date, stats.weeks_lived)
    return {
        "state": STATE_READY,
        "stats": stats.to_dict(),
        "grid": {
            "total_weeks": g.total_weeks,
            "weeks_lived": lived,
            "percent_lived": round(100.0 * lived / g.total_weeks, 1),
            "decade_boundaries": grid.loc[grid["is_decade_boundary"], "index"].tolist(),
        },
    }


# ---------------------------------------------------------------------------
# Report generation
# ---------------------------------------------------------------------------

def generate_report(result: Dict, cfg: Optional[LifeWeeksConfig] = None) -> str:
    """Format an analysis result as a human-readable text dashboard."""
    state = result["state"]

    if state == STATE_NO_INPUT:
        return "\n".join([
            TITLE,
            "enter your date of birth to see your life from a new perspective.",
        ])

    if state == STATE_FUTURE:
        return "\n".join([
            "the future is unwritten.",
            "please select a date in the past.",
        ])

    if cfg is None:
        cfg = LifeWeeksConfig()

    stats = result["stats"]
    grid_info = result["grid"]
    grid = LifeGrid(stats["weeks_lived"], cfg)
    width = cfg.grid.weeks_in_year

    age_end = f"age {cfg.grid.total_years}"
    lines = [
        TITLE.upper(),
        "=" * 58,
        "",
        grid.render_text(),
        "age 0" + age_end.rjust(width - len("age 0")),
        f"  {grid_info['weeks_lived']} of {grid_info['total_weeks']} weeks "
        f"({grid_info['percent_lived']}%)",
    ]

    for section in SECTIONS:
        lines.append("")
        lines.append(f"  {section.title}:")
        for card in section.cards:
            value = format_value(stats[card.key])
            unit = f" {card.unit}" if card.unit else ""
            lines.append(f"    {card.label:24s} : {value}{unit}")

    presidents = PRESIDENTS_SEPARATOR.join(stats["presidents_in_lifetime"]) or "none"
    lines.append("")
    lines.append(f"  {PRESIDENTS_LABEL}:")
    lines.append(f"    {presidents}")

    lines.append("")
    lines.append("=" * 58)
    return "\n".join(lines)
