"""lifeweeks — CLI entry point."""

import argparse
import asyncio
import sys

from lifeweeks import analyze, compute_stats, generate_report
from lifeweeks.logging_config import setup_logging
from lifeweeks.reveal import Viewport
from lifeweeks.shell import Dashboard


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Visualize your life in weeks.")
    parser.add_argument("birth_date", help="date of birth, YYYY-MM-DD")
    parser.add_argument("--now", default=None, help="measure at this instant instead of now (ISO 8601)")
    parser.add_argument("--animate", action="store_true", help="play the card reveal in a simulated viewport")
    parser.add_argument("--viewport-height", type=float, default=600.0)
    parser.add_argument("--log-level", default=None)
    return parser.parse_args(argv)


async def play(birth_date: str, now, viewport_height: float) -> None:
    stats = compute_stats(birth_date, now=now)
    if stats is None or stats.is_future:
        return
    with Dashboard(stats, Viewport(viewport_height)) as dashboard:
        await dashboard.run()
        for key, display in dashboard.displays().items():
            print(f"  {key:24s} {display}")


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    result = analyze(args.birth_date, now=args.now)
    print(generate_report(result))

    if args.animate:
        asyncio.run(play(args.birth_date, args.now, args.viewport_height))
    return 0 if result["state"] == "ready" else 1


if __name__ == "__main__":
    sys.exit(main())
