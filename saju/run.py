"""
CLI wrapper for the saju analysis.

Usage:
    python3 -m saju.run --birth-date YYYY-MM-DD --gender GENDER \
        (--pillars 庚午,辛巳,庚辰,壬午 | --birth-time HH:MM [--latitude LAT --longitude LON]) \
        [--utc-offset OFFSET] [--section SECTION] [--reference-year YEAR]
"""

import argparse
import json
import logging
import sys
from datetime import datetime

from saju.analysis import analyze, analyze_birth
from saju.bazi import FourPillars
from saju.context import build_reading_context, render_prompt_context

logger = logging.getLogger(__name__)

SECTIONS = ("all", "pillars", "daeun", "saeun", "wolun", "context", "prompt")


def select_section(analysis, section: str, reference_year: int):
    """Pick the part of the analysis document a caller asked for."""
    if section == "context":
        return build_reading_context(analysis, reference_year=reference_year)
    if section == "prompt":
        return render_prompt_context(analysis)

    if section == "pillars":
        return analysis.chart.to_dict()
    if section == "daeun":
        return analysis.decades.to_dict()
    if section == "saeun":
        return [e.to_dict() for e in analysis.years]
    if section == "wolun":
        return [e.to_dict() for e in analysis.months]
    return analysis.to_dict()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute a saju chart and its luck cycles.")
    parser.add_argument("--birth-date", required=True, dest="birth_date")
    parser.add_argument("--gender", required=True, choices=["male", "female"])
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--pillars",
                        help="Comma-separated year,month,day,hour pillars, e.g. 庚午,辛巳,庚辰,壬午")
    source.add_argument("--birth-time", dest="birth_time", help="Local clock time HH:MM")
    parser.add_argument("--latitude", type=float, default=None)
    parser.add_argument("--longitude", type=float, default=None)
    parser.add_argument("--utc-offset", dest="utc_offset", type=float, default=None)
    parser.add_argument("--section", default="all", choices=SECTIONS)
    parser.add_argument("--reference-year", dest="reference_year", type=int,
                        default=datetime.now().year)
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.pillars:
            birth = datetime.strptime(args.birth_date, "%Y-%m-%d")
            pillars = FourPillars.from_strings(*_split_pillars(args.pillars))
            analysis = analyze(pillars, birth.year, birth.month, birth.day, args.gender)
        else:
            analysis = analyze_birth(
                args.birth_date, args.birth_time, args.gender,
                latitude=args.latitude, longitude=args.longitude,
                utc_offset=args.utc_offset,
            )
    except ValueError as e:
        logger.debug("Analysis failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 2

    result = select_section(analysis, args.section, args.reference_year)
    if isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


def _split_pillars(value: str) -> list[str]:
    parts = [p for p in value.replace(" ", ",").split(",") if p]
    if len(parts) != 4:
        raise ValueError(f"Expected 4 pillars, got {len(parts)}: {value!r}")
    return parts


if __name__ == "__main__":
    sys.exit(main())
