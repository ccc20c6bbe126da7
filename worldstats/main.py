"""
Headless export: render one dashboard view to a standalone HTML file.

    python -m worldstats.main --view country --value Japan --out japan.html
    python -m worldstats.main --view year --value 2000 --out 2000.html
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import resolve_data_path
from .controller import ChartController

logger = logging.getLogger(__name__)

VIEWS = ("country", "year", "tooltip")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Render a world statistics chart (population over time for a "
            "country, or fertility vs. life expectancy for a year) to HTML."
        )
    )
    parser.add_argument(
        "--view",
        choices=VIEWS,
        default="country",
        help="Which chart to render (default: country).",
    )
    parser.add_argument(
        "--value",
        required=True,
        help="Country name (or 'All') for the country view; year otherwise.",
    )
    parser.add_argument(
        "--data",
        type=Path,
        default=None,
        help=f"Path to the CSV dataset (default: {resolve_data_path()}).",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Output HTML file (default: <view>_<value>.html).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    controller = ChartController(args.data)
    if args.view == "country":
        result = controller.select_country(args.value)
    elif args.view == "year":
        result = controller.select_year(args.value)
    else:
        result = controller.hover(args.value)

    if result.figure is None:
        logger.error(
            "Nothing rendered for %s=%r: %s",
            args.view,
            args.value,
            result.message or "no selection",
        )
        return 1

    out = args.out or Path(f"{args.view}_{args.value.replace(' ', '_')}.html")
    out.parent.mkdir(parents=True, exist_ok=True)
    result.figure.write_html(str(out), include_plotlyjs="cdn")
    logger.info("Saved %s chart to %s", args.view, out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
