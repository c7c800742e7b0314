from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

from .config import DEFAULT_CONFIG, load_config
from .loader import load_result_set
from .model import RunOptions
from .rendering import render_html
from .report import assemble_report, document_as_dict

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("date must be YYYY-MM-DD") from exc


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Render WebPageTest results as an HTML/SVG report")
    parser.add_argument("results", type=Path, help="JSON result set written by the collection stage")
    parser.add_argument("--location", required=True, help="test location, optionally LOCATION:USER_AGENT")
    parser.add_argument("--connection", required=True)
    parser.add_argument("--count", required=True, type=int, help="runs per page (0-15)")
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument("--format", choices=["html", "json"], default="html")
    parser.add_argument("--output", type=Path, default=None)
    parser.add_argument("--date", type=_parse_date, default=None, help="report date, defaults to today")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config) if args.config is not None else DEFAULT_CONFIG
        result_set = load_result_set(args.results)
        document = assemble_report(
            result_set,
            RunOptions(location=args.location, connection=args.connection, count=args.count),
            generated_at=args.date or date.today(),
            config=config,
        )
    except ValueError as exc:
        print(f"wpt-mapper: error: {exc}", file=sys.stderr)
        return 2

    if args.format == "json":
        output = json.dumps(document_as_dict(document), indent=2, sort_keys=True, allow_nan=False) + "\n"
    else:
        output = render_html(document)

    if args.output is None:
        sys.stdout.write(output)
        return 0

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(output, encoding="utf-8")
    logger.info("wrote %s report to %s", args.format, args.output)
    print(str(args.output))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
