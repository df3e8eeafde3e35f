from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .config import settings
from .errors import RankRadarError
from .logging_metrics import setup_logging
from .main import main as serve
from .pipeline import check_duplicates, sync_source
from .sources import SOURCES

logger = logging.getLogger("rankradar.cli")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="rankradar", description="Country website ranking collector")
    ap.add_argument("--log-level", default=settings.log_level, help="Logging level")
    sub = ap.add_subparsers(dest="command", required=True)

    fetch = sub.add_parser("fetch", help="Download one ranking source and save it as JSON")
    fetch.add_argument("source", choices=SOURCES)
    fetch.add_argument("--output-dir", default=None, help="Directory for the JSON output")

    dup = sub.add_parser("duplicates", help="Report hosts that collide after normalization")
    dup.add_argument("--input", default=None, help="Ranking JSON list (default: tranco_list_tw.json)")
    dup.add_argument("--output", default=None, help="Report path (default: duplicates-check.json)")

    sub.add_parser("serve", help="Run the HTTP worker")
    return ap


def main(argv: list[str] | None = None) -> int:
    ns = build_parser().parse_args(argv)
    setup_logging(ns.log_level)

    try:
        if ns.command == "fetch":
            rows = asyncio.run(sync_source(ns.source, output_dir=ns.output_dir))
            logger.info(f"done: {len(rows)} {ns.source} records")
        elif ns.command == "duplicates":
            report = asyncio.run(check_duplicates(ns.input, ns.output))
            logger.info(f"done: {report.duplicates} duplicate clusters")
        else:
            serve()
    except RankRadarError as e:
        logger.error(f"{e.code}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
