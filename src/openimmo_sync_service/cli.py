"""
Command-line entry point for running the OpenImmo sync once.

Usage:
  - Full run against the FTP feed:
    openimmo-sync

  - Test mode against one local file (feed untouched, no publish):
    openimmo-sync --test ./samples/listing_42+extra.xml
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from openimmo_sync_service.exceptions import SyncServiceError
from openimmo_sync_service.services.sync_pipeline import SyncPipeline
from openimmo_sync_service.utils.logging_config import configure_logging, logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Import OpenImmo XML listings from the FTP feed into Webflow."
    )
    parser.add_argument(
        "--test",
        metavar="PATH",
        dest="test_file",
        help="Process a single local XML file instead of the FTP feed.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured logging level (DEBUG, INFO, ...).",
    )
    return parser


async def run(test_file: Optional[str] = None, pipeline: SyncPipeline = None) -> int:
    pipeline = pipeline or SyncPipeline()
    if test_file:
        report = await pipeline.run_local_file(test_file)
        if report is None:
            return 1
        logger.info("Test import completed")
    else:
        report = await pipeline.run()
    print(report.model_dump_json(indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        return asyncio.run(run(args.test_file))
    except SyncServiceError as e:
        logger.error(f"Unhandled error in main: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
