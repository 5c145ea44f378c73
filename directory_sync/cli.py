#!/usr/bin/env python3
"""
Directory Sync CLI

Run an ingestion job by hand and print its result envelope as JSON.

Usage:
  directory-sync extract-events
  directory-sync extract-companies --database-url sqlite:///data/directory.db
  directory-sync scrape-companies --summary
  directory-sync init-db
"""

import argparse
import json
import sys
from typing import List, Optional

from .cloud_logging import get_cloud_logging_client
from .config import configure_logging, get_settings
from .jobs import JOBS, run_sync_job
from .persistence import DirectoryStore

COMMANDS = {
    "scrape-companies": "scrape_companies",
    "extract-companies": "extract_companies",
    "extract-events": "extract_events",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Directory ingestion jobs")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument("--log-level", help="Override LOG_LEVEL (DEBUG, INFO, ...)")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    for command, job_name in COMMANDS.items():
        job_parser = subparsers.add_parser(command, help=JOBS[job_name].__doc__)
        job_parser.add_argument("--summary", action="store_true", help="Print count only, not the records")
    subparsers.add_parser("init-db", help="Create the database tables")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = get_settings()
    if args.database_url:
        settings = settings.model_copy(update={"database_url": args.database_url})
    configure_logging(settings, args.log_level)

    store = DirectoryStore.from_url(settings.database_url)
    if args.command == "init-db":
        print(f"✅ Database initialized at {settings.database_url}")
        return 0

    envelope = run_sync_job(
        JOBS[COMMANDS[args.command]],
        settings=settings,
        store=store,
        cloud_logger=get_cloud_logging_client(),
    )
    if args.summary and envelope["success"]:
        envelope = {"success": True, "count": envelope["count"]}

    print(json.dumps(envelope, indent=2))
    return 0 if envelope["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
