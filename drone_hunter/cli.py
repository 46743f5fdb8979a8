"""
drone-hunter command line.

Usage:
    drone-hunter acme widgets-inc
    drone-hunter --include-archived --format json --output dronefiles.json acme
    GITHUB_OWNERS='["acme"]' GITHUB_TOKENS='["ghp_..."]' drone-hunter --cache redis
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence, TextIO

import yaml

from drone_hunter.config import Settings, settings as default_settings
from drone_hunter.core.logging import configure_logging
from drone_hunter.exceptions import DroneHunterError
from drone_hunter.hunter import DroneHunter
from drone_hunter.models import DiscoveryRecord
from drone_hunter.services.github import GithubError, get_github_client

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drone-hunter",
        description="Find Drone CI pipeline files across GitHub accounts",
    )
    parser.add_argument(
        "owners", nargs="*", help="Accounts to crawl (default: GITHUB_OWNERS)"
    )
    parser.add_argument(
        "--include-archived",
        action="store_true",
        default=None,
        help="Also crawl archived repositories",
    )
    parser.add_argument("--basename", help="Regex the path must contain")
    parser.add_argument("--suffix", help="Regex for the file extension")
    parser.add_argument(
        "--cache", choices=["file", "redis", "memory"], help="Cache backend"
    )
    parser.add_argument("--cache-dir", help="Directory for the file cache")
    parser.add_argument(
        "--format", choices=["yaml", "json"], default="yaml", help="Output format"
    )
    parser.add_argument("--output", help="Write records to this file instead of stdout")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging (cache hits)"
    )
    return parser


def dump_records(records: List[DiscoveryRecord], fmt: str, stream: TextIO) -> None:
    payload = [record.as_dict() for record in records]
    if fmt == "json":
        json.dump(payload, stream, indent=2)
        stream.write("\n")
    else:
        yaml.safe_dump(payload, stream, sort_keys=False, allow_unicode=True)


def run(args: argparse.Namespace, settings: Settings) -> List[DiscoveryRecord]:
    if args.cache_dir:
        settings = settings.model_copy(update={"CACHE_DIR": args.cache_dir})

    config = settings.hunter_config(
        owners=args.owners,
        include_archived=args.include_archived,
        basename=args.basename,
        suffix=args.suffix,
    )

    with get_github_client(settings) as client:
        hunter = DroneHunter.from_settings(
            settings, client, config=config, cache_backend=args.cache
        )
        return hunter.dronefiles()


def main(argv: Optional[Sequence[str]] = None, settings: Settings | None = None) -> int:
    settings = settings or default_settings
    parser = build_parser()
    args = parser.parse_args(argv)
    if not (args.owners or settings.GITHUB_OWNERS):
        parser.error("no accounts to crawl; pass owners or set GITHUB_OWNERS")
    configure_logging(settings.ENV, verbose=args.verbose)

    try:
        records = run(args, settings)
    except (DroneHunterError, GithubError) as exc:
        logger.error(f"Discovery failed: {exc}")
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8") as fh:
            dump_records(records, args.format, fh)
        logger.info(f"Wrote {len(records)} record(s) to {args.output}")
    else:
        dump_records(records, args.format, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
