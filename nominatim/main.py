"""
Nominatim client command line tool.

Small harness for manual integration testing against a running service:

    nominatim-client -c config.toml status
    nominatim-client search "avenida da república, lisboa" --limit 5
    nominatim-client search --city Lisboa --country Portugal
    nominatim-client reverse 38.6945252 -9.3221278
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, List, Optional

from .client import NominatimClient
from .config import ConfigManager, NominatimConfig
from .context import CallContext
from .exceptions import ConfigurationError, NominatimError
from .logging_utils import initLogging
from .query import newReverseQuery, newSearchQuery

# Configure basic logging first, config may override it later
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.WARNING)
logger = logging.getLogger(__name__)


def parseArguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Query a Nominatim geocoding service, dood!")
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file (default: config.toml)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Call deadline in seconds (default: no deadline, only HTTP client timeout)",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("status", help="Check service status")

    searchParser = subparsers.add_parser("search", help="Search by free-form text or structured address")
    searchParser.add_argument("text", nargs="?", default="", help="Free-form query, wins over structured fields")
    for fieldName in ("street", "city", "county", "state", "country"):
        searchParser.add_argument(f"--{fieldName}", default="")
    searchParser.add_argument("--postal-code", dest="postalCode", default="")
    searchParser.add_argument("--limit", type=int, default=None, help="Max results (1..50)")
    searchParser.add_argument("--exclude", action="append", default=[], help="Place ID to exclude")
    searchParser.add_argument("--extra-tags", dest="extraTags", action="store_true")
    searchParser.add_argument("--name-details", dest="nameDetails", action="store_true")

    reverseParser = subparsers.add_parser("reverse", help="Reverse geocode a coordinate pair")
    reverseParser.add_argument("latitude")
    reverseParser.add_argument("longitude")
    reverseParser.add_argument("--extra-tags", dest="extraTags", action="store_true")
    reverseParser.add_argument("--name-details", dest="nameDetails", action="store_true")

    args = parser.parse_args(argv)
    if args.config_dir:
        args.config_dir = [os.path.abspath(dirPath) for dirPath in args.config_dir]
    if args.command is None and not args.print_config:
        parser.error("command is required")
    return args


async def runCommand(args: argparse.Namespace, config: NominatimConfig) -> Any:
    """Run the requested command and return its JSON-serializable result."""
    acceptLanguage = list(config.get("accept-language", []))
    ctx = CallContext.background() if args.timeout is None else CallContext.withTimeout(args.timeout)

    async with NominatimClient.fromConfig(config) as client:
        match args.command:
            case "status":
                status = await client.checkStatus(ctx)
                return status.toDict()
            case "search":
                query = newSearchQuery()
                query.freeFormQuery = args.text
                query.street = args.street
                query.city = args.city
                query.county = args.county
                query.state = args.state
                query.country = args.country
                query.postalCode = args.postalCode
                query.extraTags = args.extraTags
                query.nameDetails = args.nameDetails
                query.excludedPlaces = args.exclude
                query.acceptLanguage = acceptLanguage
                if args.limit is not None:
                    query.limit = args.limit
                results = await client.search(ctx, query)
                return [result.toDict() for result in results]
            case "reverse":
                reverseQuery = newReverseQuery(args.latitude, args.longitude)
                reverseQuery.extraTags = args.extraTags
                reverseQuery.nameDetails = args.nameDetails
                reverseQuery.acceptLanguage = acceptLanguage
                result = await client.reverse(ctx, reverseQuery)
                return result.toDict()
            case _:
                raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parseArguments(argv)

    try:
        configManager = ConfigManager(args.config, args.config_dir)
        initLogging(configManager.getLoggingConfig())
        config = configManager.getNominatimConfig()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    if args.print_config:
        print(json.dumps(configManager.config, indent=2, ensure_ascii=False, sort_keys=True))
        return 0

    try:
        output = asyncio.run(runCommand(args, config))
    except NominatimError as e:
        logger.error(f"{args.command} failed: {type(e).__name__}#{e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
