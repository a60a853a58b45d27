"""Command line entry point: run the web server or fetch ride data once."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from .config import HOST, PORT
from .services import MapDataService

LOGGER = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Build and parse CLI arguments."""

    parser = argparse.ArgumentParser(description="Strava ride map")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the web server")
    serve.add_argument("--host", default=HOST)
    serve.add_argument("--port", type=int, default=PORT)

    commands.add_parser("auth-url", help="Print the Strava authorization URL")

    fetch = commands.add_parser(
        "fetch", help="Print mapped activities (or the sample set) as JSON"
    )
    fetch.add_argument("--start", help="ISO start date (defaults to LEJOG_START_DATE)")
    fetch.add_argument("--end", help="ISO end date (defaults to LEJOG_END_DATE)")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    _setup_logging(args.verbose)
    service = MapDataService()

    if args.command == "auth-url":
        print(service.authorization_url())
        return 0

    if args.command == "fetch":
        activities = service.get_activities(args.start, args.end)
        json.dump(activities, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 0

    from .web import create_app  # local import keeps Flask off the CLI path

    app = create_app(service)
    LOGGER.info("Server running on http://%s:%s", args.host, args.port)
    app.run(host=args.host, port=args.port)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI helper
    raise SystemExit(main())
