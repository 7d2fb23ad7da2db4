"""
Print an x-client-transaction-id for one request.

    python -m xtxid GET /i/api/1.1/jot/client_event.json
    python -m xtxid --html home.html --js ondemand.js POST /i/api/graphql/abc/CreateTweet
"""

import argparse
import logging
import sys
from typing import List, Optional

from observability.logging import setup_logging

from .config import Settings
from .errors import XTxidError
from .signature import ClientTransaction
from .transport import fetch_client

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xtxid",
        description="Generate an x-client-transaction-id header value"
    )
    parser.add_argument("method", help="HTTP method of the API request")
    parser.add_argument("path", help="Request path, e.g. /i/api/1.1/jot/client_event.json")
    parser.add_argument(
        "--html",
        help="Saved home page; fetched from x.com when omitted"
    )
    parser.add_argument(
        "--js",
        help="Saved ondemand script; required together with --html"
    )
    parser.add_argument(
        "--config",
        help="YAML settings file (XTXID_* env vars fill the gaps)"
    )
    parser.add_argument(
        "--time",
        type=int,
        default=None,
        help="Seconds since 2023-05-01 UTC instead of the current time"
    )
    parser.add_argument(
        "--proxy",
        default=None,
        help="Proxy URL for fetching (or set XTXID_PROXY env var)"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (or set LOG_LEVEL env var)"
    )
    return parser


def read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if bool(args.html) != bool(args.js):
        parser.error("--html and --js must be given together")

    try:
        if args.config:
            settings = Settings.from_yaml(args.config, proxy=args.proxy, log_level=args.log_level)
        else:
            settings = Settings.from_env(proxy=args.proxy, log_level=args.log_level)
    except (OSError, ValueError) as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 1

    setup_logging(settings.log_level, force_json=settings.json_logs)

    try:
        if args.html:
            client = ClientTransaction.from_pages(read_text(args.html), read_text(args.js))
        else:
            client = fetch_client(settings=settings)
    except (XTxidError, OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not build transaction client: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(client.generate(args.method.upper(), args.path, timestamp=args.time))
    return 0


if __name__ == "__main__":
    sys.exit(main())
