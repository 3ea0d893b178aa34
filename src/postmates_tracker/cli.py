"""
Module: cli.py
Description: Command-line listing of Postmates deliveries.

Fetches deliveries through the paginated retrieval engine and prints
one line per delivery, or the raw records as JSON.

Usage:
    postmates-deliveries --ongoing --limit 20
    postmates-deliveries --all --json
"""

import argparse
import json
import sys
from typing import List, Optional

import httpx

from .client.api import PostmatesClient
from .config.settings import settings
from .errors import PostmatesAPIError
from .models.delivery import ALL_DELIVERIES, ALL_FILTER, ONGOING_FILTER, Delivery


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="List Postmates deliveries for the configured customer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  postmates-deliveries
  postmates-deliveries --all --limit 100
  postmates-deliveries --json

Requires POSTMATES_API_KEY and POSTMATES_CUSTOMER_ID (environment or .env).
        """
    )

    scope = parser.add_mutually_exclusive_group()
    scope.add_argument(
        '--ongoing',
        dest='filter',
        action='store_const',
        const=ONGOING_FILTER,
        help='Only deliveries that are still in progress (default)'
    )
    scope.add_argument(
        '--all',
        dest='filter',
        action='store_const',
        const=ALL_FILTER,
        help='Every delivery of the customer'
    )
    parser.set_defaults(filter=ONGOING_FILTER)

    parser.add_argument(
        '--limit',
        type=int,
        default=ALL_DELIVERIES,
        help='Maximum number of deliveries to fetch (default: all)'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the delivery records as a JSON array'
    )
    return parser


def format_delivery(delivery: Delivery) -> str:
    courier = delivery.courier.name if delivery.courier and delivery.courier.name else "-"
    eta = delivery.dropoff_eta.isoformat() if delivery.dropoff_eta else "-"
    return f"{delivery.id}\t{delivery.status}\t{courier}\t{eta}"


def main(argv: Optional[List[str]] = None, transport: Optional[httpx.BaseTransport] = None) -> int:
    """Main script execution."""
    args = build_parser().parse_args(argv)

    if args.limit < 0 and args.limit != ALL_DELIVERIES:
        print("--limit must be non-negative", file=sys.stderr)
        return 2

    try:
        client = PostmatesClient.from_settings(settings, transport=transport)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        with client:
            deliveries = client.get_deliveries(args.filter, args.limit)
    except PostmatesAPIError as e:
        print(str(e), file=sys.stderr)
        return 1
    except httpx.TransportError as e:
        print(f"Request failed: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([d.model_dump(mode="json") for d in deliveries], indent=2))
    else:
        for delivery in deliveries:
            print(format_delivery(delivery))
    return 0


if __name__ == "__main__":
    sys.exit(main())
