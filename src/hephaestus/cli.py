"""Command line entry point.

Usage examples:
    hephaestus query --table movies --index Status --partition Status=active
    hephaestus query --table movies --index YearGenreIndex --partition year=2020 \\
        --sort genre=Comedy --where '{"conditions": [{"field": "Keywords", "operator": "CONTAINS", "value": "pika"}]}'

Key values are read as JSON when possible (`year=2020` is a number) and as
plain strings otherwise. The `--where` argument is a JSON `Where` tree.
Results are printed as a JSON array.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, List, Optional

from pydantic import ValidationError as PydanticValidationError

from .connection import new_client
from .context import Context
from .engine import DynamoDB
from .exceptions import HephaestusError
from .logger import Logger
from .schema import QueryKeyValue, QueryOptions, Where
from .settings import load_settings
from .utils import deserialize_items, json_default

logger = Logger(__name__)


def parse_key_value(text: str) -> QueryKeyValue:
    """Parse `KEY=VALUE` into a QueryKeyValue."""
    key, sep, raw = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    value: Any
    try:
        value = json.loads(raw)
    except ValueError:
        value = raw
    return QueryKeyValue(key=key, value=value)


def parse_projection(text: str) -> List[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="hephaestus", description="Query DynamoDB secondary indexes")
    parser.add_argument("--env-file", default=".env", help="Settings file to load (default: .env)")
    parser.add_argument("--profile", default=None, help="AWS profile (default: AWS_PROFILE setting)")
    parser.add_argument("--region", default=None, help="AWS region (default: AWS_REGION setting)")

    subparsers = parser.add_subparsers(dest="command", required=True)
    q = subparsers.add_parser("query", help="Query an index and print all matching items")
    q.add_argument("--table", required=True, help="Table name")
    q.add_argument("--index", required=True, help="Secondary index name")
    q.add_argument("--partition", required=True, type=parse_key_value, help="Partition key as KEY=VALUE")
    q.add_argument("--sort", type=parse_key_value, default=None, help="Sort key as KEY=VALUE (equality)")
    q.add_argument("--where", default=None, help="Filter as a JSON Where tree")
    q.add_argument("--limit", type=int, default=None, help="Items per page (default: QUERY_LIMIT setting)")
    q.add_argument("--cursor", default=None, help="Continuation cursor to start from")
    q.add_argument("--projection", type=parse_projection, default=None, help="Comma separated attributes to return")
    q.add_argument("--timeout", type=float, default=None, help="Give up between pages after this many seconds")
    q.add_argument("--raw", action="store_true", help="Print low-level attribute values instead of plain JSON")
    return parser.parse_args(argv)


def run_query(args: argparse.Namespace) -> int:
    settings = load_settings(args.env_file)

    try:
        where = Where.model_validate_json(args.where) if args.where else None
        options = QueryOptions(
            table=args.table,
            index=args.index,
            limit=args.limit if args.limit is not None else settings.QUERY_LIMIT,
            cursor=args.cursor,
            partition=args.partition,
            sort=args.sort,
            where=where,
            projection=args.projection or [],
        )
    except (PydanticValidationError, HephaestusError) as e:
        print(f"error: invalid query: {e}", file=sys.stderr)
        return 2

    ctx = Context.with_timeout(args.timeout) if args.timeout else Context.background()

    try:
        logger.message("Loading...")
        client = new_client(
            region=args.region or settings.AWS_REGION,
            profile=args.profile or settings.AWS_PROFILE,
            endpoint_url=settings.AWS_ENDPOINT_URL,
        )
        logger.message("Querying...")
        items = DynamoDB(client).query(options, ctx=ctx)
    except HephaestusError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    output = items if args.raw else deserialize_items(items)
    print(json.dumps(output, indent=2, default=json_default))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.command == "query":
        return run_query(args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
