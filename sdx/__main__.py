"""Run one GraphQL query against an RDF document.

    python -m sdx --schema schema.graphql --query query.graphql \
        --location https://pod.example.org/contacts.ttl

Prints the JSON result ({"data": ..., "errors": [...]}) and exits with
status 1 when the result carries errors.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from graphql import GraphQLError

from .client import SdxClient
from .config import SdxConfig
from .errors import SdxError

logger = logging.getLogger("sdx")


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser for `python -m sdx`."""
    parser = argparse.ArgumentParser(
        prog="sdx",
        description="Answer a GraphQL query from the quads of an RDF document.",
    )
    parser.add_argument("--schema", required=True, help="GraphQL SDL file with @is/@property/@identifier.")
    parser.add_argument("--query", required=True, help="GraphQL query file, or '-' for stdin.")
    parser.add_argument(
        "--location",
        default=None,
        help="RDF document URI (defaults to SDX_DOCUMENT_LOCATION).",
    )
    parser.add_argument("--variables", default=None, help="Query variables as a JSON object.")
    parser.add_argument("--operation", default=None, help="Operation name to run.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = SdxConfig.from_env()
        schema = Path(args.schema).read_text(encoding="utf-8")
        query = sys.stdin.read() if args.query == "-" else Path(args.query).read_text(encoding="utf-8")
        variables = json.loads(args.variables) if args.variables else None
        client = SdxClient(schema, args.location, config=config)
        result = client.query_sync(query, variables=variables, operation_name=args.operation)
    except (SdxError, GraphQLError, OSError, json.JSONDecodeError) as e:
        logger.error(str(e))
        return 2

    print(json.dumps(result.formatted, indent=2))
    return 1 if result.errors else 0


if __name__ == "__main__":
    sys.exit(main())
