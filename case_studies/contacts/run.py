"""Contacts — end-to-end SDX demonstration.

Runs a handful of queries against the contacts pod:

  1. a single person by identifier, with emails and postal address
  2. every person in the document, in document order
  3. an organization and its members
  4. partial failure: a missing identifier next to a valid root field
  5. fetch and parse failures on other document locations

Each result is printed as {"data": ..., "errors": [...]}.
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

import asyncio
import json
import logging

import httpx

from .domain import (
    ALICE,
    ACME,
    BROKEN_LOCATION,
    MISSING_LOCATION,
    build_client,
    build_transport,
)


QUERIES = [
    ("Person by id", f"""{{
      person(id: "{ALICE}") {{ id name emails address {{ street city }} }}
    }}""", None),
    ("All people", "{ people { id name address { city } } }", None),
    ("Organization members", f"""{{
      organization(id: "{ACME}") {{ name members {{ name emails }} }}
    }}""", None),
    ("Missing identifier", """{
      nobody: person(id: "http://example.org/people/nobody") { name }
      people { name }
    }""", None),
    ("Malformed document", "{ people { name } }", BROKEN_LOCATION),
    ("Unreachable document", "{ people { name } }", MISSING_LOCATION),
]


def print_header(title: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}")


async def main() -> None:
    async with httpx.AsyncClient(transport=build_transport()) as http_client:
        client = build_client(http_client)
        for title, query, location in QUERIES:
            print_header(title)
            result = await client.query(query, location=location)
            print(json.dumps(result.formatted, indent=2))


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(main())
