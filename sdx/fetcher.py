"""Remote Graph Fetcher — one HTTP retrieval and one parse per call.

The document syntax is negotiated through the Accept header and chosen
from the response media type, then the location's file extension, then
Turtle. Triple syntaxes are returned in the order the parser emits
statements, duplicates included. Quad syntaxes (N-Quads, TriG) carry their
named graph on each quad.

Nothing is retried or cached: a failed fetch surfaces as FetchError and a
malformed document as ParseError.
"""

from __future__ import annotations

import logging
from urllib.parse import urlparse

import httpx
from rdflib import Dataset, Graph
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID
from rdflib.util import guess_format

from .config import DEFAULT_ACCEPT, SdxConfig
from .errors import FetchError, ParseError
from .types import Quad

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Syntax negotiation: media type → rdflib parser name
# ---------------------------------------------------------------------------

_MEDIA_TYPES = {
    "text/turtle": "turtle",
    "application/x-turtle": "turtle",
    "application/n-triples": "nt",
    "application/n-quads": "nquads",
    "application/trig": "trig",
    "application/ld+json": "json-ld",
    "application/json": "json-ld",
    "application/rdf+xml": "xml",
    "text/n3": "n3",
}

QUAD_FORMATS = frozenset({"nquads", "trig"})

DEFAULT_FORMAT = "turtle"


def negotiate_format(content_type: str | None, location: str = "") -> str:
    """Pick the rdflib parser for a response."""
    if content_type:
        media_type = content_type.split(";", 1)[0].strip().lower()
        if media_type in _MEDIA_TYPES:
            return _MEDIA_TYPES[media_type]
    path = urlparse(location).path
    return guess_format(path) or DEFAULT_FORMAT


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class _OrderedSink(Graph):
    """Graph that records statements in the order the parser adds them."""

    def __init__(self) -> None:
        super().__init__()
        self.statements: list[tuple] = []

    def add(self, triple):
        self.statements.append(triple)
        return super().add(triple)


def parse_quads(data: str, format: str = DEFAULT_FORMAT, location: str = "") -> list[Quad]:
    """Parse an RDF document into a quad sequence.

    Raises ParseError when the document is malformed for the given syntax.
    """
    public_id = location or None
    try:
        if format in QUAD_FORMATS:
            dataset = Dataset()
            dataset.parse(data=data, format=format, publicID=public_id)
            return [Quad(s, p, o, _graph_name(g)) for s, p, o, g in dataset.quads()]

        sink = _OrderedSink()
        sink.parse(data=data, format=format, publicID=public_id)
    except Exception as e:
        logger.error(f"Failed to parse {location or 'document'} as {format}: {e}")
        raise ParseError(location, format, str(e)) from e

    # Parsers that write through a separate store bypass the sink
    statements = sink.statements or list(sink)
    return [Quad(s, p, o) for s, p, o in statements]


def _graph_name(graph):
    identifier = getattr(graph, "identifier", graph)
    if identifier is None or identifier == DATASET_DEFAULT_GRAPH_ID:
        return None
    return identifier


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------

class RemoteGraphFetcher:
    """Fetch and parse one RDF document per call.

    A client passed in is reused and left open; without one a client is
    created for each fetch and closed afterwards.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = 30.0,
        accept: str = DEFAULT_ACCEPT,
    ):
        self.client = client
        self.timeout = timeout
        self.accept = accept

    @classmethod
    def from_config(cls, config: SdxConfig, client: httpx.AsyncClient | None = None) -> RemoteGraphFetcher:
        return cls(client, timeout=config.timeout, accept=config.accept)

    async def fetch(self, location: str) -> list[Quad]:
        logger.info(f"Fetching RDF document {location}")
        try:
            if self.client is not None:
                response = await self._get(self.client, location)
            else:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    response = await self._get(client, location)
        except httpx.HTTPStatusError as e:
            logger.error(f"Fetching {location} returned HTTP {e.response.status_code}")
            raise FetchError(location, f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Failed to fetch {location}: {e}")
            raise FetchError(location, str(e) or type(e).__name__) from e

        format = negotiate_format(response.headers.get("content-type"), location)
        quads = parse_quads(response.text, format, location)
        logger.info(f"Parsed {len(quads)} quads from {location} ({format})")
        return quads

    async def _get(self, client: httpx.AsyncClient, location: str) -> httpx.Response:
        response = await client.get(location, headers={"Accept": self.accept})
        response.raise_for_status()
        return response
