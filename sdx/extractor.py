"""Subgraph Extractor — closed subgraphs around instances of a class.

Given quads, a class IRI and an optional identifier, extraction:

  1. finds candidate roots: subjects S with (S, rdf:type, class)
  2. keeps the root whose identifier equals the filter, when one is given
  3. seeds the result with every quad whose subject is a kept root
  4. expands depth-first, pre-order: each named or blank object not yet
     visited contributes all quads having it as subject, expanded in turn
  5. returns the quads in visitation order

Roots start out visited and no subject is expanded twice, so cyclic
graphs terminate and every statement appears once per extraction. The
result is closed: each node object is also a subject in the result,
unless its expansion was skipped because it had already been visited.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Sequence

from rdflib import URIRef

from .errors import ExtractionCancelled
from .store import QuadStore, format_quads
from .types import RDF_TYPE, Node, Quad, is_node

logger = logging.getLogger(__name__)


class SubgraphExtractor:
    """Compute closed subgraphs; pure with respect to its inputs."""

    def __init__(
        self,
        max_workers: int = 4,
        store_factory: Callable[[Iterable[Quad]], QuadStore] = QuadStore,
    ):
        self.max_workers = max_workers
        self.store_factory = store_factory

    def extract(
        self,
        quads: Sequence[Quad] | QuadStore,
        class_iri: str,
        identifier: str | None = None,
        cancel: threading.Event | None = None,
    ) -> list[Quad]:
        """Return the subgraph reachable from instances of class_iri."""
        store = self._store(quads)
        roots = self.roots(store, class_iri)
        if identifier is not None:
            roots = [root for root in roots if str(root) == identifier]
        subgraph = self._closure(store, roots, cancel)
        logger.debug(
            f"Extracted {len(subgraph)} quads for <{class_iri}>"
            + (f" id={identifier}" if identifier is not None else "")
        )
        if subgraph and logger.isEnabledFor(logging.DEBUG):
            logger.debug(format_quads(subgraph, title=f"subgraph of <{class_iri}>"))
        return subgraph

    def extract_all(
        self,
        quads: Sequence[Quad] | QuadStore,
        class_iri: str,
        cancel: threading.Event | None = None,
    ) -> list[list[Quad]]:
        """Return one subgraph per instance of class_iri, in discovery order."""
        store = self._store(quads)
        roots = self.roots(store, class_iri)

        def closure(root: Node) -> list[Quad]:
            return self._closure(store, [root], cancel)

        if self.max_workers <= 1 or len(roots) <= 1:
            return [closure(root) for root in roots]

        # map() yields in submission order whichever worker finishes first
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(roots))) as pool:
            subgraphs = list(pool.map(closure, roots))
        logger.debug(f"Extracted {len(subgraphs)} subgraphs for <{class_iri}>")
        return subgraphs

    @staticmethod
    def roots(store: QuadStore, class_iri: str) -> list[Node]:
        """Candidate roots: subjects typed with class_iri, in store order."""
        return store.subjects(RDF_TYPE, URIRef(class_iri))

    # -----------------------------------------------------------------------
    # Traversal
    # -----------------------------------------------------------------------

    def _store(self, quads: Sequence[Quad] | QuadStore) -> QuadStore:
        if isinstance(quads, QuadStore):
            return quads
        return self.store_factory(quads)

    @staticmethod
    def _closure(
        store: QuadStore,
        roots: list[Node],
        cancel: threading.Event | None,
    ) -> list[Quad]:
        visited: set[Node] = set(roots)
        seed = [quad for root in roots for quad in store.match(root)]

        result: list[Quad] = []
        # Explicit stack of pending quad iterators: pre-order without recursion
        stack = [iter(seed)]
        while stack:
            if cancel is not None and cancel.is_set():
                raise ExtractionCancelled(
                    f"Extraction cancelled after {len(result)} quads"
                )
            quad = next(stack[-1], None)
            if quad is None:
                stack.pop()
                continue
            result.append(quad)
            if is_node(quad.object) and quad.object not in visited:
                visited.add(quad.object)
                stack.append(iter(store.match(quad.object)))
        return result
