"""Quad Store — in-memory ordered quad collection with wildcard lookups.

Quads are kept in insertion order with duplicates preserved. Lookups take
None as a wildcard in any position and always answer in store order.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Iterator

from .types import Node, Quad, Term


class QuadStore:
    """An ordered quad sequence indexed by subject and by predicate."""

    def __init__(self, quads: Iterable[tuple] = ()):
        self._quads: list[Quad] = []
        # Positions per key, ascending
        self._by_subject: dict[Node, list[int]] = defaultdict(list)
        self._by_predicate: dict[Term, list[int]] = defaultdict(list)
        self.add(quads)

    # -----------------------------------------------------------------------
    # Builder API
    # -----------------------------------------------------------------------

    def add(self, quads: Iterable[tuple]) -> None:
        """Append quads (or plain triples) to the store."""
        for statement in quads:
            quad = statement if isinstance(statement, Quad) else Quad(*statement)
            position = len(self._quads)
            self._quads.append(quad)
            self._by_subject[quad.subject].append(position)
            self._by_predicate[quad.predicate].append(position)

    # -----------------------------------------------------------------------
    # Pattern lookups
    # -----------------------------------------------------------------------

    def match(
        self,
        subject: Node | None = None,
        predicate: Term | None = None,
        object: Term | None = None,
        graph: Term | None = None,
    ) -> list[Quad]:
        """Return the quads matching the pattern, in store order."""
        if subject is not None:
            candidates: Iterable[Quad] = (
                self._quads[i] for i in self._by_subject.get(subject, ())
            )
        elif predicate is not None:
            candidates = (self._quads[i] for i in self._by_predicate.get(predicate, ()))
        else:
            candidates = self._quads

        return [
            quad for quad in candidates
            if (subject is None or quad.subject == subject)
            and (predicate is None or quad.predicate == predicate)
            and (object is None or quad.object == object)
            and (graph is None or quad.graph == graph)
        ]

    def subjects(
        self,
        predicate: Term | None = None,
        object: Term | None = None,
        graph: Term | None = None,
    ) -> list[Node]:
        """Return the distinct matching subjects, in first-occurrence order."""
        found = dict.fromkeys(q.subject for q in self.match(None, predicate, object, graph))
        return list(found)

    def objects(
        self,
        subject: Node | None = None,
        predicate: Term | None = None,
        graph: Term | None = None,
    ) -> list[Term]:
        """Return the matching objects, in store order."""
        return [q.object for q in self.match(subject, predicate, None, graph)]

    def group_by_subject(self) -> dict[Node, list[Quad]]:
        """Return the quads grouped per subject, subjects in store order."""
        groups: dict[Node, list[Quad]] = {}
        for quad in self._quads:
            groups.setdefault(quad.subject, []).append(quad)
        return groups

    def __len__(self) -> int:
        return len(self._quads)

    def __iter__(self) -> Iterator[Quad]:
        return iter(self._quads)

    def __contains__(self, statement: object) -> bool:
        if not isinstance(statement, tuple) or len(statement) not in (3, 4):
            return False
        return bool(self.match(*statement))

    def __repr__(self) -> str:
        return f"QuadStore({len(self._quads)} quads, {len(self._by_subject)} subjects)"


def format_quads(quads: Iterable[Quad], title: str = "") -> str:
    """Render quads grouped by subject, one statement per line, for logging."""
    lines = [f"--- {title} ---"] if title else []
    for subject, group in QuadStore(quads).group_by_subject().items():
        lines.append(subject.n3())
        for quad in group:
            lines.append(f"    {quad.predicate.n3()} {quad.object.n3()}")
    return "\n".join(lines)
