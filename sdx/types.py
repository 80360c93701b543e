"""Core types for SDX — terms, quads and schema descriptors.

Terms are rdflib terms:

  NamedNode  = rdflib.URIRef
  BlankNode  = rdflib.BNode  (scoped to one parsed document)
  Literal    = rdflib.Literal (lexical value, datatype IRI, language tag)

A Quad is (subject, predicate, object, graph) where graph is None for
statements in the default graph.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Union

from rdflib import RDF, BNode, Literal, URIRef


Node = Union[URIRef, BNode]
Term = Union[URIRef, BNode, Literal]

# Class membership predicate
RDF_TYPE = RDF.type


# ---------------------------------------------------------------------------
# Quad
# ---------------------------------------------------------------------------

class Quad(NamedTuple):
    """A subject–predicate–object statement plus optional named graph."""
    subject: Node
    predicate: URIRef
    object: Term
    graph: URIRef | None = None

    def __repr__(self) -> str:
        graph = f" @{self.graph.n3()}" if self.graph is not None else ""
        return f"Quad({self.subject.n3()} {self.predicate.n3()} {self.object.n3()}{graph})"


def is_node(term: object) -> bool:
    """True for terms that can be expanded as subjects (named or blank)."""
    return isinstance(term, (URIRef, BNode))


def term_value(term: Term) -> object:
    """Return the scalar value of a term.

    Named and blank nodes yield their identifier string. Literals yield
    their Python value when it is a plain scalar, otherwise the lexical form.
    """
    if isinstance(term, Literal):
        value = term.toPython()
        if isinstance(value, (str, int, float, bool)):
            return value
        return str(term)
    return str(term)


# ---------------------------------------------------------------------------
# ClassDescriptor — schema type → RDF class
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ClassDescriptor:
    """A schema type annotated as representing an RDF class."""
    type_name: str
    class_iri: str

    def __repr__(self) -> str:
        return f"Class({self.type_name} = <{self.class_iri}>)"


# ---------------------------------------------------------------------------
# FieldRole / FieldDescriptor — schema field → predicate or identifier
# ---------------------------------------------------------------------------

class RoleKind(Enum):
    """What a field returns relative to its enclosing subject."""
    IDENTIFIER = "identifier"
    PROPERTY = "property"
    UNSPECIFIED = "unspecified"


@dataclass(frozen=True)
class FieldRole:
    kind: RoleKind
    iri: str | None = None

    @staticmethod
    def identifier() -> FieldRole:
        return FieldRole(RoleKind.IDENTIFIER)

    @staticmethod
    def of_property(iri: str) -> FieldRole:
        return FieldRole(RoleKind.PROPERTY, iri)

    def __repr__(self) -> str:
        if self.kind == RoleKind.PROPERTY:
            return f"Property(<{self.iri}>)"
        return self.kind.value.capitalize()


UNSPECIFIED = FieldRole(RoleKind.UNSPECIFIED)


@dataclass(frozen=True)
class FieldDescriptor:
    """A schema field and the role its metadata assigns to it."""
    type_name: str
    field_name: str
    role: FieldRole = UNSPECIFIED

    def __repr__(self) -> str:
        return f"Field({self.type_name}.{self.field_name}: {self.role!r})"
