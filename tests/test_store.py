"""Tests for the ordered quad store and its wildcard lookups."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from rdflib import RDF, BNode, Literal, Namespace, URIRef

from sdx.store import QuadStore, format_quads
from sdx.types import Quad

EX = Namespace("http://example.org/")


def _quads() -> list[Quad]:
    return [
        Quad(EX.alice, RDF.type, EX.Person),
        Quad(EX.alice, EX.name, Literal("Alice")),
        Quad(EX.bob, RDF.type, EX.Person),
        Quad(EX.alice, EX.knows, EX.bob),
        Quad(EX.alice, EX.name, Literal("Alice")),
    ]


@pytest.fixture
def store():
    return QuadStore(_quads())


class TestConstruction:
    def test_empty_store(self):
        s = QuadStore()
        assert len(s) == 0
        assert list(s) == []

    def test_order_and_duplicates_preserved(self, store):
        assert len(store) == 5
        assert list(store) == _quads()

    def test_add_appends(self, store):
        store.add([Quad(EX.carol, RDF.type, EX.Person)])
        assert len(store) == 6
        assert list(store)[-1].subject == EX.carol

    def test_plain_triples_become_quads(self):
        s = QuadStore([(EX.a, EX.p, EX.b)])
        quad = list(s)[0]
        assert isinstance(quad, Quad)
        assert quad.graph is None


class TestMatch:
    def test_full_wildcard(self, store):
        assert store.match() == _quads()

    def test_by_subject(self, store):
        quads = _quads()
        assert store.match(EX.alice) == [quads[0], quads[1], quads[3], quads[4]]

    def test_by_predicate(self, store):
        assert len(store.match(None, EX.name)) == 2

    def test_by_object(self, store):
        assert store.match(None, None, EX.bob) == [Quad(EX.alice, EX.knows, EX.bob)]

    def test_by_graph(self):
        s = QuadStore([
            Quad(EX.a, EX.p, EX.b, EX.g1),
            Quad(EX.a, EX.p, EX.c, EX.g2),
        ])
        assert s.match(graph=EX.g1) == [Quad(EX.a, EX.p, EX.b, EX.g1)]
        assert len(s.match()) == 2

    def test_no_match(self, store):
        assert store.match(EX.nobody) == []

    def test_blank_and_named_nodes_are_distinct(self):
        s = QuadStore([Quad(BNode("x"), EX.p, Literal(1))])
        assert s.match(URIRef("x")) == []
        assert len(s.match(BNode("x"))) == 1


class TestSubjectsAndObjects:
    def test_subjects_in_store_order(self, store):
        assert store.subjects(RDF.type, EX.Person) == [EX.alice, EX.bob]

    def test_subjects_are_distinct(self, store):
        assert store.subjects(EX.name) == [EX.alice]

    def test_objects_in_store_order(self, store):
        assert store.objects(EX.alice, EX.name) == [Literal("Alice"), Literal("Alice")]

    def test_objects_of_missing_subject(self, store):
        assert store.objects(EX.nobody, EX.name) == []


class TestHelpers:
    def test_group_by_subject(self, store):
        groups = store.group_by_subject()
        assert list(groups) == [EX.alice, EX.bob]
        assert len(groups[EX.alice]) == 4

    def test_contains(self, store):
        assert (EX.alice, EX.knows, EX.bob) in store
        assert (EX.bob, EX.knows, EX.alice) not in store
        assert "not a quad" not in store

    def test_format_quads(self):
        text = format_quads(_quads(), title="people")
        assert "--- people ---" in text
        assert "<http://example.org/alice>" in text
        assert '"Alice"' in text

    def test_repr(self, store):
        assert repr(store) == "QuadStore(5 quads, 2 subjects)"
