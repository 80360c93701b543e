"""Tests for subgraph extraction: closure, ordering, cycles and cancellation."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import threading

import pytest
from rdflib import RDF, BNode, Literal, Namespace

from sdx.errors import ExtractionCancelled
from sdx.extractor import SubgraphExtractor
from sdx.store import QuadStore
from sdx.types import Quad, is_node

EX = Namespace("http://example.org/")
PERSON = str(EX.Person)

ADDRESS = BNode("a1")


def _people() -> list[Quad]:
    return [
        Quad(EX.alice, RDF.type, EX.Person),          # 0
        Quad(EX.alice, EX.name, Literal("Alice")),    # 1
        Quad(EX.alice, EX.address, ADDRESS),          # 2
        Quad(ADDRESS, EX.city, Literal("Springfield")),  # 3
        Quad(EX.bob, RDF.type, EX.Person),            # 4
        Quad(EX.bob, EX.name, Literal("Bob")),        # 5
        Quad(EX.alice, EX.knows, EX.bob),             # 6
        Quad(EX.bob, EX.knows, EX.alice),             # 7
        Quad(EX.acme, RDF.type, EX.Organization),     # 8
        Quad(EX.acme, EX.member, EX.alice),           # 9
    ]


def _assert_closed(result: list[Quad], source: list[Quad]) -> None:
    """Every node object with statements in the source is a subject in result."""
    source_store = QuadStore(source)
    subjects = {q.subject for q in result}
    for quad in result:
        if is_node(quad.object) and source_store.match(quad.object):
            assert quad.object in subjects, f"{quad.object} not expanded"


@pytest.fixture
def extractor():
    return SubgraphExtractor()


class TestExtract:
    def test_depth_first_pre_order(self, extractor):
        q = _people()
        result = extractor.extract(q, PERSON, str(EX.alice))
        assert result == [q[0], q[1], q[2], q[3], q[6], q[4], q[5], q[7]]

    def test_unfiltered_seeds_every_root(self, extractor):
        q = _people()
        result = extractor.extract(q, PERSON)
        assert result == [q[0], q[1], q[2], q[3], q[6], q[4], q[5], q[7]]

    def test_unrelated_subjects_excluded(self, extractor):
        result = extractor.extract(_people(), PERSON)
        assert all(q.subject != EX.acme for q in result)

    def test_blank_nodes_followed(self, extractor):
        result = extractor.extract(_people(), PERSON, str(EX.alice))
        assert Quad(ADDRESS, EX.city, Literal("Springfield")) in result

    def test_identifier_without_match(self, extractor):
        assert extractor.extract(_people(), PERSON, str(EX.missing)) == []

    def test_identifier_of_other_class(self, extractor):
        assert extractor.extract(_people(), PERSON, str(EX.acme)) == []

    def test_unknown_class(self, extractor):
        assert extractor.extract(_people(), str(EX.Unknown)) == []

    def test_accepts_store(self, extractor):
        q = _people()
        assert extractor.extract(QuadStore(q), PERSON) == extractor.extract(q, PERSON)

    def test_literals_terminate(self, extractor):
        q = [
            Quad(EX.a, RDF.type, EX.Thing),
            Quad(EX.a, EX.label, Literal("http://example.org/b")),
            Quad(EX.b, EX.label, Literal("never reached")),
        ]
        assert extractor.extract(q, str(EX.Thing)) == q[:2]


class TestCycles:
    def test_two_node_cycle(self, extractor):
        q = [
            Quad(EX.a, RDF.type, EX.Node),
            Quad(EX.a, EX.knows, EX.b),
            Quad(EX.b, EX.knows, EX.a),
        ]
        result = extractor.extract(q, str(EX.Node), str(EX.a))
        assert result == q

    def test_cycle_between_roots(self, extractor):
        q = [
            Quad(EX.a, RDF.type, EX.Node),
            Quad(EX.a, EX.knows, EX.b),
            Quad(EX.b, RDF.type, EX.Node),
            Quad(EX.b, EX.knows, EX.a),
        ]
        result = extractor.extract(q, str(EX.Node))
        assert set(result) == set(q)
        assert len(result) == len(set(result))

    def test_self_reference(self, extractor):
        q = [Quad(EX.a, RDF.type, EX.Node), Quad(EX.a, EX.same, EX.a)]
        assert extractor.extract(q, str(EX.Node)) == q

    def test_shared_reference_expanded_once(self, extractor):
        q = [
            Quad(EX.a, RDF.type, EX.Node),
            Quad(EX.a, EX.left, EX.c),
            Quad(EX.a, EX.right, EX.c),
            Quad(EX.c, EX.label, Literal("shared")),
        ]
        result = extractor.extract(q, str(EX.Node))
        assert result.count(q[3]) == 1

    def test_long_chain(self, extractor):
        q = [Quad(EX.n0, RDF.type, EX.Node)]
        q += [Quad(EX[f"n{i}"], EX.next, EX[f"n{i + 1}"]) for i in range(5000)]
        result = extractor.extract(q, str(EX.Node))
        assert len(result) == len(q)


class TestProperties:
    def test_purity(self, extractor):
        q = _people()
        assert extractor.extract(q, PERSON, str(EX.bob)) == extractor.extract(q, PERSON, str(EX.bob))

    def test_containment(self, extractor):
        q = _people()
        unfiltered = set(extractor.extract(q, PERSON))
        for person in (EX.alice, EX.bob):
            assert set(extractor.extract(q, PERSON, str(person))) <= unfiltered

    def test_closure(self, extractor):
        q = _people()
        _assert_closed(extractor.extract(q, PERSON), q)
        _assert_closed(extractor.extract(q, str(EX.Organization)), q)

    def test_partition_count(self, extractor):
        q = _people()
        assert len(extractor.extract_all(q, PERSON)) == 2
        assert len(extractor.extract_all(q, str(EX.Organization))) == 1
        assert extractor.extract_all(q, str(EX.Unknown)) == []


class TestExtractAll:
    def test_discovery_order(self, extractor):
        subgraphs = extractor.extract_all(_people(), PERSON)
        assert [s[0].subject for s in subgraphs] == [EX.alice, EX.bob]

    def test_each_matches_filtered_extract(self, extractor):
        q = _people()
        subgraphs = extractor.extract_all(q, PERSON)
        assert subgraphs[0] == extractor.extract(q, PERSON, str(EX.alice))
        assert subgraphs[1] == extractor.extract(q, PERSON, str(EX.bob))

    def test_order_stable_across_pool_sizes(self):
        q = []
        for i in range(50):
            q.append(Quad(EX[f"p{i}"], RDF.type, EX.Person))
            q.append(Quad(EX[f"p{i}"], EX.name, Literal(f"Person {i}")))
        sequential = SubgraphExtractor(max_workers=1).extract_all(q, PERSON)
        pooled = SubgraphExtractor(max_workers=8).extract_all(q, PERSON)
        assert pooled == sequential
        assert [s[0].subject for s in pooled] == [EX[f"p{i}"] for i in range(50)]


class TestCancellation:
    def test_cancelled_extract_raises(self, extractor):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(ExtractionCancelled):
            extractor.extract(_people(), PERSON, cancel=cancel)

    def test_cancelled_extract_all_raises(self):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(ExtractionCancelled):
            SubgraphExtractor(max_workers=4).extract_all(_people(), PERSON, cancel=cancel)

    def test_unset_event_completes(self, extractor):
        q = _people()
        assert extractor.extract(q, PERSON, cancel=threading.Event()) == extractor.extract(q, PERSON)
