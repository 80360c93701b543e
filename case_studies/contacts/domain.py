"""Contacts — an annotated schema over a small personal data pod.

Case study: a Solid-style pod publishing people and organizations as
Turtle. The schema maps:

- Person       → schema:Person (name, emails, postal address)
- Address      → schema:PostalAddress (a blank node on the person)
- Organization → schema:Organization (name, members)

The document is served by an in-memory httpx transport so the case study
runs without network access. A second location serves malformed Turtle
and a third does not exist, to exercise fetch and parse failures.
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

import httpx

from sdx.client import SdxClient
from sdx.fetcher import RemoteGraphFetcher


POD = "https://pod.example.org"
CONTACTS_LOCATION = f"{POD}/contacts.ttl"
BROKEN_LOCATION = f"{POD}/broken.ttl"
MISSING_LOCATION = f"{POD}/missing.ttl"

ALICE = "http://example.org/people/alice"
BOB = "http://example.org/people/bob"
ACME = "http://example.org/orgs/acme"


SCHEMA_SDL = """
type Query {
  person(id: ID): Person
  people: [Person!]!
  organization(id: ID): Organization
}

type Person @is(class: "http://schema.org/Person") {
  id: ID! @identifier
  name: String @property(iri: "http://schema.org/name")
  emails: [String!]! @property(iri: "http://schema.org/email")
  address: Address
}

type Address @is(class: "http://schema.org/PostalAddress") {
  street: String @property(iri: "http://schema.org/streetAddress")
  city: String @property(iri: "http://schema.org/addressLocality")
}

type Organization @is(class: "http://schema.org/Organization") {
  id: ID! @identifier
  name: String @property(iri: "http://schema.org/name")
  members: [Person!]!
}
"""


CONTACTS_TURTLE = """
@prefix schema: <http://schema.org/> .
@prefix people: <http://example.org/people/> .
@prefix orgs: <http://example.org/orgs/> .

people:alice a schema:Person ;
    schema:name "Alice Example" ;
    schema:email "alice@example.org", "alice@work.example.org" ;
    schema:address [
        a schema:PostalAddress ;
        schema:streetAddress "1 Main Street" ;
        schema:addressLocality "Springfield"
    ] .

people:bob a schema:Person ;
    schema:name "Bob Example" ;
    schema:email "bob@example.org" .

orgs:acme a schema:Organization ;
    schema:name "ACME" ;
    schema:member people:alice, people:bob .
"""

BROKEN_TURTLE = """
@prefix schema: <http://schema.org/> .
<http://example.org/people/carol> a schema:Person ;
    schema:name "Carol
"""


def build_transport(documents: dict[str, str] | None = None) -> httpx.MockTransport:
    """Serve documents by URL as Turtle; anything else is a 404."""
    if documents is None:
        documents = {CONTACTS_LOCATION: CONTACTS_TURTLE, BROKEN_LOCATION: BROKEN_TURTLE}

    def handler(request: httpx.Request) -> httpx.Response:
        body = documents.get(str(request.url))
        if body is None:
            return httpx.Response(404, text="Not Found")
        return httpx.Response(200, text=body, headers={"content-type": "text/turtle"})

    return httpx.MockTransport(handler)


def build_client(http_client: httpx.AsyncClient, location: str = CONTACTS_LOCATION) -> SdxClient:
    """Build an SDX client whose fetcher goes through http_client."""
    return SdxClient(SCHEMA_SDL, location, fetcher=RemoteGraphFetcher(http_client))
