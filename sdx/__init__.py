"""SDX — GraphQL field resolution over RDF documents.

Fields of an annotated GraphQL schema are answered from the quads of a
remote RDF document. Types carry the RDF class they represent, fields the
predicate they read (or mark the subject identifier):

  type Person @is(class: "http://schema.org/Person") {
    id: ID! @identifier
    name: String @property(iri: "http://schema.org/name")
  }

The package is layered, leaves first:

- types:      rdflib terms, Quad, class and field descriptors
- store:      QuadStore, ordered quads with wildcard lookups
- metadata:   SchemaMetadataIndex, schema → RDF side table
- fetcher:    RemoteGraphFetcher, one HTTP GET and one rdflib parse
- extractor:  SubgraphExtractor, closed subgraphs around class instances
- dispatcher: classify_field and FieldResolutionDispatcher (field resolver)
- client:     SdxClient, explicit wiring and query execution

Requires graphql-core, rdflib and httpx.
"""
