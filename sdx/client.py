"""SDX client — answers GraphQL queries from an RDF document.

Wires the collaborators explicitly: the schema's metadata index, the
fetcher, the extractor and the dispatcher that graphql-core calls for
every field.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any

from graphql import ExecutionResult, GraphQLSchema, graphql

from .config import SdxConfig
from .dispatcher import FieldResolutionDispatcher, QueryContext
from .errors import ConfigurationError
from .extractor import SubgraphExtractor
from .fetcher import RemoteGraphFetcher
from .metadata import SchemaMetadataIndex, build_sdx_schema

logger = logging.getLogger(__name__)


class SdxClient:
    """Query an RDF document through an annotated GraphQL schema.

    Example:
        client = SdxClient(SCHEMA_SDL, "https://pod.example.org/contacts.ttl")
        result = await client.query('{ person(id: "...") { name } }')
        result.formatted  # {"data": ..., "errors": [...]}
    """

    def __init__(
        self,
        schema: GraphQLSchema | str,
        location: str | None = None,
        *,
        config: SdxConfig | None = None,
        fetcher: RemoteGraphFetcher | None = None,
        extractor: SubgraphExtractor | None = None,
    ):
        self.config = config or SdxConfig()
        self.schema = schema if isinstance(schema, GraphQLSchema) else build_sdx_schema(schema)
        self.location = location or self.config.document_location
        self.metadata = SchemaMetadataIndex(self.schema)
        self.fetcher = fetcher or RemoteGraphFetcher.from_config(self.config)
        self.extractor = extractor or SubgraphExtractor(max_workers=self.config.max_workers)
        self.dispatcher = FieldResolutionDispatcher(
            self.metadata,
            self.fetcher,
            self.extractor,
            strict_subjects=self.config.strict_subjects,
        )
        unmapped = self.metadata.unmapped_types()
        if unmapped:
            logger.warning(
                f"Types without @is(class: ...) cannot be resolved from RDF: {', '.join(unmapped)}"
            )
        logger.debug(f"SDX client initialized: {self.metadata!r}, location={self.location}")

    async def query(
        self,
        source: str,
        location: str | None = None,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
        cancel: threading.Event | None = None,
    ) -> ExecutionResult:
        """Execute a query; failing fields are null with a located error."""
        location = location or self.location
        if not location:
            raise ConfigurationError(
                "No document location: pass one to the client or query, "
                "or set SDX_DOCUMENT_LOCATION"
            )

        result = await graphql(
            self.schema,
            source,
            context_value=QueryContext(location=location, cancel=cancel),
            variable_values=variables,
            operation_name=operation_name,
            field_resolver=self.dispatcher,
        )
        if result.errors:
            logger.warning(f"Query against {location} finished with {len(result.errors)} errors")
        return result

    def query_sync(self, source: str, **kwargs: Any) -> ExecutionResult:
        return asyncio.run(self.query(source, **kwargs))
