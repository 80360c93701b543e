"""Field Resolution Dispatcher — the graphql-core field resolver.

Invoked once per field. ``classify_field`` is a pure function of the
field's parent type, return type and schema metadata; the dispatcher then
runs the matching resolution over the quads handed down as the field's
source:

  ROOT_ENTRY      fetch the document, extract the field's class (id filter)
  LIST_OF_SCALAR  all values of the field's predicate on the enclosing subject
  LIST_OF_OBJECT  one subgraph per instance of the item type
  SINGLE_SCALAR   the enclosing subject's identifier, or its first value
  SINGLE_OBJECT   the subgraph of the return type within the source, or MissingSubject
  UNSPECIFIED     the source itself; the schema lacks field metadata

Subgraphs returned for object fields become the source of their child
fields. Errors raised here become field-level GraphQL errors.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Sequence

from graphql import (
    GraphQLOutputType,
    GraphQLResolveInfo,
    get_named_type,
    get_nullable_type,
    is_leaf_type,
    is_list_type,
    is_non_null_type,
)
from rdflib import URIRef

from .errors import AmbiguousSubject, ConfigurationError, MissingSubject
from .extractor import SubgraphExtractor
from .fetcher import RemoteGraphFetcher
from .metadata import SchemaMetadataIndex
from .store import QuadStore
from .types import RDF_TYPE, UNSPECIFIED, FieldRole, Node, Quad, RoleKind, term_value

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

class FieldCase(Enum):
    ROOT_ENTRY = "root_entry"
    LIST_OF_SCALAR = "list_of_scalar"
    LIST_OF_OBJECT = "list_of_object"
    SINGLE_SCALAR = "single_scalar"
    SINGLE_OBJECT = "single_object"
    UNSPECIFIED = "unspecified"


@dataclass(frozen=True)
class FieldClassification:
    """How one field is resolved.

    type_name is the innermost named return type; many is set when the
    (nullable) return type is a list; required when it is non-null.
    """
    case: FieldCase
    parent_type: str
    field_name: str
    type_name: str
    many: bool = False
    required: bool = False
    role: FieldRole = UNSPECIFIED

    def __repr__(self) -> str:
        shape = f"[{self.type_name}]" if self.many else self.type_name
        return f"{self.case.name}({self.parent_type}.{self.field_name}: {shape}, {self.role!r})"


def classify_field(
    parent_type: Any,
    field_name: str,
    return_type: GraphQLOutputType,
    metadata: SchemaMetadataIndex,
) -> FieldClassification:
    """Classify a field by return-type shape and parent-type role."""
    parent = parent_type if isinstance(parent_type, str) else get_named_type(parent_type).name
    named = get_named_type(return_type)
    many = is_list_type(get_nullable_type(return_type))
    role = metadata.role(parent, field_name)

    if metadata.is_root_type(parent):
        case = FieldCase.ROOT_ENTRY
    elif is_leaf_type(named):
        if many:
            case = FieldCase.LIST_OF_SCALAR if role.kind == RoleKind.PROPERTY else FieldCase.UNSPECIFIED
        elif role.kind == RoleKind.UNSPECIFIED:
            case = FieldCase.UNSPECIFIED
        else:
            case = FieldCase.SINGLE_SCALAR
    else:
        case = FieldCase.LIST_OF_OBJECT if many else FieldCase.SINGLE_OBJECT

    return FieldClassification(
        case=case,
        parent_type=parent,
        field_name=field_name,
        type_name=named.name,
        many=many,
        required=is_non_null_type(return_type),
        role=role,
    )


# ---------------------------------------------------------------------------
# Contexts
# ---------------------------------------------------------------------------

@dataclass
class QueryContext:
    """Per-query state handed to graphql-core as context_value."""
    location: str | None = None
    cancel: threading.Event | None = None


@dataclass(frozen=True)
class ResolutionContext:
    """The quads visible at one resolution step and its arguments."""
    source: Sequence[Quad]
    classification: FieldClassification
    identifier: str | None = None
    cancel: threading.Event | None = field(default=None, compare=False)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

class FieldResolutionDispatcher:
    """Resolve fields against quads; pass an instance as field_resolver."""

    def __init__(
        self,
        metadata: SchemaMetadataIndex,
        fetcher: RemoteGraphFetcher,
        extractor: SubgraphExtractor | None = None,
        store_factory: Callable[[Iterable[Quad]], QuadStore] = QuadStore,
        strict_subjects: bool = False,
    ):
        self.metadata = metadata
        self.fetcher = fetcher
        self.extractor = extractor or SubgraphExtractor(store_factory=store_factory)
        self.store_factory = store_factory
        self.strict_subjects = strict_subjects
        self._handlers = {
            FieldCase.LIST_OF_SCALAR: self._resolve_list_of_scalar,
            FieldCase.LIST_OF_OBJECT: self._resolve_list_of_object,
            FieldCase.SINGLE_SCALAR: self._resolve_single_scalar,
            FieldCase.SINGLE_OBJECT: self._resolve_single_object,
            FieldCase.UNSPECIFIED: self._resolve_unspecified,
        }

    def __call__(self, source: Any, info: GraphQLResolveInfo, **args: Any) -> Any:
        classification = classify_field(
            info.parent_type, info.field_name, info.return_type, self.metadata
        )
        query = info.context if isinstance(info.context, QueryContext) else QueryContext()
        identifier = args.get("id")
        context = ResolutionContext(
            source=() if classification.case == FieldCase.ROOT_ENTRY else (source or ()),
            classification=classification,
            identifier=str(identifier) if identifier is not None else None,
            cancel=query.cancel,
        )
        logger.debug(f"{classification!r} at {'/'.join(map(str, info.path.as_list()))}")

        if classification.case == FieldCase.ROOT_ENTRY:
            return self.resolve_root(context, query.location)
        return self.resolve(context)

    def resolve(self, context: ResolutionContext) -> Any:
        """Resolve a non-root field over the quads in context.source."""
        return self._handlers[context.classification.case](context)

    # -----------------------------------------------------------------------
    # Root entry: the only suspending step
    # -----------------------------------------------------------------------

    async def resolve_root(self, context: ResolutionContext, location: str | None) -> list:
        c = context.classification
        if not location:
            raise ConfigurationError(f"No document location for root field '{c.field_name}'")
        class_iri = self.metadata.class_iri(c.type_name)

        quads = await self.fetcher.fetch(location)
        # Off the event loop so sibling root fields extract concurrently
        subgraph = await asyncio.to_thread(
            self.extractor.extract, quads, class_iri, context.identifier, context.cancel
        )
        if not subgraph and (context.identifier is not None or not c.many):
            raise MissingSubject(class_iri, context.identifier)
        if c.many:
            return await asyncio.to_thread(
                self.extractor.extract_all, subgraph, class_iri, context.cancel
            )
        return subgraph

    # -----------------------------------------------------------------------
    # Scalars
    # -----------------------------------------------------------------------

    def _resolve_list_of_scalar(self, context: ResolutionContext) -> list:
        store = self.store_factory(context.source)
        subject = self._enclosing_subject(store, context.classification)
        predicate = URIRef(context.classification.role.iri)
        return [term_value(o) for o in store.objects(subject, predicate)]

    def _resolve_single_scalar(self, context: ResolutionContext) -> Any:
        c = context.classification
        store = self.store_factory(context.source)
        subject = self._enclosing_subject(store, c)
        if c.role.kind == RoleKind.IDENTIFIER:
            return str(subject)
        values = store.objects(subject, URIRef(c.role.iri))
        return term_value(values[0]) if values else None

    def _enclosing_subject(self, store: QuadStore, c: FieldClassification) -> Node:
        """First instance of the parent's class within the source."""
        class_iri = self.metadata.class_iri(c.parent_type)
        candidates = store.subjects(RDF_TYPE, URIRef(class_iri))
        if not candidates:
            raise MissingSubject(class_iri)
        if len(candidates) > 1:
            if self.strict_subjects:
                raise AmbiguousSubject(class_iri, [str(s) for s in candidates])
            logger.warning(
                f"{len(candidates)} subjects of <{class_iri}> for "
                f"{c.parent_type}.{c.field_name}, using the first in store order: {candidates[0]}"
            )
        return candidates[0]

    # -----------------------------------------------------------------------
    # Objects
    # -----------------------------------------------------------------------

    def _resolve_list_of_object(self, context: ResolutionContext) -> list[list[Quad]]:
        class_iri = self.metadata.class_iri(context.classification.type_name)
        return self.extractor.extract_all(context.source, class_iri, context.cancel)

    def _resolve_single_object(self, context: ResolutionContext) -> list[Quad]:
        class_iri = self.metadata.class_iri(context.classification.type_name)
        subgraph = self.extractor.extract(context.source, class_iri, cancel=context.cancel)
        if not subgraph:
            raise MissingSubject(class_iri)
        return subgraph

    def _resolve_unspecified(self, context: ResolutionContext) -> Any:
        c = context.classification
        logger.error(
            f"Field {c.parent_type}.{c.field_name} has no @identifier or @property "
            f"metadata; returning its source unchanged"
        )
        return context.source
