"""Schema Metadata Index — static side table from schema elements to RDF.

Built once when a schema is loaded. Every output type and field is walked
and its metadata read:

  @is(class: "<IRI>")        type represents the RDF class <IRI>
  @identifier                field returns the entity's own subject IRI
  @property(iri: "<IRI>")    field returns object value(s) of predicate <IRI>

Metadata is taken from SDL directives on the schema's AST nodes, or, for
schemas built in code, from ``extensions={"directives": {...}}`` using the
same directive names and arguments. After construction every lookup is a
plain dictionary read.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from graphql import (
    GraphQLNamedType,
    GraphQLSchema,
    GraphQLType,
    build_schema,
    get_named_type,
    is_interface_type,
    is_object_type,
)
from graphql.execution.values import get_directive_values

from .errors import MissingClassMetadata
from .types import UNSPECIFIED, ClassDescriptor, FieldDescriptor, FieldRole

logger = logging.getLogger(__name__)


IS = "is"
IDENTIFIER = "identifier"
PROPERTY = "property"

SDX_DIRECTIVES = {
    IS: "directive @is(class: String!) on OBJECT | INTERFACE",
    IDENTIFIER: "directive @identifier on FIELD_DEFINITION",
    PROPERTY: "directive @property(iri: String!) on FIELD_DEFINITION",
}


def build_sdx_schema(sdl: str, **kwargs: Any) -> GraphQLSchema:
    """Build a schema from SDL, declaring the SDX directives when absent."""
    missing = [
        declaration for name, declaration in SDX_DIRECTIVES.items()
        if not re.search(rf"directive\s+@{name}\b", sdl)
    ]
    return build_schema("\n".join([*missing, sdl]), **kwargs)


class SchemaMetadataIndex:
    """ClassDescriptor and FieldDescriptor maps for one schema."""

    def __init__(self, schema: GraphQLSchema):
        self.schema = schema
        self.classes: dict[str, ClassDescriptor] = {}
        self.fields: dict[tuple[str, str], FieldDescriptor] = {}
        self.root_type_names = frozenset(
            t.name for t in (schema.query_type, schema.mutation_type, schema.subscription_type)
            if t is not None
        )
        self._build()

    # -----------------------------------------------------------------------
    # Construction
    # -----------------------------------------------------------------------

    def _build(self) -> None:
        for name, type_ in self.schema.type_map.items():
            if name.startswith("__"):
                continue
            if not (is_object_type(type_) or is_interface_type(type_)):
                continue

            directives = self._read_directives(type_)
            class_iri = (directives.get(IS) or {}).get("class")
            if class_iri:
                self.classes[name] = ClassDescriptor(name, class_iri)

            for field_name, field in type_.fields.items():
                role = _role_from(self._read_directives(field))
                self.fields[(name, field_name)] = FieldDescriptor(name, field_name, role)

        logger.debug(
            f"Indexed {len(self.classes)} classes and {len(self.fields)} fields"
        )

    def _read_directives(self, element: Any) -> dict[str, dict[str, Any]]:
        """Collect directive arguments from extensions and AST nodes."""
        extensions = getattr(element, "extensions", None) or {}
        found: dict[str, dict[str, Any]] = {
            name: dict(args) if isinstance(args, dict) else {}
            for name, args in (extensions.get("directives") or {}).items()
        }

        nodes = [getattr(element, "ast_node", None)]
        nodes.extend(getattr(element, "extension_ast_nodes", None) or ())
        for name in SDX_DIRECTIVES:
            directive = self.schema.get_directive(name)
            if directive is None:
                continue
            for node in nodes:
                if node is None:
                    continue
                values = get_directive_values(directive, node)
                if values is not None:
                    found[name] = values
        return found

    # -----------------------------------------------------------------------
    # Lookups
    # -----------------------------------------------------------------------

    def has_class(self, type_: str | GraphQLType) -> bool:
        return _type_name(type_) in self.classes

    def class_iri(self, type_: str | GraphQLType) -> str:
        """Return the class IRI of a type, peeling list and non-null wrappers."""
        name = _type_name(type_)
        descriptor = self.classes.get(name)
        if descriptor is None:
            raise MissingClassMetadata(name)
        return descriptor.class_iri

    def role(self, type_: str | GraphQLType, field_name: str) -> FieldRole:
        descriptor = self.fields.get((_type_name(type_), field_name))
        return descriptor.role if descriptor is not None else UNSPECIFIED

    def is_root_type(self, type_: str | GraphQLType) -> bool:
        return _type_name(type_) in self.root_type_names

    def unmapped_types(self) -> list[str]:
        """Non-root object and interface types without a class IRI."""
        return [
            name for name, type_ in self.schema.type_map.items()
            if not name.startswith("__")
            and (is_object_type(type_) or is_interface_type(type_))
            and not self.is_root_type(name)
            and not self.has_class(name)
        ]

    def __repr__(self) -> str:
        return (
            f"SchemaMetadataIndex("
            f"{len(self.classes)} classes, "
            f"{len(self.fields)} fields)"
        )


def _type_name(type_: str | GraphQLType) -> str:
    if isinstance(type_, str):
        return type_
    named: GraphQLNamedType = get_named_type(type_)
    return named.name


def _role_from(directives: dict[str, dict[str, Any]]) -> FieldRole:
    if IDENTIFIER in directives:
        return FieldRole.identifier()
    iri = (directives.get(PROPERTY) or {}).get("iri")
    if iri:
        return FieldRole.of_property(iri)
    return UNSPECIFIED
