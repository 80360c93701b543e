"""Error taxonomy for field resolution.

Every error raised by the resolution engine derives from SdxError. Raised
inside a resolver, graphql-core turns it into a field-level error: the
field resolves to null and the error is reported with its path, leaving
unrelated fields untouched.
"""

from __future__ import annotations


class SdxError(Exception):
    """Base exception for SDX errors."""
    code = "SDX_ERROR"


class ConfigurationError(SdxError):
    """Raised when runtime settings are missing or invalid."""
    code = "CONFIGURATION_ERROR"


class FetchError(SdxError):
    """Transport failure reaching the RDF document."""
    code = "FETCH_ERROR"

    def __init__(self, location: str, reason: str):
        super().__init__(f"Failed to fetch {location}: {reason}")
        self.location = location
        self.reason = reason


class ParseError(SdxError):
    """The fetched document is not valid RDF in the negotiated syntax."""
    code = "PARSE_ERROR"

    def __init__(self, location: str, format: str, reason: str):
        super().__init__(f"Failed to parse {location} as {format}: {reason}")
        self.location = location
        self.format = format
        self.reason = reason


class MissingClassMetadata(SdxError):
    """An output type lacks the class IRI annotation it needs."""
    code = "MISSING_CLASS_METADATA"

    def __init__(self, type_name: str):
        super().__init__(f"Type '{type_name}' has no @is(class: ...) annotation")
        self.type_name = type_name


class MissingSubject(SdxError):
    """No quad asserts the expected class membership within the source."""
    code = "MISSING_SUBJECT"

    def __init__(self, class_iri: str, identifier: str | None = None):
        if identifier is not None:
            message = f"No subject '{identifier}' of class <{class_iri}>"
        else:
            message = f"No subject of class <{class_iri}>"
        super().__init__(message)
        self.class_iri = class_iri
        self.identifier = identifier


class AmbiguousSubject(SdxError):
    """More than one subject matches where exactly one was expected."""
    code = "AMBIGUOUS_SUBJECT"

    def __init__(self, class_iri: str, candidates: list[str]):
        super().__init__(
            f"{len(candidates)} subjects of class <{class_iri}>: "
            f"{', '.join(candidates)}"
        )
        self.class_iri = class_iri
        self.candidates = candidates


class ExtractionCancelled(SdxError):
    """Extraction was aborted by the caller's cancellation signal."""
    code = "EXTRACTION_CANCELLED"
