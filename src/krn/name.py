r"""
Kopexa Resource Names
=====================
Parsing, canonical serialization and derivation of KRNs.

KRN Format:
    //kopexa.com/{collection}/{resource-id}[/{collection}/{resource-id}]...[@{version}]
    //{service}.kopexa.com/{collection}/{resource-id}[/{collection}/{resource-id}]...[@{version}]

Examples:
    //kopexa.com/frameworks/iso27001
    //kopexa.com/frameworks/iso27001/controls/5.1.1
    //catalog.kopexa.com/frameworks/iso27001
    //isms.kopexa.com/tenants/acme-corp/workspaces/main
    //kopexa.com/frameworks/iso27001/controls/5.1.1@v2

Usage:
    from krn import KRN

    k = KRN.parse("//catalog.kopexa.com/frameworks/iso27001/controls/5.1.1@v2")
    k.service                    # "catalog"
    k.resource_id("frameworks")  # "iso27001"
    str(k.parent())              # "//catalog.kopexa.com/frameworks/iso27001"
    str(k.child("evidences", "ev-1"))

A KRN is immutable; every derivation returns a new instance.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from krn.errors import KRNError
from krn.validation import (
    DOMAIN,
    is_valid_resource_id,
    is_valid_service,
    is_valid_version,
)

logger = logging.getLogger(__name__)

PREFIX = "//"
VERSION_SEPARATOR = "@"
PATH_SEPARATOR = "/"


@dataclass(frozen=True)
class Segment:
    """One collection/resource-id pair in a KRN path."""

    collection: str
    resource_id: str

    def __str__(self) -> str:
        return f"{self.collection}/{self.resource_id}"

    def to_dict(self) -> Dict[str, str]:
        return {"collection": self.collection, "resource_id": self.resource_id}


def format_krn(service: str, segments: Iterable[Segment], version: str) -> str:
    """Render the canonical string form from raw fields."""
    parts = [PREFIX]
    if service:
        parts.append(f"{service}.")
    parts.append(DOMAIN)
    for segment in segments:
        parts.append(f"/{segment.collection}/{segment.resource_id}")
    if version:
        parts.append(f"{VERSION_SEPARATOR}{version}")
    return "".join(parts)


def _check_segment(collection: str, resource_id: str) -> None:
    if not collection:
        raise KRNError.malformed("collection cannot be empty")
    # '/' splits pairs and '@' starts the version, so either would change
    # what the serialized name parses back to
    for separator in (PATH_SEPARATOR, VERSION_SEPARATOR):
        if separator in collection:
            raise KRNError.malformed(
                f"collection cannot contain {separator!r}: {collection}", collection
            )
    if not is_valid_resource_id(resource_id):
        raise KRNError.invalid_resource_id(resource_id)


class KRN:
    """
    A parsed Kopexa Resource Name.

    Attributes:
        service: Service label, or "" when the KRN has no service
        version: Version tag, or "" when the KRN is unversioned
    """

    __slots__ = ("_service", "_segments", "_version", "_str")

    def __init__(
        self,
        service: str = "",
        segments: Iterable[Segment] = (),
        version: str = "",
    ):
        """
        Build a KRN from already-split fields.

        Every field is validated; prefer KRN.parse() or the builder for
        string input.

        Raises:
            KRNError: if any field violates the KRN grammar
        """
        segments = tuple(segments)
        if not segments:
            raise KRNError.malformed("must have at least one resource")
        for segment in segments:
            _check_segment(segment.collection, segment.resource_id)
        if service and not is_valid_service(service):
            raise KRNError.invalid_service(service)
        if version and not is_valid_version(version):
            raise KRNError.invalid_version(version)
        self._init(service, segments, version)

    def _init(self, service: str, segments: Tuple[Segment, ...], version: str) -> None:
        object.__setattr__(self, "_service", service)
        object.__setattr__(self, "_segments", segments)
        object.__setattr__(self, "_version", version)
        object.__setattr__(self, "_str", format_krn(service, segments, version))

    @classmethod
    def _trusted(cls, service: str, segments: Tuple[Segment, ...], version: str) -> "KRN":
        """Create a KRN from fields the caller has already validated."""
        instance = cls.__new__(cls)
        instance._init(service, segments, version)
        return instance

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> "KRN":
        """
        Parse a KRN string.

        Args:
            text: KRN in wire format

        Returns:
            The parsed KRN

        Raises:
            KRNError: EMPTY_INPUT, MALFORMED_NAME, INVALID_AUTHORITY,
                INVALID_RESOURCE_ID or INVALID_VERSION

        Example:
            KRN.parse("//kopexa.com/frameworks/iso27001").basename() -> "iso27001"
        """
        if not text:
            raise KRNError.empty_input()

        if not text.startswith(PREFIX):
            raise KRNError.malformed("must start with //", text)

        remainder = text[len(PREFIX):]

        # Rightmost '@' introduces the version; no other field may contain one
        version = ""
        at_index = remainder.rfind(VERSION_SEPARATOR)
        if at_index != -1:
            version = remainder[at_index + 1:]
            remainder = remainder[:at_index]
            if not is_valid_version(version):
                raise KRNError.invalid_version(version)

        parts = remainder.split(PATH_SEPARATOR)
        if len(parts) < 3:
            raise KRNError.malformed("must have at least domain/collection/id", text)

        service = cls._parse_authority(parts[0])

        resource_path = parts[1:]
        if len(resource_path) % 2 != 0:
            raise KRNError.malformed("resource path must be pairs of collection/id", text)

        segments = []
        for index in range(0, len(resource_path), 2):
            collection = resource_path[index]
            resource_id = resource_path[index + 1]
            if not collection:
                raise KRNError.malformed("empty collection name", text)
            if not is_valid_resource_id(resource_id):
                raise KRNError.invalid_resource_id(resource_id)
            segments.append(Segment(collection, resource_id))

        return cls._trusted(service, tuple(segments), version)

    @staticmethod
    def _parse_authority(authority: str) -> str:
        """Return the service encoded in the authority label ("" for none)."""
        if authority == DOMAIN:
            return ""

        suffix = f".{DOMAIN}"
        if authority.endswith(suffix):
            service = authority[:-len(suffix)]
            if not is_valid_service(service):
                raise KRNError.invalid_service(service)
            return service

        raise KRNError.invalid_authority(authority)

    @classmethod
    def try_parse(cls, text: str) -> Optional["KRN"]:
        """Parse a KRN string, returning None instead of raising."""
        try:
            return cls.parse(text)
        except KRNError as e:
            logger.debug("Not a KRN %r: %s", text, e)
            return None

    @classmethod
    def is_valid(cls, text: str) -> bool:
        """Check whether a string is a valid KRN."""
        return cls.try_parse(text) is not None

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        return self._str

    def to_string(self) -> str:
        """Canonical string form; inverse of parse()."""
        return self._str

    def __repr__(self) -> str:
        return f"KRN({self._str!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary for YAML/JSON output."""
        return {
            "krn": self._str,
            "service": self._service,
            "version": self._version,
            "full_domain": self.full_domain(),
            "path": self.path(),
            "depth": self.depth(),
            "segments": [segment.to_dict() for segment in self._segments],
        }

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def service(self) -> str:
        return self._service

    @property
    def version(self) -> str:
        return self._version

    def has_service(self) -> bool:
        return self._service != ""

    def has_version(self) -> bool:
        return self._version != ""

    def full_domain(self) -> str:
        """Domain including the service label, e.g. catalog.kopexa.com."""
        if self._service:
            return f"{self._service}.{DOMAIN}"
        return DOMAIN

    def path(self) -> str:
        """Resource path without domain and version."""
        return PATH_SEPARATOR.join(str(segment) for segment in self._segments)

    def relative_resource_name(self) -> str:
        """Alias for path()."""
        return self.path()

    def resource_id(self, collection: str) -> str:
        """
        Get the resource ID of the first segment in a collection.

        Raises:
            KRNError: RESOURCE_NOT_FOUND if no segment matches
        """
        for segment in self._segments:
            if segment.collection == collection:
                return segment.resource_id
        raise KRNError.resource_not_found(collection)

    def try_resource_id(self, collection: str) -> Optional[str]:
        try:
            return self.resource_id(collection)
        except KRNError:
            return None

    def has_resource(self, collection: str) -> bool:
        return any(segment.collection == collection for segment in self._segments)

    def basename(self) -> str:
        """Resource ID of the last segment."""
        if not self._segments:
            return ""
        return self._segments[-1].resource_id

    def basename_collection(self) -> str:
        """Collection of the last segment."""
        if not self._segments:
            return ""
        return self._segments[-1].collection

    def segments(self) -> List[Segment]:
        """Copy of the segment list, outermost first."""
        return list(self._segments)

    def depth(self) -> int:
        return len(self._segments)

    # -------------------------------------------------------------------------
    # Derivation
    # -------------------------------------------------------------------------

    def parent(self) -> Optional["KRN"]:
        """
        KRN without the last segment, or None for a root resource.

        The parent keeps the service but never the version.
        """
        if len(self._segments) <= 1:
            return None
        return self._trusted(self._service, self._segments[:-1], "")

    def child(self, collection: str, resource_id: str) -> "KRN":
        """
        Append a segment.

        The child keeps the service but never the version.

        Raises:
            KRNError: MALFORMED_NAME for an empty collection or one
                containing "/" or "@",
                INVALID_RESOURCE_ID for an invalid resource ID
        """
        _check_segment(collection, resource_id)
        return self._trusted(
            self._service,
            self._segments + (Segment(collection, resource_id),),
            "",
        )

    def with_version(self, version: str) -> "KRN":
        """
        Copy with the version replaced.

        Raises:
            KRNError: INVALID_VERSION
        """
        if not is_valid_version(version):
            raise KRNError.invalid_version(version)
        return self._trusted(self._service, self._segments, version)

    def without_version(self) -> "KRN":
        return self._trusted(self._service, self._segments, "")

    def with_service(self, service: str) -> "KRN":
        """
        Copy with the service replaced.

        Raises:
            KRNError: INVALID_AUTHORITY
        """
        if not is_valid_service(service):
            raise KRNError.invalid_service(service)
        return self._trusted(service, self._segments, self._version)

    def without_service(self) -> "KRN":
        return self._trusted("", self._segments, self._version)

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def equals(self, other: Optional["KRN"]) -> bool:
        """True if both KRNs have the same canonical form."""
        if other is None:
            return False
        return self._str == str(other)

    def equals_string(self, other: str) -> bool:
        """True if other parses to a KRN with the same canonical form."""
        other_krn = KRN.try_parse(other)
        return other_krn is not None and self.equals(other_krn)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KRN):
            return NotImplemented
        return self._str == other._str

    def __hash__(self) -> int:
        return hash(self._str)

    def __reduce__(self):
        return (KRN.parse, (self._str,))


def get_resource(krn_string: str, collection: str) -> str:
    """
    Extract one resource ID straight from a KRN string.

    Raises:
        KRNError: if the KRN is invalid or the collection is not present

    Example:
        get_resource("//kopexa.com/frameworks/iso27001", "frameworks") -> "iso27001"
    """
    return KRN.parse(krn_string).resource_id(collection)
