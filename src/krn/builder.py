"""
Fluent KRN builder.

Usage:
    from krn import krn

    k = (
        krn()
        .service("catalog")
        .resource("frameworks", "iso27001")
        .resource("controls", "5.1.1")
        .version("v2")
        .build()
    )
    str(k) -> "//catalog.kopexa.com/frameworks/iso27001/controls/5.1.1@v2"

The first invalid input is recorded and every later setter becomes a
no-op; build() raises that first error. A successful build() serializes
the staged fields and parses them again, so a built KRN is identical to
one parsed from its own string.
"""

import logging
from typing import List, Optional

from krn.errors import KRNError
from krn.name import KRN, Segment, format_krn
from krn.validation import is_valid_resource_id, is_valid_service, is_valid_version

logger = logging.getLogger(__name__)


class KRNBuilder:
    """Staging object for assembling a KRN step by step."""

    def __init__(self):
        self._service = ""
        self._segments: List[Segment] = []
        self._version = ""
        self._error: Optional[KRNError] = None

    @property
    def error(self) -> Optional[KRNError]:
        """First error recorded by a setter, if any."""
        return self._error

    def _fail(self, error: KRNError) -> "KRNBuilder":
        logger.debug("KRN builder error: %s", error)
        self._error = error
        return self

    def service(self, service: str) -> "KRNBuilder":
        """Set the service label (optional)."""
        if self._error:
            return self
        if not is_valid_service(service):
            return self._fail(KRNError.invalid_service(service))
        self._service = service
        return self

    def resource(self, collection: str, resource_id: str) -> "KRNBuilder":
        """Append a collection/resource-id pair."""
        if self._error:
            return self
        if not collection:
            return self._fail(KRNError.malformed("collection cannot be empty"))
        if not is_valid_resource_id(resource_id):
            return self._fail(KRNError.invalid_resource_id(resource_id))
        self._segments.append(Segment(collection, resource_id))
        return self

    def version(self, version: str) -> "KRNBuilder":
        """Set the version tag (optional)."""
        if self._error:
            return self
        if not is_valid_version(version):
            return self._fail(KRNError.invalid_version(version))
        self._version = version
        return self

    def build(self) -> KRN:
        """
        Build the KRN.

        Raises:
            KRNError: the first recorded setter error, or MALFORMED_NAME
                when no resource was added
        """
        if self._error:
            raise self._error

        if not self._segments:
            raise KRNError.malformed("must have at least one resource")

        return KRN.parse(format_krn(self._service, self._segments, self._version))

    def try_build(self) -> Optional[KRN]:
        """Build the KRN, returning None instead of raising."""
        try:
            return self.build()
        except KRNError:
            return None


def krn() -> KRNBuilder:
    """Create a new KRN builder."""
    return KRNBuilder()
