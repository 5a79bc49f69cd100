"""
KRN error taxonomy.

Every fallible KRN operation raises KRNError carrying exactly one
KRNErrorCode. The enum values are the wire codes shared with the other
KRN implementations, so fixture files can compare them directly.
"""

from enum import Enum
from typing import Optional

from krn.validation import DOMAIN


class KRNErrorCode(str, Enum):
    """Closed set of KRN failure classes."""

    EMPTY_INPUT = "EMPTY_KRN"  # input string was empty
    MALFORMED_NAME = "INVALID_KRN"  # prefix, pair count, empty collection
    INVALID_AUTHORITY = "INVALID_DOMAIN"  # domain or service label
    INVALID_RESOURCE_ID = "INVALID_RESOURCE_ID"
    INVALID_VERSION = "INVALID_VERSION"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"


class KRNError(ValueError):
    """
    Raised when a KRN cannot be parsed, built or derived.

    Attributes:
        code: The failure class
        value: The offending token, when there is one
    """

    def __init__(self, code: KRNErrorCode, message: str, value: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.value = value

    def __repr__(self) -> str:
        return f"KRNError({self.code.name}, {self.message!r})"

    def __reduce__(self):
        return (type(self), (self.code, self.message, self.value))

    @classmethod
    def empty_input(cls) -> "KRNError":
        return cls(KRNErrorCode.EMPTY_INPUT, "empty KRN string")

    @classmethod
    def malformed(cls, message: str, value: Optional[str] = None) -> "KRNError":
        return cls(KRNErrorCode.MALFORMED_NAME, message, value)

    @classmethod
    def invalid_authority(cls, authority: str) -> "KRNError":
        return cls(
            KRNErrorCode.INVALID_AUTHORITY,
            f"expected {DOMAIN} or {{service}}.{DOMAIN}, got {authority}",
            authority,
        )

    @classmethod
    def invalid_service(cls, service: str) -> "KRNError":
        return cls(KRNErrorCode.INVALID_AUTHORITY, f"invalid service name: {service}", service)

    @classmethod
    def invalid_resource_id(cls, resource_id: str) -> "KRNError":
        return cls(KRNErrorCode.INVALID_RESOURCE_ID, f"invalid resource ID: {resource_id}", resource_id)

    @classmethod
    def invalid_version(cls, version: str) -> "KRNError":
        return cls(KRNErrorCode.INVALID_VERSION, f"invalid version format: {version}", version)

    @classmethod
    def resource_not_found(cls, collection: str) -> "KRNError":
        return cls(KRNErrorCode.RESOURCE_NOT_FOUND, f"resource not found: {collection}", collection)
