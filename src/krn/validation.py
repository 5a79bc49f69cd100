r"""
KRN Lexical Validators
======================
Predicates for the three token classes of a KRN, plus a converter that
turns arbitrary text into a usable resource ID.

Token rules:
- resource ID: 1-200 chars of [A-Za-z0-9._-]
               first and last char must be alphanumeric
               Example: iso27001, 5.1.1, PR.AC-1
- version:     v{N}, v{N}.{N}, v{N}.{N}.{N}, latest, draft
- service:     1-63 chars of [a-z0-9-], starts with a letter,
               ends with a letter or digit
               Example: catalog, isms, my-service-123

All predicates are total: they return False for anything that is not a
valid token (including non-string input) and never raise.

Resource IDs are checked with a single pass over the characters rather
than a regex with nested quantifiers, so adversarial input cannot trigger
catastrophic backtracking.
"""

import re
import string

DOMAIN = "kopexa.com"

MAX_RESOURCE_ID_LENGTH = 200
MAX_SERVICE_LENGTH = 63
VERSION_KEYWORDS = ("latest", "draft")

_ALNUM = frozenset(string.ascii_letters + string.digits)
_RESOURCE_ID_CHARS = _ALNUM | frozenset("._-")
_SERVICE_CHARS = frozenset(string.ascii_lowercase + string.digits + "-")
_SERVICE_EDGE_CHARS = frozenset(string.ascii_lowercase + string.digits)

# Quantifiers are separated by literal dots, so matching is linear.
_SEMVER_PATTERN = re.compile(r"v[0-9]+(?:\.[0-9]+){0,2}")

# Underscore is trimmed as well, otherwise "_x" would survive as an invalid ID.
_TRIM_CHARS = "-._"


def is_valid_resource_id(resource_id: str) -> bool:
    """
    Check whether a string is a valid resource ID.

    Args:
        resource_id: Candidate token

    Returns:
        True if 1-200 chars, alphanumeric at both ends, and only
        alphanumeric, '.', '_' or '-' in between
    """
    if not isinstance(resource_id, str):
        return False
    if not resource_id or len(resource_id) > MAX_RESOURCE_ID_LENGTH:
        return False
    if resource_id[0] not in _ALNUM or resource_id[-1] not in _ALNUM:
        return False
    return all(char in _RESOURCE_ID_CHARS for char in resource_id)


def is_valid_version(version: str) -> bool:
    """Check whether a string is a valid version (v1, v1.2, v1.2.3, latest, draft)."""
    if not isinstance(version, str) or not version:
        return False
    if version in VERSION_KEYWORDS:
        return True
    return _SEMVER_PATTERN.fullmatch(version) is not None


def is_valid_service(service: str) -> bool:
    """
    Check whether a string is a valid service label.

    Service labels are lowercase, start with a letter, contain only
    letters, digits and hyphens, and do not end with a hyphen.
    """
    if not isinstance(service, str):
        return False
    if not service or len(service) > MAX_SERVICE_LENGTH:
        return False
    if service[0] not in string.ascii_lowercase:
        return False
    if service[-1] not in _SERVICE_EDGE_CHARS:
        return False
    return all(char in _SERVICE_CHARS for char in service)


def safe_resource_id(text: str) -> str:
    """
    Convert arbitrary text into a valid resource ID.

    Characters outside [A-Za-z0-9._-] become '-', leading and trailing
    '-', '.' and '_' runs are removed and the result is cut to 200
    characters.

    Args:
        text: Any string

    Returns:
        A valid resource ID, or "" when nothing usable remains

    Example:
        safe_resource_id("ISO 27001:2022") -> "ISO-27001-2022"
    """
    if not text:
        return ""

    replaced = "".join(char if char in _RESOURCE_ID_CHARS else "-" for char in text)
    result = replaced.strip(_TRIM_CHARS)

    if len(result) > MAX_RESOURCE_ID_LENGTH:
        result = result[:MAX_RESOURCE_ID_LENGTH].rstrip(_TRIM_CHARS)

    return result
