"""
Kopexa Resource Names (KRN).

    //[{service}.]kopexa.com/{collection}/{resource-id}[/{collection}/{resource-id}]...[@{version}]
"""

from krn.builder import KRNBuilder, krn
from krn.errors import KRNError, KRNErrorCode
from krn.name import KRN, Segment, get_resource
from krn.validation import (
    DOMAIN,
    MAX_RESOURCE_ID_LENGTH,
    is_valid_resource_id,
    is_valid_service,
    is_valid_version,
    safe_resource_id,
)

__version__ = "0.1.0"

__all__ = [
    "DOMAIN",
    "MAX_RESOURCE_ID_LENGTH",
    "KRN",
    "KRNBuilder",
    "KRNError",
    "KRNErrorCode",
    "Segment",
    "get_resource",
    "is_valid_resource_id",
    "is_valid_service",
    "is_valid_version",
    "krn",
    "safe_resource_id",
]
