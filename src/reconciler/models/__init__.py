"""Data models for resource state and lookup records."""

from .records import (
    KeyProviderItem,
    KeyProviderListing,
    KeyProviderRecord,
    NetworkRecord,
    NodeRecord,
)
from .state import (
    Diagnostic,
    ImportResult,
    JoinNodeSpec,
    JoinNodeState,
    NodeRole,
    ReadResult,
    Severity,
)

__all__ = [
    # State
    "NodeRole",
    "JoinNodeSpec",
    "JoinNodeState",
    "Severity",
    "Diagnostic",
    "ReadResult",
    "ImportResult",
    # Lookup records
    "NetworkRecord",
    "KeyProviderRecord",
    "NodeRecord",
    "KeyProviderItem",
    "KeyProviderListing",
]
