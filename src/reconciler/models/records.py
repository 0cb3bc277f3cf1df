"""Records produced by read-only lookups.

Every field defaults to None. The resolver only overwrites a field when the
remote payload carries a non-empty value for it, so a record passed in with
known values keeps them when the API omits those fields.
"""

from dataclasses import dataclass, field


@dataclass
class NetworkRecord:
    """A network resolved by name from /networks/{platform} or fetched by ID."""

    id: int | None = None
    name: str | None = None
    type: str | None = None
    platform: str | None = None
    description: str | None = None
    status: str | None = None
    config: str | None = None  # JSON-encoded
    created_at: str | None = None
    updated_at: str | None = None


@dataclass
class KeyProviderRecord:
    """A key provider fetched by ID."""

    id: int | None = None
    name: str | None = None
    type: str | None = None
    status: str | None = None
    config: str | None = None  # JSON-encoded, sensitive
    created_at: str | None = None
    updated_at: str | None = None


@dataclass
class NodeRecord:
    """A node fetched by ID."""

    id: int | None = None
    name: str | None = None
    platform: str | None = None
    type: str | None = None
    status: str | None = None
    config: str | None = None  # JSON-encoded
    created_at: str | None = None
    updated_at: str | None = None


@dataclass
class KeyProviderItem:
    """Entry of a filtered key provider listing."""

    id: str
    name: str
    type: str
    status: str


@dataclass
class KeyProviderListing:
    """Filtered key providers plus the detected default provider."""

    providers: list[KeyProviderItem] = field(default_factory=list)
    default_provider_id: int | None = None
    default_provider_name: str | None = None
    default_provider_type: str | None = None
