"""Read-only lookups against the Chainlaunch API.

ListFilterResolver fetches a collection and resolves one entity by an exact,
case-sensitive match on a selector field. Entities are scanned in the order
the API returns them and the first match wins; the API is not known to
enforce uniqueness for every selector (network names in particular), so a
duplicate value silently resolves to the earliest entry.

Resolved entities are projected into plain records. Projection never writes
an absent or empty remote value over a field, so a record passed in with
previously known values keeps them.
"""

import dataclasses
import json
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..api.client import ChainlaunchClient
from ..api.endpoints import ChainlaunchEndpoints
from ..api.response_models import KeyProvider, Network, NetworkListResponse, Node
from ..constants import (
    DEFAULT_KEY_PROVIDER_NAME,
    DEFAULT_KEY_PROVIDER_TYPE,
    PLATFORM_BESU,
    PLATFORM_FABRIC,
    PLATFORM_LABELS,
    SUPPORTED_PLATFORMS,
    UNKNOWN_STATUS,
)
from ..models.records import (
    KeyProviderItem,
    KeyProviderListing,
    KeyProviderRecord,
    NetworkRecord,
    NodeRecord,
)
from ..utils.exceptions import NotFoundError, ParseError, RemoteError, ValidationError

logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT")


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, dict | list) and not value)


def project(entity: BaseModel, target: RecordT) -> RecordT:
    """
    Copy every non-empty field of a remote entity onto a record.

    Fields are matched by name. Dict/list values are stored JSON-encoded
    with sorted keys. Record fields the entity does not carry, or carries as
    None/""/{}/[], are left as they were.

    Args:
        entity: Parsed API entity
        target: Dataclass record to update in place

    Returns:
        The same target, for chaining.
    """
    for record_field in dataclasses.fields(target):
        value = getattr(entity, record_field.name, None)
        if _is_empty(value):
            continue
        if isinstance(value, dict | list):
            value = json.dumps(value, sort_keys=True, separators=(",", ":"))
        setattr(target, record_field.name, value)
    return target


class ListFilterResolver:
    """Fetch-and-match helper shared by all lookups."""

    def __init__(self, client: ChainlaunchClient) -> None:
        self._client = client

    async def fetch(self, endpoint: str, model: Any, operation: str) -> Any:
        """
        GET an endpoint and parse the body into the given model or type.

        Raises:
            RemoteError: If the request fails.
            ParseError: If the body does not match the model.
        """
        try:
            body = await self._client.get(endpoint)
        except RemoteError as e:
            logger.error(
                "Unable to read from API", operation=operation, endpoint=endpoint, error=str(e)
            )
            raise

        try:
            return TypeAdapter(model).validate_json(body)
        except PydanticValidationError as e:
            raise ParseError(
                f"Unable to parse response for {operation}: {e}",
                operation=operation,
                original_error=e,
            ) from e

    async def resolve(
        self,
        endpoint: str,
        collection_model: type[BaseModel],
        collection_field: str,
        selector_field: str,
        value: Any,
        resource_label: str,
    ) -> BaseModel:
        """
        Resolve one entity of a collection by exact match on a selector field.

        Args:
            endpoint: List endpoint path
            collection_model: Model wrapping the listing
            collection_field: Attribute of the listing holding the entities
            selector_field: Entity attribute compared against value
            value: Selector value (compared with ==, case-sensitive)
            resource_label: Human-readable name used in NotFoundError

        Returns:
            The first matching entity in API order.

        Raises:
            RemoteError, ParseError: On fetch failures.
            NotFoundError: If no entity matches.
        """
        listing = await self.fetch(endpoint, collection_model, f"lookup {resource_label}")
        entities = getattr(listing, collection_field)

        for entity in entities:
            if getattr(entity, selector_field, None) == value:
                logger.debug(
                    "Resolved entity",
                    resource=resource_label,
                    selector=selector_field,
                    value=value,
                    id=getattr(entity, "id", None),
                )
                return entity

        logger.info(
            "Lookup did not resolve",
            resource=resource_label,
            selector=selector_field,
            value=value,
            candidates=len(entities),
        )
        raise NotFoundError(resource_label, selector_field, value)


class ChainlaunchLookups(ListFilterResolver):
    """Read-only lookups for networks, nodes and key providers."""

    async def lookup_network(
        self, platform: str, name: str, target: NetworkRecord | None = None
    ) -> NetworkRecord:
        """
        Resolve a network by name from /networks/{platform}.

        Raises:
            ValidationError: If the platform is not supported.
            NotFoundError: If no network has that name.
        """
        if platform not in SUPPORTED_PLATFORMS:
            raise ValidationError(
                f"Unsupported platform {platform!r}: expected one of "
                f"{', '.join(sorted(SUPPORTED_PLATFORMS))}",
                field="platform",
                value=platform,
            )
        entity = await self.resolve(
            ChainlaunchEndpoints.NETWORKS_BY_PLATFORM.format(platform=platform),
            NetworkListResponse,
            "networks",
            "name",
            name,
            PLATFORM_LABELS[platform],
        )
        return project(entity, target or NetworkRecord())

    async def lookup_fabric_network(
        self, name: str, target: NetworkRecord | None = None
    ) -> NetworkRecord:
        return await self.lookup_network(PLATFORM_FABRIC, name, target)

    async def lookup_besu_network(
        self, name: str, target: NetworkRecord | None = None
    ) -> NetworkRecord:
        return await self.lookup_network(PLATFORM_BESU, name, target)

    async def get_network(
        self, network_type: str, network_id: int | str, target: NetworkRecord | None = None
    ) -> NetworkRecord:
        """Fetch one network by type and ID."""
        endpoint = ChainlaunchEndpoints.NETWORK_BY_ID.format(
            network_type=network_type, network_id=network_id
        )
        network = await self.fetch(endpoint, Network, "read network")
        return project(network, target or NetworkRecord())

    async def get_key_provider(
        self, provider_id: int | str, target: KeyProviderRecord | None = None
    ) -> KeyProviderRecord:
        """Fetch one key provider by ID."""
        endpoint = ChainlaunchEndpoints.KEY_PROVIDER_BY_ID.format(provider_id=provider_id)
        provider = await self.fetch(endpoint, KeyProvider, "read key provider")
        return project(provider, target or KeyProviderRecord())

    async def get_node(self, node_id: int | str, target: NodeRecord | None = None) -> NodeRecord:
        """Fetch one node by ID."""
        endpoint = ChainlaunchEndpoints.NODE_BY_ID.format(node_id=node_id)
        node = await self.fetch(endpoint, Node, "read node")
        return project(node, target or NodeRecord())

    async def list_key_providers(
        self, name_filter: str | None = None, type_filter: str | None = None
    ) -> KeyProviderListing:
        """
        List key providers, optionally filtered, and detect the default provider.

        Filtering:
        - name_filter: case-insensitive substring of the provider name
        - type_filter: case-insensitive equality on the provider type

        The default provider is the first one (unfiltered, API order) whose
        type is "database" or whose name is "Default Database Provider".
        """
        providers = await self.fetch(
            ChainlaunchEndpoints.KEY_PROVIDERS, list[KeyProvider] | None, "list key providers"
        )
        if providers is None:
            providers = []

        listing = KeyProviderListing()
        default: KeyProvider | None = None
        name_needle = (name_filter or "").lower()
        type_needle = (type_filter or "").lower()

        for provider in providers:
            provider_name = provider.name or ""
            provider_type = provider.type or ""

            if default is None and (
                provider_type.lower() == DEFAULT_KEY_PROVIDER_TYPE
                or provider_name == DEFAULT_KEY_PROVIDER_NAME
            ):
                default = provider

            if name_needle and name_needle not in provider_name.lower():
                continue
            if type_needle and provider_type.lower() != type_needle:
                continue

            listing.providers.append(
                KeyProviderItem(
                    id=str(provider.id),
                    name=provider_name,
                    type=provider_type,
                    status=provider.status or UNKNOWN_STATUS,
                )
            )

        if default is not None:
            listing.default_provider_id = default.id
            listing.default_provider_name = default.name
            listing.default_provider_type = default.type

        logger.debug(
            "Listed key providers",
            total=len(providers),
            matched=len(listing.providers),
            default_provider_id=listing.default_provider_id,
        )
        return listing
