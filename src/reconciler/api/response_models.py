"""Pydantic models for Chainlaunch REST API v1 responses.

Design Principles:
- Graceful degradation: extra="allow" for unknown fields
- Optional fields default to None so "absent" and "empty" can be told apart
  from real values when projecting into records
- camelCase wire names via aliases, snake_case attributes in Python
- The server encodes an empty list as null; list fields read null as []

Usage:
    network = FabricNetworkResponse.model_validate_json(body)
    nodes = NetworkNodesResponse.model_validate_json(body).nodes
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _APIModel(BaseModel):
    """Base for all response models."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class FabricNetworkResponse(_APIModel):
    """Network descriptor returned by the join endpoints and Fabric network lookups."""

    id: int | None = Field(None, description="Network ID")
    name: str | None = Field(None, description="Network (channel) name")
    description: str | None = None
    platform: str | None = None
    status: str | None = None
    created_at: str | None = Field(None, alias="createdAt")
    updated_at: str | None = Field(None, alias="updatedAt")


class NetworkNode(_APIModel):
    """One member of a Fabric network as listed by /networks/fabric/{id}/nodes."""

    node_id: int | None = Field(None, alias="nodeId")
    role: str | None = None
    status: str | None = None


class NetworkNodesResponse(_APIModel):
    """Response from GET /networks/fabric/{id}/nodes."""

    nodes: list[NetworkNode] = Field(default_factory=list)

    @field_validator("nodes", mode="before")
    @classmethod
    def null_nodes_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def contains(self, node_id: int) -> bool:
        """Return True when a member with the given node ID is listed.

        Entries without a node ID never match.
        """
        return any(node.node_id == node_id for node in self.nodes)


class NetworkSummary(_APIModel):
    """Entry in a GET /networks/{platform} listing."""

    id: int
    name: str
    platform: str | None = None
    description: str | None = None
    status: str | None = None
    created_at: str | None = Field(None, alias="createdAt")


class NetworkListResponse(_APIModel):
    """Response from GET /networks/{platform}."""

    networks: list[NetworkSummary] = Field(default_factory=list)

    @field_validator("networks", mode="before")
    @classmethod
    def null_networks_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class Network(_APIModel):
    """Response from GET /networks/{type}/{id}."""

    id: int
    name: str | None = None
    type: str | None = None
    status: str | None = None
    config: dict[str, Any] | None = None
    created_at: str | None = Field(None, alias="createdAt")
    updated_at: str | None = Field(None, alias="updatedAt")


class KeyProvider(_APIModel):
    """Response from GET /key-providers/{id} and entries of GET /key-providers."""

    id: int
    name: str | None = None
    type: str | None = None
    status: str | None = None
    config: dict[str, Any] | None = None
    created_at: str | None = Field(None, alias="createdAt")
    updated_at: str | None = Field(None, alias="updatedAt")


class Node(_APIModel):
    """Response from GET /nodes/{id}."""

    id: int
    name: str | None = None
    platform: str | None = None
    type: str | None = None
    status: str | None = None
    config: dict[str, Any] | None = None
    created_at: str | None = Field(None, alias="createdAt")
    updated_at: str | None = Field(None, alias="updatedAt")


class ErrorResponse(_APIModel):
    """Error body returned by the control plane on non-2xx responses."""

    message: str | None = None
    error: str | None = None
    code: str | int | None = None

    def get_full_message(self) -> str | None:
        """Combine message/error and code into one line, or None if empty."""
        text = self.message or self.error
        if not text:
            return None
        if self.code is not None:
            return f"{text} (Code: {self.code})"
        return text
