"""Lifecycle controllers for declared Chainlaunch resources.

A controller maps one resource type's desired state onto control-plane API
calls. The host (CLI or any other orchestrator) drives it one operation at a
time:

    create(spec)            -> state            first reconciliation
    read(state)             -> ReadResult       refresh / drift detection
    update(state, spec)     -> state            in-place change
    delete(state)           -> None             teardown
    import_state(import_id) -> ImportResult     adopt an existing object

Each call runs to completion before returning. Controllers keep no state
between calls; the injected API client is the only shared object.

Fabric join-node lifecycle:
--------------------------
    create  -> POST .../{peers|orderers}/{node_id}/join      -> id "<network_id>:<node_id>"
    read    -> GET  .../networks/fabric/{network_id}/nodes   -> node listed? keep : removed
    update  -> always UnsupportedOperationError (every attribute forces replacement)
    delete  -> POST .../{peers|orderers}/{node_id}/unjoin
    import  -> decode "<network_id>:<node_id>", role left unset with a warning
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..api.client import ChainlaunchClient
from ..api.endpoints import ChainlaunchEndpoints, membership_endpoint
from ..api.response_models import FabricNetworkResponse, NetworkNodesResponse
from ..constants import FABRIC_JOIN_NODE
from ..models.state import (
    Diagnostic,
    ImportResult,
    JoinNodeSpec,
    JoinNodeState,
    NodeRole,
    ReadResult,
    Severity,
)
from ..observability.logger import LogContext
from ..utils.exceptions import (
    ConfigurationError,
    IdentityError,
    InvalidImportIDError,
    ParseError,
    RemoteError,
    UnsupportedOperationError,
)
from . import identity

logger = structlog.get_logger(__name__)

SpecT = TypeVar("SpecT")
StateT = TypeVar("StateT")
ModelT = TypeVar("ModelT", bound=BaseModel)


class ResourceController(ABC, Generic[SpecT, StateT]):
    """Capability set a host invokes to reconcile one resource type."""

    resource_type: str

    def __init__(self, client: ChainlaunchClient | None = None) -> None:
        self._client = client

    @property
    def client(self) -> ChainlaunchClient:
        """
        API client used by remote operations.

        Raises:
            ConfigurationError: If the controller was built without a client.
        """
        if self._client is None:
            raise ConfigurationError(
                f"{self.resource_type} controller has no API client", field="client"
            )
        return self._client

    @abstractmethod
    async def create(self, spec: SpecT) -> StateT:
        """Create the remote object and return the state to persist."""

    @abstractmethod
    async def read(self, state: StateT) -> ReadResult:
        """Refresh persisted state, signalling removal when the object is gone."""

    @abstractmethod
    async def update(self, state: StateT, spec: SpecT) -> StateT:
        """Apply an in-place change."""

    @abstractmethod
    async def delete(self, state: StateT) -> None:
        """Remove the remote object."""

    @abstractmethod
    async def import_state(self, import_id: str) -> ImportResult:
        """Build persisted state for an existing remote object."""


class FabricJoinNodeController(ResourceController[JoinNodeSpec, JoinNodeState]):
    """
    Joins a Fabric peer or orderer to a network (channel).

    The node must already belong to the network's organization configuration;
    this resource only performs the physical join/unjoin.
    """

    resource_type = FABRIC_JOIN_NODE
    IMPORT_FORMAT = "network_id:node_id"

    async def create(self, spec: JoinNodeSpec) -> JoinNodeState:
        """
        Join the node to the network.

        Raises:
            ValidationError: If role is not 'peer' or 'orderer' (no request is sent).
            RemoteError: If the join call fails.
            ParseError: If the response is not a network descriptor.
        """
        role = NodeRole.parse(spec.role, "create")
        endpoint = membership_endpoint("join", spec.network_id, spec.node_id, role.value)

        with LogContext(resource=self.resource_type, operation="create"):
            logger.info(
                "Joining node to network",
                network_id=spec.network_id,
                node_id=spec.node_id,
                role=role.value,
            )
            try:
                body = await self.client.post(endpoint)
            except RemoteError as e:
                logger.error("Unable to join node to channel", endpoint=endpoint, error=str(e))
                raise

            network = self._parse(FabricNetworkResponse, body, "create")
            resource_id = identity.encode(spec.network_id, spec.node_id)
            logger.info("Node joined", id=resource_id, network_name=network.name)

        return JoinNodeState.from_spec(spec, resource_id)

    async def read(self, state: JoinNodeState) -> ReadResult:
        """
        Check that the node is still a member of the network.

        Only membership is checked; no attribute is refreshed from the remote
        record. A node missing from the list means the join was undone outside
        this tool, so the result asks the caller to drop its state.

        Raises:
            RemoteError: If the node list cannot be fetched.
            ParseError: If the node list has an unexpected shape.
        """
        endpoint = ChainlaunchEndpoints.FABRIC_NETWORK_NODES.format(network_id=state.network_id)

        with LogContext(resource=self.resource_type, operation="read", id=state.id):
            try:
                body = await self.client.get(endpoint)
            except RemoteError as e:
                logger.error("Unable to read network nodes", endpoint=endpoint, error=str(e))
                raise

            nodes = self._parse(NetworkNodesResponse, body, "read")
            if not nodes.contains(state.node_id):
                logger.warning(
                    "Node no longer in network, removing from state",
                    network_id=state.network_id,
                    node_id=state.node_id,
                )
                return ReadResult.gone()

            logger.debug("Node still joined", node_id=state.node_id)
        return ReadResult(state=state)

    async def update(self, state: JoinNodeState, spec: JoinNodeSpec) -> JoinNodeState:
        """
        Always fails: membership cannot be changed in place.

        Raises:
            UnsupportedOperationError: Always.
        """
        raise UnsupportedOperationError(
            self.resource_type,
            "update",
            "updating a node's network membership is not supported; "
            "changes require recreating the resource",
        )

    async def delete(self, state: JoinNodeState) -> None:
        """
        Unjoin the node from the network.

        A 404 from the control plane is not treated as "already removed"; it is
        surfaced like any other remote failure.

        Raises:
            ValidationError: If the persisted role is missing or unknown.
            RemoteError: If the unjoin call fails.
        """
        role = NodeRole.parse(state.role, "delete")
        endpoint = membership_endpoint("unjoin", state.network_id, state.node_id, role.value)

        with LogContext(resource=self.resource_type, operation="delete", id=state.id):
            logger.info("Unjoining node from network", endpoint=endpoint)
            try:
                await self.client.post(endpoint)
            except RemoteError as e:
                logger.error("Unable to unjoin node from channel", endpoint=endpoint, error=str(e))
                raise

    async def import_state(self, import_id: str) -> ImportResult:
        """
        Adopt an existing membership from its "<network_id>:<node_id>" identity.

        The role cannot be derived from the identity, so it is left unset and a
        warning is returned. The caller must supply it before delete.
        No request is sent, so a controller built without a client can import.

        Raises:
            InvalidImportIDError: If the identity cannot be decoded.
        """
        try:
            decoded = identity.decode(import_id)
        except IdentityError as e:
            raise InvalidImportIDError(import_id, str(e), self.IMPORT_FORMAT) from e

        state = JoinNodeState(
            network_id=decoded.parent_id,
            node_id=decoded.child_id,
            role=None,
            id=str(decoded),
        )
        logger.info(
            "Imported node membership",
            resource=self.resource_type,
            network_id=state.network_id,
            node_id=state.node_id,
        )
        advisory = Diagnostic(
            severity=Severity.WARNING,
            summary="Role Not Determined",
            detail=(
                "The 'role' field was not set during import. You may need to update "
                "your configuration to specify the role."
            ),
        )
        return ImportResult(state=state, diagnostics=[advisory])

    def _parse(self, model: type[ModelT], body: bytes, operation: str) -> ModelT:
        try:
            return model.model_validate_json(body)
        except PydanticValidationError as e:
            logger.error(
                "Unexpected response shape",
                operation=operation,
                model=model.__name__,
                validation_errors=e.errors(),
            )
            raise ParseError(
                f"Unable to parse {model.__name__} response during {operation}: {e}",
                operation=operation,
                original_error=e,
            ) from e
