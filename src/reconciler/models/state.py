"""Resource state models for the Fabric join-node resource."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from ..utils.exceptions import ValidationError


class NodeRole(str, Enum):
    """Role of a node inside a Fabric network."""

    PEER = "peer"
    ORDERER = "orderer"

    @classmethod
    def parse(cls, value: str | None, operation: str = "operation") -> "NodeRole":
        """
        Convert a raw role value into a NodeRole.

        Args:
            value: Role supplied by the caller (may be None after an import).
            operation: Lifecycle operation name, used in the error message.

        Returns:
            NodeRole

        Raises:
            ValidationError: If the value is not 'peer' or 'orderer'.
        """
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f"Invalid role for {operation}: role must be 'peer' or 'orderer', got: {value!r}",
                field="role",
                value=value,
            ) from None


@dataclass(frozen=True)
class JoinNodeSpec:
    """
    Desired state declared by the caller.

    Every attribute forces replacement: there is no in-place update.

    Attributes:
        network_id: Fabric network (channel) to join
        node_id: Node to join to the network
        role: Node role, validated when an operation needs it
    """

    network_id: int
    node_id: int
    role: str


@dataclass
class JoinNodeState:
    """
    Last reconciled record for a joined node.

    Attributes:
        id: Composite identity "<network_id>:<node_id>"
        network_id: Fabric network ID
        node_id: Node ID
        role: Node role, None when imported and not yet supplied
    """

    network_id: int
    node_id: int
    role: str | None = None
    id: str | None = None

    @classmethod
    def from_spec(cls, spec: JoinNodeSpec, resource_id: str) -> "JoinNodeState":
        return cls(
            network_id=spec.network_id,
            node_id=spec.node_id,
            role=spec.role,
            id=resource_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JoinNodeState":
        return cls(
            network_id=int(data["network_id"]),
            node_id=int(data["node_id"]),
            role=data.get("role"),
            id=data.get("id"),
        )


class Severity(str, Enum):
    """Severity of a diagnostic returned alongside a result."""

    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """Non-fatal advisory reported to the caller."""

    severity: Severity
    summary: str
    detail: str


@dataclass
class ReadResult:
    """
    Outcome of a read.

    Attributes:
        state: Refreshed state, None when the resource is gone
        removed: True when the caller must drop its persisted state
    """

    state: JoinNodeState | None
    removed: bool = False

    @classmethod
    def gone(cls) -> "ReadResult":
        return cls(state=None, removed=True)


@dataclass
class ImportResult:
    """State produced by an import plus any advisories."""

    state: JoinNodeState
    diagnostics: list[Diagnostic]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]
