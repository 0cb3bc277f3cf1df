"""Centralized endpoint paths for the Chainlaunch REST API v1.

Usage:
    from reconciler.api.endpoints import ChainlaunchEndpoints

    endpoint = ChainlaunchEndpoints.FABRIC_NETWORK_NODES.format(network_id=12)
    # Returns: "/networks/fabric/12/nodes"
"""

from dataclasses import dataclass

from ..constants import ROLE_PATH_SEGMENTS


@dataclass(frozen=True)
class ChainlaunchEndpoints:
    """
    Chainlaunch REST API endpoint constants.

    All endpoints are relative to the API prefix (``/api/v1``).
    Use .format() to substitute path parameters.
    """

    # -------------------------------------------------------------------------
    # Networks
    # -------------------------------------------------------------------------
    NETWORKS_BY_PLATFORM: str = "/networks/{platform}"
    NETWORK_BY_ID: str = "/networks/{network_type}/{network_id}"
    FABRIC_NETWORK_NODES: str = "/networks/fabric/{network_id}/nodes"

    # -------------------------------------------------------------------------
    # Fabric channel membership
    # -------------------------------------------------------------------------
    FABRIC_NODE_JOIN: str = "/networks/fabric/{network_id}/{role_segment}/{node_id}/join"
    FABRIC_NODE_UNJOIN: str = "/networks/fabric/{network_id}/{role_segment}/{node_id}/unjoin"

    # -------------------------------------------------------------------------
    # Key providers
    # -------------------------------------------------------------------------
    KEY_PROVIDERS: str = "/key-providers"
    KEY_PROVIDER_BY_ID: str = "/key-providers/{provider_id}"

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------
    NODE_BY_ID: str = "/nodes/{node_id}"


def membership_endpoint(action: str, network_id: int, node_id: int, role: str) -> str:
    """
    Build the role-specific join/unjoin path for a Fabric node.

    Args:
        action: "join" or "unjoin"
        network_id: Fabric network (channel) ID
        node_id: Node ID
        role: Validated node role ("peer" or "orderer")

    Returns:
        Path relative to the API prefix.

    Raises:
        KeyError: If role or action is unknown. Callers validate role first.
    """
    template = {
        "join": ChainlaunchEndpoints.FABRIC_NODE_JOIN,
        "unjoin": ChainlaunchEndpoints.FABRIC_NODE_UNJOIN,
    }[action]
    return template.format(
        network_id=network_id,
        role_segment=ROLE_PATH_SEGMENTS[role],
        node_id=node_id,
    )
