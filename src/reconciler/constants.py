"""Configuration constants for the Chainlaunch reconciler."""

# -----------------------------------------------------------------------------
# Transport
# -----------------------------------------------------------------------------

# Path prefix the control plane serves its REST API under
API_PREFIX: str = "/api/v1"

# Request timeout in seconds
DEFAULT_TIMEOUT_SECONDS: int = 60


# -----------------------------------------------------------------------------
# Composite Identity
# -----------------------------------------------------------------------------

IDENTITY_SEPARATOR: str = ":"

# Largest value a signed 64-bit identifier may take
MAX_INT64: int = 2**63 - 1


# -----------------------------------------------------------------------------
# Node Roles
# -----------------------------------------------------------------------------

ROLE_PEER: str = "peer"
ROLE_ORDERER: str = "orderer"

# Maps a node role to the path segment of its join/unjoin endpoints
ROLE_PATH_SEGMENTS: dict[str, str] = {
    ROLE_PEER: "peers",
    ROLE_ORDERER: "orderers",
}


# -----------------------------------------------------------------------------
# Network Platforms
# -----------------------------------------------------------------------------

PLATFORM_FABRIC: str = "fabric"
PLATFORM_BESU: str = "besu"

SUPPORTED_PLATFORMS: frozenset[str] = frozenset({PLATFORM_FABRIC, PLATFORM_BESU})

# Display names used in lookup errors
PLATFORM_LABELS: dict[str, str] = {
    PLATFORM_FABRIC: "Fabric network",
    PLATFORM_BESU: "Besu network",
}


# -----------------------------------------------------------------------------
# Key Providers
# -----------------------------------------------------------------------------

DEFAULT_KEY_PROVIDER_TYPE: str = "database"
DEFAULT_KEY_PROVIDER_NAME: str = "Default Database Provider"
UNKNOWN_STATUS: str = "unknown"


# -----------------------------------------------------------------------------
# Resource Types
# -----------------------------------------------------------------------------

FABRIC_JOIN_NODE: str = "fabric_join_node"
