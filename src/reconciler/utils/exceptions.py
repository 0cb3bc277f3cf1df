"""Custom exceptions for the Chainlaunch reconciler.

Exception Hierarchy:
-------------------
ReconcilerError (base)
├── ValidationError                 # Bad input, raised before any remote call
│   └── ConfigurationError          # Missing URL or credentials
├── IdentityError                   # Composite identity could not be decoded
│   ├── MalformedIdentityError      # Wrong number of ':' separated segments
│   └── InvalidComponentError       # Segment is not a base-10 int64
├── InvalidImportIDError            # Import ID rejected (wraps IdentityError)
├── RemoteError                     # Transport failure or non-2xx response
│   └── RemoteNotFoundError         # HTTP 404
├── ParseError                      # Response body has an unexpected shape
├── NotFoundError                   # Lookup selector did not resolve
└── UnsupportedOperationError       # Update on an immutable resource

Usage Guidelines:
----------------
1. Nothing here is retried. RemoteError is surfaced verbatim to the caller.

2. NotFoundError is a user-facing lookup failure. The join-node controller
   never raises it from read(): a node missing from the network's node list
   is reported as a removal, not an error.

3. Include context in exceptions:
   - Operation name (create, read, delete, import)
   - The offending value (role, import ID, selector value)
   - Original exception when wrapping errors
"""


class ReconcilerError(Exception):
    """Base exception for all reconciler errors."""

    pass


class ValidationError(ReconcilerError):
    """Raised when input validation fails before any remote call."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: object | None = None,
    ) -> None:
        """
        Initialize ValidationError.

        Args:
            message: Error message.
            field: Optional name of the offending attribute.
            value: Optional offending value.
        """
        super().__init__(message)
        self.field = field
        self.value = value


class ConfigurationError(ValidationError):
    """Raised when the client configuration is incomplete or inconsistent."""

    pass


class IdentityError(ReconcilerError):
    """Base class for composite identity decoding failures."""

    def __init__(self, message: str, value: str) -> None:
        super().__init__(message)
        self.value = value


class MalformedIdentityError(IdentityError):
    """Raised when an identity does not split into exactly two segments."""

    def __init__(self, value: str, segments: int) -> None:
        """
        Initialize MalformedIdentityError.

        Args:
            value: The identity string that was rejected.
            segments: Number of segments found after splitting on ':'.
        """
        super().__init__(
            f"Expected identity in format 'parent_id:child_id', got {value!r} "
            f"({segments} segment{'s' if segments != 1 else ''})",
            value,
        )
        self.segments = segments


class InvalidComponentError(IdentityError):
    """Raised when an identity segment is not a base-10 64-bit integer."""

    def __init__(self, value: str, component: str, position: str) -> None:
        """
        Initialize InvalidComponentError.

        Args:
            value: The full identity string (or the raw component when encoding).
            component: The segment that failed to parse.
            position: Which segment failed ("parent" or "child").
        """
        super().__init__(
            f"Unable to parse {position} ID {component!r} in {value!r}: "
            f"expected a non-negative base-10 integer",
            value,
        )
        self.component = component
        self.position = position


class InvalidImportIDError(ReconcilerError):
    """Raised when an import ID cannot be turned into resource state."""

    def __init__(self, import_id: str, reason: str, expected_format: str) -> None:
        """
        Initialize InvalidImportIDError.

        Args:
            import_id: The import ID supplied by the caller.
            reason: Why the ID was rejected.
            expected_format: Human-readable description of the accepted format.
        """
        super().__init__(
            f"Invalid import ID {import_id!r}: {reason} (expected format '{expected_format}')"
        )
        self.import_id = import_id
        self.reason = reason
        self.expected_format = expected_format


class RemoteError(ReconcilerError):
    """Raised when the control-plane API call fails (transport or non-2xx)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        """
        Initialize RemoteError.

        Args:
            message: Error message.
            status_code: Optional HTTP status code (None for transport failures).
            body: Optional raw response body.
        """
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RemoteNotFoundError(RemoteError):
    """Raised when the control-plane API answers 404 Not Found."""

    def __init__(self, path: str, body: str = "") -> None:
        message = f"NOT_FOUND: {path}: {body}" if body else f"NOT_FOUND: {path}"
        super().__init__(message, status_code=404, body=body)
        self.path = path


class ParseError(ReconcilerError):
    """Raised when a response body does not match the expected shape."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """
        Initialize ParseError.

        Args:
            message: Error message.
            operation: Optional operation that received the body.
            original_error: Optional underlying decode/validation error.
        """
        super().__init__(message)
        self.operation = operation
        self.original_error = original_error


class NotFoundError(ReconcilerError):
    """Raised when a lookup selector does not resolve to any remote entity."""

    def __init__(self, resource_type: str, field: str, value: object) -> None:
        """
        Initialize NotFoundError.

        Args:
            resource_type: Human-readable resource label (e.g. "Fabric network").
            field: Selector field that was matched against.
            value: Selector value that could not be resolved.
        """
        super().__init__(f"No {resource_type} found with {field} '{value}'")
        self.resource_type = resource_type
        self.field = field
        self.value = value


class UnsupportedOperationError(ReconcilerError):
    """Raised when an operation is not supported for a resource type."""

    def __init__(self, resource_type: str, operation: str, reason: str) -> None:
        super().__init__(f"{operation.capitalize()} not supported for {resource_type}: {reason}")
        self.resource_type = resource_type
        self.operation = operation
        self.reason = reason
