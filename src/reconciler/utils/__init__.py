"""Utility functions and exceptions."""

from .exceptions import (
    ConfigurationError,
    IdentityError,
    InvalidComponentError,
    InvalidImportIDError,
    MalformedIdentityError,
    NotFoundError,
    ParseError,
    ReconcilerError,
    RemoteError,
    RemoteNotFoundError,
    UnsupportedOperationError,
    ValidationError,
)

__all__ = [
    "ReconcilerError",
    "ValidationError",
    "ConfigurationError",
    "IdentityError",
    "MalformedIdentityError",
    "InvalidComponentError",
    "InvalidImportIDError",
    "RemoteError",
    "RemoteNotFoundError",
    "ParseError",
    "NotFoundError",
    "UnsupportedOperationError",
]
