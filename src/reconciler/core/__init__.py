"""Core reconciliation logic."""

from .controller import FabricJoinNodeController, ResourceController
from .identity import CompositeIdentity, decode, encode
from .resolver import ChainlaunchLookups, ListFilterResolver, project

__all__ = [
    "ResourceController",
    "FabricJoinNodeController",
    "CompositeIdentity",
    "encode",
    "decode",
    "ListFilterResolver",
    "ChainlaunchLookups",
    "project",
]
