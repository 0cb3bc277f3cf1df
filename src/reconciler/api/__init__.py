"""Chainlaunch REST API client, endpoints and response models."""

from .client import ChainlaunchClient
from .endpoints import ChainlaunchEndpoints, membership_endpoint

__all__ = ["ChainlaunchClient", "ChainlaunchEndpoints", "membership_endpoint"]
