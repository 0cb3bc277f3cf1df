"""Chainlaunch Reconciler - declarative lifecycle for Chainlaunch resources."""

__version__ = "0.1.0"

from .cli import app  # noqa: E402
from .config import ReconcilerConfig  # noqa: E402

__all__ = ["app", "ReconcilerConfig", "__version__"]
