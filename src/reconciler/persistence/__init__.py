"""Persistence layer for resource state and operation history."""

from .state_store import HistoryEntry, StateStore

__all__ = ["StateStore", "HistoryEntry"]
