"""Persistence of analysis results."""

from .history_store import HistoryStore, HistoryStoreError, SaveResult

__all__ = ["HistoryStore", "HistoryStoreError", "SaveResult"]
