"""SQLite name store.

This module provides persistent storage for name records:
- Fetching by category, text, favorites, and rating order
- Inserts with duplicate detection and per-item bulk outcomes
- Atomic read-modify-write for rating updates
- Default dataset loading and reset
"""

from baby_affinity.store.defaults import (
    get_default_names,
    load_default_names,
    read_default_name_texts,
    reset_name_data,
)
from baby_affinity.store.errors import (
    ConnectionError,
    DuplicateNameError,
    MigrationError,
    NameNotFoundError,
    NameStoreError,
    PersistenceError,
)
from baby_affinity.store.metrics import StoreMetrics
from baby_affinity.store.models import BulkResult, ItemOutcome, OutcomeStatus
from baby_affinity.store.store import NameStore


__all__ = [
    # Errors
    "ConnectionError",
    "DuplicateNameError",
    "MigrationError",
    "NameNotFoundError",
    "NameStoreError",
    "PersistenceError",
    # Metrics
    "StoreMetrics",
    # Models
    "BulkResult",
    "ItemOutcome",
    "OutcomeStatus",
    # Store
    "NameStore",
    # Default data
    "get_default_names",
    "load_default_names",
    "read_default_name_texts",
    "reset_name_data",
]
