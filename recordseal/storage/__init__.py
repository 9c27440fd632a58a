# recordseal/storage/__init__.py
"""
Collaborators consumed by the verifier: the commitment ledger and the off-chain record store.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import List, Optional
from pathlib import Path

from recordseal.core.types import Commitment


class CommitmentLedger(ABC):
    """Read-only view of an append-only ledger of commitments."""

    @abstractmethod
    def get_commitment(self, identifier: str) -> Optional[Commitment]:
        """Latest commitment for identifier, or None if there is none."""

    async def aget_commitment(self, identifier: str) -> Optional[Commitment]:
        """Async lookup. Backends with a native async client should override this."""
        return await asyncio.to_thread(self.get_commitment, identifier)

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class RecordStore(ABC):
    """Mutable off-chain store holding the records themselves."""

    @abstractmethod
    def fetch_by_identifier(self, identifier: str) -> Optional[dict]:
        pass

    @abstractmethod
    def list_identifiers(self) -> List[str]:
        pass

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def _sqlite_path(uri: str) -> Path:
    # Extract everything after sqlite://
    raw_path = uri[len("sqlite://"):]
    if raw_path.startswith("//"):
        raw_path = raw_path[1:]
    return Path(raw_path).resolve()


def create_ledger(uri: str) -> CommitmentLedger:
    if uri.startswith("sqlite://"):
        from .sqlite import SQLiteLedger
        return SQLiteLedger(_sqlite_path(uri))
    elif uri in ("memory:", "memory://"):
        from .memory import InMemoryLedger
        return InMemoryLedger()
    else:
        raise ValueError(f"Unsupported ledger URI: {uri}")


def create_record_store(uri: str) -> RecordStore:
    if uri.startswith("sqlite://"):
        from .sqlite import SQLiteRecordStore
        return SQLiteRecordStore(_sqlite_path(uri))
    elif uri in ("memory:", "memory://"):
        from .memory import InMemoryRecordStore
        return InMemoryRecordStore()
    else:
        raise ValueError(f"Unsupported record store URI: {uri}")


from .memory import InMemoryLedger, InMemoryRecordStore
from .sqlite import SQLiteLedger, SQLiteRecordStore

__all__ = [
    "CommitmentLedger", "RecordStore", "create_ledger", "create_record_store",
    "InMemoryLedger", "InMemoryRecordStore", "SQLiteLedger", "SQLiteRecordStore",
]
