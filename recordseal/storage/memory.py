# recordseal/storage/memory.py
from typing import Dict, List, Optional

from recordseal.core.types import Commitment
from . import CommitmentLedger, RecordStore


class InMemoryLedger(CommitmentLedger):
    """Append-only in-process ledger. Keeps every commitment; lookups see the latest."""

    def __init__(self):
        self._history: Dict[str, List[Commitment]] = {}

    def append(self, commitment: Commitment) -> None:
        self._history.setdefault(commitment.identifier, []).append(commitment)

    def get_commitment(self, identifier: str) -> Optional[Commitment]:
        entries = self._history.get(identifier)
        return entries[-1] if entries else None

    def history(self, identifier: str) -> List[Commitment]:
        return list(self._history.get(identifier, []))


class InMemoryRecordStore(RecordStore):
    """Dict-backed record store. Records are copied in and out so callers can't alias them."""

    def __init__(self, records: Optional[Dict[str, dict]] = None):
        self._records: Dict[str, dict] = {}
        for identifier, record in (records or {}).items():
            self.put(identifier, record)

    def put(self, identifier: str, record: dict) -> None:
        self._records[identifier] = dict(record)

    def fetch_by_identifier(self, identifier: str) -> Optional[dict]:
        record = self._records.get(identifier)
        return dict(record) if record is not None else None

    def list_identifiers(self) -> List[str]:
        return sorted(self._records)
