# recordseal/storage/sqlite.py
import os
import json
import logging
import sqlite3
import threading
from pathlib import Path
from typing import List, Optional

from recordseal.core.types import Commitment, Digest
from recordseal.core.errors import InvalidRecord, LedgerUnavailable
from . import CommitmentLedger, RecordStore

logger = logging.getLogger(__name__)


def default_db_path() -> Path:
    env_path = os.environ.get("RECORDSEAL_DB_PATH")
    return Path(env_path) if env_path else Path.cwd() / "recordseal.db"


class _SQLiteBase:
    """Shared connection handling. Ledger and record store may live in the same file."""

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            db_path = default_db_path()

        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.db_path = self.db_path.resolve()

        self._conn: Optional[sqlite3.Connection] = None
        # Async lookups run in worker threads; serialize access to the one connection
        self._lock = threading.Lock()
        self._connect()

    def _connect(self):
        self._conn = sqlite3.connect(str(self.db_path), isolation_level=None, check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._create_schema()

    def _create_schema(self):
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS commitments (
                identifier      TEXT    NOT NULL,
                seq             INTEGER NOT NULL,
                digest_hex      TEXT    NOT NULL,
                timestamp       INTEGER NOT NULL,
                PRIMARY KEY (identifier, seq)
            )
        """)
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS records (
                identifier      TEXT    PRIMARY KEY,
                record_json     TEXT    NOT NULL
            )
        """)

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Storage connection is closed")
        return self._conn

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None


class SQLiteLedger(_SQLiteBase, CommitmentLedger):
    """Append-only commitment ledger in SQLite. Rows are never updated or deleted."""

    def append(self, commitment: Commitment) -> int:
        """Anchor a new commitment; returns its sequence number for the identifier."""
        with self._lock:
            row = self.conn.execute(
                "SELECT COALESCE(MAX(seq), -1) + 1 FROM commitments WHERE identifier = ?",
                (commitment.identifier,)
            ).fetchone()
            seq = row[0]
            self.conn.execute("""
                INSERT INTO commitments (identifier, seq, digest_hex, timestamp)
                VALUES (?, ?, ?, ?)
            """, (commitment.identifier, seq, commitment.digest.hex(), int(commitment.timestamp)))
        logger.debug("Appended commitment %d for %s", seq, commitment.identifier)
        return seq

    def get_commitment(self, identifier: str) -> Optional[Commitment]:
        try:
            with self._lock:
                row = self.conn.execute("""
                    SELECT digest_hex, timestamp FROM commitments
                    WHERE identifier = ? ORDER BY seq DESC LIMIT 1
                """, (identifier,)).fetchone()
        except sqlite3.Error as e:
            raise LedgerUnavailable(identifier, str(e)) from e

        if row is None:
            return None
        digest_hex, ts = row
        return Commitment(identifier=identifier, digest=Digest.from_hex(digest_hex), timestamp=ts)

    def history(self, identifier: str) -> List[Commitment]:
        """Every commitment for identifier, oldest first."""
        with self._lock:
            cursor = self.conn.execute("""
                SELECT digest_hex, timestamp FROM commitments
                WHERE identifier = ? ORDER BY seq ASC
            """, (identifier,))
            rows = cursor.fetchall()
        return [
            Commitment(identifier=identifier, digest=Digest.from_hex(d), timestamp=ts)
            for d, ts in rows
        ]

    def get_latest_timestamp(self, identifier: str) -> Optional[int]:
        with self._lock:
            row = self.conn.execute("""
                SELECT timestamp FROM commitments
                WHERE identifier = ? ORDER BY seq DESC LIMIT 1
            """, (identifier,)).fetchone()
        return row[0] if row else None


class SQLiteRecordStore(_SQLiteBase, RecordStore):
    """Mutable off-chain record copy. Anything here may have been edited after commitment."""

    def put(self, identifier: str, record: dict) -> None:
        record_str = json.dumps(record, sort_keys=True, ensure_ascii=False)
        with self._lock:
            self.conn.execute("""
                INSERT INTO records (identifier, record_json) VALUES (?, ?)
                ON CONFLICT(identifier) DO UPDATE SET record_json = excluded.record_json
            """, (identifier, record_str))

    def fetch_by_identifier(self, identifier: str) -> Optional[dict]:
        with self._lock:
            row = self.conn.execute(
                "SELECT record_json FROM records WHERE identifier = ?",
                (identifier,)
            ).fetchone()
        if row is None:
            return None
        # the off-chain copy is untrusted; an unreadable row is an invalid record, not a crash
        try:
            record = json.loads(row[0])
        except json.JSONDecodeError:
            raise InvalidRecord(None, "stored record is not valid JSON")
        if not isinstance(record, dict):
            raise InvalidRecord(None, f"stored record is not a JSON object, got {type(record).__name__}")
        return record

    def list_identifiers(self) -> List[str]:
        with self._lock:
            cursor = self.conn.execute("SELECT identifier FROM records ORDER BY identifier ASC")
            return [row[0] for row in cursor.fetchall()]
