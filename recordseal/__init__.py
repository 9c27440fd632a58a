# recordseal/__init__.py
"""
recordseal — tamper detection for off-chain records anchored by ledger commitments.
Canonicalize a record, hash it, and compare against the digest committed for its identifier.
"""

from recordseal.core.types import Commitment, Digest, Verdict, VerdictStatus
from recordseal.core.canon import CANONICAL_FIELDS, canonicalize_record
from recordseal.core.hashing import HASH_ALGORITHM, record_digest
from recordseal.core.errors import (
    IntegrityError,
    InvalidRecord,
    CommitmentNotFound,
    LedgerUnavailable,
    VerificationCancelled,
    RecordNotFound,
)
from recordseal.storage import CommitmentLedger, RecordStore
from recordseal.verify.verifier import RecordVerifier

__version__ = "0.1.0-dev"

__all__ = [
    "Commitment", "Digest", "Verdict", "VerdictStatus",
    "CANONICAL_FIELDS", "canonicalize_record",
    "HASH_ALGORITHM", "record_digest",
    "IntegrityError", "InvalidRecord", "CommitmentNotFound",
    "LedgerUnavailable", "VerificationCancelled", "RecordNotFound",
    "CommitmentLedger", "RecordStore", "RecordVerifier",
]
