# recordseal/core/hashing.py
import hashlib

from recordseal.core.canon import canonicalize_record
from recordseal.core.types import HASH_ALGORITHM, Digest, Record

__all__ = ["HASH_ALGORITHM", "digest_bytes", "record_digest"]


def digest_bytes(data: bytes) -> Digest:
    return Digest(hashlib.sha256(data).digest())


def record_digest(record: Record) -> Digest:
    """Digest of the record's canonical form. This is what the ledger commits to."""
    return digest_bytes(canonicalize_record(record))
