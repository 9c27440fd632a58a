# recordseal/core/types.py
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from recordseal.core.encoding import hex_encode, hex_decode

# A record as held by the off-chain store: field name → value
Record = Mapping[str, Any]

DIGEST_SIZE = 32

# Changing this breaks compatibility with every existing commitment
HASH_ALGORITHM = "sha256"


@dataclass(frozen=True)
class Digest:
    """Opaque 32-byte hash output. Compared byte-for-byte, never interpreted."""
    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, bytes) or len(self.value) != DIGEST_SIZE:
            raise ValueError(f"Digest must be exactly {DIGEST_SIZE} bytes")

    @classmethod
    def from_hex(cls, s: str) -> "Digest":
        return cls(hex_decode(s))

    def hex(self) -> str:
        """Lowercase hex, the display form."""
        return hex_encode(self.value)

    def __str__(self):
        return self.hex()


@dataclass(frozen=True)
class Commitment:
    """Immutable ledger entry anchoring a record's digest."""
    identifier: str
    digest: Digest
    timestamp: int                  # seconds since epoch, when the commitment was anchored


class VerdictStatus(str, Enum):
    MATCH = "match"
    MISMATCH = "mismatch"


@dataclass(frozen=True)
class Verdict:
    """Result of one verification call. Never persisted."""
    status: VerdictStatus
    identifier: str
    computed: Digest
    committed: Digest
    committed_at: int               # ledger anchor time, reported as-is
    algorithm: str = HASH_ALGORITHM

    @property
    def is_match(self) -> bool:
        return self.status is VerdictStatus.MATCH

    @property
    def computed_hex(self) -> str:
        return self.computed.hex()

    @property
    def committed_hex(self) -> str:
        return self.committed.hex()

    def __bool__(self):
        return self.is_match

    def __str__(self):
        if self.is_match:
            head = f"Record '{self.identifier}' matches its ledger commitment ✓"
        else:
            head = f"Record '{self.identifier}' does NOT match its ledger commitment: alterations detected"
        return "\n".join([
            head,
            f"  committed ({self.algorithm}): {self.committed_hex}",
            f"  computed  ({self.algorithm}): {self.computed_hex}",
        ])

    def to_dict(self) -> dict:
        """JSON-ready report for presentation layers."""
        return {
            "identifier": self.identifier,
            "status": self.status.value,
            "algorithm": self.algorithm,
            "computed": self.computed_hex,
            "committed": self.committed_hex,
            "committed_at": self.committed_at,
        }
