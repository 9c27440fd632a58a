# recordseal/core/errors.py
"""
Failure outcomes of record verification.

A Mismatch is not an error: it is a Verdict. Everything here is either a
malformed input or an infrastructure state in which no verdict can be given.
"""

import asyncio
from typing import Optional


class IntegrityError(Exception):
    """Base class for all recordseal verification failures."""


class InvalidRecord(IntegrityError):
    """A canonical field holds a value of the wrong type or form."""

    def __init__(self, field: Optional[str], reason: str):
        self.field = field
        self.reason = reason
        where = f"field '{field}'" if field else "record"
        super().__init__(f"Invalid {where}: {reason}")


class CommitmentNotFound(IntegrityError):
    """The ledger holds no commitment for the identifier: cannot verify, no baseline."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"No ledger commitment for '{identifier}'")


class LedgerUnavailable(IntegrityError):
    """The ledger could not be reached or answered with a transport failure."""

    def __init__(self, identifier: str, reason: str):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Ledger unavailable while looking up '{identifier}': {reason}")


class VerificationCancelled(IntegrityError, asyncio.CancelledError):
    """Verification was cancelled while waiting on the ledger. No verdict was produced."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Verification of '{identifier}' was cancelled")


class RecordNotFound(IntegrityError):
    """The record store has no record under the identifier."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"No stored record for '{identifier}'")
