# recordseal/verify/verifier.py
import asyncio
import logging
from typing import Optional

from recordseal.core.types import Commitment, Digest, Record, Verdict, VerdictStatus
from recordseal.core.hashing import HASH_ALGORITHM, record_digest
from recordseal.core.errors import (
    IntegrityError,
    CommitmentNotFound,
    LedgerUnavailable,
    VerificationCancelled,
    RecordNotFound,
)
from recordseal.storage import CommitmentLedger, RecordStore

logger = logging.getLogger(__name__)


class RecordVerifier:
    """
    Cross-checks off-chain records against their ledger commitments.
    Holds no state besides the injected ledger; calls are independent and may run concurrently.
    """

    def __init__(self, ledger: CommitmentLedger):
        if ledger is None:
            raise ValueError("ledger is required")
        self.ledger = ledger

    @staticmethod
    def _check_identifier(identifier: str) -> None:
        if not isinstance(identifier, str) or not identifier:
            raise ValueError("identifier must be a non-empty string")

    def _judge(self, identifier: str, computed: Digest, commitment: Optional[Commitment]) -> Verdict:
        if commitment is None:
            logger.info("No commitment on ledger for %s", identifier)
            raise CommitmentNotFound(identifier)

        status = VerdictStatus.MATCH if computed.value == commitment.digest.value else VerdictStatus.MISMATCH
        verdict = Verdict(
            status=status,
            identifier=identifier,
            computed=computed,
            committed=commitment.digest,
            committed_at=commitment.timestamp,
            algorithm=HASH_ALGORITHM,
        )
        if verdict.is_match:
            logger.info("Record %s matches its commitment", identifier)
        else:
            logger.warning(
                "Record %s does not match its commitment (committed %s, computed %s)",
                identifier, verdict.committed_hex, verdict.computed_hex,
            )
        return verdict

    def verify(self, record: Record, identifier: str) -> Verdict:
        """
        Canonicalize and hash the record, look up the commitment once, compare.
        Raises InvalidRecord, CommitmentNotFound or LedgerUnavailable. No retries.
        """
        self._check_identifier(identifier)
        computed = record_digest(record)
        logger.debug("Computed %s digest %s for %s", HASH_ALGORITHM, computed.hex(), identifier)

        try:
            commitment = self.ledger.get_commitment(identifier)
        except IntegrityError:
            raise
        except Exception as e:
            raise LedgerUnavailable(identifier, str(e)) from e

        return self._judge(identifier, computed, commitment)

    async def averify(self, record: Record, identifier: str) -> Verdict:
        """
        Same as verify(), but awaits the ledger lookup.
        Cancelling the caller during the lookup raises VerificationCancelled.
        """
        self._check_identifier(identifier)
        computed = record_digest(record)
        logger.debug("Computed %s digest %s for %s", HASH_ALGORITHM, computed.hex(), identifier)

        try:
            commitment = await self.ledger.aget_commitment(identifier)
        except VerificationCancelled:
            raise
        except asyncio.CancelledError as e:
            logger.info("Verification of %s cancelled during ledger lookup", identifier)
            raise VerificationCancelled(identifier) from e
        except IntegrityError:
            raise
        except Exception as e:
            raise LedgerUnavailable(identifier, str(e)) from e

        return self._judge(identifier, computed, commitment)

    def verify_from_storage(self, identifier: str, records: RecordStore) -> Verdict:
        """
        Load the record from the off-chain store and verify it.
        Raises RecordNotFound when the store has nothing under identifier.
        """
        self._check_identifier(identifier)
        record = records.fetch_by_identifier(identifier)
        if record is None:
            raise RecordNotFound(identifier)
        return self.verify(record, identifier)
