"""Moves guest transactions into the remote store on first sign-in."""
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional
from budgy.exceptions import RemoteStoreError
from budgy.models.session import Session
from budgy.models.transaction import Transaction
from budgy.storage.local import LocalStore, SyncMarker
from budgy.storage.remote import TRANSACTIONS, RemoteStore

logger = logging.getLogger(__name__)


class ReconciliationOutcome(str, Enum):
    SKIPPED = "skipped"
    TRANSFERRED = "transferred"
    RECOVERED = "recovered"
    FAILED = "failed"
    IN_FLIGHT = "in_flight"


@dataclass
class ReconciliationResult:
    """What happened, plus the freshly loaded remote set (None if that load failed)."""

    outcome: ReconciliationOutcome
    transferred: int = 0
    transactions: Optional[List[Transaction]] = None
    error: Optional[str] = None


def prepare_for_upload(tx: Transaction, user_id: str, batch_id: str) -> Dict[str, Any]:
    """Strip the local id and tag the record with its new owner and batch."""
    record = tx.model_dump(mode="json", exclude={"id"}, exclude_none=True)
    record["user_id"] = user_id
    record["sync_batch"] = batch_id
    return record


class Reconciler:
    """
    Transfers the device-local cache to the remote store, at most once.

    A durable marker is written before the batch insert and every uploaded row
    carries the marker's batch id, so a run interrupted between the remote
    insert and the cache deletion is finished on the next sign-in instead of
    uploading the same rows again.
    """

    def __init__(self, local: LocalStore, remote: RemoteStore):
        self.local = local
        self.remote = remote
        self._syncing = False

    @property
    def syncing(self) -> bool:
        return self._syncing

    async def reconcile(self, session: Session) -> ReconciliationResult:
        """
        Merge the local cache into the remote store, then load the remote set.

        Args:
            session: The newly authenticated session

        Returns:
            ReconciliationResult; the local cache is only removed on success
        """
        if self._syncing:
            logger.warning("Reconciliation already in flight, ignoring duplicate trigger")
            return ReconciliationResult(outcome=ReconciliationOutcome.IN_FLIGHT)

        local_transactions = self.local.load_transactions()
        if not local_transactions:
            if local_transactions is not None:
                self.local.clear_transactions()
            self.local.clear_sync_marker()
            return ReconciliationResult(
                outcome=ReconciliationOutcome.SKIPPED,
                transactions=await self.load_remote(session),
            )

        self._syncing = True
        error = None
        try:
            outcome, transferred = await self._transfer(local_transactions, session)
        except RemoteStoreError as e:
            logger.error("Failed to sync transactions: %s", e)
            outcome, transferred, error = ReconciliationOutcome.FAILED, 0, str(e)
        finally:
            self._syncing = False

        return ReconciliationResult(
            outcome=outcome,
            transferred=transferred,
            transactions=await self.load_remote(session),
            error=error,
        )

    async def _transfer(self, local_transactions: List[Transaction], session: Session):
        marker = self.local.load_sync_marker()
        if marker is not None and marker.user_id == session.user_id:
            landed = await self.remote.query(
                TRANSACTIONS,
                {"user_id": session.user_id, "sync_batch": marker.batch_id},
            )
            if landed:
                logger.info(
                    "Sync batch %s already stored %d rows, finishing cleanup",
                    marker.batch_id,
                    len(landed),
                )
                self._discard_local()
                return ReconciliationOutcome.RECOVERED, len(landed)
            batch_id = marker.batch_id
        else:
            if marker is not None:
                # The other account's rows are not visible to this session,
                # so an earlier upload there cannot be ruled out.
                logger.warning(
                    "Sync batch %s was started for another account; uploading the device cache to the current account",
                    marker.batch_id,
                )
            batch_id = uuid.uuid4().hex
            self.local.save_sync_marker(SyncMarker(batch_id=batch_id, user_id=session.user_id))

        records = [prepare_for_upload(tx, session.user_id, batch_id) for tx in local_transactions]
        inserted = await self.remote.insert(TRANSACTIONS, records)
        logger.info("Sync successful (%d rows), clearing local storage", len(inserted))
        self._discard_local()
        return ReconciliationOutcome.TRANSFERRED, len(records)

    def _discard_local(self) -> None:
        self.local.clear_transactions()
        self.local.clear_sync_marker()

    async def load_remote(self, session: Session) -> Optional[List[Transaction]]:
        """Fetch the authoritative set, newest first. Returns None when the fetch fails."""
        try:
            rows = await self.remote.query(
                TRANSACTIONS,
                {"user_id": session.user_id},
                order_by="date",
                descending=True,
            )
        except RemoteStoreError as e:
            logger.error("Error fetching transactions: %s", e)
            return None
        return [Transaction(**row) for row in rows]
