"""Tests for guest-to-account reconciliation."""
import logging
import pytest
from budgy.exceptions import RemoteStoreError
from budgy.services.aggregator import compute_financials
from budgy.services.reconciler import ReconciliationOutcome, Reconciler, prepare_for_upload
from budgy.storage.database import SqliteRemoteStore
from budgy.storage.local import SyncMarker
from budgy.storage.remote import TRANSACTIONS
from budgy.models.transaction import TransactionType
from tests.conftest import make_transaction, sign_up_request


class FlakyRemoteStore(SqliteRemoteStore):
    """Remote store whose batch insert can be made to fail or to crash after writing."""

    def __init__(self, db_path):
        super().__init__(db_path)
        self.fail_insert = False
        self.crash_after_insert = False
        self.insert_calls = 0
        self.on_insert = None

    async def insert(self, collection, records):
        self.insert_calls += 1
        if self.on_insert is not None:
            await self.on_insert()
        if self.fail_insert:
            raise RemoteStoreError("network unreachable", status=503)
        rows = await super().insert(collection, records)
        if self.crash_after_insert:
            raise RuntimeError("process killed")
        return rows


@pytest.fixture
def flaky_store(tmp_path):
    return FlakyRemoteStore(str(tmp_path / "remote.db"))


async def _signed_in(store):
    await store.sign_up(sign_up_request())
    return store.current_session()


def _guest_expenses():
    return [
        make_transaction(100.0, id="loc00001a", title="Rent share"),
        make_transaction(50.0, id="loc00002b", title="Groceries"),
    ]


@pytest.mark.asyncio
async def test_transfer_merges_with_existing_remote_data(local_store, remote_store):
    """Test two guest expenses join one remote income record."""
    session = await _signed_in(remote_store)
    await remote_store.insert(TRANSACTIONS, [{
        "user_id": session.user_id,
        "title": "Salary",
        "amount": 200.0,
        "type": "INCOME",
        "status": "COMPLETED",
        "category": "Salary",
        "date": "2024-01-05T09:00:00",
    }])
    local_store.save_transactions(_guest_expenses())

    result = await Reconciler(local_store, remote_store).reconcile(session)

    assert result.outcome == ReconciliationOutcome.TRANSFERRED
    assert result.transferred == 2
    financials = compute_financials(result.transactions)
    assert financials.income == 200.0
    assert financials.expense == 150.0
    assert financials.pending == 0.0
    assert financials.balance == 50.0
    assert local_store.load_transactions() is None
    assert local_store.load_sync_marker() is None


@pytest.mark.asyncio
async def test_transfer_assigns_fresh_ids_and_owner(local_store, remote_store):
    session = await _signed_in(remote_store)
    local_store.save_transactions(_guest_expenses())

    result = await Reconciler(local_store, remote_store).reconcile(session)

    assert len(result.transactions) == 2
    for tx in result.transactions:
        assert tx.id not in ("loc00001a", "loc00002b")
        assert tx.user_id == session.user_id


def test_prepare_for_upload_strips_local_id():
    record = prepare_for_upload(make_transaction(10.0, id="abc123xyz"), "user-1", "batch-1")

    assert "id" not in record
    assert record["user_id"] == "user-1"
    assert record["sync_batch"] == "batch-1"
    assert record["type"] == "EXPENSE"


@pytest.mark.asyncio
async def test_no_local_data_loads_remote(local_store, remote_store):
    session = await _signed_in(remote_store)

    result = await Reconciler(local_store, remote_store).reconcile(session)

    assert result.outcome == ReconciliationOutcome.SKIPPED
    assert result.transactions == []


@pytest.mark.asyncio
async def test_empty_local_cache_is_discarded(local_store, remote_store):
    session = await _signed_in(remote_store)
    local_store.save_transactions([])

    result = await Reconciler(local_store, remote_store).reconcile(session)

    assert result.outcome == ReconciliationOutcome.SKIPPED
    assert local_store.load_transactions() is None


@pytest.mark.asyncio
async def test_rerun_adds_no_records(local_store, remote_store):
    """Reconciling again after the cache is gone does not duplicate anything."""
    session = await _signed_in(remote_store)
    local_store.save_transactions(_guest_expenses())
    reconciler = Reconciler(local_store, remote_store)

    await reconciler.reconcile(session)
    second = await reconciler.reconcile(session)
    third = await reconciler.reconcile(session)

    assert second.outcome == ReconciliationOutcome.SKIPPED
    assert third.outcome == ReconciliationOutcome.SKIPPED
    assert len(await remote_store.query(TRANSACTIONS)) == 2


@pytest.mark.asyncio
async def test_failed_insert_keeps_cache_for_retry(local_store, flaky_store):
    """Test a failed batch leaves the cache untouched and is retried later."""
    session = await _signed_in(flaky_store)
    local_store.save_transactions(_guest_expenses())
    reconciler = Reconciler(local_store, flaky_store)
    flaky_store.fail_insert = True

    failed = await reconciler.reconcile(session)

    assert failed.outcome == ReconciliationOutcome.FAILED
    assert "network unreachable" in failed.error
    assert failed.transactions == []
    assert reconciler.syncing is False
    assert [tx.id for tx in local_store.load_transactions()] == ["loc00001a", "loc00002b"]

    flaky_store.fail_insert = False
    retried = await reconciler.reconcile(session)

    assert retried.outcome == ReconciliationOutcome.TRANSFERRED
    assert len(retried.transactions) == 2
    assert local_store.load_transactions() is None


@pytest.mark.asyncio
async def test_crash_after_remote_write_is_not_duplicated(local_store, flaky_store):
    """Test an interrupted run is finished on the next sign-in without re-uploading."""
    session = await _signed_in(flaky_store)
    local_store.save_transactions(_guest_expenses())
    reconciler = Reconciler(local_store, flaky_store)
    flaky_store.crash_after_insert = True

    with pytest.raises(RuntimeError):
        await reconciler.reconcile(session)

    assert reconciler.syncing is False
    assert local_store.load_transactions() is not None
    assert local_store.load_sync_marker() is not None

    flaky_store.crash_after_insert = False
    result = await reconciler.reconcile(session)

    assert result.outcome == ReconciliationOutcome.RECOVERED
    assert flaky_store.insert_calls == 1
    assert len(await flaky_store.query(TRANSACTIONS)) == 2
    assert local_store.load_transactions() is None
    assert local_store.load_sync_marker() is None


@pytest.mark.asyncio
async def test_only_one_reconciliation_in_flight(local_store, flaky_store):
    session = await _signed_in(flaky_store)
    local_store.save_transactions(_guest_expenses())
    reconciler = Reconciler(local_store, flaky_store)
    observed = {}

    async def reenter():
        observed["syncing"] = reconciler.syncing
        observed["nested"] = await reconciler.reconcile(session)

    flaky_store.on_insert = reenter
    result = await reconciler.reconcile(session)

    assert observed["syncing"] is True
    assert observed["nested"].outcome == ReconciliationOutcome.IN_FLIGHT
    assert result.outcome == ReconciliationOutcome.TRANSFERRED
    assert reconciler.syncing is False
    assert len(await flaky_store.query(TRANSACTIONS)) == 2


@pytest.mark.asyncio
async def test_marker_of_other_user_is_replaced(local_store, remote_store, caplog):
    session = await _signed_in(remote_store)
    local_store.save_transactions([make_transaction(30.0, type=TransactionType.INCOME, id="loc00003c")])
    local_store.save_sync_marker(SyncMarker(batch_id="stale", user_id="someone-else"))

    with caplog.at_level(logging.WARNING, logger="budgy.services.reconciler"):
        result = await Reconciler(local_store, remote_store).reconcile(session)

    assert result.outcome == ReconciliationOutcome.TRANSFERRED
    assert result.transactions[0].sync_batch != "stale"
    assert "started for another account" in caplog.text
    assert local_store.load_sync_marker() is None
