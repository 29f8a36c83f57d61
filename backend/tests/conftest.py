"""Shared fixtures: throwaway SQLite stores and a tracker wired to them."""
from datetime import datetime
import pytest
from budgy.models.session import SignUpRequest
from budgy.models.transaction import Transaction, TransactionStatus, TransactionType
from budgy.services.insights import InsightsService
from budgy.services.tracker import FinanceTracker
from budgy.storage.database import SqliteRemoteStore
from budgy.storage.local import LocalStore

PASSWORD = "Passw0rd!"


def make_transaction(
    amount: float,
    type: TransactionType = TransactionType.EXPENSE,
    status: TransactionStatus = TransactionStatus.COMPLETED,
    category: str = "Other",
    date: datetime = datetime(2024, 1, 15, 12, 0),
    id: str = None,
    title: str = "Test",
) -> Transaction:
    return Transaction(
        id=id,
        title=title,
        amount=amount,
        type=type,
        status=status,
        category=category,
        date=date,
    )


def sign_up_request(email: str = "asha@example.com", full_name: str = "") -> SignUpRequest:
    return SignUpRequest(
        email=email,
        password=PASSWORD,
        confirm_password=PASSWORD,
        full_name=full_name,
    )


@pytest.fixture
def local_store(tmp_path):
    return LocalStore(str(tmp_path / "local.db"))


@pytest.fixture
def remote_store(tmp_path):
    return SqliteRemoteStore(str(tmp_path / "remote.db"))


@pytest.fixture
def tracker(local_store, remote_store):
    tracker = FinanceTracker(local_store, remote_store, insights=InsightsService("mock:advisor"))
    yield tracker
    tracker.close()
