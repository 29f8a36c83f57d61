"""Tests for the device-local key/value cache."""
from budgy.models.profile import Theme, UserProfile
from budgy.storage.local import LocalStore, SyncMarker
from tests.conftest import make_transaction


def test_missing_cache_is_none(local_store):
    assert local_store.load_transactions() is None
    assert local_store.load_profile() is None
    assert local_store.load_sync_marker() is None


def test_transactions_persist_across_instances(tmp_path):
    path = str(tmp_path / "cache.db")
    LocalStore(path).save_transactions([make_transaction(12.5, id="abc123xyz", title="Bus")])

    loaded = LocalStore(path).load_transactions()

    assert [(tx.id, tx.title, tx.amount) for tx in loaded] == [("abc123xyz", "Bus", 12.5)]


def test_clear_transactions(local_store):
    local_store.save_transactions([])
    assert local_store.load_transactions() == []

    local_store.clear_transactions()
    assert local_store.load_transactions() is None


def test_profile_and_theme(local_store):
    local_store.save_profile(UserProfile(name="Asha", currency="£", monthly_budget=900.0))
    local_store.save_theme(Theme.LIGHT)

    assert local_store.load_profile().currency == "£"
    assert local_store.load_theme() == Theme.LIGHT


def test_unknown_theme_falls_back_to_dark(local_store):
    local_store.set_item("theme", "sepia")
    assert local_store.load_theme() == Theme.DARK


def test_sync_marker(local_store):
    local_store.save_sync_marker(SyncMarker(batch_id="b1", user_id="u1"))

    marker = local_store.load_sync_marker()
    assert (marker.batch_id, marker.user_id, marker.status) == ("b1", "u1", "in_progress")

    local_store.clear_sync_marker()
    assert local_store.load_sync_marker() is None
