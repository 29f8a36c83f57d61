"""Device-local key/value storage using SQLite."""
import sqlite3
import json
import logging
from datetime import datetime
from typing import Any, List, Optional
from contextlib import contextmanager
from pydantic import BaseModel
from budgy.models.transaction import Transaction
from budgy.models.profile import UserProfile, Theme

logger = logging.getLogger(__name__)

GUEST_TRANSACTIONS_KEY = "budgy_guest_transactions"
PROFILE_KEY = "budgy_profile"
THEME_KEY = "theme"
SYNC_MARKER_KEY = "budgy_sync_marker"


class SyncMarker(BaseModel):
    """Durable record of a reconciliation batch that has been started."""

    batch_id: str
    user_id: str
    status: str = "in_progress"


class LocalStore:
    """Key/value cache for guest data, the profile and preferences."""

    def __init__(self, db_path: str = "budgy_local.db"):
        self.db_path = db_path
        self._init_db()

    def _init_db(self):
        """Initialize database tables."""
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    @contextmanager
    def _get_conn(self):
        """Get database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def get_item(self, key: str) -> Optional[str]:
        with self._get_conn() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return row["value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        with self._get_conn() as conn:
            conn.execute("""
                INSERT OR REPLACE INTO kv (key, value, updated_at)
                VALUES (?, ?, ?)
            """, (key, value, datetime.utcnow().isoformat()))
            conn.commit()

    def remove_item(self, key: str) -> None:
        with self._get_conn() as conn:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()

    def get_json(self, key: str) -> Optional[Any]:
        """Read and decode a JSON value. Corrupt values raise ``json.JSONDecodeError``."""
        raw = self.get_item(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value, default=str))

    # Guest transactions

    def load_transactions(self) -> Optional[List[Transaction]]:
        """Return the cached guest transactions, or None when no cache exists."""
        data = self.get_json(GUEST_TRANSACTIONS_KEY)
        if data is None:
            return None
        return [Transaction(**item) for item in data]

    def save_transactions(self, transactions: List[Transaction]) -> None:
        self.set_json(
            GUEST_TRANSACTIONS_KEY,
            [tx.model_dump(mode="json", exclude_none=True) for tx in transactions],
        )

    def clear_transactions(self) -> None:
        self.remove_item(GUEST_TRANSACTIONS_KEY)
        logger.info("Local transaction cache cleared")

    # Profile and preferences

    def load_profile(self) -> Optional[UserProfile]:
        data = self.get_json(PROFILE_KEY)
        return UserProfile(**data) if data is not None else None

    def save_profile(self, profile: UserProfile) -> None:
        self.set_json(PROFILE_KEY, profile.model_dump())

    def load_theme(self) -> Theme:
        raw = self.get_item(THEME_KEY)
        return Theme(raw) if raw in (Theme.DARK.value, Theme.LIGHT.value) else Theme.DARK

    def save_theme(self, theme: Theme) -> None:
        self.set_item(THEME_KEY, theme.value)

    # Reconciliation marker

    def load_sync_marker(self) -> Optional[SyncMarker]:
        data = self.get_json(SYNC_MARKER_KEY)
        return SyncMarker(**data) if data is not None else None

    def save_sync_marker(self, marker: SyncMarker) -> None:
        self.set_json(SYNC_MARKER_KEY, marker.model_dump())

    def clear_sync_marker(self) -> None:
        self.remove_item(SYNC_MARKER_KEY)
