"""Remote store backed by SQLite, used for local development and tests."""
import sqlite3
import json
import logging
import secrets
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional
from contextlib import contextmanager
import bcrypt
from budgy.exceptions import AuthenticationError, RemoteStoreError
from budgy.models.session import Credentials, Session, SignUpRequest
from budgy.storage.remote import PROFILES, TRANSACTIONS, RemoteStore

logger = logging.getLogger(__name__)

COLUMNS = {
    TRANSACTIONS: ["id", "user_id", "title", "amount", "type", "status", "category", "date", "sync_batch"],
    PROFILES: ["id", "name", "currency", "monthly_budget", "updated_at"],
}


class SqliteRemoteStore(RemoteStore):
    """SQLite implementation of the remote store contract.

    Data operations require a session, and transaction rows can only be read
    or written by their owner.
    """

    def __init__(self, db_path: str = "budgy_remote.db", require_email_confirmation: bool = False):
        super().__init__()
        self.db_path = db_path
        self.require_email_confirmation = require_email_confirmation
        self._init_db()

    def _init_db(self):
        """Initialize database tables."""
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    user_metadata TEXT NOT NULL,
                    confirmed INTEGER NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS transactions (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    amount REAL NOT NULL,
                    type TEXT NOT NULL,
                    status TEXT NOT NULL,
                    category TEXT NOT NULL,
                    date TEXT NOT NULL,
                    sync_batch TEXT,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_user_date
                ON transactions(user_id, date)
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS profiles (
                    id TEXT PRIMARY KEY,
                    name TEXT,
                    currency TEXT,
                    monthly_budget REAL,
                    updated_at TEXT
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

    # Auth

    async def sign_up(self, request: SignUpRequest) -> Optional[Session]:
        """Register a user; returns a session unless email confirmation is required."""
        password_hash = bcrypt.hashpw(request.password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
        metadata = {"full_name": request.full_name, "gender": request.gender}
        user_id = str(uuid.uuid4())
        with self._get_conn() as conn:
            try:
                conn.execute("""
                    INSERT INTO users (id, email, password_hash, user_metadata, confirmed, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                """, (
                    user_id,
                    request.email.lower(),
                    password_hash,
                    json.dumps(metadata),
                    0 if self.require_email_confirmation else 1,
                    datetime.utcnow().isoformat(),
                ))
                conn.commit()
            except sqlite3.IntegrityError:
                raise AuthenticationError("User already registered", status=422)

        logger.info("Registered user %s", user_id)
        if self.require_email_confirmation:
            return None

        session = self._issue_session(user_id, request.email.lower(), metadata)
        await self._set_session(session)
        return session

    def confirm_email(self, email: str) -> None:
        """Mark an account as confirmed (stands in for the emailed confirmation link)."""
        with self._get_conn() as conn:
            conn.execute("UPDATE users SET confirmed = 1 WHERE email = ?", (email.lower(),))
            conn.commit()

    async def authenticate(self, credentials: Credentials) -> Session:
        """Verify credentials and start a session."""
        with self._get_conn() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ?",
                (credentials.email.lower(),),
            ).fetchone()

        if not row or not bcrypt.checkpw(
            credentials.password.encode("utf-8"),
            row["password_hash"].encode("utf-8"),
        ):
            raise AuthenticationError("Invalid login credentials", status=400)
        if not row["confirmed"]:
            raise AuthenticationError("Email not confirmed", status=400)

        session = self._issue_session(row["id"], row["email"], json.loads(row["user_metadata"]))
        await self._set_session(session)
        return session

    def _issue_session(self, user_id: str, email: str, metadata: Dict[str, Any]) -> Session:
        return Session(
            user_id=user_id,
            email=email,
            access_token=secrets.token_urlsafe(32),
            user_metadata=metadata,
        )

    # Data

    def _require_session(self) -> Session:
        if self._session is None:
            raise RemoteStoreError("Not authenticated", status=401)
        return self._session

    def _columns(self, collection: str) -> List[str]:
        if collection not in COLUMNS:
            raise RemoteStoreError(f"Unknown collection: {collection}", status=404)
        return COLUMNS[collection]

    def _check_fields(self, collection: str, fields) -> None:
        unknown = set(fields) - set(self._columns(collection))
        if unknown:
            raise RemoteStoreError(
                f"Unknown columns for {collection}: {', '.join(sorted(unknown))}",
                status=400,
            )

    def _owner_filter(self, collection: str, session: Session) -> tuple:
        if collection == TRANSACTIONS:
            return "user_id", session.user_id
        return "id", session.user_id

    def _row_to_record(self, collection: str, row: sqlite3.Row) -> Dict[str, Any]:
        return {column: row[column] for column in self._columns(collection)}

    async def query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        """Query records visible to the current session."""
        session = self._require_session()
        filters = dict(filters or {})
        self._check_fields(collection, filters)
        if order_by:
            self._check_fields(collection, [order_by])

        owner_column, owner_value = self._owner_filter(collection, session)
        query = f"SELECT * FROM {collection} WHERE {owner_column} = ?"
        params: List[Any] = [owner_value]
        for column, value in filters.items():
            query += f" AND {column} = ?"
            params.append(value)
        if order_by:
            query += f" ORDER BY {order_by} {'DESC' if descending else 'ASC'}"

        with self._get_conn() as conn:
            rows = conn.execute(query, params).fetchall()
            return [self._row_to_record(collection, row) for row in rows]

    async def insert(self, collection: str, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Insert the whole batch in one SQLite transaction."""
        session = self._require_session()
        columns = self._columns(collection)
        owner_column, owner_value = self._owner_filter(collection, session)

        prepared = []
        for record in records:
            self._check_fields(collection, record)
            if record.get(owner_column, owner_value) != owner_value:
                raise RemoteStoreError("Row violates owner policy", status=403)
            row = {column: record.get(column) for column in columns}
            row["id"] = row["id"] or str(uuid.uuid4())
            row[owner_column] = owner_value
            prepared.append(row)

        extra = ["created_at"] if collection == TRANSACTIONS else []
        placeholders = ", ".join("?" for _ in columns + extra)
        now = datetime.utcnow().isoformat()
        with self._get_conn() as conn:
            try:
                for row in prepared:
                    conn.execute(
                        f"INSERT INTO {collection} ({', '.join(columns + extra)}) VALUES ({placeholders})",
                        [row[column] for column in columns] + ([now] if extra else []),
                    )
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise RemoteStoreError(f"Insert into {collection} failed: {e}", status=409)

        logger.info("Inserted %d rows into %s", len(prepared), collection)
        return prepared

    async def update_where(
        self,
        collection: str,
        filters: Dict[str, Any],
        patch: Dict[str, Any],
    ) -> None:
        """Run one UPDATE statement scoped to the session owner."""
        session = self._require_session()
        self._check_fields(collection, filters)
        self._check_fields(collection, patch)
        if not patch:
            return
        owner_column, owner_value = self._owner_filter(collection, session)
        assignments = ", ".join(f"{column} = ?" for column in patch)
        query = f"UPDATE {collection} SET {assignments} WHERE {owner_column} = ?"
        params: List[Any] = list(patch.values()) + [owner_value]
        for column, value in filters.items():
            query += f" AND {column} = ?"
            params.append(value)

        with self._get_conn() as conn:
            try:
                cursor = conn.execute(query, params)
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise RemoteStoreError(f"Update of {collection} failed: {e}", status=409)
        logger.info("Updated %d rows in %s", cursor.rowcount, collection)

    async def upsert(self, collection: str, record: Dict[str, Any]) -> None:
        session = self._require_session()
        self._check_fields(collection, record)
        owner_column, owner_value = self._owner_filter(collection, session)
        if record.get(owner_column, owner_value) != owner_value:
            raise RemoteStoreError("Row violates owner policy", status=403)
        if collection == TRANSACTIONS:
            raise RemoteStoreError("Upsert is only supported for profiles", status=400)

        row = {column: record.get(column) for column in self._columns(collection)}
        row["id"] = owner_value
        with self._get_conn() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO {collection} ({', '.join(row)}) VALUES ({', '.join('?' for _ in row)})",
                list(row.values()),
            )
            conn.commit()

    async def delete(self, collection: str, key: str) -> None:
        session = self._require_session()
        owner_column, owner_value = self._owner_filter(collection, session)
        self._columns(collection)
        with self._get_conn() as conn:
            conn.execute(
                f"DELETE FROM {collection} WHERE id = ? AND {owner_column} = ?",
                (key, owner_value),
            )
            conn.commit()
