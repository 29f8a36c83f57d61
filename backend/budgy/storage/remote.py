"""Remote store contract shared by the SQLite and Supabase backends."""
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Optional
from budgy.models.session import Credentials, Session, SignUpRequest

logger = logging.getLogger(__name__)

TRANSACTIONS = "transactions"
PROFILES = "profiles"

SessionCallback = Callable[[Optional[Session]], Awaitable[None]]


class RemoteStore(ABC):
    """Abstract backend-as-a-service: session handling plus CRUD on collections.

    Session listeners are awaited in registration order whenever the session
    changes, so callers of ``authenticate``/``sign_out`` observe the reloaded
    state once the call returns.
    """

    def __init__(self):
        self._session: Optional[Session] = None
        self._listeners: List[SessionCallback] = []

    def current_session(self) -> Optional[Session]:
        """Return the active session, if any."""
        return self._session

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        """Register a session listener. Returns a function that unsubscribes it."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def _set_session(self, session: Optional[Session]) -> None:
        self._session = session
        for callback in list(self._listeners):
            await callback(session)

    @abstractmethod
    async def authenticate(self, credentials: Credentials) -> Session:
        """
        Sign in with email and password.

        Raises:
            AuthenticationError: If the credentials are rejected
        """
        pass

    @abstractmethod
    async def sign_up(self, request: SignUpRequest) -> Optional[Session]:
        """
        Register a new account.

        Returns:
            The new session, or None when the account needs email confirmation first
        """
        pass

    async def sign_out(self) -> None:
        """End the current session. Remote data is left untouched."""
        await self._set_session(None)

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        """Return records of a collection matching all equality filters."""
        pass

    @abstractmethod
    async def insert(self, collection: str, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Insert a batch of records as one operation and return the stored rows."""
        pass

    async def update(self, collection: str, key: str, patch: Dict[str, Any]) -> None:
        """Apply a partial update to the record with the given id."""
        await self.update_where(collection, {"id": key}, patch)

    @abstractmethod
    async def update_where(
        self,
        collection: str,
        filters: Dict[str, Any],
        patch: Dict[str, Any],
    ) -> None:
        """
        Apply one partial update to every visible record matching all equality filters.

        The update is a single operation: either every matching record is
        changed or none is.
        """
        pass

    @abstractmethod
    async def upsert(self, collection: str, record: Dict[str, Any]) -> None:
        """Insert a record or replace the one with the same id."""
        pass

    @abstractmethod
    async def delete(self, collection: str, key: str) -> None:
        """Delete the record with the given id."""
        pass
