"""Remote store backed by a hosted Supabase project (GoTrue auth + PostgREST)."""
import logging
from typing import Any, Dict, List, Optional
import httpx
from budgy.config import settings
from budgy.exceptions import AuthenticationError, RemoteStoreError
from budgy.models.session import Credentials, Session, SignUpRequest
from budgy.storage.remote import RemoteStore

logger = logging.getLogger(__name__)


class SupabaseRemoteStore(RemoteStore):
    """Talks to the Supabase REST endpoints with ``httpx``."""

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__()
        self.url = (url or settings.supabase_url).rstrip("/")
        self.api_key = api_key or settings.supabase_key
        if not self.url or not self.api_key:
            raise ValueError("Supabase URL and key required. Set SUPABASE_URL and SUPABASE_KEY in .env")
        self.timeout = timeout if timeout is not None else settings.remote_timeout_seconds
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        token = self._session.access_token if self._session else self.api_key
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        headers = self._headers()
        if extra_headers:
            headers.update(extra_headers)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.request(method, f"{self.url}{path}", params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            raise RemoteStoreError(f"Supabase request failed: {e}")

        if resp.status_code >= 400:
            logger.error("Supabase error %s on %s %s: %s", resp.status_code, method, path, resp.text)
            raise RemoteStoreError(self._error_message(resp), status=resp.status_code)
        if not resp.content:
            return None
        return resp.json()

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            return resp.text or f"HTTP {resp.status_code}"
        return body.get("msg") or body.get("message") or body.get("error_description") or body.get("error") or str(body)

    def _to_session(self, body: Dict[str, Any]) -> Session:
        user = body.get("user") or {}
        return Session(
            user_id=user["id"],
            email=user.get("email", ""),
            access_token=body.get("access_token", ""),
            refresh_token=body.get("refresh_token"),
            user_metadata=user.get("user_metadata") or {},
        )

    # Auth

    async def sign_up(self, request: SignUpRequest) -> Optional[Session]:
        try:
            body = await self._request(
                "POST",
                "/auth/v1/signup",
                json={
                    "email": request.email,
                    "password": request.password,
                    "data": {"full_name": request.full_name, "gender": request.gender},
                },
            )
        except RemoteStoreError as e:
            raise AuthenticationError(str(e), status=e.status)

        # No access token means the project requires email confirmation
        if not body or not body.get("access_token"):
            return None
        session = self._to_session(body)
        await self._set_session(session)
        return session

    async def authenticate(self, credentials: Credentials) -> Session:
        try:
            body = await self._request(
                "POST",
                "/auth/v1/token",
                params={"grant_type": "password"},
                json={"email": credentials.email, "password": credentials.password},
            )
        except RemoteStoreError as e:
            raise AuthenticationError(str(e), status=e.status)
        session = self._to_session(body)
        await self._set_session(session)
        return session

    async def sign_out(self) -> None:
        if self._session is not None:
            try:
                await self._request("POST", "/auth/v1/logout")
            except RemoteStoreError as e:
                logger.warning("Remote sign-out failed, dropping session locally: %s", e)
        await super().sign_out()

    # Data

    async def query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        params = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        return await self._request("GET", f"/rest/v1/{collection}", params=params) or []

    async def insert(self, collection: str, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return await self._request(
            "POST",
            f"/rest/v1/{collection}",
            json=records,
            extra_headers={"Prefer": "return=representation"},
        ) or []

    async def update_where(
        self,
        collection: str,
        filters: Dict[str, Any],
        patch: Dict[str, Any],
    ) -> None:
        params = {column: f"eq.{value}" for column, value in filters.items()}
        await self._request("PATCH", f"/rest/v1/{collection}", params=params, json=patch)

    async def upsert(self, collection: str, record: Dict[str, Any]) -> None:
        await self._request(
            "POST",
            f"/rest/v1/{collection}",
            json=record,
            extra_headers={"Prefer": "resolution=merge-duplicates"},
        )

    async def delete(self, collection: str, key: str) -> None:
        await self._request("DELETE", f"/rest/v1/{collection}", params={"id": f"eq.{key}"})
