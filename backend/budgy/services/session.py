"""Session resolution: which store is authoritative right now."""
from dataclasses import dataclass
from typing import Optional, Union
from budgy.models.session import Session, SessionMode
from budgy.storage.local import LocalStore


@dataclass(frozen=True)
class LocalSource:
    """Guest mode: the device-local cache is authoritative."""

    cache: LocalStore


@dataclass(frozen=True)
class RemoteSource:
    """Authenticated mode: the remote store is authoritative for this identity."""

    session: Session


DataSource = Union[LocalSource, RemoteSource]


def resolve_mode(session: Optional[Session], guest_mode: bool) -> SessionMode:
    """
    Map authentication state to exactly one mode.

    A valid session wins over the guest flag.
    """
    if session is not None:
        return SessionMode.AUTHENTICATED
    if guest_mode:
        return SessionMode.ANONYMOUS
    return SessionMode.LOGGED_OUT


def resolve_data_source(
    session: Optional[Session],
    guest_mode: bool,
    cache: LocalStore,
) -> Optional[DataSource]:
    """Return the authoritative store, or None when logged out."""
    mode = resolve_mode(session, guest_mode)
    if mode == SessionMode.AUTHENTICATED:
        return RemoteSource(session)
    if mode == SessionMode.ANONYMOUS:
        return LocalSource(cache)
    return None
