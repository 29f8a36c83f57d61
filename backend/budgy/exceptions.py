"""Error types shared across the storage and service layers."""


class RemoteStoreError(Exception):
    """Raised when the remote store rejects or fails a request."""

    def __init__(self, message: str, status: int = 0):
        super().__init__(message)
        self.status = status


class AuthenticationError(RemoteStoreError):
    """Raised when sign-in or sign-up is refused by the remote store."""
    pass


class TrackerError(Exception):
    """User-facing failure of a tracker action."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
