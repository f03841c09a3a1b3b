from typing import Optional

from stockcount.core.constants import EntityKind


class StockCountError(Exception):
    """Base class for recoverable errors surfaced to the user."""

    user_message = "Something went wrong. Please try again."


class InvalidEntry(StockCountError, ValueError):
    def __init__(self, message: str):
        super().__init__(message)
        self.user_message = message


class RemoteStoreError(StockCountError):
    def __init__(
        self,
        message: str,
        *,
        kind: Optional[EntityKind] = None,
        operation: Optional[str] = None,
        temp_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.operation = operation
        self.temp_id = temp_id

    def __str__(self):
        base = super().__str__()
        if self.kind is None:
            return base
        kind = self.kind.value if isinstance(self.kind, EntityKind) else self.kind
        return "{} {}: {}".format(kind, self.operation or "call", base)


class RemoteUnavailable(RemoteStoreError):
    user_message = "Could not reach the cloud store. Check your connection and try again."


class RemoteRejected(RemoteStoreError):
    user_message = "The cloud store rejected the change."


class GatewayNotConfigured(RemoteStoreError):
    user_message = (
        "The remote store is not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY."
    )


__all__ = [
    "GatewayNotConfigured",
    "InvalidEntry",
    "RemoteRejected",
    "RemoteStoreError",
    "RemoteUnavailable",
    "StockCountError",
]
