"""Exception hierarchy for zonesync."""


class ZoneSyncError(Exception):
    """Base exception for zonesync."""


class ConfigError(ZoneSyncError):
    """Raised when a zone file or credentials cannot be loaded."""


class ProviderError(ZoneSyncError):
    """Raised when a call to the DNS provider fails."""


class APIError(ProviderError):
    """Raised when the provider answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"API error: {status_code} - {message}" if message else f"API error: {status_code}")


class ZoneFetchError(ZoneSyncError):
    """Raised when the current record set of a zone cannot be fetched."""


class DuplicateRecordError(ZoneSyncError):
    """Raised when several records share the same (name, type) key."""

    def __init__(self, source: str, keys: list):
        self.source = source
        self.keys = keys
        rendered = ", ".join(str(key) for key in keys)
        super().__init__(f"{source} records contain duplicate keys: {rendered}")


class RecordOperationError(ZoneSyncError):
    """A single create, update or delete call that failed."""

    def __init__(self, operation: str, key, cause: Exception):
        self.operation = operation
        self.key = key
        self.cause = cause
        super().__init__(f"failed to {operation} record {key}: {cause}")


class RefreshError(ZoneSyncError):
    """The trailing zone refresh failed."""
