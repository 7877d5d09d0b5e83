"""Exception types raised by the Duplicate Finder."""


class DupeFinderError(Exception):
    """Base class for all Duplicate Finder errors."""


class FetchError(DupeFinderError):
    """Image data could not be retrieved, decoded, or the request was cancelled."""

    def __init__(self, item_id: str, reason: str):
        super().__init__(f"Failed to fetch {item_id}: {reason}")
        self.item_id = item_id
        self.reason = reason


class ConfigurationError(DupeFinderError):
    """The scan configuration cannot be used."""


class PersistenceError(DupeFinderError):
    """Record store or result cache could not be written or read."""


class DeleteError(DupeFinderError):
    """A bulk delete request failed."""

    def __init__(self, message: str, item_ids=None):
        super().__init__(message)
        self.item_ids = list(item_ids or [])
