"""Exception types raised by aidmap."""

from typing import Optional


class AidmapError(Exception):
    """Base class for aidmap errors."""


class ConfigError(AidmapError):
    """Backend or runtime settings are missing or malformed."""


class BackendError(AidmapError):
    """Reading a collection from the backend failed."""

    def __init__(self, collection: str, message: str, status: Optional[int] = None):
        self.collection = collection
        self.status = status
        detail = f"{collection}: {message}"
        if status is not None:
            detail = f"{detail} (HTTP {status})"
        super().__init__(detail)
