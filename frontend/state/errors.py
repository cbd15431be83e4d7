"""
Failure taxonomy for the client.

None of these is fatal: every path degrades to "keep using local state".
"""

from typing import Optional


class CompanionError(Exception):
    """Base for every client-side failure"""


class ValidationError(CompanionError):
    """Missing or malformed form input; raised before any network call"""


class RemoteUnavailable(CompanionError):
    """Network failure, non-success status or malformed response body"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class RemoteRejected(CompanionError):
    """The service understood the request and refused it (bad credentials, duplicates...)"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class AuthorizationDenied(RemoteRejected):
    """Ownership mismatch on update/delete"""


class StorageCorruption(CompanionError):
    """Persisted cache value could not be decoded"""
