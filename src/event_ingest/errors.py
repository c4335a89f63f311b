"""Exception taxonomy for ingestion runs and their HTTP entry points."""

from __future__ import annotations


class IngestError(Exception):
    """Base class for errors raised by the ingestion service."""


class ConfigError(IngestError):
    """A required credential or secret is not configured."""


class AuthError(IngestError):
    """A caller presented a missing or wrong bearer token / key."""


class UpstreamError(IngestError):
    """The upstream API returned a non-success or malformed response."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class StorageError(IngestError):
    """A persistence-layer operation failed."""
