"""Shared-secret checks for the ingestion trigger endpoints."""

from __future__ import annotations

import math
import secrets

from event_ingest.errors import AuthError, ConfigError


def require_bearer(authorization: str | None, secret: str | None) -> None:
    """Check an ``Authorization: Bearer <secret>`` header.

    Raises:
        ConfigError: The ingest secret is not configured.
        AuthError: The header is missing or does not match.
    """
    if not secret:
        raise ConfigError("Server misconfigured: missing INGEST_SECRET")
    if not secrets.compare_digest(authorization or "", f"Bearer {secret}"):
        raise AuthError("Unauthorized")


def require_key(key: str | None, secret: str | None) -> None:
    """Check the ``key`` query parameter used by the scheduled trigger.

    Raises:
        ConfigError: The cron secret is not configured.
        AuthError: The key is missing or does not match.
    """
    if not secret:
        raise ConfigError("Server misconfigured: missing CRON_SECRET")
    if key is None or not secrets.compare_digest(key, secret):
        raise AuthError("Unauthorized")


def parse_max_pages(raw: str | None, default: int) -> int:
    """Parse a ``maxPages`` query value leniently.

    Missing, non-numeric, non-finite or non-positive values fall back to
    ``default``; fractional values are floored.  A value below 1 after
    flooring (e.g. ``0.5``) also falls back.
    """
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if not math.isfinite(value) or value < 1:
        return default
    return math.floor(value)
