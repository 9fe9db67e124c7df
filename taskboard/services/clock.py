"""Clock — the single source of "now" for services, replaceable in tests."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
