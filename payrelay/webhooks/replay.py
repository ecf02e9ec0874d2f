"""Replay-window check for webhook timestamps."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from payrelay.core.errors import StaleEvent


DEFAULT_TOLERANCE_SECONDS = 180

MAX_TIMESTAMP_DIGITS = 12


def parse_timestamp(timestamp: Optional[str]) -> int:
    value = (timestamp or "").strip()
    if not value:
        raise StaleEvent("Webhook timestamp missing")
    if not (value.isascii() and value.isdigit()):
        raise StaleEvent("Webhook timestamp is not a whole number of seconds")
    if len(value) > MAX_TIMESTAMP_DIGITS:
        raise StaleEvent("Webhook timestamp out of range")
    return int(value)


def check_timestamp(
    timestamp: Optional[str],
    *,
    tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
    now: Optional[datetime] = None,
) -> int:
    """Return the parsed timestamp, or raise ``StaleEvent`` outside the window.

    The window is symmetric so modest clock skew in either direction passes.
    """

    event_time = parse_timestamp(timestamp)
    current_time = now or datetime.now(timezone.utc)
    age_seconds = abs(int(current_time.timestamp()) - event_time)
    if age_seconds > tolerance_seconds:
        raise StaleEvent("Webhook timestamp outside tolerance window")
    return event_time
