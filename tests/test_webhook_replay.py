from datetime import datetime, timezone

import pytest

from payrelay.core.errors import StaleEvent
from payrelay.webhooks.replay import check_timestamp


NOW = datetime.fromtimestamp(1_700_000_000, tz=timezone.utc)


@pytest.mark.parametrize("age_seconds", [0, 1, 179, 180, -180])
def test_accepts_timestamps_inside_window(age_seconds: int) -> None:
    timestamp = 1_700_000_000 - age_seconds
    assert check_timestamp(str(timestamp), now=NOW) == timestamp


@pytest.mark.parametrize("age_seconds", [181, 300, -181, 86400])
def test_rejects_timestamps_outside_window(age_seconds: int) -> None:
    with pytest.raises(StaleEvent, match="outside tolerance"):
        check_timestamp(str(1_700_000_000 - age_seconds), now=NOW)


@pytest.mark.parametrize("timestamp", [None, "", "  ", "abc", "1.5", "-5", "17e8", "0x10"])
def test_rejects_missing_or_non_numeric_timestamps(timestamp) -> None:
    with pytest.raises(StaleEvent):
        check_timestamp(timestamp, now=NOW)


def test_custom_tolerance_is_honoured() -> None:
    check_timestamp(str(1_700_000_000 - 600), tolerance_seconds=600, now=NOW)
    with pytest.raises(StaleEvent):
        check_timestamp(str(1_700_000_000 - 61), tolerance_seconds=60, now=NOW)


def test_defaults_to_wall_clock() -> None:
    timestamp = int(datetime.now(timezone.utc).timestamp())
    assert check_timestamp(str(timestamp)) == timestamp


@pytest.mark.parametrize("timestamp", ["9" * 13, "9" * 5000])
def test_rejects_oversized_timestamps(timestamp: str) -> None:
    with pytest.raises(StaleEvent, match="out of range"):
        check_timestamp(timestamp, now=NOW)
