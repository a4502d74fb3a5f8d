"""Unit tests for sync/timecode.py — format_timecode()."""

import pytest

from frameio_sync.sync.timecode import format_timecode


class TestFormatTimecode:
    def test_truncates_fractional_seconds(self) -> None:
        assert format_timecode(125.7) == "2:05"

    def test_zero_is_formatted(self) -> None:
        assert format_timecode(0) == "0:00"

    def test_none_passes_through(self) -> None:
        assert format_timecode(None) is None

    def test_never_rounds_up_to_next_minute(self) -> None:
        assert format_timecode(59.999) == "0:59"

    def test_minutes_have_no_leading_zero(self) -> None:
        assert format_timecode(61) == "1:01"

    def test_long_durations_keep_counting_minutes(self) -> None:
        assert format_timecode(3725) == "62:05"

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_input_returns_none(self, value: float) -> None:
        assert format_timecode(value) is None
