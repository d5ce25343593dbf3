"""Tests for yt_transcript.utils.time_fmt."""

import pytest

from yt_transcript.utils.time_fmt import clock_to_seconds, seconds_to_clock, seconds_to_srt


class TestSecondsToClock:
    def test_zero(self):
        assert seconds_to_clock(0) == "00:00"

    def test_truncates_fraction(self):
        assert seconds_to_clock(65.9) == "01:05"

    def test_past_an_hour(self):
        assert seconds_to_clock(3725) == "1:02:05"

    def test_negative_clamped(self):
        assert seconds_to_clock(-4) == "00:00"


class TestSecondsToSrt:
    def test_basic(self):
        assert seconds_to_srt(3661.5) == "01:01:01,500"

    def test_zero(self):
        assert seconds_to_srt(0) == "00:00:00,000"


class TestClockToSeconds:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("01:02:03.5", 3723.5),
            ("00:01,250", 1.25),
            ("1:05", 65.0),
            ("00:00:01.000", 1.0),
        ],
    )
    def test_parses(self, value, expected):
        assert clock_to_seconds(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", ["abc", "", "12", "1:2:3:4"])
    def test_rejects(self, value):
        assert clock_to_seconds(value) is None
