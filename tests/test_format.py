"""Tests for printable schedule text."""

from datetime import datetime, time

import pytest

from trashday.core.next_pickups import NextPickups
from trashday.core.recurrence import MonthlyByDay, MonthlyByWeekdayOrdinal, Weekday, Weekly
from trashday.core.schedule import Schedule, example_schedule
from trashday.format import (
    describe_event,
    describe_pattern,
    format_next_pickups,
    format_schedule,
    format_time,
    ordinal_suffix,
)


class TestDescribePattern:
    @pytest.mark.parametrize(
        "pattern,expected",
        [
            (Weekly(Weekday.TUESDAY), "every Tuesday"),
            (Weekly(Weekday.FRIDAY, 2), "every other Friday"),
            (Weekly(Weekday.MONDAY, 3), "every 3 weeks on Monday"),
            (MonthlyByDay(15), "on the 15th"),
            (MonthlyByDay(1), "on the 1st"),
            (MonthlyByDay(-1), "on the last day"),
            (MonthlyByDay(-3), "on the 3rd-to-last day"),
            (MonthlyByWeekdayOrdinal(Weekday.SATURDAY, 2), "on the second Saturday"),
            (MonthlyByWeekdayOrdinal(Weekday.SATURDAY, -1), "on the last Saturday"),
            (MonthlyByWeekdayOrdinal(Weekday.SATURDAY, -2), "on the second-to-last Saturday"),
        ],
    )
    def test_descriptions(self, pattern, expected):
        assert describe_pattern(pattern) == expected


class TestOrdinalSuffix:
    @pytest.mark.parametrize(
        "n,expected",
        [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"), (12, "12th"), (21, "21st"), (23, "23rd")],
    )
    def test_suffix(self, n, expected):
        assert ordinal_suffix(n) == expected


class TestFormatTime:
    def test_morning(self):
        assert format_time(time(7, 30)) == "7:30 AM"

    def test_noon_and_midnight(self):
        assert format_time(time(12, 0)) == "12:00 PM"
        assert format_time(time(0, 5)) == "12:05 AM"

    def test_afternoon(self):
        assert format_time(time(15, 30)) == "3:30 PM"


class TestFormatSchedule:
    def test_one_line_per_name(self):
        assert format_schedule(example_schedule()) == (
            "Trash: every Tuesday at 7:30 AM, every Friday at 7:30 AM\n"
            "Recycling: every other Friday at 7:30 AM"
        )

    def test_empty(self):
        assert format_schedule(Schedule()) == "No pickups are scheduled."

    def test_describe_event(self):
        [event] = example_schedule("complex").events("hockey team")
        assert describe_event(event) == "on the second-to-last Saturday at 9:00 AM"


class TestFormatNextPickups:
    def test_sentences(self):
        next_pickups = NextPickups.build(example_schedule(), datetime(2017, 2, 1, 9, 0))
        assert format_next_pickups(next_pickups) == (
            "Next Trash pickup is Friday, February 3 at 7:30 AM.\n"
            "Next Recycling pickup is Friday, February 3 at 7:30 AM."
        )

    def test_tuesday(self):
        next_pickups = NextPickups.build(example_schedule(), datetime(2017, 2, 4, 9, 0), "trash")
        assert format_next_pickups(next_pickups) == "Next Trash pickup is Tuesday, February 7 at 7:30 AM."

    def test_keeps_display_casing(self):
        next_pickups = NextPickups.build(example_schedule("complex"), datetime(2017, 2, 8, 9, 0), "lawn waste")
        assert format_next_pickups(next_pickups) == "Next Lawn Waste pickup is Wednesday, February 15 at 12:00 PM."

    def test_empty(self):
        assert format_next_pickups(NextPickups.build(Schedule(), datetime(2017, 2, 1))) == "No pickups are scheduled."
