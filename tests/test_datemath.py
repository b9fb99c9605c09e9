"""Tests for next-occurrence calendar arithmetic."""

from datetime import date, datetime, time, timedelta

import pytest

from trashday.core import datemath
from trashday.core.errors import UnsatisfiableSearchError
from trashday.core.recurrence import (
    MonthlyByDay,
    MonthlyByWeekdayOrdinal,
    Weekday,
    Weekly,
)


@pytest.fixture
def morning():
    return time(7, 30)


class TestHelpers:
    def test_days_in_month_leap_year(self):
        assert datemath.days_in_month(2016, 2) == 29
        assert datemath.days_in_month(2017, 2) == 28

    def test_add_months_rolls_year(self):
        assert datemath.add_months(2017, 11, 3) == (2018, 2)
        assert datemath.add_months(2017, 1, 0) == (2017, 1)

    def test_nth_weekday_of_month(self):
        assert datemath.nth_weekday_of_month(2017, 3, Weekday.SATURDAY, 2) == date(2017, 3, 11)
        assert datemath.nth_weekday_of_month(2017, 2, Weekday.SATURDAY, -2) == date(2017, 2, 18)
        assert datemath.nth_weekday_of_month(2017, 2, Weekday.TUESDAY, -1) == date(2017, 2, 28)

    def test_nth_weekday_missing(self):
        assert datemath.nth_weekday_of_month(2017, 1, Weekday.SATURDAY, 5) is None
        assert datemath.nth_weekday_of_month(2017, 2, Weekday.SATURDAY, -5) is None


class TestNextWeekly:
    def test_same_day_later_time(self, morning):
        # Tuesday 06:00, pickup Tuesday 07:30
        result = datemath.next_weekly(datetime(2017, 1, 31, 6, 0), Weekday.TUESDAY, morning)
        assert result == datetime(2017, 1, 31, 7, 30)

    def test_inclusive_at_exact_time(self, morning):
        start = datetime(2017, 1, 31, 7, 30)
        assert datemath.next_weekly(start, Weekday.TUESDAY, morning) == start

    def test_same_day_after_time_rolls_a_week(self, morning):
        result = datemath.next_weekly(datetime(2017, 1, 31, 8, 0), Weekday.TUESDAY, morning)
        assert result == datetime(2017, 2, 7, 7, 30)

    def test_later_in_week(self, morning):
        result = datemath.next_weekly(datetime(2017, 1, 31, 8, 0), Weekday.FRIDAY, morning)
        assert result == datetime(2017, 2, 3, 7, 30)


class TestNextWeeklyInterval:
    def test_in_phase_week(self):
        anchor = datetime(2017, 2, 3, 7, 30)
        result = datemath.next_weekly_interval(
            datetime(2017, 2, 15), Weekday.FRIDAY, time(7, 30), anchor, 2
        )
        assert result == datetime(2017, 2, 17, 7, 30)

    def test_out_of_phase_week_skips(self):
        anchor = datetime(2017, 2, 3, 7, 30)
        result = datemath.next_weekly_interval(
            datetime(2017, 2, 8), Weekday.FRIDAY, time(7, 30), anchor, 2
        )
        assert result == datetime(2017, 2, 17, 7, 30)

    def test_search_before_anchor_starts_at_anchor(self):
        anchor = datetime(2017, 2, 17, 7, 30)
        result = datemath.next_weekly_interval(
            datetime(2017, 1, 30), Weekday.FRIDAY, time(7, 30), anchor, 2
        )
        assert result == anchor

    @pytest.mark.parametrize("interval", [2, 3])
    @pytest.mark.parametrize("days_before", [1, 6, 7, 13, 20, 60])
    def test_never_earlier_than_anchor(self, interval, days_before):
        anchor = datetime(2017, 2, 25, 15, 30)
        result = datemath.next_weekly_interval(
            anchor - timedelta(days=days_before), Weekday.SATURDAY, time(15, 30), anchor, interval
        )
        assert result == anchor

    def test_three_week_interval(self):
        anchor = datetime(2017, 1, 2, 9, 0)
        result = datemath.next_weekly_interval(
            datetime(2017, 1, 10), Weekday.MONDAY, time(9, 0), anchor, 3
        )
        assert result == datetime(2017, 1, 23, 9, 0)


class TestNextDayOfMonth:
    def test_31st_in_january(self, morning):
        result = datemath.next_day_of_month(datetime(2017, 1, 14), 31, morning)
        assert result == datetime(2017, 1, 31, 7, 30)

    def test_31st_skips_february(self, morning):
        result = datemath.next_day_of_month(datetime(2017, 2, 14), 31, morning)
        assert result == datetime(2017, 3, 31, 7, 30)

    def test_last_day(self, morning):
        result = datemath.next_day_of_month(datetime(2017, 2, 14), -1, morning)
        assert result == datetime(2017, 2, 28, 7, 30)

    def test_third_to_last_day_leap_year(self, morning):
        result = datemath.next_day_of_month(datetime(2016, 2, 1), -3, morning)
        assert result == datetime(2016, 2, 27, 7, 30)

    def test_minus_31_only_in_long_months(self, morning):
        result = datemath.next_day_of_month(datetime(2017, 2, 1), -31, morning)
        assert result == datetime(2017, 3, 1, 7, 30)

    def test_passed_day_rolls_to_next_month(self, morning):
        result = datemath.next_day_of_month(datetime(2017, 1, 15, 8, 0), 15, morning)
        assert result == datetime(2017, 2, 15, 7, 30)

    def test_rolls_into_next_year(self, morning):
        result = datemath.next_day_of_month(datetime(2017, 12, 20), 1, morning)
        assert result == datetime(2018, 1, 1, 7, 30)


class TestNextWeekdayOfMonth:
    def test_fifth_saturday(self):
        result = datemath.next_weekday_of_month(datetime(2017, 1, 1), Weekday.SATURDAY, 5, time(9, 0))
        assert result == datetime(2017, 4, 29, 9, 0)

    def test_second_saturday(self):
        result = datemath.next_weekday_of_month(datetime(2017, 2, 12), Weekday.SATURDAY, 2, time(12, 0))
        assert result == datetime(2017, 3, 11, 12, 0)

    def test_second_to_last_saturday(self):
        result = datemath.next_weekday_of_month(datetime(2017, 2, 1), Weekday.SATURDAY, -2, time(9, 0))
        assert result == datetime(2017, 2, 18, 9, 0)

    def test_fifth_from_last(self):
        # March 2017 has five Fridays: 3, 10, 17, 24, 31
        result = datemath.next_weekday_of_month(datetime(2017, 2, 1), Weekday.FRIDAY, -5, time(9, 0))
        assert result == datetime(2017, 3, 3, 9, 0)

    def test_horizon_exhausted(self, monkeypatch):
        monkeypatch.setattr(datemath, "MONTH_SEARCH_HORIZON", 2)
        with pytest.raises(UnsatisfiableSearchError):
            datemath.next_weekday_of_month(datetime(2017, 1, 1), Weekday.SATURDAY, 5, time(9, 0))


class TestNextOccurrence:
    def test_dispatches_weekly(self):
        result = datemath.next_occurrence(Weekly(Weekday.TUESDAY), datetime(2017, 2, 1), time(7, 30))
        assert result == datetime(2017, 2, 7, 7, 30)

    def test_dispatches_monthly(self):
        assert datemath.next_occurrence(MonthlyByDay(15), datetime(2017, 2, 1), time(12, 0)) == datetime(
            2017, 2, 15, 12, 0
        )
        assert datemath.next_occurrence(
            MonthlyByWeekdayOrdinal(Weekday.SATURDAY, 2), datetime(2017, 2, 1), time(12, 0)
        ) == datetime(2017, 2, 11, 12, 0)

    def test_multi_week_needs_anchor(self):
        with pytest.raises(ValueError, match="anchor"):
            datemath.next_occurrence(Weekly(Weekday.FRIDAY, 2), datetime(2017, 2, 1), time(7, 30))

    def test_rejects_unknown_pattern(self):
        with pytest.raises(TypeError):
            datemath.next_occurrence("every day", datetime(2017, 2, 1), time(7, 30))


# Search starts spread over the 2016 leap year and into 2017, at shifting times of day.
SWEEP_STARTS = [datetime(2016, 1, 1) + timedelta(days=11 * i, hours=7 * i) for i in range(36)]

ONE_MINUTE = timedelta(minutes=1)


class TestWeeklySweep:
    @pytest.mark.parametrize("interval", [1, 2, 3])
    @pytest.mark.parametrize("weekday", list(Weekday))
    def test_occurrences_are_whole_intervals_apart(self, weekday, interval):
        pattern = Weekly(weekday, interval)
        anchor = datetime(2015, 12, 1, 7, 30)
        first_ever = datemath.next_weekly(anchor, weekday, time(7, 30))

        for start in SWEEP_STARTS:
            current = datemath.next_occurrence(pattern, start, time(7, 30), anchor)
            following = datemath.next_occurrence(pattern, current + ONE_MINUTE, time(7, 30), anchor)

            assert current >= start
            assert current - start < timedelta(weeks=interval)
            assert Weekday.of(current) == weekday
            assert following - current == timedelta(weeks=interval)
            assert (current - first_ever).days % (7 * interval) == 0


class TestMonthlyByDaySweep:
    @pytest.mark.parametrize("day", [1, 15, 28, 29, 30, 31, -1, -2, -15, -29, -30, -31])
    def test_lands_on_requested_day(self, day):
        for start in SWEEP_STARTS:
            current = datemath.next_occurrence(MonthlyByDay(day), start, time(12, 0))
            for _ in range(3):
                length = datemath.days_in_month(current.year, current.month)
                expected = day if day > 0 else length + day + 1
                assert current >= start
                assert current.day == expected
                assert current.time() == time(12, 0)
                following = datemath.next_occurrence(MonthlyByDay(day), current + ONE_MINUTE, time(12, 0))
                assert following > current
                current = following


class TestMonthlyByWeekdayOrdinalSweep:
    @pytest.mark.parametrize("ordinal", [1, 2, 4, 5, -1, -2, -5])
    @pytest.mark.parametrize("weekday", list(Weekday))
    def test_lands_on_requested_position(self, weekday, ordinal):
        pattern = MonthlyByWeekdayOrdinal(weekday, ordinal)
        for start in SWEEP_STARTS:
            current = datemath.next_occurrence(pattern, start, time(9, 0))
            for _ in range(2):
                length = datemath.days_in_month(current.year, current.month)
                assert current >= start
                assert Weekday.of(current) == weekday
                if ordinal > 0:
                    assert (current.day - 1) // 7 + 1 == ordinal
                else:
                    assert (length - current.day) // 7 + 1 == -ordinal
                following = datemath.next_occurrence(pattern, current + ONE_MINUTE, time(9, 0))
                assert following > current
                current = following
