"""
Tests for date parsing, display formatting and bucketing.
"""
from datetime import date, datetime, timedelta, timezone
from itertools import product

import pytest

from ticksync.sync.dates import (
    Bucket,
    DayWindow,
    bucket,
    bucket_task,
    end_of_day,
    format_date_for_display,
    parse_date,
    to_api_datetime,
)
from ticksync.ticktick_api.data_models import Task

WINDOW = DayWindow(today=date(2024, 1, 15))


def _local(*args):
    return datetime(*args).astimezone()


class TestParseDate:
    def test_ticktick_timestamp(self):
        parsed = parse_date("2024-01-15T09:30:00.000+0000")
        assert parsed == datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)
        assert parsed.tzinfo is not None

    def test_naive_text_is_local_wall_time(self):
        assert parse_date("2024-01-15 09:00") == _local(2024, 1, 15, 9, 0)

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", "2024-13-45"])
    def test_unparseable_is_none(self, value):
        assert parse_date(value) is None


class TestFormatting:
    def test_midnight_is_date_only(self):
        assert format_date_for_display(_local(2024, 1, 15)) == "2024-01-15"

    def test_timed_is_zero_padded_24h(self):
        assert format_date_for_display(_local(2024, 1, 5, 7, 3)) == "2024-01-05 07:03"
        assert format_date_for_display(_local(2024, 1, 5, 19, 45)) == "2024-01-05 19:45"

    def test_one_second_past_midnight_keeps_time(self):
        assert format_date_for_display(_local(2024, 1, 15, 0, 0, 1)) == "2024-01-15 00:00"

    def test_api_format(self):
        dt = datetime(2024, 1, 15, 23, 59, 59, 999000, tzinfo=timezone.utc)
        assert to_api_datetime(dt) == "2024-01-15T23:59:59.999+0000"

    def test_end_of_day(self):
        assert end_of_day(date(2024, 1, 15)) == _local(2024, 1, 15, 23, 59, 59, 999000)


class TestBucket:
    @pytest.mark.parametrize("day,expected", [
        (date(2024, 1, 15), Bucket.TODAY),
        (date(2024, 1, 14), Bucket.YESTERDAY),
        (date(2024, 1, 16), Bucket.TOMORROW),
        (date(2024, 1, 17), Bucket.NONE),
        (date(2023, 12, 31), Bucket.NONE),
    ])
    def test_day_placement(self, day, expected):
        assert bucket(_local(day.year, day.month, day.day, 12, 0), WINDOW) is expected

    def test_day_boundaries(self):
        assert bucket(_local(2024, 1, 15, 0, 0), WINDOW) is Bucket.TODAY
        assert bucket(_local(2024, 1, 15, 23, 59, 59, 999000), WINDOW) is Bucket.TODAY
        assert bucket(_local(2024, 1, 16, 0, 0), WINDOW) is Bucket.TOMORROW

    def test_every_combination_yields_one_bucket(self):
        stamps = [None, "garbage"] + [
            to_api_datetime(_local(2024, 1, 15, 12) + timedelta(days=offset)) for offset in range(-3, 4)
        ]
        for due, start in product(stamps, stamps):
            result = bucket_task(Task(id="t", dueDate=due, startDate=start), WINDOW)
            assert result in set(Bucket)

    def test_no_dates_is_none(self):
        assert bucket_task(Task(id="t"), WINDOW) is Bucket.NONE

    def test_due_date_takes_precedence(self):
        task = Task(id="t", startDate=_local(2024, 1, 15, 9).isoformat(), dueDate=_local(2024, 1, 16, 9).isoformat())
        assert bucket_task(task, WINDOW) is Bucket.TOMORROW

    def test_start_date_used_without_due(self):
        task = Task(id="t", startDate=_local(2024, 1, 15, 9).isoformat())
        assert bucket_task(task, WINDOW) is Bucket.TODAY

    def test_window_from_reference(self):
        window = DayWindow.from_reference(_local(2024, 1, 15, 23, 30))
        assert (window.yesterday, window.today, window.tomorrow) == (
            date(2024, 1, 14), date(2024, 1, 15), date(2024, 1, 16))
        assert window.cutoff(7) == _local(2024, 1, 8)
