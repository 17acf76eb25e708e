from datetime import date, datetime

import pytest

from app.core import stats
from app.core.dates import (
    calculate_days_from_now,
    calculate_delivery_date,
    calculate_working_days,
    days_between,
    format_date,
    parse_date,
)


def test_mean():
    assert stats.mean([7, 14, 21]) == 14
    assert stats.mean([]) == 0.0


def test_nearest_rank_is_zero_indexed_and_not_interpolated():
    values = list(range(1, 11))
    assert stats.nearest_rank(values, 0.9) == 10
    assert stats.nearest_rank(values, 0.5) == 6
    assert stats.nearest_rank([3], 0.9) == 3
    assert stats.nearest_rank(values, 1.0) == 10
    assert stats.nearest_rank([], 0.9) == 0.0


def test_histogram_counts_and_orders_keys():
    counts = stats.histogram([14, 7, 14, 21, 7, 14])
    assert counts == {7: 2, 14: 3, 21: 1}
    assert list(counts) == [7, 14, 21]


def test_probability_within():
    assert stats.probability_within([7, 14, 21, 28], 14) == 0.5
    assert stats.probability_within([], 14) == 0.0


def test_days_between_dates_and_datetimes():
    assert days_between(date(2025, 1, 1), date(2025, 1, 31)) == 30
    assert days_between(datetime(2025, 1, 1, 12), datetime(2025, 1, 2, 13)) == 2
    assert days_between(date(2025, 1, 10), date(2025, 1, 3)) == -7


def test_delivery_date_rounds_up():
    assert calculate_delivery_date(date(2025, 1, 1), 7) == date(2025, 1, 8)
    assert calculate_delivery_date(date(2025, 1, 1), 7.2) == date(2025, 1, 9)
    assert calculate_delivery_date(datetime(2025, 1, 1, 8), 0) == date(2025, 1, 1)


@pytest.mark.parametrize("start, end, expected", [
    (date(2025, 3, 3), date(2025, 3, 9), 4),    # Monday to Sunday
    (date(2025, 3, 3), date(2025, 3, 7), 4),    # Monday to Friday
    (date(2025, 3, 3), date(2025, 3, 3), 0),
    (date(2025, 3, 10), date(2025, 3, 3), 0),
])
def test_working_days(start, end, expected):
    assert calculate_working_days(start, end) == expected


def test_days_from_now():
    assert calculate_days_from_now(date(2025, 2, 1), today=date(2025, 1, 1)) == 31


def test_format_and_parse_date():
    assert format_date(date(2025, 3, 7)) == "Friday, March 7, 2025"
    assert parse_date("2025-03-07T10:00:00.000Z") == date(2025, 3, 7)
    assert parse_date(datetime(2025, 3, 7, 23, 59)) == date(2025, 3, 7)
