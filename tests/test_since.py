"""Tests for the days-since aggregation engine."""

from datetime import date

import pytest

from since_when.errors import DataFormatError, InvalidDateError
from since_when.since import (
    Occurrence,
    event_details,
    get_averages,
    get_date,
    get_days_since_now,
    get_elapsed_days,
    last_day_of_month,
    parse_date,
    sort_events,
    summarize,
)


def _occ(name: str, d: str) -> Occurrence:
    return Occurrence(event_name=name, date=date.fromisoformat(d))


@pytest.fixture
def april_occurrences():
    return [
        _occ("Pooper empty", "2023-04-01"),
        _occ("Propane tank full", "2023-04-12"),
        _occ("Pooper empty", "2023-04-06"),
        _occ("Pooper empty", "2023-04-11"),
    ]


class TestParseDate:
    def test_valid(self):
        assert parse_date("2023-04-22") == date(2023, 4, 22)

    def test_garbage_raises_data_format_error(self):
        with pytest.raises(DataFormatError):
            parse_date("22/04/2023")

    def test_none_raises_data_format_error(self):
        with pytest.raises(DataFormatError):
            parse_date(None)

    def test_data_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_date("2023-13-01")


class TestGetDate:
    def test_valid(self):
        assert get_date(2024, 2, 29) == date(2024, 2, 29)

    def test_impossible_date(self):
        with pytest.raises(InvalidDateError):
            get_date(2023, 2, 29)

    def test_month_out_of_range(self):
        with pytest.raises(InvalidDateError):
            get_date(2023, 13, 1)


class TestLastDayOfMonth:
    def test_thirty_one(self):
        assert last_day_of_month(2023, 1) == 31

    def test_thirty(self):
        assert last_day_of_month(2023, 4) == 30

    def test_february_common_year(self):
        assert last_day_of_month(2023, 2) == 28

    def test_february_leap_year(self):
        assert last_day_of_month(2024, 2) == 29

    def test_december_wraps_year(self):
        assert last_day_of_month(2023, 12) == 31

    def test_last_supported_december(self):
        assert last_day_of_month(9999, 12) == 31

    def test_last_supported_november(self):
        assert last_day_of_month(9999, 11) == 30

    def test_invalid_year(self):
        with pytest.raises(InvalidDateError):
            last_day_of_month(-3, 4)

    def test_invalid_month(self):
        with pytest.raises(InvalidDateError):
            last_day_of_month(2023, 0)


class TestGetDaysSinceNow:
    def test_empty(self):
        assert get_days_since_now([], date(2023, 4, 22)) == {}

    def test_groups_by_name(self, april_occurrences):
        result = get_days_since_now(april_occurrences, date(2023, 4, 22))
        assert set(result) == {"Pooper empty", "Propane tank full"}
        assert len(result["Pooper empty"]) == 3
        assert len(result["Propane tank full"]) == 1

    def test_sorted_ascending(self, april_occurrences):
        result = get_days_since_now(april_occurrences, date(2023, 4, 22))
        assert result["Pooper empty"] == [11, 16, 21]
        assert result["Propane tank full"] == [10]

    def test_order_of_input_does_not_matter(self, april_occurrences):
        forward = get_days_since_now(april_occurrences, date(2023, 4, 22))
        backward = get_days_since_now(list(reversed(april_occurrences)), date(2023, 4, 22))
        assert forward == backward

    def test_accepts_iso_string_reference(self, april_occurrences):
        assert get_days_since_now(april_occurrences, "2023-04-22") == get_days_since_now(
            april_occurrences, date(2023, 4, 22)
        )

    def test_future_date_is_negative(self):
        result = get_days_since_now([_occ("Dentist", "2023-05-01")], date(2023, 4, 22))
        assert result == {"Dentist": [-9]}

    def test_same_day_is_zero(self):
        result = get_days_since_now([_occ("Run", "2023-04-22")], date(2023, 4, 22))
        assert result == {"Run": [0]}

    def test_duplicate_dates_kept(self):
        occs = [_occ("Run", "2023-04-20"), _occ("Run", "2023-04-20")]
        assert get_days_since_now(occs, date(2023, 4, 22)) == {"Run": [2, 2]}

    def test_does_not_mutate_input(self, april_occurrences):
        snapshot = list(april_occurrences)
        get_days_since_now(april_occurrences, date(2023, 4, 22))
        assert april_occurrences == snapshot


class TestGetElapsedDays:
    def test_docstring_examples(self):
        days_since = {
            "event_0": [1, 11, 22, 33, 44],
            "event_1": [1, 6, 8, 16, 20],
        }
        assert get_elapsed_days(days_since) == {
            "event_0": [10, 11, 11, 11],
            "event_1": [5, 2, 8, 4],
        }

    def test_single_occurrence_omitted(self):
        assert get_elapsed_days({"once": [5], "twice": [1, 4]}) == {"twice": [3]}

    def test_length_is_one_less(self):
        result = get_elapsed_days({"a": [0, 1, 2, 3, 4, 5]})
        assert len(result["a"]) == 5

    def test_empty(self):
        assert get_elapsed_days({}) == {}


class TestGetAverages:
    def test_truncates(self):
        assert get_averages({"a": [10, 11, 11, 11]}) == {"a": 10}

    def test_multiple_events(self):
        assert get_averages({"foo": [5, 2, 8, 4], "bar": [3]}) == {"foo": 4, "bar": 3}

    def test_negative_sum_truncates_toward_zero(self):
        # -7 / 2 = -3.5 -> -3, not -4
        assert get_averages({"a": [-3, -4]}) == {"a": -3}

    def test_empty_gap_list_omitted(self):
        assert get_averages({"a": []}) == {}

    def test_absent_events_stay_absent(self):
        assert get_averages({}) == {}


class TestSortEvents:
    def test_docstring_example(self):
        events = {"foo": [4, 11, 22, 33, 44], "bar": [1, 6, 11, 16, 21]}
        averages = {"foo": 22, "bar": 11}
        assert sort_events(events, averages) == [("bar", 1, 11), ("foo", 4, 22)]

    def test_missing_average_is_zero(self):
        assert sort_events({"once": [3]}, {}) == [("once", 3, 0)]

    def test_ties_broken_by_name(self):
        events = {"zeta": [2], "alpha": [2], "mid": [1]}
        assert sort_events(events, {}) == [("mid", 1, 0), ("alpha", 2, 0), ("zeta", 2, 0)]

    def test_empty(self):
        assert sort_events({}, {}) == []


class TestEventDetails:
    def test_pipeline(self):
        occs = [
            _occ("A", "2023-04-01"),
            _occ("A", "2023-04-11"),
            _occ("A", "2023-04-06"),
            _occ("A", "2023-04-12"),
        ]
        # days since: [10, 11, 16, 21] -> gaps [1, 5, 5] -> 11 // 3
        assert event_details(occs, date(2023, 4, 22)) == [("A", 10, 3)]

    def test_tie_on_days_since(self, april_occurrences):
        result = event_details(april_occurrences + [_occ("Pooper empty", "2023-04-12")], "2023-04-22")
        assert result == [("Pooper empty", 10, 3), ("Propane tank full", 10, 0)]

    def test_empty(self):
        assert event_details([], date(2023, 4, 22)) == []

    def test_idempotent(self, april_occurrences):
        now = date(2023, 4, 22)
        assert event_details(april_occurrences, now) == event_details(april_occurrences, now)

    def test_single_occurrence_appears_with_zero_average(self):
        assert event_details([_occ("Haircut", "2023-04-01")], date(2023, 4, 22)) == [("Haircut", 21, 0)]


class TestSummarize:
    def test_average_none_without_gaps(self):
        rows = summarize([_occ("Haircut", "2023-04-01")], date(2023, 4, 22))
        assert rows == [
            {
                "name": "Haircut",
                "days_since": 21,
                "average": None,
                "occurrences": 1,
                "last_date": "2023-04-01",
            }
        ]

    def test_zero_average_distinguished_from_none(self):
        occs = [_occ("Run", "2023-04-20"), _occ("Run", "2023-04-20")]
        rows = summarize(occs, date(2023, 4, 22))
        assert rows[0]["average"] == 0

    def test_matches_event_details_order(self, april_occurrences):
        now = date(2023, 4, 22)
        rows = summarize(april_occurrences, now)
        assert [r["name"] for r in rows] == [name for name, _, _ in event_details(april_occurrences, now)]
        assert rows[0]["last_date"] == "2023-04-12"

    def test_empty(self):
        assert summarize([], date(2023, 4, 22)) == []
