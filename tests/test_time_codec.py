"""Tests for time conversion helpers."""

from __future__ import annotations

import pytest

from racecalc.services.time_codec import clamp_value, format_time, parse_time_input, time_to_seconds


def test_time_to_seconds():
    assert time_to_seconds(1, 30, 45) == 5445
    assert time_to_seconds(0, 0, 0) == 0
    assert time_to_seconds(0, 25, 30) == 1530
    assert time_to_seconds(23, 59, 59) == 86399


def test_time_to_seconds_no_range_check():
    assert time_to_seconds(0, 60, 0) == 3600
    assert time_to_seconds(0, 0, -1) == -1


def test_format_time():
    assert format_time(5445) == "01:30:45"
    assert format_time(0) == "00:00:00"
    assert format_time(3599) == "00:59:59"
    assert format_time(3600) == "01:00:00"
    assert format_time(43200) == "12:00:00"


def test_format_time_floors_fractional_seconds():
    assert format_time(3661.7) == "01:01:01"
    assert format_time(59.999) == "00:00:59"


def test_format_time_long_hours_not_truncated():
    assert format_time(100 * 3600 + 61) == "100:01:01"


@pytest.mark.parametrize("h,m,s", [(0, 0, 1), (0, 20, 0), (3, 5, 9), (23, 59, 59)])
def test_format_matches_components(h, m, s):
    assert format_time(time_to_seconds(h, m, s)) == f"{h:02d}:{m:02d}:{s:02d}"


def test_parse_time_input_valid():
    assert parse_time_input("25") == 25
    assert parse_time_input("05") == 5
    assert parse_time_input("  25  ") == 25
    assert parse_time_input(30) == 30


def test_parse_time_input_defaults():
    assert parse_time_input("") == 0
    assert parse_time_input(None) == 0
    assert parse_time_input("abc") == 0
    assert parse_time_input("", 10) == 10
    assert parse_time_input(True, 7) == 7


def test_parse_time_input_leading_integer():
    assert parse_time_input("12abc") == 12
    assert parse_time_input("-3") == -3
    assert parse_time_input(3.7) == 3


def test_clamp_value():
    assert clamp_value(5, 0, 10) == 5
    assert clamp_value(-5, 0, 10) == 0
    assert clamp_value(15, 0, 10) == 10
    assert clamp_value(25, 0, 23) == 23
    assert clamp_value(60, 0, 59) == 59
    assert clamp_value(-5, -10, -1) == -5
