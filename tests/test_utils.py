"""Unit tests for shared helpers (token masking, timestamps)."""

from datetime import datetime, timedelta, timezone

import pytest

from strava_gear_fix import utils


def test_mask_token_handles_short_values() -> None:
    assert utils.mask_token("abcd", visible=4) == "abcd"
    assert utils.mask_token("abcd", visible=2) == "**cd"
    assert utils.mask_token("abcd", visible=0) == "****"


def test_mask_token_handles_empty_and_none() -> None:
    assert utils.mask_token("", visible=4) == ""
    assert utils.mask_token(None) == ""
    assert utils.mask_token("ab", visible=5) == "ab"


def test_mask_token_negative_visible_defaults_to_all_masked() -> None:
    assert utils.mask_token("abcdef", visible=-2) == "******"


def test_parse_datetime_accepts_z_and_offsets() -> None:
    expected = datetime(2024, 1, 5, 9, 0, tzinfo=timezone.utc)
    assert utils.parse_datetime("2024-01-05T09:00:00Z") == expected
    assert utils.parse_datetime("2024-01-05T10:00:00+01:00") == expected
    assert utils.parse_datetime("2024-01-05T09:00:00") == expected


def test_parse_datetime_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        utils.parse_datetime("last tuesday")


def test_format_datetime_round_trips() -> None:
    value = datetime(2024, 1, 5, 9, 0, 30, tzinfo=timezone(timedelta(hours=2)))
    text = utils.format_datetime(value)
    assert text == "2024-01-05T07:00:30Z"
    assert utils.parse_datetime(text) == value


def test_from_timestamp_is_utc() -> None:
    assert utils.from_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
