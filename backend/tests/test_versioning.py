"""Tests for snapshot encoding and timestamp parsing."""

from datetime import datetime, timezone

import pytest

from pagebuilder.utils.versioning import (
    decode_snapshot,
    encode_snapshot,
    parse_timestamp,
    to_timestamp,
)


def test_decode_tolerates_empty_and_parsed_values():
    assert decode_snapshot(None) == []
    assert decode_snapshot("") == []
    assert decode_snapshot([{"id": "a"}]) == [{"id": "a"}]
    assert decode_snapshot(b'[{"id": "a"}]') == [{"id": "a"}]


def test_encode_decode():
    widgets = [{"id": "a", "type": "text", "position": 0, "config": {"text": "hé"}}]
    assert decode_snapshot(encode_snapshot(widgets)) == widgets


def test_decode_rejects_non_arrays():
    with pytest.raises(ValueError):
        decode_snapshot('{"id": "a"}')


def test_to_timestamp_assumes_utc_for_naive():
    assert to_timestamp(datetime(2024, 1, 1)) == "2024-01-01T00:00:00+00:00"
    assert to_timestamp(None) is None


def test_parse_timestamp_formats():
    expected = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert parse_timestamp("2024-01-01T00:00:00Z") == expected
    assert parse_timestamp(expected.timestamp()) == expected
    assert parse_timestamp(expected.timestamp() * 1000) == expected
    assert parse_timestamp("not a date") is None
    assert parse_timestamp(None) is None
