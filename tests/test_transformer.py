"""Tests for event_etl.transformer and the record models."""

import pytest

from event_etl.errors import InvalidUrlError
from event_etl.models import NormalizedRecord, RawRecord
from event_etl.transformer import transform_record

URL = "https://www.google.com/search?q=hello#foo"


class TestTransformRecord:
    def test_one_record_per_event_in_order(self):
        raw = RawRecord(ts=1234567890, u=URL, e=["foo", "baz"])
        records = transform_record(raw)

        assert len(records) == 2
        assert [r.event for r in records] == ["foo", "baz"]
        assert all(r.timestamp == 1234567890 for r in records)
        assert records[0].address == records[1].address
        assert records[0].address.query == {"q": "hello"}

    def test_empty_events(self):
        assert transform_record(RawRecord(ts=1, u=URL, e=[])) == []

    def test_heterogeneous_payloads_forwarded(self):
        events = [{"nested": {"a": [1, 2]}}, 42, None, "text", [True, False]]
        records = transform_record(RawRecord(ts=5, u=URL, e=events))
        assert [r.event for r in records] == events

    def test_invalid_url_fails_whole_record(self):
        with pytest.raises(InvalidUrlError):
            transform_record(RawRecord(ts=1, u="not a url", e=["a", "b"]))

    def test_invalid_url_fails_even_without_events(self):
        with pytest.raises(InvalidUrlError):
            transform_record(RawRecord(ts=1, u="no-scheme.com", e=[]))

    def test_input_not_mutated(self):
        events = [{"k": "v"}]
        raw = RawRecord(ts=1, u=URL, e=events)
        transform_record(raw)
        assert raw.e == [{"k": "v"}]


class TestNormalizedRecord:
    def test_to_dict_field_order(self):
        raw = RawRecord(ts=7, u="https://a.com/p?x=1#h", e=[{"et": "x"}])
        wire = transform_record(raw)[0].to_dict()
        assert list(wire) == ["timestamp", "url_object", "ec"]
        assert wire == {
            "timestamp": 7,
            "url_object": {"domain": "a.com", "path": "/p", "query_object": {"x": "1"}, "hash": "#h"},
            "ec": {"et": "x"},
        }

    def test_frozen(self):
        record = transform_record(RawRecord(ts=1, u=URL, e=["x"]))[0]
        with pytest.raises(AttributeError):
            record.timestamp = 2
        assert isinstance(record, NormalizedRecord)


class TestRawRecord:
    def test_from_dict_ignores_extra_fields(self):
        raw = RawRecord.from_dict({"ts": 1, "u": URL, "e": [1], "extra": True})
        assert raw == RawRecord(ts=1, u=URL, e=[1])

    def test_from_dict_coerces_integral_float_timestamp(self):
        raw = RawRecord.from_dict({"ts": 1669976028340.0, "u": URL, "e": []})
        assert type(raw.ts) is int
        assert raw.ts == 1669976028340
