"""
Unit tests for ParsingMap (httpreq.parsing_map).

Tests construction (literal, fluent, typed helpers), execution order,
skip-on-empty semantics and the abort-on-first-failure contract.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import pytest

from httpreq.conversions import to_comma_list, to_int, to_string
from httpreq.destinations import Kind, Slot, bind
from httpreq.exceptions import MalformedValue, WrongDestinationType
from httpreq.parsing_map import FieldDescriptor, ParsingMap, parse_fields
from httpreq.sources import MappingSource


class _Recorder:
    """Conversion that records its calls and writes the raw value."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []

    def __call__(self, raw, dest) -> None:
        self.calls.append((raw, dest))
        dest.set(raw)


class TestConstruction:
    """Tests for building maps."""

    def test_empty_map(self):
        pmap = ParsingMap()
        assert len(pmap) == 0
        assert pmap.capacity == 0

    def test_with_capacity(self):
        pmap = ParsingMap.with_capacity(3)
        assert pmap.capacity == 3
        assert len(pmap) == 0

    def test_capacity_is_only_a_hint(self):
        pmap = ParsingMap(capacity=1)
        pmap.add_int("a", Slot(Kind.INT)).add_int("b", Slot(Kind.INT))
        assert len(pmap) == 2

    @pytest.mark.parametrize("capacity", [-1, 1.5, "3"])
    def test_invalid_capacity(self, capacity):
        with pytest.raises(ValueError, match="capacity"):
            ParsingMap(capacity=capacity)

    def test_add_returns_same_map(self):
        pmap = ParsingMap()
        assert pmap.add("limit", to_int, Slot(Kind.INT)) is pmap

    def test_literal_from_tuples(self):
        limit = Slot(Kind.INT)
        pmap = ParsingMap([("limit", to_int, limit)])
        assert pmap[0] == FieldDescriptor("limit", to_int, limit)

    def test_typed_helpers_bind_expected_conversions(self):
        from httpreq.conversions import (
            to_bool,
            to_float64,
            to_rfc3339_time_direct,
            to_rfc3339_time_indirect,
            to_unix_time_direct,
            to_unix_time_indirect,
        )

        pmap = (
            ParsingMap()
            .add_comma_list("a", Slot(Kind.STRING_LIST))
            .add_string("b", Slot(Kind.STRING))
            .add_bool("c", Slot(Kind.BOOL))
            .add_int("d", Slot(Kind.INT))
            .add_float64("e", Slot(Kind.FLOAT64))
            .add_unix_time("f", Slot(Kind.TIME))
            .add_unix_time_indirect("g", Slot(Kind.TIME_PTR))
            .add_rfc3339_time("h", Slot(Kind.TIME))
            .add_rfc3339_time_indirect("i", Slot(Kind.TIME_PTR))
        )
        assert [d.conversion for d in pmap] == [
            to_comma_list,
            to_string,
            to_bool,
            to_int,
            to_float64,
            to_unix_time_direct,
            to_unix_time_indirect,
            to_rfc3339_time_direct,
            to_rfc3339_time_indirect,
        ]
        assert [d.key for d in pmap] == list("abcdefghi")

    def test_extend(self):
        first = ParsingMap().add_int("a", Slot(Kind.INT))
        second = ParsingMap().add_int("b", Slot(Kind.INT))
        assert first.extend(second) is first
        assert [d.key for d in first] == ["a", "b"]
        assert len(second) == 1

    def test_descriptor_is_immutable(self):
        descriptor = FieldDescriptor("a", to_int, Slot(Kind.INT))
        with pytest.raises(AttributeError):
            descriptor.key = "b"  # type: ignore[misc]

    def test_descriptor_rejects_non_callable(self):
        with pytest.raises(TypeError, match="not callable"):
            FieldDescriptor("a", "to_int", Slot(Kind.INT))  # type: ignore[arg-type]

    def test_descriptors_view_is_a_copy(self):
        pmap = ParsingMap().add_int("a", Slot(Kind.INT))
        view = pmap.descriptors
        pmap.add_int("b", Slot(Kind.INT))
        assert len(view) == 1

    def test_repr_lists_keys(self):
        pmap = ParsingMap().add_int("limit", Slot(Kind.INT)).add_int("page", Slot(Kind.INT))
        assert repr(pmap) == "ParsingMap([limit, page])"


class TestParse:
    """Tests for ParsingMap.parse()."""

    def test_search_request(self, record):
        source = {"limit": "10", "page": "1", "fields": "a,b,c"}
        ParsingMap([
            ("limit", to_int, bind(record, "limit", Kind.INT)),
            ("page", to_int, bind(record, "page", Kind.INT)),
            ("fields", to_comma_list, bind(record, "fields", Kind.STRING_LIST)),
        ]).parse(source)
        assert record.limit == 10
        assert record.page == 1
        assert record.fields == ["a", "b", "c"]

    def test_malformed_leaves_destination_untouched(self):
        dest = Slot(Kind.INT)
        with pytest.raises(MalformedValue) as excinfo:
            ParsingMap().add_int("limit", dest).parse({"limit": "abc"})
        assert dest.value == 0
        assert excinfo.value.key == "limit"
        assert str(excinfo.value).startswith("field 'limit': invalid int value 'abc'")

    def test_abort_on_first_failure(self):
        a, b, c = Slot(Kind.INT), Slot(Kind.INT), Slot(Kind.STRING)
        pmap = ParsingMap().add_int("a", a).add_int("b", b).add_string("c", c)
        with pytest.raises(MalformedValue) as excinfo:
            pmap.parse({"a": "1", "b": "two", "c": "three"})
        assert a.value == 1
        assert b.value == 0
        assert c.value == ""
        assert excinfo.value.key == "b"

    def test_later_conversions_are_not_invoked_after_failure(self):
        recorder = _Recorder()
        pmap = (
            ParsingMap()
            .add_int("a", Slot(Kind.INT))
            .add("b", recorder, Slot(Kind.STRING))
        )
        with pytest.raises(MalformedValue):
            pmap.parse({"a": "x", "b": "y"})
        assert recorder.calls == []

    def test_first_failure_in_declaration_order_is_reported(self):
        pmap = ParsingMap().add_string("s", Slot(Kind.INT)).add_int("i", Slot(Kind.INT))
        with pytest.raises(WrongDestinationType) as excinfo:
            pmap.parse({"i": "bad", "s": "ok"})
        assert excinfo.value.key == "s"

    @pytest.mark.parametrize("source", [{}, {"a": ""}, {"a": None}])
    def test_absent_or_empty_skips_conversion(self, source):
        recorder = _Recorder()
        dest = Slot(Kind.STRING, "initial")
        ParsingMap().add("a", recorder, dest).parse(source)
        assert recorder.calls == []
        assert dest.value == "initial"

    def test_empty_value_skips_even_wrong_destination(self):
        ParsingMap().add_int("a", Slot(Kind.STRING)).parse({"a": ""})

    def test_duplicate_keys_run_in_order(self):
        recorder = _Recorder()
        first, second = Slot(Kind.STRING), Slot(Kind.STRING)
        ParsingMap().add("k", recorder, first).add("k", recorder, second).parse({"k": "v"})
        assert recorder.calls == [("v", first), ("v", second)]
        assert first.value == second.value == "v"

    def test_same_destination_last_write_wins(self):
        dest = Slot(Kind.INT)
        ParsingMap().add_int("a", dest).add_int("b", dest).parse({"a": "1", "b": "2"})
        assert dest.value == 2

    def test_map_is_reusable(self):
        dest = Slot(Kind.INT)
        pmap = ParsingMap().add_int("n", dest)
        pmap.parse({"n": "1"})
        assert dest.value == 1
        pmap.parse({"n": "2"})
        assert dest.value == 2
        pmap.parse({})
        assert dest.value == 2

    def test_deterministic(self, record_cls):
        source = {"limit": "10", "fields": "x,y", "page": "oops"}

        def run():
            rec = record_cls()
            pmap = (
                ParsingMap()
                .add_int("limit", bind(rec, "limit", Kind.INT))
                .add_comma_list("fields", bind(rec, "fields", Kind.STRING_LIST))
                .add_int("page", bind(rec, "page", Kind.INT))
            )
            with pytest.raises(MalformedValue) as excinfo:
                pmap.parse(source)
            return rec, excinfo.value.key

        assert run() == run()

    def test_all_kinds_into_record(self, record):
        pmap = (
            ParsingMap()
            .add_int("limit", bind(record, "limit", Kind.INT))
            .add_float64("f", bind(record, "f", Kind.FLOAT64))
            .add_bool("b", bind(record, "b", Kind.BOOL))
            .add_string("name", bind(record, "name", Kind.STRING))
            .add_rfc3339_time("t", bind(record, "time", Kind.TIME))
            .add_unix_time_indirect("since", bind(record, "since", Kind.TIME_PTR))
        )
        assert record.since is None
        pmap.parse({
            "limit": "5",
            "f": "1.5",
            "b": "on",
            "name": "bob",
            "t": "2006-01-02T15:04:05Z",
            "since": "0",
        })
        assert record.limit == 5
        assert record.f == 1.5
        assert record.b is True
        assert record.name == "bob"
        assert record.time == datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
        assert record.since == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_non_conversion_errors_propagate_unchanged(self):
        def broken(raw, dest):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            ParsingMap().add("a", broken, Slot(Kind.STRING)).parse({"a": "x"})

    def test_source_without_get_is_rejected(self):
        with pytest.raises(TypeError, match="not a source"):
            ParsingMap().parse(["limit", "10"])  # type: ignore[arg-type]

    def test_logs_abort_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="httpreq.parsing_map"):
            with pytest.raises(MalformedValue):
                ParsingMap().add_int("limit", Slot(Kind.INT)).parse({"limit": "abc"})
        assert "limit: conversion failed" in caplog.text

    def test_logs_do_not_include_source_values(self, caplog):
        source = MappingSource({"limit": "3", "token": "s3cr3t"})
        with caplog.at_level(logging.DEBUG, logger="httpreq.parsing_map"):
            ParsingMap().add_int("limit", Slot(Kind.INT)).parse(source)
        assert "MappingSource" in caplog.text
        assert "s3cr3t" not in caplog.text


class TestParseFields:
    """Tests for the parse_fields() shorthand."""

    def test_one_off_map(self):
        limit, name = Slot(Kind.INT), Slot(Kind.STRING)
        parse_fields(
            {"limit": "3", "name": "x"},
            ("limit", to_int, limit),
            FieldDescriptor("name", to_string, name),
        )
        assert (limit.value, name.value) == (3, "x")
