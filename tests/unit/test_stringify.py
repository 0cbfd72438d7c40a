"""Tests for FieldStringifier per-type rendering."""

from __future__ import annotations

from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fieldaudit.audit.memory import MappingFileResolver, Snapshot
from fieldaudit.audit.stringify import FILE_DELETED, FILE_ERROR, FieldStringifier
from fieldaudit.models.fields import FieldDefinition, FieldType

_UTC = ZoneInfo("UTC")


def _definition(field_type: FieldType | str, target_kind: str | None = None) -> FieldDefinition:
    return FieldDefinition(type=field_type, label="Field", target_kind=target_kind)  # type: ignore[arg-type]


def _stringify(field_type: FieldType | str, items: list[object], **kwargs: object) -> str:
    stringifier = FieldStringifier(timezone=_UTC, **kwargs)  # type: ignore[arg-type]
    return stringifier.stringify(_definition(field_type), items)


class TestScalarTypes:
    @pytest.mark.parametrize(
        "field_type",
        [FieldType.STRING, FieldType.TEXT, FieldType.TEXT_LONG, FieldType.TEXT_WITH_SUMMARY],
    )
    def test_text_trimmed(self, field_type: FieldType) -> None:
        assert _stringify(field_type, [{"value": "  Hello  ", "format": "basic_html"}]) == "Hello"

    def test_bare_scalar_item_accepted(self) -> None:
        assert _stringify(FieldType.STRING, [" Hello "]) == "Hello"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(1, "Yes"), ("1", "Yes"), (True, "Yes"), (0, "No"), ("0", "No"), ("", "No"), (None, "No")],
    )
    def test_boolean(self, raw: object, expected: str) -> None:
        assert _stringify(FieldType.BOOLEAN, [{"value": raw}]) == expected

    @pytest.mark.parametrize("field_type", [FieldType.INTEGER, FieldType.TIMESTAMP])
    def test_epoch_seconds_formatted(self, field_type: FieldType) -> None:
        assert _stringify(field_type, [{"value": 1700000000}]) == "2023-11-14 22:13:20"

    def test_timestamp_non_numeric_is_epoch(self) -> None:
        assert _stringify(FieldType.TIMESTAMP, [{"value": "soon"}]) == "1970-01-01 00:00:00"

    def test_timestamp_respects_zone(self) -> None:
        stringifier = FieldStringifier(timezone=ZoneInfo("Europe/Berlin"))
        result = stringifier.stringify(_definition(FieldType.TIMESTAMP), [{"value": 0}])
        assert result == "1970-01-01 01:00:00"

    @pytest.mark.parametrize("field_type", [FieldType.DECIMAL, FieldType.FLOAT])
    def test_decimal_two_places(self, field_type: FieldType) -> None:
        assert _stringify(field_type, [{"value": "3.14159"}]) == "3.14"
        assert _stringify(field_type, [{"value": 2}]) == "2.00"

    def test_decimal_non_numeric_is_zero(self) -> None:
        assert _stringify(FieldType.DECIMAL, [{"value": "n/a"}]) == "0.00"

    def test_date_raw(self) -> None:
        assert _stringify(FieldType.DATE, [{"value": "2024-01-15T10:00:00"}]) == "2024-01-15T10:00:00"

    def test_link(self) -> None:
        item = {"uri": "https://example.com", "title": "Example", "options": {}}
        assert _stringify(FieldType.LINK, [item]) == "https://example.com (Example)"

    def test_link_without_title(self) -> None:
        assert _stringify(FieldType.LINK, [{"uri": "internal:/node/1"}]) == "internal:/node/1 ()"

    def test_comment_status(self) -> None:
        assert _stringify(FieldType.COMMENT, [{"status": 2, "cid": 0}]) == "2"


class TestReferences:
    def test_nested_reference_rendered_by_id(self) -> None:
        stringifier = FieldStringifier()
        definition = _definition(FieldType.ENTITY_REFERENCE_REVISIONS, target_kind="paragraph")
        result = stringifier.stringify(definition, [{"target_id": 5, "target_revision_id": 9}])
        assert result == "Paragraph ID: 5"

    def test_nested_reference_without_target(self) -> None:
        stringifier = FieldStringifier()
        definition = _definition(FieldType.ENTITY_REFERENCE_REVISIONS, target_kind="paragraph")
        assert stringifier.stringify(definition, [{"target_id": None}]) == "Paragraph ID: "

    def test_plain_entity_reference_canonical_json(self) -> None:
        stringifier = FieldStringifier()
        definition = _definition(FieldType.ENTITY_REFERENCE, target_kind="taxonomy_term")
        result = stringifier.stringify(definition, [{"target_id": 5, "target_type": None}])
        assert result == '{"target_id":5}'

    def test_opaque_canonical_json(self) -> None:
        item = {"lng": 2.5, "lat": 1.5, "data": {"zoom": None}}
        assert _stringify(FieldType.OTHER, [item]) == '{"lat":1.5,"lng":2.5}'

    def test_unknown_tag_treated_as_opaque(self) -> None:
        assert _stringify("geofield", [{"b": 1, "a": 2}]) == '{"a":2,"b":1}'


class TestFileReferences:
    def test_resolved_url(self) -> None:
        resolver = MappingFileResolver({"3": "https://cdn.example.com/a.png"})
        assert _stringify(FieldType.IMAGE, [{"target_id": 3, "alt": "x"}], file_resolver=resolver) == (
            "https://cdn.example.com/a.png"
        )

    def test_deleted_file(self) -> None:
        assert _stringify(FieldType.FILE, [{"target_id": 4}], file_resolver=MappingFileResolver()) == FILE_DELETED

    def test_resolver_error_degrades(self) -> None:
        resolver = MagicMock()
        resolver.resolve_url.side_effect = OSError("storage offline")
        assert _stringify(FieldType.FILE, [{"target_id": 4}], file_resolver=resolver) == FILE_ERROR

    def test_missing_resolver_degrades(self) -> None:
        assert _stringify(FieldType.FILE, [{"target_id": 4}]) == FILE_ERROR

    def test_item_without_target_dropped(self) -> None:
        assert _stringify(FieldType.FILE, [{"target_id": None}], file_resolver=MappingFileResolver()) == ""


class TestMultiValue:
    def test_sorted_and_joined(self) -> None:
        assert _stringify(FieldType.STRING, [{"value": "b"}, {"value": "a"}, {"value": "c"}]) == "a, b, c"

    def test_empty_entries_dropped(self) -> None:
        assert _stringify(FieldType.STRING, [{"value": "b"}, {"value": "  "}, {}]) == "b"

    def test_no_items(self) -> None:
        assert _stringify(FieldType.STRING, []) == ""

    @given(st.lists(st.text(max_size=10), max_size=6), st.randoms())
    def test_order_independent(self, values: list[str], rnd: object) -> None:
        items = [{"value": v} for v in values]
        shuffled = list(items)
        rnd.shuffle(shuffled)  # type: ignore[attr-defined]
        assert _stringify(FieldType.STRING, items) == _stringify(FieldType.STRING, shuffled)


class TestStringifyField:
    def test_missing_field_is_empty(self) -> None:
        record = Snapshot("node", 1, 1, {}, {})
        assert FieldStringifier().stringify_field(record, "body") == ""

    def test_reads_record_value(self) -> None:
        record = Snapshot(
            "node",
            1,
            1,
            {"title": FieldDefinition(FieldType.STRING, "Title")},
            {"title": [{"value": "Hello"}]},
        )
        assert FieldStringifier().stringify_field(record, "title") == "Hello"
