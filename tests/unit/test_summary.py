"""Tests for NestedSummaryBuilder."""

from __future__ import annotations

from fieldaudit.audit.memory import Snapshot
from fieldaudit.audit.summary import NestedSummaryBuilder, field_label
from fieldaudit.models.fields import FieldDefinition, FieldType


def _make_paragraph(values: dict[str, object], extra_definitions: dict[str, FieldDefinition] | None = None) -> Snapshot:
    definitions = {
        "id": FieldDefinition(FieldType.INTEGER, "ID", read_only=True),
        "revision_id": FieldDefinition(FieldType.INTEGER, "Revision ID"),
        "parent_id": FieldDefinition(FieldType.STRING, "Parent ID"),
        "status": FieldDefinition(FieldType.BOOLEAN, "Published"),
        "title": FieldDefinition(FieldType.STRING, "Title"),
        "body": FieldDefinition(FieldType.TEXT_LONG, "Body"),
        "featured": FieldDefinition(FieldType.BOOLEAN, "Featured"),
        "author": FieldDefinition(FieldType.ENTITY_REFERENCE, "Author", target_kind="user"),
        "settings": FieldDefinition(FieldType.OTHER, "Settings"),
        "rendered": FieldDefinition(FieldType.STRING, "Rendered", computed=True),
    }
    definitions.update(extra_definitions or {})
    return Snapshot("paragraph", 10, 100, definitions, values)


class TestSummarize:
    def test_full_summary(self) -> None:
        paragraph = _make_paragraph(
            {
                "id": 10,
                "revision_id": 100,
                "parent_id": "1",
                "status": 1,
                "title": [{"value": " Intro "}],
                "body": [{"value": "<p>Hello&nbsp;   world</p>", "format": "basic_html"}],
                "featured": [{"value": 0}],
                "author": [{"target_id": 7}],
                "settings": [{"b": 1, "a": None}],
                "rendered": [{"value": "ignored"}],
            }
        )
        summary = NestedSummaryBuilder().summarize(paragraph)
        assert summary == {
            "author": "Entity ID: 7",
            "body": "<p>Hello world</p>",
            "featured": "No",
            "settings": '{"b":1}',
            "title": "Intro",
        }

    def test_sorted_by_field_name(self) -> None:
        paragraph = _make_paragraph({"title": "T", "author": {"target_id": 1}, "featured": {"value": 1}})
        assert list(NestedSummaryBuilder().summarize(paragraph)) == ["author", "featured", "title"]

    def test_multi_value_sorted(self) -> None:
        paragraph = _make_paragraph({"title": [{"value": "b"}, {"value": "a"}]})
        assert NestedSummaryBuilder().summarize(paragraph) == {"title": "a, b"}

    def test_empty_values_omitted(self) -> None:
        paragraph = _make_paragraph({"title": [{"value": "   "}], "author": [{"target_id": None}], "body": []})
        assert NestedSummaryBuilder().summarize(paragraph) == {}

    def test_scalar_opaque_value(self) -> None:
        paragraph = _make_paragraph({"settings": [5]})
        assert NestedSummaryBuilder().summarize(paragraph) == {"settings": "5"}

    def test_custom_exclusions(self) -> None:
        paragraph = _make_paragraph({"title": "T", "featured": {"value": 1}})
        summary = NestedSummaryBuilder(excluded_fields={"featured"}).summarize(paragraph)
        assert summary == {"title": "T"}


class TestFieldLabel:
    def test_label_from_definition(self) -> None:
        assert field_label(_make_paragraph({}), "title") == "Title"

    def test_falls_back_to_machine_name(self) -> None:
        assert field_label(_make_paragraph({}), "subtitle") == "subtitle"
        assert field_label(None, "subtitle") == "subtitle"
