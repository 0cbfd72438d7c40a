"""Shared fixtures for fieldaudit integration tests.

Provides an article-like record definition, a paragraph store with several
revisions, and change log sinks so tests can run full detection passes.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from fieldaudit.audit.memory import InMemoryNestedItemStore, MappingFileResolver, Snapshot
from fieldaudit.ledger.sqlite import SQLiteChangeLog
from fieldaudit.models.fields import FieldDefinition, FieldType

ARTICLE_DEFINITIONS = {
    "vid": FieldDefinition(FieldType.INTEGER, "Revision ID"),
    "uid": FieldDefinition(FieldType.ENTITY_REFERENCE, "Authored by", target_kind="user"),
    "changed": FieldDefinition(FieldType.TIMESTAMP, "Changed"),
    "title": FieldDefinition(FieldType.STRING, "Title"),
    "body": FieldDefinition(FieldType.TEXT_WITH_SUMMARY, "Body"),
    "promote": FieldDefinition(FieldType.BOOLEAN, "Promoted to front page"),
    "price": FieldDefinition(FieldType.DECIMAL, "Price"),
    "link": FieldDefinition(FieldType.LINK, "Read more"),
    "image": FieldDefinition(FieldType.IMAGE, "Image"),
    "tags": FieldDefinition(FieldType.ENTITY_REFERENCE, "Tags", target_kind="taxonomy_term"),
    "sections": FieldDefinition(FieldType.ENTITY_REFERENCE_REVISIONS, "Sections", target_kind="paragraph"),
}

_TEXT_PARAGRAPH = {
    "id": FieldDefinition(FieldType.INTEGER, "ID", read_only=True),
    "parent_id": FieldDefinition(FieldType.STRING, "Parent ID"),
    "heading": FieldDefinition(FieldType.STRING, "Heading"),
    "text": FieldDefinition(FieldType.TEXT_LONG, "Text"),
    "highlight": FieldDefinition(FieldType.BOOLEAN, "Highlight"),
}


def make_article(revision: int, **values: object) -> Snapshot:
    """Create an article revision with entity id 42."""
    return Snapshot("node", 42, revision, ARTICLE_DEFINITIONS, {"vid": revision, **values})


def make_text_paragraph(item_id: int, revision: int, **values: object) -> Snapshot:
    """Create a text paragraph revision parented to article 42."""
    return Snapshot("paragraph", item_id, revision, _TEXT_PARAGRAPH, {"id": item_id, "parent_id": "42", **values})


@pytest.fixture
def paragraph_store() -> InMemoryNestedItemStore:
    return InMemoryNestedItemStore(
        [
            make_text_paragraph(1, 10, heading="Intro", text="<p>Welcome</p>", highlight=0),
            make_text_paragraph(1, 11, heading="Intro", text="<p>Welcome aboard</p>", highlight=1),
            make_text_paragraph(2, 20, heading="Details", text="Body copy"),
            make_text_paragraph(3, 30, heading="Outro", text="Bye"),
        ]
    )


@pytest.fixture
def file_resolver() -> MappingFileResolver:
    return MappingFileResolver({"100": "https://example.com/files/cover.jpg"})


@pytest.fixture
def sqlite_log(tmp_path: Path) -> Iterator[SQLiteChangeLog]:
    change_log = SQLiteChangeLog(str(tmp_path / "audit.db"))
    yield change_log
    change_log.stop()
