"""Per-type rendering of field values into one comparable display string.

Dispatch is table driven: every FieldType maps to exactly one item renderer.
New types are added by extending FieldType and ``FieldStringifier._renderers``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, tzinfo
from typing import Any

from fieldaudit.audit.canonical import encode_json
from fieldaudit.audit.sources import FileResolver, RecordSource
from fieldaudit.models.fields import FieldDefinition, FieldType
from fieldaudit.observability.logging import get_logger
from fieldaudit.observability.metrics import resolution_failures_total

_log = get_logger("audit.stringify")

FILE_DELETED = "File (deleted)"
FILE_ERROR = "File (error)"

_FALSY_STRINGS = frozenset({"", "0"})

ItemRenderer = Callable[[Any, FieldDefinition], str | None]


def item_value(item: Any, key: str = "value") -> Any:
    """Return ``item[key]`` for item dicts, or the item itself for bare scalars."""
    if isinstance(item, dict):
        return item.get(key)
    return item


def is_truthy(value: Any) -> bool:
    """Host-system truthiness: 0, "0", "", None and False are all false."""
    if isinstance(value, str):
        return value not in _FALSY_STRINGS
    return bool(value)


def as_int(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0


def join_sorted(values: Iterable[str | None]) -> str:
    """Sort per-item strings and join them, dropping empty entries.

    Storage order of multi-value fields is not meaningful for change
    detection; only membership and content are.
    """
    return ", ".join(sorted(v for v in values if v))


class FieldStringifier:
    """Renders a field's raw items as one normalised display string.

    Args:
        file_resolver:  Resolves file/image references to absolute URLs.
        nested_kind:    Entity kind rendered as ``Paragraph ID: <id>``.
        timezone:       Zone for integer/timestamp rendering; None means local time.
    """

    def __init__(
        self,
        file_resolver: FileResolver | None = None,
        nested_kind: str = "paragraph",
        timezone: tzinfo | None = None,
    ) -> None:
        self._file_resolver = file_resolver
        self._nested_kind = nested_kind
        self._timezone = timezone
        self._renderers: dict[FieldType, ItemRenderer] = {
            FieldType.STRING: self._render_text,
            FieldType.TEXT: self._render_text,
            FieldType.TEXT_LONG: self._render_text,
            FieldType.TEXT_WITH_SUMMARY: self._render_text,
            FieldType.BOOLEAN: self._render_boolean,
            FieldType.INTEGER: self._render_timestamp,
            FieldType.TIMESTAMP: self._render_timestamp,
            FieldType.DECIMAL: self._render_decimal,
            FieldType.FLOAT: self._render_decimal,
            FieldType.DATE: self._render_date,
            FieldType.LINK: self._render_link,
            FieldType.FILE: self._render_file,
            FieldType.IMAGE: self._render_file,
            FieldType.COMMENT: self._render_comment,
            FieldType.ENTITY_REFERENCE: self._render_reference,
            FieldType.ENTITY_REFERENCE_REVISIONS: self._render_reference,
            FieldType.OTHER: self._render_opaque,
        }

    def stringify(self, definition: FieldDefinition, items: Sequence[Any]) -> str:
        """Render *items* of a field defined by *definition*."""
        render = self._renderers[definition.type]
        return join_sorted(render(item, definition) for item in items)

    def stringify_field(self, record: RecordSource, name: str) -> str:
        """Render field *name* of *record*; empty if the record lacks the field."""
        if not record.has_field(name):
            return ""
        return self.stringify(record.field_definition(name), record.field_value(name))

    # ------------------------------------------------------------------
    # Item renderers
    # ------------------------------------------------------------------

    def _render_text(self, item: Any, _definition: FieldDefinition) -> str:
        value = item_value(item)
        return "" if value is None else str(value).strip()

    def _render_boolean(self, item: Any, _definition: FieldDefinition) -> str:
        return "Yes" if is_truthy(item_value(item)) else "No"

    def _render_timestamp(self, item: Any, _definition: FieldDefinition) -> str:
        seconds = as_int(item_value(item))
        try:
            moment = datetime.fromtimestamp(seconds, tz=self._timezone)
        except (OverflowError, OSError, ValueError):
            _log.debug("timestamp_out_of_range", value=seconds)
            return str(seconds)
        return moment.strftime("%Y-%m-%d %H:%M:%S")

    def _render_decimal(self, item: Any, _definition: FieldDefinition) -> str:
        return f"{as_float(item_value(item)):.2f}"

    def _render_date(self, item: Any, _definition: FieldDefinition) -> str:
        value = item_value(item)
        return "" if value is None else str(value)

    def _render_link(self, item: Any, _definition: FieldDefinition) -> str:
        uri = item_value(item, "uri") or ""
        title = item.get("title") if isinstance(item, dict) else None
        return f"{uri} ({title or ''})"

    def _render_comment(self, item: Any, _definition: FieldDefinition) -> str:
        return str(item_value(item, "status") or 0)

    def _render_file(self, item: Any, _definition: FieldDefinition) -> str | None:
        file_id = item_value(item, "target_id")
        if not file_id:
            return None
        if self._file_resolver is None:
            _log.warning("file_resolver_missing", target_id=file_id)
            resolution_failures_total.labels(target="file").inc()
            return FILE_ERROR
        try:
            url = self._file_resolver.resolve_url(file_id)
        except Exception as exc:  # noqa: BLE001
            _log.warning("file_resolution_failed", target_id=file_id, error=str(exc))
            resolution_failures_total.labels(target="file").inc()
            return FILE_ERROR
        if url is None:
            return FILE_DELETED
        return url

    def _render_reference(self, item: Any, definition: FieldDefinition) -> str:
        if definition.references(self._nested_kind):
            target_id = item_value(item, "target_id")
            return f"Paragraph ID: {'' if target_id is None else target_id}"
        return encode_json(item)

    def _render_opaque(self, item: Any, _definition: FieldDefinition) -> str:
        return encode_json(item)
