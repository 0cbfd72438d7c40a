"""REST routes: health, metrics and change detection."""

from __future__ import annotations

from dataclasses import asdict

import structlog
from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from fieldaudit import __version__
from fieldaudit.api.schemas import (
    ChangeEntryModel,
    ChangeRequest,
    ChangeResponse,
    FieldDefinitionModel,
    HealthResponse,
)
from fieldaudit.audit import ChangeDetector, build_stringifier
from fieldaudit.audit.memory import (
    InMemoryNestedItemStore,
    MappingFileResolver,
    Snapshot,
    StaticActor,
)
from fieldaudit.models.config import AuditConfig
from fieldaudit.models.fields import FieldDefinition, FieldType

_log = structlog.get_logger(component="api.routes")

router = APIRouter()


def _definitions(models: dict[str, FieldDefinitionModel]) -> dict[str, FieldDefinition]:
    return {
        name: FieldDefinition(
            type=FieldType.parse(model.type),
            label=model.label or name,
            target_kind=model.target_kind,
            computed=model.computed,
            read_only=model.read_only,
        )
        for name, model in models.items()
    }


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


@router.get("/metrics")
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.post("/changes", response_model=ChangeResponse)
def detect_changes(request: Request, body: ChangeRequest) -> ChangeResponse:
    """Run one change detection pass over the submitted revisions.

    Detected entries are appended to the application's change log and
    returned in the response.
    """
    audit_config: AuditConfig = request.app.state.audit_config
    definitions = _definitions(body.definitions)

    original = Snapshot(body.entity_kind, body.entity_id, None, definitions, body.original)
    updated = Snapshot(body.entity_kind, body.entity_id, body.revision_id, definitions, body.updated)
    nested = InMemoryNestedItemStore(
        [
            Snapshot(audit_config.nested_target_kind, p.id, p.revision_id, _definitions(p.definitions), p.values)
            for p in body.paragraphs
        ]
    )

    detector = ChangeDetector(
        actor=StaticActor(body.actor_id),
        nested_source=nested,
        stringifier=build_stringifier(audit_config, MappingFileResolver(body.files)),
        change_log=request.app.state.change_log,
        config=audit_config,
    )
    entries = detector.detect_changes(updated, original)
    _log.info(
        "change_request_processed",
        entity_kind=body.entity_kind,
        entity_id=body.entity_id,
        changes=len(entries),
    )
    return ChangeResponse(changes=[ChangeEntryModel(**asdict(entry)) for entry in entries])
