"""Resource Routes — one generic route set serving every registered model type.

Invariants:
    - Type-specific behavior comes from the registry only; no per-type routes
    - Every handler builds a fresh orchestrator around the request's DB session
    - /types is registered before /{type_name} so the index is never read as a type
    - Unparseable JSON bodies reach the validator as a missing data member

Design Decisions:
    - Bodies read as JSON regardless of content type: clients send both
      application/json and application/vnd.api+json
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from hypermodel.api.responses import JsonApiResponse, render_outcome
from hypermodel.core.domain_types import RelationshipKey, ResourceId, TypeName
from hypermodel.core.model_registry import ModelRegistry
from hypermodel.core.resource_adapter import LinkContext
from hypermodel.infrastructure.database import get_db
from hypermodel.infrastructure.document_store import SqlDocumentStore
from hypermodel.services.resource_orchestrator import ResourceOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter(tags=["resources"])


def get_registry(request: Request) -> ModelRegistry:
    return request.app.state.registry


def get_link_context(request: Request) -> LinkContext:
    """Absolute links rooted at the mount point of this router."""
    url = request.url
    root_path = request.scope.get("root_path", "")
    prefix = getattr(request.app.state, "api_prefix", "")
    return LinkContext(
        base_url=f"{url.scheme}://{url.netloc}{root_path}{prefix}",
        self_url=str(url.replace(query="", fragment="")),
    )


def get_orchestrator(
    registry: ModelRegistry = Depends(get_registry),
    links: LinkContext = Depends(get_link_context),
    db: AsyncSession = Depends(get_db),
) -> ResourceOrchestrator:
    return ResourceOrchestrator(registry, SqlDocumentStore(db), links)


async def read_payload(request: Request) -> Any:
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        logger.warning(
            f"Unparseable JSON body on {request.url.path}",
            extra={"path": request.url.path, "method": request.method},
        )
        return None


@router.get("/types")
async def list_types(
    registry: ModelRegistry = Depends(get_registry),
    links: LinkContext = Depends(get_link_context),
):
    """Advertise every registered type and its collection link."""
    return JsonApiResponse(content={
        type_name: links.link(type_name)
        for type_name in registry.get_all_types()
    })


@router.get("/{type_name}")
async def list_resources(
    type_name: str,
    orchestrator: ResourceOrchestrator = Depends(get_orchestrator),
) -> Response:
    return render_outcome(await orchestrator.list_resources(TypeName(type_name)))


@router.post("/{type_name}")
async def create_resource(
    type_name: str,
    request: Request,
    orchestrator: ResourceOrchestrator = Depends(get_orchestrator),
) -> Response:
    payload = await read_payload(request)
    return render_outcome(await orchestrator.create_resource(TypeName(type_name), payload))


@router.get("/{type_name}/{resource_id}")
async def retrieve_resource(
    type_name: str,
    resource_id: str,
    orchestrator: ResourceOrchestrator = Depends(get_orchestrator),
) -> Response:
    return render_outcome(
        await orchestrator.retrieve_resource(TypeName(type_name), ResourceId(resource_id)),
    )


@router.patch("/{type_name}/{resource_id}")
async def update_resource(
    type_name: str,
    resource_id: str,
    request: Request,
    orchestrator: ResourceOrchestrator = Depends(get_orchestrator),
) -> Response:
    payload = await read_payload(request)
    return render_outcome(
        await orchestrator.update_resource(
            TypeName(type_name), ResourceId(resource_id), payload,
        ),
    )


@router.delete("/{type_name}/{resource_id}")
async def delete_resource(
    type_name: str,
    resource_id: str,
    orchestrator: ResourceOrchestrator = Depends(get_orchestrator),
) -> Response:
    return render_outcome(
        await orchestrator.delete_resource(TypeName(type_name), ResourceId(resource_id)),
    )


@router.get("/{type_name}/{resource_id}/relationships/{key}")
async def retrieve_relationship(
    type_name: str,
    resource_id: str,
    key: str,
    orchestrator: ResourceOrchestrator = Depends(get_orchestrator),
) -> Response:
    return render_outcome(
        await orchestrator.retrieve_relationship(
            TypeName(type_name), ResourceId(resource_id), RelationshipKey(key),
        ),
    )


@router.api_route("/{type_name}/{resource_id}/{rel_field}", methods=["POST", "PATCH"])
async def mutate_relationship(
    type_name: str,
    resource_id: str,
    rel_field: str,
    orchestrator: ResourceOrchestrator = Depends(get_orchestrator),
) -> Response:
    return render_outcome(await orchestrator.mutate_relationship(TypeName(type_name)))
