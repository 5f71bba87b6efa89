# blogcms/routes/sections.py

"""
Admin Section Routes.

Create, update and delete the templated sections of a post. All endpoints
use the ``admin`` preset of the secure route pipeline.
"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_201_CREATED

from blogcms.configs import UUID_PATTERN
from blogcms.db import transaction
from blogcms.repositories import SectionRepository
from blogcms.security import RequestContext, RouteMeta, SecureRoutePipeline, SecureRouter
from blogcms.utils.helpers import utc_now

ID_PARAMS = {"id": {"type": "string", "pattern": UUID_PATTERN}}


def create_router(pipeline: SecureRoutePipeline) -> APIRouter:
    """Build the admin sections router on ``pipeline``."""
    router = APIRouter(prefix="/api/admin/sections", tags=["🧩 Sections"])
    secure = SecureRouter(pipeline, router)
    section_fields = pipeline.registry.fragment("section")

    @secure.post(
        "",
        preset="admin",
        summary="Create section",
        validation={
            "body": {
                "post_id": {"type": "string", "required": True},
                "template_id": {"type": "string", "required": True},
                **section_fields,
            },
        },
    )
    async def create_section(context: RequestContext, meta: RouteMeta) -> ORJSONResponse:
        body = context.body
        async with transaction() as session:
            section = await SectionRepository(session).create(
                {
                    "post_id": body["post_id"],
                    "template_id": body["template_id"],
                    "position": body.get("position", 0),
                    "is_active": body.get("is_active", True),
                    "data": body.get("data") or {},
                },
            )
        return ORJSONResponse(content=section.model_dump(mode="json"), status_code=HTTP_201_CREATED)

    @secure.put(
        "/{id}",
        preset="admin",
        summary="Update section",
        validation={"params": ID_PARAMS, "body": section_fields},
    )
    async def update_section(context: RequestContext, meta: RouteMeta) -> ORJSONResponse:
        """Set the provided fields; ``data`` is merged into the existing data."""
        body = context.body
        async with transaction() as session:
            repo = SectionRepository(session)
            section = await repo.get_or_raise(UUID(context.params["id"]))

            changes: dict[str, Any] = {"updated_at": utc_now()}
            if "position" in body:
                changes["position"] = body["position"]
            if "is_active" in body:
                changes["is_active"] = body["is_active"]
            if body.get("data"):
                changes["data"] = {**section.data, **body["data"]}

            section = await repo.update(section, changes)
        return ORJSONResponse(content=section.model_dump(mode="json"))

    @secure.delete(
        "/{id}",
        preset="admin",
        summary="Delete section",
        validation={"params": ID_PARAMS},
    )
    async def delete_section(context: RequestContext, meta: RouteMeta) -> ORJSONResponse:
        async with transaction() as session:
            await SectionRepository(session).delete(UUID(context.params["id"]))
        return ORJSONResponse(content={"success": True})

    return router
