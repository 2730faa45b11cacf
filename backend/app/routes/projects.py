"""
Folio Backend — Project Route Handlers
========================================

What:  Public portfolio reads plus authenticated project management.
Who:   Reads come from the public site; writes from the admin dashboard.

Route Inventory:
    GET    /api/projects?category=            list (newest first)
    GET    /api/projects/featured             featured only
    GET    /api/projects/category/{category}  filter by category
    POST   /api/projects/upload               store an image (admin)
    GET    /api/projects/{slug_or_id}         one project
    POST   /api/projects                      create (admin)
    PUT    /api/projects/{id}                 update (owner or admin)
    DELETE /api/projects/{id}                 delete (owner or admin)

Fixed paths are declared before /{slug_or_id} so "featured" is never read
as a slug.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.context import AppContext, get_context
from app.database import get_db_session
from app.dependencies import get_current_user, require_roles
from app.models.user import Role, User
from app.schemas.common import ErrorEnvelope, MessageEnvelope
from app.schemas.project import (
    ProjectCreate,
    ProjectEnvelope,
    ProjectListEnvelope,
    ProjectResponse,
    ProjectUpdate,
    UploadEnvelope,
    UploadResult,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["Projects"])


def _list_envelope(projects) -> ProjectListEnvelope:
    return ProjectListEnvelope(
        count=len(projects),
        data=[ProjectResponse.model_validate(p) for p in projects],
    )


@router.get(
    "",
    response_model=ProjectListEnvelope,
    responses={400: {"model": ErrorEnvelope}},
    summary="List projects",
)
async def list_projects(
    response: Response,
    category: Optional[str] = Query(default=None, description="AI, Mobile, Web or UI/UX"),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> ProjectListEnvelope:
    projects = await context.projects.list_projects(db, category=category)
    # Portfolio content changes rarely; short shared cache
    response.headers["Cache-Control"] = "public, max-age=60"
    return _list_envelope(projects)


@router.get("/featured", response_model=ProjectListEnvelope, summary="Featured projects")
async def featured_projects(
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> ProjectListEnvelope:
    return _list_envelope(await context.projects.get_featured(db))


@router.get(
    "/category/{category:path}",
    response_model=ProjectListEnvelope,
    responses={400: {"model": ErrorEnvelope}},
    summary="Projects in one category",
)
async def projects_by_category(
    category: str,
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> ProjectListEnvelope:
    """`category` is one of AI, Mobile, Web, UI/UX."""
    return _list_envelope(await context.projects.list_projects(db, category=category))


@router.post(
    "/upload",
    status_code=201,
    response_model=UploadEnvelope,
    responses={400: {"model": ErrorEnvelope}, 401: {"model": ErrorEnvelope}, 403: {"model": ErrorEnvelope}},
    dependencies=[Depends(require_roles(Role.ADMIN))],
    summary="Upload a project image",
    description="Accepts jpeg, jpg, png or webp up to 5MB in the 'image' form field.",
)
async def upload_image(
    image: UploadFile = File(..., description="Image file (jpeg, jpg, png, webp; max 5MB)"),
    context: AppContext = Depends(get_context),
) -> UploadEnvelope:
    # One byte past the limit is enough to reject an oversized file
    content = await image.read(context.files.max_size + 1)
    logger.info(
        "Received upload: filename=%s, size=%d bytes",
        image.filename or "unknown",
        len(content),
    )
    try:
        path = await context.files.save_image(
            filename=image.filename or "",
            content_type=image.content_type,
            content=content,
            content_length=image.size,
        )
    finally:
        await image.close()
    return UploadEnvelope(data=UploadResult(path=path))


@router.get(
    "/{slug_or_id}",
    response_model=ProjectEnvelope,
    responses={404: {"model": ErrorEnvelope}},
    summary="Get a project by slug or id",
)
async def get_project(
    slug_or_id: str,
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> ProjectEnvelope:
    project = await context.projects.get_by_slug_or_id(db, slug_or_id)
    return ProjectEnvelope(data=ProjectResponse.model_validate(project))


@router.post(
    "",
    status_code=201,
    response_model=ProjectEnvelope,
    responses={400: {"model": ErrorEnvelope}, 401: {"model": ErrorEnvelope}, 403: {"model": ErrorEnvelope}},
    summary="Create a project",
)
async def create_project(
    payload: ProjectCreate,
    user: User = Depends(require_roles(Role.ADMIN)),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> ProjectEnvelope:
    project = await context.projects.create(db, payload, user)
    return ProjectEnvelope(data=ProjectResponse.model_validate(project))


@router.put(
    "/{project_id}",
    response_model=ProjectEnvelope,
    responses={
        400: {"model": ErrorEnvelope},
        401: {"model": ErrorEnvelope},
        403: {"model": ErrorEnvelope},
        404: {"model": ErrorEnvelope},
    },
    summary="Update a project (owner or admin)",
)
async def update_project(
    project_id: str,
    payload: ProjectUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> ProjectEnvelope:
    project = await context.projects.update(db, project_id, payload, user)
    return ProjectEnvelope(data=ProjectResponse.model_validate(project))


@router.delete(
    "/{project_id}",
    response_model=MessageEnvelope,
    responses={401: {"model": ErrorEnvelope}, 403: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}},
    summary="Delete a project (owner or admin)",
)
async def delete_project(
    project_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> MessageEnvelope:
    await context.projects.delete(db, project_id, user)
    return MessageEnvelope()
