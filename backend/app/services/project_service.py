"""
Folio Backend — Project Service
=================================

What:  CRUD for portfolio projects with ownership rules.
Who:   Called by /api/projects routes.

Authorization:
    - list / featured / get: public
    - create: admin role (enforced again here, not only by the route)
    - update / delete: the project's owner (created_by) or any admin

    Ownership checks read the current row then write; two concurrent
    updates from different authorized users both succeed, last write wins.

Identifiers:
    A key that parses as a UUID is treated as an id, anything else as a
    slug. An id that is not a UUID at all is reported as not found.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import AuthzError, DuplicateKeyError, NotFoundError, ValidationError
from app.models.project import Category, Project
from app.models.user import User, utcnow
from app.schemas.project import ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)


def parse_category(value: str) -> Category:
    try:
        return Category(value)
    except ValueError:
        allowed = ", ".join(c.value for c in Category)
        raise ValidationError(
            message=f"Unknown category '{value}'. Allowed: {allowed}",
            field="category",
        )


def _parse_id(project_id: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(project_id))
    except ValueError:
        return None


def _can_modify(project: Project, user: User) -> bool:
    return user.is_admin or project.created_by == user.id


class ProjectService:
    async def list_projects(
        self, db: AsyncSession, category: Optional[str] = None
    ) -> List[Project]:
        """All projects, newest first, optionally restricted to one category."""
        result = await db.execute(select(Project).order_by(desc(Project.created_at)))
        projects = list(result.scalars().all())

        if category is not None:
            wanted = parse_category(category).value
            # categories is a JSON list; membership is checked here rather than
            # with dialect-specific JSON operators
            projects = [p for p in projects if wanted in (p.categories or [])]

        return projects

    async def get_featured(self, db: AsyncSession) -> List[Project]:
        result = await db.execute(
            select(Project)
            .where(Project.featured.is_(True))
            .order_by(desc(Project.created_at))
        )
        return list(result.scalars().all())

    async def get_by_slug_or_id(self, db: AsyncSession, key: str) -> Project:
        project_id = _parse_id(key)
        if project_id is not None:
            project = await db.get(Project, project_id)
        else:
            result = await db.execute(select(Project).where(Project.slug == key))
            project = result.scalar_one_or_none()

        if project is None:
            raise NotFoundError(resource="project", resource_id=key)
        return project

    async def _get_by_id(self, db: AsyncSession, project_id: str) -> Project:
        parsed = _parse_id(project_id)
        project = await db.get(Project, parsed) if parsed is not None else None
        if project is None:
            raise NotFoundError(resource="project", resource_id=project_id)
        return project

    async def _flush(self, db: AsyncSession) -> None:
        try:
            await db.flush()
        except IntegrityError as e:
            # The only unique column a client can influence is the slug
            logger.info("Duplicate slug rejected: %s", type(e).__name__)
            raise DuplicateKeyError("slug")

    async def create(self, db: AsyncSession, payload: ProjectCreate, user: User) -> Project:
        """
        Raises:
            AuthzError: user is not an admin
            ValidationError: slug already used by another project
        """
        if not user.is_admin:
            raise AuthzError(f"User role {user.role} is not authorized to create projects")

        data = payload.model_dump()
        data["categories"] = [c.value for c in payload.categories]

        project = Project(**data, created_by=user.id)
        db.add(project)
        await self._flush(db)

        logger.info("Project created: %s (%s) by %s", project.id, project.slug, user.id)
        return project

    async def update(
        self, db: AsyncSession, project_id: str, payload: ProjectUpdate, user: User
    ) -> Project:
        """
        Apply the fields present in the payload.

        Raises:
            NotFoundError: no project with that id
            AuthzError: user is neither the owner nor an admin
            ValidationError: new title collides with another project's slug
        """
        project = await self._get_by_id(db, project_id)
        if not _can_modify(project, user):
            raise AuthzError(f"User {user.id} is not authorized to update this project")

        changes = payload.model_dump(exclude_unset=True)
        if "categories" in changes:
            changes["categories"] = [c.value for c in payload.categories]

        # Assigning title re-derives the slug (see Project._derive_slug)
        for field, value in changes.items():
            setattr(project, field, value)

        project.updated_at = utcnow()
        await self._flush(db)

        logger.info("Project updated: %s fields=%s by %s", project.id, sorted(changes), user.id)
        return project

    async def delete(self, db: AsyncSession, project_id: str, user: User) -> None:
        """
        Raises:
            NotFoundError: no project with that id
            AuthzError: user is neither the owner nor an admin
        """
        project = await self._get_by_id(db, project_id)
        if not _can_modify(project, user):
            raise AuthzError(f"User {user.id} is not authorized to delete this project")

        await db.delete(project)
        await db.flush()
        logger.info("Project deleted: %s by %s", project_id, user.id)
