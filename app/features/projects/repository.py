from __future__ import annotations

import asyncio
import logging
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import sessionmaker

from app.DB.session import get_session_factory
from .models import Project

logger = logging.getLogger(__name__)


class ProjectRepository:
    """Execution-counter bookkeeping against the projects table."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory

    def _factory(self) -> Optional[sessionmaker]:
        if self._session_factory is None:
            self._session_factory = get_session_factory()
        return self._session_factory

    @property
    def enabled(self) -> bool:
        return self._factory() is not None

    def _increment_sync(self, project_id: str, owner_id: str) -> bool:
        factory = self._factory()
        if factory is None:
            return False
        with factory() as session:
            stmt = (
                update(Project)
                .where(Project.id == project_id, Project.owner_id == owner_id)
                .values(execution_count=Project.execution_count + 1)
            )
            result = session.execute(stmt)
            session.commit()
            return (result.rowcount or 0) > 0

    async def increment_execution(self, project_id: str, owner_id: str) -> bool:
        """Bump the counter when ``owner_id`` owns the project. Returns whether a row changed."""
        return await asyncio.to_thread(self._increment_sync, project_id, owner_id)


async def record_execution(
    repository: ProjectRepository,
    project_id: Optional[str],
    owner_id: Optional[str],
) -> None:
    """Best-effort side call; failures are logged and never raised."""
    if not project_id or not owner_id:
        return
    try:
        updated = await repository.increment_execution(project_id, owner_id)
        if not updated:
            logger.info("project execution not recorded project_id=%s owner_id=%s", project_id, owner_id)
    except Exception:
        logger.exception("Error updating project execution stats project_id=%s", project_id)


project_repository = ProjectRepository()


def get_project_repository() -> ProjectRepository:
    return project_repository
