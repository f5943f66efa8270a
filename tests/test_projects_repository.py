import asyncio

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.DB.models import Base
from app.features.projects.models import Project
from app.features.projects.repository import ProjectRepository, record_execution


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False)
    with factory() as session:
        session.add(Project(id="p-1", owner_id="u-1", title="Hello", language="python"))
        session.commit()
    yield factory
    engine.dispose()


def _count(factory, project_id="p-1"):
    with factory() as session:
        return session.get(Project, project_id).execution_count


def test_increment_for_owner(session_factory):
    repo = ProjectRepository(session_factory)

    assert asyncio.run(repo.increment_execution("p-1", "u-1")) is True
    assert asyncio.run(repo.increment_execution("p-1", "u-1")) is True
    assert _count(session_factory) == 2


def test_other_users_cannot_bump_the_counter(session_factory):
    repo = ProjectRepository(session_factory)

    assert asyncio.run(repo.increment_execution("p-1", "someone-else")) is False
    assert asyncio.run(repo.increment_execution("missing", "u-1")) is False
    assert _count(session_factory) == 0


def test_record_execution_swallows_failures(caplog):
    class Broken:
        async def increment_execution(self, project_id, owner_id):
            raise RuntimeError("connection reset")

    asyncio.run(record_execution(Broken(), "p-1", "u-1"))

    assert "Error updating project execution stats" in caplog.text


def test_record_execution_skips_without_identity(session_factory):
    repo = ProjectRepository(session_factory)

    asyncio.run(record_execution(repo, "p-1", None))
    asyncio.run(record_execution(repo, None, "u-1"))

    assert _count(session_factory) == 0


def test_repository_without_database_is_disabled(monkeypatch):
    monkeypatch.setattr("app.features.projects.repository.get_session_factory", lambda: None)
    repo = ProjectRepository()

    assert repo.enabled is False
    assert asyncio.run(repo.increment_execution("p-1", "u-1")) is False
