from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the userapi package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from userapi.core import config as core_config  # noqa: E402
from userapi.db import models  # noqa: E402
from userapi.db import session as db_session  # noqa: E402
from userapi.domain.users import Gender  # noqa: E402
from userapi.repositories.user_repository import UserRepository  # noqa: E402
from userapi.services.user_service import UserService  # noqa: E402


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Point DATABASE_URL at a temporary SQLite file and build the schema."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("JWT_SECRET_KEY", "test-secret")
    monkeypatch.setenv("AUTO_CREATE_TABLES", "0")
    _clear_caches()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    _clear_caches()


@pytest.fixture()
def db(temp_db):
    with db_session.get_session() as session:
        yield session


@pytest.fixture()
def repo(db):
    return UserRepository(db)


@pytest.fixture()
def service(repo):
    return UserService(repo)


@pytest.fixture()
def admin(repo):
    return repo.create("admin", "Admin123", "Admin", is_admin=True)


@pytest.fixture()
def bob(repo, admin):
    return repo.create("bob", "Secret1", "Bob", gender=Gender.MALE, created_by=admin.login)


@pytest.fixture()
def alice(repo, admin):
    return repo.create("alice", "Secret2", "Alice", gender=Gender.FEMALE, created_by=admin.login)
