import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("RPS_ENVIRONMENT", "test")
os.environ.setdefault("RPS_DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RPS_REDIS_URL", "")
os.environ.setdefault("RPS_REDIS_TOKEN", "")
os.environ.setdefault("RPS_LOG_JSON", "false")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from roles_permissions.core.config import get_settings

get_settings.cache_clear()

from roles_permissions.core.database import SessionLocal, engine  # noqa: E402
from roles_permissions.main import create_app  # noqa: E402
from roles_permissions.models import Base  # noqa: E402
from roles_permissions.services import cache as cache_module  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    cache_module._shared_cache = cache_module.InMemoryCacheStore()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client() -> TestClient:  # noqa: ANN001
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def session():
    db_session = SessionLocal()
    try:
        yield db_session
    finally:
        db_session.rollback()
        db_session.close()


@pytest.fixture()
def cache() -> cache_module.InMemoryCacheStore:
    return cache_module.InMemoryCacheStore()
